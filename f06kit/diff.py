"""Comparison of whole parsed files, block by block."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from itertools import islice

from f06kit.compare import (
    Criteria,
    DataDiffer,
    DisjunctionBehaviour,
    FlaggedPosition,
    IncompatibilityReason,
)
from f06kit.f06file import BlockRef, F06File


class NonCompareKind(enum.Enum):
    """The kinds of reason why blocks of two files were not compared."""

    NO_COUNTERPART = "no counterpart"
    NOT_UNIQUE_IN_ONE = "not unique in one"
    NOT_UNIQUE_IN_BOTH = "not unique in both"
    NOT_COMPATIBLE = "not compatible"


@dataclass(frozen=True)
class NonCompareReason:
    """Why a block reference was not compared.

    ``filename`` names the file at fault, where there is one and it is
    known; ``incompatibility`` is set for incompatible blocks.
    """

    kind: NonCompareKind
    filename: str | None = None
    incompatibility: IncompatibilityReason | None = None

    def __str__(self) -> str:
        if self.kind is NonCompareKind.NO_COUNTERPART:
            if self.filename is not None:
                return f"no counterpart in {self.filename}"
            return "no counterpart in one of the files"
        if self.kind is NonCompareKind.NOT_UNIQUE_IN_ONE:
            if self.filename is not None:
                return f"not unique in {self.filename}"
            return "not unique in one of the files"
        if self.kind is NonCompareKind.NOT_UNIQUE_IN_BOTH:
            return "not unique in either file"
        return f"incompatibility: {self.incompatibility}"


@dataclass(frozen=True)
class DiffSettings:
    """Settings for comparing two files.

    A ``max_flags`` of 0 or None means no limit on flags per block.
    """

    criteria: Criteria = field(default_factory=Criteria)
    dxn_behaviour: DisjunctionBehaviour | None = DisjunctionBehaviour.ASSUME_ZEROES
    max_flags: int | None = 0

    def differ(self) -> DataDiffer:
        """Return the block data differ these settings describe."""
        return DataDiffer(
            criteria=self.criteria,
            dxn_behaviour=self.dxn_behaviour or DisjunctionBehaviour.default(),
        )


@dataclass
class F06Diff:
    """The differences found between two parsed files."""

    compared: dict[BlockRef, list[FlaggedPosition]] = field(default_factory=dict)
    not_compared: dict[BlockRef, NonCompareReason] = field(default_factory=dict)

    @classmethod
    def compare(cls, settings: DiffSettings, a: F06File, b: F06File) -> F06Diff:
        """Compare every block reference found in either file."""
        result = cls()
        differ = settings.differ()
        limit = settings.max_flags or 0
        for ref in sorted(a.blocks.keys() | b.blocks.keys()):
            group_a = a.blocks.get(ref, [])
            group_b = b.blocks.get(ref, [])
            counts = (len(group_a), len(group_b))
            if counts == (0, 1):
                result.not_compared[ref] = NonCompareReason(
                    NonCompareKind.NO_COUNTERPART, a.filename
                )
            elif counts == (1, 0):
                result.not_compared[ref] = NonCompareReason(
                    NonCompareKind.NO_COUNTERPART, b.filename
                )
            elif counts == (1, 1):
                try:
                    flags = differ.compare(group_a[0], group_b[0])
                except DataDiffer.Incompatible:
                    continue
                if limit:
                    flags = islice(flags, limit)
                result.compared[ref] = list(flags)
            elif counts[1] == 1:
                result.not_compared[ref] = NonCompareReason(
                    NonCompareKind.NOT_UNIQUE_IN_ONE, a.filename
                )
            elif counts[0] == 1:
                result.not_compared[ref] = NonCompareReason(
                    NonCompareKind.NOT_UNIQUE_IN_ONE, b.filename
                )
            else:
                result.not_compared[ref] = NonCompareReason(
                    NonCompareKind.NOT_UNIQUE_IN_BOTH
                )
        return result
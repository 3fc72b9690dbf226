"""Comparison of finalised blocks and the data within them."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from itertools import product
from typing import Any

from f06kit.blocks import FinalBlock
from f06kit.indexing import index_sort_key


class IncompatibilityReason(enum.Enum):
    """Why two blocks cannot be compared."""

    DIFFERENT_TYPE = "block types differ"
    DIFFERENT_SUBCASE = "subcases differ"
    DIFFERENT_COLUMNS = "column sets differ"
    NO_COMMON_ROWS = "no rows in common"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BlockCompatibility:
    """A structural comparison of two blocks; the data is not looked at.

    Incompatible blocks carry a reason; compatible ones carry the rows they
    share and the rows only one of them has.
    """

    reason: IncompatibilityReason | None = None
    common_rows: frozenset[Any] = frozenset()
    disjunction: frozenset[Any] = frozenset()

    @property
    def compatible(self) -> bool:
        """True if the blocks can have their data compared."""
        return self.reason is None


def check_compatibility(a: FinalBlock, b: FinalBlock) -> BlockCompatibility:
    """Compare two blocks structurally."""
    if a.block_type != b.block_type:
        return BlockCompatibility(IncompatibilityReason.DIFFERENT_TYPE)
    if a.subcase != b.subcase:
        return BlockCompatibility(IncompatibilityReason.DIFFERENT_SUBCASE)
    if set(a.col_indexes) != set(b.col_indexes):
        return BlockCompatibility(IncompatibilityReason.DIFFERENT_COLUMNS)
    rows_a = set(a.row_indexes)
    rows_b = set(b.row_indexes)
    common = rows_a & rows_b
    if not common:
        return BlockCompatibility(IncompatibilityReason.NO_COMMON_ROWS)
    return BlockCompatibility(
        common_rows=frozenset(common), disjunction=frozenset(rows_a ^ rows_b)
    )


class DisjunctionBehaviour(enum.Enum):
    """What to do with rows present in only one of two blocks.

    The value is the short lower-case name.
    """

    SKIP = "skip"
    ASSUME_ZEROES = "zero"
    FLAG = "flag"

    @property
    def small_lc_name(self) -> str:
        """The short lower-case name of the behaviour."""
        return self.value

    @classmethod
    def default(cls) -> DisjunctionBehaviour:
        """Return the default behaviour, assuming zeroes."""
        return cls.ASSUME_ZEROES

    @classmethod
    def parse(cls, text: str) -> DisjunctionBehaviour:
        """Parse a behaviour from its short name, ignoring ASCII case."""
        wanted = text.lower()
        for member in cls:
            if member.value == wanted:
                return member
        raise ValueError(f'invalid disjunction behaviour "{text}"')

    def __str__(self) -> str:
        return _DXN_LABELS[self]


_DXN_LABELS: dict[DisjunctionBehaviour, str] = {
    DisjunctionBehaviour.SKIP: "skip",
    DisjunctionBehaviour.ASSUME_ZEROES: "assume zeros",
    DisjunctionBehaviour.FLAG: "flag",
}


@dataclass(frozen=True)
class FlagReason:
    """Why a value was flagged; differences and ratios carry their figures."""

    class Kind(enum.Enum):
        """The kind of flag."""

        DIFFERENCE = "maximum difference exceeded"
        RATIO = "maximum ratio exceeded"
        NAN = "NaN detected"
        INFINITY = "infinity detected"
        SIGNS = "signs differ"
        DISJUNCTION = "value absent in one of the files"

    kind: FlagReason.Kind
    abs_difference: float | None = None
    max_epsilon: float | None = None
    big_to_small: float | None = None
    max_ratio: float | None = None

    def __str__(self) -> str:
        return self.kind.value


def _signum(x: float) -> float:
    if math.isnan(x):
        return math.nan
    return math.copysign(1.0, x)


def _divide(big: float, small: float) -> float:
    try:
        return big / small
    except ZeroDivisionError:
        if big == 0 or math.isnan(big):
            return math.nan
        return math.copysign(math.inf, big) * math.copysign(1.0, small)


@dataclass(frozen=True)
class Criteria:
    """Criteria for flagging a pair of values."""

    difference: float | None = None
    ratio: float | None = None
    nan: bool = True
    inf: bool = True
    sig: bool = False

    def check(self, a: float, b: float) -> FlagReason | None:
        """Return why the pair is flagged, or None if it passes."""
        if self.nan and (math.isnan(a) or math.isnan(b)):
            return FlagReason(FlagReason.Kind.NAN)
        if self.inf and (math.isinf(a) or math.isinf(b)):
            return FlagReason(FlagReason.Kind.INFINITY)
        if self.sig and _signum(a) != _signum(b):
            return FlagReason(FlagReason.Kind.SIGNS)
        if self.difference is not None:
            diff = abs(a - b)
            if diff > self.difference:
                return FlagReason(
                    FlagReason.Kind.DIFFERENCE,
                    abs_difference=diff,
                    max_epsilon=self.difference,
                )
        if self.ratio is not None:
            big, small = (a, b) if a >= b else (b, a)
            rat = abs(_divide(big, small))
            if rat > self.ratio:
                return FlagReason(
                    FlagReason.Kind.RATIO, big_to_small=rat, max_ratio=self.ratio
                )
        return None


@dataclass(frozen=True)
class FoundValues:
    """A position and the values found there in two blocks."""

    row: Any
    col: Any
    val_a: float
    val_b: float


@dataclass(frozen=True)
class FlaggedPosition:
    """A flagged position and the reason for flagging it."""

    values: FoundValues
    reason: FlagReason


_ABSENT = object()


@dataclass(frozen=True)
class DataDiffer:
    """Compares the data of two blocks against a set of criteria."""

    class Incompatible(ValueError):
        """Raised when two blocks cannot have their data compared."""

        def __init__(self, reason: IncompatibilityReason) -> None:
            super().__init__(str(reason))
            self.reason = reason

    criteria: Criteria = field(default_factory=Criteria)
    dxn_behaviour: DisjunctionBehaviour = DisjunctionBehaviour.ASSUME_ZEROES

    def compare(self, a: FinalBlock, b: FinalBlock) -> Iterator[FlaggedPosition]:
        """Return the flagged positions between two blocks.

        Raises DataDiffer.Incompatible at once if the blocks cannot be
        compared; the flags themselves are produced lazily.
        """
        comp = check_compatibility(a, b)
        if comp.reason is not None:
            raise DataDiffer.Incompatible(comp.reason)
        return self._flags(a, b)

    def _value(self, block: FinalBlock, row: Any, col: Any) -> Any:
        if row in block.row_indexes:
            value = block.get(row, col)
            if value is None:
                raise KeyError(f"no value at {row}, {col}")
            return float(value)
        if self.dxn_behaviour is DisjunctionBehaviour.SKIP:
            return None
        if self.dxn_behaviour is DisjunctionBehaviour.ASSUME_ZEROES:
            return 0.0
        return _ABSENT

    def _flags(self, a: FinalBlock, b: FinalBlock) -> Iterator[FlaggedPosition]:
        rows = sorted(a.row_indexes.keys() | b.row_indexes.keys(), key=index_sort_key)
        cols = sorted(a.col_indexes, key=index_sort_key)
        for row, col in product(rows, cols):
            x = self._value(a, row, col)
            y = self._value(b, row, col)
            if x is _ABSENT or y is _ABSENT:
                yield FlaggedPosition(
                    FoundValues(row, col, 0.0, 0.0),
                    FlagReason(FlagReason.Kind.DISJUNCTION),
                )
                continue
            if x is None or y is None:
                continue
            reason = self.criteria.check(x, y)
            if reason is not None:
                yield FlaggedPosition(FoundValues(row, col, x, y), reason)
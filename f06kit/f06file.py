"""The parsed contents of an output file: its blocks and messages."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from f06kit.blocks import FinalBlock, MergeIncompatible
from f06kit.blocktypes import BlockType
from f06kit.flavour import Flavour

_log = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class BlockRef:
    """A subcase and block type, referring to a block or set of blocks."""

    subcase: int
    block_type: BlockType


def _mergeable(primary: FinalBlock, secondary: FinalBlock, clean: bool) -> bool:
    try:
        primary.can_merge(secondary)
    except MergeIncompatible as exc:
        _log.debug("a merge failed: %s", exc)
        return False
    conflicts = primary.row_conflicts(secondary)
    if clean and conflicts:
        _log.debug("a merge failed due to row conflicts: %s", conflicts)
        return False
    return True


@dataclass
class F06File:
    """The output of parsing an F06 file."""

    filename: str | None = None
    flavour: Flavour = field(default_factory=Flavour)
    blocks: dict[BlockRef, list[FinalBlock]] = field(default_factory=dict)
    warnings: dict[int, str] = field(default_factory=dict)
    fatal_errors: dict[int, str] = field(default_factory=dict)

    def insert_block(self, block: FinalBlock) -> None:
        """Add a block to the file."""
        self.blocks.setdefault(block.block_ref(), []).append(block)

    def all_blocks(self, unique: bool) -> Iterator[FinalBlock]:
        """Yield all blocks in reference order.

        With unique set, only blocks alone of their type in their subcase.
        """
        for ref in sorted(self.blocks):
            group = self.blocks[ref]
            if len(group) == 1 or not unique:
                yield from group

    @staticmethod
    def _merge_group(group: list[FinalBlock], clean: bool) -> int:
        merges = 0
        done: list[FinalBlock] = []
        while group:
            primary = group.pop()
            partner = next(
                (i for i, s in enumerate(group) if _mergeable(primary, s, clean)),
                None,
            )
            if partner is None:
                done.append(primary)
                continue
            secondary = group.pop(partner)
            result = primary.try_merge(secondary)
            if result.partial:
                raise ValueError(
                    f"blocks share rows and cannot be merged: {sorted(map(str, result.skipped))}"
                )
            merges += 1
            group.append(result.merged)
        group[:] = done
        return merges

    def merge_blocks(self, clean: bool) -> int:
        """Merge mergeable blocks; return the number of merges done.

        Clean merges only join blocks with no rows in common.
        """
        return sum(self._merge_group(group, clean) for group in self.blocks.values())

    def sort_all_blocks(self) -> None:
        """Sort the rows and columns of every block."""
        for block in self.all_blocks(False):
            block.sort_columns()
            block.sort_rows()

    def subcases(self) -> Iterator[int]:
        """Yield every subcase, in ascending order."""
        return iter(sorted({ref.subcase for ref in self.blocks}))

    def block_types(self) -> Iterator[BlockType]:
        """Yield every block type present, in canonical order."""
        return iter(sorted({ref.block_type for ref in self.blocks}))

    def block_search(
        self,
        type_filter: BlockType | None,
        subcase_filter: int | None,
        unique: bool,
    ) -> Iterator[FinalBlock]:
        """Yield blocks matching an optional type and an optional subcase."""
        for block in self.all_blocks(unique):
            if type_filter is not None and block.block_type != type_filter:
                continue
            if subcase_filter is not None and block.subcase != subcase_filter:
                continue
            yield block
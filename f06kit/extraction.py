"""Ways to pick out subsets of the data in a parsed file."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from itertools import product
from typing import Any

from f06kit.blocks import FinalBlock
from f06kit.compare import DisjunctionBehaviour
from f06kit.f06file import BlockRef, F06File
from f06kit.indexing import element_id, grid_point_id, index_sort_key, index_type_name


class SpecifierType(enum.Enum):
    """The kinds of specifier; the value is the short name."""

    ALL = "all"
    LIST = "only"
    ALL_EXCEPT = "except"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Specifier:
    """Selects values: all of them, only those listed, or all but those listed."""

    kind: SpecifierType = SpecifierType.ALL
    items: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        if self.kind is SpecifierType.ALL and self.items:
            raise ValueError("an 'all' specifier takes no items")

    @classmethod
    def from_items(cls, items: Iterable[Any]) -> Specifier:
        """Return a list specifier, or an 'all' one if there are no items."""
        values = tuple(items)
        if not values:
            return cls()
        return cls(SpecifierType.LIST, values)

    def with_type(self, to: SpecifierType) -> Specifier:
        """Return a specifier of another kind, keeping the items where it can."""
        if to is SpecifierType.ALL:
            return Specifier()
        return Specifier(to, self.items)

    def filter_fn(self, item: Any) -> bool:
        """Return True if the item is selected; an empty list selects all."""
        if self.kind is SpecifierType.ALL or not self.items:
            return True
        if self.kind is SpecifierType.LIST:
            return item in self.items
        return item not in self.items

    def lax_filter(self, item: Any | None) -> bool:
        """Filter an optional item: None fails unless everything is selected."""
        if self.kind is SpecifierType.ALL or not self.items:
            return True
        return item is not None and self.filter_fn(item)

    def strict_filter(self, item: Any | None) -> bool:
        """Filter an optional item: None always fails."""
        return item is not None and self.filter_fn(item)


class ExtractionError(Exception):
    """Raised when a datum cannot be taken from a file."""

    class Kind(enum.Enum):
        """The kinds of extraction failure."""

        NO_SUCH_BLOCK = "no such block"
        ROW_TYPE_MISMATCH = "row type mismatch"
        COLUMN_TYPE_MISMATCH = "column type mismatch"
        MISSING_ROW = "missing row"
        MISSING_COLUMN = "missing column"
        BLOCK_IS_EMPTY = "block is empty"

    def __init__(
        self,
        kind: ExtractionError.Kind,
        *,
        block_ref: BlockRef | None = None,
        tried: Any = None,
        against: Any = None,
    ) -> None:
        self.kind = kind
        self.block_ref = block_ref
        self.tried = tried
        self.against = against
        super().__init__(self._message())

    def _message(self) -> str:
        kinds = ExtractionError.Kind
        if self.kind is kinds.NO_SUCH_BLOCK:
            assert self.block_ref is not None
            return (
                f"no such block ({self.block_ref.block_type.short_name()}, "
                f"subcase {self.block_ref.subcase})"
            )
        if self.kind is kinds.ROW_TYPE_MISMATCH:
            return (
                f"wrong row type (tried a {index_type_name(self.tried)}, "
                f"block uses {index_type_name(self.against)})"
            )
        if self.kind is kinds.COLUMN_TYPE_MISMATCH:
            return (
                f"wrong column type (tried a {index_type_name(self.tried)}, "
                f"block uses {index_type_name(self.against)})"
            )
        if self.kind is kinds.MISSING_ROW:
            return f"no such row ({self.tried})"
        if self.kind is kinds.MISSING_COLUMN:
            return f"no such column ({self.tried})"
        return "block is empty"


@dataclass(frozen=True)
class DatumIndex:
    """Refers to a single datum in a file: block, row and column."""

    block_ref: BlockRef
    row: Any
    col: Any

    def get_from(self, file: F06File) -> float | int:
        """Return the datum from a file, raising ExtractionError on failure."""
        block = next(
            file.block_search(self.block_ref.block_type, self.block_ref.subcase, True),
            None,
        )
        if block is None:
            raise ExtractionError(
                ExtractionError.Kind.NO_SUCH_BLOCK, block_ref=self.block_ref
            )
        if not block.row_indexes or not block.col_indexes:
            raise ExtractionError(ExtractionError.Kind.BLOCK_IS_EMPTY)
        row_example = min(block.row_indexes, key=index_sort_key)
        col_example = min(block.col_indexes, key=index_sort_key)
        if type(self.row) is not type(row_example):
            raise ExtractionError(
                ExtractionError.Kind.ROW_TYPE_MISMATCH,
                tried=self.row,
                against=row_example,
            )
        if type(self.col) is not type(col_example):
            raise ExtractionError(
                ExtractionError.Kind.COLUMN_TYPE_MISMATCH,
                tried=self.col,
                against=col_example,
            )
        if self.row not in block.row_indexes:
            raise ExtractionError(ExtractionError.Kind.MISSING_ROW, tried=self.row)
        if self.col not in block.col_indexes:
            raise ExtractionError(ExtractionError.Kind.MISSING_COLUMN, tried=self.col)
        value = block.get(self.row, self.col)
        if value is None:
            raise ExtractionError(ExtractionError.Kind.BLOCK_IS_EMPTY)
        return value


@dataclass(frozen=True)
class Extraction:
    """A description of a subset of the data in a file."""

    subcases: Specifier = field(default_factory=Specifier)
    block_types: Specifier = field(default_factory=Specifier)
    grid_points: Specifier = field(default_factory=Specifier)
    elements: Specifier = field(default_factory=Specifier)
    rows: Specifier = field(default_factory=Specifier)
    cols: Specifier = field(default_factory=Specifier)
    raw_cols: Specifier = field(default_factory=Specifier)
    dxn: DisjunctionBehaviour = DisjunctionBehaviour.ASSUME_ZEROES

    def _blocks(self, file: F06File) -> Iterator[FinalBlock]:
        for block in file.all_blocks(True):
            if self.subcases.filter_fn(block.subcase) and self.block_types.filter_fn(
                block.block_type
            ):
                yield block

    def _row_selected(self, index: Any) -> bool:
        return (
            self.rows.filter_fn(index)
            and self.grid_points.lax_filter(grid_point_id(index))
            and self.elements.lax_filter(element_id(index))
        )

    def _col_selected(self, block: FinalBlock, index: Any) -> bool:
        return (
            self.cols.filter_fn(index)
            and self.grid_points.lax_filter(grid_point_id(index))
            and self.elements.lax_filter(element_id(index))
            and self.raw_cols.filter_fn(block.col_indexes[index])
        )

    def _selected(self, block: FinalBlock) -> tuple[list[Any], list[Any]]:
        rows = [
            r
            for r in sorted(block.row_indexes, key=index_sort_key)
            if self._row_selected(r)
        ]
        cols = [
            c
            for c in sorted(block.col_indexes, key=index_sort_key)
            if self._col_selected(block, c)
        ]
        return rows, cols

    def lookup(self, file: F06File) -> Iterator[DatumIndex]:
        """Yield the index of every datum this extraction selects.

        The file is expected to have had its blocks merged and sorted.
        """
        for block in self._blocks(file):
            ref = BlockRef(subcase=block.subcase, block_type=block.block_type)
            rows, cols = self._selected(block)
            for row, col in product(rows, cols):
                yield DatumIndex(block_ref=ref, row=row, col=col)

    def blockify(self, file: F06File) -> list[FinalBlock]:
        """Return copies of the selected blocks holding only selected rows and columns."""
        result: list[FinalBlock] = []
        for block in self._blocks(file):
            rows, cols = self._selected(block)
            kept_rows = set(rows)
            kept_cols = set(cols)
            result.append(
                dataclasses.replace(
                    block,
                    row_indexes={
                        k: v for k, v in block.row_indexes.items() if k in kept_rows
                    },
                    col_indexes={
                        k: v for k, v in block.col_indexes.items() if k in kept_cols
                    },
                    data=None if block.data is None else block.data.copy(),
                )
            )
        return result
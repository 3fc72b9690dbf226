"""Data blocks: row builders, finalised blocks and block merging."""

from __future__ import annotations

import dataclasses
import enum
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from f06kit.blocktypes import BlockType
from f06kit.indexing import index_sort_key

_log = logging.getLogger(__name__)


class ScalarKind(enum.Enum):
    """The kind of scalar held in a data matrix."""

    REAL = "real"
    INTEGER = "integer"
    NATURAL = "natural"

    @property
    def dtype(self) -> np.dtype:
        """The numpy dtype used to store this kind of scalar."""
        return np.dtype(_DTYPES[self])

    def coerce(self, value: Any) -> float | int:
        """Convert a value to this kind of scalar."""
        if self is ScalarKind.REAL:
            return float(value)
        number = int(value)
        if self is ScalarKind.NATURAL and number < 0:
            raise ValueError(f"natural values must not be negative, got {number}")
        return number


_DTYPES: dict[ScalarKind, type] = {
    ScalarKind.REAL: np.float64,
    ScalarKind.INTEGER: np.int64,
    ScalarKind.NATURAL: np.uint64,
}


def _scalar_kind_of(data: np.ndarray) -> ScalarKind:
    for kind, dtype in _DTYPES.items():
        if data.dtype == dtype:
            return kind
    raise TypeError(f"unsupported matrix dtype {data.dtype}")


def _ordered(keys: Iterable[Any]) -> list[Any]:
    return sorted(keys, key=index_sort_key)


class LineResponse(enum.Enum):
    """Response of a block decoder upon receiving a line."""

    USELESS = "useless"
    METADATA = "metadata"
    DATA = "data"
    DONE = "done"
    BAD_FLAVOUR = "bad flavour"
    MISSING_METADATA = "missing metadata"
    WRONG_DECODER = "wrong decoder"
    WRONG_SOLVER = "wrong solver"
    UNSUPPORTED = "unsupported"
    ABORT = "abort"

    def abnormal(self) -> bool:
        """Return True if the response was abnormal."""
        return self not in (
            LineResponse.USELESS,
            LineResponse.METADATA,
            LineResponse.DATA,
            LineResponse.DONE,
        )


class RowBlock:
    """Builds a fixed-width data matrix one indexed row at a time."""

    def __init__(
        self,
        col_indexes: Mapping[Any, int],
        scalar: ScalarKind = ScalarKind.REAL,
        width: int | None = None,
    ) -> None:
        self.col_indexes: dict[Any, int] = dict(col_indexes)
        self.scalar = scalar
        self.width = len(self.col_indexes) if width is None else width
        self.row_indexes: dict[Any, int] = {}
        self._rows: list[list[float | int]] = []

    @property
    def data(self) -> np.ndarray | None:
        """The rows gathered so far as a matrix, or None if there are none."""
        if not self._rows:
            return None
        return np.array(self._rows, dtype=self.scalar.dtype)

    def insert_raw(self, row_index: Any, row: Iterable[Any]) -> int:
        """Store a row in matrix column order; return its matrix row number.

        Inserting an index twice overwrites the earlier row.
        """
        values = [self.scalar.coerce(v) for v in row]
        if len(values) != self.width:
            raise ValueError(f"expected {self.width} values, got {len(values)}")
        existing = self.row_indexes.get(row_index)
        if existing is not None:
            _log.warning("tried to insert the same line twice! index: %s", row_index)
            self._rows[existing] = values
            return existing
        irow = len(self._rows)
        self._rows.append(values)
        self.row_indexes[row_index] = irow
        return irow

    def insert_row(self, row_index: Any, data: Mapping[Any, Any]) -> int:
        """Store a row given as a mapping from column index to value."""
        raw: list[Any] = [0] * self.width
        for col, value in data.items():
            try:
                raw[self.col_indexes[col]] = value
            except KeyError:
                raise KeyError(f"bad col index: {col}") from None
        return self.insert_raw(row_index, raw)

    def finalise(
        self,
        block_type: BlockType,
        subcase: int,
        line_range: tuple[int, int] | None,
    ) -> FinalBlock:
        """Produce the immutable-shape block holding the gathered data."""
        return FinalBlock(
            block_type=block_type,
            subcase=subcase,
            line_range=line_range,
            row_indexes=dict(self.row_indexes),
            col_indexes=dict(self.col_indexes),
            data=self.data,
        )


class MergeIncompatible(Exception):
    """Raised when two blocks cannot be merged."""

    class Kind(enum.Enum):
        """Why the merge is impossible."""

        COLUMN_CONFLICT = "column conflict"
        BLOCK_TYPE_MISMATCH = "block type mismatch"
        SCALAR_MISMATCH = "scalar mismatch"
        SUBCASE_MISMATCH = "subcase mismatch"

    def __init__(
        self,
        kind: MergeIncompatible.Kind,
        missing_in_primary: Iterable[Any] = (),
        missing_in_secondary: Iterable[Any] = (),
    ) -> None:
        super().__init__(kind.value)
        self.kind = kind
        self.missing_in_primary = frozenset(missing_in_primary)
        self.missing_in_secondary = frozenset(missing_in_secondary)


@dataclass(eq=False)
class FinalBlock:
    """A finished block: its type, subcase, row and column indexes and data."""

    block_type: BlockType
    subcase: int
    row_indexes: dict[Any, int] = field(default_factory=dict)
    col_indexes: dict[Any, int] = field(default_factory=dict)
    data: np.ndarray | None = None
    line_range: tuple[int, int] | None = None

    @property
    def scalar_kind(self) -> ScalarKind | None:
        """The kind of scalar in the data, or None if there is no data."""
        return None if self.data is None else _scalar_kind_of(self.data)

    def get(self, row: Any, col: Any) -> float | int | None:
        """Return the value at a row and column, or None if absent."""
        ri = self.row_indexes.get(row)
        ci = self.col_indexes.get(col)
        if ri is None or ci is None or self.data is None:
            return None
        if ri >= self.data.shape[0] or ci >= self.data.shape[1]:
            return None
        value = self.data[ri, ci]
        if self.scalar_kind is ScalarKind.REAL:
            return float(value)
        return int(value)

    def block_ref(self):
        """Return the reference of this block for filing it in a file."""
        from f06kit.f06file import BlockRef

        return BlockRef(subcase=self.subcase, block_type=self.block_type)

    def swap_columns(self, a: Any, b: Any) -> None:
        """Swap two columns in the matrix and in the column indexes."""
        ai = self.col_indexes.get(a)
        bi = self.col_indexes.get(b)
        if self.data is None or ai is None or bi is None:
            return
        self.data[:, [ai, bi]] = self.data[:, [bi, ai]]
        self.col_indexes[a] = bi
        self.col_indexes[b] = ai

    def swap_rows(self, a: Any, b: Any) -> None:
        """Swap two rows in the matrix and in the row indexes."""
        ai = self.row_indexes.get(a)
        bi = self.row_indexes.get(b)
        if self.data is None or ai is None or bi is None:
            return
        self.data[[ai, bi], :] = self.data[[bi, ai], :]
        self.row_indexes[a] = bi
        self.row_indexes[b] = ai

    @staticmethod
    def _sort_axis(indexes: dict[Any, int], swap) -> None:
        positions = sorted(indexes.values())
        for key, position in zip(_ordered(indexes), positions):
            other = next(k for k, v in indexes.items() if v == position)
            swap(key, other)

    def sort_columns(self) -> None:
        """Reorder columns so matrix positions grow with the column indexes."""
        self._sort_axis(self.col_indexes, self.swap_columns)

    def sort_rows(self) -> None:
        """Reorder rows so matrix positions grow with the row indexes."""
        self._sort_axis(self.row_indexes, self.swap_rows)

    def can_merge(self, other: FinalBlock) -> None:
        """Raise MergeIncompatible unless the two blocks can be merged."""
        if self.block_type != other.block_type:
            raise MergeIncompatible(MergeIncompatible.Kind.BLOCK_TYPE_MISMATCH)
        if self.subcase != other.subcase:
            raise MergeIncompatible(MergeIncompatible.Kind.SUBCASE_MISMATCH)
        primary = set(self.col_indexes)
        secondary = set(other.col_indexes)
        if primary != secondary:
            raise MergeIncompatible(
                MergeIncompatible.Kind.COLUMN_CONFLICT,
                missing_in_primary=secondary - primary,
                missing_in_secondary=primary - secondary,
            )
        if (
            self.data is not None
            and other.data is not None
            and self.scalar_kind is not other.scalar_kind
        ):
            raise MergeIncompatible(MergeIncompatible.Kind.SCALAR_MISMATCH)

    def row_conflicts(self, other: FinalBlock) -> frozenset[Any]:
        """Return the row indexes this block has in common with another."""
        return frozenset(self.row_indexes.keys() & other.row_indexes.keys())

    def _copy(self) -> FinalBlock:
        return dataclasses.replace(
            self,
            row_indexes=dict(self.row_indexes),
            col_indexes=dict(self.col_indexes),
            data=None if self.data is None else self.data.copy(),
        )

    def try_merge(self, other: FinalBlock) -> MergeResult:
        """Merge the rows of another block into a copy of this one.

        Rows the other block shares with this one are skipped and reported
        along with the other block as residue. Neither input is modified.
        """
        self.can_merge(other)
        primary = self._copy()
        secondary = other._copy()
        primary.sort_columns()
        secondary.sort_columns()
        if secondary.data is None:
            return MergeResult(merged=primary)
        if primary.data is None:
            return MergeResult(merged=secondary)
        copied = _ordered(secondary.row_indexes.keys() - primary.row_indexes.keys())
        skipped = frozenset(secondary.row_indexes.keys() & primary.row_indexes.keys())
        nrows = primary.data.shape[0]
        for offset, key in enumerate(copied):
            primary.row_indexes[key] = nrows + offset
        if copied:
            extra = secondary.data[[secondary.row_indexes[k] for k in copied], :]
            primary.data = np.vstack([primary.data, extra])
        primary.line_range = None
        if not skipped:
            return MergeResult(merged=primary)
        return MergeResult(merged=primary, residue=secondary, skipped=skipped)


@dataclass(eq=False)
class MergeResult:
    """The outcome of a merge; partial merges carry residue and skipped rows."""

    merged: FinalBlock
    residue: FinalBlock | None = None
    skipped: frozenset[Any] = frozenset()

    @property
    def partial(self) -> bool:
        """True if some rows were skipped because they were already present."""
        return self.residue is not None
# f06kit

f06kit is a Python library for the result blocks that appear in F06 text output,
the format written by MYSTRAN and Simcenter Nastran. It contains the following:

- Descriptions of the data: `BlockType` in `f06kit.blocktypes`, `ElementType` and
  `ElementCategory` in `f06kit.elements`, and `Solver`, `SolType` and `Flavour`
  in `f06kit.flavour`.
- Row and column index types in `f06kit.indexing`. Examples are `GridPointRef`,
  `ElementRef`, `ElementSidedPoint`, `PointInElement`, `PlateStressField`,
  `RodForceField` and `BarStressField`. The module also has helper functions:
  `canonical_cols`, `index_sort_key`, `index_type_name`, `grid_point_id` and
  `element_id`.
- `RowBlock` in `f06kit.blocks`, which collects rows one at a time. Calling
  `finalise` on it returns a `FinalBlock`, which holds the data in a numpy
  matrix.
- `F06File` in `f06kit.f06file`, which keeps blocks keyed by `BlockRef`
  (subcase and block type) and can sort, merge and search them.
- `DataDiffer` in `f06kit.compare` compares two blocks. `F06Diff` in
  `f06kit.diff` compares two whole files. Both test the values against
  `Criteria`.
- `Extraction`, `Specifier` and `DatumIndex` in `f06kit.extraction`, which
  select subsets of the data.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Building a block

```python
from f06kit.blocks import RowBlock
from f06kit.blocktypes import BlockType
from f06kit.elements import ElementType
from f06kit.indexing import ElementRef, RodForceField, canonical_cols

rod10 = ElementRef(10, ElementType.ROD)
rod11 = ElementRef(11, ElementType.ROD)

rows = RowBlock(canonical_cols(RodForceField))
rows.insert_raw(rod10, [1200.0, 3.5])
rows.insert_raw(rod11, [-800.0, 0.0])
block = rows.finalise(BlockType.ROD_FORCES, 1, None)

block.get(rod10, RodForceField.AXIAL_FORCE)   # 1200.0
```

`canonical_cols` maps each field of a column type to its canonical position.
`insert_raw` takes the values in matrix column order. If you insert the same row
index a second time, the new values overwrite the earlier row and a warning is
logged. `insert_row` takes a mapping from column index to value. A `RowBlock`
holds reals by default. Pass `ScalarKind.INTEGER` or `ScalarKind.NATURAL` to
store integers instead.

A `FinalBlock` offers these methods:

- `get(row, col)` returns the value, or `None` if either index is absent.
- `swap_rows` and `swap_columns` swap two rows or columns.
- `sort_rows` and `sort_columns` reorder the matrix so that positions follow
  index order.
- `can_merge` raises `MergeIncompatible` when the blocks cannot be merged.
- `row_conflicts` returns the shared rows.
- `try_merge` returns a `MergeResult` and leaves both inputs unchanged.

## Working with files

```python
from f06kit.f06file import F06File

f06 = F06File(filename="run.f06")
f06.insert_block(block)
f06.merge_blocks(True)      # clean merges only: no shared rows
f06.sort_all_blocks()

for blk in f06.block_search(BlockType.ROD_FORCES, 1, True):
    print(blk.get(rod11, RodForceField.TORQUE))
```

`all_blocks(unique)` yields blocks in `BlockRef` order. When `unique` is true, it
yields only the blocks that are the single one of their type in their subcase.
`subcases()` and `block_types()` yield what the file contains. `merge_blocks`
returns the number of merges it made. It raises `ValueError` if a non-clean
merge would have to skip rows that the blocks share.

## Comparing

```python
from f06kit.compare import Criteria, DataDiffer, DisjunctionBehaviour
from f06kit.diff import DiffSettings, F06Diff

differ = DataDiffer(Criteria(difference=1e-6), DisjunctionBehaviour.FLAG)
for flag in differ.compare(block_a, block_b):
    print(flag.values.row, flag.values.col, flag.reason)

settings = DiffSettings(criteria=Criteria(difference=1e-6), max_flags=10)
report = F06Diff.compare(settings, file_a, file_b)
for ref, flags in report.compared.items():
    print(ref, len(flags))
for ref, reason in report.not_compared.items():
    print(ref, reason)
```

`Criteria` flags a pair of values for any of these reasons:

- A NaN or an infinity (both checks are on by default).
- Differing signs (`sig`).
- An absolute difference greater than `difference`.
- A big-to-small ratio greater than `ratio`.

Rows that exist in only one block are skipped, treated as zeros (the default),
or flagged, depending on the `DisjunctionBehaviour`. `DataDiffer.compare`
raises `DataDiffer.Incompatible` when the two blocks differ in type, subcase or
columns, or when they have no rows in common. `F06Diff.compare` leaves such
block pairs out of its report. Block references that are missing from one
file, or that are not unique, go into `not_compared` together with a
`NonCompareReason`.

## Extracting

```python
from f06kit.extraction import Extraction, Specifier, SpecifierType

ex = Extraction(
    subcases=Specifier.from_items([1]),
    elements=Specifier(SpecifierType.ALL_EXCEPT, (rod11,)),
)
for datum in ex.lookup(f06):
    print(datum.row, datum.col, datum.get_from(f06))

subset = ex.blockify(f06)   # copies of the blocks with only the selected indexes
```

A `Specifier` selects everything, a listed set of values, or everything except
a listed set. An empty list selects everything. `DatumIndex.get_from` raises
`ExtractionError` in the following cases: the block is missing or empty, the
index type does not match, or the row or column is absent.

## What it does not do

f06kit does not read or parse F06 text. It has no line decoders for the block
types it describes. Blocks come into an `F06File` only through `RowBlock` and
`insert_block`. The package also has no command-line tools and writes nothing to
CSV or any other file format.
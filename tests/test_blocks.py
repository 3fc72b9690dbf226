import pytest

from f06kit.blocks import (
    FinalBlock,
    LineResponse,
    MergeIncompatible,
    RowBlock,
    ScalarKind,
)
from f06kit.blocktypes import BlockType
from f06kit.indexing import (
    GridPointRef,
    PlateForceField,
    RodForceField,
    canonical_cols,
)

AXIAL = RodForceField.AXIAL_FORCE
TORQUE = RodForceField.TORQUE


def g(n):
    return GridPointRef(n)


def make_block(rows, subcase=1, block_type=BlockType.ROD_FORCES,
               scalar=ScalarKind.REAL, line_range=(1, 10)):
    rb = RowBlock(canonical_cols(RodForceField), scalar)
    for gid, values in rows:
        rb.insert_raw(g(gid), values)
    return rb.finalise(block_type, subcase, line_range)


def test_line_response_abnormal():
    assert not LineResponse.USELESS.abnormal()
    assert not LineResponse.METADATA.abnormal()
    assert not LineResponse.DATA.abnormal()
    assert not LineResponse.DONE.abnormal()
    assert LineResponse.BAD_FLAVOUR.abnormal()
    assert LineResponse.MISSING_METADATA.abnormal()
    assert LineResponse.WRONG_DECODER.abnormal()
    assert LineResponse.WRONG_SOLVER.abnormal()
    assert LineResponse.UNSUPPORTED.abnormal()
    assert LineResponse.ABORT.abnormal()


def test_insert_raw_positions_and_overwrite():
    rb = RowBlock(canonical_cols(RodForceField))
    assert rb.insert_raw(g(5), [1.0, 2.0]) == 0
    assert rb.insert_raw(g(7), [3.0, 4.0]) == 1
    assert rb.insert_raw(g(5), [9.0, 8.0]) == 0
    assert rb.row_indexes == {g(5): 0, g(7): 1}
    assert rb.data.shape == (2, 2)
    assert rb.data[0].tolist() == [9.0, 8.0]


def test_insert_raw_wrong_width():
    rb = RowBlock(canonical_cols(RodForceField))
    with pytest.raises(ValueError):
        rb.insert_raw(g(1), [1.0, 2.0, 3.0])


def test_insert_row_uses_column_map():
    rb = RowBlock(canonical_cols(RodForceField))
    rb.insert_row(g(1), {TORQUE: 4.5})
    fb = rb.finalise(BlockType.ROD_FORCES, 1, None)
    assert fb.get(g(1), TORQUE) == 4.5
    assert fb.get(g(1), AXIAL) == 0.0


def test_insert_row_bad_column():
    rb = RowBlock(canonical_cols(RodForceField))
    with pytest.raises(KeyError):
        rb.insert_row(g(1), {PlateForceField.NORMAL_X: 1.0})


def test_natural_rejects_negative():
    rb = RowBlock(canonical_cols(RodForceField), ScalarKind.NATURAL)
    with pytest.raises(ValueError):
        rb.insert_raw(g(1), [1, -2])


def test_finalise_empty_and_values():
    empty = make_block([])
    assert empty.data is None
    assert empty.get(g(1), AXIAL) is None
    fb = make_block([(1, [1.5, 2.5]), (2, [3.5, 4.5])])
    assert fb.get(g(2), AXIAL) == 3.5
    assert fb.get(g(1), TORQUE) == 2.5
    assert fb.get(g(3), AXIAL) is None
    assert fb.line_range == (1, 10)
    assert fb.scalar_kind is ScalarKind.REAL


def test_integer_get_returns_int():
    fb = make_block([(1, [3, 4])], scalar=ScalarKind.INTEGER)
    assert fb.get(g(1), TORQUE) == 4
    assert isinstance(fb.get(g(1), TORQUE), int)


def test_swap_columns_preserves_values():
    fb = make_block([(1, [1.0, 2.0])])
    fb.swap_columns(AXIAL, TORQUE)
    assert fb.col_indexes == {AXIAL: 1, TORQUE: 0}
    assert fb.get(g(1), AXIAL) == 1.0
    assert fb.get(g(1), TORQUE) == 2.0
    fb.sort_columns()
    assert fb.col_indexes == {AXIAL: 0, TORQUE: 1}
    assert fb.data[0].tolist() == [1.0, 2.0]


def test_sort_rows_monotonic():
    fb = make_block([(3, [3.0, 30.0]), (1, [1.0, 10.0]), (2, [2.0, 20.0])])
    fb.sort_rows()
    assert fb.row_indexes == {g(1): 0, g(2): 1, g(3): 2}
    assert fb.data[:, 0].tolist() == [1.0, 2.0, 3.0]
    assert fb.get(g(3), TORQUE) == 30.0


def test_swap_rows_missing_is_noop():
    fb = make_block([(1, [1.0, 2.0])])
    fb.swap_rows(g(1), g(9))
    assert fb.row_indexes == {g(1): 0}


def test_can_merge_errors():
    a = make_block([(1, [1.0, 2.0])])
    with pytest.raises(MergeIncompatible) as exc:
        a.can_merge(make_block([(2, [1.0, 2.0])], block_type=BlockType.BAR_FORCES))
    assert exc.value.kind is MergeIncompatible.Kind.BLOCK_TYPE_MISMATCH
    with pytest.raises(MergeIncompatible) as exc:
        a.can_merge(make_block([(2, [1.0, 2.0])], subcase=2))
    assert exc.value.kind is MergeIncompatible.Kind.SUBCASE_MISMATCH
    with pytest.raises(MergeIncompatible) as exc:
        a.can_merge(make_block([(2, [1, 2])], scalar=ScalarKind.INTEGER))
    assert exc.value.kind is MergeIncompatible.Kind.SCALAR_MISMATCH


def test_can_merge_column_conflict():
    a = make_block([(1, [1.0, 2.0])])
    rb = RowBlock({AXIAL: 0})
    rb.insert_raw(g(2), [5.0])
    b = rb.finalise(BlockType.ROD_FORCES, 1, None)
    with pytest.raises(MergeIncompatible) as exc:
        a.can_merge(b)
    assert exc.value.kind is MergeIncompatible.Kind.COLUMN_CONFLICT
    assert exc.value.missing_in_secondary == frozenset({TORQUE})
    assert exc.value.missing_in_primary == frozenset()


def test_row_conflicts():
    a = make_block([(1, [1.0, 2.0]), (2, [3.0, 4.0])])
    b = make_block([(2, [5.0, 6.0]), (3, [7.0, 8.0])])
    assert a.row_conflicts(b) == frozenset({g(2)})


def test_try_merge_success():
    a = make_block([(1, [1.0, 2.0]), (2, [3.0, 4.0])])
    b = make_block([(3, [5.0, 6.0])])
    res = a.try_merge(b)
    assert not res.partial
    merged = res.merged
    assert set(merged.row_indexes) == {g(1), g(2), g(3)}
    assert merged.data.shape == (3, 2)
    assert merged.get(g(3), TORQUE) == 6.0
    assert merged.get(g(1), AXIAL) == 1.0
    assert merged.line_range is None
    assert set(a.row_indexes) == {g(1), g(2)}


def test_try_merge_partial():
    a = make_block([(1, [1.0, 2.0]), (2, [3.0, 4.0])])
    b = make_block([(2, [5.0, 6.0]), (3, [7.0, 8.0])])
    res = a.try_merge(b)
    assert res.partial
    assert res.skipped == frozenset({g(2)})
    assert res.merged.get(g(2), AXIAL) == 3.0
    assert res.merged.get(g(3), AXIAL) == 7.0
    assert res.residue.get(g(2), AXIAL) == 5.0


def test_try_merge_with_empty_primary():
    a = make_block([])
    b = make_block([(4, [1.0, 2.0])], line_range=(5, 6))
    res = a.try_merge(b)
    assert not res.partial
    assert res.merged.get(g(4), TORQUE) == 2.0
    assert res.merged.line_range == (5, 6)


def test_try_merge_incompatible_raises():
    a = make_block([(1, [1.0, 2.0])])
    b = make_block([(2, [1.0, 2.0])], subcase=3)
    with pytest.raises(MergeIncompatible):
        a.try_merge(b)


def test_block_ref():
    fb = make_block([(1, [1.0, 2.0])], subcase=4)
    ref = fb.block_ref()
    assert ref.subcase == 4
    assert ref.block_type is BlockType.ROD_FORCES


def test_final_block_defaults():
    fb = FinalBlock(BlockType.DISPLACEMENTS, 1)
    assert fb.scalar_kind is None
    assert fb.row_conflicts(fb) == frozenset()
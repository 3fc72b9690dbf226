from f06kit.blocks import RowBlock
from f06kit.blocktypes import BlockType
from f06kit.compare import (
    Criteria,
    DisjunctionBehaviour,
    FlagReason,
    IncompatibilityReason,
)
from f06kit.diff import DiffSettings, F06Diff, NonCompareKind, NonCompareReason
from f06kit.elements import ElementType
from f06kit.f06file import BlockRef, F06File
from f06kit.indexing import ElementRef, RodForceField, canonical_cols

REF = BlockRef(subcase=1, block_type=BlockType.ROD_FORCES)


def rod_block(values, subcase=1):
    rb = RowBlock(canonical_cols(RodForceField))
    for eid, row in values.items():
        rb.insert_raw(ElementRef(eid, ElementType.ROD), row)
    return rb.finalise(BlockType.ROD_FORCES, subcase, None)


def make_file(name, *blocks):
    f = F06File(filename=name)
    for block in blocks:
        f.insert_block(block)
    return f


BASE = {1: (1.0, 2.0), 2: (3.0, 4.0)}


def test_identical_files_have_no_flags():
    a = make_file("a.f06", rod_block(BASE))
    b = make_file("b.f06", rod_block(BASE))
    diff = F06Diff.compare(DiffSettings(), a, b)
    assert diff.compared == {REF: []}
    assert diff.not_compared == {}


def test_difference_is_flagged():
    a = make_file("a.f06", rod_block(BASE))
    b = make_file("b.f06", rod_block({1: (1.0, 2.0), 2: (5.0, 4.0)}))
    settings = DiffSettings(criteria=Criteria(difference=0.5))
    flags = F06Diff.compare(settings, a, b).compared[REF]
    assert len(flags) == 1
    flag = flags[0]
    assert flag.values.row == ElementRef(2, ElementType.ROD)
    assert flag.values.col == RodForceField.AXIAL_FORCE
    assert flag.values.val_a == 3.0
    assert flag.values.val_b == 5.0
    assert flag.reason.kind is FlagReason.Kind.DIFFERENCE


def test_max_flags_limits_flags():
    a = make_file("a.f06", rod_block(BASE))
    b = make_file("b.f06", rod_block({1: (10.0, 20.0), 2: (30.0, 40.0)}))
    criteria = Criteria(difference=0.5)
    unlimited = F06Diff.compare(DiffSettings(criteria=criteria), a, b)
    everything = list(
        DiffSettings(criteria=criteria).differ().compare(rod_block(BASE), b.blocks[REF][0])
    )
    assert len(unlimited.compared[REF]) == len(everything)
    limited = F06Diff.compare(DiffSettings(criteria=criteria, max_flags=1), a, b)
    assert limited.compared[REF] == unlimited.compared[REF][:1]


def test_no_counterpart_names_missing_file():
    a = make_file("a.f06", rod_block(BASE))
    b = make_file("b.f06")
    diff = F06Diff.compare(DiffSettings(), a, b)
    reason = diff.not_compared[REF]
    assert reason.kind is NonCompareKind.NO_COUNTERPART
    assert reason.filename == "b.f06"
    assert str(reason) == "no counterpart in b.f06"
    reverse = F06Diff.compare(DiffSettings(), b, a)
    assert reverse.not_compared[REF].filename == "b.f06"
    assert REF not in diff.compared


def test_counterpart_missing_in_first_file():
    a = make_file("a.f06")
    b = make_file("b.f06", rod_block(BASE))
    reason = F06Diff.compare(DiffSettings(), a, b).not_compared[REF]
    assert reason == NonCompareReason(NonCompareKind.NO_COUNTERPART, "a.f06")


def test_not_unique_in_one():
    a = make_file("a.f06", rod_block(BASE), rod_block(BASE))
    b = make_file("b.f06", rod_block(BASE))
    reason = F06Diff.compare(DiffSettings(), a, b).not_compared[REF]
    assert reason == NonCompareReason(NonCompareKind.NOT_UNIQUE_IN_ONE, "a.f06")
    assert str(reason) == "not unique in a.f06"
    swapped = F06Diff.compare(DiffSettings(), b, a).not_compared[REF]
    assert swapped == NonCompareReason(NonCompareKind.NOT_UNIQUE_IN_ONE, "a.f06")


def test_not_unique_in_both():
    a = make_file("a.f06", rod_block(BASE), rod_block(BASE))
    b = make_file("b.f06", rod_block(BASE), rod_block(BASE))
    reason = F06Diff.compare(DiffSettings(), a, b).not_compared[REF]
    assert reason.kind is NonCompareKind.NOT_UNIQUE_IN_BOTH
    assert str(reason) == "not unique in either file"


def test_incompatible_blocks_are_left_out():
    a = make_file("a.f06", rod_block({1: (1.0, 2.0)}))
    b = make_file("b.f06", rod_block({2: (1.0, 2.0)}))
    diff = F06Diff.compare(DiffSettings(), a, b)
    assert REF not in diff.compared
    assert REF not in diff.not_compared


def test_reason_strings_without_filename():
    assert str(NonCompareReason(NonCompareKind.NO_COUNTERPART)) == (
        "no counterpart in one of the files"
    )
    assert str(NonCompareReason(NonCompareKind.NOT_UNIQUE_IN_ONE)) == (
        "not unique in one of the files"
    )
    reason = NonCompareReason(
        NonCompareKind.NOT_COMPATIBLE,
        incompatibility=IncompatibilityReason.NO_COMMON_ROWS,
    )
    assert str(reason) == "incompatibility: no rows in common"


def test_settings_differ_defaults_disjunction():
    differ = DiffSettings(dxn_behaviour=None).differ()
    assert differ.dxn_behaviour is DisjunctionBehaviour.ASSUME_ZEROES
    criteria = Criteria(ratio=2.0)
    differ = DiffSettings(criteria=criteria, dxn_behaviour=DisjunctionBehaviour.FLAG).differ()
    assert differ.criteria == criteria
    assert differ.dxn_behaviour is DisjunctionBehaviour.FLAG


def test_flag_disjunction_through_settings():
    a = make_file("a.f06", rod_block(BASE))
    b = make_file("b.f06", rod_block({1: (1.0, 2.0)}))
    settings = DiffSettings(dxn_behaviour=DisjunctionBehaviour.FLAG)
    flags = F06Diff.compare(settings, a, b).compared[REF]
    assert {f.values.row for f in flags} == {ElementRef(2, ElementType.ROD)}
    assert {f.values.col for f in flags} == set(RodForceField)
    assert all(f.reason.kind is FlagReason.Kind.DISJUNCTION for f in flags)
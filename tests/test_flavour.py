import pytest

from f06kit.blocktypes import BlockType
from f06kit.flavour import Flavour, SolType, Solver


def test_solver_labels():
    assert Solver.MYSTRAN.label() == "MYSTRAN"
    assert str(Solver.SIMCENTER) == "Simcenter Nastran"


def test_block_enders():
    assert Solver.MYSTRAN.block_enders() == ("-------------", "------------")
    assert Solver.SIMCENTER.block_enders() == ("SIMCENTER NASTRAN",)


def test_ender_exceptions():
    assert Solver.MYSTRAN.ender_exceptions() == (
        BlockType.GRID_POINT_FORCE_BALANCE,
    )
    assert Solver.SIMCENTER.ender_exceptions() == ()


@pytest.mark.parametrize(
    ("number", "soltype"),
    [
        (101, SolType.LINEAR_STATIC),
        (1, SolType.LINEAR_STATIC),
        (103, SolType.EIGENVALUE),
        (3, SolType.EIGENVALUE),
        (104, SolType.LINEAR_STATIC_DIFF_STIFF),
        (4, SolType.LINEAR_STATIC_DIFF_STIFF),
        (105, SolType.LINEAR_BUCKLING),
        (5, SolType.LINEAR_BUCKLING),
        (106, SolType.NON_LINEAR_STATIC),
    ],
)
def test_from_number(number, soltype):
    assert SolType.from_number(number) is soltype


@pytest.mark.parametrize("number", [0, 2, 6, 102, 107, 200])
def test_from_number_invalid(number):
    with pytest.raises(ValueError):
        SolType.from_number(number)


def test_number_round_trip():
    for st in SolType:
        assert SolType.from_number(st.number()) is st


def test_soltype_labels():
    assert SolType.LINEAR_STATIC.label() == "Linear static"
    assert str(SolType.LINEAR_STATIC_DIFF_STIFF) == (
        "Linear static with differential stiffness"
    )
    assert SolType.NON_LINEAR_STATIC.label() == "Non-linear static"


def test_flavour_defaults_and_equality():
    default = Flavour()
    assert default.solver is None
    assert default.soltype is None
    a = Flavour(Solver.MYSTRAN, SolType.EIGENVALUE)
    assert a == Flavour(solver=Solver.MYSTRAN, soltype=SolType.EIGENVALUE)
    assert a != default
    assert hash(a) == hash(Flavour(Solver.MYSTRAN, SolType.EIGENVALUE))
"""Solvers, solution types and the flavour of an output file."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from f06kit.blocktypes import BlockType


class Solver(enum.Enum):
    """The supported solvers."""

    MYSTRAN = "MYSTRAN"
    SIMCENTER = "Simcenter Nastran"

    def label(self) -> str:
        """Return the display name of the solver."""
        return self.value

    def block_enders(self) -> tuple[str, ...]:
        """Return the strings that mark the end of a block."""
        if self is Solver.MYSTRAN:
            return ("-------------", "------------")
        return ("SIMCENTER NASTRAN",)

    def ender_exceptions(self) -> tuple[BlockType, ...]:
        """Return the block types to which block enders do not apply."""
        if self is Solver.MYSTRAN:
            return (BlockType.GRID_POINT_FORCE_BALANCE,)
        return ()

    def __str__(self) -> str:
        return self.label()


class SolType(enum.Enum):
    """The known solution types; the value is the solution number."""

    LINEAR_STATIC = 101
    EIGENVALUE = 103
    LINEAR_STATIC_DIFF_STIFF = 104
    LINEAR_BUCKLING = 105
    NON_LINEAR_STATIC = 106

    def label(self) -> str:
        """Return a user-friendly name for the solution."""
        return _SOL_LABELS[self]

    def number(self) -> int:
        """Return the solution number."""
        return self.value

    @classmethod
    def from_number(cls, sol: int) -> SolType:
        """Return the solution type for a solution number.

        Short numbers (1, 3, 4, 5) are accepted for 101, 103, 104 and 105.
        """
        if sol in (1, 3, 4, 5):
            sol += 100
        try:
            return cls(sol)
        except ValueError:
            raise ValueError(f"unknown solution number {sol}") from None

    def __str__(self) -> str:
        return self.label()


_SOL_LABELS: dict[SolType, str] = {
    SolType.LINEAR_STATIC: "Linear static",
    SolType.EIGENVALUE: "Eigenvalue",
    SolType.LINEAR_STATIC_DIFF_STIFF: "Linear static with differential stiffness",
    SolType.LINEAR_BUCKLING: "Linear buckling",
    SolType.NON_LINEAR_STATIC: "Non-linear static",
}


@dataclass(frozen=True)
class Flavour:
    """The solver and solution type that produced a file, where known."""

    solver: Solver | None = None
    soltype: SolType | None = None
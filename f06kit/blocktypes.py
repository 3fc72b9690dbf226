"""Known data block types, their descriptions and detection headers."""

from __future__ import annotations

import enum
import re

from f06kit.elements import ElementType

_STRESS_LOCAL = "ELEMENT STRESSES IN LOCAL ELEMENT COORDINATE SYSTEM FOR ELEMENT TYPE "
_STRAIN_LOCAL = "ELEMENT STRAINS IN LOCAL ELEMENT COORDINATE SYSTEM FOR ELEMENT TYPE "
_FORCES = "ELEMENT ENGINEERING FORCES FOR ELEMENT TYPE "

_WORD = re.compile(r"[A-Z]?[a-z]+|[A-Z]+(?![a-z])|\d+")


class BlockType(enum.Enum):
    """All known data blocks; the value is the CamelCase short name.

    Block types order by their declaration order.
    """

    DISPLACEMENTS = "Displacements"
    GRID_POINT_FORCE_BALANCE = "GridPointForceBalance"
    SPC_FORCES = "SpcForces"
    APPLIED_FORCES = "AppliedForces"
    ELAS1_FORCES = "Elas1Forces"
    ELAS1_STRESSES = "Elas1Stresses"
    ELAS1_STRAINS = "Elas1Strains"
    ROD_FORCES = "RodForces"
    ROD_STRESSES = "RodStresses"
    ROD_STRAINS = "RodStrains"
    BAR_FORCES = "BarForces"
    BAR_STRESSES = "BarStresses"
    BAR_STRAINS = "BarStrains"
    TRIA_FORCES = "TriaForces"
    TRIA_STRESSES = "TriaStresses"
    TRIA_STRAINS = "TriaStrains"
    QUAD_FORCES = "QuadForces"
    QUAD_STRESSES = "QuadStresses"
    QUAD_STRAINS = "QuadStrains"
    BUSH_FORCES = "BushForces"
    BUSH_STRESSES = "BushStresses"
    BUSH_STRAINS = "BushStrains"
    EIGENVECTOR = "Eigenvector"
    REAL_EIGENVALUES = "RealEigenvalues"

    def desc(self) -> str:
        """Return the human-readable description of the block."""
        return _INFO[self][0]

    def elem_type(self) -> ElementType | None:
        """Return the element type this block relates to, if any."""
        return _INFO[self][1]

    def headers(self) -> tuple[str, ...]:
        """Return the upper-case header strings that start this block."""
        return _INFO[self][2]

    def short_name(self) -> str:
        """Return the CamelCase short name."""
        return self.value

    def snake_case_name(self) -> str:
        """Return the snake_case short name."""
        return "_".join(w.lower() for w in _WORD.findall(self.value))

    @classmethod
    def parse(cls, text: str) -> BlockType:
        """Parse a block type from its description, short or snake name.

        Matching ignores ASCII case.
        """
        wanted = text.lower()
        for cand in cls:
            names = (cand.desc(), cand.short_name(), cand.snake_case_name())
            if any(n.lower() == wanted for n in names):
                return cand
        raise ValueError(f'invalid block type name "{text}"')

    def __str__(self) -> str:
        return self.desc()

    def _position(self) -> int:
        return _ORDER[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BlockType):
            return NotImplemented
        return self._position() < other._position()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, BlockType):
            return NotImplemented
        return self._position() <= other._position()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, BlockType):
            return NotImplemented
        return self._position() > other._position()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, BlockType):
            return NotImplemented
        return self._position() >= other._position()


def _element_blocks(
    kind: str, etype: ElementType, scalar_header: str
) -> tuple[tuple[str, ElementType, tuple[str, ...]], ...]:
    """Describe the forces/stresses/strains triple for one element family."""
    name = etype.value
    return (
        (f"FORCES IN {scalar_header}", _FORCES + name),
        (f"STRESSES IN {scalar_header}", _STRESS_LOCAL + name),
        (f"STRAINS IN {scalar_header}", _STRAIN_LOCAL + name),
    )  # type: ignore[return-value]


def _triple(desc_noun: str, etype: ElementType, scalar_header: str):
    forces, stresses, strains = _element_blocks("", etype, scalar_header)
    return (
        (f"Engineering forces in {desc_noun}", etype, forces),
        (f"Stresses in {desc_noun}", etype, stresses),
        (f"Strains in {desc_noun}", etype, strains),
    )


_B = BlockType

_INFO: dict[BlockType, tuple[str, ElementType | None, tuple[str, ...]]] = {
    _B.DISPLACEMENTS: (
        "Grid point displacements",
        None,
        ("DISPLACEMENTS", "DISPLACEMENT VECTOR"),
    ),
    _B.GRID_POINT_FORCE_BALANCE: (
        "Grid point force balance",
        None,
        ("GRID POINT FORCE BALANCE",),
    ),
    _B.SPC_FORCES: (
        "Forces of single-point constraint",
        None,
        ("SPC FORCES", "FORCES OF SINGLE-POINT CONSTRAINT"),
    ),
    _B.APPLIED_FORCES: (
        "Applied forces",
        None,
        ("APPLIED FORCES", "LOAD VECTOR"),
    ),
    _B.EIGENVECTOR: ("Eigenvector", None, ("EIGENVECTOR",)),
    _B.REAL_EIGENVALUES: ("Real Eigenvalues", None, ("REAL EIGENVALUES",)),
}

for _members, _noun, _etype, _scalar in (
    (
        (_B.ELAS1_FORCES, _B.ELAS1_STRESSES, _B.ELAS1_STRAINS),
        "ELAS1 elements",
        ElementType.ELAS1,
        "SCALAR SPRINGS (CELAS1)",
    ),
    (
        (_B.ROD_FORCES, _B.ROD_STRESSES, _B.ROD_STRAINS),
        "rod elements",
        ElementType.ROD,
        "ROD ELEMENTS (CROD)",
    ),
    (
        (_B.BAR_FORCES, _B.BAR_STRESSES, _B.BAR_STRAINS),
        "bar elements",
        ElementType.BAR,
        "BAR ELEMENTS (CBAR)",
    ),
    (
        (_B.TRIA_FORCES, _B.TRIA_STRESSES, _B.TRIA_STRAINS),
        "triangular elements",
        ElementType.TRIA3,
        "TRIANGULAR ELEMENTS (CTRIA3)",
    ),
    (
        (_B.QUAD_FORCES, _B.QUAD_STRESSES, _B.QUAD_STRAINS),
        "quadrilateral elements",
        ElementType.QUAD4,
        "QUADRILATERAL ELEMENTS (QUAD4)",
    ),
    (
        (_B.BUSH_FORCES, _B.BUSH_STRESSES, _B.BUSH_STRAINS),
        "BUSH elements",
        ElementType.BUSH,
        "BUSH ELEMENTS (CBUSH)",
    ),
):
    for _member, _info in zip(_members, _triple(_noun, _etype, _scalar)):
        _INFO[_member] = _info

_ORDER: dict[BlockType, int] = {bt: i for i, bt in enumerate(BlockType)}
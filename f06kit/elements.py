"""Element types and broad element categories found in solver output."""

from __future__ import annotations

import enum


class ElementCategory(enum.Enum):
    """Broadly-defined element categories."""

    RIGID_BODY = "rigid body"
    SCALAR_MASS = "scalar mass"
    SCALAR_SPRING = "scalar spring"
    BUSHING = "bushing"
    ONE_DIMENSIONAL_ELASTIC = "1D elastic"
    TWO_DIMENSIONAL_ELASTIC = "2D elastic"
    THREE_DIMENSIONAL_ELASTIC = "3D elastic"


class ElementType(enum.Enum):
    """Known element types; the value is the all-caps element name.

    Element types order by their names.
    """

    RBE2 = "RBE2"
    RBE3 = "RBE3"
    RSPLINE = "RSPLINE"
    MASS1 = "MASS1"
    MASS2 = "MASS2"
    MASS3 = "MASS3"
    MASS4 = "MASS4"
    ELAS1 = "ELAS1"
    ELAS2 = "ELAS2"
    ELAS3 = "ELAS3"
    ELAS4 = "ELAS4"
    BUSH = "BUSH"
    BAR = "BAR"
    ROD = "ROD"
    BEAM = "BEAM"
    QUAD4 = "QUAD4"
    QUAD4K = "QUAD4K"
    QUAD6 = "QUAD6"
    QUAD8 = "QUAD8"
    QUADR = "QUADR"
    TRIA3 = "TRIA3"
    TRIA3K = "TRIA3K"
    TRIA6 = "TRIA6"
    TRIAR = "TRIAR"
    SHEAR = "SHEAR"
    TETRA = "TETRA"
    PENTA = "PENTA"
    HEXA = "HEXA"

    def category(self) -> ElementCategory:
        """Return the category of this element type."""
        return _CATEGORIES[self]

    @classmethod
    def parse(cls, text: str) -> ElementType:
        """Parse an element type from its exact all-caps name."""
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f'invalid element type "{text}"') from None

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ElementType):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ElementType):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ElementType):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ElementType):
            return NotImplemented
        return self.value >= other.value


_E = ElementType
_C = ElementCategory

_CATEGORIES: dict[ElementType, ElementCategory] = {
    **dict.fromkeys((_E.RBE2, _E.RBE3, _E.RSPLINE), _C.RIGID_BODY),
    **dict.fromkeys((_E.MASS1, _E.MASS2, _E.MASS3, _E.MASS4), _C.SCALAR_MASS),
    **dict.fromkeys((_E.ELAS1, _E.ELAS2, _E.ELAS3, _E.ELAS4), _C.SCALAR_SPRING),
    _E.BUSH: _C.BUSHING,
    **dict.fromkeys((_E.BAR, _E.ROD, _E.BEAM), _C.ONE_DIMENSIONAL_ELASTIC),
    **dict.fromkeys(
        (
            _E.QUAD4,
            _E.QUAD4K,
            _E.QUAD6,
            _E.QUAD8,
            _E.QUADR,
            _E.TRIA3,
            _E.TRIA3K,
            _E.TRIA6,
            _E.TRIAR,
            _E.SHEAR,
        ),
        _C.TWO_DIMENSIONAL_ELASTIC,
    ),
    **dict.fromkeys((_E.TETRA, _E.PENTA, _E.HEXA), _C.THREE_DIMENSIONAL_ELASTIC),
}
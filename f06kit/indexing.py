"""Index types used to address rows and columns of output data blocks."""

from __future__ import annotations

import dataclasses
import enum
import re
from dataclasses import dataclass
from typing import Any

from f06kit.elements import ElementType

_NATURAL = re.compile(r"\+?[0-9]+")


class _Keyed:
    """Ordering through a private comparison key, only within one type."""

    def _key(self) -> tuple:
        raise NotImplementedError

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() < other._key()  # type: ignore[attr-defined]

    def __le__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() <= other._key()  # type: ignore[attr-defined]

    def __gt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() > other._key()  # type: ignore[attr-defined]

    def __ge__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() >= other._key()  # type: ignore[attr-defined]


class _OrderedEnum(_Keyed, enum.Enum):
    """An enumeration ordered by declaration; the value is its display name."""

    def _key(self) -> tuple:
        return (type(self)._member_names_.index(self.name),)

    def __str__(self) -> str:
        return str(self.value)


def _check_natural(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")


@dataclass(frozen=True)
class GridPointRef(_Keyed):
    """A grid point, referenced by its ID."""

    gid: int

    def __post_init__(self) -> None:
        _check_natural("grid point ID", self.gid)

    def _key(self) -> tuple:
        return (self.gid,)

    def __str__(self) -> str:
        return f"GRID {self.gid}"


@dataclass(frozen=True)
class ElementRef(_Keyed):
    """An element, referenced by its ID and, if known, its type."""

    eid: int
    etype: ElementType | None = None

    def __post_init__(self) -> None:
        _check_natural("element ID", self.eid)

    @classmethod
    def parse(cls, text: str) -> ElementRef:
        """Parse an element reference (with no type) from a decimal ID."""
        if not _NATURAL.fullmatch(text):
            raise ValueError(f'invalid element ID "{text}"')
        return cls(int(text))

    def _key(self) -> tuple:
        if self.etype is None:
            return (self.eid, 0, "")
        return (self.eid, 1, self.etype.value)

    def __str__(self) -> str:
        if self.etype is None:
            return f"ELEMENT {self.eid}"
        return f"ELEMENT {self.eid} ({self.etype.value})"


@dataclass(frozen=True)
class CsysRef(_Keyed):
    """A coordinate system, referenced by its ID."""

    cid: int

    def __post_init__(self) -> None:
        _check_natural("coordinate system ID", self.cid)

    def _key(self) -> tuple:
        return (self.cid,)

    def __str__(self) -> str:
        return f"COORD SYS {self.cid}"


class ForceOriginKind(_OrderedEnum):
    """Where a force at a grid point comes from."""

    LOAD = "APPLIED LOAD"
    ELEMENT = "ELEMENT"
    SINGLE_POINT_CONSTRAINT = "SINGLE-POINT CONSTRAINT"
    MULTI_POINT_CONSTRAINT = "MULTI-POINT CONSTRAINT"


@dataclass(frozen=True)
class ForceOrigin(_Keyed):
    """The origin of a force; element forces carry the element."""

    kind: ForceOriginKind
    elem: ElementRef | None = None

    def __post_init__(self) -> None:
        if (self.kind is ForceOriginKind.ELEMENT) != (self.elem is not None):
            raise ValueError("an element is required exactly for element forces")

    def _key(self) -> tuple:
        elem_key = self.elem._key() if self.elem is not None else ()
        return (self.kind._key(), elem_key)

    def __str__(self) -> str:
        if self.elem is not None:
            return str(self.elem)
        return self.kind.value


@dataclass(frozen=True)
class GridPointForceOrigin(_Keyed):
    """A grid point and the origin of a force acting on it."""

    grid_point: GridPointRef
    force_origin: ForceOrigin

    def _key(self) -> tuple:
        return (self.grid_point._key(), self.force_origin._key())

    def __str__(self) -> str:
        return f"{self.force_origin} FORCE AT {self.grid_point}"


class ElementPointKind(_OrderedEnum):
    """The kinds of point within an element."""

    CENTROID = "CENTROID"
    CORNER = "CORNER"
    MIDPOINT = "MIDPOINT"
    ANYWHERE = "ANYWHERE"


@dataclass(frozen=True)
class ElementPoint(_Keyed):
    """A point within an element; corners and midpoints carry a grid point."""

    kind: ElementPointKind
    grid: GridPointRef | None = None

    def __post_init__(self) -> None:
        needs_grid = self.kind in (ElementPointKind.CORNER, ElementPointKind.MIDPOINT)
        if needs_grid != (self.grid is not None):
            raise ValueError("a grid point is required exactly for corners and midpoints")

    def _key(self) -> tuple:
        gid = self.grid.gid if self.grid is not None else -1
        return (self.kind._key(), gid)

    def __str__(self) -> str:
        if self.kind is ElementPointKind.CENTROID:
            return "CENTROID"
        if self.kind is ElementPointKind.ANYWHERE:
            return "ANYWHERE IN THE ELEMENT"
        assert self.grid is not None
        return f"{self.kind.value} AT GRID {self.grid.gid}"


class ElementSide(_OrderedEnum):
    """A side of a plate element."""

    BOTTOM = "BOTTOM"
    TOP = "TOP"

    def opposite(self) -> ElementSide:
        """Return the other side."""
        return ElementSide.TOP if self is ElementSide.BOTTOM else ElementSide.BOTTOM

    def __str__(self) -> str:
        return f"{self.value} SIDE"


@dataclass(frozen=True)
class PointInElement(_Keyed):
    """An element and a point within it."""

    element: ElementRef
    point: ElementPoint

    def _key(self) -> tuple:
        return (self.element._key(), self.point._key())

    def __str__(self) -> str:
        return f"{self.element}, {self.point}"


@dataclass(frozen=True)
class ElementSidedPoint(_Keyed):
    """An element, a point within it and a side."""

    element: ElementRef
    point: ElementPoint
    side: ElementSide

    def flipped(self) -> ElementSidedPoint:
        """Return the same point on the opposite side."""
        return dataclasses.replace(self, side=self.side.opposite())

    def _key(self) -> tuple:
        return (self.element._key(), self.point._key(), self.side._key())

    def __str__(self) -> str:
        return f"{self.element}, {self.point}, {self.side}"


class PlateStressField(_OrderedEnum):
    """The columns of a plate element stress table."""

    FIBRE_DISTANCE = "FIBRE DISTANCE"
    NORMAL_X = "NORMAL-X"
    NORMAL_Y = "NORMAL-Y"
    SHEAR_XY = "SHEAR-XY"
    ANGLE = "ANGLE"
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    VON_MISES = "VON MISES"


class PlateForceField(_OrderedEnum):
    """The columns of a plate element engineering forces table."""

    NORMAL_X = "Nx"
    NORMAL_Y = "Ny"
    NORMAL_XY = "Nxy"
    MOMENT_X = "Mx"
    MOMENT_Y = "My"
    MOMENT_XY = "Mxy"
    TRANSVERSE_SHEAR_X = "Qx"
    TRANSVERSE_SHEAR_Y = "Qy"


class RodForceField(_OrderedEnum):
    """Engineering forces for rod elements."""

    AXIAL_FORCE = "AXIAL FORCE"
    TORQUE = "TORQUE"


class BarEnd(_OrderedEnum):
    """An end of a bar element."""

    END_A = "END-A"
    END_B = "END-B"

    def opposite(self) -> BarEnd:
        """Return the other end."""
        return BarEnd.END_B if self is BarEnd.END_A else BarEnd.END_A


class BarPlane(_OrderedEnum):
    """A plane of a bar element."""

    PLANE_1 = "PLANE 1"
    PLANE_2 = "PLANE 2"


class SingleForce(_OrderedEnum):
    """Generic single-force field."""

    FORCE = "FORCE"


class SingleStress(_OrderedEnum):
    """Generic single-stress field."""

    STRESS = "STRESS"


class SingleStrain(_OrderedEnum):
    """Generic single-strain field."""

    STRAIN = "STRAIN"


class RodStressField(_OrderedEnum):
    """Rod element stress fields."""

    AXIAL = "AXIAL"
    AXIAL_SAFETY_MARGIN = "AXIAL SAFETY MARGIN"
    TORSIONAL = "TORSIONAL"
    TORSIONAL_SAFETY_MARGIN = "TORSIONAL SAFETY MARGIN"


class NormalStressDirection(_OrderedEnum):
    """Type of normal stress."""

    TENSION = "TENSION"
    COMPRESSION = "COMPRESSION"


class RealEigenvalueField(_OrderedEnum):
    """The columns of a real eigenvalue table."""

    EIGENVALUE = "EIGENVALUE"
    RADIANS = "RADIANS"
    CYCLES = "CYCLES"
    GENERALIZED_MASS = "GENERALIZED MASS"
    GENERALIZED_STIFFNESS = "GENERALIZED STIFFNESS"


@dataclass(frozen=True)
class PlateStrainField(_Keyed):
    """A plate strain column, named after the matching stress column."""

    inner: PlateStressField

    def _key(self) -> tuple:
        return self.inner._key()

    def __str__(self) -> str:
        return str(self.inner)


@dataclass(frozen=True)
class RodStrainField(_Keyed):
    """A rod strain column, named after the matching stress column."""

    inner: RodStressField

    def _key(self) -> tuple:
        return self.inner._key()

    def __str__(self) -> str:
        return str(self.inner)


_BAR_FORCE_QUANTITIES = ("BEND-MOMENT", "SHEAR", "AXIAL FORCE", "TORQUE")


@dataclass(frozen=True)
class BarForceField(_Keyed):
    """A column of a bar engineering forces table.

    ``quantity`` is one of "BEND-MOMENT" (with end and plane), "SHEAR"
    (with plane), "AXIAL FORCE" or "TORQUE".
    """

    quantity: str
    end: BarEnd | None = None
    plane: BarPlane | None = None

    def __post_init__(self) -> None:
        if self.quantity not in _BAR_FORCE_QUANTITIES:
            raise ValueError(f'unknown bar force quantity "{self.quantity}"')
        wants_end = self.quantity == "BEND-MOMENT"
        wants_plane = self.quantity in ("BEND-MOMENT", "SHEAR")
        if wants_end != (self.end is not None) or wants_plane != (self.plane is not None):
            raise ValueError(f'bad end/plane combination for "{self.quantity}"')

    def _key(self) -> tuple:
        return (
            _BAR_FORCE_QUANTITIES.index(self.quantity),
            self.end._key() if self.end is not None else (),
            self.plane._key() if self.plane is not None else (),
        )

    def __str__(self) -> str:
        if self.quantity == "BEND-MOMENT":
            return f"BEND-MOMENT {self.end}, {self.plane}"
        if self.quantity == "SHEAR":
            return f"SHEAR {self.plane}"
        return self.quantity


_BAR_STRESS_QUANTITIES = ("RECOVERY POINT", "AXIAL", "MAX", "MIN", "MARGIN OF SAFETY")


@dataclass(frozen=True)
class BarStressField(_Keyed):
    """A column of a bar stress table.

    ``quantity`` is one of "RECOVERY POINT" (with end and point 0-255),
    "AXIAL", "MAX" or "MIN" (with end), or "MARGIN OF SAFETY" (with
    direction).
    """

    quantity: str
    end: BarEnd | None = None
    point: int | None = None
    direction: NormalStressDirection | None = None

    def __post_init__(self) -> None:
        if self.quantity not in _BAR_STRESS_QUANTITIES:
            raise ValueError(f'unknown bar stress quantity "{self.quantity}"')
        wants_end = self.quantity in ("RECOVERY POINT", "MAX", "MIN")
        wants_point = self.quantity == "RECOVERY POINT"
        wants_dir = self.quantity == "MARGIN OF SAFETY"
        if (
            wants_end != (self.end is not None)
            or wants_point != (self.point is not None)
            or wants_dir != (self.direction is not None)
        ):
            raise ValueError(f'bad field combination for "{self.quantity}"')
        if self.point is not None and not 0 <= self.point <= 255:
            raise ValueError(f"recovery point out of range: {self.point}")

    def _key(self) -> tuple:
        return (
            _BAR_STRESS_QUANTITIES.index(self.quantity),
            self.end._key() if self.end is not None else (),
            self.point if self.point is not None else -1,
            self.direction._key() if self.direction is not None else (),
        )

    def __str__(self) -> str:
        if self.quantity == "RECOVERY POINT":
            return f"{self.end}, RECOVERY POINT {self.point}"
        if self.quantity in ("MAX", "MIN"):
            return f"{self.quantity} AT {self.end}"
        if self.quantity == "MARGIN OF SAFETY":
            return f"MARGIN OF SAFETY FOR {self.direction}"
        return "AXIAL"


@dataclass(frozen=True)
class BarStrainField(_Keyed):
    """A bar strain column, named after the matching stress column."""

    inner: BarStressField

    def _key(self) -> tuple:
        return self.inner._key()

    def __str__(self) -> str:
        return str(self.inner)


@dataclass(frozen=True)
class GridPointCsys(_Keyed):
    """A grid point together with a coordinate system."""

    gid: GridPointRef
    cid: CsysRef

    def _key(self) -> tuple:
        return (self.gid._key(), self.cid._key())

    def __str__(self) -> str:
        return f"{self.gid} ON {self.cid}"


@dataclass(frozen=True)
class EigenSolutionMode(_Keyed):
    """A vibration mode of an eigen solution."""

    mode: int

    def _key(self) -> tuple:
        return (self.mode,)

    def __str__(self) -> str:
        return "MODE"


_A, _B = BarEnd.END_A, BarEnd.END_B
_P1, _P2 = BarPlane.PLANE_1, BarPlane.PLANE_2

_BAR_FORCE_FIELDS: tuple[BarForceField, ...] = (
    BarForceField("BEND-MOMENT", _A, _P1),
    BarForceField("BEND-MOMENT", _A, _P2),
    BarForceField("BEND-MOMENT", _B, _P1),
    BarForceField("BEND-MOMENT", _B, _P2),
    BarForceField("SHEAR", plane=_P1),
    BarForceField("SHEAR", plane=_P2),
    BarForceField("AXIAL FORCE"),
    BarForceField("TORQUE"),
)

_BAR_STRESS_FIELDS: tuple[BarStressField, ...] = (
    *(BarStressField("RECOVERY POINT", _A, p) for p in range(1, 5)),
    BarStressField("MAX", _A),
    BarStressField("MIN", _A),
    *(BarStressField("RECOVERY POINT", _B, p) for p in range(1, 5)),
    BarStressField("MAX", _B),
    BarStressField("MIN", _B),
    BarStressField("AXIAL"),
    BarStressField("MARGIN OF SAFETY", direction=NormalStressDirection.TENSION),
    BarStressField("MARGIN OF SAFETY", direction=NormalStressDirection.COMPRESSION),
)


def canonical_cols(field_type: type) -> dict[Any, int]:
    """Map every field of a column type to its position in canonical order."""
    fields: tuple[Any, ...]
    if field_type is BarForceField:
        fields = _BAR_FORCE_FIELDS
    elif field_type is BarStressField:
        fields = _BAR_STRESS_FIELDS
    elif field_type is BarStrainField:
        fields = tuple(BarStrainField(f) for f in _BAR_STRESS_FIELDS)
    elif field_type is PlateStrainField:
        fields = tuple(PlateStrainField(f) for f in PlateStressField)
    elif field_type is RodStrainField:
        fields = tuple(RodStrainField(f) for f in RodStressField)
    elif isinstance(field_type, type) and issubclass(field_type, _OrderedEnum):
        fields = tuple(field_type)
    else:
        raise TypeError(f"{field_type!r} has no canonical column order")
    return {field: i for i, field in enumerate(fields)}


# Index types in their canonical cross-type order, with their names.
_INDEX_TYPES: tuple[tuple[type, str], ...] = (
    (GridPointRef, "GRID POINT ID"),
    (ElementRef, "ELEMENT ID"),
    (PointInElement, "POINT IN ELEMENT"),
    (GridPointForceOrigin, "GRID POINT FORCE ORIGIN"),
    (ElementSidedPoint, "ELEMENT, POINT AND SIDE"),
    (SingleForce, "FORCE"),
    (SingleStress, "STRESS"),
    (SingleStrain, "STRAIN"),
    (BarForceField, "BAR FORCE FIELD"),
    (BarStressField, "BAR STRESS FIELD"),
    (BarStrainField, "BAR STRAIN FIELD"),
    (RodForceField, "ROD FORCE FIELD"),
    (RodStressField, "ROD STRESS FIELD"),
    (RodStrainField, "ROD STRAIN FIELD"),
    (PlateForceField, "2D ELEM FORCE FIELD"),
    (PlateStressField, "PLATE STRESS FIELD"),
    (PlateStrainField, "PLATE STRAIN FIELD"),
    (GridPointCsys, "GRID POINT COORD SYS"),
    (RealEigenvalueField, "EIGENVALUE FIELDS"),
    (EigenSolutionMode, "EIGEN SOLUTION MODE"),
)

_INDEX_NAMES: dict[type, str] = dict(_INDEX_TYPES)
_INDEX_POSITIONS: dict[type, int] = {t: i for i, (t, _) in enumerate(_INDEX_TYPES)}


def index_type_name(index: object) -> str:
    """Return the all-caps name of the type of an index."""
    try:
        return _INDEX_NAMES[type(index)]
    except KeyError:
        raise TypeError(f"{type(index).__name__} is not an index type") from None


def index_sort_key(index: object) -> tuple:
    """Return a key ordering indexes of any type: by type, then by value."""
    try:
        position = _INDEX_POSITIONS[type(index)]
    except KeyError:
        raise TypeError(f"{type(index).__name__} is not an index type") from None
    return (position, index._key())  # type: ignore[attr-defined]


def _point_grid(point: ElementPoint) -> GridPointRef | None:
    if point.kind in (ElementPointKind.CORNER, ElementPointKind.MIDPOINT):
        return point.grid
    return None


def grid_point_id(index: object) -> GridPointRef | None:
    """Return the grid point an index refers to, if it has one."""
    if isinstance(index, GridPointRef):
        return index
    if isinstance(index, (PointInElement, ElementSidedPoint)):
        return _point_grid(index.point)
    if isinstance(index, GridPointForceOrigin):
        return index.grid_point
    if isinstance(index, GridPointCsys):
        return index.gid
    return None


def element_id(index: object) -> ElementRef | None:
    """Return the element an index refers to, if it has one."""
    if isinstance(index, ElementRef):
        return index
    if isinstance(index, (PointInElement, ElementSidedPoint)):
        return index.element
    if isinstance(index, GridPointForceOrigin):
        return index.force_origin.elem
    return None
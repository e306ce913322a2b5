"""
Unit-cell geometry for the FCC metal and the rock-salt ionic crystals.

`build(structure)` returns the ordered list of atoms/ions making up one
conventional cell. The lists are plain data (no renderer types), so the same
output drives the PyVista scene, exports and tests.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple
import numpy as np

from .species import CL, CU, MG, NA, O, Species


# Edge length of the displayed cell (scene units)
UNIT_CELL_SIZE = 1.5


# ------------------ Data models ------------------
class Point3(NamedTuple):
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class AtomInstance:
    """
One drawable member of the unit cell: a position and the species sitting there.
    """

    position: Point3
    species: Species

    @property
    def label(self) -> str:
        return self.species.label

    @property
    def color(self) -> str:
        return self.species.color

    @property
    def radius(self) -> float:
        return self.species.radius


class StructureType(str, Enum):
    """Structures the viewer knows how to build."""

    COPPER = "Cu"
    SODIUM_CHLORIDE = "NaCl"
    MAGNESIUM_OXIDE = "MgO"

    @property
    def display_name(self) -> str:
        return _TITLES[self]

    @classmethod
    def parse(cls, text) -> "StructureType":
        """
Resolve a value ("NaCl"), member name ("sodium_chloride") or display name (case-insensitive).
        """

        if isinstance(text, cls):
            return text
        key = str(text).strip().lower()
        for st in cls:
            if key in (st.value.lower(), st.name.lower(), st.display_name.lower()):
                return st
        choices = ", ".join(st.value for st in cls)
        raise ValueError(f"Unknown structure type: {text!r} (expected one of {choices})")


_TITLES = {
    StructureType.COPPER: "Copper (FCC)",
    StructureType.SODIUM_CHLORIDE: "Sodium Chloride (Rock Salt)",
    StructureType.MAGNESIUM_OXIDE: "Magnesium Oxide (Rock Salt)",
}

# Chooser / keyboard order
STRUCTURE_ORDER: Tuple[StructureType, ...] = (
    StructureType.COPPER,
    StructureType.SODIUM_CHLORIDE,
    StructureType.MAGNESIUM_OXIDE,
)

# structure -> (species on the FCC points, species on the interweaving points)
COMPOSITION: Dict[StructureType, Tuple[Species, Optional[Species]]] = {
    StructureType.COPPER: (CU, None),
    StructureType.SODIUM_CHLORIDE: (CL, NA),
    StructureType.MAGNESIUM_OXIDE: (O, MG),
}


# ------------------ Point tables ------------------
def fcc_points(a: float = UNIT_CELL_SIZE) -> List[Point3]:
    """
Return the 8 cube corners followed by the 6 face centers of a cell with edge a.
    """

    h = a / 2
    corners = [
        (0, 0, 0), (a, 0, 0), (0, a, 0), (0, 0, a),
        (a, a, 0), (a, 0, a), (0, a, a), (a, a, a),
    ]
    faces = [
        (h, h, 0), (h, 0, h), (0, h, h),
        (h, a, h), (a, h, h), (h, h, a),
    ]
    return [Point3(float(x), float(y), float(z)) for x, y, z in corners + faces]


def interweaving_points(a: float = UNIT_CELL_SIZE) -> List[Point3]:
    """
Return the second rock-salt sublattice: the 12 edge midpoints and the body center.

The set is the FCC point set shifted by (a/2, 0, 0) and folded back into the
cell, listed bottom layer (z=0), middle layer (z=a/2), top layer (z=a).
    """

    h = a / 2
    pts = [
        (h, 0, 0), (a, h, 0), (0, h, 0), (h, a, 0),
        (a, 0, h), (0, 0, h), (0, a, h), (a, a, h), (h, h, h),
        (h, 0, a), (a, h, a), (0, h, a), (h, a, a),
    ]
    return [Point3(float(x), float(y), float(z)) for x, y, z in pts]


# ------------------ Builder ------------------
def build(structure) -> List[AtomInstance]:
    """
    Build the atoms of one unit cell for `structure`.

    FCC points come first, interweaving points (rock salt only) after, each in
    table order. Unknown structures give an empty list.
    """
    try:
        primary, secondary = COMPOSITION[structure]
    except (KeyError, TypeError):
        return []

    atoms = [AtomInstance(p, primary) for p in fcc_points()]
    if secondary is not None:
        atoms.extend(AtomInstance(p, secondary) for p in interweaving_points())
    return atoms


def positions_array(instances: List[AtomInstance]) -> np.ndarray:
    """
Stack instance positions into an (N, 3) float array.
    """

    if not instances:
        return np.empty((0, 3), dtype=float)
    return np.array([inst.position for inst in instances], dtype=float)


def species_of(instances: List[AtomInstance]) -> List[Species]:
    """Distinct species in first-appearance order."""
    seen: List[Species] = []
    for inst in instances:
        if inst.species not in seen:
            seen.append(inst.species)
    return seen

"""
Crystal unit-cell viewer: FCC copper and the NaCl / MgO rock-salt lattices.
"""

from .species import CL, CU, MG, NA, O, SPECIES, Species
from .lattice import (
    COMPOSITION,
    STRUCTURE_ORDER,
    UNIT_CELL_SIZE,
    AtomInstance,
    Point3,
    StructureType,
    build,
    fcc_points,
    interweaving_points,
)
from .controller import ViewerController, ViewerState, atom_clicked, selection_text, structure_changed
from .config import Config, dump_config, load_config

__version__ = "0.1.0"

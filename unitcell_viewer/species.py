"""
Chemical species shown in the viewer (display label, color, render radius).
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Species:
    """
Dataclass for one atom/ion kind (visual color and sphere radius).
    """

    symbol: str
    label: str
    color: str
    radius: float


# Anions and the metal use the large sphere, cations the small one
CU = Species(symbol="Cu", label="Cu", color="orange", radius=0.2)
CL = Species(symbol="Cl", label="Cl⁻", color="lightblue", radius=0.2)
NA = Species(symbol="Na", label="Na⁺", color="grey", radius=0.1)
O = Species(symbol="O", label="O²⁻", color="white", radius=0.2)
MG = Species(symbol="Mg", label="Mg²⁺", color="red", radius=0.1)

SPECIES: Dict[str, Species] = {sp.symbol: sp for sp in (CU, CL, NA, O, MG)}


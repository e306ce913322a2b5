"""
Runtime settings for the viewer and their YAML/JSON I/O.
"""

from dataclasses import dataclass, asdict, fields
from typing import Optional, Tuple
import json
import os
from pathlib import Path

import yaml

from .lattice import StructureType


CONFIG_ENV_VAR = "UNITCELL_CONFIG"
DEFAULT_CONFIG_NAMES = ("unitcell.yaml", "unitcell.yml", "unitcell.json")


def guess_default_config() -> Optional[str]:
    """
Search the env var, then the working directory, for a default config file path.
    """

    env = os.getenv(CONFIG_ENV_VAR)
    if env and Path(env).exists():
        return env

    for name in DEFAULT_CONFIG_NAMES:
        cand = Path.cwd() / name
        if cand.exists():
            return str(cand)
    return None


# ------------------ Data model ------------------
@dataclass
class Config:

    """
Dataclass for all runtime settings (initial structure, scene, lights, picking).
    """

    # Structure shown at startup: "Cu" | "NaCl" | "MgO" (display names work too)
    structure: str = "Cu"

    # Scene
    background: str = "black"
    show_axes: bool = True
    show_unit_cell: bool = False
    cell_color: str = "white"
    window_size: Tuple[int, int] = (1024, 768)

    # Sphere tessellation
    sphere_theta: int = 32
    sphere_phi: int = 32

    # Lighting: ambient term on atom materials + one positional scene light
    ambient: float = 0.5
    light_position: Tuple[float, float, float] = (5.0, 5.0, 5.0)
    light_intensity: float = 1.0

    # Interaction
    enable_picking: bool = True
    left_clicking: bool = True
    # hit if the picked point is within radius * pick_tolerance of an atom center
    pick_tolerance: float = 1.2
    pick_instruction: str = "Click an atom to identify it  |  1/2/3 or n/p: switch structure"
    show_chooser: bool = True
    label_font_size: int = 14

    @property
    def structure_type(self) -> StructureType:
        return StructureType.parse(self.structure)


_TUPLE_FIELDS = {"window_size", "light_position"}


# ------------------ Config I/O ------------------
def config_from_dict(raw: Optional[dict]) -> Config:
    """
Build a Config from a plain mapping; unknown keys and bad structure names raise ValueError.
    """

    raw = dict(raw or {})
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")

    for key in _TUPLE_FIELDS & set(raw):
        raw[key] = tuple(raw[key])

    cfg = Config(**raw)
    # fail early on a typo instead of when the viewer starts
    cfg.structure = cfg.structure_type.value
    return cfg


def load_config(path: Optional[str]) -> Config:
    """
Load configuration from YAML/JSON (chosen by file extension).
    """

    if path is None:
        return Config()
    ext = os.path.splitext(path)[1].lower()
    with open(path, "r", encoding="utf-8") as f:
        if ext in (".yaml", ".yml"):
            raw = yaml.safe_load(f)
        else:
            raw = json.load(f)
    return config_from_dict(raw)


def config_to_dict(cfg: Config) -> dict:
    d = asdict(cfg)
    for key in _TUPLE_FIELDS:
        d[key] = list(d[key])
    return d


def dump_config(cfg: Config, path: str):
    """
Write the current configuration to a YAML or JSON file.
    """

    d = config_to_dict(cfg)
    if path.lower().endswith((".yaml", ".yml")):
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(d, f, sort_keys=False, allow_unicode=True)
    else:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(d, f, indent=2, ensure_ascii=False)

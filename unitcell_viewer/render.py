"""
PyVista front end for the unit-cell viewer.

Maps each AtomInstance to a sphere actor, wires picking / the structure chooser /
keyboard shortcuts to a ViewerController and shows the selected species label.
Mesh export helpers live here too since they share the sphere geometry.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import os

import numpy as np
import pyvista as pv
from pyvista.plotting.colors import Color

from .config import Config
from .controller import ViewerController
from .lattice import (
    STRUCTURE_ORDER,
    UNIT_CELL_SIZE,
    AtomInstance,
    StructureType,
    positions_array,
    species_of,
)
from .species import Species


ATOM_ACTOR_PREFIX = "atom-"
LABEL_ACTOR_NAME = "_selection"
HELP_ACTOR_NAME = "_pick_help"


# ------------------ Geometry builders ------------------
def atom_mesh(instance: AtomInstance, theta: int = 32, phi: int = 32) -> pv.PolyData:
    """
Build the sphere for a single atom, centered on its position.
    """

    return pv.Sphere(radius=instance.radius, center=tuple(instance.position),
                     theta_resolution=theta, phi_resolution=phi)


def glyph_spheres(points_world: np.ndarray, radius: float, theta: int, phi: int) -> pv.PolyData:
    """
Stamp one sphere of the given radius on every point; a single species per call.
    """

    if points_world.size == 0:
        return pv.PolyData()
    sphere = pv.Sphere(radius=radius, theta_resolution=theta, phi_resolution=phi)
    cloud = pv.PolyData(points_world)
    return cloud.glyph(geom=sphere, scale=False, orient=False)


def species_meshes(instances: List[AtomInstance], theta: int = 32,
                   phi: int = 32) -> List[Tuple[Species, pv.PolyData]]:
    """Merge the atoms of each species into one mesh, species in first-appearance order."""
    out = []
    for sp in species_of(instances):
        pts = positions_array([inst for inst in instances if inst.species == sp])
        out.append((sp, glyph_spheres(pts, sp.radius, theta, phi)))
    return out


def merged_mesh(instances: List[AtomInstance], theta: int = 32, phi: int = 32) -> pv.PolyData:
    """
All atoms as one PolyData; per-point "radius" and "species" arrays survive the glyph.
    """

    if not instances:
        return pv.PolyData()
    cloud = pv.PolyData(positions_array(instances))
    cloud["radius"] = np.array([inst.radius for inst in instances], dtype=float)
    symbols = [sp.symbol for sp in species_of(instances)]
    cloud["species"] = np.array([symbols.index(inst.species.symbol) for inst in instances], dtype=np.int32)
    unit = pv.Sphere(radius=1.0, theta_resolution=theta, phi_resolution=phi)
    return cloud.glyph(geom=unit, scale="radius", orient=False)


def cell_edges(a: float = UNIT_CELL_SIZE) -> List[Tuple[Tuple[float, float, float], Tuple[float, float, float]]]:
    """The 12 edges of the cube [0, a]^3 as (start, end) pairs."""
    return [
        ((0, 0, 0), (a, 0, 0)), ((0, a, 0), (a, a, 0)), ((0, 0, a), (a, 0, a)), ((0, a, a), (a, a, a)),  # x edges
        ((0, 0, 0), (0, a, 0)), ((a, 0, 0), (a, a, 0)), ((0, 0, a), (0, a, a)), ((a, 0, a), (a, a, a)),  # y edges
        ((0, 0, 0), (0, 0, a)), ((a, 0, 0), (a, 0, a)), ((0, a, 0), (0, a, a)), ((a, a, 0), (a, a, a)),  # z edges
    ]


# ------------------ Export helpers ------------------
def ensure_dir(d: str):
    """
Create the export directory on demand (empty path means the cwd).
    """

    if d and not os.path.isdir(d):
        os.makedirs(d, exist_ok=True)


def save_mesh(mesh: pv.PolyData, path: str):
    """
Write a mesh unless it is empty; .vtp/.ply/.obj/.stl chosen by extension.
    """

    if mesh is None or not mesh.n_points:
        return
    mesh.save(path)  # PyVista picks format from extension


def export_all(instances: List[AtomInstance], export_dir: Optional[str],
               export_merged: Optional[str], theta: int = 32, phi: int = 32) -> List[str]:
    """
Export one mesh per species and/or a merged file; returns the paths written.
    """
    written: List[str] = []
    if not export_dir and not export_merged:
        return written
    meshes = species_meshes(instances, theta, phi)
    if export_dir:
        ensure_dir(export_dir)
        for sp, mesh in meshes:
            if mesh.n_points:
                path = os.path.join(export_dir, f"{sp.symbol}.vtp")
                save_mesh(mesh, path)
                written.append(path)
    if export_merged:
        merged = merged_mesh(instances, theta, phi)
        if merged.n_points:
            ensure_dir(os.path.dirname(export_merged))
            save_mesh(merged, export_merged)
            written.append(export_merged)
    return written


# ------------------ Picking ------------------
def world_point_from_pick(picked) -> Optional[np.ndarray]:
    """
Extract a world-space point from the common PyVista pick payloads (array, mesh, picker).
    """

    arr = np.asarray(picked) if isinstance(picked, (list, tuple, np.ndarray)) else None
    if arr is not None and arr.shape == (3,):
        return arr.astype(float)
    if hasattr(picked, "points"):
        pts = np.asarray(picked.points)
        if pts.size >= 3:
            return pts.reshape(-1, 3)[0].astype(float)
    if hasattr(picked, "GetPickPosition"):
        return np.array(picked.GetPickPosition(), dtype=float)
    return None


def pick_instance(instances: Sequence[AtomInstance], world,
                  tolerance: float = 1.2) -> Optional[AtomInstance]:
    """
    Resolve a picked world point to the atom under it.

    The picker reports a point on a sphere surface, so an atom is hit when the
    point lies within `radius * tolerance` of its center. Among hits the one
    with the smallest gap to its own surface wins.
    """
    if not instances or world is None:
        return None
    centers = positions_array(list(instances))
    radii = np.array([inst.radius for inst in instances], dtype=float)
    d = np.linalg.norm(centers - np.asarray(world, dtype=float)[None, :], axis=1)
    hit = d <= radii * float(tolerance)
    if not np.any(hit):
        return None
    gap = np.where(hit, np.abs(d - radii), np.inf)
    return instances[int(np.argmin(gap))]


# ------------------ Viewer ------------------
class LatticeViewer:
    """
    One PyVista window bound to a ViewerController.

    The controller is the only state; this class redraws atoms on structure
    changes and the label on selection changes.
    """

    def __init__(self, controller: ViewerController, cfg: Optional[Config] = None,
                 off_screen: bool = False):
        self.controller = controller
        self.cfg = cfg or Config()
        self.plotter = pv.Plotter(off_screen=off_screen, lighting="none",
                                  window_size=list(self.cfg.window_size))
        self._atom_names: List[str] = []
        self._chooser = None
        # widgets fire their callbacks once on creation; ignore those
        self._ready = False
        self._unsubscribe = controller.subscribe(self._on_state_change)

        self._setup_scene()
        self.draw_atoms()
        self.update_label()
        self._ready = True

    # --- scene ---
    def _setup_scene(self):
        cfg = self.cfg
        pl = self.plotter
        pl.set_background(cfg.background)

        light = pv.Light(position=tuple(cfg.light_position), intensity=float(cfg.light_intensity),
                         light_type="scene light")
        light.positional = True
        pl.add_light(light)

        if cfg.show_unit_cell:
            for p0, p1 in cell_edges(UNIT_CELL_SIZE):
                pl.add_mesh(pv.Line(p0, p1), color=cfg.cell_color, opacity=0.65,
                            line_width=2, pickable=False)

        if cfg.show_axes:
            pl.add_axes()  # corner XYZ triad

        # Camera: orbit around the cell center
        center = np.full(3, 0.5 * UNIT_CELL_SIZE)
        dist = float(np.linalg.norm(np.full(3, UNIT_CELL_SIZE))) * 2.2
        pl.camera.SetPosition(center[0], center[1], center[2] + dist)
        pl.camera.SetFocalPoint(*center)
        pl.camera.SetViewUp(0, 1, 0)
        pl.camera.Azimuth(25)
        pl.camera.Elevation(20)
        pl.enable_trackball_style()

        if cfg.show_chooser:
            self._add_chooser()
        self._add_key_shortcuts()
        if cfg.enable_picking:
            self.enable_picker()

    def draw_atoms(self):
        """Replace every atom actor with the current structure's atoms."""
        pl = self.plotter
        for name in self._atom_names:
            pl.remove_actor(name, render=False)
        self._atom_names = []

        for i, inst in enumerate(self.controller.instances):
            name = f"{ATOM_ACTOR_PREFIX}{i}"
            pl.add_mesh(atom_mesh(inst, self.cfg.sphere_theta, self.cfg.sphere_phi),
                        color=inst.color, smooth_shading=True, specular=0.25,
                        ambient=self.cfg.ambient, name=name, render=False)
            self._atom_names.append(name)

    def update_label(self):
        """Show 'Selected Ion: <label>' in the upper right, or hide it."""
        pl = self.plotter
        text = self.controller.label_text
        if text is None:
            pl.remove_actor(LABEL_ACTOR_NAME, render=False)
            return
        actor = pl.add_text(text, position="upper_right", font_size=self.cfg.label_font_size,
                            color="white", name=LABEL_ACTOR_NAME)
        tp = actor.GetTextProperty()
        r, g, b = Color("black").float_rgb
        tp.SetBackgroundColor(r, g, b)
        tp.SetBackgroundOpacity(0.7)

    def _on_state_change(self, controller: ViewerController, reason: str):
        if reason == "structure":
            self.draw_atoms()
            self._sync_chooser()
        self.update_label()
        self.plotter.render()

    # --- structure chooser ---
    def _add_chooser(self):
        titles = [st.display_name for st in STRUCTURE_ORDER]
        by_title: Dict[str, StructureType] = {st.display_name: st for st in STRUCTURE_ORDER}

        def _on_choose(title):
            st = by_title.get(title)
            if st is not None and self._ready:
                self.controller.change_structure(st)

        self._chooser = self.plotter.add_text_slider_widget(
            _on_choose, data=titles, value=float(STRUCTURE_ORDER.index(self.controller.structure)),
            pointa=(0.05, 0.9), pointb=(0.45, 0.9), style="modern",
        )

    def _sync_chooser(self):
        """Move the chooser after a keyboard switch so both agree."""
        if self._chooser is None:
            return
        rep = self._chooser.GetRepresentation()
        st = self.controller.structure
        rep.SetValue(float(STRUCTURE_ORDER.index(st)))
        rep.SetTitleText(st.display_name)

    def _add_key_shortcuts(self):
        for i, st in enumerate(STRUCTURE_ORDER, start=1):
            self.plotter.add_key_event(str(i), lambda st=st: self.controller.change_structure(st))
        self.plotter.add_key_event("n", lambda: self.controller.cycle_structure(1))
        self.plotter.add_key_event("p", lambda: self.controller.cycle_structure(-1))

    # --- picking ---
    def enable_picker(self):
        """Click picking; a hit on an atom selects its species, a miss changes nothing."""
        cfg = self.cfg
        self.plotter.add_text(cfg.pick_instruction, position="lower_left",
                              font_size=10, color="white", name=HELP_ACTOR_NAME)

        self.plotter.enable_point_picking(
            callback=self.handle_pick,
            use_picker=True,
            show_message=False,   # we show our own instruction text
            show_point=False,
            left_clicking=cfg.left_clicking,
        )

    def handle_pick(self, picked, *args) -> Optional[AtomInstance]:
        """Point-picking callback; returns the atom that was clicked, if any."""
        world = world_point_from_pick(picked)
        if world is None:
            print(f"[pick] unknown payload type: {type(picked)}")
            return None
        inst = pick_instance(self.controller.instances, world, self.cfg.pick_tolerance)
        if inst is None:
            print(f"[pick] world={world}, no atom")
            return None
        print(f"[pick] world={world}, atom={inst.label} at {tuple(inst.position)}")
        self.controller.click(inst)
        return inst

    # --- lifecycle ---
    def show(self, screenshot: Optional[str] = None):
        if screenshot:
            os.makedirs(os.path.dirname(screenshot) or ".", exist_ok=True)
            self.plotter.show(screenshot=screenshot, auto_close=True)
        else:
            self.plotter.show()
        self._unsubscribe()

    def close(self):
        self._unsubscribe()
        self.plotter.close()

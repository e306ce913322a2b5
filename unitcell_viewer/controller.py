"""
Viewer state machine: current structure type and the selected species label.

Transitions are pure functions over `ViewerState`; `ViewerController` owns one
state value for the lifetime of a viewer and notifies listeners (the renderer)
after each transition.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from .lattice import STRUCTURE_ORDER, AtomInstance, StructureType, build


SELECTION_PREFIX = "Selected Ion: "


# ------------------ State & transitions ------------------
@dataclass(frozen=True)
class ViewerState:
    structure: StructureType = StructureType.COPPER
    selected_label: Optional[str] = None


def structure_changed(state: ViewerState, new: StructureType) -> ViewerState:
    """
Switch structure; the selection is always cleared, even for the same structure.
    """

    return replace(state, structure=new, selected_label=None)


def atom_clicked(state: ViewerState, instance: AtomInstance) -> ViewerState:
    """
Select the clicked atom's species label; structure is left as is.
    """

    return replace(state, selected_label=instance.species.label)


def selection_text(state: ViewerState) -> Optional[str]:
    if state.selected_label is None:
        return None
    return f"{SELECTION_PREFIX}{state.selected_label}"


# ------------------ Controller ------------------
Listener = Callable[["ViewerController", str], None]


class ViewerController:
    """
    Holds the single ViewerState of a viewer and applies UI events to it.

    Listeners are called synchronously, in registration order, with the
    controller and a reason: "structure" after a structure change (atoms must
    be rebuilt) or "selection" after a click (only the label changes).
    """

    def __init__(self, structure: StructureType = StructureType.COPPER):
        self._state = ViewerState(structure=structure)
        self._cache: Dict[StructureType, List[AtomInstance]] = {}
        self._listeners: List[Listener] = []

    @property
    def state(self) -> ViewerState:
        return self._state

    @property
    def structure(self) -> StructureType:
        return self._state.structure

    @property
    def selected_label(self) -> Optional[str]:
        return self._state.selected_label

    @property
    def label_text(self) -> Optional[str]:
        return selection_text(self._state)

    @property
    def instances(self) -> List[AtomInstance]:
        """Atoms of the current structure (built once per structure type)."""
        key = self._state.structure
        if key not in self._cache:
            self._cache[key] = build(key)
        return list(self._cache[key])

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        self._listeners.append(callback)

        def _unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _notify(self, reason: str):
        for cb in list(self._listeners):
            cb(self, reason)

    def change_structure(self, new: StructureType) -> ViewerState:
        self._state = structure_changed(self._state, new)
        self._notify("structure")
        return self._state

    def click(self, instance: AtomInstance) -> ViewerState:
        self._state = atom_clicked(self._state, instance)
        self._notify("selection")
        return self._state

    def cycle_structure(self, step: int = 1) -> ViewerState:
        """Move to the next (step=1) or previous (step=-1) structure in chooser order."""
        i = STRUCTURE_ORDER.index(self._state.structure) if self._state.structure in STRUCTURE_ORDER else 0
        return self.change_structure(STRUCTURE_ORDER[(i + step) % len(STRUCTURE_ORDER)])

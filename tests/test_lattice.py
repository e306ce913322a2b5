import numpy as np
import pytest

from unitcell_viewer.lattice import (
    COMPOSITION,
    STRUCTURE_ORDER,
    UNIT_CELL_SIZE,
    AtomInstance,
    Point3,
    StructureType,
    build,
    fcc_points,
    interweaving_points,
    positions_array,
    species_of,
)
from unitcell_viewer.species import CL, CU, MG, NA, O, SPECIES


A = UNIT_CELL_SIZE
H = A / 2

P = [
    (0, 0, 0), (A, 0, 0), (0, A, 0), (0, 0, A),
    (A, A, 0), (A, 0, A), (0, A, A), (A, A, A),
    (H, H, 0), (H, 0, H), (0, H, H), (H, A, H), (A, H, H), (H, H, A),
]
Q = [
    (H, 0, 0), (A, H, 0), (0, H, 0), (H, A, 0),
    (A, 0, H), (0, 0, H), (0, A, H), (A, A, H), (H, H, H),
    (H, 0, A), (A, H, A), (0, H, A), (H, A, A),
]


# --- point tables ---


def test_fcc_points_match_table():
    pts = fcc_points()
    assert len(pts) == 14
    assert np.allclose(np.array(pts), np.array(P))


def test_interweaving_points_match_table():
    pts = interweaving_points()
    assert len(pts) == 13
    assert np.allclose(np.array(pts), np.array(Q))


def test_point_sets_are_disjoint():
    assert not set(fcc_points()) & set(interweaving_points())


def test_interweaving_is_fcc_shifted_half_edge_along_x():
    # shift P by (a/2, 0, 0), wrap into [0, a) and compare with Q wrapped the same way
    shifted = np.mod(np.array(fcc_points()) + [H, 0, 0], A)
    q = np.mod(np.array(interweaving_points()), A)
    as_set = lambda arr: {tuple(np.round(p, 9)) for p in arr}
    assert as_set(shifted) == as_set(q)


def test_point_tables_scale_with_edge():
    assert fcc_points(2.0)[7] == Point3(2.0, 2.0, 2.0)
    assert interweaving_points(2.0)[8] == Point3(1.0, 1.0, 1.0)


def test_points_are_immutable_floats():
    p = fcc_points()[1]
    assert isinstance(p.x, float)
    with pytest.raises(AttributeError):
        p.x = 3.0


# --- build ---


def test_build_copper():
    atoms = build(StructureType.COPPER)
    assert len(atoms) == 14
    assert all(a.species == CU for a in atoms)
    assert [tuple(a.position) for a in atoms] == [tuple(map(float, p)) for p in P]


@pytest.mark.parametrize(
    "structure, anion, cation",
    [
        (StructureType.SODIUM_CHLORIDE, CL, NA),
        (StructureType.MAGNESIUM_OXIDE, O, MG),
    ],
)
def test_build_rock_salt(structure, anion, cation):
    atoms = build(structure)
    assert len(atoms) == 27
    assert all(a.species == anion for a in atoms[:14])
    assert all(a.species == cation for a in atoms[14:])
    assert np.allclose(positions_array(atoms[:14]), np.array(P))
    assert np.allclose(positions_array(atoms[14:]), np.array(Q))


def test_rock_salt_radii_and_labels():
    atoms = build(StructureType.SODIUM_CHLORIDE)
    assert atoms[0].radius == 0.2 and atoms[0].label == "Cl⁻"
    assert atoms[14].radius == 0.1 and atoms[14].label == "Na⁺"
    mgo = build(StructureType.MAGNESIUM_OXIDE)
    assert mgo[0].label == "O²⁻" and mgo[-1].label == "Mg²⁺"


def test_build_is_repeatable():
    for st in StructureType:
        first, second = build(st), build(st)
        assert first == second
        assert first is not second


def test_build_accepts_plain_values():
    assert build("Cu") == build(StructureType.COPPER)
    assert build("NaCl") == build(StructureType.SODIUM_CHLORIDE)


@pytest.mark.parametrize("bad", ["Fe", "", None, 42, ["Cu"]])
def test_build_unknown_is_empty(bad):
    assert build(bad) == []


def test_composition_covers_every_structure():
    assert set(COMPOSITION) == set(StructureType)
    assert set(STRUCTURE_ORDER) == set(StructureType)


def test_atom_instance_is_frozen():
    atom = build(StructureType.COPPER)[0]
    assert isinstance(atom, AtomInstance)
    with pytest.raises(AttributeError):
        atom.species = NA


# --- helpers ---


def test_positions_array_shape():
    assert positions_array(build(StructureType.MAGNESIUM_OXIDE)).shape == (27, 3)
    assert positions_array([]).shape == (0, 3)


def test_species_of_keeps_first_appearance_order():
    assert species_of(build(StructureType.SODIUM_CHLORIDE)) == [CL, NA]
    assert species_of(build(StructureType.COPPER)) == [CU]


# --- StructureType / species ---


class TestStructureTypeParse:
    def test_value(self):
        assert StructureType.parse("MgO") is StructureType.MAGNESIUM_OXIDE

    def test_member_name(self):
        assert StructureType.parse("sodium_chloride") is StructureType.SODIUM_CHLORIDE

    def test_display_name(self):
        assert StructureType.parse("copper (fcc)") is StructureType.COPPER

    def test_member_passthrough(self):
        assert StructureType.parse(StructureType.COPPER) is StructureType.COPPER

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown structure type"):
            StructureType.parse("Fe")


def test_display_names():
    assert [st.display_name for st in STRUCTURE_ORDER] == [
        "Copper (FCC)",
        "Sodium Chloride (Rock Salt)",
        "Magnesium Oxide (Rock Salt)",
    ]


def test_species_registry():
    assert set(SPECIES) == {"Cu", "Cl", "Na", "O", "Mg"}
    assert SPECIES["Mg"] is MG

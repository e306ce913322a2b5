import json

import pytest
import yaml

from unitcell_viewer.config import (
    CONFIG_ENV_VAR,
    Config,
    config_from_dict,
    dump_config,
    guess_default_config,
    load_config,
)
from unitcell_viewer.lattice import StructureType


def test_defaults():
    cfg = Config()
    assert cfg.structure_type is StructureType.COPPER
    assert cfg.sphere_theta == 32 and cfg.sphere_phi == 32
    assert cfg.ambient == 0.5
    assert cfg.light_position == (5.0, 5.0, 5.0)
    assert cfg.light_intensity == 1.0


def test_load_none_gives_defaults():
    assert load_config(None) == Config()


def test_load_yaml(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text(
        "structure: Sodium Chloride (Rock Salt)\n"
        "background: white\n"
        "light_position: [1, 2, 3]\n",
        encoding="utf-8",
    )
    cfg = load_config(str(path))
    assert cfg.structure == "NaCl"
    assert cfg.background == "white"
    assert cfg.light_position == (1, 2, 3)


def test_load_json(tmp_path):
    path = tmp_path / "viewer.json"
    path.write_text(json.dumps({"structure": "mgo", "enable_picking": False}), encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.structure_type is StructureType.MAGNESIUM_OXIDE
    assert cfg.enable_picking is False


def test_empty_yaml_is_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == Config()


def test_unknown_key_raises():
    with pytest.raises(ValueError, match="lattice"):
        config_from_dict({"lattice": "bcc"})


def test_bad_structure_raises():
    with pytest.raises(ValueError, match="Unknown structure type"):
        config_from_dict({"structure": "Fe"})


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_dump_yaml_then_load(tmp_path):
    cfg = Config(structure="MgO", show_unit_cell=True, window_size=(800, 600))
    path = tmp_path / "out.yaml"
    dump_config(cfg, str(path))

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert raw["window_size"] == [800, 600]
    assert load_config(str(path)) == cfg


def test_dump_json_keeps_unicode(tmp_path):
    cfg = Config(pick_instruction="Click Na⁺")
    path = tmp_path / "out.json"
    dump_config(cfg, str(path))
    assert "Na⁺" in path.read_text(encoding="utf-8")


class TestGuessDefaultConfig:
    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text("{}", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert guess_default_config() == str(path)

    def test_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "unitcell.yml").write_text("structure: Cu\n", encoding="utf-8")
        assert guess_default_config() == str(tmp_path / "unitcell.yml")

    def test_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        assert guess_default_config() is None


def test_example_file_loads():
    from pathlib import Path

    example = Path(__file__).resolve().parent.parent / "unitcell.example.yaml"
    cfg = load_config(str(example))
    assert cfg.structure_type is StructureType.SODIUM_CHLORIDE
    assert cfg.show_unit_cell is True

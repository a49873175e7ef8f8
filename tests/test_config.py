import pytest

from roomforge.config import GeneratorConfig, build_config, load_config, parse_args
from roomforge.errors import ConfigurationError
from roomforge.geometry import Vec3


def test_defaults_match_reference_room():
    cfg = GeneratorConfig()
    assert (cfg.room_length, cfg.room_width, cfg.room_height) == (5, 5, 5)
    assert (cfg.max_platforms, cfg.vertical_levels) == (10, 5)
    assert (cfg.max_horizontal_jump, cfg.min_radius, cfg.max_attempts) == (5.0, 3.0, 100)
    assert cfg.coin_amount == 0
    assert cfg.legacy_floor_classification and cfg.legacy_z_sampling
    assert cfg.cell_vector == Vec3(1, 1, 1)


def test_load_yaml_with_generator_section(tmp_path):
    path = tmp_path / "room.yaml"
    path.write_text(
        "generator:\n"
        "  seed: dungeon-1\n"
        "  room_length: 8\n"
        "  cell_size: [2, 1, 2]\n"
        "  floor_traps: 3\n",
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.seed == "dungeon-1"
    assert cfg.room_length == 8
    assert cfg.cell_size == (2.0, 1.0, 2.0)
    assert cfg.floor_traps == 3


def test_load_yaml_bare_fields(tmp_path):
    path = tmp_path / "room.yml"
    path.write_text("max_platforms: 4\nvertical_levels: 2\n", encoding="utf-8")
    cfg = load_config(path)
    assert (cfg.max_platforms, cfg.vertical_levels) == (4, 2)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_directory_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "text",
    [
        "room_length: 0\n",
        "max_attempts: -1\n",
        "floor_trapz: 3\n",
        "- just\n- a list\n",
        "seed: -5\n",
    ],
)
def test_invalid_yaml_is_configuration_error(tmp_path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_from_env(monkeypatch):
    monkeypatch.setenv("ROOMFORGE_SEED", "42")
    monkeypatch.setenv("ROOMFORGE_LENGTH", "9")
    monkeypatch.setenv("ROOMFORGE_CELL_SIZE", "2, 1, 2")
    monkeypatch.setenv("ROOMFORGE_FLOOR_COINS", "6")

    cfg = GeneratorConfig.from_env()

    assert cfg.seed == 42
    assert cfg.room_length == 9
    assert cfg.cell_size == (2.0, 1.0, 2.0)
    assert cfg.floor_coins == 6


def test_from_env_invalid_value():
    with pytest.raises(ConfigurationError):
        GeneratorConfig.from_env({"ROOMFORGE_LEVELS": "zero"})


def test_flags_override_yaml(tmp_path):
    path = tmp_path / "room.yaml"
    path.write_text("room_length: 8\nroom_width: 6\n", encoding="utf-8")

    args = parse_args(["--config", str(path), "--width", "7", "--seed", "17", "--fix-z-sampling"])
    cfg = build_config(args)

    assert cfg.room_length == 8
    assert cfg.room_width == 7
    assert cfg.seed == 17
    assert cfg.legacy_z_sampling is False
    assert cfg.legacy_floor_classification is True


def test_triple_flag():
    cfg = build_config(parse_args(["--platform-size", "2,0.5,2"]))
    assert cfg.platform_vector == Vec3(2, 0.5, 2)

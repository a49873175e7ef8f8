import json

import pytest

from roomforge.config import GeneratorConfig
from roomforge.diagnostics import DoorNotPlaced, PlacementSkipped
from roomforge.errors import ConfigurationError, InsufficientSpaceError
from roomforge.events import EventBus, EventType
from roomforge.generator import Generator
from roomforge.geometry import Vec3
from roomforge.interfaces import ObjectKind
from roomforge.scene import InMemoryScene


def run(config, bus=None):
    cfg = GeneratorConfig.from_mapping(config)
    scene = InMemoryScene.for_sizes(cfg.cell_vector, cfg.platform_vector)
    return scene, Generator.for_scene(scene, bus).run(cfg)


def test_same_seed_same_room(roomy_config):
    roomy_config.update(floor_traps=4, floor_coins=3, platform_traps=1, platform_coins=1)

    _, a = run(roomy_config)
    _, b = run(roomy_config)

    assert a.signature() == b.signature()
    assert a.placements() == b.placements()
    assert a.floor_slots.used == b.floor_slots.used
    assert a.platform_slots.used == b.platform_slots.used


def test_different_seed_changes_room(roomy_config):
    _, a = run(dict(roomy_config, seed="seed-A"))
    _, b = run(dict(roomy_config, seed="seed-B"))
    assert a.signature() != b.signature()


def test_full_pipeline_counts(roomy_config):
    roomy_config.update(floor_traps=4, floor_coins=3, platform_traps=1, platform_coins=1)
    scene, result = run(roomy_config)

    assert len(result.walls) == 14 * 11 * 14 - 12 * 10 * 12
    assert len(result.floor_cells) == 12 * 12

    floor_kinds = [c.kind for c in result.decorated_floor_cells()]
    assert floor_kinds.count(ObjectKind.TRAP) == 4
    assert floor_kinds.count(ObjectKind.COIN) == 3
    assert len(result.floor_slots) == 7

    platform_kinds = [p.kind for p in result.platforms]
    assert platform_kinds.count(ObjectKind.TRAP) == 1
    assert platform_kinds.count(ObjectKind.COIN) == 1
    assert platform_kinds.count(ObjectKind.KEY) == 1
    assert result.key is not None and result.key.kind == ObjectKind.KEY

    if result.door is not None:
        assert result.door.kind == ObjectKind.DOOR
        assert result.door.position.y >= 10 - 10 / 3
    else:
        assert any(isinstance(d, DoorNotPlaced) for d in result.diagnostics)

    # The scene only holds what the result describes
    counts = result.counts()
    for kind in ObjectKind:
        assert scene.count(kind) == counts[kind.value]
    assert len(scene) == len(result.walls) + len(result.platforms)


def test_floor_decorations_visible_through_wall_list(roomy_config):
    roomy_config.update(floor_traps=5)
    _, result = run(roomy_config)

    wall_traps = [c for c in result.walls if c.kind == ObjectKind.TRAP]
    assert len(wall_traps) == 5
    assert all(c.is_floor for c in wall_traps)


def test_ledgers_never_exceed_candidates(roomy_config):
    roomy_config.update(floor_traps=100, floor_coins=44)
    _, result = run(roomy_config)

    assert len(result.floor_slots) == len(result.floor_cells) == 144
    assert len(result.platform_slots) <= len(result.platforms)


def test_too_many_floor_traps_is_configuration_error(roomy_config):
    roomy_config.update(floor_traps=145)
    with pytest.raises(ConfigurationError):
        run(roomy_config)


@pytest.mark.parametrize(
    "overrides",
    [{"floor_traps": 145}, {"floor_traps": 140, "floor_coins": 5}, {"platform_traps": 50}],
)
def test_over_request_decorates_nothing(roomy_config, overrides):
    cfg = GeneratorConfig.from_mapping(dict(roomy_config, **overrides))
    scene = InMemoryScene.for_sizes(cfg.cell_vector, cfg.platform_vector)

    with pytest.raises(ConfigurationError):
        Generator.for_scene(scene).run(cfg)
    assert scene.count(ObjectKind.DOOR) == 0
    assert scene.count(ObjectKind.KEY) == 0
    assert scene.count(ObjectKind.TRAP) == 0
    assert scene.count(ObjectKind.COIN) == 0
    assert scene.count(ObjectKind.PLATFORM) > 0


def test_check_decoration_counts():
    cfg = GeneratorConfig(floor_traps=3, floor_coins=2, platform_traps=1, platform_coins=1)
    Generator.check_decoration_counts(cfg, floor_count=5, platform_count=2)
    with pytest.raises(ConfigurationError):
        Generator.check_decoration_counts(cfg, floor_count=4, platform_count=2)
    with pytest.raises(ConfigurationError):
        Generator.check_decoration_counts(cfg, floor_count=5, platform_count=1)


def test_impossible_geometry_raises_and_reports_skips():
    bus = EventBus()
    skipped = []
    bus.subscribe(EventType.PLACEMENT_SKIPPED, skipped.append)
    config = {"seed": 1, "max_attempts": 1, "min_radius": 6.0, "max_horizontal_jump": 5.0}

    with pytest.raises(InsufficientSpaceError):
        run(config, bus)
    assert len(skipped) == 8


def test_fatal_error_keeps_earlier_placements():
    scene = InMemoryScene()
    config = GeneratorConfig(seed=1, platform_size=None)

    with pytest.raises(ConfigurationError):
        Generator.for_scene(scene).run(config)
    assert scene.count(ObjectKind.WALL) == 7 * 6 * 7 - 5 * 5 * 5


def test_invalid_mapping_is_configuration_error():
    with pytest.raises(ConfigurationError):
        Generator.for_scene(InMemoryScene()).run({"room_length": 0})


def test_completion_event_and_diagnostics(roomy_config):
    bus = EventBus()
    done = []
    bus.subscribe(EventType.GENERATION_COMPLETED, done.append)
    _, result = run(roomy_config, bus)

    assert len(done) == 1
    assert done[0].payload["signature"] == result.signature()
    assert done[0].payload["counts"]["platform"] + done[0].payload["counts"]["key"] >= 1
    assert all(isinstance(d, (PlacementSkipped, DoorNotPlaced)) for d in result.diagnostics)


def test_summary_is_json_serializable(roomy_config):
    roomy_config.update(coin_amount=25, floor_coins=2)
    _, result = run(roomy_config)

    data = json.loads(json.dumps(result.to_dict()))
    assert data["coin_amount"] == 25
    assert data["signature"] == result.signature()
    assert len(data["decorated_floor_cells"]) == 2
    assert data["bounds"]["outer"] == [14, 11, 14]


def test_separate_oracle_and_sink():
    scene = InMemoryScene.for_sizes(Vec3(1, 1, 1), Vec3(1, 0.25, 1))
    result = Generator(scene, scene).run(GeneratorConfig(seed=9, room_length=10, room_width=10, room_height=8))
    assert result.platforms

import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from roomforge.geometry import Vec3  # noqa: E402
from roomforge.scene import InMemoryScene  # noqa: E402


# A room large enough that every platform placement succeeds in practice
ROOMY = {
    "seed": 1234,
    "cell_size": (1.0, 1.0, 1.0),
    "platform_size": (1.0, 0.25, 1.0),
    "room_length": 12,
    "room_width": 12,
    "room_height": 10,
    "max_platforms": 10,
    "vertical_levels": 5,
    "max_horizontal_jump": 5.0,
    "min_radius": 3.0,
    "max_attempts": 100,
}


@pytest.fixture
def roomy_config():
    return dict(ROOMY)


@pytest.fixture
def scene():
    return InMemoryScene.for_sizes(Vec3(1, 1, 1), Vec3(1, 0.25, 1))

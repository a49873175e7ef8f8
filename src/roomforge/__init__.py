from .bounds import RoomBounds
from .config import GeneratorConfig, load_config
from .decoration import DecorationAllocator, SlotLedger
from .diagnostics import DoorNotPlaced, KeyNotPlaced, PlacementSkipped
from .errors import ConfigurationError, InsufficientSpaceError, RoomForgeError
from .events import Event, EventBus, EventType
from .generator import GenerationResult, Generator
from .geometry import Vec3
from .interfaces import ObjectKind, PlacementSink, SpatialOracle
from .platforms import Platform, PlatformPlacer
from .rng import RNGManager
from .room import Cell, RoomBuilder
from .scene import InMemoryScene

__all__ = [
    "Cell",
    "ConfigurationError",
    "DecorationAllocator",
    "DoorNotPlaced",
    "Event",
    "EventBus",
    "EventType",
    "GenerationResult",
    "Generator",
    "GeneratorConfig",
    "InMemoryScene",
    "InsufficientSpaceError",
    "KeyNotPlaced",
    "ObjectKind",
    "PlacementSink",
    "PlacementSkipped",
    "Platform",
    "PlatformPlacer",
    "RNGManager",
    "RoomBounds",
    "RoomBuilder",
    "RoomForgeError",
    "SlotLedger",
    "SpatialOracle",
    "Vec3",
    "load_config",
]

__version__ = "0.1.0"

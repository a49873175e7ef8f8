class RoomForgeError(Exception):
    """Base error for room generation failures."""


class ConfigurationError(RoomForgeError):
    """Raised when the generator is given an unusable configuration.

    Covers missing or non-positive footprints, invalid room dimensions and
    decoration requests that exceed the available slots.
    """


class InsufficientSpaceError(RoomForgeError):
    """Raised when the room geometry cannot hold a single platform."""

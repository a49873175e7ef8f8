from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .geometry import Vec3

logger = logging.getLogger(__name__)

Triple = Tuple[float, float, float]

# Environment variable -> config field
ENV_FIELDS: Dict[str, str] = {
    "ROOMFORGE_SEED": "seed",
    "ROOMFORGE_CELL_SIZE": "cell_size",
    "ROOMFORGE_PLATFORM_SIZE": "platform_size",
    "ROOMFORGE_LENGTH": "room_length",
    "ROOMFORGE_WIDTH": "room_width",
    "ROOMFORGE_HEIGHT": "room_height",
    "ROOMFORGE_MAX_PLATFORMS": "max_platforms",
    "ROOMFORGE_LEVELS": "vertical_levels",
    "ROOMFORGE_MAX_JUMP": "max_horizontal_jump",
    "ROOMFORGE_MIN_RADIUS": "min_radius",
    "ROOMFORGE_MAX_ATTEMPTS": "max_attempts",
    "ROOMFORGE_FLOOR_TRAPS": "floor_traps",
    "ROOMFORGE_PLATFORM_TRAPS": "platform_traps",
    "ROOMFORGE_PLATFORM_COINS": "platform_coins",
    "ROOMFORGE_FLOOR_COINS": "floor_coins",
    "ROOMFORGE_COIN_AMOUNT": "coin_amount",
}


class GeneratorConfig(BaseModel):
    """Everything one generation run needs.

    ``cell_size`` and ``platform_size`` stand in for the wall and platform
    assets: leaving either unset (None) is a ConfigurationError at generation
    time. ``coin_amount`` is accepted and reported but does not influence
    placement yet.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    seed: Optional[Union[int, str]] = Field(default=None, description="Master seed; None picks a random one")
    cell_size: Optional[Triple] = Field(default=(1.0, 1.0, 1.0), description="Wall/floor tile footprint")
    platform_size: Optional[Triple] = Field(default=(1.0, 0.25, 1.0), description="Platform footprint")

    room_length: int = Field(default=5, ge=1)
    room_width: int = Field(default=5, ge=1)
    room_height: int = Field(default=5, ge=1)

    max_platforms: int = Field(default=10, ge=1)
    vertical_levels: int = Field(default=5, ge=1)
    max_horizontal_jump: float = Field(default=5.0, gt=0)
    min_radius: float = Field(default=3.0, ge=0)
    max_attempts: int = Field(default=100, ge=1)

    floor_traps: int = Field(default=0, ge=0)
    platform_traps: int = Field(default=0, ge=0)
    platform_coins: int = Field(default=0, ge=0)
    floor_coins: int = Field(default=0, ge=0)
    coin_amount: int = Field(default=0, ge=0, description="Reserved for collectible counts")

    legacy_floor_classification: bool = Field(
        default=True, description="Compare lattice indices against world-space bounds when tagging floor cells"
    )
    legacy_z_sampling: bool = Field(
        default=True, description="Centre the Z sample on the cursor's X coordinate"
    )

    @field_validator("seed", mode="before")
    @classmethod
    def numeric_seed_as_int(cls, v: Any) -> Any:
        # "42" from the environment or the CLI must seed like 42
        if isinstance(v, str) and v.strip().isdigit():
            v = int(v.strip())
        if isinstance(v, int) and v < 0:
            raise ValueError("seed must be non-negative")
        return v

    @field_validator("cell_size", "platform_size", mode="before")
    @classmethod
    def split_triple(cls, v: Any) -> Any:
        if isinstance(v, str):
            parts = [p for p in v.replace(" ", "").split(",") if p]
            return tuple(float(p) for p in parts)
        if isinstance(v, Vec3):
            return v.as_tuple()
        return v

    @property
    def cell_vector(self) -> Optional[Vec3]:
        return Vec3.of(self.cell_size) if self.cell_size is not None else None

    @property
    def platform_vector(self) -> Optional[Vec3]:
        return Vec3.of(self.platform_size) if self.platform_size is not None else None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GeneratorConfig":
        """Validate a plain mapping, reporting problems as ConfigurationError."""
        try:
            return cls(**dict(data))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid generator configuration: {e}") from e

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GeneratorConfig":
        """Build a config from ROOMFORGE_* variables; unset ones keep defaults."""
        env = os.environ if environ is None else environ
        data = {field: env[key] for key, field in ENV_FIELDS.items() if env.get(key, "") != ""}
        if data:
            logger.debug("Config from environment: %s", data)
        return cls.from_mapping(data)


def load_config(path: Union[str, "os.PathLike[str]"]) -> GeneratorConfig:
    """Load a GeneratorConfig from YAML.

    Accepts either bare fields or a top-level ``generator:`` mapping.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Generator config not found: {path}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read generator config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Generator config {path} must be a mapping, got {type(data).__name__}")
    if isinstance(data.get("generator"), dict):
        data = data["generator"]
    logger.debug("Loaded generator config from %s", path)
    return GeneratorConfig.from_mapping(data)


def _triple_arg(value: str) -> Triple:
    try:
        x, y, z = (float(p) for p in value.split(","))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected X,Y,Z, got {value!r}") from e
    return (x, y, z)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="roomforge",
        description="Generate a walled room with jump-reachable platforms and print a JSON summary.",
    )
    parser.add_argument("--config", type=Path, help="YAML config file (flags override its values)")
    parser.add_argument("--seed", type=str, help="Master seed (int, hex '0x..' or any string)")
    parser.add_argument("--cell-size", type=_triple_arg, dest="cell_size", help="Tile footprint X,Y,Z")
    parser.add_argument("--platform-size", type=_triple_arg, dest="platform_size", help="Platform footprint X,Y,Z")
    parser.add_argument("--length", type=int, dest="room_length")
    parser.add_argument("--width", type=int, dest="room_width")
    parser.add_argument("--height", type=int, dest="room_height")
    parser.add_argument("--max-platforms", type=int, dest="max_platforms")
    parser.add_argument("--levels", type=int, dest="vertical_levels")
    parser.add_argument("--max-jump", type=float, dest="max_horizontal_jump")
    parser.add_argument("--min-radius", type=float, dest="min_radius")
    parser.add_argument("--max-attempts", type=int, dest="max_attempts")
    parser.add_argument("--floor-traps", type=int, dest="floor_traps")
    parser.add_argument("--platform-traps", type=int, dest="platform_traps")
    parser.add_argument("--platform-coins", type=int, dest="platform_coins")
    parser.add_argument("--floor-coins", type=int, dest="floor_coins")
    parser.add_argument("--coin-amount", type=int, dest="coin_amount")
    parser.add_argument(
        "--world-floor-classification",
        action="store_false",
        dest="legacy_floor_classification",
        default=None,
        help="Tag floor cells by world position instead of lattice index",
    )
    parser.add_argument(
        "--fix-z-sampling",
        action="store_false",
        dest="legacy_z_sampling",
        default=None,
        help="Centre the Z sample on the cursor's Z coordinate",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


OVERRIDABLE: List[str] = [name for name in GeneratorConfig.model_fields]


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the optional YAML file with explicit command line flags."""
    data: Dict[str, Any] = {}
    if getattr(args, "config", None) is not None:
        data.update(load_config(args.config).model_dump())
    for name in OVERRIDABLE:
        value = getattr(args, name, None)
        if value is not None:
            data[name] = value
    return GeneratorConfig.from_mapping(data)

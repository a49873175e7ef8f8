from __future__ import annotations

import hashlib
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]

# Bump when the phase-seed derivation changes; old seeds then map to new rooms
DERIVATION_VERSION = 1


def seed_to_bytes(seed: Union[int, str, bytes]) -> bytes:
    """Canonical byte form of a master seed.

    ``255``, ``"0xff"`` and ``b"\\xff"`` all map to the same bytes, so a seed
    copied from ``GenerationResult.seed_hex`` reproduces the run.
    """
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, str):
        text = seed.strip()
        if text.lower().startswith("0x"):
            try:
                return seed_to_bytes(int(text, 16))
            except ValueError:
                pass
        return text.encode("utf-8")
    if isinstance(seed, int):
        if seed < 0:
            raise ValueError("Seed must be non-negative, got %d" % seed)
        return seed.to_bytes((seed.bit_length() + 7) // 8 or 1, "big")
    raise TypeError("Unsupported seed type: %r" % (type(seed),))


@dataclass(frozen=True)
class RNGManager:
    """Deterministic RNG streams for one generation run.

    Each generation phase draws from its own ``random.Random`` keyed by the
    phase name, so adding draws to one phase (say, extra decoration) never
    perturbs the platform layout.

        rngm = RNGManager(seed)
        platform_rng = rngm.context_rng("platforms")
        decoration_rng = rngm.context_rng("decorations")

    A seed of None picks a random master seed and logs it.
    """

    master_seed: Seed

    def __post_init__(self) -> None:
        if self.master_seed is None:
            raw = secrets.token_bytes(16)
            logger.info("No seed provided; generated random seed: %s", raw.hex())
        else:
            raw = seed_to_bytes(self.master_seed)
            logger.debug("Using seed: %r", self.master_seed)
        object.__setattr__(self, "_master_seed_bytes", raw)

    def derive_seed(self, phase: str) -> int:
        """64-bit seed for a generation phase such as "platforms"."""
        h = hashlib.blake2b(digest_size=8, person=b"roomforge-v%d" % DERIVATION_VERSION)
        h.update(self._master_seed_bytes)
        h.update(b"\x00")
        h.update(phase.encode("utf-8"))
        seed_int = int.from_bytes(h.digest(), "big")
        logger.debug("Derived seed for phase=%s -> %d", phase, seed_int)
        return seed_int

    def context_rng(self, phase: str) -> random.Random:
        return random.Random(self.derive_seed(phase))

    def get_master_seed_hex(self) -> str:
        return self._master_seed_bytes.hex()

from __future__ import annotations

import json
import logging
import sys

from .config import build_config, parse_args
from .errors import RoomForgeError
from .generator import Generator
from .logging_config import configure_logging
from .scene import InMemoryScene

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    try:
        config = build_config(args)
        scene = InMemoryScene.for_sizes(config.cell_vector, config.platform_vector)
        result = Generator.for_scene(scene).run(config)
    except (RoomForgeError, FileNotFoundError) as e:
        logger.error("Generation failed: %s", e)
        print(f"roomforge: error: {e}", file=sys.stderr)
        return 2
    # Print JSON summary so it can be diffed across runs
    print(json.dumps(result.to_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

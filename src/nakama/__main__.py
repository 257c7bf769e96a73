"""Entry point: ``python -m nakama``."""

from __future__ import annotations

import logging
import sys

logger = logging.getLogger("nakama")


def main() -> int:
    try:
        from nakama.clients import disc
    except ValueError as exc:
        # Raised by the config layer when required settings are missing.
        logger.error("Invalid configuration: %s", exc)
        return 1

    return disc.run()


if __name__ == "__main__":
    sys.exit(main())

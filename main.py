"""
Aura Coach — Entry Point.

Single entry point: `python main.py <command>` runs the terminal front end.
"""

import logging

from aura.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from aura.cli import main

if __name__ == "__main__":
    main()

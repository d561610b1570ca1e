"""Entry point for ``python -m movie_harvester``."""

import sys

from movie_harvester.cli import main

if __name__ == "__main__":
    sys.exit(main())

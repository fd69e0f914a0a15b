"""Entry point for ``python -m env_loader``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

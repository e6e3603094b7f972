"""Entry point for ``python -m fleet_console``."""

import sys

from fleet_console.cli import main

if __name__ == "__main__":
    sys.exit(main())

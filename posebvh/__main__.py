"""Allow running the CLI with ``python -m posebvh``."""

import sys

from posebvh.cli import main

if __name__ == "__main__":
    sys.exit(main())

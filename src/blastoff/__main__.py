"""Package entry point for ``python -m blastoff``."""

import sys
from blastoff.cli.main import main

if __name__ == "__main__":
    sys.exit(main())

"""Allow running as ``python -m yamlmerge``."""

import sys

from yamlmerge.cli import main

if __name__ == "__main__":
    sys.exit(main())

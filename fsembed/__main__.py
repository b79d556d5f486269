"""Allow ``python -m fsembed``."""

import sys

from fsembed.cli import main

if __name__ == "__main__":
    sys.exit(main())

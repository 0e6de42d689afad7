"""Entry point for taskstore when run as a module.

This allows the package to be run with: python -m taskstore
"""

import sys

from taskstore.cli import main

if __name__ == "__main__":
    sys.exit(main())

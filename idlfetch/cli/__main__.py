"""
idlfetch CLI entry point.

Usage:
    python -m idlfetch.cli fetch <program> [--cluster devnet]
    python -m idlfetch.cli address <program>
    python -m idlfetch.cli decode <file>
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())

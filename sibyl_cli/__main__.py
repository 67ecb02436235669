"""
Module execution entry point.

Allows running with: python -m sibyl_cli
"""

import sys
from sibyl_cli.main import main

if __name__ == "__main__":
    sys.exit(main())

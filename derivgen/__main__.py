"""
Main entry point for running the package as a module.

Usage:
    python -m derivgen instructions -i instructions.json
    python -m derivgen process -i instructions.json -t product photos/kitty.jpg
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())

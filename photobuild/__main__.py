"""
Main entry point for running the package as a module.

Usage:
    python -m photobuild build --source src/photos --output _site
    python -m photobuild cache --cache .cache/photos
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""App Catalog - Module entry point."""
import sys

from server.cli import main

if __name__ == "__main__":
    sys.exit(main())

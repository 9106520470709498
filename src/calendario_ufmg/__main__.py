"""Allows running the scraper via ``python -m calendario_ufmg``."""

import sys

from calendario_ufmg.cli import main

if __name__ == "__main__":
    sys.exit(main())

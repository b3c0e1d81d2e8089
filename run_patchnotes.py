#!/usr/bin/env python3
"""
Entry point for fetching the latest SkyBlock patch notes.

Usage:
    python run_patchnotes.py

Fetches the notes on a background worker, waits for the result and prints
it the same way `skyblock-patchnotes show` does. Exits with status 1 when
the fallback result was returned.
"""

import logging
import sys
from pathlib import Path

# Add src to path to import the package
# This allows running the script from repository root
sys.path.insert(0, str(Path(__file__).parent / "src"))

from skyblock_patchnotes.cli import render_result
from skyblock_patchnotes.scraper import fetch_latest_patch_notes


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    result = fetch_latest_patch_notes().result()
    print(render_result(result))
    return 1 if result.is_fallback else 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted")
        sys.exit(130)

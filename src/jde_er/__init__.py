"""JDE event rule decompiler.

This module provides utilities for locating the package and project directories.
"""

from pathlib import Path

THIS_DIR = Path(__file__).parent
PROJECT_DIR = (THIS_DIR / "../..").resolve()

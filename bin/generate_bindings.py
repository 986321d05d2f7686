#!/usr/bin/env python3
"""
Native module binding generator

Runs crabgen on a project checkout without installing the package.

Usage:
    python bin/generate_bindings.py path/to/project
    python bin/generate_bindings.py path/to/project --schema schemas/NativeCalculator.json
"""

import sys
from pathlib import Path

# Add parent directory to path so the crabgen package can be found
sys.path.insert(0, str(Path(__file__).parent.parent))

from crabgen.cli import main


if __name__ == "__main__":
    sys.exit(main())

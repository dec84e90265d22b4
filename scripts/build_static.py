#!/usr/bin/env python3
"""Build static/data/static-data.json from the live API.

Usage:
    python3 scripts/build_static.py [--output PATH] [--base-url URL]
"""

from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from snapshot import main

if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Convenience entrypoint.

Usage:
  python tools/run_simulation.py --replicates 2000 --rule james_stein --out-dir out

This delegates to stein_shrinkage.cli (also installed as `stein-shrinkage`).
"""
from __future__ import annotations

from stein_shrinkage.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

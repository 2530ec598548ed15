#!/usr/bin/env python3
"""
RUN_TWISTED_BEAM: Static Analysis of the Clamped Twisted Beam
=============================================================

Solves the four MacNeal-Harder load cases (thick and thin section, load in
the Y and Z direction) with T3 shell facets and prints the computed tip
deflection as a percentage of the reference.

Run with:
    python demos/run_twisted_beam.py
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flexstruct.logging_config import setup_logging
from flexstruct.benchmarks import twisted_beam


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def main():
    setup_logging()
    print_header("TWISTED CANTILEVER BEAM (MacNeal-Harder)")
    nL, nW = 48, 8
    print(f"  Mesh: {nL} x {nW} cells, {2 * nL * nW} triangles")

    results = [twisted_beam.solve(case, nL, nW) for case in twisted_beam.CASES]

    print()
    print(f"  {'Case':<20} {'Computed':>14} {'Reference':>14} {'Ratio':>9}")
    print("  " + "-" * 59)
    for r in results:
        print(f"  {r.case.name:<20} {r.deflection:>14.6e} {r.case.reference:>14.6e} "
              f"{r.percent:>8.2f}%")

    return results


if __name__ == "__main__":
    main()

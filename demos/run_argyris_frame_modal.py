#!/usr/bin/env python3
"""
RUN_ARGYRIS_FRAME_MODAL: Fundamental Frequency of a Prestressed Frame
=====================================================================

Sweeps the loading factor of the Argyris L-frame over the ranges of the
reference study and reports where the fundamental frequency vanishes,
next to the linearized buckling factors.

Run with:
    python demos/run_argyris_frame_modal.py
    python demos/run_argyris_frame_modal.py --points 50 --csv sweep.csv
"""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flexstruct.logging_config import setup_logging
from flexstruct.benchmarks import argyris_frame


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description='Argyris frame: frequency vs loading factor')
    parser.add_argument('--n', type=int, default=8,
                        help='Elements per member (default: 8)')
    parser.add_argument('--points', type=int, default=400,
                        help='Loading factors per range (default: 400)')
    parser.add_argument('--csv', type=str, default=None,
                        help='Write the sweep to this CSV file')
    args = parser.parse_args()

    setup_logging()
    print_header("ARGYRIS FRAME: FREQUENCY UNDER PRESTRESS")

    model = argyris_frame.build(args.n)
    positive, negative = argyris_frame.buckling_factors(model)
    df = argyris_frame.sweep(model, argyris_frame.reference_load_factors(args.points),
                             show_progress=True)

    f0 = float(df.loc[np.isclose(df['load_factor'], 0.0), 'frequency_hz'].iloc[0])
    print(f"\n  Fundamental frequency, unloaded:  {f0:.4f} Hz")
    print(f"  Critical loading factor (+):      {positive[0] if positive.size else float('nan'):.1f}")
    print(f"  Critical loading factor (-):      {negative[0] if negative.size else float('nan'):.1f}")

    buckled = df[df['frequency_hz'] == 0.0]['load_factor']
    if len(buckled):
        print(f"  Zero frequency reached between {buckled.min():.1f} and {buckled.max():.1f}")
    print("\n  Reference sweep ranges: 0 .. 68000 and -109000 .. 0")

    if args.csv:
        df.to_csv(args.csv, index=False)
        print(f"\n  Sweep written to {args.csv}")

    return df


if __name__ == "__main__":
    main()

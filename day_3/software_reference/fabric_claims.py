#!/usr/bin/env python3
"""
Software Reference for the Fabric Claims puzzle (both parts).

Part one: total area covered by two or more claims.
Part two: identifier of the only claim that overlaps no other claim.

Usage:
    python -m software_reference.fabric_claims <input_file> [--method dense|sweep] [--verbose]
"""

import sys

from software_reference.claims import parse_claims
from software_reference.fabric import fabric_extent, overlapping_area, overlapping_area_sweep
from software_reference.finder import NonOverlapFinder


METHODS = ('dense', 'sweep')


def solve(claims, method='dense'):
    """
    Solve both parts for a list of claims.

    Args:
        claims: Claims in input order
        method: 'dense' (grid accumulator, pairwise search) or
                'sweep' (coordinate compression, active-set search)

    Returns:
        tuple: (area, claim, finder) where claim is None when no claim is
               free of overlaps
    """
    if method not in METHODS:
        raise ValueError(f"Unknown method: {method}")

    finder = NonOverlapFinder(claims)

    if method == 'dense':
        area = overlapping_area(claims)
        claim = finder.find()
    else:
        area = overlapping_area_sweep(claims)
        claim = finder.find_sweep()

    return area, claim, finder


def main(argv=None):
    """Command-line interface for the fabric claims solver."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Find overlapping fabric area and the non-overlapping claim'
    )
    parser.add_argument('input_file', help='Input file with one claim per line')
    parser.add_argument('--method', choices=METHODS, default='dense',
                        help='Overlap algorithm (default: dense)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print statistics')
    args = parser.parse_args(argv)

    with open(args.input_file) as f:
        input_text = f.read()

    claims, skipped = parse_claims(input_text)

    if args.verbose:
        print(f"Processing {len(claims)} claims ({skipped} lines skipped)", file=sys.stderr)

    area, claim, finder = solve(claims, args.method)

    print(f"overlapping area: {area}")

    if args.verbose:
        width, height = fabric_extent(claims)
        stats = finder.get_statistics()
        print("\nStatistics:", file=sys.stderr)
        print(f"  Method: {args.method}", file=sys.stderr)
        print(f"  Claims: {stats['claims']}", file=sys.stderr)
        print(f"  Fabric extent: {width}x{height}", file=sys.stderr)
        print(f"  Cells claimed: {sum(c.rectangle.area for c in claims)}", file=sys.stderr)
        print(f"  Rectangles tested: {stats['rectangles_tested']}", file=sys.stderr)

    if claim is None:
        print("Error: no non-overlapping claim found", file=sys.stderr)
        return 1

    print(f"non-overlapping claim: {claim.id}")

    return 0


if __name__ == '__main__':
    sys.exit(main())

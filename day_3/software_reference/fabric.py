"""
Fabric Overlap - Part One: Area Claimed More Than Once

Counts the grid cells covered by two or more claims.

Two implementations with the same result:
    - Dense grid: one counter per cell inside the bounding extent, every
      claim increments the cells it covers. Mirrors the RTL FabricOverlap.
    - Sweep line: coordinate compression over x boundaries, y events per
      slab. Memory bounded by the number of claims instead of the grid size.
"""

import sys
from typing import List, Sequence, Tuple

from software_reference.claims import Claim, read_input


def fabric_extent(claims: Sequence[Claim]) -> Tuple[int, int]:
    """
    Compute the bounding grid size of all claims.

    Returns:
        tuple: (width, height) as the maximum x end and y end, (0, 0) if
               there are no claims
    """
    width = 0
    height = 0
    for claim in claims:
        width = max(width, claim.rectangle.x.end)
        height = max(height, claim.rectangle.y.end)
    return width, height


def accumulate_fabric(claims: Sequence[Claim]) -> Tuple[List[int], int, int]:
    """
    Rasterize every claim into a dense counter grid.

    Cell (x, y) lives at offset x + width * y.

    Returns:
        tuple: (fabric, width, height)

    Time Complexity: O(width * height + total claim area)
    """
    width, height = fabric_extent(claims)
    fabric = [0] * (width * height)

    for claim in claims:
        for x, y in claim.rectangle.cells():
            fabric[x + width * y] += 1

    return fabric, width, height


def overlapping_area(claims: Sequence[Claim]) -> int:
    """Count cells covered by more than one claim using the dense grid."""
    fabric, _, _ = accumulate_fabric(claims)
    return sum(1 for num_claims in fabric if num_claims > 1)


def _multiply_covered_length(events):
    """
    Length of the y axis covered at depth >= 2.

    Args:
        events: List of (y, delta) tuples, +1 on enter and -1 on exit
    """
    events.sort()

    depth = 0
    length = 0
    prev_y = 0

    for y, delta in events:
        if depth >= 2:
            length += y - prev_y
        depth += delta
        prev_y = y

    return length


def overlapping_area_sweep(claims: Sequence[Claim]) -> int:
    """
    Count cells covered by more than one claim using a sweep line.

    Algorithm:
        1. Collect the distinct x boundaries of all claims
        2. For each slab [left, right) between consecutive boundaries,
           gather the y ranges of claims spanning the whole slab
        3. Measure the y length covered by at least two of them
        4. Accumulate slab width * covered length

    Time Complexity: O(n^2 log n) where n is the number of claims
    Space Complexity: O(n)
    """
    boundaries = sorted({
        bound
        for claim in claims
        for bound in (claim.rectangle.x.start, claim.rectangle.x.end)
    })

    total = 0
    for left, right in zip(boundaries, boundaries[1:]):
        events = []
        for claim in claims:
            x_range = claim.rectangle.x
            y_range = claim.rectangle.y
            if x_range.start <= left and right <= x_range.end and len(y_range) > 0:
                events.append((y_range.start, 1))
                events.append((y_range.end, -1))

        if len(events) >= 4:
            total += (right - left) * _multiply_covered_length(events)

    return total


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m software_reference.fabric <input_file>")
        sys.exit(1)

    claims = read_input(sys.argv[1])

    print(f"overlapping area: {overlapping_area(claims)}")

"""
Non-Overlap Finder - Part Two: The Claim Nobody Else Touches

Finds the first claim (in input order) whose rectangle does not overlap the
rectangle of any claim with a different identifier.

Claims sharing an identifier are treated as the same claim and never
disqualify each other. Correct inputs have unique identifiers.
"""

import heapq
import sys
from typing import Optional, Sequence

from software_reference.claims import Claim, read_input


class NonOverlapFinder:
    """Software reference for the NonOverlapFinder RTL module."""

    def __init__(self, claims: Sequence[Claim]):
        self.claims = list(claims)
        self.rectangles_tested = 0

    def _conflicts(self, claim: Claim, other: Claim) -> bool:
        self.rectangles_tested += 1
        return claim.id != other.id and claim.rectangle.overlaps(other.rectangle)

    def find(self) -> Optional[Claim]:
        """
        Pairwise search, same loop order as the RTL FSM.

        Returns:
            The lone claim, or None if every claim overlaps another one

        Time Complexity: O(n^2)
        """
        self.rectangles_tested = 0

        for claim in self.claims:
            if not any(self._conflicts(claim, other) for other in self.claims):
                return claim

        return None

    def find_sweep(self) -> Optional[Claim]:
        """
        Sweep-line search with an active set ordered by x end.

        Algorithm:
            1. Visit claims sorted by x start
            2. Drop active claims whose x range ended at or before the
               current x start
            3. Test the current claim against the remaining active claims
               and mark both sides of every conflict
            4. Return the first claim in input order that was never marked

        Time Complexity: O(n log n + k) where k is the number of
        x-overlapping pairs
        """
        self.rectangles_tested = 0

        order = sorted(range(len(self.claims)), key=lambda i: self.claims[i].rectangle.x.start)
        active = []  # heap of (x_end, index)
        conflicted = set()

        for index in order:
            claim = self.claims[index]
            x_start = claim.rectangle.x.start

            while active and active[0][0] <= x_start:
                heapq.heappop(active)

            for _, other_index in active:
                if self._conflicts(claim, self.claims[other_index]):
                    conflicted.add(index)
                    conflicted.add(other_index)

            heapq.heappush(active, (claim.rectangle.x.end, index))

        for index, claim in enumerate(self.claims):
            if index not in conflicted:
                return claim

        return None

    def get_statistics(self) -> dict:
        """Return search statistics."""
        return {
            'claims': len(self.claims),
            'rectangles_tested': self.rectangles_tested,
        }


def find_non_overlapping_claim(claims: Sequence[Claim]) -> Optional[Claim]:
    return NonOverlapFinder(claims).find()


def find_non_overlapping_claim_sweep(claims: Sequence[Claim]) -> Optional[Claim]:
    return NonOverlapFinder(claims).find_sweep()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m software_reference.finder <input_file>")
        sys.exit(1)

    claim = find_non_overlapping_claim(read_input(sys.argv[1]))

    if claim is None:
        print("Error: no non-overlapping claim found", file=sys.stderr)
        sys.exit(1)

    print(f"non-overlapping claim: {claim.id}")

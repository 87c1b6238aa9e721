"""
Fabric Claims - Data Model and Input Parsing

A claim is an identified axis-aligned rectangle on the fabric grid.
Rectangles are built from half-open integer ranges [start, end), so two
claims that only touch along an edge do not overlap.

Input format (one claim per line):
    #<id> @ <x>,<y>: <width>x<height>

Lines that do not match the format are skipped.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple


CLAIM_PATTERN = re.compile(r"^#(\d+) @ (\d+),(\d+): (\d+)x(\d+)$")

# Claim fields are unsigned 32-bit values
MAX_VALUE = 2**32 - 1


@dataclass(frozen=True)
class Range:
    """Half-open integer interval [start, end)."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError(f"Range bounds must be non-negative: [{self.start}, {self.end})")
        if self.start > self.end:
            raise ValueError(f"Range start exceeds end: [{self.start}, {self.end})")

    def __len__(self):
        return self.end - self.start

    def __iter__(self):
        return iter(range(self.start, self.end))


def range_overlaps(left: Range, right: Range) -> bool:
    """
    Check if two half-open ranges share at least one integer.

    Touching ranges such as [0, 2) and [2, 4) do not overlap.
    """
    start = max(left.start, right.start)
    end = min(left.end, right.end)
    return start < end


@dataclass(frozen=True)
class Rectangle:
    """Cartesian product of an x range and a y range."""

    x: Range
    y: Range

    @property
    def area(self) -> int:
        return len(self.x) * len(self.y)

    def overlaps(self, other: "Rectangle") -> bool:
        """Rectangles overlap only when both axes overlap."""
        return range_overlaps(self.x, other.x) and range_overlaps(self.y, other.y)

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Iterate every (x, y) grid cell covered by the rectangle."""
        for px in self.x:
            for py in self.y:
                yield px, py


@dataclass(frozen=True)
class Claim:
    id: int
    rectangle: Rectangle


def make_claim(claim_id: int, x: int, y: int, width: int, height: int) -> Claim:
    """
    Build a claim from its top-left corner and size.

    Raises:
        ValueError: If a field or an end coordinate leaves the unsigned
                    32-bit domain.
    """
    for name, value in (("id", claim_id), ("x", x), ("y", y), ("width", width), ("height", height)):
        if not 0 <= value <= MAX_VALUE:
            raise ValueError(f"Claim field {name}={value} out of range")

    if x + width > MAX_VALUE or y + height > MAX_VALUE:
        raise ValueError(f"Claim #{claim_id} extends past the grid limit")

    rectangle = Rectangle(Range(x, x + width), Range(y, y + height))
    return Claim(claim_id, rectangle)


def parse_claim(line: str) -> Optional[Claim]:
    """
    Parse a single claim line.

    Args:
        line: Text line, a trailing line ending is ignored

    Returns:
        Claim, or None if the line does not match the claim format
    """
    match = CLAIM_PATTERN.match(line.rstrip("\r\n"))
    if match is None:
        return None

    claim_id, x, y, width, height = (int(group) for group in match.groups())
    return make_claim(claim_id, x, y, width, height)


def parse_claims(text: str) -> Tuple[List[Claim], int]:
    """
    Parse every claim in a block of text.

    Returns:
        tuple: (claims, skipped) where claims keeps input order and skipped
               is the number of lines that did not match
    """
    claims = []
    skipped = 0

    for line in text.splitlines():
        claim = parse_claim(line)
        if claim is None:
            skipped += 1
        else:
            claims.append(claim)

    return claims, skipped


def read_input(filename):
    """
    Read input file containing one claim per line.

    Args:
        filename: Path to input file

    Returns:
        list: Claims in input order
    """
    with open(filename) as f:
        claims, _ = parse_claims(f.read())

    return claims

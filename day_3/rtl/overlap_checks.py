#!/usr/bin/env python3
"""
Overlap check modules for the fabric claims RTL.

Contains 2 combinational checks:
- RangeOverlapCheck: half-open interval intersection
- RectangleOverlapCheck: both axes overlap, plus claim identifier compare
"""

from amaranth import *


class RangeOverlapCheck(Elaboratable):
    """
    Half-open range overlap: [a_start, a_end) and [b_start, b_end).

    Overlap when max(a_start, b_start) < min(a_end, b_end).
    Touching ranges do not overlap.

    Inputs: a_start, a_end, b_start, b_end
    Outputs: overlaps (1-bit)
    """

    def __init__(self, coord_width: int = 16):
        self.coord_width = coord_width

        # Inputs
        self.a_start = Signal(coord_width)
        self.a_end = Signal(coord_width)
        self.b_start = Signal(coord_width)
        self.b_end = Signal(coord_width)

        # Outputs
        self.overlaps = Signal()

    def elaborate(self, platform):
        m = Module()

        start = Mux(self.a_start > self.b_start, self.a_start, self.b_start)
        end = Mux(self.a_end < self.b_end, self.a_end, self.b_end)

        m.d.comb += self.overlaps.eq(start < end)

        return m


class RectangleOverlapCheck(Elaboratable):
    """
    Rectangle overlap between claim A and claim B.

    overlaps: x ranges overlap AND y ranges overlap (a rectangle overlaps itself)
    conflict: overlaps AND the claim identifiers differ

    Inputs: a_id, a_x0/x1/y0/y1, b_id, b_x0/x1/y0/y1
    Outputs: overlaps, conflict
    """

    def __init__(self, coord_width: int = 16, id_width: int = 16):
        self.coord_width = coord_width
        self.id_width = id_width

        # Claim A
        self.a_id = Signal(id_width)
        self.a_x0 = Signal(coord_width)
        self.a_x1 = Signal(coord_width)
        self.a_y0 = Signal(coord_width)
        self.a_y1 = Signal(coord_width)

        # Claim B
        self.b_id = Signal(id_width)
        self.b_x0 = Signal(coord_width)
        self.b_x1 = Signal(coord_width)
        self.b_y0 = Signal(coord_width)
        self.b_y1 = Signal(coord_width)

        # Outputs
        self.overlaps = Signal()
        self.conflict = Signal()

    def elaborate(self, platform):
        m = Module()

        m.submodules.x_check = x_check = RangeOverlapCheck(self.coord_width)
        m.submodules.y_check = y_check = RangeOverlapCheck(self.coord_width)

        m.d.comb += [
            x_check.a_start.eq(self.a_x0),
            x_check.a_end.eq(self.a_x1),
            x_check.b_start.eq(self.b_x0),
            x_check.b_end.eq(self.b_x1),

            y_check.a_start.eq(self.a_y0),
            y_check.a_end.eq(self.a_y1),
            y_check.b_start.eq(self.b_y0),
            y_check.b_end.eq(self.b_y1),
        ]

        m.d.comb += [
            self.overlaps.eq(x_check.overlaps & y_check.overlaps),
            self.conflict.eq(self.overlaps & (self.a_id != self.b_id)),
        ]

        return m

"""
Fabric Claims System - Hardware RTL Implementation

Feeds one claim stream into both puzzle engines:

    Input (claims) ─┬→ FabricOverlap     → area_out
                    └→ NonOverlapFinder  → found, claim_id_out

Both engines run in parallel after start; done rises once both finished.
"""

from amaranth import *
from rtl.fabric_overlap import FabricOverlap
from rtl.non_overlap_finder import NonOverlapFinder


class FabricSystem(Elaboratable):
    """
    Complete system: FabricOverlap + NonOverlapFinder
    """

    def __init__(self, max_claims=64, grid_width=64, grid_height=64,
                 coord_width=16, id_width=16, count_width=16):
        self.max_claims = max_claims
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.coord_width = coord_width
        self.id_width = id_width
        self.count_width = count_width

        # Claim input interface
        self.id_in = Signal(id_width)
        self.x_in = Signal(coord_width)
        self.y_in = Signal(coord_width)
        self.w_in = Signal(coord_width)
        self.h_in = Signal(coord_width)
        self.valid_in = Signal()

        # Output interface
        self.area_out = Signal(range(grid_width * grid_height + 1))
        self.found = Signal()
        self.claim_id_out = Signal(id_width)
        self.overflow = Signal()
        self.done = Signal()

        # Control
        self.start = Signal()
        self.ready = Signal()

    def elaborate(self, platform):
        m = Module()

        overlap = FabricOverlap(
            max_claims=self.max_claims,
            grid_width=self.grid_width,
            grid_height=self.grid_height,
            coord_width=self.coord_width,
            count_width=self.count_width,
        )
        finder = NonOverlapFinder(
            max_claims=self.max_claims,
            coord_width=self.coord_width,
            id_width=self.id_width,
        )

        m.submodules.overlap = overlap
        m.submodules.finder = finder

        # Broadcast claims to both engines
        for engine in (overlap, finder):
            m.d.comb += [
                engine.x_in.eq(self.x_in),
                engine.y_in.eq(self.y_in),
                engine.w_in.eq(self.w_in),
                engine.h_in.eq(self.h_in),
                engine.valid_in.eq(self.valid_in),
                engine.start.eq(self.start),
            ]
        m.d.comb += finder.id_in.eq(self.id_in)

        # Output connections
        m.d.comb += [
            self.area_out.eq(overlap.area_out),
            self.found.eq(finder.found),
            self.claim_id_out.eq(finder.claim_id_out),
            self.overflow.eq(overlap.overflow | finder.overflow),
            self.done.eq(overlap.done & finder.done),
            self.ready.eq(overlap.ready & finder.ready),
        ]

        return m


if __name__ == "__main__":
    import sys
    from amaranth.back import verilog

    output_path = sys.argv[1] if len(sys.argv) > 1 else "fabric_system.v"

    top = FabricSystem(max_claims=1536, grid_width=1024, grid_height=1024)
    v = verilog.convert(top, name="top", ports=[
        # Claim input interface
        top.id_in, top.x_in, top.y_in, top.w_in, top.h_in, top.valid_in,
        # Output interface
        top.area_out, top.found, top.claim_id_out, top.overflow, top.done,
        # Control
        top.start, top.ready,
    ])

    with open(output_path, "w") as f:
        f.write(v)
    print(f"Generated {output_path}")

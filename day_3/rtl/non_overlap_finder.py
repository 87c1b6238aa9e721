"""
Non-Overlap Finder - Part Two: The Claim Nobody Else Touches

Hardware RTL implementation of the pairwise claim search.

Architecture:
    1. Load claims into BRAM as (id, x0, x1, y0, y1)
    2. Outer loop: latch claim A
    3. Inner loop: latch claim B and test it with RectangleOverlapCheck
    4. First A without any conflicting B is the answer

Components:
    - Claim BRAM (packed words, single read port shared by both loops)
    - RectangleOverlapCheck (combinational)
    - Nested loop FSM

A conflict needs an overlap AND different identifiers, so a claim never
disqualifies itself.
"""

from amaranth import *
from amaranth.lib.memory import Memory
from rtl.overlap_checks import RectangleOverlapCheck


class NonOverlapFinder(Elaboratable):
    """
    Hardware module that finds the first claim overlapping no other claim.

    Ports:
        Input (claim loading phase):
            - id_in: Claim identifier
            - x_in, y_in: Claim top-left corner
            - w_in, h_in: Claim width and height
            - valid_in: Claim input data valid signal

        Output:
            - found: A non-overlapping claim exists (valid with done)
            - claim_id_out: Identifier of that claim
            - pairs_tested: Number of rectangle comparisons performed
            - overflow: Sticky, a claim arrived with the store full
            - done: Search complete

        Control:
            - start: Start searching after claims are loaded
            - ready: Ready to accept claims
            - busy: Searching
    """

    def __init__(self, max_claims=64, coord_width=16, id_width=16):
        self.max_claims = max_claims
        self.coord_width = coord_width
        self.id_width = id_width

        # Claim input interface
        self.id_in = Signal(id_width)
        self.x_in = Signal(coord_width)
        self.y_in = Signal(coord_width)
        self.w_in = Signal(coord_width)
        self.h_in = Signal(coord_width)
        self.valid_in = Signal()

        # Output interface
        self.found = Signal()
        self.claim_id_out = Signal(id_width)
        self.pairs_tested = Signal(32)
        self.overflow = Signal()
        self.done = Signal()

        # Control
        self.start = Signal()
        self.ready = Signal()
        self.busy = Signal()

    def elaborate(self, platform):
        m = Module()

        # Range ends need one more bit than the corner coordinates
        end_width = self.coord_width + 1
        word_width = self.id_width + 4 * end_width

        claims_mem = Memory(shape=unsigned(word_width), depth=self.max_claims, init=[])
        claims_rd = claims_mem.read_port()
        claims_wr = claims_mem.write_port()
        m.submodules.claims_mem = claims_mem

        m.submodules.check = check = RectangleOverlapCheck(coord_width=end_width, id_width=self.id_width)

        def unpack(word):
            fields = []
            offset = self.id_width
            for _ in range(4):
                fields.append(word[offset:offset + end_width])
                offset += end_width
            return [word[0:self.id_width]] + fields

        # Claim bounds computed on load
        x0_in = Signal(end_width)
        x1_in = Signal(end_width)
        y0_in = Signal(end_width)
        y1_in = Signal(end_width)
        m.d.comb += [
            x0_in.eq(self.x_in),
            x1_in.eq(self.x_in + self.w_in),
            y0_in.eq(self.y_in),
            y1_in.eq(self.y_in + self.h_in),
        ]

        rd_id, rd_x0, rd_x1, rd_y0, rd_y1 = unpack(claims_rd.data)

        # State variables
        num_claims = Signal(range(self.max_claims + 1))
        outer_idx = Signal(range(self.max_claims + 1))
        inner_idx = Signal(range(self.max_claims + 1))

        # Latched claims A (outer) and B (inner)
        a_id = Signal(self.id_width)
        a_x0 = Signal(end_width)
        a_x1 = Signal(end_width)
        a_y0 = Signal(end_width)
        a_y1 = Signal(end_width)
        b_id = Signal(self.id_width)
        b_x0 = Signal(end_width)
        b_x1 = Signal(end_width)
        b_y0 = Signal(end_width)
        b_y1 = Signal(end_width)

        m.d.comb += [
            check.a_id.eq(a_id),
            check.a_x0.eq(a_x0),
            check.a_x1.eq(a_x1),
            check.a_y0.eq(a_y0),
            check.a_y1.eq(a_y1),
            check.b_id.eq(b_id),
            check.b_x0.eq(b_x0),
            check.b_x1.eq(b_x1),
            check.b_y0.eq(b_y0),
            check.b_y1.eq(b_y1),
        ]

        with m.FSM() as fsm:

            with m.State("IDLE"):
                m.d.comb += self.ready.eq(1)

                # Load claims into BRAM
                with m.If(self.valid_in):
                    with m.If(num_claims < self.max_claims):
                        m.d.comb += [
                            claims_wr.addr.eq(num_claims),
                            claims_wr.data.eq(Cat(self.id_in, x0_in, x1_in, y0_in, y1_in)),
                            claims_wr.en.eq(1),
                        ]
                        m.d.sync += num_claims.eq(num_claims + 1)
                    with m.Else():
                        m.d.sync += self.overflow.eq(1)

                with m.If(self.start):
                    m.d.sync += [
                        outer_idx.eq(0),
                        self.pairs_tested.eq(0),
                        self.busy.eq(1),
                    ]
                    m.next = "OUTER_FETCH"

            with m.State("OUTER_FETCH"):
                with m.If(outer_idx >= num_claims):
                    # Every claim overlaps another one
                    m.d.sync += self.found.eq(0)
                    m.next = "DONE"
                with m.Else():
                    m.d.comb += claims_rd.addr.eq(outer_idx)
                    m.next = "OUTER_LATCH"

            with m.State("OUTER_LATCH"):
                m.d.sync += [
                    a_id.eq(rd_id),
                    a_x0.eq(rd_x0),
                    a_x1.eq(rd_x1),
                    a_y0.eq(rd_y0),
                    a_y1.eq(rd_y1),
                    inner_idx.eq(0),
                ]
                m.next = "INNER_FETCH"

            with m.State("INNER_FETCH"):
                with m.If(inner_idx >= num_claims):
                    # No conflict found for claim A
                    m.d.sync += [
                        self.found.eq(1),
                        self.claim_id_out.eq(a_id),
                    ]
                    m.next = "DONE"
                with m.Else():
                    m.d.comb += claims_rd.addr.eq(inner_idx)
                    m.next = "INNER_LATCH"

            with m.State("INNER_LATCH"):
                m.d.sync += [
                    b_id.eq(rd_id),
                    b_x0.eq(rd_x0),
                    b_x1.eq(rd_x1),
                    b_y0.eq(rd_y0),
                    b_y1.eq(rd_y1),
                ]
                m.next = "INNER_CHECK"

            with m.State("INNER_CHECK"):
                m.d.sync += self.pairs_tested.eq(self.pairs_tested + 1)

                with m.If(check.conflict):
                    # Claim A is disqualified, move to the next one
                    m.d.sync += outer_idx.eq(outer_idx + 1)
                    m.next = "OUTER_FETCH"
                with m.Else():
                    m.d.sync += inner_idx.eq(inner_idx + 1)
                    m.next = "INNER_FETCH"

            with m.State("DONE"):
                m.d.sync += [
                    self.done.eq(1),
                    self.busy.eq(0),
                ]
                # Hold done state

        return m

"""
Fabric Overlap - Part One: Area Claimed More Than Once

Hardware RTL implementation of the dense grid accumulator.

Architecture:
    1. Load claims into BRAM as (x0, y0, x1, y1), tracking the fabric extent
    2. Rasterize every claim: read-modify-write one counter per covered cell
    3. Scan the extent and count cells whose counter is greater than 1

Components:
    - Claim BRAM (packed x0/y0/x1/y1 words)
    - Counter grid BRAM, row pitch = grid_width
    - Rasterize / scan FSM

Timing:
    - Rasterize: 2 cycles per covered cell + 2 cycles per claim
    - Scan: 2 cycles per cell inside the extent
"""

from amaranth import *
from amaranth.lib.memory import Memory


class FabricOverlap(Elaboratable):
    """
    Hardware module that counts grid cells covered by two or more claims.

    Ports:
        Input (claim loading phase):
            - x_in, y_in: Claim top-left corner
            - w_in, h_in: Claim width and height
            - valid_in: Claim input data valid signal

        Output:
            - area_out: Number of cells covered more than once
            - width_out, height_out: Fabric extent (max x end, max y end)
            - claim_count_out: Number of claims stored
            - overflow: Sticky, a claim did not fit the grid and was dropped
            - done: Processing complete

        Control:
            - start: Start rasterizing after claims are loaded
            - ready: Ready to accept claims
            - busy: Rasterizing or scanning
    """

    def __init__(self, max_claims=64, grid_width=64, grid_height=64, coord_width=16, count_width=16):
        self.max_claims = max_claims
        self.grid_width = grid_width
        self.grid_height = grid_height
        self.coord_width = coord_width
        self.count_width = count_width

        # Claim input interface
        self.x_in = Signal(coord_width)
        self.y_in = Signal(coord_width)
        self.w_in = Signal(coord_width)
        self.h_in = Signal(coord_width)
        self.valid_in = Signal()

        # Output interface
        self.area_out = Signal(range(grid_width * grid_height + 1))
        self.width_out = Signal(range(grid_width + 1))
        self.height_out = Signal(range(grid_height + 1))
        self.claim_count_out = Signal(range(max_claims + 1))
        self.overflow = Signal()
        self.done = Signal()

        # Control
        self.start = Signal()
        self.ready = Signal()
        self.busy = Signal()

    def elaborate(self, platform):
        m = Module()

        x_bits = Shape.cast(range(self.grid_width + 1)).width
        y_bits = Shape.cast(range(self.grid_height + 1)).width

        # BRAM storage for claims, one packed word per claim
        claims_mem = Memory(shape=unsigned(2 * x_bits + 2 * y_bits), depth=self.max_claims, init=[])
        claims_rd = claims_mem.read_port()
        claims_wr = claims_mem.write_port()
        m.submodules.claims_mem = claims_mem

        # BRAM counter grid, cell (x, y) at x + grid_width * y
        grid_mem = Memory(shape=unsigned(self.count_width),
                          depth=self.grid_width * self.grid_height, init=[])
        grid_rd = grid_mem.read_port()
        grid_wr = grid_mem.write_port()
        m.submodules.grid_mem = grid_mem

        # Claim bounds computed on load
        x0_in = Signal(x_bits)
        y0_in = Signal(y_bits)
        x1_in = Signal(x_bits)
        y1_in = Signal(y_bits)
        x_end = Signal(self.coord_width + 1)
        y_end = Signal(self.coord_width + 1)
        m.d.comb += [
            x_end.eq(self.x_in + self.w_in),
            y_end.eq(self.y_in + self.h_in),
            x0_in.eq(self.x_in),
            y0_in.eq(self.y_in),
            x1_in.eq(x_end),
            y1_in.eq(y_end),
        ]

        # State variables
        num_claims = Signal(range(self.max_claims + 1))
        claim_idx = Signal(range(self.max_claims + 1))
        width = Signal(x_bits)
        height = Signal(y_bits)

        fits = Signal()
        m.d.comb += fits.eq(
            (x_end <= self.grid_width) &
            (y_end <= self.grid_height) &
            (num_claims < self.max_claims)
        )

        m.d.comb += [
            self.width_out.eq(width),
            self.height_out.eq(height),
            self.claim_count_out.eq(num_claims),
        ]

        # Unpacked claim words
        rd_x0 = claims_rd.data[0:x_bits]
        rd_y0 = claims_rd.data[x_bits:x_bits + y_bits]
        rd_x1 = claims_rd.data[x_bits + y_bits:2 * x_bits + y_bits]
        rd_y1 = claims_rd.data[2 * x_bits + y_bits:2 * x_bits + 2 * y_bits]

        # Current claim being rasterized
        x0 = Signal(x_bits)
        x1 = Signal(x_bits)
        y1 = Signal(y_bits)

        # Cell cursor, shared by rasterize and scan
        cx = Signal(x_bits)
        cy = Signal(y_bits)
        cell_addr = Signal(range(self.grid_width * self.grid_height))
        m.d.comb += cell_addr.eq(cx + cy * self.grid_width)

        # Saturating counter increment
        count_max = (1 << self.count_width) - 1
        incremented = Mux(grid_rd.data == count_max, grid_rd.data, grid_rd.data + 1)

        # Overlap area accumulator
        area = Signal.like(self.area_out)

        with m.FSM() as fsm:

            with m.State("IDLE"):
                m.d.comb += self.ready.eq(1)

                # Load claims into BRAM
                with m.If(self.valid_in):
                    with m.If(fits):
                        m.d.comb += [
                            claims_wr.addr.eq(num_claims),
                            claims_wr.data.eq(Cat(x0_in, y0_in, x1_in, y1_in)),
                            claims_wr.en.eq(1),
                        ]
                        m.d.sync += [
                            num_claims.eq(num_claims + 1),
                            width.eq(Mux(x_end > width, x_end, width)),
                            height.eq(Mux(y_end > height, y_end, height)),
                        ]
                    with m.Else():
                        m.d.sync += self.overflow.eq(1)

                with m.If(self.start):
                    m.d.sync += [
                        claim_idx.eq(0),
                        self.busy.eq(1),
                    ]
                    m.next = "FETCH"

            with m.State("FETCH"):
                with m.If(claim_idx >= num_claims):
                    # All claims rasterized, scan the extent
                    m.d.sync += [
                        cx.eq(0),
                        cy.eq(0),
                        area.eq(0),
                    ]
                    with m.If((width == 0) | (height == 0)):
                        m.next = "DONE"
                    with m.Else():
                        m.next = "SCAN_READ"

                with m.Else():
                    m.d.comb += claims_rd.addr.eq(claim_idx)
                    m.next = "LATCH"

            with m.State("LATCH"):
                # Claim word available (1 cycle latency)
                m.d.sync += [
                    x0.eq(rd_x0),
                    x1.eq(rd_x1),
                    y1.eq(rd_y1),
                    cx.eq(rd_x0),
                    cy.eq(rd_y0),
                    claim_idx.eq(claim_idx + 1),
                ]

                # Zero-area claims cover no cells
                with m.If((rd_x0 < rd_x1) & (rd_y0 < rd_y1)):
                    m.next = "CELL_READ"
                with m.Else():
                    m.next = "FETCH"

            with m.State("CELL_READ"):
                m.d.comb += grid_rd.addr.eq(cell_addr)
                m.next = "CELL_WRITE"

            with m.State("CELL_WRITE"):
                m.d.comb += [
                    grid_wr.addr.eq(cell_addr),
                    grid_wr.data.eq(incremented),
                    grid_wr.en.eq(1),
                ]

                with m.If(cx + 1 < x1):
                    m.d.sync += cx.eq(cx + 1)
                    m.next = "CELL_READ"
                with m.Elif(cy + 1 < y1):
                    m.d.sync += [
                        cx.eq(x0),
                        cy.eq(cy + 1),
                    ]
                    m.next = "CELL_READ"
                with m.Else():
                    m.next = "FETCH"

            with m.State("SCAN_READ"):
                m.d.comb += grid_rd.addr.eq(cell_addr)
                m.next = "SCAN_CHECK"

            with m.State("SCAN_CHECK"):
                with m.If(grid_rd.data > 1):
                    m.d.sync += area.eq(area + 1)

                with m.If(cx + 1 < width):
                    m.d.sync += cx.eq(cx + 1)
                    m.next = "SCAN_READ"
                with m.Elif(cy + 1 < height):
                    m.d.sync += [
                        cx.eq(0),
                        cy.eq(cy + 1),
                    ]
                    m.next = "SCAN_READ"
                with m.Else():
                    m.next = "DONE"

            with m.State("DONE"):
                m.d.sync += [
                    self.area_out.eq(area),
                    self.done.eq(1),
                    self.busy.eq(0),
                ]
                # Hold done state

        return m

"""
Property-based tests for the fabric claims algorithms using Hypothesis.

This module verifies the software reference by testing invariant properties
that must hold for all valid inputs, and cross-checks the dense and sweep
implementations against each other and against a brute-force cell count.
"""

from collections import Counter

import pytest
from hypothesis import given, strategies as st, settings
from hypothesis.strategies import integers, lists

from software_reference.claims import Range, Rectangle, Claim, make_claim, range_overlaps
from software_reference.fabric import (
    accumulate_fabric,
    fabric_extent,
    overlapping_area,
    overlapping_area_sweep,
)
from software_reference.finder import (
    NonOverlapFinder,
    find_non_overlapping_claim,
    find_non_overlapping_claim_sweep,
)


# Strategy for generating valid ranges (start <= end)
@st.composite
def valid_range(draw, max_value=50):
    """Generate a valid half-open range where start <= end."""
    start = draw(integers(min_value=0, max_value=max_value))
    end = draw(integers(min_value=start, max_value=max_value))
    return Range(start, end)


@st.composite
def valid_rectangle(draw):
    return Rectangle(draw(valid_range()), draw(valid_range()))


@st.composite
def claim_lists(draw, min_size=0, max_size=12, max_coord=20, max_size_wh=8):
    """Generate claims with unique identifiers 1..n on a small grid."""
    fields = draw(lists(
        st.tuples(
            integers(min_value=0, max_value=max_coord),     # x
            integers(min_value=0, max_value=max_coord),     # y
            integers(min_value=1, max_value=max_size_wh),   # width
            integers(min_value=1, max_value=max_size_wh),   # height
        ),
        min_size=min_size,
        max_size=max_size,
    ))
    return [make_claim(i + 1, x, y, w, h) for i, (x, y, w, h) in enumerate(fields)]


def brute_force_area(claims):
    """Count cells covered more than once with a Counter over all cells."""
    cells = Counter()
    for claim in claims:
        cells.update(claim.rectangle.cells())
    return sum(1 for count in cells.values() if count > 1)


def lone_claims(claims):
    """All claims that conflict with no claim of a different identifier."""
    return [
        claim for claim in claims
        if not any(
            claim.id != other.id and claim.rectangle.overlaps(other.rectangle)
            for other in claims
        )
    ]


# Property 1: Range overlap is symmetric
@given(valid_range(), valid_range())
def test_range_overlap_symmetric(a, b):
    assert range_overlaps(a, b) == range_overlaps(b, a)


# Property 2: Range overlap means a shared integer
@given(valid_range(), valid_range())
def test_range_overlap_matches_shared_integers(a, b):
    shared = set(range(a.start, a.end)) & set(range(b.start, b.end))
    assert range_overlaps(a, b) == bool(shared)


# Property 3: Rectangle overlap requires both axes
@given(valid_rectangle(), valid_rectangle())
def test_rectangle_overlap_requires_both_axes(a, b):
    expected = range_overlaps(a.x, b.x) and range_overlaps(a.y, b.y)
    assert a.overlaps(b) == expected
    assert a.overlaps(b) == b.overlaps(a)


# Property 4: Rectangle overlap means a shared cell
@given(valid_rectangle(), valid_rectangle())
@settings(max_examples=200)
def test_rectangle_overlap_matches_shared_cells(a, b):
    assert a.overlaps(b) == bool(set(a.cells()) & set(b.cells()))


# Property 5: Dense accumulator matches a brute-force cell count
@given(claim_lists())
@settings(max_examples=300)
def test_dense_area_matches_brute_force(claims):
    assert overlapping_area(claims) == brute_force_area(claims)


# Property 6: Sweep line matches the dense accumulator
@given(claim_lists())
@settings(max_examples=300)
def test_sweep_area_matches_dense(claims):
    assert overlapping_area_sweep(claims) == overlapping_area(claims)


# Property 7: Area does not depend on claim order
@given(st.data(), claim_lists(min_size=1))
def test_area_order_independence(data, claims):
    shuffled = data.draw(st.permutations(claims))
    assert overlapping_area(shuffled) == overlapping_area(claims)
    assert overlapping_area_sweep(shuffled) == overlapping_area_sweep(claims)


# Property 8: Extent is the maximum x end and y end
@given(claim_lists())
def test_extent_is_max_end(claims):
    width, height = fabric_extent(claims)

    if not claims:
        assert (width, height) == (0, 0)
        return

    assert width == max(claim.rectangle.x.end for claim in claims)
    assert height == max(claim.rectangle.y.end for claim in claims)

    fabric, fabric_width, fabric_height = accumulate_fabric(claims)
    assert len(fabric) == width * height
    assert (fabric_width, fabric_height) == (width, height)


# Property 9: Grid counters add up to the total claimed area
@given(claim_lists())
def test_fabric_counts_every_claimed_cell(claims):
    fabric, _, _ = accumulate_fabric(claims)
    assert sum(fabric) == sum(claim.rectangle.area for claim in claims)


# Property 10: The finder returns the first lone claim in input order
@given(claim_lists())
@settings(max_examples=300)
def test_finder_returns_first_lone_claim(claims):
    expected = lone_claims(claims)
    result = find_non_overlapping_claim(claims)

    if expected:
        assert result == expected[0]
    else:
        assert result is None


# Property 11: Sweep finder matches the pairwise finder
@given(claim_lists(max_size=20))
@settings(max_examples=300)
def test_sweep_finder_matches_pairwise(claims):
    assert find_non_overlapping_claim_sweep(claims) == find_non_overlapping_claim(claims)


# Property 12: A unique lone claim is found whatever the order
@given(st.data(), claim_lists(min_size=1))
def test_finder_order_independence(data, claims):
    shuffled = data.draw(st.permutations(claims))
    lone = lone_claims(claims)
    result = find_non_overlapping_claim(shuffled)

    if not lone:
        assert result is None
    elif len(lone) == 1:
        assert result == lone[0]
    else:
        assert result in lone


# Property 13: Sweep finder never tests more pairs than the full square
@given(claim_lists(max_size=20))
def test_sweep_finder_test_count_bound(claims):
    finder = NonOverlapFinder(claims)
    finder.find_sweep()
    n = len(claims)
    assert finder.get_statistics()['rectangles_tested'] <= n * (n - 1) // 2


# Concrete test cases for edge cases
def test_touching_ranges():
    """Touching endpoints do not overlap."""
    assert not range_overlaps(Range(0, 2), Range(2, 4))
    assert range_overlaps(Range(0, 3), Range(2, 4))


def test_x_only_overlap():
    """Rectangles overlapping only on x do not overlap."""
    a = Rectangle(Range(0, 4), Range(0, 2))
    b = Rectangle(Range(2, 6), Range(2, 4))
    assert range_overlaps(a.x, b.x)
    assert not a.overlaps(b)


def test_rectangle_overlaps_itself():
    rectangle = Rectangle(Range(1, 3), Range(1, 3))
    assert rectangle.overlaps(rectangle)


def test_example_claims():
    """The three-claim example: area 4, claim #3 stands alone."""
    claims = [
        make_claim(1, 1, 3, 4, 4),
        make_claim(2, 3, 1, 4, 4),
        make_claim(3, 5, 5, 2, 2),
    ]
    assert overlapping_area(claims) == 4
    assert overlapping_area_sweep(claims) == 4
    assert find_non_overlapping_claim(claims).id == 3
    assert find_non_overlapping_claim_sweep(claims).id == 3


def test_single_claim():
    claims = [make_claim(7, 2, 3, 5, 4)]
    assert overlapping_area(claims) == 0
    assert find_non_overlapping_claim(claims) == claims[0]


def test_identical_claims():
    """Two identical claims: full overlap and no answer."""
    claims = [make_claim(1, 0, 0, 2, 2), make_claim(2, 0, 0, 2, 2)]
    assert overlapping_area(claims) == 4
    assert overlapping_area_sweep(claims) == 4
    assert find_non_overlapping_claim(claims) is None
    assert find_non_overlapping_claim_sweep(claims) is None


def test_no_claims():
    assert fabric_extent([]) == (0, 0)
    assert accumulate_fabric([]) == ([], 0, 0)
    assert overlapping_area([]) == 0
    assert overlapping_area_sweep([]) == 0
    assert find_non_overlapping_claim([]) is None


def test_extent_of_sub_region():
    """Extent follows the claims, not a fixed grid size."""
    claims = [make_claim(1, 10, 20, 3, 4), make_claim(2, 0, 0, 1, 1)]
    assert fabric_extent(claims) == (13, 24)


def test_zero_area_claim_contributes_nothing():
    claims = [
        make_claim(1, 0, 0, 4, 4),
        make_claim(2, 0, 0, 4, 4),
        make_claim(3, 1, 1, 0, 3),
    ]
    fabric, _, _ = accumulate_fabric(claims)
    assert sum(fabric) == 32
    assert overlapping_area(claims) == 16
    assert overlapping_area_sweep(claims) == 16
    assert find_non_overlapping_claim(claims).id == 3


def test_triple_overlap_counted_once():
    claims = [make_claim(i, 0, 0, 3, 3) for i in (1, 2, 3)]
    assert overlapping_area(claims) == 9
    assert overlapping_area_sweep(claims) == 9


def test_duplicate_identifiers_do_not_disqualify_each_other():
    """Claims sharing an identifier are treated as one claim."""
    claims = [
        make_claim(1, 0, 0, 2, 2),
        make_claim(1, 1, 1, 2, 2),
        make_claim(2, 10, 10, 2, 2),
    ]
    assert find_non_overlapping_claim(claims) == claims[0]
    assert find_non_overlapping_claim_sweep(claims) == claims[0]


def test_pairwise_test_count():
    """Search stops at the first conflict of each claim."""
    claims = [
        make_claim(1, 1, 3, 4, 4),
        make_claim(2, 3, 1, 4, 4),
        make_claim(3, 5, 5, 2, 2),
    ]
    finder = NonOverlapFinder(claims)
    assert finder.find().id == 3
    # #1: tests #1, #2 / #2: tests #1 / #3: tests #1, #2, #3
    assert finder.get_statistics() == {'claims': 3, 'rectangles_tested': 6}


def test_invalid_ranges():
    with pytest.raises(ValueError):
        Range(3, 2)
    with pytest.raises(ValueError):
        Range(-1, 2)


def test_range_length_and_iteration():
    r = Range(2, 5)
    assert len(r) == 3
    assert list(r) == [2, 3, 4]
    assert len(Range(4, 4)) == 0


def test_claims_are_immutable():
    claim = make_claim(1, 0, 0, 1, 1)
    with pytest.raises(AttributeError):
        claim.id = 2
    assert claim == Claim(1, Rectangle(Range(0, 1), Range(0, 1)))


if __name__ == "__main__":
    # Run pytest
    pytest.main([__file__, "-v", "--tb=short"])

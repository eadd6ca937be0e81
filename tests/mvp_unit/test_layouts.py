from __future__ import annotations

import pytest

from bookletbuilder.errors import LayoutError
from bookletbuilder.imposition.core import booklet_page_sequence, two_up_page_sequence
from bookletbuilder.imposition.layouts import (
    FourUpLayout,
    Layout,
    PlacementTransform,
    Point,
    TwoUpLayout,
    resolve_layout,
    resolve_sequencer,
)

pytestmark = pytest.mark.mvp_unit


def test_four_up_layout_places_quadrants_in_reading_order() -> None:
    layout = FourUpLayout(23, 42)

    assert layout.capacity == 4
    assert list(layout.placement_slots()) == [Point(0, 42), Point(23, 42), Point(0, 0), Point(23, 0)]
    assert layout.destination_sheet_size == (23, 42)
    assert layout.transform == PlacementTransform(0.5, 0.5)
    assert layout.transform.rotation == 0


def test_placement_slots_are_independent_traversals() -> None:
    layout = FourUpLayout(23, 42)
    first = layout.placement_slots()
    next(first)
    next(first)

    second = layout.placement_slots()

    assert next(second) == Point(0, 42)
    assert next(first) == Point(0, 0)


def test_layouts_satisfy_layout_protocol() -> None:
    assert isinstance(FourUpLayout(10, 20), Layout)
    assert isinstance(TwoUpLayout(10, 20), Layout)


def test_four_up_transform_scales_slot_into_quadrant() -> None:
    layout = FourUpLayout(23, 42)

    ctm = layout.transform.at(Point(23, 42)).ctm

    assert ctm == pytest.approx((0.5, 0.0, 0.0, 0.5, 11.5, 21.0))


def test_two_up_layout_rotates_pages_into_sheet_halves() -> None:
    layout = TwoUpLayout(100, 200)

    assert layout.capacity == 2
    assert layout.scale == pytest.approx(0.5)
    assert layout.destination_sheet_size == (100, 200)
    assert layout.transform == PlacementTransform(0.5, 0.5, rotation=90.0)
    assert list(layout.placement_slots()) == [Point(50, -200), Point(250, -200)]


@pytest.mark.parametrize(
    ("slot_index", "expected_origin"),
    [(0, (100.0, 25.0)), (1, (100.0, 125.0))],
)
def test_two_up_transform_lands_rotated_page_inside_its_half(
    slot_index: int,
    expected_origin: tuple[float, float],
) -> None:
    layout = TwoUpLayout(100, 200)
    slot = list(layout.placement_slots())[slot_index]

    a, b, c, d, e, f = layout.transform.at(slot).ctm

    assert (a, b, c, d) == pytest.approx((0.0, 0.5, -0.5, 0.0), abs=1e-9)
    assert (e, f) == pytest.approx(expected_origin)


def test_two_up_layout_centres_pages_on_a4() -> None:
    width, height = 595.2756, 841.8898
    layout = TwoUpLayout(width, height)

    for slot in layout.placement_slots():
        transform = layout.transform.at(slot)
        # Opposite corners of the source page after placement.
        x0, y0 = transform.apply_on((0, 0))
        x1, y1 = transform.apply_on((width, height))
        assert -1e-6 <= min(x0, x1) and max(x0, x1) <= width + 1e-6
        assert -1e-6 <= min(y0, y1) and max(y0, y1) <= height + 1e-6


@pytest.mark.parametrize(("width", "height"), [(0, 10), (10, -1)])
def test_layouts_reject_non_positive_page_size(width: float, height: float) -> None:
    with pytest.raises(LayoutError, match="page size must be positive"):
        FourUpLayout(width, height)
    with pytest.raises(LayoutError, match="page size must be positive"):
        TwoUpLayout(width, height)


@pytest.mark.parametrize(("name", "expected_type"), [("4up", FourUpLayout), ("4-UP", FourUpLayout), (" 2up ", TwoUpLayout)])
def test_resolve_layout_normalizes_names(name: str, expected_type: type) -> None:
    layout = resolve_layout(name, 100, 200)

    assert isinstance(layout, expected_type)


def test_resolve_layout_rejects_unknown_name() -> None:
    with pytest.raises(LayoutError, match="unsupported layout '8up', expected one of: 4up, 2up"):
        resolve_layout("8up", 100, 200)


@pytest.mark.parametrize(
    ("name", "expected"),
    [("4up", booklet_page_sequence), ("2-UP", two_up_page_sequence), (" 2up ", two_up_page_sequence)],
)
def test_resolve_sequencer_picks_print_order_per_layout(name: str, expected: object) -> None:
    assert resolve_sequencer(name) is expected


def test_resolve_sequencer_rejects_unknown_name() -> None:
    with pytest.raises(LayoutError, match="unsupported layout"):
        resolve_sequencer("16up")

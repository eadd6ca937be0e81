from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Protocol, runtime_checkable

from pypdf import Transformation

from bookletbuilder.errors import LayoutError
from bookletbuilder.imposition.core import PageSequence, booklet_page_sequence, two_up_page_sequence


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class PlacementTransform:
    """Scale and rotation shared by every page placed through a layout.

    Slot points are expressed in the frame *before* this transform, so the
    page lands at ``transform(slot + page_point)``.
    """

    scale_x: float
    scale_y: float
    rotation: float = 0.0

    def at(self, point: Point) -> Transformation:
        transformation = Transformation().translate(point.x, point.y)
        if self.rotation:
            transformation = transformation.rotate(self.rotation)
        return transformation.scale(self.scale_x, self.scale_y)


@runtime_checkable
class Layout(Protocol):
    @property
    def capacity(self) -> int: ...

    @property
    def destination_sheet_size(self) -> tuple[float, float]: ...

    @property
    def transform(self) -> PlacementTransform: ...

    def placement_slots(self) -> Iterator[Point]: ...


def _validated_size(width: float, height: float) -> tuple[float, float]:
    if width <= 0 or height <= 0:
        raise LayoutError(f"page size must be positive, got {width} x {height}")
    return float(width), float(height)


@dataclass(frozen=True)
class FourUpLayout:
    """Four pages per sheet at half size, sheet the same size as the source page."""

    width: float
    height: float
    capacity: int = field(default=4, init=False)
    transform: PlacementTransform = field(default=PlacementTransform(0.5, 0.5), init=False)

    def __post_init__(self) -> None:
        width, height = _validated_size(self.width, self.height)
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)

    @property
    def destination_sheet_size(self) -> tuple[float, float]:
        return self.width, self.height

    def placement_slots(self) -> Iterator[Point]:
        return iter(
            (
                Point(0.0, self.height),
                Point(self.width, self.height),
                Point(0.0, 0.0),
                Point(self.width, 0.0),
            )
        )


@dataclass(frozen=True)
class TwoUpLayout:
    """Two pages per sheet, each turned 90 degrees counter-clockwise.

    The lower half holds the first page; it reads on the left once the sheet
    is turned to landscape.
    """

    width: float
    height: float
    capacity: int = field(default=2, init=False)

    def __post_init__(self) -> None:
        width, height = _validated_size(self.width, self.height)
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)

    @property
    def scale(self) -> float:
        return min(self.width / self.height, (self.height / 2.0) / self.width)

    @property
    def destination_sheet_size(self) -> tuple[float, float]:
        return self.width, self.height

    @property
    def transform(self) -> PlacementTransform:
        return PlacementTransform(self.scale, self.scale, rotation=90.0)

    def placement_slots(self) -> Iterator[Point]:
        scale = self.scale
        half_height = self.height / 2.0
        x_offset = (self.width - self.height * scale) / 2.0
        y_offset = (half_height - self.width * scale) / 2.0

        # Rotating by +90 maps (x, y) to (-y, x), so the pre-rotation
        # translation is the final offset turned back by -90.
        for half_index in range(self.capacity):
            final_y = half_index * half_height + y_offset
            yield Point(final_y / scale, -(x_offset / scale + self.height))


_LAYOUT_FACTORIES: dict[str, Callable[[float, float], Layout]] = {
    "4up": FourUpLayout,
    "2up": TwoUpLayout,
}
# Print order matching the fold of each layout.
_LAYOUT_SEQUENCERS: dict[str, Callable[[int], PageSequence]] = {
    "4up": booklet_page_sequence,
    "2up": two_up_page_sequence,
}
LAYOUT_NAMES: tuple[str, ...] = tuple(_LAYOUT_FACTORIES)


def normalize_layout_name(name: str) -> str:
    normalized = name.strip().lower().replace("-", "").replace("_", "")
    if normalized in _LAYOUT_FACTORIES:
        return normalized

    valid = ", ".join(LAYOUT_NAMES)
    raise LayoutError(f"unsupported layout '{name}', expected one of: {valid}")


def resolve_layout(name: str, width: float, height: float) -> Layout:
    return _LAYOUT_FACTORIES[normalize_layout_name(name)](width, height)


def resolve_sequencer(name: str) -> Callable[[int], PageSequence]:
    return _LAYOUT_SEQUENCERS[normalize_layout_name(name)]

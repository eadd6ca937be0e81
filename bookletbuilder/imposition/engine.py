from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence

from bookletbuilder.events import log_event
from bookletbuilder.imposition.core import PageReference, chunk_sequence, is_blank
from bookletbuilder.imposition.layouts import Layout, PlacementTransform, Point

_LOGGER = logging.getLogger("bookletbuilder.imposition")

BlankSlotCallback = Callable[[int, Point, PageReference | None], None]


class DocumentAdapter(Protocol):
    def source_page_count(self) -> int: ...

    def add_destination_sheet(self, size: tuple[float, float]) -> Any: ...

    def copy_source_page(self, index: int) -> Any: ...

    def draw_at(self, sheet: Any, page: Any, transform: PlacementTransform, point: Point) -> None: ...

    def copy_prologue_pages(self, prologue: Any) -> int: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class SheetPlacement:
    sheet_index: int
    slot: Point
    reference: PageReference | None


@dataclass(frozen=True)
class ImposedSheet:
    sheet_index: int
    references: tuple[PageReference | None, ...]

    @property
    def placed(self) -> tuple[PageReference, ...]:
        return tuple(reference for reference in self.references if not is_blank(reference))


def plan_sheets(
    sequence: Sequence[PageReference | None],
    layout: Layout,
) -> list[list[SheetPlacement]]:
    capacity = layout.capacity
    if capacity <= 0:
        raise ValueError(f"layout capacity must be > 0, got {capacity}")

    plan: list[list[SheetPlacement]] = []
    for sheet_index, chunk in enumerate(chunk_sequence(sequence, capacity)):
        slots = list(layout.placement_slots())
        if len(slots) != capacity:
            raise ValueError(f"layout yields {len(slots)} placement slots, expected {capacity}")

        # A short final chunk leaves its trailing slots unpaired, i.e. blank.
        plan.append(
            [
                SheetPlacement(sheet_index=sheet_index, slot=slot, reference=reference)
                for reference, slot in zip(chunk, slots[: len(chunk)], strict=True)
            ]
        )
    return plan


def impose(
    sequence: Sequence[PageReference | None],
    layout: Layout,
    adapter: DocumentAdapter,
    prologue: Any | None = None,
    *,
    include_prologue: bool = True,
    on_blank: BlankSlotCallback | None = None,
) -> list[ImposedSheet]:
    """Place every referenced source page onto destination sheets.

    Sheets are produced in sequence order, ``layout.capacity`` references per
    sheet. Blank references still consume their slot. Adapter failures are
    not caught: the first one aborts the run and leaves the destination
    partially written, so callers must not publish it.
    """
    plan = plan_sheets(sequence, layout)
    log_event(
        _LOGGER,
        logging.INFO,
        "impose.started",
        references=len(sequence),
        sheets=len(plan),
        capacity=layout.capacity,
    )

    if include_prologue and prologue is not None:
        copied = adapter.copy_prologue_pages(prologue)
        log_event(_LOGGER, logging.INFO, "impose.prologue_copied", pages=copied)

    if len(sequence) % layout.capacity:
        log_event(
            _LOGGER,
            logging.WARNING,
            "impose.partial_sheet",
            references=len(sequence),
            capacity=layout.capacity,
            blank_slots=layout.capacity - len(sequence) % layout.capacity,
        )

    transform = layout.transform
    imposed: list[ImposedSheet] = []
    for placements in plan:
        sheet = adapter.add_destination_sheet(layout.destination_sheet_size)
        for placement in placements:
            if is_blank(placement.reference):
                log_event(
                    _LOGGER,
                    logging.DEBUG,
                    "impose.blank_slot",
                    sheet_index=placement.sheet_index,
                    slot=(placement.slot.x, placement.slot.y),
                    reference=placement.reference,
                )
                if on_blank is not None:
                    on_blank(placement.sheet_index, placement.slot, placement.reference)
                continue

            page = adapter.copy_source_page(placement.reference)
            adapter.draw_at(sheet, page, transform, placement.slot)

        sheet_index = len(imposed)
        imposed.append(
            ImposedSheet(
                sheet_index=sheet_index,
                references=tuple(placement.reference for placement in placements),
            )
        )

    log_event(_LOGGER, logging.INFO, "impose.completed", sheets=len(imposed))
    return imposed

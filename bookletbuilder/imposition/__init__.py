from bookletbuilder.imposition.core import (
    PageReference,
    PageSequence,
    booklet_page_sequence,
    chunk_sequence,
    format_sequence,
    is_blank,
    printer_extent,
    two_up_page_sequence,
)
from bookletbuilder.imposition.engine import (
    DocumentAdapter,
    ImposedSheet,
    SheetPlacement,
    impose,
    plan_sheets,
)
from bookletbuilder.imposition.layouts import (
    LAYOUT_NAMES,
    FourUpLayout,
    Layout,
    PlacementTransform,
    Point,
    TwoUpLayout,
    resolve_layout,
    resolve_sequencer,
)

__all__ = [
    "LAYOUT_NAMES",
    "DocumentAdapter",
    "FourUpLayout",
    "ImposedSheet",
    "Layout",
    "PageReference",
    "PageSequence",
    "PlacementTransform",
    "Point",
    "SheetPlacement",
    "TwoUpLayout",
    "booklet_page_sequence",
    "chunk_sequence",
    "format_sequence",
    "impose",
    "is_blank",
    "plan_sheets",
    "printer_extent",
    "resolve_layout",
    "resolve_sequencer",
    "two_up_page_sequence",
]

from __future__ import annotations

import io
from typing import Sequence

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

from bookletbuilder.errors import AdapterError, PageNotFoundError
from bookletbuilder.imposition.layouts import PlacementTransform, Point

ASSEMBLY_STEPS: dict[str, tuple[str, ...]] = {
    "4up": (
        "Booklet assembly",
        "1. Print the following pages double-sided, flipping on the long edge.",
        "2. Cut every sheet in half across its width.",
        "3. Keep the halves in order and stack all top halves on all bottom halves.",
        "4. Fold the stack in the middle so the first page faces out.",
        "5. Staple or sew along the fold.",
    ),
}


class PypdfDocumentAdapter:
    """Reads pages from a ``PdfReader`` and imposes them into a ``PdfWriter``."""

    def __init__(self, reader: PdfReader, writer: PdfWriter | None = None) -> None:
        self._reader = reader
        self._writer = writer if writer is not None else PdfWriter()

    @property
    def reader(self) -> PdfReader:
        return self._reader

    @property
    def writer(self) -> PdfWriter:
        return self._writer

    def source_page_count(self) -> int:
        return len(self._reader.pages)

    def add_destination_sheet(self, size: tuple[float, float]) -> PageObject:
        width, height = size
        return self._writer.add_blank_page(width=width, height=height)

    def copy_source_page(self, index: int) -> PageObject:
        page_count = self.source_page_count()
        if not 1 <= index <= page_count:
            raise PageNotFoundError(index, page_count)

        try:
            return self._reader.pages[index - 1]
        except PyPdfError as exc:
            raise AdapterError(f"cannot read source page {index}: {exc}") from exc

    def draw_at(self, sheet: PageObject, page: PageObject, transform: PlacementTransform, point: Point) -> None:
        try:
            sheet.merge_transformed_page(page, transform.at(point))
        except PyPdfError as exc:
            raise AdapterError(f"cannot place page at ({point.x}, {point.y}): {exc}") from exc

    def copy_prologue_pages(self, prologue: PdfReader) -> int:
        try:
            for page in prologue.pages:
                self._writer.add_page(page)
        except PyPdfError as exc:
            raise AdapterError(f"cannot copy prologue pages: {exc}") from exc
        return len(prologue.pages)

    def close(self) -> None:
        self._writer.close()


def _escape_pdf_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _build_instruction_commands(lines: Sequence[str], *, width: float, height: float) -> bytes:
    font_size = max(min(width / 40.0, 14.0), 6.0)
    leading = font_size * 1.6
    margin = width * 0.1
    commands: list[str] = ["q", "% bookletbuilder-instructions", "0 0 0 rg", "BT"]

    title, *steps = lines
    commands.append(f"/F1 {font_size * 1.4:.3f} Tf")
    commands.append(f"{leading:.3f} TL")
    commands.append(f"{margin:.3f} {height - margin:.3f} Td")
    commands.append(f"({_escape_pdf_text(title)}) Tj T* T*")
    commands.append(f"/F1 {font_size:.3f} Tf")
    for step in steps:
        commands.append(f"({_escape_pdf_text(step)}) Tj T*")

    commands.extend(["ET", "Q"])
    return ("\n".join(commands) + "\n").encode("latin-1")


def build_assembly_instructions(layout_name: str, width: float, height: float) -> PdfReader | None:
    lines = ASSEMBLY_STEPS.get(layout_name)
    if not lines:
        return None

    writer = PdfWriter()
    page = writer.add_blank_page(width=width, height=height)
    font = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/Type1"),
            NameObject("/BaseFont"): NameObject("/Helvetica"),
        }
    )
    page[NameObject("/Resources")] = DictionaryObject(
        {NameObject("/Font"): DictionaryObject({NameObject("/F1"): font})}
    )

    stream = DecodedStreamObject()
    stream.set_data(_build_instruction_commands(lines, width=width, height=height))
    page.replace_contents(stream)

    payload = io.BytesIO()
    writer.write(payload)
    payload.seek(0)
    return PdfReader(payload)

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from bookletbuilder.constants import (
    DEFAULT_INSTRUCTIONS_PAPER,
    DEFAULT_LAYOUT,
    DEFAULT_OUTPUT_SUFFIX,
    PAPER_SIZES,
)
from bookletbuilder.errors import AdapterError
from bookletbuilder.events import log_event
from bookletbuilder.imposition.core import format_sequence
from bookletbuilder.imposition.engine import ImposedSheet, impose
from bookletbuilder.imposition.layouts import normalize_layout_name, resolve_layout, resolve_sequencer
from bookletbuilder.imposition.pdf_writer import PypdfDocumentAdapter, build_assembly_instructions

_LOGGER = logging.getLogger("bookletbuilder.builder")


@dataclass(frozen=True)
class BookletOptions:
    layout: str = DEFAULT_LAYOUT
    include_instructions: bool = True


@dataclass(frozen=True)
class BookletResult:
    path: Path
    source_pages: int
    prologue_pages: int
    sheets: list[ImposedSheet]

    @property
    def page_count(self) -> int:
        return self.prologue_pages + len(self.sheets)


def resolve_booklet_options(*, layout: str = DEFAULT_LAYOUT, include_instructions: bool = True) -> BookletOptions:
    return BookletOptions(layout=normalize_layout_name(layout), include_instructions=include_instructions)


def default_output_path(source_path: Path) -> Path:
    source = Path(source_path)
    return source.with_name(f"{source.stem}{DEFAULT_OUTPUT_SUFFIX}")


def _source_page_size(reader: PdfReader) -> tuple[float, float]:
    if not reader.pages:
        return PAPER_SIZES[DEFAULT_INSTRUCTIONS_PAPER]

    mediabox = reader.pages[0].mediabox
    return float(mediabox.width), float(mediabox.height)


@contextmanager
def open_booklet_documents(source_path: Path, output_path: Path) -> Iterator[PypdfDocumentAdapter]:
    """Open ``source_path`` and yield an adapter whose output lands at ``output_path``.

    The destination is written to a temporary sibling and moved into place
    only when the block exits cleanly; on any error the target path is left
    untouched. The source stream is closed on every exit path.
    """
    output_path = Path(output_path)
    with Path(source_path).open("rb") as source_handle:
        try:
            reader = PdfReader(source_handle)
        except PdfReadError as exc:
            raise AdapterError(f"cannot parse '{source_path}' as a PDF: {exc}") from exc
        if reader.is_encrypted:
            raise AdapterError(f"encrypted PDFs are not supported: '{source_path}'")

        adapter = PypdfDocumentAdapter(reader, PdfWriter())
        try:
            yield adapter
            output_path.parent.mkdir(parents=True, exist_ok=True)
            descriptor, temp_name = tempfile.mkstemp(
                prefix=f".{output_path.stem}-",
                suffix=".pdf.tmp",
                dir=output_path.parent,
            )
            temp_path = Path(temp_name)
            try:
                with os.fdopen(descriptor, "wb") as handle:
                    adapter.writer.write(handle)
                temp_path.replace(output_path)
            except BaseException:
                temp_path.unlink(missing_ok=True)
                raise
        finally:
            adapter.close()


def build_booklet(
    source_path: Path,
    output_path: Path | None = None,
    options: BookletOptions | None = None,
) -> BookletResult:
    settings = options or BookletOptions()
    source_path = Path(source_path)
    target_path = Path(output_path) if output_path is not None else default_output_path(source_path)
    log_event(
        _LOGGER,
        logging.INFO,
        "build.started",
        source=str(source_path),
        output=str(target_path),
        layout=settings.layout,
        include_instructions=settings.include_instructions,
    )

    try:
        with open_booklet_documents(source_path, target_path) as adapter:
            page_count = adapter.source_page_count()
            width, height = _source_page_size(adapter.reader)
            layout = resolve_layout(settings.layout, width, height)
            sequence = resolve_sequencer(settings.layout)(page_count)
            if _LOGGER.isEnabledFor(logging.DEBUG):
                log_event(
                    _LOGGER,
                    logging.DEBUG,
                    "build.sequence",
                    layout=settings.layout,
                    sequence=format_sequence(sequence, layout.capacity),
                )
            instructions = (
                build_assembly_instructions(normalize_layout_name(settings.layout), width, height)
                if settings.include_instructions
                else None
            )
            sheets = impose(
                sequence,
                layout,
                adapter,
                instructions,
                include_prologue=settings.include_instructions,
            )
    except Exception:
        _LOGGER.exception(
            "build.failed",
            extra={
                "event_name": "build.failed",
                "event_fields": {"source": str(source_path), "output": str(target_path)},
            },
        )
        raise

    prologue_pages = len(instructions.pages) if instructions is not None else 0
    log_event(
        _LOGGER,
        logging.INFO,
        "build.completed",
        source=str(source_path),
        output=str(target_path),
        source_pages=page_count,
        prologue_pages=prologue_pages,
        sheets=len(sheets),
    )
    return BookletResult(
        path=target_path,
        source_pages=page_count,
        prologue_pages=prologue_pages,
        sheets=sheets,
    )

from __future__ import annotations

import math
from typing import Callable, Iterator, Sequence, TypeAlias

from bookletbuilder.constants import SIGNATURE_PAGES
from bookletbuilder.errors import InvalidPageCountError

PageReference: TypeAlias = int
PageSequence: TypeAlias = tuple[PageReference, ...]


def _validated_page_count(page_count: object) -> int:
    if isinstance(page_count, bool) or not isinstance(page_count, int):
        raise InvalidPageCountError(f"page_count must be an integer, got {page_count!r}")
    if page_count < 0:
        raise InvalidPageCountError(f"page_count must be >= 0, got {page_count}")
    return page_count


def printer_extent(page_count: int) -> int:
    count = _validated_page_count(page_count)
    return math.ceil(count / SIGNATURE_PAGES) * SIGNATURE_PAGES


def is_blank(reference: PageReference | None) -> bool:
    return reference is None or reference <= 0


def _signed_for(count: int) -> Callable[[int], PageReference]:
    def signed(page: int) -> PageReference:
        return page if page <= count else -page

    return signed


def _folded_pairs(extent: int) -> list[int]:
    pairs = [0] * extent
    for index in range((extent + 1) // 2):
        lower = index + 1
        upper = extent - index
        if index % 2 == 0:
            pairs[index * 2], pairs[index * 2 + 1] = upper, lower
        else:
            pairs[index * 2], pairs[index * 2 + 1] = lower, upper
    return pairs


def booklet_page_sequence(page_count: int) -> PageSequence:
    """Return the 4-up booklet print order for ``page_count`` source pages.

    References are 1-based. Slots past ``page_count`` (padding up to the next
    multiple of eight) come back negated so callers keep them as blank slots
    instead of dropping them.

    The booklet is printed 4-up duplex, the sheets cut in half, the top half
    stacked on the bottom half and the stack folded in the middle.
    """
    count = _validated_page_count(page_count)
    extent = printer_extent(count)
    pairs = _folded_pairs(extent)
    half = extent // 2

    validated = _signed_for(count)
    sequence: list[PageReference] = []
    for index in range(extent // 4):
        sequence.extend(
            (
                validated(pairs[index * 2]),
                validated(pairs[index * 2 + 1]),
                validated(pairs[half + index * 2]),
                validated(pairs[half + index * 2 + 1]),
            )
        )
    return tuple(sequence)


def two_up_page_sequence(page_count: int) -> PageSequence:
    """Return the saddle-stitch order for a 2-up booklet.

    Each printed sheet carries four pages: the outer spread on the front and
    the next inner spread on the back, so the count is padded to a multiple
    of four rather than eight.
    """
    count = _validated_page_count(page_count)
    extent = math.ceil(count / 4) * 4
    signed = _signed_for(count)

    sequence: list[PageReference] = []
    for index in range(extent // 4):
        outer = extent - index * 2
        inner = index * 2 + 1
        sequence.extend((signed(outer), signed(inner), signed(inner + 1), signed(outer - 1)))
    return tuple(sequence)


def chunk_sequence(
    sequence: Sequence[PageReference | None],
    size: int,
) -> Iterator[tuple[PageReference | None, ...]]:
    if size <= 0:
        raise ValueError("size must be > 0")

    for start in range(0, len(sequence), size):
        yield tuple(sequence[start : start + size])


def format_sequence(sequence: Sequence[PageReference | None], per_sheet: int = 4) -> str:
    lines: list[str] = []
    for chunk in chunk_sequence(sequence, per_sheet):
        lines.append("----||----")
        lines.append(", ".join(f"{'blank' if reference is None else reference:>4}" for reference in chunk))
    lines.append("====||====")
    return "\n".join(lines)

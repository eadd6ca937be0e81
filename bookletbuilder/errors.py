from __future__ import annotations


class BookletError(Exception):
    """Base class for every error raised by bookletbuilder."""


class InvalidPageCountError(BookletError, ValueError):
    pass


class LayoutError(BookletError, ValueError):
    pass


class AdapterError(BookletError):
    """A document operation failed while building the booklet.

    The run that hit it is aborted; the original exception is chained.
    """


class PageNotFoundError(AdapterError, LookupError):
    def __init__(self, index: int, page_count: int) -> None:
        super().__init__(f"source page {index} does not exist, document has {page_count} page(s)")
        self.index = index
        self.page_count = page_count

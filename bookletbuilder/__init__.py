from bookletbuilder.errors import (
    AdapterError,
    BookletError,
    InvalidPageCountError,
    LayoutError,
    PageNotFoundError,
)

__version__ = "0.3.0"

__all__ = [
    "AdapterError",
    "BookletError",
    "InvalidPageCountError",
    "LayoutError",
    "PageNotFoundError",
    "__version__",
]

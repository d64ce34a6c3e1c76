"""Tab separated report rows."""

from .tsv import (
    ALL_DOCS,
    ALL_TYPES,
    ALL_TYPES_MACRO,
    macro_tsv_line,
    tsv_header,
    tsv_line,
    write_tsv,
)

__all__ = [
    "ALL_DOCS",
    "ALL_TYPES",
    "ALL_TYPES_MACRO",
    "macro_tsv_line",
    "tsv_header",
    "tsv_line",
    "write_tsv",
]

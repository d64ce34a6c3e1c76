"""Extension based registry for corpus readers.

``.json`` and ``.jsonl`` readers are registered by default.  The registry
dispatches on the lower-cased file extension; ``UnsupportedFormatError`` is
raised for any other extension.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..utils.errors import UnsupportedFormatError
from .corpus import Document, parse_document, read_json_corpus, read_jsonl_corpus

CorpusReader = Callable[..., list[Document]]

_READERS: dict[str, CorpusReader] = {}


def register_reader(ext: str, func: CorpusReader) -> None:
    """Register a corpus reader for files ending with ``ext`` (dot included)."""

    _READERS[ext.lower()] = func


def get_extension(path: str | os.PathLike[str]) -> str:
    suffix = Path(path).suffix
    return suffix.lower() if suffix else ""


def read_corpus(path: str | os.PathLike[str], **kwargs: Any) -> list[Document]:
    """Read ``path`` with the reader registered for its extension.

    Raises
    ------
    UnsupportedFormatError
        If no reader is registered for the file extension.
    """

    ext = get_extension(path)
    reader = _READERS.get(ext)
    if reader is None:
        raise UnsupportedFormatError(f"Unsupported corpus extension: '{ext}'") from None
    return reader(path, **kwargs)


register_reader(".json", read_json_corpus)
register_reader(".jsonl", read_jsonl_corpus)

__all__ = [
    "CorpusReader",
    "Document",
    "get_extension",
    "parse_document",
    "read_corpus",
    "register_reader",
]

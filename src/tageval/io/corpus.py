"""JSON and JSON Lines corpus readers.

A corpus is a sequence of documents.  Each document has a ``name`` and a
mapping of annotation set names to annotation lists::

    {"name": "doc1",
     "sets": {"Key": [{"start": 0, "end": 10, "type": "Person",
                       "features": {"id": "x"}}],
              "Response": [...]}}

``.json`` files hold either a list of documents or an object with a
``documents`` list; ``.jsonl`` files hold one document per line.  Structural
problems raise :class:`~tageval.utils.errors.CorpusFormatError` naming the
offending document; I/O errors propagate unchanged.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tageval.annotations.base import Annotation
from tageval.utils.errors import CorpusFormatError, SpanError

__all__ = ["Document", "parse_document", "read_json_corpus", "read_jsonl_corpus"]


@dataclass(slots=True)
class Document:
    """A named document and its annotation sets."""

    name: str
    sets: dict[str, list[Annotation]] = field(default_factory=dict)

    def annotations(self, set_name: str, types: Sequence[str] | None = None) -> list[Annotation]:
        """Return the annotations of ``set_name`` (empty if the set is absent).

        When ``types`` is given only annotations of those types are returned.
        """

        anns = self.sets.get(set_name, [])
        if types is None:
            return list(anns)
        wanted = set(types)
        return [a for a in anns if a.type in wanted]


def _parse_annotation(raw: Any, where: str) -> Annotation:
    if not isinstance(raw, Mapping):
        raise CorpusFormatError(f"{where}: annotation must be an object")
    try:
        start = raw["start"]
        end = raw["end"]
        ann_type = raw["type"]
    except KeyError as exc:
        raise CorpusFormatError(f"{where}: annotation lacks {exc.args[0]!r}") from None
    if isinstance(start, bool) or isinstance(end, bool):
        raise CorpusFormatError(f"{where}: offsets must be integers")
    if not isinstance(start, int) or not isinstance(end, int):
        raise CorpusFormatError(f"{where}: offsets must be integers")
    features = raw.get("features") or {}
    if not isinstance(features, Mapping):
        raise CorpusFormatError(f"{where}: features must be an object")
    ident = raw.get("id")
    try:
        return Annotation(
            start,
            end,
            str(ann_type),
            dict(features),
            None if ident is None else str(ident),
        )
    except SpanError as exc:
        raise CorpusFormatError(f"{where}: {exc}") from exc


def parse_document(raw: Any, position: int = 0) -> Document:
    """Build a :class:`Document` from decoded JSON."""

    if not isinstance(raw, Mapping):
        raise CorpusFormatError(f"document #{position}: expected an object")
    name = str(raw.get("name") or f"doc{position}")
    sets_raw = raw.get("sets", {})
    if not isinstance(sets_raw, Mapping):
        raise CorpusFormatError(f"{name}: 'sets' must be an object")
    sets: dict[str, list[Annotation]] = {}
    for set_name, anns in sets_raw.items():
        if not isinstance(anns, list):
            raise CorpusFormatError(f"{name}: set '{set_name}' must be a list")
        sets[str(set_name)] = [
            _parse_annotation(a, f"{name}/{set_name}[{i}]") for i, a in enumerate(anns)
        ]
    return Document(name, sets)


def read_json_corpus(path: str | os.PathLike[str]) -> list[Document]:
    """Read a ``.json`` corpus."""

    with Path(path).open("r", encoding="utf-8-sig") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise CorpusFormatError(f"{path}: invalid JSON: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise CorpusFormatError(f"{path}: not valid UTF-8: {exc}") from exc
    if isinstance(data, Mapping):
        data = data.get("documents")
    if not isinstance(data, list):
        raise CorpusFormatError(f"{path}: expected a list of documents")
    return [parse_document(d, i) for i, d in enumerate(data)]


def read_jsonl_corpus(path: str | os.PathLike[str]) -> list[Document]:
    """Read a ``.jsonl`` corpus, skipping blank lines."""

    docs: list[Document] = []
    with Path(path).open("r", encoding="utf-8-sig") as f:
        try:
            lines = f.readlines()
        except UnicodeDecodeError as exc:
            raise CorpusFormatError(f"{path}: not valid UTF-8: {exc}") from exc
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
        except json.JSONDecodeError as exc:
            raise CorpusFormatError(f"{path}:{lineno}: invalid JSON: {exc}") from exc
        docs.append(parse_document(raw, len(docs)))
    return docs

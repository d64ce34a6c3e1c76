"""Tests for the extension-based corpus reader registry."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tageval.io import read_corpus
from tageval.utils.errors import CorpusFormatError, UnsupportedFormatError

DOC = {
    "name": "d1",
    "sets": {
        "Key": [{"start": 0, "end": 4, "type": "Person", "features": {"id": "x"}}],
        "Response": [{"start": 0, "end": 4, "type": "Person", "id": 7}],
    },
}


def test_unknown_extension_raises(tmp_path: Path) -> None:
    path = tmp_path / "corpus.xml"
    path.write_text("<x/>")
    with pytest.raises(UnsupportedFormatError):
        read_corpus(path)


def test_json_list_and_object(tmp_path: Path) -> None:
    as_list = tmp_path / "list.json"
    as_list.write_text(json.dumps([DOC]))
    as_obj = tmp_path / "obj.JSON"
    as_obj.write_text(json.dumps({"documents": [DOC]}))
    for path in (as_list, as_obj):
        docs = read_corpus(path)
        assert [d.name for d in docs] == ["d1"]
        key = docs[0].annotations("Key")
        assert key[0].features == {"id": "x"}
        assert docs[0].annotations("Response")[0].id == "7"
        assert docs[0].annotations("Missing") == []
        assert docs[0].annotations("Key", ["Location"]) == []


def test_jsonl_skips_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "corpus.jsonl"
    other = dict(DOC, name="d2")
    path.write_text(json.dumps(DOC) + "\n\n" + json.dumps(other) + "\n")
    assert [d.name for d in read_corpus(path)] == ["d1", "d2"]


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        json.dumps({"documents": "nope"}),
        json.dumps([{"name": "d", "sets": {"Key": [{"start": 0, "type": "M"}]}}]),
        json.dumps([{"name": "d", "sets": {"Key": [{"start": 5, "end": 1, "type": "M"}]}}]),
        json.dumps([{"name": "d", "sets": {"Key": {"start": 0}}}]),
        json.dumps([{"name": "d", "sets": {"Key": [{"start": "0", "end": 1, "type": "M"}]}}]),
    ],
)
def test_malformed_corpus(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "bad.json"
    path.write_text(payload)
    with pytest.raises(CorpusFormatError):
        read_corpus(path)


@pytest.mark.parametrize("name", ["c.json", "c.jsonl"])
def test_invalid_utf8_is_format_error(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    path.write_bytes(b'{"name": "\xff\xfe"}\n')
    with pytest.raises(CorpusFormatError):
        read_corpus(path)

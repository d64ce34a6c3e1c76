from pathlib import Path

import pytest
from pydantic import ValidationError

from tageval.config import load_config


def test_unknown_key(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("unknown:\n  foo: 1\n")
    with pytest.raises(ValidationError):
        load_config(cfg_file)


def test_empty_annotation_types(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("annotation_types: []\n")
    with pytest.raises(ValidationError):
        load_config(cfg_file)


def test_duplicate_feature_names(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("features:\n  names: [id, id]\n")
    with pytest.raises(ValidationError):
        load_config(cfg_file)


def test_invalid_enum_values(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("scores:\n  which: quarters\n")
    with pytest.raises(ValidationError):
        load_config(cfg_file)


def test_beta_must_be_positive(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yml"
    cfg_file.write_text("report:\n  beta: 0\n")
    with pytest.raises(ValidationError):
        load_config(cfg_file)

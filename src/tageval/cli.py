"""Typer-based command line interface for corpus evaluation.

The ``run`` command reads a JSON or JSON Lines corpus, compares the
response set with the key set of every document and prints a per-type
summary.  Per-document and corpus rows can be written to a TSV file.

Exit codes
----------
0 success
3 I/O error (unsupported corpus format, malformed corpus, filesystem issues)
4 configuration error
5 evaluation error (missing or invalid score features, ...)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from .config import ConfigModel, load_config
from .io import read_corpus
from .pipeline import EvaluationSummary, TaggingEvaluator
from .report.tsv import write_tsv
from .utils.errors import EvaluationError, IOFormatError
from .utils.logging import configure_logging

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")
    os.environ.setdefault("RICH_DISABLE_NO_COLOR", "1")

app = typer.Typer(
    name="tageval",
    help="Tagging evaluation. Use 'tageval run' to score a response set against a key set.",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> None:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _apply_overrides(
    cfg: ConfigModel,
    *,
    evaluation_id: str | None,
    score_feature: str | None,
) -> ConfigModel:
    """Return a copy of ``cfg`` with CLI overrides applied."""

    new_cfg = cfg.model_copy(deep=True)
    if evaluation_id is not None:
        new_cfg.report.evaluation_id = evaluation_id
    if score_feature is not None:
        new_cfg.scores.feature = score_feature or None
    return new_cfg


def _summary_lines(summary: EvaluationSummary, beta: float) -> list[str]:
    lines = [f"documents: {summary.documents}"]
    for type_key, stats in summary.totals.items():
        label = type_key or "[all types]"
        lines.append(
            f"{label}: P={stats.precision_strict:.4f}/{stats.precision_lenient:.4f} "
            f"R={stats.recall_strict:.4f}/{stats.recall_lenient:.4f} "
            f"F={stats.f_measure_strict(beta):.4f}/{stats.f_measure_lenient(beta):.4f} "
            f"(strict/lenient) {stats.short_counts()}"
        )
    if len(summary.types) > 1:
        macro = summary.macro
        lines.append(
            f"[macro]: F={macro.f_measure_strict(beta):.4f}/{macro.f_measure_lenient(beta):.4f}"
        )
    for type_key, curve in summary.rank_curves.items():
        label = type_key or "[all types]"
        for rank, stats in curve.items():
            lines.append(f"{label} rank<={int(rank)}: F={stats.f_measure_strict(beta):.4f}")
    return lines


@app.callback()
def main() -> None:
    """Entry point for the tageval command group."""
    pass


@app.command()
def run(
    corpus_path: Path = typer.Option(  # noqa: B008
        ..., "--corpus", help="Corpus file (.json or .jsonl)"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    tsv_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--tsv", help="Write per-document and corpus rows to this TSV file"
    ),
    evaluation_id: Optional[str] = typer.Option(  # noqa: B008
        None, "--evaluation-id", help="Identifier written into every TSV row"
    ),
    score_feature: Optional[str] = typer.Option(  # noqa: B008
        None, "--score-feature", help="Response feature holding a confidence score"
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Emit debug logging to stderr"
    ),
) -> None:
    """Evaluate the corpus at ``corpus_path`` and print a summary."""

    configure_logging(verbose)

    try:
        cfg = load_config(config_path)
    except (ValidationError, yaml.YAMLError, UnicodeDecodeError, OSError) as exc:
        _safe_exit(4, str(exc).splitlines()[0])
    cfg = _apply_overrides(cfg, evaluation_id=evaluation_id, score_feature=score_feature)
    try:
        evaluator = TaggingEvaluator(cfg)
    except ValueError as exc:
        _safe_exit(4, str(exc))
    if verbose:
        typer.echo("Loaded config", err=True)

    try:
        docs = read_corpus(corpus_path)
    except (IOFormatError, OSError) as exc:
        _safe_exit(3, str(exc))
    if verbose:
        typer.echo(f"Read {len(docs)} documents", err=True)

    try:
        summary = evaluator.evaluate(docs)
    except EvaluationError as exc:
        msg = str(exc)
        if verbose:
            msg = f"{type(exc).__name__}: {msg}"
        _safe_exit(5, msg)

    for line in _summary_lines(summary, cfg.report.beta):
        typer.echo(line)

    if tsv_path is not None:
        try:
            write_tsv(tsv_path, summary.rows)
        except OSError as exc:
            _safe_exit(3, str(exc))
        if verbose:
            typer.echo(f"Wrote {len(summary.rows)} rows to {tsv_path}", err=True)

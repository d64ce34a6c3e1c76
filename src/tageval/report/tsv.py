"""Tab separated rows for evaluation results.

Column names are camel case so existing R tooling reading these files
(``precisionStrict``, ``F1Strict``, ``threshold``...) keeps working.  Rows
for corpus totals use ``[doc:all:micro]`` as document name and the
combination of all annotation types uses ``[type:all:micro]``.  The macro
average over types is written as type ``[type:all:macro]``: its measures are
the mean over types and its counters the summed totals.
"""

from __future__ import annotations

import math
import os
from collections.abc import Iterable
from pathlib import Path

from tageval.stats.evalstats import EvalStats, MacroStats

__all__ = [
    "ALL_DOCS",
    "ALL_TYPES",
    "ALL_TYPES_MACRO",
    "TSV_COLUMNS",
    "macro_tsv_line",
    "tsv_header",
    "tsv_line",
    "write_tsv",
]

ALL_DOCS = "[doc:all:micro]"
ALL_TYPES = "[type:all:micro]"
ALL_TYPES_MACRO = "[type:all:macro]"

TSV_COLUMNS = (
    "evaluationId",
    "docName",
    "setName",
    "annotationType",
    "threshold",
    "precisionStrict",
    "recallStrict",
    "F1Strict",
    "precisionLenient",
    "recallLenient",
    "F1Lenient",
    "targets",
    "responses",
    "correctStrict",
    "correctPartial",
    "incorrectStrict",
    "incorrectPartial",
    "trueMissingStrict",
    "trueSpuriousStrict",
    "trueMissingLenient",
    "trueSpuriousLenient",
)


def tsv_header() -> str:
    return "\t".join(TSV_COLUMNS)


def _num(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return repr(float(value))


def tsv_line(
    evaluation_id: str,
    doc_name: str | None,
    set_name: str,
    annotation_type: str | None,
    stats: EvalStats | MacroStats,
    threshold: float | None = None,
    *,
    beta: float = 1.0,
) -> str:
    """Format one row; ``None`` names stand for all documents or all types."""

    counts = stats.totals if isinstance(stats, MacroStats) else stats
    fields = [
        evaluation_id,
        doc_name if doc_name else ALL_DOCS,
        set_name,
        annotation_type if annotation_type else ALL_TYPES,
        _num(math.nan if threshold is None else threshold),
        _num(stats.precision_strict),
        _num(stats.recall_strict),
        _num(stats.f_measure_strict(beta)),
        _num(stats.precision_lenient),
        _num(stats.recall_lenient),
        _num(stats.f_measure_lenient(beta)),
        str(counts.targets),
        str(counts.responses),
        str(counts.correct_strict),
        str(counts.correct_partial),
        str(counts.incorrect_strict),
        str(counts.incorrect_partial),
        str(counts.true_missing_strict),
        str(counts.true_spurious_strict),
        str(counts.true_missing_lenient),
        str(counts.true_spurious_lenient),
    ]
    return "\t".join(fields)


def macro_tsv_line(
    evaluation_id: str, set_name: str, macro: MacroStats, *, beta: float = 1.0
) -> str:
    """Format the corpus row holding the macro average over types."""

    return tsv_line(evaluation_id, None, set_name, ALL_TYPES_MACRO, macro, beta=beta)


def write_tsv(path: str | os.PathLike[str], rows: Iterable[str]) -> None:
    """Write the header followed by ``rows`` to ``path``."""

    with Path(path).open("w", encoding="utf-8", newline="") as f:
        f.write(tsv_header() + "\n")
        for row in rows:
            f.write(row + "\n")

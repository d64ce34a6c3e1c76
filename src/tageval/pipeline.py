"""Corpus level evaluation driver.

:class:`TaggingEvaluator` walks documents one at a time.  For every
configured annotation type, plus the combination of all of them when more
than one type is configured (stored under the empty type name ``""``), it

1. selects the key, response and optional reference annotations,
2. restricts them to the containing annotations and drops NILs,
3. runs :func:`~tageval.match.differ.compare` and adds the result to the
   running totals,
4. folds the document into the threshold (and, for candidate lists, rank)
   curves, and
5. records one TSV row per document.

Errors raised while evaluating a document propagate to the caller, which
decides whether to skip the document or abort.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import cast

from .annotations.base import Annotation
from .config.schema import ConfigModel
from .filters.containment import select_by_containment
from .filters.nil import apply_nil_treatment
from .io.corpus import Document
from .match.compare import FeatureSelector
from .match.differ import DiffResult, compare
from .match.lists import build_candidate_lists, rank_curve_for_lists, score_curve_for_lists
from .match.thresholds import CurveAccumulator
from .report.tsv import macro_tsv_line, tsv_line
from .stats.curve import RankCurve, ThresholdCurve
from .stats.evalstats import EvalStats, MacroStats
from .utils.logging import get_logger

__all__ = ["DocumentResult", "EvaluationSummary", "TaggingEvaluator"]

logger = get_logger(__name__)

LIST_SUFFIX = "List"


@dataclass(slots=True)
class DocumentResult:
    """Per-type outcome for one document."""

    name: str
    results: dict[str, DiffResult] = field(default_factory=dict)
    reference: dict[str, DiffResult] = field(default_factory=dict)


@dataclass(slots=True)
class EvaluationSummary:
    """Corpus totals, curves and report rows after the last document."""

    types: list[str]
    totals: dict[str, EvalStats]
    reference_totals: dict[str, EvalStats]
    threshold_curves: dict[str, ThresholdCurve]
    rank_curves: dict[str, RankCurve]
    macro: MacroStats
    rows: list[str]
    documents: int = 0
    reference_macro: MacroStats | None = None

    def stats(self, annotation_type: str = "") -> EvalStats:
        """Totals for ``annotation_type``; ``""`` means all types together."""

        if annotation_type == "" and "" not in self.totals:
            return self.totals[self.types[0]]
        return self.totals[annotation_type]


class TaggingEvaluator:
    """Accumulate evaluation statistics over a corpus."""

    def __init__(self, cfg: ConfigModel) -> None:
        self.cfg = cfg
        self.types: list[str] = list(cfg.annotation_types)
        self.type_keys: list[str] = [""] + self.types if len(self.types) > 1 else list(self.types)
        self.selector = FeatureSelector.of(cfg.features.names)
        self.totals: dict[str, EvalStats] = {t: EvalStats() for t in self.type_keys}
        self.reference_totals: dict[str, EvalStats] = (
            {t: EvalStats() for t in self.type_keys} if cfg.sets.reference else {}
        )
        score_feature = cfg.scores.feature
        self.threshold_curves: dict[str, ThresholdCurve] = {}
        self.rank_curves: dict[str, RankCurve] = {}
        self._accumulators: dict[str, CurveAccumulator] = {}
        if cfg.lists.enabled:
            if not cfg.lists.edge_feature:
                raise ValueError("list evaluation requires lists.edge_feature")
            self.rank_curves = {t: RankCurve() for t in self.type_keys}
            if score_feature:
                self.threshold_curves = {t: ThresholdCurve() for t in self.type_keys}
        elif score_feature:
            for t in self.type_keys:
                acc = CurveAccumulator(
                    score_feature,
                    self.selector,
                    which=cfg.scores.which,
                    comparison=cfg.features.comparison,
                )
                self._accumulators[t] = acc
                self.threshold_curves[t] = acc.curve
        self.rows: list[str] = []
        self.documents = 0

    # -- selection ---------------------------------------------------------

    def _types_for(self, type_key: str) -> list[str]:
        return [type_key] if type_key else list(self.types)

    def _containers(self, doc: Document) -> list[Annotation] | None:
        found = self.cfg.sets.containing_set_and_type
        if found is None:
            return None
        set_name, ann_type = found
        return doc.annotations(set_name, None if ann_type is None else [ann_type])

    def _prepare(
        self,
        items: Sequence[Annotation],
        containers: list[Annotation] | None,
        *,
        nils: bool = True,
    ) -> list[Annotation]:
        if containers is not None:
            items = select_by_containment(items, containers, self.cfg.containment.how)
        if not nils:
            return list(items)
        return apply_nil_treatment(
            items, self.cfg.nil.treatment, self.cfg.features.names, self.cfg.nil.value
        )

    # -- evaluation --------------------------------------------------------

    def evaluate_document(self, doc: Document) -> DocumentResult:
        """Evaluate ``doc`` for every type key and add it to the running totals."""

        result = DocumentResult(doc.name)
        for type_key in self.type_keys:
            diff, ref = self._evaluate_type(doc, type_key)
            result.results[type_key] = diff
            self.totals[type_key].add(diff.stats)
            self.rows.append(self._row(doc.name, self.cfg.sets.response, type_key, diff.stats))
            if ref is not None:
                result.reference[type_key] = ref
                self.reference_totals[type_key].add(ref.stats)
                ref_set = cast(str, self.cfg.sets.reference)
                self.rows.append(self._row(doc.name, ref_set, type_key, ref.stats))
        self.documents += 1
        logger.debug(
            "document %s: %s",
            doc.name,
            " | ".join(f"{t or '*'} {r.stats.short_counts()}" for t, r in result.results.items()),
        )
        return result

    def _evaluate_type(
        self, doc: Document, type_key: str
    ) -> tuple[DiffResult, DiffResult | None]:
        cfg = self.cfg
        types = self._types_for(type_key)
        containers = self._containers(doc)
        found = cfg.sets.containing_set_and_type
        # keys are not restricted by themselves
        same_as_keys = found is not None and found == (cfg.sets.key, type_key)
        keys = self._prepare(
            doc.annotations(cfg.sets.key, types), None if same_as_keys else containers
        )

        # list annotations carry no id feature
        nils = not cfg.lists.enabled
        response_types = [t + LIST_SUFFIX for t in types] if cfg.lists.enabled else types
        responses = self._prepare(
            doc.annotations(cfg.sets.response, response_types), containers, nils=nils
        )
        reference: list[Annotation] | None = None
        if cfg.sets.reference:
            reference = self._prepare(
                doc.annotations(cfg.sets.reference, response_types), containers, nils=nils
            )

        if cfg.lists.enabled:
            return self._evaluate_lists(doc, type_key, keys, responses, reference)

        diff = compare(keys, responses, self.selector, comparison=cfg.features.comparison)
        acc = self._accumulators.get(type_key)
        if acc is not None:
            acc.fold(keys, responses)
        ref = None
        if reference is not None:
            ref = compare(keys, reference, self.selector, comparison=cfg.features.comparison)
        return diff, ref

    def _evaluate_lists(
        self,
        doc: Document,
        type_key: str,
        keys: list[Annotation],
        list_items: list[Annotation],
        reference_items: list[Annotation] | None,
    ) -> tuple[DiffResult, DiffResult | None]:
        cfg = self.cfg
        edge_feature = cast(str, cfg.lists.edge_feature)
        element_types = [cfg.lists.element_type] if cfg.lists.element_type else None
        elements = doc.annotations(cfg.sets.response, element_types)
        lists = build_candidate_lists(
            list_items, elements, edge_feature, cfg.scores.feature
        )
        best = [cl.candidates[0] for cl in lists if cl.candidates]
        diff = compare(keys, best, self.selector, comparison=cfg.features.comparison)
        self.rank_curves[type_key].fold(
            rank_curve_for_lists(lists, keys, self.selector, comparison=cfg.features.comparison)
        )
        if type_key in self.threshold_curves:
            self.threshold_curves[type_key].fold(
                score_curve_for_lists(
                    lists,
                    keys,
                    self.selector,
                    which=cfg.scores.which,
                    comparison=cfg.features.comparison,
                )
            )
        ref = None
        if reference_items is not None:
            ref_elements = doc.annotations(cast(str, cfg.sets.reference), element_types)
            ref_lists = build_candidate_lists(
                reference_items, ref_elements, edge_feature, cfg.scores.feature
            )
            ref_best = [cl.candidates[0] for cl in ref_lists if cl.candidates]
            ref = compare(keys, ref_best, self.selector, comparison=cfg.features.comparison)
        return diff, ref

    def evaluate(self, docs: Iterable[Document]) -> EvaluationSummary:
        """Evaluate every document of ``docs`` and return the summary."""

        for doc in docs:
            self.evaluate_document(doc)
        return self.finish()

    # -- reporting ---------------------------------------------------------

    def _row(
        self,
        doc_name: str | None,
        set_name: str,
        type_key: str,
        stats: EvalStats,
        threshold: float | None = None,
    ) -> str:
        return tsv_line(
            self.cfg.report.evaluation_id,
            doc_name,
            set_name,
            type_key,
            stats,
            threshold,
            beta=self.cfg.report.beta,
        )

    def finish(self) -> EvaluationSummary:
        """Return totals, curves and all rows including corpus-level ones.

        With more than one type the macro average over types is written
        after the micro rows, for the response set and the reference set.
        """

        rows = list(self.rows)
        response_set = self.cfg.sets.response
        reference_set = self.cfg.sets.reference
        macro = MacroStats()
        for t in self.types:
            macro.add(self.totals[t])
        reference_macro: MacroStats | None = None
        if reference_set:
            reference_macro = MacroStats()
            for t in self.types:
                reference_macro.add(self.reference_totals[t])
        for type_key in self.type_keys:
            rows.append(self._row(None, response_set, type_key, self.totals[type_key]))
            if reference_set:
                rows.append(
                    self._row(None, reference_set, type_key, self.reference_totals[type_key])
                )
            curve = self.threshold_curves.get(type_key)
            if curve is not None:
                for key, stats in curve.items():
                    rows.append(self._row(None, response_set, type_key, stats, key))
        if len(self.types) > 1:
            beta = self.cfg.report.beta
            evaluation_id = self.cfg.report.evaluation_id
            rows.append(macro_tsv_line(evaluation_id, response_set, macro, beta=beta))
            if reference_set and reference_macro is not None:
                rows.append(
                    macro_tsv_line(evaluation_id, reference_set, reference_macro, beta=beta)
                )
        return EvaluationSummary(
            types=list(self.types),
            totals=self.totals,
            reference_totals=self.reference_totals,
            threshold_curves=self.threshold_curves,
            rank_curves=self.rank_curves,
            macro=macro,
            rows=rows,
            documents=self.documents,
            reference_macro=reference_macro,
        )

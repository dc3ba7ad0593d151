"""
scoring.py — Category scores for a graded repository
====================================================

Turns violation counts into one integer score per configured category:

  - ABSOLUTE mode bands the raw violation count;
  - RELATIVE mode bands ``count * 100 // size`` where *size* is the
    category's normalised size (0 when the size is 0).

Banding uses ascending thresholds ``t``: the score is ``len(t)`` minus the
number of thresholds at or below the value, so a value equal to a threshold
already loses that band.  With ``[5, 15, 30]``::

    value   0   4   5  10  15  29  30  100
    score   3   3   2   2   1   1   0    0

Usage::

    from gradestyle.scoring import ValidationResult, compute_scores

    scores = compute_scores(ValidationResult(repo, violations), configs)
    for category, score in scores.items():
        print(f"{category.display_name:28s} {score}")
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from termcolor import colored

from .categories import Category
from .config import CategoryConfig, Mode, ScoringOptions
from .errors import ConfigurationError, ErrorCodes
from .java_syntax import JavaSyntaxService
from .normalisation import Normaliser
from .repo import Repo
from .violations import Violations

_log = logging.getLogger(__name__)


def score_band(value: int, thresholds: Sequence[int]) -> int:
    """Score of *value* against ascending *thresholds*, in ``[0, len(thresholds)]``."""
    return len(thresholds) - bisect.bisect_right(thresholds, value)


def relative_value(count: int, size: int) -> int:
    """Violations per hundred units, truncated; 0 for an empty population."""
    if size == 0:
        return 0
    return count * 100 // size


@dataclass(frozen=True)
class ValidationResult:
    """A repository together with the violations detected in it."""
    repo: Repo
    violations: Violations


@dataclass(frozen=True)
class CategoryScore:
    """How one category's score was reached."""
    category: Category
    mode: Mode
    count: int
    size: Optional[int]         # None in ABSOLUTE mode
    raw_value: int
    score: int
    max_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "display_name": self.category.display_name,
            "mode": self.mode.value,
            "count": self.count,
            "size": self.size,
            "raw_value": self.raw_value,
            "score": self.score,
            "max_score": self.max_score,
        }


class CategoryScorer:
    """
    Scores a :class:`ValidationResult` against a rubric.

    Parameters
    ----------
    result : ValidationResult
        Repository and violations to grade.
    configs : list of CategoryConfig
        The rubric; each category may appear once.
    normaliser : Normaliser, optional
        Size provider for RELATIVE categories.  Built lazily from
        ``result.repo`` when first needed, so an all-ABSOLUTE rubric never
        scans the sources.
    """

    def __init__(
        self,
        result: ValidationResult,
        configs: Sequence[CategoryConfig],
        *,
        normaliser: Optional[Normaliser] = None,
        service: Optional[JavaSyntaxService] = None,
        options: Optional[ScoringOptions] = None,
    ) -> None:
        self.result = result
        self.configs = list(configs)
        self.options = options or ScoringOptions()
        self._service = service
        self._normaliser = normaliser
        self._modes: Dict[Mode, Callable[[CategoryConfig, int], CategoryScore]] = {
            Mode.ABSOLUTE: self._score_absolute,
            Mode.RELATIVE: self._score_relative,
        }

    @property
    def normaliser(self) -> Normaliser:
        if self._normaliser is None:
            self._normaliser = Normaliser(
                self.result.repo, self._service, jobs=self.options.jobs,
            )
        return self._normaliser

    # ------------------------------------------------------------------

    def _check_configs(self) -> None:
        seen = set()
        for config in self.configs:
            if not isinstance(config.category, Category):
                raise ConfigurationError(
                    f"unknown category {config.category!r}",
                    ErrorCodes.UNKNOWN_CATEGORY,
                )
            if config.category in seen:
                raise ConfigurationError(
                    f"category {config.category.value} configured twice",
                    ErrorCodes.DUPLICATE_CATEGORY,
                )
            seen.add(config.category)
            if config.mode not in self._modes:
                raise ConfigurationError(
                    f"unknown scoring mode {config.mode!r} for {config.category.value}",
                    ErrorCodes.UNKNOWN_MODE,
                )
            problems = config.validate()
            if problems:
                raise ConfigurationError(
                    f"{config.category.value}: {'; '.join(problems)}",
                    ErrorCodes.INVALID_THRESHOLDS,
                )

    def _score_absolute(self, config: CategoryConfig, count: int) -> CategoryScore:
        return CategoryScore(
            config.category, config.mode, count, None, count,
            score_band(count, config.scores), config.max_score,
        )

    def _score_relative(self, config: CategoryConfig, count: int) -> CategoryScore:
        size = self.normaliser.normalise(config.category)
        value = relative_value(count, size)
        return CategoryScore(
            config.category, config.mode, count, size, value,
            score_band(value, config.scores), config.max_score,
        )

    def score_details(self) -> List[CategoryScore]:
        """One :class:`CategoryScore` per config, in config order."""
        self._check_configs()
        details = []
        for config in self.configs:
            count = self.result.violations.count(config.category)
            detail = self._modes[config.mode](config, count)
            _log.debug(
                "%s: count=%d size=%s value=%d score=%d/%d",
                config.category.display_name, detail.count, detail.size,
                detail.raw_value, detail.score, detail.max_score,
            )
            details.append(detail)
        _log.info("scored %d categor%s", len(details), "y" if len(details) == 1 else "ies")
        return details

    def score(self) -> Dict[Category, int]:
        return {d.category: d.score for d in self.score_details()}


# ===================================================================
# Convenience API
# ===================================================================

def compute_scores(
    result: ValidationResult,
    configs: Sequence[CategoryConfig],
    *,
    service: Optional[JavaSyntaxService] = None,
    jobs: int = 1,
) -> Dict[Category, int]:
    """One-shot: score *result* against *configs*."""
    scorer = CategoryScorer(
        result, configs, service=service, options=ScoringOptions(jobs=jobs),
    )
    return scorer.score()


def _score_colour(score: int, max_score: int) -> str:
    if score >= max_score:
        return "green"
    if score == 0:
        return "red"
    return "yellow"


def generate_report(details: Sequence[CategoryScore], color: bool = False) -> str:
    """Aligned plain-text table of category scores, optionally coloured."""
    sep = "=" * 72
    lines = [
        sep,
        "STYLE SCORE REPORT",
        sep,
        f"  {'category':28s} {'mode':8s} {'count':>6s} {'size':>7s} {'value':>6s}  score",
    ]
    total = maximum = 0
    for d in details:
        size = "-" if d.size is None else str(d.size)
        cell = f"{d.score}/{d.max_score}"
        if color:
            cell = colored(
                cell, _score_colour(d.score, d.max_score), attrs=["bold"], force_color=True,
            )
        lines.append(
            f"  {d.category.display_name:28s} {d.mode.value:8s} {d.count:6d} "
            f"{size:>7s} {d.raw_value:6d}  {cell}"
        )
        total += d.score
        maximum += d.max_score
    lines += [sep, f"  Total: {total}/{maximum}", sep]
    return "\n".join(lines)

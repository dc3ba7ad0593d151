"""
config.py — Scoring rubric and run options
==========================================

A rubric is an ordered list of :class:`CategoryConfig` entries, read from
JSON::

    {"categories": [
        {"category": "ClassNames", "mode": "relative", "scores": [5, 15, 30]},
        {"category": "Javadoc Formatting", "mode": "ABSOLUTE", "scores": [1, 3]}
    ]}

A bare list of entries is accepted as well.  Category names match the enum
value, the member name or the display name, ignoring case and spacing.
"""

from __future__ import annotations

import enum
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

from .categories import Category
from .errors import ConfigurationError, ErrorCodes

JOBS_ENV = "GRADESTYLE_JOBS"


class Mode(enum.Enum):
    """How a category's violation count becomes the banded value."""
    ABSOLUTE = "absolute"       # raw count
    RELATIVE = "relative"       # percent of the normalised size

    @classmethod
    def parse(cls, text: str) -> "Mode":
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"unknown scoring mode {text!r}", ErrorCodes.UNKNOWN_MODE,
            ) from None


@dataclass(frozen=True)
class CategoryConfig:
    """Scoring rule for one category: mode plus ascending band thresholds."""
    category: Category
    mode: Mode
    scores: Tuple[int, ...]

    @property
    def max_score(self) -> int:
        return len(self.scores)

    def validate(self) -> List[str]:
        """Return a list of problems (empty if valid)."""
        problems: List[str] = []
        if not isinstance(self.category, Category):
            problems.append(f"category {self.category!r} is not a Category")
        if not isinstance(self.mode, Mode):
            problems.append(f"mode {self.mode!r} is not a Mode")
        if any(isinstance(s, bool) or not isinstance(s, int) for s in self.scores):
            problems.append("thresholds must be integers")
        elif any(a > b for a, b in zip(self.scores, self.scores[1:])):
            problems.append("thresholds must be in ascending order")
        return problems


@dataclass
class ScoringOptions:
    """Knobs for one scoring run."""
    jobs: int = 1               # parse workers during normalisation

    def validate(self) -> List[str]:
        problems: List[str] = []
        if self.jobs < 1:
            problems.append("jobs must be at least 1")
        return problems

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScoringOptions":
        env = os.environ if environ is None else environ
        raw = env.get(JOBS_ENV, "").strip()
        if not raw:
            return cls()
        try:
            jobs = int(raw)
        except ValueError:
            raise ConfigurationError(f"{JOBS_ENV} must be an integer, got {raw!r}") from None
        options = cls(jobs=jobs)
        problems = options.validate()
        if problems:
            raise ConfigurationError(f"{JOBS_ENV}: {'; '.join(problems)}")
        return options


# ===================================================================
# Loading
# ===================================================================

def _parse_entry(entry: Any, where: str) -> CategoryConfig:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"{where}: expected an object")
    for key in ("category", "mode", "scores"):
        if key not in entry:
            raise ConfigurationError(f"{where}: missing {key!r}")

    category = Category.lookup(str(entry["category"]))
    if category is None:
        raise ConfigurationError(
            f"{where}: unknown category {entry['category']!r}", ErrorCodes.UNKNOWN_CATEGORY,
        )
    try:
        mode = Mode.parse(entry["mode"])
    except ConfigurationError as exc:
        raise ConfigurationError(f"{where}: {exc.message}", exc.code) from None

    scores = entry["scores"]
    if not isinstance(scores, list):
        raise ConfigurationError(f"{where}: 'scores' must be a list", ErrorCodes.INVALID_THRESHOLDS)
    config = CategoryConfig(category, mode, tuple(scores))
    problems = config.validate()
    if problems:
        raise ConfigurationError(f"{where}: {'; '.join(problems)}", ErrorCodes.INVALID_THRESHOLDS)
    return config


def parse_config(data: Any, source: str = "<config>") -> List[CategoryConfig]:
    """Build the rubric from decoded JSON data."""
    if isinstance(data, dict):
        data = data.get("categories")
    if not isinstance(data, list):
        raise ConfigurationError(f"{source}: expected a list of category entries")

    configs: List[CategoryConfig] = []
    seen = set()
    for index, entry in enumerate(data):
        config = _parse_entry(entry, f"{source}[{index}]")
        if config.category in seen:
            raise ConfigurationError(
                f"{source}[{index}]: category {config.category.value} configured twice",
                ErrorCodes.DUPLICATE_CATEGORY,
            )
        seen.add(config.category)
        configs.append(config)
    return configs


def load_config(path: Union[str, Path]) -> List[CategoryConfig]:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise ConfigurationError(f"{path}: cannot read configuration: {exc.strerror or exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}:{exc.lineno}: invalid JSON: {exc.msg}") from exc
    return parse_config(data, str(path))

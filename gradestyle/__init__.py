"""gradestyle — style-category scoring for Java repositories.

Grades a repository against a rubric of style categories: violations found
by external detectors are totalled per category, optionally normalised by
the size of the code the category is about, and banded into an integer
score.

Submodules
----------
errors
    Exception hierarchy and ``GS-NNNN`` error codes.
java_lexer, java_syntax
    parsimonious tokenizer and recursive-descent structure scanner for Java
    sources; ``CompilationUnit`` query model.
static_access
    Best-effort static/non-static classification of member accesses.
categories, taxonomy
    Report categories, their counting rules, and the violation kinds that
    report under each.
violations
    Immutable violation collections and detector report readers.
config
    Rubric (``CategoryConfig``) loading and run options.
normalisation, scoring
    Per-category size and the score computation.
cli
    ``gradestyle`` command line.

Usage
-----
Library::

    from gradestyle import Repo, ValidationResult, compute_scores, load_config
    from gradestyle.violations import load_checkstyle_xml

    result = ValidationResult(Repo("submission"), load_checkstyle_xml("report.xml"))
    scores = compute_scores(result, load_config("rubric.json"))

Command-line::

    gradestyle score submission/ --config rubric.json --checkstyle report.xml
"""

from __future__ import annotations

__version__: str = "0.1.0"

from .categories import CATEGORY_PROFILES, Category
from .config import CategoryConfig, Mode, ScoringOptions, load_config, parse_config
from .errors import (
    AnalysisError,
    ConfigurationError,
    GradeStyleError,
    ResolutionFailure,
    SourceParseError,
    UnknownRuleError,
    ViolationReportError,
)
from .normalisation import Normaliser
from .repo import Repo
from .scoring import CategoryScore, CategoryScorer, ValidationResult, compute_scores, score_band
from .taxonomy import ViolationKind, category_of, kind_for_rule, kinds_of
from .violations import Violation, Violations

__all__: list[str] = [
    "__version__",
    "AnalysisError",
    "CATEGORY_PROFILES",
    "Category",
    "CategoryConfig",
    "CategoryScore",
    "CategoryScorer",
    "ConfigurationError",
    "GradeStyleError",
    "Mode",
    "Normaliser",
    "Repo",
    "ResolutionFailure",
    "ScoringOptions",
    "SourceParseError",
    "UnknownRuleError",
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "ViolationReportError",
    "Violations",
    "category_of",
    "compute_scores",
    "kind_for_rule",
    "kinds_of",
    "load_config",
    "parse_config",
    "score_band",
]

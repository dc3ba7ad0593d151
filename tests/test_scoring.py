# tests/test_scoring.py
"""
Tests for score banding and the category scorer.
"""

from unittest.mock import MagicMock

import pytest

from gradestyle.categories import Category
from gradestyle.config import CategoryConfig, Mode
from gradestyle.errors import ConfigurationError, ErrorCodes
from gradestyle.repo import Repo
from gradestyle.scoring import (
    CategoryScorer,
    ValidationResult,
    compute_scores,
    generate_report,
    relative_value,
    score_band,
)
from gradestyle.taxonomy import ViolationKind as K
from gradestyle.violations import Violation, Violations


def _violations(kind, n):
    return Violations(Violation(kind, "A.java", i + 1) for i in range(n))


def _scorer(violations, configs, size=200):
    normaliser = MagicMock()
    normaliser.normalise.return_value = size
    result = ValidationResult(MagicMock(spec=Repo), violations)
    return CategoryScorer(result, configs, normaliser=normaliser), normaliser


class TestScoreBand:

    @pytest.mark.parametrize("value, score", [
        (0, 3), (4, 3), (5, 2), (10, 2), (15, 1), (29, 1), (30, 0), (100, 0),
    ])
    def test_table(self, value, score):
        assert score_band(value, [5, 15, 30]) == score

    def test_no_thresholds(self):
        assert score_band(0, []) == 0
        assert score_band(99, []) == 0

    def test_equal_thresholds_drop_together(self):
        assert score_band(1, [2, 2, 5]) == 3
        assert score_band(2, [2, 2, 5]) == 1

    def test_monotone(self):
        thresholds = [1, 4, 9, 16]
        scores = [score_band(v, thresholds) for v in range(20)]
        assert scores == sorted(scores, reverse=True)


class TestRelativeValue:

    def test_percent(self):
        assert relative_value(10, 200) == 5

    def test_truncates(self):
        assert relative_value(2, 3) == 66

    def test_empty_population(self):
        assert relative_value(7, 0) == 0


class TestCategoryScorer:

    def test_absolute_never_normalises(self):
        configs = [CategoryConfig(Category.CLASS_NAMES, Mode.ABSOLUTE, (5, 15, 30))]
        scorer, normaliser = _scorer(_violations(K.TYPE_NAME, 10), configs)
        assert scorer.score() == {Category.CLASS_NAMES: 2}
        normaliser.normalise.assert_not_called()

    def test_relative(self):
        configs = [CategoryConfig(Category.CLASS_NAMES, Mode.RELATIVE, (5, 15, 30))]
        scorer, normaliser = _scorer(_violations(K.TYPE_NAME, 10), configs, size=200)
        assert scorer.score() == {Category.CLASS_NAMES: 2}
        normaliser.normalise.assert_called_once_with(Category.CLASS_NAMES)

    def test_relative_uses_truncated_value(self):
        configs = [CategoryConfig(Category.CLASS_NAMES, Mode.RELATIVE, (67,))]
        scorer, _ = _scorer(_violations(K.TYPE_NAME, 2), configs, size=3)
        assert scorer.score() == {Category.CLASS_NAMES: 1}

    def test_relative_empty_population_scores_full(self):
        configs = [CategoryConfig(Category.JAVA_FX, Mode.RELATIVE, (1, 2))]
        scorer, _ = _scorer(_violations(K.FXML_INLINE_STYLE, 4), configs, size=0)
        assert scorer.score() == {Category.JAVA_FX: 2}

    def test_other_categories_do_not_leak(self):
        violations = _violations(K.TYPE_NAME, 3) + _violations(K.METHOD_NAME, 40)
        configs = [CategoryConfig(Category.CLASS_NAMES, Mode.ABSOLUTE, (5,))]
        scorer, _ = _scorer(violations, configs)
        assert scorer.score() == {Category.CLASS_NAMES: 1}

    def test_details(self):
        configs = [
            CategoryConfig(Category.CLASS_NAMES, Mode.RELATIVE, (5, 15, 30)),
            CategoryConfig(Category.ORDERING, Mode.ABSOLUTE, (1,)),
        ]
        scorer, _ = _scorer(_violations(K.TYPE_NAME, 10), configs, size=200)
        rel, absolute = scorer.score_details()
        assert (rel.count, rel.size, rel.raw_value, rel.score, rel.max_score) == (10, 200, 5, 2, 3)
        assert absolute.size is None
        assert absolute.to_dict()["display_name"] == "Ordering"

    def test_duplicate_category(self):
        configs = [
            CategoryConfig(Category.ORDERING, Mode.ABSOLUTE, (1,)),
            CategoryConfig(Category.ORDERING, Mode.RELATIVE, (1,)),
        ]
        scorer, _ = _scorer(Violations(), configs)
        with pytest.raises(ConfigurationError) as info:
            scorer.score()
        assert info.value.code == ErrorCodes.DUPLICATE_CATEGORY

    def test_unknown_mode(self):
        configs = [CategoryConfig(Category.ORDERING, "logarithmic", (1,))]
        scorer, _ = _scorer(Violations(), configs)
        with pytest.raises(ConfigurationError) as info:
            scorer.score()
        assert info.value.code == ErrorCodes.UNKNOWN_MODE

    def test_category_given_as_string(self):
        configs = [CategoryConfig("ClassNames", Mode.ABSOLUTE, (1,))]
        scorer, _ = _scorer(Violations(), configs)
        with pytest.raises(ConfigurationError) as info:
            scorer.score()
        assert info.value.code == ErrorCodes.UNKNOWN_CATEGORY

    def test_invalid_thresholds(self):
        configs = [CategoryConfig(Category.ORDERING, Mode.ABSOLUTE, (3, 1))]
        scorer, _ = _scorer(Violations(), configs)
        with pytest.raises(ConfigurationError) as info:
            scorer.score()
        assert info.value.code == ErrorCodes.INVALID_THRESHOLDS

    def test_empty_rubric(self):
        scorer, _ = _scorer(_violations(K.TYPE_NAME, 1), [])
        assert scorer.score() == {}


class TestComputeScores:

    def test_end_to_end(self, make_repo, shape_java, worker_java):
        repo = Repo(make_repo({"Shape.java": shape_java, "Worker.java": worker_java}))
        violations = _violations(K.METHOD_NAME, 3) + _violations(K.EMPTY_CATCH_BLOCK, 1)
        configs = [
            # 3 of 6 methods: 50 per hundred
            CategoryConfig(Category.METHOD_NAMES, Mode.RELATIVE, (5, 15, 30)),
            # 1 of 2 catch clauses: 50 per hundred
            CategoryConfig(Category.EMPTY_CATCH_BLOCK, Mode.RELATIVE, (60,)),
            CategoryConfig(Category.FORMATTING, Mode.ABSOLUTE, (1, 2)),
        ]
        scores = compute_scores(ValidationResult(repo, violations), configs, jobs=2)
        assert scores == {
            Category.METHOD_NAMES: 0,
            Category.EMPTY_CATCH_BLOCK: 1,
            Category.FORMATTING: 2,
        }


@pytest.fixture(scope="module")
def details():
    configs = [
        CategoryConfig(Category.CLASS_NAMES, Mode.RELATIVE, (5, 15, 30)),
        CategoryConfig(Category.ORDERING, Mode.ABSOLUTE, (1,)),
    ]
    scorer, _ = _scorer(_violations(K.TYPE_NAME, 10), configs, size=200)
    return scorer.score_details()


class TestReport:

    def test_plain(self, details):
        text = generate_report(details)
        assert "STYLE SCORE REPORT" in text
        assert "Class Names" in text
        assert "2/3" in text
        assert "Total: 3/4" in text
        assert "\x1b[" not in text

    def test_coloured(self, details):
        assert "\x1b[" in generate_report(details, color=True)

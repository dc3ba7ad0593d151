# tests/test_normalisation.py
"""
Tests for the repository handle and per-category normalisation.
"""

from unittest.mock import MagicMock

import pytest

from gradestyle.categories import Category
from gradestyle.errors import AnalysisError, ConfigurationError, ErrorCodes, SourceParseError
from gradestyle.java_syntax import JavaSyntaxService, parse_source
from gradestyle.normalisation import Normaliser
from gradestyle.repo import Repo
from gradestyle.static_access import AccessTarget, classify_accesses


@pytest.fixture
def repo(make_repo, shape_java, worker_java, main_fxml):
    return Repo(make_repo({
        "src/main/java/edu/example/shapes/Shape.java": shape_java,
        "src/main/java/Worker.java": worker_java,
        "src/main/resources/main.fxml": main_fxml,
        "src/main/resources/dialog.fxml": main_fxml,
        ".git/Hidden.java": "this is not java",
        "README.md": "# repo\n",
    }))


def _counting_service():
    service = MagicMock(spec=JavaSyntaxService)
    service.parse.side_effect = lambda path: parse_source(path.read_text(), path)
    return service


class TestRepo:

    def test_missing_directory(self, tmp_path):
        with pytest.raises(AnalysisError) as info:
            Repo(tmp_path / "nope")
        assert info.value.code == ErrorCodes.MISSING_REPOSITORY

    def test_source_files_sorted_and_hidden_dirs_skipped(self, repo):
        names = [p.name for p in repo.list_source_files()]
        assert names == ["Worker.java", "Shape.java"]

    def test_ui_descriptions(self, repo):
        names = [p.name for p in repo.list_ui_description_files()]
        assert names == ["dialog.fxml", "main.fxml"]


class TestNormaliser:

    def test_declaration_sizes_sum_over_files(self, repo):
        normaliser = Normaliser(repo)
        # Shape: area, largest, compareTo, visit; Worker: run and the anonymous run
        assert normaliser.normalise(Category.METHOD_NAMES) == 6
        assert normaliser.normalise(Category.CLASS_NAMES) == 4
        assert normaliser.normalise(Category.EMPTY_CATCH_BLOCK) == 2
        assert normaliser.normalise(Category.STRING_CONCATENATION) == 4
        assert normaliser.normalise(Category.PACKAGE_NAMES) == 1

    def test_ui_descriptions_are_counted_not_parsed(self, repo):
        normaliser = Normaliser(repo)
        assert normaliser.normalise(Category.JAVA_FX) == 2

    def test_sources_parsed_once(self, repo):
        service = _counting_service()
        normaliser = Normaliser(repo, service)
        normaliser.normalise(Category.METHOD_NAMES)
        normaliser.normalise(Category.VARIABLE_NAMES)
        normaliser.normalise(Category.FORMATTING)
        assert service.parse.call_count == 2

    def test_sizes_memoised(self, repo):
        normaliser = Normaliser(repo)
        first = normaliser.normalise(Category.FORMATTING)
        normaliser._units = []
        assert normaliser.normalise(Category.FORMATTING) == first

    def test_parallel_matches_serial(self, repo):
        serial = Normaliser(repo, jobs=1)
        parallel = Normaliser(repo, jobs=4)
        for category in Category:
            assert parallel.normalise(category) == serial.normalise(category)

    def test_unknown_profile(self, repo):
        with pytest.raises(ConfigurationError) as info:
            Normaliser(repo, profiles={}).normalise(Category.ORDERING)
        assert info.value.code == ErrorCodes.UNKNOWN_CATEGORY

    def test_empty_repository(self, make_repo):
        normaliser = Normaliser(Repo(make_repo({})))
        assert normaliser.normalise(Category.FORMATTING) == 0
        assert normaliser.normalise(Category.JAVA_FX) == 0

    def test_parse_failure_aborts(self, make_repo):
        normaliser = Normaliser(Repo(make_repo({"Broken.java": "class Broken {"})))
        with pytest.raises(SourceParseError):
            normaliser.normalise(Category.METHOD_NAMES)

    def test_ui_only_category_needs_no_parse(self, make_repo, main_fxml):
        normaliser = Normaliser(Repo(make_repo({
            "Broken.java": "class Broken {",
            "view.fxml": main_fxml,
        })))
        assert normaliser.normalise(Category.JAVA_FX) == 1


CHILD_JAVA = """\
class Child extends Base {
    static int twice(int x) { return x * 2; }
    int run(int n) {
        int total = Math.max(n, 0) + twice(n);
        return total;
    }
}
"""

# Same declarations and lines, plus accesses that cannot be resolved locally
UNRESOLVED_CHILD_JAVA = CHILD_JAVA.replace(
    "twice(n);",
    "twice(n) + super.size() + registry.count() + helper();",
)


class TestUnresolvedAccesses:

    @pytest.fixture
    def clean(self, make_repo):
        return Normaliser(Repo(make_repo({"Child.java": CHILD_JAVA})))

    @pytest.fixture
    def unresolved(self, tmp_path):
        root = tmp_path / "unresolved"
        root.mkdir()
        (root / "Child.java").write_text(UNRESOLVED_CHILD_JAVA)
        return Normaliser(Repo(root))

    def test_failures_are_present(self, unresolved):
        targets = [r.target for _, r in classify_accesses(unresolved.units()[0])]
        assert targets.count(AccessTarget.UNKNOWN) == 3

    def test_declaration_and_span_sizes_unaffected(self, clean, unresolved):
        for n in (clean, unresolved):
            assert n.normalise(Category.METHOD_NAMES) == 2
            assert n.normalise(Category.VARIABLE_NAMES) == 3
            assert n.normalise(Category.FORMATTING) == 7

    def test_every_category_matches(self, clean, unresolved):
        for category in Category:
            assert unresolved.normalise(category) == clean.normalise(category)

    def test_unknowns_left_out_of_static_access(self, unresolved):
        # Math.max() and twice()
        assert unresolved.normalise(Category.UNQUALIFIED_STATIC_ACCESS) == 2

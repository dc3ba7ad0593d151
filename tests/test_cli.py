# tests/test_cli.py
"""
Tests for the gradestyle command line.
"""

import json

import pytest

from gradestyle.cli import EXIT_ERROR, EXIT_INFRA, EXIT_OK, main


RUBRIC = {
    "categories": [
        {"category": "MethodNames", "mode": "relative", "scores": [5, 15, 30]},
        {"category": "Ordering", "mode": "absolute", "scores": [1]},
    ]
}


@pytest.fixture
def repo(make_repo, shape_java, worker_java):
    return make_repo({"Shape.java": shape_java, "Worker.java": worker_java})


@pytest.fixture
def rubric(tmp_path):
    path = tmp_path / "rubric.json"
    path.write_text(json.dumps(RUBRIC))
    return path


@pytest.fixture
def report(tmp_path):
    path = tmp_path / "violations.json"
    path.write_text(json.dumps([
        {"rule": "MethodName", "file": "Shape.java", "line": 21},
        {"rule": "MethodName", "file": "Shape.java", "line": 30},
        {"rule": "MethodName", "file": "Worker.java", "line": 2},
        {"rule": "DeclarationOrder", "file": "Shape.java", "line": 13},
    ]))
    return path


class TestScore:

    def test_json_scores(self, repo, rubric, report, tmp_path):
        out = tmp_path / "scores.json"
        code = main([
            "score", str(repo), "--config", str(rubric),
            "--violations", str(report), "-o", str(out),
        ])
        assert code == EXIT_OK
        # 3 of 6 methods is 50 per hundred; one ordering violation
        assert json.loads(out.read_text()) == {"MethodNames": 0, "Ordering": 0}

    def test_details(self, repo, rubric, report, capsys):
        code = main([
            "score", str(repo), "-c", str(rubric),
            "--violations", str(report), "--details",
        ])
        assert code == EXIT_OK
        details = json.loads(capsys.readouterr().out)
        assert details[0]["size"] == 6
        assert details[0]["raw_value"] == 50
        assert details[1]["size"] is None

    def test_table(self, repo, rubric, report, capsys):
        code = main([
            "score", str(repo), "-c", str(rubric),
            "--violations", str(report), "--format", "table",
        ])
        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "STYLE SCORE REPORT" in out
        assert "Method Names" in out
        assert "\x1b[" not in out

    def test_checkstyle_report(self, repo, rubric, tmp_path, capsys):
        xml = tmp_path / "checkstyle-result.xml"
        xml.write_text(
            '<checkstyle><file name="Shape.java">'
            '<error line="1" source="com.puppycrawl.tools.checkstyle.checks.coding.DeclarationOrderCheck"/>'
            "</file></checkstyle>"
        )
        code = main(["score", str(repo), "-c", str(rubric), "--checkstyle", str(xml)])
        assert code == EXIT_OK
        assert json.loads(capsys.readouterr().out) == {"MethodNames": 3, "Ordering": 0}

    def test_no_reports_scores_everything_full(self, repo, rubric, capsys):
        assert main(["score", str(repo), "-c", str(rubric)]) == EXIT_OK
        assert json.loads(capsys.readouterr().out) == {"MethodNames": 3, "Ordering": 1}

    def test_missing_config_file(self, repo, tmp_path):
        code = main(["score", str(repo), "-c", str(tmp_path / "nope.json")])
        assert code == EXIT_INFRA

    def test_bad_config(self, repo, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps([{"category": "Spelling", "mode": "absolute", "scores": [1]}]))
        assert main(["score", str(repo), "-c", str(bad)]) == EXIT_ERROR

    def test_bad_report(self, repo, rubric, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{}")
        assert main(["score", str(repo), "-c", str(rubric), "--violations", str(bad)]) == EXIT_ERROR

    def test_unparsable_source(self, make_repo, rubric):
        broken = make_repo({"Broken.java": "class Broken {"})
        assert main(["score", str(broken), "-c", str(rubric)]) == EXIT_INFRA

    def test_bad_jobs_env(self, repo, rubric, monkeypatch):
        monkeypatch.setenv("GRADESTYLE_JOBS", "zero")
        assert main(["score", str(repo), "-c", str(rubric)]) == EXIT_ERROR

    def test_jobs_flag(self, repo, rubric, report, capsys):
        code = main([
            "score", str(repo), "-c", str(rubric), "--violations", str(report), "-j", "2",
        ])
        assert code == EXIT_OK
        assert json.loads(capsys.readouterr().out)["MethodNames"] == 0

    def test_config_is_required(self, repo):
        with pytest.raises(SystemExit):
            main(["score", str(repo)])


class TestNormalise:

    def test_json(self, repo, capsys):
        code = main(["normalise", str(repo), "MethodNames", "Empty Catch Block", "-f", "json"])
        assert code == EXIT_OK
        assert json.loads(capsys.readouterr().out) == {"MethodNames": 6, "EmptyCatchBlock": 2}

    def test_alias_and_table(self, repo, capsys):
        assert main(["normalize", str(repo), "ClassNames"]) == EXIT_OK
        out = capsys.readouterr().out
        assert out.split() == ["Class", "Names", "4"]

    def test_unknown_category(self, repo):
        assert main(["normalise", str(repo), "Spelling"]) == EXIT_ERROR

    def test_missing_repository(self, tmp_path):
        assert main(["normalise", str(tmp_path / "nope")]) == EXIT_INFRA


class TestCategories:

    def test_json(self, capsys):
        assert main(["categories", "--format", "json"]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert len(data) == 21
        by_name = {d["category"]: d for d in data}
        assert by_name["Javadoc"]["display_name"] == "Javadoc Formatting"
        assert "CPD" in by_name["Clones"]["rules"]

    def test_table(self, capsys):
        assert main(["categories"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "UnqualifiedStaticAccess" in out
        assert "    UnqualifiedStaticMethodCall" in out


class TestMain:

    def test_no_command(self):
        assert main([]) == EXIT_INFRA

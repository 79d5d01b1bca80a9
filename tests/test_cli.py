"""Tests for the command line interface."""

import io
import json

import pytest

from agent_lint.cli import EXIT_FAILED, EXIT_OK, EXIT_USAGE, load_profile, main
from agent_lint.errors import UnknownProfileError
from agent_lint.models.principle import Principle

ERROR_RESPONSE = {
    "status": "error",
    "error": {
        "code": "NOT_FOUND",
        "message": "Order 42 does not exist",
        "remediation": "List orders with GET /v1/orders",
    },
}


def _write(tmp_path, name, content) -> str:
    path = tmp_path / name
    path.write_text(content if isinstance(content, str) else json.dumps(content))
    return str(path)


class TestResponseCommand:
    def test_passing_response(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", ERROR_RESPONSE)
        code = main(["response", path, "--principle", "error_remediation"])
        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "PASSED" in out
        assert "ok code at $.error.code" in out

    def test_failing_response(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", {"status": "ok"})
        code = main(["response", path, "--profile", "minimal"])
        out = capsys.readouterr().out
        assert code == EXIT_FAILED
        assert "-- recommendedNextAction" in out
        assert "[error_remediation] skipped" in out
        assert "FAILED" in out

    def test_json_output(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", {"confidence": 0.9})
        code = main(["response", path, "--principle", "uncertainty", "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_OK
        assert data["passed"] is True
        assert data["warning_count"] == 2

    def test_strict_flag(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", {"confidence": 0.9})
        code = main(["response", path, "--principle", "uncertainty", "--strict"])
        assert code == EXIT_FAILED

    def test_expect_error_flag(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", {"status": "ok"})
        code = main(["response", path, "--principle", "error_remediation", "--expect-error"])
        assert code == EXIT_FAILED

    def test_root_flag(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", {"data": {"confidence": 0.9}})
        code = main(["response", path, "--principle", "uncertainty", "--root", "data", "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_OK
        assert data["results"][0]["findings"][0]["path"] == "$.data.confidence"

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(ERROR_RESPONSE)))
        code = main(["response", "-", "--principle", "error_remediation"])
        assert code == EXIT_OK

    def test_invalid_json(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", "{oops")
        code = main(["response", path, "--principle", "uncertainty"])
        assert code == EXIT_USAGE
        assert "not valid JSON" in capsys.readouterr().err

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "resp.json"
        path.write_bytes(b"\xff\xfe{")
        code = main(["response", str(path), "--principle", "uncertainty"])
        assert code == EXIT_USAGE
        assert "not valid UTF-8" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        code = main(["response", str(tmp_path / "absent.json")])
        assert code == EXIT_USAGE

    def test_unknown_profile(self, tmp_path, capsys):
        path = _write(tmp_path, "resp.json", {})
        code = main(["response", path, "--profile", "maximal"])
        assert code == EXIT_USAGE
        assert "maximal" in capsys.readouterr().err

    def test_profile_file(self, tmp_path, capsys):
        profile = _write(tmp_path, "team.json", {"name": "team", "principles": ["uncertainty"]})
        path = _write(tmp_path, "resp.json", {"confidence": 0.4})
        code = main(["response", path, "--profile", profile])
        assert code == EXIT_OK
        assert "Profile: team" in capsys.readouterr().out

    def test_invalid_profile_file(self, tmp_path, capsys):
        profile = _write(tmp_path, "bad.json", {"principles": []})
        path = _write(tmp_path, "resp.json", {})
        code = main(["response", path, "--profile", profile])
        assert code == EXIT_USAGE
        assert "Invalid profile" in capsys.readouterr().err


class TestDocsCommand:
    def test_docs_pass(self, tmp_path, capsys):
        path = _write(tmp_path, "guide.md", "## Uncertainty\n```json\n{\"confidence\": 0.8}\n```\n")
        code = main(["docs", path])
        assert code == EXIT_OK
        assert "JSON examples: 1" in capsys.readouterr().out

    def test_docs_fail(self, tmp_path, capsys):
        path = _write(tmp_path, "guide.md", "## Uncertainty\n```json\n{\"confidence\": }\n```\n## Recovery\n")
        code = main(["docs", path])
        out = capsys.readouterr().out
        assert code == EXIT_FAILED
        assert "invalid JSON at line 2" in out
        assert "no JSON example under 'Recovery'" in out

    def test_docs_lint_examples(self, tmp_path, capsys):
        path = _write(tmp_path, "guide.md", "## Uncertainty\n```json\n{\"confidence\": 3}\n```\n")
        code = main(["docs", path, "--lint-examples"])
        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "does not follow uncertainty: confidence" in out


class TestPrinciplesCommand:
    def test_text(self, capsys):
        assert main(["principles"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "intent_signaling:" in out
        assert "* status (string)" in out

    def test_json(self, capsys):
        assert main(["principles", "--format", "json"]) == EXIT_OK
        assert len(json.loads(capsys.readouterr().out)) == 10


class TestLoadProfile:
    def test_builtin(self):
        assert load_profile("decision").principles[1] == Principle.UNCERTAINTY

    def test_builtin_name_wins_over_local_file(self, tmp_path, monkeypatch):
        _write(tmp_path, "minimal", {"name": "team", "principles": ["uncertainty"]})
        monkeypatch.chdir(tmp_path)
        profile = load_profile("minimal")
        assert profile.name == "minimal"
        assert profile.principles == [Principle.INTENT_SIGNALING, Principle.ERROR_REMEDIATION]

    def test_unknown_name_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(UnknownProfileError):
            load_profile("maximal")


class TestConfigErrors:
    def test_bad_environment_value(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("AGENT_LINT_REVIEW_THRESHOLD", "high")
        path = _write(tmp_path, "resp.json", {"confidence": 0.9})
        code = main(["response", path, "--principle", "uncertainty"])
        assert code == EXIT_USAGE
        assert "AGENT_LINT" in capsys.readouterr().err

    def test_out_of_range_environment_value(self, monkeypatch):
        monkeypatch.setenv("AGENT_LINT_CLOCK_SKEW_SECONDS", "-5")
        assert main(["principles"]) == EXIT_USAGE

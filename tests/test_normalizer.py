"""workflow_run payload -> DeploymentStatus mapping."""

from __future__ import annotations

import json

import pytest

from pushdeploy.core.errors import PayloadError
from pushdeploy.modules.webhooks.normalizer import normalize, parse_event, preview_url_for

DOMAIN = "pushdeploy.ml"


def _event(**workflow_run) -> bytes:
    payload = {
        "action": "completed",
        "repository": {"full_name": "octo/site", "id": 1},
        "workflow_run": workflow_run,
    }
    return json.dumps(payload).encode()


def _normalize(raw: bytes):
    return normalize(parse_event(raw), DOMAIN)


class TestStatus:
    def test_conclusion_and_branch(self):
        record = _normalize(_event(conclusion="success", status="completed", head_branch="main"))
        assert record.repository_name == "octo/site"
        assert record.status == "success"
        assert record.preview_url == "https://main.pushdeploy.ml"

    def test_falls_back_to_run_status(self):
        record = _normalize(_event(conclusion=None, status="in_progress", head_branch="feature"))
        assert record.status == "in_progress"

    def test_empty_conclusion_counts_as_absent(self):
        assert _normalize(_event(conclusion="", status="queued")).status == "queued"

    def test_nothing_known(self):
        record = _normalize(_event())
        assert record.status == "unknown"
        assert record.preview_url is None

    def test_no_workflow_run(self):
        raw = json.dumps({"repository": {"full_name": "octo/site"}}).encode()
        record = _normalize(raw)
        assert record.status == "unknown"
        assert record.preview_url is None

    def test_explicit_nulls(self):
        record = _normalize(_event(conclusion=None, status=None, head_branch=None))
        assert record.status == "unknown"
        assert record.preview_url is None

    def test_provider_vocabulary_passes_through(self):
        assert _normalize(_event(conclusion="timed_out")).status == "timed_out"


class TestPreviewUrl:
    def test_empty_branch_gives_none(self):
        assert _normalize(_event(conclusion="success", head_branch="")).preview_url is None

    def test_template(self):
        assert preview_url_for("staging", "example.dev") == "https://staging.example.dev"

    def test_none(self):
        assert preview_url_for(None, DOMAIN) is None

    def test_slash_in_branch(self):
        record = _normalize(_event(conclusion="success", head_branch="feature/x"))
        assert record.preview_url == "https://feature-x.pushdeploy.ml"

    @pytest.mark.parametrize("branch,expected", [
        ("Feature/Login_Page", "https://feature-login-page.pushdeploy.ml"),
        ("release/1.2.0", "https://release-1-2-0.pushdeploy.ml"),
        ("-hotfix-", "https://hotfix.pushdeploy.ml"),
    ])
    def test_branch_becomes_hostname_label(self, branch, expected):
        assert preview_url_for(branch, DOMAIN) == expected

    @pytest.mark.parametrize("branch", ["   ", "///", "__"])
    def test_unusable_branch_gives_none(self, branch):
        assert preview_url_for(branch, DOMAIN) is None

    def test_long_branch_truncated_to_label_limit(self):
        url = preview_url_for("a" * 100, DOMAIN)
        assert url == "https://" + "a" * 63 + ".pushdeploy.ml"


class TestParseEvent:
    def test_missing_repository(self):
        with pytest.raises(PayloadError):
            parse_event(json.dumps({"workflow_run": {"conclusion": "success"}}).encode())

    def test_missing_full_name(self):
        with pytest.raises(PayloadError, match="repository.full_name"):
            parse_event(json.dumps({"repository": {"id": 1}}).encode())

    def test_blank_full_name(self):
        with pytest.raises(PayloadError):
            parse_event(json.dumps({"repository": {"full_name": "  "}}).encode())

    def test_invalid_json(self):
        with pytest.raises(PayloadError):
            parse_event(b"not json")

    def test_extra_fields_ignored(self):
        raw = json.dumps({
            "repository": {"full_name": "octo/site", "private": True},
            "workflow_run": {"id": 42, "conclusion": "failure", "head_branch": "dev", "run_number": 7},
            "sender": {"login": "octocat"},
        }).encode()
        record = _normalize(raw)
        assert record.status == "failure"
        assert record.preview_url == "https://dev.pushdeploy.ml"

"""Shared fixtures: an in-memory Supabase table and a mocked GitHub API."""

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from pushdeploy.config.settings import Settings
from pushdeploy.main import create_app

WEBHOOK_SECRET = "webhook-test-secret"
GITHUB_TOKEN = "ghp_test_token"


class FakeQuery:
    """Just enough of the postgrest query builder for DeploymentStatusStore."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.rows = db.tables.setdefault(table, {})
        self._op = None
        self._payload = None
        self._on_conflict = None
        self._filters: list[tuple[str, object]] = []
        self._order = None
        self._single = False

    def upsert(self, payload, on_conflict=None):
        self._op, self._payload, self._on_conflict = "upsert", payload, on_conflict
        return self

    def select(self, columns="*"):
        self._op = "select"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def maybe_single(self):
        self._single = True
        return self

    def execute(self):
        if self.db.fail_with is not None:
            raise self.db.fail_with
        self.db.calls.append((self.table, self._op, self._payload))
        if self._op == "upsert":
            key = self._payload[self._on_conflict]
            self.rows[key] = dict(self._payload)
            return SimpleNamespace(data=[dict(self._payload)])

        rows = [
            dict(r) for r in self.rows.values()
            if all(r.get(c) == v for c, v in self._filters)
        ]
        if self._order:
            column, desc = self._order
            rows.sort(key=lambda r: r[column], reverse=desc)
        if self._single:
            return SimpleNamespace(data=rows[0]) if rows else None
        return SimpleNamespace(data=rows)


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, dict] = {}
        self.calls: list = []
        self.fail_with: Exception | None = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str = "deployments") -> dict:
        return self.tables.get(name, {})


class FakeGitHub:
    """Records dispatch calls; answers with whatever `response` is set to."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.response = httpx.Response(204)
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def make_settings(**overrides) -> Settings:
    values = dict(
        github_token=GITHUB_TOKEN,
        github_webhook_secret=WEBHOOK_SECRET,
        preview_domain="pushdeploy.ml",
        environment="test",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def http_client(github):
    return httpx.AsyncClient(transport=httpx.MockTransport(github.handler))


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def app(settings, supabase, http_client):
    return create_app(settings=settings, supabase=supabase, http_client=http_client)


@pytest.fixture
def client(app):
    # No context manager: lifespan would build real clients
    return TestClient(app, raise_server_exceptions=False)

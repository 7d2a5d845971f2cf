"""Shared test fixtures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fakes import FakeScorer, upstream_result
from kindrewrite.main import app, get_moderation_service
from kindrewrite.moderation import ModerationService, ToxicityScorer
from kindrewrite.settings import ModerationConfig


@pytest.fixture
def fake_scorer():
    return FakeScorer(result=upstream_result(0.754, toxicity=0.754, insult=0.2))


@pytest.fixture
def config():
    return ModerationConfig(api_token="hf_test_token")


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_service(client):
    """Route /api/moderate through a ModerationService of the test's choosing."""

    def _use(scorer: ToxicityScorer, token: str | None = "hf_test_token") -> ModerationService:
        svc = ModerationService(ModerationConfig(api_token=token), scorer)
        app.dependency_overrides[get_moderation_service] = lambda: svc
        return svc

    return _use

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from ai_cofounder.api import create_app
from ai_cofounder.dependencies import AppClients, Settings


def test_demo_rejects_other_tokens(client):
    resp = client.get("/api/projects", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    assert resp.json()["error_message"] == "Invalid token"


@pytest.mark.parametrize("header", ["", "Token abc", "Bearer ", "Bearer"])
def test_malformed_authorization_header(client, header):
    resp = client.get("/api/projects", headers={"Authorization": header})
    assert resp.status_code == 401


@pytest.fixture
def supabase_client(fake_supabase):
    app = create_app(settings=Settings(auth_strategy="supabase"), clients=AppClients(supabase=fake_supabase))
    return TestClient(app)


def test_supabase_strategy_accepts_valid_jwt(supabase_client, fake_supabase):
    fake_supabase.auth.tokens["jwt-1"] = SimpleNamespace(id="u-42", email="u@example.com")
    resp = supabase_client.post("/api/projects", json={"name": "X"}, headers={"Authorization": "Bearer jwt-1"})
    assert resp.status_code == 201
    assert fake_supabase.tables["projects"][0]["user_id"] == "u-42"


def test_supabase_strategy_rejects_unknown_jwt(supabase_client):
    resp = supabase_client.get("/api/projects", headers={"Authorization": "Bearer forged"})
    assert resp.status_code == 401
    assert resp.json()["error_message"] == "Could not validate credentials"


def test_demo_rejects_token_sharing_a_prefix(client):
    resp = client.get("/api/projects", headers={"Authorization": "Bearer test-token-2"})
    assert resp.status_code == 401

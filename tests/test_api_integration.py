"""
Integration tests for the Minibank API
Tests end-to-end workflows using FastAPI TestClient
"""

import pytest
from fastapi.testclient import TestClient

from minibank.api import create_app
from minibank.storage import InMemorySnapshotStorage, JSONFileStorage
from minibank.system import BankingSystem


@pytest.fixture
def system():
    return BankingSystem(InMemorySnapshotStorage())


@pytest.fixture
def client(system):
    """Create a test client around an in-memory banking system"""
    return TestClient(create_app(system))


def create_user(client, name="Alice"):
    r = client.post("/users", json={"name": name})
    assert r.status_code == 201
    return r.json()["user"]


def create_account(client, user_id):
    r = client.post("/accounts", json={"user_id": user_id})
    assert r.status_code == 201
    return r.json()["account"]


class TestHealthEndpoints:
    """Test basic health and root endpoints"""

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        data = r.json()
        assert data["name"] == "Minibank API"
        assert "accounts" in data["endpoints"]


class TestUserFlow:
    """End-to-end user management tests"""

    def test_create_and_get_user(self, client):
        user = create_user(client)

        r = client.get(f"/users/{user['id']}")
        assert r.status_code == 200
        assert r.json() == {"id": user["id"], "name": "Alice", "account_ids": []}

    def test_create_user_without_name(self, client):
        """Test missing and empty names are rejected"""
        assert client.post("/users", json={}).status_code == 422

        r = client.post("/users", json={"name": ""})
        assert r.status_code == 422
        assert r.json()["detail"] == "User name is required"

    def test_list_users(self, client):
        create_user(client, "Alice")
        create_user(client, "Bob")

        r = client.get("/users")
        assert [u["name"] for u in r.json()["users"]] == ["Alice", "Bob"]

    def test_unknown_user(self, client):
        r = client.get("/users/missing")
        assert r.status_code == 404
        assert r.json()["detail"] == "User not found"


class TestAccountFlow:
    """End-to-end account and operation tests"""

    def test_create_account(self, client):
        user = create_user(client)
        account = create_account(client, user["id"])

        assert account["owner_id"] == user["id"]
        assert account["state"] == "active"
        assert account["balance"] == "0"

        r = client.get(f"/users/{user['id']}")
        assert r.json()["account_ids"] == [account["id"]]

    def test_create_account_unknown_user(self, client):
        r = client.post("/accounts", json={"user_id": "missing"})
        assert r.status_code == 404

    def test_list_accounts(self, client):
        user = create_user(client)
        first = create_account(client, user["id"])
        second = create_account(client, user["id"])

        r = client.get("/accounts")
        assert [a["id"] for a in r.json()["accounts"]] == [first["id"], second["id"]]

    def test_deposit_and_withdraw(self, client):
        user = create_user(client)
        account = create_account(client, user["id"])

        r = client.post(f"/accounts/{account['id']}/deposit", json={"amount": "100"})
        assert r.status_code == 200
        assert r.json()["balance"] == "100.00"
        assert r.json()["operation"]["kind"] == "deposit"

        r = client.post(f"/accounts/{account['id']}/withdraw", json={"amount": 30.5})
        assert r.status_code == 200
        assert r.json()["balance"] == "69.50"

        r = client.get(f"/accounts/{account['id']}")
        data = r.json()
        assert data["balance"] == "69.50"
        assert [op["kind"] for op in data["operations"]] == ["deposit", "withdraw"]

        r = client.get(f"/accounts/{account['id']}/operations")
        assert [op["amount"] for op in r.json()["operations"]] == ["100.00", "30.50"]

    @pytest.mark.parametrize("payload", [
        {}, {"amount": "abc"}, {"amount": 0}, {"amount": "-10"}, {"amount": "1e5000"}, {"amount": "0.001"},
    ])
    def test_invalid_amount(self, client, payload):
        user = create_user(client)
        account = create_account(client, user["id"])

        r = client.post(f"/accounts/{account['id']}/deposit", json=payload)
        assert r.status_code == 422

        r = client.get(f"/accounts/{account['id']}")
        assert r.json()["balance"] == "0"
        assert r.json()["operations"] == []

    def test_alice_scenario(self, client):
        """Test overdraft refusal and deposits on a deactivated account"""
        user = create_user(client, "Alice")
        account_id = create_account(client, user["id"])["id"]

        client.post(f"/accounts/{account_id}/deposit", json={"amount": 100})

        r = client.post(f"/accounts/{account_id}/withdraw", json={"amount": 150})
        assert r.status_code == 409
        assert r.json()["detail"] == "Insufficient funds"

        r = client.post(f"/accounts/{account_id}/deactivate")
        assert r.status_code == 200
        assert r.json()["account"]["state"] == "inactive"

        r = client.post(f"/accounts/{account_id}/deposit", json={"amount": 10})
        assert r.status_code == 409
        assert r.json()["detail"] == "Account is inactive"

        r = client.post(f"/accounts/{account_id}/activate")
        assert r.json()["account"]["state"] == "active"
        assert r.json()["account"]["balance"] == "100.00"

    def test_unknown_account(self, client):
        assert client.get("/accounts/missing").status_code == 404
        assert client.post("/accounts/missing/deactivate").status_code == 404
        assert client.post("/accounts/missing/deposit", json={"amount": 1}).status_code == 404


class TestSearch:
    """Account search tests"""

    def test_search_by_user(self, client):
        alice = create_user(client, "Alice")
        bob = create_user(client, "Bob")
        first = create_account(client, alice["id"])
        create_account(client, bob["id"])
        second = create_account(client, alice["id"])

        r = client.get("/search/accounts/by_user", params={"user_id": alice["id"]})
        assert r.status_code == 200
        assert [a["id"] for a in r.json()["accounts"]] == [first["id"], second["id"]]

        r = client.get("/search/accounts/by_user", params={"user_id": "missing"})
        assert r.status_code == 404

    def test_search_by_id(self, client):
        user = create_user(client)
        account = create_account(client, user["id"])

        r = client.get("/search/accounts/by_id", params={"account_id": account["id"]})
        assert r.status_code == 200
        assert r.json()["id"] == account["id"]

        r = client.get("/search/accounts/by_id", params={"account_id": "missing"})
        assert r.status_code == 404


class TestPersistence:
    """Test the app persists state across restarts"""

    def test_restart_restores_state(self, tmp_path):
        path = tmp_path / "db" / "data.json"
        client = TestClient(create_app(BankingSystem(JSONFileStorage(path))))

        user = create_user(client)
        account = create_account(client, user["id"])
        client.post(f"/accounts/{account['id']}/deposit", json={"amount": "42.10"})

        restarted = BankingSystem(JSONFileStorage(path))
        restarted.load()
        client = TestClient(create_app(restarted))

        r = client.get(f"/accounts/{account['id']}")
        assert r.status_code == 200
        assert r.json()["balance"] == "42.1"
        assert r.json()["operations"] == []

from __future__ import annotations

import logging
import os
import sys

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from main import app


@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    """Send app logs to stdout so they show up under pytest -s."""
    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
               for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "WARNING").upper())


@pytest.fixture(autouse=True)
def mongo(monkeypatch):
    """Fresh in-memory database per test."""
    fake = mongomock.MongoClient()["printing_orders_test"]
    monkeypatch.setattr(database, "db", fake)
    return fake


@pytest.fixture
def client():
    return TestClient(app)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, email: str, name: str | None = None) -> dict:
    r = client.post("/auth/register", json={"email": email, "password": "secret123", "name": name})
    assert r.status_code == 200, r.text
    headers = auth_headers(r.json()["access_token"])
    me = client.get("/me", headers=headers)
    assert me.status_code == 200, me.text
    return {"headers": headers, "id": me.json()["id"], "role": me.json()["role"]}


@pytest.fixture
def users(client):
    """admin (first registered), two input staff and one approver."""
    admin = register(client, "admin@demo.com", "Admin User")
    inputer = register(client, "input@demo.com", "Input User")
    other = register(client, "other@demo.com", "Other Input")
    approver = register(client, "approval@demo.com", "Approval User")
    r = client.patch(f"/users/{approver['id']}", json={"role": "APPROVAL_STAFF"}, headers=admin["headers"])
    assert r.status_code == 200, r.text
    approver["role"] = r.json()["role"]
    return {"admin": admin, "inputer": inputer, "other": other, "approver": approver}


def task_order_payload(**overrides) -> dict:
    payload = {
        "title": "Brosur A5 1000 lembar",
        "client": "PT Maju Jaya",
        "priority": "high",
        "start_date": "2024-01-01",
        "tasks": [
            {"id": "A", "name": "Desain", "duration": 3, "dependsOn": [], "pic": "Budi"},
            {"id": "B", "name": "Cetak", "duration": 2, "dependsOn": ["A"], "pic": "Sari"},
        ],
    }
    payload.update(overrides)
    return payload


def create_task_order(client: TestClient, headers: dict, **overrides) -> str:
    r = client.post("/orders/task-based", json=task_order_payload(**overrides), headers=headers)
    assert r.status_code == 200, r.text
    return r.json()["order_id"]

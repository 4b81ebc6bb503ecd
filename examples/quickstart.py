#!/usr/bin/env python3
"""
Taskboard Quickstart — full lifecycle in one script.

Registers two users → creates tasks → updates → shows that each user
only sees their own tasks → deletes.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8000/api"


def register(client: httpx.Client, username: str) -> str:
    resp = client.post("/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": "demo-password-123",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    return resp.json()["token"]


def main():
    run_id = uuid.uuid4().hex[:6]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking backend health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Backend not reachable at {BASE}")
        print("Start it with:  uvicorn taskboard.main:app --reload --port 8000")
        sys.exit(1)
    health = resp.json()
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")
    print(f"  Redis:    {'✓' if health['redis'] == 'ok' else '✗ (rate limiting off)'}")

    # ── Two users ─────────────────────────────────────────────────
    print("\n1. Registering alice and bob...")
    alice = {"Authorization": f"Bearer {register(client, f'alice-{run_id}')}"}
    bob = {"Authorization": f"Bearer {register(client, f'bob-{run_id}')}"}

    # ── Alice creates tasks ───────────────────────────────────────
    print("\n2. Alice creates two tasks...")
    for title in ("Buy milk", "Write report"):
        resp = client.post("/tasks", json={"title": title}, headers=alice)
        assert resp.status_code == 201, f"Failed: {resp.text}"
    tasks = client.get("/tasks", headers=alice).json()
    for t in tasks:
        print(f"   {t['id'][:8]}...  {t['title']}")

    # ── Update ────────────────────────────────────────────────────
    newest = tasks[0]
    print(f"\n3. Alice completes '{newest['title']}'...")
    resp = client.put(f"/tasks/{newest['id']}", json={"completed": True}, headers=alice)
    print(f"   completed={resp.json()['completed']}")

    # ── Isolation ─────────────────────────────────────────────────
    print("\n4. Bob looks around...")
    print(f"   Bob's task list: {client.get('/tasks', headers=bob).json()}")
    resp = client.delete(f"/tasks/{newest['id']}", headers=bob)
    print(f"   Bob deleting Alice's task → {resp.status_code} {resp.json()['message']}")

    # ── Delete ────────────────────────────────────────────────────
    print("\n5. Alice deletes the task...")
    resp = client.delete(f"/tasks/{newest['id']}", headers=alice)
    print(f"   {resp.status_code} {resp.json()['message']}")

    print("\nDone.")


if __name__ == "__main__":
    main()

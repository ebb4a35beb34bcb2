import re

import pytest
from starlette.websockets import WebSocketDisconnect

from unishare.domain.enums import UserRole

from conftest import BUCKET_BASE, PASSWORD, auth_headers

API = "/api/v1"


def _submission(**overrides) -> dict:
    data = {
        "course_name": "Data Structures",
        "title": "Linked list notes",
        "description": "Week 3 lecture notes",
        "resource_type": "Notes",
        "department": "Computer Science",
        "semester": "3",
        "section": "A",
        "batch": "2024",
        "year": 2025,
        "file_name": "lists.pdf",
        "file_url": f"{BUCKET_BASE}resources/abc_lists.pdf",
        "file_size": "1.20 MB",
        "file_type": "application/pdf",
        "storage_path": "resources/abc_lists.pdf",
    }
    data.update(overrides)
    return data


def test_register_verify_login_and_me(client, notifications):
    registered = client.post(f"{API}/auth/register", json={
        "full_name": "Rita Register", "email": "rita@uni.edu", "password": PASSWORD,
    })
    token = re.search(r"/verify-email/([0-9a-f]{64})", notifications.last("verification").html_body).group(1)
    verified = client.get(f"{API}/auth/verify-email/{token}")
    login = client.post(f"{API}/auth/login", json={"email": "RITA@uni.edu", "password": PASSWORD})
    me = client.get(f"{API}/auth/me", headers={
        "Authorization": f"Bearer {login.json()['tokens']['access_token']}"
    })

    assert registered.status_code == 201
    assert verified.status_code == 200
    assert login.status_code == 200
    assert me.json()["email"] == "rita@uni.edu"
    assert me.json()["is_verified"]


def test_duplicate_registration_is_conflict(client, notifications):
    payload = {"full_name": "Rita Register", "email": "rita@uni.edu", "password": PASSWORD}
    client.post(f"{API}/auth/register", json=payload)

    response = client.post(f"{API}/auth/register", json=payload)

    assert response.status_code == 409
    assert response.json()["kind"] == "already_exists"


async def test_locked_account_is_423_with_lock_details(client, make_user):
    await make_user()
    for _ in range(4):
        response = client.post(f"{API}/auth/login", json={"email": "student@uni.edu", "password": "wrong-pass1"})
        assert response.status_code == 401

    locked = client.post(f"{API}/auth/login", json={"email": "student@uni.edu", "password": "wrong-pass1"})
    still_locked = client.post(f"{API}/auth/login", json={"email": "student@uni.edu", "password": PASSWORD})

    assert locked.status_code == 423
    body = locked.json()
    assert body["success"] is False
    assert body["kind"] == "account_locked"
    assert body["remaining_attempts"] == 0
    assert "lock_until" in body
    assert still_locked.status_code == 423


async def test_resend_cooldown_is_429_with_retry_after(client, make_user):
    user = await make_user(verified=False)

    first = client.post(f"{API}/auth/resend-verification", headers=auth_headers(user))
    second = client.post(f"{API}/auth/resend-verification", headers=auth_headers(user))

    assert first.status_code == 200
    assert first.json()["remaining_attempts"] == 4
    assert second.status_code == 429
    assert 0 < int(second.headers["Retry-After"]) <= 120
    assert second.json()["wait_seconds"] == int(second.headers["Retry-After"])


def test_forgot_password_answer_does_not_reveal_accounts(client, notifications):
    response = client.post(f"{API}/auth/forgot-password", json={"email": "ghost@uni.edu"})

    assert response.status_code == 200
    assert notifications.sent == []


def test_missing_or_bad_token_is_rejected(client):
    missing = client.get(f"{API}/users/me")
    bad = client.get(f"{API}/users/me", headers={"Authorization": "Bearer not-a-token"})

    assert missing.status_code in (401, 403)
    assert bad.status_code == 401


async def test_admin_routes_need_admin(client, make_user):
    student = await make_user()

    response = client.get(f"{API}/users/", headers=auth_headers(student))

    assert response.status_code == 403


async def test_unverified_user_cannot_submit_or_upload(client, make_user):
    user = await make_user(verified=False)

    submit = client.post(f"{API}/resources/", json=_submission(), headers=auth_headers(user))
    upload = client.post(
        f"{API}/files/upload",
        files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
        headers=auth_headers(user),
    )

    assert submit.status_code == 403
    assert upload.status_code == 403


async def test_upload_then_submit_then_approve(client, make_user, notifications, storage):
    student = await make_user()
    admin = await make_user(email="admin@uni.edu", full_name="Ada Admin", role=UserRole.ADMIN)

    upload = client.post(
        f"{API}/files/upload",
        files={"file": ("notes.pdf", b"%PDF-1.4 notes", "application/pdf")},
        headers=auth_headers(student),
    ).json()
    submitted = client.post(
        f"{API}/resources/",
        json=_submission(file_url=upload["file_url"], storage_path=upload["storage_path"]),
        headers=auth_headers(student),
    )
    resource_id = submitted.json()["resource"]["id"]
    before = client.get(f"{API}/resources/").json()
    approved = client.put(f"{API}/resources/{resource_id}/approve", headers=auth_headers(admin))
    again = client.put(f"{API}/resources/{resource_id}/approve", headers=auth_headers(admin))
    after = client.get(f"{API}/resources/", params={"department": "All", "search": "linked"}).json()

    assert upload["storage_path"] in storage.stored
    assert submitted.status_code == 201
    assert submitted.json()["resource"]["status"] == "pending"
    assert before["count"] == 0
    assert approved.status_code == 200
    assert again.status_code == 409
    assert after["count"] == 1
    assert after["resources"]["2025"][0]["id"] == resource_id
    assert notifications.last("resource_approved").recipient == "student@uni.edu"


async def test_empty_upload_is_refused(client, make_user):
    user = await make_user()

    response = client.post(
        f"{API}/files/upload", files={"file": ("empty.txt", b"", "text/plain")}, headers=auth_headers(user)
    )

    assert response.status_code == 400


async def test_websocket_rejects_invalid_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws/chat/Computer%20Science/3?token=bogus"):
            pass

    assert exc.value.code == 4001


async def test_websocket_join_and_send_broadcasts(client, make_user):
    user = await make_user()
    token = auth_headers(user)["Authorization"].split()[1]

    with client.websocket_connect(f"/ws/chat/Computer%20Science/3?token={token}") as ws:
        ws.send_json({"event": "join_room"})
        joined = ws.receive_json()
        active = ws.receive_json()
        ws.send_json({"event": "send_message", "message": "hello room"})
        sent = ws.receive_json()
        ws.send_json({"event": "dance"})
        unknown = ws.receive_json()
        ws.send_json({"event": "leave_room"})

    history = client.get(f"{API}/chat/Computer%20Science/3/messages", headers=auth_headers(user)).json()

    assert joined == {"event": "joined", "room_id": "Computer Science_3"}
    assert active["event"] == "active_users"
    assert [u["full_name"] for u in active["users"]] == ["Sam Student"]
    assert sent["event"] == "new_message"
    assert sent["message"]["message"] == "hello room"
    assert sent["message"]["user_name"] == "Sam Student"
    assert unknown["event"] == "error"
    assert [m["message"] for m in history["messages"]] == ["hello room"]


async def test_websocket_survives_a_non_json_frame(client, make_user):
    user = await make_user()
    token = auth_headers(user)["Authorization"].split()[1]

    with client.websocket_connect(f"/ws/chat/Computer%20Science/3?token={token}") as ws:
        ws.send_text("{not json")
        error = ws.receive_json()
        ws.send_json({"event": "join_room"})
        joined = ws.receive_json()

    assert error == {"event": "error", "success": False, "kind": "validation_error", "message": "invalid_payload"}
    assert joined == {"event": "joined", "room_id": "Computer Science_3"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "healthy"
    assert client.get(f"{API}/health").json()["status"] == "healthy"

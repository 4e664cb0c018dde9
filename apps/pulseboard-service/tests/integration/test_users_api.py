import pytest

from pulseboard.db import models

pytestmark = pytest.mark.integration


def test_create_and_get_user(client, admin_headers):
    payload = {"name": "Ann Lee", "email": "Ann.Lee@Example.com", "position": "Designer", "role": "manager"}
    r = client.post("/api/users", json=payload, headers=admin_headers)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["email"] == "ann.lee@example.com"
    assert body["status"] == "active"
    assert body["joinDate"] is not None
    assert "createdAt" in body and "updatedAt" in body

    fetched = client.get(f"/api/users/{body['id']}")
    assert fetched.status_code == 200 and fetched.json()["name"] == "Ann Lee"
    assert client.get("/api/users/999999").status_code == 404


def test_create_user_validation(client, admin_headers):
    client.post("/api/users", json={"name": "A", "email": "a@example.com"}, headers=admin_headers)
    dup = client.post("/api/users", json={"name": "B", "email": "A@example.com"}, headers=admin_headers)
    assert dup.status_code == 400 and dup.json()["detail"] == "Email already exists"
    assert client.post("/api/users", json={"name": "", "email": "c@example.com"}, headers=admin_headers).status_code == 422
    assert client.post("/api/users", json={"name": "C", "email": "not-an-email"}, headers=admin_headers).status_code == 422
    assert client.post("/api/users", json={"name": "C", "email": "c@example.com", "status": "away"},
                       headers=admin_headers).status_code == 422


def test_user_writes_require_admin(client, manager_headers, make_user):
    user = make_user()
    assert client.post("/api/users", json={"name": "X", "email": "x@example.com"}).status_code == 401
    assert client.post("/api/users", json={"name": "X", "email": "x@example.com"},
                       headers=manager_headers).status_code == 403
    assert client.delete(f"/api/users/{user.id}", headers=manager_headers).status_code == 403


def test_list_users_filters(client, make_user):
    make_user(name="Sarah Johnson", email="sarah@company.com", position="Developer", role="manager")
    make_user(name="Mike Chen", email="mike@company.com", position="QA Engineer", status="inactive")
    make_user(name="John Smith", email="john@company.com", position="Project Manager")

    def names(**params):
        r = client.get("/api/users", params=params)
        assert r.status_code == 200
        return sorted(u["name"] for u in r.json())

    assert names(search="qa") == ["Mike Chen"]
    assert names(search="COMPANY") == ["John Smith", "Mike Chen", "Sarah Johnson"]
    assert names(role="manager") == ["Sarah Johnson"]
    assert names(status="inactive") == ["Mike Chen"]
    assert len(client.get("/api/users", params={"limit": 2}).json()) == 2
    assert client.get("/api/users", params={"limit": 5000}).status_code == 422


def test_update_user(client, admin_headers, make_user, db_session):
    user = make_user(email="edit@example.com")
    other = make_user(email="taken@example.com")
    db_session.add(models.AuthUser(name="Edit", email="edit@example.com"))
    db_session.commit()

    r = client.put(f"/api/users/{user.id}", json={"position": "Lead", "role": "admin"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["position"] == "Lead" and r.json()["role"] == "admin"
    db_session.expire_all()
    assert db_session.query(models.AuthUser).filter_by(email="edit@example.com").one().role == "admin"

    dup = client.put(f"/api/users/{user.id}", json={"email": other.email}, headers=admin_headers)
    assert dup.status_code == 400
    assert client.put("/api/users/999999", json={"name": "Z"}, headers=admin_headers).status_code == 404


def test_delete_user_scrubs_task_assignments(client, admin_headers, make_user, make_task):
    ann = make_user(name="Ann")
    bob = make_user(name="Bob")
    ann_id, bob_id = ann.id, bob.id
    task_id = make_task(assignee_ids=f"{ann_id},{bob_id}").id

    r = client.delete(f"/api/users/{ann_id}", headers=admin_headers)
    assert r.status_code == 200

    ids = {u["id"] for u in client.get("/api/users").json()}
    assert ann_id not in ids
    task = client.get(f"/api/tasks/{task_id}").json()
    assert task["assigneeIds"] == str(bob_id)
    assert [a["name"] for a in task["assignees"]] == ["Bob"]
    assert client.delete(f"/api/users/{ann_id}", headers=admin_headers).status_code == 404


def test_user_stats(client, make_user):
    make_user(role="admin")
    make_user(role="manager")
    make_user(status="inactive")
    r = client.get("/api/users/stats")
    assert r.status_code == 200
    assert r.json() == {"total": 3, "active": 2, "inactive": 1, "admins": 1, "managers": 1, "members": 1}


def test_sync_user_is_idempotent(client, admin_headers):
    payload = {"id": "auth-123", "name": "Fresh", "email": "fresh@example.com", "role": "manager"}
    assert client.post("/api/users/sync", json=payload).status_code == 401
    first = client.post("/api/users/sync", json=payload, headers=admin_headers)
    second = client.post("/api/users/sync", json=payload, headers=admin_headers)
    assert first.status_code == 200 and second.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["role"] == "manager"


def test_sync_user_cannot_claim_other_identities_or_roles(client, auth_headers, db_session):
    member_headers = auth_headers("member", email="me@example.com")

    other = {"name": "Evil", "email": "evil@example.com", "role": "admin"}
    assert client.post("/api/users/sync", json=other, headers=member_headers).status_code == 403
    assert db_session.query(models.User).filter_by(email="evil@example.com").first() is None

    own = client.post(
        "/api/users/sync",
        json={"name": "Me", "email": "me@example.com", "role": "admin"},
        headers=member_headers,
    )
    assert own.status_code == 200
    assert own.json()["role"] == "member"
    assert client.post("/api/task-categories", json={"name": "Mine"}, headers=member_headers).status_code == 403


def test_set_default_password(client, admin_headers, member_headers, make_user):
    make_user(name="Invitee", email="invitee@example.com", role="manager")
    payload = {"email": "invitee@example.com"}
    assert client.post("/api/users/set-default-password", json=payload, headers=member_headers).status_code == 403

    r = client.post("/api/users/set-default-password", json=payload, headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {"success": True, "defaultPassword": "Welcome123"}

    signed_in = client.post("/api/auth/sign-in/email", json={"email": "invitee@example.com", "password": "Welcome123"})
    assert signed_in.status_code == 200
    assert signed_in.json()["user"]["role"] == "manager"

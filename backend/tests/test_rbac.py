def test_pending_user_cannot_log_in(client, make_user):
    user = make_user(validated=False)

    r = client.post("/auth/login", json={"email": user.email, "password": "testpass123"})
    assert r.status_code == 403
    assert r.json()["error_code"] == "forbidden"


def test_student_cannot_access_admin_endpoints(client, auth_headers):
    r = client.get("/admin/pending", headers=auth_headers)
    assert r.status_code == 403

    r = client.post("/admin/validate", json={"userId": "x"}, headers=auth_headers)
    assert r.status_code == 403

    r = client.post("/update", json={"action": "update"}, headers=auth_headers)
    assert r.status_code == 403


def test_anonymous_requests_are_rejected(client):
    assert client.get("/admin/pending").status_code == 401
    assert client.post("/evaluation/start").status_code == 401
    assert client.post("/leaderboard", json={"category": "Réseaux", "score": 1}).status_code == 401

    r = client.get("/auth/session")
    assert r.status_code == 401
    body = r.json()
    assert body["ok"] is False
    assert body["error_code"] == "unauthorized"


def test_garbage_token_is_rejected(client):
    r = client.get("/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_admin_can_list_and_validate_pending(client, admin_headers, make_user, login):
    pending = make_user(validated=False, name="Alice")

    r = client.get("/admin/pending", headers=admin_headers)
    assert r.status_code == 200
    ids = [u["id"] for u in r.json()["pendingUsers"]]
    assert pending.id in ids

    r = client.post("/admin/validate", json={"userId": pending.id}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["user"]["validated"] is True

    assert login(pending.email)


def test_validate_unknown_user_is_not_found(client, admin_headers):
    r = client.post("/admin/validate", json={"userId": "missing"}, headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["error_code"] == "not_found"

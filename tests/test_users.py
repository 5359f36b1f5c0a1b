def test_profile_roundtrip(client, learner_headers):
    response = client.put(
        "/api/users/profile",
        json={"firstName": "Grace", "profilePicture": "/uploads/avatars/grace.png"},
        headers=learner_headers,
    )

    assert response.status_code == 200
    profile = client.get("/api/users/profile", headers=learner_headers).get_json()["user"]
    assert profile["firstName"] == "Grace"
    assert profile["profilePicture"] == "/uploads/avatars/grace.png"
    assert profile["lastName"] is None


def test_admin_lists_users(client, admin_headers, learner, instructor):
    body = client.get("/api/users", headers=admin_headers).get_json()

    assert body["count"] == 3
    assert {user["username"] for user in body["users"]} == {"admin", "learner", "instructor"}


def test_non_admin_cannot_list_users(client, instructor_headers):
    assert client.get("/api/users", headers=instructor_headers).status_code == 403


def test_admin_changes_role(client, admin_headers, learner):
    response = client.put(f"/api/users/{learner.id}", json={"role": "instructor"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json()["user"]["role"] == "instructor"


def test_role_change_validation(client, admin_headers, learner):
    bad_role = client.put(f"/api/users/{learner.id}", json={"role": "owner"}, headers=admin_headers)
    missing = client.put("/api/users/999", json={"role": "learner"}, headers=admin_headers)

    assert bad_role.status_code == 400
    assert missing.status_code == 404


def test_home_route(client):
    response = client.get("/")
    assert response.get_json()["success"] is True


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["success"] is False

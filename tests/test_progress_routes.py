from datetime import timedelta

from models import db
from models.progress import Progress


def resource_url(resource):
    return f"/api/progress/resource/{resource.id}"


def progress_rows(user, learning_path=None):
    query = Progress.query.filter_by(user_id=user.id)
    if learning_path is not None:
        query = query.filter_by(learning_path_id=learning_path.id)
    return query.all()


# ============================================================================
# Upsert
# ============================================================================

def test_first_update_creates_progress_row(client, learner, learner_headers, public_path):
    resource = public_path.resources[0]
    response = client.post(resource_url(resource), json={"completionPercentage": 40}, headers=learner_headers)

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["progress"]["status"] == "in_progress"
    assert body["progress"]["completionPercentage"] == 40
    assert body["progress"]["learningPathId"] == public_path.id
    assert body["progress"]["lastAccessedAt"] is not None
    assert len(progress_rows(learner)) == 1


def test_time_spent_accumulates(client, learner, learner_headers, public_path):
    resource = public_path.resources[0]
    client.put(resource_url(resource), json={"timeSpentMinutes": 10}, headers=learner_headers)
    response = client.put(resource_url(resource), json={"timeSpentMinutes": 10}, headers=learner_headers)

    assert response.get_json()["progress"]["timeSpentMinutes"] == 20
    assert len(progress_rows(learner)) == 1


def test_full_percentage_marks_completed(client, learner_headers, public_path):
    resource = public_path.resources[1]
    response = client.put(resource_url(resource), json={"completionPercentage": 100}, headers=learner_headers)

    progress = response.get_json()["progress"]
    assert progress["status"] == "completed"
    assert progress["completedAt"] is not None


def test_completed_status_forces_full_percentage(client, learner_headers, public_path):
    resource = public_path.resources[1]
    response = client.put(
        resource_url(resource),
        json={"status": "completed", "completionPercentage": 20},
        headers=learner_headers,
    )

    progress = response.get_json()["progress"]
    assert progress["completionPercentage"] == 100
    assert progress["completedAt"] is not None


def test_invalid_patch_rejected_without_creating_row(client, learner, learner_headers, public_path):
    resource = public_path.resources[0]
    response = client.put(resource_url(resource), json={"completionPercentage": 150}, headers=learner_headers)

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "completionPercentage"
    assert progress_rows(learner) == []


def test_unknown_resource_is_404(client, learner_headers):
    response = client.put("/api/progress/resource/999", json={"timeSpentMinutes": 5}, headers=learner_headers)

    assert response.status_code == 404
    assert response.get_json()["message"] == "Resource not found"


def test_private_resource_progress_forbidden(client, learner, learner_headers, private_path):
    resource = private_path.resources[0]
    response = client.put(resource_url(resource), json={"timeSpentMinutes": 5}, headers=learner_headers)

    assert response.status_code == 403
    assert progress_rows(learner) == []


def test_progress_requires_token(client, public_path):
    response = client.put(resource_url(public_path.resources[0]), json={"timeSpentMinutes": 5})

    assert response.status_code == 401
    assert response.get_json()["message"] == "No token, authorization denied"


def test_token_in_cookie_is_accepted(client, learner, public_path):
    login = client.post("/api/auth/login", json={"username": learner.username, "password": "secret123"})
    assert login.status_code == 200

    response = client.put(resource_url(public_path.resources[0]), json={"timeSpentMinutes": 5})
    assert response.status_code == 200


def test_empty_body_only_refreshes_access_time(client, learner, learner_headers, public_path):
    resource = public_path.resources[0]
    response = client.put(resource_url(resource), headers=learner_headers)

    assert response.status_code == 200
    progress = response.get_json()["progress"]
    assert progress["status"] == "not_started"
    assert progress["timeSpentMinutes"] == 0
    assert progress["lastAccessedAt"] is not None
    assert len(progress_rows(learner)) == 1


def test_malformed_json_body_rejected(client, learner, learner_headers, public_path):
    response = client.put(
        resource_url(public_path.resources[0]),
        data="{not json",
        content_type="application/json",
        headers=learner_headers,
    )

    assert response.status_code == 400
    assert progress_rows(learner) == []


def test_boolean_numbers_rejected(client, learner, learner_headers, public_path):
    response = client.put(
        resource_url(public_path.resources[0]),
        json={"completionPercentage": True, "timeSpentMinutes": True},
        headers=learner_headers,
    )

    assert response.status_code == 400
    assert progress_rows(learner) == []


def test_full_percentage_keeps_first_completion_time(client, learner, learner_headers, public_path):
    resource = public_path.resources[0]
    client.put(resource_url(resource), json={"status": "completed"}, headers=learner_headers)

    row = progress_rows(learner)[0]
    first_completed = row.completed_at - timedelta(days=3)
    row.completed_at = first_completed
    db.session.commit()

    response = client.put(
        resource_url(resource),
        json={"status": "in_progress", "completionPercentage": 100},
        headers=learner_headers,
    )

    assert response.get_json()["progress"]["status"] == "completed"
    db.session.expire_all()
    assert progress_rows(learner)[0].completed_at == first_completed


def test_learners_rows_are_independent(client, learner, other_learner, learner_headers,
                                      other_learner_headers, public_path):
    resource = public_path.resources[0]
    client.put(resource_url(resource), json={"status": "completed"}, headers=learner_headers)
    client.put(resource_url(resource), json={"timeSpentMinutes": 3}, headers=other_learner_headers)

    mine = progress_rows(learner)[0]
    theirs = progress_rows(other_learner)[0]
    assert mine.status == "completed"
    assert theirs.status == "not_started"
    assert theirs.time_spent_minutes == 3


# ============================================================================
# Path aggregate
# ============================================================================

def test_path_aggregate_counts_untouched_resources(client, learner, learner_headers, public_path):
    first, second, third = public_path.resources[0], public_path.resources[1], public_path.resources[2]
    client.put(resource_url(first), json={"status": "completed", "timeSpentMinutes": 30}, headers=learner_headers)
    client.put(resource_url(second), json={"completionPercentage": 100, "timeSpentMinutes": 20},
               headers=learner_headers)
    client.put(resource_url(third), json={"completionPercentage": 50}, headers=learner_headers)

    response = client.get(f"/api/progress/learning-path/{public_path.id}", headers=learner_headers)

    assert response.status_code == 200
    body = response.get_json()
    stats = body["progress"]["stats"]
    assert stats == {
        "totalResources": 4,
        "completedResources": 2,
        "inProgressResources": 1,
        "totalTimeSpent": 50,
        "overallCompletionPercentage": 50.0,
    }
    entries = body["progress"]["resources"]
    assert [entry["resource"]["id"] for entry in entries] == [r.id for r in public_path.resources]
    assert entries[2]["progress"]["status"] == "in_progress"
    assert entries[3]["progress"] is None
    # reading does not materialise rows for untouched resources
    assert len(progress_rows(learner)) == 3


def test_path_aggregate_for_empty_path(client, learner_headers, empty_path):
    response = client.get(f"/api/progress/learning-path/{empty_path.id}", headers=learner_headers)

    stats = response.get_json()["progress"]["stats"]
    assert stats["totalResources"] == 0
    assert stats["overallCompletionPercentage"] == 0.0


def test_path_aggregate_on_private_path_forbidden(client, learner_headers, private_path):
    response = client.get(f"/api/progress/learning-path/{private_path.id}", headers=learner_headers)
    assert response.status_code == 403


def test_path_aggregate_unknown_path(client, learner_headers):
    response = client.get("/api/progress/learning-path/999", headers=learner_headers)
    assert response.status_code == 404


# ============================================================================
# Dashboard
# ============================================================================

def test_dashboard_groups_by_path(client, instructor, learner_headers, public_path, path_factory):
    second_path = path_factory(instructor, title="Data Wrangling", resource_minutes=(10, 10))
    for resource in public_path.resources:
        client.put(resource_url(resource), json={"status": "completed", "timeSpentMinutes": 5},
                   headers=learner_headers)
    client.put(resource_url(second_path.resources[0]), json={"status": "completed", "timeSpentMinutes": 7},
               headers=learner_headers)
    client.put(resource_url(second_path.resources[1]), json={"completionPercentage": 50},
               headers=learner_headers)

    response = client.get("/api/progress", headers=learner_headers)

    assert response.status_code == 200
    body = response.get_json()
    assert body["summary"] == {
        "totalPaths": 2,
        "completedPaths": 1,
        "inProgressPaths": 1,
        "totalTimeSpent": 27,
    }
    by_path = {entry["learningPath"]["id"]: entry for entry in body["progress"]}
    assert by_path[public_path.id]["overallCompletionPercentage"] == 100.0
    assert by_path[second_path.id]["overallCompletionPercentage"] == 50.0
    assert by_path[second_path.id]["inProgressResources"] == 1


def test_dashboard_for_new_user_is_empty(client, learner_headers):
    response = client.get("/api/users/dashboard", headers=learner_headers)

    dashboard = response.get_json()["dashboard"]
    assert dashboard["totalPaths"] == 0
    assert dashboard["progress"] == []


# ============================================================================
# Instructor oversight
# ============================================================================

def test_creator_sees_every_learner(client, learner_headers, other_learner_headers, instructor_headers,
                                    public_path):
    resource = public_path.resources[0]
    client.put(resource_url(resource), json={"status": "completed"}, headers=learner_headers)
    client.put(resource_url(resource), json={"completionPercentage": 30}, headers=other_learner_headers)

    response = client.get(f"/api/progress/instructor/learning-path/{public_path.id}", headers=instructor_headers)

    assert response.status_code == 200
    body = response.get_json()
    assert len(body["resources"]) == 4
    users = {entry["user"]["username"]: entry for entry in body["userProgress"]}
    assert users["learner"]["totalResources"] == 4
    assert users["learner"]["overallCompletionPercentage"] == 25.0
    assert users["otherlearner"]["inProgressResources"] == 1
    assert "email" in users["learner"]["user"]


def test_other_instructor_cannot_see_learners(client, other_instructor_headers, public_path):
    response = client.get(
        f"/api/progress/instructor/learning-path/{public_path.id}", headers=other_instructor_headers
    )

    assert response.status_code == 403
    assert response.get_json()["message"] == \
        "Access denied. You can only view progress for your own learning paths."


def test_admin_can_see_learners(client, admin_headers, public_path):
    response = client.get(f"/api/progress/instructor/learning-path/{public_path.id}", headers=admin_headers)
    assert response.status_code == 200


def test_learner_blocked_from_oversight(client, learner_headers, public_path):
    response = client.get(f"/api/progress/instructor/learning-path/{public_path.id}", headers=learner_headers)
    assert response.status_code == 403


# ============================================================================
# Cascades
# ============================================================================

def test_deleting_resource_removes_its_progress(client, learner, learner_headers, instructor_headers, public_path):
    resource, kept = public_path.resources[0], public_path.resources[1]
    resource_id, kept_id = resource.id, kept.id
    client.put(resource_url(resource), json={"status": "completed"}, headers=learner_headers)
    client.put(resource_url(kept), json={"status": "completed"}, headers=learner_headers)

    response = client.delete(f"/api/resources/{resource_id}", headers=instructor_headers)
    assert response.status_code == 200

    db.session.expire_all()
    remaining = progress_rows(learner)
    assert [row.resource_id for row in remaining] == [kept_id]
    assert len(public_path.resources) == 3


def test_deleting_path_removes_all_progress(client, learner, learner_headers, instructor_headers, public_path):
    client.post(f"/api/learning-paths/{public_path.id}/enroll", headers=learner_headers)
    assert len(progress_rows(learner)) == 4

    response = client.delete(f"/api/learning-paths/{public_path.id}", headers=instructor_headers)
    assert response.status_code == 200

    db.session.expire_all()
    assert progress_rows(learner) == []

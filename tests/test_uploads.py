import io
import os

import pytest

from models.learning_paths import LearningPath
from utils.storage import classify_upload, unique_filename


def upload(client, headers, name="notes.pdf", content=b"%PDF-1.4 sample"):
    return client.post(
        "/api/uploads/resource",
        data={"file": (io.BytesIO(content), name)},
        content_type="multipart/form-data",
        headers=headers,
    )


# ============================================================================
# Helpers
# ============================================================================

@pytest.mark.parametrize("extension,size,expected", [
    ("mp4", 10_000_000, ("video", 30)),
    ("png", 2048, ("image", 2)),
    ("pdf", 1024 * 1024, ("document", 20)),
    ("docx", 1, ("document", 1)),
])
def test_classify_upload(extension, size, expected):
    assert classify_upload(extension, size) == expected


def test_unique_filename_keeps_extension():
    first = unique_filename("My Notes.PDF")
    second = unique_filename("My Notes.PDF")

    assert first.startswith("file-") and first.endswith(".pdf")
    assert first != second


# ============================================================================
# Routes
# ============================================================================

def test_upload_and_serve_file(app, client, instructor_headers):
    response = upload(client, instructor_headers)

    assert response.status_code == 200
    stored = response.get_json()["file"]
    assert stored["fileType"] == "document"
    assert stored["format"] == "pdf"
    assert stored["filePath"] == f"/uploads/resources/{stored['filename']}"
    assert os.path.isfile(os.path.join(app.config["UPLOAD_FOLDER"], "resources", stored["filename"]))

    served = client.get(stored["filePath"])
    assert served.status_code == 200
    assert served.data == b"%PDF-1.4 sample"
    served.close()


def test_upload_rejects_unsupported_type(client, instructor_headers):
    response = upload(client, instructor_headers, name="script.exe")

    assert response.status_code == 400
    assert response.get_json()["message"].startswith("File type not supported")


def test_upload_requires_file(client, instructor_headers):
    response = client.post("/api/uploads/resource", data={}, content_type="multipart/form-data",
                           headers=instructor_headers)
    assert response.status_code == 400


def test_learner_cannot_upload(client, learner_headers):
    assert upload(client, learner_headers).status_code == 403


def test_delete_uploaded_file(client, instructor_headers):
    filename = upload(client, instructor_headers).get_json()["file"]["filename"]

    deleted = client.delete(f"/api/uploads/resource/{filename}", headers=instructor_headers)
    missing = client.delete(f"/api/uploads/resource/{filename}", headers=instructor_headers)

    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_import_learning_path(client, instructor, instructor_headers):
    payload = {
        "title": "Imported Course",
        "difficulty": "advanced",
        "resources": [
            {"title": "Lecture", "type": "video", "url": "https://example.com/v", "estimatedTimeMinutes": 45},
            {"title": "Reading", "filePath": "/uploads/resources/r.pdf", "estimatedTimeMinutes": 15},
        ],
    }
    response = client.post("/api/uploads/import/learning-path", json=payload, headers=instructor_headers)

    assert response.status_code == 201
    body = response.get_json()
    assert body["learningPath"]["estimatedTimeHours"] == 1.0
    assert [r["order"] for r in body["resources"]] == [0, 1]
    assert LearningPath.query.filter_by(creator_id=instructor.id).count() == 1


def test_import_requires_resources(client, instructor_headers):
    response = client.post(
        "/api/uploads/import/learning-path",
        json={"title": "Empty Course", "resources": []},
        headers=instructor_headers,
    )
    assert response.status_code == 400

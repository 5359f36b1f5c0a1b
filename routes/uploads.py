import logging

from flask import Blueprint, jsonify, g, request, current_app, send_from_directory

from classes.access_control import CREATE, authorize
from classes.validators import clean_html, validate_payload
from models import db
from models.learning_paths import LearningPath
from models.resources import Resource
from schemas.catalog import ImportLearningPath
from utils.errors import NotFound, ValidationError
from utils.storage import classify_upload, file_extension, get_storage, unique_filename
from utils.utils import login_required, roles_required

logger = logging.getLogger(__name__)

upload_bp = Blueprint("uploads", __name__)
# local files, mounted at /uploads
files_bp = Blueprint("files", __name__)


def allowed_file(filename):
    return file_extension(filename) in current_app.config["RESOURCE_EXTENSIONS"]


@upload_bp.route("/resource", methods=["POST"])
@login_required
@roles_required("instructor")
def upload_resource_file():
    file = request.files.get("file")
    if not file or not file.filename:
        raise ValidationError("No file uploaded")

    if not allowed_file(file.filename):
        allowed = ", ".join(sorted(current_app.config["RESOURCE_EXTENSIONS"]))
        raise ValidationError(f"File type not supported. Allowed types: {allowed}")

    extension = file_extension(file.filename)
    filename = unique_filename(file.filename, prefix="file")
    mimetype = file.mimetype

    file.stream.seek(0, 2)
    size = file.stream.tell()
    file.stream.seek(0)

    file_path = get_storage().save(file, filename, folder="resources")
    file_type, estimated_minutes = classify_upload(extension, size)
    logger.info("User %s uploaded %s (%d bytes)", g.user.id, filename, size)

    return jsonify({
        "success": True,
        "file": {
            "filename": filename,
            "filePath": file_path,
            "originalname": file.filename,
            "mimetype": mimetype,
            "size": size,
            "fileType": file_type,
            "format": extension,
            "estimatedTimeMinutes": estimated_minutes,
        },
    })


@upload_bp.route("/resource/<string:filename>", methods=["DELETE"])
@login_required
@roles_required("instructor")
def delete_resource_file(filename):
    storage = get_storage()
    if not storage.exists(filename, folder="resources"):
        raise NotFound("File not found")

    storage.delete(filename, folder="resources")
    logger.info("User %s deleted uploaded file %s", g.user.id, filename)
    return jsonify({"success": True, "message": "File deleted successfully"})


@upload_bp.route("/import/learning-path", methods=["POST"])
@login_required
@roles_required("instructor")
def import_learning_path():
    authorize(g.user, CREATE, LearningPath, "Only instructors can create learning paths.")
    data = validate_payload(ImportLearningPath)

    learning_path = LearningPath(
        title=data.title,
        description=clean_html(data.description),
        category=data.category,
        difficulty=data.difficulty,
        is_public=data.is_public,
        cover_image=data.cover_image,
        creator_id=g.user.id,
    )

    for index, item in enumerate(data.resources):
        learning_path.resources.append(Resource(
            title=item.title,
            description=clean_html(item.description),
            type=item.type,
            format=item.format,
            url=item.url,
            file_path=item.file_path,
            estimated_time_minutes=item.estimated_time_minutes,
            order=item.order if "order" in item.model_fields_set else index,
            is_required=item.is_required,
            extra=item.metadata,
        ))

    learning_path.recalculate_estimated_time()
    db.session.add(learning_path)
    db.session.commit()
    logger.info(
        "User %s imported learning path %s with %d resources",
        g.user.id, learning_path.id, len(learning_path.resources),
    )

    return jsonify({
        "success": True,
        "message": "Learning path created successfully from imported resources",
        "learningPath": learning_path.to_dict(),
        "resources": [resource.to_dict() for resource in learning_path.resources],
    }), 201


@files_bp.route("/resources/<path:filename>", methods=["GET"])
def serve_resource_file(filename):
    directory = get_storage().directory("resources")
    if directory is None:
        raise NotFound("File not found")
    return send_from_directory(directory, filename)

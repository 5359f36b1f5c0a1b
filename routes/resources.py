import logging

from flask import Blueprint, jsonify, g, request
from sqlalchemy import or_

from classes.access_control import CREATE, READ, WRITE, authorize, is_admin
from classes.validators import clean_html, parse_int_arg, validate_payload
from models import db
from models.learning_paths import LearningPath
from models.resources import Resource, RESOURCE_TYPES
from schemas.catalog import ReorderRequest, ResourceCreate, ResourceUpdate
from utils.errors import NotFound, ValidationError
from utils.helpers import like_pattern
from utils.utils import login_optional, login_required, roles_required

logger = logging.getLogger(__name__)

resource_bp = Blueprint("resources", __name__)


def get_resource_or_404(resource_id):
    resource = db.session.get(Resource, resource_id)
    if not resource:
        raise NotFound("Resource not found")
    return resource


@resource_bp.route("", methods=["GET"])
@login_required
@roles_required("instructor")
def list_resources():
    resource_type = request.args.get("type")
    file_format = request.args.get("format")
    search = request.args.get("search", "").strip()
    learning_path_id = parse_int_arg("learningPathId")

    query = Resource.query.join(LearningPath, Resource.learning_path_id == LearningPath.id)

    # instructors only see resources of their own paths
    if not is_admin(g.user):
        query = query.filter(LearningPath.creator_id == g.user.id)

    if resource_type:
        if resource_type not in RESOURCE_TYPES:
            raise ValidationError(f"type must be one of: {', '.join(RESOURCE_TYPES)}")
        query = query.filter(Resource.type == resource_type)
    if file_format:
        query = query.filter(Resource.format == file_format)
    if learning_path_id is not None:
        query = query.filter(Resource.learning_path_id == learning_path_id)
    if search:
        pattern = like_pattern(search)
        query = query.filter(or_(
            Resource.title.ilike(pattern, escape="\\"),
            Resource.description.ilike(pattern, escape="\\"),
        ))

    resources = query.order_by(Resource.created_at.desc(), Resource.id.desc()).all()

    return jsonify({
        "success": True,
        "count": len(resources),
        "resources": [
            {**resource.to_dict(), "learningPath": {"id": resource.learning_path.id, "title": resource.learning_path.title}}
            for resource in resources
        ],
    })


@resource_bp.route("", methods=["POST"])
@login_required
@roles_required("instructor")
def create_resource():
    data = validate_payload(ResourceCreate)

    learning_path = db.session.get(LearningPath, data.learning_path_id)
    if not learning_path:
        raise NotFound("Learning path not found")

    authorize(g.user, CREATE, learning_path, "Access denied. You can only add resources to your own learning paths.")

    resource = Resource(
        title=data.title,
        description=clean_html(data.description),
        type=data.type,
        format=data.format,
        url=data.url,
        file_path=data.file_path,
        estimated_time_minutes=data.estimated_time_minutes,
        order=data.order,
        is_required=data.is_required,
        extra=data.metadata,
    )
    learning_path.resources.append(resource)
    learning_path.recalculate_estimated_time()
    db.session.commit()
    logger.info("User %s added resource %s to path %s", g.user.id, resource.id, learning_path.id)

    return jsonify({
        "success": True,
        "message": "Resource created successfully",
        "resource": resource.to_dict(),
    }), 201


@resource_bp.route("/reorder", methods=["PUT"])
@login_required
@roles_required("instructor")
def reorder_resources():
    data = validate_payload(ReorderRequest)

    learning_path = db.session.get(LearningPath, data.learning_path_id)
    if not learning_path:
        raise NotFound("Learning path not found")

    authorize(g.user, WRITE, learning_path, "Access denied. You can only reorder resources in your own learning paths.")

    by_id = {resource.id: resource for resource in learning_path.resources}
    for item in data.resource_orders:
        resource = by_id.get(item.id)
        # ids from other paths are ignored
        if resource is not None:
            resource.order = item.order

    db.session.commit()
    db.session.refresh(learning_path)

    return jsonify({
        "success": True,
        "message": "Resources reordered successfully",
        "resources": [resource.to_dict() for resource in learning_path.resources],
    })


@resource_bp.route("/<int:resource_id>", methods=["GET"])
@login_optional
def get_resource(resource_id):
    resource = get_resource_or_404(resource_id)
    authorize(g.user, READ, resource, "Access denied. This resource belongs to a private learning path.")

    learning_path = resource.learning_path
    return jsonify({
        "success": True,
        "resource": {
            **resource.to_dict(),
            "learningPath": {
                "id": learning_path.id,
                "title": learning_path.title,
                "isPublic": learning_path.is_public,
                "creatorId": learning_path.creator_id,
            },
        },
    })


@resource_bp.route("/<int:resource_id>", methods=["PUT"])
@login_required
@roles_required("instructor")
def update_resource(resource_id):
    resource = get_resource_or_404(resource_id)
    authorize(g.user, WRITE, resource, "Access denied. You can only update resources in your own learning paths.")

    changes = validate_payload(ResourceUpdate).supplied()
    if "description" in changes:
        changes["description"] = clean_html(changes["description"])
    if "metadata" in changes:
        changes["extra"] = changes.pop("metadata")
    for field, value in changes.items():
        setattr(resource, field, value)

    if bool(resource.url) == bool(resource.file_path):
        raise ValidationError("Provide either url or filePath")

    resource.learning_path.recalculate_estimated_time()
    db.session.commit()
    logger.info("User %s updated resource %s", g.user.id, resource.id)

    return jsonify({
        "success": True,
        "message": "Resource updated successfully",
        "resource": resource.to_dict(),
    })


@resource_bp.route("/<int:resource_id>", methods=["DELETE"])
@login_required
@roles_required("instructor")
def delete_resource(resource_id):
    resource = get_resource_or_404(resource_id)
    authorize(g.user, WRITE, resource, "Access denied. You can only delete resources in your own learning paths.")

    learning_path = resource.learning_path
    learning_path.resources.remove(resource)
    learning_path.recalculate_estimated_time()
    db.session.commit()
    logger.info("User %s deleted resource %s from path %s", g.user.id, resource_id, learning_path.id)

    return jsonify({"success": True, "message": "Resource deleted successfully"})

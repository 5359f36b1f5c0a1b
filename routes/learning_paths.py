import logging

from flask import Blueprint, jsonify, g, request
from sqlalchemy import or_

from classes.access_control import CREATE, READ, WRITE, authorize
from classes.enrolment_manager import EnrolmentManager
from classes.validators import clean_html, validate_payload
from models import db
from models.learning_paths import LearningPath, DIFFICULTIES
from schemas.catalog import LearningPathCreate, LearningPathUpdate
from utils.errors import NotFound, ValidationError
from utils.helpers import like_pattern
from utils.utils import login_optional, login_required, roles_required

logger = logging.getLogger(__name__)

learning_path_bp = Blueprint("learning_paths", __name__)


def get_learning_path_or_404(learning_path_id):
    learning_path = db.session.get(LearningPath, learning_path_id)
    if not learning_path:
        raise NotFound("Learning path not found")
    return learning_path


# Browse public learning paths
@learning_path_bp.route("", methods=["GET"])
def list_learning_paths():
    category = request.args.get("category")
    difficulty = request.args.get("difficulty")
    search = request.args.get("search", "").strip()

    query = LearningPath.query.filter(LearningPath.is_public.is_(True))

    if category:
        query = query.filter(LearningPath.category == category)
    if difficulty:
        if difficulty not in DIFFICULTIES:
            raise ValidationError(f"difficulty must be one of: {', '.join(DIFFICULTIES)}")
        query = query.filter(LearningPath.difficulty == difficulty)
    if search:
        pattern = like_pattern(search)
        query = query.filter(or_(
            LearningPath.title.ilike(pattern, escape="\\"),
            LearningPath.description.ilike(pattern, escape="\\"),
        ))

    learning_paths = query.order_by(LearningPath.created_at.desc(), LearningPath.id.desc()).all()

    return jsonify({
        "success": True,
        "count": len(learning_paths),
        "learningPaths": [lp.to_dict(resource_summary=True) for lp in learning_paths],
    })


@learning_path_bp.route("", methods=["POST"])
@login_required
@roles_required("instructor")
def create_learning_path():
    authorize(g.user, CREATE, LearningPath, "Only instructors can create learning paths.")
    data = validate_payload(LearningPathCreate)

    learning_path = LearningPath(
        title=data.title,
        description=clean_html(data.description),
        category=data.category,
        difficulty=data.difficulty,
        is_public=data.is_public,
        cover_image=data.cover_image,
        estimated_time_hours=0,
        creator_id=g.user.id,
    )
    db.session.add(learning_path)
    db.session.commit()
    logger.info("User %s created learning path %s", g.user.id, learning_path.id)

    return jsonify({
        "success": True,
        "message": "Learning path created successfully",
        "learningPath": learning_path.to_dict(),
    }), 201


@learning_path_bp.route("/<int:learning_path_id>", methods=["GET"])
@login_optional
def get_learning_path(learning_path_id):
    learning_path = get_learning_path_or_404(learning_path_id)
    authorize(g.user, READ, learning_path, "Access denied. This learning path is private.")

    data = learning_path.to_dict(include_resources=True)
    data["totalEstimatedMinutes"] = learning_path.total_estimated_minutes
    if g.user is not None:
        data["isEnrolled"] = EnrolmentManager.is_enrolled(g.user.id, learning_path.id)

    return jsonify({"success": True, "learningPath": data})


@learning_path_bp.route("/<int:learning_path_id>", methods=["PUT"])
@login_required
@roles_required("instructor")
def update_learning_path(learning_path_id):
    learning_path = get_learning_path_or_404(learning_path_id)
    authorize(g.user, WRITE, learning_path, "Access denied. You can only update your own learning paths.")

    changes = validate_payload(LearningPathUpdate).supplied()
    if "description" in changes:
        changes["description"] = clean_html(changes["description"])
    for field, value in changes.items():
        setattr(learning_path, field, value)

    db.session.commit()
    logger.info("User %s updated learning path %s", g.user.id, learning_path.id)

    return jsonify({
        "success": True,
        "message": "Learning path updated successfully",
        "learningPath": learning_path.to_dict(),
    })


@learning_path_bp.route("/<int:learning_path_id>", methods=["DELETE"])
@login_required
@roles_required("instructor")
def delete_learning_path(learning_path_id):
    learning_path = get_learning_path_or_404(learning_path_id)
    authorize(g.user, WRITE, learning_path, "Access denied. You can only delete your own learning paths.")

    db.session.delete(learning_path)
    db.session.commit()
    logger.info("User %s deleted learning path %s", g.user.id, learning_path_id)

    return jsonify({"success": True, "message": "Learning path deleted successfully"})


@learning_path_bp.route("/instructor/my-paths", methods=["GET"])
@login_required
@roles_required("instructor")
def get_my_learning_paths():
    learning_paths = (
        LearningPath.query
        .filter_by(creator_id=g.user.id)
        .order_by(LearningPath.created_at.desc(), LearningPath.id.desc())
        .all()
    )
    return jsonify({
        "success": True,
        "count": len(learning_paths),
        "learningPaths": [lp.to_dict(resource_summary=True) for lp in learning_paths],
    })


@learning_path_bp.route("/<int:learning_path_id>/enroll", methods=["POST"])
@login_required
def enroll(learning_path_id):
    learning_path, created = EnrolmentManager.enroll_user(g.user, learning_path_id)
    return jsonify({
        "success": True,
        "message": "Enrolled in learning path successfully",
        "learningPathId": learning_path.id,
        "progressRecords": [record.to_dict() for record in created],
    }), 201

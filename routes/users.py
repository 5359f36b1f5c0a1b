import logging

from flask import Blueprint, jsonify, g

from classes.progress_manager import ProgressManager
from classes.validators import validate_payload
from models import db
from models.users import User
from schemas.users import ProfileUpdate, RoleUpdate
from utils.errors import NotFound
from utils.utils import login_required, roles_required

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__)


def _current_user():
    user = db.session.get(User, g.user.id)
    if not user:
        raise NotFound("User not found")
    return user


@users_bp.route("/profile", methods=["GET"])
@login_required
def get_profile():
    return jsonify({"success": True, "user": _current_user().to_dict()})


@users_bp.route("/profile", methods=["PUT"])
@login_required
def update_profile():
    data = validate_payload(ProfileUpdate)
    user = _current_user()

    for field, value in data.supplied().items():
        setattr(user, field, value)
    db.session.commit()

    return jsonify({
        "success": True,
        "message": "Profile updated successfully",
        "user": user.to_dict(),
    })


# Learner dashboard
@users_bp.route("/dashboard", methods=["GET"])
@login_required
def get_dashboard():
    dashboard = ProgressManager.aggregate_dashboard(g.user.id)
    return jsonify({"success": True, "dashboard": dashboard})


#__________________________________________________________________________________________ * Admin *__________________________________________________

@users_bp.route("", methods=["GET"])
@login_required
@roles_required("admin")
def list_users():
    users = User.query.order_by(User.id).all()
    return jsonify({
        "success": True,
        "count": len(users),
        "users": [user.to_dict() for user in users],
    })


@users_bp.route("/<int:user_id>", methods=["PUT"])
@login_required
@roles_required("admin")
def update_user_role(user_id):
    data = validate_payload(RoleUpdate)

    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    previous = user.role
    user.role = data.role
    db.session.commit()
    logger.info("Admin %s changed role of user %s: %s -> %s", g.user.id, user.id, previous, user.role)

    return jsonify({"success": True, "message": "User role updated", "user": user.to_dict()})

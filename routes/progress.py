from flask import Blueprint, jsonify, g, request

from classes.progress_manager import ProgressManager
from classes.validators import validate_payload
from schemas.progress import ProgressPatch
from utils.utils import login_required, roles_required

progress_bp = Blueprint("progress", __name__)


# The current user's progress across every path they have started
@progress_bp.route("", methods=["GET"])
@login_required
def get_my_progress():
    dashboard = ProgressManager.aggregate_dashboard(g.user.id)
    progress = dashboard.pop("progress")
    return jsonify({"success": True, "progress": progress, "summary": dashboard})


@progress_bp.route("/learning-path/<int:learning_path_id>", methods=["GET"])
@login_required
def get_learning_path_progress(learning_path_id):
    result = ProgressManager.aggregate_path_progress(g.user, learning_path_id)
    return jsonify({"success": True, **result})


@progress_bp.route("/resource/<int:resource_id>", methods=["POST", "PUT"])
@login_required
def update_resource_progress(resource_id):
    # an empty body is an empty patch that only refreshes the access time
    payload = request.get_json(silent=True) if request.get_data() else {}
    patch = validate_payload(ProgressPatch, payload)
    progress = ProgressManager.upsert_progress(g.user, resource_id, patch)
    return jsonify({
        "success": True,
        "message": "Progress updated successfully",
        "progress": progress.to_dict(),
    })


# Instructor oversight of every learner on one of their paths
@progress_bp.route("/instructor/learning-path/<int:learning_path_id>", methods=["GET"])
@login_required
@roles_required("instructor")
def get_instructor_learning_path_progress(learning_path_id):
    result = ProgressManager.instructor_path_progress(g.user, learning_path_id)
    return jsonify({"success": True, **result})

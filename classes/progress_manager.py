import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from classes.access_control import READ, WRITE, authorize
from classes.statistics import completion_stats, dashboard_summary
from models import db
from models.learning_paths import LearningPath
from models.progress import Progress
from models.resources import Resource
from utils.errors import NotFound
from utils.helpers import utcnow

logger = logging.getLogger(__name__)


def apply_patch(progress, changes, now):
    """
    Apply a progress patch in place.

    `changes` holds only the fields the client sent. A requested `completed`
    status wins over any percentage; otherwise the percentage drives the
    status (100 completes, anything strictly between 0 and 100 is in
    progress). Time is accumulated, notes are replaced, and the access time is
    always refreshed.
    """
    requested_status = changes.get("status")
    was_completed = progress.status == "completed"

    if requested_status is not None:
        progress.status = requested_status

    completes = requested_status == "completed"
    if completes:
        progress.completion_percentage = 100
    elif changes.get("completion_percentage") is not None:
        percentage = changes["completion_percentage"]
        progress.completion_percentage = percentage
        completes = percentage == 100
        if completes:
            progress.status = "completed"
        elif 0 < percentage < 100:
            progress.status = "in_progress"

    # completed_at marks the first transition into completed
    if completes and (not was_completed or progress.completed_at is None):
        progress.completed_at = now

    if changes.get("time_spent_minutes") is not None:
        progress.time_spent_minutes = (progress.time_spent_minutes or 0) + changes["time_spent_minutes"]

    if "notes" in changes:
        progress.notes = changes["notes"]

    progress.last_accessed_at = now
    return progress


class ProgressManager:
    @staticmethod
    def _locked_progress(user_id, resource_id):
        return (
            Progress.query
            .filter_by(user_id=user_id, resource_id=resource_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def get_or_create_progress(user_id, resource):
        """Locked progress row for (user, resource), inserting a default one if needed."""
        progress = ProgressManager._locked_progress(user_id, resource.id)
        if progress:
            return progress

        resource_id = resource.id
        progress = Progress(
            user_id=user_id,
            resource_id=resource_id,
            learning_path_id=resource.learning_path_id,
            status="not_started",
            completion_percentage=0,
            time_spent_minutes=0,
        )
        db.session.add(progress)
        try:
            db.session.flush()
        except IntegrityError:
            # another request inserted the row first; continue on theirs
            db.session.rollback()
            logger.info("Progress row for user %s resource %s created concurrently", user_id, resource_id)
            progress = ProgressManager._locked_progress(user_id, resource_id)
            if progress is None:
                raise
        return progress

    @staticmethod
    def upsert_progress(actor, resource_id, patch):
        """Create or update the actor's progress on one resource."""
        resource = db.session.get(Resource, resource_id)
        if not resource:
            raise NotFound("Resource not found")

        authorize(actor, READ, resource, "Access denied. This resource belongs to a private learning path.")

        progress = ProgressManager.get_or_create_progress(actor.id, resource)
        authorize(actor, WRITE, progress)

        apply_patch(progress, patch.supplied(), utcnow())
        db.session.commit()

        logger.info(
            "Progress updated: user=%s resource=%s status=%s pct=%s",
            actor.id, resource_id, progress.status, progress.completion_percentage,
        )
        return progress

    @staticmethod
    def aggregate_path_progress(actor, learning_path_id):
        """The actor's progress over every resource of a path, untouched ones included."""
        learning_path = db.session.get(LearningPath, learning_path_id)
        if not learning_path:
            raise NotFound("Learning path not found")

        authorize(actor, READ, learning_path, "Access denied. This learning path is private.")

        records = Progress.query.filter_by(user_id=actor.id, learning_path_id=learning_path.id).all()
        by_resource = {record.resource_id: record for record in records}

        matched = [by_resource.get(resource.id) for resource in learning_path.resources]
        resources = [
            {
                "resource": resource.to_summary(),
                "progress": record.to_state() if record else None,
            }
            for resource, record in zip(learning_path.resources, matched)
        ]

        return {
            "learningPath": learning_path.to_dict(),
            "progress": {
                "resources": resources,
                "stats": completion_stats(matched),
            },
        }

    @staticmethod
    def aggregate_dashboard(user_id):
        """
        Per-path progress for every path the user has at least one row in,
        plus totals across those paths.
        """
        records = (
            Progress.query
            .options(joinedload(Progress.learning_path), joinedload(Progress.resource))
            .filter(Progress.user_id == user_id)
            .order_by(Progress.learning_path_id, Progress.id)
            .all()
        )

        grouped = {}
        for record in records:
            grouped.setdefault(record.learning_path_id, []).append(record)

        paths = []
        for path_records in grouped.values():
            learning_path = path_records[0].learning_path
            path_records.sort(key=lambda r: (r.resource.order, r.resource_id))
            paths.append({
                "learningPath": learning_path.to_dict(),
                "resources": [
                    {"resource": record.resource.to_summary(), "progress": record.to_state()}
                    for record in path_records
                ],
                **completion_stats(path_records),
            })

        return {**dashboard_summary(paths), "progress": paths}

    @staticmethod
    def instructor_path_progress(actor, learning_path_id):
        """Every learner's progress on a path, for its creator or an admin."""
        learning_path = db.session.get(LearningPath, learning_path_id)
        if not learning_path:
            raise NotFound("Learning path not found")

        authorize(
            actor, WRITE, learning_path,
            "Access denied. You can only view progress for your own learning paths.",
        )

        total_resources = len(learning_path.resources)
        records = (
            Progress.query
            .options(joinedload(Progress.user), joinedload(Progress.resource))
            .filter(Progress.learning_path_id == learning_path.id)
            .order_by(Progress.user_id, Progress.id)
            .all()
        )

        by_user = {}
        for record in records:
            authorize(actor, READ, record)
            by_user.setdefault(record.user_id, []).append(record)

        user_progress = []
        for user_records in by_user.values():
            user = user_records[0].user
            user_records.sort(key=lambda r: (r.resource.order, r.resource_id))
            user_progress.append({
                "user": {**user.to_summary(), "email": user.email},
                "resources": [
                    {"resource": record.resource.to_summary(), "progress": record.to_state()}
                    for record in user_records
                ],
                **completion_stats(user_records, total_resources=total_resources),
            })

        return {
            "learningPath": learning_path.to_dict(),
            "resources": [resource.to_dict() for resource in learning_path.resources],
            "userProgress": user_progress,
        }

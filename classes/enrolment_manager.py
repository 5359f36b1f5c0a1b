import logging

from sqlalchemy.exc import IntegrityError

from classes.access_control import READ, authorize
from models import db
from models.learning_paths import LearningPath
from models.progress import Progress
from utils.errors import Conflict, NotFound

logger = logging.getLogger(__name__)


class EnrolmentManager:
    @staticmethod
    def enroll_user(actor, learning_path_id):
        """
        Materialise a default progress row for every resource of the path the
        user has no row for yet. Safe to repeat; returns (path, created rows).
        """
        learning_path = db.session.get(LearningPath, learning_path_id)
        if not learning_path:
            raise NotFound("Learning path not found")

        authorize(actor, READ, learning_path, "Access denied. This learning path is private.")

        resource_ids = [resource.id for resource in learning_path.resources]
        existing = {
            resource_id
            for (resource_id,) in db.session.query(Progress.resource_id).filter(
                Progress.user_id == actor.id,
                Progress.resource_id.in_(resource_ids),
            )
        } if resource_ids else set()

        created = []
        for resource in learning_path.resources:
            if resource.id in existing:
                continue
            progress = Progress(
                user_id=actor.id,
                learning_path_id=learning_path.id,
                resource_id=resource.id,
                status="not_started",
                completion_percentage=0,
                time_spent_minutes=0,
            )
            db.session.add(progress)
            created.append(progress)

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning("Concurrent enrolment of user %s in path %s", actor.id, learning_path_id)
            raise Conflict("Enrolment for this learning path is already in progress. Please retry.")

        logger.info("User %s enrolled in path %s: %d new progress rows", actor.id, learning_path.id, len(created))
        return learning_path, created

    @staticmethod
    def is_enrolled(user_id, learning_path_id):
        return db.session.query(
            Progress.query.filter_by(user_id=user_id, learning_path_id=learning_path_id).exists()
        ).scalar()

from models import db
from sqlalchemy import CheckConstraint
from sqlalchemy.orm import relationship

STATUSES = ("not_started", "in_progress", "completed")


class Progress(db.Model):
    """One learner's completion state for one resource."""
    __tablename__ = "progress"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # denormalised copy of resource.learning_path_id
    learning_path_id = db.Column(
        db.Integer, db.ForeignKey("learning_paths.id", ondelete="CASCADE"), nullable=False, index=True
    )
    resource_id = db.Column(db.Integer, db.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    status = db.Column(db.Enum(*STATUSES, name="progress_status"), nullable=False, default="not_started")
    completion_percentage = db.Column(db.Float, nullable=False, default=0)
    time_spent_minutes = db.Column(db.Integer, nullable=False, default=0)
    last_accessed_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    __table_args__ = (
        db.UniqueConstraint("user_id", "resource_id", name="unique_user_resource_progress"),
        CheckConstraint(
            "completion_percentage >= 0 AND completion_percentage <= 100",
            name="check_completion_percentage_range",
        ),
        CheckConstraint("time_spent_minutes >= 0", name="check_time_spent_non_negative"),
    )

    user = relationship("User", back_populates="progress_records")
    learning_path = relationship("LearningPath", back_populates="progress_records")
    resource = relationship("Resource", back_populates="progress_records")

    def __repr__(self):
        return f"<Progress User {self.user_id} Resource {self.resource_id} ({self.status})>"

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "learningPathId": self.learning_path_id,
            "resourceId": self.resource_id,
            "status": self.status,
            "completionPercentage": self.completion_percentage,
            "timeSpentMinutes": self.time_spent_minutes,
            "lastAccessedAt": self.last_accessed_at,
            "completedAt": self.completed_at,
            "notes": self.notes,
        }

    def to_state(self):
        """The learner-facing fields, without identifiers."""
        return {
            "status": self.status,
            "completionPercentage": self.completion_percentage,
            "timeSpentMinutes": self.time_spent_minutes,
            "lastAccessedAt": self.last_accessed_at,
            "completedAt": self.completed_at,
            "notes": self.notes,
        }

from models import db
from sqlalchemy.orm import relationship

DIFFICULTIES = ("beginner", "intermediate", "advanced")


class LearningPath(db.Model):
    __tablename__ = "learning_paths"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True)
    difficulty = db.Column(db.Enum(*DIFFICULTIES, name="path_difficulty"), nullable=False, default="intermediate")
    estimated_time_hours = db.Column(db.Float, nullable=False, default=0)
    is_public = db.Column(db.Boolean, nullable=False, default=True)
    cover_image = db.Column(db.String(255), nullable=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    creator = relationship("User", back_populates="learning_paths")
    resources = relationship(
        "Resource",
        back_populates="learning_path",
        order_by="[Resource.order, Resource.id]",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    progress_records = relationship(
        "Progress", back_populates="learning_path", cascade="all, delete-orphan", passive_deletes=True
    )

    def recalculate_estimated_time(self):
        """Derive the path's hours from its resources' minutes."""
        total_minutes = sum(resource.estimated_time_minutes or 0 for resource in self.resources)
        self.estimated_time_hours = total_minutes / 60
        return self.estimated_time_hours

    @property
    def total_estimated_minutes(self):
        return sum(resource.estimated_time_minutes or 0 for resource in self.resources)

    def __repr__(self):
        return f"<LearningPath {self.title} (Creator ID {self.creator_id})>"

    def to_dict(self, include_resources=False, resource_summary=False):
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "difficulty": self.difficulty,
            "estimatedTimeHours": self.estimated_time_hours,
            "isPublic": self.is_public,
            "coverImage": self.cover_image,
            "creatorId": self.creator_id,
            "creator": self.creator.to_summary() if self.creator else None,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if include_resources:
            data["resources"] = [r.to_dict() for r in self.resources]
        elif resource_summary:
            data["resources"] = [r.to_summary() for r in self.resources]
        return data

from sqlalchemy.orm import relationship
from models import db

RESOURCE_TYPES = ("document", "video", "link", "other")


class Resource(db.Model):
    __tablename__ = "resources"

    id = db.Column(db.Integer, primary_key=True)
    learning_path_id = db.Column(
        db.Integer, db.ForeignKey("learning_paths.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    type = db.Column(db.Enum(*RESOURCE_TYPES, name="resource_type"), nullable=False, default="document")
    format = db.Column(db.String(50), nullable=True)  # pdf, mp4, website...
    url = db.Column(db.String(500), nullable=True)
    file_path = db.Column(db.String(255), nullable=True)
    estimated_time_minutes = db.Column(db.Integer, nullable=False, default=30)
    order = db.Column(db.Integer, nullable=False, default=0)
    is_required = db.Column(db.Boolean, nullable=False, default=True)
    extra = db.Column("metadata", db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    learning_path = relationship("LearningPath", back_populates="resources")
    progress_records = relationship(
        "Progress", back_populates="resource", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Resource {self.title} (Learning Path ID {self.learning_path_id})>"

    def to_summary(self):
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "estimatedTimeMinutes": self.estimated_time_minutes,
            "order": self.order,
            "isRequired": self.is_required,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "learningPathId": self.learning_path_id,
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "format": self.format,
            "url": self.url,
            "filePath": self.file_path,
            "estimatedTimeMinutes": self.estimated_time_minutes,
            "order": self.order,
            "isRequired": self.is_required,
            "metadata": self.extra,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

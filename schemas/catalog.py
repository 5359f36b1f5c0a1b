from typing import Annotated, Any, Dict, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import AfterValidator, Field, model_validator

from schemas.base import RequestSchema

Difficulty = Literal["beginner", "intermediate", "advanced"]
ResourceType = Literal["document", "video", "link", "other"]


def _check_url(value):
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("url must be an http(s) URL")
    return value


Url = Annotated[str, Field(max_length=500), AfterValidator(_check_url)]


class LearningPathCreate(RequestSchema):
    title: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    difficulty: Difficulty = "intermediate"
    is_public: bool = True
    cover_image: Optional[str] = Field(None, max_length=255)


class LearningPathUpdate(RequestSchema):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    difficulty: Optional[Difficulty] = None
    is_public: Optional[bool] = None
    cover_image: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("title", "difficulty", "is_public"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ResourceFields(RequestSchema):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    type: ResourceType = "document"
    format: Optional[str] = Field(None, max_length=50)
    url: Optional[Url] = None
    file_path: Optional[str] = Field(None, max_length=255)
    estimated_time_minutes: int = Field(30, ge=0)
    order: int = 0
    is_required: bool = True
    metadata: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def require_one_location(self):
        if bool(self.url) == bool(self.file_path):
            raise ValueError("Provide either url or filePath")
        return self


class ResourceCreate(ResourceFields):
    learning_path_id: int = Field(..., gt=0)


class ResourceUpdate(RequestSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    type: Optional[ResourceType] = None
    format: Optional[str] = Field(None, max_length=50)
    url: Optional[Url] = None
    file_path: Optional[str] = Field(None, max_length=255)
    estimated_time_minutes: Optional[int] = Field(None, ge=0)
    order: Optional[int] = None
    is_required: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("title", "type", "estimated_time_minutes", "order", "is_required"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ResourceOrder(RequestSchema):
    id: int = Field(..., gt=0)
    order: int


class ReorderRequest(RequestSchema):
    learning_path_id: int = Field(..., gt=0)
    resource_orders: List[ResourceOrder]


class ImportLearningPath(LearningPathCreate):
    resources: List[ResourceFields] = Field(..., min_length=1)

"""
Access decisions for catalog and progress entities.

`can_access` is pure: it looks only at the actor (id, role) and entities that
are already loaded, so routes call it after fetching and before mutating.

Rules
-----
* admin may do anything, except write another user's progress.
* learning paths and resources are readable when public; private ones only by
  their creator or an admin. Anonymous actors never read private paths.
* writing a path or one of its resources requires an instructor who created
  the path.
* creating a path (entity = the LearningPath class) requires an instructor.
* a progress row is readable by its owner and by the path's creator, and
  writable only by its owner.
"""
from collections import namedtuple

from models.learning_paths import LearningPath
from models.progress import Progress
from models.resources import Resource
from models.users import AUTHOR_ROLES
from utils.errors import Forbidden

READ = "read"
WRITE = "write"
CREATE = "create"
ACTIONS = (READ, WRITE, CREATE)

Actor = namedtuple("Actor", ["id", "username", "role"])


def is_admin(actor):
    return actor is not None and actor.role == "admin"


def is_author(actor):
    return actor is not None and actor.role in AUTHOR_ROLES


def _owning_path(entity):
    if isinstance(entity, LearningPath):
        return entity
    if isinstance(entity, (Resource, Progress)):
        return entity.learning_path
    raise TypeError(f"Unsupported entity for access check: {entity!r}")


def _can_access_catalog(actor, action, path):
    if action == READ:
        if path.is_public:
            return True
        return actor is not None and (actor.id == path.creator_id or is_admin(actor))

    if action == WRITE:
        if is_admin(actor):
            return True
        return is_author(actor) and actor.id == path.creator_id

    return False


def _can_access_progress(actor, action, progress):
    if actor is None:
        return False

    if action == READ:
        if actor.id == progress.user_id or is_admin(actor):
            return True
        path = progress.learning_path
        return path is not None and actor.id == path.creator_id

    if action == WRITE:
        return actor.id == progress.user_id

    return False


def can_access(actor, action, entity):
    """Return True when `actor` may perform `action` on `entity`."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown action: {action}")

    if action == CREATE:
        if entity is LearningPath:
            return is_author(actor)
        # creating a resource is a write on its path
        return _can_access_catalog(actor, WRITE, _owning_path(entity))

    if isinstance(entity, Progress):
        return _can_access_progress(actor, action, entity)

    return _can_access_catalog(actor, action, _owning_path(entity))


def authorize(actor, action, entity, message=None):
    """Raise Forbidden unless `can_access` allows the action."""
    if not can_access(actor, action, entity):
        raise Forbidden(message or "Access denied")

import pytest

from app import create_app
from models import db
from models.learning_paths import LearningPath
from models.resources import Resource
from models.users import User
from utils.storage import LocalStorage
from utils.tokens import get_jwt_token

PASSWORD = "secret123"


# ============================================================================
# Application
# ============================================================================

@pytest.fixture
def app(tmp_path):
    app = create_app("testing")
    upload_folder = str(tmp_path / "uploads")
    app.config["UPLOAD_FOLDER"] = upload_folder
    app.extensions["storage"] = LocalStorage(upload_folder)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ============================================================================
# Users
# ============================================================================

def make_user(username, role):
    user = User(username=username, email=f"{username}@example.com", role=role)
    user.set_password(PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def learner(app):
    return make_user("learner", "learner")


@pytest.fixture
def other_learner(app):
    return make_user("otherlearner", "learner")


@pytest.fixture
def instructor(app):
    return make_user("instructor", "instructor")


@pytest.fixture
def other_instructor(app):
    return make_user("otherinstructor", "instructor")


@pytest.fixture
def admin(app):
    return make_user("admin", "admin")


def auth_header(user):
    return {"Authorization": f"Bearer {get_jwt_token(user)}"}


@pytest.fixture
def learner_headers(learner):
    return auth_header(learner)


@pytest.fixture
def other_learner_headers(other_learner):
    return auth_header(other_learner)


@pytest.fixture
def instructor_headers(instructor):
    return auth_header(instructor)


@pytest.fixture
def other_instructor_headers(other_instructor):
    return auth_header(other_instructor)


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


# ============================================================================
# Catalog
# ============================================================================

def make_path(creator, title="Python Foundations", is_public=True, resource_minutes=(30, 45, 60, 15)):
    learning_path = LearningPath(
        title=title,
        description="From variables to packages",
        category="programming",
        difficulty="beginner",
        is_public=is_public,
        creator_id=creator.id,
    )
    for index, minutes in enumerate(resource_minutes):
        learning_path.resources.append(Resource(
            title=f"{title} part {index + 1}",
            type="link",
            url=f"https://example.com/{index + 1}",
            estimated_time_minutes=minutes,
            order=index,
        ))
    learning_path.recalculate_estimated_time()
    db.session.add(learning_path)
    db.session.commit()
    return learning_path


@pytest.fixture
def public_path(instructor):
    return make_path(instructor)


@pytest.fixture
def private_path(instructor):
    return make_path(instructor, title="Internal Onboarding", is_public=False, resource_minutes=(20, 40))


@pytest.fixture
def empty_path(instructor):
    return make_path(instructor, title="Coming Soon", resource_minutes=())


@pytest.fixture
def path_factory(app):
    return make_path

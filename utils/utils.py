from functools import wraps

from flask import request, g

from classes.access_control import Actor
from utils.errors import Forbidden, Unauthorized
from utils.tokens import decode_jwt


def get_request_token():
    """Bearer token from the Authorization header, else the access_token cookie."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get("access_token")


def _actor_from_payload(payload):
    try:
        return Actor(id=int(payload["id"]), username=payload.get("username"), role=payload["role"])
    except (KeyError, TypeError, ValueError):
        raise Unauthorized("Invalid token")


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_request_token()
        if not token:
            raise Unauthorized("No token, authorization denied")

        g.user = _actor_from_payload(decode_jwt(token))
        return f(*args, **kwargs)

    return decorated_function


def login_optional(f):
    """Like login_required, but anonymous or bad-token requests get g.user = None."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.user = None
        token = get_request_token()
        if token:
            try:
                g.user = _actor_from_payload(decode_jwt(token))
            except Unauthorized:
                g.user = None
        return f(*args, **kwargs)

    return decorated_function


def roles_required(*roles):
    """Use below login_required. Admins always pass."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = g.get("user")
            if user is None:
                raise Unauthorized()
            if user.role != "admin" and user.role not in roles:
                raise Forbidden(f"Access denied. Requires role: {', '.join(roles)}")
            return f(*args, **kwargs)
        return decorated_function
    return decorator

import datetime
import logging

import jwt
from flask import current_app

from utils.errors import Unauthorized

logger = logging.getLogger(__name__)


def get_jwt_token(user):
    """Generate JWT token with user payload"""
    if user is None:
        raise ValueError("User must be provided to generate JWT token")

    expiration = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
        hours=current_app.config["JWT_EXPIRATION_HOURS"]
    )
    payload = {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "exp": expiration,
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET_KEY"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def decode_jwt(token):
    """Decode and validate a JWT token, raising Unauthorized on failure."""
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET_KEY"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid token")
        raise Unauthorized("Invalid token")

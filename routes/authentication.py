import logging

from flask import Blueprint, jsonify, make_response, current_app, g
from sqlalchemy import or_

from classes.validators import validate_payload
from models import db
from models.users import User
from schemas.users import RegisterRequest, LoginRequest
from utils.errors import Conflict, NotFound, Unauthorized
from utils.tokens import get_jwt_token
from utils.utils import login_required

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth_bp', __name__)


def _set_token_cookie(response, token, max_age):
    response.set_cookie(
        "access_token", token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        path="/",
        max_age=max_age,
    )
    return response


# Register
@auth_bp.route('/register', methods=['POST'])
def register():
    data = validate_payload(RegisterRequest)

    existing_user = User.query.filter(
        or_(User.username == data.username, User.email == data.email)
    ).first()
    if existing_user:
        raise Conflict("User with this username or email already exists")

    new_user = User(
        username=data.username,
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
    )
    new_user.set_password(data.password)

    db.session.add(new_user)
    db.session.commit()
    logger.info("Registered user %s (%s)", new_user.username, new_user.role)

    token = get_jwt_token(new_user)
    response = make_response(jsonify({
        "success": True,
        "message": "User registered successfully",
        "token": token,
        "user": new_user.to_dict(),
    }), 201)
    return _set_token_cookie(response, token, current_app.config["JWT_EXPIRATION_HOURS"] * 3600)


# Login
@auth_bp.route('/login', methods=['POST'])
def login():
    data = validate_payload(LoginRequest)

    if data.username:
        user = User.query.filter_by(username=data.username).first()
    else:
        user = User.query.filter_by(email=data.email).first()

    if not user or not user.check_password(data.password):
        logger.info("Failed login for %s", data.username or data.email)
        raise Unauthorized("Invalid credentials")

    token = get_jwt_token(user)
    logger.info("User %s logged in", user.username)

    response = make_response(jsonify({
        "success": True,
        "message": "Login successful",
        "token": token,
        "user": user.to_dict(),
    }))
    return _set_token_cookie(response, token, current_app.config["JWT_EXPIRATION_HOURS"] * 3600)


# Logout
@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = make_response(jsonify({"success": True, "message": "Logout successful"}))
    return _set_token_cookie(response, "", 0)


# Auth Check
@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    user = db.session.get(User, g.user.id)
    if not user:
        raise NotFound("User not found")
    return jsonify({"success": True, "user": user.to_dict()}), 200

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required
from pymongo.errors import DuplicateKeyError

from backend.models.user_model import User, find_user_by_email
from backend.utils.db import get_db, to_object_id
from backend.utils.validation import validate_login, validate_signup


auth_bp = Blueprint("auth", __name__)


def _auth_payload(user):
    token = create_access_token(identity=user.id)
    return {**user.to_dict(), "token": token}


@auth_bp.post("/signup")
def signup():
    payload = request.get_json(silent=True) or {}
    data, errors = validate_signup(payload)
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400

    db = get_db()
    if find_user_by_email(db, data["email"]):
        return jsonify(error="User already exists with this email"), 400

    user = User(name=data["name"], email=data["email"])
    user.set_password(data["password"])
    try:
        res = db.users.insert_one(user.to_doc())
    except DuplicateKeyError:
        return jsonify(error="User already exists with this email"), 400
    user.id = str(res.inserted_id)

    current_app.logger.info("New account created for user %s", user.id)
    return jsonify(item=_auth_payload(user)), 201


@auth_bp.post("/login")
def login():
    payload = request.get_json(silent=True) or {}
    data, errors = validate_login(payload)
    if errors:
        return jsonify(error="Validation failed", errors=errors), 400

    user = find_user_by_email(get_db(), data["email"])
    if user is None or not user.check_password(data["password"]):
        current_app.logger.info("Failed login attempt for %s", data["email"])
        return jsonify(error="Invalid credentials"), 401

    return jsonify(item=_auth_payload(user)), 200


@auth_bp.get("/me")
@jwt_required()
def me():
    user_id = get_jwt_identity()
    doc = get_db().users.find_one({"_id": to_object_id(user_id)})
    if not doc:
        return jsonify(error="User not found"), 404
    return jsonify(item=User.from_doc(doc).to_dict()), 200

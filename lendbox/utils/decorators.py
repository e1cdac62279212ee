from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity

from lendbox.repositories.user_repo import UserRepo


def identity_required(fn):
    """
    JWT must be valid and its identity must resolve to an existing user.
    The resolved id is stored on g.user_id for the view.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        try:
            user_id = int(get_jwt_identity())
        except (TypeError, ValueError):
            return jsonify({"success": False, "message": "Unauthorized"}), 401

        if UserRepo.get_by_id(user_id) is None:
            return jsonify({"success": False, "message": "Unauthorized"}), 401

        g.user_id = user_id
        return fn(*args, **kwargs)
    return wrapper

# dietbuddy/auth.py
from functools import wraps

from flask_jwt_extended import create_access_token, get_jwt_identity

from .errors import ForbiddenError, NotFoundError
from .models.user import User


def issue_token(user: User) -> str:
    return create_access_token(identity=str(user.id), additional_claims={"role": user.role})


def current_user_id() -> int:
    return int(get_jwt_identity())


def load_current_user() -> User:
    user = User.query.get(current_user_id())
    if not user:
        raise NotFoundError("User not found")
    return user


def admin_required(fn):
    """Use below @jwt_required(); re-reads the role from the database."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = load_current_user()
        if not user.is_admin:
            raise ForbiddenError("Access denied. Admin privileges required.")
        return fn(*args, **kwargs)

    return wrapper


def member_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = load_current_user()
        if not user.is_admin and not user.is_member:
            raise ForbiddenError("This feature requires a premium membership.")
        return fn(*args, **kwargs)

    return wrapper

import json
import logging

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from models import db, User
from errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from handlers.shaping import stamp_new, touch, iso

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'theme': 'system',
    'emailNotifications': True,
    'pushNotifications': True,
}


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password, password_hash):
    # OAuth-era rows were created without a password and can never log in
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def commit_unique(message):
    """Commit, turning a unique-email race into a conflict."""
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info("Unique email conflict: %s", message)
        raise ConflictError(message)


def get_user(user_id):
    return db.session.get(User, user_id)


def get_user_by_email(email):
    if not email:
        return None
    return User.query.filter_by(email=email.strip().lower()).first()


def create_user(email, password, name):
    if get_user_by_email(email):
        raise ConflictError("User with this email already exists")

    user = stamp_new(User(
        email=email.strip().lower(),
        password=hash_password(password),
        name=name,
        settings=json.dumps(DEFAULT_SETTINGS),
    ))
    db.session.add(user)
    commit_unique("User with this email already exists")
    logger.info("Registered user %s", user.id)
    return user


def find_or_create_user(user_id, email, name=None):
    """Resolve the stored user behind a session's claims.

    Looks up by id first, then by email, and as a last resort creates a
    password-less record so that older sessions keep working.
    """
    user = db.session.get(User, user_id) if user_id is not None else None
    if user is not None:
        return user

    user = get_user_by_email(email)
    if user is not None:
        return user

    if not email:
        raise AuthenticationError()

    user = stamp_new(User(
        email=email.strip().lower(),
        password="",
        name=name or 'Unknown User',
        settings=json.dumps(DEFAULT_SETTINGS),
    ))
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # a concurrent request created the row first
        db.session.rollback()
        user = get_user_by_email(email)
        if user is None:
            raise
        return user
    logger.info("Created store record for session user %s", user.id)
    return user


def load_settings(user):
    if not user.settings:
        return dict(DEFAULT_SETTINGS)
    try:
        return {**DEFAULT_SETTINGS, **json.loads(user.settings)}
    except ValueError:
        logger.warning("Discarding unreadable settings for user %s", user.id)
        return dict(DEFAULT_SETTINGS)


def shape_user(user):
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'image': user.image,
        'settings': load_settings(user),
        'createdAt': iso(user.created_at),
        'updatedAt': iso(user.updated_at),
    }


def get_profile(user_id):
    user = get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return shape_user(user)


def update_profile(user_id, name, email, image=None, settings=None):
    user = get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    email = email.strip().lower()
    if email != user.email:
        existing = get_user_by_email(email)
        if existing is not None and existing.id != user.id:
            raise ConflictError("Email already taken")

    user.name = name
    user.email = email
    user.image = image or None
    if settings is not None:
        user.settings = json.dumps(settings)
    touch(user)
    commit_unique("Email already taken")
    return shape_user(user)


def change_password(user_id, current_password, new_password):
    user = get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not verify_password(current_password, user.password):
        raise BadRequestError("Current password is incorrect")

    user.password = hash_password(new_password)
    touch(user)
    db.session.commit()
    logger.info("Password changed for user %s", user.id)

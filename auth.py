"""Credential login and signed session tokens."""

import logging
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request

from errors import AuthenticationError
from handlers.users import get_user_by_email, verify_password, find_or_create_user

logger = logging.getLogger(__name__)

COOKIE_NAME = 'session_token'
ALGORITHM = 'HS256'


def create_session_token(user_id, email, name):
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user_id),
        'email': email,
        'name': name,
        'iat': now,
        'exp': now + timedelta(seconds=current_app.config['SESSION_MAX_AGE']),
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm=ALGORITHM)


def decode_session_token(token):
    """Raises jwt.InvalidTokenError for bad signatures and expired tokens."""
    return jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=[ALGORITHM])


def authenticate(email, password):
    # Unknown email and wrong password fail the same way
    user = get_user_by_email(email)
    if user is None or not verify_password(password, user.password):
        logger.info("Failed login for %s", email)
        raise AuthenticationError("Invalid email or password")
    return user


def token_from_request():
    header = request.headers.get('Authorization', '')
    if header.lower().startswith('bearer '):
        return header[7:].strip()
    return request.cookies.get(COOKIE_NAME)


def set_session_cookie(response, token):
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=current_app.config['SESSION_MAX_AGE'],
        httponly=True,
        secure=current_app.config['SESSION_COOKIE_SECURE'],
        samesite='Lax',
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(COOKIE_NAME)
    return response


def load_session():
    token = token_from_request()
    if not token:
        raise AuthenticationError()
    try:
        claims = decode_session_token(token)
    except jwt.InvalidTokenError:
        raise AuthenticationError()

    try:
        claimed_id = int(claims.get('sub'))
    except (TypeError, ValueError):
        claimed_id = None
    user = find_or_create_user(claimed_id, claims.get('email'), claims.get('name'))

    g.claims = claims
    g.user = user
    g.user_id = user.id

    issued_at = claims.get('iat', 0)
    age = datetime.now(timezone.utc).timestamp() - issued_at
    g.refresh_session = age >= current_app.config['SESSION_UPDATE_AGE']
    return user


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        load_session()
        return f(*args, **kwargs)
    return decorated


def refresh_session_cookie(response):
    # Sliding expiry: an active session keeps getting a fresh 30 days
    if getattr(g, 'refresh_session', False) and response.status_code < 400:
        user = g.user
        set_session_cookie(response, create_session_token(user.id, user.email, user.name))
    return response

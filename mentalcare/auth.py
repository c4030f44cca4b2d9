import logging
from datetime import timedelta
from typing import Optional

from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from .errors import AuthError, ValidationError
from .validation import validate_signup_form

logger = logging.getLogger(__name__)


def _bearer_token(request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def has_credentials(request, cookie_name) -> bool:
    return bool(request.cookies.get(cookie_name) or _bearer_token(request))


def resolve_user_id(request, cookie_name) -> Optional[str]:
    """uid of the caller from the session cookie or a bearer ID token, else None."""
    session_cookie = request.cookies.get(cookie_name)
    try:
        if session_cookie:
            claims = firebase_auth.verify_session_cookie(session_cookie, check_revoked=True)
            return claims.get("uid")
        token = _bearer_token(request)
        if token:
            claims = firebase_auth.verify_id_token(token)
            return claims.get("uid")
    except (firebase_exceptions.FirebaseError, ValueError) as e:
        logger.info("[resolve_user_id] rejected credentials: %s", e)
    return None


def create_session(id_token: str, days: int) -> str:
    if not id_token:
        raise ValidationError(["idToken"], user_message="Missing ID token.")
    try:
        return firebase_auth.create_session_cookie(id_token, expires_in=timedelta(days=days))
    except (firebase_exceptions.FirebaseError, ValueError) as e:
        raise AuthError(str(e), user_message="Failed to create a session.") from e


def sign_up(raw) -> str:
    form = validate_signup_form(raw)
    try:
        user = firebase_auth.create_user(email=form.email, password=form.password)
    except (firebase_exceptions.FirebaseError, ValueError) as e:
        raise AuthError(str(e), user_message=str(e)) from e
    logger.info("Created user %s", user.uid)
    return user.uid


def sign_out(user_id: Optional[str]):
    if not user_id:
        return
    try:
        firebase_auth.revoke_refresh_tokens(user_id)
    except firebase_exceptions.FirebaseError as e:
        raise AuthError(str(e), user_message="Failed to sign out.") from e


def update_display_name(user_id: str, display_name: str):
    try:
        firebase_auth.update_user(user_id, display_name=display_name)
    except (firebase_exceptions.FirebaseError, ValueError) as e:
        raise AuthError(str(e), user_message="An error occurred while updating your profile.") from e

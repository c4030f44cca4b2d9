from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .schemas import MessageForm, ProfileForm, SignupForm, field_names


def _raw_fields(raw, keys):
    # Werkzeug MultiDict, plain dict or anything with .get
    return {k: raw.get(k) for k in keys if raw.get(k) is not None}


def validate_message_form(raw) -> MessageForm:
    """Turn raw ``message``/``userId`` fields into a MessageForm or raise ValidationError."""
    try:
        return MessageForm.model_validate(_raw_fields(raw, ("message", "userId")))
    except PydanticValidationError as e:
        raise ValidationError(field_names(e)) from e


def validate_user_id(raw) -> str:
    user_id = raw.get("userId")
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError(["userId"], user_message="Invalid user.")
    return user_id


def validate_signup_form(raw) -> SignupForm:
    try:
        return SignupForm.model_validate(_raw_fields(raw, ("email", "password")))
    except PydanticValidationError as e:
        raise ValidationError(field_names(e), user_message="Invalid email or password.") from e


def validate_profile_form(raw) -> ProfileForm:
    try:
        return ProfileForm.model_validate(_raw_fields(raw, ("fullName", "dob", "phone")))
    except PydanticValidationError as e:
        fields = field_names(e)
        message = "Invalid profile data."
        if fields == ["fullName"]:
            message = "Full name must be at least 2 characters."
        elif fields == ["dob"]:
            message = "A date of birth is required."
        raise ValidationError(fields, user_message=message) from e

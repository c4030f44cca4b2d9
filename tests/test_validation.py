import pytest
from werkzeug.datastructures import MultiDict

from mentalcare.errors import ValidationError
from mentalcare.validation import (
    validate_message_form,
    validate_profile_form,
    validate_signup_form,
    validate_user_id,
)


def test_valid_message_form():
    form = validate_message_form({"message": "hello there", "userId": "u1"})
    assert form.message == "hello there"
    assert form.user_id == "u1"


def test_accepts_werkzeug_form_data():
    form = validate_message_form(MultiDict([("message", "hi"), ("userId", "u1")]))
    assert form.user_id == "u1"


@pytest.mark.parametrize("message", [None, "", "   ", "\n\t"])
def test_rejects_missing_or_blank_message(message):
    raw = {"userId": "u1"}
    if message is not None:
        raw["message"] = message
    with pytest.raises(ValidationError) as exc:
        validate_message_form(raw)
    assert exc.value.fields == ["message"]
    assert exc.value.user_message == "Invalid input."


@pytest.mark.parametrize("user_id", [None, ""])
def test_rejects_missing_user(user_id):
    raw = {"message": "hi"}
    if user_id is not None:
        raw["userId"] = user_id
    with pytest.raises(ValidationError) as exc:
        validate_message_form(raw)
    assert exc.value.fields == ["userId"]


def test_lists_every_bad_field():
    with pytest.raises(ValidationError) as exc:
        validate_message_form({})
    assert sorted(exc.value.fields) == ["message", "userId"]


def test_validate_user_id():
    assert validate_user_id({"userId": "abc"}) == "abc"
    with pytest.raises(ValidationError) as exc:
        validate_user_id({})
    assert exc.value.user_message == "Invalid user."


def test_signup_requires_email_and_long_password():
    form = validate_signup_form({"email": "jane@mentalcare.app", "password": "secret1"})
    assert form.email == "jane@mentalcare.app"
    with pytest.raises(ValidationError) as exc:
        validate_signup_form({"email": "not-an-email", "password": "123"})
    assert exc.value.user_message == "Invalid email or password."
    assert sorted(exc.value.fields) == ["email", "password"]


def test_profile_form_accepts_iso_timestamp_dob():
    form = validate_profile_form({"fullName": " Jane Doe ", "dob": "1990-04-01T00:00:00.000Z", "phone": ""})
    assert form.full_name == "Jane Doe"
    assert form.dob.isoformat() == "1990-04-01"
    assert form.phone is None


def test_profile_form_rejects_short_name():
    with pytest.raises(ValidationError) as exc:
        validate_profile_form({"fullName": "J", "dob": "1990-04-01"})
    assert exc.value.user_message == "Full name must be at least 2 characters."


@pytest.mark.parametrize("dob", [None, "1899-12-31", "2999-01-01"])
def test_profile_form_rejects_bad_dob(dob):
    raw = {"fullName": "Jane"}
    if dob:
        raw["dob"] = dob
    with pytest.raises(ValidationError) as exc:
        validate_profile_form(raw)
    assert exc.value.fields == ["dob"]

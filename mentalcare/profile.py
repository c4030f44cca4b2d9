from . import auth
from .validation import validate_profile_form

PROFILE_UPDATED = "Profile updated successfully."


def update_profile(store, user_id, raw) -> str:
    form = validate_profile_form(raw)
    store.save_profile(user_id, form.full_name, form.dob.isoformat(), form.phone)
    auth.update_display_name(user_id, form.full_name)
    return PROFILE_UPDATED

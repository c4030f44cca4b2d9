REFERRAL_MESSAGE = "⚠️ Please reach out to a professional. Helpline: +91-9876543210"


def resolve_referral(is_distress: bool) -> str:
    """Helpline text when the message was flagged as severe distress, else ``""``."""
    return REFERRAL_MESSAGE if is_distress else ""

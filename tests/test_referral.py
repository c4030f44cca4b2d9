from mentalcare.referral import REFERRAL_MESSAGE, resolve_referral


def test_distress_returns_helpline():
    assert resolve_referral(True) == "⚠️ Please reach out to a professional. Helpline: +91-9876543210"
    assert resolve_referral(True) == REFERRAL_MESSAGE


def test_no_distress_returns_empty():
    assert resolve_referral(False) == ""

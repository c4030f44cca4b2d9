from . import prompts
from .errors import MalformedModelOutput
from .schemas import REPLY_SENTIMENTS, SupportiveReply


def wants_reply(sentiment: str) -> bool:
    return sentiment in REPLY_SENTIMENTS


def require_reply(text: str, sentiment: str) -> str:
    """Stripped reply text; a blank reply for a sentiment that needs one is malformed."""
    reply = (text or "").strip()
    if not reply:
        raise MalformedModelOutput(f"empty reply for {sentiment!r} message")
    return reply


def generate_supportive_reply(model, sentiment: str, user_message: str) -> str:
    """One or two empathetic sentences for sad/anxious/stressed messages.

    Any other sentiment returns ``""`` without calling the model. For
    ``severe_distress`` the helpline referral is the response instead.
    """
    if not wants_reply(sentiment):
        return ""
    prompt = prompts.render(prompts.SUPPORTIVE_REPLY, sentiment=sentiment, userMessage=user_message)
    result = model.generate(prompt, SupportiveReply, temperature=0.8)
    return require_reply(result.reply, sentiment)

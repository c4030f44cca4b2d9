import logging

from . import prompts
from .errors import MalformedModelOutput
from .schemas import SENTIMENTS, SEVERE_DISTRESS, SentimentClassification

logger = logging.getLogger(__name__)


def normalize_classification(sentiment: str, is_distress: bool) -> SentimentClassification:
    """Check the label against the taxonomy and make the label and flag agree.

    Either signal of distress wins: a ``severe_distress`` label or a true flag
    both produce ``severe_distress`` / ``True``.
    """
    label = (sentiment or "").strip().lower().replace(" ", "_")
    if label not in SENTIMENTS:
        raise MalformedModelOutput(f"unknown sentiment label: {sentiment!r}")
    if label == SEVERE_DISTRESS or is_distress:
        if label != SEVERE_DISTRESS or not is_distress:
            logger.warning("Inconsistent distress signal (sentiment=%s, isDistress=%s); treating as distress",
                           label, is_distress)
        return SentimentClassification(sentiment=SEVERE_DISTRESS, isDistress=True)
    return SentimentClassification(sentiment=label, isDistress=False)


def classify_sentiment(model, message: str) -> SentimentClassification:
    prompt = prompts.render(prompts.ANALYZE_SENTIMENT, message=message)
    result = model.generate(prompt, SentimentClassification, temperature=0)
    return normalize_classification(result.sentiment, result.isDistress)

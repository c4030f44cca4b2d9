"""
Message-processing pipeline.

One run is a strict sequence:

    validating -> classifying -> referral_check -> replying -> persisting -> done

and any step may end the run in ``failed``. Nothing is retried; the caller
sees one user-facing error string and can resubmit.

In ``unified`` mode the classifying and replying steps collapse into one model
call, and the reply it returns is held to the same contract as the staged
reply generator.
"""
import logging
from dataclasses import dataclass
from enum import Enum

from . import prompts
from .errors import GENERIC_DELETE_ERROR, MentalCareError, ValidationError
from .referral import resolve_referral
from .replies import generate_supportive_reply, require_reply, wants_reply
from .schemas import ProcessedMessage
from .sentiment import classify_sentiment, normalize_classification
from .validation import validate_message_form, validate_user_id

logger = logging.getLogger(__name__)

STAGED = "staged"
UNIFIED = "unified"


class Stage(str, Enum):
    VALIDATING = "validating"
    CLASSIFYING = "classifying"
    REFERRAL_CHECK = "referral_check"
    REPLYING = "replying"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineResult:
    ai_message: str
    referral_message: str
    sentiment: str
    turn_id: str = ""

    def to_wire(self):
        return {
            "aiMessage": self.ai_message,
            "referralMessage": self.referral_message,
            "sentiment": self.sentiment,
        }


class MessagePipeline:
    def __init__(self, model, store, mode=STAGED):
        if mode not in (STAGED, UNIFIED):
            raise ValueError(f"unknown pipeline mode: {mode!r}")
        self.model = model
        self.store = store
        self.mode = mode

    def process(self, raw) -> PipelineResult:
        """Run the pipeline for one submission. Raises MentalCareError on failure."""
        stage = Stage.VALIDATING
        try:
            form = validate_message_form(raw)

            stage = Stage.CLASSIFYING
            if self.mode == UNIFIED:
                classification, ai_message = self._classify_and_reply(form.message)
            else:
                classification = classify_sentiment(self.model, form.message)

            stage = Stage.REFERRAL_CHECK
            referral_message = resolve_referral(classification.isDistress)

            stage = Stage.REPLYING
            if self.mode == STAGED:
                ai_message = generate_supportive_reply(self.model, classification.sentiment, form.message)

            stage = Stage.PERSISTING
            turn_id = self.store.append_turn(
                user_id=form.user_id,
                user_message=form.message,
                ai_message=ai_message,
                sentiment=classification.sentiment,
            )
        except MentalCareError as e:
            e.stage = stage
            logger.error("Pipeline %s -> %s: %s", stage.value, Stage.FAILED.value, e)
            raise

        logger.info("Pipeline %s for %s (sentiment=%s, referral=%s)",
                    Stage.DONE.value, form.user_id, classification.sentiment, bool(referral_message))
        return PipelineResult(
            ai_message=ai_message,
            referral_message=referral_message,
            sentiment=classification.sentiment,
            turn_id=turn_id,
        )

    def _classify_and_reply(self, message):
        prompt = prompts.render(prompts.PROCESS_MESSAGE, message=message)
        output = self.model.generate(prompt, ProcessedMessage, temperature=0.7)
        classification = normalize_classification(output.sentiment, output.isDistress)
        if not wants_reply(classification.sentiment):
            return classification, ""
        return classification, require_reply(output.aiMessage, classification.sentiment)

    def send_message(self, raw) -> dict:
        """Action-style wrapper: ``{aiMessage, referralMessage}`` or ``{error}``."""
        try:
            return self.process(raw).to_wire()
        except MentalCareError as e:
            return e.to_dict()

    def erase(self, raw) -> int:
        user_id = validate_user_id(raw)
        return self.store.delete_history(user_id)

    def delete_history(self, raw) -> dict:
        try:
            self.erase(raw)
        except ValidationError as e:
            return {"error": e.user_message}
        except MentalCareError:
            logger.exception("Deleting history failed")
            return {"error": GENERIC_DELETE_ERROR}
        return {}

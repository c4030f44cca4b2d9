"""
Typed shapes for everything that crosses a boundary: form input coming in,
JSON coming back from the language model, and turns read from Firestore.

Model-facing schemas keep the camelCase field names of the JSON the model is
asked to produce, so the same class serves as the response schema sent to the
model and as the validator for what comes back.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

HAPPY = "happy"
SAD = "sad"
ANXIOUS = "anxious"
STRESSED = "stressed"
NEUTRAL = "neutral"
SEVERE_DISTRESS = "severe_distress"

SENTIMENTS = (HAPPY, SAD, ANXIOUS, STRESSED, NEUTRAL, SEVERE_DISTRESS)

# Only these sentiments ever get a supportive reply.
REPLY_SENTIMENTS = frozenset({SAD, ANXIOUS, STRESSED})


# ---------- inbound forms ----------

class MessageForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message: str = Field(min_length=1)
    user_id: str = Field(alias="userId", min_length=1)

    @field_validator("message", "user_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class SignupForm(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class ProfileForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(alias="fullName", min_length=2)
    dob: date
    phone: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters.")
        return v

    @field_validator("dob", mode="before")
    @classmethod
    def parse_iso_datetime(cls, v):
        # the browser sends a full ISO timestamp, e.g. 1990-04-01T00:00:00.000Z
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @field_validator("dob")
    @classmethod
    def check_range(cls, v: date) -> date:
        if v > date.today() or v < date(1900, 1, 1):
            raise ValueError("A valid date of birth is required.")
        return v

    @field_validator("phone")
    @classmethod
    def empty_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


# ---------- model output ----------

class SentimentClassification(BaseModel):
    sentiment: str = Field(
        description=(
            "The sentiment of the message (happy, sad, anxious, stressed, neutral). "
            "If the message indicates severe distress, set to 'severe_distress'."
        )
    )
    isDistress: bool = Field(
        description="A boolean value indicating if the message suggests severe distress."
    )


class SupportiveReply(BaseModel):
    reply: str = Field(description="The generated supportive reply from the AI.")


class ProcessedMessage(BaseModel):
    sentiment: str = Field(
        description="The sentiment of the message (happy, sad, anxious, stressed, neutral, severe_distress)."
    )
    isDistress: bool = Field(
        description="A boolean value indicating if the message suggests severe distress."
    )
    aiMessage: str = Field(
        description=(
            "The generated supportive reply from the AI. Should be an empty string "
            "if sentiment is happy, neutral or severe_distress."
        )
    )


# ---------- persisted ----------

class ConversationTurn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    user_id: str = Field(alias="userId")
    user_message: str = Field(alias="userMessage")
    ai_message: str = Field(default="", alias="aiMessage")
    sentiment: str
    timestamp: Optional[datetime] = None

    def to_wire(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "userMessage": self.user_message,
            "aiMessage": self.ai_message,
            "sentiment": self.sentiment,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


class Profile(BaseModel):
    full_name: str = ""
    dob: Optional[str] = None
    phone: Optional[str] = None

    def to_wire(self):
        return {"fullName": self.full_name, "dob": self.dob, "phone": self.phone}


def field_names(exc) -> List[str]:
    """Top-level field names (wire aliases) named by a pydantic ValidationError."""
    names = []
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        name = str(loc[0])
        if name not in names:
            names.append(name)
    return names

"""
Hosted language model access.

Two providers share one contract: render a prompt, ask for JSON matching a
pydantic schema, and hand back a validated instance of that schema.

- ``GeminiModel``  uses ``google-genai`` and sends the safety configuration
  that keeps dangerous-content filtering off, so crisis language reaches the
  classifier instead of being blocked.
- ``OpenAIModel``  uses the ``openai`` chat completions API in JSON mode.

Transport and auth failures raise ``ExternalServiceError``; a reply that is
empty or does not match the schema raises ``MalformedModelOutput``.
"""
import logging
from typing import Optional, Type, TypeVar

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from openai import OpenAI, OpenAIError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ExternalServiceError, MalformedModelOutput

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

SAFETY_SETTINGS = [
    genai_types.SafetySetting(
        category=genai_types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        threshold=genai_types.HarmBlockThreshold.BLOCK_NONE,
    ),
]


class LanguageModel:
    name = "base"

    def __init__(self, model: str, api_key: Optional[str] = None):
        self.model = model
        self.api_key = api_key
        self._client = None

    def generate(self, prompt: str, schema: Type[T], temperature: float = 0.7) -> T:
        raw = self._complete(prompt, schema, temperature)
        if not raw or not raw.strip():
            raise MalformedModelOutput(f"{self.name}: empty response for {schema.__name__}")
        try:
            return schema.model_validate_json(_strip_fences(raw))
        except PydanticValidationError as e:
            logger.warning("[%s] response did not match %s: %r", self.name, schema.__name__, raw[:200])
            raise MalformedModelOutput(f"{self.name}: {e}") from e

    def _complete(self, prompt: str, schema: Type[BaseModel], temperature: float) -> Optional[str]:
        raise NotImplementedError


class GeminiModel(LanguageModel):
    name = "gemini"

    @property
    def client(self):
        if self._client is None:
            try:
                self._client = genai.Client(api_key=self.api_key) if self.api_key else genai.Client()
            except ValueError as e:
                raise ExternalServiceError(f"gemini client: {e}") from e
        return self._client

    def _complete(self, prompt, schema, temperature):
        config = genai_types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            safety_settings=SAFETY_SETTINGS,
            temperature=temperature,
        )
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise ExternalServiceError(f"gemini: {e}") from e
        return response.text


class OpenAIModel(LanguageModel):
    name = "openai"

    @property
    def client(self):
        if self._client is None:
            try:
                self._client = OpenAI(api_key=self.api_key) if self.api_key else OpenAI()
            except OpenAIError as e:
                raise ExternalServiceError(f"openai client: {e}") from e
        return self._client

    def _complete(self, prompt, schema, temperature):
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=temperature,
            )
        except OpenAIError as e:
            raise ExternalServiceError(f"openai: {e}") from e
        return completion.choices[0].message.content


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def build_model(settings) -> LanguageModel:
    provider = (settings.get("MODEL_PROVIDER") or "gemini").lower()
    if provider == "gemini":
        return GeminiModel(settings.get("GEMINI_MODEL"), settings.get("GEMINI_API_KEY"))
    if provider == "openai":
        return OpenAIModel(settings.get("OPENAI_MODEL"), settings.get("OPENAI_API_KEY"))
    raise ValueError(f"unknown MODEL_PROVIDER: {provider!r}")


_model: Optional[LanguageModel] = None


def get_model(settings) -> LanguageModel:
    """Process-wide model handle, created on first use and reused afterwards."""
    global _model
    if _model is None:
        _model = build_model(settings)
        logger.info("Language model ready: %s/%s", _model.name, _model.model)
    return _model


def reset_model():
    global _model
    _model = None

"""
AI Service - Schema-constrained extraction through the OpenAI Responses API
"""
import json
import re
from typing import Any, Dict, List, Optional, Protocol, Type, TypeVar

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from ..config import OPENAI_MODEL, OPENAI_TEMPERATURE, get_api_key
from ..errors import CredentialMissingError, ExtractionError, SchemaMismatchError, SubsourceError
from ..models import BinaryPart, ContentKind, PromptPart, TextPart

ResultModel = TypeVar("ResultModel", bound=BaseModel)

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


class GenerationClient(Protocol):
    def generate(self, parts: List[PromptPart], schema: Dict[str, Any], schema_name: str) -> str:
        ...


def _to_openai_content(part: PromptPart) -> Dict[str, Any]:
    if isinstance(part, TextPart):
        return {"type": "input_text", "text": part.text}

    data_url = f"data:{part.media_kind};base64,{part.payload}"
    if part.media_kind == ContentKind.PDF.value:
        return {
            "type": "input_file",
            "filename": part.filename or "document.pdf",
            "file_data": data_url,
        }
    return {"type": "input_image", "image_url": data_url}


class OpenAIGenerationClient:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 temperature: Optional[float] = None):
        """
        Initialize OpenAI client

        Raises:
            CredentialMissingError: when no API key is configured
        """
        api_key = api_key or get_api_key()
        if not api_key:
            raise CredentialMissingError("API Key is missing. Please set OPENAI_API_KEY in your environment.")

        self.client = OpenAI(api_key=api_key)
        self.model = model or OPENAI_MODEL
        self.temperature = OPENAI_TEMPERATURE if temperature is None else temperature

    def generate(self, parts: List[PromptPart], schema: Dict[str, Any], schema_name: str) -> str:
        """
        Send one multi-part request constrained to the given JSON schema

        Args:
            parts: Ordered prompt parts (text and inline binary)
            schema: Declared output schema
            schema_name: Name reported with the schema

        Returns:
            Raw response text
        """
        try:
            resp = self.client.responses.create(
                model=self.model,
                input=[
                    {
                        "role": "user",
                        "content": [_to_openai_content(part) for part in parts],
                    }
                ],
                text={
                    "format": {
                        "type": "json_schema",
                        "name": schema_name,
                        "schema": schema,
                        "strict": True,
                    }
                },
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise ExtractionError(f"AI request failed: {e}") from e

        if getattr(resp, "status", None) == "incomplete":
            raise ExtractionError("AI response was incomplete.")

        return (resp.output_text or "").strip()


def strip_code_fence(response_text: str) -> str:
    """
    Remove a surrounding ```json ... ``` wrapper, if there is one
    """
    stripped = (response_text or "").strip()
    if not stripped.startswith("```"):
        return stripped

    stripped = _FENCE_OPEN.sub("", stripped, count=1)
    stripped = _FENCE_CLOSE.sub("", stripped, count=1)
    return stripped.strip()


def parse_json_response(response_text: str) -> Any:
    """
    Decode the raw response text

    Raises:
        ExtractionError: on an empty response or malformed JSON
    """
    json_str = strip_code_fence(response_text)
    if not json_str:
        raise ExtractionError("No response from AI.")

    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Could not decode AI response: {e}") from e


def extract(client: GenerationClient, parts: List[PromptPart], schema: Dict[str, Any],
            schema_name: str, result_model: Type[ResultModel]) -> ResultModel:
    """
    Run one extraction: a single outbound call, then decode and validate.
    No retry; any failure fails the whole phase.

    Args:
        client: Generation capability
        parts: Composed prompt parts
        schema: Declared output schema
        schema_name: Schema name for the request
        result_model: Pydantic model the decoded object must satisfy

    Returns:
        Validated result model
    """
    try:
        response_text = client.generate(parts, schema, schema_name)
    except SubsourceError:
        raise
    except Exception as e:
        raise ExtractionError(f"AI request failed: {e}") from e

    data = parse_json_response(response_text)

    try:
        return result_model.model_validate(data)
    except ValidationError as e:
        raise SchemaMismatchError(
            f"AI response does not match the {schema_name} schema: {e.error_count()} error(s)\n{e}"
        ) from e

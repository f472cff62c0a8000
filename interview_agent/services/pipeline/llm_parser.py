from typing import Any, Optional, Type, TypeVar
import json
import logging
import re

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_PATTERN = re.compile(r'```(?:json)?\s*', re.IGNORECASE)


def clean_llm_json_output(raw_text: str) -> str:
    """Cleans LLM output to extract valid JSON."""
    if not raw_text:
        return ""

    # Remove markdown code blocks
    text = _FENCE_PATTERN.sub('', raw_text)

    try:
        decoded_object = json.loads(text)
        return json.dumps(decoded_object)
    except json.JSONDecodeError:
        pass

    # Fallback: outermost object, then outermost array
    for open_char, close_char in (('{', '}'), ('[', ']')):
        start_idx = text.find(open_char)
        end_idx = text.rfind(close_char)
        if start_idx != -1 and end_idx > start_idx:
            extracted = text[start_idx:end_idx + 1]
            try:
                json.loads(extracted)
                return extracted
            except json.JSONDecodeError:
                continue

    return text.strip()


def parse_llm_response(
    result: Any,
    schema_class: Type[ModelT],
    list_key: Optional[str] = None,
) -> Optional[ModelT]:
    """
    Parse an LLM answer (text or already-decoded mapping) into ``schema_class``.

    Args:
        result: Raw text from the model, or tool-call arguments.
        schema_class: Pydantic model to validate against.
        list_key: When the model answers with a bare JSON array, wrap it
            under this key before validation (e.g. ``"questions"``).

    Returns:
        The validated model, or None if the answer does not fit the schema.
    """
    if result is None:
        return None

    try:
        if isinstance(result, (dict, list)):
            data = result
        else:
            data = json.loads(clean_llm_json_output(str(result)))

        if isinstance(data, list) and list_key:
            data = {list_key: data}
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        return schema_class.model_validate(data)

    except (json.JSONDecodeError, ValidationError, ValueError) as e:
        logger.warning(f"Could not parse {schema_class.__name__}: {e}")
        logger.debug(f"Raw output (first 500 chars): {str(result)[:500]}...")
        return None

"""Forwards invoice images to the multimodal completion API and reads back the fields."""

import json
import logging
from datetime import date
from typing import Any, Dict, Optional

import requests

from .config import Settings, get_settings
from .constants import (
    CREDITS_EXHAUSTED_MESSAGE,
    EXTRACTION_FAILED_MESSAGE,
    EXTRACTION_PROMPT,
    EXTRACTION_TOOL,
    EXTRACTION_TOOL_NAME,
    NO_IMAGE_MESSAGE,
    NOT_CONFIGURED_MESSAGE,
    PROCESSING_FAILED_MESSAGE,
    RATE_LIMIT_MESSAGE,
)
from .exceptions import ExtractionError

logger = logging.getLogger(__name__)

UPSTREAM_ERRORS = {
    429: RATE_LIMIT_MESSAGE,
    402: CREDITS_EXHAUSTED_MESSAGE,
}


def build_payload(image_data: str, model: str) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": EXTRACTION_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_data}},
                ],
            }
        ],
        "tools": [EXTRACTION_TOOL],
        "tool_choice": {"type": "function", "function": {"name": EXTRACTION_TOOL_NAME}},
    }


def parse_tool_arguments(body: Dict[str, Any]) -> Dict[str, Any]:
    """Pull the structured arguments out of the first tool call of a completion."""
    try:
        tool_call = body["choices"][0]["message"]["tool_calls"][0]
        arguments = tool_call["function"]["arguments"]
    except (KeyError, IndexError, TypeError):
        logger.error("No tool call in AI response")
        raise ExtractionError(500, EXTRACTION_FAILED_MESSAGE)
    if not arguments:
        logger.error("Empty tool call arguments in AI response")
        raise ExtractionError(500, EXTRACTION_FAILED_MESSAGE)

    if isinstance(arguments, dict):
        return arguments
    try:
        parsed = json.loads(arguments)
    except (TypeError, ValueError) as e:
        logger.error("Unparseable tool call arguments: %s", e)
        raise ExtractionError(500, EXTRACTION_FAILED_MESSAGE)
    if not isinstance(parsed, dict):
        raise ExtractionError(500, EXTRACTION_FAILED_MESSAGE)
    return parsed


class InvoiceExtractor:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return self.settings.ai_base_url.rstrip("/") + "/chat/completions"

    def extract(self, image_data: Optional[str]) -> Dict[str, Any]:
        """Extract invoice fields from a data-URL image.

        The extracted values are returned as the model produced them; numeric
        strings are not checked here. ``_year`` is filled with the current year
        when the model leaves it out.
        """
        if not image_data:
            raise ExtractionError(400, NO_IMAGE_MESSAGE)
        if not self.settings.has_ai_credentials:
            logger.error("AI_API_KEY not configured")
            raise ExtractionError(500, NOT_CONFIGURED_MESSAGE)

        logger.info("Processing invoice image with AI...")
        try:
            response = self.session.post(
                self.endpoint,
                headers={
                    "Authorization": f"Bearer {self.settings.ai_api_key}",
                    "Content-Type": "application/json",
                },
                json=build_payload(image_data, self.settings.ai_model),
                timeout=self.settings.ai_http_timeout,
            )
        except requests.RequestException as e:
            logger.error("AI request failed: %s", e)
            raise ExtractionError(500, str(e))

        if not response.ok:
            logger.error("AI API error: %s %s", response.status_code, response.text)
            message = UPSTREAM_ERRORS.get(response.status_code)
            if message:
                raise ExtractionError(response.status_code, message)
            raise ExtractionError(500, PROCESSING_FAILED_MESSAGE)

        try:
            body = response.json()
        except ValueError:
            logger.error("AI response was not JSON")
            raise ExtractionError(500, EXTRACTION_FAILED_MESSAGE)

        extracted = parse_tool_arguments(body)
        logger.debug("Extracted invoice data: %s", extracted)
        extracted.setdefault("_year", str(date.today().year))
        return extracted

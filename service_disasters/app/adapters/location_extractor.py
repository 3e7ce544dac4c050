"""
Location extraction from free text using Google Generative AI.
"""

import re
from typing import Any, Optional

import google.generativeai as genai

from shared.logging import get_logger


LOCATION_PROMPT_TEMPLATE = (
    "From the text, extract only the most specific, real-world location "
    "(e.g., city, well-known place). Example: from \"Heavy flooding in Varanasi\", "
    "extract \"Varanasi\". If no location is found, return \"null\". Text: \"{text}\""
)

NO_LOCATION_TOKEN = "null"

_SURROUNDING_QUOTES = re.compile(r'^"|"$')


def clean_location_reply(reply: str) -> Optional[str]:
    """Normalize a model reply; None means the model found no location."""
    name = _SURROUNDING_QUOTES.sub("", reply.strip())
    if not name or name.lower() == NO_LOCATION_TOKEN:
        return None
    return name


class LocationExtractor:
    """Asks a Gemini model for the most specific place named in a text.

    Transport and API errors are logged and re-raised unchanged; there is no
    retry and no fallback.
    """

    def __init__(self, api_key: Optional[str], model_name: str, *, model: Any = None):
        self.model_name = model_name
        self.logger = get_logger("disasters.location_extractor")
        self._api_key = api_key
        self._model = model

    @property
    def model(self):
        if self._model is None:
            genai.configure(api_key=self._api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    async def extract_location(self, text: str) -> Optional[str]:
        """Return the extracted place name, or None when there is none."""
        prompt = LOCATION_PROMPT_TEMPLATE.format(text=text)
        try:
            response = await self.model.generate_content_async(prompt)
            reply = response.text
        except Exception as exc:
            self.logger.error("Gemini API error", model=self.model_name, error=str(exc))
            raise

        location = clean_location_reply(reply)
        self.logger.debug("Location extracted", location=location)
        return location

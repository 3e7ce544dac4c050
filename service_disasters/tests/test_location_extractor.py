"""
Unit tests for Gemini-backed location extraction.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_disasters.app.adapters.location_extractor import (
    LOCATION_PROMPT_TEMPLATE,
    LocationExtractor,
    clean_location_reply,
)


def _model_replying(text):
    model = MagicMock()
    model.generate_content_async = AsyncMock(return_value=MagicMock(text=text))
    return model


@pytest.mark.parametrize("reply, expected", [
    ("Varanasi", "Varanasi"),
    ('"Assi Ghat"\n', "Assi Ghat"),
    ("null", None),
    ("NULL", None),
    ('"null"', None),
    ("   ", None),
])
def test_clean_location_reply(reply, expected):
    assert clean_location_reply(reply) == expected


@pytest.mark.asyncio
async def test_extract_location_sends_prompt_and_strips_quotes():
    model = _model_replying('"Varanasi"')
    extractor = LocationExtractor("key", "gemini-1.5-flash-latest", model=model)

    result = await extractor.extract_location("Heavy flooding in Varanasi")

    assert result == "Varanasi"
    model.generate_content_async.assert_awaited_once_with(
        LOCATION_PROMPT_TEMPLATE.format(text="Heavy flooding in Varanasi")
    )


@pytest.mark.asyncio
async def test_extract_location_returns_none_for_null_token():
    extractor = LocationExtractor("key", "gemini-1.5-flash-latest", model=_model_replying("Null"))

    assert await extractor.extract_location("Stay safe everyone") is None


@pytest.mark.asyncio
async def test_extract_location_propagates_api_errors():
    model = MagicMock()
    error = RuntimeError("quota exceeded")
    model.generate_content_async = AsyncMock(side_effect=error)
    extractor = LocationExtractor("key", "gemini-1.5-flash-latest", model=model)

    with pytest.raises(RuntimeError) as exc_info:
        await extractor.extract_location("Flooding in Patna")

    assert exc_info.value is error

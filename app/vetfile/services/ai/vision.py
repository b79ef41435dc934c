"""
Document transcription using OpenAI vision for images and scanned PDFs.
"""

import base64
import logging
from typing import Any

import openai

from .exceptions import AIServiceError, ProviderTimeoutError
from .prompts import TRANSCRIPTION_SYSTEM_PROMPT, TRANSCRIPTION_USER_PROMPT

logger = logging.getLogger(__name__)


def _to_data_url(image_bytes: bytes, media_type: str) -> str:
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{media_type};base64,{encoded}"


async def transcribe_image(
    image_bytes: bytes,
    media_type: str,
    client: Any,  # AsyncOpenAI client
    model: str = "gpt-4o",
) -> str:
    """
    Extract the text content of one document image.

    Raises:
        ProviderTimeoutError: If the request timed out.
        AIServiceError: If the request fails or returns no text.
    """
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": TRANSCRIPTION_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": TRANSCRIPTION_USER_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": _to_data_url(image_bytes, media_type)},
                        },
                    ],
                },
            ],
            max_tokens=4000,
            temperature=0.1,
        )
    except openai.APITimeoutError as e:
        raise ProviderTimeoutError(f"Vision request timed out: {e}") from e
    except openai.APIError as e:
        raise AIServiceError(f"Vision API failed: {e}") from e

    if not response.choices or not response.choices[0].message.content:
        raise AIServiceError("Vision API returned no text")

    text = response.choices[0].message.content
    logger.info("Vision API extracted %d characters", len(text))
    return text

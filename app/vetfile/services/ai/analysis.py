"""
Claims analysis: send combined document text to OpenAI and parse the JSON reply.
"""

import json
import logging
from typing import Any

import openai
from pydantic import ValidationError as PydanticValidationError

from ...models import ClaimsAnalysis
from .exceptions import AIServiceError, ProviderTimeoutError
from .prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt

logger = logging.getLogger(__name__)


def parse_analysis_response(content: str | None) -> ClaimsAnalysis:
    """
    Parse the model's JSON reply into a ClaimsAnalysis.

    Raises:
        AIServiceError: If the reply is empty, not JSON, or not an analysis object.
    """
    if not content:
        raise AIServiceError("Empty response from OpenAI")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse analysis response: %s", content[:500])
        raise AIServiceError(f"Invalid JSON in analysis response: {e}") from e

    if not isinstance(data, dict):
        raise AIServiceError("Analysis response is not a JSON object")

    try:
        return ClaimsAnalysis.model_validate(data)
    except PydanticValidationError as e:
        raise AIServiceError(f"Analysis response does not match schema: {e}") from e


async def analyze_documents(
    document_text: str,
    client: Any,  # AsyncOpenAI client
    model: str = "gpt-4o",
) -> ClaimsAnalysis:
    """
    Run the claims analysis prompt over the combined document text.

    Args:
        document_text: Text of every document, each under its own header.
        client: AsyncOpenAI client.
        model: Chat model to use.

    Returns:
        The parsed ClaimsAnalysis.

    Raises:
        ProviderTimeoutError: If the request timed out.
        AIServiceError: For any other provider or parsing failure.
    """
    logger.info("Requesting claims analysis for %d characters of text", len(document_text))

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                {"role": "user", "content": build_analysis_prompt(document_text)},
            ],
            temperature=0.2,
            max_tokens=4000,
            response_format={"type": "json_object"},
        )
    except openai.APITimeoutError as e:
        raise ProviderTimeoutError(f"OpenAI request timed out: {e}") from e
    except openai.APIError as e:
        raise AIServiceError(f"OpenAI API error: {e}") from e
    except Exception as e:
        logger.exception("Claims analysis request failed")
        raise AIServiceError(f"Claims analysis failed: {e}") from e

    if not response.choices:
        raise AIServiceError("OpenAI returned no choices")

    analysis = parse_analysis_response(response.choices[0].message.content)
    logger.info("Analysis identified %d potential claim(s)", len(analysis.potential_claims))
    return analysis

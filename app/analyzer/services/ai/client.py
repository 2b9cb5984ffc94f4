"""
Upstream chat-completion call.

Sends one user message to the Groq OpenAI-compatible endpoint and returns
the raw text of the reply. Quota exhaustion is reported separately from
other provider failures so the route can answer 429 instead of 500.
"""

import logging
from typing import Any

import openai

from .exceptions import AIServiceError, UpstreamQuotaError

logger = logging.getLogger(__name__)


async def request_completion(
    prompt: str,
    *,
    client: Any,  # AsyncOpenAI client
    model: str,
    temperature: float = 0.3,
    max_tokens: int = 8192,
) -> str:
    """
    Send ``prompt`` as a single user message and return the reply text.

    Args:
        prompt: Fully built instruction, document text included.
        client: AsyncOpenAI client instance.
        model: Model name to use.
        temperature: Sampling temperature.
        max_tokens: Output-token ceiling.

    Returns:
        The raw textual reply of the model.

    Raises:
        UpstreamQuotaError: If the provider answered with a rate-limit error.
        AIServiceError: On any other provider failure or an empty reply.
    """
    logger.info("Calling %s (%d prompt characters)", model, len(prompt))

    try:
        completion = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except openai.RateLimitError as e:
        logger.warning("Upstream quota exceeded: %s", e)
        raise UpstreamQuotaError() from e
    except openai.APIError as e:
        logger.error("Upstream request failed: %s", e)
        raise AIServiceError(str(e)) from e

    content = ""
    if completion.choices:
        content = completion.choices[0].message.content or ""

    if not content:
        raise AIServiceError("Réponse vide de GROQ")

    logger.debug("Upstream reply preview: %s...", content[:500])
    return content

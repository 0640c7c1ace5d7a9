"""Anthropic Messages API access for analysis and drafting, plus reply parsing."""

import json
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# USD per million tokens (input, output), matched on the model name
MODEL_PRICES = {
    "haiku": (0.80, 4.0),
    "sonnet": (3.0, 15.0),
    "opus": (15.0, 75.0),
}
DEFAULT_PRICE = MODEL_PRICES["sonnet"]

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


@dataclass
class ClaudeResponse:
    text: str
    input_tokens: int
    output_tokens: int
    cost_usd: float
    model: str
    stop_reason: str | None = None


def calculate_cost(input_tokens: int, output_tokens: int, model: str = "") -> float:
    """Estimated USD cost of one call, priced by model family."""
    family = next((name for name in MODEL_PRICES if name in model), None)
    in_price, out_price = MODEL_PRICES[family] if family else DEFAULT_PRICE
    return round((input_tokens * in_price + output_tokens * out_price) / 1_000_000, 6)


def call_claude(
    system_prompt: str,
    user_message: str,
    settings,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> ClaudeResponse:
    """Send one single-turn request and return the concatenated text reply.

    ``max_tokens`` and ``temperature`` override the configured defaults for
    this call only.

    Raises:
        ValueError: If no API key is configured.
        anthropic.APIError: On API failures left after the client's retries.
    """
    if not settings.anthropic_api_key:
        raise ValueError("Anthropic API key not configured. Set ANTHROPIC_API_KEY.")

    from anthropic import Anthropic

    client = Anthropic(api_key=settings.anthropic_api_key, max_retries=settings.max_retries)
    message = client.messages.create(
        model=settings.claude_model,
        system=system_prompt,
        messages=[{"role": "user", "content": user_message}],
        max_tokens=max_tokens or settings.claude_max_tokens,
        temperature=settings.claude_temperature if temperature is None else temperature,
    )

    text = "".join(block.text for block in message.content if block.type == "text")
    usage = message.usage
    stop_reason = getattr(message, "stop_reason", None)
    response = ClaudeResponse(
        text=text,
        input_tokens=usage.input_tokens,
        output_tokens=usage.output_tokens,
        cost_usd=calculate_cost(usage.input_tokens, usage.output_tokens, settings.claude_model),
        model=settings.claude_model,
        stop_reason=stop_reason,
    )

    logger.info(
        "Claude %s: %d in / %d out tokens, ~$%.4f",
        response.model, response.input_tokens, response.output_tokens, response.cost_usd,
    )
    if stop_reason == "max_tokens":
        logger.warning(
            "Claude reply hit the %d token limit and may be cut off",
            max_tokens or settings.claude_max_tokens,
        )
    return response


def extract_json(text: str) -> dict:
    """Parse the JSON object wrapped in a model reply.

    Replies may surround the object with prose or a ```json fence; the span
    from the first '{' to the last '}' is parsed.

    Raises:
        ValueError: If the reply holds no object or it does not parse.
    """
    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        raise ValueError("No JSON found in model response")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in model response: {e}") from e

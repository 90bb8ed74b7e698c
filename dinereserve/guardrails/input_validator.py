"""Input validation for chat messages and booking parties."""

import logging
import re

from agents import (
    Agent,
    GuardrailFunctionOutput,
    RunContextWrapper,
    TResponseInputItem,
    input_guardrail,
)

logger = logging.getLogger(__name__)

# Patterns that indicate potential abuse or inappropriate content
BLOCKED_PATTERNS = [
    r"<script",
    r"javascript:",
    r"onclick",
    r"onerror",
    r"eval\(",
    r"exec\(",
]

MAX_INPUT_LENGTH = 1000
MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 50


def latest_user_message(input: str | list[TResponseInputItem]) -> str:
    """Extract the last user message from a string or message list.

    Earlier messages were already validated on previous turns.
    """
    if not isinstance(input, list):
        return str(input)

    for msg in reversed(input):
        if isinstance(msg, dict) and msg.get("role") == "user":
            return str(msg.get("content", ""))
        if hasattr(msg, "role") and msg.role == "user":
            return str(msg.content)
    return ""


class InputValidator:
    """Plain validation checks shared by the HTTP layer and the agent guardrail."""

    @staticmethod
    def validate_user_input(text: str) -> tuple[bool, str | None]:
        """Check a chat message for emptiness, length and script injection.

        Returns:
            (is_valid, error message or None)
        """
        if not text or not text.strip():
            return False, "Input cannot be empty. Please type a message."

        if len(text) > MAX_INPUT_LENGTH:
            return (
                False,
                f"Input too long (max {MAX_INPUT_LENGTH} characters). "
                "Please shorten your message.",
            )

        lowered = text.lower()
        for pattern in BLOCKED_PATTERNS:
            if re.search(pattern, lowered):
                logger.warning(f"Suspicious pattern detected ({pattern})")
                return (
                    False,
                    "Input contains suspicious content. Please rephrase your message.",
                )

        return True, None

    @staticmethod
    def validate_party_size(party_size: int) -> tuple[bool, str | None]:
        if party_size < MIN_PARTY_SIZE or party_size > MAX_PARTY_SIZE:
            return (
                False,
                f"Party size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE} people.",
            )
        return True, None


@input_guardrail
async def input_validation_guardrail(
    context: RunContextWrapper[None],
    agent: Agent,
    input: str | list[TResponseInputItem],
) -> GuardrailFunctionOutput:
    """Block empty, oversized or script-bearing messages before the model sees them.

    Args:
        context: The guardrail context
        agent: The agent being run
        input: User input (can be string or list of messages)

    Returns:
        GuardrailFunctionOutput indicating if validation passed
    """
    is_valid, error = InputValidator.validate_user_input(latest_user_message(input))
    if not is_valid:
        logger.warning(f"Guardrail triggered: {error}")
        return GuardrailFunctionOutput(output_info=error, tripwire_triggered=True)

    return GuardrailFunctionOutput(
        output_info="Input validation passed",
        tripwire_triggered=False,
    )

"""Guardrails for the DineReserve chat assistant."""

from dinereserve.guardrails.input_validator import (
    InputValidator,
    input_validation_guardrail,
    latest_user_message,
)

__all__ = ["InputValidator", "input_validation_guardrail", "latest_user_message"]

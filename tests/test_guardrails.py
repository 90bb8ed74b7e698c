"""Tests for guardrail modules."""

import pytest

from dinereserve.guardrails import (
    InputValidator,
    input_validation_guardrail,
    latest_user_message,
)


class TestInputValidator:
    """Tests for the InputValidator."""

    def test_validate_empty_input(self):
        """Test validation of empty input."""
        is_valid, error = InputValidator.validate_user_input("   ")
        assert is_valid is False
        assert "empty" in error.lower()

    def test_validate_too_long_input(self):
        """Test validation of excessively long input."""
        is_valid, error = InputValidator.validate_user_input("x" * 1001)
        assert is_valid is False
        assert "too long" in error.lower()

    def test_validate_suspicious_patterns(self):
        """Test detection of suspicious patterns."""
        for user_input in [
            "<script>alert('xss')</script>",
            "javascript:void(0)",
            "onclick='malicious()'",
        ]:
            is_valid, error = InputValidator.validate_user_input(user_input)
            assert is_valid is False
            assert "suspicious" in error.lower()

    def test_validate_normal_input(self):
        is_valid, error = InputValidator.validate_user_input(
            "Table for 4 in Berkeley tomorrow at 7pm"
        )
        assert is_valid is True
        assert error is None

    def test_validate_party_size(self):
        """Test party size bounds."""
        assert InputValidator.validate_party_size(1) == (True, None)
        assert InputValidator.validate_party_size(50) == (True, None)
        assert InputValidator.validate_party_size(0)[0] is False
        assert InputValidator.validate_party_size(51)[0] is False


class TestLatestUserMessage:
    def test_string_input(self):
        assert latest_user_message("hello") == "hello"

    def test_message_list(self):
        """Test that the last user turn is picked."""
        messages = [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "reply"},
            {"role": "user", "content": "second"},
            {"role": "assistant", "content": "reply again"},
        ]
        assert latest_user_message(messages) == "second"

    def test_no_user_message(self):
        assert latest_user_message([{"role": "assistant", "content": "hi"}]) == ""


class TestInputValidationGuardrail:
    """Tests for the agent-facing guardrail."""

    @pytest.mark.asyncio
    async def test_blocks_script(self):
        result = await input_validation_guardrail.guardrail_function(
            None, None, [{"role": "user", "content": "<script>x</script>"}]
        )
        assert result.tripwire_triggered is True

    @pytest.mark.asyncio
    async def test_allows_question(self):
        result = await input_validation_guardrail.guardrail_function(
            None, None, "Do you take walk-ins?"
        )
        assert result.tripwire_triggered is False

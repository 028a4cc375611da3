# ============================================
# Unit Tests for Model Fallback
# ============================================
"""
Tests for BaseLLMClient: ordered fallback, error classification and deadline.
"""

import threading

import pytest

from clinical_documentation.clients import llm_client
from clinical_documentation.core.enums import AttemptOutcome
from clinical_documentation.core.exceptions import (
    ConfigurationError,
    GenerationExhaustedError,
    GenerationTimeoutError,
    ProviderFatalError,
    ProviderUnavailableError,
    ValidationError,
)
from tests.conftest import FakeClock, ScriptedClient, StatusError


SYSTEM = "system prompt"
USER = "user prompt"


class TestFallbackOrder:
    """Tests for first-success model iteration."""

    def test_first_model_success_stops_iteration(self, scripted_client):
        text = scripted_client.complete(SYSTEM, USER, 2000)

        assert text == "Generated document text"
        assert scripted_client.called_models == ["model-a"]

    def test_third_model_answers_after_two_quota_errors(self):
        """Two quota failures fall through; the fourth model is never tried."""
        client = ScriptedClient(
            {
                "model-a": StatusError("quota exceeded", 429),
                "model-b": StatusError("Resource has been exhausted (e.g. check quota).", 429),
                "model-c": "third model text",
                "model-d": "never returned",
            }
        )

        assert client.complete(SYSTEM, USER, 2000) == "third model text"
        assert client.called_models == ["model-a", "model-b", "model-c"]

    def test_model_not_found_falls_back(self):
        client = ScriptedClient({"model-a": StatusError("model not found", 404), "model-b": "ok"})

        assert client.complete(SYSTEM, USER, 2000) == "ok"
        assert [a.outcome for a in client.last_attempts] == [
            AttemptOutcome.RETRYABLE,
            AttemptOutcome.SUCCESS,
        ]

    def test_same_arguments_for_every_attempt(self):
        client = ScriptedClient({"model-a": StatusError("rate limited", 429), "model-b": "ok"})

        client.complete(SYSTEM, USER, 2500, response_label="Case Sheet:")

        for call in client.calls:
            assert call["system_prompt"] == SYSTEM
            assert call["user_prompt"] == USER
            assert call["max_output_tokens"] == 2500
            assert call["response_label"] == "Case Sheet:"


class TestFatalErrors:
    """Tests for errors that abort the chain."""

    def test_authentication_error_aborts_immediately(self):
        """A 401 on the first model never reaches the second."""
        auth_error = StatusError("Invalid API key", 401)
        client = ScriptedClient({"model-a": auth_error, "model-b": "unreachable"})

        with pytest.raises(ProviderFatalError) as exc_info:
            client.complete(SYSTEM, USER, 2000)

        assert client.called_models == ["model-a"]
        assert exc_info.value.original_error is auth_error
        assert exc_info.value.model_name == "model-a"

    def test_status_code_wins_over_message(self):
        """A 400 whose message mentions quota is still fatal."""
        client = ScriptedClient(
            {"model-a": StatusError("bad request: quota field invalid", 400), "model-b": "ok"}
        )

        with pytest.raises(ProviderFatalError):
            client.complete(SYSTEM, USER, 2000)
        assert client.called_models == ["model-a"]

    def test_message_markers_used_without_status_code(self):
        client = ScriptedClient({"model-a": RuntimeError("429 Too Many Requests"), "model-b": "ok"})

        assert client.complete(SYSTEM, USER, 2000) == "ok"

    def test_unclassifiable_error_is_fatal(self):
        client = ScriptedClient({"model-a": RuntimeError("connection reset by peer"), "model-b": "ok"})

        with pytest.raises(ProviderFatalError):
            client.complete(SYSTEM, USER, 2000)
        assert client.called_models == ["model-a"]

    def test_empty_response_is_fatal(self):
        client = ScriptedClient({"model-a": "   ", "model-b": "ok"})

        with pytest.raises(ProviderFatalError, match="Empty response"):
            client.complete(SYSTEM, USER, 2000)
        assert client.called_models == ["model-a"]

    def test_timeout_error_is_fatal(self):
        client = ScriptedClient({"model-a": TimeoutError("read timed out"), "model-b": "ok"})

        with pytest.raises(GenerationTimeoutError):
            client.complete(SYSTEM, USER, 2000, timeout=30)
        assert client.called_models == ["model-a"]


class TestExhaustion:
    """Tests for a list where every model is unavailable."""

    def test_all_retryable_raises_exhausted(self):
        last = StatusError("quota exceeded", 429)
        client = ScriptedClient(
            {
                "model-a": StatusError("not found", 404),
                "model-b": StatusError("quota exceeded", 429),
                "model-c": StatusError("not found", 404),
                "model-d": last,
            }
        )

        with pytest.raises(GenerationExhaustedError) as exc_info:
            client.complete(SYSTEM, USER, 2000)

        error = exc_info.value
        assert [a.model_name for a in error.attempts] == ["model-a", "model-b", "model-c", "model-d"]
        assert isinstance(error.last_reason, ProviderUnavailableError)
        assert error.last_reason.original_error is last
        assert error.last_reason.model_name == "model-d"


class TestDeadline:
    """Tests for the caller-supplied timeout across the chain."""

    def test_zero_timeout_makes_no_call(self, scripted_client):
        with pytest.raises(GenerationTimeoutError):
            scripted_client.complete(SYSTEM, USER, 2000, timeout=0)
        assert scripted_client.calls == []

    def test_remaining_budget_passed_to_each_call(self, monkeypatch):
        clock = FakeClock()
        monkeypatch.setattr(llm_client.time, "monotonic", clock)
        client = ScriptedClient(
            {"model-a": StatusError("quota", 429), "model-b": "ok"},
            on_call=lambda model: clock.advance(4),
        )

        client.complete(SYSTEM, USER, 2000, timeout=10)

        assert [call["timeout"] for call in client.calls] == [10, 6]

    def test_deadline_expiry_stops_fallback(self, monkeypatch):
        clock = FakeClock()
        monkeypatch.setattr(llm_client.time, "monotonic", clock)
        client = ScriptedClient(
            {"model-a": StatusError("quota", 429), "model-b": "ok"},
            on_call=lambda model: clock.advance(11),
        )

        with pytest.raises(GenerationTimeoutError) as exc_info:
            client.complete(SYSTEM, USER, 2000, timeout=10)

        assert client.called_models == ["model-a"]
        assert exc_info.value.timeout_seconds == 10


class TestValidationAndMetrics:
    def test_non_positive_token_ceiling(self, scripted_client):
        with pytest.raises(ValidationError):
            scripted_client.complete(SYSTEM, USER, 0)
        assert scripted_client.calls == []

    def test_empty_model_list(self):
        with pytest.raises(ConfigurationError):
            ScriptedClient(model_names=())

    def test_counters(self):
        client = ScriptedClient({"model-a": StatusError("quota", 429), "model-b": "ok"})

        client.complete(SYSTEM, USER, 2000)

        assert client.total_calls == 1
        assert client.failed_calls == 1
        assert client.success_rate == 50.0

    @pytest.mark.slow
    def test_counters_under_concurrent_calls(self):
        """Shared-client counters lose no updates and last_attempts is one whole call."""
        client = ScriptedClient({"model-a": StatusError("quota", 429), "model-b": "ok"})
        barrier = threading.Barrier(16)

        def worker():
            barrier.wait()
            for _ in range(25):
                client.complete(SYSTEM, USER, 2000)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert client.total_calls == 400
        assert client.failed_calls == 400
        assert [a.model_name for a in client.last_attempts] == ["model-a", "model-b"]

# ============================================
# Pytest Configuration and Fixtures
# ============================================
"""
Shared fixtures and test doubles for all tests.

No test talks to a real provider: clients are exercised through
ScriptedClient, which overrides the single-call hook of BaseLLMClient.
"""

import pytest

from clinical_documentation.clients.llm_client import BaseLLMClient
from clinical_documentation.core.models import PatientInfo, TemplateContext


PROVIDER_ENV_VARS = (
    "GROQ_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "LLM_PROVIDER",
    "GROQ_MODELS",
    "GEMINI_MODELS",
    "GENERATION_TIMEOUT",
    "RATE_LIMIT_SWEEP_INTERVAL",
    "LOG_LEVEL",
    "LOG_FILE",
)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow running",
    )


# ============================================
# Test Doubles
# ============================================


class StatusError(Exception):
    """Provider-agnostic error carrying an HTTP-like status code."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ScriptedClient(BaseLLMClient):
    """
    Provider client whose per-model responses are scripted.

    responses maps model name → text to return, or an exception to raise.
    Models missing from the mapping return an empty string.
    """

    def __init__(self, responses=None, model_names=("model-a", "model-b", "model-c", "model-d"),
                 provider="scripted", on_call=None):
        self._provider = provider
        super().__init__(api_key="test-key", model_names=model_names)
        self._responses = dict(responses or {})
        self._on_call = on_call
        self.calls = []

    def _call_model(self, model, system_prompt, user_prompt, max_output_tokens, response_label, timeout):
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_output_tokens": max_output_tokens,
                "response_label": response_label,
                "timeout": timeout,
            }
        )
        if self._on_call is not None:
            self._on_call(model)

        result = self._responses.get(model, "")
        if isinstance(result, BaseException):
            raise result
        return result

    @property
    def provider_name(self):
        return self._provider

    @property
    def called_models(self):
        return [call["model"] for call in self.calls]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================
# Fixtures
# ============================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every setting the configuration reads from the environment."""
    for name in PROVIDER_ENV_VARS:
        # set first so teardown also removes values a .env file adds
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def empty_env_file(tmp_path):
    """An empty .env file, so configuration never picks up a developer's own."""
    path = tmp_path / ".env"
    path.write_text("")
    return str(path)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def patient():
    """Return a sample synthetic patient."""
    return PatientInfo(name="Jane Doe", age=54, gender="female", medical_record_number="MRN-0042")


@pytest.fixture
def sample_transcript():
    return (
        "Doctor: What brings you in today?\n"
        "Patient: Chest tightness on exertion for two weeks.\n"
        "Doctor: ECG shows ST depression in V4-V6. Starting aspirin and atorvastatin."
    )


@pytest.fixture
def template_context():
    return TemplateContext(
        patient_name="Jane Doe",
        consultation_date="2024-03-05",
        patient_age=54,
        patient_gender="female",
        medical_record_number="MRN-0042",
        doctor_name="Dr. Rao",
    )


@pytest.fixture
def scripted_client():
    """Client whose first model answers immediately."""
    return ScriptedClient({"model-a": "Generated document text"})

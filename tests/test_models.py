import json

import pytest

from conftest import SAMPLE_REPORT
from receipt_api.config import MAX_FILE_SIZE, Settings
from receipt_api.error_handlers import ERROR_RESPONSES, error_body
from receipt_api.errors import (
    ConfigError,
    ErrorKind,
    ExtractionError,
    ParseError,
    ProviderError,
    UploadValidationError,
)
from receipt_api.receipt.base import ExpenseReport


def test_expense_report_json_round_trip():
    report = ExpenseReport.model_validate(SAMPLE_REPORT)
    assert ExpenseReport.model_validate_json(report.model_dump_json()) == report


def test_expense_report_keeps_unknown_fields():
    report = ExpenseReport.model_validate({**SAMPLE_REPORT, "tip": 20000})
    assert json.loads(report.model_dump_json())["tip"] == 20000


def test_expense_report_all_fields_optional():
    report = ExpenseReport.model_validate({})
    assert report.items == []
    assert report.totals is None


def test_every_kind_has_a_response():
    assert set(ERROR_RESPONSES) == set(ErrorKind)


@pytest.mark.parametrize(
    "exc, status",
    [
        (ConfigError("Google API key not configured"), 500),
        (UploadValidationError("Missing file", "no file"), 400),
        (ExtractionError("No JSON found in model response"), 422),
        (ParseError("Invalid JSON in model response: Expecting value"), 422),
        (ProviderError("bad key", ErrorKind.AUTH), 401),
        (ProviderError("slow down", ErrorKind.QUOTA), 429),
        (ProviderError("connection reset"), 500),
    ],
)
def test_error_status_by_kind(exc, status):
    assert error_body(exc)[0] == status


def test_config_and_validation_messages_reach_the_client():
    _, body = error_body(ConfigError("Google API key not configured"))
    assert body.message == "Google API key not configured"

    _, body = error_body(UploadValidationError("Invalid file type", "Please upload a valid image file"))
    assert body.error == "Invalid file type"
    assert body.message == "Please upload a valid image file"


def test_provider_details_only_in_development():
    exc = ProviderError("connection reset by peer")
    assert error_body(exc, development=False)[1].details is None
    assert error_body(exc, development=True)[1].details == "connection reset by peer"
    # parse failures never echo model output
    assert error_body(ParseError("Invalid JSON"), development=True)[1].details is None


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("RECEIPT_PROVIDER", " OpenAI ")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("GOOGLE_API_KEY", "   ")
    monkeypatch.setenv("APP_ENV", "Development")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com")
    monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)

    settings = Settings.from_env()

    assert settings.receipt_provider == "openai"
    assert settings.openai_api_key == "sk-test"
    assert settings.google_api_key is None
    assert settings.is_development
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.max_upload_bytes == MAX_FILE_SIZE

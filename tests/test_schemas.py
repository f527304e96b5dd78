"""
Tests for result schemas and engine configuration
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from siteprobe.config import DEFAULT_TIMEOUT_MS, EngineConfig, EngineSettings
from siteprobe.schemas import (
    HttpCheckResult,
    PingResult,
    SiteMonitorResult,
    TlsInfo,
)


# Schema Tests

def test_ping_result_failure_shape():
    result = PingResult.failure("Host not responding to ping")

    assert result.is_up is False
    assert result.status == 0
    assert result.response_time_ms == 0
    assert result.error == "Host not responding to ping"


def test_http_check_result_failure_shape():
    result = HttpCheckResult.failure("Request timed out")

    assert result.is_up is False
    assert result.status_code == 0
    assert result.response_time_ms == 0
    assert result.headers is None
    assert result.tls_info is None
    assert result.error == "Request timed out"


def test_response_time_must_not_be_negative():
    with pytest.raises(ValidationError):
        PingResult(is_up=True, status=200, response_time_ms=-1)


def test_tls_info_expiry_flag():
    now = datetime.now(timezone.utc)
    expired = TlsInfo(valid_from=now - timedelta(days=90), valid_to=now - timedelta(days=1),
                      issuer="R3", days_until_expiry=-1)
    valid = TlsInfo(valid_from=now, valid_to=now + timedelta(days=1),
                    issuer="R3", days_until_expiry=0)

    assert expired.is_expired is True
    assert valid.is_expired is False


def test_site_monitor_result_wire_names():
    now = datetime.now(timezone.utc)
    tls_info = TlsInfo(valid_from=now, valid_to=now + timedelta(days=10),
                       issuer="R3", days_until_expiry=10)
    result = SiteMonitorResult(
        url="https://example.com",
        checked_at=now,
        worker_id="eu-1",
        is_up=True,
        ping_check=PingResult(is_up=True, status=200, response_time_ms=1.5),
        get_check=HttpCheckResult(is_up=True, status_code=200, response_time_ms=20,
                                  headers={"server": "nginx"}, tls_info=tls_info),
        head_check=HttpCheckResult.failure("Request timed out"),
    )

    payload = result.model_dump(mode="json", by_alias=True)

    assert payload["isUp"] is True
    assert payload["workerId"] == "eu-1"
    assert "checkedAt" in payload
    assert payload["pingCheck"]["responseTimeMs"] == 1.5
    assert payload["getCheck"]["statusCode"] == 200
    assert payload["getCheck"]["tlsInfo"]["daysUntilExpiry"] == 10
    assert payload["getCheck"]["tlsInfo"]["validTo"]
    assert payload["headCheck"]["error"] == "Request timed out"


def test_models_accept_wire_names():
    result = HttpCheckResult.model_validate({"isUp": False, "statusCode": 404, "responseTimeMs": 12})

    assert result.status_code == 404
    assert result.response_time_ms == 12


# Configuration Tests

def test_engine_config_defaults():
    config = EngineConfig(worker_id="worker-1")

    assert config.timeout_ms == DEFAULT_TIMEOUT_MS == 30000
    assert config.timeout_seconds == 30.0
    assert config.max_concurrency is None
    assert config.ping_privileged is False
    assert config.user_agent.startswith("siteprobe/")


def test_engine_config_validation():
    assert EngineConfig(worker_id=" w ", timeout_ms=1500).worker_id == "w"

    with pytest.raises(ValidationError):
        EngineConfig(worker_id="   ")

    with pytest.raises(ValidationError):
        EngineConfig(worker_id="w", timeout_ms=0)

    with pytest.raises(ValidationError):
        EngineConfig(worker_id="w", timeout_ms=10_000_000)

    with pytest.raises(ValidationError):
        EngineConfig(worker_id="w", max_concurrency=0)


def test_engine_config_is_immutable():
    config = EngineConfig(worker_id="w")

    with pytest.raises(ValidationError):
        config.timeout_ms = 10


def test_engine_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SITEPROBE_WORKER_ID", "us-east")
    monkeypatch.setenv("SITEPROBE_TIMEOUT_MS", "5000")
    monkeypatch.setenv("SITEPROBE_MAX_CONCURRENCY", "10")

    settings = EngineSettings()
    config = settings.to_engine_config()

    assert config.worker_id == "us-east"
    assert config.timeout_ms == 5000
    assert config.max_concurrency == 10


def test_engine_settings_overrides(monkeypatch):
    monkeypatch.setenv("SITEPROBE_WORKER_ID", "us-east")

    config = EngineSettings().to_engine_config(worker_id=None, timeout_ms=1000)

    assert config.worker_id == "us-east"
    assert config.timeout_ms == 1000


def test_engine_settings_default_worker_id(monkeypatch):
    monkeypatch.delenv("SITEPROBE_WORKER_ID", raising=False)

    assert EngineSettings().worker_id

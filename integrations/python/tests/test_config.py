import pytest

from voicehook_core import RequestValidator, Settings


def test_from_env_reads_variables():
    settings = Settings.from_env(
        {
            "VOICEHOOK_AUTH_TOKEN": "s3cr3t-value",
            "VOICEHOOK_PUBLIC_ORIGIN": "https://hooks.example.com",
            "VOICEHOOK_DOMAIN_SUFFIX": "example.com",
        }
    )

    assert settings.auth_token == "s3cr3t-value"
    assert settings.public_origin == "https://hooks.example.com"
    assert settings.default_region == "US"
    assert settings.domain_suffix == "example.com"
    assert settings.routing_marker == "sip"
    assert "s3cr3t-value" not in repr(settings)
    assert "auth_token=<redacted>" in repr(settings)


def test_from_env_defaults_to_process_environment(monkeypatch):
    monkeypatch.setenv("VOICEHOOK_AUTH_TOKEN", "from-process")
    assert Settings.from_env().auth_token == "from-process"


def test_build_validator():
    settings = Settings(auth_token="tok", public_origin="https://hooks.example.com", domain_suffix="example.com")
    validator = settings.build_validator()

    assert isinstance(validator, RequestValidator)
    assert validator.origin == "https://hooks.example.com"
    assert validator.endpoint_parser.domain_suffix == "example.com"


@pytest.mark.parametrize("settings", [Settings(public_origin="https://h"), Settings(auth_token="tok")])
def test_build_validator_requires_token_and_origin(settings):
    with pytest.raises(ValueError, match="not configured"):
        settings.build_validator()

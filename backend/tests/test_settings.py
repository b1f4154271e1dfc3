from __future__ import annotations

from rubricscore.settings import Settings


def test_model_configuration_reads_unprefixed_names(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", " sk-test ")
    monkeypatch.setenv("STRUCTURE_MODEL", "gpt-structure")
    monkeypatch.setenv("EVALUATION_MODEL", "gpt-evaluate")

    settings = Settings()

    assert settings.openai_api_key == "sk-test"
    assert settings.openai_configured is True
    assert settings.structure_model == "gpt-structure"
    assert settings.evaluation_model == "gpt-evaluate"


def test_prefixed_names_take_precedence(monkeypatch) -> None:
    monkeypatch.setenv("RUBRICSCORE_STRUCTURE_MODEL", "prefixed")
    monkeypatch.setenv("STRUCTURE_MODEL", "plain")

    assert Settings().structure_model == "prefixed"


def test_upload_limit_defaults_to_five_megabytes(monkeypatch) -> None:
    monkeypatch.delenv("RUBRICSCORE_MAX_UPLOAD_MB", raising=False)

    settings = Settings()

    assert settings.max_upload_bytes == 5 * 1024 * 1024


def test_mock_flag_accepts_truthy_values(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_MOCK", "yes")
    assert Settings().openai_mock is True

    monkeypatch.setenv("OPENAI_MOCK", "off")
    assert Settings().openai_mock is False


def test_cors_allow_origins_defaults_to_wildcard(monkeypatch) -> None:
    monkeypatch.delenv("RUBRICSCORE_CORS_ALLOW_ORIGINS", raising=False)
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    settings = Settings()

    assert settings.cors_origin_list == ["*"]


def test_cors_allow_origins_from_env(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://frontend-a.example.com, https://frontend-b.example.com")

    settings = Settings()

    assert settings.cors_origin_list == [
        "https://frontend-a.example.com",
        "https://frontend-b.example.com",
    ]

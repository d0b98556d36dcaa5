import pytest

from ai_cofounder.dependencies import Settings
from ai_cofounder.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_SERVICE_KEY", "SUPABASE_SERVICE_ROLE_KEY",
                 "OPENAI_API_KEY", "QDRANT_URL", "AUTH_STRATEGY", "DEMO_AUTH_TOKEN", "DEMO_USER_ID",
                 "CHAT_INDEX_CONVERSATIONS", "CORS_ORIGINS", "CHAT_MAX_TOKENS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()
    assert settings.auth_strategy == "supabase"
    assert settings.openai_chat_model == "gpt-3.5-turbo"
    assert settings.chat_max_tokens == 300
    assert settings.chat_index_conversations is True
    assert settings.cors_origins == ["http://localhost:3000"]


def test_reads_environment(clean_env):
    clean_env.setenv("SUPABASE_URL", "https://x.supabase.co")
    clean_env.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
    clean_env.setenv("CHAT_INDEX_CONVERSATIONS", "false")
    clean_env.setenv("CORS_ORIGINS", "https://a.app, https://b.app")

    settings = Settings.from_env()

    assert settings.supabase_service_key == "service"
    assert settings.chat_index_conversations is False
    assert settings.cors_origins == ["https://a.app", "https://b.app"]


def test_demo_strategy_requires_token(clean_env):
    clean_env.setenv("AUTH_STRATEGY", "demo")
    with pytest.raises(ConfigurationError):
        Settings.from_env()


def test_invalid_values_are_configuration_errors(clean_env):
    clean_env.setenv("CHAT_MAX_TOKENS", "lots")
    with pytest.raises(ConfigurationError):
        Settings.from_env()

    clean_env.setenv("CHAT_MAX_TOKENS", "300")
    clean_env.setenv("AUTH_STRATEGY", "oauth")
    with pytest.raises(ConfigurationError):
        Settings.from_env()


def test_log_level_is_normalized():
    assert Settings(log_level=" debug ").log_level == "DEBUG"


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValueError):
        Settings(log_level="chatty")


def test_app_builds_with_lowercase_log_level():
    from ai_cofounder.api import create_app
    from ai_cofounder.dependencies import AppClients

    app = create_app(settings=Settings(log_level="warning"), clients=AppClients())
    assert app.state.settings.log_level == "WARNING"

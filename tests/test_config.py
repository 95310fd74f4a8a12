"""Config loading from the environment."""
import pytest
from routecam.config import Config


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """No .env file and no stray settings from the host environment."""
    monkeypatch.setattr("routecam.config.load_dotenv", lambda **_: None)
    for name in (
        "TELEGRAM_BOT_TOKEN",
        "ALLOWED_CHAT_ID",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "ANALYSIS_MODEL",
        "TARGET_WIDTH",
        "JPEG_QUALITY",
        "ROUTE_COLOR",
        "REQUEST_TIMEOUT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def _required(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "bot123:ABC")
    monkeypatch.setenv("ALLOWED_CHAT_ID", "987654321")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test123")


def test_config_from_env_success(monkeypatch):
    """Happy-path: all required env vars present."""
    _required(monkeypatch)

    config = Config.from_env()

    assert config.telegram_bot_token == "bot123:ABC"
    assert config.allowed_chat_id == "987654321"
    assert config.openai_api_key == "sk-test123"
    assert config.provider == "openai"


def test_config_defaults(monkeypatch):
    """Optional fields have the documented defaults."""
    _required(monkeypatch)

    config = Config.from_env()

    assert config.target_width == 512
    assert config.jpeg_quality == 80
    assert config.analysis_model == "gpt-4o-mini"
    assert config.route_color == "blue"
    assert config.request_timeout == 60
    assert config.log_level == "INFO"
    assert config.anthropic_api_key is None


def test_config_missing_token_fails(monkeypatch):
    _required(monkeypatch)
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN")

    with pytest.raises(ValueError, match="TELEGRAM_BOT_TOKEN"):
        Config.from_env()


def test_config_missing_chat_id_fails(monkeypatch):
    _required(monkeypatch)
    monkeypatch.delenv("ALLOWED_CHAT_ID")

    with pytest.raises(ValueError, match="ALLOWED_CHAT_ID"):
        Config.from_env()


def test_config_missing_api_keys_fails(monkeypatch):
    """The credential must come from outside — there is no built-in key."""
    _required(monkeypatch)
    monkeypatch.delenv("OPENAI_API_KEY")

    with pytest.raises(ValueError, match="OPENAI_API_KEY or ANTHROPIC_API_KEY"):
        Config.from_env()


def test_config_anthropic_only_selects_claude(monkeypatch):
    _required(monkeypatch)
    monkeypatch.delenv("OPENAI_API_KEY")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

    config = Config.from_env()

    assert config.provider == "claude"
    assert config.analysis_model.startswith("claude-")


def test_config_overrides_from_env(monkeypatch):
    _required(monkeypatch)
    monkeypatch.setenv("ANALYSIS_MODEL", "gpt-4o")
    monkeypatch.setenv("TARGET_WIDTH", "720")
    monkeypatch.setenv("JPEG_QUALITY", "90")
    monkeypatch.setenv("ROUTE_COLOR", " yellow ")
    monkeypatch.setenv("REQUEST_TIMEOUT", "15")

    config = Config.from_env()

    assert config.analysis_model == "gpt-4o"
    assert config.target_width == 720
    assert config.jpeg_quality == 90
    assert config.route_color == "yellow"
    assert config.request_timeout == 15


def test_config_zero_timeout_disables_it(monkeypatch):
    _required(monkeypatch)
    monkeypatch.setenv("REQUEST_TIMEOUT", "0")

    assert Config.from_env().request_timeout is None


@pytest.mark.parametrize(
    "name, value",
    [("TARGET_WIDTH", "0"), ("JPEG_QUALITY", "0"), ("JPEG_QUALITY", "101")],
)
def test_config_rejects_out_of_range_image_settings(monkeypatch, name, value):
    _required(monkeypatch)
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        Config.from_env()


@pytest.mark.parametrize("name", ["TARGET_WIDTH", "JPEG_QUALITY", "REQUEST_TIMEOUT"])
def test_config_non_numeric_setting_names_the_variable(monkeypatch, name):
    _required(monkeypatch)
    monkeypatch.setenv(name, "abc")

    with pytest.raises(ValueError, match=f"{name} must be a number"):
        Config.from_env()


def test_config_immutable(monkeypatch):
    """Frozen dataclass: attribute assignment must fail."""
    _required(monkeypatch)
    config = Config.from_env()

    with pytest.raises(Exception):
        config.openai_api_key = "other"

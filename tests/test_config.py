import pytest

from layered_dotenv.config import ConfigError, debug_enabled, load_settings


def _clear(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DOTENV_PROFILE_PREFIX",
        "DOTENV_PROFILES_VAR",
        "DOTENV_COERCE",
        "DOTENV_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)

    cfg = load_settings()

    assert cfg.profile_prefix == ".env"
    assert cfg.profiles_var == "PROFILES"
    assert cfg.coerce_values is False


def test_load_settings_success(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOTENV_PROFILE_PREFIX", "config/.env")
    monkeypatch.setenv("DOTENV_PROFILES_VAR", "APP_PROFILES")
    monkeypatch.setenv("DOTENV_COERCE", "yes")

    cfg = load_settings()

    assert cfg.profile_prefix == "config/.env"
    assert cfg.profiles_var == "APP_PROFILES"
    assert cfg.coerce_values is True


def test_load_settings_blank_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOTENV_PROFILE_PREFIX", "   ")
    monkeypatch.setenv("DOTENV_COERCE", "")

    cfg = load_settings()

    assert cfg.profile_prefix == ".env"
    assert cfg.coerce_values is False


def test_load_settings_invalid_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOTENV_COERCE", "maybe")

    with pytest.raises(ConfigError) as exc:
        load_settings()

    assert "DOTENV_COERCE must be a boolean flag" in str(exc.value)


def test_load_settings_invalid_profiles_var(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOTENV_PROFILES_VAR", "A,B")

    with pytest.raises(ConfigError) as exc:
        load_settings()

    assert "DOTENV_PROFILES_VAR must be a plain variable name" in str(exc.value)


def test_debug_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOTENV_DEBUG", raising=False)
    assert debug_enabled() is False

    monkeypatch.setenv("DOTENV_DEBUG", "on")
    assert debug_enabled() is True


def test_unrecognised_debug_value_is_off_and_not_an_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("DOTENV_DEBUG", "verbose")

    assert debug_enabled() is False
    assert load_settings().coerce_values is False

"""Tests for the layered configuration loader."""

from pathlib import Path

import pytest

from smart_planogram.enterprise.config.settings import get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _write_config(tmp_path: Path, base: str, **environments: str) -> Path:
    config_dir = tmp_path / "config"
    env_dir = config_dir / "environments"
    env_dir.mkdir(parents=True)
    (config_dir / "settings.yaml").write_text(base, encoding="utf-8")
    for name, content in environments.items():
        (env_dir / f"{name}.yaml").write_text(content, encoding="utf-8")
    return config_dir


def test_settings_load_default_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Default environment should combine base settings and dev overrides."""

    config_dir = _write_config(
        tmp_path,
        """
        environment: dev
        grid:
          default_rows: 6
          default_cols: 8
        auth:
          user_header: X-Base-User
        """,
        dev="""
        auth:
          user_header: X-Dev-User
        logging:
          level: DEBUG
        """,
    )
    monkeypatch.setenv("SP_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("SP_ENVIRONMENT", raising=False)

    settings = get_settings()

    assert settings.environment == "dev"
    assert settings.grid.default_rows == 6
    assert settings.grid.default_cols == 8
    assert settings.auth.user_header == "X-Dev-User"
    assert settings.logging.level == "DEBUG"
    assert settings.database.enabled is False
    assert settings.telemetry.model_dump() == {"otlp_endpoint": None}


def test_settings_env_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Environment variables should override YAML configuration."""

    config_dir = _write_config(
        tmp_path,
        """
        environment: prod
        grid:
          default_rows: 5
        """,
        prod="{}",
    )
    monkeypatch.setenv("SP_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("SP_ENVIRONMENT", "prod")
    monkeypatch.setenv("SP_GRID__DEFAULT_COLS", "9")

    settings = get_settings()

    assert settings.environment == "prod"
    assert settings.grid.default_rows == 5
    assert settings.grid.default_cols == 9


def test_settings_reject_grid_below_minimum(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_dir = _write_config(tmp_path, "grid:\n  default_rows: 1\n")
    monkeypatch.setenv("SP_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("SP_ENVIRONMENT", raising=False)

    with pytest.raises(ValueError):
        get_settings()


def test_settings_cache_clear(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Clearing the cache should re-read configuration files."""

    config_dir = _write_config(tmp_path, "{}", dev="{}")
    monkeypatch.setenv("SP_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("SP_ENVIRONMENT", raising=False)

    first = get_settings()

    monkeypatch.setenv("SP_ENVIRONMENT", "qa")
    (config_dir / "environments" / "qa.yaml").write_text(
        "logging:\n  level: WARNING\n",
        encoding="utf-8",
    )

    get_settings.cache_clear()
    second = get_settings()

    assert first.environment == "dev"
    assert second.environment == "qa"
    assert second.logging.level == "WARNING"

"""Tests for process bootstrap helpers."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from warden import main as main_module
from warden.configuration.app_configuration import AppConfig
from warden.database.database import Database
from warden.moderation.message_pipeline import MessagePipeline


def test_resolve_base_dir_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv("WARDEN_HOME", str(tmp_path))
    assert main_module.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_defaults_to_repo_root(monkeypatch):
    monkeypatch.delenv("WARDEN_HOME", raising=False)
    assert (main_module.resolve_base_dir() / "src" / "warden").is_dir()


def test_load_environment_requires_token(monkeypatch):
    monkeypatch.setattr(main_module, "load_dotenv", lambda **kwargs: None)
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)

    with pytest.raises(SystemExit):
        main_module.load_environment()


def test_load_environment_returns_token(monkeypatch):
    monkeypatch.setattr(main_module, "load_dotenv", lambda **kwargs: None)
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "secret")

    assert main_module.load_environment() == "secret"


def test_build_intents():
    intents = main_module.build_intents()
    assert intents.message_content
    assert intents.members


def test_build_services_wires_config(tmp_path: Path):
    config_path = tmp_path / "app_config.yml"
    config_path.write_text("pipeline:\n  moderator_level: 4\ntriggers:\n  fire_on_first_match: true\n", encoding="utf-8")
    config = AppConfig(config_path)

    services = main_module.build_services(MagicMock(), config, Database(tmp_path / "x.db"))

    assert isinstance(services.pipeline, MessagePipeline)
    assert services.pipeline.moderator_level == 4
    assert services.pipeline.autoslow_max_level == 1
    assert services.pipeline.link_gate._settings_cache is services.settings_cache

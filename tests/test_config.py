import json
import logging

import pytest

from manabase import EngineConfig
from manabase.logging_config import JSONFormatter, setup_logging

ENV_VARS = [
    "MANABASE_CACHE_SIZE",
    "MANABASE_MIN_DECK_SIZE",
    "MANABASE_MC_ITERATIONS",
    "MANABASE_MULLIGAN_ITERATIONS",
    "MANABASE_MC_WORKERS",
    "MANABASE_MIN_LANDS",
    "MANABASE_MAX_LANDS",
    "MANABASE_MIN_HAND_SIZE",
    "MANABASE_LOG_DIR",
    "MANABASE_LOG_LEVEL",
    "MANABASE_MCP_TRANSPORT",
    "MANABASE_MCP_HOST",
    "MANABASE_MCP_PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the original state afterwards,
    # including values written by load_dotenv
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_defaults():
    config = EngineConfig()
    assert config.cache_size == 10_000
    assert config.min_deck_size == 40
    assert config.mc_iterations == 10_000
    assert config.mc_workers == 1
    assert (config.min_lands, config.max_lands) == (20, 28)


def test_from_env(clean_env, tmp_path):
    clean_env.setenv("MANABASE_MIN_DECK_SIZE", "60")
    clean_env.setenv("MANABASE_MC_WORKERS", "4")
    clean_env.setenv("MANABASE_LOG_LEVEL", "debug")
    config = EngineConfig.from_env(str(tmp_path / "missing.env"))
    assert config.min_deck_size == 60
    assert config.mc_workers == 4
    assert config.log_level == "DEBUG"
    assert config.cache_size == 10_000


def test_from_dotenv_file(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("MANABASE_CACHE_SIZE=500\nMANABASE_MIN_HAND_SIZE=5\n")
    config = EngineConfig.from_env(str(env_file))
    assert config.cache_size == 500
    assert config.min_hand_size == 5


def test_environment_wins_over_dotenv(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("MANABASE_CACHE_SIZE=500\n")
    clean_env.setenv("MANABASE_CACHE_SIZE", "42")
    assert EngineConfig.from_env(str(env_file)).cache_size == 42


def test_mcp_server_settings_from_env(clean_env, tmp_path):
    clean_env.setenv("MANABASE_MCP_TRANSPORT", "HTTP")
    clean_env.setenv("MANABASE_MCP_HOST", "0.0.0.0")
    clean_env.setenv("MANABASE_MCP_PORT", "8080")
    config = EngineConfig.from_env(str(tmp_path / "missing.env"))
    assert config.mcp_transport == "http"
    assert config.mcp_host == "0.0.0.0"
    assert config.mcp_port == 8080


def test_non_integer_env_value(clean_env, tmp_path):
    clean_env.setenv("MANABASE_MC_ITERATIONS", "lots")
    with pytest.raises(ValueError, match="MANABASE_MC_ITERATIONS"):
        EngineConfig.from_env(str(tmp_path / "missing.env"))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"cache_size": -1},
        {"mc_workers": 0},
        {"min_lands": 30, "max_lands": 20},
        {"min_hand_size": 0},
        {"mcp_transport": "sse"},
        {"mcp_port": 0},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_json_formatter_drops_empty_fields():
    record = logging.LogRecord(
        "manabase.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
    )
    record.tool_name = "analyze_turn"
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "hello world"
    assert payload["logger"] == "manabase.test"
    assert payload["tool_name"] == "analyze_turn"
    assert "error" not in payload


def test_setup_logging_writes_json(tmp_path):
    logger = setup_logging("manabase_test", str(tmp_path), "DEBUG")
    try:
        # Calling twice must not add a second handler
        assert setup_logging("manabase_test", str(tmp_path), "DEBUG") is logger
        assert len(logger.handlers) == 1
        logger.info("simulated", extra={"success": True})
        logger.handlers[0].flush()
        line = (tmp_path / "manabase_test.log").read_text().strip()
        assert json.loads(line)["success"] is True
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

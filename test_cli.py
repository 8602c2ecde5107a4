"""Tests for the command-line runner and environment configuration."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))

import run
from config import ExpressionPoolConfig


def _run(monkeypatch, *argv) -> int:
    monkeypatch.setattr(sys, "argv", ["run.py", *argv])
    return run.main()


def test_generate(monkeypatch, capsys):
    assert _run(monkeypatch, "generate", "arithmetic", "--first", "0", "--last", "6", "--seed", "3") == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 7
    assert lines[0].startswith("0 -> ")
    assert lines[2] == "2 -> 2"


def test_verify_evaluable_demo(monkeypatch, capsys):
    assert _run(monkeypatch, "verify", "palace", "--last", "20", "--seed", "1") == 0
    assert "expressions verified" in capsys.readouterr().out


def test_verify_js_refused(monkeypatch):
    assert _run(monkeypatch, "verify", "js", "--last", "5") == 1


def test_stats(monkeypatch, capsys):
    assert _run(monkeypatch, "stats", "emoji", "--last", "12", "--seed", "2") == 0
    out = capsys.readouterr().out
    assert "100.0%" in out
    assert "Forward rounds:" in out


def test_list_is_default(monkeypatch, capsys):
    assert _run(monkeypatch) == 0
    out = capsys.readouterr().out
    for name in ("arithmetic", "emoji", "js", "palace", "xor"):
        assert name in out


def test_invalid_configuration_exit_code(monkeypatch):
    assert _run(monkeypatch, "generate", "arithmetic", "--last", "5", "--quality", "2") == 1
    assert _run(monkeypatch, "generate", "arithmetic", "--last", "5", "--max-cache", "0") == 1


def test_unknown_demo_rejected(monkeypatch):
    with pytest.raises(SystemExit):
        _run(monkeypatch, "generate", "klingon")


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("EXPR_POOL_MAX_CACHE_NUM", "3")
    monkeypatch.setenv("EXPR_POOL_QUALITY", "0.5")
    monkeypatch.setenv("EXPR_POOL_SEED", "17")
    monkeypatch.setenv("EXPR_POOL_LOG_LEVEL", "debug")
    monkeypatch.setenv("EXPR_POOL_BUILD_TIMEOUT", "2.5")
    cfg = ExpressionPoolConfig.from_env()
    assert cfg.max_cache_num == 3
    assert cfg.quality == 0.5
    assert cfg.seed == 17
    assert cfg.log_level == "DEBUG"
    assert cfg.build_timeout == 2.5


def test_config_defaults(monkeypatch):
    for key in ("EXPR_POOL_SEED", "EXPR_POOL_MAX_CACHE_NUM", "EXPR_POOL_QUALITY"):
        monkeypatch.delenv(key, raising=False)
    cfg = ExpressionPoolConfig.from_env()
    assert cfg.seed is None
    assert cfg.max_cache_num == 5
    assert cfg.quality == 1.0

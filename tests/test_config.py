"""
配置读取与日志初始化。
"""
import pytest

from resumefit.core import config
from resumefit.core.log import setup_logger
from resumefit.core.tokens import count_tokens


class TestConfig:
    def test_caps_default(self):
        assert config.max_description_chars() == 15000
        assert config.max_context_chars() == 25000

    @pytest.mark.parametrize("raw,expected", [("800", 800), ("0", 15000), ("-3", 15000), ("abc", 15000)])
    def test_caps_from_env(self, monkeypatch, raw, expected):
        monkeypatch.setenv("RESUMEFIT_MAX_DESCRIPTION_CHARS", raw)
        assert config.max_description_chars() == expected

    @pytest.mark.parametrize("raw,expected", [("ko", "ko"), (" KO ", "ko"), ("fr", "en")])
    def test_language(self, monkeypatch, raw, expected):
        monkeypatch.setenv("RESUMEFIT_LANGUAGE", raw)
        assert config.get_default_language() == expected

    def test_oracle_falls_back_to_mock_without_keys(self, monkeypatch):
        for key in ("GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY", "DEEPSEEK_API_KEY"):
            monkeypatch.delenv(key, raising=False)
        assert config.get_oracle_id() == "mock"
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert config.get_oracle_id() == "llm"
        monkeypatch.setenv("RESUMEFIT_ORACLE", "Mock")
        assert config.get_oracle_id() == "mock"

    def test_temperature(self, monkeypatch):
        monkeypatch.setenv("RESUMEFIT_LLM_TEMPERATURE", "0.7")
        assert config.llm_temperature() == 0.7
        monkeypatch.setenv("RESUMEFIT_LLM_TEMPERATURE", "warm")
        assert config.llm_temperature() == 0.0


def test_setup_logger_writes_file(tmp_path, monkeypatch):
    import resumefit.core.log as log_module
    from loguru import logger

    monkeypatch.setattr(log_module, "_configured", False)
    log_file = setup_logger(level="WARNING", log_dir=tmp_path)
    assert log_file == tmp_path / "resumefit.log"
    assert setup_logger(log_dir=tmp_path) == log_file
    logger.debug("written to file only")
    logger.remove()
    assert "written to file only" in log_file.read_text(encoding="utf-8")


def test_count_tokens():
    assert count_tokens("") == 0
    assert count_tokens("hello world", "gpt-4o") > 0

"""
配置：从环境变量读取，供流水线、Oracle 与 HTTP 入口使用。
"""
import os
from pathlib import Path
from typing import Literal

# 可选加载 .env（若存在）：先项目根（与 pyproject.toml 同层），再当前工作目录
_env_paths = [
    Path(__file__).resolve().parents[3] / ".env",  # 从 src/resumefit/core 往上的项目根
    Path.cwd() / ".env",
]
for _p in _env_paths:
    if _p.exists():
        from dotenv import load_dotenv
        load_dotenv(_p)
        break

Language = Literal["en", "ko"]
LANGUAGES: tuple[str, ...] = ("en", "ko")

# 交给 Oracle 前的输入上限（字符）：职位描述 15k、单条上下文 25k
DEFAULT_MAX_DESCRIPTION_CHARS = 15000
DEFAULT_MAX_CONTEXT_CHARS = 25000

# 任一 key 存在即认为可以走 LLM Oracle
_PROVIDER_KEYS = (
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "DEEPSEEK_API_KEY",
)


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def has_provider_key() -> bool:
    return any(os.getenv(k) for k in _PROVIDER_KEYS)


def get_default_model() -> str:
    return os.getenv("RESUMEFIT_DEFAULT_MODEL", "gemini/gemini-2.5-flash")


def get_oracle_id() -> str:
    """Oracle 实现：llm 或 mock。未配置时有 key 走 llm，否则 mock（离线可跑）。"""
    explicit = (os.getenv("RESUMEFIT_ORACLE") or "").strip().lower()
    if explicit:
        return explicit
    return "llm" if has_provider_key() else "mock"


def get_default_language() -> Language:
    lang = (os.getenv("RESUMEFIT_LANGUAGE") or "en").strip().lower()
    return lang if lang in LANGUAGES else "en"  # type: ignore[return-value]


def max_description_chars() -> int:
    return _int_env("RESUMEFIT_MAX_DESCRIPTION_CHARS", DEFAULT_MAX_DESCRIPTION_CHARS)


def max_context_chars() -> int:
    return _int_env("RESUMEFIT_MAX_CONTEXT_CHARS", DEFAULT_MAX_CONTEXT_CHARS)


def llm_temperature() -> float:
    """分析调用的温度；默认 0，让打分尽量稳定（流水线本身不依赖这一点）。"""
    raw = (os.getenv("RESUMEFIT_LLM_TEMPERATURE") or "").strip()
    try:
        return float(raw) if raw else 0.0
    except ValueError:
        return 0.0


def log_level() -> str:
    return (os.getenv("RESUMEFIT_LOG_LEVEL") or "INFO").strip().upper()


def get_log_dir() -> Path | None:
    """设置 RESUMEFIT_LOG_DIR 时额外写 DEBUG 级日志文件；否则只输出到控制台。"""
    env_path = (os.getenv("RESUMEFIT_LOG_DIR") or "").strip()
    return Path(env_path) if env_path else None

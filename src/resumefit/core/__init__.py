# 配置、loguru 日志、LiteLLM 封装、tiktoken 计数

from .config import (
    LANGUAGES,
    Language,
    get_default_language,
    get_default_model,
    get_oracle_id,
    has_provider_key,
    max_context_chars,
    max_description_chars,
)
from .llm import completion, ask_ai
from .log import setup_logger
from .tokens import count_tokens

__all__ = [
    "LANGUAGES",
    "Language",
    "get_default_language",
    "get_default_model",
    "get_oracle_id",
    "has_provider_key",
    "max_context_chars",
    "max_description_chars",
    "completion",
    "ask_ai",
    "setup_logger",
    "count_tokens",
]

"""
tiktoken：Oracle 请求前计数，记录每次分析/生成大致消耗多少输入 token。
"""
from __future__ import annotations

from typing import Optional

# 模型名片段 → tiktoken 编码；Gemini/Claude 等非 OpenAI 模型用 cl100k_base 近似
_MODEL_ENCODING = {
    "gpt-4o": "o200k_base",
    "gpt-4.1": "o200k_base",
    "gpt-4": "cl100k_base",
    "gpt-3.5": "cl100k_base",
}
_DEFAULT_ENCODING = "cl100k_base"


def _encoding_name(model_name: Optional[str]) -> str:
    name = (model_name or "").strip().lower()
    for key, enc in _MODEL_ENCODING.items():
        if key in name:
            return enc
    return _DEFAULT_ENCODING


def count_tokens(text: str, model_name: Optional[str] = None) -> int:
    """
    计算文本 token 数。
    编码表加载失败（如离线环境首次使用）时回退为 len(text)//4 的近似值。
    """
    if not text:
        return 0
    import tiktoken

    try:
        enc = tiktoken.get_encoding(_encoding_name(model_name))
    except Exception:
        return max(1, len(text) // 4)
    return len(enc.encode(text))


"""
Oracle：岗位匹配分析与定制简历、求职信、个人画像、经历润色。
- llm：PydanticAI + LiteLLM，需任一模型厂商 API Key。
- mock：关键词重叠打分与模板文本，无需 API Key，用于最小闭环与测试。
"""
from .base import FitOracle
from .mock import MockFitOracle
from .registry import get_fit_oracle

__all__ = ["FitOracle", "MockFitOracle", "get_fit_oracle"]

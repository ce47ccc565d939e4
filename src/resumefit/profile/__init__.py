# 个人上下文：简历 / 经历 / 爱好 / 价值观 / 笔记，及其启用开关

from .schemas import ContextItem, ContextType
from .store import ContextStore

__all__ = ["ContextItem", "ContextType", "ContextStore"]

"""
个人上下文（Context）的数据模型：简历、经历、爱好、价值观、随手笔记，每条带启用开关。
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import Field, field_validator

from resumefit.core.schema import FrozenCamelModel


class ContextType(str, Enum):
    """上下文类型；定义顺序即拼装 Oracle 输入时的分组顺序。"""

    RESUME = "resume"
    EXPERIENCE = "experience"
    HOBBY = "hobby"
    VALUE = "value"
    NOTE = "note"

    @property
    def order(self) -> int:
        return list(ContextType).index(self)

    @property
    def default_title(self) -> str:
        """用户未填标题时使用的默认标题，如 Hobby。"""
        return self.value.capitalize()

    @property
    def heading(self) -> str:
        """Prompt 中该组的小标题。"""
        return _HEADINGS[self]


_HEADINGS = {
    ContextType.RESUME: "RESUME",
    ContextType.EXPERIENCE: "EXPERIENCE NOTES",
    ContextType.HOBBY: "HOBBIES & INTERESTS",
    ContextType.VALUE: "VALUES & PHILOSOPHY",
    ContextType.NOTE: "OTHER NOTES",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ContextItem(FrozenCamelModel):
    """
    一条上下文。身份字段创建后不变；is_active 通过 ContextStore.toggle 以替换副本的方式翻转。
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="条目 ID")
    type: ContextType = Field(ContextType.NOTE, description="上下文类型")
    title: str = Field("", description="标题，如 Master Resume、Hiking")
    content: str = Field(..., description="正文（粘贴文本或文件抽取出的文本）")
    date_added: datetime = Field(default_factory=_now, description="添加时间（UTC）")
    is_active: bool = Field(True, description="是否参与 Oracle 调用")

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("context content must not be empty")
        return v

"""Oracle 抽象：岗位匹配分析与各类文本生成，全部为异步、可能失败、不保证幂等。"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from resumefit.core.config import Language
from resumefit.profile.schemas import ContextItem


class FitOracle(ABC):
    """
    外部评分/生成能力。调用方只传启用的上下文，且已按上限截断。
    analyze 可返回 AnalysisResult 或等价 dict，由流水线做结构校验。
    """

    @abstractmethod
    async def analyze(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        *,
        language: Language = "en",
    ) -> Any:
        """上下文 vs 职位描述的匹配分析。"""
        ...

    @abstractmethod
    async def tailor_resume(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        *,
        language: Language = "en",
    ) -> str:
        """按职位改写的简历（Markdown）。"""
        ...

    @abstractmethod
    async def write_cover_letter(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        tailored_resume: str | None = None,
        *,
        language: Language = "en",
    ) -> str:
        """求职信；有定制简历时参考它。"""
        ...

    @abstractmethod
    async def summarize_persona(
        self,
        context: Sequence[ContextItem],
        *,
        language: Language = "en",
    ) -> str:
        """根据启用的上下文生成个人画像摘要。"""
        ...

    @abstractmethod
    async def polish_experience(self, raw_text: str, *, language: Language = "en") -> str:
        """把口语化的经历描述改写成简历要点。"""
        ...

"""
会话：一个用户的 ContextStore + JobStore + JobPipeline，全部在内存中。

不使用模块级全局状态；由调用方（HTTP 层、脚本、测试）显式创建与关闭。
"""
from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from resumefit.core.config import Language
from resumefit.jobs.pipeline import JobPipeline
from resumefit.jobs.store import JobStore
from resumefit.oracles.base import FitOracle
from resumefit.oracles.registry import get_fit_oracle
from resumefit.profile.store import ContextStore


@dataclass
class Session:
    """单用户会话。close() 会先等待进行中的分析结束。"""

    pipeline: JobPipeline
    closed: bool = field(default=False, init=False)

    @classmethod
    def create(cls, oracle: FitOracle | None = None, language: Language | None = None) -> "Session":
        pipeline = JobPipeline(
            contexts=ContextStore(),
            jobs=JobStore(),
            oracle=oracle or get_fit_oracle(),
            language=language,
        )
        return cls(pipeline=pipeline)

    @property
    def contexts(self) -> ContextStore:
        return self.pipeline.contexts

    @property
    def jobs(self) -> JobStore:
        return self.pipeline.jobs

    @property
    def language(self) -> Language:
        return self.pipeline.language

    @language.setter
    def language(self, value: Language) -> None:
        self.pipeline.language = value

    async def close(self) -> None:
        if self.closed:
            return
        pending = self.pipeline.in_flight
        if pending:
            logger.info("closing session: waiting for {} analysis task(s)", pending)
        await self.pipeline.drain()
        self.closed = True

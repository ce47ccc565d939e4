"""
测试公共件：可编排的 Oracle（计数、闸门、失败注入）与流水线 fixture。

所有测试都不需要 API key；异步流程在同步测试函数里用 asyncio.run 驱动。
"""
from __future__ import annotations

import asyncio
from collections import Counter, deque
from dataclasses import dataclass
from typing import Any, Sequence

import pytest

from resumefit.jobs.pipeline import JobPipeline
from resumefit.jobs.schemas import AnalysisResult, CategoryScore, LevelFit, TailoringSuggestion
from resumefit.jobs.store import JobStore
from resumefit.oracles.base import FitOracle
from resumefit.profile.schemas import ContextItem
from resumefit.profile.store import ContextStore


def make_result(score: float = 80.0, label: str = "High Fit", summary: str = "scripted") -> AnalysisResult:
    return AnalysisResult(
        overall_score=score,
        fit_label=label,
        summary=summary,
        category_scores=[CategoryScore(category="Hard Skills", score=score, reason="scripted")],
        level_fit=LevelFit(label="Senior Level", assessment="on level"),
        missing_keywords=["kubernetes"],
        strong_matches=["python"],
        tailoring_guide=[TailoringSuggestion(type="keyword", suggestion="add kubernetes", reason="JD asks")],
    )


@dataclass
class Step:
    """analyze 的一次编排：可先等 gate，再返回 outcome（异常实例则抛出）。"""

    outcome: Any = None
    gate: asyncio.Event | None = None


class ScriptedOracle(FitOracle):
    """按脚本应答的 Oracle；未编排时 analyze 返回 make_result()，文本类返回固定文本。"""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.seen: list[tuple[str, tuple[ContextItem, ...], Any]] = []
        self.steps: deque[Step] = deque()
        self.fail: set[str] = set()
        self.empty: set[str] = set()
        self.languages: list[str] = []

    def script(self, outcome: Any = None, gate: asyncio.Event | None = None) -> Step:
        step = Step(outcome=outcome, gate=gate)
        self.steps.append(step)
        return step

    def _record(self, operation: str, context: Sequence[ContextItem], extra: Any, language: str) -> None:
        self.calls[operation] += 1
        self.seen.append((operation, tuple(context), extra))
        self.languages.append(language)

    async def analyze(self, context, job_description, *, language="en"):
        self._record("analyze", context, job_description, language)
        step = self.steps.popleft() if self.steps else Step()
        if step.gate is not None:
            await step.gate.wait()
        if isinstance(step.outcome, BaseException):
            raise step.outcome
        return step.outcome if step.outcome is not None else make_result()

    async def _text(self, operation: str) -> str:
        await asyncio.sleep(0)
        if operation in self.fail:
            raise RuntimeError(f"{operation} upstream timeout")
        if operation in self.empty:
            return "   "
        return f"{operation} text"

    async def tailor_resume(self, context, job_description, *, language="en"):
        self._record("tailor_resume", context, job_description, language)
        return await self._text("tailor_resume")

    async def write_cover_letter(self, context, job_description, tailored_resume=None, *, language="en"):
        self._record("write_cover_letter", context, tailored_resume, language)
        return await self._text("write_cover_letter")

    async def summarize_persona(self, context, *, language="en"):
        self._record("summarize_persona", context, None, language)
        return await self._text("summarize_persona")

    async def polish_experience(self, raw_text, *, language="en"):
        self._record("polish_experience", (), raw_text, language)
        return await self._text("polish_experience")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """屏蔽本机 .env / 环境变量对上限与语言的影响。"""
    for name in (
        "RESUMEFIT_MAX_DESCRIPTION_CHARS",
        "RESUMEFIT_MAX_CONTEXT_CHARS",
        "RESUMEFIT_LANGUAGE",
        "RESUMEFIT_ORACLE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def oracle() -> ScriptedOracle:
    return ScriptedOracle()


@pytest.fixture
def pipeline(oracle) -> JobPipeline:
    return JobPipeline(contexts=ContextStore(), jobs=JobStore(), oracle=oracle, language="en")

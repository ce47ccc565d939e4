"""
职位富化流水线：分析 → 定制简历 → 求职信。

- 分析：同步切到 ANALYZING（调用方在 Oracle 返回前即可观察到），等待 Oracle，
  成功则结果与上下文快照一起写入并置 COMPLETED，失败置 ERROR、保留上一次记录。
- 每次发起分析都会递增该职位的 generation；返回时 generation 已不是最新的结果直接丢弃，
  因此最终以最后发起的那次分析为准。职位在等待期间被删除时，结果同样丢弃。
- 定制简历 / 求职信与生命周期状态无关：失败直接抛给调用方，不改任何字段。
"""
from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Sequence

from loguru import logger
from pydantic import ValidationError

from resumefit.core.config import Language, get_default_language, max_context_chars, max_description_chars
from resumefit.errors import NoActiveContext, OracleFailure
from resumefit.oracles.base import FitOracle
from resumefit.profile.schemas import ContextItem
from resumefit.profile.store import ContextStore
from .schemas import AnalysisRecord, AnalysisResult, ApplicationStatus, Job, JobStatus
from .store import JobStore


@dataclass(frozen=True)
class AnalysisTicket:
    """一次已发起、尚未返回的分析。"""

    job_id: str
    generation: int
    snapshot: tuple[ContextItem, ...]
    description: str


def _describe(exc: BaseException) -> str:
    return (str(exc).strip() or type(exc).__name__)[:200]


def cap_text(text: str, limit: int) -> str:
    """按前缀截断；不超长时原样返回。"""
    return text if len(text) <= limit else text[:limit]


def cap_context(items: Sequence[ContextItem], limit: int) -> tuple[ContextItem, ...]:
    """逐条截断 content，返回新副本；不修改传入条目（快照保留全文）。"""
    return tuple(
        item if len(item.content) <= limit else item.model_copy(update={"content": item.content[:limit]})
        for item in items
    )


def parse_analysis(raw: Any) -> AnalysisResult:
    """
    Oracle 分析输出的结构校验：接受 AnalysisResult、dict 或 JSON 文本（允许被 markdown 代码块包裹）。
    缺字段、类型不对或无法解析一律转为 OracleFailure。
    """
    if isinstance(raw, AnalysisResult):
        return raw
    try:
        if isinstance(raw, str):
            text = raw.strip()
            if "```" in text:
                m = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
                if m:
                    text = m.group(1).strip()
            return AnalysisResult.model_validate(json.loads(text))
        if hasattr(raw, "model_dump"):
            raw = raw.model_dump(by_alias=True)
        return AnalysisResult.model_validate(raw)
    except ValidationError as exc:
        raise OracleFailure("analyze", f"malformed analysis ({exc.error_count()} invalid field(s))") from exc
    except ValueError as exc:
        raise OracleFailure("analyze", f"unparseable analysis: {_describe(exc)}") from exc


class JobPipeline:
    """
    一个会话的流水线：持有 ContextStore、JobStore 与 Oracle 的引用。
    单线程 asyncio；只在 await Oracle 处让出，状态切换都在让出点两侧同步完成。
    """

    def __init__(
        self,
        contexts: ContextStore,
        jobs: JobStore,
        oracle: FitOracle,
        language: Language | None = None,
    ) -> None:
        self.contexts = contexts
        self.jobs = jobs
        self.oracle = oracle
        self.language: Language = language or get_default_language()
        self._tasks: set[asyncio.Task] = set()

    # ---------- 上下文 ----------

    def _require_active(self) -> tuple[ContextItem, ...]:
        snapshot = self.contexts.snapshot()
        if not snapshot:
            raise NoActiveContext(self.language)
        return snapshot

    @staticmethod
    def _oracle_context(items: Sequence[ContextItem]) -> tuple[ContextItem, ...]:
        return cap_context(items, max_context_chars())

    @staticmethod
    def _oracle_description(description: str) -> str:
        return cap_text(description, max_description_chars())

    # ---------- 职位 ----------

    def add_job(self, title: str, company: str, description: str, auto_analyze: bool = False) -> Job:
        """
        新建职位。auto_analyze 且有启用上下文时直接以 ANALYZING 插入，并在当前事件循环上调度分析；
        没有启用上下文时不报错，保持 IDLE。
        """
        job = Job(title=title, company=company or "", description=description)
        start = auto_analyze and bool(self.contexts.active())
        loop = asyncio.get_running_loop() if start else None
        self.jobs.insert(job)
        logger.info("job added: {} ({} @ {})", job.id, job.title, job.company or "-")
        if start:
            self._schedule(loop, self._begin(job, self.contexts.snapshot()))
        return job

    def delete_job(self, job_id: str) -> bool:
        """删除职位；不存在时为空操作。进行中的分析返回后会被丢弃。"""
        return self.jobs.delete(job_id)

    def set_application_status(self, job_id: str, status: ApplicationStatus | str) -> Job:
        return self.jobs.set_application_status(job_id, status)

    # ---------- 分析 ----------

    def _begin(self, job: Job, snapshot: tuple[ContextItem, ...]) -> AnalysisTicket:
        job.analysis_generation += 1
        job.status = JobStatus.ANALYZING
        logger.debug("job {} → ANALYZING (generation {}, {} context item(s))", job.id, job.analysis_generation, len(snapshot))
        return AnalysisTicket(
            job_id=job.id,
            generation=job.analysis_generation,
            snapshot=snapshot,
            description=job.description,
        )

    def start_analysis(self, job_id: str) -> AnalysisTicket:
        """
        同步前半段：校验职位存在、至少一条启用上下文，拍快照并切到 ANALYZING。
        校验失败时抛 JobNotFound / NoActiveContext，职位状态不变、不调用 Oracle。
        """
        job = self.jobs.get(job_id)
        snapshot = self._require_active()
        return self._begin(job, snapshot)

    async def finish_analysis(self, ticket: AnalysisTicket) -> Job | None:
        """异步后半段：等待 Oracle 并落结果。Oracle 的任何失败都转为 ERROR，不向上抛。"""
        try:
            raw = await self.oracle.analyze(
                self._oracle_context(ticket.snapshot),
                self._oracle_description(ticket.description),
                language=self.language,
            )
            result = parse_analysis(raw)
        except Exception as exc:
            failure = exc if isinstance(exc, OracleFailure) else OracleFailure("analyze", _describe(exc))
            return self._settle(ticket, failure=failure)
        return self._settle(ticket, result=result)

    def _settle(
        self,
        ticket: AnalysisTicket,
        result: AnalysisResult | None = None,
        failure: OracleFailure | None = None,
    ) -> Job | None:
        job = self.jobs.find(ticket.job_id)
        if job is None:
            logger.info("job {} was deleted before its analysis settled; result dropped", ticket.job_id)
            return None
        if job.analysis_generation != ticket.generation:
            logger.info(
                "job {}: analysis generation {} superseded by {}; result dropped",
                job.id, ticket.generation, job.analysis_generation,
            )
            return job
        if failure is not None:
            job.status = JobStatus.ERROR
            logger.warning("job {} analysis failed: {}", job.id, failure.reason)
            return job
        job._record_analysis(AnalysisRecord(result=result, snapshot=ticket.snapshot, generation=ticket.generation))
        logger.info("job {} → COMPLETED ({}, {:.0f})", job.id, result.fit_label, result.overall_score)
        return job

    async def analyze(self, job_id: str) -> Job | None:
        """发起并等待一次分析；返回职位（等待期间被删除则返回 None）。"""
        ticket = self.start_analysis(job_id)
        return await self.finish_analysis(ticket)

    def submit_analysis(self, job_id: str) -> asyncio.Task:
        """同步发起分析并把等待部分调度为后台任务；前置校验失败时同步抛出。"""
        loop = asyncio.get_running_loop()
        return self._schedule(loop, self.start_analysis(job_id))

    def _schedule(self, loop: asyncio.AbstractEventLoop, ticket: AnalysisTicket) -> asyncio.Task:
        task = loop.create_task(self.finish_analysis(ticket))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """等待所有已调度的分析结束（会话关闭前调用）。"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ---------- 衍生产物 ----------

    async def _generate(self, operation: str, call: Awaitable[str]) -> str:
        try:
            text = await call
        except OracleFailure:
            raise
        except Exception as exc:
            logger.warning("{} failed: {}", operation, _describe(exc))
            raise OracleFailure(operation, _describe(exc)) from exc
        if not isinstance(text, str) or not text.strip():
            logger.warning("{} returned an empty response", operation)
            raise OracleFailure(operation, "empty response")
        return text.strip()

    async def generate_tailored_resume(self, job_id: str) -> Job | None:
        """生成定制简历；不改 status / result / 快照。失败抛 OracleFailure，字段保持原值。"""
        job = self.jobs.get(job_id)
        context = self._require_active()
        text = await self._generate(
            "tailor_resume",
            self.oracle.tailor_resume(
                self._oracle_context(context),
                self._oracle_description(job.description),
                language=self.language,
            ),
        )
        job = self.jobs.find(job_id)
        if job is None:
            logger.info("job {} was deleted before its tailored resume arrived", job_id)
            return None
        job.tailored_resume = text
        return job

    async def generate_cover_letter(self, job_id: str) -> Job | None:
        """生成求职信；有定制简历时一并交给 Oracle 参考，没有也照常生成。"""
        job = self.jobs.get(job_id)
        context = self._require_active()
        text = await self._generate(
            "write_cover_letter",
            self.oracle.write_cover_letter(
                self._oracle_context(context),
                self._oracle_description(job.description),
                cap_text(job.tailored_resume, max_context_chars()) if job.tailored_resume else None,
                language=self.language,
            ),
        )
        job = self.jobs.find(job_id)
        if job is None:
            logger.info("job {} was deleted before its cover letter arrived", job_id)
            return None
        job.cover_letter = text
        return job

    # ---------- 个人画像 / 经历润色 ----------

    async def summarize_persona(self) -> str:
        """只把启用的上下文交给 Oracle，结果直接返回、不落到任何职位上。"""
        context = self._require_active()
        return await self._generate(
            "summarize_persona",
            self.oracle.summarize_persona(self._oracle_context(context), language=self.language),
        )

    async def polish_experience(self, raw_text: str) -> str:
        """口语化经历 → 简历要点。不需要上下文；空输入抛 ValueError。"""
        if not raw_text or not raw_text.strip():
            raise ValueError("experience text must not be empty")
        return await self._generate(
            "polish_experience",
            self.oracle.polish_experience(self._oracle_description(raw_text.strip()), language=self.language),
        )

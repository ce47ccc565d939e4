"""
职位、分析结果与状态的数据模型。

AnalysisResult 是 Oracle 输出的数据边界：字段结构必须齐全（缺字段即视为 Oracle 失败），
分数范围只做说明、不做校验。
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional

from pydantic import Field, PrivateAttr, computed_field, field_validator

from resumefit.core.schema import CamelModel, FrozenCamelModel
from resumefit.profile.schemas import ContextItem


class JobStatus(str, Enum):
    """
    流水线生命周期：IDLE → ANALYZING → COMPLETED | ERROR。
    COMPLETED / ERROR 可再次进入 ANALYZING（重新分析）。
    """

    IDLE = "IDLE"
    ANALYZING = "ANALYZING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class ApplicationStatus(str, Enum):
    """用户自己维护的投递进度，与 JobStatus 互不影响。定义顺序即看板展示顺序。"""

    NOT_APPLIED = "NOT_APPLIED"
    WISHLIST = "WISHLIST"
    APPLIED = "APPLIED"
    INTERVIEWING = "INTERVIEWING"
    OFFER = "OFFER"
    REJECTED = "REJECTED"


FitLabel = Literal["High Fit", "Medium Fit", "Low Fit", "Overstretch"]
SuggestionType = Literal["rewrite", "add", "keyword"]


class CategoryScore(FrozenCamelModel):
    category: str = Field(..., description="维度，如 Hard Skills、Domain Knowledge、Experience Depth")
    score: float = Field(..., description="0–100")
    reason: str = Field(..., description="打分理由")


class LevelFit(FrozenCamelModel):
    label: str = Field(..., description="职位描述体现的职级，如 Senior Level")
    assessment: str = Field(..., description="候选人职级与职位职级的对比")


class TailoringSuggestion(FrozenCamelModel):
    type: SuggestionType = Field(..., description="rewrite / add / keyword")
    suggestion: str = Field(..., description="可执行的修改建议")
    reason: str = Field(..., description="为什么这样改有帮助")
    example: Optional[str] = Field(None, description="可直接粘贴的示例句或要点")


class JDStructure(FrozenCamelModel):
    """职位描述拆解后的结构。"""

    summary: str = Field("", description="职位概要")
    responsibilities: list[str] = Field(default_factory=list)
    qualifications: list[str] = Field(default_factory=list)
    preferred: list[str] = Field(default_factory=list)


class AnalysisResult(FrozenCamelModel):
    """岗位匹配分析（Oracle 输出）。"""

    overall_score: float = Field(..., description="综合匹配分 0–100")
    fit_label: FitLabel = Field(..., description="整体匹配结论")
    summary: str = Field(..., description="分析摘要")
    category_scores: list[CategoryScore] = Field(..., description="分维度打分")
    level_fit: LevelFit = Field(..., description="职级匹配")
    missing_keywords: list[str] = Field(..., description="职位要求但上下文中缺失的关键词")
    strong_matches: list[str] = Field(..., description="高度匹配的方面")
    tailoring_guide: list[TailoringSuggestion] = Field(..., description="简历改写指南")
    creative_connections: Optional[list[str]] = Field(
        None, description="爱好/价值观与职位之间的关联"
    )
    jd_structure: Optional[JDStructure] = Field(None, description="职位描述结构化拆解")


class AnalysisRecord(FrozenCamelModel):
    """一次成功分析：结果与所用上下文快照绑定，整体替换、从不单独修改。"""

    result: AnalysisResult
    snapshot: tuple[ContextItem, ...]
    generation: int
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Job(CamelModel):
    """
    一条职位。字段只由 JobPipeline / JobStore 的操作修改；
    流水线与存储返回的是存储中的实例，调用方只读，对外展示用 api.schemas.JobView 副本。

    result 与 used_context_snapshot 来自同一个 AnalysisRecord，且仅在 COMPLETED 时可见；
    分析失败或重新分析进行中时，上一次的记录保留在内部、不对外暴露。
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    company: str = ""
    description: str
    status: JobStatus = JobStatus.IDLE
    application_status: ApplicationStatus = ApplicationStatus.NOT_APPLIED
    tailored_resume: Optional[str] = None
    cover_letter: Optional[str] = None
    created_at: datetime = Field(default_factory=_now)
    analysis_generation: int = Field(0, exclude=True)

    _analysis: Optional[AnalysisRecord] = PrivateAttr(default=None)

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @computed_field(alias="result")
    @property
    def result(self) -> Optional[AnalysisResult]:
        if self.status is not JobStatus.COMPLETED or self._analysis is None:
            return None
        return self._analysis.result

    @computed_field(alias="usedContextSnapshot")
    @property
    def used_context_snapshot(self) -> Optional[tuple[ContextItem, ...]]:
        if self.status is not JobStatus.COMPLETED or self._analysis is None:
            return None
        return self._analysis.snapshot

    @property
    def analysis(self) -> Optional[AnalysisRecord]:
        """最近一次成功分析的记录（不论当前状态）。"""
        return self._analysis

    def _record_analysis(self, record: AnalysisRecord) -> None:
        """结果与快照一起写入并置为 COMPLETED。"""
        self._analysis = record
        self.status = JobStatus.COMPLETED

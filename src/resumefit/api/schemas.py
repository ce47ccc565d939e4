"""
HTTP 请求与响应模型（camelCase 对外，snake_case 亦可作为请求字段）。
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from resumefit.core.config import Language
from resumefit.core.schema import CamelModel
from resumefit.jobs.schemas import AnalysisResult, ApplicationStatus, Job, JobStatus
from resumefit.profile.schemas import ContextItem, ContextType


class ContextItemCreate(CamelModel):
    """POST /v1/context：粘贴文本新增一条上下文。"""
    type: ContextType = Field(ContextType.NOTE, description="resume / experience / hobby / value / note")
    title: Optional[str] = Field(None, description="标题，不填则用类型名")
    content: str = Field(..., description="正文")
    is_active: bool = Field(True, description="是否立即启用")


class ContextListResponse(CamelModel):
    items: list[ContextItem] = Field(default_factory=list)
    active_count: int = Field(0, description="启用条目数")


class JobView(CamelModel):
    """职位的对外视图：result 与 usedContextSnapshot 仅在 COMPLETED 时非空。"""
    id: str
    title: str
    company: str
    description: str
    status: JobStatus
    application_status: ApplicationStatus
    result: Optional[AnalysisResult] = None
    used_context_snapshot: Optional[list[ContextItem]] = None
    tailored_resume: Optional[str] = None
    cover_letter: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_job(cls, job: Job) -> "JobView":
        return cls.model_validate(job.model_dump())


class JobCreate(CamelModel):
    """POST /v1/jobs 请求。"""
    title: str = Field(..., description="职位名称")
    company: str = Field("", description="公司名称")
    description: str = Field(..., description="职位描述全文")
    auto_analyze: bool = Field(False, description="有启用上下文时立即开始分析")


class JobListResponse(CamelModel):
    jobs: list[JobView] = Field(default_factory=list, description="新→旧")
    total: int = Field(0, description="返回条数")


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class StatusCountsResponse(CamelModel):
    """六个投递状态桶始终齐全。"""
    counts: dict[ApplicationStatus, int]
    total: int


class PolishRequest(CamelModel):
    text: str = Field(..., description="口语化的经历描述，如 I managed a club event")


class TextResponse(CamelModel):
    text: str


class SessionSettings(CamelModel):
    language: Language = Field("en", description="Oracle 输出语言：en / ko")

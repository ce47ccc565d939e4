"""
ResumeFit HTTP 入口：每个 Bearer token 对应一个内存会话（上下文 + 职位 + 流水线）。

- 上下文：增删、启用开关、文件上传（MarkItDown 转文本）
- 职位：新建（可自动分析）、删除、投递状态、看板计数与筛选
- 流水线：分析 → 定制简历 → 求职信；个人画像；经历润色

错误统一为 {"detail": {"code", "message"}}：无启用上下文 409，Oracle 失败 502，不存在 404。
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Request, Response, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger

from resumefit.core.log import setup_logger
from resumefit.errors import JobNotFound, NoActiveContext, NotFound, OracleFailure, ResumeFitError
from resumefit.jobs.schemas import ApplicationStatus
from resumefit.profile.schemas import ContextItem, ContextType
from resumefit.session import Session
from .schemas import (
    ApplicationStatusUpdate,
    ContextItemCreate,
    ContextListResponse,
    JobCreate,
    JobListResponse,
    JobView,
    PolishRequest,
    SessionSettings,
    StatusCountsResponse,
    TextResponse,
)
from .session import SessionRegistry, get_bearer_token, get_session, session_key

_STATUS_BY_ERROR: list[tuple[type[ResumeFitError], int]] = [
    (NoActiveContext, 409),
    (NotFound, 404),
    (OracleFailure, 502),
]


def _error_body(code: str, message: str) -> dict:
    return {"detail": {"code": code, "message": message}}


def create_app(sessions: SessionRegistry | None = None) -> FastAPI:
    """构建应用；sessions 不传时使用按配置选择 Oracle 的默认会话表。"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logger()
        yield
        await app.state.sessions.close_all()

    app = FastAPI(
        title="ResumeFit API",
        description="ResumeFit：个人上下文 × 职位描述的匹配分析、定制简历与求职信",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.sessions = sessions if sessions is not None else SessionRegistry()

    @app.exception_handler(ResumeFitError)
    async def _handle_resumefit_error(request: Request, exc: ResumeFitError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
        if status >= 500:
            logger.warning("{} {} → {}: {}", request.method, request.url.path, status, exc)
        return JSONResponse(status_code=status, content=_error_body(exc.code, str(exc)))

    @app.exception_handler(ValueError)
    async def _handle_value_error(request: Request, exc: ValueError):
        return JSONResponse(status_code=422, content=_error_body("invalid_input", str(exc)))

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:

    @app.get("/health")
    def health():
        """探活。"""
        return {"status": "ok", "service": "resumefit"}

    # ---------- 会话 ----------

    @app.get("/v1/session", response_model=SessionSettings)
    async def get_settings(session: Session = Depends(get_session)):
        return SessionSettings(language=session.language)

    @app.put("/v1/session", response_model=SessionSettings)
    async def update_settings(body: SessionSettings, session: Session = Depends(get_session)):
        """切换 Oracle 输出语言（en / ko），之后的分析与生成都按此语言。"""
        session.language = body.language
        return SessionSettings(language=session.language)

    @app.delete("/v1/session", status_code=204)
    async def end_session(
        request: Request,
        authorization: Optional[str] = Header(None, alias="Authorization"),
    ):
        """结束当前 token 的会话：上下文与职位全部丢弃，下次请求会新建空会话。"""
        token = get_bearer_token(authorization)
        if not token:
            raise HTTPException(status_code=401, detail="missing or invalid authorization")
        await request.app.state.sessions.close(session_key(token))
        return Response(status_code=204)

    # ---------- 上下文 ----------

    @app.get("/v1/context", response_model=ContextListResponse)
    async def list_context(session: Session = Depends(get_session)):
        return ContextListResponse(
            items=session.contexts.items(),
            active_count=len(session.contexts.active()),
        )

    @app.post("/v1/context", response_model=ContextItem, status_code=201)
    async def add_context(body: ContextItemCreate, session: Session = Depends(get_session)):
        return session.contexts.add(
            content=body.content, type=body.type, title=body.title, is_active=body.is_active
        )

    @app.post("/v1/context/upload", response_model=ContextItem, status_code=201)
    async def upload_context(
        file: UploadFile = File(..., description="简历等文件（PDF / Word / 文本）"),
        type: ContextType = Form(ContextType.RESUME, description="上下文类型，默认 resume"),
        title: Optional[str] = Form(None, description="标题，默认文件名"),
        session: Session = Depends(get_session),
    ):
        """文件 → MarkItDown 文本 → 新增一条上下文（默认启用）。"""
        content = await file.read()
        if not content:
            raise ValueError("uploaded file is empty")
        from resumefit.ingest import context_item_from_upload

        item = context_item_from_upload(content, filename=file.filename or None, type=type, title=title)
        return session.contexts.add_item(item)

    @app.delete("/v1/context/{item_id}", status_code=204)
    async def remove_context(item_id: str, session: Session = Depends(get_session)):
        """删除上下文；不存在时同样返回 204。已有职位的快照不受影响。"""
        session.contexts.remove(item_id)
        return Response(status_code=204)

    @app.post("/v1/context/{item_id}/toggle", response_model=ContextItem)
    async def toggle_context(item_id: str, session: Session = Depends(get_session)):
        return session.contexts.toggle(item_id)

    @app.post("/v1/persona", response_model=TextResponse)
    async def summarize_persona(session: Session = Depends(get_session)):
        """基于启用的上下文生成个人画像摘要。"""
        return TextResponse(text=await session.pipeline.summarize_persona())

    @app.post("/v1/experience/polish", response_model=TextResponse)
    async def polish_experience(body: PolishRequest, session: Session = Depends(get_session)):
        """口语化经历 → 专业简历要点。"""
        return TextResponse(text=await session.pipeline.polish_experience(body.text))

    # ---------- 职位 ----------

    @app.get("/v1/jobs", response_model=JobListResponse)
    async def list_jobs(status: Optional[ApplicationStatus] = None, session: Session = Depends(get_session)):
        """全部职位（新→旧），可按投递状态筛选。"""
        jobs = session.jobs.list_jobs(status)
        return JobListResponse(jobs=[JobView.from_job(j) for j in jobs], total=len(jobs))

    @app.get("/v1/jobs/stats", response_model=StatusCountsResponse)
    async def job_stats(session: Session = Depends(get_session)):
        """看板计数：六个投递状态桶，空时全为 0。"""
        return StatusCountsResponse(counts=session.jobs.status_counts(), total=len(session.jobs))

    @app.post("/v1/jobs", response_model=JobView, status_code=201)
    async def add_job(body: JobCreate, session: Session = Depends(get_session)):
        """
        新建职位。autoAnalyze 且有启用上下文时返回 ANALYZING，分析在后台继续，
        之后通过 GET /v1/jobs/{id} 查看结果。
        """
        job = session.pipeline.add_job(
            title=body.title,
            company=body.company,
            description=body.description,
            auto_analyze=body.auto_analyze,
        )
        return JobView.from_job(job)

    @app.get("/v1/jobs/{job_id}", response_model=JobView)
    async def get_job(job_id: str, session: Session = Depends(get_session)):
        return JobView.from_job(session.jobs.get(job_id))

    @app.delete("/v1/jobs/{job_id}", status_code=204)
    async def delete_job(job_id: str, session: Session = Depends(get_session)):
        """删除职位；不存在时同样返回 204。"""
        session.pipeline.delete_job(job_id)
        return Response(status_code=204)

    @app.put("/v1/jobs/{job_id}/application-status", response_model=JobView)
    async def set_application_status(
        job_id: str,
        body: ApplicationStatusUpdate,
        session: Session = Depends(get_session),
    ):
        return JobView.from_job(session.pipeline.set_application_status(job_id, body.status))

    @app.post("/v1/jobs/{job_id}/analyze", response_model=JobView)
    async def analyze_job(job_id: str, session: Session = Depends(get_session)):
        """
        分析并等待结果。Oracle 失败时职位为 ERROR（仍返回 200）；
        无启用上下文返回 409，职位状态不变。
        """
        job = await session.pipeline.analyze(job_id)
        if job is None:
            raise JobNotFound(job_id)
        return JobView.from_job(job)

    @app.post("/v1/jobs/{job_id}/tailored-resume", response_model=JobView)
    async def tailor_resume(job_id: str, session: Session = Depends(get_session)):
        job = await session.pipeline.generate_tailored_resume(job_id)
        if job is None:
            raise JobNotFound(job_id)
        return JobView.from_job(job)

    @app.post("/v1/jobs/{job_id}/cover-letter", response_model=JobView)
    async def cover_letter(job_id: str, session: Session = Depends(get_session)):
        """生成求职信；已有定制简历时会一并参考。"""
        job = await session.pipeline.generate_cover_letter(job_id)
        if job is None:
            raise JobNotFound(job_id)
        return JobView.from_job(job)


app = create_app()

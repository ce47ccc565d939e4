"""
JobStore：会话内的职位集合，以及看板用的派生视图（按投递状态计数、筛选）。
"""
from __future__ import annotations

from loguru import logger

from resumefit.errors import JobNotFound
from .schemas import ApplicationStatus, Job


class JobStore:
    """职位集合；新职位放在最前，与看板展示顺序一致。"""

    def __init__(self) -> None:
        self._jobs: list[Job] = []

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return self.find(job_id) is not None  # type: ignore[arg-type]

    def insert(self, job: Job) -> Job:
        if job.id in self:
            raise ValueError(f"duplicate job id: {job.id}")
        self._jobs.insert(0, job)
        return job

    def find(self, job_id: str) -> Job | None:
        for job in self._jobs:
            if job.id == job_id:
                return job
        return None

    def get(self, job_id: str) -> Job:
        job = self.find(job_id)
        if job is None:
            raise JobNotFound(job_id)
        return job

    def delete(self, job_id: str) -> bool:
        """删除职位；不存在时为空操作，返回是否真的删除了。"""
        before = len(self._jobs)
        self._jobs = [j for j in self._jobs if j.id != job_id]
        removed = len(self._jobs) != before
        if removed:
            logger.debug("job deleted: {}", job_id)
        return removed

    def set_application_status(self, job_id: str, status: ApplicationStatus | str) -> Job:
        job = self.get(job_id)
        job.application_status = ApplicationStatus(status)
        return job

    def list_jobs(self, status: ApplicationStatus | str | None = None) -> list[Job]:
        """全部职位（新→旧）；给定 status 时只返回该投递状态的职位。"""
        if status is None:
            return list(self._jobs)
        wanted = ApplicationStatus(status)
        return [j for j in self._jobs if j.application_status is wanted]

    def status_counts(self) -> dict[ApplicationStatus, int]:
        """按投递状态计数：六个桶始终齐全，空集合时全为 0。"""
        counts = {s: 0 for s in ApplicationStatus}
        for job in self._jobs:
            counts[job.application_status] += 1
        return counts

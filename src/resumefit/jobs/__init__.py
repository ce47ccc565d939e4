"""
职位富化流水线：职位状态机 + 上下文快照 + 定制简历 / 求职信。
"""
from .schemas import (
    AnalysisRecord,
    AnalysisResult,
    ApplicationStatus,
    CategoryScore,
    JDStructure,
    Job,
    JobStatus,
    LevelFit,
    TailoringSuggestion,
)
from .store import JobStore
from .pipeline import AnalysisTicket, JobPipeline, parse_analysis

__all__ = [
    "AnalysisRecord",
    "AnalysisResult",
    "ApplicationStatus",
    "CategoryScore",
    "JDStructure",
    "Job",
    "JobStatus",
    "LevelFit",
    "TailoringSuggestion",
    "JobStore",
    "AnalysisTicket",
    "JobPipeline",
    "parse_analysis",
]

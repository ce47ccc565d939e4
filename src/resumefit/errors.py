"""
流水线错误分类：本地前置条件失败 / Oracle 失败 / 目标不存在。

HTTP 层按 code 映射为 409 / 502 / 404。
"""
from __future__ import annotations

NO_ACTIVE_CONTEXT_MESSAGES = {
    "en": "No active profile items found. Please activate at least one Resume or Context item!",
    "ko": "활성화된 프로필 항목이 없습니다. 최소 하나 이상의 이력서나 메모를 활성화해주세요!",
}


class ResumeFitError(Exception):
    """所有业务错误的基类。"""

    code = "resumefit_error"


class NoActiveContext(ResumeFitError):
    """需要上下文的操作发现没有启用条目；未发起任何 Oracle 调用，状态不变。"""

    code = "no_active_context"

    def __init__(self, language: str = "en") -> None:
        super().__init__(NO_ACTIVE_CONTEXT_MESSAGES.get(language, NO_ACTIVE_CONTEXT_MESSAGES["en"]))


class OracleFailure(ResumeFitError):
    """Oracle 调用失败：网络、超时、结构不合法或空响应。"""

    code = "oracle_failure"

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")


class NotFound(ResumeFitError):
    code = "not_found"
    kind = "entity"

    def __init__(self, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.kind} not found: {entity_id}")


class JobNotFound(NotFound):
    kind = "job"


class ContextItemNotFound(NotFound):
    kind = "context item"

"""
会话鉴权：从请求头取 Bearer token，按 token 找到（或创建）该用户的内存会话。

当前为 stub：任意非空 token 即一个独立会话，token 由前端生成并保存在本地。
"""
from __future__ import annotations

import re
from typing import Callable

from fastapi import Header, HTTPException, Request
from loguru import logger

from resumefit.core.config import Language
from resumefit.oracles.base import FitOracle
from resumefit.session import Session


def get_bearer_token(authorization: str | None = Header(None, alias="Authorization")) -> str | None:
    """从请求头取出 Bearer token；无头或格式不对返回 None。"""
    if not authorization or not isinstance(authorization, str):
        return None
    auth = authorization.strip()
    if not auth.lower().startswith("bearer "):
        return None
    token = auth[7:].strip()
    return token if token else None


def session_key(token: str) -> str:
    """token → 会话键（只保留安全字符，最长 64）。"""
    return re.sub(r"[^a-zA-Z0-9\-_]", "", token[:64]) or "anon"


class SessionRegistry:
    """进程内会话表；oracle_factory 决定每个新会话使用的 Oracle。"""

    def __init__(
        self,
        oracle_factory: Callable[[], FitOracle] | None = None,
        language: Language | None = None,
    ) -> None:
        self._oracle_factory = oracle_factory
        self._language = language
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get_or_create(self, key: str) -> Session:
        session = self._sessions.get(key)
        if session is None:
            oracle = self._oracle_factory() if self._oracle_factory else None
            session = Session.create(oracle=oracle, language=self._language)
            self._sessions[key] = session
            logger.info("session created: {}", key)
        return session

    async def close(self, key: str) -> bool:
        """结束单个会话：等待其进行中的分析后移出会话表；不存在时为空操作。"""
        session = self._sessions.pop(key, None)
        if session is None:
            return False
        await session.close()
        logger.info("session closed: {}", key)
        return True

    async def close_all(self) -> None:
        for key, session in list(self._sessions.items()):
            await session.close()
            logger.debug("session closed: {}", key)
        self._sessions.clear()


async def get_session(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
) -> Session:
    """依赖项：无 token 抛 401；否则返回该 token 对应的会话（首次访问时创建）。"""
    token = get_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="missing or invalid authorization")
    registry: SessionRegistry = request.app.state.sessions
    return registry.get_or_create(session_key(token))

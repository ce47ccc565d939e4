"""根据配置返回当前使用的 Oracle。"""
from resumefit.core.config import get_oracle_id
from resumefit.oracles.base import FitOracle
from resumefit.oracles.mock import MockFitOracle


def get_fit_oracle(oracle_id: str | None = None) -> FitOracle:
    """
    返回 Oracle 实例。
    oracle_id 可选：llm、mock。
    不传则从环境变量 RESUMEFIT_ORACLE 读取；未配置时有 API Key 用 llm，否则 mock。
    """
    oid = (oracle_id or get_oracle_id()).strip().lower()
    if oid == "llm":
        from resumefit.oracles.llm import LLMFitOracle
        return LLMFitOracle()
    if oid != "mock":
        raise ValueError(f"未知 Oracle: {oid}，支持 llm / mock")
    return MockFitOracle()

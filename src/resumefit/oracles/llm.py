"""
LLM Oracle：分析走 PydanticAI（output_type=AnalysisResult 定义数据边界，AI 只返回结构化结果），
文本生成走 LiteLLM 单轮问答。模型通过 RESUMEFIT_DEFAULT_MODEL 统一切换（gemini/openai/anthropic 等）。
"""
from __future__ import annotations

from typing import Any, Sequence

from loguru import logger

from resumefit.core.config import Language, get_default_model, llm_temperature
from resumefit.core.llm import ask_ai
from resumefit.core.tokens import count_tokens
from resumefit.jobs.schemas import AnalysisResult
from resumefit.profile.schemas import ContextItem
from . import prompts
from .base import FitOracle


class LLMFitOracle(FitOracle):
    """基于 LiteLLM 的 Oracle；Agent 懒加载，首次分析时才创建。"""

    def __init__(self, model: str | None = None, temperature: float | None = None):
        self.model = model or get_default_model()
        self.temperature = llm_temperature() if temperature is None else temperature
        self._agent: Any = None

    def _analysis_agent(self):
        if self._agent is None:
            from pydantic_ai import Agent
            from pydantic_ai_litellm import LiteLLMModel

            self._agent = Agent(
                model=LiteLLMModel(model_name=self.model),
                output_type=AnalysisResult,
                system_prompt=prompts.ANALYSIS_SYSTEM,
                model_settings={"temperature": self.temperature},
            )
        return self._agent

    def _log_request(self, operation: str, prompt: str) -> None:
        logger.debug("{} → {} (~{} input tokens)", operation, self.model, count_tokens(prompt, self.model))

    async def analyze(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        *,
        language: Language = "en",
    ) -> AnalysisResult:
        prompt = prompts.analysis_prompt(context, job_description, language)
        self._log_request("analyze", prompt)
        result = await self._analysis_agent().run(prompt)
        return result.output

    async def _ask(self, operation: str, system: str, prompt: str) -> str:
        self._log_request(operation, prompt)
        return await ask_ai(prompt, model=self.model, system=system)

    async def tailor_resume(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        *,
        language: Language = "en",
    ) -> str:
        return await self._ask(
            "tailor_resume",
            prompts.TAILOR_SYSTEM,
            prompts.tailor_prompt(context, job_description, language),
        )

    async def write_cover_letter(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        tailored_resume: str | None = None,
        *,
        language: Language = "en",
    ) -> str:
        return await self._ask(
            "write_cover_letter",
            prompts.COVER_LETTER_SYSTEM,
            prompts.cover_letter_prompt(context, job_description, tailored_resume, language),
        )

    async def summarize_persona(
        self,
        context: Sequence[ContextItem],
        *,
        language: Language = "en",
    ) -> str:
        return await self._ask(
            "summarize_persona",
            prompts.PERSONA_SYSTEM,
            prompts.persona_prompt(context, language),
        )

    async def polish_experience(self, raw_text: str, *, language: Language = "en") -> str:
        return await self._ask(
            "polish_experience",
            prompts.POLISH_SYSTEM,
            prompts.polish_prompt(raw_text, language),
        )

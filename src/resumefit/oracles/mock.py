"""Mock Oracle：关键词重叠打分 + 模板文本，无需外部 API，用于最小闭环、演示与测试。"""
from __future__ import annotations

import re
from collections import Counter
from typing import Sequence

from resumefit.core.config import Language
from resumefit.jobs.schemas import (
    AnalysisResult,
    CategoryScore,
    JDStructure,
    LevelFit,
    TailoringSuggestion,
)
from resumefit.profile.schemas import ContextItem, ContextType
from .base import FitOracle

_WORD = re.compile(r"[A-Za-z][A-Za-z0-9+#.\-]{2,}")

_STOPWORDS = {
    "and", "the", "for", "with", "you", "your", "our", "are", "will", "who", "that", "this",
    "have", "has", "from", "into", "about", "their", "they", "them", "able", "work", "team",
    "role", "years", "year", "experience", "strong", "skills", "ability", "including", "such",
    "using", "within", "across", "other", "more", "must", "should", "plus", "well", "what",
    "job", "we're", "join", "looking", "candidate", "responsibilities", "requirements",
}

_SENIORITY = (
    ("principal", "Principal Level"),
    ("staff", "Staff Level"),
    ("director", "Director Level"),
    ("lead", "Lead Level"),
    ("senior", "Senior Level"),
    ("junior", "Junior Level"),
    ("intern", "Internship"),
)


_TEMPLATES: dict[str, dict[str, str]] = {
    "en": {
        "summary": "{matched} of {total} key terms from the job description appear in the active profile ({pct:.0f}%).",
        "resume_title": "# Tailored Resume",
        "focus": "**Focus:** {terms}",
        "letter": "Dear Hiring Team,\n\n{body}\n\nI would welcome the chance to talk.\n\nBest regards,\nCandidate",
        "letter_match": "My background in {terms} matches what you are looking for.",
        "letter_generic": "I am excited by the challenges this role describes.",
        "letter_resume": "The attached resume highlights the most relevant parts of my experience.",
        "persona_title": "## Profile Summary",
        "themes": "Recurring themes: {terms}",
    },
    "ko": {
        "summary": "채용 공고의 핵심 키워드 {total}개 중 {matched}개가 활성 프로필에 있습니다 ({pct:.0f}%).",
        "resume_title": "# 맞춤 이력서",
        "focus": "**핵심 역량:** {terms}",
        "letter": "채용 담당자님께,\n\n{body}\n\n이야기를 나눌 기회를 주시면 감사하겠습니다.\n\n감사합니다.\n지원자 드림",
        "letter_match": "{terms} 분야의 경험이 귀사가 찾는 역량과 잘 맞습니다.",
        "letter_generic": "이 직무가 제시하는 도전 과제에 큰 기대를 가지고 있습니다.",
        "letter_resume": "첨부한 이력서에 가장 관련 있는 경험을 정리했습니다.",
        "persona_title": "## 프로필 요약",
        "themes": "반복되는 주제: {terms}",
    },
}


def _text(language: str, key: str) -> str:
    return _TEMPLATES.get(language, _TEMPLATES["en"])[key]


def _terms(text: str) -> list[str]:
    words = (w.strip(".-").lower() for w in _WORD.findall(text or ""))
    return [w for w in words if len(w) >= 3 and w not in _STOPWORDS]


def _top_terms(text: str, limit: int = 25) -> list[str]:
    return [w for w, _ in Counter(_terms(text)).most_common(limit)]


def _fit_label(score: float) -> str:
    if score >= 75:
        return "High Fit"
    if score >= 50:
        return "Medium Fit"
    if score >= 25:
        return "Low Fit"
    return "Overstretch"


def _level(job_description: str) -> str:
    text = (job_description or "").lower()
    for marker, label in _SENIORITY:
        if marker in text:
            return label
    return "Mid Level"


def _jd_structure(job_description: str) -> JDStructure:
    lines = [ln.strip(" -*•\t") for ln in (job_description or "").splitlines() if ln.strip()]
    bullets = [ln for ln in lines[1:] if len(ln) < 200]
    return JDStructure(
        summary=lines[0][:300] if lines else "",
        responsibilities=bullets[:5],
        qualifications=bullets[5:10],
        preferred=[ln for ln in bullets if "prefer" in ln.lower() or "bonus" in ln.lower()][:5],
    )


def _profile_terms(context: Sequence[ContextItem], types: set[ContextType] | None = None) -> set[str]:
    terms: set[str] = set()
    for item in context:
        if types is None or item.type in types:
            terms.update(_terms(item.content))
    return terms


def _overlap_score(jd_terms: list[str], profile: set[str]) -> float:
    if not jd_terms:
        return 0.0
    return round(100.0 * sum(1 for t in jd_terms if t in profile) / len(jd_terms), 1)


class MockFitOracle(FitOracle):
    """
    确定性 Oracle：同样的输入总是返回同样的分析与文本。
    摘要与各类文本按 language 出英文或韩文模板；关键词、分维度名称等保持英文。
    """

    async def analyze(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        *,
        language: Language = "en",
    ) -> AnalysisResult:
        jd_terms = _top_terms(job_description)
        profile = _profile_terms(context)
        work = _profile_terms(context, {ContextType.RESUME, ContextType.EXPERIENCE})
        overall = _overlap_score(jd_terms, profile)
        matched = [t for t in jd_terms if t in profile]
        missing = [t for t in jd_terms if t not in profile]
        work_items = sum(1 for i in context if i.type in (ContextType.RESUME, ContextType.EXPERIENCE))

        connections: list[str] = []
        for item in context:
            if item.type not in (ContextType.HOBBY, ContextType.VALUE):
                continue
            common = [t for t in jd_terms if t in set(_terms(item.content))]
            if common:
                connections.append(f"{item.title} connects to {', '.join(common[:3])}")

        guide = [
            TailoringSuggestion(
                type="keyword",
                suggestion=f"Mention '{kw}' where your experience supports it",
                reason="The job description emphasises it but your profile does not mention it.",
            )
            for kw in missing[:3]
        ]
        if matched:
            guide.append(
                TailoringSuggestion(
                    type="rewrite",
                    suggestion=f"Lead your summary with {', '.join(matched[:3])}",
                    reason="These are your strongest overlaps with the role.",
                    example=f"Delivered results with {matched[0]} in production settings.",
                )
            )

        return AnalysisResult(
            overall_score=overall,
            fit_label=_fit_label(overall),
            summary=_text(language, "summary").format(matched=len(matched), total=len(jd_terms), pct=overall),
            category_scores=[
                CategoryScore(category="Hard Skills", score=overall, reason="Keyword overlap with the full profile."),
                CategoryScore(
                    category="Domain Knowledge",
                    score=_overlap_score(jd_terms, work),
                    reason="Keyword overlap with resumes and experience notes only.",
                ),
                CategoryScore(
                    category="Experience Depth",
                    score=min(100.0, 25.0 * work_items + overall / 2),
                    reason=f"{work_items} resume or experience item(s) in the active profile.",
                ),
            ],
            level_fit=LevelFit(
                label=_level(job_description),
                assessment="Seniority inferred from the job title and description keywords.",
            ),
            missing_keywords=missing[:10],
            strong_matches=matched[:10],
            tailoring_guide=guide,
            creative_connections=connections or None,
            jd_structure=_jd_structure(job_description),
        )

    async def tailor_resume(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        *,
        language: Language = "en",
    ) -> str:
        focus = [t for t in _top_terms(job_description, 10) if t in _profile_terms(context)]
        parts = [_text(language, "resume_title"), ""]
        if focus:
            parts += [_text(language, "focus").format(terms=", ".join(focus)), ""]
        for item in context:
            if item.type in (ContextType.RESUME, ContextType.EXPERIENCE):
                parts += [f"## {item.title}", item.content.strip(), ""]
        return "\n".join(parts).strip()

    async def write_cover_letter(
        self,
        context: Sequence[ContextItem],
        job_description: str,
        tailored_resume: str | None = None,
        *,
        language: Language = "en",
    ) -> str:
        focus = [t for t in _top_terms(job_description, 10) if t in _profile_terms(context)][:3]
        body = (
            _text(language, "letter_match").format(terms=", ".join(focus))
            if focus
            else _text(language, "letter_generic")
        )
        if tailored_resume:
            body += " " + _text(language, "letter_resume")
        return _text(language, "letter").format(body=body)

    async def summarize_persona(
        self,
        context: Sequence[ContextItem],
        *,
        language: Language = "en",
    ) -> str:
        counts = Counter(item.type for item in context)
        lines = [_text(language, "persona_title"), ""]
        for ctype in ContextType:
            if counts[ctype]:
                lines.append(f"- {ctype.heading.title()}: {counts[ctype]}")
        themes = _top_terms(" ".join(item.content for item in context), 5)
        if themes:
            lines += ["", _text(language, "themes").format(terms=", ".join(themes))]
        return "\n".join(lines)

    async def polish_experience(self, raw_text: str, *, language: Language = "en") -> str:
        sentences = [s.strip() for s in re.split(r"[.\n]+", raw_text or "") if s.strip()]
        return "\n".join(f"- {s[0].upper()}{s[1:]}" for s in sentences[:4])

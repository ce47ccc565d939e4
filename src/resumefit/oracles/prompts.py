"""
LLM Oracle 的 Prompt：系统提示词 + 用户消息拼装。

上下文按 ContextType 顺序分组（简历在前，笔记在后），同组内保持插入顺序。
"""
from __future__ import annotations

from typing import Sequence

from resumefit.core.config import Language
from resumefit.profile.schemas import ContextItem, ContextType


def language_instruction(language: Language) -> str:
    if language == "ko":
        return "Write the entire output in Korean (한국어)."
    return "Write the entire output in English, unless the inputs are in Korean, then answer in Korean."


ANALYSIS_SYSTEM = (
    "You are an objective, strict technical recruiter and career coach. "
    "Compare the candidate's profile (resumes, experience notes, hobbies, values, notes) with the job "
    "description and return ONLY the structured analysis, no preface or explanation.\n"
    "Rules:\n"
    "- overallScore: 0-100, keep a high bar; 100 means a perfect candidate.\n"
    "- fitLabel: one of High Fit, Medium Fit, Low Fit, Overstretch.\n"
    "- categoryScores: at least Hard Skills, Domain Knowledge, Experience Depth, each 0-100 with a reason.\n"
    "- levelFit: seniority the JD targets and whether the candidate is under, over or on level.\n"
    "- missingKeywords: critical JD terms absent from the profile; strongMatches: clear matches.\n"
    "- tailoringGuide: concrete rewrite/add/keyword suggestions translating generic experience into the "
    "JD's language, with an example bullet when possible.\n"
    "- creativeConnections: links between hobbies/values and the role, if any.\n"
    "- jdStructure: summary, responsibilities, qualifications, preferred items of the JD."
)

TAILOR_SYSTEM = (
    "You are an expert resume writer. Using only facts found in the candidate's profile, write a complete "
    "resume in Markdown tailored to the job description: reorder and reword experience to mirror the JD's "
    "terminology, surface relevant hobbies or values only when they strengthen the fit, never invent "
    "employers, titles, dates or metrics. Output the resume only."
)

COVER_LETTER_SYSTEM = (
    "You are an expert career writer. Write a concise, specific cover letter (under 400 words) for the job "
    "description, grounded in the candidate's profile. If a tailored resume is provided, keep the letter "
    "consistent with it. Avoid placeholders such as [Your Name]; sign with the candidate's name if it "
    "appears in the profile. Output the letter only."
)

PERSONA_SYSTEM = (
    "You are a perceptive career coach. Read the candidate's profile and write a short Markdown profile "
    "summary: core strengths, working style, what motivates them, and the kinds of roles where they would "
    "thrive. Connect hobbies and values to professional traits where it is natural."
)

POLISH_SYSTEM = (
    "You turn plain, informal descriptions of something a person did into 2-4 professional resume bullet "
    "points: start with strong action verbs, quantify impact when the text supports it, and do not invent "
    "facts. Output the bullets only."
)


def format_context(context: Sequence[ContextItem]) -> str:
    """按类型分组拼装上下文文本；调用方负责事先截断内容。"""
    ordered = sorted(enumerate(context), key=lambda pair: (pair[1].type.order, pair[0]))
    sections: list[str] = []
    current: ContextType | None = None
    for _, item in ordered:
        if item.type is not current:
            current = item.type
            sections.append(f"### {current.heading}")
        sections.append(f"[{item.title}]\n{item.content.strip()}")
    return "\n\n".join(sections)


def analysis_prompt(context: Sequence[ContextItem], job_description: str, language: Language) -> str:
    return (
        f"{language_instruction(language)}\n\n"
        f"CANDIDATE PROFILE:\n{format_context(context)}\n\n"
        f"JOB DESCRIPTION:\n{job_description}"
    )


def tailor_prompt(context: Sequence[ContextItem], job_description: str, language: Language) -> str:
    return analysis_prompt(context, job_description, language)


def cover_letter_prompt(
    context: Sequence[ContextItem],
    job_description: str,
    tailored_resume: str | None,
    language: Language,
) -> str:
    prompt = analysis_prompt(context, job_description, language)
    if tailored_resume:
        prompt += f"\n\nTAILORED RESUME:\n{tailored_resume}"
    return prompt


def persona_prompt(context: Sequence[ContextItem], language: Language) -> str:
    return f"{language_instruction(language)}\n\nCANDIDATE PROFILE:\n{format_context(context)}"


def polish_prompt(raw_text: str, language: Language) -> str:
    return f"{language_instruction(language)}\n\nRAW EXPERIENCE:\n{raw_text}"

#!/usr/bin/env python3
"""
用本地简历跑一遍完整流水线：MarkItDown 转文本 → 上下文 → 新建职位 → 分析 → 定制简历 → 求职信。
用法: uv run python scripts/analyze_job.py <简历文件> <职位描述文件> [--oracle mock|llm] [--lang en|ko]
未配置任何 API Key 时自动使用 mock Oracle。
"""
import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from resumefit.core.log import setup_logger
from resumefit.ingest import context_item_from_upload, file_to_markdown
from resumefit.jobs import JobStatus
from resumefit.oracles import get_fit_oracle
from resumefit.session import Session


async def run(resume: Path, jd_path: Path, oracle_id: str | None, language: str | None) -> int:
    session = Session.create(oracle=get_fit_oracle(oracle_id), language=language)

    print(f"=== 1. MarkItDown 转换: {resume.name} ===\n")
    item = session.contexts.add_item(context_item_from_upload(resume.read_bytes(), filename=resume.name))
    print(item.content[:1500] + ("..." if len(item.content) > 1500 else ""))
    print()

    description = file_to_markdown(jd_path)
    title = description.strip().splitlines()[0][:80] if description.strip() else jd_path.stem
    job = session.pipeline.add_job(title=title, company="", description=description)

    print(f"=== 2. 匹配分析: {job.title} ===\n")
    await session.pipeline.analyze(job.id)
    if job.status is not JobStatus.COMPLETED:
        print("分析失败，请检查 .env 中的 API Key 与 RESUMEFIT_DEFAULT_MODEL。")
        await session.close()
        return 1
    result = job.result
    print(f"综合分: {result.overall_score:.0f} | {result.fit_label}")
    print(f"摘要: {result.summary}")
    for cat in result.category_scores:
        print(f"  - {cat.category}: {cat.score:.0f}  {cat.reason}")
    print(f"职级: {result.level_fit.label} | {result.level_fit.assessment}")
    print(f"缺失关键词: {result.missing_keywords[:8]}")
    print(f"强匹配: {result.strong_matches[:8]}\n")

    print("=== 3. 定制简历 ===\n")
    await session.pipeline.generate_tailored_resume(job.id)
    print(job.tailored_resume, "\n")

    print("=== 4. 求职信 ===\n")
    await session.pipeline.generate_cover_letter(job.id)
    print(job.cover_letter, "\n")

    await session.close()
    print("=== 完成 ===")
    return 0


def main():
    parser = argparse.ArgumentParser(description="ResumeFit 本地流水线演示")
    parser.add_argument("resume", type=Path, help="简历文件（PDF / Word / 文本）")
    parser.add_argument("job_description", type=Path, help="职位描述文件")
    parser.add_argument("--oracle", choices=("mock", "llm"), default=None)
    parser.add_argument("--lang", choices=("en", "ko"), default=None)
    args = parser.parse_args()

    setup_logger()
    for path in (args.resume, args.job_description):
        if not path.exists():
            print(f"文件不存在: {path}")
            sys.exit(1)
    try:
        code = asyncio.run(run(args.resume, args.job_description, args.oracle, args.lang))
    except Exception as e:
        logger.exception("流水线失败: {}", e)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()

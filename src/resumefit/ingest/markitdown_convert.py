"""
MarkItDown：上传的简历等文件统一转 Markdown 文本，再落成一条 resume 类型的上下文。

支持 PDF、Word、HTML 等；纯文本文件直接按 UTF-8 解码，不经过转换器。
扫描件或复杂图片表格解析效果会有波动，主要处理文字层。
"""
from __future__ import annotations

import io
import os
from pathlib import Path
from typing import BinaryIO

from loguru import logger
from markitdown import MarkItDown, StreamInfo

from resumefit.profile.schemas import ContextItem, ContextType

_PLAIN_TEXT_EXTENSIONS = {".txt", ".md", ".markdown"}

_converter_instance: MarkItDown | None = None


def _converter() -> MarkItDown:
    """单例式获取转换器，避免重复初始化。"""
    global _converter_instance
    if _converter_instance is None:
        _converter_instance = MarkItDown()
    return _converter_instance


def _extension(filename: str | None, file_extension: str | None) -> str:
    ext = file_extension or (os.path.splitext(filename)[1] if filename else "")
    return ext.lower()


def stream_to_markdown(
    stream: BinaryIO,
    *,
    filename: str | None = None,
    file_extension: str | None = None,
) -> str:
    """
    二进制流（如上传文件内容）→ Markdown 字符串。
    filename: 原始文件名，用于推断类型（如 resume.pdf）。
    file_extension: 若已知扩展名可直接传入（如 .pdf）；否则从 filename 推断。
    """
    ext = _extension(filename, file_extension)
    if ext in _PLAIN_TEXT_EXTENSIONS:
        return stream.read().decode("utf-8", errors="replace")
    stream_info = StreamInfo(extension=ext or None, filename=filename) if (ext or filename) else None
    return _converter().convert_stream(stream, stream_info=stream_info).markdown


def file_to_markdown(path: str | Path) -> str:
    """本地文件 → Markdown 字符串。"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"文件不存在: {path}")
    with open(path, "rb") as f:
        return stream_to_markdown(f, filename=path.name)


def context_item_from_upload(
    content: bytes,
    filename: str | None = None,
    type: ContextType | str = ContextType.RESUME,
    title: str | None = None,
) -> ContextItem:
    """
    上传文件 → ContextItem（默认 resume 类型，标题为文件名）。
    抽取结果为空时抛 ValueError，由调用方提示用户。
    """
    text = stream_to_markdown(io.BytesIO(content), filename=filename)
    if not text.strip():
        raise ValueError(f"no text could be extracted from {filename or 'upload'}")
    ctype = ContextType(type)
    logger.debug("extracted {} chars from {}", len(text), filename or "upload")
    return ContextItem(
        type=ctype,
        title=(title or "").strip() or filename or ctype.default_title,
        content=text,
    )

# MarkItDown 文档转换：上传文件 → 文本 → 上下文条目

from .markitdown_convert import (
    context_item_from_upload,
    file_to_markdown,
    stream_to_markdown,
)

__all__ = [
    "context_item_from_upload",
    "file_to_markdown",
    "stream_to_markdown",
]

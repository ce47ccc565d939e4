"""
loguru 日志配置：控制台 + 可选文件。

各模块直接 `from loguru import logger` 打日志；入口（API、脚本）启动时调用一次 setup_logger。
"""
import sys
from pathlib import Path

from loguru import logger

from resumefit.core.config import get_log_dir, log_level

_CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | {name} | <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name}:{line} | {message}"

_configured = False


def setup_logger(level: str | None = None, log_dir: Path | None = None) -> Path | None:
    """
    替换 loguru 默认 sink：控制台按 level 输出；给定 log_dir（或 RESUMEFIT_LOG_DIR）时
    额外写入 <log_dir>/resumefit.log（DEBUG 级）。重复调用无副作用。
    返回日志文件路径，未写文件时返回 None。
    """
    global _configured
    log_dir = log_dir or get_log_dir()
    log_file = log_dir / "resumefit.log" if log_dir else None
    if _configured:
        return log_file

    logger.remove()
    logger.add(sys.stderr, format=_CONSOLE_FORMAT, level=level or log_level(), colorize=True)
    if log_file is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=_FILE_FORMAT, level="DEBUG", encoding="utf-8")
    _configured = True
    return log_file

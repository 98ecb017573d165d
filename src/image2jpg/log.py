"""日志配置模块"""

import logging
from pathlib import Path

LOGGER_NAME = "image2jpg"
LOG_FORMAT = "%(asctime)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file: str | Path | None = None, verbose: bool = False) -> logging.Logger:
    """
    配置 image2jpg 日志

    库本身不会在导入时配置日志，由命令行入口或调用方决定。

    Args:
        log_file: 追加写入的日志文件，父目录不存在时自动创建
        verbose: 是否输出调试信息

    Returns:
        image2jpg 根日志对象
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root

#!/usr/bin/env python3
"""
图像转 JPEG 命令行入口
用法：
    uv run python -m image2jpg input.png output.jpg
    uv run python -m image2jpg -c config.json
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config_data import AppConfig
from .converter import ImageConverter
from .errors import Image2JpgError
from .log import setup_logging
from .progress import TaskProcessor
from .worker import is_shutdown, setup_signal_handlers

logger = logging.getLogger(__name__)

USAGE_MESSAGE = """\
image2jpg 把数据库图像字段或图像文件（PNG/BMP/GIF 等）转换为 JPEG。

在代码中使用：
    from image2jpg import ImageConverter
    jpg_bytes = ImageConverter().convert_to_jpg(image_data)

命令行：
    image2jpg INPUT OUTPUT        转换单个文件
    image2jpg -c config.json      按配置文件批量转换
    image2jpg --help              查看全部参数"""


def build_parser() -> argparse.ArgumentParser:
    """构建命令行参数解析器"""
    p = argparse.ArgumentParser(prog="image2jpg", description="图像转 JPEG (质量 100)")
    p.add_argument("input", nargs="?", type=Path, help="输入图像文件")
    p.add_argument("output", nargs="?", type=Path, help="输出 JPEG 文件")
    p.add_argument("-c", "--config", type=Path, help="批量任务配置文件")
    p.add_argument("--log-file", type=Path, help="追加写入的日志文件")
    p.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def run_single(inp: Path, out: Path) -> int:
    """转换单个文件"""
    try:
        ImageConverter().convert_file_to_jpg(inp, out)
    except (Image2JpgError, OSError) as e:
        print(f"❌ {e}", flush=True)
        return 1
    print(f"✓ {inp} → {out}", flush=True)
    return 0


def run_config(config_path: Path, log_file: Path | None, verbose: bool) -> int:
    """按配置文件执行所有启用的任务"""
    if not config_path.exists():
        print(f"❌ 配置不存在：{config_path}", flush=True)
        return 1

    cfg = AppConfig.from_file(config_path)
    if cfg.log_file and not log_file:
        setup_logging(cfg.log_file, verbose)

    tasks = cfg.get_enabled_tasks()
    if not tasks:
        print("⚠️  无任务", flush=True)
        return 0

    print("=" * 60, flush=True)
    print(f"🚀 image2jpg {__version__}", flush=True)
    print("=" * 60, flush=True)
    print(f"📁 配置：{config_path}", flush=True)
    print(f"📝 任务：{len(tasks)}", flush=True)

    setup_signal_handlers()
    processor = TaskProcessor(max_workers=cfg.max_workers)

    ok = fail = skip = 0
    for task in tasks:
        if is_shutdown():
            print("⚠️  已停止", flush=True)
            break
        result = processor.process(task)
        ok += result.success
        fail += result.failed
        skip += result.skipped

    print("\n" + "=" * 60, flush=True)
    print(f"📊 总计：成功{ok}, 失败{fail}, 跳过{skip}", flush=True)
    print("=" * 60, flush=True)
    logger.info("批量转换结束：成功%d, 失败%d, 跳过%d", ok, fail, skip)
    return 0 if fail == 0 else 1


def main(argv: list[str] | None = None) -> int:
    """命令行入口，返回退出码"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_file, args.verbose)

    if args.config:
        return run_config(args.config, args.log_file, args.verbose)

    if args.input is None:
        print(USAGE_MESSAGE, flush=True)
        return 0

    if args.output is None:
        parser.error("需要同时指定 INPUT 和 OUTPUT")

    return run_single(args.input, args.output)


if __name__ == "__main__":
    sys.exit(main())

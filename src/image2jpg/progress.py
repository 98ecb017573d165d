"""进度显示和批量任务执行模块"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from .config_data import TaskConfig
from .converter import ImageConverter
from .errors import Image2JpgError
from .worker import is_shutdown

logger = logging.getLogger(__name__)

OUTPUT_EXT = ".jpg"


@dataclass
class TaskResult:
    """任务执行结果"""

    success: int = 0
    failed: int = 0
    skipped: int = 0


class ProgressBar:
    """进度条显示"""

    def __init__(self, total: int, description: str = ""):
        self.total = total
        self.current = 0
        self.description = description
        self.start_time = time.time()
        self.lock = threading.Lock()

    def update(self, n: int = 1):
        """更新进度"""
        with self.lock:
            self.current = min(self.current + n, self.total)
            self._display()

    def _display(self):
        if self.total == 0:
            return

        elapsed = time.time() - self.start_time
        percentage = self.current / self.total * 100
        eta = elapsed * (self.total - self.current) / self.current if self.current else 0

        bar_length = 30
        filled_length = int(bar_length * self.current // self.total)
        bar = "█" * filled_length + "·" * (bar_length - filled_length)

        # 原地刷新
        print(
            f"\r{self.description} |{bar}| {percentage:5.1f}% [{self.current}/{self.total}] "
            f"{elapsed:5.1f}s 剩{eta:5.1f}s",
            end="",
            flush=True,
        )
        if self.current >= self.total:
            print()

    def close(self):
        """完成进度条"""
        with self.lock:
            if self.current < self.total:
                self.current = self.total
                self._display()


def find_files(directory: Path, extensions: set[str]) -> list[Path]:
    """
    查找目录下指定扩展名的文件（不递归）

    Args:
        directory: 搜索目录
        extensions: 小写扩展名集合（包含点）

    Returns:
        排序后的文件路径列表
    """
    if not directory.is_dir():
        return []
    return sorted(
        f for f in directory.iterdir() if f.is_file() and f.suffix.lower() in extensions
    )


class TaskProcessor:
    """任务处理器（多线程）"""

    def __init__(
        self,
        converter: ImageConverter | None = None,
        max_workers: int = 8,
        batch_size: int = 50,
        show_progress: bool = True,
    ):
        """
        Args:
            converter: 转换器，默认新建一个 ImageConverter
            max_workers: 最大工作线程数
            batch_size: 批处理大小
            show_progress: 是否显示进度条
        """
        self.converter = converter or ImageConverter()
        self.max_workers = max_workers
        self.batch_size = batch_size
        self.show_progress = show_progress

    def process(self, task: TaskConfig) -> TaskResult:
        """处理单个任务"""
        input_dir = Path(task.input_path)
        output_dir = task.resolve_output_path()

        if not input_dir.is_dir():
            print(f"❌ [{task.name}] 目录不存在：{input_dir}", flush=True)
            logger.warning("任务 %s 输入目录不存在：%s", task.name, input_dir)
            return TaskResult()

        try:
            extensions = task.source_extensions()
        except ValueError as e:
            print(f"❌ [{task.name}] {e}", flush=True)
            logger.warning("任务 %s 配置无效：%s", task.name, e)
            return TaskResult()

        output_dir.mkdir(parents=True, exist_ok=True)

        files = find_files(input_dir, extensions)
        total = len(files)
        if total == 0:
            print(f"⚠️  [{task.name}] 未找到文件 (格式：{task.resolve_input_format()})", flush=True)
            return TaskResult()

        self._print_task_info(task, input_dir, output_dir, total)

        jobs = self._prepare_jobs(files, output_dir, task.skip_existing)
        skipped = total - len(jobs)
        if not jobs:
            print("✅ 所有文件已存在", flush=True)
            return TaskResult(skipped=skipped)

        result = self._execute_batches(jobs)
        result.skipped += skipped
        return result

    def _prepare_jobs(
        self, files: list[Path], output_dir: Path, skip_existing: bool
    ) -> list[tuple[Path, Path]]:
        """
        准备转换任务列表

        同名不同扩展名的输入（a.png 与 a.gif）改用完整文件名，
        与已分配的名字冲突时再追加序号，保证输出路径互不相同。

        Returns:
            [(输入文件，输出文件), ...]
        """
        stems: dict[str, int] = {}
        for f in files:
            stems[f.stem] = stems.get(f.stem, 0) + 1

        jobs = []
        used: set[str] = set()
        for f in files:
            name = f.stem if stems[f.stem] == 1 else f.name
            if name in used:
                name = f.name
            n = 1
            while name in used:
                name = f"{f.name}.{n}"
                n += 1
            used.add(name)

            out_path = output_dir / f"{name}{OUTPUT_EXT}"
            if skip_existing and out_path.exists():
                continue
            jobs.append((f, out_path))
        return jobs

    def _print_task_info(
        self, task: TaskConfig, input_dir: Path, output_dir: Path, total: int
    ) -> None:
        separator = "=" * 60
        print(f"\n{separator}", flush=True)
        print(f"📋 任务：{task.name}", flush=True)
        print(f"   输入：{input_dir}", flush=True)
        print(f"   输出：{output_dir}", flush=True)
        print(f"   转换：{task.conversion_direction}", flush=True)
        print(f"   文件：{total}", flush=True)
        print(f"{separator}", flush=True)

    def _execute_batches(self, jobs: list[tuple[Path, Path]]) -> TaskResult:
        """批处理 + 多线程执行转换"""
        to_process = len(jobs)
        result = TaskResult()

        batches = [jobs[i:i + self.batch_size] for i in range(0, to_process, self.batch_size)]
        print(
            f"🔄 开始处理 ({to_process} 个文件，{len(batches)} 批，{self.max_workers} 线程)...",
            flush=True,
        )

        progress = ProgressBar(to_process, "处理进度") if self.show_progress else None
        start_time = time.time()

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._process_batch, batch, progress): batch
                for batch in batches
            }
            for future in as_completed(futures):
                batch_result = future.result()
                result.success += batch_result.success
                result.failed += batch_result.failed
                result.skipped += batch_result.skipped

        if progress:
            progress.close()

        if result.skipped:
            print(f"\n⚠️  中断，已处理 {result.success + result.failed}/{to_process}", flush=True)

        elapsed = max(time.time() - start_time, 1e-6)
        print(
            f"\n✅ 成功:{result.success}, 失败:{result.failed} "
            f"(耗时:{elapsed:.0f}秒，速度:{to_process / elapsed:.1f}文件/秒)",
            flush=True,
        )
        return result

    def _process_batch(
        self, batch: list[tuple[Path, Path]], progress: ProgressBar | None
    ) -> TaskResult:
        """处理单个批次；收到关闭信号后剩余文件不再转换"""
        batch_result = TaskResult()

        for inp, out in batch:
            if is_shutdown():
                batch_result.skipped += 1
                continue
            try:
                self.converter.convert_file_to_jpg(inp, out)
                batch_result.success += 1
            except (Image2JpgError, OSError) as e:
                batch_result.failed += 1
                print(f"\n✗ {inp.name} - {e}", flush=True)
                logger.warning("转换失败 %s: %s", inp, e)
            if progress:
                progress.update()

        return batch_result

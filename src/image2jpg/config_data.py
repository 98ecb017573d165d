"""配置处理模块"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal


InputFormat = Literal["png", "bmp", "gif", "tiff", "webp", "heic", "avif", "jxl", "auto", ""]

# 各输入格式对应的扩展名（不区分大小写）
EXTENSIONS: dict[str, set[str]] = {
    "png": {".png"},
    "bmp": {".bmp", ".dib"},
    "gif": {".gif"},
    "tiff": {".tif", ".tiff"},
    "webp": {".webp"},
    "heic": {".heic", ".heif"},
    "avif": {".avif"},
    "jxl": {".jxl"},
}


@dataclass
class TaskConfig:
    """任务配置"""

    name: str = "未命名"
    input_path: str = ""
    output_path: str | None = None
    input_format: InputFormat = ""
    skip_existing: bool = True
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "TaskConfig":
        """从字典创建配置"""
        return cls(
            name=data.get("name", "未命名"),
            input_path=data.get("input_path", ""),
            output_path=data.get("output_path"),
            input_format=data.get("input_format", "").lower(),  # type: ignore
            skip_existing=data.get("skip_existing", True),
            enabled=data.get("enabled", True),
        )

    def resolve_output_path(self) -> Path:
        """解析输出路径，如果未指定则根据输入路径生成"""
        if self.output_path:
            return Path(self.output_path)
        return Path(self.input_path) / "converted_jpg"

    def resolve_input_format(self) -> InputFormat:
        """解析输入格式，未指定时为 auto"""
        return self.input_format or "auto"

    def source_extensions(self) -> set[str]:
        """需要处理的文件扩展名"""
        fmt = self.resolve_input_format()
        if fmt == "auto":
            return set().union(*EXTENSIONS.values())
        if fmt not in EXTENSIONS:
            raise ValueError(f"未知格式：{fmt}")
        return EXTENSIONS[fmt]

    @property
    def conversion_direction(self) -> str:
        """获取转换方向描述"""
        fmt = self.resolve_input_format()
        if fmt == "auto":
            return "自动 (PNG/BMP/GIF/TIFF/WEBP/HEIC/AVIF/JXL → JPG)"
        return f"{fmt.upper()} → JPG"


@dataclass
class AppConfig:
    """应用配置"""

    tasks: list[TaskConfig] = field(default_factory=list)
    max_workers: int = 8
    log_file: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """从字典创建配置"""
        tasks = [TaskConfig.from_dict(t) for t in data.get("tasks", [])]
        return cls(
            tasks=tasks,
            max_workers=data.get("max_workers", 8),
            log_file=data.get("log_file"),
        )

    @classmethod
    def from_file(cls, path: Path) -> "AppConfig":
        """从文件加载配置"""
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_json(cls, json_str: str) -> "AppConfig":
        """从 JSON 字符串加载配置"""
        return cls.from_dict(json.loads(json_str))

    def get_enabled_tasks(self) -> list[TaskConfig]:
        """获取所有启用的任务"""
        return [t for t in self.tasks if t.enabled]

"""核心转换功能模块"""

import logging
import os
import stat
import tempfile
from contextlib import closing
from pathlib import Path

from . import __version__
from .codec import EncoderInfo, ImageCodec, PillowCodec
from .errors import (
    ConversionError,
    ImageFileNotFoundError,
    InvalidArgumentError,
)

# JPEG 质量固定为最高值，不对调用方开放
JPEG_QUALITY = 100
JPEG_FORMAT = "JPEG"


class ImageConverter:
    """
    把任意图像字节（PNG/BMP/GIF 等）转换为 JPEG

    所有方法都是无状态的单次转换；失败时抛出 Image2JpgError 子类，
    不返回哨兵值。
    """

    def __init__(
        self,
        codec: ImageCodec | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Args:
            codec: 编解码提供者，默认使用 PillowCodec
            logger: 诊断日志，默认使用模块日志
        """
        self.codec = codec if codec is not None else PillowCodec()
        self.logger = logger or logging.getLogger(__name__)

    def convert_to_jpg(self, image_data: bytes) -> bytes:
        """
        把图像字节转换为 JPEG 字节

        Args:
            image_data: 任意受支持格式的图像数据（bytes/bytearray/memoryview）

        Returns:
            新分配的 JPEG 字节

        Raises:
            InvalidArgumentError: 数据为空或类型不对
            ConversionError: 解码或编码失败
            EncoderUnavailableError: 找不到 JPEG 编码器
        """
        data = _as_bytes(image_data)
        encoder = self.locate_jpeg_encoder()

        try:
            with closing(self.codec.decode(data)) as img:
                source_format = img.format
                jpg_data = self.codec.encode(img, encoder, JPEG_QUALITY)
        except ConversionError as e:
            self.logger.warning("图像转换失败：%s", e)
            raise

        self.logger.debug(
            "转换完成：%s %d 字节 -> JPEG %d 字节",
            source_format or "未知",
            len(data),
            len(jpg_data),
        )
        return jpg_data

    def save_as_jpg(self, image_data: bytes, file_path: str | os.PathLike) -> bool:
        """
        转换并写入 JPEG 文件

        先写入同目录下的临时文件，成功后原子替换目标文件；
        失败时目标路径上原有的文件保持不变。

        Returns:
            成功时返回 True，失败时抛出异常
        """
        target = _as_path(file_path, "输出文件路径")
        jpg_data = self.convert_to_jpg(image_data)

        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(jpg_data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, _file_mode(target))
            os.replace(tmp_name, target)
        except BaseException:
            # 失败时清理临时文件，保留原目标文件
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self.logger.debug("已保存：%s", target)
        return True

    def convert_file_to_jpg(
        self,
        input_file_path: str | os.PathLike,
        output_file_path: str | os.PathLike,
    ) -> bool:
        """
        读取图像文件并保存为 JPEG

        Raises:
            InvalidArgumentError: 路径为空白
            ImageFileNotFoundError: 输入文件不存在
        """
        inp = _as_path(input_file_path, "输入文件路径")
        out = _as_path(output_file_path, "输出文件路径")

        if not inp.is_file():
            self.logger.warning("输入文件不存在：%s", inp)
            raise ImageFileNotFoundError(inp)

        return self.save_as_jpg(inp.read_bytes(), out)

    def locate_jpeg_encoder(self) -> EncoderInfo:
        """查找 JPEG 编码器，找不到时抛出 EncoderUnavailableError"""
        return self.codec.locate_encoder(JPEG_FORMAT)

    @staticmethod
    def get_version() -> str:
        """库版本号"""
        return __version__


def _file_mode(target: Path) -> int:
    """目标文件的权限：沿用已有文件，否则按 umask 计算"""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _as_bytes(image_data) -> bytes:
    """校验并复制输入数据，保证不修改调用方的缓冲区"""
    if image_data is None:
        raise InvalidArgumentError("图像数据不能为空")
    if not isinstance(image_data, (bytes, bytearray, memoryview)):
        raise InvalidArgumentError(
            f"图像数据必须是字节类型，实际为 {type(image_data).__name__}"
        )
    data = bytes(image_data)
    if not data:
        raise InvalidArgumentError("图像数据不能为空")
    return data


def _as_path(value, label: str) -> Path:
    """校验路径非空白"""
    if value is None:
        raise InvalidArgumentError(f"{label}不能为空")
    try:
        raw = os.fspath(value)
    except TypeError as e:
        raise InvalidArgumentError(f"{label}类型无效：{type(value).__name__}") from e
    if isinstance(raw, bytes):
        raw = os.fsdecode(raw)
    if not raw.strip():
        raise InvalidArgumentError(f"{label}不能为空")
    return Path(raw)


_default_converter: ImageConverter | None = None


def get_converter() -> ImageConverter:
    """获取共享的默认转换器"""
    global _default_converter
    if _default_converter is None:
        _default_converter = ImageConverter()
    return _default_converter


def convert_to_jpg(image_data: bytes) -> bytes:
    """使用默认转换器转换图像字节"""
    return get_converter().convert_to_jpg(image_data)


def save_as_jpg(image_data: bytes, file_path: str | os.PathLike) -> bool:
    """使用默认转换器保存 JPEG 文件"""
    return get_converter().save_as_jpg(image_data, file_path)


def convert_file_to_jpg(
    input_file_path: str | os.PathLike, output_file_path: str | os.PathLike
) -> bool:
    """使用默认转换器转换图像文件"""
    return get_converter().convert_file_to_jpg(input_file_path, output_file_path)

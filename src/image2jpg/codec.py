"""图像编解码提供者模块"""

import io
from dataclasses import dataclass
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from .errors import ConversionError, EncoderUnavailableError
from .worker import register_plugins

# 带透明通道的模式，转 JPEG 时铺白色背景
TRANSPARENT_MODES = ("RGBA", "LA", "PA", "P")


@dataclass(frozen=True)
class EncoderInfo:
    """已注册的编码器信息"""

    format_id: str
    mime_type: str | None = None
    extensions: tuple[str, ...] = ()


class ImageCodec(Protocol):
    """可替换的编解码能力，默认实现为 PillowCodec"""

    def decode(self, data: bytes) -> Image.Image: ...

    def locate_encoder(self, format_id: str) -> EncoderInfo: ...

    def encode(self, image: Image.Image, encoder: EncoderInfo, quality: int) -> bytes: ...


class PillowCodec:
    """基于 Pillow 的编解码实现"""

    def decode(self, data: bytes) -> Image.Image:
        """
        解码图像数据

        格式只根据内容判断，不依赖文件扩展名。

        Args:
            data: 编码后的图像字节

        Returns:
            已加载像素的图像，由调用方负责关闭

        Raises:
            ConversionError: 数据损坏或格式不支持
        """
        register_plugins()
        try:
            img = Image.open(io.BytesIO(data))
        except (
            UnidentifiedImageError,
            OSError,
            EOFError,
            ValueError,
            SyntaxError,
            Image.DecompressionBombError,
        ) as e:
            raise ConversionError(f"无法解码图像数据：{e}") from e

        try:
            img.load()
        except (OSError, EOFError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            img.close()
            raise ConversionError(f"无法解码图像数据：{e}") from e
        return img

    def locate_encoder(self, format_id: str) -> EncoderInfo:
        """
        在 Pillow 已注册的保存处理器中查找编码器

        Raises:
            EncoderUnavailableError: 没有匹配的编码器
        """
        Image.init()
        wanted = format_id.upper()
        for fmt in Image.SAVE:
            if fmt.upper() == wanted:
                extensions = tuple(
                    sorted(ext for ext, f in Image.EXTENSION.items() if f == fmt)
                )
                return EncoderInfo(
                    format_id=fmt,
                    mime_type=Image.MIME.get(fmt),
                    extensions=extensions,
                )
        raise EncoderUnavailableError(f"未找到 {wanted} 编码器")

    def encode(self, image: Image.Image, encoder: EncoderInfo, quality: int) -> bytes:
        """
        按指定编码器和质量编码图像

        Raises:
            ConversionError: 编码失败
        """
        exif = image.info.get("exif")
        save_kwargs: dict[str, object] = {"quality": quality}
        if exif:
            save_kwargs["exif"] = exif

        buf = io.BytesIO()
        try:
            with to_rgb(image) as rgb_img:
                rgb_img.save(buf, format=encoder.format_id, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            raise ConversionError(f"JPEG 编码失败：{e}") from e
        return buf.getvalue()


def to_rgb(img: Image.Image) -> Image.Image:
    """
    转换为 RGB 模式的新图像

    带透明通道的图片铺到白色背景上，其余非 RGB 模式直接转换。
    返回值总是副本，原图像不受影响。
    """
    if img.mode in TRANSPARENT_MODES:
        rgba = img.convert("RGBA")
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[-1])
        rgba.close()
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img.copy()

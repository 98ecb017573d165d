"""
图像转 JPEG 转换库 - 把数据库图像字段中的 PNG/BMP/GIF 等数据转为 JPEG

示例用法:
    from image2jpg import ImageConverter

    converter = ImageConverter()

    # 字节转换
    jpg_bytes = converter.convert_to_jpg(blob)

    # 保存为文件（原子替换已有文件）
    converter.save_as_jpg(blob, "out.jpg")

    # 文件转换
    converter.convert_file_to_jpg("in.png", "out.jpg")

    # 批量转换
    from image2jpg.config_data import TaskConfig
    from image2jpg.progress import TaskProcessor

    task = TaskConfig(name="照片", input_path="/path/to/photos")
    result = TaskProcessor().process(task)
"""

__version__ = "1.0.0"

from .codec import EncoderInfo, ImageCodec, PillowCodec
from .converter import (
    JPEG_QUALITY,
    ImageConverter,
    convert_file_to_jpg,
    convert_to_jpg,
    save_as_jpg,
)
from .errors import (
    ConversionError,
    EncoderUnavailableError,
    Image2JpgError,
    ImageFileNotFoundError,
    InvalidArgumentError,
)

__all__ = [
    "__version__",
    "JPEG_QUALITY",
    "ConversionError",
    "EncoderInfo",
    "EncoderUnavailableError",
    "Image2JpgError",
    "ImageCodec",
    "ImageConverter",
    "ImageFileNotFoundError",
    "InvalidArgumentError",
    "PillowCodec",
    "convert_file_to_jpg",
    "convert_to_jpg",
    "save_as_jpg",
]

"""异常类型模块"""


class Image2JpgError(Exception):
    """所有转换错误的基类"""


class InvalidArgumentError(Image2JpgError, ValueError):
    """参数无效：图像数据为空、路径为空白等"""


class ImageFileNotFoundError(Image2JpgError, FileNotFoundError):
    """输入文件不存在"""

    def __init__(self, path):
        super().__init__(f"输入文件不存在：{path}")
        self.filename = str(path)


class ConversionError(Image2JpgError):
    """解码或编码失败，原始异常通过 __cause__ 保留"""


class EncoderUnavailableError(Image2JpgError):
    """主机上没有注册 JPEG 编码器（环境异常，不是输入错误）"""

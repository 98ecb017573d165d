"""解码插件注册和信号处理"""

import logging
import signal
import threading

logger = logging.getLogger(__name__)

_register_lock = threading.Lock()
_registered = False
_shutdown = threading.Event()


def register_plugins() -> None:
    """
    注册额外的解码插件（HEIC/HEIF，以及可选的 AVIF/JXL）

    进程内只执行一次，可以在任意线程中重复调用。
    """
    global _registered
    if _registered:
        return

    with _register_lock:
        if _registered:
            return

        from pillow_heif import register_heif_opener, options

        try:
            from pillow_avif import AvifImagePlugin  # noqa: F401
        except ImportError:
            logger.debug("pillow_avif 未安装，跳过 AVIF 插件")

        try:
            from pillow_jxl import JpegXLImagePlugin  # noqa: F401
        except ImportError:
            logger.debug("pillow_jxl 未安装，跳过 JXL 插件")

        # 设置 HEIF 解码线程数
        options.DECODE_THREADS = 4
        register_heif_opener()

        _registered = True


def is_shutdown() -> bool:
    """检查是否已收到关闭信号"""
    return _shutdown.is_set()


def request_shutdown() -> None:
    """请求停止后续的批处理"""
    _shutdown.set()


def reset_shutdown() -> None:
    """清除关闭标志"""
    _shutdown.clear()


def setup_signal_handlers() -> None:
    """设置信号处理器"""
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)


def _signal_handler(signum, frame) -> None:
    """信号处理函数"""
    request_shutdown()
    print("\n⚠️  收到中断信号，正在停止...", flush=True)

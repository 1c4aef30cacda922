"""
cubismpy 版本管理模块

统一管理项目版本号，确保版本一致性。
"""

__version__ = "0.4.0"
__version_info__ = (0, 4, 0)


def get_version() -> str:
    return __version__

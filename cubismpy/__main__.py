"""
cubismpy 命令行入口

    python -m cubismpy path/to/model.model3.json [--config cubismpy.user.yaml]
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from cubismpy.config.config_files import DEFAULT_DEV_CONFIG_PATH, DEFAULT_USER_CONFIG_PATH
from cubismpy.config.settings import Settings, load_settings
from cubismpy.utils.exceptions import CubismPyException
from cubismpy.utils.logger import apply_settings, get_logger
from cubismpy.version import get_version

logger = get_logger("cubismpy.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cubismpy", description="Preview a Live2D Cubism model.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    parser.add_argument("model_json", nargs="?", type=Path, help="path to *.model3.json")
    parser.add_argument(
        "--config",
        default=DEFAULT_USER_CONFIG_PATH,
        help=f"user config file (default: {DEFAULT_USER_CONFIG_PATH})",
    )
    parser.add_argument(
        "--dev-config",
        default=DEFAULT_DEV_CONFIG_PATH,
        help=f"developer overrides merged on top (default: {DEFAULT_DEV_CONFIG_PATH})",
    )
    parser.add_argument("--fps", type=int, help="override viewer.fps")
    parser.add_argument("--log-level", help="override log.level")
    parser.add_argument(
        "--no-engine-log",
        action="store_true",
        help="silence engine log output (same as set_log_enable(False))",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config, args.dev_config)
    except CubismPyException as exc:
        logger.error("配置加载失败: %s", exc)
        return 2

    # 命令行覆盖项与配置文件走同一套校验
    data = settings.model_dump(mode="json")
    if args.log_level:
        data["log"]["level"] = args.log_level
    if args.no_engine_log:
        data["log"]["engine_log_enable"] = False
    if args.fps is not None:
        data["viewer"]["fps"] = args.fps
    try:
        settings = Settings.from_dict(data)
    except CubismPyException as exc:
        logger.error("命令行参数无效: %s", exc)
        return 2

    settings.ensure_directories()
    apply_settings(settings)

    model_json = args.model_json
    if model_json is None and settings.viewer.model_json:
        model_json = Path(settings.viewer.model_json)
    if model_json is None:
        logger.error("未指定模型文件（参数 model_json 或配置 viewer.model_json）")
        return 2

    from cubismpy.gui.model_widget import run_viewer

    return run_viewer(model_json, settings)


if __name__ == "__main__":
    raise SystemExit(main())

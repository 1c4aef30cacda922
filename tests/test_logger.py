"""
测试日志适配器与上下文注入
"""

import logging

from cubismpy.utils.logger import (
    LoggerConfig,
    bind_context,
    clear_context,
    get_logger,
    log_context,
    setup_logger,
)


def test_percent_style_arguments(log_records):
    get_logger("cubismpy.test").info("loaded %s in %d ms", "Hiyori", 12)
    record = log_records[-1]
    assert record["message"] == "loaded Hiyori in 12 ms"
    assert record["extra"]["logger_name"] == "cubismpy.test"


def test_log_context_is_scoped(log_records):
    log = get_logger("cubismpy.test")
    with log_context(motion_group="Idle"):
        log.info("inside")
    log.info("outside")

    inside, outside = log_records[-2:]
    assert inside["extra"]["context"] == {"motion_group": "Idle"}
    assert "motion_group=Idle" in inside["extra"]["context_str"]
    assert outside["extra"]["context"] == {}


def test_bind_and_clear_context(log_records):
    log = get_logger("cubismpy.test")
    bind_context(model="Hiyori")
    try:
        log.warning("bound")
        assert log_records[-1]["extra"]["context"]["model"] == "Hiyori"
    finally:
        clear_context()
    log.warning("cleared")
    assert "model" not in log_records[-1]["extra"]["context"]


def test_exc_info_attaches_exception(log_records):
    log = get_logger("cubismpy.test")
    try:
        raise KeyError("ParamAngleX")
    except KeyError:
        log.error("lookup failed", exc_info=True)
    assert log_records[-1]["exception"].type is KeyError


def test_setup_logger_quiets_listed_libraries(tmp_path):
    noisy = logging.getLogger("cubismpy.test.noisy")
    try:
        setup_logger(
            LoggerConfig(
                log_dir=tmp_path,
                enable_file=False,
                quiet_libs=["cubismpy.test.noisy"],
                quiet_level="error",
            )
        )
        assert noisy.level == logging.ERROR
    finally:
        setup_logger(LoggerConfig(log_dir=tmp_path, enable_file=False))
        noisy.setLevel(logging.NOTSET)

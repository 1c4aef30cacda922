"""
测试框架生命周期、GL 辅助函数与引擎日志开关
"""

import pytest

import cubismpy
from cubismpy import engine, framework
from cubismpy.config.settings import CubismLogLevel, FrameworkConfig, LogConfig, Settings
from cubismpy.engine import create_backend
from cubismpy.utils.exceptions import (
    ArgumentRangeError,
    EngineUnavailableError,
    FrameworkNotInitializedError,
    InvalidArgumentError,
)


def _engine_messages(records):
    return [r["message"] for r in records if r["extra"].get("logger_name") == "cubismpy.engine"]


class TestLogSwitch:
    def test_enabled_by_default(self):
        assert framework.log_enable() is True

    def test_toggle(self, log_records):
        framework.set_log_enable(False)
        assert framework.log_enable() is False
        framework.engine_log("hidden")
        framework.engine_info("hidden %d", 1)

        framework.set_log_enable(True)
        framework.engine_log("visible")
        framework.engine_info("visible %d", 2)

        assert _engine_messages(log_records) == ["visible", "visible 2"]

    def test_rejects_non_bool(self):
        with pytest.raises(InvalidArgumentError):
            framework.set_log_enable("off")
        assert framework.log_enable() is True

    def test_forwarded_to_running_backend(self, fake_framework):
        framework.set_log_enable(False)
        assert fake_framework.calls[-1] == ("set_log_enable", False)

    def test_package_level_exports(self):
        cubismpy.set_log_enable(False)
        assert framework.log_enable() is False
        cubismpy.set_log_enable(True)
        assert cubismpy.log_enable() is True


class TestLifecycle:
    def test_init_starts_backend_with_log_callback(self, log_records, backend_factory):
        backend = backend_factory()
        settings = Settings(framework=FrameworkConfig(log_level="info"))
        framework.init(settings, backend=backend)

        assert framework.is_initialized()
        assert framework.current_backend() is backend
        assert backend.calls[0] == ("startup", int(CubismLogLevel.INFO))

        backend.log_function("engine says hi")
        assert "engine says hi" in _engine_messages(log_records)

    def test_init_is_idempotent(self, fake_framework, backend_factory):
        again = framework.init(Settings(), backend=backend_factory())
        assert again is fake_framework
        assert [c for c in fake_framework.calls if c[0] == "startup"] == [("startup", 0)]

    def test_init_applies_engine_log_setting(self, backend_factory):
        backend = backend_factory()
        framework.init(Settings(log=LogConfig(engine_log=False)), backend=backend)
        assert framework.log_enable() is False
        assert ("set_log_enable", False) in backend.calls

    def test_log_level_off_keeps_engine_log_disabled(self, backend_factory):
        backend = backend_factory()
        framework.init(Settings(framework=FrameworkConfig(log_level="off")), backend=backend)

        assert backend.calls[:2] == [("startup", int(CubismLogLevel.OFF)), ("set_log_enable", False)]
        assert ("set_log_enable", True) not in backend.calls
        framework.set_log_enable(True)
        assert backend.calls[-1] == ("set_log_enable", True)

    def test_dispose(self, fake_framework):
        framework.dispose()
        assert not framework.is_initialized()
        assert fake_framework.calls[-1] == ("shutdown",)
        framework.dispose()
        assert fake_framework.calls.count(("shutdown",)) == 1

    def test_calls_before_init_raise(self):
        with pytest.raises(FrameworkNotInitializedError):
            framework.gl_init()
        with pytest.raises(FrameworkNotInitializedError):
            framework.clear_buffer()
        with pytest.raises(FrameworkNotInitializedError):
            framework.create_native_model()

    def test_init_loads_settings_from_config_dir(self, tmp_path, monkeypatch, backend_factory):
        (tmp_path / "cubismpy.user.yaml").write_text(
            "framework:\n  backend: fake\n  log_level: ERROR\n", encoding="utf-8"
        )
        monkeypatch.setitem(engine._BACKENDS, "fake", backend_factory)
        backend = framework.init()
        assert backend.name == "fake"
        assert backend.calls[0] == ("startup", int(CubismLogLevel.ERROR))

    def test_unknown_backend(self):
        with pytest.raises(EngineUnavailableError) as excinfo:
            create_backend("does-not-exist")
        assert "live2d-py" in excinfo.value.context["available"]


class TestGlHelpers:
    def test_gl_init_and_release(self, fake_framework):
        framework.gl_init()
        framework.glew_init()
        framework.gl_release()
        assert fake_framework.calls[-3:] == [("gl_init",), ("gl_init",), ("gl_release",)]

    def test_clear_buffer_defaults_to_transparent_black(self, fake_framework):
        framework.clear_buffer()
        assert fake_framework.calls[-1] == ("clear_buffer", 0.0, 0.0, 0.0, 0.0)

    def test_clear_buffer_explicit(self, fake_framework):
        framework.clear_buffer(1, 0.5, 0.25, 1)
        assert fake_framework.calls[-1] == ("clear_buffer", 1.0, 0.5, 0.25, 1.0)

    @pytest.mark.parametrize("rgba", [(2, 0, 0, 0), (0, 0, 0, -1)])
    def test_clear_buffer_range(self, fake_framework, rgba):
        with pytest.raises(ArgumentRangeError):
            framework.clear_buffer(*rgba)
        assert not any(c[0] == "clear_buffer" for c in fake_framework.calls)

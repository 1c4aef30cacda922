import os

import pytest

from cubismpy.config.settings import Settings

pytestmark = pytest.mark.gui

# Keep the QApplication alive for the whole module; an unreferenced one is
# garbage-collected immediately and widget construction then aborts.
_QAPP = None


def _get_qapp():
    pytest.importorskip("PyQt6")
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is not None:
        return app
    global _QAPP
    try:
        _QAPP = QApplication([])
        return _QAPP
    except Exception as exc:
        pytest.skip(f"Qt QApplication not available: {exc!r}")


def _make_widget(**kwargs):
    _get_qapp()
    from cubismpy.gui.model_widget import ModelGlWidget

    return ModelGlWidget(**kwargs)


def test_timer_interval_follows_viewer_fps():
    widget = _make_widget(settings=Settings.from_dict({"viewer": {"fps": 50}}))
    assert widget._tick_timer.interval() == 20
    assert not widget.is_ready


def test_model_path_defaults_to_viewer_config(temp_dir):
    path = temp_dir / "a.model3.json"
    widget = _make_widget(settings=Settings.from_dict({"viewer": {"model_json": str(path)}}))
    assert widget._model_json == path


def test_missing_model_file_reports_error(temp_dir, fake_framework):
    widget = _make_widget(model_json=temp_dir / "missing.model3.json")
    statuses = []
    widget.status_changed.connect(lambda: statuses.append(widget.error_message))

    widget._create_model()

    assert not widget.is_ready
    assert widget.model is None
    assert "missing.model3.json" in widget.error_message
    assert statuses
    assert fake_framework.models == []


def test_create_model_then_paint_drives_frame(temp_dir, fake_framework):
    model_json = temp_dir / "hiyori.model3.json"
    model_json.write_text("{}", encoding="utf-8")
    settings = Settings.from_dict(
        {"model": {"auto_blink": False}, "viewer": {"clear_color": [0.1, 0.2, 0.3, 1.0]}}
    )
    widget = _make_widget(model_json=model_json, settings=settings)

    widget._create_model()
    assert widget.is_ready
    assert widget.error_message == ""

    native = fake_framework.models[0]
    assert native.calls[:3] == [
        ("load_model_json", str(model_json)),
        ("set_auto_breath_enable", True),
        ("set_auto_blink_enable", False),
    ]

    native.calls.clear()
    widget.paintGL()
    assert fake_framework.calls[-1] == ("clear_buffer", 0.1, 0.2, 0.3, 1.0)
    assert native.names() == ["update", "draw"]

    widget._destroy_model()
    assert native.released
    assert not widget.is_ready


def test_set_clear_color_clamps():
    widget = _make_widget()
    widget.set_clear_color(2.0, -1.0, 0.5)
    assert widget._clear_rgba == (1.0, 0.0, 0.5, 0.0)


def test_motion_signals_emitted_from_handlers(temp_dir, fake_framework):
    model_json = temp_dir / "m.model3.json"
    model_json.write_text("{}", encoding="utf-8")
    widget = _make_widget(model_json=model_json)
    widget._create_model()

    started, finished = [], []
    widget.motion_started.connect(lambda g, n: started.append((g, n)))
    widget.motion_finished.connect(lambda: finished.append(True))

    widget.model.touch(
        5, 5, on_start=widget._emit_motion_started, on_finish=widget.motion_finished.emit
    )
    native = fake_framework.models[0]
    native.play_next()
    native.finish_current()

    assert started == [("TapBody", 0)]
    assert finished == [True]


def test_load_failure_reports_error(temp_dir, fake_framework, monkeypatch):
    model_json = temp_dir / "broken.model3.json"
    model_json.write_text("{}", encoding="utf-8")
    native = fake_framework.create_model()

    def fail(path):
        raise RuntimeError(f"cannot parse {path}")

    native.load_model_json = fail
    monkeypatch.setattr(fake_framework, "create_model", lambda: native)

    widget = _make_widget(model_json=model_json)
    widget._create_model()

    assert not widget.is_ready
    assert widget.error_message == "Live2D 模型加载失败。"
    assert native.released

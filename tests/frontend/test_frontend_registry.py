import pytest

import sg.frontend.registry as registry
from sg.frontend import get_frontend, list_frontends, register_lazy
from sg.frontend.python import PythonFrontend


def test_python_is_registered():
    assert "python" in list_frontends()
    frontend = get_frontend()
    assert isinstance(frontend, PythonFrontend)
    assert frontend.name == "python"
    assert ".py" in frontend.extensions


def test_each_call_returns_new_instance():
    assert get_frontend("python") is not get_frontend("python")


def test_unknown_frontend():
    with pytest.raises(ValueError, match="Unknown frontend"):
        get_frontend("cobol")


def test_lazy_spec_must_point_to_a_frontend(monkeypatch):
    monkeypatch.setattr(registry, "_LAZY_BY_NAME", dict(registry._LAZY_BY_NAME))
    register_lazy(module=".base", class_name="TypeSymbol", name="broken-test")
    with pytest.raises(TypeError):
        get_frontend("broken-test")

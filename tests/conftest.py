"""Shared test fixtures for ES-Check tests."""

import pytest


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def write_js(tmp_path):
    """Factory writing a source file under tmp_path; returns its relative name."""

    def _write(name: str, content, encoding: str = "utf-8") -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding=encoding)
        return name

    return _write


@pytest.fixture
def es5_source():
    """Source valid in every version from ES5 on."""
    return "var x = 1;\nfunction f() { return x; }\n"


@pytest.fixture
def arrow_source():
    """Source that needs ES2015."""
    return "const f = () => 1;\n"

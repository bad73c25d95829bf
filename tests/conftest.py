from __future__ import annotations

import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def plain_log_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    # Managed-runtime markers switch the formatter to JSON output.
    monkeypatch.delenv("K_SERVICE", raising=False)
    monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
    monkeypatch.delenv("MAPPING_VIEW_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MAPPING_VIEW_JSON_LOGS", raising=False)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    root = logging.getLogger()
    package = logging.getLogger("mapping_view")
    saved_root = (root.level, list(root.handlers), list(root.filters))
    saved_package = (package.level, list(package.handlers), package.propagate)
    yield
    root.setLevel(saved_root[0])
    root.handlers[:] = saved_root[1]
    root.filters[:] = saved_root[2]
    package.setLevel(saved_package[0])
    package.handlers[:] = saved_package[1]
    package.propagate = saved_package[2]

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def project_root(tmp_path: Path) -> Path:
    # A channel manifest anchors project-root detection inside tmp_path.
    (tmp_path / "manifest").write_text("title=Test Channel\n", encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def _isolate_package_logger():
    # CLI invocations install a handler on the package logger; restore it so
    # logging state does not leak between tests.
    import logging

    logger = logging.getLogger("brslint")
    saved = (list(logger.handlers), logger.level)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _isolated_dirs(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("CONNROUTE_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("connroute")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

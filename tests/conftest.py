"""Shared fixtures for the fan-out pipeline suites."""

from __future__ import annotations

import pytest

from lib_fanout_log.adapters.env.default import DEBUG_ENV_VAR, FILTER_ENV_VAR


@pytest.fixture(autouse=True)
def _isolated_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's exported SYPL_DEBUG/SYPL_FILTER out of every test."""

    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)
    monkeypatch.delenv(FILTER_ENV_VAR, raising=False)

from __future__ import annotations

import logging

import pytest

from cf_provisioner.logs import env_level


@pytest.mark.parametrize(
    ("value", "level"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("", None)],
)
def test_env_level(value: str, level: int | None) -> None:
    assert env_level({"CF_LOG": value}) == level


def test_env_level_unset() -> None:
    assert env_level({}) is None


def test_invalid_level_warns(capsys: pytest.CaptureFixture[str]) -> None:
    assert env_level({"CF_LOG": "loud"}) == logging.INFO
    assert "invalid CF_LOG level 'LOUD'" in capsys.readouterr().err

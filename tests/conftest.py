from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterator

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from stackcensus.utils import commands
from stackcensus.utils.constants import ENV_BASE_PATH, ENV_CONFIG


class FakeStdin:
    def __init__(self, tty: bool) -> None:
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


class FakeResponse:
    def __init__(self, headers: dict | None = None, payload=None, status_code: int = 200) -> None:
        self.headers = CaseInsensitiveDict(headers or {})
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_BASE_PATH, raising=False)
    monkeypatch.delenv(ENV_CONFIG, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    logger = logging.getLogger("stackcensus")
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> Callable[..., list[list[str]]]:
    """Replace subprocess.run with a table of canned outputs.

    Usage: calls = fake_run({"java": (0, "openjdk 17.0.9\\n")})
    Commands whose executable name is not in the table raise FileNotFoundError.
    """

    def install(table: dict[str, object]) -> list[list[str]]:
        calls: list[list[str]] = []

        def run(cmd, **kwargs):
            calls.append(list(cmd))
            name = cmd[0].replace("\\", "/").rsplit("/", 1)[-1]
            outcome = table.get(name)
            if outcome is None:
                raise FileNotFoundError(cmd[0])
            if isinstance(outcome, BaseException):
                raise outcome
            returncode, output = outcome
            return subprocess.CompletedProcess(cmd, returncode, stdout=output)

        monkeypatch.setattr(commands.subprocess, "run", run)
        return calls

    return install

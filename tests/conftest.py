"""Shared pytest fixtures for icecastlog tests."""
from __future__ import annotations

from pathlib import Path

import pytest

AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/41.0.2272.118 YaBrowser/15.4.2272.3716 Safari/537.36"
)


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary log files."""

    def _make(lines: list[str], name: str = "test.log", newline: str = "\n") -> Path:
        p = tmp_path / name
        p.write_bytes((newline.join(lines) + newline).encode("utf-8"))
        return p

    return _make


@pytest.fixture()
def agent() -> str:
    return AGENT


@pytest.fixture()
def access_log_lines() -> list[str]:
    return [
        f'127.0.0.1 - - [19/Jun/2015:18:58:45 +0300] "GET /test.mp3 HTTP/1.0" 200 3380454 "http://example.com/" "{AGENT}" 105',
        '127.0.0.1 - - [19/Jun/2015:18:58:31 +0300] "GET /test.mp3 HTTP/1.0" 302 170 "-" "Mozilla/5.0 (Windows NT 5.1)" 0',
        '10.0.0.7 - admin [19/Jun/2015:18:58:31 +0300] "SOURCE /live HTTP/1.0" 200 0 "-" "-" 3600',
    ]


@pytest.fixture()
def playlist_log_lines() -> list[str]:
    return [
        "20/Oct/2015:13:23:25 +0300|/radio|5888| - Test Artist - Test Title",
        "20/Oct/2015:13:23:25 +0300|/radio|600| - ",
        "20/Oct/2015:13:27:02 +0300|/jazz|12| - Miles Davis - So What",
    ]

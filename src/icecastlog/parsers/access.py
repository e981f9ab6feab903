"""Icecast access log parser.

Icecast writes one combined-style line per finished listener connection:

    %h - %u [%t] "%r" %>s %b "%{Referer}i" "%{User-agent}i" <seconds connected>
"""
from __future__ import annotations

import re
from typing import Iterator

from .base import AccessLogEntry, to_epoch_millis

_ACCESS_RE = re.compile(
    r'(?P<ip>\S+) - '                          # client IP
    r'(?P<ident>\S+) '                         # authenticated user, discarded
    r'\[(?P<day>[^:\]]+):(?P<time>[^\]]+)\] '  # [19/Jun/2015:18:58:45 +0300]
    r'"(?P<request>.*?)" '                     # "GET /stream.mp3 HTTP/1.0"
    r'(?P<status>\d+) '
    r'(?P<size>\d+) '
    r'"(?P<referer>.*?)" '
    r'"(?P<agent>.*?)" '
    r'(?P<duration>\d+)',                      # seconds connected
    re.ASCII,
)

_DATE_FORMAT = "%d/%b/%Y %H:%M:%S %z"

_MISSING = "-"


def split_request(request: str) -> tuple[str, str, str]:
    """Split a request line into (method, url, protocol).

    Fewer than two tokens means the whole request is taken as the URL.
    """
    parts = request.split(" ")
    if len(parts) > 2:
        return parts[0], parts[1], parts[2]
    if len(parts) == 2:
        return parts[0], parts[1], ""
    return "", request, ""


def parse_access_line(line: str) -> AccessLogEntry | None:
    m = _ACCESS_RE.fullmatch(line.strip())
    if not m:
        return None
    d = m.groupdict()
    date = to_epoch_millis(f"{d['day']} {d['time']}", _DATE_FORMAT)
    if date is None:
        return None
    method, url, protocol = split_request(d["request"])
    return AccessLogEntry(
        ip=d["ip"],
        date=date,
        method=method,
        url=url,
        protocol=protocol,
        status=int(d["status"]),
        size=int(d["size"]),
        referer=d["referer"] if d["referer"] != _MISSING else None,
        agent=d["agent"] if d["agent"] != _MISSING else None,
        duration=int(d["duration"]),
    )


class AccessLogParser:
    """Parse Icecast access log lines."""

    @property
    def name(self) -> str:
        return "access"

    def parse_line(self, line: str) -> AccessLogEntry | None:
        return parse_access_line(line)

    def parse_file(self, path: str) -> Iterator[AccessLogEntry]:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                entry = self.parse_line(line)
                if entry is not None:
                    yield entry

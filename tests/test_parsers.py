"""Tests for the access and playlist line grammars."""
from __future__ import annotations

import pytest

from icecastlog.errors import UnknownFormatError
from icecastlog.parsers.access import AccessLogParser, parse_access_line, split_request
from icecastlog.parsers.base import AccessLogEntry, LineParser, PlaylistLogEntry
from icecastlog.parsers.formats import LogFormat, get_parser
from icecastlog.parsers.playlist import PlaylistLogParser, parse_playlist_line


# ---------------------------------------------------------------------------
# Access log
# ---------------------------------------------------------------------------

class TestAccessLogParser:
    def test_valid_line_with_referer(self, access_log_lines, agent) -> None:
        entry = parse_access_line(access_log_lines[0])
        assert entry == AccessLogEntry(
            ip="127.0.0.1",
            date=1434729525000,
            method="GET",
            url="/test.mp3",
            protocol="HTTP/1.0",
            status=200,
            size=3380454,
            referer="http://example.com/",
            agent=agent,
            duration=105,
        )

    def test_missing_referer_is_none(self, access_log_lines) -> None:
        entry = parse_access_line(access_log_lines[1])
        assert entry is not None
        assert entry.referer is None
        assert entry.agent == "Mozilla/5.0 (Windows NT 5.1)"
        assert entry.date == 1434729511000
        assert entry.status == 302
        assert entry.size == 170
        assert entry.duration == 0

    def test_authenticated_user_is_discarded(self, access_log_lines) -> None:
        entry = parse_access_line(access_log_lines[2])
        assert entry is not None
        assert entry.ip == "10.0.0.7"
        assert entry.method == "SOURCE"
        assert entry.agent is None
        assert "admin" not in entry.to_dict().values()

    def test_truncated_line_returns_none(self) -> None:
        assert parse_access_line('127.0.0.1 - - [19/Jun/2015:18:58:45 +0300] "GE') is None

    @pytest.mark.parametrize("line", [
        "",
        "not an access log",
        # missing closing bracket
        '127.0.0.1 - - [19/Jun/2015:18:58:45 +0300 "GET / HTTP/1.0" 200 1 "-" "-" 1',
        # non-numeric size
        '127.0.0.1 - - [19/Jun/2015:18:58:45 +0300] "GET / HTTP/1.0" 200 - "-" "-" 1',
        # missing duration
        '127.0.0.1 - - [19/Jun/2015:18:58:45 +0300] "GET / HTTP/1.0" 200 1 "-" "-"',
        # trailing extra field
        '127.0.0.1 - - [19/Jun/2015:18:58:45 +0300] "GET / HTTP/1.0" 200 1 "-" "-" 1 extra',
    ])
    def test_structural_mismatch_returns_none(self, line: str) -> None:
        assert parse_access_line(line) is None

    @pytest.mark.parametrize("status", ["\u0662\u0660\u0660", "\uff12\uff10\uff10", "2_00"])
    def test_non_ascii_digits_rejected(self, status: str) -> None:
        line = f'127.0.0.1 - - [19/Jun/2015:18:58:45 +0300] "GET / HTTP/1.0" {status} 1 "-" "-" 1'
        assert parse_access_line(line) is None

    @pytest.mark.parametrize("stamp", [
        "32/Jun/2015:18:58:45 +0300",
        "19/Foo/2015:18:58:45 +0300",
        "19/Jun/2015:25:58:45 +0300",
        "19/Jun/2015:18:58:45 EEST",
    ])
    def test_malformed_date_returns_none(self, stamp: str) -> None:
        line = f'127.0.0.1 - - [{stamp}] "GET / HTTP/1.0" 200 1 "-" "-" 1'
        assert parse_access_line(line) is None

    def test_timezone_offset_applied(self) -> None:
        utc = parse_access_line('1.2.3.4 - - [19/Jun/2015:15:58:45 +0000] "GET / HTTP/1.0" 200 1 "-" "-" 1')
        local = parse_access_line('1.2.3.4 - - [19/Jun/2015:18:58:45 +0300] "GET / HTTP/1.0" 200 1 "-" "-" 1')
        assert utc is not None and local is not None
        assert utc.date == local.date == 1434729525000

    def test_embedded_quotes_kept_verbatim(self) -> None:
        line = '1.2.3.4 - - [19/Jun/2015:18:58:45 +0300] "GET / HTTP/1.0" 200 1 "http://a/?q=\'x\'" "VLC "3.0" (libvlc)" 7'
        entry = parse_access_line(line)
        assert entry is not None
        assert entry.referer == "http://a/?q='x'"
        assert entry.agent == 'VLC "3.0" (libvlc)'
        assert entry.duration == 7

    def test_trailing_newline_ignored(self, access_log_lines) -> None:
        assert parse_access_line(access_log_lines[0] + "\r\n") == parse_access_line(access_log_lines[0])

    def test_parse_file_skips_bad_lines(self, tmp_log_file, access_log_lines) -> None:
        path = tmp_log_file([access_log_lines[0], "garbage", "", access_log_lines[1]])
        entries = list(AccessLogParser().parse_file(str(path)))
        assert [e.status for e in entries] == [200, 302]

    def test_implements_protocol(self) -> None:
        p = AccessLogParser()
        assert isinstance(p, LineParser)
        assert p.name == "access"


@pytest.mark.parametrize("request_line,expected", [
    ("GET /test.mp3 HTTP/1.0", ("GET", "/test.mp3", "HTTP/1.0")),
    ("GET /test.mp3 HTTP/1.0 junk", ("GET", "/test.mp3", "HTTP/1.0")),
    ("GET /test.mp3", ("GET", "/test.mp3", "")),
    ("/test.mp3", ("", "/test.mp3", "")),
    ("", ("", "", "")),
    ("GET  /x", ("GET", "", "/x")),
])
def test_split_request(request_line: str, expected: tuple[str, str, str]) -> None:
    assert split_request(request_line) == expected


def test_request_tokens_reach_entry() -> None:
    entry = parse_access_line('1.2.3.4 - - [19/Jun/2015:18:58:45 +0300] "/listen.pls" 404 0 "-" "-" 0')
    assert entry is not None
    assert (entry.method, entry.url, entry.protocol) == ("", "/listen.pls", "")


# ---------------------------------------------------------------------------
# Playlist log
# ---------------------------------------------------------------------------

class TestPlaylistLogParser:
    def test_full_line(self, playlist_log_lines) -> None:
        assert parse_playlist_line(playlist_log_lines[0]) == PlaylistLogEntry(
            date=1445336605000, mount="/radio", count=5888, meta="Test Artist - Test Title"
        )

    def test_missing_meta(self, playlist_log_lines) -> None:
        assert parse_playlist_line(playlist_log_lines[1]) == PlaylistLogEntry(
            date=1445336605000, mount="/radio", count=600, meta=""
        )

    @pytest.mark.parametrize("line,mount,count,meta", [
        ("20/Oct/2015:13:23:25 +0300", "", None, ""),
        ("20/Oct/2015:13:23:25 +0300|/radio", "/radio", None, ""),
        ("20/Oct/2015:13:23:25 +0300|/radio|", "/radio", None, ""),
        ("20/Oct/2015:13:23:25 +0300|/radio||Title", "/radio", None, "Title"),
        ("20/Oct/2015:13:23:25 +0300|/radio|3| - A | B", "/radio", 3, "A | B"),
    ])
    def test_missing_fields_default(self, line: str, mount: str, count: int | None, meta: str) -> None:
        entry = parse_playlist_line(line)
        assert entry is not None
        assert entry.date == 1445336605000
        assert (entry.mount, entry.count, entry.meta) == (mount, count, meta)

    @pytest.mark.parametrize("line", [
        "not a date|/radio|1| - x",
        "20/Oct/2015 13:23:25|/radio|1| - x",
        "20/Oct/2015:13:23:25 +0300|/radio|many| - x",
        "20/Oct/2015:13:23:25 +0300|/radio|5_888| - x",
        "20/Oct/2015:13:23:25 +0300|/radio|\u0665\u0668| - x",
        "20/Oct/2015:13:23:25 +0300|/radio|-3| - x",
    ])
    def test_unusable_line_returns_none(self, line: str) -> None:
        assert parse_playlist_line(line) is None

    def test_parse_file(self, tmp_log_file, playlist_log_lines) -> None:
        path = tmp_log_file(playlist_log_lines + [""])
        entries = list(PlaylistLogParser().parse_file(str(path)))
        assert [e.mount for e in entries] == ["/radio", "/radio", "/jazz"]

    def test_to_dict(self, playlist_log_lines) -> None:
        entry = parse_playlist_line(playlist_log_lines[2])
        assert entry is not None
        assert entry.to_dict() == {
            "date": 1445336822000,
            "mount": "/jazz",
            "count": 12,
            "meta": "Miles Davis - So What",
        }


# ---------------------------------------------------------------------------
# LogFormat
# ---------------------------------------------------------------------------

class TestLogFormat:
    @pytest.mark.parametrize("tag,expected", [
        ("access", LogFormat.ACCESS),
        ("access-log", LogFormat.ACCESS),
        ("ACCESS", LogFormat.ACCESS),
        ("playlist", LogFormat.PLAYLIST),
        ("playlist-log", LogFormat.PLAYLIST),
        (LogFormat.PLAYLIST, LogFormat.PLAYLIST),
    ])
    def test_from_tag(self, tag, expected: LogFormat) -> None:
        assert LogFormat.from_tag(tag) is expected

    @pytest.mark.parametrize("tag", ["error", "", None, 3])
    def test_unknown_tag_raises(self, tag) -> None:
        with pytest.raises(UnknownFormatError):
            LogFormat.from_tag(tag)

    def test_unknown_format_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            get_parser("syslog")

    def test_parser_and_entry_type(self) -> None:
        assert get_parser("access").name == "access"
        assert LogFormat.PLAYLIST.parser.name == "playlist"
        assert LogFormat.ACCESS.entry_type is AccessLogEntry
        assert LogFormat.PLAYLIST.entry_type is PlaylistLogEntry

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest
import requests

from stackcensus.probes import apache, elasticsearch, holodeck, institution, logstash, phantomjs, runtime
from stackcensus.probes.base import ProbeStatus, VersionRecord

from conftest import FakeResponse


# --- HolodeckB2B -------------------------------------------------------------


def test_holodeck_reads_trimmed_version(tmp_path: Path) -> None:
    (tmp_path / "HolodeckB2B").mkdir()
    (tmp_path / "HolodeckB2B" / "ver").write_text("5.3.1\n", encoding="utf-8")

    result = holodeck.scan(str(tmp_path))

    assert result.status is ProbeStatus.SUCCESS
    assert result.record == VersionRecord("HolodeckB2B", "5.3.1", source="holodeck")
    assert result.record.note is None


def test_holodeck_missing_file_is_absent(tmp_path: Path) -> None:
    result = holodeck.scan(str(tmp_path))
    assert result.status is ProbeStatus.ABSENT
    assert result.record is None
    assert "not found" in result.message


def test_holodeck_unreadable_file_is_failure(tmp_path: Path) -> None:
    # A directory where the file should be cannot be read as text
    (tmp_path / "HolodeckB2B" / "ver").mkdir(parents=True)
    result = holodeck.scan(str(tmp_path))
    assert result.status is ProbeStatus.FAILED
    assert result.record is None


def test_holodeck_empty_file_keeps_name(tmp_path: Path) -> None:
    (tmp_path / "HolodeckB2B").mkdir()
    (tmp_path / "HolodeckB2B" / "ver").write_text("\n", encoding="utf-8")
    result = holodeck.scan(str(tmp_path))
    assert result.ok
    assert result.record.display_version is None


# --- Apache ------------------------------------------------------------------


def test_apache_version_from_server_header(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def head(url, **kwargs):
        seen["url"] = url
        seen["timeout"] = kwargs.get("timeout")
        return FakeResponse(headers={"server": "Apache/2.4.58 (Win64)"})

    monkeypatch.setattr(requests, "head", head)

    result = apache.scan("http://localhost/", timeout=2)

    assert result.record == VersionRecord("Apache HTTPD", "2.4.58", source="apache")
    assert seen == {"url": "http://localhost/", "timeout": 2}


def test_apache_not_listening_is_absent(monkeypatch: pytest.MonkeyPatch) -> None:
    def head(url, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "head", head)
    result = apache.scan()
    assert result.status is ProbeStatus.ABSENT
    assert result.record is None


def test_apache_timeout_is_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def head(url, **kwargs):
        raise requests.ConnectTimeout("timed out")

    monkeypatch.setattr(requests, "head", head)
    assert apache.scan().status is ProbeStatus.FAILED


@pytest.mark.parametrize("headers", [{}, {"Server": "Microsoft-IIS/10.0"}])
def test_apache_unusable_header_is_failure(monkeypatch: pytest.MonkeyPatch, headers: dict) -> None:
    monkeypatch.setattr(requests, "head", lambda url, **kwargs: FakeResponse(headers=headers))
    result = apache.scan()
    assert result.status is ProbeStatus.FAILED
    assert result.record is None


# --- Logstash ----------------------------------------------------------------


def test_logstash_version_from_combined_output(tmp_path: Path, fake_run) -> None:
    banner = (0, "Using bundled JDK: /opt/logstash/jdk\nlogstash 8.11.0\n")
    calls = fake_run({"logstash": banner, "logstash.bat": banner})

    result = logstash.scan(str(tmp_path))

    assert result.record == VersionRecord("Logstash", "8.11.0", source="logstash")
    assert calls == [[str(logstash.get_launcher(str(tmp_path))), "--version"]]


def test_logstash_launcher_per_platform(tmp_path: Path) -> None:
    windows = logstash.get_launcher(str(tmp_path), platform="win32")
    linux = logstash.get_launcher(str(tmp_path), platform="linux")
    assert windows == tmp_path / "Logstash" / "bin" / "logstash.bat"
    assert linux == tmp_path / "Logstash" / "bin" / "logstash"


def test_logstash_missing_executable_is_absent(tmp_path: Path, fake_run) -> None:
    fake_run({})
    result = logstash.scan(str(tmp_path))
    assert result.status is ProbeStatus.ABSENT


@pytest.mark.parametrize(
    "outcome",
    [
        (1, "Error: could not find java"),
        (0, "nothing useful here\n"),
        subprocess.TimeoutExpired(["logstash"], 60),
        PermissionError("denied"),
    ],
)
def test_logstash_broken_invocation_is_failure(tmp_path: Path, fake_run, outcome) -> None:
    fake_run({"logstash": outcome, "logstash.bat": outcome})
    result = logstash.scan(str(tmp_path))
    assert result.status is ProbeStatus.FAILED
    assert result.record is None


# --- Elasticsearch -----------------------------------------------------------


def _write_logstash_conf(base: Path, text: str) -> None:
    conf_dir = base / "Logstash" / "config"
    conf_dir.mkdir(parents=True)
    (conf_dir / "logstash.conf").write_text(text, encoding="utf-8")


def test_elasticsearch_discovered_through_logstash_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_logstash_conf(tmp_path, 'output { elasticsearch { hosts => ["10.0.0.5:9200"] } }\n')
    requested = []

    def get(url, **kwargs):
        requested.append(url)
        return FakeResponse(payload={"name": "node1", "version": {"number": "8.11.0"}})

    monkeypatch.setattr(requests, "get", get)

    result = elasticsearch.scan(str(tmp_path))

    assert requested == ["http://10.0.0.5:9200/"]
    assert result.record.display_name == "node1"
    assert result.record.display_version == "8.11.0"
    assert result.record.note is None


def test_elasticsearch_without_hosts_does_not_query(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_logstash_conf(tmp_path, "output { stdout {} }\n")

    def get(url, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(requests, "get", get)

    result = elasticsearch.scan(str(tmp_path))
    assert result.status is ProbeStatus.ABSENT
    assert result.record is None


def test_elasticsearch_without_config_is_absent(tmp_path: Path) -> None:
    assert elasticsearch.scan(str(tmp_path)).status is ProbeStatus.ABSENT


@pytest.mark.parametrize(
    "response",
    [
        requests.ConnectionError("unreachable"),
        FakeResponse(status_code=503),
        FakeResponse(payload=ValueError("Expecting value")),
        FakeResponse(payload={"name": "node1"}),
    ],
)
def test_elasticsearch_bad_endpoint_is_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, response) -> None:
    _write_logstash_conf(tmp_path, 'hosts => ["search:9200"]\n')

    def get(url, **kwargs):
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "get", get)

    result = elasticsearch.scan(str(tmp_path))
    assert result.status is ProbeStatus.FAILED
    assert result.record is None


# --- Runtime / PhantomJS -----------------------------------------------------


def test_runtime_first_line_and_note(fake_run) -> None:
    fake_run({"java": (0, "openjdk 17.0.9 2023-10-17\nOpenJDK Runtime Environment Temurin\n")})

    result = runtime.scan(note="Eclipse Temurin JDK with Hotspot 17.0.9+9 (x64)")

    assert result.record == VersionRecord(
        "openjdk",
        "17.0.9",
        note="Eclipse Temurin JDK with Hotspot 17.0.9+9 (x64)",
        source="runtime",
    )


def test_runtime_without_note(fake_run) -> None:
    fake_run({"java": (0, "java 21.0.1 2023-10-17 LTS\n")})
    result = runtime.scan()
    assert result.record.note is None
    assert result.record.display_version == "21.0.1"


def test_runtime_missing_is_absent(fake_run) -> None:
    fake_run({})
    assert runtime.scan().status is ProbeStatus.ABSENT


@pytest.mark.parametrize("outcome", [(0, "\n\n"), (2, "Unrecognized option: --version")])
def test_runtime_unusable_output_is_failure(fake_run, outcome) -> None:
    fake_run({"java": outcome})
    assert runtime.scan().status is ProbeStatus.FAILED


def test_phantomjs_version_verbatim(fake_run) -> None:
    calls = fake_run({"phantomjs": (0, "2.1.1\n")})
    result = phantomjs.scan()
    assert result.record == VersionRecord("PhantomJS", "2.1.1", source="phantomjs")
    assert calls == [["phantomjs", "--version"]]


def test_phantomjs_missing_is_contained(fake_run) -> None:
    fake_run({})
    result = phantomjs.scan()
    assert result.status is ProbeStatus.ABSENT
    assert result.record is None


# --- Institution metadata ----------------------------------------------------


def _write_client_config(conf_dir: Path, name: str, body: str, mtime: int) -> Path:
    path = conf_dir / name
    path.write_text(body, encoding="utf-8")
    os.utime(path, (mtime, mtime))
    return path


def test_institution_uses_newest_config(tmp_path: Path) -> None:
    conf_dir = tmp_path / "Share" / "conf"
    conf_dir.mkdir(parents=True)
    _write_client_config(
        conf_dir,
        "generatedApClientConfiguration-old.json",
        '{"participantId": "0192:111111111", "countryCode": "NO", "name": "Old"}',
        1_600_000_000,
    )
    _write_client_config(
        conf_dir,
        "generatedApClientConfiguration-new.json",
        '{"participantId": "0192:991825827", "countryCode": "NO", "name": "Example AS"}',
        1_700_000_000,
    )
    (conf_dir / "unrelated.json").write_text("{}", encoding="utf-8")

    record = institution.scan(str(tmp_path))

    assert record == institution.InstitutionRecord("991825827", "NO", "Example AS", None)


def test_institution_without_config(tmp_path: Path) -> None:
    assert institution.scan(str(tmp_path)) is None


def test_institution_malformed_json(tmp_path: Path) -> None:
    conf_dir = tmp_path / "Share" / "conf"
    conf_dir.mkdir(parents=True)
    (conf_dir / "generatedApClientConfiguration-1.json").write_text("{oops", encoding="utf-8")
    assert institution.scan(str(tmp_path)) is None


def test_institution_unlistable_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def denied(conf_dir):
        raise PermissionError(13, "Permission denied", str(conf_dir))

    monkeypatch.setattr(institution, "find_latest_config", denied)

    assert institution.scan(str(tmp_path)) is None

import json
import os

import pytest

from a11yscan import cli
from a11yscan.config import API_KEY_VARS
from a11yscan.models import PageResult, ScanConfig, ScanReport, utc_now


@pytest.fixture(autouse=True)
def clean_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    environ = {k: v for k, v in os.environ.items() if k not in API_KEY_VARS}
    monkeypatch.setattr(os, "environ", environ)


def fake_report(status: str = "completed") -> ScanReport:
    return ScanReport(
        base_url="https://example.com",
        scan_time=utc_now(),
        status=status,
        scan_config=ScanConfig(max_pages=50, offset=0, limit=5),
        page_results=(PageResult("https://example.com", 0.75),),
        urls_discovered=("https://example.com",),
    )


def test_invalid_request_exits_before_loading_settings(monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "load_settings", lambda env_file: pytest.fail("settings loaded"))
    assert cli.main(["https://example.com", "--limit", "500"]) == cli.EXIT_BAD_REQUEST
    assert "limit must be between 1 and 100" in capsys.readouterr().err


def test_missing_api_key_is_config_error(tmp_path, capsys) -> None:
    code = cli.main(["https://example.com", "--env-file", str(tmp_path / "none.env")])
    assert code == cli.EXIT_CONFIG
    assert "Configuration error" in capsys.readouterr().err


def test_writes_report_to_stdout(monkeypatch, capsys, tmp_path) -> None:
    monkeypatch.setenv("GOOGLE_API_KEY", "k")
    seen = {}

    def fake_crawl(request, settings, token=None, verbose=False):
        seen["request"] = request
        seen["token"] = token
        return fake_report()

    monkeypatch.setattr(cli, "crawl_and_scan", fake_crawl)
    code = cli.main([
        "https://example.com", "--max-pages", "10", "--offset", "2", "--limit", "3",
        "--env-file", str(tmp_path / "none.env"), "--out", "-",
    ])

    assert code == cli.EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "completed"
    assert payload["urls_visited"] == ["https://example.com"]
    request = seen["request"]
    assert (request.max_pages, request.offset, request.limit) == (10, 2, 3)
    assert not seen["token"].cancelled


def test_writes_report_to_file(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("GOOGLE_API_KEY", "k")
    monkeypatch.setattr(cli, "crawl_and_scan", lambda *a, **kw: fake_report("failed"))
    out = tmp_path / "reports" / "scan.json"

    code = cli.main([
        "https://example.com", "--env-file", str(tmp_path / "none.env"),
        "--out", str(out), "--pretty", "--verbose",
    ])

    assert code == cli.EXIT_FAILED
    assert json.loads(out.read_text(encoding="utf-8"))["status"] == "failed"


def test_cancelled_exit_code(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("GOOGLE_API_KEY", "k")
    monkeypatch.setattr(cli, "crawl_and_scan", lambda *a, **kw: fake_report("cancelled"))
    code = cli.main([
        "https://example.com", "--env-file", str(tmp_path / "none.env"),
        "--out", str(tmp_path / "scan.json"),
    ])
    assert code == cli.EXIT_CANCELLED


def test_generate_output_path(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    path = cli.generate_output_path("https://www.example.com/start")
    assert path.parent.name == "scans"
    assert path.name.startswith("www_example_com_")
    assert path.suffix == ".json"

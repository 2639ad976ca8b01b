import asyncio
import csv
import json

import pytest

import scraper
from conftest import FakePage, make_item
from tiktok_scraper_pkg.errors import WriteFailure
from tiktok_scraper_pkg.models import ScrapeRequest


def request(tmp_path, **overrides):
    fields = {
        "profile_id": "someone",
        "output_dir": str(tmp_path / "tiktok_data"),
        "iteration_delay_ms": 0,
        "settle_ms": 0,
    }
    fields.update(overrides)
    return ScrapeRequest(**fields)


def test_end_to_end_twelve_items(tmp_path, session_factory_for, fixed_clock):
    page = FakePage(counts=[5, 10, 12], items=[make_item(i) for i in range(12)])
    factory = session_factory_for(page)

    result = asyncio.run(scraper.scrape_profile(request(tmp_path), session_factory=factory, clock=fixed_clock))

    assert page.count_calls == 6
    assert result["found"] is True
    assert result["total_videos"] == 12
    assert "Pagination:6x12" in result["debug"]

    data = json.loads((tmp_path / "tiktok_data" / "someone_videos.json").read_text(encoding="utf-8"))
    assert data["totalVideos"] == 12
    assert [v["url"] for v in data["videos"]] == [make_item(i)["href"] for i in range(12)]

    with open(tmp_path / "tiktok_data" / "someone_videos.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert len(rows) == 13
    assert factory.session.close_calls == 1


def test_profile_not_found_is_reported_and_session_closed(tmp_path, session_factory_for):
    page = FakePage(has_list=False)
    factory = session_factory_for(page)

    result = asyncio.run(scraper.scrape_profile(request(tmp_path), session_factory=factory))

    assert result["found"] is False
    assert result["error_kind"] == "profile_not_found"
    assert page.closed is True
    assert not (tmp_path / "tiktok_data").exists()


def test_scroll_failure_keeps_partial_results(tmp_path, session_factory_for, fixed_clock):
    page = FakePage(counts=[5, 10, 15], items=[make_item(i) for i in range(10)], scroll_error_at=2)
    factory = session_factory_for(page)

    result = asyncio.run(scraper.scrape_profile(request(tmp_path), session_factory=factory, clock=fixed_clock))

    assert result["total_videos"] == 10
    assert ":aborted" in result["debug"]
    assert factory.session.close_calls == 1


def test_session_factory_failure_is_classified(tmp_path):
    async def broken_factory(headless=None):
        raise RuntimeError("net::ERR_INTERNET_DISCONNECTED")

    result = asyncio.run(scraper.scrape_profile(request(tmp_path), session_factory=broken_factory))
    assert result["error_kind"] == "network_unavailable"


def test_one_writer_failing_does_not_block_the_other(tmp_path, session_factory_for, monkeypatch):
    def failing_json(result, output_dir, logger=None):
        raise WriteFailure("disk full")

    monkeypatch.setattr(scraper, "write_json", failing_json)
    page = FakePage(counts=[2], items=[make_item(1), make_item(2)])

    result = asyncio.run(scraper.scrape_profile(request(tmp_path), session_factory=session_factory_for(page)))

    assert result["write_errors"] == ["disk full"]
    assert set(result["files"]) == {"csv"}
    assert (tmp_path / "tiktok_data" / "someone_videos.csv").exists()


def test_debug_run_saves_page_when_nothing_found(tmp_path, session_factory_for):
    page = FakePage(counts=[0], items=[])
    req = request(tmp_path, debug=True)

    result = asyncio.run(scraper.scrape_profile(req, session_factory=session_factory_for(page)))

    assert result["found"] is False
    assert set(result["debug_files"]) == {"screenshot", "html"}


class TestCli:
    def test_missing_username_exits_1(self, monkeypatch):
        called = []
        monkeypatch.setattr(scraper, "scrape_profile", lambda *a, **k: called.append(a))
        assert scraper.main([""]) == 1
        assert called == []

    def test_placeholder_username_exits_1(self):
        assert scraper.main(["username_here"]) == 1

    @pytest.fixture
    def fake_scrape(self, monkeypatch):
        outcome = {}

        async def fake(req):
            outcome["request"] = req
            return outcome["result"]

        monkeypatch.setattr(scraper, "scrape_profile", fake)
        return outcome

    def test_failure_still_exits_0(self, fake_scrape):
        fake_scrape["result"] = {"profile": "someone", "found": False, "error": "boom", "error_kind": "unknown"}
        assert scraper.main(["someone"]) == 0

    def test_strict_exit_reports_failure(self, fake_scrape):
        fake_scrape["result"] = {"profile": "someone", "found": False, "error": "boom", "error_kind": "unknown"}
        assert scraper.main(["someone", "--strict-exit"]) == 1

    def test_options_reach_request(self, fake_scrape, tmp_path):
        fake_scrape["result"] = {"profile": "someone", "found": True, "total_videos": 3, "videos": []}
        code = scraper.main([
            "https://www.tiktok.com/@someone",
            "--output-dir", str(tmp_path),
            "--max-scrolls", "7",
            "--scroll-delay", "10",
            "--headless", "false",
        ])
        req = fake_scrape["request"]
        assert code == 0
        assert (req.profile_id, req.max_iterations, req.iteration_delay_ms, req.headless) == ("someone", 7, 10, False)


def test_profile_path_cannot_leave_output_dir(tmp_path):
    with pytest.raises(ValueError):
        request(tmp_path, profile_id="../../escaped")
    assert list(tmp_path.iterdir()) == []


def test_cli_rejects_path_like_username(tmp_path, monkeypatch):
    called = []
    monkeypatch.setattr(scraper, "scrape_profile", lambda *a, **k: called.append(a))
    assert scraper.main(["../../escaped", "--output-dir", str(tmp_path)]) == 1
    assert called == []
    assert not (tmp_path.parent / "escaped_videos.json").exists()

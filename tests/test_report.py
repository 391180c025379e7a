# File: tests/test_report.py
import json

from site_harvest.crawler.models import CrawlSummary, ImageRecord, PageRecord
from site_harvest.report import render_html, render_json


def make_summary() -> CrawlSummary:
    page = PageRecord(
        url="http://example.com/",
        content_ref="abc.txt",
        images=(ImageRecord("http://example.com/a<b>.png", "def.png"),),
    )
    return CrawlSummary(pages=[page], failed_urls=["http://example.com/gone"], cancelled=True)


def test_render_json_writes_response_shape(tmp_path):
    out = render_json(make_summary(), tmp_path / "nested" / "report.json", pretty=False)
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["scraped_pages"] == 1
    assert data["data"][0]["images"][0]["filename"] == "def.png"


def test_render_json_accepts_plain_response(tmp_path):
    response = {"scraped_pages": 0, "data": []}
    out = render_json(response, tmp_path / "report.json")
    assert json.loads(out.read_text(encoding="utf-8")) == response


def test_render_html_escapes_and_lists_failures(tmp_path):
    out = render_html(make_summary(), tmp_path / "report.html")
    html = out.read_text(encoding="utf-8")
    assert "Scraped pages: 1" in html
    assert "a&lt;b&gt;.png" in html
    assert "http://example.com/gone" in html
    assert "cancelled" in html

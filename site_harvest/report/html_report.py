"""site_harvest.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_harvest.crawler.models import CrawlSummary
from site_harvest.report.json_report import summary_payload

TEMPLATE_NAME = "summary.html.j2"
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def render_html(
    summary: Union[CrawlSummary, Dict[str, Any]],
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        summary: CrawlSummary или словарь ответа run_crawl.
        output_path: путь к итоговому HTML-файлу.
        template_dir: директория с шаблоном ``summary.html.j2``;
            по умолчанию используется шаблон из пакета.

    Returns:
        Path до сохранённого HTML-файла.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    payload = summary_payload(summary)
    context: dict[str, Any] = {
        "scraped_pages": payload.get("scraped_pages", 0),
        "pages": payload.get("data", []),
        "failed_urls": summary.failed_urls if isinstance(summary, CrawlSummary) else [],
        "cancelled": summary.cancelled if isinstance(summary, CrawlSummary) else False,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path

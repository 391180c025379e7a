# site_harvest/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteHarvest.

Сериализация CrawlSummary (или уже готового ответа) в файл.
"""
import json
from pathlib import Path
from typing import Any, Dict, Union

from site_harvest.crawler.models import CrawlSummary


def summary_payload(summary: Union[CrawlSummary, Dict[str, Any]]) -> Dict[str, Any]:
    """Ответ в формате ``{"scraped_pages": N, "data": [...]}``."""
    if isinstance(summary, CrawlSummary):
        return summary.to_response()
    return dict(summary)


def render_json(
    summary: Union[CrawlSummary, Dict[str, Any]],
    output_path: Union[Path, str],
    *,
    pretty: bool = True,
) -> Path:
    """
    Сохраняет отчёт в формате JSON по указанному пути.

    :param summary: CrawlSummary или словарь ответа run_crawl
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(summary_payload(summary), f, ensure_ascii=False, indent=2 if pretty else None)

    return output

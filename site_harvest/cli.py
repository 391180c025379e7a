# === FILE: site_harvest/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteHarvest через командную строку.

Команды:
  crawl URL   Обойти сайт, сохранить текст и изображения, вывести/сохранить отчёт
  config      Показать текущую конфигурацию
  stats       Показать число сохранённых страниц и изображений

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-pages INT     Лимит страниц (1..100, по умолчанию из конфига)
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Лимит времени обхода; по истечении выводится частичный результат

Пример:
  site-harvest crawl https://example.com --max-pages 20 --json reports/crawl.json
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_harvest import __version__
from site_harvest.config import load_config
from site_harvest.engine import crawl_summary
from site_harvest.errors import HarvestError
from site_harvest.logger import DEFAULT_FORMAT, init_logging
from site_harvest.report.html_report import render_html
from site_harvest.report.json_report import render_json
from site_harvest.storage.records import open_record_store

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteHarvest, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteHarvest CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--max-pages', '-n', 'max_pages',
    type=int,
    default=None,
    help='Макс. число страниц (1..100)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Лимит времени обхода (секунд)'
)
@click.pass_context
def crawl(ctx, url, max_pages, json_output, html_output, pretty, crawl_timeout):
    """Обойти сайт начиная с URL и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    if crawl_timeout is not None:
        if crawl_timeout <= 0:
            print_error('--crawl-timeout должен быть больше нуля')
        cfg = cfg.model_copy(update={'crawl_timeout': crawl_timeout})

    try:
        summary = asyncio.run(crawl_summary(url, max_pages, config=cfg))
    except HarvestError as e:
        print_error(f'Ошибка при обходе: {e}')

    payload = summary.to_response()

    if not json_output and not html_output:
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2 if pretty else None))
        return

    if json_output:
        try:
            saved_json = render_json(summary, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(summary, html_output)
            click.echo(f'HTML report: {saved_html}')
        except OSError as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('stats', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def stats(ctx):
    """Показать число сохранённых страниц и изображений."""
    cfg = ctx.obj['config']
    try:
        records = open_record_store(cfg.records_path)
    except HarvestError as e:
        print_error(f'Ошибка чтения записей: {e}')
    click.echo(json.dumps({'pages': records.count_pages(), 'images': records.count_images()}))


if __name__ == "__main__":
    cli()

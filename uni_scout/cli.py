# === FILE: uni_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера UniScout через командную строку.

Команды:
  crawl     Обойти домен от стартовых URL и вывести/сохранить записи
  serve     Запустить HTTP API (POST /scrape) с доставкой на webhook
  config    Показать текущую конфигурацию
  project   Сократить сохранённые записи до {domain, url, title, extractionMethod}

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию UniScout

Пример:
  uni-scout crawl example.edu https://example.edu/admissions --json out.json --max-pages 50
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from uni_scout import __version__
from uni_scout.config import CrawlerConfig, CrawlRequest, load_config
from uni_scout.delivery import WebhookSink
from uni_scout.engine import run_domain
from uni_scout.logger import DEFAULT_FORMAT, init_logging
from uni_scout.projection import project_file
from uni_scout.report.html_report import render_html
from uni_scout.report.json_report import render_json
from uni_scout.server import serve as run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='UniScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON (по умолчанию configs/default.yaml).'
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
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд UniScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


def _apply_overrides(cfg: CrawlerConfig, **overrides: Any) -> CrawlerConfig:
    update: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return cfg
    try:
        # model_copy не валидирует, поэтому пересобираем модель
        return CrawlerConfig.model_validate({**cfg.model_dump(), **update})
    except ValidationError as e:
        print_error(f'Некорректные параметры: {e}')


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('domain')
@click.argument('seed_urls', nargs=-1, required=True)
@click.option('--max-depth', type=int, default=None, help='Override max_depth')
@click.option('--max-pages', type=int, default=None, help='Override max_pages_per_domain')
@click.option('--concurrency', type=int, default=None, help='Override concurrent_pages')
@click.option(
    '--renderer', type=click.Choice(['browser', 'http']), default=None,
    help='Способ загрузки страниц (override renderer)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить записи в JSON-файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'
)
@click.option('--webhook', 'webhook_url', default=None, help='Отправить записи POST-запросом на URL')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, domain, seed_urls, max_depth, max_pages, concurrency, renderer,
          json_output, html_output, template_dir, webhook_url, pretty, crawl_timeout):
    """Обойти DOMAIN начиная с SEED_URLS."""
    cfg = _apply_overrides(
        ctx.obj['config'],
        max_depth=max_depth,
        max_pages_per_domain=max_pages,
        concurrent_pages=concurrency,
        renderer=renderer,
    )
    try:
        request = CrawlRequest(domain=domain, seed_urls=list(seed_urls), webhook_url=webhook_url)
    except ValidationError as e:
        print_error(f'Некорректное задание: {e}')

    sink = WebhookSink(webhook_url) if webhook_url else None
    try:
        if crawl_timeout:
            report = asyncio.run(
                asyncio.wait_for(run_domain(request, cfg, sink), timeout=crawl_timeout)
            )
        else:
            report = asyncio.run(run_domain(request, cfg, sink))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if report.delivery_error:
        click.secho(f'Доставка не удалась: {report.delivery_error}', fg='yellow', err=True)

    # Если не сохраняем в файл, печатаем в stdout
    if not json_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(report.to_dicts(), ensure_ascii=False, indent=indent))
        return

    # JSON-отчёт
    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    # HTML-отчёт
    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='0.0.0.0', show_default=True, help='Адрес для прослушивания')
@click.option('--port', default=10000, show_default=True, envvar='PORT', type=int, help='Порт HTTP API')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP API приёма заданий."""
    run_server(ctx.obj['config'], host=host, port=port)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('project', context_settings=CONTEXT_SETTINGS)
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('output_path', required=False, type=click.Path(dir_okay=False, path_type=Path))
def project(input_path: Path, output_path: Optional[Path]):
    """Сократить записи из INPUT_PATH до проекции (по умолчанию <имя>.small.json)."""
    target = output_path or input_path.with_name(f'{input_path.stem}.small.json')
    try:
        count = project_file(input_path, target)
    except (ValueError, OSError) as e:
        print_error(f'Ошибка обработки {input_path}: {e}')
    click.echo(f'Projected {count} records -> {target}')


if __name__ == "__main__":
    cli()

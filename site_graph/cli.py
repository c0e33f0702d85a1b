# === FILE: site_graph/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteGraph через командную строку.

Команды:
  crawl URL   Обойти сайт и вывести граф страниц
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (необязательно)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --verbose, -v          Трассировка загрузок и пропущенных ссылок
  --max-concurrent N     Максимум одновременных запросов (default: 100)
  --timeout SEC          Таймаут одного запроса (секунд)
  --format tree|json     Формат вывода графа
  --pretty               Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC    Таймаут всего обхода (секунд)

Дополнительно:
  --version           Показать версию SiteGraph

Пример:
  site_graph crawl https://example.com -v --max-concurrent 20
"""
import sys
import asyncio
from pathlib import Path

import click
from pydantic import ValidationError

from site_graph import __version__
from site_graph.config import CrawlerConfig, load_config, override
from site_graph.crawler.canonical import SiteRoot
from site_graph.crawler.errors import CrawlError
from site_graph.engine import start_crawl
from site_graph.logger import init_logging
from site_graph.report import render_json, render_tree

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str, code: int = 1):
    click.secho(message, fg='red', err=True)
    sys.exit(code)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', message='SiteGraph, version %(version)s')
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
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteGraph CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    cfg = None
    if config_path is not None:
        try:
            cfg = load_config(config_path)
        except (OSError, ValueError, TypeError) as e:
            print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--verbose', '-v', is_flag=True, help='Трассировка загрузок и пропущенных ссылок')
@click.option(
    '--max-concurrent', '-m', 'max_concurrent',
    type=click.IntRange(min=1),
    default=None,
    help='Максимум одновременных запросов на весь обход (default: 100)'
)
@click.option('--timeout', 'timeout', type=float, default=None, help='Таймаут одного запроса (секунд)')
@click.option(
    '--format', '-f', 'output_format',
    type=click.Choice(['tree', 'json']),
    default='tree', show_default=True,
    help='Формат вывода графа'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, url, verbose, max_concurrent, timeout, output_format, pretty, crawl_timeout):
    """Обойти сайт начиная с URL и вывести граф страниц."""
    cfg = ctx.obj['config']
    if url is None and cfg is None:
        print_error('Не указан URL: передайте его аргументом или через --config')
    if url is not None:
        try:
            SiteRoot.from_url(url)
        except CrawlError as e:
            print_error(f'failed to crawl {url}: {e}', code=2)
    try:
        if cfg is None:
            cfg = CrawlerConfig(base_url=url.strip())
        cfg = override(
            cfg,
            base_url=url.strip() if url else None,
            verbose=True if verbose else None,
            max_concurrent_fetches=max_concurrent,
            timeout=timeout,
        )
    except ValidationError as e:
        print_error(f'Неверные параметры: {e}')

    try:
        if crawl_timeout:
            page = asyncio.run(
                asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout)
            )
        else:
            page = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except CrawlError as e:
        print_error(f'failed to crawl {cfg.base_url}: {e}', code=2)

    if output_format == 'json':
        click.echo(render_json(page, pretty=pretty))
    else:
        click.echo(render_tree(page))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    if cfg is None:
        print_error('Конфигурация не задана: используйте --config PATH')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

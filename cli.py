# cli.py

"""
Точка входа для запуска краулера SiteGraph без установки пакета.

Пример запуска:
    python cli.py crawl https://example.com -v
    python cli.py --config configs/default.yaml crawl --format json --pretty
"""
from site_graph.cli import cli


if __name__ == '__main__':
    cli()

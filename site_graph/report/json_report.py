# site_graph/report/json_report.py

"""
JSON-представление графа страниц.

Каждая страница перечисляется один раз, ссылки записываются как канонические
ключи, поэтому циклы сериализуются без повторов.
"""
from __future__ import annotations

import json
from typing import Any, Dict

from site_graph.crawler.models import Page


def graph_to_dict(page: Page) -> Dict[str, Any]:
    """Преобразует граф в словарь ``{"root": ..., "pages": [...]}``."""
    return {
        "root": page.uri,
        "pages": [
            {
                "uri": node.uri,
                "description": node.description,
                "links": [link.uri for link in node.links],
            }
            for node in page.walk()
        ],
    }


def render_json(page: Page, pretty: bool = False) -> str:
    """
    Сериализует граф в строку JSON.

    Пример:
    ```python
    from site_graph.report.json_report import render_json
    print(render_json(page, pretty=True))
    ```
    """
    return json.dumps(graph_to_dict(page), ensure_ascii=False, indent=2 if pretty else None)

# site_graph/report/tree_report.py

"""
Текстовое дерево графа страниц для вывода в консоль.
"""
from __future__ import annotations

from typing import List, Set

from site_graph.crawler.models import Page

INDENT = "  "


def render_tree(page: Page) -> str:
    """
    Печатает граф в виде дерева с отступом в два пробела на уровень.

    Страница, уже выведенная выше, помечается ``(showed)`` и не раскрывается
    повторно, поэтому циклы выводятся конечным числом строк. Повторные ссылки
    на одну страницу в пределах одного родителя печатаются один раз.

    :param page: корень графа
    :return: строки дерева, разделённые ``\\n``
    """
    lines: List[str] = []
    printed: Set[str] = set()

    def _walk(node: Page, depth: int) -> None:
        prefix = INDENT * depth
        if node.uri in printed:
            lines.append(f'{prefix}(showed) {node.uri} "{node.description}"')
            return
        lines.append(f'{prefix}{node.uri} "{node.description}"')
        printed.add(node.uri)

        unique: Set[str] = set()
        for child in node.links:
            if child.uri in unique:
                continue
            unique.add(child.uri)
            _walk(child, depth + 1)

    _walk(page, 0)
    return "\n".join(lines)

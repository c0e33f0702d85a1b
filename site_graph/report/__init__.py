"""site_graph.report: вывод графа страниц в консоль (дерево и JSON)."""

from __future__ import annotations

from site_graph.report.json_report import graph_to_dict, render_json
from site_graph.report.tree_report import render_tree

__all__ = ["graph_to_dict", "render_json", "render_tree"]

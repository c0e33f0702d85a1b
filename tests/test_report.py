import json

from site_graph.crawler.models import Page
from site_graph.report import graph_to_dict, render_json, render_tree


def test_render_tree_marks_already_shown_pages(sample_graph):
    assert render_tree(sample_graph).splitlines() == [
        '/ "site root"',
        '  (showed) / "site root"',
        '  /about "about"',
        '    (showed) / "site root"',
        '    /career "career"',
        '  /products "products (404)"',
    ]


def test_render_tree_skips_duplicates_within_one_parent():
    root = Page(uri="/", description="site root")
    child = Page(uri="/a", description="a")
    root.links = [child, child, child]
    assert render_tree(root).splitlines() == ['/ "site root"', '  /a "a"']


def test_graph_to_dict_lists_each_page_once(sample_graph):
    data = graph_to_dict(sample_graph)
    assert data["root"] == "/"
    assert [p["uri"] for p in data["pages"]] == ["/", "/about", "/products", "/career"]
    assert data["pages"][0]["links"] == ["/", "/about", "/products"]
    assert data["pages"][1]["links"] == ["/", "/career"]
    assert data["pages"][2] == {"uri": "/products", "description": "products (404)", "links": []}


def test_render_json(sample_graph):
    compact = render_json(sample_graph)
    pretty = render_json(sample_graph, pretty=True)
    assert "\n" not in compact
    assert json.loads(compact) == json.loads(pretty) == graph_to_dict(sample_graph)


def test_walk_handles_cycles(sample_graph):
    assert [p.uri for p in sample_graph.walk()] == ["/", "/about", "/products", "/career"]

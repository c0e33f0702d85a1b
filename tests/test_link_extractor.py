import pytest
from bs4.builder import ParserRejectedMarkup

import site_graph.crawler.link_extractor as extractor_module
from site_graph.crawler.errors import ParseError
from site_graph.crawler.link_extractor import extract_links
from site_graph.crawler.models import Link

HTML_HOME = """
<!DOCTYPE html>
<html>
<head></head>
<a href="/">home</a>
<a href="/about">about</a>
<a href="/products">products</a>
<a href="https://google.com">google</a>
<body>
</body>
</html>
"""


def test_extract_home_links():
    links = extract_links("http://example.com/", HTML_HOME)
    assert links == [
        Link("/", "home"),
        Link("/about", "about"),
        Link("/products", "products"),
    ]


def test_bytes_body_and_document_order():
    body = (
        b'<p><a href="/b">B</a></p><div><a href="/a">A</a>'
        b'<a href="/b">B again</a></div>'
    )
    links = extract_links("http://example.com/", body)
    assert [link.href for link in links] == ["/b", "/a", "/b"]
    assert links[2].text == "B again"


def test_description_falls_back_to_href():
    links = extract_links("http://example.com/", '<a href="/empty"></a><a href="/img"><img src="x.png"></a>')
    assert links == [Link("/empty", "/empty"), Link("/img", "/img")]


def test_nested_text_is_collapsed():
    links = extract_links("http://example.com/", '<a href="/x">  Read\n <b>more</b>  </a>')
    assert links == [Link("/x", "Read more")]


def test_same_host_absolute_kept_others_dropped():
    html = (
        '<a href="http://example.com/in">in</a>'
        '<a href="http://other.com/out">out</a>'
        '<a href="//cdn.other.com/x">cdn</a>'
        '<a href="relative">rel</a>'
        '<a href="mailto:me@example.com">mail</a>'
        '<a>no href</a>'
        '<a href="   ">blank</a>'
    )
    links = extract_links("http://example.com/page", html)
    assert [link.href for link in links] == [
        "http://example.com/in",
        "relative",
        "mailto:me@example.com",
    ]


def test_host_match_ignores_default_port_userinfo_and_case():
    html = (
        '<a href="http://example.com:80/x">port</a>'
        '<a href="http://me@example.com/y">user</a>'
        '<a href="HTTP://EXAMPLE.COM/z">upper</a>'
        '<a href="http://example.com:8080/other">other port</a>'
        '<a href="https://example.com:80/tls">tls on 80</a>'
    )
    links = extract_links("http://example.com/", html)
    assert [link.href for link in links] == [
        "http://example.com:80/x",
        "http://me@example.com/y",
        "HTTP://EXAMPLE.COM/z",
    ]


def test_unparseable_absolute_href_is_kept():
    links = extract_links("http://example.com/", '<a href="http://[::1">bad</a><a href="http://example.com:99999/p">p</a>')
    assert [link.href for link in links] == ["http://[::1", "http://example.com:99999/p"]


def test_parser_rejection_raises_parse_error(monkeypatch):
    def rejecting(*args, **kwargs):
        raise ParserRejectedMarkup("bad markup")

    monkeypatch.setattr(extractor_module, "BeautifulSoup", rejecting)
    with pytest.raises(ParseError) as excinfo:
        extract_links("http://example.com/broken", "<a href='/x'>x</a>")
    assert excinfo.value.url == "http://example.com/broken"

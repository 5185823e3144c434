"""
Tests for the flat scanners: meta tags, Dublin Core, Open Graph, Twitter
Cards, JSON-LD, rel links, oEmbed and Web App Manifest.
"""

import pytest

from structured_markup import (
    ExtractorSettings,
    ManifestError,
    StructuredDataExtractor,
    extract_dublin_core,
    extract_jsonld,
    extract_manifest,
    extract_meta,
    extract_oembed,
    extract_opengraph,
    extract_rel_links,
    extract_twitter,
    parse_manifest,
)

BASE = "https://ex.com/blog/post"

HEAD = """
<html lang="en-GB">
<head>
  <meta charset="utf-8">
  <title> A Post </title>
  <meta name="description" content="About things">
  <meta name="keywords" content="one, two ,, three">
  <meta name="author" content="Jane">
  <meta name="robots" content="noindex, follow">
  <meta name="theme-color" content="#fff">
  <link rel="canonical" href="/blog/post">
  <link rel="shortcut icon" href="/favicon.ico">
  <link rel="manifest" href="/site.webmanifest">
  <link rel="next" href="?page=2">
  <link rel="alternate" hreflang="de" href="https://ex.com/de/post">
  <link rel="alternate" type="application/rss+xml" title="Feed" href="/feed.xml">
  <link rel="alternate" type="application/json+oembed" href="/oembed?format=json" title="Post">
  <link rel="alternate" type="text/xml+oembed" href="/oembed?format=xml">

  <meta property="og:title" content="OG Title">
  <meta property="og:type" content="article">
  <meta property="og:url" content="/blog/post">
  <meta property="og:image" content="/a.png">
  <meta property="og:image:width" content="800">
  <meta property="og:image:height" content="oops">
  <meta property="og:image" content="/b.png">
  <meta property="og:image:alt" content="Second">
  <meta property="og:locale:alternate" content="de_DE">
  <meta property="article:author" content="Jane">
  <meta property="article:tag" content="x">
  <meta property="article:tag" content="y">
  <meta property="article:published_time" content="2024-01-01T00:00:00Z">

  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:site" content="@ex">
  <meta name="twitter:player" content="/player">
  <meta name="twitter:player:width" content="640">

  <meta name="DC.title" content="DC Title">
  <meta name="dcterms.subject" content="a; b, c">
  <meta name="DC.creator" content="Jane">
</head>
<body>
  <a rel="author me" href="/about">About</a>
  <a rel="Me" href="https://social.example/@jane">Social</a>
</body>
</html>
"""


def test_meta_tags():
    meta = extract_meta(HEAD, BASE)

    assert meta.title == "A Post"
    assert meta.description == "About things"
    assert meta.keywords == ["one", "two", "three"]
    assert meta.author == "Jane"
    assert meta.charset == "utf-8"
    assert meta.language == "en-GB"
    assert meta.theme_color == "#fff"
    assert meta.robots.index is False
    assert meta.robots.follow is True
    assert meta.canonical == "https://ex.com/blog/post"
    assert meta.icon == "https://ex.com/favicon.ico"
    assert meta.manifest == "https://ex.com/site.webmanifest"
    assert meta.next == "https://ex.com/blog/post?page=2"

    assert [(a.hreflang, a.href) for a in meta.alternate] == [("de", "https://ex.com/de/post")]
    (feed,) = meta.feeds
    assert feed.href == "https://ex.com/feed.xml"
    assert feed.title == "Feed"


def test_charset_from_http_equiv():
    html = '<head><meta http-equiv="Content-Type" content="text/html; charset=ISO-8859-1"></head>'
    assert extract_meta(html).charset == "ISO-8859-1"


def test_dublin_core():
    dc = extract_dublin_core(HEAD)
    assert dc.title == "DC Title"
    assert dc.creator == "Jane"
    assert dc.subject == ["a", "b", "c"]
    assert dc.rights is None


def test_opengraph():
    og = extract_opengraph(HEAD, BASE)

    assert og.title == "OG Title"
    assert og.type == "article"
    assert og.url == "https://ex.com/blog/post"
    assert og.image == "https://ex.com/a.png"
    assert [i.url for i in og.images] == ["https://ex.com/a.png", "https://ex.com/b.png"]
    assert og.images[0].width == 800
    assert og.images[0].height is None
    assert og.images[1].alt == "Second"
    assert og.locale_alternate == ["de_DE"]

    assert og.article.authors == ["Jane"]
    assert og.article.tags == ["x", "y"]
    assert og.article.published_time == "2024-01-01T00:00:00Z"


def test_opengraph_without_article():
    assert extract_opengraph('<meta property="og:title" content="T">').article is None


def test_twitter_card_with_fallback():
    card = extract_twitter(HEAD, BASE)

    assert card.card == "summary_large_image"
    assert card.site == "@ex"
    assert card.player.url == "https://ex.com/player"
    assert card.player.width == 640
    # Missing twitter:* fields come from Open Graph
    assert card.title == "OG Title"
    assert card.image == "https://ex.com/a.png"


def test_twitter_card_without_fallback():
    extractor = StructuredDataExtractor(ExtractorSettings(twitter_fallback=False))
    card = extractor.extract_twitter(HEAD, BASE)
    assert card.title is None
    assert card.image is None


def test_jsonld_blocks():
    html = """
    <script type="application/ld+json">{"@type": "Article", "headline": "H"}</script>
    <script type="application/ld+json">[{"@type": "Person"}, 42, {"@type": "Place"}]</script>
    <script type="application/ld+json">{"@context": "https://schema.org", "@graph": [{"@id": "#a"}, {"@id": "#b"}]}</script>
    <script type="application/ld+json">{not json</script>
    <script type="text/javascript">var x = {"@type": "Nope"};</script>
    """
    objects = extract_jsonld(html)
    assert [o.get("@type") or o.get("@id") for o in objects] == ["Article", "Person", "Place", "#a", "#b"]


def test_rel_links():
    rel = extract_rel_links(HEAD, BASE)

    assert rel["me"] == ["https://ex.com/about", "https://social.example/@jane"]
    assert rel["author"] == ["https://ex.com/about"]
    assert rel["canonical"] == ["https://ex.com/blog/post"]
    assert rel["shortcut"] == rel["icon"] == ["https://ex.com/favicon.ico"]


def test_oembed_discovery():
    oembed = extract_oembed(HEAD, BASE)

    (json_endpoint,) = oembed.json_endpoints
    assert json_endpoint.href == "https://ex.com/oembed?format=json"
    assert json_endpoint.title == "Post"
    (xml_endpoint,) = oembed.xml_endpoints
    assert xml_endpoint.format == "xml"


MANIFEST = """
{
  "name": "Example App",
  "short_name": "Ex",
  "start_url": "./?source=pwa",
  "scope": "/",
  "display": "standalone",
  "categories": ["news", 7],
  "icons": [
    {"src": "icons/192.png", "sizes": "192x192", "type": "image/png"},
    {"sizes": "no src"}
  ],
  "shortcuts": [
    {"name": "Today", "url": "/today", "icons": [{"src": "/t.png"}]},
    {"name": "No url"}
  ]
}
"""


def test_parse_manifest():
    manifest = parse_manifest(MANIFEST, "https://ex.com/app/manifest.json")

    assert manifest.name == "Example App"
    assert manifest.start_url == "https://ex.com/app/?source=pwa"
    assert manifest.scope == "https://ex.com/"
    assert manifest.categories == ["news"]
    (icon,) = manifest.icons
    assert icon.src == "https://ex.com/app/icons/192.png"
    assert icon.sizes == "192x192"
    (shortcut,) = manifest.shortcuts
    assert shortcut.url == "https://ex.com/today"
    assert shortcut.icons[0].src == "https://ex.com/t.png"


@pytest.mark.parametrize("blob", ["{broken", "[1, 2]", '"just a string"'])
def test_parse_manifest_rejects_bad_json(blob):
    with pytest.raises(ManifestError):
        parse_manifest(blob)


def test_manifest_discovery():
    discovery = extract_manifest(HEAD, BASE)
    assert discovery.href == "https://ex.com/site.webmanifest"
    assert discovery.manifest is None

    discovery = extract_manifest(HEAD, BASE, manifest_json='{"name": "X", "start_url": "/go"}')
    assert discovery.manifest.name == "X"
    assert discovery.manifest.start_url == "https://ex.com/go"

    assert extract_manifest("<p>no manifest</p>").href is None

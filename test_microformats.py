"""
Tests for the Microformats2 interpreter.

Covers root detection, the four property families, nesting, implied
properties, the value-class pattern and legacy (mf1) class aliases.
"""

from structured_markup import extract_microformats
from structured_markup.schemas import DateTimeValue, ItemValue, TextValue, UrlValue

BASE = "https://ex.com/"


def test_h_card_scenario():
    html = '<div class="h-card"><span class="p-name">Jane Doe</span><a class="u-url" href="/x">site</a></div>'
    result = extract_microformats(html, BASE)

    assert list(result) == ["h-card"]
    (card,) = result["h-card"]
    assert card.types == ["h-card"]
    assert card.properties == {
        "name": [TextValue(value="Jane Doe")],
        "url": [UrlValue(value="https://ex.com/x")],
    }
    assert card.subject is None


def test_two_root_classes_make_one_item():
    html = '<div class="h-card h-org"><span class="p-name">Acme</span></div>'
    result = extract_microformats(html)

    assert result["h-card"][0] is result["h-org"][0]
    assert result["h-card"][0].types == ["h-card", "h-org"]


def test_duplicate_root_class_kept_once():
    result = extract_microformats('<div class="h-entry h-entry"><p class="p-name">x</p></div>')
    assert result["h-entry"][0].types == ["h-entry"]


def test_nested_root_with_property_becomes_item_value():
    html = """
    <article class="h-entry">
      <div class="p-author h-card"><span class="p-name">Jane</span></div>
      <h1 class="p-name">Post</h1>
    </article>
    """
    result = extract_microformats(html)

    assert list(result) == ["h-entry"]
    entry = result["h-entry"][0]
    assert entry.first("name") == "Post"

    (author,) = entry.get("author")
    assert isinstance(author, ItemValue)
    assert author.value.types == ["h-card"]
    assert author.value.first("name") == "Jane"


def test_nested_root_without_property_is_top_level():
    html = '<div class="h-feed"><div class="h-entry"><span class="p-name">A</span></div></div>'
    result = extract_microformats(html)

    assert list(result) == ["h-feed", "h-entry"]
    assert result["h-entry"][0].first("name") == "A"
    # The entry's name is not copied onto the feed
    assert result["h-feed"][0].get("name") == []


def test_property_values_accumulate_in_document_order():
    html = """
    <div class="h-entry">
      <span class="p-category">one</span>
      <span class="p-category">two</span>
      <span class="p-category">three</span>
    </div>
    """
    entry = extract_microformats(html)["h-entry"][0]
    assert [v.value for v in entry.get("category")] == ["one", "two", "three"]


def test_one_element_several_properties():
    html = '<div class="h-card"><a class="p-name u-url" href="/me">Jane</a></div>'
    card = extract_microformats(html, BASE)["h-card"][0]
    assert card.get("name") == [TextValue(value="Jane")]
    assert card.get("url") == [UrlValue(value="https://ex.com/me")]


def test_text_property_sources():
    html = """
    <div class="h-card">
      <abbr class="p-nickname" title="JD">J.</abbr>
      <img class="p-note" src="/n.png" alt="A note">
      <data class="p-org" value="Acme Inc">Acme</data>
    </div>
    """
    card = extract_microformats(html)["h-card"][0]
    assert card.first("nickname") == "JD"
    assert card.first("note") == "A note"
    assert card.first("org") == "Acme Inc"


def test_url_property_sources():
    html = """
    <div class="h-card">
      <img class="u-photo" src="me.jpg" alt="">
      <a class="u-email" href="mailto:jane@ex.com">mail</a>
      <span class="u-uid">https://ex.com/jane</span>
    </div>
    """
    card = extract_microformats(html, "https://ex.com/people/")["h-card"][0]
    assert card.get("photo") == [UrlValue(value="https://ex.com/people/me.jpg")]
    assert card.first("email") == "mailto:jane@ex.com"
    assert card.first("uid") == "https://ex.com/jane"


def test_relative_url_kept_without_base():
    card = extract_microformats('<div class="h-card"><a class="u-url" href="/x">x</a></div>')["h-card"][0]
    assert card.first("url") == "/x"


def test_datetime_property():
    html = """
    <div class="h-event">
      <span class="p-name">Launch</span>
      <time class="dt-start" datetime="2024-05-01T10:00:00Z">May 1st</time>
      <span class="dt-end">2024-05-02</span>
    </div>
    """
    event = extract_microformats(html)["h-event"][0]
    assert event.get("start") == [DateTimeValue(value="2024-05-01T10:00:00Z")]
    assert event.get("end") == [DateTimeValue(value="2024-05-02")]


def test_value_class_pattern():
    html = """
    <div class="h-event">
      <span class="p-name">Meetup</span>
      <span class="dt-start"><span class="value">2024-01-01</span> at <span class="value">10:00</span></span>
      <span class="p-summary">The <b class="value">short</b> one</span>
    </div>
    """
    event = extract_microformats(html)["h-event"][0]
    assert event.first("start") == "2024-01-01 10:00"
    assert event.first("summary") == "short"


def test_embedded_property_keeps_markup():
    html = '<div class="h-entry"><div class="e-content"> <p>Hello <b>world</b></p> </div></div>'
    entry = extract_microformats(html)["h-entry"][0]

    (content,) = entry.get("content")
    assert isinstance(content, TextValue)
    # Inner markup is kept verbatim, surrounding whitespace included
    assert content.value == " <p>Hello <b>world</b></p> "


def test_implied_name_url_from_anchor_root():
    card = extract_microformats('<a class="h-card" href="/jane">Jane</a>', BASE)["h-card"][0]
    assert card.first("name") == "Jane"
    assert card.first("url") == "https://ex.com/jane"


def test_implied_name_and_photo_from_only_image():
    card = extract_microformats('<div class="h-card"><img src="/me.jpg" alt="Me"></div>', BASE)["h-card"][0]
    assert card.first("name") == "Me"
    assert card.get("photo") == [UrlValue(value="https://ex.com/me.jpg")]
    assert "url" not in card.properties


def test_no_implied_name_when_text_property_present():
    entry = extract_microformats('<div class="h-entry"><p class="p-summary">Short</p></div>')["h-entry"][0]
    assert "name" not in entry.properties
    assert entry.first("summary") == "Short"


def test_no_implied_url_when_url_property_present():
    html = '<a class="h-card" href="/implied"><span class="p-name">J</span><span class="u-photo">/p.jpg</span></a>'
    card = extract_microformats(html, BASE)["h-card"][0]
    assert "url" not in card.properties


def test_legacy_vcard():
    html = """
    <div class="vcard">
      <span class="fn">Jane Doe</span>
      <a class="url" href="/jane">home</a>
      <abbr class="bday" title="1980-01-01">Jan 1</abbr>
    </div>
    """
    card = extract_microformats(html, BASE)["h-card"][0]
    assert card.types == ["h-card"]
    assert card.first("name") == "Jane Doe"
    assert card.get("url") == [UrlValue(value="https://ex.com/jane")]
    assert card.get("bday") == [DateTimeValue(value="1980-01-01")]


def test_legacy_root_has_no_implied_properties():
    card = extract_microformats('<div class="vcard"><a href="/j">Jane</a></div>', BASE)["h-card"][0]
    assert card.properties == {}


def test_modern_root_ignores_legacy_classes():
    html = '<div class="h-card vcard"><span class="fn">Legacy</span><span class="p-name">Modern</span></div>'
    card = extract_microformats(html)["h-card"][0]
    assert card.types == ["h-card"]
    assert card.get("name") == [TextValue(value="Modern")]


def test_no_roots_returns_empty_mapping():
    assert extract_microformats('<div class="p-name card">Nothing here</div>') == {}


def test_malformed_markup_is_tolerated():
    result = extract_microformats('<div class="h-card"><span class="p-name">Unclosed')
    (card,) = result["h-card"]
    assert card.first("name") == "Unclosed"


def test_text_skips_script_and_style_source():
    html = """
    <div class="h-card">
      <p class="p-name">Jane<script>var x = 1;</script><style>p { color: red }</style></p>
      <p class="p-note">Hi <template><b>hidden</b></template>there<!-- comment --></p>
    </div>
    """
    card = extract_microformats(html)["h-card"][0]
    assert card.first("name") == "Jane"
    assert card.first("note") == "Hi there"


def test_implied_name_skips_script_source():
    card = extract_microformats('<a class="h-card" href="/j">Jane<script>track()</script></a>')["h-card"][0]
    assert card.first("name") == "Jane"

from bs4 import BeautifulSoup

from gmaps_enricher.core import site_enricher
from gmaps_enricher.core.tax_id import extract_tax_id
from gmaps_enricher.models import Platform


def _soup(html):
    return BeautifulSoup(html, "html.parser")


def test_mailto_emails_are_deduplicated_in_order():
    html = """
    <a href="mailto:a@x.com">A</a>
    <a href="mailto:b@x.com?subject=Hello">B</a>
    <a href="mailto:a@x.com">A again</a>
    <a href="mailto:not-an-email">broken</a>
    """
    assert site_enricher.extract_mailto_emails(_soup(html)) == ["a@x.com", "b@x.com"]


def test_body_fallback_skipped_when_mailto_found():
    html = '<a href="mailto:a@x.com">A</a><p>other@x.com</p>'
    emails = site_enricher.extract_emails(_soup(html), html.encode())
    assert emails == ["a@x.com"]


def test_body_fallback_runs_without_mailto():
    html = "<p>Write to contact@shop.com or sales@shop.com, contact@shop.com</p>"
    emails = site_enricher.extract_emails(_soup(html), html.encode())
    assert emails == ["contact@shop.com", "sales@shop.com"]


def test_body_emails_keep_case():
    assert site_enricher.extract_body_emails(b"Info@Shop.com info@shop.com") == ["Info@Shop.com", "info@shop.com"]


def test_get_valid_email():
    assert site_enricher.get_valid_email(" jan%40firma.pl ") == "jan@firma.pl"
    assert site_enricher.get_valid_email("") == ""
    assert site_enricher.get_valid_email("jan@") == ""


def test_social_links_last_anchor_wins():
    html = """
    <a href="https://facebook.com/first">fb</a>
    <a href="https://instagram.com/shop">ig</a>
    <a href="https://facebook.com/second">fb</a>
    <a href="/about">about</a>
    """
    links = site_enricher.extract_social_links(_soup(html))
    assert links == {
        Platform.FACEBOOK: "https://facebook.com/second",
        Platform.INSTAGRAM: "https://instagram.com/shop",
    }


def test_extract_tax_id_groupings():
    assert extract_tax_id(b"NIP: 123-456-78-90") == "1234567890"
    assert extract_tax_id(b"NIP 123-45-67-890") == "1234567890"
    assert extract_tax_id("NIP 123 456 78 90") == "1234567890"


def test_extract_tax_id_returns_first_match():
    assert extract_tax_id(b"111-222-33-44 and 555-66-77-888") == "1112223344"


def test_extract_tax_id_without_match():
    assert extract_tax_id(b"call us: 1234567890 or +48 600 700 800") == ""
    assert extract_tax_id(b"") == ""

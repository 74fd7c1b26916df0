import pytest

from gmaps_enricher.models import BusinessRecord, Platform, SocialLinks


def test_add_emails_deduplicates_and_skips_empty():
    record = BusinessRecord(emails=["a@x.com"])
    record.add_emails(["b@x.com", "", "a@x.com", "B@x.com"])
    assert record.emails == ["a@x.com", "b@x.com", "B@x.com"]


def test_social_links_one_url_per_platform():
    links = SocialLinks()
    links.seed_from("https://twitter.com/acme?ref=facebook")
    assert links.twitter == "https://twitter.com/acme?ref=facebook"
    assert links.facebook == "https://twitter.com/acme?ref=facebook"

    links.set(Platform.FACEBOOK, "https://facebook.com/acme")
    assert links.to_dict() == {"facebook": "https://facebook.com/acme", "twitter": "https://twitter.com/acme?ref=facebook"}


def test_tax_id_must_be_digits():
    record = BusinessRecord()
    with pytest.raises(ValueError):
        record.set_tax_id("123-456")
    record.set_tax_id("1234567890")
    assert record.tax_id == "1234567890"


def test_registry_data_set_once_and_needs_tax_id():
    record = BusinessRecord()
    with pytest.raises(ValueError):
        record.set_registry_data({"name": "Acme"})

    record.set_tax_id("1234567890")
    record.set_registry_data({"name": "Acme"})
    with pytest.raises(ValueError):
        record.set_registry_data({"name": "Other"})


def test_csv_row_serializes_registry():
    record = BusinessRecord(title="Acme", emails=["a@x.com", "b@x.com"], tax_id="1234567890")
    record.registry_data = {"name": "ACME"}

    row = record.csv_row()

    assert row[0] == "Acme"
    assert row[1] == ""
    assert row[5] == "a@x.com, b@x.com"
    assert row[9] == "1234567890"
    assert row[10] == '{"name": "ACME"}'

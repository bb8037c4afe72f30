"""Tests for the Link Classifier."""

from linkanalyzer.engines.content.links import LinkClassifier

PAGE_URL = "https://example.com/page"


class TestLinkClassifier:

    def test_anchor_excluded_but_counted(self):
        links = LinkClassifier().classify(["#section"], PAGE_URL)
        assert links.internal == []
        assert links.external == []
        assert links.total == 1

    def test_non_navigational_links_skipped(self):
        raw = ["javascript:void(0)", "mailto:a@example.com", "tel:+123", "", "/ok"]
        links = LinkClassifier().classify(raw, PAGE_URL)
        assert links.internal == ["/ok"]
        assert links.external == []
        assert links.total == 5

    def test_relative_and_same_host_are_internal(self):
        raw = ["/about", "./team", "../up", "https://example.com/contact", "http://blog.example.com/x"]
        links = LinkClassifier().classify(raw, PAGE_URL)
        assert links.internal == raw
        assert links.external == []

    def test_absolute_other_host_is_external(self):
        raw = ["https://other.org/", "ftp://files.net/a.zip"]
        links = LinkClassifier().classify(raw, PAGE_URL)
        assert links.external == raw
        assert links.internal == []

    def test_unparsable_falls_back_to_internal(self):
        links = LinkClassifier().classify(["contact.html", "page?x=1", "http://"], PAGE_URL)
        assert links.internal == ["contact.html", "page?x=1", "http://"]
        assert links.external == []

    def test_hostless_schemes_are_external(self):
        raw = ["sms:+15551234", "skype:echo123?call", "urn:isbn:0451450523", "weird:thing"]
        links = LinkClassifier().classify(raw, PAGE_URL)
        assert links.external == raw
        assert links.internal == []

    def test_hostless_schemes_mentioning_hostname_are_internal(self):
        links = LinkClassifier().classify(["sms:example.com"], PAGE_URL)
        assert links.internal == ["sms:example.com"]
        assert links.external == []

    def test_deduplicates_but_total_counts_raw(self):
        raw = ["/a", "/a", "https://other.org", "https://other.org", "#x"]
        links = LinkClassifier().classify(raw, PAGE_URL)
        assert links.internal == ["/a"]
        assert links.external == ["https://other.org"]
        assert links.total == 5
        assert len(links.internal) + len(links.external) <= links.total

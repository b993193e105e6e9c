"""Tests for content zone extraction."""

import dataclasses

import pytest

from pageaudit.content_extractor import extract_content_facts
from pageaudit.models import ContentFacts


PAGE_URL = "https://example.com/story"

HTML = """
<html><body>
  <h1>Our Story</h1>
  <h2>Beginnings</h2>
  <p>First paragraph.</p>
  <p>Second paragraph.</p>
  <p>   </p>
  <p>Fourth paragraph.</p>
  <p>Fifth paragraph.</p>
  <ul><li>Apples</li><li>Pears</li></ul>
  <div>Block one</div>
  <div>Block two</div>
  <footer>Footer text</footer>
  <img src="a.png" alt=" Orchard in spring ">
  <img src="b.png">
  <a href="/contact">Contact</a>
  <a href="https://example.com/story#team">Team</a>
  <a href="https://elsewhere.example">Elsewhere</a>
  <a>No href</a>
</body></html>
"""


@pytest.fixture
def facts():
    return extract_content_facts(HTML, PAGE_URL)


class TestContentFacts:
    """Test the content zones of a scraped page."""

    def test_counts(self, facts):
        assert facts.counts == {"p": 4, "li": 2, "div": 2, "img": 2}

    def test_zones(self, facts):
        assert facts.introduction == ("First paragraph.", "Second paragraph.", "")
        assert facts.main_content == ("Fourth paragraph.", "Fifth paragraph.")
        assert facts.list_items == ("Apples", "Pears")

    def test_footer_is_last_three_blocks(self, facts):
        assert facts.footer_content == ("Block one", "Block two", "Footer text")

    def test_images_and_headings(self, facts):
        assert facts.image_alt_texts == ("Orchard in spring",)
        assert facts.headings["h1"] == ("Our Story",)
        assert facts.headings["h2"] == ("Beginnings",)
        assert facts.headings["h6"] == ()

    def test_links(self, facts):
        assert facts.internal_links == ("/contact", "https://example.com/story#team")
        assert facts.external_links == ("https://elsewhere.example",)

    def test_combined_text(self, facts):
        assert facts.combined_text.startswith("First paragraph. Second paragraph. Fourth paragraph.")
        assert facts.combined_text.endswith("Block one Block two")

    def test_tags_in_tag_order(self, facts):
        assert [t.tag for t in facts.tags] == ["p"] * 4 + ["li"] * 2 + ["div"] * 2

    def test_immutable(self, facts):
        with pytest.raises(dataclasses.FrozenInstanceError):
            facts.combined_text = "changed"

    def test_opaque_unique_id(self, facts):
        other = extract_content_facts(HTML, PAGE_URL)
        assert isinstance(facts.id, str) and len(facts.id) == 32
        assert facts.id != other.id

    def test_to_dict_nests_links(self, facts):
        data = facts.to_dict()
        assert data["links"] == {
            "internal": ["/contact", "https://example.com/story#team"],
            "external": ["https://elsewhere.example"],
        }
        assert data["tags"][0] == {"tag": "p", "text": "First paragraph."}

    def test_mappings_are_read_only(self, facts):
        with pytest.raises(TypeError):
            facts.counts["p"] = 99
        with pytest.raises(TypeError):
            facts.headings["h1"] = ("Changed",)
        assert facts.counts["p"] == 4

    def test_hashable(self, facts):
        assert hash(facts) == hash(facts)
        assert facts in {facts}

    def test_caller_dict_not_shared(self):
        counts = {"p": 1}
        facts = ContentFacts(url=PAGE_URL, counts=counts, headings={"h1": ["Title"]})
        counts["p"] = 5

        assert facts.counts == {"p": 1}
        assert facts.headings["h1"] == ("Title",)
        assert facts.to_dict()["headings"] == {"h1": ["Title"]}

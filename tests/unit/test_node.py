"""Tests for the in-memory node model."""

from domscribr.node import (
    ELEMENT_NODE,
    TEXT_NODE,
    Element,
    Fragment,
    TextNode,
    h,
    is_element,
    iter_descendants,
)


class TestElement:
    """Tests for Element."""

    def test_tag_name_is_upper_case(self):
        assert Element("div").tag_name == "DIV"
        assert Element("cib-message").tag_name == "CIB-MESSAGE"

    def test_attributes_are_case_insensitive(self):
        node = Element("div", {"Data-Role": "user"})
        assert node.get_attribute("data-role") == "user"
        assert node.has_attribute("DATA-ROLE")
        assert node.get_attribute("missing") is None

    def test_class_tokens(self):
        node = h("div", {"class": "  message   user "})
        assert node.class_tokens == ["message", "user"]
        assert node.class_name == "  message   user "

    def test_text_content_runs_inline_text_together(self):
        node = h("div", None, "Hel", h("b", None, "lo"), " friend", h("i", None, "!"))
        assert node.text_content == "Hello friend!"

    def test_text_content_breaks_at_blocks(self):
        node = h("div", None, h("p", None, "one"), "two", h("br"), h("li", None, "three"))
        assert node.text_content == "\none\ntwo\n\nthree\n"

    def test_text_content_skips_hidden_elements(self):
        node = h("div", None, "shown", h("script", None, "var x = 1;"), h("style", None, "b {}"))
        assert node.text_content == "shown"

    def test_raw_markup_serializes_children(self):
        node = h("div", None, h("p", {"class": "x"}, "a < b"))
        assert node.raw_markup == '<p class="x">a &lt; b</p>'

    def test_children_are_elements_only(self):
        child = h("span")
        node = h("div", None, "text", child)
        assert node.children == [child]
        assert [c.node_type for c in node.child_nodes] == [TEXT_NODE, ELEMENT_NODE]

    def test_closest_checks_self_and_ancestors(self):
        inner = h("span")
        outer = h("section", {"data-dom-scribr-ignore": ""}, h("div", None, inner))
        assert inner.closest("data-dom-scribr-ignore") is outer
        assert outer.closest("data-dom-scribr-ignore") is outer
        assert inner.closest("data-other") is None

    def test_append_moves_node_between_parents(self):
        child = h("span")
        first = h("div", None, child)
        second = h("div")
        second.append(child)
        assert child.parent is second
        assert first.children == []


class TestFragment:
    """Tests for Fragment."""

    def test_append_fragment_empties_it(self):
        a, b = h("p"), h("p")
        fragment = Fragment(a, b)
        target = h("div")

        added = target.append(fragment)

        assert added == [a, b]
        assert fragment.child_nodes == []
        assert a.parent is target

    def test_fragment_is_not_an_element(self):
        assert not is_element(Fragment())
        assert not is_element(TextNode("x"))
        assert not is_element(None)


def test_iter_descendants_document_order():
    c = h("c")
    b = h("b", None, c)
    d = h("d")
    root = h("a", None, b, d)
    assert list(iter_descendants(root)) == [b, c, d]

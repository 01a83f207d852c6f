"""Tests for the message-element predicate."""

import pytest

from domscribr.node import Fragment, TextNode, h
from domscribr.predicate import is_message_element


class TestIsMessageElement:
    """Rules are applied in order, first match wins."""

    def test_ignore_marker_on_self(self):
        node = h("div", {"data-dom-scribr-ignore": "", "data-message-id": "1"})
        assert not is_message_element(node)

    def test_ignore_marker_on_ancestor(self):
        node = h("article")
        h("div", {"data-dom-scribr-ignore": "true"}, h("div", None, node))
        assert not is_message_element(node)

    def test_custom_ignore_attribute(self):
        node = h("article", {"data-skip": ""})
        assert not is_message_element(node, ignore_attribute="data-skip")
        assert is_message_element(node)

    def test_explicit_message_id(self):
        assert is_message_element(h("div", {"data-message-id": "abc"}))

    def test_explicit_author_role(self):
        assert is_message_element(h("div", {"data-message-author-role": "user"}))

    @pytest.mark.parametrize("role", ["article", "listitem", "GROUP"])
    def test_structural_roles(self, role):
        assert is_message_element(h("div", {"role": role}))

    def test_other_structural_role_rejected(self):
        assert not is_message_element(h("div", {"role": "button"}))

    @pytest.mark.parametrize(
        "class_name",
        ["message", "ChatMessage", "assistant-bubble", "from-user", "conversation-turn-3", "chat-item"],
    )
    def test_chat_class_keywords(self, class_name):
        assert is_message_element(h("div", {"class": class_name}))

    def test_article_tag(self):
        assert is_message_element(h("article"))

    def test_plain_div_rejected(self):
        assert not is_message_element(h("div", {"class": "sidebar"}))

    def test_non_elements_rejected(self):
        assert not is_message_element(TextNode("hello"))
        assert not is_message_element(Fragment())
        assert not is_message_element(None)

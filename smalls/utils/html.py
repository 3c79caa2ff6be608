"""
Validating node accessors.

Each helper names the markup shape it expects and returns None when the
shape is not there, so callers decide whether a miss is fatal.
"""

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, Tag


def soupify(html):
    """Parse raw page bytes (or text) into a BeautifulSoup document."""
    return BeautifulSoup(html, "html.parser")


def _is_text(node):
    return isinstance(node, NavigableString) and not isinstance(node, Comment)


def first_text(node):
    """
    First non-blank text node anywhere under node, returned verbatim.
    Expects e.g. <dt>7:30 PM - 9:30 PM</dt> or <h2>Friday 11/16/2018</h2>.
    """
    if node is None:
        return None
    for child in node.descendants:
        if _is_text(child) and child.strip():
            return str(child)
    return None


def first_child_text(node):
    """
    Text of node's first child, which must itself be a text node.
    Expects e.g. <p class="...__bio">Bio text<br>...</p>.
    Leading whitespace-only text is skipped.
    """
    if node is None:
        return None
    for child in node.children:
        if _is_text(child):
            if child.strip():
                return str(child)
            continue
        return None
    return None


def first_child_element(node):
    """First element child of node, skipping whitespace and comments."""
    if node is None:
        return None
    for child in node.children:
        if isinstance(child, Tag):
            return child
        if _is_text(child) and child.strip():
            return None
    return None


def nested_text(node, levels=2):
    """
    Text found `levels` steps down a chain of first children.
    levels=2 expects <h2><a href="...">Name</a></h2>: h2 -> a -> "Name".
    """
    current = node
    for _ in range(levels - 1):
        current = first_child_element(current)
        if current is None:
            return None
    return first_child_text(current)


def child_elements(node):
    """Element children of node in document order (text between them dropped)."""
    if node is None:
        return []
    return [child for child in node.children if isinstance(child, Tag)]


def find_anchor(node):
    """The detail anchor inside a <dd>, or None."""
    if node is None:
        return None
    return node.find("a")


def attr(node, name):
    """Attribute value or None when missing or empty."""
    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None

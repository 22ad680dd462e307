"""
Accessibility helpers shared by detection and fix rules.

Everything here is a pure function of the tree: visibility, accessible
names, focusability, selectors and snippets. Detectors and fixers import
the same helpers so a fixer always looks for exactly what its detector
reports.
"""

import posixpath
import re
from typing import List, Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup, Tag

from .dom_adapter import FORMATTER, ROOT_TAG, Document

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

HIDDEN_STYLE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden", re.IGNORECASE)

# Input types that never take a visible label
UNLABELED_INPUT_TYPES = {"hidden", "submit", "button", "image", "reset"}

NATIVE_INTERACTIVE_TAGS = {"a", "button", "input", "select", "textarea", "summary", "option"}

SAFE_CLASS = re.compile(r"^-?[_a-zA-Z][_a-zA-Z0-9-]*$")
SAFE_ID = re.compile(r"^[_a-zA-Z][_a-zA-Z0-9-]*$")

EXTENSION = re.compile(r"\.[a-z0-9]{2,5}$", re.IGNORECASE)


# =============================================================================
# ATTRIBUTES AND TEXT
# =============================================================================

def attr(element: Tag, name: str) -> str:
    """Attribute value stripped, '' when absent."""
    value = element.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        value = " ".join(value)
    return str(value).strip()


def classes(element: Tag) -> List[str]:
    return attr(element, "class").split()


def role_tokens(element: Tag) -> List[str]:
    """Lower-cased tokens of the role attribute."""
    return attr(element, "role").lower().split()


def primary_role(element: Tag) -> str:
    tokens = role_tokens(element)
    return tokens[0] if tokens else ""


def parse_int(value: str) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def normalize_space(text: str) -> str:
    return " ".join(text.split())


def text_of(element: Tag) -> str:
    """Whitespace-collapsed text content."""
    return normalize_space(element.get_text(" "))


def link_text(element: Tag) -> str:
    """Text content plus the alt text of contained images."""
    parts = [text_of(element)]
    for img in element.find_all("img"):
        alt = attr(img, "alt")
        if alt:
            parts.append(alt)
    return normalize_space(" ".join(part for part in parts if part))


def humanize(value: str, strip_extension: bool = False) -> str:
    """
    Turn an identifier or filename into a label.

    'contact_email' -> 'Contact email', 'annual-report.pdf' -> 'Annual report'
    (with strip_extension=True).
    """
    text = (value or "").strip()
    if strip_extension:
        text = EXTENSION.sub("", text)
    text = re.sub(r"[-_]+", " ", text)
    text = normalize_space(text)
    return text[:1].upper() + text[1:]


def url_basename(url: str) -> str:
    """Last path segment of a URL, unquoted ('' for data: and empty URLs)."""
    if not url or url.strip().lower().startswith(("data:", "javascript:")):
        return ""
    path = urlparse(url.strip()).path
    return unquote(posixpath.basename(path.rstrip("/")))


def url_extension(url: str) -> str:
    """Lower-cased file extension of a URL path, without the dot."""
    name = url_basename(url)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def alt_from_filename(src: str) -> str:
    """
    Derive alt text from an image URL: basename, no extension,
    de-hyphenated, first letter capitalized.
    """
    return humanize(url_basename(src), strip_extension=True)


# =============================================================================
# VISIBILITY AND FOCUS
# =============================================================================

def is_self_hidden(element: Tag) -> bool:
    if element.has_attr("hidden"):
        return True
    if attr(element, "aria-hidden").lower() == "true":
        return True
    return bool(HIDDEN_STYLE.search(element.get("style") or ""))


def _ancestry(element: Tag):
    current = element
    while (
        isinstance(current, Tag)
        and current.name != ROOT_TAG
        and not isinstance(current, BeautifulSoup)
    ):
        yield current
        current = current.parent


def is_hidden(element: Tag) -> bool:
    """
    Hidden from assistive technology: `hidden`, aria-hidden="true" or an
    inline display:none / visibility:hidden on the element or an ancestor.
    """
    return any(is_self_hidden(node) for node in _ancestry(element))


def is_focusable(element: Tag) -> bool:
    """Whether the element takes keyboard focus (static markup only)."""
    tabindex = parse_int(attr(element, "tabindex")) if element.has_attr("tabindex") else None
    if tabindex is not None and tabindex < 0:
        return False
    name = element.name
    if name in ("input", "button", "select", "textarea") and element.has_attr("disabled"):
        return False
    if name == "a" and element.has_attr("href"):
        return True
    if name == "input":
        return attr(element, "type").lower() != "hidden"
    if name in ("button", "select", "textarea", "iframe", "summary"):
        return True
    return tabindex is not None


def is_natively_focusable(element: Tag) -> bool:
    if element.name == "a":
        return element.has_attr("href")
    if element.name == "input":
        return attr(element, "type").lower() != "hidden"
    return element.name in ("button", "select", "textarea", "iframe", "summary")


# =============================================================================
# NAMES AND LABELS
# =============================================================================

def labelledby_text(element: Tag, doc: Document) -> str:
    texts = []
    for ref in attr(element, "aria-labelledby").split():
        target = doc.by_id(ref)
        if target is not None:
            texts.append(text_of(target))
    return normalize_space(" ".join(texts))


def aria_name(element: Tag, doc: Document) -> str:
    """Name from aria-label or aria-labelledby."""
    return attr(element, "aria-label") or labelledby_text(element, doc)


def label_text(element: Tag, doc: Document) -> str:
    """Text of the <label> associated with a form control."""
    texts = [text_of(label) for label in doc.labels_for(attr(element, "id"))]
    wrapping = doc.closest(element, ["label"])
    if wrapping is not None:
        texts.append(text_of(wrapping))
    return normalize_space(" ".join(text for text in texts if text))


def has_label(element: Tag, doc: Document) -> bool:
    """Associated with a <label> by for/id or by nesting."""
    if doc.labels_for(attr(element, "id")):
        return True
    return doc.closest(element, ["label"]) is not None


def accessible_name(element: Tag, doc: Document) -> str:
    """
    Announced name of an element.

    Precedence: visible text (image alts included), aria-label,
    aria-labelledby, associated <label>, title.
    """
    for candidate in (
        link_text(element),
        attr(element, "aria-label"),
        labelledby_text(element, doc),
        label_text(element, doc),
        attr(element, "title"),
    ):
        if candidate:
            return candidate
    return ""


def is_labelable_control(element: Tag) -> bool:
    if element.name in ("textarea", "select"):
        return True
    if element.name == "input":
        return attr(element, "type").lower() not in UNLABELED_INPUT_TYPES
    return False


def labelable_controls(doc: Document, visible_only: bool = True) -> List[Tag]:
    controls = [el for el in doc.find_all(["input", "textarea", "select"]) if is_labelable_control(el)]
    if visible_only:
        controls = [el for el in controls if not is_hidden(el)]
    return controls


# =============================================================================
# HEADINGS
# =============================================================================

def heading_level(element: Tag) -> int:
    return int(element.name[1])


def visible_headings(doc: Document) -> List[Tag]:
    return [h for h in doc.find_all(HEADING_TAGS) if not is_hidden(h)]


# =============================================================================
# SELECTORS AND SNIPPETS
# =============================================================================

def element_index(element: Tag) -> int:
    """1-based position among the parent's element children."""
    parent = element.parent
    if parent is None:
        return 1
    position = 0
    for child in parent.children:
        if isinstance(child, Tag):
            position += 1
            if child is element:
                return position
    return 1


def build_selector(element: Tag, max_depth: int = 4) -> str:
    """
    Generate a CSS selector for an element.

    Priority:
    1. ID if present (stops the walk)
    2. Tag + safe classes + nth-child, for up to `max_depth` levels
    """
    parts = []
    for node in _ancestry(element):
        if len(parts) >= max_depth:
            break
        element_id = attr(node, "id")
        if element_id and SAFE_ID.match(element_id):
            parts.append(f"#{element_id}")
            break

        part = node.name
        safe_classes = [c for c in classes(node) if SAFE_CLASS.match(c)]
        if safe_classes:
            part += "." + ".".join(safe_classes[:3])

        parent = node.parent
        if parent is not None:
            siblings = [child for child in parent.children if isinstance(child, Tag)]
            if len(siblings) > 1:
                part += f":nth-child({element_index(node)})"
        parts.append(part)

    parts.reverse()
    return " > ".join(parts) if parts else element.name


def snippet(element: Tag, limit: int = 250) -> str:
    """Outer HTML truncated to `limit` characters."""
    html = element.decode(formatter=FORMATTER)
    if len(html) > limit:
        return html[:limit] + "..."
    return html

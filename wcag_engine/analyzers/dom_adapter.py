"""
DOM Adapter - Parse and serialize HTML fragments with BeautifulSoup.

This module is the only place that turns raw markup into a tree and back.
Fragments are wrapped in a synthetic <wcag-root> element before parsing so
that any fragment (no html/body, several top-level nodes, bare text) has a
single owner node, and the wrapper is stripped again on serialization.

Usage:
    from wcag_engine.analyzers import DocumentAdapter

    adapter = DocumentAdapter()
    doc = adapter.parse('<p>Hello <img src="a.png"></p>')
    for img in doc.find_all("img"):
        img["alt"] = "A"
    html = adapter.serialize(doc)
"""

import logging
import re
import warnings
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from ..contracts.context import ScanContext

logger = logging.getLogger(__name__)

ROOT_TAG = "wcag-root"
ROOT_END = f"</{ROOT_TAG}>"

# Elements whose content html.parser reads as raw text up to the end tag
RAW_TEXT_OPEN = re.compile(r"<(script|style|textarea|title)\b", re.IGNORECASE)


class SourceOrderFormatter(HTMLFormatter):
    """The "minimal" HTML formatter, with attributes kept in source order."""

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


FORMATTER = SourceOrderFormatter(entity_substitution=EntitySubstitution.substitute_xml)


def close_unterminated(raw: str) -> str:
    """
    Terminate a trailing comment or raw-text element left open at the end
    of the fragment, so it cannot swallow the wrapper's closing tag.
    """
    lowered = raw.lower()
    comment = lowered.rfind("<!--")
    raw_text_end = max(lowered.rfind("</script"), lowered.rfind("</style"))
    if comment > raw_text_end and lowered.find("-->", comment + 4) == -1:
        return raw + "-->"

    opened = list(RAW_TEXT_OPEN.finditer(raw))
    if opened:
        last = opened[-1]
        name = last.group(1).lower()
        if lowered.find(f"</{name}", last.end()) == -1:
            return raw + f"</{name}>"
    return raw


class Document:
    """
    A parsed fragment owned by exactly one scan or fix call.

    Wraps the BeautifulSoup tree and exposes the queries the rule set
    needs: tag-name, attribute-predicate and ancestor/descendant lookups.
    The synthetic root is never returned by any query.
    """

    def __init__(
        self,
        soup: BeautifulSoup,
        root: Tag,
        raw: str,
        context: Optional[ScanContext] = None,
    ):
        self._soup = soup
        self._root = root
        self._raw = raw
        self._context = context or ScanContext()

    @property
    def soup(self) -> BeautifulSoup:
        """Access the underlying BeautifulSoup object."""
        return self._soup

    @property
    def root(self) -> Tag:
        """The synthetic root element wrapping the fragment."""
        return self._root

    @property
    def raw(self) -> str:
        """The original fragment string."""
        return self._raw

    @property
    def context(self) -> ScanContext:
        """Ambient configuration of the call that created this document."""
        return self._context

    @property
    def text_length(self) -> int:
        """Length of the original fragment in characters."""
        return len(self._raw)

    # =========================================================================
    # ELEMENT SELECTION
    # =========================================================================

    def elements(self) -> List[Tag]:
        """All elements in document order."""
        return self._root.find_all(True)

    def find_all(
        self,
        name=None,
        attrs: Optional[Dict] = None,
    ) -> List[Tag]:
        """
        Find elements by tag name and/or attribute predicates.

        Args:
            name: Tag name, list of names, regex or True (any tag)
            attrs: Attribute filters in BeautifulSoup form
                   ({"role": True}, {"type": "radio"}, {"href": re.compile(...)})

        Returns:
            Matching elements in document order
        """
        if name is None:
            name = True
        return self._root.find_all(name, attrs=attrs or {})

    def find(self, name=None, attrs: Optional[Dict] = None) -> Optional[Tag]:
        """First element matching find_all() arguments, or None."""
        if name is None:
            name = True
        return self._root.find(name, attrs=attrs or {})

    def select(self, selector: str) -> List[Tag]:
        """Elements matching a CSS selector (scoped to the fragment)."""
        return self._root.select(selector)

    def by_id(self, element_id: str) -> Optional[Tag]:
        """Element with the given id, or None."""
        if not element_id:
            return None
        return self._root.find(True, attrs={"id": element_id})

    def labels_for(self, element_id: str) -> List[Tag]:
        """<label for="..."> elements pointing at an id."""
        if not element_id:
            return []
        return self._root.find_all("label", attrs={"for": element_id})

    # =========================================================================
    # ELEMENT TRAVERSAL
    # =========================================================================

    def ancestors(self, element: Tag) -> List[Tag]:
        """
        Ancestors of an element, nearest first, excluding the synthetic root.
        """
        parents = []
        current = element.parent
        while (
            isinstance(current, Tag)
            and current is not self._root
            and not isinstance(current, BeautifulSoup)
        ):
            parents.append(current)
            current = current.parent
        return parents

    def has_ancestor(self, element: Tag, names: Iterable[str]) -> bool:
        """True if any ancestor has one of the given tag names."""
        wanted = set(names)
        return any(parent.name in wanted for parent in self.ancestors(element))

    def closest(self, element: Tag, names: Iterable[str]) -> Optional[Tag]:
        """Nearest ancestor with one of the given tag names."""
        wanted = set(names)
        for parent in self.ancestors(element):
            if parent.name in wanted:
                return parent
        return None

    def children(self, element: Tag) -> List[Tag]:
        """Direct child elements."""
        return [child for child in element.children if isinstance(child, Tag)]

    def descendants(self, element: Tag) -> List[Tag]:
        """All descendant elements."""
        return [desc for desc in element.descendants if isinstance(desc, Tag)]

    def is_root(self, element) -> bool:
        return element is self._root

    # =========================================================================
    # MUTATION HELPERS
    # =========================================================================

    def new_tag(
        self,
        name: str,
        attrs: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
    ) -> Tag:
        """Create a detached element owned by this document."""
        tag = self._soup.new_tag(name, attrs=attrs or {})
        if text:
            tag.append(NavigableString(text))
        return tag

    def unique_id(self, base: str) -> str:
        """
        Return `base`, or `base-2`, `base-3`... if the id is taken.
        """
        candidate = base
        suffix = 2
        while self.by_id(candidate) is not None:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def ensure_id(self, element: Tag, base: str) -> str:
        """Return the element's id, assigning a unique one if it has none."""
        current = (element.get("id") or "").strip()
        if current:
            return current
        new_id = self.unique_id(base)
        element["id"] = new_id
        return new_id


class DocumentAdapter:
    """
    Parses fragments into Documents and serializes them back.

    Parsing never raises: html.parser recovers malformed markup on a best
    effort basis, parser warnings are suppressed, and a parser exception
    degrades to a document holding the raw text.
    """

    def parse(self, raw, context: Optional[ScanContext] = None) -> Document:
        """
        Parse a fragment.

        Args:
            raw: HTML fragment (None and non-strings are coerced)
            context: Ambient configuration attached to the document

        Returns:
            Document wrapping the parsed tree
        """
        if raw is None:
            raw = ""
        elif not isinstance(raw, str):
            raw = str(raw)

        markup = f"<{ROOT_TAG}>{close_unterminated(raw)}{ROOT_END}"
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            try:
                soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
                root = soup.find(ROOT_TAG)
            except Exception as e:
                logger.warning(
                    f"Parser rejected markup ({type(e).__name__}: {e}); "
                    f"falling back to text-only document"
                )
                soup, root = None, None

        if root is None:
            soup = BeautifulSoup("", "html.parser", multi_valued_attributes=None)
            root = soup.new_tag(ROOT_TAG)
            root.append(NavigableString(raw))
            soup.append(root)
        else:
            self._strip_root_marker(root)

        return Document(soup, root, raw, context)

    @staticmethod
    def _strip_root_marker(root: Tag) -> None:
        """Remove a wrapper end tag that ended up inside a text node."""
        for text in root.find_all(string=lambda s: s is not None and ROOT_END in s):
            text.replace_with(type(text)(text.replace(ROOT_END, "")))

    def serialize(self, doc: Document) -> str:
        """
        Serialize a document back to a trimmed fragment.

        The synthetic root is stripped. Nodes that a stray </wcag-root> in
        the input pushed outside the root are appended in order.
        Attributes keep their source order; new ones follow existing ones.
        """
        parts = [doc.root.decode_contents(formatter=FORMATTER)]
        for sibling in doc.root.next_siblings:
            if isinstance(sibling, Tag):
                parts.append(sibling.decode(formatter=FORMATTER))
            else:
                parts.append(sibling.output_ready(FORMATTER))
        return "".join(parts).strip()

    def round_trip(self, raw: str) -> str:
        """serialize(parse(raw)), mostly useful for tests and previews."""
        return self.serialize(self.parse(raw))

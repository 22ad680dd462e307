"""
Image fix rules - generate, clean up or neutralize text alternatives.

Decorative treatment always wins: an image that looks decorative gets
alt="" and aria-hidden="true" no matter which rule reaches it first.
"""

from bs4 import Tag

from ..analyzers.accessibility import (
    alt_from_filename,
    attr,
    humanize,
    normalize_space,
    text_of,
    url_basename,
)
from ..analyzers.dom_adapter import Document
from ..detectors.images import (
    alt_quality_problem,
    background_url,
    has_blank_alt,
    has_redundant_alt,
    is_complex_image,
    is_decorative_candidate,
    is_logo_candidate,
    is_missing_alt,
    is_unmarked_empty_alt,
    is_unnamed_area,
    is_unnamed_background,
    is_unnamed_svg,
    needs_decorative_treatment,
    quality_problem,
    strip_redundant,
    wraps_named_control,
)
from .base_rule import FixRule


INLINE_CONTAINERS = ["a", "button", "label", "p", "span"]


def mark_decorative(img: Tag) -> None:
    img["alt"] = ""
    img["aria-hidden"] = "true"


class DecorativeImageFix(FixRule):
    @property
    def id(self) -> str:
        return "decorative-image"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for img in doc.find_all("img"):
            if needs_decorative_treatment(img):
                mark_decorative(img)
                fixed += 1
        return fixed


class LogoImageFix(FixRule):
    """alt from the logo's title, else a generic 'Site Logo'."""

    DEFAULT_ALT = "Site Logo"

    @property
    def id(self) -> str:
        return "logo-image"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for img in doc.find_all("img"):
            if is_logo_candidate(img) and has_blank_alt(img):
                img["alt"] = attr(img, "title") or self.DEFAULT_ALT
                fixed += 1
        return fixed


class MissingAltTextFix(FixRule):
    """
    Adds alt to images that have none.

    Strategy:
    - decorative candidate -> alt="" and aria-hidden="true"
    - otherwise the first non-empty of: aria-label, title, enclosing
      figcaption, filename-derived text, "Image"
    """

    DEFAULT_ALT = "Image"

    @property
    def id(self) -> str:
        return "missing-alt-text"

    def _alt_for(self, img: Tag, doc: Document) -> str:
        figure = doc.closest(img, ["figure"])
        caption = figure.find("figcaption") if figure is not None else None
        for candidate in (
            attr(img, "aria-label"),
            attr(img, "title"),
            text_of(caption) if caption is not None else "",
            alt_from_filename(attr(img, "src")),
        ):
            if candidate:
                return candidate
        return self.DEFAULT_ALT

    def transform(self, doc: Document) -> int:
        fixed = 0
        for img in doc.find_all("img"):
            if not is_missing_alt(img):
                continue
            if is_decorative_candidate(img):
                mark_decorative(img)
            else:
                img["alt"] = self._alt_for(img, doc)
            fixed += 1
        return fixed


class EmptyAltTextFix(FixRule):
    @property
    def id(self) -> str:
        return "empty-alt-text"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for img in doc.find_all("img"):
            if is_unmarked_empty_alt(img):
                img["role"] = "presentation"
                fixed += 1
        return fixed


class RedundantAltTextFix(FixRule):
    """Strips 'image of'-style prefixes and file extensions from alt text."""

    DEFAULT_ALT = "Image"

    @property
    def id(self) -> str:
        return "redundant-alt-text"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for img in doc.find_all("img"):
            if not has_redundant_alt(img):
                continue
            cleaned = strip_redundant(attr(img, "alt"))
            if not cleaned:
                cleaned = strip_redundant(alt_from_filename(attr(img, "src"))) or self.DEFAULT_ALT
            img["alt"] = cleaned
            fixed += 1
        return fixed


class AltTextQualityFix(FixRule):
    """
    Replaces poor alt text with the first acceptable description found in
    the image filename, its title attribute or its figure caption.

    A candidate is only used when it passes the same quality checks. When
    none does (e.g. alt="X" on x.png with no title or caption) the image
    keeps its alt text and the issue stays open for manual review, as does
    overlong alt text.
    """

    @property
    def id(self) -> str:
        return "alt-text-quality"

    @staticmethod
    def candidates(img: Tag, doc: Document):
        yield alt_from_filename(attr(img, "src"))
        yield normalize_space(attr(img, "title"))
        figure = doc.closest(img, ["figure"])
        caption = figure.find("figcaption") if figure is not None else None
        if caption is not None:
            yield text_of(caption)

    def transform(self, doc: Document) -> int:
        fixed = 0
        for img in doc.find_all("img"):
            problem = quality_problem(img)
            if problem is None or problem == "too_long":
                continue
            src = attr(img, "src")
            for candidate in self.candidates(img, doc):
                if not candidate or candidate == attr(img, "alt"):
                    continue
                if alt_quality_problem(candidate, src) is not None or strip_redundant(candidate) != candidate:
                    continue
                img["alt"] = candidate
                fixed += 1
                break
        return fixed


class ComplexImageFix(FixRule):
    """
    Links complex images to a description.

    An enclosing figcaption is referenced when present; otherwise a
    screen-reader-only description stub is inserted after the image.
    """

    @property
    def id(self) -> str:
        return "complex-image"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for img in doc.find_all("img"):
            if not is_complex_image(img):
                continue

            figure = doc.closest(img, ["figure"])
            caption = figure.find("figcaption") if figure is not None else None
            if caption is not None and text_of(caption):
                img["aria-describedby"] = doc.ensure_id(caption, "image-description")
                fixed += 1
                continue

            description_id = doc.unique_id("image-description")
            subject = attr(img, "alt") or "this image"
            stub = doc.new_tag(
                "p",
                attrs={"id": description_id, "class": "screen-reader-text"},
                text=f"Detailed description of {subject}.",
            )
            anchor = img
            for parent in doc.ancestors(img):
                if parent.name in INLINE_CONTAINERS:
                    anchor = parent
            anchor.insert_after(stub)
            img["aria-describedby"] = description_id
            fixed += 1
        return fixed


class ImageMapAltFix(FixRule):
    DEFAULT_ALT = "Map region"

    @property
    def id(self) -> str:
        return "image-map-alt"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for area in doc.find_all("area"):
            if is_unnamed_area(area):
                area["alt"] = humanize(url_basename(attr(area, "href")), strip_extension=True) or self.DEFAULT_ALT
                fixed += 1
        return fixed


class SvgAccessibilityFix(FixRule):
    """
    Names or hides unnamed SVGs.

    Strategy:
    - inside a link/button that has its own text -> aria-hidden="true"
    - otherwise -> role="img" plus <title>SVG Image</title> as first child
    """

    DEFAULT_TITLE = "SVG Image"

    @property
    def id(self) -> str:
        return "svg-accessibility"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for svg in doc.find_all("svg"):
            if not is_unnamed_svg(svg):
                continue
            if wraps_named_control(svg, doc):
                svg["aria-hidden"] = "true"
            else:
                if not svg.has_attr("role"):
                    svg["role"] = "img"
                title = svg.find("title", recursive=False)
                if title is None:
                    svg.insert(0, doc.new_tag("title", text=self.DEFAULT_TITLE))
                else:
                    title.string = self.DEFAULT_TITLE
            fixed += 1
        return fixed


class BackgroundImageFix(FixRule):
    DEFAULT_LABEL = "Background image"

    @property
    def id(self) -> str:
        return "background-image"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(attrs={"style": True}):
            if not is_unnamed_background(element):
                continue
            url = background_url(element)
            label = humanize(url_basename(url), strip_extension=True) if url != "url" else ""
            if not element.has_attr("role"):
                element["role"] = "img"
            element["aria-label"] = label or self.DEFAULT_LABEL
            fixed += 1
        return fixed

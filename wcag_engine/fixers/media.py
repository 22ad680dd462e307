"""
Media fix rules - iframe titles, playback controls and fallback content.
"""

from ..analyzers.dom_adapter import Document
from ..detectors.media import (
    iframe_title,
    is_untitled_iframe,
    lacks_fallback,
    media_problems,
    media_source,
)
from .base_rule import FixRule


class IframeTitleFix(FixRule):
    @property
    def id(self) -> str:
        return "iframe-title"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for iframe in doc.find_all("iframe"):
            if is_untitled_iframe(iframe):
                iframe["title"] = iframe_title(iframe)
                fixed += 1
        return fixed


class _ControlsFix(FixRule):
    """Adds the controls attribute; autoplay and captions need an editor."""

    tag = ""

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(self.tag):
            if "controls" in media_problems(element):
                element["controls"] = ""
                fixed += 1
        return fixed


class VideoAccessibilityFix(_ControlsFix):
    tag = "video"

    @property
    def id(self) -> str:
        return "video-accessibility"


class AudioAccessibilityFix(_ControlsFix):
    tag = "audio"

    @property
    def id(self) -> str:
        return "audio-accessibility"


class MediaAlternativeFix(FixRule):
    """
    Appends fallback content with a download link.

    Media with no known source is left alone: there is nothing to link to.
    """

    @property
    def id(self) -> str:
        return "media-alternative"

    def transform(self, doc: Document) -> int:
        fixed = 0
        for element in doc.find_all(["video", "audio"]):
            if not lacks_fallback(element):
                continue
            source = media_source(element)
            if not source:
                continue
            fallback = doc.new_tag("p", text=f"Your browser does not support this {element.name}. ")
            fallback.append(doc.new_tag("a", attrs={"href": source}, text=f"Download the {element.name}"))
            element.append(fallback)
            fixed += 1
        return fixed

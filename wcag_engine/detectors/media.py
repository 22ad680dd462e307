"""
Media detection rules - iframes, video and audio.
"""

from typing import List, Optional
from urllib.parse import urlparse

from bs4 import Tag

from ..analyzers.accessibility import attr, humanize, is_hidden, text_of, url_basename
from ..analyzers.dom_adapter import Document
from ..contracts.issues import Issue
from ..contracts.severity import Severity
from .base_rule import DetectionRule


CAPTION_KINDS = ["captions", "subtitles"]


def is_untitled_iframe(iframe: Tag) -> bool:
    if is_hidden(iframe):
        return False
    return not (attr(iframe, "title") or attr(iframe, "aria-label") or attr(iframe, "aria-labelledby"))


def iframe_title(iframe: Tag) -> str:
    src = attr(iframe, "src")
    host = (urlparse(src).hostname or "").lower() if src else ""
    if host.startswith("www."):
        host = host[4:]
    subject = host or humanize(url_basename(src), strip_extension=True)
    return f"Embedded content: {subject}" if subject else "Embedded content"


def has_captions(video: Tag) -> bool:
    return any(attr(track, "kind").lower() in CAPTION_KINDS for track in video.find_all("track"))


def media_problems(element: Tag) -> List[str]:
    problems = []
    if not element.has_attr("controls"):
        problems.append("controls")
    if element.has_attr("autoplay"):
        problems.append("autoplay")
    if element.name == "video" and not has_captions(element):
        problems.append("captions")
    return problems


def media_source(element: Tag) -> Optional[str]:
    src = attr(element, "src")
    if src:
        return src
    for source in element.find_all("source"):
        if attr(source, "src"):
            return attr(source, "src")
    return None


def lacks_fallback(element: Tag) -> bool:
    return not text_of(element)


class IframeTitleRule(DetectionRule):
    title = "Iframe without title"
    wcag_criterion = "4.1.2"
    default_severity = Severity.SERIOUS
    message = "Iframe has no title"
    recommendation = "Add a title describing the embedded content."

    @property
    def id(self) -> str:
        return "iframe-title"

    def detect(self, doc: Document) -> List[Issue]:
        return [self.make_issue(doc, iframe) for iframe in doc.find_all("iframe") if is_untitled_iframe(iframe)]


class _MediaRule(DetectionRule):
    """One issue per problem so fixed problems drop out individually."""

    tag = ""
    messages = {}

    def detect(self, doc: Document) -> List[Issue]:
        issues = []
        for element in doc.find_all(self.tag):
            for problem in media_problems(element):
                issues.append(self.make_issue(
                    doc,
                    element,
                    message=self.messages[problem],
                    context={"problem": problem},
                ))
        return issues


class VideoAccessibilityRule(_MediaRule):
    title = "Inaccessible video"
    wcag_criterion = "1.2.2"
    default_severity = Severity.SERIOUS
    message = "Video is not accessible"
    recommendation = "Provide controls, avoid autoplay and add a captions track."

    tag = "video"
    messages = {
        "controls": "Video has no playback controls",
        "autoplay": "Video plays automatically",
        "captions": "Video has no captions track",
    }

    @property
    def id(self) -> str:
        return "video-accessibility"


class AudioAccessibilityRule(_MediaRule):
    title = "Inaccessible audio"
    wcag_criterion = "1.4.2"
    default_severity = Severity.SERIOUS
    message = "Audio is not accessible"
    recommendation = "Provide controls and do not start audio automatically."

    tag = "audio"
    messages = {
        "controls": "Audio has no playback controls",
        "autoplay": "Audio plays automatically",
    }

    @property
    def id(self) -> str:
        return "audio-accessibility"


class MediaAlternativeRule(DetectionRule):
    title = "Media without alternative"
    wcag_criterion = "1.2.1"
    default_severity = Severity.WARNING
    message = "Media element has no fallback content"
    recommendation = "Provide a transcript or a download link inside the media element."

    @property
    def id(self) -> str:
        return "media-alternative"

    def detect(self, doc: Document) -> List[Issue]:
        return [
            self.make_issue(doc, element, context={"src": media_source(element) or ""})
            for element in doc.find_all(["video", "audio"])
            if lacks_fallback(element)
        ]

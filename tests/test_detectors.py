"""
Parametrized tests for detection rules.

Each case runs a single rule against a small fragment and checks how
many issues it reports. Severity, suggestions and issue metadata are
checked separately below.
"""

import pytest

from wcag_engine.contracts import ScanContext, Severity, WcagLevel


# =============================================================================
# Test Data Definitions
# =============================================================================

# Format: (html, rule_id, expected_count, description)
IMAGE_CASES = [
    ('<img src="hero-banner.jpg">', "missing-alt-text", 1, "Image without alt"),
    ('<img src="hero-banner.jpg" alt="Hikers on a ridge">', "missing-alt-text", 0, "Image with alt"),
    ('<img src="spacer.gif" role="presentation">', "missing-alt-text", 0, "Presentational image is exempt"),
    ('<img src="spacer.gif" alt="spacer">', "decorative-image", 1, "Spacer with non-empty alt"),
    ('<img src="spacer.gif" alt="">', "decorative-image", 0, "Spacer with empty alt"),
    ('<img src="/img/logo.png">', "logo-image", 1, "Logo without alt"),
    ('<img src="/img/logo.png" alt="Acme">', "logo-image", 0, "Logo with alt"),
    ('<img src="photo.jpg" alt="">', "empty-alt-text", 1, "Empty alt without decorative marker"),
    ('<img src="photo.jpg" alt="" role="presentation">', "empty-alt-text", 0, "Empty alt marked presentational"),
    ('<img src="cat.jpg" alt="Image of a cat">', "redundant-alt-text", 1, "Alt starts with 'image of'"),
    ('<img src="cat.jpg" alt="sunset.jpg">', "redundant-alt-text", 1, "Alt ends with an extension"),
    ('<img src="cat.jpg" alt="A cat asleep">', "redundant-alt-text", 0, "Plain description"),
    ('<img src="cat.jpg" alt="image">', "alt-text-quality", 1, "Placeholder alt"),
    ('<img src="cat.jpg" alt="IMG_1234">', "alt-text-quality", 1, "Camera file name alt"),
    ('<img src="cat.jpg" alt="ab">', "alt-text-quality", 1, "Alt too short"),
    (f'<img src="cat.jpg" alt="{"word " * 40}">', "alt-text-quality", 1, "Alt too long"),
    ('<img src="cat.jpg" alt="A cat asleep on a sofa">', "alt-text-quality", 0, "Good alt"),
    ('<img src="sales-chart.png">', "complex-image", 1, "Chart without long description"),
    ('<img src="sales-chart.png" aria-describedby="desc">', "complex-image", 0, "Chart with description"),
    ('<img src="map.png"><map name="m"><area href="/about-us.html"></map>', "image-map-alt", 1, "Area without alt"),
    ('<map name="m"><area href="/about" alt="About us"></map>', "image-map-alt", 0, "Area with alt"),
    ('<svg><circle r="4"></circle></svg>', "svg-accessibility", 1, "Bare SVG"),
    ('<svg><title>Logo</title></svg>', "svg-accessibility", 0, "SVG with title"),
    ('<svg aria-hidden="true"></svg>', "svg-accessibility", 0, "Hidden SVG"),
    ('<div style="background-image: url(\'team.jpg\')"></div>', "background-image", 1, "Background image without text"),
    ('<div style="background-image: url(team.jpg)">Our team</div>', "background-image", 0, "Background image behind text"),
]

HEADING_CASES = [
    ("<h2>A</h2><h3>B</h3>", "missing-h1", 1, "Headings without H1"),
    ("<p>No headings</p>", "missing-h1", 0, "No headings at all"),
    ("<h1>A</h1><h1>B</h1><h1>C</h1>", "multiple-h1", 2, "Three H1s"),
    ("<h1>A</h1><h2></h2>", "empty-heading", 1, "Empty heading"),
    ("<h1>A</h1><h3>B</h3>", "skipped-heading-level", 1, "h1 followed by h3"),
    ("<h3>A</h3><h4>B</h4>", "skipped-heading-level", 0, "First heading is exempt"),
    ('<h1>A</h1><h4 style="display:none">Hidden</h4><h2>B</h2>', "skipped-heading-level", 0, "Hidden heading ignored"),
    ("<section><p>x</p></section>", "heading-nesting", 1, "Section without heading"),
    ("<article><h2>Title</h2><p>x</p></article>", "heading-nesting", 0, "Article with heading"),
    (f"<h2>{'x' * 151}</h2>", "heading-length", 1, "Heading too long"),
    ("<h2>Intro</h2><h2>intro</h2>", "heading-uniqueness", 1, "Duplicate heading text"),
    ('<div class="title">Welcome</div>', "heading-visual", 1, "Div styled as heading"),
    ("<p><strong>Overview</strong></p>", "heading-visual", 1, "Bold-only paragraph"),
    ("<p>Some <strong>bold</strong> words</p>", "heading-visual", 0, "Paragraph with inline bold"),
]

LINK_CASES = [
    ('<a href="/getting-started"></a>', "empty-link", 1, "Link without text"),
    ('<a href="/"><img src="home.png" alt="Home"></a>', "empty-link", 0, "Image link with alt"),
    ('<a href="/pricing">Click here</a>', "generic-link-text", 1, "Click here"),
    ('<a href="/pricing" aria-label="Pricing plans">Read more</a>', "generic-link-text", 0, "Generic text with label"),
    ('<a href="/a">Docs</a><a href="/b">Docs</a>', "duplicate-link-text", 2, "Same text, two destinations"),
    ('<a href="/a">Docs</a><a href="/a/">Docs</a>', "duplicate-link-text", 0, "Same destination modulo slash"),
    ('<a href="/docs" target="_blank">Docs</a>', "new-window-link", 1, "Unannounced new window"),
    ('<a href="/docs" target="_blank">Docs (opens in new window)</a>', "new-window-link", 0, "Announced new window"),
    ('<a href="/files/report.pdf">Annual report</a>', "download-link", 1, "PDF link without type"),
    ('<a href="/files/report.pdf">Annual report (PDF)</a>', "download-link", 0, "PDF link with type"),
    ('<a href="javascript:void(0)">Open</a>', "link-destination", 1, "javascript: link"),
    ('<a href="#" role="button">Open</a>', "link-destination", 0, "Link with button role"),
]

FORM_CASES = [
    ('<input type="text" name="first_name">', "missing-form-label", 1, "Unlabeled text input"),
    ('<label for="n">Name</label><input id="n" type="text">', "missing-form-label", 0, "Labelled by for/id"),
    ('<input type="text" placeholder="Search">', "missing-form-label", 0, "Placeholder is not missing-label"),
    ('<input type="text" placeholder="Search">', "placeholder-label", 1, "Placeholder-only label"),
    ('<input type="submit" value="Go">', "missing-form-label", 0, "Submit input needs no label"),
    (
        '<label><input type="radio" name="size" value="s"> S</label>'
        '<label><input type="radio" name="size" value="m"> M</label>',
        "fieldset-legend", 1, "Radio group without fieldset",
    ),
    (
        '<fieldset><legend>Size</legend>'
        '<input type="radio" name="size"><input type="radio" name="size"></fieldset>',
        "fieldset-legend", 0, "Radio group with legend",
    ),
    ('<label for="name">Name *</label><input id="name" type="text">', "required-attribute", 1, "Asterisk without required"),
    ('<label for="name">Name *</label><input id="name" type="text" required>', "required-attribute", 0, "Asterisk with required"),
    ('<input type="email" name="email" aria-invalid="true">', "error-message", 1, "Invalid field without message"),
    ('<input type="email" aria-invalid="true" aria-describedby="e1">', "error-message", 0, "Invalid field with message"),
    ('<input type="text" name="email">', "autocomplete-attribute", 1, "Email field without autocomplete"),
    ('<input type="text" name="comment">', "autocomplete-attribute", 0, "Non-personal field"),
    ('<input type="emial" name="email">', "input-type", 1, "Misspelled input type"),
    ('<div role="button">Go</div>', "custom-control", 1, "Role button without tabindex"),
    ('<div role="button" tabindex="0">Go</div>', "custom-control", 0, "Focusable named custom button"),
    ('<button class="close"></button>', "button-label", 1, "Empty close button"),
    ('<button><svg></svg> Save</button>', "button-label", 0, "Button with text"),
    ('<label for="name">Name</label><input id="nme" type="text">', "orphaned-label", 1, "Label points nowhere"),
    ('<input type="text" aria-hidden="true">', "form-aria", 1, "Hidden focusable input"),
    ('<input type="hidden" aria-hidden="true">', "form-aria", 0, "Hidden input type"),
]

TABLE_CASES = [
    ("<table><tr><td>A</td><td>1</td></tr></table>", "table-header", 1, "Data table without th"),
    ("<table><tr><th>Name</th></tr><tr><td>Ann</td></tr></table>", "table-header", 0, "Table with th"),
    ("<table><tr><th>Name</th></tr><tr><td>Ann</td></tr></table>", "table-caption", 1, "Header table without caption"),
    (
        "<table><caption>People</caption><tr><th>Name</th></tr><tr><td>Ann</td></tr></table>",
        "table-caption", 0, "Table with caption",
    ),
    (
        '<table><tr><th colspan="2">Q1</th></tr><tr><td>1</td><td>2</td></tr></table>',
        "complex-table", 1, "Merged header without scope",
    ),
    (
        '<table><tr><th colspan="2" scope="colgroup">Q1</th></tr><tr><td>1</td><td>2</td></tr></table>',
        "complex-table", 0, "Merged header with scope",
    ),
    ("<table><tr><td><div>Nav</div></td><td><p>Body</p></td></tr></table>", "layout-table", 1, "Layout table"),
    ("<table><tr><td><div>Nav</div></td></tr></table>", "table-header", 0, "Layout table needs no headers"),
    (
        "<table><tr><th></th><th>Q1</th></tr><tr><th>North</th><td>1</td></tr></table>",
        "empty-table-cell", 1, "Empty corner header",
    ),
]

MEDIA_CASES = [
    ('<iframe src="https://www.youtube.com/embed/x"></iframe>', "iframe-title", 1, "Iframe without title"),
    ('<iframe src="/map" title="Office map"></iframe>', "iframe-title", 0, "Iframe with title"),
    ('<video src="talk.mp4"></video>', "video-accessibility", 2, "Video without controls or captions"),
    (
        '<video src="talk.mp4" controls><track kind="captions" src="talk.vtt"></video>',
        "video-accessibility", 0, "Video with controls and captions",
    ),
    ('<audio src="talk.mp3" autoplay></audio>', "audio-accessibility", 2, "Autoplaying audio without controls"),
    ('<audio src="/media/talk.mp3" controls></audio>', "media-alternative", 1, "Audio without fallback"),
    (
        '<audio src="/media/talk.mp3" controls><a href="/media/talk.mp3">Download</a></audio>',
        "media-alternative", 0, "Audio with fallback link",
    ),
]

INTERACTION_CASES = [
    ('<div tabindex="3">x</div>', "positive-tabindex", 1, "Positive tabindex"),
    ('<div tabindex="0">x</div>', "positive-tabindex", 0, "Zero tabindex"),
    ('<div onclick="go()">Go</div>', "interactive-element", 1, "Clickable div"),
    ('<button onclick="go()">Go</button>', "interactive-element", 0, "Clickable button"),
    ('<div class="modal"><h2>Sign in</h2></div>', "modal-accessibility", 1, "Modal class without semantics"),
    (
        '<div role="dialog" aria-modal="true" aria-label="Sign in">x</div>',
        "modal-accessibility", 0, "Named modal dialog",
    ),
    ("<dialog><h2>Sign in</h2></dialog>", "modal-accessibility", 0, "Native dialog"),
    ('<a href="/" style="outline: none">Home</a>', "focus-indicator", 1, "Inline outline removed"),
    ('<a href="/" style="outline: none; box-shadow: 0 0 2px blue">Home</a>', "focus-indicator", 0, "Outline replaced"),
    ("<style>a:focus { outline: none; }</style>", "focus-indicator", 1, "Stylesheet removes focus outline"),
    ('<div onkeydown="trap(event)">x</div>', "keyboard-trap", 1, "Key handler on container"),
    (
        '<div style="display: flex; flex-direction: row-reverse"><a href="/a">A</a></div>',
        "focus-order", 1, "Reversed flex with link",
    ),
    ('<div style="display: flex; flex-direction: row-reverse"><p>A</p></div>', "focus-order", 0, "Reversed flex, nothing focusable"),
    ('<div onmouseover="show()">x</div>', "custom-widget-keyboard", 1, "Mouse-only hover"),
    ('<div onmouseover="show()" onfocus="show()">x</div>', "custom-widget-keyboard", 0, "Hover with focus equivalent"),
    ('<button style="width: 20px; height: 20px">x</button>', "touch-target", 1, "20px button"),
    ('<button style="width: 48px; height: 48px">x</button>', "touch-target", 0, "48px button"),
    ('<div ontouchstart="swipe()">x</div>', "touch-gesture", 1, "Touch handler"),
]

CONTRAST_CASES = [
    ('<p style="color: #777; background-color: #fff">Text</p>', "text-color-contrast", 1, "Mid gray on white"),
    ('<p style="color: black; background-color: white">Text</p>', "text-color-contrast", 0, "Black on white"),
    (
        '<h1 style="color:#777;background-color:#fff;font-size:32px">Big</h1>',
        "text-color-contrast", 1, "Large text held to the same ratio",
    ),
    (
        '<p style="color: rgba(0, 0, 0, 0.5); background-color: #fff">Text</p>',
        "text-color-contrast", 0, "Translucent color not measured",
    ),
    ('<p style="color: #777">Text</p>', "text-color-contrast", 0, "No inline background"),
    ("<p>Click the red button to continue</p>", "color-reliance", 1, "Reference by color"),
    ("<p>Click the Continue button</p>", "color-reliance", 0, "Reference by name"),
    ('<div style="background: linear-gradient(red, blue)">Hero</div>', "complex-contrast", 1, "Text over gradient"),
    ('<div style="background: linear-gradient(red, blue)"></div>', "complex-contrast", 0, "Gradient without text"),
]

ARIA_CASES = [
    ('<div role="buton">x</div>', "aria-role", 1, "Misspelled role"),
    ('<div role="navigation">x</div>', "aria-role", 0, "Valid role"),
    ('<div aria-lable="Menu">x</div>', "aria-attribute", 1, "Misspelled aria attribute"),
    ('<div role="checkbox" tabindex="0">x</div>', "aria-attribute", 1, "Checkbox without aria-checked"),
    ('<input type="checkbox" role="checkbox">', "aria-attribute", 0, "Native checkbox state"),
    ('<button aria-pressed="yes">Bold</button>', "aria-state", 1, "Invalid pressed value"),
    ('<button aria-pressed="mixed">Bold</button>', "aria-state", 0, "Mixed pressed value"),
    ('<div aria-checked="true">x</div>', "invalid-aria-combination", 1, "aria-checked on a div"),
    ('<div role="checkbox" aria-checked="true">x</div>', "invalid-aria-combination", 0, "aria-checked on checkbox"),
    ('<nav role="navigation">x</nav>', "redundant-aria", 1, "Redundant nav role"),
    ('<article><header role="banner">x</header></article>', "redundant-aria", 0, "Banner role on nested header"),
    ('<header role="banner">x</header>', "redundant-aria", 1, "Banner role on top-level header"),
    ('<button aria-label="Save">Save</button>', "redundant-aria", 1, "Label repeats text"),
    ('<div aria-hidden="true"><a href="/">Home</a></div>', "hidden-content", 1, "Focusable inside aria-hidden"),
    ('<div aria-hidden="true"><p>Decoration</p></div>', "hidden-content", 0, "Nothing focusable inside"),
    ('<div aria-live="loud">x</div>', "live-region", 1, "Invalid live value"),
    ('<div class="alert">Saved</div>', "live-region", 1, "Status class without live region"),
    ('<div class="alert" role="alert">Saved</div>', "live-region", 0, "Alert role"),
]

STRUCTURE_CASES = [
    ('<div role="navigation"><a href="/">Home</a></div>', "semantic-html", 1, "Div with navigation role"),
    ('<div role="button">x</div>', "semantic-html", 0, "Non-landmark role"),
    ("<nav>A</nav><nav>B</nav>", "landmark-role", 2, "Two unlabeled navs"),
    ('<nav aria-label="Main">A</nav><nav aria-label="Footer">B</nav>', "landmark-role", 0, "Two labelled navs"),
    ("<html><head></head><body><p>x</p></body></html>", "page-structure", 2, "No lang and no title"),
    (
        '<html lang="en"><head><title>Home</title></head><body></body></html>',
        "page-structure", 0, "Lang and title",
    ),
    ("<p>Fragment</p>", "page-structure", 0, "Fragment without html element"),
    ('<meta name="viewport" content="width=device-width, user-scalable=no">', "viewport-check", 1, "Zoom disabled"),
    ('<meta name="viewport" content="width=device-width, maximum-scale=1">', "viewport-check", 1, "Max scale below 2"),
    ('<meta name="viewport" content="width=device-width, initial-scale=1">', "viewport-check", 0, "Zoom allowed"),
]


ALL_CASES = (
    IMAGE_CASES + HEADING_CASES + LINK_CASES + FORM_CASES + TABLE_CASES
    + MEDIA_CASES + INTERACTION_CASES + CONTRAST_CASES + ARIA_CASES + STRUCTURE_CASES
)


# =============================================================================
# Test Classes
# =============================================================================

class TestDetectionCounts:
    """Every rule reports the expected number of issues for a fragment."""

    @pytest.mark.parametrize(
        "html,rule_id,expected_count,description",
        ALL_CASES,
        ids=[case[-1] for case in ALL_CASES]
    )
    def test_issue_count(self, detect, html, rule_id, expected_count, description):
        issues = detect(html, rule_id)
        assert len(issues) == expected_count
        assert all(issue.rule_id == rule_id for issue in issues)


class TestContextSensitiveRules:
    """Rules whose behavior depends on ScanContext."""

    # Format: (href, expected_count, description)
    EXTERNAL_CASES = [
        ("https://partner.org/about", 1, "Other host"),
        ("https://www.example.com/about", 0, "Same host with www"),
        ("https://blog.example.com/post", 0, "Subdomain"),
        ("/about", 0, "Relative URL"),
    ]

    @pytest.mark.parametrize(
        "href,expected_count,description",
        EXTERNAL_CASES,
        ids=[case[-1] for case in EXTERNAL_CASES]
    )
    def test_external_link(self, detect, site_context, href, expected_count, description):
        issues = detect(f'<a href="{href}">Partner</a>', "external-link", site_context)
        assert len(issues) == expected_count

    def test_external_link_silent_without_site_url(self, detect):
        assert detect('<a href="https://partner.org">Partner</a>', "external-link") == []

    def test_external_link_already_marked(self, detect, site_context):
        html = '<a href="https://partner.org">Partner (external link)</a>'
        assert detect(html, "external-link", site_context) == []

    def test_skip_link_threshold(self, detect):
        html = "<main><p>" + "Lorem ipsum " * 5 + "</p></main>"
        short_limit = ScanContext(skip_link_min_length=20)
        assert len(detect(html, "skip-link", short_limit)) == 1
        assert detect(html, "skip-link") == []

    def test_skip_link_present(self, detect):
        html = '<a href="#main">Skip to main content</a><main id="main"><p>' + "Lorem " * 10 + "</p></main>"
        assert detect(html, "skip-link", ScanContext(skip_link_min_length=20)) == []

    def test_skip_link_issue_has_no_element(self, detect):
        issue = detect("<p>" + "x" * 50 + "</p>", "skip-link", ScanContext(skip_link_min_length=20))[0]
        assert issue.selector == ""
        assert issue.html_snippet == ""

    def test_snippet_length_from_context(self, detect):
        html = f'<img src="{"a" * 300}.jpg">'
        issue = detect(html, "missing-alt-text", ScanContext(snippet_max_length=40))[0]
        assert issue.html_snippet.endswith("...")
        assert len(issue.html_snippet) == 43


class TestSeverities:
    """Rules that grade their issues."""

    # Format: (html, expected_severity, description)
    EMPTY_HEADING_CASES = [
        ("<h2></h2>", Severity.SERIOUS, "No content"),
        ('<h2><img src="x.png"></h2>', Severity.MODERATE, "Unnamed image only"),
        ('<h2 aria-label="Intro"></h2>', Severity.MINOR, "ARIA name only"),
    ]

    @pytest.mark.parametrize(
        "html,expected,description",
        EMPTY_HEADING_CASES,
        ids=[case[-1] for case in EMPTY_HEADING_CASES]
    )
    def test_empty_heading_severity(self, detect, html, expected, description):
        issues = detect(html, "empty-heading")
        assert len(issues) == 1
        assert issues[0].severity == expected

    def test_invalid_role_with_fallback_is_moderate(self, detect):
        issue = detect('<div role="foo button">x</div>', "aria-role")[0]
        assert issue.severity == Severity.MODERATE
        assert issue.context["has_valid_fallback"] is True
        assert issue.context["invalid_roles"] == ["foo"]

    def test_invalid_role_without_fallback_is_serious(self, detect):
        issue = detect('<div role="foo">x</div>', "aria-role")[0]
        assert issue.severity == Severity.SERIOUS
        assert issue.context["has_valid_fallback"] is False


class TestIssueMetadata:
    """Issues carry suggestions, criteria and a detached location."""

    def test_role_suggestion(self, detect):
        issue = detect('<div role="buton">x</div>', "aria-role")[0]
        assert issue.context["suggestions"] == {"buton": "button"}
        assert "button" in issue.recommendation

    def test_attribute_suggestion(self, detect):
        issue = detect('<div aria-lable="Menu">x</div>', "aria-attribute")[0]
        assert issue.context["suggestion"] == "aria-label"

    def test_no_suggestion_for_unrelated_token(self, detect):
        issue = detect('<div role="xyzzyplugh">x</div>', "aria-role")[0]
        assert issue.context["suggestions"] == {}

    def test_quality_problem_kinds(self, detect):
        html = (
            '<img src="a.jpg" alt="image">'
            '<img src="b.jpg" alt="ab">'
            f'<img src="c.jpg" alt="{"word " * 40}">'
        )
        problems = [issue.context["problem"] for issue in detect(html, "alt-text-quality")]
        assert problems == ["placeholder", "too_short", "too_long"]

    def test_media_issue_per_problem(self, detect):
        problems = [issue.context["problem"] for issue in detect('<video src="a.mp4" autoplay></video>', "video-accessibility")]
        assert problems == ["controls", "autoplay", "captions"]

    def test_issue_location_and_level(self, detect):
        issue = detect('<div id="hero"><img src="hero.jpg"></div>', "missing-alt-text")[0]
        assert issue.selector == "#hero > img"
        assert issue.html_snippet == '<img src="hero.jpg"/>'
        assert issue.wcag_criterion == "1.1.1"
        assert issue.wcag_level == WcagLevel.A
        assert issue.priority == "P0"

    def test_levels_follow_criterion(self, detect):
        assert detect('<p style="color: #777; background-color: #fff">x</p>', "text-color-contrast")[0].wcag_level == WcagLevel.AA
        assert detect('<button style="width: 20px">x</button>', "touch-target")[0].wcag_level == WcagLevel.AAA

    def test_detection_does_not_mutate(self, registry, adapter):
        html = '<img src="hero.jpg"><a href="/x" target="_blank"></a><div role="buton" onclick="go()">x</div>'
        doc = adapter.parse(html)
        before = adapter.serialize(doc)
        for detector in registry.detectors:
            detector.detect(doc)
        assert adapter.serialize(doc) == before

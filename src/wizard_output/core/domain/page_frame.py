"""
Page chrome for wizard responses.

The renderer is a pure function of already-resolved strings: asset URLs,
translated titles and sidebar markup are supplied by the caller. Plain text
(titles, link labels, URLs) is escaped here; sidebar sections are markup
and are emitted verbatim.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from html import escape
from typing import Literal

from pydantic import Field

from wizard_output.core.domain.base import ValueObject
from wizard_output.core.domain.envelope_mode import EnvelopeMode

SIDEBAR_SECTION_DELIMITER = "----"


class HeadAttributes(ValueObject):
    """Language attributes of the ``<html>`` element."""

    lang: str = "en"
    dir: Literal["ltr", "rtl"] = "ltr"


class DocLink(ValueObject):
    """A labelled link rendered in the side panel."""

    label: str
    url: str


class FrameContext(ValueObject):
    """Everything the frame needs to render one response."""

    attrs: HeadAttributes = Field(default_factory=HeadAttributes)
    title: str
    style_url: str | None = None
    script_urls: tuple[str, ...] = ()
    sidebar_text: str = ""
    logo: DocLink | None = None
    doc_links: tuple[DocLink, ...] = ()


def split_sidebar_sections(text: str) -> list[str]:
    """Split sidebar markup into sections on the ``----`` delimiter.

    Blank sections are dropped so that leading or trailing delimiters do not
    produce empty portals.
    """
    return [
        section.strip()
        for section in text.split(SIDEBAR_SECTION_DELIMITER)
        if section.strip()
    ]


class PageFrame:
    """Renders the opening and closing chrome around wizard step content."""

    def render_opening(self, mode: EnvelopeMode, context: FrameContext) -> str:
        """Render the opening frame for a committed render mode."""
        if mode is EnvelopeMode.RENDER_SHORT:
            return self.render_opening_short(
                context.attrs, context.title, context.style_url, context.script_urls
            )
        if mode is EnvelopeMode.RENDER_FULL:
            return self.render_opening_full(
                context.attrs, context.title, context.style_url, context.script_urls
            )
        raise ValueError(f"No opening frame for envelope mode {mode.value!r}")

    def render_closing(self, mode: EnvelopeMode, context: FrameContext) -> str:
        """Render the closing frame matching ``render_opening`` for ``mode``."""
        if mode is EnvelopeMode.RENDER_SHORT:
            return self.render_closing_short()
        if mode is EnvelopeMode.RENDER_FULL:
            return self.render_closing_full(
                split_sidebar_sections(context.sidebar_text),
                context.doc_links,
                logo=context.logo,
            )
        raise ValueError(f"No closing frame for envelope mode {mode.value!r}")

    def render_opening_full(
        self,
        attrs: HeadAttributes,
        title: str,
        style_link: str | None,
        script_links: Iterable[str],
    ) -> str:
        safe_title = escape(title)
        return (
            self._render_head(attrs, safe_title, style_link, script_links)
            + f'<body class="{escape(attrs.dir)}">\n'
            + '<div id="page-base"></div>\n'
            + '<div id="head-base"></div>\n'
            + '<div id="content" class="wizard-body" role="main">\n'
            + '<div id="bodyContent" class="wizard-body-content">\n'
            + f"\n<h1>{safe_title}</h1>\n"
        )

    def render_closing_full(
        self,
        sidebar_sections: Sequence[str],
        doc_links: Iterable[DocLink],
        logo: DocLink | None = None,
    ) -> str:
        parts = ["\n</div></div>\n\n", '<div id="wizard-panel">\n']
        if logo is not None:
            parts.append(
                '\t<div class="portal" id="p-logo">\n'
                f'\t\t<a href="{escape(logo.url)}" title="{escape(logo.label)}"></a>\n'
                "\t</div>\n"
            )
        for section in sidebar_sections:
            parts.append(self._portal(section))
        items = "".join(self._link_item(link) for link in doc_links)
        parts.append(self._portal(f"<ul>{items}</ul>"))
        parts.append("</div>\n\n")
        parts.append(self.render_closing_short())
        return "".join(parts)

    def render_opening_short(
        self,
        attrs: HeadAttributes,
        title: str,
        style_link: str | None,
        script_links: Iterable[str],
    ) -> str:
        return (
            self._render_head(attrs, escape(title), style_link, script_links)
            + '<body style="background-image: none">\n'
        )

    def render_closing_short(self) -> str:
        return "</body></html>"

    def _render_head(
        self,
        attrs: HeadAttributes,
        safe_title: str,
        style_link: str | None,
        script_links: Iterable[str],
    ) -> str:
        lines = [
            "<!DOCTYPE html>",
            f'<html lang="{escape(attrs.lang)}" dir="{escape(attrs.dir)}">',
            "<head>",
            '\t<meta name="robots" content="noindex, nofollow" />',
            '\t<meta http-equiv="Content-type" content="text/html; charset=utf-8" />',
            f"\t<title>{safe_title}</title>",
        ]
        if style_link:
            lines.append(f'\t<link rel="stylesheet" href="{escape(style_link)}" />')
        for src in script_links:
            lines.append(f'\t<script src="{escape(src)}"></script>')
        lines.append("</head>")
        return "\n".join(lines) + "\n\n"

    @staticmethod
    def _portal(body: str) -> str:
        return f'<div class="portal"><div class="body">{body}</div></div>\n'

    @staticmethod
    def _link_item(link: DocLink) -> str:
        return f'<li><a href="{escape(link.url)}">{escape(link.label)}</a></li>'

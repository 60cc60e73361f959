"""Convert Confluence storage-format HTML to Markdown."""

from __future__ import annotations

import re

import html2text

# <ac:structured-macro ac:name="code"> with an optional language parameter
_CODE_MACRO = re.compile(
    r'<ac:structured-macro[^>]*ac:name="code"[^>]*>(?P<inner>.*?)</ac:structured-macro>',
    re.DOTALL,
)
_CODE_LANGUAGE = re.compile(r'<ac:parameter[^>]*ac:name="language"[^>]*>(?P<lang>[^<]*)</ac:parameter>')
_CODE_BODY = re.compile(
    r"<ac:plain-text-body>\s*<!\[CDATA\[(?P<body>.*?)\]\]>\s*</ac:plain-text-body>",
    re.DOTALL,
)
_PANEL_MACRO = re.compile(
    r'<ac:structured-macro[^>]*ac:name="(?P<kind>info|note|warning|tip|panel)"[^>]*>'
    r".*?<ac:rich-text-body>(?P<body>.*?)</ac:rich-text-body>.*?</ac:structured-macro>",
    re.DOTALL,
)
_PANEL_TITLES = {"info": "Info", "note": "Note", "warning": "Warning", "tip": "Tip"}

_PLACEHOLDER = "TICKETGATECODEBLOCK{}"


def _converter() -> html2text.HTML2Text:
    h = html2text.HTML2Text()
    h.body_width = 0  # Don't wrap lines
    h.protect_links = True
    h.unicode_snob = True
    h.images_to_alt = False
    h.single_line_break = False
    return h


def html_to_markdown(html: str) -> str:
    """Render page HTML as Markdown.

    Code macros become fenced blocks tagged with their language; info, note,
    warning, tip and panel macros become block quotes headed by their kind.
    """
    code_blocks: list[str] = []

    def _stash_code(match: re.Match[str]) -> str:
        inner = match["inner"]
        lang = _CODE_LANGUAGE.search(inner)
        body = _CODE_BODY.search(inner)
        code = body["body"] if body else ""
        code_blocks.append(f"```{lang['lang'].strip() if lang else ''}\n{code.strip()}\n```")
        return f"<p>{_PLACEHOLDER.format(len(code_blocks) - 1)}</p>"

    def _panel(match: re.Match[str]) -> str:
        title = _PANEL_TITLES.get(match["kind"], "Panel")
        return f"<blockquote><p><strong>{title}</strong></p>{match['body']}</blockquote>"

    html = _CODE_MACRO.sub(_stash_code, html)
    html = _PANEL_MACRO.sub(_panel, html)

    markdown = _converter().handle(html)
    for index, block in enumerate(code_blocks):
        markdown = markdown.replace(_PLACEHOLDER.format(index), block)

    markdown = re.sub(r"\n\n\n+", "\n\n", markdown)
    return markdown.strip()

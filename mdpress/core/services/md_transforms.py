"""
HTML enhancement — turns rendered Markdown into styled, sectioned HTML.

The enhancer rewrites HTML text with an ordered list of rules:

  1. Points / Cautions list pairs   → two-column summary cards
  2. Bold-label callout paragraphs  → severity note boxes
  3. ``※`` footnote paragraphs      → info note boxes
  4. ``Step N: Title`` h3 headings  → step cards with a number badge
  5. ``[Token]`` keywords           → inline badges
  6. ``<!-- pagebreak -->``         → explicit page-break element
  7. h2 / h3 heading spans          → section / subsection wrappers

Sectioning always runs last: the earlier rules rewrite headings and
paragraphs, and the section boundaries are computed on their output.

Every step is guarded on its own.  A step that raises is logged and
skipped, so a bad rule degrades the document instead of failing the
conversion.  All vocabularies come from an ``EnhanceRules`` instance.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable

from mdpress.core.models.document import DEFAULT_TITLE, DocumentTitle
from mdpress.core.models.rules import EnhanceRules

logger = logging.getLogger(__name__)

_DEFAULT_RULES = EnhanceRules()

Replacement = Callable[[re.Match], str]


@dataclass(frozen=True)
class TransformRule:
    """One regex rewrite step of the enhancer pipeline."""

    name: str
    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, html: str) -> str:
        return self.pattern.sub(self.replacement, html)


def _alternation(labels: Iterable[str]) -> str:
    """Regex alternation for literal labels, longest first."""
    return "|".join(re.escape(label) for label in sorted(labels, key=len, reverse=True))


# ── Tag scanning ────────────────────────────────────────────────────

# Comments are matched first so tags inside them are never counted.
_TAG_RE = re.compile(
    r"<!--.*?-->|<(/?)([a-zA-Z][a-zA-Z0-9]*)\b[^>]*?(/?)>",
    re.DOTALL,
)

_VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

_HEADING_LEVELS = {f"h{n}": n for n in range(1, 7)}

# Markdown block containers whose headings are sectioned in place.
_CONTAINER_TAGS = frozenset({"blockquote", "li"})


def _list_span(html: str, start: int) -> tuple[int, int] | None:
    """``(inner_end, end)`` of the ``<ul>`` opening at ``start``.

    Nested lists are balanced, so ``inner_end`` is the offset of the
    matching ``</ul>`` and ``end`` the offset just past it.  ``None``
    when the list is never closed.
    """
    depth = 0
    for m in _TAG_RE.finditer(html, start):
        if m.group(2) is None or m.group(2).lower() != "ul":
            continue
        if m.group(1):
            depth -= 1
            if depth == 0:
                return m.start(), m.end()
        else:
            depth += 1
    return None


# ── Rule builders ───────────────────────────────────────────────────


@dataclass(frozen=True)
class SummaryCardsRule:
    """Points list immediately followed by a Cautions list → two cards.

    Each list is matched with its nesting balanced, so a card holds
    exactly one list and never reaches past it.
    """

    name: str
    points: re.Pattern[str]
    cautions: re.Pattern[str]

    def apply(self, html: str) -> str:
        parts: list[str] = []
        cursor = 0

        for head in self.points.finditer(html):
            if head.start() < cursor:
                continue
            first = _list_span(html, head.end())
            if first is None:
                continue
            tail = self.cautions.match(html, first[1])
            if tail is None:
                continue
            second = _list_span(html, tail.end())
            if second is None:
                continue

            parts.append(html[cursor:head.start()])
            parts.append(self._cards(
                head.group(1), html[head.end():first[1]],
                tail.group(1), html[tail.end():second[1]],
            ))
            cursor = second[1]

        parts.append(html[cursor:])
        return "".join(parts)

    @staticmethod
    def _cards(points_title: str, points_list: str, cautions_title: str, cautions_list: str) -> str:
        return (
            '<div class="summary-cards">\n'
            '  <div class="summary-card points">\n'
            f'    <div class="summary-card-title">{points_title}</div>\n'
            f"    {points_list}\n"
            "  </div>\n"
            '  <div class="summary-card cautions">\n'
            f'    <div class="summary-card-title">{cautions_title}</div>\n'
            f"    {cautions_list}\n"
            "  </div>\n"
            "</div>"
        )


def _summary_cards_rule(rules: EnhanceRules) -> SummaryCardsRule:
    def label_paragraph(labels: Iterable[str]) -> str:
        # ends right before the list so the scan starts on its <ul>
        return r"<p>\s*<strong>(" + _alternation(labels) + r")</strong>\s*</p>\s*(?=<ul\b)"

    return SummaryCardsRule(
        "summary-cards",
        re.compile(label_paragraph(rules.points_labels), re.IGNORECASE),
        re.compile(r"\s*" + label_paragraph(rules.cautions_labels), re.IGNORECASE),
    )


Rule = TransformRule | SummaryCardsRule


def _callout_rule(severity: str, labels: Iterable[str]) -> TransformRule:
    # Body runs to the paragraph end and may carry inline markup.
    pattern = re.compile(
        r"<p><strong>(" + _alternation(labels) + r")</strong>\s*[:：]\s*"
        r"((?:(?!</p>).)+?)\s*</p>",
        re.IGNORECASE | re.DOTALL,
    )

    def _replace(m: re.Match[str]) -> str:
        return (
            f'<div class="note-box {severity}">'
            f'<div class="note-box-title">{m.group(1)}</div>'
            f"<p>{m.group(2)}</p>"
            "</div>"
        )

    return TransformRule(f"callout:{severity}", pattern, _replace)


# Text just before a paragraph that already sits first in a note box
# (optionally after its title).
_NOTE_BOX_HEAD_RE = re.compile(
    r'<div class="note-box[^"]*">\s*'
    r'(?:<div class="note-box-title">(?:(?!</div>).)*</div>\s*)?\Z',
    re.DOTALL,
)
_NOTE_BOX_LOOKBACK = 512


def _inside_note_box(html: str, pos: int) -> bool:
    return _NOTE_BOX_HEAD_RE.search(html, max(0, pos - _NOTE_BOX_LOOKBACK), pos) is not None


def _footnote_rule(rules: EnhanceRules) -> TransformRule:
    mark = rules.footnote_mark
    pattern = re.compile(
        r"<p>\s*" + re.escape(mark) + r"((?:(?!</p>).)*)</p>",
        re.DOTALL,
    )

    def _replace(m: re.Match[str]) -> str:
        if _inside_note_box(m.string, m.start()):
            return m.group(0)
        return f'<div class="note-box {rules.footnote_class}"><p>{mark}{m.group(1)}</p></div>'

    return TransformRule("footnote", pattern, _replace)


def _step_rule(rules: EnhanceRules) -> TransformRule:
    pattern = re.compile(
        r"<h3(?:\s[^>]*)?>\s*(" + _alternation(rules.step_words) + r")\s*(\d+)\s*[:：]\s*"
        r"((?:(?!</h3>).)+?)\s*</h3>",
        re.IGNORECASE | re.DOTALL,
    )

    def _replace(m: re.Match[str]) -> str:
        return (
            '<div class="step-card"><h4>'
            f'<span class="badge badge-info">{m.group(1)} {m.group(2)}</span> {m.group(3)}'
            "</h4></div>"
        )

    return TransformRule("steps", pattern, _replace)


def _badge_rule(rules: EnhanceRules) -> TransformRule:
    pattern = re.compile(r"\[(" + _alternation(rules.badges) + r")\]")

    def _replace(m: re.Match[str]) -> str:
        token = m.group(1)
        return f'<span class="badge badge-{rules.badges[token]}">{token}</span>'

    return TransformRule("badges", pattern, _replace)


def _pagebreak_rule(rules: EnhanceRules) -> TransformRule:
    pattern = re.compile(
        r"<!--\s*" + re.escape(rules.pagebreak_token) + r"\s*-->",
        re.IGNORECASE,
    )
    return TransformRule("pagebreak", pattern, lambda m: '<div class="page-break"></div>')


def build_rules(rules: EnhanceRules | None = None) -> list[Rule]:
    """Compile the ordered rewrite rules (everything except sectioning).

    Rule sets with an empty vocabulary are skipped rather than compiled
    into a pattern that matches the empty label.
    """
    rules = rules or _DEFAULT_RULES
    compiled: list[Rule] = []

    if rules.points_labels and rules.cautions_labels:
        compiled.append(_summary_cards_rule(rules))
    for severity, labels in rules.callouts.items():
        if labels:
            compiled.append(_callout_rule(severity, labels))
    if rules.footnote_mark:
        compiled.append(_footnote_rule(rules))
    if rules.step_words:
        compiled.append(_step_rule(rules))
    if rules.badges:
        compiled.append(_badge_rule(rules))
    if rules.pagebreak_token:
        compiled.append(_pagebreak_rule(rules))

    return compiled


# ── Sectioning ──────────────────────────────────────────────────────


def top_level_headings(html: str) -> list[tuple[int, int]]:
    """Return ``(offset, level)`` for every heading at nesting depth 0.

    A light tag scanner, not a parser: it counts open and close tags
    (void and self-closed tags excluded) and never lets the depth drop
    below zero, so stray close tags in raw HTML cannot hide headings.
    """
    found: list[tuple[int, int]] = []
    depth = 0

    for m in _TAG_RE.finditer(html):
        closing, name, self_closing = m.group(1), m.group(2), m.group(3)
        if name is None:
            continue
        name = name.lower()
        if name in _VOID_TAGS or self_closing:
            continue
        if closing:
            depth = max(depth - 1, 0)
            continue
        if depth == 0 and name in _HEADING_LEVELS:
            found.append((m.start(), _HEADING_LEVELS[name]))
        depth += 1

    return found


def container_spans(html: str) -> list[tuple[int, int]]:
    """``(start, end)`` of the content of each outermost blockquote or list item.

    Containers nested inside another container are left to the
    recursive call on the outer one.  An unclosed container ends the
    scan.
    """
    spans: list[tuple[int, int]] = []
    open_name: str | None = None
    depth = 0
    content_start = 0

    for m in _TAG_RE.finditer(html):
        closing, name, self_closing = m.group(1), m.group(2), m.group(3)
        if name is None or self_closing:
            continue
        name = name.lower()

        if open_name is None:
            if not closing and name in _CONTAINER_TAGS:
                open_name, depth, content_start = name, 1, m.end()
            continue

        if name != open_name:
            continue
        if closing:
            depth -= 1
            if depth == 0:
                spans.append((content_start, m.start()))
                open_name = None
        else:
            depth += 1

    return spans


def wrap_sections(
    html: str,
    *,
    section_class: str = "h2-section",
    subsection_class: str = "h3-section",
) -> str:
    """Wrap h2 spans in ``<section>`` and h3 spans in nested ``<div>``.

    An h2 span runs to the next h1/h2; an h3 span runs to the next
    h1/h2/h3.  The last open span runs to the end of its container.
    An h3 with no enclosing h2 gets its subsection wrapper only.

    Blockquotes and list items are sectioned on their own, so a quoted
    ``## heading`` gets its wrapper inside the quote.  Headings inside
    any other element (raw ``<div>``, existing sections) are left alone,
    which keeps a second run a no-op.
    """
    spans = container_spans(html)
    if spans:
        parts: list[str] = []
        cursor = 0
        for start, end in spans:
            parts.append(html[cursor:start])
            parts.append(wrap_sections(
                html[start:end],
                section_class=section_class,
                subsection_class=subsection_class,
            ))
            cursor = end
        parts.append(html[cursor:])
        html = "".join(parts)

    return _wrap_top_level(html, section_class, subsection_class)


def _wrap_top_level(html: str, section_class: str, subsection_class: str) -> str:
    boundaries = [(pos, level) for pos, level in top_level_headings(html) if level <= 3]
    if not any(level in (2, 3) for _, level in boundaries):
        return html

    parts: list[str] = []
    cursor = 0
    in_section = False
    in_subsection = False

    for pos, level in boundaries:
        parts.append(html[cursor:pos])
        cursor = pos

        if in_subsection:
            parts.append("</div>")
            in_subsection = False
        if level <= 2 and in_section:
            parts.append("</section>")
            in_section = False

        if level == 2:
            parts.append(f'<section class="{section_class}">')
            in_section = True
        elif level == 3:
            parts.append(f'<div class="{subsection_class}">')
            in_subsection = True

    parts.append(html[cursor:])
    if in_subsection:
        parts.append("</div>")
    if in_section:
        parts.append("</section>")

    return "".join(parts)


# ── Pipeline ────────────────────────────────────────────────────────


def _guarded(name: str, step: Callable[[str], str], html: str) -> str:
    try:
        return step(html)
    except Exception as e:
        logger.warning("HTML enhancement step '%s' failed, skipped: %s", name, e)
        return html


def enhance(html: str, rules: EnhanceRules | None = None) -> str:
    """Apply every enhancement rule, then sectioning, to rendered HTML.

    Args:
        html: Block-level HTML from the Markdown renderer.
        rules: Lookup tables to use (default: ``EnhanceRules()``).

    Returns:
        The enhanced HTML.  Input without any recognised pattern comes
        back unchanged; a failing step leaves its input untouched.
    """
    if not html:
        return ""

    rules = rules or _DEFAULT_RULES

    try:
        steps = build_rules(rules)
    except re.error as e:
        logger.warning("Could not compile enhancement rules: %s", e)
        steps = []

    for rule in steps:
        html = _guarded(rule.name, rule.apply, html)

    return _guarded(
        "sections",
        lambda text: wrap_sections(
            text,
            section_class=rules.section_class,
            subsection_class=rules.subsection_class,
        ),
        html,
    )


# ── Title extraction ────────────────────────────────────────────────

_FENCE_RE = re.compile(r"^(`{3,}|~{3,}).*?^\1[ \t]*$", re.MULTILINE | re.DOTALL)
_H1_RE = re.compile(r"^#[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)
_SUBTITLE_SEP_RE = re.compile(r"\s*[—―]+\s*")
_ANNOTATION_RE = re.compile(r"【[^】]*】|^\s*\[[^\]]*\]")


def extract_title(markdown: str | None) -> DocumentTitle:
    """Split the first level-1 heading into title and subtitle.

    ``# 【Draft】Title — Subtitle`` gives ``("Title", "Subtitle")``.
    Without a level-1 heading the title is ``"Document"``.
    """
    if not markdown:
        return DocumentTitle()

    text = _FENCE_RE.sub("", markdown.lstrip("\ufeff"))
    m = _H1_RE.search(text)
    if not m:
        return DocumentTitle()

    parts = _SUBTITLE_SEP_RE.split(m.group(1).strip(), maxsplit=1)
    title = _ANNOTATION_RE.sub("", parts[0]).strip() or DEFAULT_TITLE
    subtitle = parts[1].strip() if len(parts) > 1 else ""

    return DocumentTitle(title=title, subtitle=subtitle)

"""Leaderboard view model and its presentation adapters."""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from html.parser import HTMLParser

import click

from pixel_leaderboard.config import LeaderboardConfig
from pixel_leaderboard.exceptions import RenderError
from pixel_leaderboard.models import Leaderboard, RankedEntry, SlotView
from pixel_leaderboard.ranker import get_tier

logger = logging.getLogger(__name__)

_SELECTOR_RE = re.compile(r"([a-zA-Z][\w-]*)?((?:\.[\w-]+)+)")

_VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})


def build_slots(
    top: Sequence[RankedEntry], config: LeaderboardConfig
) -> list[SlotView]:
    """Map ranked contributors onto the configured display slots.

    Slots beyond the ranked entries are placeholders.
    """
    slots: list[SlotView] = []
    for index, selector in enumerate(config.slot_selectors):
        rank = index + 1
        if index < len(top):
            entry = top[index]
            slots.append(SlotView(
                rank=rank,
                selector=selector,
                login=entry.login,
                xp=entry.xp,
                tier=get_tier(entry.xp, config.tiers.tiers),
            ))
        else:
            slots.append(SlotView(rank=rank, selector=selector))
    return slots


def format_xp(xp: int) -> str:
    """Format an XP value with thousands separators."""
    return f"{xp:,}"


# ------------------------------------------------------------------
# HTML surface
# ------------------------------------------------------------------


def render_slot_html(slot: SlotView) -> str:
    """Inner markup for one leaderboard row."""
    if slot.login is None or slot.tier is None:
        return (
            f'<div class="lb-rank">#{slot.rank}</div>'
            f'<div class="lb-user">{slot.display_name}</div>'
            f'<div class="lb-xp">{slot.xp_text}</div>'
        )

    name = html.escape(slot.display_name)
    perk = html.escape(slot.tier.perk)
    color = html.escape(slot.tier.color)
    return (
        f'<div class="lb-rank"><span>#{slot.rank}</span></div>'
        f'<div class="lb-user">'
        f'<span class="lb-name">{name}</span>'
        f'<span class="lb-perk" style="color:{color}; font-size: 0.75rem;">{perk}</span>'
        f"</div>"
        f'<div class="lb-xp">{format_xp(slot.xp)} <span class="xp-label">XP</span></div>'
    )


def _parse_selector(selector: str) -> tuple[str | None, frozenset[str]]:
    """Split a compound class selector such as ``div.lb-row.gold``."""
    match = _SELECTOR_RE.fullmatch(selector.strip())
    if match is None:
        raise RenderError(f"Unsupported selector: {selector!r}")
    tag, classes = match.groups()
    return (tag.lower() if tag else None), frozenset(classes.lstrip(".").split("."))


@dataclass
class _ElementSpan:
    tag: str
    attrs: list[tuple[str, str | None]]
    start: int
    content_start: int
    content_end: int = -1


class _SlotLocator(HTMLParser):
    """Find the first element matching each selector and record its offsets."""

    def __init__(self, document: str, selectors: Sequence[str]) -> None:
        super().__init__(convert_charrefs=True)
        self._line_offsets = [0]
        for line in document.split("\n"):
            self._line_offsets.append(self._line_offsets[-1] + len(line) + 1)
        self._targets = {selector: _parse_selector(selector) for selector in selectors}
        self._stack: list[tuple[str, str | None]] = []
        self._open: dict[str, _ElementSpan] = {}
        self.spans: dict[str, _ElementSpan] = {}

    def _offset(self) -> int:
        line, col = self.getpos()
        return self._line_offsets[line - 1] + col

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _VOID_ELEMENTS:
            return
        classes: set[str] = set()
        for name, value in attrs:
            if name == "class" and value:
                classes.update(value.split())

        matched: str | None = None
        for selector, (want_tag, want_classes) in self._targets.items():
            if selector in self.spans or selector in self._open:
                continue
            if (want_tag is None or want_tag == tag) and want_classes <= classes:
                start = self._offset()
                raw = self.get_starttag_text() or ""
                self._open[selector] = _ElementSpan(
                    tag=tag, attrs=attrs, start=start, content_start=start + len(raw)
                )
                matched = selector
                break
        self._stack.append((tag, matched))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        # Self-closing elements have no content to replace.
        return

    def handle_endtag(self, tag: str) -> None:
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index][0] == tag:
                break
        else:
            return

        end = self._offset()
        for _, selector in self._stack[index:]:
            if selector is not None:
                span = self._open.pop(selector)
                span.content_end = end
                self.spans[selector] = span
        del self._stack[index:]


def _start_tag_with_border(span: _ElementSpan, color: str) -> str:
    parts = [f"<{span.tag}"]
    has_style = False
    for name, value in span.attrs:
        if name == "style":
            has_style = True
            declarations = [
                d.strip() for d in (value or "").split(";")
                if d.strip() and not d.strip().lower().startswith("border-left-color")
            ]
            declarations.append(f"border-left-color: {color}")
            value = "; ".join(declarations) + ";"
        if value is None:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(value)}"')
    if not has_style:
        parts.append(f' style="border-left-color: {html.escape(color)};"')
    parts.append(">")
    return "".join(parts)


def apply_to_html(document: str, slots: Sequence[SlotView]) -> str:
    """Write *slots* into the matching elements of an HTML document.

    Each slot element's previous content is replaced.  Filled slots also get
    the tier colour as their left border.  Slots whose selector matches no
    element are skipped.
    """
    locator = _SlotLocator(document, [slot.selector for slot in slots])
    locator.feed(document)
    locator.close()

    edits: list[tuple[int, int, str]] = []
    for slot in slots:
        span = locator.spans.get(slot.selector)
        if span is None:
            logger.debug("No element matches %s, skipping slot %d", slot.selector, slot.rank)
            continue
        if slot.tier is not None and slot.login is not None:
            start_tag = _start_tag_with_border(span, slot.tier.color)
        else:
            start_tag = document[span.start:span.content_start]
        edits.append((span.start, span.content_end, start_tag + render_slot_html(slot)))

    for start, end, text in sorted(edits, reverse=True):
        document = document[:start] + text + document[end:]
    return document


# ------------------------------------------------------------------
# Terminal surface
# ------------------------------------------------------------------


def _hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    value = color.lstrip("#")
    if len(value) != 6:
        return None
    try:
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    except ValueError:
        return None


def format_cli_output(board: Leaderboard, verbose: bool = False) -> str:
    """Format a leaderboard for terminal display with color."""
    lines: list[str] = [click.style(f"Leaderboard: {board.repo}", bold=True), ""]

    for slot in board.slots:
        if slot.login is None or slot.tier is None:
            lines.append(f"#{slot.rank}  {slot.display_name}  {slot.xp_text}")
            continue
        color = _hex_to_rgb(slot.tier.color)
        name_styled = click.style(slot.display_name, bold=True)
        perk_styled = click.style(f"{slot.tier.name}: {slot.tier.perk}", fg=color)
        lines.append(f"#{slot.rank}  {name_styled}  {slot.xp_text}  {perk_styled}")

    if not board.fetch.complete:
        lines.append("")
        lines.append(click.style(
            f"Warning: partial data, stopped after {board.fetch.pages_fetched} page(s)"
            f" ({board.fetch.error})",
            fg="yellow",
        ))

    if verbose:
        lines.append("")
        lines.append(
            f"Pages fetched: {board.fetch.pages_fetched} | "
            f"Pull requests: {len(board.fetch.pulls)} | "
            f"Contributors: {len(board.scores)}"
        )
        if board.scores:
            lines.append("")
            lines.append("Points:")
            for login, points in sorted(board.scores.items(), key=lambda kv: -kv[1]):
                lines.append(f"  {login}: {points}")

    return "\n".join(lines)


def format_json(board: Leaderboard) -> str:
    """Format a leaderboard as JSON."""
    return board.model_dump_json(indent=2)

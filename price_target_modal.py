#!/usr/bin/env python3
"""
Price Target Modal
==================
Stateless overlay listing the highest or lowest analyst price targets.

The caller owns everything: whether the modal is open, the record
collection, the title, the mode and the close callback.  Each render is a
fresh pass over ModalProps:

    props = ModalProps(is_open=True, on_close=close, title="High",
                       price_targets=targets, mode="high")
    view = build_modal_view(props)            # None when hidden
    html = render_price_target_modal(props)   # "" when hidden

Press handling is an explicit pair of handlers rather than event
bubbling: the overlay background and the close button request closure,
the inner panel absorbs the press and does nothing.
"""

import html as html_mod
import math
from enum import Enum
from typing import Optional

import pandas as pd

from formatting import format_date, format_target_price
from records import record_field
from schemas import ModalProps, ModalRow, ModalView, OverlayConfig, SortMode
from target_ranker import DEFAULT_CONFIG, select_for_view

# Palettes from the app design tokens (light / dark)
THEMES = {
    "light": {
        "overlay": "rgba(0, 0, 0, 0.5)",
        "card": "#ffffff",
        "foreground": "#030213",
        "muted_foreground": "#717182",
        "border": "rgba(0, 0, 0, 0.1)",
    },
    "dark": {
        "overlay": "rgba(0, 0, 0, 0.5)",
        "card": "#030213",
        "foreground": "#fafafa",
        "muted_foreground": "#c7c7c7",
        "border": "#666666",
    },
}


class PressTarget(str, Enum):
    OVERLAY = "overlay"
    CLOSE_BUTTON = "close"
    PANEL = "panel"


# ---------------------------------------------------------------------------
# Press handlers
# ---------------------------------------------------------------------------

def on_overlay_press(props: ModalProps) -> None:
    """Background press: request closure."""
    props.on_close()


def on_close_press(props: ModalProps) -> None:
    props.on_close()


def on_panel_press(props: ModalProps) -> None:
    """Press inside the content panel: absorbed, never reaches the overlay."""
    return None


_PRESS_HANDLERS = {
    PressTarget.OVERLAY: on_overlay_press,
    PressTarget.CLOSE_BUTTON: on_close_press,
    PressTarget.PANEL: on_panel_press,
}


def dispatch_press(props: ModalProps, target: PressTarget | str) -> None:
    """Route a press to exactly one handler. Ignored while hidden."""
    if not props.is_open:
        return
    _PRESS_HANDLERS[PressTarget(target)](props)


# ---------------------------------------------------------------------------
# View model
# ---------------------------------------------------------------------------

def _display_text(value) -> str:
    """Blank for None or NaN, otherwise the value as text."""
    if value is None or value is pd.NA or value is pd.NaT:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def header_title(props: ModalProps, cfg: OverlayConfig = DEFAULT_CONFIG) -> str:
    if props.sort_mode is SortMode.DATE:
        return cfg.display.latest_title
    return f"{props.title} {cfg.display.title_suffix}".strip()


def build_modal_view(props: ModalProps,
                     cfg: OverlayConfig = DEFAULT_CONFIG) -> Optional[ModalView]:
    """Everything a visible modal shows, or None while it is hidden."""
    if not props.is_open:
        return None

    entries = select_for_view(props.price_targets, props.mode,
                              props.sort_mode, cfg.display.top_n)
    rows = []
    for entry in entries:
        rec = entry.record
        rows.append(ModalRow(
            key=str(record_field(rec, "id") or record_field(rec, "_id") or f"row-{entry.rank}"),
            rank=entry.rank,
            rank_label=f"{entry.rank}.",
            firm=_display_text(record_field(rec, "analyst_firm")),
            price=format_target_price(record_field(rec, "price_target")),
            date=format_date(record_field(rec, "published_date"),
                             cfg.display.invalid_date_label),
        ))

    return ModalView(
        title=header_title(props, cfg),
        theme=props.theme or cfg.display.default_theme,
        rows=tuple(rows),
        empty_message=None if rows else cfg.display.empty_message,
    )


# ---------------------------------------------------------------------------
# HTML rendering
# ---------------------------------------------------------------------------

def _esc(v) -> str:
    return html_mod.escape(str(v), quote=True)


def _render_rows(view: ModalView) -> str:
    items = []
    for row in view.rows:
        items.append(
            f'<li class="pt-item" data-key="{_esc(row.key)}">'
            f'<span class="pt-rank">{_esc(row.rank_label)}</span>'
            f'<div class="pt-details">'
            f'<div class="pt-row">'
            f'<span class="pt-firm">{_esc(row.firm)}</span>'
            f'<span class="pt-price">{_esc(row.price)}</span>'
            f'</div>'
            f'<span class="pt-date">{_esc(row.date)}</span>'
            f'</div></li>'
        )
    return f'<ol class="pt-list">{"".join(items)}</ol>'


def render_price_target_modal(props: ModalProps,
                              cfg: OverlayConfig = DEFAULT_CONFIG) -> str:
    """Render the modal as a self-contained HTML fragment ("" when hidden).

    ``data-press`` attributes name the PressTarget each region maps to.
    """
    view = build_modal_view(props, cfg)
    if view is None:
        return ""

    if view.is_empty:
        body = f'<p class="pt-empty">{_esc(view.empty_message)}</p>'
    else:
        body = _render_rows(view)

    return (
        f"<style>{_css(view.theme)}</style>"
        f'<div class="pt-overlay" data-press="{PressTarget.OVERLAY.value}" role="presentation">'
        f'<div class="pt-panel" data-press="{PressTarget.PANEL.value}" '
        f'role="dialog" aria-modal="true" aria-label="{_esc(view.title)}">'
        f'<div class="pt-header">'
        f'<h2 class="pt-title">{_esc(view.title)}</h2>'
        f'<button type="button" class="pt-close" data-press="{PressTarget.CLOSE_BUTTON.value}" '
        f'aria-label="Close">&times;</button>'
        f"</div>"
        f'<div class="pt-body">{body}</div>'
        f"</div></div>"
    )


def _css(theme: str) -> str:
    c = THEMES[theme]
    return f"""
        .pt-overlay {{
            position: fixed; inset: 0;
            display: flex; align-items: center; justify-content: center;
            padding: 16px;
            background: {c['overlay']};
        }}
        .pt-panel {{
            width: 100%; max-width: 448px; max-height: 80%;
            display: flex; flex-direction: column;
            border-radius: 12px; overflow: hidden;
            background: {c['card']};
            box-shadow: 0 4px 8px rgba(0, 0, 0, .3);
        }}
        .pt-header {{
            display: flex; align-items: center; justify-content: space-between;
            padding: 16px; border-bottom: 1px solid {c['border']};
        }}
        .pt-title {{ flex: 1; margin: 0; font-size: 18px; font-weight: 600; color: {c['foreground']}; }}
        .pt-close {{
            padding: 4px; border: 0; background: none; cursor: pointer;
            font-size: 24px; line-height: 1; color: {c['muted_foreground']};
        }}
        .pt-body {{ overflow-y: auto; padding: 16px; }}
        .pt-empty {{ text-align: center; padding: 32px 0; font-size: 14px; color: {c['muted_foreground']}; }}
        .pt-list {{ list-style: none; margin: 0; padding: 0; }}
        .pt-item {{ display: flex; align-items: flex-start; gap: 12px; padding: 12px 0; }}
        .pt-item + .pt-item {{ border-top: 1px solid {c['border']}; }}
        .pt-rank {{ min-width: 24px; font-size: 14px; font-weight: 500; color: {c['muted_foreground']}; }}
        .pt-details {{ flex: 1; }}
        .pt-row {{ display: flex; align-items: baseline; justify-content: space-between; gap: 8px; }}
        .pt-firm {{
            flex: 1; font-size: 14px; font-weight: 500; color: {c['foreground']};
            white-space: nowrap; overflow: hidden; text-overflow: ellipsis;
        }}
        .pt-price {{ font-size: 14px; font-weight: 600; color: {c['foreground']}; }}
        .pt-date {{ display: block; margin-top: 2px; font-size: 12px; color: {c['muted_foreground']}; }}
    """

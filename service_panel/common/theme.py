from __future__ import annotations

import logging
from typing import Literal, cast, get_args

from nicegui import app, ui

ThemeMode = Literal["light", "dark"]


def get_palette(mode: ThemeMode) -> dict[str, str]:
    """Return palette tokens for the given mode."""
    if mode == "dark":
        return {
            "primary": "#322A98",
            "background": "#121212",
            "surface": "#1E1E1E",
            "text": "#E0E0E0",
            "muted": "#949A9F",
            # Card state colours
            "running_border": "rgb(50, 42, 152)",
            "stopped_border": "rgb(152, 48, 48)",
            "stopped_surface": "#2B2020",
            "positive": "#21BA45",
            "negative": "#DB2828",
            "warning": "#F2C037",
        }
    # light
    return {
        "primary": "#3B3BB8",
        "background": "#EBEBEB",
        "surface": "#FFFFFF",
        "text": "#1A1A1A",
        "muted": "#6B7075",
        "running_border": "rgb(50, 42, 152)",
        "stopped_border": "rgb(152, 48, 48)",
        "stopped_surface": "#F6E8E8",
        "positive": "#21BA45",
        "negative": "#DB2828",
        "warning": "#F2C037",
    }


def _inject_css_vars(p: dict[str, str]) -> None:
    ui.add_css(
        f"""
:root {{
  --panel-bg: {p["background"]};
  --panel-surface: {p["surface"]};
  --panel-text: {p["text"]};
  --panel-muted: {p["muted"]};
  --panel-running-border: {p["running_border"]};
  --panel-stopped-border: {p["stopped_border"]};
  --panel-stopped-surface: {p["stopped_surface"]};
}}

body, .q-page {{ background: var(--panel-bg); color: var(--panel-text); }}
"""
    )


def apply_theme(mode: ThemeMode) -> None:
    """Set Quasar colours and dark mode, then inject the CSS variables."""
    pal = get_palette(mode)
    ui.colors(
        primary=pal["primary"],
        positive=pal["positive"],
        negative=pal["negative"],
        warning=pal["warning"],
    )
    if mode == "dark":
        ui.dark_mode().enable()
    else:
        ui.dark_mode().disable()
    _inject_css_vars(pal)
    logging.debug("Applied theme: %s", mode)


def get_theme() -> ThemeMode:
    """Return the stored mode, dark by default."""
    mode = app.storage.general.get("theme_mode", "dark")
    if isinstance(mode, str) and mode in get_args(ThemeMode):
        return cast("ThemeMode", mode)
    return cast("ThemeMode", "dark")


def set_theme(mode: ThemeMode) -> ThemeMode:
    """Persist, set and apply theme mode."""
    app.storage.general["theme_mode"] = mode
    apply_theme(mode)
    return mode


def toggle_theme() -> ThemeMode:
    return set_theme("light" if get_theme() == "dark" else "dark")


def inject_layout_css() -> None:
    """Card grid, state borders and the notification overlay."""
    ui.add_css(
        """
.service-grid {
  display: grid;
  grid-template-columns: repeat(auto-fill, minmax(18rem, 1fr));
  gap: 1rem;
  width: 100%;
}

.service-card {
  background: var(--panel-surface);
  border-radius: 8px;
}

.service-card.running {
  border: 1px solid var(--panel-running-border);
  background: transparent;
}

.service-card.stopped {
  border: 1px solid var(--panel-stopped-border);
  background: var(--panel-stopped-surface);
}

.service-card .title { font-size: 1.1rem; font-weight: 500; }
.service-card .subtitle { font-size: 0.85rem; color: var(--panel-muted); }

/* Transient message overlay */
.popup-layer {
  position: fixed;
  bottom: 1.5rem;
  left: 50%;
  transform: translateX(-50%);
  z-index: 6000;
  pointer-events: none;
}

.popup {
  background: rgba(20, 20, 20, 0.92);
  color: #FFFFFF;
  border: 1px solid var(--panel-stopped-border);
  border-radius: 6px;
  padding: 0.6rem 1rem;
  max-width: 40rem;
}
"""
    )

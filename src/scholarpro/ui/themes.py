"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Slate background with blue/purple accents
SCHOLAR_NIGHT = Theme(
    name="scholar-night",
    primary="#60a5fa",      # Blue 400 - main accent
    secondary="#a78bfa",    # Violet 400 - secondary accent
    accent="#f472b6",       # Pink 400 - highlights
    foreground="#e5e7eb",   # Gray 200
    background="#111827",   # Gray 900
    success="#34d399",      # Emerald 400 - start/active
    warning="#fbbf24",      # Amber 400
    error="#f87171",        # Red 400 - errors, stop
    surface="#1f2937",      # Gray 800
    panel="#1f2937",
    dark=True,
    variables={
        "block-cursor-foreground": "#111827",
        "block-cursor-background": "#93c5fd",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#374151 30%",

        "input-cursor-background": "#e5e7eb",
        "input-cursor-foreground": "#111827",
        "input-selection-background": "#60a5fa 30%",

        "border": "#374151",
        "border-blurred": "#1f2937",

        "scrollbar": "#374151",
        "scrollbar-hover": "#4b5563",
        "scrollbar-active": "#60a5fa",
        "scrollbar-background": "#111827",
        "scrollbar-corner-color": "#111827",

        "footer-foreground": "#d1d5db",
        "footer-background": "#111827",
        "footer-key-foreground": "#a78bfa",
        "footer-key-background": "#1f2937",
        "footer-description-foreground": "#9ca3af",

        "text-muted": "#9ca3af",
        "text-disabled": "#4b5563",

        "link-color": "#60a5fa",
        "link-style": "underline",
        "link-color-hover": "#93c5fd",
        "link-style-hover": "bold",

        "button-foreground": "#e5e7eb",
        "button-color-foreground": "#111827",
        "button-focus-text-style": "bold reverse",
    },
)

"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Design Tokens
   ============================================ */
$panel-border: round $border;
$section-title: $secondary;

Screen {
    background: $background;
}

#tabs {
    height: 1fr;
}

TabPane {
    padding: 1 2;
}

/* ============================================
   Shared
   ============================================ */
.field-label {
    color: $text-muted;
    margin-bottom: 1;
}

.section-title {
    color: $section-title;
    text-style: bold;
    margin-top: 1;
}

.error-line {
    color: $error;
    text-style: bold;
    padding: 0 1;
    margin: 1 0;
    border-left: thick $error;
}

Button {
    margin-right: 1;
}

/* ============================================
   Exercise Solver
   ============================================ */
#solver-scroll {
    height: 1fr;
    scrollbar-gutter: stable;
}

#solver-prompt {
    height: 8;
    border: $panel-border;

    &:focus {
        border: round $primary;
    }
}

#image-row {
    height: auto;
    margin-top: 1;

    Input {
        width: 1fr;
    }
}

#image-status {
    color: $success;
    padding: 0 1;
}

#solver-actions {
    height: auto;
    margin-top: 1;
    align: left middle;

    Checkbox {
        margin-right: 2;
    }
}

#solver-result {
    height: auto;
    margin-top: 1;
    padding: 0 1;
    border: round $primary 60%;
    background: $surface;

    Markdown {
        margin: 0;
        padding: 0;
    }
}

#toggle-audio {
    margin: 1 0;
}

#chart {
    height: auto;
    margin-top: 1;
    padding: 0 1;
    border: round $accent 60%;
    border-title-color: $accent;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

/* ============================================
   Live Conversation
   ============================================ */
#live-controls {
    height: auto;
    align: center middle;
    margin-bottom: 1;
}

#transcript {
    height: 1fr;
    border: $panel-border;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;
}

.transcript-placeholder {
    width: 100%;
    content-align: center middle;
    color: $text-muted;
    text-style: italic;
    margin-top: 2;
}

.transcript-entry {
    width: 100%;
    height: auto;
    padding: 0 1;
}

.user-entry {
    background: $primary 25%;
    margin: 0 0 1 8;
    text-align: right;
}

.model-entry {
    background: $secondary 20%;
    margin: 0 8 1 0;
}

/* ============================================
   Web Search
   ============================================ */
#search-bar {
    height: auto;
    margin-bottom: 1;

    Input {
        width: 1fr;
    }
}

#search-result {
    height: 1fr;
    padding: 0 1;
    border: $panel-border;
    scrollbar-gutter: stable;
}

#sources {
    margin-top: 1;
    padding-top: 1;
    border-top: solid $border;
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    scrollbar-gutter: stable;

    &:focus {
        border: round $warning;
    }
}
"""

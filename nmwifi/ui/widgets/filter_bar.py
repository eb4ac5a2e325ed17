"""Filter bar widget for narrowing the network list by SSID."""

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Input, Static

from nmwifi.core.i18n import t


class FilterBar(Horizontal):
    """Text filter shown while filtering, or a one-line summary of the committed filter."""

    class FilterChanged(Message):
        """Message sent on every edit of the filter text."""
        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    class FilterSubmitted(Message):
        """Message sent when Enter commits the filter."""

    def __init__(self, **kwargs):
        super().__init__(id="filter-bar", **kwargs)

    def compose(self) -> ComposeResult:
        yield Input(placeholder=t("filter_placeholder"), id="filter-input")
        yield Static("", id="filter-summary")

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.post_message(self.FilterChanged(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.post_message(self.FilterSubmitted())

    def show_filter(self, filtering: bool, draft: str, query: str) -> None:
        """Sync with the session: editable input while filtering, summary otherwise."""
        field = self.query_one("#filter-input", Input)
        summary = self.query_one("#filter-summary", Static)

        field.display = filtering
        if filtering:
            if field.value != draft:
                field.value = draft
            if not field.has_focus:
                field.focus()
        summary.display = not filtering and bool(query)
        summary.update(f"[#ffaa00]{t('filter_active', query=escape(query))}[/]")
        self.display = filtering or bool(query)

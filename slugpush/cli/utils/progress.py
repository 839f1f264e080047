# slugpush/cli/utils/progress.py
"""Progress display: renders pipeline events as the push log"""

from typing import Optional

from rich.console import Console

from ...core.event_bus import EventBus
from ...constants import (
    MSG_WORKSPACE_FILES,
    MSG_UPLOADS_START,
    MSG_UPLOADS_END,
    MSG_RELEASE_START,
)
from ...models import Event, EventType
from ...utils.formatting import pluralize


class ProgressReporter:
    """Event bus subscriber printing one log line per event

    Build output is printed verbatim; release-end only records the version,
    the command prints the final summary once the web URL is known.
    """

    def __init__(self, console: Optional[Console] = None, show_build_output: bool = True):
        self.console = console or Console()
        self.show_build_output = show_build_output
        self.release_version: Optional[str] = None
        self.errors = []

    def attach(self, bus: EventBus) -> 'ProgressReporter':
        """Subscribe to every event kind of bus"""
        bus.subscribe(EventType.DIFF_START, self.on_diff_start)
        bus.subscribe(EventType.UPLOADS_START, self.on_uploads_start)
        bus.subscribe(EventType.UPLOADS_END, self.on_uploads_end)
        bus.subscribe(EventType.BUILD_OUTPUT_LINE, self.on_build_output)
        bus.subscribe(EventType.RELEASE_START, self.on_release_start)
        bus.subscribe(EventType.RELEASE_END, self.on_release_end)
        bus.subscribe(EventType.DEPLOY_ERROR, self.on_error)
        return self

    def on_diff_start(self, event: Event) -> None:
        self.console.print(MSG_WORKSPACE_FILES.format(files=pluralize(event.payload, "file")))

    def on_uploads_start(self, event: Event) -> None:
        self.console.print(MSG_UPLOADS_START.format(files=pluralize(event.payload, "new file")))

    def on_uploads_end(self, event: Event) -> None:
        self.console.print(MSG_UPLOADS_END)

    def on_build_output(self, event: Event) -> None:
        if self.show_build_output:
            self.console.print(event.payload, markup=False, highlight=False)

    def on_release_start(self, event: Event) -> None:
        self.console.print(MSG_RELEASE_START.format(app=event.payload))

    def on_release_end(self, event: Event) -> None:
        self.release_version = event.payload

    def on_error(self, event: Event) -> None:
        self.errors.append(event.payload)
        self.console.print(f"[red]{event.payload}[/red]", highlight=False)

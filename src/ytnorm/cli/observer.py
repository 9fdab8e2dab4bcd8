"""Console rendering of pipeline events.

:class:`ConsoleObserver` turns the :class:`~ytnorm.core.models.PipelineEvent`
stream into short status lines.  The external tools print their own
progress to the same terminal, so nothing here redraws in place.
"""

from __future__ import annotations

from ytnorm.cli.console import console
from ytnorm.core.models import EventType, PipelineEvent, Stage


_STAGE_LABELS: dict[Stage, str] = {
    Stage.PLANNING: "Preparing output directory",
    Stage.DOWNLOADING: "Downloading",
    Stage.TRANSCODING: "Re-encoding to a compatible MP4",
    Stage.EXTRACTING: "Extracting MP3 audio",
    Stage.CLEANUP: "Cleaning up",
}


def stage_label(stage: Stage | None) -> str:
    """Human-readable label for *stage*."""
    if stage is None:
        return "Pipeline"
    return _STAGE_LABELS[stage]


class ConsoleObserver:
    """Pipeline observer that prints through the shared console proxy.

    Every event is also kept in :attr:`events`, in arrival order.
    """

    def __init__(self) -> None:
        self.events: list[PipelineEvent] = []

    def notify(self, event: PipelineEvent) -> None:
        self.events.append(event)
        label = stage_label(event.stage)

        if event.type is EventType.STAGE_STARTED:
            console.print(f"\n[bold]{label}…[/bold]")
        elif event.type is EventType.STAGE_SUCCEEDED:
            if event.stage is Stage.PLANNING and event.path is not None:
                console.print(f"[dim]Output directory:[/dim] {event.path}")
        elif event.type is EventType.STAGE_FAILED:
            console.print(f"[bold red]{label} failed.[/bold red] {event.detail}")
        elif event.type is EventType.ARTIFACT_REMOVED:
            console.print(f"[dim]Removed intermediate file[/dim] {event.path}")
        elif event.type is EventType.PIPELINE_COMPLETED:
            console.print(f"\n[bold green]Done.[/bold green]  {event.detail}")

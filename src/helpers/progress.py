"""Shared progress bar utilities for Rich console displays."""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)


def _stderr_console(console: Console | None) -> Console:
    # stdout may be carrying CSV rows
    return console if console is not None else Console(stderr=True)


def create_standard_progress(
    console: Console | None = None, *, expand: bool = False
) -> Progress:
    """Create a standard progress bar with time remaining estimation.

    Use this for processes with a known total where time estimation is valuable.

    Args:
        console: Rich console instance (defaults to a stderr console)
        expand: Whether to expand the progress bar to full width

    Returns:
        Configured Progress instance with:
        - Spinner
        - Task description
        - Progress bar
        - M of N counter
        - Time elapsed
        - Time remaining

    Example:
        ```python
        from src.helpers.progress import create_standard_progress

        progress = create_standard_progress()

        with progress:
            task_id = progress.add_task("Fetching prices", total=len(rewards))
            # ... process items ...
            progress.update(task_id, advance=1)
        ```
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        TextColumn("•"),
        TimeRemainingColumn(),
        console=_stderr_console(console),
        expand=expand,
    )


def create_simple_progress(
    console: Console | None = None, *, expand: bool = False
) -> Progress:
    """Create a simple progress bar without time remaining estimation.

    Use this for processes where the total is uncertain, such as paging
    through an API until it runs dry.

    Args:
        console: Rich console instance (defaults to a stderr console)
        expand: Whether to expand the progress bar to full width

    Returns:
        Configured Progress instance with:
        - Spinner
        - Task description
        - Progress bar
        - M of N counter
        - Time elapsed (no time remaining)
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        console=_stderr_console(console),
        expand=expand,
    )


@contextmanager
def track_progress(
    description: str,
    total: int | None,
    console: Console | None = None,
    *,
    show_time_remaining: bool = True,
) -> Iterator[tuple[Progress, TaskID]]:
    """Context manager for tracking progress with automatic cleanup.

    Args:
        description: Task description to display
        total: Total number of items to process, None when unknown
        console: Rich console instance (optional)
        show_time_remaining: Whether to show time remaining estimate

    Yields:
        Tuple of (Progress instance, TaskID) for updating progress

    Example:
        ```python
        from src.helpers.progress import track_progress

        with track_progress("Fetching rewards", total=None) as (progress, task):
            for page in pages:
                progress.update(task, advance=1)
        ```
    """
    if show_time_remaining:
        progress = create_standard_progress(console)
    else:
        progress = create_simple_progress(console)

    with progress:
        task_id = progress.add_task(description, total=total)
        yield progress, task_id


def advance(
    tracker: tuple[Progress, TaskID] | None,
    steps: int = 1,
    *,
    total: int | None = None,
) -> None:
    """Advance an optional progress tracker.

    Fetch clients take ``progress=None`` when no bar is shown (verbose mode),
    so every update goes through here.

    Args:
        tracker: (Progress, TaskID) pair from track_progress, or None
        steps: Number of completed steps to add
        total: New total to set, if it became known
    """
    if tracker is None:
        return
    progress, task_id = tracker
    if total is not None:
        progress.update(task_id, total=total)
    progress.update(task_id, advance=steps)


__all__ = [
    "TaskID",
    "advance",
    "create_simple_progress",
    "create_standard_progress",
    "track_progress",
]

from __future__ import annotations

from typing import Optional, Sized

from .models import Build, BuildEvent, BuildFinished, BuildFixed


def should_notify_on_finish(build: Build) -> bool:
    return build.failed


def should_notify_on_fix(build: Build, previous_build: Optional[Build]) -> bool:
    # The caller has already detected the failing -> passing transition.
    return True


def should_notify(event: BuildEvent) -> bool:
    if isinstance(event, BuildFinished):
        return should_notify_on_finish(event.build)
    if isinstance(event, BuildFixed):
        return should_notify_on_fix(event.build, event.previous_build)
    raise TypeError(f"Unsupported build event: {type(event).__name__}")


def has_recipients(recipients: Sized) -> bool:
    return len(recipients) > 0

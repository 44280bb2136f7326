from __future__ import annotations

import pytest

from build_notifier.models import Build, BuildFinished, BuildFixed, Project
from build_notifier.policy import has_recipients, should_notify, should_notify_on_finish, should_notify_on_fix
from build_notifier.recipients import RecipientList

PROJECT = Project(name="myproj")


def test_only_failed_builds_notify_on_finish():
    assert should_notify_on_finish(Build(PROJECT, 1, failed=True))
    assert not should_notify_on_finish(Build(PROJECT, 1, failed=False))


def test_fixed_builds_always_notify():
    assert should_notify_on_fix(Build(PROJECT, 2), Build(PROJECT, 1, failed=True))
    assert should_notify_on_fix(Build(PROJECT, 2), None)


def test_should_notify_dispatches_on_event_type():
    assert should_notify(BuildFinished(Build(PROJECT, 1, failed=True)))
    assert not should_notify(BuildFinished(Build(PROJECT, 1)))
    assert should_notify(BuildFixed(Build(PROJECT, 2)))
    with pytest.raises(TypeError):
        should_notify("build_finished")  # type: ignore[arg-type]


def test_has_recipients():
    assert not has_recipients(RecipientList())
    assert has_recipients(RecipientList(["a@x.com"]))

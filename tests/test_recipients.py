from __future__ import annotations

import pytest

from build_notifier.recipients import RecipientList


def test_keeps_order_and_duplicates():
    recipients = RecipientList(["b@x.com", "a@x.com"])
    recipients.add("b@x.com")
    assert list(recipients) == ["b@x.com", "a@x.com", "b@x.com"]
    assert len(recipients) == 3


def test_remove_drops_first_occurrence():
    recipients = RecipientList(["a@x.com", "b@x.com", "a@x.com"])
    recipients.remove("a@x.com")
    assert recipients.snapshot() == ["b@x.com", "a@x.com"]
    with pytest.raises(ValueError):
        recipients.remove("missing@x.com")


def test_replace_and_clear():
    recipients = RecipientList(["a@x.com"])
    recipients.replace(("c@x.com", "d@x.com"))
    assert recipients.snapshot() == ["c@x.com", "d@x.com"]
    recipients.clear()
    assert not recipients


def test_snapshot_is_a_copy():
    recipients = RecipientList(["a@x.com"])
    snapshot = recipients.snapshot()
    snapshot.append("b@x.com")
    assert len(recipients) == 1

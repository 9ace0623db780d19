from __future__ import annotations

import random

from sysviz.client.presence import COLORS, PresenceTracker


def test_color_is_assigned_once_and_kept() -> None:
    tracker = PresenceTracker(rng=random.Random(7))
    first = tracker.upsert("s1", "Ann", {"x": 1, "y": 1})
    color = first.color
    assert color in COLORS

    for i in range(20):
        tracker.upsert("s1", "Ann", {"x": i, "y": i})

    user = tracker.get("s1")
    assert user.color == color
    assert user.position == {"x": 19, "y": 19}
    assert len(tracker) == 1


def test_name_updates_on_upsert() -> None:
    tracker = PresenceTracker()
    tracker.upsert("s1", "Ann", {"x": 0, "y": 0})
    tracker.upsert("s1", "Annie", {"x": 0, "y": 0})
    assert tracker.get("s1").name == "Annie"


def test_remove_and_unknown_remove() -> None:
    tracker = PresenceTracker()
    tracker.upsert("s1", "Ann", {"x": 0, "y": 0})
    tracker.upsert("s2", "Bob", {"x": 0, "y": 0})

    assert tracker.remove("s1") is True
    assert "s1" not in tracker
    assert tracker.remove("s1") is False
    assert [user.id for user in tracker.users] == ["s2"]


def test_to_dict_shape() -> None:
    tracker = PresenceTracker(rng=random.Random(1))
    user = tracker.upsert("s9", "Zed", {"x": 3, "y": 4})
    assert user.to_dict() == {"id": "s9", "name": "Zed", "color": user.color, "position": {"x": 3, "y": 4}}

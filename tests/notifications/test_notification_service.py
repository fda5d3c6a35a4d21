from __future__ import annotations

from datetime import datetime

import pytest

from license_tracker.core.enums import NotificationType
from license_tracker.core.exceptions import NotFoundError
from license_tracker.notifications.service import NotificationService


def test_inbox_splits_unread_and_read_newest_first(notifications_repo):
    svc = NotificationService(notifications_repo)
    old = svc.notify(user_id=2, message="old", now=datetime(2026, 1, 1))
    new = svc.notify(user_id=2, message="new", now=datetime(2026, 2, 1))
    middle = svc.notify(user_id=2, message="middle", now=datetime(2026, 1, 15))
    svc.notify(user_id=1, message="someone else", now=datetime(2026, 2, 2))
    svc.mark_as_read(user_id=2, notification_id=middle)

    inbox = svc.list_for_user(user_id=2)

    assert [n.notification_id for n in inbox.unread] == [new, old]
    assert [n.notification_id for n in inbox.read] == [middle]
    assert inbox.total == 3
    assert svc.unread_count(user_id=2) == 2


def test_mark_as_read_rejects_foreign_notification(notifications_repo):
    svc = NotificationService(notifications_repo)
    nid = svc.notify(user_id=1, message="yours", type=NotificationType.SUCCESS, now=datetime(2026, 1, 1))

    with pytest.raises(NotFoundError):
        svc.mark_as_read(user_id=2, notification_id=nid)
    with pytest.raises(NotFoundError):
        svc.mark_as_read(user_id=1, notification_id=999)

    assert notifications_repo.get_by_id(nid).read is False


def test_clear_all_only_touches_current_user(notifications_repo):
    svc = NotificationService(notifications_repo)
    svc.notify(user_id=1, message="a", now=datetime(2026, 1, 1))
    svc.notify(user_id=1, message="b", now=datetime(2026, 1, 2))
    keep = svc.notify(user_id=2, message="c", now=datetime(2026, 1, 3))

    assert svc.clear_all(user_id=1) == 2
    assert svc.list_for_user(user_id=1).total == 0
    assert [n.notification_id for n in svc.list_for_user(user_id=2).unread] == [keep]


def test_notify_many_creates_one_per_recipient(notifications_repo):
    svc = NotificationService(notifications_repo)

    ids = svc.notify_many(user_ids=[2, 4], message="hello", type=NotificationType.WARNING, now=datetime(2026, 1, 1))

    assert len(ids) == 2
    assert {n.user_id for n in notifications_repo.all()} == {2, 4}
    assert all(n.type == NotificationType.WARNING for n in notifications_repo.all())

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.exceptions import AccessError, NotificationNotFoundError
from app.models.notification import Notification
from app.notifications import dispatcher, service
from shared.constants import Role
from shared.events import NotificationEvent, NotificationType
from tests.factories import make_user


def _event(title: str = "Heads up") -> NotificationEvent:
    return NotificationEvent(type=NotificationType.SYSTEM, title=title, message="Something happened.")


@pytest.mark.asyncio
async def test_fan_out_reaches_active_admins_only(db_session) -> None:
    admins = [await make_user(db_session, Role.ADMIN) for _ in range(2)]
    retired = await make_user(db_session, Role.ADMIN, active=False)
    await make_user(db_session, Role.INSTRUCTOR)

    delivered = await dispatcher.dispatch_to_admins(db_session, _event())

    assert delivered == 2
    recipients = (await db_session.execute(select(Notification.recipient_id))).scalars().all()
    assert sorted(recipients) == sorted(a.id for a in admins)
    assert retired.id not in recipients


@pytest.mark.asyncio
async def test_failed_write_is_skipped_without_aborting(db_session, monkeypatch) -> None:
    broken, healthy = [await make_user(db_session, Role.ADMIN) for _ in range(2)]
    original_add = db_session.add

    def flaky_add(instance, *args, **kwargs):
        if isinstance(instance, Notification) and instance.recipient_id == broken.id:
            raise IntegrityError("INSERT INTO notifications", {}, Exception("boom"))
        return original_add(instance, *args, **kwargs)

    monkeypatch.setattr(db_session, "add", flaky_add)

    delivered = await dispatcher.dispatch_to_admins(db_session, _event())

    assert delivered == 1
    recipients = (await db_session.execute(select(Notification.recipient_id))).scalars().all()
    assert recipients == [healthy.id]


@pytest.mark.asyncio
async def test_list_is_newest_first_with_unread_count(db_session) -> None:
    user = await make_user(db_session)
    for title in ("one", "two", "three"):
        await service.create_notification(db_session, user.id, _event(title))

    items, unread = await service.list_notifications(db_session, user.id)

    assert unread == 3
    assert [n.title for n in items] == ["three", "two", "one"]


@pytest.mark.asyncio
async def test_mark_read_only_by_recipient(db_session) -> None:
    user = await make_user(db_session)
    other = await make_user(db_session)
    notification = await service.create_notification(db_session, user.id, _event())

    with pytest.raises(AccessError):
        await service.mark_read(db_session, notification.id, other.id)
    with pytest.raises(NotificationNotFoundError):
        await service.mark_read(db_session, uuid.uuid4(), user.id)

    read = await service.mark_read(db_session, notification.id, user.id)
    assert read.is_read is True
    _, unread = await service.list_notifications(db_session, user.id)
    assert unread == 0


@pytest.mark.asyncio
async def test_mark_all_read_touches_only_own_rows(db_session) -> None:
    user = await make_user(db_session)
    other = await make_user(db_session)
    for _ in range(3):
        await service.create_notification(db_session, user.id, _event())
    await service.create_notification(db_session, other.id, _event())

    assert await service.mark_all_read(db_session, user.id) == 3
    assert await service.mark_all_read(db_session, user.id) == 0
    _, other_unread = await service.list_notifications(db_session, other.id)
    assert other_unread == 1


@pytest.mark.asyncio
async def test_delete_is_soft_and_hides_the_row(db_session) -> None:
    user = await make_user(db_session)
    notification = await service.create_notification(db_session, user.id, _event())

    await service.delete_notification(db_session, notification.id, user.id)

    items, unread = await service.list_notifications(db_session, user.id)
    assert items == [] and unread == 0
    stored = await db_session.scalar(select(func.count()).select_from(Notification))
    assert stored == 1
    with pytest.raises(NotificationNotFoundError):
        await service.delete_notification(db_session, notification.id, user.id)

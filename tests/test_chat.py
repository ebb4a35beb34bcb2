import uuid

import pytest

from unishare.application.dtos.chat_dtos import SendMessageDto
from unishare.application.result import ErrorKind
from unishare.application.use_cases.chat_use_cases import (
    MAX_PAGE_SIZE,
    DeleteMessageUseCase,
    GetActiveUsersUseCase,
    GetRoomMessagesUseCase,
    GetUnreadCountUseCase,
    JoinRoomUseCase,
    MarkRoomReadUseCase,
    SendMessageUseCase,
)
from unishare.domain.entities.chat_message import DELETED_MESSAGE_TEXT, room_id_for
from unishare.domain.value_objects.entity_ids import MessageId


@pytest.fixture
async def pair(make_user):
    sam = await make_user(email="sam@uni.edu", full_name="Sam Student")
    ria = await make_user(email="ria@uni.edu", full_name="Ria Reader")
    return sam, ria


async def _say(uow, user, text, department="Computer Science", semester="3", **extra):
    result = await SendMessageUseCase(uow).execute(
        user.id, SendMessageDto(department=department, semester=semester, message=text, **extra)
    )
    assert result.ok
    return result.data


async def test_room_history_is_oldest_first(uow, pair):
    sam, ria = pair
    for text in ("first", "second", "third"):
        await _say(uow, sam, text)
    await _say(uow, ria, "elsewhere", semester="4")

    result = await GetRoomMessagesUseCase(uow).execute("Computer Science", "3")

    assert [m.message for m in result.data.messages] == ["first", "second", "third"]
    assert {m.room_id for m in result.data.messages} == {room_id_for("Computer Science", "3")}
    assert not result.data.has_more


async def test_history_limit_keeps_newest_and_reports_more(uow, pair):
    sam, _ = pair
    for text in ("one", "two", "three"):
        await _say(uow, sam, text)

    result = await GetRoomMessagesUseCase(uow).execute("Computer Science", "3", limit=2)

    assert [m.message for m in result.data.messages] == ["two", "three"]
    assert result.data.has_more


@pytest.mark.parametrize("limit", [0, MAX_PAGE_SIZE + 1])
async def test_history_limit_bounds(uow, limit):
    result = await GetRoomMessagesUseCase(uow).execute("Computer Science", "3", limit=limit)

    assert result.kind == ErrorKind.VALIDATION_ERROR


async def test_blank_message_is_refused(uow, pair):
    sam, _ = pair

    result = await SendMessageUseCase(uow).execute(
        sam.id, SendMessageDto(department="Computer Science", semester="3", message="   ")
    )

    assert result.kind == ErrorKind.VALIDATION_ERROR


async def test_reply_to_unknown_message_is_not_found(uow, pair):
    sam, _ = pair

    result = await SendMessageUseCase(uow).execute(
        sam.id, SendMessageDto(department="Computer Science", semester="3", message="re", reply_to=uuid.uuid4())
    )

    assert result.kind == ErrorKind.NOT_FOUND


async def test_reply_is_linked(uow, pair):
    sam, ria = pair
    original = await _say(uow, sam, "question?")

    reply = await _say(uow, ria, "answer", reply_to=original.id)

    assert reply.reply_to == original.id


async def test_only_sender_may_delete(uow, pair):
    sam, ria = pair
    sent = await _say(uow, sam, "oops")

    refused = await DeleteMessageUseCase(uow).execute(MessageId(sent.id), ria.id)
    deleted = await DeleteMessageUseCase(uow).execute(MessageId(sent.id), sam.id)

    assert refused.kind == ErrorKind.UNAUTHORIZED
    assert deleted.ok
    assert deleted.data.message.message == DELETED_MESSAGE_TEXT
    assert deleted.data.room_id == room_id_for("Computer Science", "3")
    history = await GetRoomMessagesUseCase(uow).execute("Computer Science", "3")
    assert history.data.count == 0


async def test_deleting_missing_message_is_not_found(uow, pair):
    sam, _ = pair

    result = await DeleteMessageUseCase(uow).execute(MessageId.generate(), sam.id)

    assert result.kind == ErrorKind.NOT_FOUND


async def test_unread_counts_messages_from_others_since_last_visit(uow, pair):
    sam, ria = pair
    await _say(uow, sam, "before anyone looked")
    await _say(uow, ria, "my own message")

    before_visit = await GetUnreadCountUseCase(uow).execute(ria.id, "Computer Science", "3")
    await MarkRoomReadUseCase(uow).execute(ria.id)
    after_visit = await GetUnreadCountUseCase(uow).execute(ria.id, "Computer Science", "3")
    await _say(uow, sam, "something new")
    later = await GetUnreadCountUseCase(uow).execute(ria.id, "Computer Science", "3")

    assert before_visit.data.unread_count == 1
    assert after_visit.data.unread_count == 0
    assert later.data.unread_count == 1


async def test_join_and_leave_update_active_users(uow, presence, clock, pair):
    sam, ria = pair
    join = JoinRoomUseCase(uow, presence, clock=clock)

    await join.execute(sam.id, "Computer Science", "3")
    joined = await join.execute(ria.id, "Computer Science", "3")
    await presence.leave(room_id_for("Computer Science", "3"), sam.id)
    remaining = await GetActiveUsersUseCase(uow, presence).execute("Computer Science", "3")

    assert [u.full_name for u in joined.data.users] == ["Ria Reader", "Sam Student"]
    assert joined.data.users[0].last_active == clock.now
    assert [u.full_name for u in remaining.data.users] == ["Ria Reader"]


async def test_presence_is_per_room(presence, pair):
    sam, _ = pair

    await presence.join("Computer Science_3", sam.id)

    assert await presence.members("Computer Science_4") == set()
    assert await presence.leave("Computer Science_3", sam.id) == set()
    assert await presence.members("Computer Science_3") == set()

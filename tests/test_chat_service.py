import asyncio
import json

import pytest
from bson import ObjectId

from socialnet.utils.errors import ConversationNotFound, UserNotFound, ValidationError


@pytest.mark.asyncio
async def test_first_message_creates_conversation_and_message(db, chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")

    message = await chat_service.send_message(a, b, "hi")

    assert message.text == "hi"
    assert message.sender_id == a
    convo = await db["conversations"].find_one({})
    assert convo["participants"] == [a, b]
    assert convo["last_message"] == {"text": "hi", "sender_id": a}
    assert str(convo["_id"]) == message.conversation_id


@pytest.mark.asyncio
async def test_history_ends_with_sent_message(chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")

    await chat_service.send_message(a, b, "first")
    await chat_service.send_message(b, a, "reply")

    history = await chat_service.get_history(a, b)
    assert history[-1].text == "reply"
    assert history[-1].sender_id == b


@pytest.mark.asyncio
async def test_history_is_chronological(chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")

    for text in ("t1", "t2", "t3"):
        await chat_service.send_message(a, b, text)

    history = await chat_service.get_history(b, a)
    assert [m.text for m in history] == ["t1", "t2", "t3"]


@pytest.mark.asyncio
async def test_two_sends_share_one_conversation(db, chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")

    await chat_service.send_message(a, b, "one")
    await chat_service.send_message(b, a, "two")

    assert await db["conversations"].count_documents({}) == 1
    assert await db["messages"].count_documents({}) == 2


@pytest.mark.asyncio
async def test_last_message_follows_latest_send(db, chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")

    await chat_service.send_message(a, b, "one")
    await chat_service.send_message(b, a, "two")

    convo = await db["conversations"].find_one({})
    assert convo["last_message"] == {"text": "two", "sender_id": b}


@pytest.mark.asyncio
async def test_history_without_conversation_is_not_found(chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")

    with pytest.raises(ConversationNotFound):
        await chat_service.get_history(a, b)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   "])
async def test_empty_text_is_rejected(db, chat_service, make_user, text):
    a = await make_user("Alice")
    b = await make_user("Bob")

    with pytest.raises(ValidationError):
        await chat_service.send_message(a, b, text)
    assert await db["conversations"].count_documents({}) == 0


@pytest.mark.asyncio
async def test_cannot_message_yourself(chat_service, make_user):
    a = await make_user("Alice")

    with pytest.raises(ValidationError):
        await chat_service.send_message(a, a, "hello me")


@pytest.mark.asyncio
async def test_malformed_receiver_is_rejected(chat_service, make_user):
    a = await make_user("Alice")

    with pytest.raises(ValidationError):
        await chat_service.send_message(a, "not-an-id", "hi")


@pytest.mark.asyncio
async def test_unknown_receiver_is_not_found(chat_service, make_user):
    a = await make_user("Alice")

    with pytest.raises(UserNotFound):
        await chat_service.send_message(a, str(ObjectId()), "hi")


@pytest.mark.asyncio
async def test_online_receiver_gets_new_message(chat_service, presence, make_user, fake_socket):
    a = await make_user("Alice")
    b = await make_user("Bob")
    ws = fake_socket()
    await presence.register(b, ws)
    ws.send_text.reset_mock()

    message = await chat_service.send_message(a, b, "ping")

    ws.send_text.assert_awaited_once()
    frame = json.loads(ws.send_text.await_args.args[0])
    assert frame["event"] == "newMessage"
    assert frame["data"]["id"] == message.id
    assert frame["data"]["text"] == "ping"


@pytest.mark.asyncio
async def test_sender_session_gets_no_push(chat_service, presence, make_user, fake_socket):
    a = await make_user("Alice")
    b = await make_user("Bob")
    ws = fake_socket()
    await presence.register(a, ws)
    ws.send_text.reset_mock()

    await chat_service.send_message(a, b, "ping")

    ws.send_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_conversations_shows_other_participant(chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")

    await chat_service.send_message(a, b, "hi")

    items, next_cursor = await chat_service.list_conversations(b)
    assert next_cursor is None
    assert len(items) == 1
    assert items[0].last_message.text == "hi"
    assert items[0].last_message.sender_id == a
    assert items[0].participant.id == a
    assert items[0].participant.full_name == "Alice"
    assert items[0].participant.profile_photo == "https://img.example.com/alice.png"


@pytest.mark.asyncio
async def test_list_conversations_most_recent_activity_first(chat_service, make_user):
    a = await make_user("Alice")
    b = await make_user("Bob")
    c = await make_user("Carol")

    # spaced out so last_message_at differs at millisecond precision
    await chat_service.send_message(a, b, "old conversation")
    await asyncio.sleep(0.01)
    await chat_service.send_message(a, c, "newer conversation")
    await asyncio.sleep(0.01)
    await chat_service.send_message(b, a, "old one comes back")

    items, _ = await chat_service.list_conversations(a)
    assert [i.participant.id for i in items] == [b, c]


@pytest.mark.asyncio
async def test_list_conversations_empty_for_new_user(chat_service, make_user):
    a = await make_user("Alice")

    items, next_cursor = await chat_service.list_conversations(a)
    assert items == []
    assert next_cursor is None

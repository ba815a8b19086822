import pytest

from chatflow.core.config import settings
from chatflow.core.errors import ConversationNotFoundError
from chatflow.models.conversation import Conversation
from chatflow.models.message import MessageRole
from chatflow.services.conversation_service import ConversationService, derive_title


@pytest.fixture
def service(db):
    return ConversationService(db)


def test_derive_title_short_text_kept():
    assert derive_title("Hi") == "Hi"


def test_derive_title_truncates_with_ellipsis():
    assert derive_title("abcdefghij", max_length=4) == "abcd..."


def test_derive_title_collapses_whitespace():
    assert derive_title("  hello\n   world ") == "hello world"


def test_create_conversation_uses_placeholder_title(service, user):
    conv = service.create_conversation(user.id)
    assert conv.title == settings.DEFAULT_CONVERSATION_TITLE
    assert conv.user_id == user.id
    assert conv.created_at is not None and conv.updated_at is not None


def test_first_user_message_sets_title_once(service, user):
    conv = service.create_conversation(user.id)

    service.send_message(conv.id, user.id, "Hi", MessageRole.USER)
    assert service.get_owned(conv.id, user.id).title == "Hi"

    service.send_message(conv.id, user.id, "Something else entirely", MessageRole.USER)
    assert service.get_owned(conv.id, user.id).title == "Hi"


def test_assistant_message_does_not_set_title(service, user):
    conv = service.create_conversation(user.id)
    service.send_message(conv.id, user.id, "Greetings from the model", MessageRole.ASSISTANT)
    assert service.get_owned(conv.id, user.id).title == settings.DEFAULT_CONVERSATION_TITLE

    service.send_message(conv.id, user.id, "First question", MessageRole.USER)
    assert service.get_owned(conv.id, user.id).title == "First question"


def test_title_length_is_configurable(db, user):
    service = ConversationService(db, title_max_length=5)
    conv = service.create_conversation(user.id)
    service.send_message(conv.id, user.id, "Tell me about tides", MessageRole.USER)
    assert service.get_owned(conv.id, user.id).title == "Tell ..."


def test_send_message_bumps_updated_at(service, user):
    conv = service.create_conversation(user.id)
    before = conv.updated_at

    msg = service.send_message(conv.id, user.id, "ping", MessageRole.USER)

    refreshed = service.get_owned(conv.id, user.id)
    assert refreshed.updated_at >= before
    assert refreshed.updated_at == msg.created_at


def test_messages_returned_oldest_first(service, user):
    conv = service.create_conversation(user.id)
    for i in range(5):
        role = MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT
        service.send_message(conv.id, user.id, f"m{i}", role)

    _, messages = service.get_conversation(conv.id, user.id)
    assert [m.content for m in messages] == ["m0", "m1", "m2", "m3", "m4"]
    times = [m.created_at for m in messages]
    assert times == sorted(times)


def test_list_conversations_newest_updated_first(service, user):
    first = service.create_conversation(user.id, title="first")
    second = service.create_conversation(user.id, title="second")
    assert [c.id for c in service.list_conversations(user.id)] == [second.id, first.id]

    service.send_message(first.id, user.id, "bump", MessageRole.USER)
    assert [c.id for c in service.list_conversations(user.id)] == [first.id, second.id]


def test_ownership_enforced_everywhere(service, user, other_user):
    conv = service.create_conversation(user.id)

    assert service.list_conversations(other_user.id) == []
    with pytest.raises(ConversationNotFoundError):
        service.get_conversation(conv.id, other_user.id)
    with pytest.raises(ConversationNotFoundError):
        service.send_message(conv.id, other_user.id, "intrusion", MessageRole.USER)
    with pytest.raises(ConversationNotFoundError):
        service.update_conversation_title(conv.id, other_user.id, "hijacked")

    _, messages = service.get_conversation(conv.id, user.id)
    assert messages == []


def test_missing_conversation_not_found(service, user):
    with pytest.raises(ConversationNotFoundError):
        service.get_conversation(9999, user.id)


def test_update_conversation_title(service, user):
    conv = service.create_conversation(user.id)
    updated = service.update_conversation_title(conv.id, user.id, "Renamed")
    assert updated.title == "Renamed"


def test_conversation_row_defaults_to_configured_title(db, user, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_CONVERSATION_TITLE", "Untitled chat")
    conv = Conversation(user_id=user.id)
    db.add(conv)
    db.commit()
    db.refresh(conv)
    assert conv.title == "Untitled chat"

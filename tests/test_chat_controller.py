import unittest

from fakes import FakeDirectory, FakeTransport, message_payload

from academy_client.controllers.chat import ChatController
from academy_client.controllers.conversations import ConversationsController
from academy_client.repositories.local_store import MemoryLocalStore
from academy_client.repositories.session_repository import SessionRepository
from academy_client.schemas.message import Message
from academy_client.services.chat_service import ChatService
from academy_client.utils.errors import PreconditionError
from academy_client.utils.resource import IDLE, Error, Success


THREAD = "chat/u1/u2"


class ChatControllerTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.transport = FakeTransport()
        service = ChatService(self.transport)
        self.conversations = ConversationsController(service, FakeDirectory(), SessionRepository(MemoryLocalStore()))
        self.conversations.current_user_id = "u1"
        self.chat = ChatController(service, "u1", "u2", self.conversations)

    async def test_requires_a_signed_in_user(self):
        with self.assertRaises(PreconditionError):
            ChatController(ChatService(self.transport), None, "u2")

    async def test_thread_is_deduplicated_and_chronological(self):
        self.transport.reply(
            "GET",
            THREAD,
            [
                message_payload("m2", "u1", "u2", "second", "2024-01-01T10:01:00.000Z"),
                message_payload("m1", "u2", "u1", "first", "2024-01-01T10:00:00.000Z"),
                message_payload("m2", "u1", "u2", "second", "2024-01-01T10:01:00.000Z"),
            ],
        )
        messages = await self.chat.load_thread()
        self.assertEqual([m.id for m in messages], ["m1", "m2"])
        self.assertEqual(self.chat.messages.get_state(), Success(messages))

    async def test_send_swaps_the_local_copy_for_the_server_one(self):
        self.transport.reply("POST", "chat/send", message_payload("srv1", "u1", "u2", "hello", "2030-01-01T00:00:00.000Z", True))

        confirmed = await self.chat.send_message("  hello ")

        self.assertEqual(confirmed.id, "srv1")
        self.assertEqual([m.id for m in self.chat.messages.current_value()], ["srv1"])
        self.assertEqual(self.chat.send_state.get_state(), Success(confirmed))
        method, path, body = self.transport.calls[0]
        self.assertEqual((method, path), ("POST", "chat/send"))
        self.assertEqual(body, {"senderId": "u1", "receiverId": "u2", "message": "hello"})
        rows = self.conversations.conversations.current_value()
        self.assertEqual(rows[0].other_user_id, "u2")
        self.assertEqual(rows[0].last_message_text, "hello")
        self.assertEqual(rows[0].unread_count, 0)

    async def test_failed_send_keeps_the_optimistic_message(self):
        self.transport.fail("POST", "chat/send", 400, "receiver not found")

        result = await self.chat.send_message("hello")

        self.assertIsNone(result)
        self.assertEqual(self.chat.send_state.get_state(), Error("HTTP 400: receiver not found"))
        thread = self.chat.messages.current_value()
        self.assertEqual(len(thread), 1)
        self.assertTrue(thread[0].is_local)
        self.assertEqual(self.conversations.conversations.current_value()[0].last_message_text, "hello")

        self.chat.clear_error()
        self.assertEqual(self.chat.send_state.get_state(), IDLE)

    async def test_blank_text_sends_nothing(self):
        self.assertIsNone(await self.chat.send_message("   "))
        self.assertEqual(self.transport.calls, [])
        self.assertEqual(self.chat.messages.get_state(), IDLE)

    async def test_mark_read_clears_the_conversation(self):
        incoming = Message.model_validate(message_payload("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z"))
        self.chat.receive_message(incoming)
        self.assertEqual(self.conversations.conversations.current_value()[0].unread_count, 1)

        self.transport.reply("PATCH", "chat/read/m1", message_payload("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z", True))
        updated = await self.chat.mark_message_read("m1")

        self.assertTrue(updated.is_read)
        self.assertTrue(self.chat.messages.current_value()[0].is_read)
        self.assertEqual(self.conversations.conversations.current_value()[0].unread_count, 0)

    async def test_messages_for_other_threads_are_ignored(self):
        stray = Message.model_validate(message_payload("m5", "u3", "u1", "psst", "2024-01-01T10:00:00.000Z"))
        self.chat.receive_message(stray)
        self.assertEqual(self.chat.messages.get_state(), IDLE)


if __name__ == "__main__":
    unittest.main()

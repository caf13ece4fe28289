import unittest

from fakes import conversation_payload, message_payload

from academy_client.schemas.conversation import Conversation
from academy_client.schemas.message import Message
from academy_client.services.reconciler import (
    apply_display_names,
    apply_messages,
    dedupe_by_key,
    mark_conversation_read,
    merge_by_key,
    other_user_id,
    remove_by_key,
    replace_by_key,
    sort_conversations,
    upsert_by_key,
    upsert_conversation,
)
from academy_client.utils.errors import PreconditionError


def message(message_id, sender, receiver, text, created_at, is_read=False):
    return Message.model_validate(message_payload(message_id, sender, receiver, text, created_at, is_read))


def conversation(other, last=None, unread=0, name=None):
    last_payload = last.to_wire() if last is not None else None
    return Conversation.model_validate(conversation_payload(other, last_payload, unread, name))


class UpsertConversationTests(unittest.TestCase):
    def test_new_incoming_message_creates_unread_conversation(self):
        hi = message("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z")
        result = upsert_conversation([], hi, "u1")
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].other_user_id, "u2")
        self.assertEqual(result[0].unread_count, 1)
        self.assertEqual(result[0].last_message, hi)

    def test_own_reply_updates_last_message_but_not_unread(self):
        hi = message("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z")
        hey = message("m2", "u1", "u2", "hey", "2024-01-01T10:01:00.000Z", is_read=True)
        result = upsert_conversation(upsert_conversation([], hi, "u1"), hey, "u1")
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].last_message.text, "hey")
        self.assertEqual(result[0].unread_count, 1)

    def test_read_incoming_message_does_not_count(self):
        seen = message("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z", is_read=True)
        self.assertEqual(upsert_conversation([], seen, "u1")[0].unread_count, 0)

    def test_replaying_the_last_message_is_idempotent(self):
        hi = message("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z")
        once = upsert_conversation([], hi, "u1")
        twice = upsert_conversation(once, hi, "u1")
        self.assertEqual(once, twice)

    def test_redelivered_unread_message_counts_once(self):
        hi = message("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z")
        result = upsert_conversation([conversation("u2", unread=2)], hi, "u1")
        for _ in range(3):
            result = upsert_conversation(result, hi, "u1")
        self.assertEqual(result[0].unread_count, 3)

    def test_unread_never_decreases_through_upserts(self):
        result = [conversation("u2", unread=4)]
        for index, sender in enumerate(["u2", "u1", "u2", "u1"]):
            receiver = "u1" if sender == "u2" else "u2"
            before = result[0].unread_count
            msg = message(f"m{index}", sender, receiver, "x", f"2024-01-01T10:0{index}:00.000Z")
            result = upsert_conversation(result, msg, "u1")
            self.assertGreaterEqual(result[0].unread_count, before)
        self.assertEqual(result[0].unread_count, 6)

    def test_result_is_sorted_newest_first(self):
        old = conversation("u2", message("a", "u2", "u1", "old", "2024-01-01T09:00:00.000Z"))
        newer = conversation("u3", message("b", "u3", "u1", "newer", "2024-01-01T11:00:00.000Z"))
        update = message("c", "u2", "u1", "latest", "2024-01-01T12:00:00.000Z")
        result = upsert_conversation([newer, old], update, "u1")
        self.assertEqual([c.other_user_id for c in result], ["u2", "u3"])

    def test_conversation_without_messages_sorts_last(self):
        empty = conversation("u4")
        active = conversation("u2", message("a", "u2", "u1", "hi", "2024-01-01T09:00:00.000Z"))
        self.assertEqual([c.other_user_id for c in sort_conversations([empty, active])], ["u2", "u4"])

    def test_equal_timestamps_keep_their_order(self):
        stamp = "2024-01-01T09:00:00.000Z"
        first = conversation("u2", message("a", "u2", "u1", "x", stamp))
        second = conversation("u3", message("b", "u3", "u1", "y", stamp))
        self.assertEqual([c.other_user_id for c in sort_conversations([first, second])], ["u2", "u3"])

    def test_input_list_is_not_mutated(self):
        original = [conversation("u2", unread=1)]
        snapshot = list(original)
        upsert_conversation(original, message("m", "u2", "u1", "x", "2024-01-01T10:00:00.000Z"), "u1")
        self.assertEqual(original, snapshot)

    def test_missing_local_user_is_a_precondition_error(self):
        hi = message("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z")
        for missing in (None, ""):
            with self.subTest(local_user_id=missing):
                with self.assertRaises(PreconditionError):
                    upsert_conversation([], hi, missing)

    def test_other_user_is_whoever_is_not_local(self):
        outgoing = message("m1", "u1", "u2", "x", "2024-01-01T10:00:00.000Z")
        self.assertEqual(other_user_id(outgoing, "u1"), "u2")
        self.assertEqual(other_user_id(outgoing, "u2"), "u1")

    def test_apply_messages_folds_in_order(self):
        batch = [
            message("m1", "u2", "u1", "a", "2024-01-01T10:00:00.000Z"),
            message("m2", "u3", "u1", "b", "2024-01-01T10:05:00.000Z"),
            message("m3", "u2", "u1", "c", "2024-01-01T10:10:00.000Z"),
        ]
        result = apply_messages([], batch, "u1")
        self.assertEqual([(c.other_user_id, c.unread_count) for c in result], [("u2", 2), ("u3", 1)])


class ReadAndNamesTests(unittest.TestCase):
    def test_mark_read_clears_only_the_target(self):
        hi = message("m1", "u2", "u1", "hi", "2024-01-01T10:00:00.000Z")
        rows = [conversation("u2", hi, unread=3), conversation("u3", unread=2)]
        result = mark_conversation_read(rows, "u2")
        self.assertEqual(result[0].unread_count, 0)
        self.assertTrue(result[0].last_message.is_read)
        self.assertEqual(result[1].unread_count, 2)

    def test_display_names_fill_by_other_user(self):
        rows = [conversation("u2"), conversation("u3", name="Kept")]
        result = apply_display_names(rows, {"u2": "Ada Lovelace", "u9": "Nobody"})
        self.assertEqual([c.display_name for c in result], ["Ada Lovelace", "Kept"])

    def test_unnamed_conversation_displays_the_id(self):
        self.assertEqual(conversation("u2").display_name, "u2")


class KeyedCollectionTests(unittest.TestCase):
    def key(self, item):
        return item["id"]

    def test_upsert_replaces_in_place_or_appends(self):
        items = [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}]
        replaced = upsert_by_key(items, {"id": 1, "v": "z"}, self.key)
        self.assertEqual(replaced, [{"id": 1, "v": "z"}, {"id": 2, "v": "b"}])
        appended = upsert_by_key(items, {"id": 3, "v": "c"}, self.key)
        self.assertEqual([i["id"] for i in appended], [1, 2, 3])
        self.assertEqual(len(items), 2)

    def test_upsert_can_sort(self):
        items = [{"id": 1, "v": 5}]
        result = upsert_by_key(items, {"id": 2, "v": 9}, self.key, sort_key=lambda i: i["v"], reverse=True)
        self.assertEqual([i["id"] for i in result], [2, 1])

    def test_merge_and_dedupe(self):
        merged = merge_by_key([{"id": 1, "v": "a"}], [{"id": 2, "v": "b"}, {"id": 1, "v": "c"}], self.key)
        self.assertEqual(merged, [{"id": 1, "v": "c"}, {"id": 2, "v": "b"}])
        deduped = dedupe_by_key([{"id": 1, "v": "a"}, {"id": 1, "v": "b"}], self.key)
        self.assertEqual(deduped, [{"id": 1, "v": "b"}])

    def test_remove(self):
        self.assertEqual(remove_by_key([{"id": 1}, {"id": 2}], 1, self.key), [{"id": 2}])

    def test_replace_swaps_and_drops_duplicates(self):
        items = [{"id": "local-1"}, {"id": "m2"}, {"id": "srv"}]
        result = replace_by_key(items, "local-1", {"id": "srv", "v": 1}, self.key)
        self.assertEqual(result, [{"id": "srv", "v": 1}, {"id": "m2"}])

    def test_replace_appends_when_target_missing(self):
        self.assertEqual(replace_by_key([{"id": "a"}], "gone", {"id": "b"}, self.key), [{"id": "a"}, {"id": "b"}])


if __name__ == "__main__":
    unittest.main()

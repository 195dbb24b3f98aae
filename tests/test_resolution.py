import unittest

from lostfound_tool.engine.constants import TITLE_RESOLVED
from lostfound_tool.engine.core.resolution import parse_resolution_type, resolve_item
from lostfound_tool.engine.exceptions import (
    AlreadyResolvedError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    UnauthenticatedError,
)
from lostfound_tool.engine.models import ResolutionType

from tests.fakes import InMemoryStore, RecordingNotifier, make_item


class ResolveItemValidationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.notifier = RecordingNotifier()
        self.store.add(make_item("lost-1", "U1", "lost"))

    def test_requires_caller(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            resolve_item(self.store, self.notifier, None, "lost-1", "matched")

    def test_requires_item_id_and_type(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            resolve_item(self.store, self.notifier, "U1", None, "matched")
        with self.assertRaises(InvalidArgumentError):
            resolve_item(self.store, self.notifier, "U1", "lost-1", None)

    def test_rejects_unknown_type_and_self_match(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            resolve_item(self.store, self.notifier, "U1", "lost-1", "returned")
        with self.assertRaises(InvalidArgumentError):
            resolve_item(self.store, self.notifier, "U1", "lost-1", "matched", match_id="lost-1")

    def test_unknown_item(self) -> None:
        with self.assertRaises(NotFoundError):
            resolve_item(self.store, self.notifier, "U1", "nope", "other")

    def test_non_owner_denied(self) -> None:
        with self.assertRaises(PermissionDeniedError):
            resolve_item(self.store, self.notifier, "U2", "lost-1", "other")
        self.assertFalse(self.store.items["lost-1"].is_resolved)

    def test_parse_resolution_type(self) -> None:
        self.assertIs(parse_resolution_type(" Matched "), ResolutionType.MATCHED)
        with self.assertRaises(InvalidArgumentError):
            parse_resolution_type("none")


class ResolveItemTransitionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.notifier = RecordingNotifier()
        self.store.add(
            make_item("lost-1", "U1", "lost", title="Brown wallet"),
            make_item("found-1", "U2", "found", title="Wallet near the station"),
        )
        self.store.add_user("U2", "token-u2")

    def test_paired_resolution_updates_both_items(self) -> None:
        result = resolve_item(
            self.store, self.notifier, "U1", "lost-1", "matched", match_id="found-1", now=9_000
        )

        self.assertEqual(result, {"success": True})
        lost = self.store.items["lost-1"]
        found = self.store.items["found-1"]
        self.assertTrue(lost.is_resolved)
        self.assertIs(lost.resolution_type, ResolutionType.MATCHED)
        self.assertEqual(lost.linked_match_id, "found-1")
        self.assertEqual(lost.resolved_at, 9_000)
        self.assertTrue(found.is_resolved)
        self.assertIs(found.resolution_type, ResolutionType.MATCHED)
        self.assertEqual(found.linked_match_id, "lost-1")

    def test_paired_resolution_writes_one_record_and_one_notification(self) -> None:
        resolve_item(self.store, self.notifier, "U1", "lost-1", "other", match_id="found-1", now=9_000)

        self.assertEqual(len(self.store.resolutions), 1)
        record = self.store.resolutions[("found-1", "lost-1")]
        self.assertEqual(record.item_id, "lost-1")
        self.assertEqual(record.matched_item_id, "found-1")
        self.assertIs(record.resolution_type, ResolutionType.OTHER)
        self.assertEqual(record.resolved_by, "U1")

        self.assertEqual(len(self.notifier.sent), 1)
        notification, tokens = self.notifier.sent[0]
        self.assertEqual(tokens, ["token-u2"])
        self.assertEqual(notification.title, TITLE_RESOLVED)
        self.assertEqual(
            notification.body,
            'Your found item "Wallet near the station" has been matched with another user.',
        )
        self.assertEqual(notification.data["itemId"], "found-1")
        self.assertEqual(notification.data["matchId"], "lost-1")

    def test_resolution_without_match(self) -> None:
        resolve_item(self.store, self.notifier, "U1", "lost-1", "other", now=9_000)

        lost = self.store.items["lost-1"]
        self.assertTrue(lost.is_resolved)
        self.assertIsNone(lost.linked_match_id)
        self.assertFalse(self.store.items["found-1"].is_resolved)
        self.assertEqual(self.store.resolutions, {})
        self.assertEqual(self.notifier.sent, [])

    def test_missing_match_is_skipped_silently(self) -> None:
        resolve_item(self.store, self.notifier, "U1", "lost-1", "matched", match_id="ghost")

        lost = self.store.items["lost-1"]
        self.assertTrue(lost.is_resolved)
        self.assertEqual(lost.linked_match_id, "ghost")
        self.assertEqual(self.store.resolutions, {})
        self.assertEqual(self.notifier.sent, [])

    def test_second_resolution_is_rejected(self) -> None:
        resolve_item(self.store, self.notifier, "U1", "lost-1", "other")

        with self.assertRaises(AlreadyResolvedError) as ctx:
            resolve_item(self.store, self.notifier, "U1", "lost-1", "matched", match_id="found-1")
        self.assertEqual(ctx.exception.code, "failed-precondition")
        self.assertFalse(self.store.items["found-1"].is_resolved)

    def test_resolved_counterpart_is_rejected_without_partial_writes(self) -> None:
        self.store.items["found-1"].is_resolved = True

        with self.assertRaises(AlreadyResolvedError):
            resolve_item(self.store, self.notifier, "U1", "lost-1", "matched", match_id="found-1")
        self.assertFalse(self.store.items["lost-1"].is_resolved)

    def test_lost_compare_and_swap_race_maps_to_already_resolved(self) -> None:
        original_get = self.store.get_item

        def stale_get(item_id):
            # Another caller resolves between our read and our write
            item = original_get(item_id)
            self.store.items["lost-1"].is_resolved = True
            return item

        self.store.get_item = stale_get  # type: ignore[method-assign]

        with self.assertRaises(AlreadyResolvedError):
            resolve_item(self.store, self.notifier, "U1", "lost-1", "matched", match_id="found-1")
        self.assertEqual(self.store.resolutions, {})

    def test_store_failure_is_internal(self) -> None:
        def broken(*args, **kwargs):
            raise StoreError("connection reset")

        self.store.resolve_pair = broken  # type: ignore[method-assign]

        with self.assertRaises(InternalError) as ctx:
            resolve_item(self.store, self.notifier, "U1", "lost-1", "matched", match_id="found-1")
        self.assertIsInstance(ctx.exception.cause, StoreError)

    def test_undecodable_item_is_internal(self) -> None:
        def corrupt(item_id):
            raise KeyError("latitude")

        self.store.get_item = corrupt  # type: ignore[method-assign]

        with self.assertRaises(InternalError) as ctx:
            resolve_item(self.store, self.notifier, "U1", "lost-1", "other")
        self.assertIsInstance(ctx.exception.cause, KeyError)

    def test_notification_failure_does_not_fail_resolution(self) -> None:
        notifier = RecordingNotifier(fail_tokens=["token-u2"])

        result = resolve_item(self.store, notifier, "U1", "lost-1", "matched", match_id="found-1")

        self.assertEqual(result, {"success": True})
        self.assertTrue(self.store.items["found-1"].is_resolved)


if __name__ == "__main__":
    unittest.main()

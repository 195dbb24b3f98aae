import unittest

from lostfound_tool.engine.constants import TITLE_MATCH_FOR_FOUND, TITLE_MATCH_FOR_LOST
from lostfound_tool.engine.core.dispatcher import build_match_notification
from lostfound_tool.engine.core.pipeline import on_item_created
from lostfound_tool.engine.exceptions import StoreError, TransientError

from tests.fakes import InMemoryStore, RecordingNotifier, make_item


class WalletScenarioTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.notifier = RecordingNotifier()
        self.found = make_item(
            "found-1", "U2", "found", latitude=40.005, longitude=-73.0, title="Black leather wallet"
        )
        self.lost = make_item("lost-1", "U1", "lost", latitude=40.0, longitude=-73.0)
        self.store.add(self.found, self.lost)

    def test_one_match_one_record_one_notification(self) -> None:
        self.store.add_user("U2", "token-a", "token-b")

        result = on_item_created(self.store, self.notifier, self.lost, now=5_000)

        self.assertEqual([m.id for m in result.matches], ["found-1"])
        self.assertEqual(len(self.store.matches), 1)
        record = self.store.matches[("found-1", "lost-1")]
        self.assertEqual(record.source_item_id, "lost-1")
        self.assertEqual(record.candidate_item_id, "found-1")
        self.assertTrue(record.notified)
        self.assertEqual(record.created_at, 5_000)

        self.assertEqual(len(self.notifier.sent), 1)
        notification, tokens = self.notifier.sent[0]
        self.assertEqual(tokens, ["token-a", "token-b"])
        self.assertEqual(notification.title, TITLE_MATCH_FOR_FOUND)
        self.assertIn('"Black leather wallet"', notification.body)
        self.assertEqual(notification.data["itemId"], "found-1")
        self.assertEqual(notification.data["matchId"], "lost-1")

        statuses = {(o.task, o.status) for o in result.outcomes}
        self.assertEqual(statuses, {("notify", "sent"), ("record", "recorded")})

    def test_owner_without_tokens_is_skipped(self) -> None:
        result = on_item_created(self.store, self.notifier, self.lost, now=5_000)

        self.assertEqual(self.notifier.sent, [])
        self.assertEqual(len(self.store.matches), 1)
        notify = [o for o in result.outcomes if o.task == "notify"]
        self.assertEqual(notify[0].status, "skipped")

    def test_replayed_trigger_does_not_duplicate_records(self) -> None:
        on_item_created(self.store, self.notifier, self.lost, now=5_000)
        result = on_item_created(self.store, self.notifier, self.lost, now=6_000)

        self.assertEqual(len(self.store.matches), 1)
        self.assertEqual(self.store.matches[("found-1", "lost-1")].created_at, 5_000)
        record = [o for o in result.outcomes if o.task == "record"]
        self.assertEqual(record[0].status, "duplicate")

    def test_no_candidates_means_no_work(self) -> None:
        lonely = make_item("lost-2", "U1", "lost", category="umbrella")

        result = on_item_created(self.store, self.notifier, lonely)

        self.assertEqual(result.matches, [])
        self.assertEqual(result.outcomes, [])

    def test_query_failure_fails_the_unit(self) -> None:
        self.store.query_error = StoreError("boom")

        with self.assertRaises(TransientError):
            on_item_created(self.store, self.notifier, self.lost)
        self.assertEqual(self.store.matches, {})


class FanoutIsolationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.found = make_item("found-0", "U0", "found")
        self.candidates = [
            make_item("lost-a", "UA", "lost", title="Red wallet"),
            make_item("lost-b", "UB", "lost", title="Blue wallet"),
            make_item("lost-c", "UC", "lost", title="Green wallet"),
        ]
        self.store.add(self.found, *self.candidates)
        self.store.add_user("UA", "tok-a")
        self.store.add_user("UB", "tok-bad")
        self.store.add_user("UC", "tok-c")

    def _outcomes(self, result, task: str) -> dict:
        return {o.candidate_id: o for o in result.outcomes if o.task == task}

    def test_one_failing_recipient_does_not_block_others(self) -> None:
        notifier = RecordingNotifier(fail_tokens=["tok-bad"])

        result = on_item_created(self.store, notifier, self.found, now=1)

        notify = self._outcomes(result, "notify")
        self.assertEqual(notify["lost-a"].status, "sent")
        self.assertEqual(notify["lost-b"].status, "failed")
        self.assertIn("unavailable", notify["lost-b"].error or "")
        self.assertEqual(notify["lost-c"].status, "sent")
        self.assertEqual(sorted(t for _, (t,) in notifier.sent), ["tok-a", "tok-c"])
        self.assertEqual(len(self.store.matches), 3)

    def test_outcomes_keep_candidate_order(self) -> None:
        result = on_item_created(self.store, RecordingNotifier(), self.found, now=1)

        record = [o for o in result.outcomes if o.task == "record"]
        self.assertEqual([o.candidate_id for o in record], ["lost-a", "lost-b", "lost-c"])
        self.assertTrue(all(o.status == "recorded" for o in record))

    def test_failed_record_write_is_isolated(self) -> None:
        original = self.store.put_match_record

        def flaky(record):
            if record.candidate_item_id == "lost-b":
                raise StoreError("write failed")
            return original(record)

        self.store.put_match_record = flaky  # type: ignore[method-assign]
        notifier = RecordingNotifier()

        result = on_item_created(self.store, notifier, self.found, now=1)

        record = [o.status for o in result.outcomes if o.task == "record"]
        self.assertEqual(record, ["recorded", "failed", "recorded"])
        self.assertEqual(len(self.store.matches), 2)
        self.assertEqual(len(notifier.sent), 3)


class MatchNotificationTests(unittest.TestCase):
    def test_title_depends_on_candidate_type(self) -> None:
        lost = make_item("l", "U1", "lost", title="Keys")
        found = make_item("f", "U2", "found", title="Keys")

        self.assertEqual(build_match_notification(lost, "f").title, TITLE_MATCH_FOR_LOST)
        self.assertEqual(build_match_notification(found, "l").title, TITLE_MATCH_FOR_FOUND)
        self.assertEqual(
            build_match_notification(lost, "f").body, 'There\'s a potential match for "Keys"'
        )
        self.assertEqual(build_match_notification(lost, "f").data["click_action"], "FLUTTER_NOTIFICATION_CLICK")


if __name__ == "__main__":
    unittest.main()

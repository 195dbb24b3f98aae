import unittest
from unittest.mock import patch

from lostfound_tool.engine import handlers
from lostfound_tool.engine.exceptions import StoreError, TransientError

from tests.fakes import InMemoryStore, RecordingNotifier, make_item


def _new_image(item_id: str, owner_id: str, item_type: str, lat: str, lon: str) -> dict:
    key = f"item:{item_id}"
    return {
        "PK": {"S": key},
        "SK": {"S": key},
        "record_type": {"S": "item"},
        "match_key": {"S": f"{item_type}#wallet"},
        "id": {"S": item_id},
        "owner_id": {"S": owner_id},
        "item_type": {"S": item_type},
        "category": {"S": "wallet"},
        "title": {"S": "Brown wallet"},
        "description": {"S": ""},
        "latitude": {"N": lat},
        "longitude": {"N": lon},
        "is_resolved": {"BOOL": False},
        "resolution_type": {"S": "none"},
        "linked_match_id": {"NULL": True},
        "created_at": {"N": "5000"},
        "updated_at": {"N": "5000"},
        "resolved_at": {"NULL": True},
    }


def _record(event_name: str, image: dict) -> dict:
    return {"eventName": event_name, "dynamodb": {"NewImage": image}}


class ItemCreatedHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.notifier = RecordingNotifier()
        self.store.add(make_item("found-1", "U2", "found", latitude=40.005, longitude=-73.0))
        self.store.add_user("U2", "tok")
        for target, value in (("_build_store", self.store), ("build_notifier", self.notifier)):
            p = patch.object(handlers, target, return_value=value)
            p.start()
            self.addCleanup(p.stop)

    def test_insert_runs_pipeline(self) -> None:
        event = {"Records": [_record("INSERT", _new_image("lost-1", "U1", "lost", "40.0", "-73.0"))]}

        result = handlers.item_created_handler(event, None)

        self.assertEqual(result, {"processed": 1, "matches": 1})
        self.assertIn(("found-1", "lost-1"), self.store.matches)
        self.assertEqual(len(self.notifier.sent), 1)

    def test_ignores_modify_and_non_item_records(self) -> None:
        user_image = {"PK": {"S": "user:U1"}, "SK": {"S": "user:U1"}, "record_type": {"S": "user"}}
        event = {
            "Records": [
                _record("MODIFY", _new_image("lost-1", "U1", "lost", "40.0", "-73.0")),
                _record("INSERT", user_image),
                {"eventName": "REMOVE", "dynamodb": {}},
            ]
        }

        result = handlers.item_created_handler(event, None)

        self.assertEqual(result, {"processed": 0, "matches": 0})
        self.assertEqual(self.store.matches, {})

    def test_malformed_record_does_not_block_the_batch(self) -> None:
        broken = _new_image("lost-0", "U1", "lost", "40.0", "-73.0")
        del broken["latitude"]
        event = {
            "Records": [
                _record("INSERT", broken),
                _record("INSERT", _new_image("lost-1", "U1", "lost", "40.0", "-73.0")),
            ]
        }

        result = handlers.item_created_handler(event, None)

        self.assertEqual(result, {"processed": 1, "matches": 1})
        self.assertIn(("found-1", "lost-1"), self.store.matches)

    def test_query_failure_propagates_for_retry(self) -> None:
        self.store.query_error = StoreError("throttled")
        event = {"Records": [_record("INSERT", _new_image("lost-1", "U1", "lost", "40.0", "-73.0"))]}

        with self.assertRaises(TransientError):
            handlers.item_created_handler(event, None)


class ScheduledCleanupHandlerTests(unittest.TestCase):
    def test_returns_sweep_summary(self) -> None:
        store = InMemoryStore()
        store.add(make_item("old", "U1", "lost", created_at=0))

        with patch.object(handlers, "_build_store", return_value=store):
            result = handlers.scheduled_cleanup_handler({}, None)

        self.assertEqual(result["expired"], 1)
        self.assertEqual(result["failed_batches"], 0)


if __name__ == "__main__":
    unittest.main()

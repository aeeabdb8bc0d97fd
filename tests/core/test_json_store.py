import json
import threading

import pytest

from golf_league.core.exceptions import ConflictError, NotFoundError
from golf_league.core.json_store import JsonCollection, JsonStore


@pytest.fixture
def collection(tmp_path):
    return JsonCollection(str(tmp_path / "things.json"), ("thing_id",), threading.RLock())


class TestJsonCollection:

    def test_creates_empty_file(self, collection):
        with open(collection.file_path) as f:
            assert json.load(f) == []

    def test_put_replaces_same_key(self, collection):
        collection.put({"thing_id": "a", "value": 1})
        collection.put({"thing_id": "a", "value": 2})
        assert collection.all() == [{"thing_id": "a", "value": 2}]

    def test_get_missing_returns_none(self, collection):
        assert collection.get("nope") is None

    def test_empty_file_reads_as_empty(self, collection):
        open(collection.file_path, "w").close()
        assert collection.all() == []

    def test_corrupt_file_reads_as_empty(self, collection):
        with open(collection.file_path, "w") as f:
            f.write("{not json")
        assert collection.all() == []

    def test_query_and_query_contains(self, collection):
        collection.put_many([
            {"thing_id": "a", "kind": "x", "tags": ["red"]},
            {"thing_id": "b", "kind": "y", "tags": ["red", "blue"]},
            {"thing_id": "c", "kind": "x", "tags": []},
        ])
        assert [r["thing_id"] for r in collection.query(kind="x")] == ["a", "c"]
        assert [r["thing_id"] for r in collection.query_contains("tags", "blue")] == ["b"]

    def test_append_unique_adds_once(self, collection):
        collection.put({"thing_id": "a", "tags": []})
        collection.append_unique(("a",), "tags", "red", extra={"touched": True})
        record = collection.get("a")
        assert record == {"thing_id": "a", "tags": ["red"], "touched": True}

        with pytest.raises(ConflictError):
            collection.append_unique(("a",), "tags", "red")
        assert collection.get("a")["tags"] == ["red"]

    def test_append_unique_concurrent_adds_all_survive(self, collection):
        collection.put({"thing_id": "a", "tags": []})
        values = [f"v{i}" for i in range(20)]
        threads = [
            threading.Thread(target=collection.append_unique, args=(("a",), "tags", v))
            for v in values
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert sorted(collection.get("a")["tags"]) == sorted(values)

    def test_update_missing_raises(self, collection):
        with pytest.raises(NotFoundError):
            collection.update(("ghost",), lambda r: r)

    def test_replace_where_swaps_matching_records(self, collection):
        collection.put_many([
            {"thing_id": "a", "group": "g1"},
            {"thing_id": "b", "group": "g1"},
            {"thing_id": "c", "group": "g2"},
        ])
        collection.replace_where({"group": "g1"}, [{"thing_id": "d", "group": "g1"}])
        assert sorted(r["thing_id"] for r in collection.all()) == ["c", "d"]

    def test_transaction_is_not_saved_on_error(self, collection):
        collection.put({"thing_id": "a"})
        with pytest.raises(RuntimeError):
            with collection.transaction() as records:
                records.clear()
                raise RuntimeError("boom")
        assert collection.get("a") == {"thing_id": "a"}


class TestJsonStore:

    def test_composite_key_for_scores(self, tmp_path):
        store = JsonStore(str(tmp_path / "data"))
        store.scores.put({"foursome_id": "f1", "player_id": "p1", "total_score": 72})
        store.scores.put({"foursome_id": "f1", "player_id": "p2", "total_score": 80})
        store.scores.put({"foursome_id": "f1", "player_id": "p1", "total_score": 70})
        assert store.scores.get("f1", "p1")["total_score"] == 70
        assert len(store.scores.all()) == 2

import json
import logging
import os
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from golf_league.core.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

USERS = "users"
PLAYGROUPS = "playgroups"
SESSIONS = "sessions"
FOURSOMES = "foursomes"
SCORES = "scores"


class JsonCollection:
    """
    One JSON file holding a list of records, addressed by ``key_fields``.

    Every method takes the store lock, so each call is one atomic operation
    against the file. ``transaction`` extends that to a multi-record edit.
    """

    def __init__(self, file_path: str, key_fields: Tuple[str, ...], lock: threading.RLock):
        self.file_path = file_path
        self.key_fields = key_fields
        self._lock = lock
        if not os.path.exists(self.file_path):
            self._save([])

    def _load(self) -> List[Record]:
        if not os.path.exists(self.file_path):
            return []
        try:
            with open(self.file_path, "r") as f:
                content = f.read()
                if not content:
                    return []
                return json.loads(content)
        except json.JSONDecodeError:
            logger.warning("Could not decode JSON from %s, treating it as empty", self.file_path)
            return []

    def _save(self, records: List[Record]):
        tmp_path = f"{self.file_path}.tmp"
        with open(tmp_path, "w") as f:
            json.dump(records, f, indent=4, default=str)
        os.replace(tmp_path, self.file_path)

    def _key_of(self, record: Record) -> Tuple[Any, ...]:
        return tuple(record.get(field) for field in self.key_fields)

    def _matches(self, record: Record, criteria: Dict[str, Any]) -> bool:
        return all(record.get(field) == value for field, value in criteria.items())

    def all(self) -> List[Record]:
        with self._lock:
            return self._load()

    def get(self, *key: Any) -> Optional[Record]:
        with self._lock:
            for record in self._load():
                if self._key_of(record) == key:
                    return record
        return None

    def query(self, **criteria: Any) -> List[Record]:
        """Equality lookup on any fields, in stored order."""
        with self._lock:
            return [r for r in self._load() if self._matches(r, criteria)]

    def query_contains(self, field: str, value: Any) -> List[Record]:
        """Records whose list-valued ``field`` contains ``value``."""
        with self._lock:
            return [r for r in self._load() if value in (r.get(field) or [])]

    def put(self, record: Record) -> Record:
        """Insert, or replace the record with the same key."""
        with self.transaction() as records:
            key = self._key_of(record)
            records[:] = [r for r in records if self._key_of(r) != key]
            records.append(record)
        return record

    def put_many(self, new_records: List[Record]) -> List[Record]:
        with self.transaction() as records:
            keys = {self._key_of(r) for r in new_records}
            records[:] = [r for r in records if self._key_of(r) not in keys]
            records.extend(new_records)
        return new_records

    def update(self, key: Tuple[Any, ...], mutate: Callable[[Record], Record]) -> Record:
        with self.transaction() as records:
            for index, record in enumerate(records):
                if self._key_of(record) == key:
                    records[index] = mutate(dict(record))
                    return records[index]
        raise NotFoundError("Record", "/".join(map(str, key)))

    def append_unique(self, key: Tuple[Any, ...], field: str, value: Any, extra: Optional[Record] = None) -> Record:
        """
        Conditional list append: adds ``value`` to ``record[field]`` only if it
        is absent, otherwise raises ConflictError. ``extra`` is merged into the
        record in the same write.
        """
        def mutate(record: Record) -> Record:
            current = list(record.get(field) or [])
            if value in current:
                raise ConflictError(f"{value} is already present in {field}")
            current.append(value)
            record[field] = current
            record.update(extra or {})
            return record

        return self.update(key, mutate)

    def replace_where(self, criteria: Dict[str, Any], new_records: List[Record]) -> List[Record]:
        """Atomically drop every record matching ``criteria`` and insert ``new_records``."""
        with self.transaction() as records:
            records[:] = [r for r in records if not self._matches(r, criteria)]
            records.extend(new_records)
        return new_records

    @contextmanager
    def transaction(self) -> Iterator[List[Record]]:
        """
        Yields the full record list under the lock; the list is written back
        only if the block exits cleanly.
        """
        with self._lock:
            records = self._load()
            yield records
            self._save(records)


class JsonStore:
    """The five collections backing the service, sharing one lock."""

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)
        lock = threading.RLock()
        self.users = JsonCollection(self._path(USERS), ("user_id",), lock)
        self.playgroups = JsonCollection(self._path(PLAYGROUPS), ("playgroup_id",), lock)
        self.sessions = JsonCollection(self._path(SESSIONS), ("session_id",), lock)
        self.foursomes = JsonCollection(self._path(FOURSOMES), ("foursome_id",), lock)
        self.scores = JsonCollection(self._path(SCORES), ("foursome_id", "player_id"), lock)

    def _path(self, name: str) -> str:
        return os.path.join(self.data_dir, f"{name}.json")

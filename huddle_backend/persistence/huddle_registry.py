from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from huddle_backend.errors import HuddleNotFound
from huddle_backend.models.huddle import Huddle
from huddle_backend.persistence.locks import ReadWriteLock

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "huddle_"


class HuddleRegistry(ABC):
    @abstractmethod
    def create(self, created_by: str) -> Huddle:
        """Creates a new Huddle with a channel name derived from its ID."""
        ...

    @abstractmethod
    def get(self, huddle_id: str) -> Optional[Huddle]:
        """Gets a Huddle from its ID."""
        ...

    @abstractmethod
    def get_by_channel(self, channel_name: str) -> Optional[Huddle]:
        """Gets the Huddle bound to a channel, if any."""
        ...

    @abstractmethod
    def list(self) -> List[Huddle]:
        """Returns every active Huddle, in no particular order."""
        ...

    @abstractmethod
    def join(self, huddle_id: str, user_id: str) -> None:
        """Adds a user to a Huddle. Joining twice is a no-op."""
        ...

    @abstractmethod
    def join_by_channel(self, channel_name: str, user_id: str) -> None:
        """Adds a user to the Huddle bound to a channel; does nothing if there is none."""
        ...

    @abstractmethod
    def leave(self, huddle_id: str, user_id: str) -> None:
        """Removes a user from a Huddle."""
        ...

    @abstractmethod
    def end(self, huddle_id: str) -> None:
        """Deletes a Huddle."""
        ...

    @abstractmethod
    def end_by_channel(self, channel_name: str) -> None:
        """Deletes the Huddle bound to a channel."""
        ...

    @abstractmethod
    def get_or_create(self, channel_name: str, user_id: str) -> Huddle:
        """Returns the Huddle bound to a channel, creating it for user_id if missing."""
        ...


@dataclass
class _HuddleRecord:
    id: str
    channel_name: str
    created_by: str
    created_at: datetime
    participants: List[str] = field(default_factory=list)

    def snapshot(self) -> Huddle:
        return Huddle(
            id=self.id,
            channel_name=self.channel_name,
            created_by=self.created_by,
            created_at=self.created_at,
            participants=tuple(self.participants),
        )

    def add_participant(self, user_id: str) -> None:
        if user_id not in self.participants:
            self.participants.append(user_id)


class InMemoryHuddleRegistry(HuddleRegistry):
    """Process-local huddle catalog guarded by one reader/writer lock.

    - Reads (get, get_by_channel, list) share the lock
    - Every mutation holds it exclusively, including the check-then-create
      in get_or_create
    - Records never leave the registry; callers get frozen snapshots
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._huddles: Dict[str, _HuddleRecord] = {}
        # channel_name -> huddle id, kept in step with _huddles under the write lock
        self._channels: Dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._huddles)

    # ---- reads ----
    def get(self, huddle_id: str) -> Optional[Huddle]:
        with self._lock.read():
            record = self._huddles.get(huddle_id)
            return record.snapshot() if record else None

    def get_by_channel(self, channel_name: str) -> Optional[Huddle]:
        with self._lock.read():
            record = self._by_channel(channel_name)
            return record.snapshot() if record else None

    def list(self) -> List[Huddle]:
        with self._lock.read():
            return [record.snapshot() for record in self._huddles.values()]

    # ---- writes ----
    def create(self, created_by: str) -> Huddle:
        with self._lock.write():
            huddle_id = self._new_id()
            # get_or_create accepts arbitrary names, so a derived name may already be taken
            while self._derived_channel(huddle_id) in self._channels:
                huddle_id = self._new_id()
            record = self._insert(huddle_id, self._derived_channel(huddle_id), created_by)
            return record.snapshot()

    def get_or_create(self, channel_name: str, user_id: str) -> Huddle:
        with self._lock.write():
            record = self._by_channel(channel_name)
            if record is None:
                record = self._insert(self._new_id(), channel_name, user_id)
            return record.snapshot()

    def join(self, huddle_id: str, user_id: str) -> None:
        with self._lock.write():
            self._require(huddle_id).add_participant(user_id)

    def join_by_channel(self, channel_name: str, user_id: str) -> None:
        with self._lock.write():
            record = self._by_channel(channel_name)
            if record is not None:
                record.add_participant(user_id)

    def leave(self, huddle_id: str, user_id: str) -> None:
        with self._lock.write():
            record = self._require(huddle_id)
            try:
                record.participants.remove(user_id)
            except ValueError:
                raise HuddleNotFound("user not in huddle") from None

    def end(self, huddle_id: str) -> None:
        with self._lock.write():
            self._delete(self._require(huddle_id))

    def end_by_channel(self, channel_name: str) -> None:
        with self._lock.write():
            record = self._by_channel(channel_name)
            if record is None:
                raise HuddleNotFound()
            self._delete(record)

    # ---- helpers; callers must hold the lock ----
    @staticmethod
    def _derived_channel(huddle_id: str) -> str:
        return f"{CHANNEL_PREFIX}{huddle_id[:8]}"

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    def _by_channel(self, channel_name: str) -> Optional[_HuddleRecord]:
        huddle_id = self._channels.get(channel_name)
        return self._huddles.get(huddle_id) if huddle_id is not None else None

    def _require(self, huddle_id: str) -> _HuddleRecord:
        record = self._huddles.get(huddle_id)
        if record is None:
            raise HuddleNotFound()
        return record

    def _insert(self, huddle_id: str, channel_name: str, created_by: str) -> _HuddleRecord:
        record = _HuddleRecord(
            id=huddle_id,
            channel_name=channel_name,
            created_by=created_by,
            created_at=datetime.now(timezone.utc),
        )
        self._huddles[huddle_id] = record
        self._channels[channel_name] = huddle_id
        logger.debug("huddle created id=%s channel=%s by=%s", huddle_id, channel_name, created_by)
        return record

    def _delete(self, record: _HuddleRecord) -> None:
        del self._huddles[record.id]
        self._channels.pop(record.channel_name, None)
        logger.debug("huddle ended id=%s channel=%s", record.id, record.channel_name)

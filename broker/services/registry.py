"""In-memory game registry.

Maps game ids to the most recent move payload. The registry lock guards map
membership only and is never held for long; each record has its own lock for
payload and timestamps, so operations on different games do not contend.
Whenever both locks are needed the registry lock is taken first.
"""

import logging
import secrets
import string
import threading
import time
from typing import Callable, Dict, List, Optional

from broker.errors import InvalidArgument, NotFound, ResourceExhausted
from broker.models import GameRecord


GAME_ID_ALPHABET = string.ascii_uppercase + string.digits

logger = logging.getLogger(__name__)


def normalize_game_id(game_id: str) -> str:
    return (game_id or '').strip().upper()


class GameRegistry:

    def __init__(
        self,
        expiry_window: float = 600,
        id_length: int = 8,
        max_attempts: int = 16,
        clock: Callable[[], float] = time.time,
    ):
        self.expiry_window = expiry_window
        self.id_length = id_length
        self.max_attempts = max_attempts
        self.clock = clock
        self._games: Dict[str, GameRecord] = {}
        self._lock = threading.Lock()

    def _generate_id(self) -> str:
        return ''.join(secrets.choice(GAME_ID_ALPHABET) for _ in range(self.id_length))

    def _lookup(self, game_id: str) -> GameRecord:
        with self._lock:
            record = self._games.get(normalize_game_id(game_id))
        if record is None:
            raise NotFound(f'Unknown game {game_id}')
        return record

    def create_game(self) -> str:
        """Insert an empty record under a fresh id and return the id.

        An expired record still occupying a candidate id counts as a
        collision; the sweeper reclaims it later.
        """
        for _ in range(self.max_attempts):
            candidate = self._generate_id()
            with self._lock:
                if candidate in self._games:
                    continue
                self._games[candidate] = GameRecord(candidate, self.clock(), self.expiry_window)
                return candidate
        raise ResourceExhausted(f'No free game id after {self.max_attempts} attempts')

    def get_move(self, game_id: str):
        """Return the last payload written for ``game_id`` (None before any move)."""
        record = self._lookup(game_id)
        with record.lock:
            if not record.is_live(self.clock()):
                raise NotFound(f'Game {game_id} has expired')
            return record.payload

    def put_move(self, game_id: str, payload) -> dict:
        """Replace the payload of a live game and refresh its expiry."""
        if payload is None:
            raise InvalidArgument('Move payload is required')
        record = self._lookup(game_id)
        with record.lock:
            now = self.clock()
            if not record.is_live(now):
                raise NotFound(f'Game {game_id} has expired')
            record.write(payload, now)
            return record.to_summary()

    def clear_all(self) -> int:
        """Drop every record. Returns how many were held, expired ones included."""
        with self._lock:
            dropped = self._games
            self._games = {}
            for record in dropped.values():
                with record.lock:
                    record.removed = True
        return len(dropped)

    def snapshot(self) -> List[dict]:
        with self._lock:
            records = list(self._games.values())
        summaries = []
        for record in records:
            with record.lock:
                if record.is_live(self.clock()):
                    summaries.append(record.to_summary())
        return summaries

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Physically remove expired records. Returns the number removed.

        A failure on one record is logged and the scan moves on.
        """
        if now is None:
            now = self.clock()
        with self._lock:
            candidates = list(self._games.items())
        removed = 0
        for game_id, record in candidates:
            try:
                with self._lock:
                    if self._games.get(game_id) is not record:
                        continue
                    with record.lock:
                        if not record.is_expired(now):
                            continue
                        record.removed = True
                        del self._games[game_id]
                removed += 1
            except Exception:
                logger.exception(f'[sweep-error] game={game_id}')
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)

    def __contains__(self, game_id) -> bool:
        with self._lock:
            record = self._games.get(normalize_game_id(game_id))
        if record is None:
            return False
        with record.lock:
            return record.is_live(self.clock())

import threading


class GameRecord:
    """Last move stored for one game, plus its timestamps.

    ``payload`` is opaque serialized JSON (or None until the first move).
    All mutable fields are guarded by ``lock``; callers that read more than
    one field at a time must hold it.
    """

    __slots__ = ('game_id', 'payload', 'created_at', 'updated_at',
                 'expiry_window', 'removed', 'lock')

    def __init__(self, game_id: str, now: float, expiry_window: float):
        self.game_id = game_id
        self.payload = None
        self.created_at = now
        self.updated_at = now
        self.expiry_window = expiry_window
        self.removed = False
        self.lock = threading.Lock()

    @property
    def expires_at(self) -> float:
        return self.updated_at + self.expiry_window

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now

    def is_live(self, now: float) -> bool:
        return not self.removed and not self.is_expired(now)

    def write(self, payload, now: float) -> None:
        self.payload = payload
        # Wall clock can step backwards; never let updated_at follow it.
        self.updated_at = max(self.updated_at, now)

    def to_summary(self):
        return {
            'game_id': self.game_id,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'expires_at': self.expires_at,
            'has_move': self.payload is not None,
            'payload_bytes': len(self.payload) if self.payload is not None else 0,
        }

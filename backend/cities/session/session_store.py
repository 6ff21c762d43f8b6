from cities.logic.settings import GameSettings
from cities.session.models import GameSession


class SessionStore:
    """In-memory registry of live game sessions.

    Map room ids to at most one GameSession each. A room without an entry
    is idle. Entries are owned by the room's sequential event stream; the
    SessionManager serializes access per room.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, GameSession] = {}  # room_id -> GameSession

    def create_session(self, room_id: str, settings: GameSettings | None = None) -> GameSession:
        """Create the session for an idle room. Raise ValueError if the room already has one."""
        if room_id in self._sessions:
            raise ValueError(f"Room {room_id} already has a live session")
        session = GameSession(room_id=room_id, settings=settings or GameSettings())
        self._sessions[room_id] = session
        return session

    def get_session(self, room_id: str) -> GameSession | None:
        return self._sessions.get(room_id)

    def is_current(self, session: GameSession) -> bool:
        """Check that the store still maps the session's room to this exact object."""
        return self._sessions.get(session.room_id) is session

    def remove_session(self, session: GameSession) -> bool:
        """Remove a session if it is still the room's live one.

        A stale object never evicts a newer session created at the same room.
        """
        if not self.is_current(session):
            return False
        del self._sessions[session.room_id]
        return True

    def clear(self) -> list[GameSession]:
        """Drop every session and return them."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        return sessions

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    @property
    def room_ids(self) -> list[str]:
        return list(self._sessions)

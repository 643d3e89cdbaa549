"""
In-memory registry of game sessions.

Threading model:
    FastAPI runs the synchronous route handlers in a worker thread pool, so
    the store is shared between threads. One readers-writer lock covers the
    whole registry:

    - get / read take shared access and may run concurrently.
    - create / delete / update take exclusive access. update holds it for
      the whole move protocol, which serializes every mutation in the
      process.

    Rules calls are CPU-bound and never block, so nothing waits on I/O while
    the lock is held.

Sessions are immutable values (see games.session). update() builds a new
session and swaps it in only when the callback returns normally; if the
callback raises, the stored session is exactly what it was before.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

import chess

from games.errors import GameNotFoundError
from games.session import GameSession, new_game_id

_log = logging.getLogger(__name__)

T = TypeVar("T")


class ReadWriteLock:
    """
    Shared/exclusive lock built on a single condition variable.

    Writers are preferred: once a writer is waiting, new readers queue behind
    it, so a steady stream of reads cannot starve a move application.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class SessionStore:
    """
    Keyed registry that exclusively owns every live GameSession.

    Entries appear only through create() and disappear only through delete()
    or clear(); nothing expires on its own. There is no way to
    list the stored ids.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._lock = ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._sessions)

    def create(self, initial_position: chess.Board) -> str:
        """
        Register a new game starting from ``initial_position``.

        The session is fully built before the lock is taken, so no reader can
        ever see a partially constructed entry.

        Returns:
            The id of the new game.
        """
        game_id = new_game_id()
        session = GameSession.start(game_id, initial_position)
        with self._lock.write():
            # uuid4 collisions are not expected; never overwrite if one happens.
            while game_id in self._sessions:
                game_id = new_game_id()
                session = GameSession.start(game_id, initial_position)
            self._sessions[game_id] = session
        return game_id

    def get(self, game_id: str) -> GameSession:
        """
        Raises:
            GameNotFoundError: No game is registered under ``game_id``.
        """
        return self.read(game_id, lambda session: session)

    def read(self, game_id: str, fn: Callable[[GameSession], T]) -> T:
        """Run ``fn`` on the stored session under shared access."""
        with self._lock.read():
            return fn(self._lookup(game_id))

    def update(
        self,
        game_id: str,
        fn: Callable[[GameSession], tuple[GameSession, T]],
    ) -> T:
        """
        Replace a session with the result of ``fn`` under exclusive access.

        ``fn`` receives the current session and returns ``(new_session,
        result)``. The new session is stored only if ``fn`` returns; any
        exception propagates and leaves the registry untouched.

        Returns:
            The ``result`` part of ``fn``'s return value.
        """
        with self._lock.write():
            session = self._lookup(game_id)
            new_session, result = fn(session)
            if new_session.id != game_id:
                raise RuntimeError(
                    f"session id changed during update: {game_id} -> {new_session.id}"
                )
            self._sessions[game_id] = new_session
            return result

    def delete(self, game_id: str) -> None:
        """
        Raises:
            GameNotFoundError: No game is registered under ``game_id``.
        """
        with self._lock.write():
            if self._sessions.pop(game_id, None) is None:
                raise GameNotFoundError(game_id)

    def clear(self) -> int:
        """Drop every session; returns how many were dropped."""
        with self._lock.write():
            count = len(self._sessions)
            self._sessions.clear()
        return count

    def _lookup(self, game_id: str) -> GameSession:
        try:
            return self._sessions[game_id]
        except KeyError:
            _log.debug("Game %s not found", game_id)
            raise GameNotFoundError(game_id) from None

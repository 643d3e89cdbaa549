"""
Exceptions raised by the game core.

Every error a client can provoke maps to exactly one subclass here; the web
layer translates each subclass into one HTTP status code. The message of the
exception is what the client sees, so keep it short and free of internals.
"""


class GameError(Exception):
    """Base class for all errors raised by the game core."""

    message: str = "game error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(self.format_message())

    def format_message(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class GameNotFoundError(GameError):
    """No session is registered under the requested id."""

    message = "game not found"

    def __init__(self, game_id: str | None = None) -> None:
        self.game_id = game_id
        super().__init__()


class BadRequestError(GameError):
    """Client input could not be parsed."""

    message = "invalid request"


class InvalidFenError(BadRequestError):
    """A FEN string is malformed or describes an impossible position."""

    def format_message(self) -> str:
        return f"{self.message}: invalid FEN: {self.detail}"


class InvalidUciError(BadRequestError):
    """A move string does not follow UCI grammar."""

    def format_message(self) -> str:
        return f"{self.message}: invalid UCI: {self.detail}"


class IllegalMoveError(GameError):
    """A well-formed move is not legal in the current position."""

    message = "illegal move"

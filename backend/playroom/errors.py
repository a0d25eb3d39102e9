"""
Доменные ошибки чата и игры.
Каждая ошибка несёт готовое для клиента сообщение; API-слой только форматирует его.
"""


class PlayroomError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameter(PlayroomError):
    kind = "missing_parameter"


class InvalidMove(PlayroomError):
    kind = "invalid_move"

    def __init__(self, message: str = "Invalid move. Please provide a valid move (e.g., 1-1, 2-2, 3-3)."):
        super().__init__(message)


class SessionMismatch(PlayroomError):
    kind = "session_mismatch"

    def __init__(self, message: str = "Session ID mismatch"):
        super().__init__(message)


class GameFull(PlayroomError):
    kind = "game_full"

    def __init__(self, message: str = "Game is full, you can only watch."):
        super().__init__(message)


class NotYourTurn(PlayroomError):
    kind = "not_your_turn"

    def __init__(self, message: str = "Please wait for the other player to make a move."):
        super().__init__(message)


class CellTaken(PlayroomError):
    kind = "cell_taken"

    def __init__(self, message: str = "Move already made. Please choose a different move."):
        super().__init__(message)


class RateLimitExceeded(PlayroomError):
    kind = "rate_limit_exceeded"

    def __init__(self, retry_after: int):
        super().__init__(f"Rate limit exceeded. Try again in {retry_after} seconds.")
        self.retry_after = retry_after


class InvalidOrExpiredToken(PlayroomError):
    kind = "invalid_token"

    def __init__(self, message: str = "Invalid or expired token."):
        super().__init__(message)


class NoMessagesStored(PlayroomError):
    kind = "no_messages"

    def __init__(self, message: str = "No messages stored."):
        super().__init__(message)


class InvalidAction(PlayroomError):
    kind = "invalid_action"


class GameOver(PlayroomError):
    kind = "game_over"

    def __init__(self, message: str = "Game is over. Please start a new game."):
        super().__init__(message)

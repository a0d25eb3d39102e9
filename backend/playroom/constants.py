"""Константы: сроки жизни, лимиты, допустимые ходы."""
import string

RATE_LIMIT_WINDOW_SECONDS = 10
RATE_LIMIT_MAX_REQUESTS = 50

SESSION_IDLE_SECONDS = 60 * 60
MESSAGE_TTL_SECONDS = 60 * 60
GAME_IDLE_SECONDS = 60 * 60
GAME_DECIDED_SECONDS = 10 * 60

GLOBAL_REQUEST_WINDOW_SECONDS = 10

BOARD_SIZE = 3
VALID_MOVES: list[str] = [
    f"{row}-{col}" for row in range(1, BOARD_SIZE + 1) for col in range(1, BOARD_SIZE + 1)
]

GAME_ID_LENGTH = 5
GAME_ID_ALPHABET = string.ascii_uppercase + string.digits

CHAT_METHODS = ["message", "private", "fetch"]
GAME_METHODS = ["play", "fetch"]

"""
Крестики-нолики: партии в памяти, журнал ходов, проверка победы и ничьей.
Журнал ходов — единственный источник истины: символы, очередь хода и итог
каждый раз вычисляются заново его воспроизведением.
"""
import logging
import secrets
import time
from dataclasses import dataclass, field

from .constants import (
    BOARD_SIZE,
    GAME_DECIDED_SECONDS,
    GAME_ID_ALPHABET,
    GAME_ID_LENGTH,
    GAME_IDLE_SECONDS,
    VALID_MOVES,
)
from .errors import CellTaken, GameFull, GameOver, InvalidMove, MissingParameter, NotYourTurn
from .ratelimit import RateLimiter
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)

SYMBOLS = ("X", "O")


@dataclass(frozen=True)
class Cell:
    row: int
    col: int

    @property
    def label(self) -> str:
        return f"{self.row}-{self.col}"


def parse_cell(move: str) -> Cell:
    """Разобрать ход вида "строка-столбец" (1..3). Иначе InvalidMove."""
    if not isinstance(move, str) or move.strip() not in VALID_MOVES:
        raise InvalidMove()
    row, col = move.strip().split("-")
    return Cell(int(row), int(col))


@dataclass
class PlayRequest:
    username: str
    cell: Cell
    session: str
    game_id: str

    @property
    def user_id(self) -> str:
        return self.username.lower()


@dataclass
class MoveRecord:
    username: str
    move: str
    session: str


@dataclass
class GameResult:
    winner: str | None = None
    loser: str | None = None
    tie: bool = False

    @property
    def decided(self) -> bool:
        return self.winner is not None or self.tie


@dataclass
class Game:
    id: str
    created_at: float
    expires_at: float
    moves: list[MoveRecord] = field(default_factory=list)
    players: list[str] = field(default_factory=list)

    @property
    def movers(self) -> list[str]:
        """Уникальные авторы ходов в порядке первого появления."""
        seen: list[str] = []
        for m in self.moves:
            if m.username not in seen:
                seen.append(m.username)
        return seen

    @property
    def last_mover(self) -> str | None:
        return self.moves[-1].username if self.moves else None

    @property
    def turn(self) -> str | None:
        candidates = self.movers + [p for p in self.players if p not in self.movers]
        if not candidates:
            return None
        return next((p for p in candidates if p != self.last_mover), candidates[0])

    @property
    def status(self) -> str:
        return "ready" if len(self.players) >= 2 else "waiting"

    def register(self, user_id: str) -> None:
        if user_id not in self.players:
            self.players.append(user_id)


def _lines() -> list[list[tuple[int, int]]]:
    n = BOARD_SIZE
    rows = [[(r, c) for c in range(n)] for r in range(n)]
    cols = [[(r, c) for r in range(n)] for c in range(n)]
    diagonals = [[(i, i) for i in range(n)], [(i, n - 1 - i) for i in range(n)]]
    return rows + cols + diagonals


LINES = _lines()


def check_game(moves: list[MoveRecord]) -> GameResult:
    """
    Воспроизвести журнал на поле 3x3: первый уникальный игрок — X, второй — O.
    Побеждает первый (в порядке появления) игрок с полной линией.
    Ничья — без победителя после 9 ходов. Проигравший есть только при двух игроках.
    """
    board: list[list[str | None]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    symbols: dict[str, str] = {}
    for m in moves:
        if m.username not in symbols:
            symbols[m.username] = SYMBOLS[min(len(symbols), len(SYMBOLS) - 1)]
        cell = parse_cell(m.move)
        board[cell.row - 1][cell.col - 1] = symbols[m.username]

    def has_line(symbol: str) -> bool:
        return any(all(board[r][c] == symbol for r, c in line) for line in LINES)

    winner = next((player for player, symbol in symbols.items() if has_line(symbol)), None)
    loser = None
    if winner is not None and len(symbols) == 2:
        loser = next(p for p in symbols if p != winner)
    tie = winner is None and len(moves) == BOARD_SIZE * BOARD_SIZE
    return GameResult(winner=winner, loser=loser, tie=tie)


def generate_game_id() -> str:
    return "".join(secrets.choice(GAME_ID_ALPHABET) for _ in range(GAME_ID_LENGTH))


def game_state_payload(g: Game) -> dict:
    """Собрать ответ fetch для клиента."""
    payload = {
        "id": g.id,
        "moves": [{"username": m.username, "move": m.move, "session": m.session} for m in g.moves],
        "players": list(g.players),
        "turn": g.turn,
        "status": g.status,
    }
    if g.moves:
        result = check_game(g.moves)
        payload.update(winner=result.winner, loser=result.loser, tie=result.tie)
    return payload


class GameEngine:
    def __init__(
        self,
        rate_limiter: RateLimiter | None = None,
        sessions: SessionRegistry | None = None,
        idle_ttl: float = GAME_IDLE_SECONDS,
        decided_ttl: float = GAME_DECIDED_SECONDS,
    ):
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self.sessions = sessions if sessions is not None else SessionRegistry()
        self.idle_ttl = idle_ttl
        self.decided_ttl = decided_ttl
        self._games: dict[str, Game] = {}

    def get_game(self, game_id: str, now: float | None = None) -> Game | None:
        """Живая партия или None. Просроченная удаляется при обращении."""
        now = time.time() if now is None else now
        g = self._games.get(game_id)
        if g is not None and g.expires_at <= now:
            del self._games[game_id]
            logger.info("Game expired id=%s", game_id)
            return None
        return g

    def _get_or_create(self, game_id: str, now: float) -> Game:
        g = self.get_game(game_id, now)
        if g is None:
            g = Game(id=game_id, created_at=now, expires_at=now + self.idle_ttl)
            self._games[game_id] = g
            logger.info("Game created id=%s", game_id)
        return g

    def play(self, request: PlayRequest, now: float | None = None) -> dict:
        """
        Применить ход. Порядок проверок: лимит запросов, сессия, места в партии,
        завершённость партии, очередь хода, занятость клетки.
        Возвращает сообщение и итог, если партия решена.
        """
        now = time.time() if now is None else now
        user_id = request.user_id
        self.rate_limiter.check(user_id, now)
        self.sessions.bind_or_validate(user_id, request.session, now)

        g = self._get_or_create(request.game_id, now)
        movers = g.movers
        if len(movers) >= 2 and user_id not in movers:
            raise GameFull()
        if g.moves and check_game(g.moves).decided:
            raise GameOver()
        if g.last_mover == user_id:
            raise NotYourTurn()
        label = request.cell.label
        if any(m.move == label for m in g.moves):
            raise CellTaken()

        g.moves.append(MoveRecord(username=user_id, move=label, session=request.session))
        g.register(user_id)
        logger.info("Move game=%s user=%s move=%s", g.id, user_id, label)

        result = check_game(g.moves)
        if result.decided:
            g.expires_at = now + self.decided_ttl
            if result.winner and result.loser:
                summary = f"{result.winner} wins. {result.loser} loses."
            elif result.winner:
                summary = f"{result.winner} wins."
            else:
                summary = "It's a tie."
            logger.info("Game decided id=%s winner=%s tie=%s", g.id, result.winner, result.tie)
            return {
                "message": f"Move sent successfully. {summary}",
                "winner": result.winner,
                "loser": result.loser,
                "tie": result.tie,
            }
        g.expires_at = now + self.idle_ttl
        return {"message": "Move sent successfully"}

    def fetch(self, username: str, game_id: str | None = None, now: float | None = None) -> dict:
        if not username:
            raise MissingParameter("Please provide a username")
        now = time.time() if now is None else now
        user_id = username.lower()
        self.rate_limiter.check(user_id, now)
        g = self._get_or_create(game_id or generate_game_id(), now)
        g.register(user_id)
        return game_state_payload(g)

    def sweep(self, now: float) -> int:
        expired = [gid for gid, g in self._games.items() if g.expires_at <= now]
        for gid in expired:
            del self._games[gid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, game_id: str) -> bool:
        return game_id in self._games

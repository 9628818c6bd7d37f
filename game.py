# game.py
from __future__ import annotations
from dataclasses import dataclass
from collections import deque
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

if TYPE_CHECKING:
    from bot import MoveSource

EMPTY, RED, BLUE = 0, 1, 2
NEI = [(0, -1), (0, 1), (1, -1), (1, 0), (-1, 0), (-1, 1)]

CELL_CHARS = {EMPTY: ".", RED: "X", BLUE: "O"}
COLOR_NAMES = {EMPTY: "empty", RED: "red", BLUE: "blue"}


def other(color: int) -> int:
    return RED if color == BLUE else BLUE


@dataclass(frozen=True)
class Move:
    r: int
    c: int

    def __str__(self) -> str:
        return f"{chr(ord('a') + self.c)}{self.r + 1}"


def parse_move(text: str) -> Optional[Move]:
    """Parse "<column letter><row number>" (e.g. "c2") into a Move.

    Returns None for text that is not in that shape. Whether the cell is on
    the board and empty is for HexBoard.is_valid_move to decide.
    """
    text = text.strip().lower()
    if len(text) < 2 or not text[0].isalpha() or not text[1:].isdigit():
        return None
    col = ord(text[0]) - ord("a")
    row = int(text[1:]) - 1
    if col < 0 or col >= 26:
        return None
    return Move(row, col)


class Turn(IntEnum):
    FIRST = 0
    SECOND = 1

    def flipped(self) -> "Turn":
        return Turn.SECOND if self is Turn.FIRST else Turn.FIRST


class GameState(Enum):
    IN_PROGRESS = "in_progress"
    RED_WON = "red_won"
    BLUE_WON = "blue_won"


@dataclass(frozen=True)
class Player:
    name: str
    color: int
    source: "MoveSource"

    @property
    def is_human(self) -> bool:
        return getattr(self.source, "is_human", False)

    def select_move(self, board: "HexBoard") -> Optional[Move]:
        return self.source.select_move(board)


def _adjacency(n: int) -> Tuple[Tuple[int, ...], ...]:
    adj = []
    for i in range(n * n):
        r, c = divmod(i, n)
        out = []
        for dr, dc in NEI:
            nr, nc = r + dr, c + dc
            if 0 <= nr < n and 0 <= nc < n:
                out.append(nr * n + nc)
        adj.append(tuple(out))
    return tuple(adj)


class HexGraph:
    """N×N grid of cell values with hex (6-neighbour) adjacency.

    Cells are stored in a flat row-major list. The neighbour table only
    depends on the size, so copies share it.
    """

    def __init__(self, size: int, value: int = EMPTY):
        self.size = size
        self.nodes: List[int] = [value] * (size * size)
        self.adj = _adjacency(size)

    def copy(self) -> "HexGraph":
        g = HexGraph.__new__(HexGraph)
        g.size = self.size
        g.nodes = self.nodes[:]
        g.adj = self.adj
        return g

    def index(self, cell: Move) -> int:
        return cell.r * self.size + cell.c

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.size and 0 <= c < self.size

    def get(self, cell: Move) -> int:
        return self.nodes[self.index(cell)]

    def set(self, cell: Move, value: int) -> "HexGraph":
        self.nodes[self.index(cell)] = value
        return self

    def neighbors(self, cell: Move, color: int) -> List[Move]:
        n = self.size
        out = []
        for dr, dc in NEI:
            r, c = cell.r + dr, cell.c + dc
            if self.in_bounds(r, c) and self.nodes[r * n + c] == color:
                out.append(Move(r, c))
        return out

    def component(self, source: Move, color: int) -> Set[int]:
        """Flat indices reachable from source through cells of color."""
        start = self.index(source)
        nodes = self.nodes
        if nodes[start] != color:
            return set()
        seen = {start}
        q = deque([start])
        while q:
            u = q.popleft()
            for v in self.adj[u]:
                if v not in seen and nodes[v] == color:
                    seen.add(v)
                    q.append(v)
        return seen

    def is_connected(self, source: Move, destination: Move, color: int) -> bool:
        # source must carry the colour, even when source == destination
        if self.get(source) != color:
            return False
        target = self.index(destination)
        nodes = self.nodes
        seen = {self.index(source)}
        q = deque(seen)
        while q:
            u = q.popleft()
            if u == target:
                return True
            for v in self.adj[u]:
                if v not in seen and nodes[v] == color:
                    seen.add(v)
                    q.append(v)
        return False

    def has_any(self, value: int) -> bool:
        return value in self.nodes


class HexBoard:
    def __init__(self, size: int = 11):
        self.graph = HexGraph(size)
        self.turn = Turn.FIRST
        self.players: Tuple[Optional[Player], Optional[Player]] = (None, None)
        self.last_move: Optional[Move] = None
        self.moves_played: int = 0
        self.winner: int = EMPTY

    @property
    def size(self) -> int:
        return self.graph.size

    def add_players(self, first: Player, second: Player) -> None:
        self.players = (first, second)

    @property
    def active_player(self) -> Player:
        p = self.players[self.turn]
        if p is None:
            raise RuntimeError("players have not been registered")
        return p

    @property
    def active_color(self) -> int:
        return self.active_player.color

    @property
    def state(self) -> GameState:
        if self.winner == RED:
            return GameState.RED_WON
        if self.winner == BLUE:
            return GameState.BLUE_WON
        return GameState.IN_PROGRESS

    def get_cell_value(self, row: int, col: int) -> int:
        return self.graph.nodes[row * self.size + col]

    def empty_cells(self) -> List[Move]:
        n = self.size
        return [Move(i // n, i % n) for i, v in enumerate(self.graph.nodes) if v == EMPTY]

    def is_valid_move(self, cell: Move) -> bool:
        if not self.graph.in_bounds(cell.r, cell.c):
            return False
        return self.graph.get(cell) == EMPTY

    def apply_move(self, cell: Move, color: int) -> None:
        self.graph.set(cell, color)

    def check_win(self, color: int) -> bool:
        n = self.size
        g = self.graph
        if color == RED:
            # top -> bottom
            sources = [Move(0, c) for c in range(n)]
            goal = set(range((n - 1) * n, n * n))
        elif color == BLUE:
            # left -> right
            sources = [Move(r, 0) for r in range(n)]
            goal = set(range(n - 1, n * n, n))
        else:
            return False

        seen: Set[int] = set()
        for s in sources:
            if g.index(s) in seen:
                continue
            comp = g.component(s, color)
            if comp & goal:
                return True
            seen |= comp
        return False

    def is_over(self) -> bool:
        return self.check_win(RED) or self.check_win(BLUE)

    def has_empty_cell(self) -> bool:
        return self.graph.has_any(EMPTY)

    def switch_turn(self) -> Player:
        self.turn = self.turn.flipped()
        return self.active_player

    def play(self, mv: Move) -> bool:
        if self.winner != EMPTY:
            return False
        if not self.is_valid_move(mv):
            return False

        p = self.active_player
        self.apply_move(mv, p.color)
        self.last_move = mv
        self.moves_played += 1

        if self.check_win(p.color):
            self.winner = p.color
        else:
            self.switch_turn()
        return True

    def clone(self) -> "HexBoard":
        b = HexBoard.__new__(HexBoard)
        b.graph = self.graph.copy()
        b.turn = self.turn
        b.players = self.players
        b.last_move = self.last_move
        b.moves_played = self.moves_played
        b.winner = self.winner
        return b

    def __str__(self) -> str:
        n = self.size
        letters = [chr(ord("a") + c) for c in range(n)]
        lines = ["   " + "   ".join(letters)]
        for r in range(n):
            indent = " " * (2 * r)
            cells = " - ".join(CELL_CHARS[self.get_cell_value(r, c)] for c in range(n))
            lines.append(f"{indent}{r + 1:>2} {cells} {r + 1}")
            if r < n - 1:
                lines.append(f"{indent}    " + " / ".join(["\\"] * n))
        lines.append(" " * (2 * (n - 1) + 3) + "   ".join(letters))
        return "\n".join(lines)

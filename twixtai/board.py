"""Twixt board: peg placement, link building and winner detection."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum


class Player(IntEnum):
    """Owner of a hole on the board."""

    NONE = 0
    RED = 1
    BLACK = 2

    def opponent(self) -> Player:
        """The player who moves after this one."""
        return Player.BLACK if self is Player.RED else Player.RED


class Outcome(Enum):
    """State of a game after a move."""

    ONGOING = 0
    RED_WINS = 1
    BLACK_WINS = 2
    DRAW = 3


@dataclass(frozen=True)
class Position:
    """A hole on the board: x is the column, y the row."""

    x: int
    y: int


# Knight-move offsets; a link in direction k is stored as bit k of Node.links,
# and direction (k + 4) % 8 is the opposite one.
DELTAS: tuple[Position, ...] = (
    Position(1, -2),
    Position(2, -1),
    Position(2, 1),
    Position(1, 2),
    Position(-1, 2),
    Position(-2, 1),
    Position(-2, -1),
    Position(-1, -2),
)


@dataclass
class Node:
    """Contents of one hole: its peg owner and a bitmask of links."""

    player: Player = Player.NONE
    links: int = 0


def _shift(position: Position, delta: Position) -> Position:
    return Position(position.x + delta.x, position.y + delta.y)


def _ccw(p1: Position, p2: Position, p3: Position) -> bool:
    return (p3.y - p1.y) * (p2.x - p1.x) > (p2.y - p1.y) * (p3.x - p1.x)


def _segments_cross(a1: Position, a2: Position, b1: Position, b2: Position) -> bool:
    return _ccw(a1, b1, b2) != _ccw(a2, b1, b2) and _ccw(a1, a2, b1) != _ccw(a1, a2, b2)


class Board:
    """A square Twixt board.

    Red connects the top row to the bottom row and may not play in the
    leftmost or rightmost column; Black connects the left column to the
    right column and may not play in the top or bottom row.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"board size must be positive, got {size}")
        self.size = size
        self.nodes = [Node() for _ in range(size * size)]
        self.placed_moves = 0

    def __repr__(self) -> str:
        return f"Board(size={self.size}, placed_moves={self.placed_moves})"

    def copy(self) -> Board:
        """An independent copy of this board."""
        other = Board(self.size)
        other.nodes = [Node(node.player, node.links) for node in self.nodes]
        other.placed_moves = self.placed_moves
        return other

    def _contains(self, position: Position) -> bool:
        return 0 <= position.x < self.size and 0 <= position.y < self.size

    def _in_player_bounds(self, player: Player, position: Position) -> bool:
        if player is Player.RED:
            return position.x not in (0, self.size - 1)
        return position.y not in (0, self.size - 1)

    def peek(self, position: Position) -> Node:
        """The node at a position; it is live, not a copy."""
        if not self._contains(position):
            raise IndexError(f"{position} is outside a board of size {self.size}")
        return self.nodes[position.y * self.size + position.x]

    def has_link(self, position: Position, direction: int) -> bool:
        """Whether the peg at position has a link in the given direction."""
        return bool(self.peek(position).links & (1 << direction))

    def available_moves(self, player: Player) -> list[Position]:
        """Empty holes the player may use, column by column."""
        return [
            position
            for x in range(self.size)
            for y in range(self.size)
            if self._in_player_bounds(player, position := Position(x, y))
            and self.peek(position).player is Player.NONE
        ]

    def random_move(self, player: Player, rng: random.Random | None = None) -> Position:
        """A uniformly chosen empty hole, or Position(-1, -1) if none is left.

        Any empty hole may be chosen, including ones outside the player's
        bounds.
        """
        empty = [
            Position(index % self.size, index // self.size)
            for index, node in enumerate(self.nodes)
            if node.player is Player.NONE
        ]
        if not empty:
            return Position(-1, -1)
        source = rng if rng is not None else random
        return empty[source.randrange(len(empty))]

    def play(self, player: Player, position: Position) -> bool:
        """Place a peg and build its links; False if the move is illegal."""
        if (
            not self._contains(position)
            or self.peek(position).player is not Player.NONE
            or not self._in_player_bounds(player, position)
        ):
            return False
        self.peek(position).player = player
        for direction in range(len(DELTAS)):
            self._link(position, direction)
        self.placed_moves += 1
        return True

    def _link(self, start: Position, direction: int) -> bool:
        end = _shift(start, DELTAS[direction])
        if not self._contains(start) or not self._contains(end):
            return False
        start_node, end_node = self.peek(start), self.peek(end)
        if start_node.player is not end_node.player:
            return False
        if self._crosses_opponent_link(start, end):
            return False
        start_node.links |= 1 << direction
        end_node.links |= 1 << ((direction + 4) % 8)
        return True

    def _crosses_opponent_link(self, p1: Position, p2: Position) -> bool:
        owner = self.peek(p1).player
        low_x = max(min(p1.x, p2.x) - 1, 0)
        high_x = min(max(p1.x, p2.x) + 1, self.size - 1)
        low_y = max(min(p1.y, p2.y) - 1, 0)
        high_y = min(max(p1.y, p2.y) + 1, self.size - 1)
        for x in range(low_x, high_x + 1):
            for y in range(low_y, high_y + 1):
                current = Position(x, y)
                node = self.peek(current)
                if node.player is owner:
                    continue
                for direction, delta in enumerate(DELTAS):
                    other = _shift(current, delta)
                    if (
                        self._contains(other)
                        and node.links & (1 << direction)
                        and _segments_cross(p1, p2, current, other)
                    ):
                        return True
        return False

    def _reaches_goal(self, player: Player, start: Position) -> bool:
        visited = {start}
        stack = [start]
        while stack:
            position = stack.pop()
            if player is Player.BLACK and position.x == self.size - 1:
                return True
            if player is Player.RED and position.y == self.size - 1:
                return True
            links = self.peek(position).links
            for direction, delta in enumerate(DELTAS):
                if not links & (1 << direction):
                    continue
                neighbour = _shift(position, delta)
                if (
                    not self._contains(neighbour)
                    or neighbour in visited
                    or self.peek(neighbour).player is not player
                ):
                    continue
                visited.add(neighbour)
                stack.append(neighbour)
        return False

    def check_winner(self) -> Outcome:
        """The outcome of the game in its current state."""
        for i in range(1, self.size - 1):
            top = Position(i, 0)
            if self.peek(top).player is Player.RED and self._reaches_goal(Player.RED, top):
                return Outcome.RED_WINS
            left = Position(0, i)
            if self.peek(left).player is Player.BLACK and self._reaches_goal(Player.BLACK, left):
                return Outcome.BLACK_WINS
        if self.placed_moves == self.size * self.size - 4:
            return Outcome.DRAW
        return Outcome.ONGOING
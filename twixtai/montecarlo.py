"""Monte Carlo tree search for choosing Twixt moves."""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from twixtai.board import Board, Outcome, Player, Position

logger = logging.getLogger(__name__)

_WIN_VALUE = 5
_DRAW_VALUE = -1
_LOSS_VALUE = -5


@dataclass(eq=False)
class Tree:
    """A search node: the move that leads to it and its statistics."""

    move: Position = Position(0, 0)
    prior: float = 0.5
    visits: int = 0
    wins: int = 0
    children: list[Tree] = field(default_factory=list)

    def action_value(self) -> float:
        """Win ratio plus a prior bonus that shrinks with visits."""
        if self.visits > 0:
            return self.wins / self.visits + self.prior / (1.0 + self.visits)
        return self.prior

    def most_visited(self) -> Tree:
        """The child with the most visits; the first one wins ties."""
        if not self.children:
            raise ValueError("tree has no children")
        return max(self.children, key=lambda child: child.visits)

    def best_action(self) -> Tree:
        """The child with the highest action value; the first one wins ties."""
        if not self.children:
            raise ValueError("tree has no children")
        return max(self.children, key=Tree.action_value)


def outcome_value(outcome: Outcome, player: Player) -> int:
    """Score of an outcome from the point of view of a player."""
    if (outcome is Outcome.RED_WINS and player is Player.RED) or (
        outcome is Outcome.BLACK_WINS and player is Player.BLACK
    ):
        return _WIN_VALUE
    if outcome is Outcome.DRAW:
        return _DRAW_VALUE
    if outcome is Outcome.ONGOING:
        return 0
    return _LOSS_VALUE


def playout(board: Board, player: Player, rng: random.Random | None = None) -> Outcome:
    """Play random moves on the board until the game ends.

    An illegal random move ends the playout as a draw.
    """
    while True:
        if not board.play(player, board.random_move(player, rng)):
            return Outcome.DRAW
        outcome = board.check_winner()
        if outcome is not Outcome.ONGOING:
            return outcome
        player = player.opponent()


def _descend(
    board: Board,
    tree: Tree,
    optimist: Player,
    player: Player,
    rng: random.Random,
    lock: threading.Lock,
) -> Outcome:
    path: list[Tree] = []
    node = tree
    while True:
        with lock:
            if not node.children:
                break
            child = node.best_action()
            # A provisional loss steers concurrent descents elsewhere.
            child.wins -= _WIN_VALUE
            child.visits += 1
        board.play(player, child.move)
        path.append(child)
        node = child
        player = player.opponent()
    outcome = playout(board, player, rng)
    value = outcome_value(outcome, optimist)
    with lock:
        for child in path:
            child.wins += _WIN_VALUE + value
    return outcome


def _shuffle(children: list[Tree], rng: random.Random) -> None:
    for i in range(len(children)):
        j = rng.randrange(i + 1)
        children[i], children[j] = children[j], children[i]


def _expand(board: Board, tree: Tree, player: Player, rng: random.Random) -> None:
    node = tree
    while node.children:
        node = node.most_visited()
        board.play(player, node.move)
        player = player.opponent()
    node.children = [Tree(move=move) for move in board.available_moves(player)]
    _shuffle(node.children, rng)


def _step(board: Board, tree: Tree, player: Player, threads: int, rng: random.Random) -> None:
    lock = threading.Lock()
    seeds = [rng.getrandbits(64) for _ in range(threads)]
    with ThreadPoolExecutor(max_workers=threads) as pool:
        futures = [
            pool.submit(_descend, board.copy(), tree, player, player, random.Random(seed), lock)
            for seed in seeds
        ]
        for future in futures:
            future.result()
    _expand(board.copy(), tree, player, rng)


def search(
    board: Board,
    tree: Tree,
    player: Player,
    steps: int = 20,
    threads: int = 20,
    rng: random.Random | None = None,
) -> tuple[Position, Tree]:
    """Search for the player's move; returns it with its subtree.

    The board is left untouched. The subtree should be kept as the root
    of the next search.
    """
    if threads < 1:
        raise ValueError(f"threads must be at least 1, got {threads}")
    source = rng if rng is not None else random.Random()
    for index in range(steps):
        _step(board, tree, player, threads, source)
        logger.info("Stepped %d/%d", index + 1, steps)
    best = tree.most_visited()
    return best.move, best


def advance_tree(tree: Tree, move: Position) -> Tree:
    """The subtree for a move that was played, or a fresh one if unexplored."""
    for child in tree.children:
        if child.move == move:
            return child
    return Tree(move=move)
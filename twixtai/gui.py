"""Window for playing Twixt as red against the search."""

from __future__ import annotations

import argparse
import logging
import random

from twixtai.board import DELTAS, Board, Outcome, Player, Position
from twixtai.montecarlo import Tree, advance_tree, search

CELL_SIZE = 35
PEG_RADIUS = 9
HOLE_RADIUS = 5
BORDER_OFFSET = 1
BOARD_SIZE = 12

_BACKGROUND = "#C0C0C0"
_HOLE_COLOUR = "#A2A2A2"
_BAR_WIDTH = 5
_LINK_WIDTH = 3
_GHOST_STIPPLE = "gray25"

_RESULT_TEXT = {
    Outcome.RED_WINS: "red",
    Outcome.BLACK_WINS: "black",
    Outcome.DRAW: "draw",
}


def _centre(index: int) -> int:
    return (index + BORDER_OFFSET) * CELL_SIZE


def peg_at(x: float, y: float) -> Position | None:
    """The hole whose peg covers a pixel, or None."""
    px, py = int(x), int(y)
    i = round(px / CELL_SIZE) - BORDER_OFFSET
    j = round(py / CELL_SIZE) - BORDER_OFFSET
    if not (0 <= i < BOARD_SIZE and 0 <= j < BOARD_SIZE):
        return None
    if (px - _centre(i)) ** 2 + (py - _centre(j)) ** 2 <= PEG_RADIUS**2:
        return Position(i, j)
    return None


class GameOver(Exception):
    """Raised when a move ends the game."""

    def __init__(self, outcome: Outcome) -> None:
        super().__init__(_RESULT_TEXT[outcome])
        self.outcome = outcome


class GameSession:
    """A game of a human playing red against the search playing black."""

    def __init__(
        self,
        size: int = BOARD_SIZE,
        steps: int = 20,
        threads: int = 20,
        rng: random.Random | None = None,
    ) -> None:
        self.board = Board(size)
        self.tree = Tree()
        self.steps = steps
        self.threads = threads
        self.rng = rng if rng is not None else random.Random()

    def _raise_if_over(self) -> None:
        outcome = self.board.check_winner()
        if outcome is not Outcome.ONGOING:
            raise GameOver(outcome)

    def human_move(self, position: Position) -> bool:
        """Play red at a position and let black reply; False if red's move is illegal."""
        if not self.board.play(Player.RED, position):
            return False
        self._raise_if_over()
        self.tree = advance_tree(self.tree, position)
        self.ai_move()
        return True

    def ai_move(self) -> Position:
        """Search for black's move, play it and return it."""
        move, self.tree = search(
            self.board, self.tree, Player.BLACK, self.steps, self.threads, self.rng
        )
        self.board.play(Player.BLACK, move)
        self._raise_if_over()
        return move

    def hover_links(self, position: Position) -> list[Position] | None:
        """Red pegs a red peg at position would reach by a knight move.

        None if red could not place a preview peg there at all.
        """
        size = self.board.size
        if not (0 <= position.x < size and 0 <= position.y < size):
            return None
        if position.x in (0, size - 1):
            return None
        node = self.board.peek(position)
        if node.player is not Player.NONE:
            return None
        targets = []
        for direction, delta in enumerate(DELTAS):
            target = Position(position.x + delta.x, position.y + delta.y)
            if not (0 <= target.x < size and 0 <= target.y < size):
                continue
            if node.links & (1 << direction):
                continue
            if self.board.peek(target).player is Player.RED:
                targets.append(target)
        return targets


class TwixtApp:
    """A window showing the board and taking red's moves from the mouse."""

    def __init__(self, session: GameSession | None = None) -> None:
        import tkinter

        self.session = session if session is not None else GameSession()
        self.cursor: Position | None = None
        self.result: Outcome | None = None
        self.root = tkinter.Tk()
        self.root.title("Twixt")
        self.extent = (self.session.board.size + 2) * CELL_SIZE
        self.canvas = tkinter.Canvas(
            self.root, width=self.extent, height=self.extent, highlightthickness=0
        )
        self.canvas.pack(fill=tkinter.BOTH, expand=True)
        self.canvas.bind("<Button-1>", self._on_click)
        self.canvas.bind("<Motion>", self._on_motion)
        self.redraw()

    def run(self) -> Outcome | None:
        """Run until the window closes; the outcome if the game ended."""
        self.root.mainloop()
        return self.result

    def _on_click(self, event) -> None:
        print(f"clicked : {event.x},{event.y}")
        position = peg_at(event.x, event.y)
        try:
            if position is None or not self.session.human_move(position):
                self.session.ai_move()
        except GameOver as over:
            print(over)
            self.result = over.outcome
            self.redraw()
            self.root.destroy()
            return
        self.redraw()

    def _on_motion(self, event) -> None:
        self.cursor = peg_at(event.x, event.y)
        self.redraw()

    def _circle(self, x: float, y: float, radius: float, colour: str, **options) -> None:
        self.canvas.create_oval(
            x - radius, y - radius, x + radius, y + radius, fill=colour, outline="", **options
        )

    def redraw(self) -> None:
        """Draw the board, pegs, links and the hover preview."""
        canvas = self.canvas
        board = self.session.board
        extent = self.extent
        far = extent - 2 * CELL_SIZE
        near = BORDER_OFFSET * CELL_SIZE
        canvas.delete("all")
        canvas.create_rectangle(0, 0, extent, extent, fill=_BACKGROUND, outline="")

        canvas.create_line(near, 0, near, extent, fill="black", width=_BAR_WIDTH)
        canvas.create_line(far, 0, far, extent, fill="black", width=_BAR_WIDTH)
        canvas.create_line(0, near, extent, near, fill="red", width=_BAR_WIDTH)
        canvas.create_line(0, far, extent, far, fill="red", width=_BAR_WIDTH)

        positions = [
            (Position(index % board.size, index // board.size), node)
            for index, node in enumerate(board.nodes)
        ]
        for position, _ in positions:
            self._circle(_centre(position.x), _centre(position.y), HOLE_RADIUS, _HOLE_COLOUR)
        for position, node in positions:
            if node.player is Player.RED:
                self._circle(_centre(position.x), _centre(position.y), PEG_RADIUS, "red")
            elif node.player is Player.BLACK:
                self._circle(_centre(position.x), _centre(position.y), PEG_RADIUS, "black")

        if self.cursor is not None:
            targets = self.session.hover_links(self.cursor)
            if targets is not None:
                cx, cy = _centre(self.cursor.x), _centre(self.cursor.y)
                self._circle(cx, cy, PEG_RADIUS, "red", stipple=_GHOST_STIPPLE)
                for target in targets:
                    canvas.create_line(
                        cx, cy, _centre(target.x), _centre(target.y),
                        fill="red", width=_LINK_WIDTH, stipple=_GHOST_STIPPLE,
                    )

        # Each link is stored at both ends; the first four directions draw it once.
        for position, node in positions:
            colour = "red" if node.player is Player.RED else "black"
            for direction, delta in enumerate(DELTAS[:4]):
                if node.links & (1 << direction):
                    canvas.create_line(
                        _centre(position.x), _centre(position.y),
                        _centre(position.x + delta.x), _centre(position.y + delta.y),
                        fill=colour, width=_LINK_WIDTH,
                    )


def main(argv: list[str] | None = None) -> int:
    """Open the game window; exit status 1 once a game has ended."""
    parser = argparse.ArgumentParser(
        prog="twixtai", description="Play Twixt as red against the computer."
    )
    parser.add_argument("--steps", type=int, default=20, help="search steps per move")
    parser.add_argument("--threads", type=int, default=20, help="descents per step")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[LOG] %(message)s")
    session = GameSession(
        steps=args.steps, threads=args.threads, rng=random.Random(args.seed)
    )
    app = TwixtApp(session)
    return 1 if app.run() is not None else 0
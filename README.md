# twixtai

A TwixT engine for Python: board rules with automatic link building, a
Monte Carlo tree search opponent, a reader for game records with TwixtLive
metadata, and a Zobrist-hashed pattern table that counts moves from
recorded games. It also comes with a small desktop board (built on
tkinter) where you play Red against the computer.

## Playing

```
twixtai
```

This opens a 12×12 board. You play Red and connect the top and bottom
rows; you may not place pegs in the leftmost or rightmost column. The
computer plays Black and connects the left and right columns.

- Click a hole to place a peg. The computer then searches and answers.
- Clicking anywhere that is not a hole you may legally play lets the
  computer move instead.
- Hovering over an empty hole you could play shows a faint peg there and
  faint lines to your pegs a knight's move away.
- Each click prints its pixel coordinates; each search step is logged as
  `[LOG] Stepped n/m`.
- When a player connects their edges, or every hole except the four
  corners is taken, the result (`red`, `black` or `draw`) is printed, the
  window closes and the command exits with status 1.

Options:

- `--steps N`: search steps per computer move (default 20).
- `--threads N`: parallel descents per step (default 20).
- `--seed N`: seed for the search's random numbers.

## Using the library

### `twixtai.board`

`Board(size)` holds `Node`s, each with a `player` (`Player.NONE`, `RED` or
`BLACK`) and a `links` bitmask over the eight knight-move directions.

- `Board.play(player, position)` places a peg at a `Position(x, y)` and
  links it to every same-coloured peg a knight's move away, unless an
  opposing link crosses the way. It returns `False` for an occupied,
  off-board or out-of-bounds hole.
- `Board.check_winner()` returns an `Outcome`: `ONGOING`, `RED_WINS`,
  `BLACK_WINS` or `DRAW`.
- `Board.available_moves(player)` lists the empty holes a player may use.
- `Board.random_move(player, rng=None)` picks any empty hole, or
  `Position(-1, -1)` when the board is full.
- `Board.peek(position)`, `Board.has_link(position, direction)` and
  `Board.copy()` inspect and duplicate a board. `Player.opponent()` gives
  the other colour.

### `twixtai.montecarlo`

```python
from twixtai.board import Board, Player, Position
from twixtai.montecarlo import Tree, search, advance_tree

board = Board(12)
tree = Tree()
board.play(Player.RED, Position(5, 5))
tree = advance_tree(tree, Position(5, 5))
move, tree = search(board, tree, Player.BLACK, steps=5, threads=4)
board.play(Player.BLACK, move)
```

`search` leaves the board untouched and returns the chosen move with its
subtree, to be reused as the root of the next search. `playout` plays
random moves to the end of a game and `outcome_value` scores an outcome
for a player.

### `twixtai.serializer`

`parse_game(text)` reads a record of the form
`<size>,[metadata,]<moves>` into a `Game` holding `Move`s and, if present,
`TwixtLiveMetadata`:

```python
from twixtai.serializer import parse_game

game = parse_game("24,twixtlive,i123,t456,w7,b8,R[A5],B[B10],BR")
```

A peg move is a player letter followed by `[<letters><number>]`: the
letters count in base 26 (A is 1, first letter least significant) and give
the peg's y, the number its x. A player letter followed by `R` is a
resignation and by `W` a win; parsing stops there. Malformed input raises
`SerializationError`. `parse_metadata`, `parse_twixtlive_metadata`,
`serialize_metadata` and `TwixtLiveMetadata.serialize()` handle the
metadata on its own.

### `twixtai.zobrist`

`Zobrist(table_size, zoom_count)` keeps, for each zoom radius, a table of
`Observation`s indexed by a hash of the pegs around a hole.

- `Zobrist.populate(game)` replays a `Game` and counts its peg moves in
  pairs.
- `Zobrist.evaluate(position, player, board)` returns the chosen-to-visited
  ratio at the widest radius with data, or raises `LookupError`.
- `Zobrist.to_bytes()` and `Zobrist.from_bytes(data)` save and load the
  tables.

`neighbourhood_hash`, `make_bitstrings`, `bitstring_index`,
`position_index` and `positions_for_zoom` expose the hashing itself.

### `twixtai.pcg`

`Pcg64.seeded(state, inc)` builds a deterministic PCG64-DXSM generator;
`pull()` returns the next 64-bit value. It supplies the Zobrist
bitstrings.

## What it does not do

- Game records can be read but not written back out; only metadata has a
  text form.
- The swap rule is not played: swap entries in a record are skipped.
- The pattern table is not used by the search; the computer's moves come
  from random playouts alone.

## Running the tests

Install the package with its `test` extra, then run `pytest` from the
project directory.
# funnygame

A small arcade game that runs in your terminal. You move the `P` around a
15×15 board and eat apples before the clock runs out.

## Installing

```
pip install .
```

## Playing

```
funnygame
```

The command takes no options apart from `--help`. It opens the main menu.
Press Enter to start a round. The clock starts once you make your first
move.

- `w` `a` `s` `d` or the arrow keys move the player. The player keeps
  moving only while a key is held or repeated; each frame uses the last key
  read.
- `p` pauses the game. Press `p` again to carry on. The clock does not run
  while the game is paused.
- After a round ends, press `e` to play again or `q` to quit.
- Ctrl+C leaves the game at any point and puts the terminal back in order.

You start with 15 seconds on the clock. The round ends when the time runs
out, when your score drops below zero, or when you reach 100 apples, which
wins the game. The result screen shows your score and the game time spent.

### Apples

| Apple   | Effect                                                              |
|---------|---------------------------------------------------------------------|
| good    | +1 point, +0.5 s                                                    |
| bad     | −1 point, −0.5 s; only that apple is removed                        |
| special | +5 points, +2.5 s                                                   |
| mystery | equal odds of +5 points and +2.5 s, or −3 points and −1.5 s         |
| time    | no points; the clock runs at half speed for about 5 seconds of play |

When you eat any apple except a bad one, the board is cleared and a new set
is placed: one good apple, four to six bad ones, and sometimes a special
(1 in 20), mystery (1 in 10) or time (1 in 20) apple. New apples never land
on top of another apple or within 2.5 cells of the player.

## Limits

- The game needs a terminal that understands ANSI escape codes and a POSIX
  keyboard interface, such as a Linux or macOS terminal. There is no
  support for the Windows console.
- Scores are not saved between runs; there is no high-score table.
- The board size, starting time and winning score are fixed.

## Using the engine

`funnygame.engine` holds the drawing parts the game is built on, and you
can use them in other programs:

- `Terminal` writes colours, cursor moves and screen clears to an output
  stream, and reads keys from an input stream. `wait_for_key()` blocks for
  a key and `get_key()` returns a pending key or `None`; arrow keys come
  back as the final byte of their escape sequence. `Terminal.raw_mode()` is
  a context manager that turns off line buffering and echo while it is
  active, when the input is a terminal.
- `Pixel` is one coloured character cell. `Color` names the ANSI colour
  codes and `Key` names the characters that special keys produce.
- `Board` is a grid of pixels with `write`, `erase`, `pixel_at` and
  `clear`. `Board.draw()` redraws only the cells that changed since the
  last draw.
- `dist`, `rand_int` and `delay` are small helper functions.

```python
import io
from funnygame.engine import Board, Color, Pixel, Terminal

out = io.StringIO()
term = Terminal(out, io.StringIO())
board = Board(5, 3, Pixel("-", Color.LIGHT_GRAY, Color.LIGHT_GRAY), term)
board.write(1, 2, Pixel("P", Color.LIGHT_GREEN, Color.LIGHT_GREEN))
board.draw(0, False)
print(board.pixel_at(1, 2))
```

`funnygame.game` holds the game itself: `Apple`, `Player`, `AppleManager`,
`apple_effect`, the header and menu display functions, `play_round` and the
`main` entry point.

## Running the tests

```
pip install ".[test]"
pytest
```
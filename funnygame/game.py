"""The apple-collecting game: apples, the player, scoring and the round loop."""

from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from typing import Iterable, Optional

from funnygame.engine import (
    Board,
    Color,
    Key,
    Pixel,
    Terminal,
    delay,
    dist,
    rand_int,
)

BOARD_SIZE = 15
HEADER_HEIGHT = 2
START_TIME_MS = 15000
SCORE_MAX = 100
FRAME_MS = 16
SPAWN_CLEARANCE = 2.5

BACKGROUND = Pixel("-", Color.LIGHT_GRAY, Color.LIGHT_GRAY)
PLAYER_FACE = Pixel("P", Color.LIGHT_GREEN, Color.LIGHT_GREEN)
DEATH_FACE = Pixel("d", Color.PURPLE, Color.PURPLE)

_APPLE_COLORS = {
    "g": Color.LIGHT_BLUE,
    "b": Color.LIGHT_RED,
    "s": Color.LIGHT_YELLOW,
    "m": Color.GRAY,
    "t": Color.MAGENTA,
}

_ARROWS = {Key.UP: "w", Key.DOWN: "s", Key.RIGHT: "d", Key.LEFT: "a"}


@dataclass(frozen=True)
class Apple:
    """An apple of a given kind at a board position."""

    row: int
    col: int
    kind: str = "g"

    def __post_init__(self) -> None:
        if self.kind not in _APPLE_COLORS:
            raise ValueError(f"unknown apple kind {self.kind!r}")

    @property
    def face(self) -> Pixel:
        colour = _APPLE_COLORS[self.kind]
        return Pixel(self.kind, colour, colour)


class Player:
    """The player's character, which keeps itself drawn on the board."""

    def __init__(self, board: Board, row: int, col: int, face: Pixel):
        self.board = board
        self.row = row
        self.col = col
        self.face = face
        self.length = 0
        board.write(row, col, face)

    def move(self, key: Optional[str]) -> None:
        """Move one cell in the wasd direction given, never leaving the board."""
        self.board.erase(self.row, self.col)
        if key == "w" and self.row > 0:
            self.row -= 1
        elif key == "s" and self.row < self.board.height - 1:
            self.row += 1
        elif key == "a" and self.col > 0:
            self.col -= 1
        elif key == "d" and self.col < self.board.length - 1:
            self.col += 1
        self.board.write(self.row, self.col, self.face)


class AppleManager:
    """Keeps the apples on the board and in step with it."""

    def __init__(self, board: Board, rng: Optional[random.Random] = None):
        self.board = board
        self.rng = rng
        self.apples: list[Apple] = []

    def _can_spawn(self, player: Player, row: int, col: int) -> bool:
        return (not self.on_apple(row, col)
                and dist(player.col, player.row, col, row) > SPAWN_CLEARANCE)

    def spawn(self, player: Player, kind: str) -> Apple:
        """Place a new apple away from the player and off other apples."""
        if not any(self._can_spawn(player, row, col)
                   for row in range(self.board.height)
                   for col in range(self.board.length)):
            raise ValueError("no free position to spawn an apple")
        while True:
            row = rand_int(self.board.height - 1, self.rng)
            col = rand_int(self.board.length - 1, self.rng)
            if self._can_spawn(player, row, col):
                break
        apple = Apple(row, col, kind)
        self.apples.append(apple)
        self.board.write(apple.row, apple.col, apple.face)
        return apple

    def remove(self, apple: Apple) -> None:
        """Delete an apple and erase it from the board."""
        if apple in self.apples:
            self.apples.remove(apple)
        self.board.erase(apple.row, apple.col)

    def pop(self) -> Apple:
        """Remove and return the most recently added apple."""
        if not self.apples:
            raise IndexError("pop from an empty apple list")
        apple = self.apples.pop()
        self.board.erase(apple.row, apple.col)
        return apple

    def clear(self) -> None:
        """Remove every apple from the list and the board."""
        for apple in self.apples:
            self.board.erase(apple.row, apple.col)
        self.apples.clear()

    def on_apple(self, row: int, col: int) -> bool:
        return any(a.row == row and a.col == col for a in self.apples)

    def apple_at(self, row: int, col: int) -> Apple:
        for apple in self.apples:
            if apple.row == row and apple.col == col:
                return apple
        raise ValueError("received invalid apple coordinates")

    def respawn(self, player: Player) -> None:
        """Replace all apples with a fresh set, sometimes with special ones."""
        self.clear()
        self.spawn(player, "g")
        for _ in range(rand_int(2, self.rng) + 4):
            self.spawn(player, "b")
        if rand_int(19, self.rng) == 19:
            self.spawn(player, "s")
        if rand_int(9, self.rng) == 9:
            self.spawn(player, "m")
        if rand_int(19, self.rng) == 19:
            self.spawn(player, "t")


@dataclass(frozen=True)
class Effect:
    """What eating an apple does to the score and the clock."""

    score_change: int
    time_change_ms: int
    time_slow_ms: int = 0


def apple_effect(kind: str, rng: Optional[random.Random] = None) -> Effect:
    """Return the effect of eating an apple of the given kind."""
    if kind == "g":
        return Effect(1, 500)
    if kind == "b":
        return Effect(-1, -500)
    if kind == "s":
        return Effect(5, 2500)
    if kind == "m":
        return Effect(5, 2500) if rand_int(1, rng) else Effect(-3, -1500)
    if kind == "t":
        return Effect(0, 0, 5000)
    raise ValueError(f"unknown apple kind {kind!r}")


def convert_to_wasd(key: Optional[str]) -> Optional[str]:
    """Map arrow keys to their wasd equivalents; other keys pass through."""
    for arrow, letter in _ARROWS.items():
        if key == arrow:
            return letter
    return key


def _score_parts(score: int, score_change: int) -> tuple[str, str]:
    change = f" {score_change:+4d}" if score_change else "      Last Collected"
    return f"Score: {score:3d}", change


def _time_parts(time_ms: int, time_change_ms: int) -> tuple[str, str]:
    change = f" {time_change_ms / 1000:+03.1f}" if time_change_ms else "     "
    return f"Time: {time_ms / 1000:4.1f}", change


def format_score_line(score: int, score_change: int) -> str:
    """The score line of the header, without colours."""
    return "".join(_score_parts(score, score_change))


def format_time_line(time_ms: int, time_change_ms: int) -> str:
    """The time line of the header, without colours."""
    return "".join(_time_parts(time_ms, time_change_ms))


def _write_change(terminal: Terminal, text: str, change: int) -> None:
    if change < 0:
        terminal.color(Color.BLACK, Color.LIGHT_RED)
    elif change > 0:
        terminal.color(Color.BLACK, Color.LIGHT_BLUE)
    terminal.write(text)


def display_header(terminal: Terminal, score: int, score_change: int,
                   time_ms: int, time_change_ms: int) -> None:
    """Draw the score and time lines above the board."""
    terminal.set_cursor_pos(0, 0)
    base, change = _score_parts(score, score_change)
    terminal.write(base)
    _write_change(terminal, change + "\n", score_change)
    terminal.reset_color()

    base, change = _time_parts(time_ms, time_change_ms)
    terminal.write(base)
    _write_change(terminal, change, time_change_ms)
    terminal.reset_color()


def display_main_menu(terminal: Terminal) -> None:
    """Draw the title, the apple legend and the controls."""
    dashes = "-" * ((BOARD_SIZE * 2 - 10) // 2)
    terminal.color(Color.LIGHT_BLUE, Color.LIGHT_BLUE)
    terminal.write(dashes)
    terminal.color(Color.LIGHT_GRAY, Color.LIGHT_BLUE)
    terminal.write("funny")
    terminal.color(Color.LIGHT_GRAY, Color.LIGHT_RED)
    terminal.write(" game")
    terminal.color(Color.LIGHT_RED, Color.LIGHT_RED)
    terminal.write(dashes)
    terminal.write("\n\n")

    legend = [
        ("g", Color.LIGHT_BLUE, "good apple"),
        ("b", Color.LIGHT_RED, "bad apple"),
        ("s", Color.LIGHT_YELLOW, "special apple"),
        ("t", Color.MAGENTA, "time apple"),
        ("m", Color.LIGHT_GRAY, "mystery apple"),
    ]
    for kind, colour, label in legend:
        terminal.draw_pixel(Apple(0, 0, kind).face)
        terminal.write(" ")
        terminal.color(Color.BLACK, colour)
        terminal.write(f": {label}\n\n")

    terminal.reset_color()
    terminal.write("wasd/arrows to move\n")
    terminal.write("p to pause\n\n")
    terminal.color(Color.BLACK, Color.CYAN)
    terminal.write("press enter to play\n")
    terminal.flush()


def _wait_for(terminal: Terminal, accepted: Iterable[str],
              convert: bool = False) -> str:
    wanted = set(accepted)
    while True:
        key = terminal.wait_for_key()
        if key is None:
            raise EOFError("keyboard input ended")
        if convert:
            key = convert_to_wasd(key)
        if key in wanted:
            return key


def _spawn_initial(apples: AppleManager, player: Player,
                   rng: Optional[random.Random]) -> None:
    apples.spawn(player, "g")
    for _ in range(rand_int(2, rng) + 4):
        apples.spawn(player, "b")


def _show_result(terminal: Terminal, score: int, spent_time_ms: int) -> None:
    delay(500)
    if score >= SCORE_MAX:
        terminal.color(Color.GRAY, Color.LIGHT_BLUE)
        terminal.write("GAME WON!")
    else:
        terminal.color(Color.GRAY, Color.LIGHT_RED)
        terminal.write("GAME OVER")
    terminal.reset_color()
    terminal.write("\n")

    delay(500)
    terminal.write("You got ")
    terminal.color(Color.BLACK, Color.LIGHT_BLUE)
    terminal.write(str(score))
    terminal.reset_color()
    terminal.write(" apples\n")

    delay(500)
    terminal.write("In ")
    terminal.color(Color.BLACK, Color.LIGHT_BLUE)
    terminal.write(f"{spent_time_ms / 1000:g}")
    terminal.reset_color()
    terminal.write(" seconds\n\n")
    delay(500)


def play_round(terminal: Terminal, board: Board,
               rng: Optional[random.Random] = None) -> tuple[int, int]:
    """Play one round from the menu to the result screen.

    Returns the final score and the game time spent in milliseconds.
    Raises EOFError if the keyboard input ends while a key is awaited.
    """
    terminal.clear_screen()
    terminal.show_cursor(False)

    player = Player(board, board.height // 2, board.length // 2, PLAYER_FACE)
    apples = AppleManager(board, rng)
    _spawn_initial(apples, player, rng)

    display_main_menu(terminal)
    _wait_for(terminal, [Key.ENTER.value])

    terminal.clear_screen()
    board.draw(HEADER_HEIGHT, False)
    time_max_ms = START_TIME_MS
    display_header(terminal, 0, 0, time_max_ms, 0)

    key: Optional[str] = _wait_for(terminal, "wasd", convert=True)

    time_change = 0
    score_change = 0
    spent_time_ms = 0
    time_slow_ms = 0

    while (spent_time_ms < time_max_ms and 0 <= player.length < SCORE_MAX):
        key = convert_to_wasd(key)
        if key == Key.P.value:
            key = _wait_for(terminal, [Key.P.value])

        player.move(key)

        if apples.on_apple(player.row, player.col):
            apple = apples.apple_at(player.row, player.col)
            terminal.write("       ")
            terminal.draw_pixel(apple.face)
            effect = apple_effect(apple.kind, rng)
            score_change = effect.score_change
            time_change = effect.time_change_ms
            time_slow_ms += effect.time_slow_ms
            time_max_ms += time_change
            player.length += score_change
            if apple.kind == "b":
                apples.remove(apple)
            else:
                apples.respawn(player)

        board.draw(HEADER_HEIGHT, False)
        display_header(terminal, player.length, score_change,
                       time_max_ms - spent_time_ms, time_change)

        key = terminal.get_key()
        delay(FRAME_MS)
        if time_slow_ms > 0:
            spent_time_ms += FRAME_MS // 2
            time_slow_ms -= FRAME_MS
        else:
            spent_time_ms += FRAME_MS
            time_slow_ms = 0

    board.write(player.row, player.col, DEATH_FACE)
    board.draw(HEADER_HEIGHT, False)
    terminal.flush()
    delay(1500)

    terminal.clear_screen()
    board.clear(True)
    terminal.reset_color()
    _show_result(terminal, player.length, spent_time_ms)
    return player.length, spent_time_ms


def _ask_play_again(terminal: Terminal) -> bool:
    terminal.color(Color.BLACK, Color.LIGHT_RED)
    terminal.write("Press q to quit\n")
    terminal.color(Color.BLACK, Color.LIGHT_BLUE)
    terminal.write("Press e to play again")
    terminal.reset_color()
    terminal.flush()
    return _wait_for(terminal, "qe") == "e"


def _shutdown(terminal: Terminal) -> None:
    terminal.write("\n\n")
    terminal.reset_color()
    terminal.show_cursor(True)
    terminal.write("Exiting game...\n")
    terminal.clear_screen()
    terminal.flush()


def main(argv: Optional[list[str]] = None) -> int:
    """Run the game in the current terminal until the player quits."""
    parser = argparse.ArgumentParser(
        prog="funnygame",
        description="Collect good apples and dodge bad ones before time runs out.",
    )
    parser.parse_args(argv)

    terminal = Terminal()
    board = Board(BOARD_SIZE, BOARD_SIZE, BACKGROUND, terminal)
    rng = random.Random()
    try:
        with terminal.raw_mode():
            while True:
                play_round(terminal, board, rng)
                if not _ask_play_again(terminal):
                    break
    except (KeyboardInterrupt, EOFError):
        pass
    finally:
        _shutdown(terminal)
    return 0
#!/usr/bin/env python3
"""
Play Tic-Tac-Toe Twist in the terminal against the search engine.

    ttt-twist --size 4 --win 4 --gravity --difficulty sharp
    python -m ttt_twist.play --human O --misere
"""
import argparse
import logging
import sys
from typing import Optional

import numpy as np

from ttt_twist.engine.difficulty import Difficulty, choose_move
from ttt_twist.game.errors import IllegalMoveError, InvalidConfigError
from ttt_twist.game.notation import find_winning_line, format_history
from ttt_twist.game.rules import apply_move, create_game, legal_moves
from ttt_twist.game.types import DRAW, Cell, GameState, Placement, Player, VariantConfig
from ttt_twist.game.variants import validate_config

SYMBOLS = {Cell.EMPTY: '.', Cell.X: 'X', Cell.O: 'O', Cell.BLOCKED: '#', Cell.BOMBED: '*'}


class QuitGame(Exception):
    """Raised by parse_placement when the player asks to quit."""


def render_board(state: GameState, highlight=None) -> str:
    """Board as text with 1-based row/column labels; highlighted cells are bracketed."""
    highlight = set(highlight or [])
    size = state.size
    lines = ["    " + " ".join(f" {c + 1} " for c in range(size))]
    for r in range(size):
        cells = []
        for c in range(size):
            symbol = SYMBOLS[Cell(state.board[r, c])]
            cells.append(f"[{symbol}]" if (r, c) in highlight else f" {symbol} ")
        lines.append(f"{r + 1:>2}  " + " ".join(cells))
    return "\n".join(lines)


def parse_placement(text: str, size: int) -> Placement:
    """
    Parse 'row col' (1-based, space or comma separated) into a Placement.

    Raises:
        QuitGame: on 'q' / 'quit'
        ValueError: on anything else that is not two in-range numbers
    """
    text = text.strip().lower()
    if text in ('q', 'quit'):
        raise QuitGame()
    parts = text.replace(',', ' ').split()
    if len(parts) != 2:
        raise ValueError("Enter row and column, e.g. '2 3'")
    row, col = (int(part) - 1 for part in parts)
    if not (0 <= row < size and 0 <= col < size):
        raise ValueError(f"Row and column must be between 1 and {size}")
    return Placement(row, col)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Tic-Tac-Toe Twist against the engine")
    parser.add_argument('--size', type=int, default=3, help="Board size (3-6)")
    parser.add_argument('--win', type=int, default=3, help="Marks in a row to win (3 or 4)")
    parser.add_argument('--gravity', action='store_true', help="Pieces drop down their column")
    parser.add_argument('--wrap', action='store_true', help="Lines wrap around the edges")
    parser.add_argument('--misere', action='store_true', help="Completing a line loses")
    parser.add_argument('--blocks', type=int, default=0, help="Maximum number of random blocked cells")
    parser.add_argument(
        '--difficulty',
        choices=[d.value for d in Difficulty],
        default=Difficulty.BALANCED.value,
    )
    parser.add_argument('--human', choices=['X', 'O'], default='X', help="Side you play (X moves first)")
    parser.add_argument('--seed', type=int, default=None, help="Random seed for block placement")
    parser.add_argument('--verbose', '-v', action='store_true', help="Show search progress")
    return parser


def ask_placement(state: GameState) -> Placement:
    while True:
        try:
            move = parse_placement(input("Enter 'row col' or 'q' to quit: "), state.size)
        except ValueError as exc:
            print(f"❌ {exc}")
            continue
        if move not in legal_moves(state):
            print("❌ That cell is not empty!")
            continue
        return move


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = validate_config(VariantConfig(
            board_size=args.size,
            win_length=args.win,
            gravity=args.gravity,
            wrap=args.wrap,
            misere=args.misere,
            random_blocks=args.blocks,
        ))
    except InvalidConfigError as exc:
        print(f"❌ {exc}")
        return 2

    state = create_game(config, np.random.default_rng(args.seed))
    human = Player(args.human)
    difficulty = Difficulty(args.difficulty)

    print("=" * 60)
    print(f"🎮 Tic-Tac-Toe Twist {config.board_size}x{config.board_size}, {config.win_length} in a row")
    print(f"   You are {human.value}, engine is {human.opponent.value} ({difficulty.value})")
    print("=" * 60)

    while not state.is_over:
        print()
        print(render_board(state))
        print()

        if state.current is human:
            try:
                move = ask_placement(state)
            except (QuitGame, EOFError, KeyboardInterrupt):
                print("👋 Thanks for playing!")
                return 0
        else:
            print("🤖 Engine is thinking...")
            move = choose_move(state, difficulty)

        try:
            state = apply_move(state, move)
        except IllegalMoveError as exc:
            print(f"❌ {exc}")
            continue
        print(f"   {format_history(state)[-1]}")

    print()
    print(render_board(state, highlight=find_winning_line(state)))
    print()
    if state.winner == DRAW:
        print("🤝 Game Over - Draw!")
    elif state.winner == human:
        print("🎉 YOU WIN! Congratulations! 🎉")
    else:
        print("🤖 Engine wins!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

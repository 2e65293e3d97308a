"""
JSON-compatible encoding of configs, moves and game states.

Uses the camelCase wire format shared with the mobile client and the move
service:

    config: {"boardSize": 4, "winLength": 4, "gravity": false, ...}
    move:   {"r": 1, "c": 2, "player": "X"}
            {"power": "doubleMove", "r": 3, "c": 3, "extra": {"r": 0, "c": 0}, "player": "O"}
            {"power": "laneShift", "shift": {"axis": "row", "index": 1, "direction": -1}}
            {"power": "bomb", "r": 0, "c": 2}
    board:  rows of null | "X" | "O" | "B" (blocked) | "F" (bombed)

A double move stores its first placement under "extra" and its second under r/c.
"""

import json
from typing import Any, Dict, Optional

import numpy as np

from ttt_twist.game.types import (
    DRAW,
    Axis,
    Bomb,
    Cell,
    DoubleMove,
    GameState,
    LaneShift,
    Move,
    Placement,
    Player,
    Power,
    PowerUsage,
    VariantConfig,
)


CELL_TO_JSON = {Cell.EMPTY: None, Cell.X: 'X', Cell.O: 'O', Cell.BLOCKED: 'B', Cell.BOMBED: 'F'}
JSON_TO_CELL = {value: cell for cell, value in CELL_TO_JSON.items()}

CONFIG_KEYS = {
    'board_size': 'boardSize',
    'win_length': 'winLength',
    'gravity': 'gravity',
    'wrap': 'wrap',
    'misere': 'misere',
    'random_blocks': 'randomBlocks',
    'double_move': 'doubleMove',
    'lane_shift': 'laneShift',
    'bomb': 'bomb',
    'chaos_mode': 'chaosMode',
}


def config_to_dict(config: VariantConfig) -> Dict[str, Any]:
    return {wire: getattr(config, name) for name, wire in CONFIG_KEYS.items()}


def config_from_dict(data: Dict[str, Any]) -> VariantConfig:
    """Missing optional flags default to off; boardSize and winLength are required."""
    try:
        values = {name: data[wire] for name, wire in CONFIG_KEYS.items() if wire in data}
        return VariantConfig(
            board_size=int(values.pop('board_size')),
            win_length=int(values.pop('win_length')),
            random_blocks=int(values.pop('random_blocks', 0) or 0),
            **{name: bool(value) for name, value in values.items()},
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid config payload {data!r}: {exc}") from exc


def _player_to_json(player: Optional[Player]) -> Optional[str]:
    return player.value if player is not None else None


def _player_from_json(value) -> Optional[Player]:
    return Player(value) if value is not None else None


def move_to_dict(move: Move) -> Dict[str, Any]:
    if isinstance(move, DoubleMove):
        data = {
            'power': Power.DOUBLE_MOVE.value,
            'r': move.second[0],
            'c': move.second[1],
            'extra': {'r': move.first[0], 'c': move.first[1]},
        }
    elif isinstance(move, LaneShift):
        data = {
            'power': Power.LANE_SHIFT.value,
            'shift': {'axis': Axis(move.axis).value, 'index': move.index, 'direction': move.direction},
        }
    elif isinstance(move, Bomb):
        data = {'power': Power.BOMB.value, 'r': move.row, 'c': move.col}
    elif isinstance(move, Placement):
        data = {'r': move.row, 'c': move.col}
    else:
        raise ValueError(f"Cannot serialize move of type {type(move).__name__}")
    if move.player is not None:
        data['player'] = move.player.value
    return data


def move_from_dict(data: Dict[str, Any]) -> Move:
    try:
        player = _player_from_json(data.get('player'))
        power = data.get('power')
        if power is None:
            return Placement(int(data['r']), int(data['c']), player=player)
        power = Power(power)
        if power is Power.DOUBLE_MOVE:
            extra = data['extra']
            return DoubleMove(
                first=(int(extra['r']), int(extra['c'])),
                second=(int(data['r']), int(data['c'])),
                player=player,
            )
        if power is Power.LANE_SHIFT:
            shift = data['shift']
            return LaneShift(
                axis=Axis(shift['axis']),
                index=int(shift['index']),
                direction=int(shift['direction']),
                player=player,
            )
        return Bomb(int(data['r']), int(data['c']), player=player)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid move payload {data!r}: {exc}") from exc


def board_to_list(board: np.ndarray) -> list:
    return [[CELL_TO_JSON[Cell(value)] for value in row] for row in board]


def board_from_list(rows: list) -> np.ndarray:
    size = len(rows)
    if size == 0 or any(len(row) != size for row in rows):
        raise ValueError("Board must be a non-empty square grid")
    try:
        return np.array([[JSON_TO_CELL[value] for value in row] for row in rows], dtype=np.int8)
    except KeyError as exc:
        raise ValueError(f"Unknown cell value {exc.args[0]!r}") from exc


def powers_from_flags(flags: Optional[Dict[str, Dict[str, bool]]]) -> PowerUsage:
    used = set()
    for power in Power:
        per_player = (flags or {}).get(power.value) or {}
        for player in Player:
            if per_player.get(player.value):
                used.add((power, player))
    return PowerUsage(frozenset(used))


def state_to_dict(state: GameState) -> Dict[str, Any]:
    winner = state.winner
    return {
        'board': board_to_list(state.board),
        'current': state.current.value,
        'config': config_to_dict(state.config),
        'moves': [move_to_dict(move) for move in state.moves],
        'winner': winner.value if isinstance(winner, Player) else winner,
        'lastMove': move_to_dict(state.last_move) if state.last_move is not None else None,
        'powers': state.powers.as_flags(),
    }


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """Rebuild a state; lastMove defaults to the final history entry."""
    try:
        board = board_from_list(data['board'])
        config = config_from_dict(data['config'])
        moves = tuple(move_from_dict(move) for move in data.get('moves') or [])
        winner = data.get('winner')
        if winner is not None and winner != DRAW:
            winner = Player(winner)
        last_move = data.get('lastMove')
        return GameState(
            board=board,
            current=Player(data['current']),
            config=config,
            moves=moves,
            powers=powers_from_flags(data.get('powers')),
            winner=winner,
            last_move=move_from_dict(last_move) if last_move else (moves[-1] if moves else None),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid game state payload: {exc}") from exc


def dumps(state: GameState, **kwargs) -> str:
    return json.dumps(state_to_dict(state), **kwargs)


def loads(text: str) -> GameState:
    return state_from_dict(json.loads(text))

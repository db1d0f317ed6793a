"""Rules adapter over python-chess.

GameState is an immutable value: applying a move never touches the old
state, it returns a new one.  A fresh ``chess.Board`` is rebuilt from the
FEN for every query so no board object is ever shared.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import chess

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# "e2-e4", "e2xd3", "e7-e8=Q" and friends, as accepted by sloppy parsers.
_SLOPPY_COORD_RE = re.compile(
    r"^([a-h][1-8])\s*[-x:]?\s*([a-h][1-8])\s*=?\s*([qrbnQRBN])?$"
)


@dataclass(frozen=True)
class GameState:
    """Position handle: FEN plus the last move played (UCI) for display."""

    fen: str = STARTING_FEN
    last_move: str | None = None

    @classmethod
    def initial(cls) -> GameState:
        return cls()

    def board(self) -> chess.Board:
        """Return a new board object for this position."""
        return chess.Board(self.fen)

    @property
    def white_to_move(self) -> bool:
        return self.board().turn == chess.WHITE

    @property
    def is_game_over(self) -> bool:
        return self.board().is_game_over()


@dataclass(frozen=True)
class AppliedMove:
    """Result of a successfully applied move."""

    state: GameState
    san: str
    uci: str


def apply_move(
    state: GameState, source: str, target: str, *, promotion: str = "q"
) -> AppliedMove | None:
    """Apply a square-to-square move, defaulting promotions to *promotion*.

    Returns ``None`` when the squares are malformed or the move is illegal.
    """
    try:
        from_sq = chess.parse_square(source.strip().lower())
        to_sq = chess.parse_square(target.strip().lower())
    except ValueError:
        return None

    board = state.board()
    move = chess.Move(from_sq, to_sq)
    if move not in board.legal_moves:
        piece_type = chess.PIECE_SYMBOLS.index(promotion.lower())
        move = chess.Move(from_sq, to_sq, promotion=piece_type)
        if move not in board.legal_moves:
            return None
    return _push(board, move)


def apply_engine_move(state: GameState, text: str) -> AppliedMove | None:
    """Apply a move given in UCI, SAN or a sloppy coordinate form.

    Returns ``None`` when *text* does not denote a legal move.
    """
    board = state.board()
    move = parse_sloppy_move(board, text)
    if move is None:
        return None
    return _push(board, move)


def parse_sloppy_move(board: chess.Board, text: str) -> chess.Move | None:
    """Best-effort move parsing against *board*."""
    token = text.strip()
    if not token:
        return None

    match = _SLOPPY_COORD_RE.match(token)
    if match is not None:
        source, target, promo = match.groups()
        uci = f"{source}{target}{(promo or '').lower()}"
        move = chess.Move.from_uci(uci)
        if move in board.legal_moves:
            return move
        if promo is None:
            queen = chess.Move.from_uci(uci + "q")
            if queen in board.legal_moves:
                return queen
        return None

    san = token.rstrip("!?")
    # "Pe4" style pawn moves.
    if len(san) > 1 and san[0] == "P" and san[1] in "abcdefgh":
        san = san[1:]
    try:
        move = board.parse_san(san)
    except ValueError:
        return None
    # parse_san accepts null-move tokens ("--", "0000", "Z0").
    return move if move else None


def legal_targets(state: GameState, source: str) -> list[str]:
    """Return square names reachable from *source* in *state*."""
    try:
        from_sq = chess.parse_square(source)
    except ValueError:
        return []
    board = state.board()
    targets = {
        chess.square_name(m.to_square)
        for m in board.legal_moves
        if m.from_square == from_sq
    }
    return sorted(targets)


def _push(board: chess.Board, move: chess.Move) -> AppliedMove:
    san = board.san(move)
    board.push(move)
    return AppliedMove(
        state=GameState(fen=board.fen(), last_move=move.uci()),
        san=san,
        uci=move.uci(),
    )

"""BoardScene — QGraphicsScene that draws the chessboard and pieces."""

from __future__ import annotations

import chess
from PyQt6.QtCore import QObject, QPointF, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QFont, QPen
from PyQt6.QtWidgets import (
    QGraphicsRectItem,
    QGraphicsScene,
    QGraphicsSceneMouseEvent,
    QGraphicsSimpleTextItem,
)

from kibitzer.core.rules import GameState, legal_targets
from kibitzer.ui.board.piece_item import PieceItem
from kibitzer.ui.styles.theme import BoardTheme


class BoardScene(QGraphicsScene):
    """Renders the board, coordinates, highlights, and piece items.

    The scene never judges a move final: it proposes squares through
    ``move_intent`` and waits for the owner to push the resulting state
    back with :meth:`set_state`.

    Signals:
        move_intent(str, str): source and target square names, e.g. "e2", "e4".
    """

    move_intent = pyqtSignal(str, str)

    TILE = 80  # px per square

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._theme = BoardTheme.default()
        self._state: GameState | None = None
        self._flipped = False

        # Interaction state
        self._selected_sq: chess.Square | None = None
        self._targets: list[str] = []
        self._dragging_item: PieceItem | None = None
        self._interactive = True

        # Visual layers
        self._square_items: dict[chess.Square, QGraphicsRectItem] = {}
        self._highlight_items: list[QGraphicsRectItem] = []
        self._check_items: list[QGraphicsRectItem] = []
        self._last_move_highlights: list[QGraphicsRectItem] = []
        self._legal_dot_items: list[QGraphicsRectItem] = []
        self._piece_items: dict[chess.Square, PieceItem] = {}
        self._coord_items: list[QGraphicsSimpleTextItem] = []

        self._draw_board()

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState | None:
        return self._state

    @property
    def is_interactive(self) -> bool:
        return self._interactive

    def set_state(self, state: GameState) -> None:
        """Show *state*: pieces, last-move and check highlights."""
        changed = state != self._state
        self._state = state
        if changed:
            self._clear_selection()
            self._sync_pieces()
        self._highlight_last_move(state.last_move)
        self._highlight_check()

    def set_interactive(self, interactive: bool) -> None:
        """Enable / disable piece interaction."""
        self._interactive = interactive
        if not interactive:
            if self._dragging_item is not None:
                self._dragging_item.cancel_drag()
                self._dragging_item.enable_drag(False)
                self._dragging_item = None
            self._clear_selection()

    def set_flipped(self, flipped: bool) -> None:
        """Flip the board orientation."""
        self._flipped = flipped
        self._draw_board()
        if self._state is not None:
            self._sync_pieces()
            self._highlight_last_move(self._state.last_move)
            self._highlight_check()

    def is_flipped(self) -> bool:
        return self._flipped

    # ── Board drawing ────────────────────────────────────────────────────

    def _draw_board(self) -> None:
        """Draw or redraw the 64 squares and coordinates."""
        for sq_item in self._square_items.values():
            self.removeItem(sq_item)
        self._square_items.clear()
        for coord_item in self._coord_items:
            self.removeItem(coord_item)
        self._coord_items.clear()

        t = self.TILE
        font = QFont("DejaVu Sans", max(9, t // 8))

        for sq in chess.SQUARES:
            f, r = chess.square_file(sq), chess.square_rank(sq)
            vf, vr = self._visual_coords(f, r)
            is_dark = (f + r) % 2 == 0
            color = self._theme.dark_square if is_dark else self._theme.light_square
            rect = QGraphicsRectItem(vf * t, vr * t, t, t)
            rect.setBrush(QBrush(color))
            rect.setPen(QPen(Qt.PenStyle.NoPen))
            rect.setZValue(0)
            self.addItem(rect)
            self._square_items[sq] = rect

            label_brush = QBrush(
                self._theme.coord_dark if is_dark else self._theme.coord_light
            )
            # Rank numbers (left edge)
            if vf == 0:
                txt = QGraphicsSimpleTextItem(chess.RANK_NAMES[r])
                txt.setFont(font)
                txt.setBrush(label_brush)
                txt.setPos(vf * t + 2, vr * t + 1)
                txt.setZValue(0.3)
                self.addItem(txt)
                self._coord_items.append(txt)

            # File letters (bottom edge)
            if vr == 7:
                txt = QGraphicsSimpleTextItem(chess.FILE_NAMES[f])
                txt.setFont(font)
                txt.setBrush(label_brush)
                txt.setPos(vf * t + t - 12, vr * t + t - 16)
                txt.setZValue(0.3)
                self.addItem(txt)
                self._coord_items.append(txt)

        self.setSceneRect(0, 0, 8 * t, 8 * t)

    # ── Piece synchronisation ────────────────────────────────────────────

    def _sync_pieces(self) -> None:
        """Re-create all piece items from the current state."""
        for item in self._piece_items.values():
            self.removeItem(item)
        self._piece_items.clear()
        self._dragging_item = None

        if self._state is None:
            return

        t = self.TILE
        for sq, piece in self._state.board().piece_map().items():
            item = PieceItem(piece, sq, t, self._theme)
            vf, vr = self._visual_coords(chess.square_file(sq), chess.square_rank(sq))
            item.setPos(QPointF(vf * t, vr * t) + item.offset())
            self.addItem(item)
            self._piece_items[sq] = item

    # ── Mouse interaction ────────────────────────────────────────────────

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent | None) -> None:
        if not self._interactive or self._state is None or event is None:
            return super().mousePressEvent(event)

        sq = self._pos_to_square(event.scenePos())
        if sq is None:
            self._clear_selection()
            return super().mousePressEvent(event)

        # Clicking a highlighted target completes a click-click move
        if self._selected_sq is not None and chess.square_name(sq) in self._targets:
            source = self._selected_sq
            self._clear_selection()
            self.move_intent.emit(chess.square_name(source), chess.square_name(sq))
            return

        board = self._state.board()
        piece = board.piece_at(sq)
        if piece is not None and piece.color == board.turn:
            self._select_square(sq)
            item = self._piece_items.get(sq)
            if item is not None:
                item.enable_drag(True)
                item.start_drag()
                self._dragging_item = item
        else:
            self._clear_selection()

        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent | None) -> None:
        if self._dragging_item is not None and event is not None:
            item = self._dragging_item
            drop_sq = self._pos_to_square(event.scenePos())
            # Always snap back; an accepted move redraws from the new state.
            item.cancel_drag()
            item.enable_drag(False)
            self._dragging_item = None

            if (
                drop_sq is not None
                and drop_sq != item.square
                and chess.square_name(drop_sq) in self._targets
            ):
                self._clear_selection()
                self.move_intent.emit(
                    chess.square_name(item.square), chess.square_name(drop_sq)
                )
                return

        super().mouseReleaseEvent(event)

    # ── Selection / highlights ───────────────────────────────────────────

    def _select_square(self, sq: chess.Square) -> None:
        self._clear_selection()
        self._selected_sq = sq
        origin = self._make_highlight(sq, self._theme.highlight_from)
        self._highlight_items.append(origin)

        if self._state is None:
            return
        self._targets = legal_targets(self._state, chess.square_name(sq))
        for name in self._targets:
            dot = self._make_highlight(
                chess.parse_square(name), self._theme.highlight_to
            )
            self._legal_dot_items.append(dot)

    def _clear_selection(self) -> None:
        self._selected_sq = None
        self._targets = []
        self._clear_items(self._highlight_items)
        self._clear_items(self._legal_dot_items)

    def _highlight_last_move(self, uci: str | None) -> None:
        self._clear_items(self._last_move_highlights)
        if not uci:
            return
        move = chess.Move.from_uci(uci)
        for sq in (move.from_square, move.to_square):
            rect = self._make_highlight(sq, self._theme.last_move)
            rect.setZValue(0.5)
            self._last_move_highlights.append(rect)

    def _highlight_check(self) -> None:
        self._clear_items(self._check_items)
        if self._state is None:
            return
        board = self._state.board()
        if not board.is_check():
            return
        king_sq = board.king(board.turn)
        if king_sq is None:
            return
        rect = self._make_highlight(king_sq, self._theme.highlight_check)
        rect.setZValue(0.6)
        self._check_items.append(rect)

    def _clear_items(self, items: list[QGraphicsRectItem]) -> None:
        for item in items:
            self.removeItem(item)
        items.clear()

    # ── Coordinate helpers ───────────────────────────────────────────────

    def _visual_coords(self, file: int, rank: int) -> tuple[int, int]:
        """Convert board file/rank to visual column/row."""
        if self._flipped:
            return 7 - file, rank
        return file, 7 - rank

    def _pos_to_square(self, pos: QPointF) -> chess.Square | None:
        """Scene position → board square."""
        t = self.TILE
        col = int(pos.x() // t)
        row = int(pos.y() // t)
        if not (0 <= col < 8 and 0 <= row < 8):
            return None
        if self._flipped:
            f, r = 7 - col, row
        else:
            f, r = col, 7 - row
        return chess.square(f, r)

    def _make_highlight(self, sq: chess.Square, color: QColor) -> QGraphicsRectItem:
        """Create a coloured overlay rectangle on a square."""
        t = self.TILE
        vf, vr = self._visual_coords(chess.square_file(sq), chess.square_rank(sq))
        rect = QGraphicsRectItem(vf * t, vr * t, t, t)
        rect.setBrush(QBrush(color))
        rect.setPen(QPen(Qt.PenStyle.NoPen))
        rect.setZValue(0.8)
        self.addItem(rect)
        return rect

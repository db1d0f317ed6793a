"""PieceItem — draggable chess glyph on the QGraphicsScene."""

from __future__ import annotations

import chess
from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QBrush, QCursor, QFont, QPen
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsSimpleTextItem

from kibitzer.ui.styles.theme import BoardTheme


class PieceItem(QGraphicsSimpleTextItem):
    """A single piece, drawn as a Unicode glyph.

    Stores its logical *square* (python-chess index) and supports drag & drop.
    """

    _GLYPH_RATIO = 0.72

    def __init__(
        self,
        piece: chess.Piece,
        square: chess.Square,
        tile_size: int,
        theme: BoardTheme,
    ) -> None:
        # Filled glyphs for both sides; colour comes from the brush.
        glyph = chess.Piece(piece.piece_type, chess.BLACK).unicode_symbol()
        super().__init__(glyph)
        self.piece = piece
        self.square = square
        self._tile_size = tile_size
        self._drag_origin: QPointF | None = None

        fill = theme.piece_white if piece.color == chess.WHITE else theme.piece_black
        outline = theme.piece_black if piece.color == chess.WHITE else theme.piece_white
        self.setBrush(QBrush(fill))
        self.setPen(QPen(outline, 1.0))
        self.setFont(QFont("DejaVu Sans", max(int(tile_size * self._GLYPH_RATIO), 8)))

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsMovable, False)
        self.setCursor(QCursor(Qt.CursorShape.PointingHandCursor))
        self.setZValue(1)

    def offset(self) -> QPointF:
        """Top-left offset that centres the glyph inside its tile."""
        bounds = self.boundingRect()
        return QPointF(
            (self._tile_size - bounds.width()) / 2,
            (self._tile_size - bounds.height()) / 2,
        )

    def enable_drag(self, enabled: bool) -> None:
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsMovable, enabled)
        if enabled:
            self.setCursor(QCursor(Qt.CursorShape.OpenHandCursor))
        else:
            self.setCursor(QCursor(Qt.CursorShape.PointingHandCursor))

    def start_drag(self) -> None:
        self._drag_origin = self.pos()
        self.setZValue(10)  # bring to front
        self.setCursor(QCursor(Qt.CursorShape.ClosedHandCursor))
        self.setOpacity(0.85)

    def cancel_drag(self) -> None:
        """Snap back to the original position."""
        if self._drag_origin is not None:
            self.setPos(self._drag_origin)
        self._drag_origin = None
        self.setZValue(1)
        self.setCursor(QCursor(Qt.CursorShape.OpenHandCursor))
        self.setOpacity(1.0)

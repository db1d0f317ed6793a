"""LogPanel — terminal-style view of the session log."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QFont, QKeyEvent, QTextCharFormat, QTextCursor
from PyQt6.QtWidgets import QPlainTextEdit, QWidget

from kibitzer.core.enums import LogKind
from kibitzer.session.log import LogAggregator, LogEntry
from kibitzer.ui.styles.theme import TerminalTheme


class LogPanel(QPlainTextEdit):
    """Read-only, append-only rendering of a :class:`LogAggregator`.

    Renders incrementally: only entries past the already written count are
    appended, so the panel never re-draws the whole log.

    Signals:
        clear_requested(): Ctrl+L pressed while the panel has focus.
    """

    clear_requested = pyqtSignal()

    def __init__(
        self,
        log: LogAggregator | None = None,
        parent: QWidget | None = None,
        theme: TerminalTheme | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("logPanel")
        self._theme = theme or TerminalTheme.default()
        self._log: LogAggregator | None = None
        self._written = 0
        self._has_text = False

        self.setReadOnly(True)
        self.setUndoRedoEnabled(False)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.setMaximumBlockCount(self._theme.scrollback)

        font = QFont("Monospace", 10)
        font.setStyleHint(QFont.StyleHint.TypeWriter)
        self.setFont(font)
        self.setStyleSheet(
            f"QPlainTextEdit#logPanel {{ background: {self._theme.background.name()};"
            f" color: {self._theme.foreground.name()}; }}"
        )

        self._formats = {kind: self._make_format(kind) for kind in LogKind}

        if log is not None:
            self.bind(log)

    # ── Binding ──────────────────────────────────────────────────────────

    def bind(self, log: LogAggregator) -> None:
        """Follow *log*, rendering what it already holds."""
        if self._log is not None:
            self.unbind()
        self._log = log
        log.events.on_appended.append(self._on_appended)
        log.events.on_cleared.append(self._on_cleared)
        self._on_cleared()
        self._render_pending()

    def unbind(self) -> None:
        """Stop following the bound log."""
        if self._log is None:
            return
        events = self._log.events
        events.on_appended[:] = [
            cb for cb in events.on_appended if cb != self._on_appended
        ]
        events.on_cleared[:] = [
            cb for cb in events.on_cleared if cb != self._on_cleared
        ]
        self._log = None

    @property
    def written(self) -> int:
        """Number of entries rendered since the last clear."""
        return self._written

    # ── Log callbacks ────────────────────────────────────────────────────

    def _on_appended(self, _start: int) -> None:
        self._render_pending()

    def _on_cleared(self) -> None:
        self.clear()
        self._written = 0
        self._has_text = False

    def _render_pending(self) -> None:
        if self._log is None:
            return
        entries = self._log.entries_since(self._written)
        if not entries:
            return
        for entry in entries:
            self._write_entry(entry)
        self._written += len(entries)
        bar = self.verticalScrollBar()
        if bar is not None:
            bar.setValue(bar.maximum())

    def _write_entry(self, entry: LogEntry) -> None:
        cursor = self.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.End)
        fmt = self._formats[entry.kind]
        # Multi-line messages (ASCII art) keep their line breaks.
        for line in entry.message.splitlines() or [""]:
            if self._has_text:
                cursor.insertBlock()
            cursor.insertText(line, fmt)
            self._has_text = True

    def _make_format(self, kind: LogKind) -> QTextCharFormat:
        fmt = QTextCharFormat()
        fmt.setForeground(QBrush(self._theme.color_for(kind)))
        if kind == LogKind.ERROR:
            fmt.setFontWeight(QFont.Weight.Bold)
        return fmt

    # ── Keyboard ─────────────────────────────────────────────────────────

    def keyPressEvent(self, event: QKeyEvent | None) -> None:
        if (
            event is not None
            and event.key() == Qt.Key.Key_L
            and event.modifiers() & Qt.KeyboardModifier.ControlModifier
        ):
            self.clear_requested.emit()
            event.accept()
            return
        super().keyPressEvent(event)

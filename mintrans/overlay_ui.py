import logging
import math
from typing import Callable, Optional

from PyQt6 import sip
from PyQt6.QtCore import Qt, QPoint, QRect, pyqtSignal
from PyQt6.QtGui import QColor, QCursor, QFont, QGuiApplication, QMouseEvent, QPainter, QPaintEvent
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QStackedWidget,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from .models import PanelLayout, Point, Size
from .presenter import PanelView

logger = logging.getLogger(__name__)

OVERLAY_FLAGS = (
    Qt.WindowType.Tool
    | Qt.WindowType.FramelessWindowHint
    | Qt.WindowType.WindowStaysOnTopHint
    | Qt.WindowType.NoDropShadowWindowHint
)


def current_screen_geometry() -> QRect:
    """Available geometry of the screen under the cursor; this is the viewport"""
    screen = QGuiApplication.screenAt(QCursor.pos()) or QGuiApplication.primaryScreen()
    return screen.availableGeometry()


def to_viewport(global_pos: QPoint) -> Point:
    geo = current_screen_geometry()
    return Point(global_pos.x() - geo.left(), global_pos.y() - geo.top())


def _alive(widget) -> bool:
    return widget is not None and not sip.isdeleted(widget)


class AffordanceIcon(QWidget):
    """Round translate button shown next to a fresh selection"""

    activated = pyqtSignal()
    SIZE = 30

    def __init__(self):
        super().__init__(None)
        self.setWindowFlags(OVERLAY_FLAGS | Qt.WindowType.WindowDoesNotAcceptFocus)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setFixedSize(self.SIZE, self.SIZE)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._hovered = False

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        rect = self.rect().adjusted(1, 1, -2, -2)
        # Shadow
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QColor(0, 0, 0, 50))
        painter.drawEllipse(rect.translated(1, 1))

        painter.setBrush(QColor("#347af0") if self._hovered else QColor("#5a95f5"))
        painter.drawEllipse(rect)

        painter.setPen(QColor(255, 255, 255))
        painter.setFont(QFont("Arial", 11, QFont.Weight.Bold))
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, "文")
        painter.end()

    def enterEvent(self, event):
        self._hovered = True
        self.update()
        self.activated.emit()
        super().enterEvent(event)

    def leaveEvent(self, event):
        self._hovered = False
        self.update()
        super().leaveEvent(event)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self.activated.emit()
            event.accept()


class ResultPanel(QWidget):
    """Frameless panel with a copy button and selectable translated text"""

    copy_requested = pyqtSignal()
    PADDING = 12
    SPACING = 6

    def __init__(self):
        super().__init__(None)
        self.setWindowFlags(OVERLAY_FLAGS)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self._natural_height = 0
        self.setup_ui()

    def setup_ui(self):
        root = QFrame(self)
        root.setObjectName("PanelRoot")
        root.setStyleSheet("""
            QFrame#PanelRoot {
                background-color: #ffffff;
                border: 1px solid rgba(0, 0, 0, 40);
                border-radius: 8px;
            }
            QLabel, QTextBrowser {
                color: #333333;
                font-size: 14px;
                background: transparent;
                border: none;
            }
            QPushButton {
                background-color: #f0f0f0;
                color: #333333;
                border: 1px solid #dddddd;
                border-radius: 4px;
                padding: 2px 8px;
                font-size: 12px;
            }
            QPushButton:hover {
                background-color: #e0e0e0;
            }
        """)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(root)

        layout = QVBoxLayout(root)
        layout.setContentsMargins(self.PADDING, self.PADDING, self.PADDING, self.PADDING)
        layout.setSpacing(self.SPACING)

        header = QHBoxLayout()
        header.setContentsMargins(0, 0, 0, 0)
        header.addStretch()
        self.copy_btn = QPushButton()
        self.copy_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.copy_btn.clicked.connect(self.copy_requested.emit)
        header.addWidget(self.copy_btn)
        layout.addLayout(header)

        self.stack = QStackedWidget()

        self.loading_label = QLabel()
        self.loading_label.setWordWrap(True)
        self.loading_label.setTextFormat(Qt.TextFormat.RichText)
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.loading_label.setStyleSheet("color: #888888; font-style: italic;")

        self.content = QTextBrowser()
        self.content.setOpenLinks(False)
        self.content.setFrameShape(QFrame.Shape.NoFrame)
        self.content.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.content.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.content.setTextInteractionFlags(Qt.TextInteractionFlag.TextBrowserInteraction)

        self.stack.addWidget(self.loading_label)
        self.stack.addWidget(self.content)
        layout.addWidget(self.stack)

    def set_content(self, content_html: str, loading: bool, width: float, copy_label: str) -> Size:
        """Fill the panel at a fixed width and measure its unconstrained height"""
        width_i = int(round(width))
        inner_width = max(1, width_i - 2 * self.PADDING - 2)

        self.copy_btn.setText(copy_label)
        self.copy_btn.setVisible(not loading)

        if loading:
            self.loading_label.setText(content_html)
            self.stack.setCurrentWidget(self.loading_label)
            body_height = self.loading_label.heightForWidth(inner_width)
            if body_height < 0:
                body_height = self.loading_label.sizeHint().height()
            header_height = 0
        else:
            self.content.setHtml(content_html)
            self.stack.setCurrentWidget(self.content)
            document = self.content.document()
            document.setTextWidth(inner_width)
            body_height = math.ceil(document.size().height()) + 2 * self.content.frameWidth()
            header_height = self.copy_btn.sizeHint().height() + self.SPACING

        self._natural_height = 2 * self.PADDING + 2 + header_height + body_height
        self.setFixedWidth(width_i)
        return Size(width_i, self._natural_height)

    def apply_layout(self, layout: PanelLayout, origin: QPoint):
        height = self._natural_height
        if layout.max_height is not None:
            height = min(height, layout.max_height)
        self.setFixedSize(int(round(layout.width)), max(1, int(round(height))))
        self.move(origin.x() + int(round(layout.x)), origin.y() + int(round(layout.y)))
        self.show()
        self.raise_()


class OverlayView(PanelView):
    """PanelView backed by top-level Qt widgets"""

    def __init__(self):
        self.icon: Optional[AffordanceIcon] = None
        self.panel: Optional[ResultPanel] = None
        self.on_activate: Optional[Callable[[], None]] = None
        self.on_copy: Optional[Callable[[], None]] = None
        self._origin = QPoint(0, 0)

    def viewport_size(self) -> Size:
        geo = current_screen_geometry()
        self._origin = geo.topLeft()
        return Size(geo.width(), geo.height())

    def show_affordance(self, position: Point) -> None:
        self._close(self.icon)
        origin = current_screen_geometry().topLeft()
        self.icon = AffordanceIcon()
        self.icon.activated.connect(self._activate)
        self.icon.move(origin.x() + int(round(position.x)), origin.y() + int(round(position.y)))
        self.icon.show()
        self.icon.raise_()

    def set_affordance_visible(self, visible: bool) -> None:
        if _alive(self.icon):
            self.icon.setVisible(visible)

    def render_panel(self, content_html: str, loading: bool, width: float, copy_label: str) -> Size:
        if not _alive(self.panel):
            self.panel = ResultPanel()
            self.panel.copy_requested.connect(self._copy)
        return self.panel.set_content(content_html, loading, width, copy_label)

    def place_panel(self, layout: PanelLayout) -> None:
        if _alive(self.panel):
            self.panel.apply_layout(layout, self._origin)

    def set_copy_label(self, label: str) -> None:
        if _alive(self.panel):
            self.panel.copy_btn.setText(label)

    def copy_to_clipboard(self, plain_text: str) -> bool:
        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            return False
        clipboard.setText(plain_text)
        return True

    def close_all(self) -> None:
        self._close(self.icon)
        self._close(self.panel)
        self.icon = None
        self.panel = None

    def contains(self, widget) -> bool:
        """True when widget is the icon, the panel or anything inside them"""
        surfaces = [w for w in (self.icon, self.panel) if _alive(w)]
        while widget is not None:
            if any(widget is surface for surface in surfaces):
                return True
            widget = widget.parentWidget()
        return False

    def _activate(self):
        if self.on_activate is not None:
            self.on_activate()

    def _copy(self):
        if self.on_copy is not None:
            self.on_copy()

    @staticmethod
    def _close(widget):
        if _alive(widget):
            widget.hide()
            widget.deleteLater()

# SafeImage — Image Widget

"""
Network image widget with retry, connectivity awareness and shimmer.

Features:
- Shimmer placeholder while the first attempt loads
- "Retry n/m" indicator while a retry is scheduled or in flight
- "No Connection" indicator while offline (loads held back)
- Fallback icon or custom fallback widget when there is nothing to show
- Loaded pixmap scaled with cover/contain/fill, clipped to rounded corners
- Accessible name from semantic_label, tapped signal for clicks
"""

from typing import Callable, Optional, Union

from PySide6.QtCore import QPointF, QRectF, QSize, Qt, Signal
from PySide6.QtGui import (
    QColor, QFont, QIcon, QLinearGradient, QMouseEvent, QPainter,
    QPainterPath, QPen, QPixmap, QPolygonF
)
from PySide6.QtWidgets import QSizePolicy, QWidget

from safe_image.core.connectivity import ConnectivitySource, QtConnectivitySource
from safe_image.core.fetcher import ImageFetcher
from safe_image.core.models import LoadOutcome, LoadRequest, VisualSnapshot, VisualState
from safe_image.core.retry_controller import RetryController
from safe_image.ui.shimmer import ShimmerAnimation
from safe_image.ui.styles import state_info
from safe_image.utils import config
from safe_image.utils.config import FIT_MODES, RetryConfig
from safe_image.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FALLBACK_ICON = "image-x-generic"
OFFLINE_ICON = "network-offline"

_ASPECT_MODES = {
    "cover": Qt.KeepAspectRatioByExpanding,
    "contain": Qt.KeepAspectRatio,
    "fill": Qt.IgnoreAspectRatio,
}


def _resolve_icon(icon: Union[QIcon, str, None], default: str) -> QIcon:
    """Accept a QIcon or a freedesktop theme icon name."""
    if isinstance(icon, QIcon):
        return icon
    return QIcon.fromTheme(icon or default)


class SafeImageWidget(QWidget):
    """
    Image slot driven by a RetryController.

    Signals:
        tapped(): Emitted on a left click released inside the widget
        state_changed(object): VisualSnapshot after every visual change
    """

    tapped = Signal()
    state_changed = Signal(object)

    def __init__(
        self,
        url: Optional[str] = None,
        fetcher: Optional[ImageFetcher] = None,
        connectivity: Optional[ConnectivitySource] = None,
        fallback_icon: Union[QIcon, str, None] = None,
        fallback_widget: Optional[QWidget] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fit: Optional[str] = None,
        border_radius: float = 0.0,
        max_retries: Optional[int] = None,
        retry_delay_ms: Optional[int] = None,
        show_shimmer: Optional[bool] = None,
        shimmer_base_color: Union[QColor, str, None] = None,
        shimmer_highlight_color: Union[QColor, str, None] = None,
        semantic_label: Optional[str] = None,
        on_tap: Optional[Callable[[], None]] = None,
        enable_connectivity_check: Optional[bool] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)

        fit = fit or config.get("fit", "cover")
        if fit not in FIT_MODES:
            raise ValueError(f"fit must be one of {FIT_MODES}, got {fit!r}")
        if border_radius < 0:
            raise ValueError("border_radius must be >= 0")

        retry_config = RetryConfig.from_config(
            max_retries=max_retries,
            retry_delay_ms=retry_delay_ms,
            connectivity_enabled=enable_connectivity_check,
        )

        # Display options
        self._url = url
        self._fit = fit
        self._border_radius = float(border_radius)
        self._width = width
        self._height = height
        self._show_shimmer = (
            config.get("show_shimmer", True) if show_shimmer is None else show_shimmer
        )
        self._shimmer_base = QColor(shimmer_base_color or config.get("shimmer_base_color"))
        self._shimmer_highlight = QColor(
            shimmer_highlight_color or config.get("shimmer_highlight_color")
        )
        self._fallback_icon = _resolve_icon(fallback_icon, DEFAULT_FALLBACK_ICON)
        self._offline_icon = QIcon.fromTheme(OFFLINE_ICON)

        # Load state
        self._pixmap: Optional[QPixmap] = None
        self._snapshot = VisualSnapshot(VisualState.FALLBACK)
        self._disposed = False

        # Collaborators
        if connectivity is None and retry_config.connectivity_enabled:
            connectivity = QtConnectivitySource(self)
        self._connectivity = connectivity
        self._fetcher = fetcher
        self._controller = RetryController(retry_config, connectivity, parent=self)
        self._shimmer = ShimmerAnimation(parent=self)

        self._controller.load_requested.connect(self._on_load_requested)
        self._controller.visual_state_changed.connect(self._on_visual_state)
        self._shimmer.tick.connect(self._on_shimmer_tick)
        if fetcher is not None:
            fetcher.succeeded.connect(self._on_fetch_succeeded)
            fetcher.failed.connect(self._on_fetch_failed)

        # Fallback widget overlays the slot while in FALLBACK
        self._fallback_widget = fallback_widget
        if fallback_widget is not None:
            fallback_widget.setParent(self)
            fallback_widget.hide()
            fallback_widget.setGeometry(self.rect())

        # Widget setup
        if width is not None and height is not None:
            self.setFixedSize(int(width), int(height))
        elif width is not None:
            self.setFixedWidth(int(width))
        elif height is not None:
            self.setFixedHeight(int(height))
        self.setSizePolicy(QSizePolicy.Preferred, QSizePolicy.Preferred)
        if semantic_label:
            self.setAccessibleName(semantic_label)
        if on_tap is not None:
            self.tapped.connect(on_tap)
            self.setCursor(Qt.PointingHandCursor)

        self._controller.bind(url)

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def controller(self) -> RetryController:
        return self._controller

    @property
    def shimmer(self) -> ShimmerAnimation:
        return self._shimmer

    @property
    def snapshot(self) -> VisualSnapshot:
        return self._snapshot

    @property
    def visual_state(self) -> VisualState:
        return self._snapshot.state

    @property
    def pixmap(self) -> Optional[QPixmap]:
        return self._pixmap

    @property
    def fit(self) -> str:
        return self._fit

    @property
    def border_radius(self) -> float:
        return self._border_radius

    @property
    def fallback_icon(self) -> QIcon:
        return self._fallback_icon

    @property
    def fallback_widget(self) -> Optional[QWidget]:
        return self._fallback_widget

    def fallback_icon_size(self) -> int:
        """Icon edge length for the fallback placeholder."""
        if self._width is not None and self._height is not None:
            return int((self._width + self._height) / 6)
        return int(config.get("fallback_icon_size", 32))

    # ========================================================================
    # Control
    # ========================================================================

    def set_url(self, url: Optional[str]) -> None:
        """Load a different resource; retry state resets on change."""
        if url == self._url:
            return
        self._url = url
        self._pixmap = None
        self._controller.bind(url)

    def dispose(self) -> None:
        """Stop animations and release controller and fetcher hooks."""
        if self._disposed:
            return
        self._disposed = True
        self._shimmer.stop()
        self._controller.dispose()
        if self._fetcher is not None:
            for name, slot in (
                ("succeeded", self._on_fetch_succeeded),
                ("failed", self._on_fetch_failed),
            ):
                try:
                    getattr(self._fetcher, name).disconnect(slot)
                except RuntimeError as e:
                    logger.debug(f"Fetcher gone before dispose: {e}")

    def sizeHint(self) -> QSize:
        return QSize(self._width or 100, self._height or 100)

    # ========================================================================
    # Collaborator callbacks
    # ========================================================================

    def _on_load_requested(self, request: LoadRequest) -> None:
        self._pixmap = None
        if self._fetcher is None:
            logger.warning(f"No fetcher for {request.cache_key}")
            return
        self._fetcher.fetch(request)

    def _on_fetch_succeeded(self, request: LoadRequest, pixmap: QPixmap) -> None:
        if request != self._controller.current_request:
            return
        self._pixmap = pixmap
        self._controller.report_outcome(LoadOutcome.SUCCESS, request)

    def _on_fetch_failed(self, request: LoadRequest, error: str) -> None:
        if request != self._controller.current_request:
            return
        logger.debug(f"Load failed for {request.cache_key}: {error}")
        self._controller.report_outcome(LoadOutcome.FAILURE, request)

    def _on_visual_state(self, snapshot: VisualSnapshot) -> None:
        self._snapshot = snapshot
        state = snapshot.state

        animating = state is VisualState.RETRY_PENDING or (
            state is VisualState.LOADING and self._show_shimmer
        )
        if animating:
            self._shimmer.start()
        else:
            self._shimmer.stop()

        if self._fallback_widget is not None:
            self._fallback_widget.setVisible(self._shows_fallback())

        self.setAccessibleDescription(state_info(state).description)
        self.update()
        self.state_changed.emit(snapshot)

    def _on_shimmer_tick(self, value: float) -> None:
        self.update()

    def _shows_fallback(self) -> bool:
        state = self._snapshot.state
        if state is VisualState.FALLBACK:
            return True
        if state is VisualState.LOADING and not self._show_shimmer:
            return True
        return state is VisualState.SUCCESS and self._pixmap is None

    # ========================================================================
    # Events
    # ========================================================================

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self._fallback_widget is not None:
            self._fallback_widget.setGeometry(self.rect())

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.LeftButton and self.rect().contains(event.position().toPoint()):
            self.tapped.emit()
        super().mouseReleaseEvent(event)

    def closeEvent(self, event) -> None:
        # Plain close() only hides; keep the widget reusable
        if self.testAttribute(Qt.WA_DeleteOnClose):
            self.dispose()
        super().closeEvent(event)

    # ========================================================================
    # Painting
    # ========================================================================

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        rect = QRectF(self.rect())
        clip = QPainterPath()
        clip.addRoundedRect(rect, self._border_radius, self._border_radius)
        painter.setClipPath(clip)

        state = self._snapshot.state
        if self._shows_fallback():
            if self._fallback_widget is None:
                self._paint_fallback(painter, rect)
        elif state is VisualState.LOADING:
            self._paint_shimmer(painter, rect)
        elif state is VisualState.RETRY_PENDING:
            self._paint_retry(painter, rect)
        elif state is VisualState.OFFLINE:
            self._paint_offline(painter, rect)
        elif state is VisualState.SUCCESS:
            self._paint_image(painter, rect)

        painter.end()

    def _paint_shimmer(self, painter: QPainter, rect: QRectF) -> None:
        gradient = QLinearGradient(rect.topLeft(), rect.bottomRight())
        s0, s1, s2 = self._shimmer.gradient_stops()
        gradient.setColorAt(s0, self._shimmer_base)
        gradient.setColorAt(s1, self._shimmer_highlight)
        gradient.setColorAt(s2, self._shimmer_base)
        painter.fillRect(rect, gradient)

    def _paint_fallback(self, painter: QPainter, rect: QRectF) -> None:
        info = state_info(VisualState.FALLBACK)
        painter.fillRect(rect, QColor(info.background))

        size = self.fallback_icon_size()
        icon_rect = QRectF(0, 0, size, size)
        icon_rect.moveCenter(rect.center())

        if not self._fallback_icon.isNull():
            self._fallback_icon.paint(painter, icon_rect.toRect())
            return

        # Generic picture glyph: frame, sun, hill
        pen = QPen(QColor(info.foreground))
        pen.setWidthF(max(1.0, size / 16))
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRoundedRect(icon_rect, size / 8, size / 8)
        painter.drawEllipse(
            QPointF(icon_rect.left() + size * 0.32, icon_rect.top() + size * 0.35),
            size * 0.09, size * 0.09,
        )
        painter.drawPolyline(QPolygonF([
            QPointF(icon_rect.left(), icon_rect.bottom() - size * 0.2),
            QPointF(icon_rect.left() + size * 0.4, icon_rect.top() + size * 0.5),
            QPointF(icon_rect.right(), icon_rect.bottom() - size * 0.1),
        ]))

    def _paint_indicator_frame(self, painter: QPainter, rect: QRectF, state: VisualState) -> None:
        info = state_info(state)
        painter.fillRect(rect, QColor(info.background))
        pen = QPen(QColor(info.border))
        pen.setWidthF(1.0)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        inner = rect.adjusted(0.5, 0.5, -0.5, -0.5)
        painter.drawRoundedRect(inner, self._border_radius, self._border_radius)

    def _paint_retry(self, painter: QPainter, rect: QRectF) -> None:
        self._paint_indicator_frame(painter, rect, VisualState.RETRY_PENDING)
        color = QColor(state_info(VisualState.RETRY_PENDING).foreground)

        # Spinner: 20px arc rotating with the shimmer clock
        spinner = QRectF(0, 0, 20, 20)
        spinner.moveCenter(QPointF(rect.center().x(), rect.center().y() - 8))
        pen = QPen(color)
        pen.setWidthF(2.0)
        pen.setCapStyle(Qt.RoundCap)
        painter.setPen(pen)
        start = int(((self._shimmer.value + 1.0) / 3.0) * 360 * 16)
        painter.drawArc(spinner, -start, 270 * 16)

        font = QFont(painter.font())
        font.setPixelSize(10)
        painter.setFont(font)
        text_rect = QRectF(rect.left(), spinner.bottom() + 6, rect.width(), 14)
        painter.drawText(text_rect, Qt.AlignHCenter | Qt.AlignTop, self._snapshot.retry_label)

    def _paint_offline(self, painter: QPainter, rect: QRectF) -> None:
        self._paint_indicator_frame(painter, rect, VisualState.OFFLINE)
        info = state_info(VisualState.OFFLINE)
        painter.setPen(QColor(info.foreground))

        icon_rect = QRectF(0, 0, 24, 24)
        icon_rect.moveCenter(QPointF(rect.center().x(), rect.center().y() - 10))
        if not self._offline_icon.isNull():
            self._offline_icon.paint(painter, icon_rect.toRect())

        font = QFont(painter.font())
        font.setPixelSize(12)
        painter.setFont(font)
        text_rect = QRectF(rect.left(), icon_rect.bottom() + 4, rect.width(), 16)
        painter.drawText(text_rect, Qt.AlignHCenter | Qt.AlignTop, info.label)

    def _paint_image(self, painter: QPainter, rect: QRectF) -> None:
        if self._pixmap is None or self._pixmap.isNull():
            return
        scaled = self._pixmap.scaled(
            self.size(), _ASPECT_MODES[self._fit], Qt.SmoothTransformation
        )
        # Center; cover crops the overflow through the clip path
        x = rect.left() + (rect.width() - scaled.width()) / 2
        y = rect.top() + (rect.height() - scaled.height()) / 2
        painter.drawPixmap(QPointF(x, y), scaled)

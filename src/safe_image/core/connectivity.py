# SafeImage — Connectivity Sources

"""
Injectable connectivity sources for RetryController.

A source answers a point-in-time query (is_connected) and emits
connectivity_changed(bool) when the status flips. "No network interfaces"
counts as disconnected; every other reachability counts as connected.
"""

from typing import Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtNetwork import QNetworkInformation

from safe_image.utils.logging import get_logger

logger = get_logger(__name__)


class ConnectivitySource(QObject):
    """
    Base connectivity source.

    Signals:
        connectivity_changed(bool): Emitted when connected status changes
    """

    connectivity_changed = Signal(bool)

    def is_connected(self) -> bool:
        raise NotImplementedError


class ManualConnectivitySource(ConnectivitySource):
    """Connectivity driven by explicit set_connected() calls."""

    def __init__(self, connected: bool = True, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._connected = bool(connected)

    def is_connected(self) -> bool:
        return self._connected

    def set_connected(self, connected: bool) -> None:
        """Update status; emits only on change."""
        connected = bool(connected)
        if connected == self._connected:
            return
        self._connected = connected
        self.connectivity_changed.emit(connected)


class QtConnectivitySource(ConnectivitySource):
    """
    Connectivity from QNetworkInformation.

    When no reachability backend can be loaded the source reports
    connected and never emits.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._info: Optional[QNetworkInformation] = None
        self._connected = True

        if QNetworkInformation.loadDefaultBackend():
            self._info = QNetworkInformation.instance()
        if self._info is None:
            logger.warning("No network information backend; assuming connected")
            return

        self._connected = self._is_reachable(self._info.reachability())
        self._info.reachabilityChanged.connect(self._on_reachability_changed)

    @staticmethod
    def _is_reachable(reachability) -> bool:
        return reachability != QNetworkInformation.Reachability.Disconnected

    def is_connected(self) -> bool:
        return self._connected

    def _on_reachability_changed(self, reachability) -> None:
        connected = self._is_reachable(reachability)
        if connected == self._connected:
            return
        self._connected = connected
        logger.info(f"Connectivity changed: {'online' if connected else 'offline'}")
        self.connectivity_changed.emit(connected)

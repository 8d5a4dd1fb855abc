# SafeImage — Retry Controller

"""
Retry/connectivity decision logic for one image slot.

The controller decides, from the bound resource key, the retry count,
connectivity and the latest load outcome, which visual state applies and
when the next load request goes out.

Flow:
    bind(key)           → LoadRequest(key, 0) emitted (unless offline)
    FAILURE             → retry timer started, RETRY_PENDING
    timer elapses       → retry_count += 1, LoadRequest(key, retry_count)
    FAILURE at ceiling  → FALLBACK (terminal)
    offline → online    → immediate retry if retry_count > 0

All entry points run on the Qt event loop thread. The retry delay is a
single-shot QTimer owned by the controller.

Example:
    ctrl = RetryController(RetryConfig(max_retries=2), connectivity=source)
    ctrl.load_requested.connect(fetcher.fetch)
    ctrl.visual_state_changed.connect(widget.on_visual_state)
    ctrl.bind("https://example.com/a.png")
"""

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from safe_image.core.connectivity import ConnectivitySource
from safe_image.core.models import (
    LoadOutcome, LoadRequest, RetryState, VisualSnapshot, VisualState
)
from safe_image.utils.config import RetryConfig
from safe_image.utils.logging import get_logger

logger = get_logger(__name__)


class RetryController(QObject):
    """
    Owns RetryState for the bound resource and drives retries.

    Signals:
        load_requested(object): LoadRequest to hand to the fetcher
        visual_state_changed(object): VisualSnapshot, emitted on change
    """

    load_requested = Signal(object)
    visual_state_changed = Signal(object)

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        connectivity: Optional[ConnectivitySource] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        config = config or RetryConfig.from_config()

        self._state = RetryState(
            max_retries=config.max_retries,
            connectivity_enabled=config.connectivity_enabled,
        )
        self._retry_delay_ms = config.retry_delay_ms

        self._bound = False
        self._disposed = False
        self._last_outcome: Optional[LoadOutcome] = None
        self._in_flight = False
        self._deferred_initial = False  # Initial load held back while offline
        self._deferred_retry = False    # Retry timer elapsed while offline
        self._last_snapshot: Optional[VisualSnapshot] = None

        self._retry_timer = QTimer(self)
        self._retry_timer.setSingleShot(True)
        self._retry_timer.timeout.connect(self._on_retry_timer)

        self._connectivity: Optional[ConnectivitySource] = None
        if connectivity is not None and config.connectivity_enabled:
            self._connectivity = connectivity
            self._state.is_connected = connectivity.is_connected()
            connectivity.connectivity_changed.connect(self.report_connectivity_change)

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def state(self) -> RetryState:
        return self._state

    @property
    def resource_key(self) -> Optional[str]:
        return self._state.resource_key

    @property
    def retry_count(self) -> int:
        return self._state.retry_count

    @property
    def max_retries(self) -> int:
        return self._state.max_retries

    @property
    def retry_delay_ms(self) -> int:
        return self._retry_delay_ms

    @property
    def is_connected(self) -> bool:
        return self._state.is_connected

    @property
    def last_outcome(self) -> Optional[LoadOutcome]:
        return self._last_outcome

    @property
    def retry_pending(self) -> bool:
        """True while a retry is scheduled or held back by offline status."""
        return self._retry_timer.isActive() or self._deferred_retry

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def current_request(self) -> LoadRequest:
        return LoadRequest(self._state.resource_key, self._state.retry_count)

    # ========================================================================
    # Event entry points
    # ========================================================================

    def bind(self, resource_key: Optional[str]) -> None:
        """
        Bind to a resource, resetting retry state if the key changed.

        Rebinding to the same key is a no-op. A non-empty key emits the
        initial LoadRequest right away unless offline gating holds it back.
        """
        if self._disposed:
            return
        if self._bound and resource_key == self._state.resource_key:
            return

        self._cancel_retry()
        self._bound = True
        self._state.resource_key = resource_key
        self._state.retry_count = 0
        self._last_outcome = None
        self._in_flight = False
        self._deferred_initial = False

        if self._state.has_resource:
            if self._state.offline_gated:
                logger.debug(f"Offline; deferring initial load of {resource_key}")
                self._deferred_initial = True
            else:
                self._emit_request()

        self._publish()

    def report_outcome(
        self,
        outcome: LoadOutcome,
        request: Optional[LoadRequest] = None,
    ) -> None:
        """
        Record the outcome of the current attempt.

        Args:
            outcome: SUCCESS or FAILURE
            request: Attempt the outcome belongs to. Outcomes for any other
                request than current_request are ignored.
        """
        if self._disposed or not self._state.has_resource:
            return
        if request is not None and request != self.current_request:
            logger.debug(f"Ignoring outcome for superseded request {request.cache_key}")
            return

        self._in_flight = False
        self._last_outcome = outcome

        if outcome is LoadOutcome.SUCCESS:
            self._cancel_retry()
        elif self._state.exhausted:
            logger.info(
                f"Giving up on {self._state.resource_key} after "
                f"{self._state.retry_count} retries"
            )
        elif not self._retry_timer.isActive():
            self._retry_timer.start(self._retry_delay_ms)

        self._publish()

    def report_connectivity_change(self, is_connected: bool) -> None:
        """
        Record a connectivity change.

        An offline → online transition retries immediately when at least one
        retry has happened on the current resource, and sends a held-back
        initial load otherwise.
        """
        if self._disposed:
            return

        is_connected = bool(is_connected)
        was_connected = self._state.is_connected
        self._state.is_connected = is_connected

        if not self._state.connectivity_enabled or was_connected == is_connected:
            return

        if is_connected and self._state.has_resource:
            if self._state.retry_count > 0 or self._deferred_retry:
                self._cancel_retry()
                self._retry()
            elif self._deferred_initial:
                self._deferred_initial = False
                self._emit_request()

        self._publish()

    def dispose(self) -> None:
        """Cancel the retry timer and unsubscribe from connectivity."""
        if self._disposed:
            return
        self._disposed = True
        self._cancel_retry()

        if self._connectivity is not None:
            try:
                self._connectivity.connectivity_changed.disconnect(
                    self.report_connectivity_change
                )
            except RuntimeError as e:
                # Source already destroyed on the C++ side
                logger.debug(f"Connectivity source gone before dispose: {e}")
            self._connectivity = None

    # ========================================================================
    # State queries
    # ========================================================================

    def current_visual_state(self) -> VisualState:
        s = self._state
        if not s.has_resource:
            return VisualState.FALLBACK
        if s.offline_gated:
            return VisualState.OFFLINE
        if self._last_outcome is LoadOutcome.SUCCESS:
            return VisualState.SUCCESS
        if self._last_outcome is LoadOutcome.FAILURE:
            if s.exhausted:
                return VisualState.FALLBACK
            return VisualState.RETRY_PENDING
        if s.retry_count == 0:
            return VisualState.LOADING
        return VisualState.RETRY_PENDING

    def snapshot(self) -> VisualSnapshot:
        state = self.current_visual_state()
        attempt = 0
        if state is VisualState.RETRY_PENDING:
            # A scheduled retry shows the attempt it will make
            attempt = self._state.retry_count
            if not self._in_flight:
                attempt += 1
        return VisualSnapshot(
            state=state,
            attempt=attempt,
            max_retries=self._state.max_retries,
            in_flight=self._in_flight,
        )

    # ========================================================================
    # Internal
    # ========================================================================

    def _on_retry_timer(self) -> None:
        """Retry delay elapsed."""
        if self._disposed:
            return
        self._retry()

    def _retry(self) -> bool:
        """Start the next retry attempt if the budget allows."""
        if self._state.exhausted:
            return False
        if self._state.offline_gated:
            self._deferred_retry = True
            self._publish()
            return False

        self._deferred_retry = False
        self._state.retry_count += 1
        self._last_outcome = None
        logger.info(
            f"Retrying {self._state.resource_key} "
            f"({self._state.retry_count}/{self._state.max_retries})"
        )
        self._emit_request()
        self._publish()
        return True

    def _emit_request(self) -> None:
        request = self.current_request
        self._in_flight = True
        self.load_requested.emit(request)

    def _cancel_retry(self) -> None:
        self._retry_timer.stop()
        self._deferred_retry = False

    def _publish(self) -> None:
        """Emit visual_state_changed if the snapshot changed."""
        snapshot = self.snapshot()
        if snapshot == self._last_snapshot:
            return
        self._last_snapshot = snapshot
        logger.debug(f"Visual state -> {snapshot.state.name}")
        self.visual_state_changed.emit(snapshot)

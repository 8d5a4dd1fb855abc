# SafeImage — Image Fetcher Contract

"""
Boundary contract for the external image fetcher.

The fetcher receives LoadRequests and reports back through signals. It owns
transport, decoding and caching; SafeImageWidget only forwards outcomes to
its RetryController and never inspects error contents.
"""

import hashlib
import random
from typing import Dict, List, Optional

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtGui import QColor, QPixmap


class ImageFetcher(QObject):
    """
    Abstract asynchronous image fetcher.

    Signals:
        loading(object): LoadRequest accepted and in progress
        succeeded(object, object): (LoadRequest, QPixmap)
        failed(object, str): (LoadRequest, error message)
    """

    loading = Signal(object)
    succeeded = Signal(object, object)
    failed = Signal(object, str)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)

    def fetch(self, request) -> None:
        """Start loading request.cache_key; report via signals."""
        raise NotImplementedError


class SimulatedFetcher(ImageFetcher):
    """
    In-process fetcher producing solid-color pixmaps after a delay.

    Failures are either forced (the first fail_first attempts of every
    resource fail) or random with failure_rate. Used by the demo gallery
    and tests; no network access.
    """

    def __init__(
        self,
        latency_ms: int = 300,
        failure_rate: float = 0.0,
        fail_first: int = 0,
        seed: Optional[int] = None,
        size: int = 256,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be within [0, 1]")
        self._latency_ms = max(0, int(latency_ms))
        self._failure_rate = failure_rate
        self._fail_first = max(0, int(fail_first))
        self._rng = random.Random(seed)
        self._size = size
        self._attempts: Dict[str, int] = {}
        self.requests: List = []

    def fetch(self, request) -> None:
        self.requests.append(request)
        self.loading.emit(request)
        QTimer.singleShot(self._latency_ms, self, lambda: self._complete(request))

    def attempts_for(self, resource_key: str) -> int:
        return self._attempts.get(resource_key, 0)

    def _complete(self, request) -> None:
        key = request.resource_key or ""
        attempt = self._attempts.get(key, 0)
        self._attempts[key] = attempt + 1

        if attempt < self._fail_first or self._rng.random() < self._failure_rate:
            self.failed.emit(request, f"simulated failure for {request.cache_key}")
            return

        pixmap = QPixmap(self._size, self._size)
        pixmap.fill(self._color_for(key))
        self.succeeded.emit(request, pixmap)

    @staticmethod
    def _color_for(key: str) -> QColor:
        """Stable color per resource key."""
        digest = hashlib.md5(key.encode("utf-8")).digest()
        return QColor(digest[0], digest[1], digest[2])

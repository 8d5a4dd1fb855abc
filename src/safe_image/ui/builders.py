# SafeImage — Preset Builders

"""
Pre-configured SafeImageWidget factories for common layouts.

Presets:
    avatar          → circular, person fallback
    card            → rounded corners, content thumbnails
    banner          → full width, fixed height
    thumbnail       → square, fewer and faster retries
    profile_header  → banner with an avatar overlapping its bottom edge

Example:
    avatar_widget = avatar(user.avatar_url, fetcher, radius=24, on_tap=open_profile)
"""

from typing import Callable, Optional

from PySide6.QtWidgets import QFrame, QSizePolicy, QWidget

from safe_image.core.connectivity import ConnectivitySource
from safe_image.core.fetcher import ImageFetcher
from safe_image.ui.image_widget import SafeImageWidget
from safe_image.ui.styles import COLORS
from safe_image.utils import config

AVATAR_ICON = "avatar-default"
CARD_ICON = "image-x-generic"
BANNER_ICON = "landscape"
THUMBNAIL_ICON = "image-x-generic"

AVATAR_RING_WIDTH = 3
AVATAR_INSET = 16


def avatar(
    url: Optional[str],
    fetcher: Optional[ImageFetcher] = None,
    radius: float = 24,
    fallback_icon=AVATAR_ICON,
    on_tap: Optional[Callable[[], None]] = None,
    semantic_label: Optional[str] = None,
    connectivity: Optional[ConnectivitySource] = None,
    parent: Optional[QWidget] = None,
) -> SafeImageWidget:
    """Circular avatar for profile pictures."""
    return SafeImageWidget(
        url=url,
        fetcher=fetcher,
        connectivity=connectivity,
        width=int(radius * 2),
        height=int(radius * 2),
        fallback_icon=fallback_icon,
        border_radius=radius,
        on_tap=on_tap,
        semantic_label=semantic_label or "User avatar",
        parent=parent,
    )


def card(
    url: Optional[str],
    fetcher: Optional[ImageFetcher] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    border_radius: float = 8,
    fallback_icon=CARD_ICON,
    on_tap: Optional[Callable[[], None]] = None,
    semantic_label: Optional[str] = None,
    connectivity: Optional[ConnectivitySource] = None,
    parent: Optional[QWidget] = None,
) -> SafeImageWidget:
    """Card image with rounded corners."""
    return SafeImageWidget(
        url=url,
        fetcher=fetcher,
        connectivity=connectivity,
        width=width,
        height=height,
        fallback_icon=fallback_icon,
        border_radius=border_radius,
        on_tap=on_tap,
        semantic_label=semantic_label,
        parent=parent,
    )


def banner(
    url: Optional[str],
    fetcher: Optional[ImageFetcher] = None,
    height: int = 200,
    fallback_icon=BANNER_ICON,
    on_tap: Optional[Callable[[], None]] = None,
    semantic_label: Optional[str] = None,
    connectivity: Optional[ConnectivitySource] = None,
    parent: Optional[QWidget] = None,
) -> SafeImageWidget:
    """Full-width banner; stretches horizontally, fixed height."""
    widget = SafeImageWidget(
        url=url,
        fetcher=fetcher,
        connectivity=connectivity,
        height=height,
        fit="cover",
        fallback_icon=fallback_icon,
        on_tap=on_tap,
        semantic_label=semantic_label,
        parent=parent,
    )
    widget.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
    return widget


def thumbnail(
    url: Optional[str],
    fetcher: Optional[ImageFetcher] = None,
    size: int = 80,
    border_radius: float = 8,
    fallback_icon=THUMBNAIL_ICON,
    on_tap: Optional[Callable[[], None]] = None,
    semantic_label: Optional[str] = None,
    connectivity: Optional[ConnectivitySource] = None,
    parent: Optional[QWidget] = None,
) -> SafeImageWidget:
    """Square thumbnail for galleries; retries fewer times, sooner."""
    return SafeImageWidget(
        url=url,
        fetcher=fetcher,
        connectivity=connectivity,
        width=size,
        height=size,
        fallback_icon=fallback_icon,
        border_radius=border_radius,
        on_tap=on_tap,
        semantic_label=semantic_label,
        max_retries=config.get("thumbnail_max_retries", 2),
        retry_delay_ms=config.get("thumbnail_retry_delay_ms", 500),
        parent=parent,
    )


class ProfileHeader(QWidget):
    """
    Banner with a ringed avatar overlapping its bottom edge.

    The header is banner_height + avatar_radius / 2 tall so the overlapping
    part of the avatar stays inside the widget.
    """

    def __init__(
        self,
        avatar_url: Optional[str],
        banner_url: Optional[str] = None,
        fetcher: Optional[ImageFetcher] = None,
        avatar_radius: float = 40,
        banner_height: int = 150,
        on_avatar_tap: Optional[Callable[[], None]] = None,
        on_banner_tap: Optional[Callable[[], None]] = None,
        connectivity: Optional[ConnectivitySource] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._avatar_radius = avatar_radius
        self._banner_height = banner_height

        self._banner = banner(
            banner_url,
            fetcher,
            height=banner_height,
            on_tap=on_banner_tap,
            semantic_label="Profile banner",
            connectivity=connectivity,
            parent=self,
        )

        ring_size = int(avatar_radius * 2) + 2 * AVATAR_RING_WIDTH
        self._ring = QFrame(self)
        self._ring.setFixedSize(ring_size, ring_size)
        self._ring.setStyleSheet(
            f"background-color: {COLORS['white']};"
            f"border-radius: {ring_size // 2}px;"
        )
        self._avatar = avatar(
            avatar_url,
            fetcher,
            radius=avatar_radius,
            on_tap=on_avatar_tap,
            semantic_label="Profile avatar",
            connectivity=connectivity,
            parent=self._ring,
        )
        self._avatar.move(AVATAR_RING_WIDTH, AVATAR_RING_WIDTH)

        self.setFixedHeight(int(banner_height + avatar_radius / 2))
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self._layout_children()

    @property
    def banner(self) -> SafeImageWidget:
        return self._banner

    @property
    def avatar(self) -> SafeImageWidget:
        return self._avatar

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._layout_children()

    def _layout_children(self) -> None:
        self._banner.setGeometry(0, 0, self.width(), self._banner_height)
        # Avatar bottom sits avatar_radius / 2 below the banner
        ring_top = int(self._banner_height - 1.5 * self._avatar_radius) - AVATAR_RING_WIDTH
        self._ring.move(AVATAR_INSET, ring_top)
        self._ring.raise_()

    def dispose(self) -> None:
        self._banner.dispose()
        self._avatar.dispose()


def profile_header(
    avatar_url: Optional[str],
    banner_url: Optional[str] = None,
    fetcher: Optional[ImageFetcher] = None,
    avatar_radius: float = 40,
    banner_height: int = 150,
    on_avatar_tap: Optional[Callable[[], None]] = None,
    on_banner_tap: Optional[Callable[[], None]] = None,
    connectivity: Optional[ConnectivitySource] = None,
    parent: Optional[QWidget] = None,
) -> ProfileHeader:
    """Profile page header: banner plus overlapping avatar."""
    return ProfileHeader(
        avatar_url,
        banner_url,
        fetcher=fetcher,
        avatar_radius=avatar_radius,
        banner_height=banner_height,
        on_avatar_tap=on_avatar_tap,
        on_banner_tap=on_banner_tap,
        connectivity=connectivity,
        parent=parent,
    )

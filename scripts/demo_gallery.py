#!/usr/bin/env python
# SafeImage Demo Gallery

"""
Desktop gallery showing the SafeImage presets against a flaky fetcher.

Usage:
    python scripts/demo_gallery.py
    python scripts/demo_gallery.py --failure-rate 0.5 --latency 800
    python scripts/demo_gallery.py --config demo.yaml --verbose
"""

import sys
import argparse
import logging
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from PySide6.QtWidgets import (
    QApplication, QCheckBox, QGridLayout, QHBoxLayout, QLabel, QMainWindow,
    QVBoxLayout, QWidget
)

from safe_image.core.connectivity import ManualConnectivitySource
from safe_image.core.fetcher import SimulatedFetcher
from safe_image.ui import builders
from safe_image.ui.image_widget import SafeImageWidget
from safe_image.utils.config import load_config
from safe_image.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)

SAMPLE_URL = "https://picsum.photos/seed/{}/400/300"


def build_window(fetcher: SimulatedFetcher, connectivity: ManualConnectivitySource) -> QMainWindow:
    """Assemble the gallery window."""
    window = QMainWindow()
    window.setWindowTitle("SafeImage Examples")

    root = QWidget()
    layout = QVBoxLayout(root)

    offline = QCheckBox("Simulate offline")
    offline.toggled.connect(lambda checked: connectivity.set_connected(not checked))
    layout.addWidget(offline)

    layout.addWidget(builders.profile_header(
        SAMPLE_URL.format("avatar"),
        SAMPLE_URL.format("banner"),
        fetcher=fetcher,
        connectivity=connectivity,
        on_avatar_tap=lambda: logger.info("Avatar tapped"),
    ))

    layout.addWidget(QLabel("Avatars"))
    avatars = QHBoxLayout()
    for i, radius in enumerate((20, 24, 30)):
        avatars.addWidget(builders.avatar(
            SAMPLE_URL.format(f"user{i}"), fetcher, radius=radius,
            connectivity=connectivity,
        ))
    avatars.addWidget(builders.avatar(None, fetcher, connectivity=connectivity))
    avatars.addStretch(1)
    layout.addLayout(avatars)

    layout.addWidget(QLabel("Thumbnails"))
    grid = QGridLayout()
    for i in range(8):
        grid.addWidget(
            builders.thumbnail(SAMPLE_URL.format(f"thumb{i}"), fetcher, connectivity=connectivity),
            i // 4, i % 4,
        )
    layout.addLayout(grid)

    layout.addWidget(QLabel("Custom"))
    custom = QHBoxLayout()
    custom.addWidget(builders.card(
        SAMPLE_URL.format("card"), fetcher, width=200, height=150,
        connectivity=connectivity,
    ))
    custom.addWidget(SafeImageWidget(
        url=SAMPLE_URL.format("noshimmer"),
        fetcher=fetcher,
        connectivity=connectivity,
        width=150,
        height=150,
        show_shimmer=False,
        max_retries=5,
        retry_delay_ms=1000,
        fallback_widget=QLabel("Custom fallback"),
    ))
    custom.addStretch(1)
    layout.addLayout(custom)

    window.setCentralWidget(root)
    return window


def main() -> int:
    parser = argparse.ArgumentParser(description="SafeImage demo gallery")
    parser.add_argument("--failure-rate", type=float, default=0.3,
                        help="Probability that a fetch attempt fails")
    parser.add_argument("--latency", type=int, default=600,
                        help="Simulated fetch latency in ms")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=str, default=None,
                        help="YAML file with config overrides")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else None)
    if args.config:
        load_config(args.config)

    app = QApplication(sys.argv)
    fetcher = SimulatedFetcher(
        latency_ms=args.latency,
        failure_rate=args.failure_rate,
        seed=args.seed,
    )
    connectivity = ManualConnectivitySource(connected=True)

    window = build_window(fetcher, connectivity)
    window.resize(720, 820)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())

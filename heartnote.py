"""
heartnote.py

Real entrypoint that launches the card.

Integration
- Parses arguments and configures logging
- Loads config and builds the card deck
- Creates QApplication, CardWindow, the Qt timer backend and the Qt audio devices
- Wires window and audio signals into CardController and starts the Qt event loop
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

import card_deck
from card_controller import CardController
from card_window import CardWindow
from config import load_config
from media_player_bridge import QtAudioDeviceFactory
from qt_timers import QtTimerBackend

logger = logging.getLogger("heartnote")


def _build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(description="HeartNote greeting card")
    argument_parser.add_argument("--config", type=Path, default=None, help="Path to a heartnote_config.json file.")
    argument_parser.add_argument("--fullscreen", action="store_true", help="Start in fullscreen.")
    argument_parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for the console.",
    )
    return argument_parser


def main(argv: Optional[List[str]] = None) -> int:
    parsed_args = _build_argument_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, parsed_args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app_config, config_path = load_config(parsed_args.config)
    except (OSError, ValueError) as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    deck = card_deck.build_deck(app_config.content)
    logger.info(
        "starting card for %s (%d pages, config=%s)",
        deck.recipient,
        deck.total_pages,
        config_path if config_path is not None else "defaults",
    )

    qt_application = QApplication(sys.argv)

    window = CardWindow(
        deck,
        title=app_config.window.title,
        track_pulse_ms=app_config.timing.track_pulse_ms,
    )
    window.resize(app_config.window.width, app_config.window.height)

    timer_backend = QtTimerBackend(window)
    device_factory = QtAudioDeviceFactory(window)

    controller = CardController(
        deck=deck,
        renderer=window,
        device_factory=device_factory,
        timer_backend=timer_backend,
        timing=app_config.timing,
    )

    window.tapOccurred.connect(controller.tap)
    window.controlClicked.connect(controller.click)
    window.keyNamed.connect(controller.key_press)
    window.visibilityChanged.connect(controller.set_visible)
    device_factory.trackEnded.connect(controller.on_track_ended)
    device_factory.playbackRejected.connect(controller.on_playback_rejected)

    controller.start()

    if parsed_args.fullscreen or app_config.window.fullscreen:
        window.showFullScreen()
    else:
        window.show()

    return int(qt_application.exec())


if __name__ == "__main__":
    raise SystemExit(main())

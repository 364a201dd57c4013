# -*- coding: utf-8 -*-
########################
# paths.py
########################
# Purpose:
# - Central filesystem path helpers for the app.
# - Defines where card media (audio tracks) live relative to the project root.
#
# Design notes:
# - Keep path derivation consistent across modules.
# - No Qt usage. Return pathlib.Path only.
#
########################
# Interfaces:
# Public functions:
# - app_root_dir() -> pathlib.Path
# - media_dir(media_dir_text: Optional[str] = None) -> pathlib.Path
# - resolve_track_source(source: str, media_dir_text: Optional[str] = None) -> pathlib.Path
#
# Inputs:
# - The launched Python entrypoint file location and the optional content.media_dir setting.
#
# Outputs:
# - Paths used by card_deck.py when registering tracks.
#
########################

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional


def _entrypoint_file_path() -> Optional[Path]:
    """Best-effort resolution of the launched Python entrypoint file."""
    main_module = sys.modules.get("__main__")
    main_file = getattr(main_module, "__file__", None)
    if main_file:
        return Path(str(main_file)).resolve()

    argv0 = str(sys.argv[0] or "").strip()
    if argv0 and argv0 not in {"-c", "-m"}:
        try:
            return Path(argv0).resolve()
        except OSError:
            return None

    return None


def app_root_dir() -> Path:
    """
    Return the directory containing the launched .py file, or the working directory.

    A console-script launcher (bin/heartnote, Scripts/heartnote.exe) is not a .py file,
    so installed runs resolve media relative to where the user started the card.
    """
    entrypoint_path = _entrypoint_file_path()
    if entrypoint_path is not None and entrypoint_path.suffix.lower() == ".py":
        return entrypoint_path.parent

    return Path.cwd().resolve()


def media_dir(media_dir_text: Optional[str] = None) -> Path:
    """Return the media root directory (not created automatically)."""
    if media_dir_text:
        return Path(media_dir_text).expanduser()
    return app_root_dir() / "media"


def resolve_track_source(source: str, media_dir_text: Optional[str] = None) -> Path:
    source_path = Path(str(source or "")).expanduser()
    if source_path.is_absolute():
        return source_path
    return media_dir(media_dir_text) / source_path

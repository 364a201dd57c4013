"""
config.py

Typed configuration loading and validation for HeartNote.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If HEARTNOTE_CONFIG_PATH is set, that file is used (and must exist).
- Otherwise HeartNote searches these paths in order and uses the first one that exists:
  1) ./heartnote_config.json (current working directory)
  2) <user config dir>/HeartNote/HeartNote/heartnote_config.json
  3) <user config dir>/HeartNote/HeartNote/config.json
- When none exists the built-in defaults are used, so the card opens without any setup.

Example config file (heartnote_config.json)
{
  "timing": {
    "double_tap_window_ms": 300,
    "envelope_advance_delay_ms": 1300,
    "flip_revert_delay_ms": 2200
  },
  "content": {
    "recipient": "Sam",
    "media_dir": "~/Music/card",
    "tracks": [
      {"track_id": "1", "title": "Our Song", "source": "our_song.mp3"}
    ],
    "artworks": [
      {"title": "Sunset", "caption": "The evening we met", "track_id": "1"}
    ]
  },
  "window": {
    "fullscreen": false
  }
}
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


class TimingConfig(BaseModel):
    double_tap_window_ms: int = Field(default=300, ge=50, le=2000, description="Max gap between two taps on one surface.")
    envelope_advance_delay_ms: int = Field(
        default=1300, ge=0, le=10000, description="Delay after the envelope opens before the card moves on."
    )
    flip_revert_delay_ms: int = Field(default=2200, ge=0, le=20000, description="Delay before a flipped card turns back.")
    track_pulse_ms: int = Field(default=900, ge=0, le=5000, description="Length of the suggested-track highlight.")


class TrackConfig(BaseModel):
    track_id: str = Field(description="Stable id, used in play:<track_id> control ids.")
    title: str = Field(default="")
    artist: str = Field(default="")
    source: str = Field(default="", description="Audio file path, absolute or relative to media_dir.")

    @field_validator("track_id")
    @classmethod
    def validate_track_id(cls, value: str) -> str:
        trimmed = (value or "").strip()
        if not trimmed:
            raise ValueError("track_id must not be empty")
        return trimmed


class ArtworkConfig(BaseModel):
    title: str = Field(default="")
    caption: str = Field(default="", description="Shown while the artwork is selected.")
    track_id: Optional[str] = Field(default=None, description="Track suggested on the songs page.")

    @field_validator("track_id")
    @classmethod
    def normalize_track_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


class FlipCardConfig(BaseModel):
    card_id: str
    front: str = Field(default="")
    back: str = Field(default="")

    @field_validator("card_id")
    @classmethod
    def validate_card_id(cls, value: str) -> str:
        trimmed = (value or "").strip()
        if not trimmed:
            raise ValueError("card_id must not be empty")
        return trimmed


def _default_tracks() -> List[TrackConfig]:
    return [
        TrackConfig(track_id="1", title="First Dance", source="track1.mp3"),
        TrackConfig(track_id="2", title="Road Trip", source="track2.mp3"),
        TrackConfig(track_id="3", title="Slow Sunday", source="track3.mp3"),
    ]


def _default_artworks() -> List[ArtworkConfig]:
    return [
        ArtworkConfig(title="Sunrise", caption="Every morning with you", track_id="1"),
        ArtworkConfig(title="Open Road", caption="Wherever we go next", track_id="2"),
        ArtworkConfig(title="Quiet Room", caption="Home is you", track_id="3"),
    ]


def _default_flip_cards() -> List[FlipCardConfig]:
    return [
        FlipCardConfig(card_id="laugh", front="Tap me", back="Your laugh"),
        FlipCardConfig(card_id="kind", front="Tap me", back="Your kindness"),
        FlipCardConfig(card_id="us", front="Tap me", back="Us"),
    ]


class ContentConfig(BaseModel):
    recipient: str = Field(default="You")
    sender: str = Field(default="")
    letter_text: str = Field(default="I made this little card just for you.")
    media_dir: Optional[str] = Field(default=None, description="Base directory for relative track sources.")
    tracks: List[TrackConfig] = Field(default_factory=_default_tracks)
    artworks: List[ArtworkConfig] = Field(default_factory=_default_artworks)
    flip_cards: List[FlipCardConfig] = Field(default_factory=_default_flip_cards)

    @field_validator("media_dir")
    @classmethod
    def normalize_media_dir(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None

    @model_validator(mode="after")
    def validate_references(self) -> "ContentConfig":
        track_ids = [track.track_id for track in self.tracks]
        if len(set(track_ids)) != len(track_ids):
            raise ValueError("track_id values must be unique")

        card_ids = [card.card_id for card in self.flip_cards]
        if len(set(card_ids)) != len(card_ids):
            raise ValueError("card_id values must be unique")

        known_track_ids = set(track_ids)
        for artwork in self.artworks:
            if artwork.track_id is not None and artwork.track_id not in known_track_ids:
                raise ValueError(f"artwork {artwork.title!r} refers to unknown track_id {artwork.track_id!r}")
        return self


class WindowConfig(BaseModel):
    title: str = Field(default="HeartNote")
    width: int = Field(default=960, ge=320, le=7680)
    height: int = Field(default=720, ge=240, le=4320)
    fullscreen: bool = Field(default=False)


class AppConfig(BaseModel):
    timing: TimingConfig = Field(default_factory=TimingConfig)
    content: ContentConfig = Field(default_factory=ContentConfig)
    window: WindowConfig = Field(default_factory=WindowConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("HeartNote", "HeartNote"))
    return [
        Path.cwd() / "heartnote_config.json",
        config_directory / "heartnote_config.json",
        config_directory / "config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("HEARTNOTE_CONFIG_PATH", "").strip()
    if explicit_path_text:
        explicit_path = Path(explicit_path_text).expanduser()
        if not explicit_path.exists():
            raise FileNotFoundError(f"HEARTNOTE_CONFIG_PATH points to a missing file: {explicit_path}")
        return explicit_path

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


def _parse_int(value_text: str) -> Optional[int]:
    try:
        return int(value_text)
    except ValueError:
        return None


def _parse_bool(value_text: str) -> Optional[bool]:
    lowered = value_text.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return None


# (environment variable, config section, key, parser). A parser returning None leaves the value alone.
_ENVIRONMENT_OVERRIDES: Tuple[Tuple[str, str, str, Callable[[str], Any]], ...] = (
    ("HEARTNOTE_DOUBLE_TAP_WINDOW_MS", "timing", "double_tap_window_ms", _parse_int),
    ("HEARTNOTE_ENVELOPE_ADVANCE_MS", "timing", "envelope_advance_delay_ms", _parse_int),
    ("HEARTNOTE_FLIP_REVERT_MS", "timing", "flip_revert_delay_ms", _parse_int),
    ("HEARTNOTE_RECIPIENT", "content", "recipient", str),
    ("HEARTNOTE_MEDIA_DIR", "content", "media_dir", str),
    ("HEARTNOTE_FULLSCREEN", "window", "fullscreen", _parse_bool),
)


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional and win over the config file.
    Blank or unparseable values are ignored.
    """
    updated_config = dict(config_dict)

    for env_name, section_name, key_name, parse in _ENVIRONMENT_OVERRIDES:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            continue
        parsed_value = parse(value_text)
        if parsed_value is None:
            continue

        section = updated_config.get(section_name)
        section = dict(section) if isinstance(section, dict) else {}
        section[key_name] = parsed_value
        updated_config[section_name] = section

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict: Dict[str, Any] = {}
    if resolved_path is not None:
        json_dict = _read_json_file_utf8(resolved_path)
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "built-in defaults"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


def to_json(config: AppConfig) -> str:
    return json.dumps(config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

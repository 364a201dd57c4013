import json

import pytest

import config
from config import AppConfig, ContentConfig, TimingConfig, load_config


@pytest.fixture
def no_default_files(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "_default_config_candidates", lambda: [tmp_path / "absent.json"])


def write_config(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadConfig:

    def test_defaults_when_no_file_exists(self, no_default_files):
        loaded, resolved_path = load_config()

        assert resolved_path is None
        assert loaded.timing == TimingConfig()
        assert loaded.timing.double_tap_window_ms == 300
        assert loaded.timing.envelope_advance_delay_ms == 1300
        assert loaded.timing.flip_revert_delay_ms == 2200
        assert [track.track_id for track in loaded.content.tracks] == ["1", "2", "3"]
        assert [card.card_id for card in loaded.content.flip_cards] == ["laugh", "kind", "us"]

    def test_first_existing_candidate_is_used(self, monkeypatch, tmp_path):
        second = write_config(tmp_path / "second.json", {"content": {"recipient": "Sam"}})
        monkeypatch.setattr(config, "_default_config_candidates", lambda: [tmp_path / "first.json", second])

        loaded, resolved_path = load_config()

        assert resolved_path == second
        assert loaded.content.recipient == "Sam"

    def test_explicit_path_partial_file_keeps_other_defaults(self, tmp_path):
        path = write_config(tmp_path / "card.json", {"timing": {"flip_revert_delay_ms": 1000}})

        loaded, resolved_path = load_config(path)

        assert resolved_path == path
        assert loaded.timing.flip_revert_delay_ms == 1000
        assert loaded.timing.envelope_advance_delay_ms == 1300
        assert loaded.window.title == "HeartNote"

    def test_config_path_environment_variable(self, monkeypatch, tmp_path):
        path = write_config(tmp_path / "env.json", {"window": {"fullscreen": True}})
        monkeypatch.setenv("HEARTNOTE_CONFIG_PATH", str(path))

        loaded, resolved_path = load_config()

        assert resolved_path == path
        assert loaded.window.fullscreen is True

    def test_missing_config_path_environment_variable_raises(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HEARTNOTE_CONFIG_PATH", str(tmp_path / "nope.json"))
        with pytest.raises(FileNotFoundError):
            load_config()

    def test_environment_overrides_win_over_file(self, monkeypatch, tmp_path):
        path = write_config(tmp_path / "card.json", {"timing": {"double_tap_window_ms": 250}})
        monkeypatch.setenv("HEARTNOTE_DOUBLE_TAP_WINDOW_MS", "400")
        monkeypatch.setenv("HEARTNOTE_ENVELOPE_ADVANCE_MS", "900")
        monkeypatch.setenv("HEARTNOTE_RECIPIENT", "  Alex  ")
        monkeypatch.setenv("HEARTNOTE_FULLSCREEN", "yes")

        loaded, _resolved_path = load_config(path)

        assert loaded.timing.double_tap_window_ms == 400
        assert loaded.timing.envelope_advance_delay_ms == 900
        assert loaded.content.recipient == "Alex"
        assert loaded.window.fullscreen is True

    def test_unparseable_environment_override_is_ignored(self, monkeypatch, no_default_files):
        monkeypatch.setenv("HEARTNOTE_FLIP_REVERT_MS", "soon")
        monkeypatch.setenv("HEARTNOTE_FULLSCREEN", "maybe")

        loaded, _resolved_path = load_config()

        assert loaded.timing.flip_revert_delay_ms == 2200
        assert loaded.window.fullscreen is False

    def test_invalid_json_raises_value_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_config(path)

    def test_non_object_root_raises_value_error(self, tmp_path):
        path = write_config(tmp_path / "list.json", [1, 2, 3])
        with pytest.raises(ValueError, match="JSON object"):
            load_config(path)

    def test_out_of_range_window_is_rejected(self, tmp_path):
        path = write_config(tmp_path / "card.json", {"timing": {"double_tap_window_ms": 10}})
        with pytest.raises(ValueError, match="validation failed"):
            load_config(path)


class TestContentValidation:

    def test_artwork_must_reference_known_track(self):
        with pytest.raises(ValueError):
            ContentConfig(
                tracks=[{"track_id": "1", "source": "a.mp3"}],
                artworks=[{"title": "Lost", "track_id": "7"}],
            )

    def test_duplicate_track_ids_are_rejected(self):
        with pytest.raises(ValueError):
            ContentConfig(tracks=[{"track_id": "1"}, {"track_id": " 1 "}], artworks=[])

    def test_duplicate_card_ids_are_rejected(self):
        with pytest.raises(ValueError):
            ContentConfig(flip_cards=[{"card_id": "a"}, {"card_id": "a"}])

    def test_blank_ids_are_rejected(self):
        with pytest.raises(ValueError):
            ContentConfig(tracks=[{"track_id": "   "}], artworks=[])

    def test_blank_artwork_track_means_no_suggestion(self):
        content = ContentConfig(artworks=[{"title": "Plain", "track_id": "  "}])
        assert content.artworks[0].track_id is None

    def test_to_json_round_trips_through_model(self):
        original = AppConfig()
        assert AppConfig.model_validate(json.loads(config.to_json(original))) == original

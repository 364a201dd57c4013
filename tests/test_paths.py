import sys
import types

import paths


class TestAppRoot:

    def test_script_launch_uses_script_directory(self, monkeypatch, tmp_path):
        script = tmp_path / "checkout" / "heartnote.py"
        monkeypatch.setitem(sys.modules, "__main__", types.SimpleNamespace(__file__=str(script)))

        assert paths.app_root_dir() == script.resolve().parent
        assert paths.media_dir() == script.resolve().parent / "media"

    def test_console_script_launch_uses_working_directory(self, monkeypatch, tmp_path):
        launcher = tmp_path / "venv" / "bin" / "heartnote"
        monkeypatch.setitem(sys.modules, "__main__", types.SimpleNamespace(__file__=str(launcher)))
        monkeypatch.chdir(tmp_path)

        assert paths.app_root_dir() == tmp_path.resolve()
        assert paths.resolve_track_source("track1.mp3") == tmp_path.resolve() / "media" / "track1.mp3"

    def test_configured_media_dir_wins(self, tmp_path):
        assert paths.resolve_track_source("a.mp3", str(tmp_path)) == tmp_path / "a.mp3"

    def test_absolute_source_is_kept(self, tmp_path):
        source = tmp_path / "song.ogg"
        assert paths.resolve_track_source(str(source), "/elsewhere") == source

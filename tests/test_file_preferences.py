from __future__ import annotations

from stock_game.adapters.file_preferences import FilePreferenceRepository


def test_missing_file_means_enabled(tmp_path) -> None:
    repo = FilePreferenceRepository(tmp_path / "prefs" / "sound_enabled.txt")
    assert repo.is_sound_enabled()


def test_persists_across_instances(tmp_path) -> None:
    path = tmp_path / "prefs" / "sound_enabled.txt"
    FilePreferenceRepository(path).set_sound_enabled(False)

    assert path.read_text(encoding="utf-8") == "false\n"
    assert not FilePreferenceRepository(path).is_sound_enabled()

    FilePreferenceRepository(path).set_sound_enabled(True)
    assert FilePreferenceRepository(path).is_sound_enabled()


def test_lenient_parsing(tmp_path) -> None:
    path = tmp_path / "sound_enabled.txt"
    repo = FilePreferenceRepository(path)

    path.write_text(" OFF \n", encoding="utf-8")
    assert not repo.is_sound_enabled()

    path.write_text("1", encoding="utf-8")
    assert repo.is_sound_enabled()


def test_garbage_reads_as_enabled(tmp_path, caplog) -> None:
    path = tmp_path / "sound_enabled.txt"
    path.write_text("maybe", encoding="utf-8")

    assert FilePreferenceRepository(path).is_sound_enabled()
    assert "Unrecognised sound preference" in caplog.text

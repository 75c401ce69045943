from __future__ import annotations

import json
from pathlib import Path

from actionable_store.config import Settings
from actionable_store.preferences import AnalysisPreferences


def test_defaults_to_false_when_file_missing(tmp_path: Path):
    prefs = AnalysisPreferences(tmp_path / "missing" / "prefs.json")

    assert prefs.get() is False


def test_set_persists_across_instances(tmp_path: Path):
    path = tmp_path / "prefs.json"

    AnalysisPreferences(path).set(True)

    assert AnalysisPreferences(path).get() is True
    assert json.loads(path.read_text(encoding="utf-8")) == {"use_backend_api": True}


def test_set_false_after_true(tmp_path: Path):
    prefs = AnalysisPreferences(tmp_path / "prefs.json")
    prefs.set(True)
    prefs.set(False)

    assert prefs.get() is False


def test_corrupt_file_falls_back_to_default(tmp_path: Path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")

    prefs = AnalysisPreferences(path)

    assert prefs.get() is False
    prefs.set(True)
    assert prefs.get() is True


def test_undecodable_file_falls_back_to_default(tmp_path: Path):
    path = tmp_path / "prefs.json"
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert AnalysisPreferences(path).get() is False


def test_directory_in_place_of_file_falls_back_to_default(tmp_path: Path):
    path = tmp_path / "prefs.json"
    path.mkdir()

    assert AnalysisPreferences(path).get() is False


def test_no_temp_files_left_behind(tmp_path: Path):
    AnalysisPreferences(tmp_path / "prefs.json").set(True)

    assert [p.name for p in tmp_path.iterdir()] == ["prefs.json"]


def test_default_path_comes_from_settings(settings_env: Settings):
    prefs = AnalysisPreferences()

    assert prefs.path == settings_env.preferences_path

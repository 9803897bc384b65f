"""Tests for wrestler.config -- XDG paths, atomic writes, profiles, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from wrestler.config import (
    _atomic_write,
    delete_profile,
    get_config_dir,
    get_data_dir,
    get_profiles_dir,
    list_profiles,
    load_profile,
    profile_exists,
    resolve_base_url,
    resolve_profile,
    save_profile,
)
from wrestler.exceptions import ConfigError
from wrestler.models import Profile, RequestConfig


def _make_profile(name: str = "test", base_url: str = "https://api.example.com/") -> Profile:
    return Profile(name=name, base_url=base_url)


# ------------------------------------------------------------------ #
# Directories
# ------------------------------------------------------------------ #


class TestXDGPathsLinux:
    """XDG directory resolution on Linux and BSD."""

    def test_config_dir_xdg_custom(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "wrestler"
        assert get_config_dir().is_dir()

    def test_data_dir_xdg_custom(self, isolated_config: Path) -> None:
        assert get_data_dir() == isolated_config / "data" / "wrestler"

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("wrestler.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        with patch("wrestler.config.Path.home", return_value=tmp_path):
            assert get_config_dir() == tmp_path / ".config" / "wrestler"

    def test_profiles_dir_is_inside_config_dir(self, isolated_config: Path) -> None:
        assert get_profiles_dir() == get_config_dir() / "profiles"


class TestXDGPathsFallback:
    """Home-directory fallback on other platforms."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("wrestler.config._is_xdg_platform", lambda: False)
        with patch("wrestler.config.Path.home", return_value=tmp_path):
            assert get_config_dir() == tmp_path / ".wrestler"

    def test_data_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("wrestler.config._is_xdg_platform", lambda: False)
        with patch("wrestler.config.Path.home", return_value=tmp_path):
            assert get_data_dir() == tmp_path / ".wrestler" / "logs"


# ------------------------------------------------------------------ #
# Atomic writes
# ------------------------------------------------------------------ #


class TestAtomicWrite:
    """Temp-file-and-rename writes."""

    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text() == '{"a": 1}'

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "nested" / "file.json"
        _atomic_write(target, "x")
        assert target.read_text() == "x"

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        with patch("wrestler.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                _atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []


# ------------------------------------------------------------------ #
# Profiles
# ------------------------------------------------------------------ #


class TestProfiles:
    """Profile storage: save, load, list, delete."""

    def test_list_empty(self, isolated_config: Path) -> None:
        assert list_profiles() == []

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        profile = Profile(
            name="prod",
            base_url="https://prod.example.com/rest/",
            handler="simple",
            request=RequestConfig(timeout=5, headers={"X-Token": "abc"}),
        )
        path = save_profile(profile)
        assert path.name == "prod.json"
        assert json.loads(path.read_text())["handler"] == "simple"
        assert load_profile("prod") == profile

    def test_list_sorted(self, isolated_config: Path) -> None:
        save_profile(_make_profile("zeta"))
        save_profile(_make_profile("alpha"))
        assert list_profiles() == ["alpha", "zeta"]

    def test_profile_exists(self, isolated_config: Path) -> None:
        assert not profile_exists("x")
        save_profile(_make_profile("x"))
        assert profile_exists("x")

    def test_delete(self, isolated_config: Path) -> None:
        save_profile(_make_profile("gone"))
        delete_profile("gone")
        assert list_profiles() == []

    def test_delete_nonexistent(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            delete_profile("missing")

    def test_load_nonexistent(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_profile("missing")

    def test_load_invalid_json(self, isolated_config: Path) -> None:
        (get_profiles_dir() / "bad.json").write_text("{nope")
        with pytest.raises(ConfigError, match="Invalid profile 'bad'"):
            load_profile("bad")

    def test_load_invalid_schema(self, isolated_config: Path) -> None:
        (get_profiles_dir() / "bad.json").write_text(json.dumps({"name": "bad"}))
        with pytest.raises(ConfigError, match="Invalid profile"):
            load_profile("bad")

    def test_extra_fields_preserved(self, isolated_config: Path) -> None:
        data = {"name": "x", "base_url": "http://x/", "owner": "ops"}
        (get_profiles_dir() / "x.json").write_text(json.dumps(data))
        assert load_profile("x").model_extra == {"owner": "ops"}

    @pytest.mark.parametrize("name", ["", "../etc", "a/b", ".hidden"])
    def test_invalid_names(self, isolated_config: Path, name: str) -> None:
        with pytest.raises(ConfigError, match="Invalid profile name"):
            load_profile(name)


# ------------------------------------------------------------------ #
# Precedence
# ------------------------------------------------------------------ #


class TestResolveProfile:
    """Choosing the active profile from flag, env or store."""

    def test_none_when_nothing_stored(self, isolated_config: Path) -> None:
        assert resolve_profile() is None

    def test_single_profile_picked(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        assert resolve_profile().name == "only"

    def test_ambiguous_returns_none(self, isolated_config: Path) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        assert resolve_profile() is None

    def test_env_selects(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        monkeypatch.setenv("WRESTLER_PROFILE", "b")
        assert resolve_profile().name == "b"

    def test_cli_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("a"))
        save_profile(_make_profile("b"))
        monkeypatch.setenv("WRESTLER_PROFILE", "b")
        assert resolve_profile("a").name == "a"

    def test_unknown_cli_profile(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_profile("missing")


class TestResolveBaseUrl:
    """Base URL precedence: flag, env, profile."""

    def test_cli_wins(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WRESTLER_BASE_URL", "http://env/")
        assert resolve_base_url("http://cli/", _make_profile()) == "http://cli/"

    def test_env_beats_profile(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WRESTLER_BASE_URL", "http://env/")
        assert resolve_base_url(None, _make_profile()) == "http://env/"

    def test_profile(self, isolated_config: Path) -> None:
        assert resolve_base_url(None, _make_profile(base_url="http://p/")) == "http://p/"

    def test_missing(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="No base URL"):
            resolve_base_url()

# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import shutil
import subprocess
from pathlib import Path

import platformdirs
import pytest

from flagscan.config import Config, get_config_dirs, load_config_file
from flagscan.log import ColorMode, Loglevel
from flagscan.registry import MAX_FLAGS


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLAGSCAN_CONFIG", raising=False)


def init_repository(path: Path) -> None:
    subprocess.run(["git", "init", path], check=True)


@pytest.mark.skipif(shutil.which("git") is None, reason="git binary is not available")
def test_config_discovery_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    testrepo = tmp_path.joinpath("testrepo")
    testrepo.mkdir()
    init_repository(testrepo)
    monkeypatch.chdir(testrepo)

    config_file = testrepo.joinpath("flagscan.toml")
    config_file.touch()

    _, path = load_config_file()
    assert path is not None
    assert path.name == "flagscan.toml"

    foodir = testrepo.joinpath("foo")
    foodir.mkdir()
    monkeypatch.chdir(foodir)

    _, path = load_config_file()
    assert path is not None
    assert config_file.resolve() == path.resolve()


def test_config_discovery_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path.joinpath("flagscan.toml")
    config_file.touch()
    monkeypatch.chdir(tmp_path)

    _, path = load_config_file()
    assert path is not None
    assert config_file == path


def test_config_discovery_none(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("flagscan.config.user_config_path", lambda _: tmp_path / "nothing")

    config, path = load_config_file()
    assert path is None
    assert config == {}


def test_config_discovery_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path.joinpath("custom.toml")
    config_file.write_text("[flagscan]\nmax_flags = 7\n")
    monkeypatch.setenv("FLAGSCAN_CONFIG", str(config_file))

    config, path = load_config_file()
    assert path == config_file
    assert config.max_flags == 7

    config_file.unlink()
    with pytest.raises(FileNotFoundError):
        load_config_file()


def test_config_invalid_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path.joinpath("flagscan.toml")
    config_file.write_text("[flagscan\n")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ValueError):
        load_config_file()


def test_get_config_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("flagscan.config.get_git_root", lambda: None)

    dirs = get_config_dirs()
    assert len(dirs) == 2
    assert dirs[0] == Path.cwd()
    assert dirs[1] == platformdirs.user_config_path("flagscan")


def test_get_value() -> None:
    config = Config({"flagscan": {"loglevel": "debug", "nested": {"key": 1}}})

    assert config.get_value("flagscan.loglevel") == "debug"
    assert config.get_value("flagscan.nested.key") == 1
    assert config.get_value("flagscan.missing", 5) == 5
    assert config.get_value("flagscan.loglevel.deeper", "x") == "x"
    assert config.get_value("other") is None


def test_typed_values() -> None:
    config = Config({"flagscan": {"max_flags": 16, "loglevel": "trace", "color": "never"}})

    assert config.max_flags == 16
    assert config.loglevel == Loglevel.TRACE
    assert config.color_mode == ColorMode.NEVER


def test_typed_value_defaults() -> None:
    config = Config()

    assert config.max_flags == MAX_FLAGS
    assert config.loglevel is None
    assert config.color_mode == ColorMode.AUTO


@pytest.mark.parametrize("max_flags", [0, -1, "many", True])
def test_invalid_max_flags(max_flags: object) -> None:
    config = Config({"flagscan": {"max_flags": max_flags}})
    with pytest.raises(ValueError):
        _ = config.max_flags


def test_invalid_color() -> None:
    config = Config({"flagscan": {"color": "sometimes"}})
    with pytest.raises(ValueError):
        _ = config.color_mode

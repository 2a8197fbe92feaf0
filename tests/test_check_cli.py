from pathlib import Path

import pytest

from leftwm.check_cli import (
    CheckError,
    check_binaries,
    check_binary,
    check_elogind,
    check_permissions,
    check_theme,
    check_theme_contents,
    check_theme_ron,
    check_theme_toml,
    check_up_file,
    load_config_file,
    missing_expected_files,
)

VALID_RON_THEME = "(border_width: Some(2))"


def _executable(path: Path, text: str = "#!/bin/sh\n") -> Path:
    path.write_text(text)
    path.chmod(0o755)
    return path


def _theme_dir(root: Path, with_down: bool = True) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    _executable(root / "up")
    if with_down:
        _executable(root / "down")
    (root / "theme.ron").write_text(VALID_RON_THEME)
    return root


def test_check_binary_found(tmp_path, monkeypatch, capsys):
    _executable(tmp_path / "leftwm-foo")
    monkeypatch.setenv("PATH", str(tmp_path))
    check_binary("leftwm-foo", True)
    assert f"found {tmp_path}/leftwm-foo" in capsys.readouterr().out


def test_check_binary_missing(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(CheckError, match="Could not find binary leftwm-foo in PATH"):
        check_binary("leftwm-foo", False)


def test_check_binary_without_path(monkeypatch):
    monkeypatch.delenv("PATH", raising=False)
    with pytest.raises(CheckError, match="Binaries not checked"):
        check_binary("leftwm", False)


def test_check_binaries_all_present(tmp_path, monkeypatch, capsys):
    for name in ("leftwm", "leftwm-worker", "leftwm-state", "leftwm-command", "leftwm-check"):
        _executable(tmp_path / name)
    monkeypatch.setenv("PATH", str(tmp_path))
    check_binaries(False)
    assert "Binaries OK" in capsys.readouterr().out


def test_check_binaries_missing(tmp_path, monkeypatch):
    _executable(tmp_path / "leftwm")
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(CheckError, match="Not all required binaries are present"):
        check_binaries(False)


def test_check_elogind_without_runtime_dir_or_loginctl(tmp_path, monkeypatch):
    monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(CheckError, match="Elogind not installed"):
        check_elogind(False)


def test_check_elogind_with_runtime_dir(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path))
    monkeypatch.setenv("PATH", str(tmp_path))
    check_elogind(False)
    assert "Environment OK (has XDG_RUNTIME_DIR)" in capsys.readouterr().out


def test_missing_expected_files():
    assert missing_expected_files([Path("theme/up")]) == ["down", "theme.ron"]
    assert missing_expected_files(
        [Path("a/up"), Path("a/down"), Path("a/theme.ron")]
    ) == []


def test_check_permissions_executable(tmp_path):
    script = _executable(tmp_path / "up")
    assert check_permissions(script, False) == script


def test_check_permissions_not_executable(tmp_path):
    script = tmp_path / "up"
    script.write_text("#!/bin/sh\n")
    script.chmod(0o644)
    with pytest.raises(CheckError, match="missing executable permissions"):
        check_permissions(script, False)


def test_check_permissions_directory(tmp_path):
    directory = tmp_path / "up"
    directory.mkdir()
    with pytest.raises(CheckError):
        check_permissions(directory, False)


def test_check_up_file_deprecated_pipe(tmp_path):
    script = _executable(tmp_path / "up", "echo x > $XDG_RUNTIME_DIR/leftwm/commands.pipe\n")
    with pytest.raises(CheckError, match="commands.pipe"):
        check_up_file(script)


def test_check_theme_ron_valid_and_invalid(tmp_path):
    good = tmp_path / "theme.ron"
    good.write_text(VALID_RON_THEME)
    assert check_theme_ron(good, False) == good
    bad = tmp_path / "bad.ron"
    bad.write_text("(border_width: Some(\"wide\"))")
    with pytest.raises(CheckError, match="Could not parse theme file"):
        check_theme_ron(bad, False)


def test_check_theme_toml_valid_and_invalid(tmp_path):
    good = tmp_path / "theme.toml"
    good.write_text("border_width = 2\n")
    assert check_theme_toml(good, False) == good
    bad = tmp_path / "bad.toml"
    bad.write_text("border_width = [\n")
    with pytest.raises(CheckError, match="Could not parse theme file"):
        check_theme_toml(bad, False)


def test_check_theme_contents_ok(tmp_path):
    theme = _theme_dir(tmp_path / "theme")
    assert check_theme_contents(sorted(theme.iterdir()), False) is True


def test_check_theme_contents_reports_missing(tmp_path, capsys):
    theme = _theme_dir(tmp_path / "theme", with_down=False)
    assert check_theme_contents(sorted(theme.iterdir()), False) is False
    assert "File not found: down" in capsys.readouterr().out


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    home = tmp_path / "config"
    system = tmp_path / "system"
    home.mkdir()
    system.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_DIRS", str(system))
    return home


def test_check_theme_without_current(config_home, capsys):
    assert check_theme(False) is False
    assert "No theme folder or symlink `current` found." in capsys.readouterr().out


def test_check_theme_with_current(config_home):
    _theme_dir(config_home / "leftwm" / "themes" / "current")
    assert check_theme(False) is True


def test_load_config_file_toml(tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('modkey = "Mod1"\n')
    assert load_config_file(config_file, False).modkey == "Mod1"


def test_load_config_file_ron(tmp_path):
    config_file = tmp_path / "config.ron"
    config_file.write_text('(modkey: "Mod1")')
    assert load_config_file(str(config_file), False).modkey == "Mod1"


def test_load_config_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_file(tmp_path / "absent.ron", False)
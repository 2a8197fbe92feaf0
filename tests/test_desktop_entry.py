import subprocess
from pathlib import Path

import pytest

from leftwm.desktop_entry import (
    BootFailure,
    DesktopEntry,
    EntryBootError,
    autostart,
    boot_desktop_file,
    remove_field_codes,
    remove_finished_children,
)

SAMPLE = r"""
            [Desktop Action Gallery]
        Exec=fooview --gallery
        Name=Browse Gallery
                [Desktop Entry]
        #comment
        Name=Optimus Manager
        Name[zh_CN]=Optimus \u{7ba1}\u{7406}\u{5668}
        Comment=A program to handle GPU switching on Optimus laptops
        Keywords=nvidia;optimus;settings;switch;GPU;
        Exec=optimus-manager-qt
        Icon=optimus-manager-qt
        Terminal=false
        StartupNotify=false
        Type=Application
        Categories=System;Settings;Qt;
        Actions=Gallery;Create;
        Hidden=true
        OnlyShowIn=XFCE;

        [Desktop Action Create]
        Exec=fooview --create-new
        Name=Create a new Foo!
        Icon=fooview-new
                """


def test_parse():
    entry = DesktopEntry.parse(SAMPLE)
    assert entry.exec == "optimus-manager-qt"
    assert entry.path is None
    assert entry.hidden is True
    assert entry.only_show_in is not None
    assert "XFCE" in entry.only_show_in
    assert "" not in entry.only_show_in
    assert entry.not_show_in is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/path/to/app %u", "/path/to/app "),
        ("/path/to/app %a %b", "/path/to/app  "),
        ("/path/to/app %%%%", "/path/to/app %%"),
        ("/path/to/app %%%%%u", "/path/to/app %%"),
        ("/path/to/app %^", "/path/to/app %^"),
        ("/path/to/app %", "/path/to/app %"),
    ],
)
def test_field_codes_removal(raw, expected):
    assert remove_field_codes(raw) == expected


@pytest.mark.parametrize(("value", "hidden"), [("TRUE", True), ("false", False), ("yes", False)])
def test_hidden_values(value, hidden):
    entry = DesktopEntry.parse(f"[Desktop Entry]\nHidden={value}\n")
    assert entry.hidden is hidden


def test_keys_outside_main_section_and_without_equals_are_ignored():
    entry = DesktopEntry.parse("Exec=outside\n[Desktop Entry]\nExec\nPath=/opt\nNotShowIn=A; B ;\n")
    assert entry.exec is None
    assert entry.path == Path("/opt")
    assert entry.not_show_in == frozenset({"A", "B"})


def _write(path: Path, body: str) -> Path:
    path.write_text("[Desktop Entry]\n" + body, encoding="utf-8")
    return path


def test_boot_hidden(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CURRENT_DESKTOP", "LeftWM")
    path = _write(tmp_path / "a.desktop", "Exec=true\nHidden=true\n")
    with pytest.raises(EntryBootError) as info:
        boot_desktop_file(path)
    assert info.value.reason is BootFailure.HIDDEN
    assert str(info.value) == "entry hidden"


def test_boot_wrong_desktop(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CURRENT_DESKTOP", "LeftWM")
    only = _write(tmp_path / "a.desktop", "Exec=true\nOnlyShowIn=XFCE;\n")
    not_in = _write(tmp_path / "b.desktop", "Exec=true\nNotShowIn=LeftWM;\n")
    for path in (only, not_in):
        with pytest.raises(EntryBootError) as info:
            boot_desktop_file(path)
        assert info.value.reason is BootFailure.NOT_FOR_THIS_DESKTOP
        assert "LeftWM" in str(info.value)


def test_boot_without_exec(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CURRENT_DESKTOP", "LeftWM")
    path = _write(tmp_path / "a.desktop", "Name=x\n")
    with pytest.raises(EntryBootError) as info:
        boot_desktop_file(path)
    assert info.value.reason is BootFailure.NO_EXEC


def test_boot_missing_file(tmp_path):
    with pytest.raises(EntryBootError) as info:
        boot_desktop_file(tmp_path / "missing.desktop")
    assert info.value.reason is BootFailure.EXECUTE


def test_boot_runs_in_path_with_field_codes_removed(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CURRENT_DESKTOP", "LeftWM")
    workdir = tmp_path / "work"
    workdir.mkdir()
    path = _write(
        tmp_path / "a.desktop",
        f"Exec=touch marker %u\nPath={workdir}\nOnlyShowIn=LeftWM;\n",
    )
    child = boot_desktop_file(path)
    assert child.wait(timeout=10) == 0
    assert (workdir / "marker").exists()


def test_autostart_prefers_config_home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home" / "autostart"
    system_dir = tmp_path / "etc" / "autostart"
    home_dir.mkdir(parents=True)
    system_dir.mkdir(parents=True)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_DIRS", str(tmp_path / "etc"))
    monkeypatch.setenv("XDG_CURRENT_DESKTOP", "LeftWM")
    _write(home_dir / "foo.desktop", f"Exec=touch from_home\nPath={work}\n")
    _write(system_dir / "foo.desktop", f"Exec=touch from_system\nPath={work}\n")
    _write(system_dir / "bar.desktop", f"Exec=touch from_bar\nPath={work}\n")
    (home_dir / "baz.txt").write_text(f"[Desktop Entry]\nExec=touch from_txt\nPath={work}\n")

    children = autostart()
    for child in children:
        child.wait(timeout=10)
    assert len(children) == 2
    assert (work / "from_home").exists()
    assert (work / "from_bar").exists()
    assert not (work / "from_system").exists()
    assert not (work / "from_txt").exists()


def test_remove_finished_children():
    done = subprocess.Popen(["true"])
    done.wait(timeout=10)
    running = subprocess.Popen(["sleep", "30"])
    try:
        children = [done, running]
        remove_finished_children(children)
        assert children == [running]
    finally:
        running.kill()
        running.wait()
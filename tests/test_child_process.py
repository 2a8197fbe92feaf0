import subprocess
import sys
import time

import pytest

from leftwm.child_process import Children, Nanny, exec_shell


def _write_script(path, marker):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'#!/bin/sh\ntouch "{marker}"\n')
    path.chmod(0o755)


def _wait_for(path, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not path.exists():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.02)
    return True


def _spawn(code="pass"):
    return subprocess.Popen([sys.executable, "-c", code])


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path / "config" / "leftwm"


def test_run_global_up_script_runs_all_scripts(config_dir, tmp_path):
    _write_script(config_dir / "up", tmp_path / "main-ran")
    _write_script(config_dir / "a.up", tmp_path / "a-ran")
    _write_script(config_dir / "b.up", tmp_path / "b-ran")
    child = Nanny.run_global_up_script()
    assert child.wait(timeout=10) == 0
    assert _wait_for(tmp_path / "main-ran")
    assert _wait_for(tmp_path / "a-ran")
    assert _wait_for(tmp_path / "b-ran")


def test_failing_extra_script_does_not_stop_up(config_dir, tmp_path):
    _write_script(config_dir / "up", tmp_path / "main-ran")
    broken = config_dir / "broken.up"
    broken.write_text("#!/bin/sh\n")
    broken.chmod(0o644)
    child = Nanny.run_global_up_script()
    assert child.wait(timeout=10) == 0
    assert _wait_for(tmp_path / "main-ran")


def test_missing_up_script_raises(config_dir):
    with pytest.raises(OSError):
        Nanny.run_global_up_script()
    assert config_dir.is_dir()


def test_boot_current_theme(config_dir, tmp_path):
    _write_script(config_dir / "themes" / "current" / "up", tmp_path / "theme-ran")
    child = Nanny.boot_current_theme()
    assert child.wait(timeout=10) == 0
    assert _wait_for(tmp_path / "theme-ran")


def test_boot_current_theme_without_theme(config_dir):
    with pytest.raises(OSError):
        Nanny.boot_current_theme()


def test_insert_reports_new_children():
    children = Children()
    child = _spawn()
    assert children.insert(child) is True
    assert children.insert(child) is False
    assert len(children) == 1
    child.wait()


def test_finished_children_are_removed():
    children = Children()
    child = _spawn()
    children.insert(child)
    child.wait()
    children.remove_finished_children()
    assert len(children) == 0


def test_running_children_are_kept():
    child = _spawn("import time; time.sleep(30)")
    children = Children([child])
    try:
        children.remove_finished_children()
        assert child.pid in children
    finally:
        child.kill()
        child.wait()


def test_merge_and_extend():
    first, second, third = _spawn(), _spawn(), _spawn()
    children = Children([first])
    other = Children([second])
    children.merge(other)
    children.extend([third])
    assert {c.pid for c in children} == {first.pid, second.pid, third.pid}
    for child in (first, second, third):
        child.wait()


def test_exec_shell_tracks_child():
    children = Children()
    pid = exec_shell(sys.executable, children)
    assert pid in children
    for child in children:
        child.wait()


def test_exec_shell_with_missing_program(tmp_path):
    children = Children()
    assert exec_shell(str(tmp_path / "missing"), children) is None
    assert len(children) == 0
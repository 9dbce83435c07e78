import io
import os

import pytest

from minish.builtins import (
    ShellState,
    change_directory,
    check_cd_target,
    is_builtin,
    run_builtin,
    validate_setenv_args,
)
from minish.env import Environment
from minish.models import ShellError, ShellExit


def make_state(*entries):
    return ShellState(Environment(list(entries)), stdin=io.StringIO())


def test_is_builtin():
    assert is_builtin("cd")
    assert is_builtin("unsetenv")
    assert not is_builtin("ls")


def test_non_builtin_not_handled():
    state = make_state()
    assert run_builtin(["ls"], state, io.StringIO()) is False


def test_setenv_sets_value():
    state = make_state("A=1")
    assert run_builtin(["setenv", "FOO", "bar"], state, io.StringIO())
    assert state.env.get("FOO") == "bar"


def test_setenv_without_value_sets_empty():
    state = make_state()
    run_builtin(["setenv", "FOO"], state, io.StringIO())
    assert state.env.get("FOO") == ""


def test_setenv_without_name_prints_env():
    state = make_state("A=1", "B=2")
    out = io.StringIO()
    run_builtin(["setenv"], state, out)
    assert out.getvalue() == "A=1\nB=2\n"


def test_setenv_invalid_name(capsys):
    state = make_state()
    assert run_builtin(["setenv", "1X", "v"], state, io.StringIO())
    assert "setenv: Variable name must begin with a letter." in capsys.readouterr().err
    assert state.env.get("1X") is None


def test_validate_setenv_too_many():
    with pytest.raises(ShellError, match="too many arguments"):
        validate_setenv_args(["setenv", "A", "b", "c"])


def test_unsetenv(capsys):
    state = make_state("A=1", "B=2")
    run_builtin(["unsetenv", "A"], state, io.StringIO())
    assert state.env.lines() == ["B=2"]
    run_builtin(["unsetenv"], state, io.StringIO())
    assert "unsetenv: Too few arguments." in capsys.readouterr().err


def test_env_prints():
    state = make_state("A=1")
    out = io.StringIO()
    run_builtin(["env"], state, out)
    assert out.getvalue() == "A=1\n"


def test_42():
    out = io.StringIO()
    assert run_builtin(["42"], make_state(), out)
    assert out.getvalue() == "Life, the Universe and Everything"


def test_exit_raises():
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        run_builtin(["exit"], make_state(), out)
    assert info.value.status == 0
    assert out.getvalue() == "Exiting shell...\n"


def test_cd_and_back(tmp_path, monkeypatch):
    start = tmp_path / "start"
    target = tmp_path / "target"
    start.mkdir()
    target.mkdir()
    monkeypatch.chdir(start)
    state = make_state()
    assert change_directory(["cd", str(target)], state, io.StringIO())
    assert os.path.samefile(os.getcwd(), target)
    assert os.path.samefile(state.prev_dir, start)
    out = io.StringIO()
    assert change_directory(["cd", "-"], state, out)
    assert os.path.samefile(os.getcwd(), start)
    assert os.path.samefile(out.getvalue().strip(), start)
    assert os.path.samefile(state.env.get("OLDPWD"), start)


def test_cd_dash_without_previous():
    with pytest.raises(ShellError, match="No such file or directory"):
        change_directory(["cd", "-"], make_state(), io.StringIO())


def test_cd_home_not_set():
    out = io.StringIO()
    assert change_directory(["cd"], make_state(), out)
    assert out.getvalue() == "cd: HOME not set\n"


def test_cd_target_errors(tmp_path):
    with pytest.raises(ShellError, match="Too many arguments"):
        check_cd_target(["cd", "a", "b"])
    missing = str(tmp_path / "nope")
    with pytest.raises(ShellError, match="No such file or directory"):
        check_cd_target(["cd", missing])
    regular = tmp_path / "f"
    regular.write_text("x")
    with pytest.raises(ShellError, match="Not a directory"):
        check_cd_target(["cd", str(regular)])
    assert check_cd_target(["cd", str(tmp_path)]) == str(tmp_path)
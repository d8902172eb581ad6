import io
import os

import pytest

from minish.builtins import (
    ShellExit,
    builtin_cd,
    builtin_echo,
    builtin_env,
    builtin_exit,
    builtin_export,
    builtin_pwd,
    builtin_unset,
    get_exit_value,
    is_numeric_exit,
    is_parent_builtin,
    is_simple_builtin,
    is_valid_identifier,
    run_parent_builtin,
    run_simple_builtin,
)
from minish.state import ShellState


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


@pytest.mark.parametrize("name", ["cd", "export", "unset", "exit"])
def test_parent_builtins(name):
    assert is_parent_builtin(name) is True
    assert is_simple_builtin(name) is False


@pytest.mark.parametrize("name", ["echo", "pwd", "env"])
def test_simple_builtins(name):
    assert is_simple_builtin(name) is True
    assert is_parent_builtin(name) is False


def test_unknown_and_none_are_not_builtins():
    assert is_parent_builtin("ls") is False
    assert is_simple_builtin(None) is False


@pytest.mark.parametrize(
    "name, expected",
    [("PATH", True), ("_x1", True), ("a_b", True), ("1abc", False),
     ("", False), ("a-b", False), (None, False)],
)
def test_is_valid_identifier(name, expected):
    assert is_valid_identifier(name) is expected


@pytest.mark.parametrize(
    "text, expected",
    [("42", True), ("-7", True), ("+", True), ("", False), ("4a", False), (" 1", False)],
)
def test_is_numeric_exit(text, expected):
    assert is_numeric_exit(text) is expected


def test_get_exit_value_in_range():
    assert get_exit_value("42") == 42
    assert get_exit_value("+") == 0


def test_get_exit_value_wraps_negative():
    assert get_exit_value("-1") == 255


def test_get_exit_value_saturates():
    assert get_exit_value("99999999999999999999999") == get_exit_value(str(2**63 - 1))


def test_echo_joins_arguments(streams):
    out, _ = streams
    assert builtin_echo(["echo", "hello", "world"], out) == 0
    assert out.getvalue() == "hello world\n"


def test_echo_dash_n(streams):
    out, _ = streams
    assert builtin_echo(["echo", "-n", "hi"], out) == 0
    assert out.getvalue() == "hi"


def test_echo_no_args(streams):
    out, _ = streams
    builtin_echo(["echo"], out)
    assert out.getvalue() == "\n"


def test_pwd(tmp_path, monkeypatch, streams):
    out, err = streams
    monkeypatch.chdir(tmp_path)
    assert builtin_pwd(["pwd"], out, err) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_env_prints_only_assigned(streams):
    out, err = streams
    state = ShellState(env=["A=1", "B", "C=3"])
    assert builtin_env(["env"], state, out, err) == 0
    assert out.getvalue().splitlines() == ["A=1", "C=3"]


def test_env_too_many_arguments(streams):
    out, err = streams
    assert builtin_env(["env", "x"], ShellState(), out, err) == 1
    assert err.getvalue() == "minishell: env: too many arguments\n"
    assert out.getvalue() == ""


def test_cd_changes_directory_and_env(tmp_path, monkeypatch, streams):
    out, err = streams
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path)
    old = os.getcwd()
    state = ShellState(env=["PWD=" + old])
    assert builtin_cd(["cd", "sub"], state, out, err) == 0
    assert os.path.basename(os.getcwd()) == "sub"
    assert state.getenv("OLDPWD") == old
    assert state.getenv("PWD") == os.getcwd()
    assert state.env[0] == "PWD=" + os.getcwd()


def test_cd_dash_goes_back(tmp_path, monkeypatch, streams):
    out, err = streams
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    state = ShellState()
    builtin_cd(["cd", "sub"], state, out, err)
    assert builtin_cd(["cd", "-"], state, out, err) == 0
    assert os.getcwd() == start
    assert out.getvalue() == start + "\n"


def test_cd_home(tmp_path, monkeypatch, streams):
    out, err = streams
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    state = ShellState(env=[f"HOME={home}"])
    assert builtin_cd(["cd"], state, out, err) == 0
    assert os.path.samefile(os.getcwd(), home)


def test_cd_errors(tmp_path, monkeypatch, streams):
    out, err = streams
    monkeypatch.chdir(tmp_path)
    state = ShellState()
    assert builtin_cd(["cd"], state, out, err) == 1
    assert builtin_cd(["cd", "-"], state, out, err) == 1
    assert builtin_cd(["cd", "a", "b"], state, out, err) == 1
    assert builtin_cd(["cd", "missing"], state, out, err) == 1
    lines = err.getvalue().splitlines()
    assert lines[0] == "minishell: cd: HOME not set"
    assert lines[1] == "minishell: cd: OLDPWD not set"
    assert lines[2] == "minishell: cd: too many arguments"
    assert lines[3].startswith("minishell: cd: missing: ")
    assert os.getcwd() == str(tmp_path.resolve()) or os.path.samefile(os.getcwd(), tmp_path)
    assert state.env == []


def test_export_sets_and_replaces(streams):
    out, err = streams
    state = ShellState(env=["A=1"])
    assert builtin_export(["export", "A=2", "B=x=y"], state, out, err) == 0
    assert state.env == ["A=2", "B=x=y"]


def test_export_name_without_value_is_noop(streams):
    out, err = streams
    state = ShellState(env=["A=1"])
    assert builtin_export(["export", "NEW"], state, out, err) == 0
    assert state.env == ["A=1"]


def test_export_invalid_identifier(streams):
    out, err = streams
    state = ShellState()
    assert builtin_export(["export", "1A=2", "OK=1"], state, out, err) == 1
    assert err.getvalue() == "minishell: export: `1A=2': not a valid identifier\n"
    assert state.env == ["OK=1"]


def test_export_lists_sorted(streams):
    out, err = streams
    state = ShellState(env=["B=2", "C", "A=1"])
    assert builtin_export(["export"], state, out, err) == 0
    assert out.getvalue().splitlines() == [
        'declare -x A="1"', 'declare -x B="2"', "declare -x C",
    ]
    assert state.env == ["B=2", "C", "A=1"]


def test_unset(streams):
    _, err = streams
    state = ShellState(env=["A=1", "B=2", "C"])
    assert builtin_unset(["unset", "A", "C", "MISSING"], state, err) == 0
    assert state.env == ["B=2"]


def test_unset_invalid(streams):
    _, err = streams
    state = ShellState(env=["A=1"])
    assert builtin_unset(["unset", "9x", "A"], state, err) == 1
    assert err.getvalue() == "minishell: unset: `9x': not a valid identifier\n"
    assert state.env == []


def test_exit_without_argument_uses_last_status(streams):
    out, err = streams
    state = ShellState(exit_status=7)
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit"], state, out, err)
    assert info.value.status == 7
    assert out.getvalue() == "exit\n"


def test_exit_with_code(streams):
    out, err = streams
    state = ShellState()
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "42"], state, out, err)
    assert info.value.status == 42
    assert state.exit_status == 42


def test_exit_non_numeric(streams):
    out, err = streams
    with pytest.raises(ShellExit) as info:
        builtin_exit(["exit", "abc"], ShellState(), out, err)
    assert info.value.status == 2
    assert err.getvalue() == "minishell: exit: abc: numeric argument required\n"


def test_exit_too_many_arguments(streams):
    out, err = streams
    assert builtin_exit(["exit", "1", "2"], ShellState(), out, err) == 1
    assert err.getvalue() == "minishell: exit: too many arguments\n"


def test_run_simple_builtin_dispatch(streams):
    out, err = streams
    state = ShellState()
    assert run_simple_builtin(["echo", "x"], state, out, err) == 0
    assert out.getvalue() == "x\n"
    assert run_simple_builtin(["ls"], state, out, err) == 1
    assert run_simple_builtin([], state, out, err) == 1


def test_run_parent_builtin_dispatch(streams):
    out, err = streams
    state = ShellState()
    assert run_parent_builtin(["export", "K=v"], state, out, err) == 0
    assert state.getenv("K") == "v"
    assert run_parent_builtin(["unset", "K"], state, out, err) == 0
    assert state.getenv("K") is None
    assert run_parent_builtin(["ls"], state, out, err) == -1
    assert run_parent_builtin([], state, out, err) == -1
    with pytest.raises(ShellExit):
        run_parent_builtin(["exit", "3"], state, out, err)
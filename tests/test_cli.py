import io

import pytest

from pantry import cli


@pytest.fixture()
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("PANTRY_STORE", "rocksdb")
    monkeypatch.setenv("PANTRY_DB_PATH", str(tmp_path))
    monkeypatch.setenv("PANTRY_RETRY_BACKOFF", "0.001")

    def _run(*argv):
        out = io.StringIO()
        code = cli.main(list(argv), out=out)
        return code, out.getvalue()

    return _run


def test_add_and_list(run):
    code, output = run("add", "Peanut Butter", "-n", "2", "--expires", "2099-01-01")
    assert code == cli.EXIT_OK
    assert "Item 'peanut butter' added successfully" in output
    assert "Peanut butter: 2" in output

    code, output = run("list", "peanut")
    assert code == cli.EXIT_OK
    assert "Peanut butter" in output
    assert "expires in" in output


def test_list_empty(run):
    code, output = run("list")
    assert code == cli.EXIT_OK
    assert output.strip() == "No items found."


def test_remove_missing_item_exit_code(run):
    code, output = run("remove", "caviar")
    assert code == cli.EXIT_NOT_FOUND
    assert "not found" in output


def test_set_rename_and_delete(run):
    run("add", "oats", "-n", "4")

    code, _ = run("set", "oats", "6")
    assert code == cli.EXIT_OK

    code, output = run("rename", "oats", "rolled oats")
    assert code == cli.EXIT_OK
    assert "Rolled oats: 6" in output

    code, output = run("delete", "rolled oats")
    assert code == cli.EXIT_OK
    assert "deleted successfully" in output

    code, output = run("list")
    assert output.strip() == "No items found."


def test_invalid_input_exit_code(run):
    code, output = run("add", "oats", "--expires", "someday")
    assert code == cli.EXIT_ERROR
    assert "ISO-8601" in output


def test_bad_environment_is_reported(monkeypatch, capsys):
    monkeypatch.setenv("PANTRY_STORE", "sqlite")
    assert cli.main(["list"], out=io.StringIO()) == cli.EXIT_ERROR
    assert "PANTRY_STORE" in capsys.readouterr().err

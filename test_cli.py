"""
MasterPass - Command Line Tests

Run with: pytest test_cli.py
"""

import io

import pytest

import mpw_main

FULL_NAME = "Robert Lee Mitchell"
MASTER_PASSWORD = "banana colored duckling"
SITE = "masterpasswordapp.com"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """No MP_* variables, and a HOME without ~/.mpw."""
    for name in ("MP_FULLNAME", "MP_SITETYPE", "MP_SITECOUNTER", "MP_ALGORITHM"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    def no_prompt(prompt=""):
        raise AssertionError("Should not prompt for the master password")
    monkeypatch.setattr(mpw_main.getpass, "getpass", no_prompt)
    return tmp_path


def test_generates_password(capsys):
    assert mpw_main.main(["-u", FULL_NAME, "-P", MASTER_PASSWORD, SITE]) == 0
    out, err = capsys.readouterr()
    assert out == "Jejr5[RepuSosp\n"
    assert f"{FULL_NAME}'s password for {SITE}:" in err
    assert MASTER_PASSWORD not in err


def test_silent_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(MASTER_PASSWORD + "\n"))
    assert mpw_main.main(["-s", "-u", FULL_NAME, SITE]) == 0
    out, err = capsys.readouterr()
    assert out == "Jejr5[RepuSosp\n"
    assert err == ""


def test_silent_requires_name(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(MASTER_PASSWORD + "\n"))
    assert mpw_main.main(["-s", SITE]) == mpw_main.EXIT_FATAL
    assert "Missing full name." in capsys.readouterr().err


def test_silent_requires_password(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert mpw_main.main(["-s", "-u", FULL_NAME, SITE]) == mpw_main.EXIT_FATAL
    assert "Missing master password." in capsys.readouterr().err


def test_prompts_for_name_and_site(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{FULL_NAME}\n{SITE}\n"))
    assert mpw_main.main(["-P", MASTER_PASSWORD]) == 0
    out, err = capsys.readouterr()
    assert out == "Jejr5[RepuSosp\n"
    assert "Your full name:" in err
    assert "Site name:" in err


def test_lookup_file(clean_env, capsys):
    (clean_env / ".mpw").write_text(f"{FULL_NAME}:{MASTER_PASSWORD}\n", encoding="utf-8")
    assert mpw_main.main(["-u", FULL_NAME, SITE]) == 0
    assert capsys.readouterr().out == "Jejr5[RepuSosp\n"


def test_lookup_file_overrides_option(clean_env, capsys):
    (clean_env / ".mpw").write_text(f"{FULL_NAME}:{MASTER_PASSWORD}\n", encoding="utf-8")
    assert mpw_main.main(["-u", FULL_NAME, "-P", "wrong password", SITE]) == 0
    assert capsys.readouterr().out == "Jejr5[RepuSosp\n"


def test_unreadable_lookup_file(clean_env, capsys):
    (clean_env / ".mpw").mkdir()
    assert mpw_main.main(["-u", FULL_NAME, "-P", MASTER_PASSWORD, SITE]) == 0
    assert capsys.readouterr().out == "Jejr5[RepuSosp\n"


@pytest.mark.parametrize("args, message", [
    (["-u", b"Rob\xffert".decode("utf-8", "surrogateescape"), SITE], "Full name is not valid UTF-8 text"),
    (["-u", FULL_NAME, b"b\xfccher.de".decode("utf-8", "surrogateescape")], "Site name is not valid UTF-8 text"),
])
def test_undecodable_arguments(args, message, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(MASTER_PASSWORD + "\n"))
    assert mpw_main.main(["-s"] + args) == mpw_main.EXIT_FATAL
    out, err = capsys.readouterr()
    assert out == ""
    assert message in err
    assert "scrypt failed" not in err


def test_interactive_prompt(monkeypatch, capsys):
    answers = iter(["", MASTER_PASSWORD])
    monkeypatch.setattr(mpw_main.getpass, "getpass", lambda prompt="": next(answers))
    assert mpw_main.main(["-u", FULL_NAME, SITE]) == 0
    assert capsys.readouterr().out == "Jejr5[RepuSosp\n"


def test_environment_defaults(monkeypatch, capsys):
    monkeypatch.setenv("MP_FULLNAME", FULL_NAME)
    monkeypatch.setenv("MP_SITETYPE", "pin")
    assert mpw_main.main(["-P", MASTER_PASSWORD, SITE]) == 0
    pin = capsys.readouterr().out.strip()
    assert len(pin) == 4 and pin.isdigit()

    # Options override the environment
    assert mpw_main.main(["-P", MASTER_PASSWORD, "-t", "long", SITE]) == 0
    assert capsys.readouterr().out == "Jejr5[RepuSosp\n"


def test_counter_and_variant(capsys):
    base = ["-u", FULL_NAME, "-P", MASTER_PASSWORD]
    assert mpw_main.main(base + ["-c", "2", SITE]) == 0
    second = capsys.readouterr().out.strip()
    assert second != "Jejr5[RepuSosp"
    assert len(second) == 14

    assert mpw_main.main(base + ["-v", "login", SITE]) == 0
    login = capsys.readouterr().out.strip()
    assert len(login) == 9 and login.isalpha()

    assert mpw_main.main(base + ["-v", "a", "-C", "pet", SITE]) == 0
    answer = capsys.readouterr().out.strip()
    assert " " in answer


@pytest.mark.parametrize("args, message", [
    (["-c", "0"], "Invalid site counter: 0"),
    (["-c", "many"], "Invalid site counter: many"),
    (["-t", "huge"], "Not a generated type name"),
    (["-v", "secret"], "Not a variant name"),
    (["-V", "9"], "Unknown algorithm version"),
])
def test_fatal_errors(args, message, capsys):
    argv = ["-u", FULL_NAME, "-P", MASTER_PASSWORD] + args + [SITE]
    assert mpw_main.main(argv) == mpw_main.EXIT_FATAL
    out, err = capsys.readouterr()
    assert out == ""
    assert message in err


def test_bad_environment(monkeypatch, capsys):
    monkeypatch.setenv("MP_SITECOUNTER", "zero")
    assert mpw_main.main(["-u", FULL_NAME, "-P", MASTER_PASSWORD, SITE]) == mpw_main.EXIT_FATAL
    assert "Invalid MP_SITECOUNTER: zero" in capsys.readouterr().err

import pytest

from cli.main import main
from core import __version__


def _key_file(tmp_path, crypto):
    key = crypto.generate_key()
    path = tmp_path / "my.key"
    path.write_text(key + "\n")
    return key, path


def test_encrypt_string_to_stdout_then_decrypt(run_cli, crypto, tmp_path, capsys):
    key, key_path = _key_file(tmp_path, crypto)

    assert run_cli("-e", "-s", "hello", "-k", key) == 0
    ciphertext = capsys.readouterr().out.strip()
    assert crypto.decrypt(ciphertext, key) == b"hello"

    assert run_cli("-d", "-s", ciphertext, "-K", str(key_path)) == 0
    assert capsys.readouterr().out == "hello"


def test_encrypt_stdin_to_file(run_cli, crypto, tmp_path, stdin_bytes, capsys):
    key, key_path = _key_file(tmp_path, crypto)
    out = tmp_path / "secret.enc"
    stdin_bytes(b"from stdin")

    assert run_cli("-e", "-K", str(key_path), "-o", str(out)) == 0
    assert capsys.readouterr().out == ""
    assert crypto.decrypt(out.read_text(), key) == b"from stdin"


def test_generate_with_password_to_file(run_cli, crypto, prompt, tmp_path):
    out = tmp_path / "key.enc"
    prompt.responses = ["pw"]

    assert run_cli("-g", "-p", "-o", str(out)) == 0
    protected = out.read_text().strip()
    assert crypto.is_protected(protected)
    assert prompt.calls == [("New password", True)]
    assert len(crypto.unprotect_key(protected, "pw")) == 44


def test_generate_into_keychain_then_decrypt_from_it(run_cli, crypto, keychain, capsys):
    assert run_cli("-g", "-x", "work", "-q") == 0
    assert capsys.readouterr().out == ""
    key = keychain.entries["work"]

    ciphertext = crypto.encrypt(b"payload", key)
    assert run_cli("-d", "-s", ciphertext, "-x", "work") == 0
    assert capsys.readouterr().out == "payload"


def test_missing_key_file_fails_before_decryption(run_cli, tmp_path, capsys):
    code = run_cli("-d", "-f", str(tmp_path / "missing.enc"), "-K", str(tmp_path / "missing.key"))

    assert code == 4
    captured = capsys.readouterr()
    assert "KeyResolutionError" in captured.err
    assert captured.out == ""


def test_edit_without_file_never_resolves_key(run_cli, prompt, capsys):
    code = run_cli("-t", "-s", "x", "-i")

    assert code == 3
    assert prompt.calls == []
    assert "--edit requires --file" in capsys.readouterr().err


def test_no_mode_and_conflicting_modes(run_cli, capsys):
    assert run_cli("-s", "x", "-k", "k") == 3
    assert "No mode specified" in capsys.readouterr().err
    assert run_cli("-e", "-d", "-s", "x", "-k", "k") == 3
    assert "Conflicting modes" in capsys.readouterr().err


def test_parse_error_exit_code(run_cli, capsys):
    assert run_cli("-e", "--bogus") == 2
    assert "ParseError" in capsys.readouterr().err


def test_keychain_flag_unknown_without_capability(run_cli, capsys):
    assert run_cli("-d", "-x", "work", keychain=False) == 2
    assert "--keychain" not in capsys.readouterr().out


def test_wrong_key_is_execution_error(run_cli, crypto, capsys):
    ciphertext = crypto.encrypt(b"data", crypto.generate_key())

    assert run_cli("-d", "-s", ciphertext, "-k", crypto.generate_key()) == 6
    assert "ExecutionError" in capsys.readouterr().err


def test_errors_are_shown_even_when_quiet(run_cli, capsys):
    assert run_cli("-e", "-s", "x", "-q") == 4
    assert "No private key specified" in capsys.readouterr().err


def test_error_never_leaks_private_key(run_cli, capsys):
    assert run_cli("-d", "-s", "garbage", "-k", "top-secret-key", "-D", "-T") == 6
    captured = capsys.readouterr()
    assert "top-secret-key" not in captured.err + captured.out
    assert "Traceback" in captured.err


def test_write_error(run_cli, crypto, tmp_path, capsys):
    key = crypto.generate_key()
    target = tmp_path / "no-such-dir" / "out.enc"

    assert run_cli("-e", "-s", "x", "-k", key, "-o", str(target)) == 5
    assert "WriteError" in capsys.readouterr().err


def test_edit_reencrypts_changes_without_backup(run_cli, crypto, editor, tmp_path, capsys):
    key, key_path = _key_file(tmp_path, crypto)
    secret = tmp_path / "notes.enc"
    secret.write_text(crypto.encrypt(b"old notes", key))
    editor.new_content = b"new notes"

    assert run_cli("-t", "-f", str(secret), "-K", str(key_path)) == 0
    assert editor.seen == [b"old notes"]
    assert crypto.decrypt(secret.read_text(), key) == b"new notes"
    assert not list(tmp_path.glob("*.bak"))
    assert "Saved" in capsys.readouterr().err


def test_edit_with_backup_always_creates_one(run_cli, crypto, tmp_path):
    key, key_path = _key_file(tmp_path, crypto)
    secret = tmp_path / "notes.enc"
    original = crypto.encrypt(b"unchanged", key)
    secret.write_text(original)

    assert run_cli("-t", "-f", str(secret), "-K", str(key_path), "-b") == 0
    backup = tmp_path / "notes.enc.bak"
    assert backup.read_text() == original
    assert secret.read_text() == original


def test_dictionary_exits_zero_regardless_of_other_flags(run_cli, capsys):
    assert run_cli("--bogus", "-e", "-d", "--dictionary") == 0
    line = capsys.readouterr().out.strip()
    names = line.split(" ")
    assert names == sorted(names)
    assert "--keychain" in names and "--encrypt" in names


def test_version_wins_over_help_and_modes(run_cli, capsys):
    assert run_cli("-h", "-V", "-e", "-d") == 0
    out = capsys.readouterr().out
    assert __version__ in out
    assert "Usage" not in out


def test_help_wins_over_examples(run_cli, capsys):
    assert run_cli("-E", "-h") == 0
    out = capsys.readouterr().out
    assert "Usage" in out
    assert "--private-key" in out
    assert "Examples" not in out


def test_examples(run_cli, capsys):
    assert run_cli("-E", "-g") == 0
    assert "Examples" in capsys.readouterr().out


def test_help_hides_keychain_without_capability(run_cli, capsys):
    assert run_cli("-h", "-N", keychain=False) == 0
    assert "--keychain" not in capsys.readouterr().out


def test_bash_completion_is_appended_once(run_cli, tmp_path, capsys):
    rc = tmp_path / ".bashrc"
    rc.write_text("export PATH=$PATH\n")

    assert run_cli("-a", str(rc), "-e") == 0
    assert run_cli("-a", str(rc)) == 0
    content = rc.read_text()
    assert content.startswith("export PATH=$PATH\n")
    assert content.count("complete -o default -F _sym_complete sym") == 1
    assert "--private-key" in content


def test_default_services_are_built_when_not_injected(settings, tmp_path, capsys):
    key_path = tmp_path / "k"
    assert main(["-g", "-o", str(key_path)], settings=settings, keychain=False) == 0
    assert len(key_path.read_text().strip()) == 44


@pytest.mark.parametrize("flag", ["-v", "-D"])
def test_redundant_key_source_is_logged(run_cli, crypto, tmp_path, capsys, flag):
    key, key_path = _key_file(tmp_path, crypto)

    assert run_cli("-e", "-s", "x", "-k", key, "-K", str(key_path), flag) == 0
    captured = capsys.readouterr()
    assert "Ignoring --keyfile" in captured.err
    assert key not in captured.err


def test_interactive_abort_is_key_resolution_error(run_cli, prompt, capsys):
    assert run_cli("-e", "-s", "x", "-i") == 4
    assert prompt.calls == [("Private key", False)]
    assert "aborted" in capsys.readouterr().err


def test_output_file_with_quiet_prints_nothing(run_cli, crypto, tmp_path, capsys):
    key, key_path = _key_file(tmp_path, crypto)
    out = tmp_path / "out.enc"

    assert run_cli("-e", "-s", "x", "-k", key, "-K", str(key_path), "-o", str(out), "-q") == 0
    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""
    assert crypto.decrypt(out.read_text(), key) == b"x"


def test_empty_inline_key_is_key_resolution_error(run_cli, capsys):
    assert run_cli("-e", "-s", "x", "-k", "") == 4
    assert "KeyResolutionError" in capsys.readouterr().err


def test_generate_ignores_data_flags(run_cli, tmp_path, capsys):
    assert run_cli("-g", "-s", "x", "-f", str(tmp_path / "y")) == 0
    assert len(capsys.readouterr().out.strip()) == 44

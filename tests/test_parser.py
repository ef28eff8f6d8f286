from pathlib import Path

import click
import pytest

from cli.parser import build_command, flag_dictionary, strip_dictionary
from core.domain.errors import ParseError


def test_short_and_long_flags_map_to_same_fields(parse):
    short = parse("-e", "-s", "hello", "-k", "mykey")
    long = parse("--encrypt", "--string", "hello", "--private-key", "mykey")

    assert short == long
    assert short.encrypt is True
    assert short.string == "hello"
    assert short.private_key.get_secret_value() == "mykey"


def test_paths_and_integers_are_typed(parse):
    options = parse("-d", "-f", "data.enc", "-K", "my.key", "-o", "out.txt", "-M", "60")

    assert options.file == Path("data.enc")
    assert options.keyfile == Path("my.key")
    assert options.output == Path("out.txt")
    assert options.password_timeout == 60


def test_bundled_short_flags(parse):
    options = parse("-gpq")

    assert options.generate and options.password and options.quiet


def test_unknown_flag_is_parse_error(parse):
    with pytest.raises(ParseError) as exc_info:
        parse("--bogus")
    assert "--bogus" in exc_info.value.message


def test_missing_value_is_parse_error(parse):
    with pytest.raises(ParseError):
        parse("-e", "-k")


def test_non_integer_timeout_is_parse_error(parse):
    with pytest.raises(ParseError):
        parse("-d", "-M", "soon")


def test_negative_timeout_is_parse_error(parse):
    with pytest.raises(ParseError) as exc_info:
        parse("-d", "--password-timeout=-5")
    assert "--password-timeout" in exc_info.value.message


def test_keychain_flag_only_offered_with_capability(parse):
    assert parse("-d", "-x", "work").keychain == "work"
    with pytest.raises(ParseError):
        parse("-d", "-x", "work", keychain=False)


def test_reparse_with_no_color_only_changes_presentation(parse):
    argv = ["-e", "-s", "hello", "-k", "mykey", "-o", "out.enc"]
    plain = parse(*argv, "-N")
    colored = parse(*argv)

    assert parse(*argv) == colored
    assert plain.no_color and not colored.no_color
    assert plain.presentation_neutral() == colored.presentation_neutral()


def test_private_key_is_masked_in_dumps(parse):
    options = parse("-e", "-k", "super-secret")

    assert "super-secret" not in str(options.masked_dump())
    assert "super-secret" not in repr(options)


def test_strip_dictionary():
    assert strip_dictionary(["-e", "--dictionary", "-s", "x"]) == (["-e", "-s", "x"], True)
    assert strip_dictionary(["-e"]) == (["-e"], False)


def test_flag_dictionary_is_sorted_canonical_names():
    names = flag_dictionary(build_command(keychain=True))

    assert names == sorted(names)
    assert "--encrypt" in names and "--no-password-cache" in names
    assert "--keychain" in names
    assert all(name.startswith("--") for name in names)
    assert "--dictionary" not in names
    assert "--keychain" not in flag_dictionary(build_command(keychain=False))


def test_typer_command_uses_installed_click_classes(parse):
    command = build_command(keychain=True)

    assert isinstance(command, click.Command)
    assert all(isinstance(param, click.Option) for param in command.params)
    with pytest.raises(ParseError):
        parse("-e", "--bogus")

# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest

from textbookrsa import __main__ as cli
import textbookrsa.rsa as rsau
from textbookrsa.errors import SymbolOutOfRange


def feed_input(monkeypatch, answers):
    answers = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(answers))


def test_text_symbols():
    text = "Hello, Wörld! ✓"
    assert cli.symbols_to_text(cli.text_to_symbols(text)) == text
    assert cli.text_to_symbols("AB") == [65, 66]


@pytest.mark.parametrize("symbols", [[0x110000], [-1]])
def test_symbols_to_text_rejects(symbols):
    with pytest.raises(SymbolOutOfRange):
        cli.symbols_to_text(symbols)


def test_check_message(tmp_path):
    assert cli.check_message("plain") == "plain"
    src = tmp_path / "payload.txt"
    src.write_text("from file", encoding="utf-8")
    assert cli.check_message(f"P:{src}") == "from file"


def test_demo_non_interactive(capsys):
    cli.main(["-n", "demo", "--bits", "16", "--message", "Hi there!", "--seed", "5"])
    out = capsys.readouterr().out
    assert "Welcome" not in out
    assert "Phi: " in out
    assert "Decrypted Text: Hi there!" in out


def test_demo_seed_reproducible(capsys):
    cli.main(["-n", "demo", "--bits", "32", "--message", "abc", "--seed", "9"])
    first = capsys.readouterr().out
    cli.main(["-n", "demo", "--bits", "32", "--message", "abc", "--seed", "9"])
    assert capsys.readouterr().out == first


def test_keygen_encrypt_decrypt(tmp_path, capsys):
    pub, priv = tmp_path / "key.pub", tmp_path / "key"
    cli.main(["-n", "keygen", "-p", str(pub), "-P", str(priv), "--bits", "32", "--seed", "1"])
    assert pub.exists() and priv.exists()
    capsys.readouterr()
    cli.main(["-n", "encrypt", "-p", str(pub), "--message", "Secret ✓"])
    ciphertext = capsys.readouterr().out.strip()
    assert len(rsau.decode_ciphertext(ciphertext)) == len("Secret ✓")
    cli.main(["-n", "decrypt", "-P", str(priv), "--message", ciphertext])
    assert capsys.readouterr().out.strip() == "Secret ✓"


def test_keygen_refuses_overwrite(tmp_path, capsys):
    pub, priv = tmp_path / "key.pub", tmp_path / "key"
    pub.write_text("keep me", encoding="ascii")
    cli.main(["-n", "keygen", "-p", str(pub), "-P", str(priv), "--bits", "16"])
    assert "already exists" in capsys.readouterr().out
    assert pub.read_text(encoding="ascii") == "keep me"
    assert not priv.exists()
    cli.main(["-n", "keygen", "-p", str(pub), "-P", str(priv), "--bits", "16", "-o"])
    assert rsau.RSAPubKey.import_key(pub).mod > 0


def test_non_interactive_missing_argument():
    with pytest.raises(IOError, match="public_key"):
        cli.main(["-n", "encrypt", "--message", "x"])


def test_symbol_out_of_range_reported(tmp_path, capsys):
    pub = tmp_path / "tiny.pub"
    rsau.RSAPubKey(3233, 17).export(pub)
    with pytest.raises(SystemExit) as exc:
        cli.main(["-n", "encrypt", "-p", str(pub), "--message", "ሴ"])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_interactive_demo(monkeypatch, capsys):
    feed_input(monkeypatch, ["demo", "", "interactive"])
    cli.main([])
    out = capsys.readouterr().out
    assert "Welcome to Textbook RSA!" in out
    assert "Decrypted Text: interactive" in out
    assert "Goodbye!" in out


def test_interactive_retries_choice(monkeypatch, capsys):
    feed_input(monkeypatch, ["nonsense", "16", "", "ok"])
    cli.main(["demo"])
    out = capsys.readouterr().out
    assert "Please select an option from the list." in out
    assert "Please provide a value." in out
    assert "Decrypted Text: ok" in out


@pytest.mark.parametrize("payload", ["not-base64!!", "QUJD", "AgEF"])
def test_garbage_ciphertext_reported(tmp_path, capsys, payload):
    priv = tmp_path / "key"
    rsau.RSAPrivKey(3233, 2753, 17).export(priv)
    with pytest.raises(SystemExit) as exc:
        cli.main(["-n", "decrypt", "-P", str(priv), "--message", payload])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err


@pytest.mark.parametrize("content", [None, "not a pem file\n", "-----BEGIN RSA PUBLIC KEY-----\nQUJD\n",
                                     "-----BEGIN RSA PUBLIC KEY-----\nQUJD\n-----END RSA PUBLIC KEY-----\n"])
def test_broken_key_file_reported(tmp_path, capsys, content):
    pub = tmp_path / "key.pub"
    if content is not None:
        pub.write_text(content, encoding="ascii")
    with pytest.raises(SystemExit) as exc:
        cli.main(["-n", "encrypt", "-p", str(pub), "--message", "hi"])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_invalid_rounds_reported(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["-n", "demo", "--bits", "16", "--message", "hi", "--rounds", "0"])
    assert exc.value.code == 1
    assert "Miller-Rabin" in capsys.readouterr().err

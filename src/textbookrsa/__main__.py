"""The Command Line Interface for the utility, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface) that asks interactively for any
argument missing from the command line, unless non-interactive mode is active. This is the text presentation
layer: it turns typed text into symbol codes (one per character) and back, and owns all printing. The engine
itself never writes to the console.

Typical usage example:

    textbookrsa demo --message "Hi there!"
    OR
    python -m textbookrsa
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import pathlib
import random
import sys
import typing

import textbookrsa
from textbookrsa.errors import SymbolOutOfRange


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in Textbook RSA.",
            choices=["keygen", "encrypt", "decrypt", "demo"],
        ),
    "keygen":
        HelpData("Key generation utility."),
    "encrypt":
        HelpData("Encryption utility."),
    "decrypt":
        HelpData("Decryption utility."),
    "demo":
        HelpData("Generate a key pair and run a message through it, showing every value."),
    "public_key":
        HelpData(
            description="Location of the public key file.",
            format=pathlib.Path,
        ),
    "private_key":
        HelpData(
            description="Location of the private key file.",
            format=pathlib.Path,
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "bits":
        HelpData(
            description="Size of each prime (in bits). The modulus is twice as large.",
            choices=["16", "32", "64", "128", "256", "512"],
            default="64",
        ),
    "overwrite":
        HelpData(
            description="Overwrite specified destination files if they exist?",
            choices=["Y", "N"],
            default="N",
        )
}

needs = {
    "keygen": ("public_key", "private_key", "bits"),
    "encrypt": ("public_key", "message"),
    "decrypt": ("private_key", "message"),
    "demo": ("bits", "message"),
}

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=help_dict["public_key"].format, help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key",
                     "-P",
                     type=help_dict["private_key"].format,
                     help=help_dict["private_key"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", "-m", type=help_dict["message"].format, help=help_dict["message"].description)
sizing = argparse.ArgumentParser(add_help=False)
sizing.add_argument("--bits", "-b", choices=help_dict["bits"].choices, help=help_dict["bits"].description)
sizing.add_argument("--rounds", "-r", type=int, help="Miller-Rabin rounds per prime candidate.")
sizing.add_argument("--seed", type=int, help="Seed for a reproducible (and predictable!) key.")
corep = argparse.ArgumentParser(prog="textbookrsa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {textbookrsa.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen = commands.add_parser("keygen", parents=[privkey, pubkey, sizing], help=help_dict["keygen"].description)
keygen.add_argument("--overwrite", "-o", action="store_const", const="Y", help=help_dict["overwrite"].description)
encrypt = commands.add_parser("encrypt", parents=[pubkey, payloads], help=help_dict["encrypt"].description)
decrypt = commands.add_parser("decrypt", parents=[privkey, payloads], help=help_dict["decrypt"].description)
demo = commands.add_parser("demo", parents=[payloads, sizing], help=help_dict["demo"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    for choice in helper_data.choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    vald = set(helper_data.choices)
    while True:
        ch = input(f"{arg}: ")
        if ch in vald:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if not ch and helper_data.default is not None:
            return helper_data.default
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def check_message(mess: str) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        with open(mess[2:], "r", encoding="utf-8") as f:
            mess = f.read()
    return mess


def text_to_symbols(text: str) -> list[int]:
    """One symbol code per character."""
    return [ord(ch) for ch in text]


def symbols_to_text(symbols: typing.Iterable[int]) -> str:
    """Inverse of `text_to_symbols`.

    Raises:
        SymbolOutOfRange: If a code is not a valid character, typically after decrypting with the wrong key.
    """
    try:
        return "".join(chr(sym) for sym in symbols)
    except (ValueError, OverflowError) as exc:
        raise SymbolOutOfRange("Decrypted symbols do not form text. Wrong key?") from exc


def _rng(seed: int | None) -> random.Random | None:
    return random.Random(seed) if seed is not None else None


def run(args: argparse.Namespace, pspr: typing.Callable, pstatus: tuple[bool, bool]) -> None:
    """Executes a fully specified subcommand."""
    match args.subcommand:
        case "keygen":
            if args.private_key.exists() or args.public_key.exists():
                rs = getattr(args, "overwrite", None)
                if rs is None:
                    rs = choice_handler("overwrite", pstatus, pspr)
                if rs == "N":
                    print("Destination private or public key already exists!")
                    return
            rpk = textbookrsa.RSAPrivKey.generate(int(args.bits), args.rounds, _rng(args.seed))
            rpk.export(args.private_key)
            rpk.pub.export(args.public_key)
            pspr("\nKey pair generated!")
        case "encrypt":
            rpu = textbookrsa.RSAPubKey.import_key(args.public_key)
            ciph = rpu.encrypt(text_to_symbols(check_message(args.message)))
            pspr("Ciphertext:")
            print(textbookrsa.encode_ciphertext(ciph))
        case "decrypt":
            rpk = textbookrsa.RSAPrivKey.import_key(args.private_key)
            clear = rpk.decrypt(textbookrsa.decode_ciphertext(check_message(args.message).strip()))
            pspr("Cleartext:")
            print(symbols_to_text(clear))
        case "demo":
            kp, p, q = textbookrsa.generate_key_pair(int(args.bits),
                                                     args.rounds,
                                                     _rng(args.seed),
                                                     expose_primes=True)
            print(f"p: {p}")
            print(f"q: {q}")
            print(f"n: {kp.n}")
            print(f"Phi: {(p - 1) * (q - 1)}")
            print(f"Public Key {{e,n}}: {{{kp.e}, {kp.n}}}")
            print(f"Private Key {{d,n}}: {{{kp.d}, {kp.n}}}")
            ciph = textbookrsa.encrypt(text_to_symbols(check_message(args.message)), kp.public_key)
            print(f"Encrypted Symbols: {list(ciph)}")
            print(f"Decrypted Text: {symbols_to_text(textbookrsa.decrypt(ciph, kp.private_key))}")


def main(argv: list[str] | None = None) -> None:
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to Textbook RSA!\n")
    if not args.subcommand:
        args.subcommand = choice_handler("subcommand", pstatus)
        for opt in ("rounds", "seed"):
            setattr(args, opt, getattr(args, opt, None))
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            if help_dict[reqs].choices is not None:
                res = choice_handler(reqs, pstatus)
            else:
                res = input_handler(reqs, pstatus)
            setattr(args, reqs, res)
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    try:
        run(args, pspr, pstatus)
    except (textbookrsa.RSAError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    pspr("Thank you for using Textbook RSA!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()

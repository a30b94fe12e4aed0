"""Textbook RSA from first principles, in an Academic Sense.

Provides square-and-multiply modular exponentiation, an iterative extended Euclid modular inverse, a Miller-Rabin
primality test, bounded prime sampling, key pair generation and symbol-at-a-time encryption and decryption.
Not a production cryptosystem: no padding, no constant-time arithmetic, small keys.

Typical usage example:

    kp = generate_key_pair(64)
    c = encrypt([ord(ch) for ch in "Hi there!"], kp.public_key)
    r = decrypt(c, kp.private_key)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from textbookrsa.arith import check_width
from textbookrsa.arith import eea
from textbookrsa.arith import mod_inverse
from textbookrsa.arith import modpow
from textbookrsa.errors import DegenerateKeyError
from textbookrsa.errors import IntegerWidthError
from textbookrsa.errors import InvalidBitWidth
from textbookrsa.errors import MalformedCiphertext
from textbookrsa.errors import NoCoprimeFoundError
from textbookrsa.errors import NoInverseError
from textbookrsa.errors import PrimeGenerationTimeout
from textbookrsa.errors import RSAError
from textbookrsa.errors import SymbolOutOfRange
from textbookrsa.keygen import check_prime
from textbookrsa.keygen import generate_key_pair
from textbookrsa.keygen import generate_prime
from textbookrsa.keygen import is_probable_prime
from textbookrsa.keygen import KeyPair
from textbookrsa.rsa import Ciphertext
from textbookrsa.rsa import decode_ciphertext
from textbookrsa.rsa import decrypt
from textbookrsa.rsa import encode_ciphertext
from textbookrsa.rsa import encrypt
from textbookrsa.rsa import RSAPrivKey
from textbookrsa.rsa import RSAPubKey

__version__ = "0.0.1"
__all__ = [
    "modpow",
    "mod_inverse",
    "eea",
    "check_width",
    "is_probable_prime",
    "check_prime",
    "generate_prime",
    "generate_key_pair",
    "KeyPair",
    "Ciphertext",
    "encrypt",
    "decrypt",
    "encode_ciphertext",
    "decode_ciphertext",
    "RSAPrivKey",
    "RSAPubKey",
    "RSAError",
    "InvalidBitWidth",
    "PrimeGenerationTimeout",
    "DegenerateKeyError",
    "NoCoprimeFoundError",
    "NoInverseError",
    "SymbolOutOfRange",
    "IntegerWidthError",
    "MalformedCiphertext",
]

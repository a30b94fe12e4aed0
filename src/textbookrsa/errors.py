"""Exceptions raised by the textbook RSA engine.

Every error derives from `RSAError`, so callers can catch the whole family at once, and additionally from the
builtin exception matching its nature, so existing `except ValueError` style handling keeps working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAError(Exception):
    """Base class of all textbook RSA failures."""


class InvalidBitWidth(RSAError, ValueError):
    """Requested bit width is too small to produce a prime or a key."""


class PrimeGenerationTimeout(RSAError, RuntimeError):
    """Rejection sampling ran out of attempts without finding a prime."""


class DegenerateKeyError(RSAError, RuntimeError):
    """Could not draw two distinct primes within the retry budget."""


class NoCoprimeFoundError(RSAError, RuntimeError):
    """The public exponent search exhausted its retry budget."""


class NoInverseError(RSAError, ValueError):
    """The value has no inverse under the given modulus."""


class SymbolOutOfRange(RSAError, ValueError):
    """A symbol code cannot be represented under the key's modulus."""


class IntegerWidthError(RSAError, OverflowError):
    """The working integer width cannot hold the intermediate products."""


class MalformedCiphertext(RSAError, ValueError):
    """The payload is not an encoded ciphertext."""

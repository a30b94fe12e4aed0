"""Modular arithmetic primitives underpinning the whole engine.

Square-and-multiply exponentiation and the iterative extended Euclidean algorithm. Python integers never
overflow, but the engine can be asked to respect an explicit working width (in bits), mirroring what a fixed-width
implementation would be able to hold; exceeding it fails loudly instead of wrapping.

Typical usage example:

    c = modpow(65, 17, 3233)
    d = mod_inverse(17, 3120)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from textbookrsa.errors import IntegerWidthError
from textbookrsa.errors import NoInverseError


def check_width(modulus: int, width: int | None) -> None:
    """Ensure a squaring modulo `modulus` fits in `width` bits.

    The largest intermediate product of `modpow` is `a * a` with `a < modulus`, so twice the bit length of the
    modulus is required.

    Args:
        modulus: The modulus the arithmetic will reduce by.
        width: The working width in bits. None means unbounded.

    Raises:
        IntegerWidthError: If the width cannot hold the intermediate products.
    """
    if width is None:
        return
    need = 2 * (modulus - 1).bit_length()
    if need > width:
        raise IntegerWidthError(f"Modulus of {modulus.bit_length()} bits needs {need} bits of working width, "
                                f"only {width} available.")


def modpow(base: int, exponent: int, modulus: int, width: int | None = None) -> int:
    """Computes `base**exponent % modulus` by binary square-and-multiply.

    Walks the exponent's bits from least significant upwards, squaring the running base each step and folding it
    into the result on set bits. Every product is reduced immediately.

    Args:
        base: The base. Reduced modulo `modulus` first.
        exponent: Non-negative exponent.
        modulus: Positive modulus.
        width: Optional working width in bits, see `check_width`.

    Returns:
        The residue in `[0, modulus)`.

    Raises:
        ValueError: If `exponent` is negative or `modulus` is not positive.
        IntegerWidthError: If `width` is given and too narrow for `modulus`.
    """
    if modulus < 1:
        raise ValueError("Modulus must be positive.")
    if exponent < 0:
        raise ValueError("Exponent must be non-negative.")
    check_width(modulus, width)
    if modulus == 1:
        return 0
    result = 1
    base %= modulus
    while exponent:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers.
        As well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mod_inverse(e: int, phi: int) -> int:
    """Finds `d` with `d * e % phi == 1`.

    Runs `eea` on `(phi, e)`; the Bezout coefficient belonging to `e` is the inverse.

    Args:
        e: The value to invert.
        phi: The modulus, positive. Everything is congruent to 0 modulo 1, so the inverse is 0 there.

    Returns:
        The inverse in `[0, phi)`.

    Raises:
        NoInverseError: If `e` and `phi` are not coprime, or `phi` is not positive.
    """
    if phi < 1:
        raise NoInverseError(f"No inverse exists modulo {phi}.")
    g, _, t = eea(phi, e % phi)
    if g != 1:
        raise NoInverseError(f"{e} has no inverse modulo {phi}, gcd is {g}.")
    if t < 0:
        t += phi
    return t % phi

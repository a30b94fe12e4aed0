"""Core Key Generation Utility: primality testing, prime sampling and key pair derivation.

Implements the Miller-Rabin probabilistic test on top of `textbookrsa.arith`, uniform rejection sampling of
primes of a requested bit width, and the textbook key pair pipeline (two distinct primes, totient, random
coprime public exponent, inverse private exponent). Every loop here is bounded and every sampling step draws
from an explicitly passed `random.Random` compatible generator. When none is given a fresh
`secrets.SystemRandom` is created for the call, so no generator state is ever shared between callers.

Typical usage example:

    is_probable_prime(7919, 20)
    p = generate_prime(64)
    kp = generate_key_pair(64, rng=random.Random(1234))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import math
import random
import secrets
from typing import Literal, NamedTuple, overload, TYPE_CHECKING
import warnings

from textbookrsa.arith import check_width
from textbookrsa.arith import mod_inverse
from textbookrsa.arith import modpow
from textbookrsa.errors import DegenerateKeyError
from textbookrsa.errors import IntegerWidthError
from textbookrsa.errors import InvalidBitWidth
from textbookrsa.errors import NoCoprimeFoundError
from textbookrsa.errors import PrimeGenerationTimeout

if TYPE_CHECKING:
    from textbookrsa import rsa

MINIMUM_PRIME_BITS: int = 2
# 2-bit primes only yield phi = 2, which leaves no exponent in [2, phi).
MINIMUM_KEY_BITS: int = 3
DISTINCT_PRIME_ATTEMPTS: int = 100
COPRIME_ATTEMPTS: int = 1000
WEAK_ROUNDS_THRESHOLD: int = 20


class KeyPair(NamedTuple):
    """An immutable textbook RSA key pair.

    Attributes:
        e: The public exponent.
        d: The private exponent.
        n: The shared modulus.
    """
    e: int
    d: int
    n: int

    @property
    def public_key(self) -> tuple[int, int]:
        return self.e, self.n

    @property
    def private_key(self) -> tuple[int, int]:
        return self.d, self.n

    @property
    def pub(self) -> "rsa.RSAPubKey":
        """The public half as an `RSAPubKey`."""
        from textbookrsa import rsa  # pylint: disable=import-outside-toplevel,cyclic-import
        return rsa.RSAPubKey(self.n, self.e)

    @property
    def priv(self) -> "rsa.RSAPrivKey":
        """The private half as an `RSAPrivKey`, with its public key attached."""
        from textbookrsa import rsa  # pylint: disable=import-outside-toplevel,cyclic-import
        return rsa.RSAPrivKey(self.n, self.d, self.e)


def _sieve(n: int = 1000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 1000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


_SMALL_PRIMES: tuple[int, ...] = tuple(_sieve())


def _trial_division(no: int) -> bool:
    """Check the provided `no` against the known small primes.

    Runs a fast pre-check before Miller-Rabin by using modulo division on our known frequent primes.

    Args:
         no: The number to check.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in _SMALL_PRIMES:
        if prime * prime > no:
            return True
        if no % prime == 0:
            return False
    return True


def _default_rng(rng: random.Random | None) -> random.Random:
    if rng is None:
        return secrets.SystemRandom()
    return rng


def _resolve_rounds(bits: int, rounds: int | None) -> int:
    """Picks the Miller-Rabin round count for candidates of `bits` bits.

    Args:
        bits: Bit length of the candidates.
        rounds: Explicit round count. If not provided will use defaults as per the FIPS 186-5 Appendix C.1

    Returns:
        The number of rounds to run.

    Raises:
        ValueError: If `rounds` is smaller than 1.
    """
    if rounds is None:
        if bits <= 512:
            return 40
        if bits <= 1024:
            return 56
        if bits <= 1536:
            return 64
        if bits <= 2048:
            return 70
        return 74
    if rounds < 1:
        raise ValueError("At least one Miller-Rabin round is required.")
    if rounds < WEAK_ROUNDS_THRESHOLD:
        warnings.warn(f"{rounds} Miller-Rabin rounds give only a 4**-{rounds} false positive bound.", RuntimeWarning)
    return rounds


def _miller_rabin(w: int, iters: int, rng: random.Random) -> bool:
    """Perform Miller-Rabin primality test.

    Writes `w - 1 = 2**a * m` with `m` odd and checks `iters` random witnesses, returning on the first one that
    proves `w` composite.

    Args:
        w: Integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.
        rng: Source of the witnesses.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    if w % 2 == 0:
        return False
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = rng.randint(2, w - 2)
        z = modpow(b, m, w)
        if z == 1 or z == tw:
            continue
        for _ in range(1, a):
            z = (z * z) % w
            if z == tw:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def is_probable_prime(n: int, rounds: int | None = None, rng: random.Random | None = None) -> bool:
    """Miller-Rabin probabilistic primality test.

    Composites are reported with certainty; a prime verdict is wrong with probability at most `4**-rounds`.

    Args:
        n: The candidate.
        rounds: Number of random witnesses to check. Defaults to the FIPS 186-5 count for the size of `n`.
            Counts below `WEAK_ROUNDS_THRESHOLD` issue a RuntimeWarning.
        rng: Witness source. Defaults to a fresh `secrets.SystemRandom`.

    Returns:
        True if `n` is probably prime, False if it is certainly composite (or smaller than 2).
    """
    rounds = _resolve_rounds(n.bit_length(), rounds)
    return _miller_rabin(n, rounds, _default_rng(rng))


def check_prime(candidate: int, rounds: int | None = None, rng: random.Random | None = None) -> bool:
    """Performs a composite Primality test, using trial division by small primes, before a Miller-Rabin test.

    Args:
        candidate: The candidate prime to test.
        rounds: Passed to `is_probable_prime()`.
        rng: Passed to `is_probable_prime()`.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if not _trial_division(candidate):
        return False
    return is_probable_prime(candidate, rounds, rng)


def generate_prime(bits: int,
                   rounds: int | None = None,
                   rng: random.Random | None = None,
                   max_attempts: int | None = None) -> int:
    """Generate a probable prime number of exactly `bits` bits.

    Draws candidates uniformly from `[2**(bits-1), 2**bits - 1]` and rejects until one passes.

    Args:
        bits: The size of the prime to generate in bits. At least 2.
        rounds: Miller-Rabin rounds per candidate, see `is_probable_prime()`.
        rng: Candidate and witness source. Defaults to a fresh `secrets.SystemRandom`.
        max_attempts: Number of candidates to try. Defaults to `max(100, 50 * bits)`.

    Returns:
        A probable prime number.

    Raises:
        InvalidBitWidth: If `bits` is below 2.
        PrimeGenerationTimeout: If no prime was found within `max_attempts` candidates.
    """
    if bits < MINIMUM_PRIME_BITS:
        raise InvalidBitWidth(f"Primes need at least {MINIMUM_PRIME_BITS} bits, got {bits}.")
    rng = _default_rng(rng)
    rounds = _resolve_rounds(bits, rounds)
    if max_attempts is None:
        max_attempts = max(100, 50 * bits)
    low, high = 1 << (bits - 1), (1 << bits) - 1
    for _ in range(max_attempts):
        candidate = rng.randint(low, high)
        if _trial_division(candidate) and _miller_rabin(candidate, rounds, rng):
            return candidate
    raise PrimeGenerationTimeout(
        f"Tried {max_attempts} candidates of {bits} bits with no prime found. Check the random number generator.")


def _draw_coprime(phi: int, rng: random.Random) -> int:
    """Draws a public exponent uniformly from `[2, phi)` coprime to `phi`."""
    for _ in range(COPRIME_ATTEMPTS):
        e = rng.randrange(2, phi)
        if math.gcd(e, phi) == 1:
            return e
    raise NoCoprimeFoundError(f"No exponent coprime to {phi} found in {COPRIME_ATTEMPTS} draws.")


@overload
def generate_key_pair(bits: int,
                      rounds: int | None = None,
                      rng: random.Random | None = None,
                      width: int | None = None,
                      expose_primes: Literal[False] = False) -> KeyPair:
    ...


@overload
def generate_key_pair(bits: int,
                      rounds: int | None = None,
                      rng: random.Random | None = None,
                      width: int | None = None,
                      expose_primes: Literal[True] = False) -> tuple[KeyPair, int, int]:
    ...


def generate_key_pair(bits: int,
                      rounds: int | None = None,
                      rng: random.Random | None = None,
                      width: int | None = None,
                      expose_primes: bool = False) -> KeyPair | tuple[KeyPair, int, int]:
    """Generates a textbook RSA key pair.

    Samples two distinct `bits`-bit primes, then a random public exponent coprime to the totient
    `(p - 1) * (q - 1)` and its inverse as the private exponent. Nothing is returned unless every step succeeds.

    Args:
        bits: Bit width of each prime. The modulus has about twice as many.
        rounds: Miller-Rabin rounds per candidate, see `is_probable_prime()`.
        rng: Randomness for all sampling steps. Defaults to a fresh `secrets.SystemRandom`.
        width: Optional working integer width in bits. Must hold `4 * bits` for the squarings modulo `n`.
        expose_primes: Whether to return the prime numbers as well or not. Defaults to False.

    Returns:
        The key pair, or `(key pair, p, q)` if `expose_primes` is set.

    Raises:
        InvalidBitWidth: If `bits` is below `MINIMUM_KEY_BITS`.
        IntegerWidthError: If `width` cannot hold the products of a `2 * bits` modulus.
        PrimeGenerationTimeout: If prime sampling gave up.
        DegenerateKeyError: If no prime distinct from the first was drawn.
        NoCoprimeFoundError: If the exponent search gave up.
    """
    if bits < MINIMUM_KEY_BITS:
        raise InvalidBitWidth(f"Key generation needs primes of at least {MINIMUM_KEY_BITS} bits, got {bits}.")
    if width is not None and 4 * bits > width:
        raise IntegerWidthError(f"{bits}-bit primes need a working width of {4 * bits} bits, only {width} available.")
    rng = _default_rng(rng)
    p = generate_prime(bits, rounds, rng)
    for _ in range(DISTINCT_PRIME_ATTEMPTS):
        q = generate_prime(bits, rounds, rng)
        if q != p:
            break
    else:
        raise DegenerateKeyError(f"Drew {p} again in all {DISTINCT_PRIME_ATTEMPTS} attempts for a second prime.")
    n = p * q
    check_width(n, width)
    phi = (p - 1) * (q - 1)
    e = _draw_coprime(phi, rng)
    d = mod_inverse(e, phi)
    kp = KeyPair(e, d, n)
    if not expose_primes:
        return kp
    return kp, p, q

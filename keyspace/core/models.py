"""
Keyspace Core Data Models
==========================

Pydantic models for the Keyspace passphrase analysis engine: the
character pools an attacker is assumed to draw from, and the immutable
result of a single brute-force cost analysis.

Pools compare and hash by the characters they resolve to, not by their
kind, so that a set of pools never counts the same alphabet twice::

    >>> NUMBERS == CharacterPool.custom("0123456789")
    True
    >>> len({NUMBERS, CharacterPool.custom("9876543210")})
    1

All models are serialisable to JSON and designed for consumption by both
the CLI output layer and the JSON report generator.

References:
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
      Bell System Technical Journal, 27(3), 379-423.
    - NIST SP 800-63B (2017). Digital Identity Guidelines --
      Authentication and Lifecycle Management.
"""

from __future__ import annotations

import enum
import math
import string
from fractions import Fraction
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class PoolKind(str, enum.Enum):
    """The closed set of character pool variants."""

    UPPERCASE_LETTERS = "uppercase_letters"
    LOWERCASE_LETTERS = "lowercase_letters"
    NUMBERS = "numbers"
    SYMBOLS = "symbols"
    SPACE = "space"
    CUSTOM = "custom"


_BUILTIN_CHARACTERS: dict[PoolKind, str] = {
    PoolKind.UPPERCASE_LETTERS: string.ascii_uppercase,
    PoolKind.LOWERCASE_LETTERS: string.ascii_lowercase,
    PoolKind.NUMBERS: string.digits,
    PoolKind.SYMBOLS: string.punctuation,
    PoolKind.SPACE: " ",
}

# Accepted spellings for configuration files and the CLI
_POOL_ALIASES: dict[str, PoolKind] = {
    "uppercase_letters": PoolKind.UPPERCASE_LETTERS,
    "uppercase": PoolKind.UPPERCASE_LETTERS,
    "upper": PoolKind.UPPERCASE_LETTERS,
    "lowercase_letters": PoolKind.LOWERCASE_LETTERS,
    "lowercase": PoolKind.LOWERCASE_LETTERS,
    "lower": PoolKind.LOWERCASE_LETTERS,
    "numbers": PoolKind.NUMBERS,
    "digits": PoolKind.NUMBERS,
    "symbols": PoolKind.SYMBOLS,
    "punctuation": PoolKind.SYMBOLS,
    "space": PoolKind.SPACE,
}


# ===================================================================== #
#  Character Pools
# ===================================================================== #


class CharacterPool(BaseModel):
    """A set of characters contributing to the assumed attacker alphabet.

    Built-in kinds resolve to fixed alphabets. ``CUSTOM`` pools resolve to
    the distinct characters of their ``text``, first occurrence first.

    Attributes:
        kind: Pool variant.
        text: Source text for ``CUSTOM`` pools; empty for built-in kinds.
    """

    model_config = ConfigDict(frozen=True)

    kind: PoolKind
    text: str = ""

    @model_validator(mode="after")
    def _check_text(self) -> CharacterPool:
        if self.kind is not PoolKind.CUSTOM and self.text:
            raise ValueError(
                f"Only custom pools carry text (got kind={self.kind.value!r})"
            )
        return self

    # ------------------------------------------------------------------ #
    #  Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def custom(cls, text: str) -> CharacterPool:
        """Create a pool from the distinct characters of *text*."""
        return cls(kind=PoolKind.CUSTOM, text=text)

    @classmethod
    def from_name(cls, name: str) -> CharacterPool:
        """Resolve a built-in pool from a configuration or CLI name.

        Names are case-insensitive and treat ``-`` and ``_`` alike, so
        ``"Lowercase-Letters"``, ``"lowercase"`` and ``"lower"`` all
        resolve to :data:`LOWERCASE_LETTERS`.

        Raises:
            ValueError: If *name* is not a known built-in pool.
        """
        key = name.strip().lower().replace("-", "_")
        kind = _POOL_ALIASES.get(key)
        if kind is None:
            known = ", ".join(k.value for k in _BUILTIN_CHARACTERS)
            raise ValueError(f"Unknown character pool {name!r} (known: {known})")
        return cls(kind=kind)

    # ------------------------------------------------------------------ #
    #  Derived attributes
    # ------------------------------------------------------------------ #

    @property
    def characters(self) -> str:
        """Distinct characters contributed by this pool."""
        if self.kind is PoolKind.CUSTOM:
            return "".join(dict.fromkeys(self.text))
        return _BUILTIN_CHARACTERS[self.kind]

    @property
    def character_count(self) -> int:
        return len(self.characters)

    @property
    def character_set(self) -> frozenset[str]:
        """Membership-test view of :attr:`characters`."""
        return frozenset(self.characters)

    @property
    def label(self) -> str:
        """Short display name, e.g. ``numbers`` or ``custom('xyz')``."""
        if self.kind is PoolKind.CUSTOM:
            return f"custom({self.characters!r})"
        return self.kind.value

    # ------------------------------------------------------------------ #
    #  Identity by resolved characters
    # ------------------------------------------------------------------ #

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CharacterPool):
            return NotImplemented
        return self.character_set == other.character_set

    def __hash__(self) -> int:
        return hash(self.character_set)


UPPERCASE_LETTERS = CharacterPool(kind=PoolKind.UPPERCASE_LETTERS)
LOWERCASE_LETTERS = CharacterPool(kind=PoolKind.LOWERCASE_LETTERS)
NUMBERS = CharacterPool(kind=PoolKind.NUMBERS)
SYMBOLS = CharacterPool(kind=PoolKind.SYMBOLS)
SPACE = CharacterPool(kind=PoolKind.SPACE)

BUILTIN_POOLS: tuple[CharacterPool, ...] = (
    UPPERCASE_LETTERS,
    LOWERCASE_LETTERS,
    NUMBERS,
    SYMBOLS,
    SPACE,
)


# ===================================================================== #
#  Crack Time Helpers
# ===================================================================== #


def crack_time(search_space_size: int, guesses_per_second: float) -> float:
    """Seconds needed to exhaust *search_space_size* at the given rate.

    Search spaces beyond the float range are divided exactly; a quotient
    that still does not fit a float is reported as ``math.inf``.

    Raises:
        ValueError: If *guesses_per_second* is not a positive finite number.
    """
    if not (math.isfinite(guesses_per_second) and guesses_per_second > 0):
        raise ValueError(
            f"guesses_per_second must be a positive finite number, "
            f"got {guesses_per_second!r}"
        )
    try:
        return search_space_size / guesses_per_second
    except OverflowError:
        pass
    try:
        return float(Fraction(search_space_size) / Fraction(guesses_per_second))
    except OverflowError:
        return math.inf


# Counts from here on are shown in scientific notation (displays and reports)
EXACT_COUNT_LIMIT = 10**15


def format_count(value: int) -> str:
    """Format a (possibly enormous) integer count for display.

    Counts below :data:`EXACT_COUNT_LIMIT` are printed in full with
    thousands separators, larger ones in scientific notation derived from
    ``math.log10`` so that no float conversion or decimal expansion of the
    integer occurs.
    """
    if value < EXACT_COUNT_LIMIT:
        return f"{value:,}"
    exponent = math.floor(math.log10(value))
    mantissa = 10 ** (math.log10(value) - exponent)
    return f"{mantissa:.3f}e+{exponent}"


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string."""
    if math.isinf(seconds):
        return "forever"
    if seconds < 0.001:
        return "instant"
    if seconds < 1:
        return f"{seconds * 1000:.0f} milliseconds"
    if seconds < 60:
        return f"{seconds:.1f} seconds"
    if seconds < 3600:
        return f"{seconds / 60:.1f} minutes"
    if seconds < 86400:
        return f"{seconds / 3600:.1f} hours"
    if seconds < 86400 * 365:
        return f"{seconds / 86400:.1f} days"
    if seconds < 86400 * 365 * 1000:
        return f"{seconds / (86400 * 365):.1f} years"
    if seconds < 86400 * 365 * 1e6:
        return f"{seconds / (86400 * 365 * 1000):.1f} thousand years"
    if seconds < 86400 * 365 * 1e9:
        return f"{seconds / (86400 * 365 * 1e6):.1f} million years"
    if seconds < 86400 * 365 * 1e12:
        return f"{seconds / (86400 * 365 * 1e9):.1f} billion years"
    return f"{seconds / (86400 * 365 * 1e12):.1e} trillion years"


# ===================================================================== #
#  Analysis Result
# ===================================================================== #


class AnalysisResult(BaseModel):
    """Brute-force cost analysis of a single passphrase.

    When none of the configured pools covers any character of the
    passphrase the effective pool size is 0 and entropy is undefined:
    both entropy fields are ``None`` and :attr:`entropy_defined` is
    ``False``.

    Attributes:
        total_allowed_characters: Concatenated characters of every
            configured pool. Characters shared by overlapping pools
            appear once per pool.
        total_allowed_characters_count: Raw length of the above.
        passphrase: The analysed passphrase.
        passphrase_length: Number of characters (code points).
        pools_used: Configured pools with at least one character present
            in the passphrase.
        effective_pool_size: Sum of the sizes of ``pools_used``.
        bits_of_entropy_per_character: log2(effective_pool_size).
        bits_of_entropy: passphrase_length * bits_of_entropy_per_character.
        search_space_size: Sum of n**i for i in 1..n-1, n = passphrase_length.
        guesses_per_second: Attack speed the crack time was computed at.
        time_taken: search_space_size / guesses_per_second, in seconds.
    """

    model_config = ConfigDict(frozen=True)

    total_allowed_characters: str
    total_allowed_characters_count: int
    passphrase: str
    passphrase_length: int
    pools_used: tuple[CharacterPool, ...] = Field(default_factory=tuple)
    effective_pool_size: int = 0
    bits_of_entropy_per_character: Optional[float] = None
    bits_of_entropy: Optional[float] = None
    search_space_size: int = 0
    guesses_per_second: float
    time_taken: float = 0.0

    @property
    def entropy_defined(self) -> bool:
        return self.bits_of_entropy is not None

    def time_taken_at(self, guesses_per_second: float) -> float:
        """Crack time in seconds at a different attack speed.

        The stored :attr:`time_taken` is left untouched.

        Raises:
            ValueError: If *guesses_per_second* is not positive.
        """
        return crack_time(self.search_space_size, guesses_per_second)

    def describe(self) -> str:
        """Return a multi-line ``field: value`` dump for diagnostics."""
        pools_used = ", ".join(p.label for p in self.pools_used) or "-"
        lines = [
            f"total_allowed_characters: {self.total_allowed_characters}",
            f"total_allowed_characters_count: {self.total_allowed_characters_count}",
            f"passphrase: {self.passphrase}",
            f"passphrase_length: {self.passphrase_length}",
            f"pools_used: {pools_used}",
            f"effective_pool_size: {self.effective_pool_size}",
            f"bits_of_entropy_per_character: {_fmt_bits(self.bits_of_entropy_per_character)}",
            f"bits_of_entropy: {_fmt_bits(self.bits_of_entropy)}",
            f"search_space_size: {format_count(self.search_space_size)}",
            f"guesses_per_second: {self.guesses_per_second:g}",
            f"time_taken: {self.time_taken:g}",
        ]
        return "\n".join(lines)


def _fmt_bits(bits: Optional[float]) -> str:
    return "undefined" if bits is None else f"{bits:.5f}"

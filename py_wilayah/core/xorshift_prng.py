"""
Seeded xorshift32 PRNG and string hashing.

State is initialized with an FNV-1a fold of the seed string and advanced by
one xorshift32 step per draw, so the same seed string always reproduces the
same sequence across runs and platforms.
"""

FNV_OFFSET_BASIS = 0x811C9DC5  # 2166136261
FNV_PRIME = 0x01000193  # 16777619

# xorshift32 has an all-zero fixed point
_ZERO_STATE_REPLACEMENT = 0x9E3779B9


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


def hash32(s: str) -> int:
    """Polynomial rolling hash ``h = h * 31 + code``, wrapped to 32 bits."""
    h = 0
    for char in str(s):
        h = _uint32(h * 31 + ord(char))
    return h


def fnv1a32(s: str) -> int:
    """32-bit FNV-1a fold of a string."""
    h = FNV_OFFSET_BASIS
    for char in str(s):
        h ^= ord(char)
        h = _uint32(h * FNV_PRIME)
    return h


class XorShiftPRNG:
    """
    Deterministic generator of floats in [0, 1).

    Two instances built from the same seed string produce identical
    sequences.
    """

    def __init__(self, seed):
        """Initialize with a seed string (other values are stringified)."""
        self.call_count = 0
        self.seed = str(seed)
        self.state = fnv1a32(self.seed) or _ZERO_STATE_REPLACEMENT

    def next_uint32(self) -> int:
        """Advance one xorshift32 step and return the new state."""
        self.call_count += 1
        x = self.state
        x ^= _uint32(x << 13)
        x ^= x >> 17
        x ^= _uint32(x << 5)
        self.state = _uint32(x)
        return self.state

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        return self.next_uint32() / 4294967296.0  # 2^32

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def randint(self, a: int, b: int) -> int:
        """Integer in the inclusive range [a, b]."""
        if b < a:
            raise ValueError(f"Empty range for randint: [{a}, {b}]")
        return a + int(self.random() * (b - a + 1))

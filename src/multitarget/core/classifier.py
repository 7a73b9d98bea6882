"""
Host-testability classification for capability traits.

A trait is mockable on the host exactly when its name appears in a fixed
allow-list of embedded-hal shapes that embedded-hal-mock (or a trivial
std implementation) covers. Matching is exact; no fuzzy or version-aware
comparison is attempted.
"""

from typing import FrozenSet, Iterable, List, Tuple

MOCKABLE_TRAITS: FrozenSet[str] = frozenset(
    {
        # digital I/O
        "InputPin",
        "OutputPin",
        "StatefulOutputPin",
        "ToggleableOutputPin",
        # buses
        "I2c",
        "SpiBus",
        "SpiDevice",
        "Read",
        "Write",
        "WriteRead",
        "Transfer",
        # timing
        "DelayNs",
        "DelayUs",
        "DelayMs",
        "CountDown",
        # analog
        "OneShot",
        "Channel",
        "SetDutyCycle",
        "PwmPin",
    }
)


def is_native_mockable(name: str) -> bool:
    """Return True if ``name`` has a known host-side mock implementation."""
    return name in MOCKABLE_TRAITS


def unmockable_warning(name: str) -> str:
    return f"Trait '{name}' is not known to be available for host testing"


def classify(names: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Partition trait names into mocked names and warnings.

    Args:
        names: Trait names in discovery order

    Returns:
        Tuple of (mocked trait names, one warning per non-mockable trait),
        both in input order without duplicates
    """
    mocked: List[str] = []
    warnings: List[str] = []
    seen = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        if is_native_mockable(name):
            mocked.append(name)
        else:
            warnings.append(unmockable_warning(name))
    return mocked, warnings

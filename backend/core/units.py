"""
Engineering-unit value formatting and parsing.

Stored part values are plain floats in the base unit implied by the part
category (Farads, Ohms, Henries, or nothing). Display strings carry an SI
prefix, e.g. 4700.0 Ohms -> "4.70 kΩ".
"""

import re
import sys
from enum import Enum
from typing import Optional


class ComponentKind(Enum):
    CAPACITOR = "F"
    RESISTOR = "Ω"
    INDUCTOR = "H"
    OTHER = ""

    @property
    def unit(self) -> str:
        return self.value

    @property
    def scaled(self) -> bool:
        """Whether values of this kind are shown with an SI prefix."""
        return self is not ComponentKind.OTHER

    @classmethod
    def from_category(cls, category: Optional[str]) -> "ComponentKind":
        name = (category or "").strip()
        if name.startswith("Cap"):
            return cls.CAPACITOR
        if name == "Resistor":
            return cls.RESISTOR
        if name == "Inductor":
            return cls.INDUCTOR
        return cls.OTHER


# (exclusive upper bound, multiplier applied for display, prefix), smallest first
SCALE_BRACKETS = [
    (1e-9, 1e12, "p"),
    (1e-6, 1e9, "n"),
    (1e-3, 1e6, "µ"),
    (1.0, 1e3, "m"),
    (1e3, 1.0, ""),
    (1e6, 1e-3, "k"),
    (1e9, 1e-6, "M"),
]
GIGA = (1e-9, "G")

# Plain decimal or exponent notation; no digit separators, inf or nan
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

PREFIX_MULTIPLIERS = {
    "p": 1e-12,
    "n": 1e-9,
    "u": 1e-6,
    "µ": 1e-6,
    "m": 1e-3,
    "k": 1e3,
    "M": 1e6,
    "G": 1e9,
}


def _scale(value: float) -> tuple[float, str]:
    magnitude = abs(value)
    if magnitude < sys.float_info.epsilon:
        return value, ""
    for bound, multiplier, prefix in SCALE_BRACKETS:
        if magnitude < bound:
            return value * multiplier, prefix
    multiplier, prefix = GIGA
    return value * multiplier, prefix


def format_value(category: Optional[str], value: Optional[float]) -> str:
    """Render a stored magnitude for display.

    The prefix occupies a two character field so columns of values line up:
    "4.70 kΩ", "100.00  Ω". Categories without a unit are never scaled.
    """
    if value is None:
        return ""
    kind = ComponentKind.from_category(category)
    if not kind.scaled:
        return f"{value:.2f}{'':>2}"
    scaled, prefix = _scale(float(value))
    return f"{scaled:.2f}{prefix:>2}{kind.unit}"


def parse_value(text: Optional[str]) -> Optional[float]:
    """Parse a user-typed value such as "4.7k", "100 n" or "22" into base units.

    Everything up to the last digit is the number; the first character of
    whatever follows is an optional SI prefix. Unknown suffixes are ignored.
    Returns None when there is no usable number.
    """
    if not text:
        return None

    last_digit = -1
    for i, ch in enumerate(text):
        if ch.isdigit():
            last_digit = i
    if last_digit < 0:
        return None

    literal = text[: last_digit + 1].strip()
    suffix = text[last_digit + 1:].strip()

    if not NUMBER_RE.fullmatch(literal):
        return None
    number = float(literal)

    if not suffix:
        return number
    return number * PREFIX_MULTIPLIERS.get(suffix[0], 1.0)

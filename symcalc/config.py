"""Mode flags for the calculator core."""

import os
from dataclasses import dataclass, replace
from enum import Enum


class AngleUnit(Enum):
    """Angle unit used to read trig arguments that carry no unit."""
    DEGREES = "deg"
    RADIANS = "rad"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CalcMode:
    """
    Caller-owned mode flags.

    The core only reads these, once, at the start of an operation. Use
    replace() to derive a changed mode; instances are never mutated.
    """

    angle_unit: AngleUnit = AngleUnit.DEGREES
    symbolic: bool = False

    # Display
    radix: int = 10
    grouping: bool = False
    group_char: str = ","

    # Significant digits kept in Float results
    precision: int = 12

    @classmethod
    def from_env(cls) -> "CalcMode":
        """Create a mode from SYMCALC_* environment variables."""
        angle = os.getenv("SYMCALC_ANGLE_MODE", "deg").strip().lower()
        return cls(
            angle_unit=AngleUnit.RADIANS if angle.startswith("rad") else AngleUnit.DEGREES,
            symbolic=_env_flag("SYMCALC_SYMBOLIC", False),
            radix=int(os.getenv("SYMCALC_RADIX", "10")),
            grouping=_env_flag("SYMCALC_GROUPING", False),
            precision=int(os.getenv("SYMCALC_PRECISION", "12")),
        )

    def replace(self, **changes) -> "CalcMode":
        return replace(self, **changes)

    @property
    def radians(self) -> bool:
        return self.angle_unit == AngleUnit.RADIANS

    def validate(self) -> list:
        """Validate the mode, return list of warnings."""
        warnings = []

        if not 2 <= self.radix <= 36:
            warnings.append(f"radix {self.radix} outside 2..36 - number formatting will fail")
        if self.precision < 1:
            warnings.append(f"precision {self.precision} < 1 - Float results will be meaningless")
        if self.grouping and not self.group_char:
            warnings.append("grouping enabled with an empty group character")

        return warnings


DEFAULT_MODE = CalcMode()

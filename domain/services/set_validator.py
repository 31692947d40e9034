"""
Validation rules for a single logged set.

Two rule configurations exist on purpose:

- SESSION_SET_RULES: what the client enforces while a workout is logged
  (weight 0-999, one decimal place).
- TEMPLATE_SET_RULES: what template defaults and the workouts API accept
  (weight 0-999.99, two decimal places).

They are kept separate; logging is looser than template authoring.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from numbers import Real
from typing import Optional, Union

Number = Union[int, float, Decimal]

ALL_FIELDS_REQUIRED = "All fields are required."


def _format_bound(value: Number) -> str:
    return f"{value:g}" if isinstance(value, float) else str(value)


def fractional_digits(value: Number) -> int:
    """
    Count the fractional digits in the shortest decimal form of a number.

    Floats are read through their repr, so 52.5 has one digit and
    52.55 has two, matching what a user typed.

    Examples:
        >>> fractional_digits(52.5)
        1
        >>> fractional_digits(100)
        0
        >>> fractional_digits(Decimal("7.250"))
        2
    """
    try:
        exponent = Decimal(str(value)).normalize().as_tuple().exponent
    except InvalidOperation:
        return 0
    if not isinstance(exponent, int):
        # NaN / Infinity
        return 0
    return max(0, -exponent)


def is_whole_number(value: Number) -> bool:
    if isinstance(value, int):
        return True
    return float(value).is_integer()


@dataclass(frozen=True)
class SetRules:
    """
    Bounds and precision for reps and weight.

    The per-field checks are used where errors need to be attached to a
    single field (the server-side schema). validate() applies the full
    ordered rule list to a (reps, weight) pair.
    """

    min_reps: int = 1
    max_reps: int = 99
    min_weight: Number = 0
    max_weight: Number = 999
    weight_decimal_places: int = 1

    @property
    def reps_range_message(self) -> str:
        return f"Reps must be between {self.min_reps} and {self.max_reps}."

    @property
    def weight_range_message(self) -> str:
        return (
            f"Weight must be between {_format_bound(self.min_weight)} "
            f"and {_format_bound(self.max_weight)}."
        )

    @property
    def reps_whole_message(self) -> str:
        return "Reps must be a whole number."

    @property
    def weight_precision_message(self) -> str:
        places = self.weight_decimal_places
        unit = "place" if places == 1 else "places"
        return f"Weight can have at most {places} decimal {unit}."

    def reps_in_range(self, reps: Number) -> bool:
        return self.min_reps <= reps <= self.max_reps

    def weight_in_range(self, weight: Number) -> bool:
        return self.min_weight <= weight <= self.max_weight

    def check_reps(self, reps: Number) -> Optional[str]:
        """Range, then whole-number check for reps alone."""
        if not self.reps_in_range(reps):
            return self.reps_range_message
        if not is_whole_number(reps):
            return self.reps_whole_message
        return None

    def check_weight(self, weight: Number) -> Optional[str]:
        """Range, then precision check for weight alone."""
        if not self.weight_in_range(weight):
            return self.weight_range_message
        if fractional_digits(weight) > self.weight_decimal_places:
            return self.weight_precision_message
        return None

    def validate(self, reps: Optional[Number], weight: Optional[Number]) -> Optional[str]:
        """
        Validate a (reps, weight) pair.

        Rules are applied in a fixed order and the first failure wins:
        unset fields, reps range, weight range, whole reps, weight precision.

        Returns:
            None when the pair is valid, otherwise the error message.
        """
        if reps is None or weight is None:
            return ALL_FIELDS_REQUIRED
        if not self.reps_in_range(reps):
            return self.reps_range_message
        if not self.weight_in_range(weight):
            return self.weight_range_message
        if not is_whole_number(reps):
            return self.reps_whole_message
        if fractional_digits(weight) > self.weight_decimal_places:
            return self.weight_precision_message
        return None


SESSION_SET_RULES = SetRules()

TEMPLATE_SET_RULES = SetRules(max_weight=999.99, weight_decimal_places=2)


def validate_set(
    reps: Optional[Number],
    weight: Optional[Number],
    rules: SetRules = SESSION_SET_RULES,
) -> Optional[str]:
    """
    Validate one set against the given rules (session logging by default).

    Examples:
        >>> validate_set(12, 52.5) is None
        True
        >>> validate_set(12, 52.55)
        'Weight can have at most 1 decimal place.'
        >>> validate_set(None, 50)
        'All fields are required.'
    """
    return rules.validate(reps, weight)


def coerce_set_value(value: object) -> Optional[Union[int, float]]:
    """
    Normalize a reps/weight value to int, float or None.

    Decimals become floats, whole floats stay floats (10.0 is still a
    valid rep count). Booleans and non-numbers are rejected, and so are
    NaN and infinities, which JSON cannot carry.

    Raises:
        TypeError: If the value is not a real number or None.
        ValueError: If the value is not finite.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise TypeError(f"Expected a number or None, got {type(value).__name__}")
    if isinstance(value, int):
        return value
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Expected a finite number, got {value!r}")
    return value


def parse_set_value(text: str) -> Optional[Union[int, float]]:
    """
    Parse user input for a reps/weight field.

    Empty input or "-" means unset.

    Raises:
        ValueError: If the text is not a number.
    """
    text = text.strip()
    if text in ("", "-"):
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"Not a number: {text!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"Not a number: {text!r}")
    return value

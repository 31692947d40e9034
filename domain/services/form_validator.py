"""
Whole-session validation.

Runs the set rules over every set of a session and writes the results
back onto the sets so every violation can be rendered at once.
"""

from typing import List, Tuple

from domain.models.session import Session
from domain.services.set_validator import SESSION_SET_RULES, SetRules


def validate_form(session: Session, rules: SetRules = SESSION_SET_RULES) -> bool:
    """
    Recompute the error of every set in place.

    Errors are always rewritten, including on sets that were believed
    valid, so stale state (e.g. a server message on a set that has since
    been corrected) can't survive a validation pass.

    Args:
        session: Session to validate (mutated).
        rules: Rule configuration to apply.

    Returns:
        True iff no set is unset and no set has an error.
    """
    valid = True
    for exercise in session.exercises:
        for entry in exercise.sets:
            entry.error = rules.validate(entry.reps, entry.weight)
            if entry.error is not None:
                valid = False
    return valid


def is_form_valid(session: Session) -> bool:
    """Non-mutating check used to enable the submit control."""
    return all(
        entry.is_valid for exercise in session.exercises for entry in exercise.sets
    )


def form_errors(session: Session) -> List[Tuple[int, int, str]]:
    """Return (exercise_index, set_index, message) for every set with an error."""
    return [
        (exercise_index, entry.set_index, entry.error)
        for exercise_index, exercise in enumerate(session.exercises)
        for entry in exercise.sets
        if entry.error is not None
    ]

"""
Domain services for workout logging.

Pure functions over the Session aggregate:
- set_validator: rules for one (reps, weight) pair, in two configurations
- form_validator: applies the set rules across a whole session
- error_paths: maps server violation paths back onto sets

Server-side helpers depend on domain.models.template and are imported
from their modules directly:
- prefill_builder: suggested sets for a template
- personal_bests: heaviest-weight detection on create
"""

from domain.services.error_paths import (
    FIX_VALIDATION_ERRORS,
    SetErrorPath,
    apply_server_errors,
    parse_error_path,
)
from domain.services.form_validator import form_errors, is_form_valid, validate_form
from domain.services.set_validator import (
    ALL_FIELDS_REQUIRED,
    SESSION_SET_RULES,
    TEMPLATE_SET_RULES,
    SetRules,
    coerce_set_value,
    fractional_digits,
    parse_set_value,
    validate_set,
)

__all__ = [
    "SetRules",
    "SESSION_SET_RULES",
    "TEMPLATE_SET_RULES",
    "ALL_FIELDS_REQUIRED",
    "validate_set",
    "fractional_digits",
    "coerce_set_value",
    "parse_set_value",
    "validate_form",
    "is_form_valid",
    "form_errors",
    "SetErrorPath",
    "parse_error_path",
    "apply_server_errors",
    "FIX_VALIDATION_ERRORS",
]

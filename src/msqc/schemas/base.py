"""Base Pydantic model with strict defaults for msqc configs.

All msqc config schemas inherit from this base to ensure consistent
validation behavior across parameter, user, CLI, and internal configs.
"""

from pydantic import BaseModel, ConfigDict


class MsqcBaseModel(BaseModel):
    """Base model for all msqc configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Converts enums to their values
    - Strips whitespace from strings
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )


def normalize_tolerance_unit(v):
    """Map case variants of a tolerance unit onto 'auto', 'ppm' or 'Da'."""
    if isinstance(v, str):
        return {"auto": "auto", "ppm": "ppm", "da": "Da"}.get(v.strip().lower(), v)
    return v


def as_file_list(v):
    """Accept a single path where a list of paths is expected."""
    if v is None:
        return v
    if isinstance(v, str):
        return [v] if v.strip() else []
    return [str(p) for p in v]

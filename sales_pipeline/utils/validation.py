"""
Input validation utilities for command-line arguments.

Checks user-supplied paths, names and numbers before any batch work starts.
"""

from decimal import Decimal, InvalidOperation


class InputValidationError(ValueError):
    """Raised when a command-line input is not acceptable."""
    pass


def validate_file_path(file_path: str, field_name: str = "file_path", allow_wildcards: bool = False) -> str:
    """
    Validate an input file path.

    Args:
        file_path: The file path to validate
        field_name: Name of the field (for error messages)
        allow_wildcards: Whether to allow wildcards (* and ?), which Spark expands

    Returns:
        The validated file path (stripped of whitespace)

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> validate_file_path("/data/sales.csv")
        '/data/sales.csv'
        >>> validate_file_path("/data/*.csv", allow_wildcards=True)
        '/data/*.csv'
    """
    if not file_path or not isinstance(file_path, str):
        raise InputValidationError(f"{field_name} must be a non-empty string")

    file_path = file_path.strip()

    if not file_path:
        raise InputValidationError(f"{field_name} cannot be empty or whitespace-only")

    if "\x00" in file_path:
        raise InputValidationError(f"{field_name} contains null bytes")

    if not allow_wildcards and ("*" in file_path or "?" in file_path):
        raise InputValidationError(
            f"{field_name} contains wildcards (* or ?). "
            "If this is intentional, set allow_wildcards=True."
        )

    if len(file_path) > 4096:  # Linux PATH_MAX
        raise InputValidationError(f"{field_name} exceeds maximum length of 4096 characters")

    return file_path


def validate_country_name(country_name: str, field_name: str = "country") -> str:
    """
    Validate a country name used for a single-country lookup.

    Returns:
        The country name stripped of surrounding whitespace

    Raises:
        InputValidationError: If the name is empty or too long
    """
    if not isinstance(country_name, str) or not country_name.strip():
        raise InputValidationError(f"{field_name} must be a non-empty string")

    country_name = country_name.strip()

    if len(country_name) > 50:
        raise InputValidationError(f"{field_name} exceeds maximum length of 50 characters")

    return country_name


def validate_positive_number(value: str, field_name: str = "value") -> Decimal:
    """
    Parse a strictly positive number.

    Raises:
        InputValidationError: If the value is not a positive number
    """
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise InputValidationError(f"{field_name} must be a number, got '{value}'")

    if not number.is_finite() or number <= 0:
        raise InputValidationError(f"{field_name} must be greater than 0, got '{value}'")

    return number


def validate_limit(limit: int, field_name: str = "limit", max_limit: int = 10000) -> int:
    """
    Validate a row limit.

    Raises:
        InputValidationError: If the limit is not an integer between 1 and max_limit
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InputValidationError(f"{field_name} must be an integer")

    if limit < 1:
        raise InputValidationError(f"{field_name} must be at least 1")

    if limit > max_limit:
        raise InputValidationError(f"{field_name} cannot exceed {max_limit}")

    return limit

"""
Wire value helpers.

The StorageGRID management API is loose about the shape of some JSON
fields: a list of strings may arrive as a bare string, and numeric
retention settings arrive as strings (sometimes empty). The helpers in
this module turn such values into canonical Python values, raising
`StructuralDecodeError` for anything they do not recognise.
"""

from typing import Any, Dict, List, Optional

from app.core.errors import StructuralDecodeError


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def decode_string_list(value: Any, field: str) -> List[str]:
    """
    Decodes a "string or list of strings" field into a list.

    Args:
        value (Any): Raw JSON value (None, str or list of str).
        field (str): Field path used in error messages.

    Raises:
        StructuralDecodeError: If the value is neither a string, a list of
            strings nor null.

    Returns:
        list[str]: `[]` for null, `[value]` for a string, a copy of the list otherwise.

    Example:
        >>> decode_string_list("s3:GetObject", "Action")
        ['s3:GetObject']
    """

    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        for i, item in enumerate(value):
            if not isinstance(item, str):
                raise StructuralDecodeError(f"{field}[{i}]", f"expected string, got {_type_name(item)}")
        return list(value)
    raise StructuralDecodeError(field, f"expected string or list of strings, got {_type_name(value)}")


def decode_string_map(value: Any, field: str) -> Dict[str, str]:
    """Decodes a JSON object whose values must all be strings."""

    if not isinstance(value, dict):
        raise StructuralDecodeError(field, f"expected object, got {_type_name(value)}")
    result = {}
    for key, item in value.items():
        if not isinstance(item, str):
            raise StructuralDecodeError(f"{field}.{key}", f"expected string, got {_type_name(item)}")
        result[key] = item
    return result


def decode_condition_map(value: Any, field: str) -> Optional[Dict[str, Dict[str, str]]]:
    """
    Decodes a two-level condition mapping (operator -> key -> value).

    Returns None when the field is absent, so an absent block stays
    distinguishable from an empty one.
    """

    if value is None:
        return None
    if not isinstance(value, dict):
        raise StructuralDecodeError(field, f"expected object, got {_type_name(value)}")
    return {operator: decode_string_map(keys, f"{field}.{operator}") for operator, keys in value.items()}


def decode_string(value: Any, field: str, default: Optional[str] = None) -> Optional[str]:
    """Decodes an optional scalar string field."""

    if value is None:
        return default
    if not isinstance(value, str):
        raise StructuralDecodeError(field, f"expected string, got {_type_name(value)}")
    return value


def parse_retention_value(value: Any, field: str) -> Optional[int]:
    """
    Parses a retention setting (days or years) reported by the grid.

    The API documents these values as integers but returns them as strings.
    Absent values, empty strings and zero all mean "not set".

    Args:
        value (Any): Raw JSON value (None, str or int).
        field (str): Field path used in error messages.

    Raises:
        StructuralDecodeError: If the value is not a non-negative integer
            or a string holding one.

    Returns:
        Optional[int]: The positive retention value, or None when unset.
    """

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise StructuralDecodeError(field, "expected numeric string, got boolean")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            raise StructuralDecodeError(field, f"expected numeric string, got {value!r}")
    else:
        raise StructuralDecodeError(field, f"expected numeric string, got {_type_name(value)}")

    if number < 0:
        raise StructuralDecodeError(field, f"retention must not be negative, got {number}")
    return number or None

"""
Value types that can be attached to spans as tags or log fields.
"""

from typing import Union

from pydantic import StrictBool, StrictFloat, StrictInt, StrictStr, TypeAdapter

# Order matters: bool is checked first so True never becomes 1.
TagValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]
LogValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]

_TAG_VALUE = TypeAdapter(TagValue)
_LOG_VALUE = TypeAdapter(LogValue)


def validate_tag_value(value: object) -> TagValue:
    """
    Validate a tag value.

    Args:
        value: Candidate value

    Returns:
        The value unchanged

    Raises:
        pydantic.ValidationError: If the value is not a bool, int, float or str
    """
    return _TAG_VALUE.validate_python(value)


def validate_log_value(value: object) -> LogValue:
    """Validate a log field value, see validate_tag_value."""
    return _LOG_VALUE.validate_python(value)


def format_value(value: Union[TagValue, LogValue]) -> str:
    """
    Stringify a tag or log value for human readable output.

    Booleans are lower case, floats use their shortest round-trip form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)

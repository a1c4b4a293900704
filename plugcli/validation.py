"""Configuration validation with schema definitions.

A section schema is a `ConfigItems` list of `ConfigField`. The validator
reports values of the wrong type or rejected by the field's validator,
and suggests the closest known key for typos.
"""

import difflib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = [
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "format_config_error",
]


@dataclass
class ConfigField:
    """Describes an expected configuration field for validation.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, int, list) or tuple of types for union
        default: Default value if not provided
        description: Human-readable description
        validator: Custom validator function returning list of error messages
    """

    name: str
    field_type: type | tuple[type, ...] = str
    default: Any = None
    description: str = ""
    validator: Callable[[Any], list[str]] | None = None

    @property
    def type_name(self) -> str:
        """Return human-readable type name (e.g., 'str', 'int or str')."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__


class ConfigItems(list):
    """The fields of one section."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)

    @property
    def names(self) -> list[str]:
        return [item.name for item in self]


def format_config_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message.

    Args:
        section: Configuration section name
        field: Field name that has the error
        message: Error description
        suggestion: Optional suggestion for fixing the error

    Returns:
        Formatted error message
    """
    msg = f"[{section}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class ConfigValidator:
    """Validates one configuration section against a schema."""

    def __init__(self, config: dict, section: str, logger: logging.Logger) -> None:
        """Initialize the validator.

        Args:
            config: The section to validate
            section: Name of the section for error messages
            logger: Logger instance for warnings
        """
        self.config = config
        self.section = section
        self.log = logger

    def validate(self, schema: ConfigItems) -> list[str]:
        """Validate the section against schema.

        Args:
            schema: List of ConfigField definitions

        Returns:
            List of error messages (empty if validation passed)
        """
        errors = []
        for field_def in schema:
            errors.extend(self.check_field(field_def))
        return errors

    def check_field(self, field_def: ConfigField) -> list[str]:
        """Return the problems of one field, none when it's missing."""
        value = self.config.get(field_def.name)
        if value is None:
            return []
        type_error = self._check_type(field_def, value)
        if type_error:
            return [type_error]
        if field_def.validator:
            return [format_config_error(self.section, field_def.name, error) for error in field_def.validator(value)]
        return []

    def valid_values(self, schema: ConfigItems) -> dict[str, Any]:
        """Return the section without the known fields that fail validation."""
        invalid = {field_def.name for field_def in schema if self.check_field(field_def)}
        return {key: value for key, value in self.config.items() if key not in invalid}

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:  # noqa: ANN401
        """Check if value matches the expected type.

        Returns:
            Error message if type mismatch, None otherwise
        """
        expected_types = field_def.field_type if isinstance(field_def.field_type, tuple) else (field_def.field_type,)
        if any(self._matches(expected_type, value) for expected_type in expected_types):
            return None
        suggestions = {
            int: f"Use {field_def.name} = 42 (without quotes)",
            str: f'Use {field_def.name} = "value"',
            list: f'Use {field_def.name} = ["item1", "item2"]',
        }
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected {field_def.type_name}, got {type(value).__name__}",
            suggestions.get(expected_types[0], ""),
        )

    @staticmethod
    def _matches(expected_type: type, value: Any) -> bool:  # noqa: ANN401
        if expected_type is int:
            # 42 and "42" match, true does not
            if isinstance(value, bool):
                return False
            if isinstance(value, int):
                return True
            try:
                int(value)
            except (ValueError, TypeError):
                return False
            return True
        return isinstance(value, expected_type)

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log warnings for unknown configuration keys.

        Args:
            schema: List of ConfigField definitions

        Returns:
            List of warning messages
        """
        warnings = []
        known_keys = schema.names
        for key in self.config:
            if key in known_keys:
                continue
            similar = difflib.get_close_matches(key, known_keys, n=1)
            if similar:
                msg = f"[{self.section}] Unknown option '{key}' (did you mean '{similar[0]}'?)"
            else:
                msg = f"[{self.section}] Unknown option '{key}' - will be ignored"
            self.log.warning(msg)
            warnings.append(msg)
        return warnings

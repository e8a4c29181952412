"""
Validation and construction of custom functions.

A custom function is described, not evaluated, here: the expression engine
compiles the equation later. Only the name is checked, against the set of
channel names that exist when the request is made. Follows the fail-loud
principle: build_function raises, validate_function_name reports.
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, List

from openplot.processing.custom_functions.exceptions import (
    DuplicateNameError,
    InvalidNameError,
)
from openplot.processing.custom_functions.types import FunctionDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of custom function validation.

    Attributes:
        is_valid: Whether the request may be built
        errors: List of validation error messages
        warnings: List of non-fatal warning messages
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]


def validate_function_name(
    existing_channel_names: AbstractSet[str],
    is_new_function: bool,
    name: str,
    linked_channel: str = "",
) -> ValidationResult:
    """
    Check a create/update request without raising.

    Updates keep their name, so the name is only checked for new functions.
    A linked channel missing from the channel set is reported as a warning.

    Args:
        existing_channel_names: Names of all channels currently loaded
        is_new_function: True when creating, False when updating
        name: Requested function name
        linked_channel: Channel the function reads from

    Returns:
        ValidationResult
    """
    errors: List[str] = []
    warnings: List[str] = []

    if is_new_function:
        if not name:
            errors.append("Function name must not be empty")
        elif name in existing_channel_names:
            errors.append(f"plot name already exists: '{name}'")

    if linked_channel and linked_channel not in existing_channel_names:
        warnings.append(f"Linked channel '{linked_channel}' is not loaded")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def build_function(
    existing_channel_names: AbstractSet[str],
    is_new_function: bool,
    name: str,
    linked_channel: str,
    global_vars: str,
    equation: str,
) -> FunctionDescriptor:
    """
    Validate a request and produce the function descriptor.

    Equation and global variable text are passed through untouched.

    Args:
        existing_channel_names: Names of all channels currently loaded
        is_new_function: True when creating, False when updating an
            existing function (name is not re-validated)
        name: Function name
        linked_channel: Channel the function reads from
        global_vars: Declaration text
        equation: Expression body

    Returns:
        FunctionDescriptor

    Raises:
        InvalidNameError: If a new function has an empty name
        DuplicateNameError: If a new function's name is already a channel
    """
    if is_new_function:
        if not name:
            raise InvalidNameError("Function name must not be empty")
        if name in existing_channel_names:
            raise DuplicateNameError(name)

    if linked_channel not in existing_channel_names:
        logger.warning(f"Custom function '{name}' links to unknown channel '{linked_channel}'")

    descriptor = FunctionDescriptor(
        name=name,
        linked_channel=linked_channel,
        global_vars=global_vars,
        equation=equation,
    )
    logger.debug(f"Built custom function '{name}' on '{linked_channel}'")
    return descriptor

"""
Contains the resolution of the error messages of violated rules.
"""
import re
from typing import Any, Mapping, Optional

from frozendict import frozendict

from ovex.validation.metadata import RuleDescriptor, RuleKind

_PLACEHOLDER = re.compile(r"\$value(1|2)?")

_DEFAULT_TEMPLATES: frozendict[str, str] = frozendict(
    {
        str(RuleKind.PRESENCE): "value should not be empty",
        "is_defined": "value should not be null or undefined",
        "equals": "value must be equal to $value1",
        "not_equals": "value should not be equal to $value1",
        "is_in": "value must be one of the following values: $value1",
        "min": "value must be greater than or equal to $value1",
        "max": "value must be less than or equal to $value1",
        "min_length": "value must be longer than or equal to $value1 characters",
        "max_length": "value must be shorter than or equal to $value1 characters",
        "matches": "value must match $value1 regular expression",
        "is_instance": "value must be an instance of $value1",
    }
)


class DefaultMessageCatalog:
    """
    Maps rule types to message templates. It is consulted for rules which don't declare a message themselves.
    """

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self._templates: frozendict[str, str] = frozendict(_DEFAULT_TEMPLATES if templates is None else templates)

    def get_for(self, descriptor: RuleDescriptor) -> Optional[str]:
        """
        Returns the template for the type of the descriptor or None if there is none.
        """
        return self._templates.get(descriptor.type)


def replace_placeholders(message: str, value1: Any, value2: Any) -> str:
    """
    Replaces $value1 and $value2 by the rule parameters. The generic $value is replaced by value1 as well.
    Placeholders of falsy parameters are left untouched. All placeholders are replaced in a single pass, so text
    inserted for a parameter is never substituted again.
    """
    parameters = {"1": value1, "2": value2, "": value1}

    def substitute(match: re.Match[str]) -> str:
        parameter = parameters[match.group(1) or ""]
        return str(parameter) if parameter else match.group(0)

    return _PLACEHOLDER.sub(substitute, message)


def resolve_message(
    descriptor: RuleDescriptor,
    default_messages: Optional[DefaultMessageCatalog] = None,
    dismiss_default_messages: bool = False,
) -> Optional[str]:
    """
    Determines the message of a violated rule:
        - a callable message is called with (value1, value2)
        - a string message is used as is
        - otherwise the default message catalog is asked (unless default messages are dismissed)
    None is a valid result, it means there is no message for this rule.
    """
    message: Optional[str]
    if callable(descriptor.message):
        message = descriptor.message(descriptor.value1, descriptor.value2)
    elif isinstance(descriptor.message, str):
        message = descriptor.message
    elif not dismiss_default_messages and default_messages is not None:
        message = default_messages.get_for(descriptor)
    else:
        message = None
    if message is None:
        return None
    return replace_placeholders(message, descriptor.value1, descriptor.value2)

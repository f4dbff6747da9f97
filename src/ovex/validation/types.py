"""
Contains the types used in the validation framework
"""
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, TypeAlias

if TYPE_CHECKING:
    from ovex.validation.metadata import RuleDescriptor

validation_logger = logging.getLogger(__name__)
MessageFormatter: TypeAlias = Callable[[Any, Any], str]
FieldAccessor: TypeAlias = Callable[[Any], Any]
Predicate: TypeAlias = Callable[[Any, "RuleDescriptor"], bool]
ConstraintResult: TypeAlias = bool | Awaitable[bool]


class ValidatorConstraint(Protocol):  # pylint: disable=too-few-public-methods
    """
    The contract every custom rule implementation has to fulfill. `obj` is the whole object the validated field
    belongs to, so the implementation can compare several fields with each other.
    The return value is either a plain bool or an awaitable which resolves to a bool.
    """

    def validate(self, value: Any, obj: Any) -> ConstraintResult:
        ...

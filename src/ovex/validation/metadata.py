"""
Contains the immutable records which describe a declared validation rule and the violations found by the executor.
"""
import builtins
from enum import StrEnum
from typing import Any, Optional

import attrs

from ovex.validation.types import FieldAccessor, MessageFormatter
from ovex.validation.utils import optional_field


class RuleKind(StrEnum):
    """
    The rule category decides how the executor dispatches a rule descriptor.
    STANDARD covers all the built-in predicates, PRESENCE is the special "not empty" rule which is evaluated even if
    missing properties are skipped.
    """

    PRESENCE = "is_not_empty"
    CUSTOM = "custom_validation"
    NESTED = "nested_validation"
    STANDARD = "standard_validation"


def _default_type(descriptor: "RuleDescriptor") -> str:
    return str(descriptor.kind)


def _attribute_accessor(descriptor: "RuleDescriptor") -> FieldAccessor:
    property_name = descriptor.property_name

    def read_field(obj: Any) -> Any:
        return optional_field(obj, property_name)

    return read_field


@attrs.frozen(kw_only=True)
class RuleDescriptor:
    """
    Describes a single validation rule declared on a field of a type. Descriptors are handed out by the RuleCatalog
    and are never modified afterwards.
    """

    target: type = attrs.field(validator=attrs.validators.instance_of(type))
    """
    the type which declares the rule
    """
    property_name: str = attrs.field(validator=attrs.validators.instance_of(str))
    kind: RuleKind = attrs.field(default=RuleKind.STANDARD, converter=RuleKind)
    type: str = attrs.field(
        default=attrs.Factory(_default_type, takes_self=True), validator=attrs.validators.instance_of(str)
    )
    """
    the identity of the rule, e.g. "min_length". It is used to look up the predicate and the default message and it
    ends up in ErrorRecord.type
    """
    each: bool = attrs.field(default=False, validator=attrs.validators.instance_of(bool))
    """
    if true and the field holds a list or tuple, the rule is applied to every single element
    """
    groups: frozenset[str] = attrs.field(default=frozenset(), converter=frozenset)
    always: bool = attrs.field(default=False, validator=attrs.validators.instance_of(bool))
    """
    if true the rule is active no matter which groups are requested
    """
    message: Optional[str | MessageFormatter] = attrs.field(default=None)
    value1: Any = attrs.field(default=None)
    value2: Any = attrs.field(default=None)
    constraint_class: Optional[builtins.type | str] = attrs.field(default=None)
    """
    only used by CUSTOM rules: the class (or the registered name) of the constraint implementation(s) to invoke
    """
    accessor: FieldAccessor = attrs.field(
        default=attrs.Factory(_attribute_accessor, takes_self=True), eq=False, repr=False
    )
    """
    reads the field value from an object; by default the property_name is used as (dotted) attribute path
    """

    @message.validator
    def _check_message(self, _attribute, value):
        if value is not None and not isinstance(value, str) and not callable(value):
            raise TypeError(f"message must be a string or a callable, got {type(value).__name__}")

    @constraint_class.validator
    def _check_constraint_class(self, _attribute, value):
        if self.kind is RuleKind.CUSTOM and value is None:
            raise ValueError(f"The custom rule on {self.target.__name__}.{self.property_name} has no constraint_class")

    def read(self, obj: Any) -> Any:
        """
        Returns the value of the described field of obj (None if it doesn't exist)
        """
        return self.accessor(obj)

    def is_active(self, groups: Optional[frozenset[str]]) -> bool:
        """
        True iff the rule has to be applied when validating with the given groups.
        """
        if not groups or self.always or len(self.groups) == 0:
            return True
        return not self.groups.isdisjoint(groups)


@attrs.frozen(kw_only=True)
class ErrorRecord:
    """
    A single violation of a rule. The records are the result of a validation run.
    """

    property: str
    type: str
    """
    the type of the violated rule (see RuleDescriptor.type)
    """
    message: Optional[str]
    """
    the resolved message; None if neither the rule nor the default message catalog provided one
    """
    value: Any
    """
    the value of the field. For rules applied to each element this is the whole sequence.
    """

"""
Contains the predicate evaluator which decides if a single value satisfies a single (presence or standard) rule.
"""
import re
from abc import ABC, abstractmethod
from numbers import Real
from typing import Any

from typeguard import TypeCheckError, check_type

from ovex.validation.errors import UnknownRuleTypeError
from ovex.validation.metadata import RuleDescriptor, RuleKind
from ovex.validation.types import Predicate


class PredicateEvaluator(ABC):  # pylint: disable=too-few-public-methods
    """
    A predicate evaluator maps a value and a rule descriptor to a bool. It must not have side effects because it is
    shared between validation runs.
    """

    @abstractmethod
    def evaluate(self, value: Any, descriptor: RuleDescriptor) -> bool:
        """
        Returns true iff the value satisfies the rule
        """


def is_not_empty(value: Any, _descriptor: RuleDescriptor | None = None) -> bool:
    """
    True if the value is neither None nor an empty string
    """
    return value is not None and value != ""


def _is_defined(value: Any, _descriptor: RuleDescriptor) -> bool:
    return value is not None


def _equals(value: Any, descriptor: RuleDescriptor) -> bool:
    return bool(value == descriptor.value1)


def _not_equals(value: Any, descriptor: RuleDescriptor) -> bool:
    return bool(value != descriptor.value1)


def _is_in(value: Any, descriptor: RuleDescriptor) -> bool:
    try:
        return value in descriptor.value1
    except TypeError:
        # unhashable value and a set of allowed values
        return any(value == allowed_value for allowed_value in descriptor.value1)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _min(value: Any, descriptor: RuleDescriptor) -> bool:
    return _is_number(value) and value >= descriptor.value1


def _max(value: Any, descriptor: RuleDescriptor) -> bool:
    return _is_number(value) and value <= descriptor.value1


def _min_length(value: Any, descriptor: RuleDescriptor) -> bool:
    return isinstance(value, str) and len(value) >= descriptor.value1


def _max_length(value: Any, descriptor: RuleDescriptor) -> bool:
    return isinstance(value, str) and len(value) <= descriptor.value1


def _matches(value: Any, descriptor: RuleDescriptor) -> bool:
    return isinstance(value, str) and re.search(descriptor.value1, value) is not None


def _is_instance(value: Any, descriptor: RuleDescriptor) -> bool:
    try:
        check_type(value, descriptor.value1)
    except TypeCheckError:
        return False
    return True


_DEFAULT_PREDICATES: dict[str, Predicate] = {
    "is_defined": _is_defined,
    "equals": _equals,
    "not_equals": _not_equals,
    "is_in": _is_in,
    "min": _min,
    "max": _max,
    "min_length": _min_length,
    "max_length": _max_length,
    "matches": _matches,
    "is_instance": _is_instance,
}


class DefaultPredicateEvaluator(PredicateEvaluator):
    """
    Evaluates presence rules and standard rules by looking up a predicate for the rule type.
    Custom and nested rules are always satisfied here because the executor handles them separately.
    """

    def __init__(self):
        self._predicates: dict[str, Predicate] = dict(_DEFAULT_PREDICATES)

    def register_predicate(self, rule_type: str, predicate: Predicate):
        """
        Adds (or replaces) the predicate for standard rules of the given type.
        """
        self._predicates[rule_type] = predicate

    @property
    def rule_types(self) -> frozenset[str]:
        """All standard rule types this evaluator knows"""
        return frozenset(self._predicates)

    def evaluate(self, value: Any, descriptor: RuleDescriptor) -> bool:
        match descriptor.kind:
            case RuleKind.PRESENCE:
                return is_not_empty(value)
            case RuleKind.CUSTOM | RuleKind.NESTED:
                return True
            case RuleKind.STANDARD:
                try:
                    predicate = self._predicates[descriptor.type]
                except KeyError as error:
                    raise UnknownRuleTypeError(descriptor) from error
                return predicate(value, descriptor)

"""
Contains the exceptions of the validation framework. Violated rules are never raised - they are reported as
ErrorRecords. The exceptions in here indicate a defect in the declared rules or in a custom rule implementation and
abort the whole validation run.
"""
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ovex.validation.metadata import ErrorRecord, RuleDescriptor


def _describe(descriptor: "RuleDescriptor") -> str:
    return f"{descriptor.target.__name__}.{descriptor.property_name} ({descriptor.type})"


class ValidationUsageError(RuntimeError):
    """
    Base class of all faults which are caused by misdeclared rules or broken rule implementations.
    """

    def __init__(self, message: str, descriptor: "RuleDescriptor"):
        super().__init__(f"{message}: {_describe(descriptor)}")
        self.descriptor = descriptor


class UnsupportedNestedTargetError(ValidationUsageError):
    """
    Raised if a nested rule is applied to a value which is neither an object nor a list/tuple of objects.
    """

    def __init__(self, descriptor: "RuleDescriptor", value: Any):
        super().__init__(
            f"Only objects and arrays are supported to nested validation, got {type(value).__name__}", descriptor
        )
        self.value = value


class ConstraintFailedError(ValidationUsageError):
    """
    Raised if a custom constraint implementation raised an exception (synchronously or in its awaitable) instead of
    returning a bool. The original exception is available as `__cause__`.
    """

    def __init__(self, descriptor: "RuleDescriptor", constraint_name: str, cause: Exception):
        super().__init__(f"Custom constraint '{constraint_name}' failed with {cause!r}", descriptor)
        self.constraint_name = constraint_name
        self.cause = cause


class UnknownRuleTypeError(ValidationUsageError):
    """
    Raised if the predicate evaluator has no predicate for the type of a standard rule.
    """

    def __init__(self, descriptor: "RuleDescriptor"):
        super().__init__(f"There is no predicate registered for rule type '{descriptor.type}'", descriptor)


class UnknownConstraintError(ValidationUsageError):
    """
    Raised if a custom rule references a constraint name which is not registered in the catalog.
    """

    def __init__(self, descriptor: "RuleDescriptor"):
        super().__init__(f"The constraint '{descriptor.constraint_class}' is not registered", descriptor)


class ValidationFailedError(ValueError):
    """
    Raised by `Validator.validate_or_reject` if the validated object violates at least one rule.
    """

    def __init__(self, obj: Any, errors: "list[ErrorRecord]"):
        super().__init__(
            f"{type(obj).__name__} violates {len(errors)} rule(s): "
            + ", ".join(f"{error.property} ({error.type})" for error in errors)
        )
        self.obj = obj
        self.errors = errors

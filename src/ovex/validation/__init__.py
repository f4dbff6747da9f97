"""
Contains the core functionality of the validation framework: the rule catalog, the predicate evaluation, the message
resolution and the executor which ties them together.
"""
from ovex.validation.catalog import ConstraintMetadata, RuleCatalog
from ovex.validation.errors import (
    ConstraintFailedError,
    UnknownConstraintError,
    UnknownRuleTypeError,
    UnsupportedNestedTargetError,
    ValidationFailedError,
    ValidationUsageError,
)
from ovex.validation.execution import ValidationExecutor
from ovex.validation.messages import DefaultMessageCatalog, resolve_message
from ovex.validation.metadata import ErrorRecord, RuleDescriptor, RuleKind
from ovex.validation.predicates import DefaultPredicateEvaluator, PredicateEvaluator
from ovex.validation.types import ValidatorConstraint
from ovex.validation.utils import optional_field, required_field

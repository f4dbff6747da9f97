"""
OVEX stands for Object Validation EXecutor. It validates arbitrary objects against the rules declared for their
fields, including asynchronous custom rules and nested objects.
"""
from typing import Any, Optional

from injector import inject

from ovex.config import ValidatorOptions
from ovex.logging import logger
from ovex.validation import (
    DefaultMessageCatalog,
    DefaultPredicateEvaluator,
    ErrorRecord,
    PredicateEvaluator,
    RuleCatalog,
    RuleDescriptor,
    RuleKind,
    ValidationExecutor,
    ValidationFailedError,
    ValidationUsageError,
)


class Validator:
    """
    The Validator is the entry point of the package. It holds the (shared, read-only) collaborators and creates a
    fresh ValidationExecutor for each validation so that runs with different options never interfere.
    """

    @inject
    def __init__(
        self,
        catalog: RuleCatalog,
        predicate_evaluator: PredicateEvaluator,
        default_messages: Optional[DefaultMessageCatalog] = None,
    ):
        self.catalog: RuleCatalog = catalog
        """
        the rules which are applied to the validated objects
        """
        self.predicate_evaluator: PredicateEvaluator = predicate_evaluator
        """
        decides whether a value satisfies a presence or standard rule
        """
        self.default_messages: Optional[DefaultMessageCatalog] = default_messages
        """
        provides the messages of rules which don't declare one themselves (None: such rules have no message)
        """

    def create_executor(self, options: Optional[ValidatorOptions] = None) -> ValidationExecutor:
        """
        Returns a new executor bound to the collaborators of this validator and the given options
        """
        return ValidationExecutor(
            catalog=self.catalog,
            predicate_evaluator=self.predicate_evaluator,
            options=options,
            default_messages=self.default_messages,
        )

    async def validate(
        self, obj: Any, options: Optional[ValidatorOptions] = None, log_summary: bool = False
    ) -> list[ErrorRecord]:
        """
        Validates the object (and the objects nested in it) and returns all violated rules.
        A ValidationUsageError is raised if the declared rules cannot be executed on the object.
        """
        errors = await self.create_executor(options).execute(obj)
        if log_summary:
            logger.get().info(
                "Validation Summary for %s: %i error(s) on %i field(s)",
                type(obj).__name__,
                len(errors),
                len({error.property for error in errors}),
            )
        return errors

    async def validate_or_reject(self, obj: Any, options: Optional[ValidatorOptions] = None) -> None:
        """
        Same as `validate` but raises a ValidationFailedError if at least one rule is violated.
        """
        errors = await self.validate(obj, options)
        if len(errors) > 0:
            raise ValidationFailedError(obj, errors)

    def validate_based_on_metadata(self, value: Any, descriptor: RuleDescriptor) -> bool:
        """
        Checks a single value against a single presence or standard rule.
        """
        return self.predicate_evaluator.evaluate(value, descriptor)

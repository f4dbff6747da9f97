"""
Here is the main stuff. The ValidationExecutor applies the rules of a RuleCatalog onto an object and all objects
nested in it and collects the violated rules as ErrorRecords.
"""
import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Coroutine, Optional

from ovex.config import ValidatorOptions
from ovex.validation.catalog import ConstraintMetadata, RuleCatalog
from ovex.validation.errors import ConstraintFailedError, UnknownConstraintError, UnsupportedNestedTargetError
from ovex.validation.messages import DefaultMessageCatalog, resolve_message
from ovex.validation.metadata import ErrorRecord, RuleDescriptor, RuleKind
from ovex.validation.predicates import PredicateEvaluator
from ovex.validation.types import validation_logger
from ovex.validation.utils import is_sequence, is_structured


@dataclass
class _FieldRules:
    """
    The rules of a single field split up by the way they are executed. Presence rules are part of `default` as well.
    """

    presence: list[RuleDescriptor] = field(default_factory=list)
    default: list[RuleDescriptor] = field(default_factory=list)
    custom: list[RuleDescriptor] = field(default_factory=list)
    nested: list[RuleDescriptor] = field(default_factory=list)

    @classmethod
    def partition(cls, descriptors: tuple[RuleDescriptor, ...]) -> "_FieldRules":
        """Sorts the descriptors into the buckets according to their kind"""
        field_rules = cls()
        for descriptor in descriptors:
            match descriptor.kind:
                case RuleKind.PRESENCE:
                    field_rules.presence.append(descriptor)
                    field_rules.default.append(descriptor)
                case RuleKind.STANDARD:
                    field_rules.default.append(descriptor)
                case RuleKind.CUSTOM:
                    field_rules.custom.append(descriptor)
                case RuleKind.NESTED:
                    field_rules.nested.append(descriptor)
        return field_rules


@dataclass
class _ValidationRun:
    """
    This class contains the runtime information of a single `execute` call: the collected error records and the task
    group which tracks the pending asynchronous custom rules and nested validations.
    It is never shared, each nested object gets a run on its own.
    """

    obj: Any
    task_group: asyncio.TaskGroup
    errors: list[ErrorRecord] = field(default_factory=list)
    pending_results: list[Awaitable[bool]] = field(default_factory=list)
    """
    the awaitables returned by asynchronous custom constraints
    """

    def schedule(self, coroutine: Coroutine[Any, Any, None]):
        """The run is not finished before the scheduled coroutine is done"""
        self.task_group.create_task(coroutine)

    def close_pending_results(self):
        """
        Closes the awaitables of custom constraints which were cancelled before they got awaited.
        Finished ones are not affected.
        """
        for pending_result in self.pending_results:
            if inspect.iscoroutine(pending_result):
                pending_result.close()
            elif asyncio.isfuture(pending_result):
                pending_result.cancel()


def _first_fault(group: BaseExceptionGroup) -> BaseException:
    fault: BaseException = group
    while isinstance(fault, BaseExceptionGroup):
        fault = fault.exceptions[0]
    return fault


class ValidationExecutor:
    """
    The ValidationExecutor validates an object with the rules the catalog provides for the type of the object.
    For each field the rules are applied in this order:
        - presence rules (even if missing properties should be skipped)
        - presence and standard rules (if the value is not empty or missing properties are not skipped)
        - custom rules (sync ones immediately, async ones concurrently)
        - nested rules (each nested object is validated concurrently in a run on its own)
    The result is available once all asynchronous custom rules and nested validations have finished.
    The executor itself holds no state of a run, so it can be used for several (also concurrent) runs.
    """

    def __init__(
        self,
        catalog: RuleCatalog,
        predicate_evaluator: PredicateEvaluator,
        options: Optional[ValidatorOptions] = None,
        default_messages: Optional[DefaultMessageCatalog] = None,
    ):
        self.catalog = catalog
        self.predicate_evaluator = predicate_evaluator
        self.options: ValidatorOptions = options if options is not None else ValidatorOptions()
        self.default_messages = default_messages

    async def execute(self, obj: Any) -> list[ErrorRecord]:
        """
        Validates the object and returns the violated rules. Violations are never raised. If a rule is declared in a
        way that cannot be executed (e.g. a nested rule on an integer) or a custom constraint raises, the run is
        aborted: pending custom rules and nested validations are cancelled and the ValidationUsageError is raised.
        """
        fault: Optional[BaseException] = None
        run: Optional[_ValidationRun] = None
        try:
            async with asyncio.TaskGroup() as task_group:
                run = _ValidationRun(obj=obj, task_group=task_group)
                self._validate_fields(run)
        except ExceptionGroup as group:
            fault = _first_fault(group)
            if run is not None:
                run.close_pending_results()
        if fault is not None:
            validation_logger.debug("Validation of %s aborted: %s", type(obj).__name__, fault)
            raise fault
        assert run is not None
        return run.errors

    def _validate_fields(self, run: _ValidationRun):
        descriptors = self.catalog.rules_for(type(run.obj), self.options.groups)
        grouped_descriptors = self.catalog.group_by_property_name(descriptors)
        validation_logger.debug(
            "Validating %s: %i rule(s) on %i field(s)",
            type(run.obj).__name__,
            len(descriptors),
            len(grouped_descriptors),
        )
        for property_name, field_descriptors in grouped_descriptors.items():
            value = field_descriptors[0].read(run.obj)
            field_rules = _FieldRules.partition(field_descriptors)

            # presence rules are applied no matter if missing properties are skipped
            self._default_validations(run, value, field_rules.presence)

            if not value and self.options.skip_missing_properties:
                validation_logger.debug("Skipped missing property %s.%s", type(run.obj).__name__, property_name)
                continue

            self._default_validations(run, value, field_rules.default)
            self._custom_validations(run, value, field_rules.custom)
            self._nested_validations(run, value, field_rules.nested)

    def _default_validations(self, run: _ValidationRun, value: Any, descriptors: list[RuleDescriptor]):
        for descriptor in descriptors:
            if descriptor.each:
                if not is_sequence(value):
                    continue
                is_valid = all(self.predicate_evaluator.evaluate(sub_value, descriptor) for sub_value in value)
            else:
                is_valid = self.predicate_evaluator.evaluate(value, descriptor)
            if not is_valid:
                run.errors.append(self._create_error_record(value, descriptor))

    def _custom_validations(self, run: _ValidationRun, value: Any, descriptors: list[RuleDescriptor]):
        for descriptor in descriptors:
            assert descriptor.constraint_class is not None
            try:
                constraints = self.catalog.custom_implementations_for(descriptor.constraint_class)
            except KeyError as error:
                raise UnknownConstraintError(descriptor) from error
            for constraint in constraints:
                try:
                    result = constraint.instance.validate(value, run.obj)
                except Exception as error:  # pylint: disable=broad-exception-caught
                    raise ConstraintFailedError(descriptor, constraint.name, error) from error
                if inspect.isawaitable(result):
                    run.pending_results.append(result)
                    run.schedule(self._await_constraint(run, value, descriptor, constraint, result))
                elif not result:
                    run.errors.append(self._create_error_record(value, descriptor))

    async def _await_constraint(
        self,
        run: _ValidationRun,
        value: Any,
        descriptor: RuleDescriptor,
        constraint: ConstraintMetadata,
        pending_result: Awaitable[bool],
    ):
        try:
            is_valid = await pending_result
        except Exception as error:  # pylint: disable=broad-exception-caught
            raise ConstraintFailedError(descriptor, constraint.name, error) from error
        if not is_valid:
            run.errors.append(self._create_error_record(value, descriptor))

    def _nested_validations(self, run: _ValidationRun, value: Any, descriptors: list[RuleDescriptor]):
        for descriptor in descriptors:
            if is_sequence(value):
                for sub_value in value:
                    run.schedule(self._nested_run(run, sub_value))
            elif is_structured(value):
                run.schedule(self._nested_run(run, value))
            else:
                raise UnsupportedNestedTargetError(descriptor, value)

    async def _nested_run(self, run: _ValidationRun, sub_obj: Any):
        run.errors.extend(await self.execute(sub_obj))

    def _create_error_record(self, value: Any, descriptor: RuleDescriptor) -> ErrorRecord:
        return ErrorRecord(
            property=descriptor.property_name,
            type=descriptor.type,
            message=resolve_message(descriptor, self.default_messages, self.options.dismiss_default_messages),
            value=value,
        )

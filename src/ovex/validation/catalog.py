"""
Contains the RuleCatalog which stores the declared rules per type and the registered custom constraint
implementations. The executor only reads from the catalog, so a single catalog can be shared by concurrent
validation runs as long as nothing gets registered in the meantime.
"""
import inspect
from collections import defaultdict
from typing import Iterable, Optional

import attrs
from bidict import bidict
from frozendict import frozendict

from ovex.validation.metadata import RuleDescriptor, RuleKind
from ovex.validation.types import ValidatorConstraint, validation_logger


@attrs.frozen(kw_only=True)
class ConstraintMetadata:
    """
    Binds an instance of a custom constraint implementation to the constraint class it was registered for.
    """

    target: type
    name: str
    instance: ValidatorConstraint
    is_async: bool = attrs.field(validator=attrs.validators.instance_of(bool))
    """
    true if `instance.validate` is a coroutine function. This is informational only, the executor decides by the
    actual return value.
    """


class RuleCatalog:
    """
    The RuleCatalog holds the rule descriptors of all types and the custom constraints. Create one catalog, register
    your rules and pass it to the Validator (or the ValidationExecutor).
    """

    def __init__(self):
        self._descriptors: list[RuleDescriptor] = []
        self._constraints: defaultdict[type, list[ConstraintMetadata]] = defaultdict(list)
        self._constraint_names: bidict[str, type] = bidict()

    def register(self, *descriptors: RuleDescriptor):
        """
        Registers rule descriptors. The order of registration is the order in which the rules of a field get
        evaluated.
        """
        for descriptor in descriptors:
            if descriptor.kind is RuleKind.CUSTOM and isinstance(descriptor.constraint_class, type):
                if descriptor.constraint_class not in self._constraint_names.inverse:
                    validation_logger.warning(
                        "The constraint %s of %s.%s is not registered (yet)",
                        descriptor.constraint_class.__name__,
                        descriptor.target.__name__,
                        descriptor.property_name,
                    )
            self._descriptors.append(descriptor)
            validation_logger.debug("Registered rule: %r", descriptor)

    def register_constraint(
        self,
        constraint_class: type,
        instance: Optional[ValidatorConstraint] = None,
        name: Optional[str] = None,
    ) -> ConstraintMetadata:
        """
        Registers an implementation of a custom constraint. If no instance is given, the constraint class gets
        instantiated without arguments. You can register several implementations for the same constraint class,
        all of them will be invoked. The name defaults to the class name and must be unique.
        """
        if constraint_class in self._constraint_names.inverse:
            registered_name = self._constraint_names.inverse[constraint_class]
            if name is not None and name != registered_name:
                raise ValueError(f"{constraint_class.__name__} is already registered with the name '{registered_name}'")
            name = registered_name
        else:
            if name is None:
                name = constraint_class.__name__
            if name in self._constraint_names:
                raise ValueError(
                    f"The constraint name '{name}' is already used by {self._constraint_names[name].__name__}"
                )
            self._constraint_names[name] = constraint_class
        if instance is None:
            instance = constraint_class()
        if not callable(getattr(instance, "validate", None)):
            raise TypeError(f"{type(instance).__name__} has no method 'validate'")
        constraint_metadata = ConstraintMetadata(
            target=constraint_class,
            name=name,
            instance=instance,
            is_async=inspect.iscoroutinefunction(instance.validate),
        )
        self._constraints[constraint_class].append(constraint_metadata)
        validation_logger.debug("Registered constraint: %s (async=%s)", name, constraint_metadata.is_async)
        return constraint_metadata

    def constraint_class(self, class_or_name: type | str) -> type:
        """
        Resolves a registered constraint name to its class. Classes are returned unchanged.
        Raises a KeyError for unknown names.
        """
        if isinstance(class_or_name, str):
            return self._constraint_names[class_or_name]
        return class_or_name

    def constraint_name(self, constraint_class: type) -> str:
        """
        Returns the name under which the constraint class was registered (the class name if it is not registered).
        """
        return self._constraint_names.inverse.get(constraint_class, constraint_class.__name__)

    def custom_implementations_for(self, class_or_name: type | str) -> list[ConstraintMetadata]:
        """
        Returns all implementations registered for the constraint class (or name) in registration order.
        """
        return list(self._constraints.get(self.constraint_class(class_or_name), []))

    def rules_for(self, target_type: type, groups: Optional[Iterable[str]] = None) -> list[RuleDescriptor]:
        """
        Returns the rules which apply to instances of `target_type`. The rules declared on the type itself come first
        (in registration order) followed by the rules inherited from base classes. An inherited rule is dropped if the
        type declares a rule of the same type for the same property.
        If groups are given, only rules without groups, "always" rules and rules sharing at least one group are
        returned.
        """
        active_groups: Optional[frozenset[str]] = frozenset(groups) if groups is not None else None
        own_descriptors: list[RuleDescriptor] = []
        inherited_descriptors: list[RuleDescriptor] = []
        for descriptor in self._descriptors:
            if not descriptor.is_active(active_groups):
                continue
            if descriptor.target is target_type:
                own_descriptors.append(descriptor)
            elif isinstance(target_type, type) and issubclass(target_type, descriptor.target):
                inherited_descriptors.append(descriptor)
        overridden = {(descriptor.property_name, descriptor.type) for descriptor in own_descriptors}
        return own_descriptors + [
            descriptor
            for descriptor in inherited_descriptors
            if (descriptor.property_name, descriptor.type) not in overridden
        ]

    @staticmethod
    def group_by_property_name(descriptors: Iterable[RuleDescriptor]) -> frozendict[str, tuple[RuleDescriptor, ...]]:
        """
        Groups the descriptors by their property name. Within a group, the given order is kept.
        """
        grouped: dict[str, list[RuleDescriptor]] = {}
        for descriptor in descriptors:
            grouped.setdefault(descriptor.property_name, []).append(descriptor)
        return frozendict({property_name: tuple(group) for property_name, group in grouped.items()})

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"RuleCatalog({len(self._descriptors)} rules, {len(self._constraint_names)} constraints)"

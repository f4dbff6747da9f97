"""
This module provides a class to hold the configuration values of a validation run.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class ValidatorOptions(BaseModel):
    """
    The options of a single validation run. They can be loaded from an external source (e.g. a JSON file) where the
    keys are camelCase (`skipMissingProperties`) but the snake_case names are accepted as well.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True)

    groups: Optional[frozenset[str]] = None
    """
    Only rules without groups, rules marked as "always" and rules belonging to at least one of these groups are
    applied. None (or an empty set) means that all rules are applied.
    """

    skip_missing_properties: bool = False
    """
    If true, all rules except the presence rules are skipped for fields whose value is empty (None, "", 0, [] ...).
    """

    dismiss_default_messages: bool = False
    """
    If true, rules without an explicit message produce error records without message instead of asking the default
    message catalog.
    """

    @field_validator("groups", mode="before")
    @classmethod
    def normalize_groups(cls, value: Optional[Iterable[str]]) -> Optional[frozenset[str]]:
        """
        Accept any iterable of group names. A single string is treated as one group (not as a sequence of letters).
        """
        if value is None:
            return None
        if isinstance(value, str):
            return frozenset({value})
        return frozenset(value)

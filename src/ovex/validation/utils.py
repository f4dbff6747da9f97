"""
Contains some useful utility functions to read (nested) fields from arbitrary objects.
"""
from numbers import Number
from typing import Any, Optional, TypeVar, overload

from typeguard import TypeCheckError, check_type

AttrT = TypeVar("AttrT")


def optional_field(obj: Any, attribute_path: str, attribute_type: Any = Any) -> Optional[Any]:
    """
    Tries to query the `obj` with the provided `attribute_path`. If it is not existent or doesn't match the
    `attribute_type`, `None` will be returned.
    """
    try:
        return required_field(obj, attribute_path, attribute_type)
    except (AttributeError, TypeError):
        return None


@overload
def required_field(obj: Any, attribute_path: str, attribute_type: type[AttrT]) -> AttrT:
    ...


@overload
def required_field(obj: Any, attribute_path: str, attribute_type: Any) -> Any:
    ...


def required_field(obj: Any, attribute_path: str, attribute_type: Any) -> Any:
    """
    Tries to query the `obj` with the provided `attribute_path`. If it is not existent,
    an AttributeError will be raised. Mappings are queried by key instead of by attribute.
    If the attribute is found, the type will be checked and TypeError will be raised if the type doesn't match the
    value.
    """
    current_obj: Any = obj
    splitted_path = attribute_path.split(".")
    for index, attr_name in enumerate(splitted_path):
        try:
            if isinstance(current_obj, dict):
                current_obj = current_obj[attr_name]
            else:
                current_obj = getattr(current_obj, attr_name)
        except (AttributeError, KeyError) as error:
            current_path = ".".join(splitted_path[0 : index + 1])
            raise AttributeError(f"'{current_path}' does not exist") from error
    try:
        check_type(current_obj, attribute_type)
    except TypeCheckError as error:
        raise TypeError(f"{attribute_path}: {error}") from error
    return current_obj


def is_sequence(value: Any) -> bool:
    """
    True if the value is a list or tuple. Strings are not treated as sequences.
    """
    return isinstance(value, (list, tuple))


def is_structured(value: Any) -> bool:
    """
    True if the value is an object which can have validation rules itself, i.e. not None, no string and no number.
    """
    return value is not None and not isinstance(value, (str, bytes, Number))

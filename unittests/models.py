"""
models and constraints used for testing
"""
import asyncio
import dataclasses
from typing import Any, Optional

from pydantic import BaseModel


@dataclasses.dataclass
class Address:
    street: str
    zip_code: str


@dataclasses.dataclass
class Customer:
    name: Optional[str]
    email: Optional[str] = None
    addresses: list[Any] = dataclasses.field(default_factory=list)
    main_address: Any = None
    tags: Any = None
    age: Any = None


class Meter(BaseModel):
    """a pydantic model to show that arbitrary objects can be validated"""

    meter_number: str
    readings: list[int] = []


class IsEven:
    """a synchronous custom constraint"""

    def validate(self, value: Any, obj: Any) -> bool:
        return isinstance(value, int) and value % 2 == 0


class IsNotTaken:
    """an asynchronous custom constraint which simulates a lookup in a remote system"""

    def __init__(self, delay: float = 0.05):
        self.delay = delay
        self.finished = 0

    async def validate(self, value: Any, obj: Any) -> bool:
        await asyncio.sleep(self.delay)
        self.finished += 1
        return value != "taken"


class NameDiffersFromEmail:
    """a synchronous custom constraint comparing two fields of the validated object"""

    def validate(self, value: Any, obj: Any) -> bool:
        return value != obj.email


class Exploding:
    """a custom constraint which is broken"""

    def validate(self, value: Any, obj: Any) -> bool:
        raise ZeroDivisionError("division by zero")


class ExplodingLater:
    """an asynchronous custom constraint which is broken"""

    async def validate(self, value: Any, obj: Any) -> bool:
        await asyncio.sleep(0.01)
        raise ConnectionError("remote system not reachable")


class RemembersLookups:
    """an asynchronous custom constraint which keeps the awaitables it handed out"""

    def __init__(self):
        self.lookups: list[Any] = []

    def validate(self, value: Any, obj: Any) -> Any:
        lookup = self._lookup(value)
        self.lookups.append(lookup)
        return lookup

    async def _lookup(self, value: Any) -> bool:
        await asyncio.sleep(0)
        return value is not None

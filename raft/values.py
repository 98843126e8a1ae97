"""
Raft v0.1 - Runtime Value Model
The closed set of runtime values and the three rules every later stage
relies on: string conversion, truthiness and equality.
"""

from dataclasses import dataclass
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .interpreter import Interpreter


class InternalError(Exception):
    """A closed union was dispatched over something outside of it."""
    pass


@dataclass(frozen=True)
class Value:
    """Base class for all runtime values."""


@dataclass(frozen=True)
class String(Value):
    value: str = ""


@dataclass(frozen=True)
class Number(Value):
    value: float = 0.0


@dataclass(frozen=True)
class Boolean(Value):
    value: bool = False


@dataclass(frozen=True)
class Null(Value):
    """The absence of a value; rendered as ``nil``."""


@dataclass(frozen=True, eq=False)
class Callable(Value):
    """
    Something the evaluator can invoke.

    The base implementation takes no arguments and returns nil; native and
    user-defined functions override both methods. Equality is identity.
    """

    def __eq__(self, other):
        return self is other

    def __hash__(self):
        return id(self)

    def arity(self) -> int:
        return 0

    def call(self, interpreter: "Interpreter", arguments: List[Value]) -> Value:
        return NIL


NIL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def to_string(obj: Value) -> str:
    if isinstance(obj, String):
        return obj.value
    if isinstance(obj, Number):
        return f"{obj.value:f}"
    if isinstance(obj, Boolean):
        return "true" if obj.value else "false"
    if isinstance(obj, Null):
        return "nil"
    if isinstance(obj, Callable):
        return "callable"
    raise InternalError(f"Unknown value type {type(obj).__name__}")


# false and nil are falsey, everything else is truthy
def is_truthy(obj: Value) -> bool:
    if isinstance(obj, Null):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


def is_equal(a: Value, b: Value) -> bool:
    if isinstance(a, Null) and isinstance(b, Null):
        return True
    if isinstance(a, Null) or isinstance(b, Null):
        return False
    # Dataclass equality also compares the variant, so 0 != false.
    return a == b

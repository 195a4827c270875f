import inspect
from abc import ABC
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol, Type, runtime_checkable

if TYPE_CHECKING:
    from graphwire.domain.interfaces import IContainer

HIGHEST_ORDER = 0
LOWEST_ORDER = 2**31 - 1


@runtime_checkable
class Ordered(Protocol):
    """Capability of values that declare a retrieval priority (lower first)."""

    def order(self) -> int: ...


@runtime_checkable
class Initializer(Protocol):
    """Capability of values that initialize themselves once the graph is resolved."""

    def initialize(self, container: "IContainer") -> None: ...


@runtime_checkable
class StartListener(Protocol):
    """Capability of values notified when the application starts."""

    def on_app_start(self) -> None: ...


@runtime_checkable
class StopListener(Protocol):
    """Capability of values notified when the application stops."""

    def on_app_stop(self) -> None: ...


def order_of(value: Any) -> Optional[int]:
    """Return the declared priority of a value, or None when it is not ``Ordered``."""
    if isinstance(value, type) or not isinstance(value, Ordered):
        return None
    order = getattr(value, "order")
    if not callable(order):
        return None
    return int(order())


def is_protocol(tp: Any) -> bool:
    return isinstance(tp, type) and bool(getattr(tp, "_is_protocol", False))


def is_interface(tp: Any) -> bool:
    """Whether a type is matched by capability rather than by identity.

    Abstract classes, direct ``ABC`` subclasses and ``typing.Protocol``
    classes are interfaces; everything else is a concrete type.
    """
    if not inspect.isclass(tp):
        return False
    return is_protocol(tp) or inspect.isabstract(tp) or ABC in tp.__bases__


def protocol_members(proto: type) -> set:
    members = set()
    for base in proto.__mro__:
        if base in (object, Protocol) or not is_protocol(base):
            continue
        for name in list(vars(base)) + list(getattr(base, "__annotations__", {})):
            if name.startswith("_"):
                continue
            members.add(name)
    return members


def satisfies(output_type: Any, contract_type: Any) -> bool:
    """Whether a produced class satisfies the requested contract.

    Concrete contracts require the exact class. ABC contracts accept
    subclasses (including virtual ones); Protocol contracts accept any class
    exposing every protocol member.
    """
    if not inspect.isclass(output_type) or not inspect.isclass(contract_type):
        return False
    if output_type is contract_type:
        return True
    if not is_interface(contract_type):
        return False
    if is_protocol(contract_type):
        return all(hasattr(output_type, name) for name in protocol_members(contract_type))
    return issubclass(output_type, contract_type)


class Contract:
    """Explicit matching predicate for retrieval.

    Attributes:
        contract_type: The requested type.
        predicate: Decides whether a node's output class satisfies the contract.
    """

    def __init__(
        self,
        contract_type: Type,
        predicate: Optional[Callable[[Any], bool]] = None,
    ) -> None:
        self.contract_type = contract_type
        self.predicate = predicate or (lambda output_type: satisfies(output_type, contract_type))

    @classmethod
    def of(cls, contract: Any) -> "Contract":
        if isinstance(contract, Contract):
            return contract
        return cls(contract)

    def matches(self, output_type: Any) -> bool:
        return self.predicate(output_type)

    def __repr__(self) -> str:
        return f"Contract({getattr(self.contract_type, '__qualname__', self.contract_type)!r})"

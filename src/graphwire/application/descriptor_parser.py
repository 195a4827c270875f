"""Application layer - Type and function descriptor parsing."""

import collections.abc
import inspect
import types
from typing import Any, List, NamedTuple, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from graphwire.application.lazy import Lazy
from graphwire.domain import Descriptor, DescriptorError, InputSpec, Signature

_COLLECTION_ORIGINS = (list, collections.abc.Sequence)
_UNION_ORIGINS: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):
    _UNION_ORIGINS += (types.UnionType,)


class ParsedAnnotation(NamedTuple):
    descriptor: Descriptor
    element_type: type
    is_lazy: bool
    is_optional: bool


def qualified_name(tp: Any) -> str:
    return f"{tp.__module__}.{tp.__qualname__}"


def display_name(provider: Any) -> str:
    """Return the name a provider is reported under.

    Functions and classes use their own qualified name, pre-built
    instances the qualified name of their class.
    """
    if inspect.isclass(provider) or inspect.isroutine(provider):
        return qualified_name(provider)
    return qualified_name(type(provider))


def describe_type(tp: type, is_collection: bool = False) -> Descriptor:
    return Descriptor(
        identity=qualified_name(tp),
        is_reference=tp.__module__ != "builtins",
        is_collection=is_collection,
    )


def parse_annotation(annotation: Any, owner: str = "", parameter: str = "return") -> ParsedAnnotation:
    """Parse a type annotation into a descriptor.

    Unwraps ``Optional[T]``, ``Lazy[T]`` and ``list[T]``/``Sequence[T]``;
    other parametrised generics are described by their origin class.

    Args:
        annotation: The annotation to parse.
        owner: Display name of the provider declaring it, for error messages.
        parameter: Name of the annotated parameter, for error messages.

    Returns:
        The descriptor, the runtime element class and the lazy/optional flags.

    Raises:
        DescriptorError: If the annotation is missing or unsupported.
    """
    if annotation is inspect.Parameter.empty:
        raise DescriptorError(f"parameter '{parameter}' lacks a type annotation", owner)
    if annotation is Any or annotation is None or annotation is type(None):
        raise DescriptorError(f"parameter '{parameter}' has no concrete type", owner)

    is_optional = False
    if get_origin(annotation) in _UNION_ORIGINS:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) != 1 or len(members) == len(get_args(annotation)):
            raise DescriptorError(f"parameter '{parameter}' has an unsupported union type", owner)
        is_optional = True
        annotation = members[0]

    is_lazy = False
    if get_origin(annotation) is Lazy:
        is_lazy = True
        annotation = get_args(annotation)[0]

    is_collection = False
    origin = get_origin(annotation)
    if origin in _COLLECTION_ORIGINS:
        args = get_args(annotation)
        if not args:
            raise DescriptorError(f"parameter '{parameter}' is a collection without an element type", owner)
        is_collection = True
        annotation = args[0]
    elif origin is not None:
        annotation = origin

    if not inspect.isclass(annotation):
        raise DescriptorError(f"parameter '{parameter}' has an unsupported type {annotation!r}", owner)

    return ParsedAnnotation(describe_type(annotation, is_collection), annotation, is_lazy, is_optional)


def parse_value(value: Any, contract: Optional[Any] = None) -> Tuple[Descriptor, type]:
    """Describe a pre-built instance.

    Lists are collections of their element class, which must be uniform.

    Args:
        value: The pre-built instance.
        contract: Explicit output annotation overriding inference.

    Returns:
        The descriptor and the runtime class of the value.

    Raises:
        DescriptorError: If the value is a function or its type cannot be inferred.
    """
    name = display_name(value)
    if inspect.isroutine(value):
        raise DescriptorError("param is not a valid field", name)
    if contract is not None:
        parsed = parse_annotation(contract, name)
        return parsed.descriptor, list if parsed.descriptor.is_collection else parsed.element_type
    if isinstance(value, list) and type(value) is list:
        element_types = {type(element) for element in value}
        if len(element_types) != 1:
            raise DescriptorError("cannot infer the element type of an empty or mixed list", name)
        return describe_type(element_types.pop(), is_collection=True), list
    return describe_type(type(value)), type(value)


def parse_factory(factory: Any, contract: Optional[Any] = None) -> Signature:
    """Parse a factory into its ordered inputs and single output.

    Classes output themselves and declare the inputs of ``__init__``;
    functions declare their parameters and the return annotation.
    ``*args`` and ``**kwargs`` are not inputs.

    Args:
        factory: A function, method or class.
        contract: Explicit output annotation overriding the declared one.

    Returns:
        The factory's signature.

    Raises:
        DescriptorError: If the factory is a lambda, declares no output, or
            one of its parameters cannot be described.

    Example:
        >>> def new_service(repo: Repository, plugins: list[Plugin]) -> Service:
        ...     return Service(repo, plugins)
        >>> signature = parse_factory(new_service)
        >>> [str(spec.descriptor) for spec in signature.inputs]
        ['app.Repository', 'list[app.Plugin]']
    """
    name = display_name(factory)
    if getattr(factory, "__name__", "") == "<lambda>":
        raise DescriptorError("cannot parse anonymous function", name)

    is_class = inspect.isclass(factory)
    target = factory.__init__ if is_class else factory
    try:
        parameters: List[inspect.Parameter] = list(inspect.signature(target).parameters.values())
        hints = get_type_hints(target)
    except (NameError, TypeError, ValueError) as e:
        raise DescriptorError(f"cannot introspect factory ({e})", name) from e

    if is_class:
        # Skip 'self'
        parameters = parameters[1:]
        output = contract if contract is not None else factory
    else:
        output = contract if contract is not None else hints.get("return", inspect.Parameter.empty)
        if output is inspect.Parameter.empty or output is None or output is type(None):
            raise DescriptorError("the given function has no output parameters", name)

    inputs = []
    for param in parameters:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        parsed = parse_annotation(hints.get(param.name, inspect.Parameter.empty), name, param.name)
        inputs.append(
            InputSpec(
                name=param.name,
                descriptor=parsed.descriptor,
                element_type=parsed.element_type,
                is_lazy=parsed.is_lazy,
                is_optional=parsed.is_optional,
                has_default=param.default is not inspect.Parameter.empty,
                default=None if param.default is inspect.Parameter.empty else param.default,
                keyword_only=param.kind == inspect.Parameter.KEYWORD_ONLY,
            )
        )

    parsed_output = parse_annotation(output, name)
    if parsed_output.is_lazy:
        raise DescriptorError("factory output cannot be Lazy", name)
    output_type = list if parsed_output.descriptor.is_collection else parsed_output.element_type
    return Signature(inputs=tuple(inputs), output=parsed_output.descriptor, output_type=output_type)

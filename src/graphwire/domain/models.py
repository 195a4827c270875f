from typing import Any, Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from graphwire.domain.enums import InstantiationState, ResolutionState, WireDirection


class Descriptor(BaseModel):
    """Canonical structural description of a value's semantic type.

    Attributes:
        identity: Fully qualified name of the underlying class.
        is_reference: False for builtin value types (str, int, dict, ...).
        is_collection: True when the value arrives as a list of the identity type.
    """

    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., description="Fully qualified name of the underlying class.")
    is_reference: bool = Field(default=True, description="Whether the type is a user-defined reference type.")
    is_collection: bool = Field(default=False, description="Whether the value is a list of the identity type.")

    def __str__(self) -> str:
        if self.is_collection:
            return f"list[{self.identity}]"
        return self.identity


class InputSpec(BaseModel):
    """One declared input of a factory.

    Attributes:
        name: Parameter name.
        descriptor: Structural descriptor of the expected value.
        element_type: Runtime class of the expected value (element class for collections).
        is_lazy: Whether the parameter is annotated ``Lazy[T]``.
        is_optional: Whether the parameter is annotated ``Optional[T]``.
        has_default: Whether the parameter declares a Python default.
        default: The Python default, when present.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Parameter name.")
    descriptor: Descriptor = Field(..., description="Descriptor of the expected value.")
    element_type: Any = Field(..., description="Runtime class of the expected value.")
    is_lazy: bool = Field(default=False, description="Whether the input is wrapped in Lazy[T].")
    is_optional: bool = Field(default=False, description="Whether the input accepts None.")
    has_default: bool = Field(default=False, description="Whether the parameter declares a default.")
    default: Any = Field(default=None, description="Python default of the parameter.")
    keyword_only: bool = Field(default=False, description="Whether the parameter must be passed by name.")


class Signature(BaseModel):
    """Ordered inputs and single output of a factory."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    inputs: Tuple[InputSpec, ...] = Field(default=(), description="Declared inputs, in positional order.")
    output: Descriptor = Field(..., description="Descriptor of the produced value.")
    output_type: Any = Field(..., description="Runtime class of the produced value.")


class ProviderKey(BaseModel):
    """Hashable lookup key into the provider table.

    Attributes:
        identity: Descriptor identity of the provided value.
        qualifier: Optional name disambiguating same-typed providers.
        is_reference: Mirrors the descriptor's reference flag.
    """

    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., description="Descriptor identity of the provided value.")
    qualifier: str = Field(default="", description="Optional qualifier name.")
    is_reference: bool = Field(default=True, description="Whether the provided type is a reference type.")

    @classmethod
    def of(cls, descriptor: Descriptor, qualifier: str = "") -> "ProviderKey":
        return cls(identity=descriptor.identity, qualifier=qualifier, is_reference=descriptor.is_reference)

    def __str__(self) -> str:
        if self.qualifier:
            return f"{self.identity}({self.qualifier})"
        return self.identity


class WireOption(BaseModel):
    """Declarative metadata attached to a provider at registration.

    Input-direction options apply positionally to the factory's inputs;
    a single output-direction option applies to the produced value.

    Attributes:
        direction: Whether the option targets an input or the output.
        name: Qualifier name.
        required: False once a default value is supplied.
        primary: Preferred candidate among several for the same key.
        lazy: Output is produced behind a ``Lazy`` handle.
        default: Value used when no candidate exists.
        profiles: Profiles in which the provider is active; empty means all.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    direction: WireDirection = Field(default=WireDirection.IN, description="Target of the option.")
    name: str = Field(default="", description="Qualifier name.")
    required: bool = Field(default=True, description="Whether the input must be satisfied by a provider.")
    primary: bool = Field(default=False, description="Whether this provider wins among same-key candidates.")
    lazy: bool = Field(default=False, description="Whether the output is deferred behind a Lazy handle.")
    default: Any = Field(default=None, description="Fallback value for an unmet input.")
    profiles: Tuple[str, ...] = Field(default=(), description="Profiles in which the provider is active.")

    @property
    def is_in(self) -> bool:
        return self.direction == WireDirection.IN

    @property
    def is_out(self) -> bool:
        return self.direction == WireDirection.OUT

    @property
    def has_default(self) -> bool:
        return not self.required

    def named(self, name: str) -> "WireOption":
        return self.model_copy(update={"name": name.strip()})

    def with_default(self, value: Any) -> "WireOption":
        return self.model_copy(update={"default": value, "required": False})

    def as_primary(self) -> "WireOption":
        return self.model_copy(update={"primary": True})

    def active_in(self, *profiles: str) -> "WireOption":
        return self.model_copy(update={"profiles": tuple(profiles)})

    def check(self) -> Optional[str]:
        """Return a description of the first self-consistency violation, if any."""
        if self.is_out:
            if not self.required:
                return "required option of wire out parameter cannot be false"
            if self.default is not None:
                return "default option of wire out parameter cannot exist"
        else:
            if self.primary:
                return "primary option of wire in parameter cannot exist"
            if self.profiles:
                return "active option of wire in parameter cannot exist"
        return None


class Registration(BaseModel):
    """Value object recording one call to ``register``.

    Attributes:
        provider: The factory or pre-built instance.
        options: Wire options in the order they were passed.
        contract: Explicit output annotation, if supplied.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    provider: Any = Field(..., description="The factory or pre-built instance.")
    options: Tuple[WireOption, ...] = Field(default=(), description="Wire options as passed.")
    contract: Any = Field(default=None, description="Explicit output annotation.")


class GraphNode(BaseModel):
    """One producible value in the dependency graph.

    A node is either factory-backed (``factory`` and ``signature`` set) or a
    pre-built instance (``provided`` set, already resolved and instantiated).
    Synthetic aggregator nodes (``is_collection``) stand for a collection
    input and hold their members as dependencies.

    Attributes:
        id: Stable identity derived from the provider object.
        name: Display name used in errors and logs.
        factory: The factory callable, for factory-backed nodes.
        signature: Parsed signature of the factory.
        provided: The produced value once instantiated.
        descriptor: Descriptor of the produced value.
        output_type: Runtime class of the produced value.
        input_options: Positional input-direction options.
        output_option: The output-direction option, if any.
        resolution_state: Progress of edge resolution.
        instantiation_state: Progress of value construction.
        is_collection: Whether this is a synthetic aggregator.
        dependencies: Ordered dependency edges.
        order: Cached ordering capability of the produced value.
        registration_index: Position in registration order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(..., description="Stable identity derived from the provider object.")
    name: str = Field(..., description="Display name of the node.")
    factory: Optional[Callable[..., Any]] = Field(default=None, description="Factory callable.")
    signature: Optional[Signature] = Field(default=None, description="Parsed factory signature.")
    provided: Any = Field(default=None, description="Produced value.")
    descriptor: Optional[Descriptor] = Field(default=None, description="Descriptor of the produced value.")
    output_type: Any = Field(default=None, description="Runtime class of the produced value.")
    input_options: List[WireOption] = Field(default_factory=list, description="Positional input options.")
    output_option: Optional[WireOption] = Field(default=None, description="Output option.")
    resolution_state: ResolutionState = Field(default=ResolutionState.UNRESOLVED)
    instantiation_state: InstantiationState = Field(default=InstantiationState.PENDING)
    is_collection: bool = Field(default=False, description="Whether the node aggregates a collection input.")
    dependencies: List["GraphNode"] = Field(default_factory=list, description="Ordered dependency edges.")
    order: Optional[int] = Field(default=None, description="Cached ordering capability.")
    registration_index: int = Field(default=-1, description="Position in registration order.")

    # Nodes compare by identity.
    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    @property
    def resolved(self) -> bool:
        return self.resolution_state == ResolutionState.RESOLVED

    @property
    def instantiated(self) -> bool:
        return self.instantiation_state == InstantiationState.INSTANTIATED

    @property
    def is_factory(self) -> bool:
        return self.factory is not None

    @property
    def is_lazy(self) -> bool:
        return self.output_option is not None and self.output_option.lazy

    @property
    def profiles(self) -> Tuple[str, ...]:
        if self.output_option is None:
            return ()
        return self.output_option.profiles

    @property
    def is_primary(self) -> bool:
        return self.output_option is not None and self.output_option.primary

    def input_option(self, position: int) -> Optional[WireOption]:
        if position < len(self.input_options):
            return self.input_options[position]
        return None


class ContainerSettings(BaseModel):
    """Container configuration.

    Attributes:
        profile: Active profile used to gate providers registered with ``active()``.
        eager: Instantiate every node right after ``resolve_all()``.
    """

    model_config = ConfigDict(frozen=True)

    profile: str = Field(default="", description="Active runtime profile.")
    eager: bool = Field(default=False, description="Instantiate every node after resolution.")

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from graphwire.domain.models import Descriptor, ProviderKey


class DIException(Exception):
    """Base exception for DI-related errors."""


class ConfigurationError(DIException):
    """Raised for a malformed registration.

    This occurs when:
    - The provider is absent, or a wire option is passed as the provider.
    - A ``functools.partial`` is passed as the provider.
    - Wire options have the wrong count, direction or placement.
    - A primitive pre-built value is registered without an output qualifier.

    Attributes:
        provider_name: Display name of the offending provider, if known.
    """

    def __init__(self, message: str, provider_name: Optional[str] = None) -> None:
        self.provider_name = provider_name
        if provider_name:
            message = f"{message}: {provider_name}"
        super().__init__(message)


class DescriptorError(ConfigurationError):
    """Raised when a provider cannot be parsed into a descriptor or signature.

    This occurs when:
    - A factory declares no output (missing or ``None`` return annotation).
    - A factory is a lambda, which has no stable identity.
    - A parameter lacks a usable type annotation.
    """


class UnmetDependencyError(DIException):
    """Raised when a required input has no active candidate and no usable default.

    Attributes:
        key: The provider key that could not be satisfied.
        dependent: Name of the node that declared the input.
    """

    def __init__(self, key: "ProviderKey", dependent: str) -> None:
        self.key = key
        self.dependent = dependent
        super().__init__(f"no dependency of {key} found for {dependent}")


class AmbiguousDependencyError(DIException):
    """Raised when several active candidates match a key and none is primary.

    Attributes:
        key: The ambiguous provider key.
        dependent: Name of the node that declared the input.
    """

    def __init__(self, key: "ProviderKey", dependent: str) -> None:
        self.key = key
        self.dependent = dependent
        super().__init__(f"more than one dependency of {key} found for {dependent}")


class DefaultValueMismatchError(DIException):
    """Raised when a default value does not match the input it stands in for.

    Attributes:
        default_descriptor: Descriptor of the supplied default value.
        expected_descriptor: Descriptor of the declared input.
        dependent: Name of the node that declared the input.
    """

    def __init__(
        self,
        default_descriptor: "Descriptor",
        expected_descriptor: "Descriptor",
        dependent: str,
    ) -> None:
        self.default_descriptor = default_descriptor
        self.expected_descriptor = expected_descriptor
        self.dependent = dependent
        super().__init__(
            f"the default value {default_descriptor}\n\tis not match {expected_descriptor}\n\tin {dependent}"
        )


class CycleError(DIException):
    """Raised when a node is reachable from itself through its dependencies.

    Attributes:
        chain: Node names from the outermost dependent to the repeated node.
    """

    def __init__(self, chain: List[str]) -> None:
        self.chain = chain
        message = "cycle dependencies found: \n\t" + "\n\tdepends on ".join(chain)
        super().__init__(message)


class LazyDependencyError(DIException):
    """Raised when lazy wiring does not match on both ends.

    This occurs when:
    - A ``Lazy[T]`` input is supplied by a node registered without ``lazy_out()``.
    - A node registered with ``lazy_out()`` is requested as a plain ``T``.
    """


class InstantiationError(DIException):
    """Raised when a factory fails while building its value.

    Attributes:
        node_name: Name of the node whose factory raised.
    """

    def __init__(self, node_name: str, reason: str) -> None:
        self.node_name = node_name
        super().__init__(f"Failed to create instance of {node_name}: {reason}")


class ContainerStateError(DIException):
    """Raised for operations out of the container's lifecycle order.

    This occurs when:
    - Registering a provider after ``resolve_all()`` ran.
    - Retrieving instances before ``resolve_all()`` ran.
    """


class ApplicationStartError(DIException):
    """Raised when the application bootstrap fails to start.

    Attributes:
        cause: The error that aborted startup.
    """

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(
            "\n"
            "**********************************\n"
            "*    application start failed    *\n"
            "**********************************\n\n"
            f"{cause}"
        )

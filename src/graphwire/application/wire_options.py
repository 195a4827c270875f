"""Application layer - Wire option builders and validation."""

from typing import Any, List, Optional, Sequence, Tuple

from graphwire.domain import ConfigurationError, WireDirection, WireOption


def wire_in() -> WireOption:
    """Plain input option, used to skip a position before a named one."""
    return WireOption(direction=WireDirection.IN)


def wire_out() -> WireOption:
    """Plain output option."""
    return WireOption(direction=WireDirection.OUT)


def name_in(name: str) -> WireOption:
    """Qualify the input at this position with a provider name.

    Example:
        >>> container.register(new_report, name_in("archive"))
    """
    return WireOption(direction=WireDirection.IN, name=name.strip())


def name_out(name: str) -> WireOption:
    """Register the provider under a qualifier name.

    Example:
        >>> container.register(new_archive_store, name_out("archive"))
    """
    return WireOption(direction=WireDirection.OUT, name=name.strip())


def default(value: Any) -> WireOption:
    """Fall back to ``value`` when no provider satisfies the input at this position."""
    return WireOption(direction=WireDirection.IN, default=value, required=False)


def primary() -> WireOption:
    """Prefer this provider among several registered under the same key."""
    return WireOption(direction=WireDirection.OUT, primary=True)


def active(*profiles: str) -> WireOption:
    """Activate this provider only in the given profiles."""
    return WireOption(direction=WireDirection.OUT, profiles=tuple(profiles))


def lazy_out() -> WireOption:
    """Produce this provider's value behind a ``Lazy`` handle."""
    return WireOption(direction=WireDirection.OUT, lazy=True)


def split_options(options: Sequence[WireOption]) -> Tuple[List[WireOption], Optional[WireOption]]:
    """Separate positional input options from the output option.

    Args:
        options: Options as passed at registration.

    Returns:
        The input options in order, and the output option if any.
    """
    inputs = [option for option in options if option.is_in]
    outputs = [option for option in options if option.is_out]
    return inputs, (outputs[-1] if outputs else None)


def validate_wire_options(input_arity: int, provider_name: str, options: Sequence[WireOption]) -> None:
    """Check a factory's options for placement and self-consistency.

    Args:
        input_arity: Number of inputs the factory declares.
        provider_name: Display name of the factory, for error messages.
        options: Options as passed at registration.

    Raises:
        ConfigurationError: If an output option is not the last one, there
            are more input options than inputs, or an option contradicts its
            direction.
    """
    has_out_option = False
    for position, option in enumerate(options):
        if not isinstance(option, WireOption):
            raise ConfigurationError(f"option {option!r} is not a wire option", provider_name)

        violation = option.check()
        if violation:
            raise ConfigurationError(violation, provider_name)

        if option.is_out:
            if position < len(options) - 1:
                raise ConfigurationError("wire out option can only be the last option in provider", provider_name)
            has_out_option = True

    in_count = len(options) - 1 if has_out_option else len(options)
    if in_count > input_arity:
        raise ConfigurationError("wire in option is more than the in parameters in provider", provider_name)

"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from graphwire.domain import (
    ContainerSettings,
    Descriptor,
    GraphNode,
    InstantiationState,
    ProviderKey,
    ResolutionState,
    WireDirection,
    WireOption,
)


class TestDescriptor:
    """Test cases for the Descriptor model."""

    def test_defaults(self):
        """Test that a descriptor is a plain reference type by default."""
        descriptor = Descriptor(identity="app.Service")
        assert descriptor.is_reference is True
        assert descriptor.is_collection is False

    def test_str_of_plain_descriptor(self):
        """Test that a plain descriptor renders its identity."""
        assert str(Descriptor(identity="app.Service")) == "app.Service"

    def test_str_of_collection_descriptor(self):
        """Test that a collection descriptor renders as a list."""
        assert str(Descriptor(identity="app.Plugin", is_collection=True)) == "list[app.Plugin]"

    def test_structural_equality(self):
        """Test that descriptors with the same fields are equal."""
        assert Descriptor(identity="app.Service") == Descriptor(identity="app.Service")
        assert Descriptor(identity="app.Service") != Descriptor(identity="app.Service", is_collection=True)

    def test_is_frozen(self):
        """Test that descriptors cannot be mutated."""
        descriptor = Descriptor(identity="app.Service")
        with pytest.raises(ValidationError):
            descriptor.identity = "app.Other"


class TestProviderKey:
    """Test cases for the ProviderKey model."""

    def test_of_copies_descriptor_fields(self):
        """Test building a key from a descriptor and a qualifier."""
        key = ProviderKey.of(Descriptor(identity="builtins.str", is_reference=False), "dsn")

        assert key.identity == "builtins.str"
        assert key.qualifier == "dsn"
        assert key.is_reference is False

    def test_collection_flag_does_not_affect_key(self):
        """Test that list and element descriptors share a key."""
        plain = ProviderKey.of(Descriptor(identity="app.Plugin"))
        collection = ProviderKey.of(Descriptor(identity="app.Plugin", is_collection=True))
        assert plain == collection

    def test_keys_are_hashable(self):
        """Test that keys can index a dictionary."""
        table = {ProviderKey(identity="app.Service"): 1}
        assert table[ProviderKey(identity="app.Service")] == 1

    def test_qualifier_distinguishes_keys(self):
        """Test that the same type under different names gives different keys."""
        assert ProviderKey(identity="app.Db", qualifier="a") != ProviderKey(identity="app.Db", qualifier="b")

    def test_str(self):
        """Test key rendering with and without a qualifier."""
        assert str(ProviderKey(identity="app.Db")) == "app.Db"
        assert str(ProviderKey(identity="app.Db", qualifier="replica")) == "app.Db(replica)"


class TestWireOption:
    """Test cases for the WireOption model."""

    def test_defaults(self):
        """Test that a bare option is a required input option."""
        option = WireOption()

        assert option.direction == WireDirection.IN
        assert option.is_in is True
        assert option.required is True
        assert option.has_default is False
        assert option.profiles == ()

    def test_with_default_marks_not_required(self):
        """Test that supplying a default makes the input optional."""
        option = WireOption().with_default(3)

        assert option.default == 3
        assert option.has_default is True

    def test_chaining_returns_copies(self):
        """Test that chaining helpers leave the original untouched."""
        option = WireOption(direction=WireDirection.OUT)
        chained = option.named("  main ").as_primary().active_in("prod", "staging")

        assert option.name == ""
        assert option.primary is False
        assert chained.name == "main"
        assert chained.primary is True
        assert chained.profiles == ("prod", "staging")

    def test_check_accepts_consistent_options(self):
        """Test that well-formed options have no violation."""
        assert WireOption(name="x").with_default(1).check() is None
        assert WireOption(direction=WireDirection.OUT, primary=True, lazy=True).check() is None

    @pytest.mark.parametrize(
        "option, violation",
        [
            (
                WireOption(direction=WireDirection.OUT, required=False),
                "required option of wire out parameter cannot be false",
            ),
            (
                WireOption(direction=WireDirection.OUT, default="x"),
                "default option of wire out parameter cannot exist",
            ),
            (WireOption(primary=True), "primary option of wire in parameter cannot exist"),
            (WireOption(profiles=("prod",)), "active option of wire in parameter cannot exist"),
        ],
    )
    def test_check_reports_violations(self, option, violation):
        """Test that options contradicting their direction are reported."""
        assert option.check() == violation


class TestGraphNode:
    """Test cases for the GraphNode model."""

    def test_default_states(self):
        """Test that a fresh node is unresolved and pending."""
        node = GraphNode(id="1", name="app.new_service")

        assert node.resolution_state == ResolutionState.UNRESOLVED
        assert node.instantiation_state == InstantiationState.PENDING
        assert node.resolved is False
        assert node.instantiated is False
        assert node.dependencies == []

    def test_nodes_compare_by_identity(self):
        """Test that two nodes with the same fields are still distinct."""
        first = GraphNode(id="1", name="n")
        second = GraphNode(id="1", name="n")

        assert first != second
        assert first == first
        assert len({first, second}) == 2

    def test_output_option_properties(self):
        """Test lazy, primary and profile properties read from the output option."""
        node = GraphNode(
            id="1",
            name="n",
            output_option=WireOption(direction=WireDirection.OUT, lazy=True, primary=True, profiles=("dev",)),
        )

        assert node.is_lazy is True
        assert node.is_primary is True
        assert node.profiles == ("dev",)

    def test_properties_without_output_option(self):
        """Test the defaults of a node registered without an output option."""
        node = GraphNode(id="1", name="n")

        assert node.is_lazy is False
        assert node.is_primary is False
        assert node.profiles == ()
        assert node.is_factory is False

    def test_input_option_by_position(self):
        """Test positional lookup of input options."""
        option = WireOption(name="replica")
        node = GraphNode(id="1", name="n", input_options=[WireOption(), option])

        assert node.input_option(1) is option
        assert node.input_option(2) is None


class TestContainerSettings:
    """Test cases for ContainerSettings."""

    def test_defaults(self):
        """Test the default profile and eager flag."""
        settings = ContainerSettings()
        assert settings.profile == ""
        assert settings.eager is False

    def test_is_frozen(self):
        """Test that settings cannot be mutated."""
        settings = ContainerSettings(profile="prod")
        with pytest.raises(ValidationError):
            settings.profile = "dev"

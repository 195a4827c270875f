"""Unit tests for domain enums."""

from graphwire.domain.enums import InstantiationState, ResolutionState, WireDirection


class TestWireDirection:
    """Test cases for the WireDirection enum."""

    def test_values(self):
        """Test that directions have their expected values."""
        assert WireDirection.IN.value == "in"
        assert WireDirection.OUT.value == "out"

    def test_str_returns_value(self):
        """Test that str() renders the raw value."""
        assert str(WireDirection.OUT) == "out"

    def test_compares_to_string(self):
        """Test that directions compare equal to plain strings."""
        assert WireDirection.IN == "in"


class TestResolutionState:
    """Test cases for the ResolutionState enum."""

    def test_all_states_exist(self):
        """Test that the three resolution states are defined."""
        assert [state.value for state in ResolutionState] == ["unresolved", "resolving", "resolved"]

    def test_str_returns_value(self):
        """Test that str() renders the raw value."""
        assert str(ResolutionState.RESOLVING) == "resolving"


class TestInstantiationState:
    """Test cases for the InstantiationState enum."""

    def test_all_states_exist(self):
        """Test that both instantiation states are defined."""
        assert InstantiationState.PENDING.value == "pending"
        assert InstantiationState.INSTANTIATED.value == "instantiated"

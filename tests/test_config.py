"""Tests for scene configuration."""

import dataclasses

import pytest

from graph_scene.config import PROPERTY_KEYS, SceneConfig
from graph_scene.validation import InvalidParameterError


class TestDefaults:
    """Tests for default configuration values."""

    def test_layout_defaults(self):
        config = SceneConfig()
        assert config.repulsion_force == 25000.0
        assert config.attraction_force == 30.0
        assert config.attraction_scale == 10.0
        assert config.inner_iterations == 20

    def test_vertex_defaults(self):
        config = SceneConfig()
        assert config.vertex_allow_user_move is True
        assert config.vertex_radius == 15.0

    def test_routing_defaults(self):
        config = SceneConfig()
        assert config.max_curve_angle == 75.0
        assert config.loop_radius_factor == 3.0
        assert config.random_seed is None

    def test_frozen(self):
        """Configurations are immutable."""
        config = SceneConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.vertex_radius = 3.0


class TestValidation:
    """Tests for validation on construction."""

    def test_negative_radius_rejected(self):
        with pytest.raises(InvalidParameterError, match="vertex_radius"):
            SceneConfig(vertex_radius=-1)

    def test_zero_iterations_rejected(self):
        with pytest.raises(InvalidParameterError, match="iterations"):
            SceneConfig(inner_iterations=0)

    def test_curve_cap_must_be_acute(self):
        """The curve cap must lie strictly between 0 and 90 degrees."""
        with pytest.raises(InvalidParameterError, match="max_curve_angle"):
            SceneConfig(max_curve_angle=90)

    def test_loop_spread_must_be_acute(self):
        with pytest.raises(InvalidParameterError, match="loop_spread"):
            SceneConfig(loop_spread=0)

    def test_replace_revalidates(self):
        """replace() returns a validated copy."""
        config = SceneConfig().replace(vertex_radius=20)
        assert config.vertex_radius == 20
        with pytest.raises(InvalidParameterError):
            config.replace(attraction_scale=0)


class TestFromMapping:
    """Tests for building configurations from flat mappings."""

    def test_dotted_keys(self):
        """Dotted property names map onto fields."""
        config = SceneConfig.from_mapping(
            {
                "layout.repulsive-force": 5000.0,
                "layout.attraction-force": 10.0,
                "layout.iterations": 5,
                "vertex.allow-user-move": False,
            }
        )
        assert config.repulsion_force == 5000.0
        assert config.attraction_force == 10.0
        assert config.inner_iterations == 5
        assert config.vertex_allow_user_move is False

    def test_field_names(self):
        config = SceneConfig.from_mapping({"vertex_radius": 12.5, "edge_arrows": False})
        assert config.vertex_radius == 12.5
        assert config.edge_arrows is False

    def test_unknown_key(self):
        with pytest.raises(InvalidParameterError, match="Unknown configuration key"):
            SceneConfig.from_mapping({"layout.speed": 1.0})

    def test_string_values_rejected(self):
        """Raw property strings are not parsed."""
        with pytest.raises(InvalidParameterError, match="edge.arrow expects a typed value"):
            SceneConfig.from_mapping({"edge.arrow": "false"})
        with pytest.raises(InvalidParameterError, match="vertex.radius"):
            SceneConfig.from_mapping({"vertex.radius": "12"})

    def test_values_still_validated(self):
        with pytest.raises(InvalidParameterError, match="vertex_radius"):
            SceneConfig.from_mapping({"vertex.radius": -3.0})

    def test_every_property_key_is_a_field(self):
        names = {f.name for f in dataclasses.fields(SceneConfig)}
        assert set(PROPERTY_KEYS.values()) <= names

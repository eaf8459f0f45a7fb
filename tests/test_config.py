"""Tests for simulation configuration and JSON config files."""

import json
from pathlib import Path

import pytest

from py_disksched.config import SimulationConfig, config_from_dict, load_config
from py_disksched.geometry import (
    ConfigError,
    Direction,
    DiskGeometry,
    InvalidGeometryError,
    RangePolicy,
    WrapPolicy,
)


class TestSimulationConfig:
    """Verify defaults and copies."""

    def test_defaults(self) -> None:
        """Defaults: clamp, verbose, path recorded, N = 4."""
        config = SimulationConfig()
        assert config.geometry == DiskGeometry()
        assert config.range_policy is RangePolicy.CLAMP
        assert config.verbose
        assert config.record_path
        assert not config.record_timing
        assert config.step_size == 4  # noqa: PLR2004

    def test_step_size_clamped(self) -> None:
        """A step size below 1 becomes 1."""
        assert SimulationConfig(step_size=-3).step_size == 1

    def test_with_geometry(self) -> None:
        """with_geometry swaps only the geometry."""
        config = SimulationConfig(step_size=9)
        small = config.with_geometry(DiskGeometry(0, 99))
        assert small.geometry.upper == 99  # noqa: PLR2004
        assert small.step_size == 9  # noqa: PLR2004

    def test_to_dict_round_trip(self) -> None:
        """to_dict output is accepted by config_from_dict."""
        config = SimulationConfig(
            geometry=DiskGeometry(10, 500, Direction.DECREASING, WrapPolicy.TO_FIRST_PENDING),
            verbose=False,
            step_size=3,
            range_policy=RangePolicy.REJECT,
        )
        assert config_from_dict(config.to_dict()) == config


class TestConfigFromDict:
    """Verify parsing of plain mappings."""

    def test_empty_mapping_gives_defaults(self) -> None:
        """Every key is optional."""
        assert config_from_dict({}) == SimulationConfig()

    def test_aliases_accepted(self) -> None:
        """Direction and wrap tokens accept their aliases."""
        config = config_from_dict({"direction": "left", "wrap_policy": "first"})
        assert config.geometry.direction is Direction.DECREASING
        assert config.geometry.wrap_policy is WrapPolicy.TO_FIRST_PENDING

    def test_bad_token(self) -> None:
        """Unknown tokens raise ConfigError."""
        with pytest.raises(ConfigError, match="direction"):
            config_from_dict({"direction": "sideways"})

    def test_bad_number(self) -> None:
        """Non-numeric bounds raise ConfigError."""
        with pytest.raises(ConfigError, match="Invalid configuration"):
            config_from_dict({"upper": "lots"})

    @pytest.mark.parametrize("value", ["false", 0, None])
    def test_flags_must_be_booleans(self, value: object) -> None:
        """A string such as "false" is not silently read as True."""
        with pytest.raises(ConfigError, match="verbose must be true or false"):
            config_from_dict({"verbose": value})

    def test_flags_accept_booleans(self) -> None:
        """JSON true and false map straight through."""
        config = config_from_dict({"verbose": False, "record_timing": True})
        assert not config.verbose
        assert config.record_timing

    def test_impossible_bounds(self) -> None:
        """Impossible bounds keep their geometry error."""
        with pytest.raises(InvalidGeometryError):
            config_from_dict({"lower": 100, "upper": 50})


class TestLoadConfig:
    """Verify JSON config files."""

    def test_load(self, tmp_path: Path) -> None:
        """A valid file loads."""
        path = tmp_path / "disk.json"
        path.write_text(json.dumps({"upper": 199, "step_size": 2}))
        config = load_config(path)
        assert config.geometry.upper == 199  # noqa: PLR2004
        assert config.step_size == 2  # noqa: PLR2004

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot load"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON raises ConfigError."""
        path = tmp_path / "bad.json"
        path.write_text("{upper: 199")
        with pytest.raises(ConfigError, match="Cannot load"):
            load_config(path)

    def test_not_an_object(self, tmp_path: Path) -> None:
        """A JSON list is not a config."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(path)

"""Scenario configuration and execution."""

from ssbgp.runtime.config import (
    NetworkConfig,
    ProtocolConfig,
    ScenarioConfig,
    load_scenario_config,
    parse_scenario_config,
)

__all__ = [
    "NetworkConfig",
    "ProtocolConfig",
    "ScenarioConfig",
    "load_scenario_config",
    "parse_scenario_config",
]

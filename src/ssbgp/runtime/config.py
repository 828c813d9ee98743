from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ssbgp.protocols.detection import DEFAULT_PREDICATE, load_predicate
from ssbgp.protocols.registry import load_protocol


@dataclass(frozen=True)
class ProtocolConfig:
    name: str = "bgp"
    predicate: str = DEFAULT_PREDICATE
    withdrawals: bool = True


@dataclass(frozen=True)
class NetworkConfig:
    base_delay: int = 1
    jitter: int = 0


@dataclass(frozen=True)
class ScenarioConfig:
    name: str
    seed: int
    destination: int
    protocol: ProtocolConfig
    network: NetworkConfig
    max_time: int
    topology: Dict[str, Any] = field(default_factory=dict)
    output_dir: Optional[str] = None


def parse_protocol_config(protocol: str, params: Mapping[str, Any] | None = None) -> ProtocolConfig:
    name = str(protocol).lower()
    load_protocol(name)
    raw = dict(params or {})
    predicate = str(raw.get("predicate", DEFAULT_PREDICATE))
    load_predicate(predicate)
    return ProtocolConfig(
        name=name,
        predicate=predicate,
        withdrawals=bool(raw.get("withdrawals", True)),
    )


def parse_scenario_config(raw: Mapping[str, Any]) -> ScenarioConfig:
    protocol = str(raw.get("protocol", "bgp")).lower()
    protocol_params_all = dict(raw.get("protocol_params", {}))
    network_raw = dict(raw.get("network", {}))
    engine_raw = dict(raw.get("engine", {}))
    output_dir = raw.get("output_dir")

    return ScenarioConfig(
        name=str(raw.get("name", "run")),
        seed=int(raw.get("seed", 42)),
        destination=int(raw["destination"]),
        protocol=parse_protocol_config(protocol, protocol_params_all.get(protocol, {})),
        network=NetworkConfig(
            base_delay=int(network_raw.get("base_delay", 1)),
            jitter=int(network_raw.get("jitter", 0)),
        ),
        max_time=int(engine_raw.get("max_time", raw.get("max_time", 1000))),
        topology=dict(raw.get("topology", {})),
        output_dir=None if output_dir is None else str(output_dir),
    )


def load_scenario_config(path: str | Path) -> ScenarioConfig:
    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, Mapping):
        raise ValueError(f"Scenario file {path} must hold a mapping")
    return parse_scenario_config(raw)

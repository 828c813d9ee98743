from __future__ import annotations

import json
from pathlib import Path

import pytest

from ssbgp.core.engine import run_scenario
from ssbgp.protocols.registry import available_protocols
from ssbgp.runtime.config import load_scenario_config, parse_scenario_config

SCENARIO = """
name: bad_gadget
seed: 5
destination: 0
protocol: ssbgp
protocol_params:
  ssbgp:
    predicate: at_least_as_preferred
    withdrawals: false
network:
  base_delay: 1
  jitter: 0
engine:
  max_time: 80
topology:
  nodes: [0, 1, 2, 3]
  links:
    - {exporter: 0, importer: 1, local_preference: 100}
    - {exporter: 0, importer: 2, local_preference: 100}
    - {exporter: 0, importer: 3, local_preference: 100}
    - {exporter: 2, importer: 1, local_preference: 200}
    - {exporter: 3, importer: 2, local_preference: 200}
    - {exporter: 1, importer: 3, local_preference: 200}
""".strip()


def test_load_scenario_config_parses_protocol_params(tmp_path: Path) -> None:
    cfg_path = tmp_path / "scenario.yaml"
    cfg_path.write_text(SCENARIO, encoding="utf-8")
    cfg = load_scenario_config(cfg_path)

    assert cfg.name == "bad_gadget"
    assert cfg.destination == 0
    assert cfg.protocol.name == "ssbgp"
    assert cfg.protocol.withdrawals is False
    assert cfg.max_time == 80
    assert len(cfg.topology["links"]) == 6


def test_unknown_protocol_or_predicate_is_rejected() -> None:
    with pytest.raises(KeyError):
        parse_scenario_config({"destination": 0, "protocol": "ospf"})
    with pytest.raises(KeyError):
        parse_scenario_config(
            {"destination": 0, "protocol": "issbgp", "protocol_params": {"issbgp": {"predicate": "sometimes"}}}
        )


def test_run_scenario_writes_result_and_events(tmp_path: Path) -> None:
    cfg_path = tmp_path / "scenario.yaml"
    cfg_path.write_text(SCENARIO + f"\noutput_dir: {tmp_path / 'runs'}\n", encoding="utf-8")
    result = run_scenario(load_scenario_config(cfg_path))

    assert result.terminated is True
    run_dir = tmp_path / "runs" / "bad_gadget"
    payload = json.loads((run_dir / "result.json").read_text(encoding="utf-8"))
    assert payload["terminated"] is True
    assert payload["disabled_neighbors"] == {"1": [2], "2": [3], "3": [1]}
    assert {"exporter": 2, "importer": 1, "local_preference": 200} in payload["links"]
    assert (run_dir / "events.jsonl").exists()


def test_available_protocols_lists_all_variants() -> None:
    assert available_protocols() == ["bgp", "issbgp", "ssbgp"]


def test_scenario_file_must_hold_a_mapping(tmp_path: Path) -> None:
    cfg_path = tmp_path / "scenario.yaml"
    cfg_path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_scenario_config(cfg_path)

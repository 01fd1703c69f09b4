"""
Schema-oriented tests for the configuration template.

These tests provide early warnings if the template drifts away from what
the loader understands.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Set

from chainsim import SimulationSettings
from chainkit.residues import get_residue


def test_config_template_sections(config_template) -> None:
    required_sections: Set[str] = {"metadata", "force_field", "random", "chain"}
    assert required_sections.issubset(
        config_template
    ), f"Missing sections: {required_sections - set(config_template)}"


def test_force_field_keys_match_settings(config_template) -> None:
    known = {f.name for f in fields(SimulationSettings)}
    assert set(config_template["force_field"]) <= known


def test_chain_sequence_uses_known_residues(config_template) -> None:
    chain = config_template["chain"]
    assert chain["sequence"]
    for letter in chain["sequence"]:
        assert get_residue(letter) is not None
    assert len(chain["start"]) == 3
    assert len(chain["orientation"]) == 3

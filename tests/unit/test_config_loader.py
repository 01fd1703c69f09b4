"""Tests for the YAML settings loader."""

from __future__ import annotations

import textwrap

import pytest

from chainsim import BondLaw, ChargeLaw, InitialCondition, RepulsiveLaw
from chainkit.config_loader import load_settings_from_yaml


def write_config(tmp_path, body: str):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def test_loads_template(template_path) -> None:
    bundle = load_settings_from_yaml(template_path)
    assert bundle.metadata["name"] == "Template Chain"
    settings = bundle.force_field.settings
    assert settings.bond_law is BondLaw.FENE
    assert settings.charge_law is ChargeLaw.DEBYE
    assert settings.initial_condition is InitialCondition.SELF_AVOIDING_WALK
    assert bundle.polymer is not None
    assert bundle.polymer.n_monomers == 12
    assert bundle.polymer.sequence == "MKVLAAGIDEFW"


def test_template_seed_is_reproducible(template_path) -> None:
    first = load_settings_from_yaml(template_path)
    second = load_settings_from_yaml(template_path)
    assert first.polymer.positions() == second.polymer.positions()


def test_law_names_are_case_insensitive(tmp_path) -> None:
    path = write_config(
        tmp_path,
        """
        force_field:
          bond_law: Harmonic
          repulsive_law: LJ126
          initial_condition: line
          bond_length: 2
        chain:
          sequence: AKD
          orientation: [1, 0, 0]
        """,
    )
    bundle = load_settings_from_yaml(path)
    settings = bundle.force_field.settings
    assert settings.bond_law is BondLaw.HARMONIC
    assert settings.repulsive_law is RepulsiveLaw.LJ126
    assert settings.bond_length == pytest.approx(2.0)
    assert bundle.polymer.positions() == [(0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (4.0, 0.0, 0.0)]
    assert bundle.metadata == {}


def test_missing_sections_use_defaults(tmp_path) -> None:
    path = write_config(tmp_path, "metadata:\n  name: bare\n")
    bundle = load_settings_from_yaml(path)
    assert bundle.polymer is None
    assert bundle.force_field.settings.bond_law is BondLaw.FENE


def test_unknown_law_rejected(tmp_path) -> None:
    path = write_config(tmp_path, "force_field:\n  bond_law: rubber\n")
    with pytest.raises(ValueError, match="BondLaw"):
        load_settings_from_yaml(path)


def test_unknown_key_rejected(tmp_path) -> None:
    path = write_config(tmp_path, "force_field:\n  spring_constant: 3\n")
    with pytest.raises(ValueError, match="spring_constant"):
        load_settings_from_yaml(path)


def test_root_must_be_mapping(tmp_path) -> None:
    path = write_config(tmp_path, "- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_settings_from_yaml(path)


def test_bad_vector_rejected(tmp_path) -> None:
    path = write_config(
        tmp_path,
        """
        chain:
          sequence: AA
          start: [0, 1]
        """,
    )
    with pytest.raises(ValueError):
        load_settings_from_yaml(path)


def test_invalid_setting_value_rejected(tmp_path) -> None:
    path = write_config(tmp_path, "force_field:\n  timestep: 0\n")
    with pytest.raises(ValueError):
        load_settings_from_yaml(path)


@pytest.mark.parametrize(
    "body",
    [
        "force_field:\n  bond_length:\n",
        "force_field:\n  bond_law:\n",
        "force_field:\n  max_placement_attempts: many\n",
        "random:\n  seed:\n    - 1\n",
        "force_field: [1, 2]\n",
        "chain:\n  sequence:\n",
    ],
)
def test_malformed_values_raise_value_error(tmp_path, body) -> None:
    path = write_config(tmp_path, body)
    with pytest.raises(ValueError):
        load_settings_from_yaml(path)


def test_empty_sections_read_as_missing(tmp_path) -> None:
    path = write_config(tmp_path, "metadata:\nforce_field:\nrandom:\nchain:\n")
    bundle = load_settings_from_yaml(path)
    assert bundle.metadata == {}
    assert bundle.polymer is None
    assert bundle.force_field.settings.bond_law is BondLaw.FENE

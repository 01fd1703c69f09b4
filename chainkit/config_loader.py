"""
Utilities for building ChainSim force fields and chains from YAML files.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Type

import yaml

from chainsim import (
    BondLaw,
    BoundaryLaw,
    ChargeLaw,
    ForceField,
    HydrophobicLaw,
    InitialCondition,
    Polymer,
    RepulsiveLaw,
    SimulationSettings,
)


LAW_FIELDS: Dict[str, Type[Enum]] = {
    "bond_law": BondLaw,
    "repulsive_law": RepulsiveLaw,
    "hydrophobic_law": HydrophobicLaw,
    "charge_law": ChargeLaw,
    "boundary_law": BoundaryLaw,
    "initial_condition": InitialCondition,
}


@dataclass
class SettingsBundle:
    """Container returned by configuration loader."""

    force_field: ForceField
    metadata: Dict[str, Any]
    polymer: Optional[Polymer] = None


def load_settings_from_yaml(path: Path) -> SettingsBundle:
    """Load a ForceField, an optional chain and metadata from a YAML config."""
    data = _load_yaml(Path(path))
    settings = _build_settings(_section(data, "force_field"))
    seed = _section(data, "random").get("seed")
    force_field = ForceField(settings, seed=None if seed is None else _number("random.seed", seed, int))

    polymer = None
    chain = _section(data, "chain")
    if chain:
        polymer = _build_polymer(chain, force_field)

    return SettingsBundle(force_field=force_field, metadata=_section(data, "metadata"), polymer=polymer)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle)
    if not isinstance(content, dict):
        raise ValueError(f"YAML file {path} must contain a mapping at the root.")
    return content


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    # A key left empty in YAML loads as None; treat it like a missing section.
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"Section '{key}' must be a mapping, got {type(section).__name__}.")
    return section


def _number(key: str, value: Any, cast: Type[Any]) -> Any:
    if value is None:
        raise ValueError(f"'{key}' has no value.")
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be numeric, got {value!r}.") from None


def _build_settings(config: Dict[str, Any]) -> SimulationSettings:
    known = {f.name: f for f in fields(SimulationSettings)}
    unknown = set(config) - set(known)
    if unknown:
        raise ValueError(f"Unknown force_field keys: {sorted(unknown)}")

    kwargs: Dict[str, Any] = {}
    for key, value in config.items():
        if value is None:
            raise ValueError(f"force_field.{key} has no value.")
        if key in LAW_FIELDS:
            kwargs[key] = _parse_law(LAW_FIELDS[key], value)
        elif key == "max_placement_attempts":
            kwargs[key] = _number(f"force_field.{key}", value, int)
        else:
            kwargs[key] = _number(f"force_field.{key}", value, float)
    return SimulationSettings(**kwargs)


def _parse_law(enum_type: Type[Enum], value: Any) -> Enum:
    try:
        return enum_type(str(value).lower())
    except ValueError:
        options = ", ".join(member.value for member in enum_type)
        raise ValueError(f"Unknown {enum_type.__name__} '{value}'. Expected one of: {options}.") from None


def _build_polymer(config: Dict[str, Any], force_field: ForceField) -> Polymer:
    sequence = config.get("sequence")
    if not isinstance(sequence, str) or not sequence:
        raise ValueError("chain.sequence must be a non-empty string.")
    return Polymer(
        force_field,
        n_monomers=len(sequence),
        sequence=sequence,
        fixed_start=bool(config.get("fixed_start", False)),
        start=_tuple3(config.get("start", (0.0, 0.0, 0.0))),
        orientation=_tuple3(config.get("orientation", (0.0, 0.0, 1.0))),
    )


def _tuple3(value: Any) -> Tuple[float, float, float]:
    if not isinstance(value, Iterable) or isinstance(value, str):
        raise ValueError("Vector field must be iterable with 3 numbers.")
    values = list(value)
    if len(values) != 3:
        raise ValueError("Vector field must contain exactly 3 entries.")
    return float(values[0]), float(values[1]), float(values[2])

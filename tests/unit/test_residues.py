"""Sanity checks for the residue table."""

from __future__ import annotations

from chainkit.residues import RESIDUES, get_residue


def test_table_covers_standard_amino_acids() -> None:
    assert set(RESIDUES) == set("ACDEFGHIKLMNPQRSTVWY")


def test_residue_fields_are_in_range() -> None:
    for letter, entry in RESIDUES.items():
        assert 0.0 < entry["size"] <= 1.0, letter
        assert entry["charge"] in (-1.0, 0.0, 1.0), letter
        assert isinstance(entry["hydrophobic"], bool), letter


def test_lookup_is_case_insensitive() -> None:
    assert get_residue("k") is RESIDUES["K"]
    assert get_residue("Z") is None

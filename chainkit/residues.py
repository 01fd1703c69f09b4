"""Residue metadata keyed by one-letter amino-acid code."""

from __future__ import annotations

# size is in bond lengths, charge in e.
RESIDUES = {
    "A": {"name": "alanine", "size": 0.85, "charge": 0.0, "hydrophobic": True},
    "R": {"name": "arginine", "size": 1.0, "charge": 1.0, "hydrophobic": False},
    "N": {"name": "asparagine", "size": 0.9, "charge": 0.0, "hydrophobic": False},
    "D": {"name": "aspartate", "size": 0.9, "charge": -1.0, "hydrophobic": False},
    "C": {"name": "cysteine", "size": 0.88, "charge": 0.0, "hydrophobic": True},
    "Q": {"name": "glutamine", "size": 0.95, "charge": 0.0, "hydrophobic": False},
    "E": {"name": "glutamate", "size": 0.95, "charge": -1.0, "hydrophobic": False},
    "G": {"name": "glycine", "size": 0.8, "charge": 0.0, "hydrophobic": False},
    "H": {"name": "histidine", "size": 0.96, "charge": 0.0, "hydrophobic": False},
    "I": {"name": "isoleucine", "size": 0.96, "charge": 0.0, "hydrophobic": True},
    "L": {"name": "leucine", "size": 0.96, "charge": 0.0, "hydrophobic": True},
    "K": {"name": "lysine", "size": 0.98, "charge": 1.0, "hydrophobic": False},
    "M": {"name": "methionine", "size": 0.96, "charge": 0.0, "hydrophobic": True},
    "F": {"name": "phenylalanine", "size": 1.0, "charge": 0.0, "hydrophobic": True},
    "P": {"name": "proline", "size": 0.9, "charge": 0.0, "hydrophobic": False},
    "S": {"name": "serine", "size": 0.85, "charge": 0.0, "hydrophobic": False},
    "T": {"name": "threonine", "size": 0.9, "charge": 0.0, "hydrophobic": False},
    "W": {"name": "tryptophan", "size": 1.0, "charge": 0.0, "hydrophobic": True},
    "Y": {"name": "tyrosine", "size": 1.0, "charge": 0.0, "hydrophobic": False},
    "V": {"name": "valine", "size": 0.92, "charge": 0.0, "hydrophobic": True},
}


def get_residue(letter: str) -> dict | None:
    """Return metadata dict for a residue letter if known."""

    return RESIDUES.get(letter.upper())

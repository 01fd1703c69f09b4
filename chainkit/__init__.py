"""Support modules for ChainSim: residue data, YAML loading and logging setup."""

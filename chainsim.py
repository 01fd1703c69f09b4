"""
Bead-spring polymer core for ChainSim.

Unit conventions:
    - Lengths: bond lengths (b), so the default bond length is 1.0
    - Bead sizes: fractions of a bond length
    - Charges: elementary charge (e), scaled by coulomb_strength
    - Forces: reduced units, accumulated directly as displacements

Force laws are plain functions of a separation vector. A ForceField binds
one law per family at construction and exposes selector methods; a Polymer
owns its beads, builds the starting geometry and adds bonded forces into each
bead's pending displacement every step. Integration of those displacements
and the non-bonded pair loop belong to the driver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import math
import random
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from chainkit.residues import get_residue


logger = logging.getLogger(__name__)

Vector = Tuple[float, float, float]

WALL_SEPARATION_BONDS = 200.0
LJ96_CUTOFF_SQUARED = 1.5
SAME_RANGE_C_SQUARED = 3.0
EXP_REPULSIVE_CUTOFF_BONDS = 0.512
EXP_REPULSIVE_BETA_BONDS = 4.0
EXP_REPULSIVE_STRENGTH = 75.0


def vector_add(a: Vector, b: Vector) -> Vector:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vector_sub(a: Vector, b: Vector) -> Vector:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vector_scale(v: Vector, scalar: float) -> Vector:
    return (v[0] * scalar, v[1] * scalar, v[2] * scalar)


def vector_neg(v: Vector) -> Vector:
    return (-v[0], -v[1], -v[2])


def vector_dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def vector_length_squared(v: Vector) -> float:
    return v[0] * v[0] + v[1] * v[1] + v[2] * v[2]


def vector_length(v: Vector) -> float:
    return math.sqrt(vector_length_squared(v))


def vector_zero() -> Vector:
    return (0.0, 0.0, 0.0)


class BondLaw(str, Enum):
    HARMONIC = "harmonic"
    FENE = "fene"
    EXPONENTIAL = "exponential"


class RepulsiveLaw(str, Enum):
    LJ86 = "lj86"
    LJ126 = "lj126"
    LJ96 = "lj96"
    EXPONENTIAL = "exponential"


class HydrophobicLaw(str, Enum):
    LJ86 = "lj86"
    LJ126 = "lj126"
    LJ86_SAME_RANGE = "lj86_same_range"


class ChargeLaw(str, Enum):
    COULOMB = "coulomb"
    DEBYE = "debye"


class BoundaryLaw(str, Enum):
    NONE = "none"
    Z_WALL = "z_wall"


class InitialCondition(str, Enum):
    LINE = "line"
    SELF_AVOIDING_WALK = "self_avoiding_walk"
    RANDOM_WALK = "random_walk"


class ConfigurationUnsatisfiableError(RuntimeError):
    """Raised when a random or self-avoiding walk cannot place a bead within its retry budget."""


@dataclass(frozen=True)
class SimulationSettings:
    bond_law: BondLaw = BondLaw.FENE
    repulsive_law: RepulsiveLaw = RepulsiveLaw.LJ86
    hydrophobic_law: HydrophobicLaw = HydrophobicLaw.LJ86
    charge_law: ChargeLaw = ChargeLaw.DEBYE
    boundary_law: BoundaryLaw = BoundaryLaw.NONE
    initial_condition: InitialCondition = InitialCondition.SELF_AVOIDING_WALK
    bond_length: float = 1.0
    max_fene_length: float = 1.5
    lj_strength: float = 1.0
    hydrophobic_strength: float = 1.0
    hydrophobic_cutoff: float = 2.5
    coulomb_strength: float = 1.0
    debye_length: float = 1.0
    boundary_offset: float = 0.0
    timestep: float = 1e-3
    max_placement_attempts: int = 1000

    def __post_init__(self) -> None:
        for name in ("bond_length", "max_fene_length", "debye_length", "timestep"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}.")
        if self.max_placement_attempts < 1:
            raise ValueError("max_placement_attempts must be at least 1.")

    @property
    def max_fene_length_squared(self) -> float:
        return self.max_fene_length * self.max_fene_length

    @property
    def sqrt_dt(self) -> float:
        return math.sqrt(self.timestep)


@dataclass
class Telemetry:
    """Diagnostic counters bumped as a side effect of force evaluation."""

    bond_evaluations: int = 0
    bond_violations: int = 0
    repulsive_evaluations: int = 0

    @property
    def fene_violation_ratio(self) -> float:
        if self.bond_evaluations == 0:
            return 0.0
        return self.bond_violations / self.bond_evaluations

    def reset(self) -> None:
        self.bond_evaluations = 0
        self.bond_violations = 0
        self.repulsive_evaluations = 0


# Bond laws. r points from the neighbour to the bead receiving the force.


def harmonic_bond_force(r: Vector, settings: SimulationSettings, telemetry: Telemetry) -> Vector:
    return vector_neg(r)


def fene_bond_force(r: Vector, settings: SimulationSettings, telemetry: Telemetry) -> Vector:
    telemetry.bond_evaluations += 1
    mag_sq = vector_length_squared(r)
    max_sq = settings.max_fene_length_squared
    if mag_sq >= max_sq:
        telemetry.bond_violations += 1
        return harmonic_bond_force(r, settings, telemetry)
    return vector_scale(r, -1.0 / (1.0 - mag_sq / max_sq))


def exponential_bond_force(r: Vector, settings: SimulationSettings, telemetry: Telemetry) -> Vector:
    return vector_scale(r, -math.exp(vector_length_squared(r) / settings.max_fene_length_squared))


# Repulsive laws. size is in bond-length units.


def _lj86_magnitude(strength: float, c_squared: float, r_squared: float) -> float:
    cr = c_squared / r_squared
    return 0.5 * strength * (0.5 * cr**4 - cr**3)


def _lj126_magnitude(strength: float, c_squared: float, r_squared: float) -> float:
    cr3 = (c_squared / r_squared) ** 3
    return 0.75 * strength * (0.125 * cr3 * cr3 - cr3)


def lj86_repulsive_force(
    r: Vector, size: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    r_squared = vector_length_squared(r)
    c_squared = 3.0 * size * size
    if r_squared > c_squared / 2.0 or r_squared == 0.0:
        return vector_zero()
    magnitude = _lj86_magnitude(settings.lj_strength, c_squared, r_squared)
    telemetry.repulsive_evaluations += 1
    return vector_scale(r, magnitude / r_squared)


def lj126_repulsive_force(
    r: Vector, size: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    r_squared = vector_length_squared(r)
    c_squared = 3.0 * size * size
    if r_squared > c_squared / 2.0 or r_squared == 0.0:
        return vector_zero()
    magnitude = _lj126_magnitude(settings.lj_strength, c_squared, r_squared)
    telemetry.repulsive_evaluations += 1
    return vector_scale(r, magnitude / r_squared)


def lj96_repulsive_force(
    r: Vector, size: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    # Fixed cutoff; size is accepted for signature compatibility only.
    r_squared = vector_length_squared(r)
    if r_squared > LJ96_CUTOFF_SQUARED or r_squared == 0.0:
        return vector_zero()
    r3 = r_squared**1.5
    r6 = r_squared * r_squared * r_squared
    magnitude = settings.lj_strength * (27.0 * math.sqrt(1.5) / r3 - 18.0) / r6
    telemetry.repulsive_evaluations += 1
    return vector_scale(r, magnitude / r_squared)


def exponential_repulsive_force(
    r: Vector, size: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    r_mag = vector_length(r)
    cutoff = EXP_REPULSIVE_CUTOFF_BONDS * settings.bond_length
    if r_mag > cutoff or r_mag == 0.0:
        return vector_zero()
    beta = EXP_REPULSIVE_BETA_BONDS * settings.bond_length
    magnitude = 0.5 * EXP_REPULSIVE_STRENGTH * beta * math.exp(-beta * r_mag)
    return vector_scale(r, magnitude / r_mag)


# Cohesive (hydrophobic) laws.


def _hydrophobic_upper_squared(size: float, settings: SimulationSettings) -> float:
    reach = size * settings.bond_length * settings.hydrophobic_cutoff
    return reach * reach


def lj86_cohesive_force(
    r: Vector, size: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    r_squared = vector_length_squared(r)
    c_squared = 3.0 * size * size
    if r_squared == 0.0 or r_squared < c_squared / 2.0:
        return vector_zero()
    if r_squared > _hydrophobic_upper_squared(size, settings):
        return vector_zero()
    magnitude = _lj86_magnitude(settings.hydrophobic_strength, c_squared, r_squared)
    return vector_scale(r, magnitude / r_squared)


def lj126_cohesive_force(
    r: Vector, size: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    r_squared = vector_length_squared(r)
    c_squared = 3.0 * size * size
    if r_squared == 0.0 or r_squared < c_squared / 2.0:
        return vector_zero()
    if r_squared > _hydrophobic_upper_squared(size, settings):
        return vector_zero()
    magnitude = _lj126_magnitude(settings.hydrophobic_strength, c_squared, r_squared)
    return vector_scale(r, magnitude / r_squared)


def lj86_same_range_cohesive_force(
    r: Vector, size: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    """
    LJ(8,6) attraction whose range does not shrink with bead size.

    Smaller beads are shifted outward so that every pair sees the same
    well: the effective squared distance is padded by the gap between the
    bead surface and a full-size bead.
    """
    shrink = 1.0 - size
    d_squared = (
        vector_length_squared(r)
        + shrink * shrink * 1.5
        + 2.0 * vector_length(r) * shrink * settings.bond_length
    )
    reach = settings.bond_length * settings.hydrophobic_cutoff
    if d_squared < SAME_RANGE_C_SQUARED / 2.0 or d_squared > reach * reach:
        return vector_zero()
    cr = SAME_RANGE_C_SQUARED / d_squared
    magnitude = 0.75 * settings.hydrophobic_strength * (0.5 * cr**4 - cr**3)
    return vector_scale(r, magnitude / d_squared)


# Electrostatics. charge is the product of both bead charges.


def coulomb_force(
    r: Vector, charge: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    r_mag = vector_length(r)
    if r_mag == 0.0:
        return vector_zero()
    return vector_scale(r, settings.coulomb_strength * charge / (r_mag * r_mag * r_mag))


def debye_force(
    r: Vector, charge: float, settings: SimulationSettings, telemetry: Telemetry
) -> Vector:
    r_mag = vector_length(r)
    if r_mag == 0.0:
        return vector_zero()
    length = settings.debye_length
    screening = (1.0 / (r_mag * r_mag) + 1.0 / (length * r_mag)) * math.exp(-r_mag / length)
    return vector_scale(r, settings.coulomb_strength * charge * screening / r_mag)


class NormalSource(Protocol):
    def gauss(self, mu: float, sigma: float) -> float:
        ...


PairLaw = Callable[[Vector, float, SimulationSettings, Telemetry], Vector]

BOND_LAWS: Dict[BondLaw, Callable[[Vector, SimulationSettings, Telemetry], Vector]] = {
    BondLaw.HARMONIC: harmonic_bond_force,
    BondLaw.FENE: fene_bond_force,
    BondLaw.EXPONENTIAL: exponential_bond_force,
}

REPULSIVE_LAWS: Dict[RepulsiveLaw, PairLaw] = {
    RepulsiveLaw.LJ86: lj86_repulsive_force,
    RepulsiveLaw.LJ126: lj126_repulsive_force,
    RepulsiveLaw.LJ96: lj96_repulsive_force,
    RepulsiveLaw.EXPONENTIAL: exponential_repulsive_force,
}

HYDROPHOBIC_LAWS: Dict[HydrophobicLaw, PairLaw] = {
    HydrophobicLaw.LJ86: lj86_cohesive_force,
    HydrophobicLaw.LJ126: lj126_cohesive_force,
    HydrophobicLaw.LJ86_SAME_RANGE: lj86_same_range_cohesive_force,
}

CHARGE_LAWS: Dict[ChargeLaw, PairLaw] = {
    ChargeLaw.COULOMB: coulomb_force,
    ChargeLaw.DEBYE: debye_force,
}


class ForceField:
    """
    Binds one law per force family from the settings and owns the
    telemetry counters and random source those laws draw on.
    """

    def __init__(
        self,
        settings: Optional[SimulationSettings] = None,
        telemetry: Optional[Telemetry] = None,
        rng: Optional[NormalSource] = None,
        seed: Optional[int] = None,
    ):
        self.settings = settings or SimulationSettings()
        self.telemetry = telemetry or Telemetry()
        self.random: NormalSource = rng if rng is not None else random.Random(seed)
        self._bond = BOND_LAWS[self.settings.bond_law]
        self._repulsive = REPULSIVE_LAWS[self.settings.repulsive_law]
        self._cohesive = HYDROPHOBIC_LAWS[self.settings.hydrophobic_law]
        self._charge = CHARGE_LAWS[self.settings.charge_law]

    def bond(self, r: Vector) -> Vector:
        return self._bond(r, self.settings, self.telemetry)

    def repulsive(self, r: Vector, size: float) -> Vector:
        return self._repulsive(r, size, self.settings, self.telemetry)

    def cohesive(self, r: Vector, size: float) -> Vector:
        return self._cohesive(r, size, self.settings, self.telemetry)

    def charge(self, r: Vector, charge: float) -> Vector:
        return self._charge(r, charge, self.settings, self.telemetry)

    def external(self, r: Vector, size: float) -> Vector:
        """Wall force on a bead at position r."""
        if self.settings.boundary_law is BoundaryLaw.NONE:
            return vector_zero()
        lower = self.settings.boundary_offset
        upper = lower + WALL_SEPARATION_BONDS * self.settings.bond_length
        # r minus its projection onto each wall plane leaves only the z gap.
        from_upper = (0.0, 0.0, r[2] - upper)
        from_lower = (0.0, 0.0, r[2] - lower)
        return vector_add(self.repulsive(from_upper, size), self.repulsive(from_lower, size))

    def noise(self, stddev: Optional[float] = None) -> Vector:
        if stddev is None:
            stddev = self.settings.sqrt_dt
        return (
            self.random.gauss(0.0, stddev),
            self.random.gauss(0.0, stddev),
            self.random.gauss(0.0, stddev),
        )


@dataclass
class Particle:
    position: Vector
    species: str
    fixed: bool = False
    next_index: Optional[int] = None
    displacement: Vector = field(default_factory=vector_zero)
    size: float = 1.0
    charge: float = 0.0
    hydrophobic: bool = False


class PolylineRenderer(Protocol):
    def draw_polyline(self, points: List[Vector]) -> None:
        ...


class Polymer:
    """
    A single bead-spring chain.

    Beads are stored contiguously in ``chain`` and keep their indices for the
    lifetime of the polymer. Each consecutive pair is joined by one bond.
    """

    def __init__(
        self,
        force_field: ForceField,
        n_monomers: int,
        sequence: str,
        fixed_start: bool = False,
        start: Vector = (0.0, 0.0, 0.0),
        orientation: Vector = (0.0, 0.0, 1.0),
        particles: Optional[List[Particle]] = None,
    ):
        if n_monomers < 1:
            raise ValueError(f"A polymer needs at least one monomer, got {n_monomers}.")
        if len(sequence) != n_monomers:
            raise ValueError(
                f"Sequence length {len(sequence)} does not match monomer count {n_monomers}."
            )
        self.force_field = force_field
        self.n_monomers = n_monomers
        self.sequence = sequence
        self.chain: List[Particle] = []

        positions = self._initial_positions(start, orientation)
        for i, position in enumerate(positions):
            self.chain.append(self._make_particle(i, position, fixed_start))

        logger.debug(
            "Built %d-bead chain using %s placement",
            n_monomers,
            force_field.settings.initial_condition.value,
        )
        if particles is not None:
            particles.extend(self.chain)

    def _make_particle(self, index: int, position: Vector, fixed_start: bool) -> Particle:
        letter = self.sequence[index]
        residue = get_residue(letter)
        if residue is None:
            raise ValueError(f"Unknown residue '{letter}' at position {index}.")
        return Particle(
            position=position,
            species=letter,
            fixed=index == 0 and fixed_start,
            next_index=index + 1 if index < self.n_monomers - 1 else None,
            size=residue["size"],
            charge=residue["charge"],
            hydrophobic=residue["hydrophobic"],
        )

    def _initial_positions(self, start: Vector, orientation: Vector) -> List[Vector]:
        settings = self.force_field.settings
        n = self.n_monomers
        bond_length = settings.bond_length
        if settings.initial_condition is InitialCondition.LINE:
            return [vector_add(start, vector_scale(orientation, i * bond_length)) for i in range(n)]

        positions: List[Optional[Vector]] = [None] * n
        positions[n - 1] = start
        self_avoiding = settings.initial_condition is InitialCondition.SELF_AVOIDING_WALK
        for i in range(n - 2, -1, -1):
            anchor = positions[i + 1]
            for _ in range(settings.max_placement_attempts):
                step = self._random_step(bond_length)
                if step is None:
                    continue
                candidate = vector_add(anchor, step)
                if not self_avoiding or not self._overlaps(candidate, positions[i + 2 :]):
                    positions[i] = candidate
                    break
            else:
                logger.error(
                    "Could not place bead %d of %d after %d attempts",
                    i,
                    n,
                    settings.max_placement_attempts,
                )
                raise ConfigurationUnsatisfiableError(
                    f"Failed to place bead {i} after "
                    f"{settings.max_placement_attempts} attempts."
                )
        return positions  # type: ignore[return-value]

    def _random_step(self, bond_length: float) -> Optional[Vector]:
        step = self.force_field.noise(1.0)
        length = vector_length(step)
        if length == 0.0:
            # No direction to normalise; the caller counts this as a failed attempt.
            return None
        return vector_scale(step, bond_length / length)

    def _overlaps(self, candidate: Vector, placed: Iterable[Optional[Vector]]) -> bool:
        bond_length = self.force_field.settings.bond_length
        limit = bond_length * bond_length
        for other in placed:
            if vector_length_squared(vector_sub(other, candidate)) <= limit:  # type: ignore[arg-type]
                return True
        return False

    def simulate(self) -> None:
        """Add bonded forces to every bead's pending displacement."""
        if self.n_monomers < 2:
            return
        chain = self.chain
        bond = self.force_field.bond
        first, last = chain[0], chain[-1]
        first.displacement = vector_add(
            first.displacement, bond(vector_sub(first.position, chain[1].position))
        )
        for i in range(1, self.n_monomers - 1):
            bead = chain[i]
            pull_next = bond(vector_sub(bead.position, chain[i + 1].position))
            pull_prev = bond(vector_sub(bead.position, chain[i - 1].position))
            bead.displacement = vector_add(bead.displacement, vector_add(pull_next, pull_prev))
        last.displacement = vector_add(
            last.displacement, bond(vector_sub(last.position, chain[-2].position))
        )

    def positions(self) -> List[Vector]:
        return [bead.position for bead in self.chain]

    def end_to_end_distance_squared(self) -> float:
        return vector_length_squared(vector_sub(self.chain[0].position, self.chain[-1].position))

    def end_to_end_vector(self) -> Vector:
        if self.n_monomers == 1:
            return vector_zero()
        return vector_sub(self.chain[-1].position, self.chain[0].position)

    def centre_of_mass(self) -> Vector:
        total = vector_zero()
        for bead in self.chain:
            total = vector_add(total, bead.position)
        return vector_scale(total, 1.0 / self.n_monomers)

    def radius_of_gyration_squared(self) -> float:
        com = self.centre_of_mass()
        total = 0.0
        for bead in self.chain:
            total += vector_length_squared(vector_sub(bead.position, com))
        return total / self.n_monomers

    def average_bond_length_squared(self) -> float:
        if self.n_monomers == 1:
            return 0.0
        total = 0.0
        for i in range(1, self.n_monomers):
            total += vector_length_squared(
                vector_sub(self.chain[i].position, self.chain[i - 1].position)
            )
        return total / (self.n_monomers - 1)

    def draw(self, renderer: Optional[PolylineRenderer], scale: float = 1.0) -> None:
        if renderer is None:
            return
        renderer.draw_polyline([vector_scale(p, 1.0 / scale) for p in self.positions()])

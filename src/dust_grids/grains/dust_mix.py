"""
Dust mixes built from discretised grain populations.

A MultiGrainDustMix holds a list of grain populations, one per grain-size
bin. Populations are registered through add_populations, which splits a
size range into logarithmic bins and integrates the supplied size
distribution over each of them.

The WeingartnerDraineDustMix registers graphite, silicate, neutral PAH and
ionized PAH populations using the Weingartner & Draine (2001) size
distributions for either the Milky Way or the LMC.
"""

import math
from typing import Callable, List, NamedTuple

import numpy as np
from scipy.integrate import quad
from unyt import mh

from dust_grids.grains.compositions import (
    GrainComposition,
    draine_graphite,
    draine_ionized_pah,
    draine_neutral_pah,
    draine_silicate,
)
from dust_grids.grains.size_distributions import (
    SIZE_RANGES,
    Environment,
    GrainFamily,
    get_size_distribution,
)


class GrainPopulation(NamedTuple):
    """A single grain-size bin of one composition."""

    composition: GrainComposition
    amin: float  # m
    amax: float  # m
    dnda: Callable
    number_per_H: float
    mass_per_H: float  # kg


def integrate_size_distribution(
    dnda: Callable, amin: float, amax: float, moment: int = 0
) -> float:
    """
    Integrate a^moment dn/da over [amin, amax].

    The integral is carried out in ln(a), with a relative tolerance only
    since dn/da values are far below any sensible absolute tolerance.

    Args:
        dnda (callable)
            size distribution, function of the grain radius (m)
        amin (float)
            lower integration limit (m)
        amax (float)
            upper integration limit (m)
        moment (int)
            power of a in the integrand
    Returns:
        float
    """

    def integrand(lna):
        a = math.exp(lna)
        return a ** (moment + 1) * dnda(a)

    value, _ = quad(
        integrand,
        math.log(amin),
        math.log(amax),
        epsabs=0.0,
        epsrel=1e-8,
        limit=200,
    )
    return value


class MultiGrainDustMix:
    """
    Base class for dust mixes made of discrete grain populations.

    Subclasses implement setup_populations, which calls add_populations
    for each grain composition in the mix.
    """

    def __init__(self):
        self._populations: List[GrainPopulation] = []

    def setup(self):
        """(Re)build the list of grain populations."""
        self._populations = []
        try:
            self.setup_populations()
        except Exception:
            # Drop anything added before the failure
            self._populations = []
            raise
        return self

    def setup_populations(self):
        raise NotImplementedError(
            f"{type(self).__name__} must implement setup_populations"
        )

    def add_populations(
        self,
        composition: GrainComposition,
        amin: float,
        amax: float,
        dnda: Callable,
        num_sizes: int,
    ) -> List[GrainPopulation]:
        """
        Discretise a size distribution into num_sizes populations.

        Args:
            composition (GrainComposition)
                material shared by all the new populations
            amin (float)
                minimum grain radius (m)
            amax (float)
                maximum grain radius (m)
            dnda (callable)
                size distribution, dn/da per H nucleus per m
            num_sizes (int)
                number of logarithmic size bins
        Returns:
            the newly added populations
        """
        num_sizes = _check_num_sizes("num_sizes", num_sizes)
        if amin <= 0:
            raise ValueError(f"amin must be > 0, got {amin}")
        if amax <= amin:
            raise ValueError(
                f"amax must be larger than amin, got [{amin}, {amax}]"
            )
        if not callable(dnda):
            raise ValueError("dnda must be callable")

        edges = np.logspace(
            np.log10(amin), np.log10(amax), num=num_sizes + 1, endpoint=True
        )
        # Pin the outer edges to the exact requested range
        edges[0] = amin
        edges[-1] = amax

        rho = composition.bulk_density_si
        added = []
        for lo, hi in zip(edges[:-1], edges[1:]):
            number = integrate_size_distribution(dnda, lo, hi)
            volume = integrate_size_distribution(dnda, lo, hi, moment=3)
            added.append(
                GrainPopulation(
                    composition=composition,
                    amin=float(lo),
                    amax=float(hi),
                    dnda=dnda,
                    number_per_H=number,
                    mass_per_H=4.0 / 3.0 * math.pi * rho * volume,
                )
            )

        self._populations.extend(added)
        return added

    @property
    def populations(self) -> List[GrainPopulation]:
        return list(self._populations)

    @property
    def num_populations(self) -> int:
        return len(self._populations)

    def populations_for(self, name: str) -> List[GrainPopulation]:
        """Return the populations whose composition is called name."""
        return [p for p in self._populations if p.composition.name == name]

    def total_number_per_H(self) -> float:
        return sum(p.number_per_H for p in self._populations)

    def total_mass_per_H(self) -> float:
        """Total dust mass per H nucleus (kg)."""
        return sum(p.mass_per_H for p in self._populations)

    def dust_to_hydrogen_mass_ratio(self) -> float:
        return self.total_mass_per_H() / float(mh.to("kg").value)


def _check_num_sizes(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return int(value)


class WeingartnerDraineDustMix(MultiGrainDustMix):
    """
    Graphite, silicate and PAH populations following Weingartner & Draine
    (2001) for a Milky Way (R_V = 3.1) or LMC environment.

    The PAH size distribution is shared by the neutral and ionized PAH
    populations, each carrying half of the PAH abundance.
    """

    def __init__(
        self,
        environment=Environment.MILKY_WAY,
        num_graphite_sizes: int = 15,
        num_silicate_sizes: int = 15,
        num_pah_sizes: int = 10,
    ):
        super().__init__()
        self.environment = Environment(environment)
        self.num_graphite_sizes = _check_num_sizes(
            "num_graphite_sizes", num_graphite_sizes
        )
        self.num_silicate_sizes = _check_num_sizes(
            "num_silicate_sizes", num_silicate_sizes
        )
        self.num_pah_sizes = _check_num_sizes("num_pah_sizes", num_pah_sizes)

    def setup_populations(self):
        env = self.environment
        dnda_pah = get_size_distribution(GrainFamily.PAH, env)

        self.add_populations(
            draine_graphite(),
            *SIZE_RANGES[GrainFamily.GRAPHITE],
            get_size_distribution(GrainFamily.GRAPHITE, env),
            self.num_graphite_sizes,
        )
        self.add_populations(
            draine_silicate(),
            *SIZE_RANGES[GrainFamily.SILICATE],
            get_size_distribution(GrainFamily.SILICATE, env),
            self.num_silicate_sizes,
        )
        self.add_populations(
            draine_neutral_pah(),
            *SIZE_RANGES[GrainFamily.PAH],
            dnda_pah,
            self.num_pah_sizes,
        )
        self.add_populations(
            draine_ionized_pah(),
            *SIZE_RANGES[GrainFamily.PAH],
            dnda_pah,
            self.num_pah_sizes,
        )

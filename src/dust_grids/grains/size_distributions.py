"""
Analytic grain-size distributions for the Weingartner & Draine dust model.

Graphite and silicate grains follow the parameterised power law with a
curvature term and an exponential cutoff of Weingartner & Draine (2001),
PAH grains follow the two-component log-normal form of Li & Draine (2001).
All radii are in metres and all distributions return dn/da, the number of
grains per H nucleus per metre of radius.

Coefficients are taken from:
    - Table 1 p300 in Weingartner & Draine 2001, ApJ, 548, 296
      (Milky Way, R_V = 3.1, b_C = 6e-5)
    - Line 2 of Table 3 p305 in Weingartner & Draine 2001, ApJ, 548, 296
      (LMC average, b_C = 1e-5)
    - Table 3 p787 in Li & Draine 2001, ApJ, 554, 778
      (PAH log-normal centres and width)

For the LMC the PAH population uses the Milky Way centres and width with
1/6 of the total carbon abundance.
"""

from enum import Enum
from types import MappingProxyType
from typing import Callable, NamedTuple, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from scipy.special import erf

ArrayLike = Union[float, NDArray]


class Environment(Enum):
    """Interstellar medium regime selecting the fitted coefficients."""

    MILKY_WAY = "MilkyWay"
    LMC = "LMC"


class GrainFamily(Enum):
    GRAPHITE = "graphite"
    SILICATE = "silicate"
    PAH = "pah"


class GrasilCoefficients(NamedTuple):
    C: float
    at: float  # m
    ac: float  # m
    alpha: float
    beta: float


class PAHCoefficients(NamedTuple):
    sigma: float
    a0: Tuple[float, float]  # m
    bc: Tuple[float, float]


# Mass of a carbon atom (kg)
CARBON_ATOM_MASS = 1.9944e-26

# Mass density of graphite used for the PAH normalisation (kg m^-3)
PAH_MASS_DENSITY = 2.24e3

# Smallest PAH radius entering the log-normal normalisation (3.5 Angstrom)
PAH_NORMALISATION_AMIN = 3.5e-10

# Half of the PAH grains are neutral and half are ionized
PAH_NEUTRAL_FRACTION = 0.5

# Grain size ranges (amin, amax) for each family (m)
SIZE_RANGES = MappingProxyType(
    {
        GrainFamily.GRAPHITE: (1.0e-9, 1.0e-5),
        GrainFamily.SILICATE: (1.0e-9, 1.0e-5),
        GrainFamily.PAH: (3.548e-10, 1.0e-8),
    }
)

GRASIL_COEFFICIENTS = MappingProxyType(
    {
        (GrainFamily.GRAPHITE, Environment.MILKY_WAY): GrasilCoefficients(
            C=9.99e-12, at=0.0107e-6, ac=0.428e-6, alpha=-1.54, beta=-0.165
        ),
        (GrainFamily.GRAPHITE, Environment.LMC): GrasilCoefficients(
            C=3.51e-15, at=0.0980e-6, ac=0.641e-6, alpha=-2.99, beta=2.46
        ),
        (GrainFamily.SILICATE, Environment.MILKY_WAY): GrasilCoefficients(
            C=1.00e-13, at=0.164e-6, ac=0.1e-6, alpha=-2.21, beta=0.300
        ),
        (GrainFamily.SILICATE, Environment.LMC): GrasilCoefficients(
            C=1.78e-14, at=0.184e-6, ac=0.1e-6, alpha=-2.49, beta=0.345
        ),
    }
)

PAH_COEFFICIENTS = MappingProxyType(
    {
        Environment.MILKY_WAY: PAHCoefficients(
            sigma=0.4, a0=(3.5e-10, 30e-10), bc=(4.5e-5, 1.5e-5)
        ),
        Environment.LMC: PAHCoefficients(
            sigma=0.4, a0=(3.5e-10, 30e-10), bc=(0.75e-5, 0.25e-5)
        ),
    }
)


def dnda_grasil(
    a: ArrayLike,
    C: float,
    at: float,
    ac: float,
    alpha: float,
    beta: float,
) -> ArrayLike:
    """
    Parameterised graphite/silicate size distribution (WD01 eq. 4 and 6).

    The curvature term is (1 + beta a/at) for positive beta and
    1 / (1 - beta a/at) otherwise. The latter is singular where
    beta a/at = 1, which is never reached for the tabulated coefficients.

    Args:
        a (float or NDArray)
            grain radius (m)
        C (float)
            normalisation constant
        at (float)
            transition radius (m)
        ac (float)
            cutoff radius (m)
        alpha (float)
            power-law index
        beta (float)
            curvature parameter
    Returns:
        dn/da (float or NDArray)
            number of grains per H nucleus per m
    """
    a = np.asarray(a, dtype=float)

    f0 = C / a * (a / at) ** alpha
    if beta > 0:
        f1 = 1.0 + beta * a / at
    else:
        f1 = 1.0 / (1.0 - beta * a / at)
    # The cutoff is exactly 1 below the transition radius
    f2 = np.exp(-((np.maximum(a - at, 0.0) / ac) ** 3))

    return f0 * f1 * f2


def dnda_pah(
    a: ArrayLike,
    sigma: float,
    a0: Sequence[float],
    bc: Sequence[float],
) -> ArrayLike:
    """
    Log-normal PAH size distribution (Li & Draine 2001, eq. 2 and 3).

    Each component i is a log-normal centred on a0[i] whose normalisation
    B[i] is fixed by the carbon abundance per H nucleus bc[i] locked up in
    grains larger than 3.5 Angstrom.

    Args:
        a (float or NDArray)
            grain radius (m)
        sigma (float)
            width of the log-normals in ln-space
        a0 (sequence of float)
            centres of the log-normal components (m)
        bc (sequence of float)
            carbon atoms per H nucleus in each component
    Returns:
        dn/da (float or NDArray)
            number of grains per H nucleus per m
    """
    a = np.asarray(a, dtype=float)
    a0 = np.asarray(a0, dtype=float)
    bc = np.asarray(bc, dtype=float)

    t0 = 3.0 / (2.0 * np.pi) ** 1.5
    t1 = np.exp(-4.5 * sigma**2)
    t2 = 1.0 / (PAH_MASS_DENSITY * a0**3 * sigma)
    erffac = 3.0 * sigma / np.sqrt(2.0) + np.log(
        a0 / PAH_NORMALISATION_AMIN
    ) / (np.sqrt(2.0) * sigma)
    t3 = bc * CARBON_ATOM_MASS / (1.0 + erf(erffac))
    B = t0 * t1 * t2 * t3

    # Broadcast the components along a trailing axis and sum them
    a_ = a[..., np.newaxis]
    u = np.log(a_ / a0) / sigma
    return np.sum(B / a_ * np.exp(-0.5 * u**2), axis=-1)


def dnda_graphite_milky_way(a: ArrayLike) -> ArrayLike:
    coeffs = GRASIL_COEFFICIENTS[
        (GrainFamily.GRAPHITE, Environment.MILKY_WAY)
    ]
    return dnda_grasil(a, *coeffs)


def dnda_silicate_milky_way(a: ArrayLike) -> ArrayLike:
    coeffs = GRASIL_COEFFICIENTS[
        (GrainFamily.SILICATE, Environment.MILKY_WAY)
    ]
    return dnda_grasil(a, *coeffs)


def dnda_pah_milky_way(a: ArrayLike) -> ArrayLike:
    """PAH distribution for one charge state (neutral or ionized)."""
    coeffs = PAH_COEFFICIENTS[Environment.MILKY_WAY]
    return PAH_NEUTRAL_FRACTION * dnda_pah(a, *coeffs)


def dnda_graphite_lmc(a: ArrayLike) -> ArrayLike:
    coeffs = GRASIL_COEFFICIENTS[(GrainFamily.GRAPHITE, Environment.LMC)]
    return dnda_grasil(a, *coeffs)


def dnda_silicate_lmc(a: ArrayLike) -> ArrayLike:
    coeffs = GRASIL_COEFFICIENTS[(GrainFamily.SILICATE, Environment.LMC)]
    return dnda_grasil(a, *coeffs)


def dnda_pah_lmc(a: ArrayLike) -> ArrayLike:
    """PAH distribution for one charge state (neutral or ionized)."""
    coeffs = PAH_COEFFICIENTS[Environment.LMC]
    return PAH_NEUTRAL_FRACTION * dnda_pah(a, *coeffs)


SIZE_DISTRIBUTIONS = MappingProxyType(
    {
        (GrainFamily.GRAPHITE, Environment.MILKY_WAY): (
            dnda_graphite_milky_way
        ),
        (GrainFamily.SILICATE, Environment.MILKY_WAY): (
            dnda_silicate_milky_way
        ),
        (GrainFamily.PAH, Environment.MILKY_WAY): dnda_pah_milky_way,
        (GrainFamily.GRAPHITE, Environment.LMC): dnda_graphite_lmc,
        (GrainFamily.SILICATE, Environment.LMC): dnda_silicate_lmc,
        (GrainFamily.PAH, Environment.LMC): dnda_pah_lmc,
    }
)


def get_size_distribution(
    family: GrainFamily, environment: Environment
) -> Callable[[ArrayLike], ArrayLike]:
    """
    Return the size distribution bound to the coefficients of a grain
    family in a given environment.

    Args:
        family (GrainFamily)
            graphite, silicate or PAH
        environment (Environment)
            Milky Way or LMC
    Returns:
        dnda (callable)
            function of the grain radius (m) alone
    """
    return SIZE_DISTRIBUTIONS[(GrainFamily(family), Environment(environment))]

import math

import numpy as np
import pytest

from dust_grids.grains.size_distributions import (
    CARBON_ATOM_MASS,
    GRASIL_COEFFICIENTS,
    PAH_COEFFICIENTS,
    PAH_MASS_DENSITY,
    PAH_NORMALISATION_AMIN,
    SIZE_DISTRIBUTIONS,
    SIZE_RANGES,
    Environment,
    GrainFamily,
    dnda_graphite_lmc,
    dnda_graphite_milky_way,
    dnda_grasil,
    dnda_pah,
    dnda_pah_lmc,
    dnda_pah_milky_way,
    dnda_silicate_lmc,
    dnda_silicate_milky_way,
    get_size_distribution,
)

POSITIVE_BETA = [
    key for key, coeffs in GRASIL_COEFFICIENTS.items() if coeffs.beta > 0
]


def test_size_ranges():
    assert SIZE_RANGES[GrainFamily.GRAPHITE] == (1.0e-9, 1.0e-5)
    assert SIZE_RANGES[GrainFamily.SILICATE] == (1.0e-9, 1.0e-5)
    assert SIZE_RANGES[GrainFamily.PAH] == pytest.approx((3.548e-10, 1e-8))


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        SIZE_RANGES[GrainFamily.PAH] = (1e-9, 1e-8)
    with pytest.raises(TypeError):
        GRASIL_COEFFICIENTS[
            (GrainFamily.GRAPHITE, Environment.LMC)
        ] = GRASIL_COEFFICIENTS[(GrainFamily.GRAPHITE, Environment.MILKY_WAY)]


def test_literature_coefficients():
    gra_mw = GRASIL_COEFFICIENTS[(GrainFamily.GRAPHITE, Environment.MILKY_WAY)]
    assert gra_mw.C == 9.99e-12
    assert gra_mw.at == pytest.approx(0.0107e-6)
    assert gra_mw.ac == pytest.approx(0.428e-6)
    assert gra_mw.alpha == -1.54
    assert gra_mw.beta == -0.165

    sil_lmc = GRASIL_COEFFICIENTS[(GrainFamily.SILICATE, Environment.LMC)]
    assert sil_lmc.C == 1.78e-14
    assert sil_lmc.beta == 0.345

    assert PAH_COEFFICIENTS[Environment.MILKY_WAY].bc == (4.5e-5, 1.5e-5)
    assert PAH_COEFFICIENTS[Environment.LMC].bc == (0.75e-5, 0.25e-5)
    for coeffs in PAH_COEFFICIENTS.values():
        assert coeffs.sigma == 0.4
        assert coeffs.a0 == (3.5e-10, 30e-10)


@pytest.mark.parametrize("key", POSITIVE_BETA)
def test_grasil_positive_and_finite_for_positive_beta(key):
    a = np.logspace(-12, np.log10(5e-7), 200)
    values = dnda_grasil(a, *GRASIL_COEFFICIENTS[key])
    assert np.all(np.isfinite(values))
    assert np.all(values > 0)


def test_grasil_formula_below_and_above_transition():
    C, at, ac, alpha, beta = 1e-13, 0.164e-6, 0.1e-6, -2.21, 0.3

    a = 0.5 * at
    expected = C / a * (a / at) ** alpha * (1 + beta * a / at)
    assert dnda_grasil(a, C, at, ac, alpha, beta) == pytest.approx(expected)

    a = 1.5 * at
    expected = (
        C
        / a
        * (a / at) ** alpha
        * (1 + beta * a / at)
        * math.exp(-(((a - at) / ac) ** 3))
    )
    assert dnda_grasil(a, C, at, ac, alpha, beta) == pytest.approx(expected)


def test_grasil_negative_beta_curvature():
    C, at, ac, alpha, beta = 9.99e-12, 0.0107e-6, 0.428e-6, -1.54, -0.165
    a = 0.5 * at
    expected = C / a * (a / at) ** alpha / (1 - beta * a / at)
    assert dnda_grasil(a, C, at, ac, alpha, beta) == pytest.approx(expected)


@pytest.mark.parametrize("key", list(GRASIL_COEFFICIENTS))
def test_grasil_continuous_at_transition(key):
    coeffs = GRASIL_COEFFICIENTS[key]
    at = coeffs.at
    below = dnda_grasil(at * (1 - 1e-12), *coeffs)
    at_value = dnda_grasil(at, *coeffs)
    above = dnda_grasil(at * (1 + 1e-12), *coeffs)

    if coeffs.beta > 0:
        f1 = 1 + coeffs.beta
    else:
        f1 = 1 / (1 - coeffs.beta)
    assert at_value == pytest.approx(coeffs.C / at * f1, rel=1e-12)
    assert below == pytest.approx(at_value, rel=1e-9)
    assert above == pytest.approx(at_value, rel=1e-9)


def test_grasil_decreasing_in_cutoff_regime():
    at, ac = 0.0107e-6, 0.428e-6
    coeffs = (9.99e-12, at, ac, -1.54, -0.165)
    assert dnda_grasil(10 * at, *coeffs) < dnda_grasil(2 * at, *coeffs)

    a = np.logspace(np.log10(2 * at), np.log10(1e-5), 100)
    values = dnda_grasil(a, *coeffs)
    assert np.all(np.diff(values) <= 0)


def test_grasil_scalar_in_scalar_out():
    value = dnda_graphite_milky_way(1e-8)
    assert np.ndim(value) == 0
    assert isinstance(float(value), float)


def _pah_normalisation(sigma, a0, bc):
    t0 = 3.0 / (2 * math.pi) ** 1.5
    t1 = math.exp(-4.5 * sigma * sigma)
    t2 = 1.0 / PAH_MASS_DENSITY / a0**3 / sigma
    erffac = 3.0 * sigma / math.sqrt(2.0) + math.log(
        a0 / PAH_NORMALISATION_AMIN
    ) / math.sqrt(2.0) / sigma
    t3 = bc * CARBON_ATOM_MASS / (1.0 + math.erf(erffac))
    return t0 * t1 * t2 * t3


def test_pah_single_component_at_centre():
    sigma, a0, bc = 0.4, (3.5e-10, 30e-10), (4.5e-5, 0.0)
    B0 = _pah_normalisation(sigma, a0[0], bc[0])
    value = dnda_pah(a0[0], sigma, a0, bc)
    assert value == pytest.approx(B0 / a0[0], rel=1e-12)


def test_pah_first_term_peaks_at_centre():
    sigma, a0, bc = 0.4, (3.5e-10, 30e-10), (4.5e-5, 0.0)
    peak = a0[0] * dnda_pah(a0[0], sigma, a0, bc)
    for a in (a0[0] * 1.05, a0[0] / 1.05, a0[0] * 2, a0[0] / 2):
        assert a * dnda_pah(a, sigma, a0, bc) < peak


def test_pah_sum_of_components():
    sigma, a0, bc = 0.4, (3.5e-10, 30e-10), (4.5e-5, 1.5e-5)
    a = 1e-9
    expected = 0.0
    for i in range(2):
        u = math.log(a / a0[i]) / sigma
        expected += (
            _pah_normalisation(sigma, a0[i], bc[i]) / a * math.exp(-0.5 * u**2)
        )
    assert dnda_pah(a, sigma, a0, bc) == pytest.approx(expected, rel=1e-12)


def test_pah_vectorised_matches_scalar():
    a = np.logspace(np.log10(3.548e-10), -8, 25)
    values = dnda_pah_milky_way(a)
    assert values.shape == a.shape
    for ai, vi in zip(a, values):
        assert vi == pytest.approx(dnda_pah_milky_way(ai), rel=1e-14)


def test_pah_bound_functions_carry_charge_split():
    coeffs = PAH_COEFFICIENTS[Environment.MILKY_WAY]
    a = 5e-10
    assert dnda_pah_milky_way(a) == pytest.approx(
        0.5 * dnda_pah(a, *coeffs), rel=1e-15
    )


def test_pah_lmc_is_one_sixth_of_milky_way():
    ratio = (0.75e-5 + 0.25e-5) / (4.5e-5 + 1.5e-5)
    assert ratio == pytest.approx(1.0 / 6.0)

    a = np.logspace(np.log10(3.548e-10), -8, 50)
    np.testing.assert_allclose(
        dnda_pah_lmc(a), ratio * dnda_pah_milky_way(a), rtol=1e-9
    )


@pytest.mark.parametrize(
    "family, environment, expected",
    [
        (GrainFamily.GRAPHITE, Environment.MILKY_WAY, dnda_graphite_milky_way),
        (GrainFamily.SILICATE, Environment.MILKY_WAY, dnda_silicate_milky_way),
        (GrainFamily.PAH, Environment.MILKY_WAY, dnda_pah_milky_way),
        (GrainFamily.GRAPHITE, Environment.LMC, dnda_graphite_lmc),
        (GrainFamily.SILICATE, Environment.LMC, dnda_silicate_lmc),
        (GrainFamily.PAH, Environment.LMC, dnda_pah_lmc),
    ],
)
def test_get_size_distribution(family, environment, expected):
    assert get_size_distribution(family, environment) is expected
    assert get_size_distribution(family.value, environment.value) is expected


def test_bound_grasil_functions_use_table():
    a = 3e-8
    for (family, env), dnda in SIZE_DISTRIBUTIONS.items():
        if family is GrainFamily.PAH:
            continue
        coeffs = GRASIL_COEFFICIENTS[(family, env)]
        assert dnda(a) == dnda_grasil(a, *coeffs)


def test_unknown_environment():
    with pytest.raises(ValueError):
        get_size_distribution(GrainFamily.GRAPHITE, "SMC")

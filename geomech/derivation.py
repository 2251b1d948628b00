"""
Derivation Engine
Computes elastic moduli, impedances, ratios, gradients and overburden stress
for a depth-ordered sequence of samples.

Assumes an isotropic, linear-elastic medium in SI units. Degenerate formulas
(near-zero denominators, zero spans) yield NaN for that field only; nothing
here raises on numeric edge cases.

References:
    Mavko, Mukerji, Dvorkin (2009) The Rock Physics Handbook
"""

from typing import Dict, List, Sequence

import numpy as np
from scipy.integrate import cumulative_trapezoid

from geomech.config import DENOMINATOR_EPSILON, GRAVITY
from geomech.models import OUTPUT_FIELDS, SENTINEL, DerivedSample, PreparedSample


def vertical_stress(depth: np.ndarray, density: np.ndarray, gravity: float = GRAVITY) -> np.ndarray:
    """
    Overburden stress by trapezoidal integration of density over depth.

    The first (shallowest) sample is the zero-stress reference.

    Args:
        depth: Depths in m, ascending
        density: Bulk densities in kg/m^3
        gravity: Gravitational acceleration in m/s^2

    Returns:
        Vertical stress in Pa
    """
    if len(depth) < 2:
        return np.zeros(len(depth))
    return cumulative_trapezoid(density, depth, initial=0.0) * gravity


def poisson_from_velocities(vp: np.ndarray, vs: np.ndarray) -> np.ndarray:
    """nu = (Vp^2 - 2Vs^2) / (2(Vp^2 - Vs^2)); NaN where the denominator vanishes."""
    vp2 = vp ** 2
    vs2 = vs ** 2
    denom = 2.0 * (vp2 - vs2)
    with np.errstate(divide='ignore', invalid='ignore'):
        nu = (vp2 - 2.0 * vs2) / denom
    return np.where(np.abs(denom) < DENOMINATOR_EPSILON, SENTINEL, nu)


def poisson_from_moduli(bulk: np.ndarray, shear: np.ndarray) -> np.ndarray:
    """nu = (3K - 2G) / (2(3K + G)); NaN where the denominator vanishes."""
    denom = 2.0 * (3.0 * bulk + shear)
    with np.errstate(divide='ignore', invalid='ignore'):
        nu = (3.0 * bulk - 2.0 * shear) / denom
    return np.where(np.abs(denom) < DENOMINATOR_EPSILON, SENTINEL, nu)


def impedance_gradient(depth: np.ndarray, impedance: np.ndarray) -> np.ndarray:
    """
    dZ/dz by finite differences.

    Interior samples use the centered difference, the first and last samples
    the forward and backward difference. NaN where the depth span is zero or
    fewer than two samples exist.
    """
    n = len(depth)
    if n < 2:
        return np.full(n, SENTINEL)

    num = np.empty(n)
    span = np.empty(n)
    num[0] = impedance[1] - impedance[0]
    span[0] = depth[1] - depth[0]
    num[-1] = impedance[-1] - impedance[-2]
    span[-1] = depth[-1] - depth[-2]
    if n > 2:
        num[1:-1] = impedance[2:] - impedance[:-2]
        span[1:-1] = depth[2:] - depth[:-2]

    with np.errstate(divide='ignore', invalid='ignore'):
        grad = num / span
    return np.where(span != 0, grad, SENTINEL)


def min_max_normalize(values: np.ndarray) -> np.ndarray:
    """
    Scale finite values to [0, 1] using the global min and max.

    NaN for non-finite entries, or everywhere when no finite values exist or
    they are all equal.
    """
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return np.full(len(values), SENTINEL)
    v_min = finite.min()
    v_max = finite.max()
    if v_max == v_min:
        return np.full(len(values), SENTINEL)
    with np.errstate(invalid='ignore'):
        scaled = (values - v_min) / (v_max - v_min)
    return np.where(np.isfinite(values), scaled, SENTINEL)


def compute_arrays(depth, density, vp, vs) -> Dict[str, np.ndarray]:
    """
    Compute every output field as numpy arrays.

    Args:
        depth, density, vp, vs: Equal-length 1-D sequences in SI units, depth ascending

    Returns:
        Dictionary keyed by OUTPUT_FIELDS
    """
    depth = np.asarray(depth, dtype=float)
    rho = np.asarray(density, dtype=float)
    vp = np.asarray(vp, dtype=float)
    vs = np.asarray(vs, dtype=float)
    n = len(depth)

    # Extreme inputs overflow to inf quietly
    with np.errstate(over='ignore', divide='ignore', invalid='ignore'):
        vp2 = vp ** 2
        vs2 = vs ** 2

        shear = rho * vs2
        bulk = rho * (vp2 - (4.0 / 3.0) * vs2)
        lame = rho * (vp2 - 2.0 * vs2)

        poisson = poisson_from_velocities(vp, vs)
        young = np.where(np.isfinite(poisson), 2.0 * shear * (1.0 + poisson), SENTINEL)

        acoustic_z = rho * vp
        shear_z = rho * vs

        delta_z = np.zeros(n)
        if n > 1:
            delta_z[1:] = np.diff(acoustic_z)

        vp_vs = np.where(vs != 0, vp / vs, SENTINEL)
        lambda_mu = np.where(shear != 0, lame / shear, SENTINEL)

        return {
            'depth': depth,
            'density': rho,
            'vp': vp,
            'vs': vs,
            'vertical_stress': vertical_stress(depth, rho),
            'shear_modulus': shear,
            'bulk_modulus': bulk,
            'lame_lambda': lame,
            'youngs_modulus': young,
            'poisson_ratio': poisson,
            'acoustic_impedance': acoustic_z,
            'shear_impedance': shear_z,
            'p_modulus': rho * vp2,
            'vp_vs_ratio': vp_vs,
            'impedance_gradient': impedance_gradient(depth, acoustic_z),
            'delta_impedance_prev': delta_z,
            'lambda_over_mu': lambda_mu,
            'poisson_from_moduli': poisson_from_moduli(bulk, shear),
            'brittleness_e': min_max_normalize(young),
        }


def compute_parameters(samples: Sequence[PreparedSample]) -> List[DerivedSample]:
    """
    Derive geomechanical parameters for each sample.

    Args:
        samples: PreparedSample sequence sorted by ascending depth

    Returns:
        List of DerivedSample, index-aligned with the input
    """
    if not samples:
        return []

    arrays = compute_arrays(
        [s.depth for s in samples],
        [s.density for s in samples],
        [s.vp for s in samples],
        [s.vs for s in samples],
    )
    columns = [arrays[name].tolist() for name in OUTPUT_FIELDS]
    return [DerivedSample(*values) for values in zip(*columns)]

"""Asymmetric generalized Gaussian (AGGD) fitting for NSS features.

Parameters are estimated by moment matching: the normalized second-to-first
moment ratio of the sample is looked up in a precomputed table of the same
ratio over candidate shape values.
"""

from dataclasses import dataclass
import numpy as np
from scipy.special import gamma

# Candidate shape values and their moment ratios
SHAPE_TABLE = np.arange(0.2, 10.001, 0.001)
_RECIPROCAL = np.reciprocal(SHAPE_TABLE)
RATIO_TABLE = np.square(gamma(2 * _RECIPROCAL)) / (gamma(_RECIPROCAL) * gamma(3 * _RECIPROCAL))

# Shape returned for zero-energy input (a Gaussian)
DEGENERATE_SHAPE = 2.0


@dataclass(frozen=True)
class AGGDParams:
    """Fitted AGGD parameters."""
    alpha: float
    mean: float
    left_var: float
    right_var: float
    
    def to_list(self) -> list:
        """Feature sub-vector in canonical order."""
        return [self.alpha, self.mean, self.left_var, self.right_var]


def estimate_aggd(values: np.ndarray) -> AGGDParams:
    """Fit an AGGD to the samples in `values`.
    
    Args:
        values: Array of samples, any shape
        
    Returns:
        AGGDParams with shape, mean and left/right variances
    """
    x = np.asarray(values, dtype=np.float64).ravel()
    energy = np.mean(x ** 2) if x.size else 0.0
    if energy == 0.0:
        return AGGDParams(DEGENERATE_SHAPE, 0.0, 0.0, 0.0)
    
    left = x[x < 0]
    right = x[x > 0]
    left_std = np.sqrt(np.mean(left ** 2)) if left.size else 0.0
    right_std = np.sqrt(np.mean(right ** 2)) if right.size else 0.0
    
    # One-sided samples: treat as symmetric for the shape lookup
    if left_std > 0 and right_std > 0:
        gammahat = left_std / right_std
    else:
        gammahat = 1.0
    
    rhat = np.mean(np.abs(x)) ** 2 / energy
    rhatnorm = rhat * (gammahat ** 3 + 1) * (gammahat + 1) / ((gammahat ** 2 + 1) ** 2)
    alpha = float(SHAPE_TABLE[np.argmin((RATIO_TABLE - rhatnorm) ** 2)])
    
    constant = np.sqrt(gamma(1 / alpha) / gamma(3 / alpha))
    beta_l = left_std * constant
    beta_r = right_std * constant
    mean = (beta_r - beta_l) * gamma(2 / alpha) / gamma(1 / alpha)
    
    return AGGDParams(alpha, float(mean), float(left_std ** 2), float(right_std ** 2))

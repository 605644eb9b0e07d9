"""Ordinary least squares for the AR(4) model.

Coefficients are solved through the normal equations
beta = (X'X)^-1 X'y, with the 5x5 inverse computed by Gauss-Jordan
elimination with partial pivoting. A (near-)singular X'X falls back to
the identity matrix, which makes the fit degrade to beta = X'y; the
resulting R² is what keeps such fits from emitting signals.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from core.alpha.ar4.models import AR_ORDER, MIN_FIT_RETURNS, AR4Coefficients

logger = logging.getLogger(__name__)

SINGULAR_PIVOT = 1e-10


def invert_matrix(matrix: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """
    Invert a small square matrix.

    Args:
        matrix: Square matrix

    Returns:
        The inverse, or the identity matrix if a pivot falls below 1e-10
    """
    a = np.array(matrix, dtype=float)
    n = a.shape[0]
    if a.ndim != 2 or a.shape[1] != n:
        raise ValueError(f"matrix must be square, got shape {a.shape}")

    aug = np.hstack([a, np.eye(n)])

    for i in range(n):
        pivot_row = i + int(np.argmax(np.abs(aug[i:, i])))
        if pivot_row != i:
            aug[[i, pivot_row]] = aug[[pivot_row, i]]

        if abs(aug[i, i]) < SINGULAR_PIVOT:
            logger.warning(f"Singular matrix (pivot {aug[i, i]:.3e} at row {i}), using identity")
            return np.eye(n)

        aug[i] = aug[i] / aug[i, i]
        for k in range(n):
            if k != i:
                aug[k] = aug[k] - aug[k, i] * aug[i]

    return aug[:, n:]


def fit_ar4(returns: Sequence[float]) -> AR4Coefficients:
    """
    Fit an AR(4) model with an intercept.

    Args:
        returns: Chronological return history

    Returns:
        Fitted coefficients with R² clamped to [0, 1]. All zeros when
        fewer than 10 returns are given.
    """
    if len(returns) < MIN_FIT_RETURNS:
        return AR4Coefficients()

    r = np.asarray(returns, dtype=float)
    n = len(r)

    # Row for target r[i]: [1, r[i-1], r[i-2], r[i-3], r[i-4]]
    x = np.column_stack(
        [np.ones(n - AR_ORDER)] + [r[AR_ORDER - lag:n - lag] for lag in range(1, AR_ORDER + 1)]
    )
    y = r[AR_ORDER:]

    beta = invert_matrix(x.T @ x) @ (x.T @ y)

    y_pred = x @ beta
    ss_res = float(np.sum((y - y_pred) ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    r_squared = 0.0 if ss_tot == 0 else 1.0 - ss_res / ss_tot

    return AR4Coefficients(
        beta0=float(beta[0]),
        beta1=float(beta[1]),
        beta2=float(beta[2]),
        beta3=float(beta[3]),
        beta4=float(beta[4]),
        r_squared=max(0.0, min(1.0, r_squared)),
    )


def predict_ar4(coefficients: AR4Coefficients, recent_returns: Sequence[float]) -> float:
    """Predict the next return from ``[r(t-1), r(t-2), r(t-3), r(t-4)]``."""
    if len(recent_returns) != AR_ORDER:
        raise ValueError(f"need {AR_ORDER} recent returns, got {len(recent_returns)}")

    c = coefficients
    return (
        c.beta0
        + c.beta1 * recent_returns[0]
        + c.beta2 * recent_returns[1]
        + c.beta3 * recent_returns[2]
        + c.beta4 * recent_returns[3]
    )

"""Tests for the AR(4) alpha and its regression helpers."""

import math
import random

import numpy as np
import pytest

from core.alpha.ar4 import (
    AR4Alpha,
    AR4Coefficients,
    AR4Config,
    AR4State,
    ar4_step,
    fit_ar4,
    invert_matrix,
    predict_ar4,
)
from core.models import FeatureVector


def make_features(t: int, ret: float | None, **vals) -> FeatureVector:
    if ret is not None:
        vals["return_1"] = ret
    return FeatureVector(t=t, exch="binance", symbol="BTCUSDT", tf="1m", vals=vals)


def ar_series(n: int, seed: int = 7) -> list[float]:
    """Strongly autocorrelated returns: slow sinusoid plus small noise."""
    rng = random.Random(seed)
    return [0.01 * math.sin(i / 3.0) + rng.gauss(0.0, 0.0005) for i in range(n)]


# =============================================================================
# Regression
# =============================================================================

class TestInvertMatrix:
    def test_two_by_two(self):
        inv = invert_matrix([[4.0, 7.0], [2.0, 6.0]])
        expected = np.array([[0.6, -0.7], [-0.2, 0.4]])
        assert np.allclose(inv, expected)

    def test_needs_pivoting(self):
        m = [[0.0, 1.0], [1.0, 0.0]]
        assert np.allclose(invert_matrix(m) @ np.array(m), np.eye(2))

    def test_singular_returns_identity(self):
        assert np.array_equal(invert_matrix([[1.0, 2.0], [2.0, 4.0]]), np.eye(2))

    def test_non_square_rejected(self):
        with pytest.raises(ValueError):
            invert_matrix([[1.0, 2.0, 3.0]])


class TestFitAR4:
    def test_too_few_returns(self):
        assert fit_ar4([0.01] * 9) == AR4Coefficients()

    def test_constant_returns_zero_r_squared(self):
        assert fit_ar4([0.001] * 50).r_squared == 0.0

    def test_fits_autocorrelated_series(self):
        coefs = fit_ar4(ar_series(100))
        assert coefs.r_squared > 0.5
        assert 0.0 <= coefs.r_squared <= 1.0

    def test_recovers_known_ar_process(self):
        # r_t = 0.001 + 0.5 r(t-1) - 0.2 r(t-2) + noise
        rng = random.Random(1)
        r = [0.0, 0.0, 0.0, 0.0]
        for _ in range(3000):
            r.append(0.001 + 0.5 * r[-1] - 0.2 * r[-2] + rng.gauss(0.0, 0.001))
        coefs = fit_ar4(r)
        assert coefs.beta0 == pytest.approx(0.001, abs=2e-4)
        assert coefs.beta1 == pytest.approx(0.5, abs=0.08)
        assert coefs.beta2 == pytest.approx(-0.2, abs=0.08)
        assert coefs.beta3 == pytest.approx(0.0, abs=0.08)

    def test_predict(self):
        coefs = AR4Coefficients(beta0=0.001, beta1=0.5, beta2=0.0, beta3=0.0, beta4=-0.1)
        assert predict_ar4(coefs, [0.01, 0.0, 0.0, 0.02]) == pytest.approx(0.001 + 0.005 - 0.002)

    def test_predict_wrong_arity(self):
        with pytest.raises(ValueError):
            predict_ar4(AR4Coefficients(), [0.1, 0.2])


# =============================================================================
# Transition function
# =============================================================================

class TestAR4Step:
    def test_missing_return_leaves_state(self):
        state = AR4State(returns=(0.01,))
        new_state, signal = ar4_step(state, AR4Config(), make_features(1, None))
        assert new_state is state
        assert signal is None

    def test_nan_return_leaves_state(self):
        state = AR4State()
        new_state, signal = ar4_step(state, AR4Config(), make_features(1, float("nan")))
        assert new_state is state
        assert signal is None

    def test_history_bounded_by_fit_window(self):
        config = AR4Config(fit_window=30)
        state = AR4State()
        for i, r in enumerate(ar_series(50)):
            state, _ = ar4_step(state, config, make_features(i + 1, r))
        assert len(state.returns) == 30
        assert state.returns[-1] == ar_series(50)[-1]

    def test_first_observation_fits_immediately(self):
        state, signal = ar4_step(AR4State(), AR4Config(), make_features(1, 0.01))
        assert state.coefficients == AR4Coefficients()
        assert signal is None

    def test_refits_every_twenty_returns(self):
        config = AR4Config(min_r_squared=0.0)
        returns = ar_series(40)
        state = AR4State()
        for i, r in enumerate(returns[:19]):
            state, _ = ar4_step(state, config, make_features(i + 1, r))
        # Fit from the first observation is kept until the 20th return
        assert state.coefficients == AR4Coefficients()

        state, _ = ar4_step(state, config, make_features(20, returns[19]))
        assert state.coefficients == fit_ar4(returns[:20])

    def test_no_signal_below_min_r_squared(self):
        state = AR4State(returns=tuple([0.001] * 19))
        state, signal = ar4_step(state, AR4Config(), make_features(20, 0.001))
        assert state.coefficients.r_squared == 0.0
        assert signal is None

    def test_emits_signal_on_good_fit(self):
        config = AR4Config()
        state = AR4State()
        signal = None
        for i, r in enumerate(ar_series(100)):
            state, signal = ar4_step(state, config, make_features(1000 + i, r))

        assert signal is not None
        assert signal.id == "ar4-1099"
        assert signal.t == 1099
        assert -1.0 <= signal.score <= 1.0
        assert signal.conf == state.coefficients.r_squared
        assert signal.horizon_sec == 300
        assert signal.explain.startswith("AR(4) predicted return: ")
        assert f"R²: {state.coefficients.r_squared:.3f}" in signal.explain

    def test_score_is_clamped(self):
        coefs = AR4Coefficients(beta0=0.5, r_squared=0.9)
        state = AR4State(returns=(0.0, 0.0, 0.0), coefficients=coefs)
        _, signal = ar4_step(state, AR4Config(), make_features(5, 0.0))
        assert signal.score == 1.0
        assert signal.conf == 0.9


# =============================================================================
# Stateful wrapper
# =============================================================================

class TestAR4Alpha:
    def test_name_and_initial_state(self):
        alpha = AR4Alpha()
        assert alpha.name == "ar4"
        assert alpha.state == AR4State()
        assert alpha.coefficients is None

    def test_generate_matches_step(self):
        alpha = AR4Alpha()
        state = AR4State()
        for i, r in enumerate(ar_series(60)):
            features = make_features(i + 1, r)
            expected_state, expected = ar4_step(state, alpha.config, features)
            got = alpha.generate_signal(features)
            state = expected_state
            assert got == expected
        assert alpha.state == state

    def test_reset(self):
        alpha = AR4Alpha()
        for i, r in enumerate(ar_series(25)):
            alpha.generate_signal(make_features(i + 1, r))
        alpha.reset()
        assert alpha.state == AR4State()

    def test_restore_reproduces_output(self):
        a = AR4Alpha()
        for i, r in enumerate(ar_series(60)):
            a.generate_signal(make_features(i + 1, r))

        b = AR4Alpha()
        b.restore(a.state)
        nxt = make_features(61, 0.004)
        assert a.generate_signal(nxt) == b.generate_signal(nxt)

    def test_restore_rejects_oversized_history(self):
        alpha = AR4Alpha(AR4Config(fit_window=10))
        with pytest.raises(ValueError):
            alpha.restore(AR4State(returns=tuple([0.0] * 11)))

    def test_config_validation(self):
        with pytest.raises(ValueError):
            AR4Config(min_r_squared=1.5)
        with pytest.raises(ValueError):
            AR4Config(fit_window=0)

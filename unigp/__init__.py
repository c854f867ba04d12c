"""unigp package.

English:
    Bayesian optimization of an expensive 1-D black-box function with a
    hand-built Gaussian Process surrogate. The kernel matrix is grown one
    sample at a time, the acquisition function is maximized piecewise
    between existing samples, and every iteration produces a new frozen
    optimization state.

日本語:
    ガウス過程サロゲートを用いた1次元ブラックボックス関数のベイズ最適化です。
    カーネル行列はサンプルごとに拡張し、獲得関数は既存サンプルで区切った
    区間ごとに最大化します。各反復で新しい（不変の）状態を返します。
"""

from .version import __version__
from .gp.covariance import Matern12, Matern32, Matern52, SquaredExponential, SklearnCovariance, make_covariance
from .gp.kernel import NumericalInstabilityError
from .gp.posterior import posterior, posterior_mean, posterior_std
from .gp.state import OptimizationState, SampleSet, zero_mean
from .opt.acquisition import EI, POI, UCB, make_acquisition
from .opt.loop import NonFiniteObjectiveError, best_so_far, optimize, resume

"""Mixed-effects models of blendshape value on camera identity.

The full model has random intercepts for the participant and for the recording.
statsmodels expresses this as participant groups (``re_formula='1'``) with a
variance component for the recordings inside each participant. Recordings
belong to exactly one participant, so this is the same model as two crossed
random intercepts.

When a variance is estimated at its boundary the model is refitted without
the recording intercept; a second singular fit is skipped, never reported.
"""
import warnings
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np
import statsmodels.formula.api as smf
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from .config import AnalysisConfig

FORMULA = 'Value ~ CameraCode'

# ConvergenceWarning texts that mark a variance estimated at its boundary
BOUNDARY_SIGNALS = ('on the boundary', 'not positive definite')


@dataclass
class Fitted:
    """A non-singular fit.

    Attributes:
        result: statsmodels ``MixedLMResults``.
        groupings: Random-effect groupings in the final model.
        reduced: True when the recording intercept had to be dropped.
        messages: Warnings raised while fitting.
    """
    result: object
    groupings: Tuple[str, ...]
    reduced: bool = False
    messages: List[str] = field(default_factory=list)

    @property
    def n_groupings(self) -> int:
        return len(self.groupings)

    def _fixed(self, values, name):
        # fixed effects come first in every parameter vector
        position = list(self.result.fe_params.index).index(name)
        return float(np.asarray(values)[position])

    @property
    def intercept(self) -> float:
        return self._fixed(self.result.fe_params, 'Intercept')

    @property
    def effect(self) -> float:
        return self._fixed(self.result.fe_params, 'CameraCode')

    @property
    def se(self) -> float:
        return self._fixed(self.result.bse, 'CameraCode')

    @property
    def t(self) -> float:
        return self._fixed(self.result.tvalues, 'CameraCode')

    @property
    def p(self) -> float:
        return self._fixed(self.result.pvalues, 'CameraCode')


@dataclass
class Skipped:
    """No model: too little data, or singular even after the reduced refit."""
    reason: str
    messages: List[str] = field(default_factory=list)


def camera_design(subset, comparison, config=None):
    """Copy of the subset with the contrast-coded ``CameraCode`` column."""
    config = config or AnalysisConfig()
    coding = config.camera_coding(comparison)

    data = subset.copy()
    cameras = data['Camera'].astype(str)
    unexpected = sorted(set(cameras) - set(coding))
    if unexpected:
        raise ValueError(f"Unexpected camera label(s) {unexpected} in model data.")

    data['CameraCode'] = cameras.map(coding).astype(float)
    # plain labels so the design only sees the levels present in each group
    data['ID'] = data['ID'].astype(str)
    data['Participant'] = data['Participant'].astype(str)

    return data


def variance_components(result):
    """Estimated random-effect variances of a fit, by grouping name."""
    variances = {}
    if result.cov_re.shape[0] > 0:
        variances['Participant'] = float(result.cov_re.iloc[0, 0])
    if result.model.k_vc > 0:
        for name, value in zip(result.model.exog_vc.names, np.atleast_1d(result.vcomp)):
            variances[name] = float(value)
    return variances


def is_singular(result, tol=1e-4):
    """True if a random effect sd, relative to the residual sd, is (close to) zero.

    Non-finite variances or fixed-effect standard errors also count as singular.
    """
    scale = float(result.scale)
    if not np.isfinite(scale) or scale <= 0:
        return True

    for variance in variance_components(result).values():
        if not np.isfinite(variance) or variance <= 0:
            return True
        if np.sqrt(variance / scale) < tol:
            return True

    bse = np.asarray(result.bse_fe, dtype=float)
    return not np.all(np.isfinite(bse))


def _fit(model, config):
    """Fit one stage; the flag reports statsmodels' own boundary/non-convergence signals."""
    messages = []
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            result = model.fit(reml=config.reml, method=list(config.fit_method))
        except (np.linalg.LinAlgError, ValueError) as exc:
            result = None
            messages.append(str(exc))

    boundary = False
    for w in caught:
        message = str(w.message)
        messages.append(message)
        if issubclass(w.category, ConvergenceWarning) and any(s in message for s in BOUNDARY_SIGNALS):
            boundary = True
    if result is not None and getattr(result, 'converged', True) is False:
        boundary = True

    return result, messages, boundary


def _degenerate(result, boundary, config):
    return result is None or boundary or is_singular(result, config.singular_tol)


def full_model(data):
    return smf.mixedlm(FORMULA, data, groups=data['Participant'], re_formula='1',
                       vc_formula={'ID': '0 + C(ID)'})


def reduced_model(data):
    return smf.mixedlm(FORMULA, data, groups=data['Participant'])


def fit_camera_model(subset, comparison, config=None):
    """Fit the camera-effect model to one (blendshape, activation level) subset.

    Args:
        subset: Rows of both cameras with ``Value``, ``Camera``, ``ID`` and ``Participant``.
        comparison: Label of the non-reference camera.
        config: AnalysisConfig; defaults are used when omitted.

    Returns:
        ``Fitted`` or ``Skipped``.
    """
    config = config or AnalysisConfig()

    if len(subset) == 0:
        return Skipped("no frames at this activation level")

    n_participants = subset['Participant'].nunique()
    if n_participants < 2:
        return Skipped(f"data from {n_participants} participant(s); at least 2 are required")

    data = camera_design(subset, comparison, config)

    result, messages, boundary = _fit(full_model(data), config)
    if not _degenerate(result, boundary, config):
        return Fitted(result, ('ID', 'Participant'), reduced=False, messages=messages)

    if config.verbose:
        print("Singular fit with recording and participant intercepts; refitting with participant intercept only")

    result, more, boundary = _fit(reduced_model(data), config)
    messages.extend(more)
    if not _degenerate(result, boundary, config):
        return Fitted(result, ('Participant',), reduced=True, messages=messages)

    return Skipped("singular fit after dropping the recording intercept", messages=messages)

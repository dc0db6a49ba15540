import numpy as np
import pandas as pd

from .modeling import Fitted
from .signal_processing import camera_correlation

RESULT_COLUMNS = ['Blendshape', 'Activation', 'Intercept', 'Effect', 'EffectPercent', 'SE',
                  't', 'p', 'Groupings', 'Correlation', 'N']


def effect_percent(effect, intercept):
    """``|effect / intercept|`` in percent, rounded to an integer; NaN for a zero intercept."""
    if intercept == 0 or not np.isfinite(intercept) or not np.isfinite(effect):
        return np.nan
    return int(round(abs(effect / intercept) * 100))


def summarize_fit(outcome, blendshape, level, comparison, subset, reference='C0'):
    """One rounded result row for a fitted model, or None when the fit was skipped.

    Args:
        outcome: ``Fitted`` or ``Skipped`` from ``fit_camera_model``.
        blendshape: Blendshape name.
        level: Activation level of the subset.
        comparison: Comparison camera label.
        subset: The rows the model was fitted on (``Value`` and ``Camera`` columns).
        reference: Reference camera label.
    """
    if not isinstance(outcome, Fitted):
        return None

    corr = camera_correlation(subset, reference, comparison)

    return {
        'Blendshape': blendshape,
        'Activation': level,
        'Intercept': round(outcome.intercept, 1),
        'Effect': round(outcome.effect, 1),
        'EffectPercent': effect_percent(outcome.effect, outcome.intercept),
        'SE': round(outcome.se, 2),
        't': round(outcome.t, 2),
        'p': round(outcome.p, 4),
        'Groupings': outcome.n_groupings,
        'Correlation': round(corr, 2) if np.isfinite(corr) else np.nan,
        'N': len(subset),
    }


class ResultTable:
    """Append-only collection of result rows for one (partition, activation level)."""

    def __init__(self, comparison, level):
        self.comparison = comparison
        self.level = level
        self.rows = []
        self.skipped = {}

    def add(self, outcome, blendshape, subset, reference='C0'):
        row = summarize_fit(outcome, blendshape, self.level, self.comparison, subset, reference=reference)
        if row is None:
            self.skipped[blendshape] = outcome.reason
        else:
            self.rows.append(row)
        return row

    def __len__(self):
        return len(self.rows)

    def to_frame(self):
        return pd.DataFrame(self.rows, columns=RESULT_COLUMNS)

import warnings

from scipy.stats import pearsonr
import numpy as np


def paired_values(data, reference, comparison, value='Value'):
    """Reference and comparison camera values of the frames both cameras observed.

    Returns
    -------
    x, y : ndarray
        Values of the reference and the comparison camera, aligned on (ID, FrameNr).
    """
    key = ['ID', 'FrameNr']
    ref = data.loc[data['Camera'] == reference, key + [value]]
    comp = data.loc[data['Camera'] == comparison, key + [value]]
    paired = ref.merge(comp, on=key, how='inner', suffixes=('_ref', '_comp'))

    return paired[value + '_ref'].to_numpy(dtype=float), paired[value + '_comp'].to_numpy(dtype=float)


def camera_correlation(data, reference, comparison, value='Value'):
    """Pearson correlation between the two cameras' values of the same frames.

    NaN when fewer than two frames are paired or one camera's values are constant.
    """
    x, y = paired_values(data, reference, comparison, value=value)

    if len(x) < 2:
        return np.nan
    # constant input makes the coefficient undefined
    if np.all(x == x[0]) or np.all(y == y[0]):
        return np.nan

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        corr, _ = pearsonr(x, y)

    return float(corr)

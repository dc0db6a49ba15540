import warnings

import numpy as np
import pandas as pd

from .config import AnalysisConfig
from .utilities import KEY_COLUMNS, check_frames, as_categorical

# per-camera classification, from least to most activated
CLASSES = ['NotActivated', 'Activated', 'HighlyActivated']
# fused activation levels
ACTIVATIONS = ['HA', 'LA', 'NA']

CLASS_DTYPE = pd.CategoricalDtype(CLASSES, ordered=True)
ACTIVATION_DTYPE = pd.CategoricalDtype(ACTIVATIONS)


def activation_threshold(values, multiplier=0.5):
    """High-activation threshold of one (recording, camera) series.

    The standard deviation is the sample one (ddof=1); a single value has no spread
    and contributes a standard deviation of zero.
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        raise ValueError("Cannot compute a threshold from an empty series.")
    sd = values.std(ddof=1) if values.size > 1 else 0.0
    return values.mean() + multiplier * sd


def threshold_table(frames, blendshape, multiplier=0.5):
    """Mean, sd and high-activation threshold for every (ID, Camera) group."""
    stats = frames.groupby(['ID', 'Camera'], observed=True)[blendshape].agg(['mean', 'std', 'size'])
    # single-frame groups have an undefined sample sd
    stats['std'] = stats['std'].fillna(0.0)
    stats['Threshold'] = stats['mean'] + multiplier * stats['std']
    return stats.reset_index()


def classify_value(value, threshold, min_threshold=3):
    if value > threshold:
        return 'HighlyActivated'
    if value >= min_threshold:
        return 'Activated'
    return 'NotActivated'


def classify_frames(frames, blendshape, config=None):
    """Label every frame of every camera for one blendshape.

    Thresholds are estimated per (recording, camera) and joined back on that key.

    Returns:
        Long-format DataFrame with the key columns and ``Blendshape``, ``Value``,
        ``Threshold`` and ``Classification``.
    """
    config = config or AnalysisConfig()

    stats = threshold_table(frames, blendshape, multiplier=config.multiplier)
    data = frames[KEY_COLUMNS].copy()
    data['Blendshape'] = blendshape
    data['Value'] = frames[blendshape].astype(float)
    data = data.merge(stats[['ID', 'Camera', 'Threshold']], on=['ID', 'Camera'], how='left', validate='many_to_one')

    values = data['Value'].to_numpy()
    thresholds = data['Threshold'].to_numpy()
    labels = np.select([values > thresholds, values >= config.min_threshold],
                       ['HighlyActivated', 'Activated'], default='NotActivated')
    data['Classification'] = pd.Categorical(labels, dtype=CLASS_DTYPE)

    return data


def fuse_labels(reference, comparison):
    """Merge the two cameras' classifications of one frame into HA, LA or NA."""
    if reference == 'HighlyActivated' and comparison == 'HighlyActivated':
        return 'HA'
    if reference in ('Activated', 'HighlyActivated') or comparison in ('Activated', 'HighlyActivated'):
        return 'LA'
    return 'NA'


def fuse_activations(classified, reference, comparison, verbose=False):
    """Add the fused ``Activation`` column to a one-blendshape classification table.

    Frames are matched across cameras on (ID, FrameNr). Frames that only one camera
    observed get no Activation label.
    """
    key = ['ID', 'FrameNr']

    ref = classified.loc[classified['Camera'] == reference, key + ['Classification']]
    comp = classified.loc[classified['Camera'] == comparison, key + ['Classification']]
    paired = ref.merge(comp, on=key, how='inner', suffixes=('_ref', '_comp'), validate='one_to_one')

    highly_ref = (paired['Classification_ref'] == 'HighlyActivated').to_numpy()
    highly_comp = (paired['Classification_comp'] == 'HighlyActivated').to_numpy()
    active_ref = (paired['Classification_ref'] != 'NotActivated').to_numpy()
    active_comp = (paired['Classification_comp'] != 'NotActivated').to_numpy()

    labels = np.select([highly_ref & highly_comp, active_ref | active_comp], ['HA', 'LA'], default='NA')
    paired['Activation'] = pd.Categorical(labels, dtype=ACTIVATION_DTYPE)

    fused = classified.drop(columns='Activation', errors='ignore')
    fused = fused.merge(paired[key + ['Activation']], on=key, how='left', validate='many_to_one')

    name = ', '.join(pd.unique(classified['Blendshape'].astype(str)))
    unmatched = fused['Activation'].isna().sum()
    if unmatched > 0:
        warnings.warn(f"{unmatched} frame(s) of '{name}' were observed by a single camera and have no activation label.")
    if verbose:
        counts = fused['Activation'].value_counts().reindex(ACTIVATIONS, fill_value=0)
        print(f"{name}: HA={counts['HA']}, LA={counts['LA']}, NA={counts['NA']}")

    return fused


def classify_blendshape(frames, blendshape, comparison, config=None):
    """Per-camera classification followed by the two-camera fusion for one blendshape."""
    config = config or AnalysisConfig()
    classified = classify_frames(frames, blendshape, config=config)
    return fuse_activations(classified, config.reference_camera, comparison, verbose=config.verbose)


def classify_all(frames, comparison, config=None):
    """Classify and fuse every configured blendshape of one partition.

    The frame table is validated first; schema problems raise ValueError before any
    label is computed.

    Returns:
        Long-format table, one row per (frame, camera, blendshape).
    """
    config = config or AnalysisConfig()
    blendshapes = list(config.blendshapes)

    check_frames(frames, blendshapes, config.reference_camera, comparison)
    frames = as_categorical(frames)

    tables = [classify_blendshape(frames, b, comparison, config=config) for b in blendshapes]
    classified = pd.concat(tables, ignore_index=True)

    # concat drops categories that differ between the pieces
    classified['Blendshape'] = pd.Categorical(classified['Blendshape'], categories=blendshapes)
    classified['Classification'] = classified['Classification'].astype(CLASS_DTYPE)
    classified['Activation'] = classified['Activation'].astype(ACTIVATION_DTYPE)
    for column in ['ID', 'Participant', 'Camera']:
        classified[column] = classified[column].astype('category')

    return classified


def extract_activation(classified, level, blendshape=None):
    """Rows of one activation level (and optionally one blendshape), unused categories dropped."""
    if level not in ACTIVATIONS:
        raise ValueError(f"Unknown activation level '{level}'. Use one of {ACTIVATIONS}.")

    mask = classified['Activation'] == level
    if blendshape is not None:
        mask &= classified['Blendshape'] == blendshape

    subset = classified.loc[mask].copy()
    for column in subset.columns:
        if isinstance(subset[column].dtype, pd.CategoricalDtype):
            subset[column] = subset[column].cat.remove_unused_categories()

    return subset.reset_index(drop=True)


def audit_table(classified):
    """Wide per-frame table with ``<blendshape>``, ``<blendshape>Class`` and ``<blendshape>Activation`` columns."""
    data = classified.copy()
    data['Blendshape'] = data['Blendshape'].astype(str)
    data['Classification'] = data['Classification'].astype(object)
    data['Activation'] = data['Activation'].astype(object)

    wide = data.set_index(KEY_COLUMNS + ['Blendshape'])[['Value', 'Classification', 'Activation']].unstack('Blendshape')

    suffix = {'Value': '', 'Classification': 'Class', 'Activation': 'Activation'}
    order = pd.unique(data['Blendshape'])
    columns = [(f, b) for b in order for f in ['Value', 'Classification', 'Activation']]
    wide = wide[columns]
    wide.columns = [b + suffix[f] for f, b in columns]

    return wide.reset_index()


def summary_counts(classified):
    """Row counts per blendshape and activation level; ``Total`` includes unlabelled rows."""
    counts = pd.crosstab(classified['Blendshape'].astype(str), classified['Activation'].astype(object))
    total = classified.groupby(classified['Blendshape'].astype(str)).size()
    counts = counts.reindex(index=total.index, columns=ACTIVATIONS, fill_value=0)
    counts['Total'] = total
    counts.columns.name = None
    return counts

import numpy as np
import pandas as pd

# tracked blendshape channels (ARKit naming)
# eye look directions, tongue and the lateral jaw/mouth shifts are not tracked
BLENDSHAPES = [
    # eye
    'eyeBlinkLeft', 'eyeBlinkRight', 'eyeSquintLeft', 'eyeSquintRight', 'eyeWideLeft', 'eyeWideRight',
    # jaw
    'jawForward', 'jawOpen',
    # mouth
    'mouthClose', 'mouthFunnel', 'mouthPucker', 'mouthSmileLeft', 'mouthSmileRight',
    'mouthFrownLeft', 'mouthFrownRight', 'mouthDimpleLeft', 'mouthDimpleRight',
    'mouthStretchLeft', 'mouthStretchRight', 'mouthRollLower', 'mouthRollUpper',
    'mouthShrugLower', 'mouthShrugUpper', 'mouthPressLeft', 'mouthPressRight',
    'mouthLowerDownLeft', 'mouthLowerDownRight', 'mouthUpperUpLeft', 'mouthUpperUpRight',
    # brow
    'browDownLeft', 'browDownRight', 'browInnerUp', 'browOuterUpLeft', 'browOuterUpRight',
    # cheek
    'cheekPuff', 'cheekSquintLeft', 'cheekSquintRight',
    # nose
    'noseSneerLeft', 'noseSneerRight',
]

KEY_COLUMNS = ['ID', 'Participant', 'Camera', 'FrameNr']
CATEGORICAL_COLUMNS = ['ID', 'Participant', 'Camera']


def check_columns(frames, blendshapes=None):
    """Raise ValueError if a key column or a blendshape column is missing."""
    if not isinstance(frames, pd.DataFrame):
        raise ValueError("Frame data must be a pandas DataFrame.")

    missing = [c for c in KEY_COLUMNS if c not in frames.columns]
    if missing:
        raise ValueError(f"Frame data is missing the required column(s): {missing}")

    if blendshapes is not None:
        missing = [b for b in blendshapes if b not in frames.columns]
        if missing:
            raise ValueError(f"Frame data is missing the blendshape column(s): {missing}")


def check_values(frames, blendshapes):
    """Blendshape columns must be numeric and finite."""
    for name in blendshapes:
        column = frames[name]
        if not pd.api.types.is_numeric_dtype(column) or pd.api.types.is_bool_dtype(column):
            raise ValueError(f"Blendshape '{name}' has non-numeric values.")
        if not np.isfinite(column.to_numpy(dtype=float)).all():
            raise ValueError(f"Blendshape '{name}' has missing or non-finite values.")


def check_cameras(frames, reference, comparison):
    """Every recording must be observed by exactly the (reference, comparison) camera pair."""
    pair = {reference, comparison}

    cameras = set(pd.unique(frames['Camera'].astype(str)))
    unexpected = sorted(cameras - pair)
    if unexpected:
        raise ValueError(f"Unexpected camera label(s) {unexpected}; this partition only allows {sorted(pair)}.")

    incomplete = [str(i) for i, c in frames.groupby('ID', observed=True)['Camera'] if set(c.astype(str)) != pair]
    if incomplete:
        raise ValueError(f"Recording(s) {incomplete} are not observed by both cameras {sorted(pair)}.")

    duplicated = frames.duplicated(subset=['ID', 'Camera', 'FrameNr'])
    if duplicated.any():
        first = frames.loc[duplicated, ['ID', 'Camera', 'FrameNr']].iloc[0]
        raise ValueError(f"Duplicated frame key (ID={first['ID']}, Camera={first['Camera']}, FrameNr={first['FrameNr']}).")


def check_participants(frames):
    """A recording belongs to exactly one participant."""
    counts = frames.groupby('ID', observed=True)['Participant'].nunique()
    shared = counts[counts > 1]
    if len(shared) > 0:
        raise ValueError(f"Recording(s) {list(shared.index.astype(str))} are assigned to more than one participant.")


def check_frames(frames, blendshapes, reference, comparison):
    """Full schema check of a partition's frame table."""
    check_columns(frames, blendshapes)
    check_values(frames, blendshapes)
    check_cameras(frames, reference, comparison)
    check_participants(frames)


def as_categorical(frames):
    """Return a copy with the identifier columns converted to pandas categoricals."""
    frames = frames.copy()
    for column in CATEGORICAL_COLUMNS:
        if column in frames.columns:
            frames[column] = frames[column].astype(str).astype('category')
    return frames

import os

import pandas as pd

from .file_types import as_categorical, check_columns


def read_frames(file, blendshapes=None):
    """Read a frame table (one row per camera frame) from a CSV file.

    A ``Frame`` column is renamed to ``FrameNr``; identifier columns become categoricals.
    """
    data = pd.read_csv(file)

    if 'FrameNr' not in data.columns and 'Frame' in data.columns:
        data = data.rename(columns={'Frame': 'FrameNr'})

    check_columns(data, blendshapes)

    return as_categorical(data)


def split_partition(frames, comparison, reference='C0'):
    """Rows of a combined table belonging to the (reference, comparison) pair.

    Only recordings that contain the comparison camera are kept, so the reference
    frames of the other partition are left out.
    """
    ids = frames.loc[frames['Camera'] == comparison, 'ID'].unique()
    mask = frames['ID'].isin(ids) & frames['Camera'].isin([reference, comparison])
    data = frames.loc[mask].copy()

    for column in ['ID', 'Participant', 'Camera']:
        if isinstance(data[column].dtype, pd.CategoricalDtype):
            data[column] = data[column].cat.remove_unused_categories()

    return data.reset_index(drop=True)


def write_results(results, output_dir, audit=None):
    """Write ``results_<partition>_<level>.csv`` files and, optionally, the audit tables.

    Args:
        results: ``{partition: {level: DataFrame}}``
        output_dir: Directory to create the files in.
        audit: Optional ``{partition: DataFrame}`` written as ``activations_<partition>.csv``.

    Returns:
        List of written file paths.
    """
    os.makedirs(output_dir, exist_ok=True)

    files = []
    for partition, tables in results.items():
        for level, table in tables.items():
            path = os.path.join(output_dir, f"results_{partition}_{level}.csv")
            table.to_csv(path, index=False)
            files.append(path)

    if audit is not None:
        for partition, table in audit.items():
            path = os.path.join(output_dir, f"activations_{partition}.csv")
            table.to_csv(path, index=False)
            files.append(path)

    return files

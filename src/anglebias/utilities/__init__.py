from .file_types import BLENDSHAPES, KEY_COLUMNS, check_columns, check_values, check_cameras, check_participants, check_frames, as_categorical
from .readers import read_frames, split_partition, write_results
from .visualization import visualize_activation

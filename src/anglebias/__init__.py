from .config import AnalysisConfig
from .activation import (
    activation_threshold,
    threshold_table,
    classify_value,
    classify_frames,
    fuse_labels,
    fuse_activations,
    classify_blendshape,
    classify_all,
    extract_activation,
    audit_table,
    summary_counts,
)
from .modeling import Fitted, Skipped, fit_camera_model
from .results import ResultTable, summarize_fit, effect_percent
from .pipeline import analyze_partition, analyze

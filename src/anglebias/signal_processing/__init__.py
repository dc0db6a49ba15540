from .similarity import paired_values, camera_correlation

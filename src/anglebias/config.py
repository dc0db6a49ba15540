from dataclasses import dataclass, field, replace
from typing import Dict, Tuple

from .utilities.file_types import BLENDSHAPES


@dataclass(frozen=True)
class AnalysisConfig:
    """Constants of the camera-angle analysis, passed explicitly to every step.

    Attributes:
        multiplier: High-activation threshold is ``mean + multiplier * sd`` of the
            values of one (recording, camera) pair.
        min_threshold: Values below this are never considered activated.
        reference_camera: Camera every recording shares (frontal view).
        partitions: Partition name -> comparison camera.
        contrast: Codes of the (reference, comparison) camera in the design matrix.
        levels: Activation levels that get a model.
        blendshapes: Tracked channels to analyze.
        singular_tol: A random effect whose sd relative to the residual sd is below
            this value is treated as estimated at the boundary.
        fit_method: Optimizer(s) passed to ``MixedLM.fit``.
        reml: Fit by restricted maximum likelihood.
        verbose: Print progress.
    """
    multiplier: float = 0.5
    min_threshold: float = 3.0
    reference_camera: str = 'C0'
    partitions: Dict[str, str] = field(default_factory=lambda: {'up': 'C1', 'down': 'C2'})
    contrast: Tuple[float, float] = (-0.5, 0.5)
    levels: Tuple[str, ...] = ('HA', 'LA')
    blendshapes: Tuple[str, ...] = tuple(BLENDSHAPES)
    singular_tol: float = 1e-4
    fit_method: Tuple[str, ...] = ('powell',)
    reml: bool = True
    verbose: bool = False

    def __post_init__(self):
        if self.multiplier < 0:
            raise ValueError("multiplier must be non-negative")
        if self.reference_camera in self.partitions.values():
            raise ValueError(f"Reference camera '{self.reference_camera}' cannot also be a comparison camera.")
        if len(self.contrast) != 2 or self.contrast[0] == self.contrast[1]:
            raise ValueError("contrast must hold two different codes (reference, comparison)")
        if not set(self.levels) <= {'HA', 'LA', 'NA'}:
            raise ValueError(f"Unknown activation level(s) in {self.levels}")

    def camera_coding(self, comparison):
        return {self.reference_camera: self.contrast[0], comparison: self.contrast[1]}

    def replace(self, **changes):
        return replace(self, **changes)

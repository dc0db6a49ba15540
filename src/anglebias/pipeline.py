from .activation import classify_all, extract_activation, audit_table
from .config import AnalysisConfig
from .modeling import Skipped, fit_camera_model
from .results import ResultTable
from .utilities import write_results


def analyze_partition(frames, comparison, config=None):
    """Classify every blendshape of one partition and fit a model per activation level.

    Args:
        frames: Frame table of one camera pair (reference + ``comparison``).
        comparison: Comparison camera label, e.g. ``'C1'``.
        config: AnalysisConfig.

    Returns:
        Tuple of (``{level: result DataFrame}``, long classification table).
    """
    config = config or AnalysisConfig()

    classified = classify_all(frames, comparison, config=config)

    tables = {level: ResultTable(comparison, level) for level in config.levels}
    for blendshape in config.blendshapes:
        for level in config.levels:
            subset = extract_activation(classified, level, blendshape=blendshape)
            outcome = fit_camera_model(subset, comparison, config=config)
            tables[level].add(outcome, blendshape, subset, reference=config.reference_camera)

            if config.verbose and isinstance(outcome, Skipped):
                print(f"{comparison} {level} {blendshape}: skipped ({outcome.reason})")

    if config.verbose:
        for level, table in tables.items():
            print(f"{comparison} {level}: {len(table)} of {len(config.blendshapes)} blendshapes modeled")

    return {level: table.to_frame() for level, table in tables.items()}, classified


def analyze(partitions, config=None, output_dir=None):
    """Run the analysis for every partition.

    Args:
        partitions: ``{partition name: frame table}``; names must be keys of
            ``config.partitions`` (``'up'`` -> C1, ``'down'`` -> C2 by default).
        config: AnalysisConfig.
        output_dir: If given, result and audit tables are written there as CSV.

    Returns:
        Tuple of (``{partition: {level: DataFrame}}``, ``{partition: classification table}``).
    """
    config = config or AnalysisConfig()

    results = {}
    classified = {}
    for name, frames in partitions.items():
        if name not in config.partitions:
            raise ValueError(f"Unknown partition '{name}'. Use one of {list(config.partitions)}.")
        comparison = config.partitions[name]

        if config.verbose:
            print(f"Analyzing partition '{name}' ({config.reference_camera} vs {comparison})")

        results[name], classified[name] = analyze_partition(frames, comparison, config=config)

    if output_dir is not None:
        audit = {name: audit_table(table) for name, table in classified.items()}
        files = write_results(results, output_dir, audit=audit)
        if config.verbose:
            print(f"Wrote {len(files)} files to {output_dir}")

    return results, classified

import numpy as np
import plotly.graph_objs as go
from plotly.subplots import make_subplots

ACTIVATION_COLORS = {'HA': 'crimson', 'LA': 'orange', 'NA': 'lightgray'}


def visualize_activation(classified, recording, blendshape, reference='C0', comparison='C1', output_file=None):
    """Plot one recording's values for both cameras, with thresholds and activation labels.

    Args:
        classified: Long classification table (output of ``classify_all``).
        recording: Recording ``ID``.
        blendshape: Blendshape to show.
        reference: Reference camera label (top row).
        comparison: Comparison camera label (bottom row).
        output_file: Optional path of an HTML file to write.

    Returns:
        plotly Figure.
    """
    mask = (classified['ID'] == recording) & (classified['Blendshape'] == blendshape)
    data = classified.loc[mask]
    if len(data) == 0:
        raise ValueError(f"No frames for recording '{recording}' and blendshape '{blendshape}'.")

    fig = make_subplots(rows=2, cols=1, shared_xaxes=True, vertical_spacing=0.08,
                        subplot_titles=(f"{blendshape} - {reference}", f"{blendshape} - {comparison}"))

    for row, camera in enumerate([reference, comparison], start=1):
        cam = data.loc[data['Camera'] == camera].sort_values('FrameNr')

        fig.add_trace(go.Scatter(x=cam['FrameNr'], y=cam['Value'], mode='lines',
                                 line=dict(color='black', width=1), name=camera, showlegend=False),
                      row=row, col=1)

        # one legend entry per activation level
        for level, color in ACTIVATION_COLORS.items():
            sel = cam.loc[cam['Activation'] == level]
            fig.add_trace(go.Scatter(x=sel['FrameNr'], y=sel['Value'], mode='markers',
                                     marker=dict(color=color, size=5), name=level,
                                     legendgroup=level, showlegend=(row == 1)),
                          row=row, col=1)

        if len(cam) > 0:
            threshold = float(np.unique(cam['Threshold'])[0])
            fig.add_hline(y=threshold, line_dash='dash', line_color='crimson', row=row, col=1)

    fig.update_layout(title=f"Recording {recording}", template='plotly_white', height=600)
    fig.update_xaxes(title_text='Frame', row=2, col=1)

    if output_file is not None:
        fig.write_html(output_file, include_plotlyjs='cdn')

    return fig

import numpy as np
import pandas as pd
import pytest


def _frame_rows(participant, recording, n_frames, values, comparison):
    rows = []
    for camera, series in zip(['C0', comparison], values):
        for f in range(n_frames):
            rows.append({'ID': recording, 'Participant': participant, 'Camera': camera,
                         'FrameNr': f, 'Value': series[f]})
    return rows


@pytest.fixture
def make_subset():
    """Long-format model data (one blendshape, one activation level).

    Value = 20 + participant offset + recording offset + effect * camera code + noise
    """
    def _make(participant_offsets=(0, 6, 12, 18), recording_offsets=(-3, 0, 3), n_frames=40,
              effect=2.0, noise=1.0, identical_recordings=False, identical_participants=False,
              comparison='C1', seed=0):
        rng = np.random.default_rng(seed)
        common = rng.normal(0, noise, size=(2, n_frames))
        rows = []
        for p, p_off in enumerate(participant_offsets):
            # identical participants also share one noise draw: no participant variance either
            shared = common if identical_participants else rng.normal(0, noise, size=(2, n_frames))
            for r, r_off in enumerate(recording_offsets):
                if identical_recordings:
                    # same values in every recording of the participant: no recording variance
                    eps = shared
                    r_off = 0
                else:
                    eps = rng.normal(0, noise, size=(2, n_frames))
                base = 20 + p_off + r_off
                values = [base - 0.5 * effect + eps[0], base + 0.5 * effect + eps[1]]
                rows += _frame_rows(f"P{p}", f"P{p}R{r}", n_frames, values, comparison)
        data = pd.DataFrame(rows)
        for column in ['ID', 'Participant', 'Camera']:
            data[column] = data[column].astype('category')
        return data
    return _make


@pytest.fixture
def make_frames():
    """Wide frame table (one column per blendshape) for one camera pair."""
    def _make(blendshapes=('jawOpen', 'browInnerUp'), n_participants=3, n_recordings=2, n_frames=60,
              comparison='C1', seed=1):
        rng = np.random.default_rng(seed)
        t = np.arange(n_frames)
        rows = []
        for p in range(n_participants):
            for r in range(n_recordings):
                recording = f"P{p}R{r}"
                # expression bursts shared by both cameras, camera gain differs
                bursts = {b: 20 * np.clip(np.sin(2 * np.pi * (t + 7 * k + 3 * r) / 30), 0, None)
                          for k, b in enumerate(blendshapes)}
                for camera, gain in [('C0', 1.0), (comparison, 0.8)]:
                    for f in t:
                        row = {'ID': recording, 'Participant': f"P{p}", 'Camera': camera, 'FrameNr': int(f)}
                        for b in blendshapes:
                            row[b] = max(0.0, gain * bursts[b][f] + p + rng.normal(0, 1))
                        rows.append(row)
        return pd.DataFrame(rows)
    return _make

from anglebias import AnalysisConfig, analyze, analyze_partition, classify_all, summary_counts
from anglebias.results import RESULT_COLUMNS
from anglebias.utilities import read_frames, split_partition, write_results, visualize_activation

import os
import pandas as pd
import pytest

BLENDSHAPES = ('jawOpen', 'browInnerUp')


@pytest.fixture
def config():
    return AnalysisConfig(blendshapes=BLENDSHAPES)


def test_analyze_partition(make_frames, config):
    frames = make_frames(blendshapes=BLENDSHAPES)
    results, classified = analyze_partition(frames, 'C1', config=config)

    assert set(results) == {'HA', 'LA'}
    for level, table in results.items():
        assert list(table.columns) == RESULT_COLUMNS
        assert set(table['Activation']) <= {level}
        assert set(table['Blendshape']) <= set(BLENDSHAPES)
        assert (table['Groupings'].isin([1, 2])).all()


def test_sample_sizes_add_up(make_frames, config):
    frames = make_frames(blendshapes=BLENDSHAPES)
    results, classified = analyze_partition(frames, 'C1', config=config)
    counts = summary_counts(classified)

    for blendshape in BLENDSHAPES:
        modeled = 0
        for level in ['HA', 'LA']:
            rows = results[level][results[level]['Blendshape'] == blendshape]
            if len(rows) > 0:
                assert rows['N'].iloc[0] == counts.loc[blendshape, level]
                modeled += rows['N'].iloc[0]
        assert modeled + counts.loc[blendshape, 'NA'] <= counts.loc[blendshape, 'Total']
        assert counts.loc[blendshape, ['HA', 'LA', 'NA']].sum() == len(frames)


def test_analyze_writes_outputs(make_frames, config, tmp_path):
    up = make_frames(blendshapes=BLENDSHAPES, comparison='C1')
    down = make_frames(blendshapes=BLENDSHAPES, comparison='C2', seed=2)

    results, classified = analyze({'up': up, 'down': down}, config=config, output_dir=str(tmp_path))

    assert set(results) == {'up', 'down'}
    assert set(classified) == {'up', 'down'}

    expected = ['results_up_HA.csv', 'results_up_LA.csv', 'results_down_HA.csv', 'results_down_LA.csv',
                'activations_up.csv', 'activations_down.csv']
    for file_name in expected:
        file_path = os.path.join(str(tmp_path), file_name)
        assert (os.path.exists(file_path) and os.path.isfile(file_path)), f"Missing file: {file_path}"

    audit = pd.read_csv(os.path.join(str(tmp_path), 'activations_up.csv'))
    assert len(audit) == len(up)
    assert 'jawOpenActivation' in audit.columns


def test_analyze_unknown_partition(make_frames, config):
    with pytest.raises(ValueError, match="Unknown partition"):
        analyze({'sideways': make_frames(blendshapes=BLENDSHAPES)}, config=config)


def test_wrong_camera_pair_aborts_partition(make_frames, config):
    # vertical-up data handed to the vertical-down partition
    with pytest.raises(ValueError, match="Unexpected camera"):
        analyze({'down': make_frames(blendshapes=BLENDSHAPES, comparison='C1')}, config=config)


def test_read_frames(make_frames, tmp_path):
    frames = make_frames(blendshapes=BLENDSHAPES).rename(columns={'FrameNr': 'Frame'})
    path = os.path.join(str(tmp_path), 'frames.csv')
    frames.to_csv(path, index=False)

    data = read_frames(path, blendshapes=BLENDSHAPES)

    assert 'FrameNr' in data.columns and 'Frame' not in data.columns
    assert isinstance(data['ID'].dtype, pd.CategoricalDtype)
    assert isinstance(data['Camera'].dtype, pd.CategoricalDtype)
    assert len(data) == len(frames)

    with pytest.raises(ValueError, match="blendshape column"):
        read_frames(path, blendshapes=['cheekPuff'])


def test_split_partition(make_frames, config):
    up = make_frames(blendshapes=BLENDSHAPES, comparison='C1')
    down = make_frames(blendshapes=BLENDSHAPES, comparison='C2', seed=2)
    down['ID'] = 'D' + down['ID']
    combined = pd.concat([up, down], ignore_index=True)

    part = split_partition(combined, 'C2')

    assert set(part['Camera']) == {'C0', 'C2'}
    assert len(part) == len(down)
    classify_all(part, 'C2', config=config)


def test_write_results(tmp_path):
    table = pd.DataFrame(columns=RESULT_COLUMNS)
    files = write_results({'up': {'HA': table}}, str(tmp_path / 'out'))
    assert [os.path.basename(f) for f in files] == ['results_up_HA.csv']


def test_visualize_activation(make_frames, config, tmp_path):
    classified = classify_all(make_frames(blendshapes=BLENDSHAPES), 'C1', config=config)
    output = os.path.join(str(tmp_path), 'jawOpen.html')

    fig = visualize_activation(classified, 'P0R0', 'jawOpen', output_file=output)

    assert os.path.isfile(output)
    assert len(fig.data) == 8

    with pytest.raises(ValueError):
        visualize_activation(classified, 'missing', 'jawOpen')

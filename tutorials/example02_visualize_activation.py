from anglebias import AnalysisConfig, classify_all
from anglebias.utilities import read_frames, visualize_activation

config = AnalysisConfig()

up = read_frames('data/vertical_up.csv', blendshapes=config.blendshapes)

# labels of every frame, camera and blendshape
classified = classify_all(up, 'C1', config=config)

# raw values of both cameras for the first recording, with thresholds and fused labels
recording = classified['ID'].cat.categories[0]
visualize_activation(classified, recording, 'jawOpen', reference='C0', comparison='C1',
                     output_file='output/jawOpen.html')

from anglebias import AnalysisConfig, analyze
from anglebias.utilities import read_frames

output_dir = 'output'

# analysis constants
config = AnalysisConfig(multiplier=0.5, min_threshold=3, verbose=True)

# one frame table per camera pair
up = read_frames('data/vertical_up.csv', blendshapes=config.blendshapes)
down = read_frames('data/vertical_down.csv', blendshapes=config.blendshapes)

# classify, fuse and fit; writes four result tables and two audit tables
results, classified = analyze({'up': up, 'down': down}, config=config, output_dir=output_dir)

print(results['up']['HA'])
print(results['down']['LA'])

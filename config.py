# Chunk geometry shared with every consumer of generated chunks.
CHUNK_SIZE = 16 #width and depth (x and z)
MIN_Y = -64
MAX_Y = 319
HEIGHT = MAX_Y - MIN_Y + 1 #384
# World x and z wrap around at +-WORLD_WRAP so every coordinate, padded by the
# decoration margin, still fits in int64.
WORLD_WRAP = 2 ** 61

# Terrain generation
TERRAIN_SCALE = 0.01       # horizontal noise scale (smaller = smoother terrain)
TERRAIN_OCTAVES = 5
TERRAIN_PERSISTENCE = 0.5
TERRAIN_LACUNARITY = 2.0
TERRAIN_AMPLITUDE = 80     # how tall hills are
BASE_HEIGHT = 64
SEA_LEVEL = 62

# Secondary detail noise layered on top of the base terrain.
DETAIL_OCTAVES = 3
DETAIL_WEIGHT = 0.3
# Erosion flattens terrain: amplitude is scaled down to this factor at erosion=1.
EROSION_FLATTEN = 0.25
# Mountain ridge bonus (blocks) and ridge noise scale.
RIDGE_SCALE = 0.02
RIDGE_HEIGHT = 60.0
# Ocean floor sits this far below sea level, +/- OCEAN_FLOOR_VARIANCE.
OCEAN_FLOOR_DEPTH = 15
OCEAN_FLOOR_VARIANCE = 20.0
# Swamps and beaches are pulled toward sea level by this fraction.
FLAT_PULL = 0.75

# Continent height spline, (continentalness, height relative to BASE_HEIGHT):
# deep ocean -> coastal ramp -> normal land -> highlands.
CONTINENT_SPLINE = (
    (-1.0, -42.0),
    (0.1, -16.0),
    (0.35, -1.0),
    (0.95, 14.0),
    (2.0, 70.0),
)

# Biome blending: neighbouring columns within BLEND_RADIUS (sampled every
# BLEND_STEP blocks) contribute to each column's height parameters.
BLEND_RADIUS = 8
BLEND_STEP = 4

# Caves
CAVE_SCALE = 0.06
CAVE_OCTAVES = 3
CAVE_THRESHOLD = 0.5       # higher = fewer caves
CAVE_MAX_Y = 72            # sea level + 10
CAVE_OPEN_TO_SURFACE = True
CAVE_DEPTH_BIAS = 0.4      # caves widen with depth below sea level
CAVE_FLOOR_FADE = 12       # caves thin out over this many blocks above MIN_Y
CAVE_FLOOR_PENALTY = 0.6
CAVE_ROOF_DEPTH = 4        # stone kept above caves when they may not open to the surface
TUNNEL_WIDTH = 0.05        # |tunnel noise| below this carves a thin tunnel
TUNNEL_DEPTH = 5           # tunnels stay this far below sea level

# Ore generation: (name, min_y, max_y, noise scale, threshold).
# Rarer ores need more extreme noise.
ORES = (
    ('Coal Ore', -64, 128, 0.09, 0.52),
    ('Iron Ore', -64, 64, 0.10, 0.58),
    ('Gold Ore', -64, 32, 0.11, 0.66),
    ('Diamond Ore', -64, 16, 0.12, 0.72),
)

BEDROCK_LAYERS = 5
SUBSURFACE_DEPTH = 4
ALPINE_RISE = 70           # mountains above sea level + this expose bare stone

# Trees
TREE_PROBABILITY = 0.06    # chance per grass column to spawn a tree
TREE_MIN_HEIGHT = 4
TREE_MAX_HEIGHT = 6
TREE_HEIGHT_LIMIT = 32     # options may not ask for taller trunks
TREE_MARGIN = 3            # columns beyond the chunk scanned for overhanging canopies
TREE_CLUSTER_SCALE = 0.02
LEAF_GAP = 0.15            # fraction of canopy voxels left empty

# Vegetation
VEG_SCALE = 0.05
VEG_CUTOFF = 0.3           # density field below this grows nothing

# Climate
CLIMATE_SCALE = 0.004
CONTINENT_SCALE = 0.0025
EROSION_SCALE = 0.006
CONTINENT_RIDGE_SCALE = 0.005
WARP_SCALE = 0.004
WARP_STRENGTH = 40.0       # blocks
CONTINENT_BIAS = 0.35      # bias toward land
# Octave noise clusters around 0; stretch it so extreme climates occur.
CLIMATE_CONTRAST = 1.8
CONTINENT_CONTRAST = 1.5

# Biome classification thresholds
OCEAN_CONTINENTALNESS = 0.1
COAST_CONTINENTALNESS = 0.35
COAST_BELOW = 2
COAST_ABOVE = 3
MOUNTAIN_CONTINENTALNESS = 1.05
MOUNTAIN_EROSION = 0.4
HIGHLAND_RISE = 90
COLD_TEMPERATURE = 0.35

# Public option names and their defaults.
DEFAULT_OPTIONS = {
    'scale': TERRAIN_SCALE,
    'octaves': TERRAIN_OCTAVES,
    'persistence': TERRAIN_PERSISTENCE,
    'lacunarity': TERRAIN_LACUNARITY,
    'amplitude': TERRAIN_AMPLITUDE,
    'baseHeight': BASE_HEIGHT,
    'seaLevel': SEA_LEVEL,
    'caveScale': CAVE_SCALE,
    'caveOctaves': CAVE_OCTAVES,
    'caveThreshold': CAVE_THRESHOLD,
    'caveMaxY': CAVE_MAX_Y,
    'caveOpenToSurface': CAVE_OPEN_TO_SURFACE,
    'treeProbability': TREE_PROBABILITY,
    'treeMinHeight': TREE_MIN_HEIGHT,
    'treeMaxHeight': TREE_MAX_HEIGHT,
}

MAX_OCTAVES = 16

# Enable ANSI colors in logs.
LOG_COLOR = True

# Log per-chunk generation timings.
LOG_GENERATION = False

# Log option values that were rejected and replaced by defaults.
LOG_OPTION_FALLBACK = True

# Sanity bound used by preview tooling.
PREVIEW_MAX_RADIUS = 64

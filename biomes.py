'''
biomes.py -- biome ids, per-biome attribute table and the climate -> biome classifier
'''
import collections

import numpy

from blocks import (STONE, DIRT, GRASS, SAND, SNOWY_GRASS, GRAVEL, CLAY, RED_SAND,
    TALL_GRASS, ROSE_BUSH, SUNFLOWER, DEAD_BUSH, CACTUS)
from config import (OCEAN_CONTINENTALNESS, COAST_CONTINENTALNESS, COAST_BELOW, COAST_ABOVE,
    MOUNTAIN_CONTINENTALNESS, MOUNTAIN_EROSION, HIGHLAND_RISE, COLD_TEMPERATURE, ALPINE_RISE)

PLAINS = 0
FOREST = 1
DESERT = 2
MOUNTAINS = 3
SNOWY = 4
BEACH = 5
OCEAN = 6
SWAMP = 7
SAVANNA = 8
SNOWY_MOUNTAINS = 9

BiomeInfo = collections.namedtuple('BiomeInfo', [
    'name',
    'surface',            # top block of a dry column
    'subsurface',         # layers directly under the surface...
    'subsurface_lower',   # ...and below subsurface_split layers
    'subsurface_split',
    'underwater',         # surface and subsurface of submerged columns
    'tree_density',       # multiplier on the global tree probability
    'veg_density',        # chance of flora where the vegetation field is saturated
    'terrain_scale',      # amplitude multiplier on terrain noise
    'height_offset',      # blocks added to the continent height
    'ridge',              # weight of the mountain ridge bonus
    'ocean',              # weight of the ocean floor profile
    'flat',               # pull toward sea level
    'tree_spacing',       # minimum distance between tree roots
    'canopy_depth',       # leaf layers below the trunk top
    'canopy_radius',
    'freezing',           # ice on water, snow on land
    'flora',              # ((block, weight), ...) for vegetation
    'flora_ground',       # surface blocks flora may grow on
])

MEADOW_FLORA = ((TALL_GRASS, 0.75), (ROSE_BUSH, 0.13), (SUNFLOWER, 0.12))
FOREST_FLORA = ((TALL_GRASS, 0.85), (ROSE_BUSH, 0.15))
DRY_FLORA = ((TALL_GRASS, 0.7), (DEAD_BUSH, 0.3))
DESERT_FLORA = ((DEAD_BUSH, 0.67), (CACTUS, 0.33))

# One row per biome id; adding a biome means adding a row here.
BIOME_INFO = (
    BiomeInfo('Plains', GRASS, DIRT, DIRT, 4, SAND,
        0.5, 0.5, 0.4, 0.0, 0.0, 0.0, 0.0, 4, 2, 2, False, MEADOW_FLORA, (GRASS,)),
    BiomeInfo('Forest', GRASS, DIRT, DIRT, 4, SAND,
        3.0, 0.35, 0.5, 2.0, 0.0, 0.0, 0.0, 3, 2, 2, False, FOREST_FLORA, (GRASS,)),
    BiomeInfo('Desert', SAND, SAND, STONE, 3, RED_SAND,
        0.0, 0.05, 0.35, 0.0, 0.0, 0.0, 0.0, 5, 2, 2, False, DESERT_FLORA, (SAND,)),
    BiomeInfo('Mountains', GRASS, DIRT, STONE, 2, GRAVEL,
        0.3, 0.2, 2.0, 8.0, 1.0, 0.0, 0.0, 5, 2, 2, False, MEADOW_FLORA, (GRASS,)),
    BiomeInfo('Snowy', SNOWY_GRASS, DIRT, DIRT, 4, GRAVEL,
        0.5, 0.0, 0.8, 0.0, 0.0, 0.0, 0.0, 4, 3, 2, True, (), ()),
    BiomeInfo('Beach', SAND, SAND, DIRT, 2, SAND,
        0.0, 0.0, 0.1, 0.0, 0.0, 0.0, 1.0, 5, 2, 2, False, (), ()),
    BiomeInfo('Ocean', SAND, SAND, STONE, 2, SAND,
        0.0, 0.0, 0.3, 0.0, 0.0, 1.0, 0.0, 5, 2, 2, False, (), ()),
    BiomeInfo('Swamp', GRASS, CLAY, DIRT, 2, CLAY,
        1.5, 0.4, 0.2, -1.0, 0.0, 0.0, 1.0, 4, 2, 2, False, FOREST_FLORA, (GRASS,)),
    BiomeInfo('Savanna', GRASS, DIRT, DIRT, 4, SAND,
        0.3, 0.45, 0.45, 1.0, 0.0, 0.0, 0.0, 5, 1, 2, False, DRY_FLORA, (GRASS,)),
    BiomeInfo('Snowy Mountains', SNOWY_GRASS, DIRT, STONE, 2, GRAVEL,
        0.1, 0.0, 2.0, 10.0, 1.0, 0.0, 0.0, 5, 3, 2, True, (), ()),
)

BIOME_NAMES = tuple(info.name for info in BIOME_INFO)
MAX_TREE_SPACING = max(info.tree_spacing for info in BIOME_INFO)


def _column(field):
    return numpy.array([getattr(info, field) for info in BIOME_INFO])

# Per-biome attribute arrays, indexed by biome id.
SURFACE = _column('surface').astype(numpy.uint8)
SUBSURFACE = _column('subsurface').astype(numpy.uint8)
SUBSURFACE_LOWER = _column('subsurface_lower').astype(numpy.uint8)
SUBSURFACE_SPLIT = _column('subsurface_split').astype(numpy.int32)
UNDERWATER = _column('underwater').astype(numpy.uint8)
TREE_DENSITY = _column('tree_density').astype(numpy.float64)
VEG_DENSITY = _column('veg_density').astype(numpy.float64)
TERRAIN_SCALE = _column('terrain_scale').astype(numpy.float64)
HEIGHT_OFFSET = _column('height_offset').astype(numpy.float64)
RIDGE_WEIGHT = _column('ridge').astype(numpy.float64)
OCEAN_WEIGHT = _column('ocean').astype(numpy.float64)
FLAT_WEIGHT = _column('flat').astype(numpy.float64)
TREE_SPACING = _column('tree_spacing').astype(numpy.int32)
FREEZING = _column('freezing').astype(bool)


def biome_name(biome):
    return BIOME_NAMES[int(biome)]


def classify(temperature, humidity, continentalness, erosion, height, sea_level):
    """ Map climate and (preliminary) height to a biome id.

    Rules are tried in order and the first match wins, so the specific
    coastal and mountain rules take priority over the generic
    temperature/humidity lookup at the end. Works on scalars or arrays.
    """
    scalar = all(numpy.ndim(v) == 0 for v in (temperature, humidity, continentalness, erosion, height))
    t, h, c, e, y = numpy.broadcast_arrays(*[numpy.atleast_1d(v) for v in
        (temperature, humidity, continentalness, erosion, height)])
    cold = t < COLD_TEMPERATURE
    coastal = ((c < COAST_CONTINENTALNESS) & (y >= sea_level - COAST_BELOW)
        & (y <= sea_level + COAST_ABOVE))
    ridged = (c > MOUNTAIN_CONTINENTALNESS) & (e < MOUNTAIN_EROSION)
    highland = y > sea_level + HIGHLAND_RISE
    rules = [
        (c < OCEAN_CONTINENTALNESS, OCEAN),
        (coastal & (h > 0.6) & (t > 0.5), SWAMP),
        (coastal, BEACH),
        (ridged & cold, SNOWY_MOUNTAINS),
        (ridged, MOUNTAINS),
        (highland & cold, SNOWY),
        (highland, MOUNTAINS),
        # discretized climate diagram
        (t < 0.3, SNOWY),
        ((t < 0.5) & (h > 0.4), FOREST),
        (t < 0.5, PLAINS),
        ((t < 0.7) & (h > 0.6), SWAMP),
        ((t < 0.7) & (h > 0.4), FOREST),
        (t < 0.7, PLAINS),
        ((t < 0.85) & (h > 0.35), SAVANNA),
        (t < 0.85, PLAINS),
    ]
    biome = numpy.select([cond for cond, _ in rules], [b for _, b in rules], default=DESERT)
    biome = biome.astype(numpy.uint8)
    if scalar:
        return int(biome[0])
    return biome


def surface_blocks(biome, height, sea_level):
    """ Surface block per column, by biome and whether the column is submerged.

    Mountains above the alpine line expose bare stone.
    """
    biome = numpy.asarray(biome)
    height = numpy.asarray(height)
    surface = numpy.where(height < sea_level, UNDERWATER[biome], SURFACE[biome])
    alpine = (biome == MOUNTAINS) & (height > sea_level + ALPINE_RISE)
    return numpy.where(alpine, STONE, surface).astype(numpy.uint8)

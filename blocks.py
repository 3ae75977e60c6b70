import numpy

AIR = 0


class Block(object):
    name = None
    # Collision: solid blocks stop movement and support entities.
    solid = True
    # Light passes through transparent blocks (flood-fill lighting).
    transparent = False
    # Transparent blocks that still dim light passing through them.
    filters_light = False
    # Liquids and thin decorations can be walked/swum through.
    passable = False
    # Drawn as two crossed quads instead of a cube.
    cross = False


class Decoration(object):
    solid = False
    transparent = True
    passable = True
    cross = True


class Stone(Block):
    name = 'Stone'

class Dirt(Block):
    name = 'Dirt'

class DirtWithGrass(Block):
    name = 'Grass'

class Water(Block):
    name = 'Water'
    solid = False
    transparent = True
    filters_light = True
    passable = True

class Sand(Block):
    name = 'Sand'

class Wood(Block):
    name = 'Wood'

class Leaves(Block):
    name = 'Leaves'
    transparent = True
    filters_light = True

class SnowyGrass(Block):
    name = 'Snowy Grass'

class Gravel(Block):
    name = 'Gravel'

class CoalOre(Block):
    name = 'Coal Ore'

class IronOre(Block):
    name = 'Iron Ore'

class GoldOre(Block):
    name = 'Gold Ore'

class DiamondOre(Block):
    name = 'Diamond Ore'

class Bedrock(Block):
    name = 'Bedrock'

class Clay(Block):
    name = 'Clay'

class RedSand(Block):
    name = 'Red Sand'

class Snow(Block):
    '''thin snow layer resting on top of a column'''
    name = 'Snow'
    solid = False
    transparent = True
    passable = True

class Ice(Block):
    name = 'Ice'
    transparent = True
    filters_light = True

class Cactus(Block):
    name = 'Cactus'

class DeadBush(Decoration, Block):
    name = 'Dead Bush'

class TallGrass(Decoration, Block):
    name = 'Tall Grass'

class RoseBush(Decoration, Block):
    name = 'Rose Bush'

class Sunflower(Decoration, Block):
    name = 'Sunflower'


# Order fixes the numeric ids (id = position + 1, air is 0); consumers depend on it.
BLOCKS = [
    Stone,
    Dirt,
    DirtWithGrass,
    Water,
    Sand,
    Wood,
    Leaves,
    SnowyGrass,
    Gravel,
    CoalOre,
    IronOre,
    GoldOre,
    DiamondOre,
    Bedrock,
    Clay,
    RedSand,
    Snow,
    Ice,
    Cactus,
    DeadBush,
    TallGrass,
    RoseBush,
    Sunflower,
]

BLOCK_ID = {'Air': AIR}
for i, x in enumerate(BLOCKS):
    BLOCK_ID[x.name] = i + 1
BLOCK_NAME = {v: k for k, v in BLOCK_ID.items()}
MAX_BLOCK_ID = len(BLOCKS)

BLOCK_SOLID = numpy.array([False] + [x.solid for x in BLOCKS], dtype=numpy.uint8)
BLOCK_TRANSPARENT = numpy.array([True] + [x.transparent for x in BLOCKS], dtype=numpy.uint8)
BLOCK_FILTERS_LIGHT = numpy.array([False] + [x.filters_light for x in BLOCKS], dtype=numpy.uint8)
BLOCK_PASSABLE = numpy.array([True] + [x.passable for x in BLOCKS], dtype=numpy.uint8)
BLOCK_CROSS = numpy.array([False] + [x.cross for x in BLOCKS], dtype=numpy.uint8)

STONE = BLOCK_ID['Stone']
DIRT = BLOCK_ID['Dirt']
GRASS = BLOCK_ID['Grass']
WATER = BLOCK_ID['Water']
SAND = BLOCK_ID['Sand']
WOOD = BLOCK_ID['Wood']
LEAVES = BLOCK_ID['Leaves']
SNOWY_GRASS = BLOCK_ID['Snowy Grass']
GRAVEL = BLOCK_ID['Gravel']
COAL_ORE = BLOCK_ID['Coal Ore']
IRON_ORE = BLOCK_ID['Iron Ore']
GOLD_ORE = BLOCK_ID['Gold Ore']
DIAMOND_ORE = BLOCK_ID['Diamond Ore']
BEDROCK = BLOCK_ID['Bedrock']
CLAY = BLOCK_ID['Clay']
RED_SAND = BLOCK_ID['Red Sand']
SNOW = BLOCK_ID['Snow']
ICE = BLOCK_ID['Ice']
CACTUS = BLOCK_ID['Cactus']
DEAD_BUSH = BLOCK_ID['Dead Bush']
TALL_GRASS = BLOCK_ID['Tall Grass']
ROSE_BUSH = BLOCK_ID['Rose Bush']
SUNFLOWER = BLOCK_ID['Sunflower']

ORE_IDS = (COAL_ORE, IRON_ORE, GOLD_ORE, DIAMOND_ORE)
GRASS_LIKE = (GRASS, SNOWY_GRASS)
# Blocks that are not terrain: placed on top of the height map by decoration.
DECORATION_IDS = (WOOD, LEAVES, SNOW, CACTUS, DEAD_BUSH, TALL_GRASS, ROSE_BUSH, SUNFLOWER)


def is_transparent(block_id):
    return bool(BLOCK_TRANSPARENT[block_id])


def is_passable(block_id):
    return bool(BLOCK_PASSABLE[block_id])

#std/external libs
import time
import math
import numbers
import collections
import collections.abc
import numpy

#local libs
from config import (CHUNK_SIZE, MIN_Y, MAX_Y, HEIGHT, DEFAULT_OPTIONS, MAX_OCTAVES, TREE_HEIGHT_LIMIT,
    ORES, BEDROCK_LAYERS, SUBSURFACE_DEPTH, CAVE_DEPTH_BIAS, CAVE_FLOOR_FADE, CAVE_FLOOR_PENALTY,
    CAVE_ROOF_DEPTH, TUNNEL_WIDTH, TUNNEL_DEPTH, PREVIEW_MAX_RADIUS)
from blocks import AIR, STONE, WATER, ICE, SNOW, BEDROCK, BLOCK_ID
from chunks import Chunk
from terrain import HeightField
from climate import ClimateSampler
from util import chunk_origin
import biomes
import decoration
import logutil
import noise

GenOptions = collections.namedtuple('GenOptions', [
    'scale', 'octaves', 'persistence', 'lacunarity', 'amplitude', 'base_height', 'sea_level',
    'cave_scale', 'cave_octaves', 'cave_threshold', 'cave_max_y', 'cave_open_to_surface',
    'tree_probability', 'tree_min_height', 'tree_max_height',
])

# (option key, GenOptions field, kind, low, high). 'positive' values must be
# strictly above zero; numbers outside [low, high] are clamped.
OPTION_RULES = (
    ('scale', 'scale', 'positive', 0.0, 10.0),
    ('octaves', 'octaves', 'int', 1, MAX_OCTAVES),
    ('persistence', 'persistence', 'float', 0.0, 4.0),
    ('lacunarity', 'lacunarity', 'positive', 0.0, 8.0),
    ('amplitude', 'amplitude', 'float', 0.0, float(HEIGHT)),
    ('baseHeight', 'base_height', 'int', MIN_Y, MAX_Y),
    ('seaLevel', 'sea_level', 'int', MIN_Y, MAX_Y),
    ('caveScale', 'cave_scale', 'positive', 0.0, 10.0),
    ('caveOctaves', 'cave_octaves', 'int', 1, MAX_OCTAVES),
    ('caveThreshold', 'cave_threshold', 'float', -2.0, 2.0),
    ('caveMaxY', 'cave_max_y', 'int', MIN_Y, MAX_Y),
    ('caveOpenToSurface', 'cave_open_to_surface', 'bool', None, None),
    ('treeProbability', 'tree_probability', 'float', 0.0, 1.0),
    ('treeMinHeight', 'tree_min_height', 'int', 1, TREE_HEIGHT_LIMIT),
    ('treeMaxHeight', 'tree_max_height', 'int', 1, TREE_HEIGHT_LIMIT),
)


def _real(value):
    '''finite float, or None for anything that is not a real number'''
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def _check(value, kind, lo, hi):
    if kind == 'bool':
        return value if isinstance(value, (bool, numpy.bool_)) else None
    v = _real(value)
    if v is None or (kind == 'positive' and v <= 0.0):
        return None
    v = min(max(v, lo), hi)
    if kind == 'int':
        return int(math.floor(v))
    return v


def resolve_options(opts=None):
    """ Merge caller options over DEFAULT_OPTIONS into a GenOptions.

    Missing keys take the default. Malformed values (wrong type, NaN,
    infinities, non-positive scales) also take the default and are logged;
    numbers outside their range are clamped.
    """
    if isinstance(opts, GenOptions):
        return opts
    if opts is None:
        opts = {}
    elif not isinstance(opts, collections.abc.Mapping):
        logutil.log("OPTIONS", f"ignoring options of type {type(opts).__name__}", level="DEBUG")
        opts = {}
    values = {}
    for key, field, kind, lo, hi in OPTION_RULES:
        default = DEFAULT_OPTIONS[key]
        if opts.get(key) is None:
            values[field] = default
            continue
        checked = _check(opts[key], kind, lo, hi)
        if checked is None:
            logutil.log("OPTIONS", f"{key}={opts[key]!r} is malformed, using {default!r}", level="DEBUG")
            checked = default
        values[field] = checked
    if values['tree_min_height'] > values['tree_max_height']:
        values['tree_max_height'] = values['tree_min_height']
    return GenOptions(**values)


class ChunkGenerator(object):
    """Chunk generation for one seed and option set.

    Instances only keep noise permutation tables and options; every call to
    generate allocates its own buffers, so one generator may serve chunks
    from several threads.
    """

    def __init__(self, seed=0, opts=None):
        self.seed = int(seed)
        self.options = resolve_options(opts)
        self.climate = ClimateSampler(self.seed)
        self.height_field = HeightField(self.seed, self.options, self.climate)
        self.caves = noise.create_noise(self.seed, 'caves')
        self.tunnels = noise.create_noise(self.seed, 'tunnels')
        self.ores = noise.create_noise(self.seed, 'ores')
        self.decorator = decoration.Decorator(self.seed, self.options)

    def biome_at(self, world_x, world_z):
        return self.height_field.biome_at(world_x, world_z)

    def decoration_window(self, chunk_x, chunk_z):
        '''column fields for the chunk padded by the decoration margin'''
        x0, z0 = chunk_origin(chunk_x, chunk_z)
        m = decoration.window_margin()
        return self.height_field.window(x0 - m, z0 - m, CHUNK_SIZE + 2 * m, CHUNK_SIZE + 2 * m)

    def fill_columns(self, chunk_x, chunk_z, height, biome):
        """ Terrain, ores, caves and water for a chunk, before decoration.

        height and biome are (CHUNK_SIZE, CHUNK_SIZE) arrays for the chunk's
        columns. Returns a (CHUNK_SIZE, CHUNK_SIZE, HEIGHT) uint8 grid.
        """
        o = self.options
        sea = o.sea_level
        x0, z0 = chunk_origin(chunk_x, chunk_z)
        wx = numpy.arange(CHUNK_SIZE, dtype=numpy.int64)[:, None, None] + x0
        wz = numpy.arange(CHUNK_SIZE, dtype=numpy.int64)[None, :, None] + z0
        ys = numpy.arange(MIN_Y, MAX_Y + 1, dtype=numpy.int64)[None, None, :]
        depth = height.astype(numpy.int64)[:, :, None] - ys

        # Layers, bottom up: stone, subsurface, surface.
        submerged = height < sea
        surface = biomes.surface_blocks(biome, height, sea)
        upper = numpy.where(submerged, biomes.UNDERWATER[biome], biomes.SUBSURFACE[biome])
        lower = numpy.where(submerged, biomes.UNDERWATER[biome], biomes.SUBSURFACE_LOWER[biome])
        split = biomes.SUBSURFACE_SPLIT[biome][:, :, None]
        voxels = numpy.zeros((CHUNK_SIZE, CHUNK_SIZE, HEIGHT), dtype=numpy.uint8)
        voxels[depth > SUBSURFACE_DEPTH] = STONE
        sub = (depth >= 1) & (depth <= SUBSURFACE_DEPTH)
        voxels = numpy.where(sub & (depth <= split), upper[:, :, None], voxels)
        voxels = numpy.where(sub & (depth > split), lower[:, :, None], voxels)
        voxels = numpy.where(depth == 0, surface[:, :, None], voxels)

        # Bedrock thins out over the bottom layers and is always present at MIN_Y.
        fy = ys[:, :, :BEDROCK_LAYERS]
        chance = (MIN_Y + BEDROCK_LAYERS - fy) / float(BEDROCK_LAYERS)
        roll = noise.position_hash(self.seed, noise.SALT_BEDROCK, wx, wz, fy)
        floor = voxels[:, :, :BEDROCK_LAYERS]
        floor[(roll < chance) & (depth[:, :, :BEDROCK_LAYERS] >= 0)] = BEDROCK

        interior = (depth > SUBSURFACE_DEPTH) & (voxels == STONE)
        self._place_ores(voxels, interior, x0, z0)
        self._carve_caves(voxels, interior, x0, z0, depth, ys, submerged)

        water = (depth < 0) & (ys <= sea)
        voxels[water] = WATER
        voxels[water & (ys == sea) & biomes.FREEZING[biome][:, :, None]] = ICE
        snowy = (height > sea) & biomes.FREEZING[biome]
        voxels[(depth == -1) & snowy[:, :, None]] = SNOW
        return voxels

    def _place_ores(self, voxels, interior, x0, z0):
        ix, iz, iy = numpy.nonzero(interior)
        if ix.size == 0:
            return
        px = (ix + x0).astype(numpy.float64)
        pz = (iz + z0).astype(numpy.float64)
        py = (iy + MIN_Y).astype(numpy.float64)
        vals = voxels[ix, iz, iy]
        for k, (name, lo, hi, scale, threshold) in enumerate(ORES):
            # first ore in table order wins
            band = (py >= lo) & (py <= hi) & (vals == STONE)
            if not band.any():
                continue
            shift = (k + 1) * 100.0
            n = self.ores.octave_noise(px[band] * scale + shift, py[band] * scale,
                pz[band] * scale + shift, 1)
            vals[numpy.nonzero(band)[0][n > threshold]] = BLOCK_ID[name]
        voxels[ix, iz, iy] = vals

    def _carve_caves(self, voxels, interior, x0, z0, depth, ys, submerged):
        o = self.options
        sea = o.sea_level
        eligible = interior & (ys <= o.cave_max_y)
        if not o.cave_open_to_surface:
            eligible &= depth > SUBSURFACE_DEPTH + CAVE_ROOF_DEPTH
        # keep the bed of submerged columns sealed
        eligible &= ~(submerged[:, :, None] & (ys <= sea))
        ix, iz, iy = numpy.nonzero(eligible)
        if ix.size == 0:
            return
        px = (ix + x0).astype(numpy.float64)
        pz = (iz + z0).astype(numpy.float64)
        py = (iy + MIN_Y).astype(numpy.float64)
        cs = o.cave_scale
        value = self.caves.octave_noise(px * cs, py * cs * 0.5, pz * cs, o.cave_octaves, 0.5, 2.0)
        value = value + (sea - py) / (sea - MIN_Y + 1) * CAVE_DEPTH_BIAS
        value = value - numpy.clip((MIN_Y + CAVE_FLOOR_FADE - py) / CAVE_FLOOR_FADE, 0.0, 1.0) * CAVE_FLOOR_PENALTY
        carve = value > o.cave_threshold
        deep = py < sea - TUNNEL_DEPTH
        if deep.any():
            tunnel = self.tunnels.octave_noise(px[deep] * cs * 0.7, py[deep] * cs * 0.3,
                pz[deep] * cs * 0.7, 2, 0.5, 2.0)
            carve[deep] |= numpy.abs(tunnel) < TUNNEL_WIDTH
        voxels[ix[carve], iz[carve], iy[carve]] = AIR

    def generate(self, chunk_x, chunk_z):
        """ Generate chunk (chunk_x, chunk_z).

        Heights and biomes come from a window padded by the decoration margin
        so that trees rooted in neighbouring chunks are placed identically.
        """
        t0 = time.perf_counter()
        chunk_x = int(chunk_x)
        chunk_z = int(chunk_z)
        m = decoration.window_margin()
        fields = self.decoration_window(chunk_x, chunk_z)
        inner = (slice(m, m + CHUNK_SIZE), slice(m, m + CHUNK_SIZE))
        height = fields.height[inner]
        biome = fields.biome[inner]
        t1 = time.perf_counter()
        voxels = self.fill_columns(chunk_x, chunk_z, height, biome)
        t2 = time.perf_counter()
        self.decorator.decorate(voxels, chunk_x, chunk_z, fields)
        t3 = time.perf_counter()
        logutil.log("GEN", f"chunk ({chunk_x}, {chunk_z}) seed {self.seed}: "
            f"{(t1 - t0) * 1000.0:.1f}ms height, {(t2 - t1) * 1000.0:.1f}ms fill, "
            f"{(t3 - t2) * 1000.0:.1f}ms decorate")
        return Chunk(chunk_x, chunk_z, voxels.reshape(-1), height, biome)


def generate_chunk(chunk_x, chunk_z, seed=0, opts=None):
    '''generate one chunk; the result depends only on the arguments'''
    return ChunkGenerator(seed, opts).generate(chunk_x, chunk_z)


def get_biome_at(world_x, world_z, seed=0, opts=None):
    '''biome id of a world column, as recorded in the biome map of its chunk'''
    return ChunkGenerator(seed, opts).biome_at(world_x, world_z)


BIOME_COLORS = (
    (110, 180, 70),    # plains
    (40, 110, 40),     # forest
    (220, 200, 120),   # desert
    (120, 120, 120),   # mountains
    (230, 240, 245),   # snowy
    (240, 225, 160),   # beach
    (30, 60, 160),     # ocean
    (70, 90, 60),      # swamp
    (180, 170, 80),    # savanna
    (200, 210, 220),   # snowy mountains
)


if __name__ == '__main__':
    import sys
    from PIL import Image

    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 0
    radius = int(sys.argv[2]) if len(sys.argv) > 2 else 8
    radius = max(1, min(radius, PREVIEW_MAX_RADIUS))
    gen = ChunkGenerator(seed)
    size = 2 * radius * CHUNK_SIZE
    t = time.time()
    fields = gen.height_field.window(-radius * CHUNK_SIZE, -radius * CHUNK_SIZE, size, size)
    print('height field', time.time() - t)
    h = fields.height.astype(numpy.float64)
    print('STATS')
    print('######')
    print(h.min(), h.max(), numpy.average(h))
    shade = numpy.array((h - MIN_Y) / (MAX_Y - MIN_Y) * 255, dtype='u1')
    Image.fromarray(shade.T, 'L').save('preview_height.png')
    colors = numpy.array(BIOME_COLORS, dtype='u1')[fields.biome]
    Image.fromarray(colors.transpose(1, 0, 2), 'RGB').save('preview_biome.png')
    print('wrote preview_height.png and preview_biome.png', size, 'x', size)

'''
decoration.py -- trees and ground flora stamped over a filled chunk
'''
import collections

import numpy

import noise
import biomes
from blocks import AIR, WOOD, LEAVES, SNOW, CACTUS, GRASS_LIKE
from config import (CHUNK_SIZE, MIN_Y, MAX_Y, TREE_MARGIN, TREE_CLUSTER_SCALE, LEAF_GAP,
    VEG_SCALE, VEG_CUTOFF)
from util import chunk_origin, set_voxel

Tree = collections.namedtuple('Tree', ['x', 'z', 'ground', 'height', 'biome', 'priority'])

TRUNK_OVER = (AIR, LEAVES, SNOW)
LEAVES_OVER = (AIR,)


def window_margin():
    '''columns around a chunk whose trees and blockers matter to it'''
    return TREE_MARGIN + biomes.MAX_TREE_SPACING


def plan_tree(seed, options, x, z, ground, biome, priority=0.0):
    """ Root a tree at world column (x, z) with its surface at ground.

    The trunk height depends only on the column, so every chunk the tree
    reaches agrees on it.
    """
    lo = int(options.tree_min_height)
    hi = int(options.tree_max_height)
    roll = noise.position_hash(seed, noise.SALT_TREE_HEIGHT, x, z)
    height = min(hi, lo + int(roll * (hi - lo + 1)))
    return Tree(int(x), int(z), int(ground), height, int(biome), priority)


def canopy_offsets(trunk_height, canopy_depth, radius):
    '''(dx, dy, dz) of every possible leaf relative to the root's surface voxel'''
    offsets = []
    for ly in range(max(1, trunk_height - canopy_depth), trunk_height + 2):
        r = 1 if ly > trunk_height else radius
        for dx in range(-r, r + 1):
            for dz in range(-r, r + 1):
                if dx == 0 and dz == 0 and ly <= trunk_height:
                    continue  # trunk
                if abs(dx) + abs(dz) > r + 1:
                    continue
                offsets.append((dx, ly, dz))
    return numpy.array(offsets, dtype=numpy.int64).reshape((-1, 3))


def canopy_voxels(seed, tree):
    """ World positions (x, y, z) of the leaves of a tree, gaps removed.

    """
    info = biomes.BIOME_INFO[tree.biome]
    offsets = canopy_offsets(tree.height, info.canopy_depth, info.canopy_radius)
    xs = tree.x + offsets[:, 0]
    ys = tree.ground + offsets[:, 1]
    zs = tree.z + offsets[:, 2]
    keep = noise.position_hash(seed, noise.SALT_LEAF_GAP, xs, zs, ys) > LEAF_GAP
    return numpy.stack([xs[keep], ys[keep], zs[keep]], axis=1)


def stamp_tree(voxels, chunk_x, chunk_z, tree, seed):
    """ Write the part of a tree that falls inside chunk (chunk_x, chunk_z).

    The trunk replaces air, leaves and snow; leaves only fill air.
    """
    x0, z0 = chunk_origin(chunk_x, chunk_z)
    lx = tree.x - x0
    lz = tree.z - z0
    for ty in range(1, tree.height + 1):
        set_voxel(voxels, lx, tree.ground + ty, lz, WOOD, only_over=TRUNK_OVER)
    for x, y, z in canopy_voxels(seed, tree):
        set_voxel(voxels, int(x) - x0, int(y), int(z) - z0, LEAVES, only_over=LEAVES_OVER)


class Decorator(object):
    """Tree and flora placement for one seed and option set."""

    def __init__(self, seed, options):
        self.seed = seed
        self.options = options
        self.cluster = noise.create_noise(seed, 'tree_cluster')
        self.density = noise.create_noise(seed, 'vegetation')

    def candidates(self, fields):
        """ Every column of a ColumnFields window that passes the root test.

        Returned as (priority, x, z, ground, biome) tuples, sorted so the
        highest priority comes first.
        """
        o = self.options
        height = fields.height
        biome = fields.biome
        width, depth = height.shape
        ix = numpy.arange(width, dtype=numpy.int64)[:, None] + fields.x0
        iz = numpy.arange(depth, dtype=numpy.int64)[None, :] + fields.z0
        ix, iz = numpy.broadcast_arrays(ix, iz)

        density = biomes.TREE_DENSITY[biome]
        surface = biomes.surface_blocks(biome, height, o.sea_level)
        ok = ((height > o.sea_level) & (height + 1 <= MAX_Y) & (density > 0)
            & numpy.isin(surface, GRASS_LIKE))
        cluster = numpy.clip(self.cluster.octave_noise(ix * TREE_CLUSTER_SCALE, 0.5,
            iz * TREE_CLUSTER_SCALE, 2, 0.5, 2.0) + 1.0, 0.0, 2.0)
        roll = noise.position_hash(self.seed, noise.SALT_TREE, ix, iz)
        hit = ok & (roll < density * cluster * o.tree_probability)

        found = [(float(roll[i, j]), int(ix[i, j]), int(iz[i, j]), int(height[i, j]), int(biome[i, j]))
            for i, j in zip(*numpy.nonzero(hit))]
        found.sort()
        return found

    def roots(self, chunk_x, chunk_z, fields):
        """ Accepted trees that can reach into the chunk, in priority order.

        A candidate is rejected when any higher priority candidate lies closer
        than its biome's spacing. The decision only looks at candidates within
        that spacing, all of which are inside the window.
        """
        x0, z0 = chunk_origin(chunk_x, chunk_z)
        lo_x, hi_x = x0 - TREE_MARGIN, x0 + CHUNK_SIZE - 1 + TREE_MARGIN
        lo_z, hi_z = z0 - TREE_MARGIN, z0 + CHUNK_SIZE - 1 + TREE_MARGIN
        # higher priority candidates seen so far, bucketed by cell; a cell is
        # as wide as the largest spacing so only the 3x3 neighbourhood matters
        cell = max(1, biomes.MAX_TREE_SPACING)
        seen = collections.defaultdict(list)
        trees = []
        for priority, x, z, ground, biome in self.candidates(fields):
            cx, cz = x // cell, z // cell
            if lo_x <= x <= hi_x and lo_z <= z <= hi_z:
                spacing2 = int(biomes.TREE_SPACING[biome]) ** 2
                blocked = any((ox - x) ** 2 + (oz - z) ** 2 < spacing2
                    for dx in (-1, 0, 1) for dz in (-1, 0, 1)
                    for ox, oz in seen.get((cx + dx, cz + dz), ()))
                if not blocked:
                    trees.append(plan_tree(self.seed, self.options, x, z, ground, biome, priority))
            seen[(cx, cz)].append((x, z))
        return trees

    def vegetation(self, voxels, chunk_x, chunk_z, height, biome):
        o = self.options
        x0, z0 = chunk_origin(chunk_x, chunk_z)
        ix = numpy.arange(CHUNK_SIZE, dtype=numpy.int64)[:, None] + x0
        iz = numpy.arange(CHUNK_SIZE, dtype=numpy.int64)[None, :] + z0
        ix, iz = numpy.broadcast_arrays(ix, iz)

        field = (self.density.octave_noise(ix * VEG_SCALE, 0.5, iz * VEG_SCALE, 2, 0.5, 2.0) + 1.0) * 0.5
        strength = numpy.clip((field - VEG_CUTOFF) / (1.0 - VEG_CUTOFF), 0.0, 1.0)
        chance = strength * biomes.VEG_DENSITY[biome]
        roll = noise.position_hash(self.seed, noise.SALT_VEGETATION, ix, iz)
        pick = noise.position_hash(self.seed, noise.SALT_FLORA, ix, iz)
        grow = (roll < chance) & (height > o.sea_level) & (height < MAX_Y)

        for lx, lz in zip(*numpy.nonzero(grow)):
            info = biomes.BIOME_INFO[biome[lx, lz]]
            ground = int(height[lx, lz])
            if voxels[lx, lz, ground - MIN_Y] not in info.flora_ground:
                continue
            if voxels[lx, lz, ground + 1 - MIN_Y] != AIR:
                continue
            block = _choose(info.flora, pick[lx, lz])
            if block is None:
                continue
            if block == CACTUS:
                tall = 1 + int(noise.position_hash(self.seed, noise.SALT_CACTUS, ix[lx, lz], iz[lx, lz]) * 3)
                for dy in range(1, tall + 1):
                    if not set_voxel(voxels, lx, ground + dy, lz, CACTUS, only_over=(AIR,)):
                        break
            else:
                set_voxel(voxels, lx, ground + 1, lz, block, only_over=(AIR,))

    def decorate(self, voxels, chunk_x, chunk_z, fields):
        """ Stamp trees and then flora into a filled chunk.

        fields must cover the chunk plus window_margin() columns on every side.
        """
        m = window_margin()
        for tree in self.roots(chunk_x, chunk_z, fields):
            stamp_tree(voxels, chunk_x, chunk_z, tree, self.seed)
        inner = (slice(m, m + CHUNK_SIZE), slice(m, m + CHUNK_SIZE))
        self.vegetation(voxels, chunk_x, chunk_z, fields.height[inner], fields.biome[inner])


def _choose(flora, roll):
    '''weighted pick from ((block, weight), ...) with roll in [0, 1)'''
    total = sum(w for _, w in flora)
    if total <= 0:
        return None
    acc = 0.0
    for block, w in flora:
        acc += w / total
        if roll < acc:
            return block
    return flora[-1][0]

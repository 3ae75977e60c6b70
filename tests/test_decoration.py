import os
import sys

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import biomes
import decoration
import mapgen
from config import CHUNK_SIZE, MIN_Y, MAX_Y, TREE_MARGIN, TREE_MIN_HEIGHT, TREE_MAX_HEIGHT
from blocks import (AIR, WOOD, LEAVES, CACTUS, DEAD_BUSH, TALL_GRASS, ROSE_BUSH, SUNFLOWER,
    GRASS, SNOWY_GRASS, SAND)


def _flat_chunk(gen, ground, biome):
    height = np.full((CHUNK_SIZE, CHUNK_SIZE), ground, dtype=np.int32)
    biome = np.full((CHUNK_SIZE, CHUNK_SIZE), biome, dtype=np.uint8)
    return gen.fill_columns(0, 0, height, biome)


def test_forced_tree_at_column():
    seed = 0
    gen = mapgen.ChunkGenerator(seed)
    ground = 70
    vox = _flat_chunk(gen, ground, biomes.FOREST)
    tree = decoration.plan_tree(seed, gen.options, 8, 8, ground, biomes.FOREST)
    decoration.stamp_tree(vox, 0, 0, tree, seed)

    trunk = vox[8, 8, ground + 1 - MIN_Y:]
    run = 0
    while run < len(trunk) and trunk[run] == WOOD:
        run += 1
    assert TREE_MIN_HEIGHT <= run <= TREE_MAX_HEIGHT
    assert run == tree.height

    leaves = np.argwhere(vox == LEAVES)
    assert len(leaves) > 10
    info = biomes.BIOME_INFO[biomes.FOREST]
    start = ground + tree.height - info.canopy_depth
    assert (leaves[:, 2] + MIN_Y >= start).all()
    assert (leaves[:, 2] + MIN_Y <= ground + tree.height + 1).all()
    # halo stays within the canopy radius of the trunk
    assert (np.abs(leaves[:, 0] - 8) <= info.canopy_radius).all()
    assert (np.abs(leaves[:, 1] - 8) <= info.canopy_radius).all()
    # leaves directly above the trunk cap it
    assert vox[8, 8, ground + tree.height + 1 - MIN_Y] in (LEAVES, AIR)


def test_tree_heights_in_range():
    gen = mapgen.ChunkGenerator(3, {'treeMinHeight': 5, 'treeMaxHeight': 7})
    heights = set()
    for x in range(-40, 40, 3):
        for z in range(-40, 40, 7):
            heights.add(decoration.plan_tree(3, gen.options, x, z, 70, biomes.PLAINS).height)
    assert heights <= {5, 6, 7}
    assert len(heights) > 1


def test_stamp_only_inside_chunk():
    seed = 4
    gen = mapgen.ChunkGenerator(seed)
    vox = _flat_chunk(gen, 70, biomes.PLAINS)
    before = vox.copy()
    # root two columns outside chunk (0, 0): only its canopy edge lands here
    tree = decoration.plan_tree(seed, gen.options, -2, 5, 70, biomes.PLAINS)
    decoration.stamp_tree(vox, 0, 0, tree, seed)
    changed = np.argwhere(vox != before)
    assert (vox[changed[:, 0], changed[:, 1], changed[:, 2]] == LEAVES).all()
    assert (changed[:, 0] == 0).all()


def test_leaves_never_replace_terrain():
    seed = 4
    gen = mapgen.ChunkGenerator(seed)
    vox = _flat_chunk(gen, 70, biomes.PLAINS)
    # ground under the canopy is higher than the root
    vox[9:12, 9:12, 71 - MIN_Y:75 - MIN_Y] = GRASS
    before = vox.copy()
    tree = decoration.plan_tree(seed, gen.options, 8, 8, 70, biomes.PLAINS)
    decoration.stamp_tree(vox, 0, 0, tree, seed)
    assert (vox[9:12, 9:12, 71 - MIN_Y:75 - MIN_Y] == GRASS).all()
    written = vox != before
    assert np.isin(before[written], (AIR,)).all()


def test_canopy_offsets_skip_trunk():
    offs = decoration.canopy_offsets(5, 2, 2)
    trunk = offs[(offs[:, 0] == 0) & (offs[:, 2] == 0)]
    assert (trunk[:, 1] > 5).all()
    assert offs[:, 1].min() == 3
    assert offs[:, 1].max() == 6
    assert (np.abs(offs[:, 0]) + np.abs(offs[:, 2]) <= 3).all()


def test_tree_seams():
    # Trees near the seam of chunks (0,0) and (1,0) are planned identically by
    # both chunks, and their canopies are complete once the chunks are stitched.
    opts = {'treeProbability': 1.0}
    lo, hi = CHUNK_SIZE - TREE_MARGIN, CHUNK_SIZE + TREE_MARGIN - 1

    def near_seam(tree):
        return lo <= tree.x <= hi and -TREE_MARGIN <= tree.z < CHUNK_SIZE + TREE_MARGIN

    found = None
    for seed in range(12):
        gen = mapgen.ChunkGenerator(seed, opts)
        roots_a = [t for t in gen.decorator.roots(0, 0, gen.decoration_window(0, 0)) if near_seam(t)]
        roots_b = [t for t in gen.decorator.roots(1, 0, gen.decoration_window(1, 0)) if near_seam(t)]
        assert roots_a == roots_b, seed
        if roots_a and found is None:
            found = (seed, roots_a)
    assert found is not None

    seed, roots = found
    first = mapgen.ChunkGenerator(seed, opts)
    a = first.generate(0, 0)
    b = first.generate(1, 0)
    second = mapgen.ChunkGenerator(seed, opts)
    b2 = second.generate(1, 0)
    a2 = second.generate(0, 0)
    assert np.array_equal(a.data, a2.data)
    assert np.array_equal(b.data, b2.data)

    world = np.concatenate([a.voxels(), b.voxels()], axis=0)
    for tree in roots:
        for x, y, z in decoration.canopy_voxels(seed, tree):
            if 0 <= x < 2 * CHUNK_SIZE and 0 <= z < CHUNK_SIZE and MIN_Y <= y <= MAX_Y:
                assert world[x, z, y - MIN_Y] != AIR, (tree, x, y, z)
        if 0 <= tree.z < CHUNK_SIZE:
            for ty in range(1, tree.height + 1):
                assert world[tree.x, tree.z, tree.ground + ty - MIN_Y] != AIR


def test_roots_respect_spacing():
    gen = mapgen.ChunkGenerator(21, {'treeProbability': 1.0})
    for cx, cz in ((0, 0), (2, -1)):
        trees = gen.decorator.roots(cx, cz, gen.decoration_window(cx, cz))
        for i, t in enumerate(trees):
            for u in trees[:i]:
                spacing = int(biomes.TREE_SPACING[t.biome])
                assert (t.x - u.x) ** 2 + (t.z - u.z) ** 2 >= spacing ** 2


def test_roots_checked_against_every_candidate():
    accepted = 0
    for seed, cx, cz in ((8, 0, 0), (8, -3, 4), (21, 0, 0), (21, 2, -1), (40, 7, 7)):
        gen = mapgen.ChunkGenerator(seed, {'treeProbability': 1.0})
        fields = gen.decoration_window(cx, cz)
        found = gen.decorator.candidates(fields)
        x0, z0 = cx * CHUNK_SIZE, cz * CHUNK_SIZE
        expected = []
        for i, (_, x, z, _, biome) in enumerate(found):
            if not (x0 - TREE_MARGIN <= x < x0 + CHUNK_SIZE + TREE_MARGIN
                    and z0 - TREE_MARGIN <= z < z0 + CHUNK_SIZE + TREE_MARGIN):
                continue
            spacing = int(biomes.TREE_SPACING[biome])
            if all((x - ox) ** 2 + (z - oz) ** 2 >= spacing ** 2 for _, ox, oz, _, _ in found[:i]):
                expected.append((x, z))
        trees = gen.decorator.roots(cx, cz, fields)
        assert [(t.x, t.z) for t in trees] == expected, (seed, cx, cz)
        accepted += len(trees)
    assert accepted > 0


def test_flora_on_flora_ground():
    flora = (DEAD_BUSH, TALL_GRASS, ROSE_BUSH, SUNFLOWER)
    seen = 0
    for seed in range(1, 9):
        if seed > 3 and seen:
            break
        chunk = mapgen.generate_chunk(0, 0, seed)
        vox = chunk.voxels()
        for lx, lz, yi in np.argwhere(np.isin(vox, flora)):
            assert yi > 0
            assert vox[lx, lz, yi - 1] in (GRASS, SNOWY_GRASS, SAND)
            assert yi - 1 + MIN_Y == chunk.height_at(lx, lz)
            seen += 1
        for lx, lz, yi in np.argwhere(vox == CACTUS):
            assert vox[lx, lz, yi - 1] in (SAND, CACTUS)
    assert seen > 0

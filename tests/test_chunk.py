import os
import sys

import numpy as np

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from chunks import Chunk
from config import CHUNK_SIZE, MIN_Y, MAX_Y, HEIGHT
from blocks import AIR, STONE, GRASS, WATER, LEAVES, TALL_GRASS
import util


def _column_chunk():
    vox = np.zeros((CHUNK_SIZE, CHUNK_SIZE, HEIGHT), dtype=np.uint8)
    vox[:, :, :10 - MIN_Y] = STONE
    vox[:, :, 10 - MIN_Y] = GRASS
    vox[3, 4, 11 - MIN_Y] = TALL_GRASS
    vox[5, 5, 30 - MIN_Y] = LEAVES
    vox[6, 6, :] = AIR
    vox[7, 7, 11 - MIN_Y:20 - MIN_Y] = WATER
    height = np.full((CHUNK_SIZE, CHUNK_SIZE), 10, dtype=np.int16)
    biome = np.zeros((CHUNK_SIZE, CHUNK_SIZE), dtype=np.uint8)
    return Chunk(2, -3, vox.reshape(-1), height, biome)


def test_layout_matches_flat_index():
    chunk = _column_chunk()
    assert chunk.data[util.voxel_index(3, 11, 4)] == TALL_GRASS
    assert chunk.data[(3 * CHUNK_SIZE + 4) * HEIGHT + (11 - MIN_Y)] == TALL_GRASS
    assert chunk.block_at(3, 11, 4) == TALL_GRASS
    assert chunk.block_at(0, MIN_Y, 0) == STONE


def test_block_at_out_of_range_is_air():
    chunk = _column_chunk()
    assert chunk.block_at(-1, 0, 0) == AIR
    assert chunk.block_at(0, MAX_Y + 1, 0) == AIR
    assert chunk.block_at(0, MIN_Y - 1, 0) == AIR
    assert chunk.block_at(0, 0, CHUNK_SIZE) == AIR


def test_top_y():
    chunk = _column_chunk()
    assert chunk.top_y(0, 0) == 10
    assert chunk.top_y(3, 4) == 11
    assert chunk.top_y(3, 4, solid_only=True) == 10
    assert chunk.top_y(5, 5) == 30
    assert chunk.top_y(7, 7) == 19
    assert chunk.top_y(7, 7, solid_only=True) == 10
    assert chunk.top_y(6, 6) == MIN_Y - 1


def test_ground_below():
    chunk = _column_chunk()
    assert chunk.ground_below(0, 50, 0) == 10
    assert chunk.ground_below(0, 5, 0) == 5
    assert chunk.ground_below(5, 40, 5) == 30
    assert chunk.ground_below(5, 29, 5) == 10
    assert chunk.ground_below(6, 40, 6) == MIN_Y - 1
    assert chunk.ground_below(0, MIN_Y - 3, 0) == MIN_Y - 1
    assert chunk.ground_below(0, MAX_Y + 50, 0) == 10
    assert chunk.ground_below(-1, 40, 0) == MIN_Y - 1


def test_maps():
    chunk = _column_chunk()
    assert chunk.height_at(15, 15) == 10
    assert chunk.biome_at(0, 15) == 0
    d = chunk.as_dict()
    assert set(d) == {'chunkX', 'chunkZ', 'data', 'heightMap', 'biomeMap'}
    assert d['chunkX'] == 2 and d['chunkZ'] == -3


def test_payload():
    chunk = _column_chunk()
    payload = chunk.to_payload()
    assert isinstance(payload['data'], bytes)
    assert len(payload['data']) == CHUNK_SIZE * CHUNK_SIZE * HEIGHT
    assert len(payload['heightMap']) == CHUNK_SIZE * CHUNK_SIZE * 2
    back = Chunk.from_payload(payload)
    assert (back.chunk_x, back.chunk_z) == (2, -3)
    assert np.array_equal(back.data, chunk.data)
    assert np.array_equal(back.height_map, chunk.height_map)
    assert back.top_y(3, 4) == 11


def test_set_voxel():
    vox = np.zeros((CHUNK_SIZE, CHUNK_SIZE, HEIGHT), dtype=np.uint8)
    assert util.set_voxel(vox, 1, 0, 2, STONE)
    assert vox[1, 2, -MIN_Y] == STONE
    assert not util.set_voxel(vox, 1, 0, 2, LEAVES, only_over=(AIR,))
    assert vox[1, 2, -MIN_Y] == STONE
    assert not util.set_voxel(vox, CHUNK_SIZE, 0, 0, STONE)
    assert not util.set_voxel(vox, 0, MAX_Y + 1, 0, STONE)
    assert util.chunkify(-1, 16) == (-1, 1)
    assert util.chunk_origin(-1, 2) == (-16, 32)

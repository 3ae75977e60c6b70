'''
chunks.py -- the generated chunk record and its point queries
'''
import numpy

from blocks import AIR, BLOCK_SOLID
from config import CHUNK_SIZE, MIN_Y, HEIGHT
from util import in_chunk, voxel_index, column_index


class Chunk(object):
    """A generated 16 x 16 column chunk.

    data holds CHUNK_SIZE * CHUNK_SIZE * HEIGHT block ids, column-major:
    index = (lx * CHUNK_SIZE + lz) * HEIGHT + (y - MIN_Y). height_map and
    biome_map hold one entry per column at lx * CHUNK_SIZE + lz.
    """

    def __init__(self, chunk_x, chunk_z, data, height_map, biome_map):
        self.chunk_x = int(chunk_x)
        self.chunk_z = int(chunk_z)
        self.data = numpy.ascontiguousarray(data, dtype=numpy.uint8).reshape(-1)
        self.height_map = numpy.asarray(height_map, dtype=numpy.int16).reshape(-1)
        self.biome_map = numpy.asarray(biome_map, dtype=numpy.uint8).reshape(-1)

    def voxels(self):
        '''view of data shaped (lx, lz, y - MIN_Y)'''
        return self.data.reshape((CHUNK_SIZE, CHUNK_SIZE, HEIGHT))

    def block_at(self, lx, y, lz):
        if not in_chunk(lx, y, lz):
            return AIR
        return int(self.data[voxel_index(lx, y, lz)])

    def height_at(self, lx, lz):
        return int(self.height_map[column_index(lx, lz)])

    def biome_at(self, lx, lz):
        return int(self.biome_map[column_index(lx, lz)])

    def top_y(self, lx, lz, solid_only=False):
        """ Highest non-air (or solid) voxel of a column, MIN_Y - 1 if none.

        """
        column = self.voxels()[lx, lz]
        if solid_only:
            mask = BLOCK_SOLID[column] != 0
        else:
            mask = column != AIR
        hits = numpy.nonzero(mask)[0]
        if hits.size == 0:
            return MIN_Y - 1
        return int(hits[-1]) + MIN_Y

    def ground_below(self, lx, y, lz):
        """ First solid voxel at or below y in a column, MIN_Y - 1 if none.

        """
        if not (0 <= lx < CHUNK_SIZE and 0 <= lz < CHUNK_SIZE):
            return MIN_Y - 1
        top = min(int(y), MIN_Y + HEIGHT - 1) - MIN_Y
        if top < 0:
            return MIN_Y - 1
        column = self.voxels()[lx, lz, :top + 1]
        hits = numpy.nonzero(BLOCK_SOLID[column])[0]
        if hits.size == 0:
            return MIN_Y - 1
        return int(hits[-1]) + MIN_Y

    def as_dict(self):
        return {
            'chunkX': self.chunk_x,
            'chunkZ': self.chunk_z,
            'data': self.data,
            'heightMap': self.height_map,
            'biomeMap': self.biome_map,
        }

    def to_payload(self):
        '''plain bytes form for sending across a process boundary'''
        return {
            'cx': self.chunk_x,
            'cz': self.chunk_z,
            'data': self.data.tobytes(),
            'heightMap': self.height_map.tobytes(),
            'biomeMap': self.biome_map.tobytes(),
        }

    @classmethod
    def from_payload(cls, payload):
        return cls(payload['cx'], payload['cz'],
            numpy.frombuffer(payload['data'], dtype=numpy.uint8),
            numpy.frombuffer(payload['heightMap'], dtype=numpy.int16),
            numpy.frombuffer(payload['biomeMap'], dtype=numpy.uint8))

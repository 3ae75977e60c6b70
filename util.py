import numpy

from config import CHUNK_SIZE, MIN_Y, MAX_Y, HEIGHT, WORLD_WRAP


def chunkify(x, z):
    """ Returns a tuple representing the chunk for the given world column.

    """
    return int(x) // CHUNK_SIZE, int(z) // CHUNK_SIZE


def wrap_world(w):
    return (int(w) + WORLD_WRAP) % (2 * WORLD_WRAP) - WORLD_WRAP


def chunk_origin(chunk_x, chunk_z):
    """ World column of a chunk's (0, 0) corner, wrapped into int64 range.

    """
    return wrap_world(int(chunk_x) * CHUNK_SIZE), wrap_world(int(chunk_z) * CHUNK_SIZE)


def column_index(lx, lz):
    return lx * CHUNK_SIZE + lz


def voxel_index(lx, y, lz):
    """ Flat index into a chunk's column-major voxel array.

    """
    return (lx * CHUNK_SIZE + lz) * HEIGHT + (y - MIN_Y)


def in_chunk(lx, y, lz):
    return 0 <= lx < CHUNK_SIZE and 0 <= lz < CHUNK_SIZE and MIN_Y <= y <= MAX_Y


def set_voxel(voxels, lx, y, lz, block_id, only_over=None):
    '''
    Write one block into a (CHUNK_SIZE, CHUNK_SIZE, HEIGHT) voxel grid.
    Out of range writes are ignored. When only_over is given, the current
    block must be one of those ids. Returns True if the block was written.
    '''
    if not in_chunk(lx, y, lz):
        return False
    yi = y - MIN_Y
    if only_over is not None and voxels[lx, lz, yi] not in only_over:
        return False
    voxels[lx, lz, yi] = block_id
    return True


def clamp(v, a, b):
    return numpy.minimum(numpy.maximum(v, a), b)


def lerp(a, b, t):
    return a + (b - a) * clamp(t, 0.0, 1.0)


def smoothstep(t):
    t = clamp(t, 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)

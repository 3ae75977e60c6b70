#
# Improved gradient noise for 3D, vectorized over numpy arrays.
#
# Based on Ken Perlin's reference implementation of "Improving Noise"
# (SIGGRAPH 2002), with the permutation table shuffled per seed so that
# every seed gives an independent field.
#
# Lattice coordinates wrap every 256 units.
#
import numpy

# Fixed seed offsets giving independent fields for unrelated purposes.
SEED_OFFSETS = {
    'terrain': 0,
    'detail': 1000,
    'caves': 2000,
    'temperature': 3000,
    'humidity': 4000,
    'continent': 5000,
    'erosion': 6000,
    'warp': 7000,
    'ores': 8000,
    'tunnels': 9000,
    'tree_cluster': 10000,
    'vegetation': 11000,
}

# Salts for position_hash so decisions at the same column are independent.
SALT_BEDROCK = 1
SALT_TREE = 2
SALT_TREE_HEIGHT = 3
SALT_LEAF_GAP = 4
SALT_VEGETATION = 5
SALT_FLORA = 6
SALT_CACTUS = 7

MASK64 = (1 << 64) - 1


def fold_seed(seed):
    '''fold an arbitrary python integer seed into 32 bits for RandomState'''
    s = int(seed) & MASK64
    return (s ^ (s >> 32)) & 0xFFFFFFFF


def fade(t):
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def grad(h, x, y, z):
    # 12 cube-edge gradients, padded to 16 by repeating four of them.
    h = h & 15
    u = numpy.where(h < 8, x, y)
    v = numpy.where(h < 4, y, numpy.where((h == 12) | (h == 14), x, z))
    return numpy.where(h & 1, -u, u) + numpy.where(h & 2, -v, v)


class PerlinNoise:
    def __init__(self, seed=0):
        self.seed = int(seed)
        p = numpy.random.RandomState(fold_seed(self.seed)).permutation(256)
        # To remove the need for index wrapping, double the permutation table length
        self.perm = numpy.concatenate([p, p]).astype(numpy.int64)

    def noise3(self, x, y, z):
        '''3D gradient noise in [-1, 1]; scalars give a float, arrays give an array'''
        x, y, z = numpy.broadcast_arrays(
            numpy.asarray(x, dtype=numpy.float64),
            numpy.asarray(y, dtype=numpy.float64),
            numpy.asarray(z, dtype=numpy.float64))
        scalar = x.ndim == 0
        fx = numpy.floor(x)
        fy = numpy.floor(y)
        fz = numpy.floor(z)
        # lattice index wraps at 256; mod on floats never overflows an int cast
        X = numpy.mod(fx, 256.0).astype(numpy.int64)
        Y = numpy.mod(fy, 256.0).astype(numpy.int64)
        Z = numpy.mod(fz, 256.0).astype(numpy.int64)
        x = x - fx
        y = y - fy
        z = z - fz
        u = fade(x)
        v = fade(y)
        w = fade(z)

        p = self.perm
        A = p[X] + Y
        AA = p[A] + Z
        AB = p[A + 1] + Z
        B = p[X + 1] + Y
        BA = p[B] + Z
        BB = p[B + 1] + Z

        x1 = x - 1.0
        y1 = y - 1.0
        z1 = z - 1.0
        n00 = _lerp(grad(p[AA], x, y, z), grad(p[BA], x1, y, z), u)
        n10 = _lerp(grad(p[AB], x, y1, z), grad(p[BB], x1, y1, z), u)
        n01 = _lerp(grad(p[AA + 1], x, y, z1), grad(p[BA + 1], x1, y, z1), u)
        n11 = _lerp(grad(p[AB + 1], x, y1, z1), grad(p[BB + 1], x1, y1, z1), u)
        res = _lerp(_lerp(n00, n10, v), _lerp(n01, n11, v), w)
        res = numpy.clip(res, -1.0, 1.0)
        if scalar:
            return float(res)
        return res

    def octave_noise(self, x, y, z, octaves=4, persistence=0.5, lacunarity=2.0):
        '''sum of octaves of noise3 normalized back to [-1, 1]'''
        octaves = max(1, int(octaves))
        amplitude = 1.0
        frequency = 1.0
        max_amp = 0.0
        total = 0.0
        for _ in range(octaves):
            total = total + self.noise3(
                numpy.multiply(x, frequency),
                numpy.multiply(y, frequency),
                numpy.multiply(z, frequency)) * amplitude
            max_amp += amplitude
            amplitude *= persistence
            frequency *= lacunarity
        if max_amp <= 0.0:
            return total
        return total / max_amp


def _lerp(a, b, t):
    return a + t * (b - a)


def create_noise(seed=0, purpose=None):
    """ Create the noise field for a world seed, offset for the given purpose.

    """
    if purpose is not None:
        seed = int(seed) + SEED_OFFSETS[purpose]
    return PerlinNoise(seed)


_K_X = numpy.uint64(0x632BE59BD9B4E019)
_K_Z = numpy.uint64(0x9E3779B97F4A7C15)
_K_Y = numpy.uint64(0xD1B54A32D192ED03)
_K_SALT = numpy.uint64(0x94D049BB133111EB)
_MIX1 = numpy.uint64(0xBF58476D1CE4E5B9)
_MIX2 = numpy.uint64(0x94D049BB133111EB)


def _as_u64(v):
    if numpy.ndim(v) == 0:
        return numpy.array([int(v) & MASK64], dtype=numpy.uint64)
    return numpy.asarray(v).astype(numpy.int64).astype(numpy.uint64)


def position_hash(seed, salt, x, z, y=0):
    '''
    Splitmix64-style integer hash of a world position, giving deterministic
    floats in [0,1). Works on integer scalars or arrays.
    '''
    scalar = numpy.ndim(x) == 0 and numpy.ndim(z) == 0 and numpy.ndim(y) == 0
    x, z, y = numpy.broadcast_arrays(_as_u64(x), _as_u64(z), _as_u64(y))
    with numpy.errstate(over='ignore'):
        h = (x * _K_X) ^ (z * _K_Z) ^ (y * _K_Y)
        h ^= numpy.uint64(int(salt) & MASK64) * _K_SALT
        h ^= numpy.uint64(int(seed) & MASK64)
        h = (h ^ (h >> numpy.uint64(30))) * _MIX1
        h = (h ^ (h >> numpy.uint64(27))) * _MIX2
        h ^= h >> numpy.uint64(31)
    res = (h >> numpy.uint64(11)).astype(numpy.float64) / float(1 << 53)
    if scalar:
        return float(res[0])
    return res


if __name__ == '__main__':
    import time
    from PIL import Image

    t = time.time()
    arr = numpy.mgrid[0:8:0.05, 0:8:0.05]
    print('mgrid', time.time() - t)

    t = time.time()
    n = create_noise(3332).octave_noise(arr[0], 0.5, arr[1], 4)
    print('octave noise', time.time() - t)
    print('STATS')
    print('######')
    print(n.min(), n.max(), numpy.average(n))
    n = numpy.array((n - n.min()) / (n.max() - n.min()) * 255, dtype='u1')
    im = Image.fromarray(n, 'L')
    print(im.size)
    im.save('noise3.png')

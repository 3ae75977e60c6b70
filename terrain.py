'''
terrain.py -- height field synthesis: continent spline, noise, blended biome shaping
'''
import collections
import math

import numpy

import noise
import biomes
from climate import Climate, ClimateSampler
from config import (MIN_Y, MAX_Y, CONTINENT_SPLINE, BLEND_RADIUS, BLEND_STEP, DETAIL_OCTAVES,
    DETAIL_WEIGHT, EROSION_FLATTEN, RIDGE_SCALE, RIDGE_HEIGHT, OCEAN_FLOOR_DEPTH,
    OCEAN_FLOOR_VARIANCE, FLAT_PULL)
from util import lerp, smoothstep, wrap_world

ColumnFields = collections.namedtuple('ColumnFields', ['x0', 'z0', 'climate', 'biome', 'height'])

_KNOTS_C = numpy.array([k[0] for k in CONTINENT_SPLINE], dtype=numpy.float64)
_KNOTS_H = numpy.array([k[1] for k in CONTINENT_SPLINE], dtype=numpy.float64)


def continent_height(continentalness, base_height):
    """ Height of the continental shelf for a continentalness value.

    Piecewise over CONTINENT_SPLINE knots, smoothstep-interpolated inside each
    segment and flat beyond the end knots.
    """
    c = numpy.asarray(continentalness, dtype=numpy.float64)
    seg = numpy.clip(numpy.searchsorted(_KNOTS_C, c, side='right') - 1, 0, len(_KNOTS_C) - 2)
    c0 = _KNOTS_C[seg]
    c1 = _KNOTS_C[seg + 1]
    h0 = _KNOTS_H[seg]
    h1 = _KNOTS_H[seg + 1]
    t = smoothstep((c - c0) / (c1 - c0))
    return base_height + h0 + (h1 - h0) * t


def blend_offsets(radius=BLEND_RADIUS, step=BLEND_STEP):
    '''(dx, dz, weight) samples of the blending neighbourhood, in a fixed order'''
    offsets = []
    if radius <= 0:
        return [(0, 0, 1.0)]
    for dx in range(-radius, radius + 1, step):
        for dz in range(-radius, radius + 1, step):
            d = math.hypot(dx, dz)
            if d > radius:
                continue
            offsets.append((dx, dz, 1.0 - d / (radius + step)))
    return offsets

BLEND_OFFSETS = blend_offsets()


def world_grid(x0, z0, width, depth):
    wx = (numpy.arange(width, dtype=numpy.float64) + x0)[:, None]
    wz = (numpy.arange(depth, dtype=numpy.float64) + z0)[None, :]
    return numpy.broadcast_arrays(wx, wz)


class HeightField(object):
    """Surface height per world column.

    Every value is a function of the world column alone: blending reads a
    margin of BLEND_RADIUS columns around the requested window, and sums are
    accumulated in a fixed order, so a column gets the same height whichever
    window it is computed in.
    """

    def __init__(self, seed, options, climate=None):
        self.options = options
        self.terrain = noise.create_noise(seed, 'terrain')
        self.detail = noise.create_noise(seed, 'detail')
        self.climate = climate if climate is not None else ClimateSampler(seed)

    def base_noise(self, wx, wz):
        o = self.options
        return self.terrain.octave_noise(wx * o.scale, 0.0, wz * o.scale,
            o.octaves, o.persistence, o.lacunarity)

    def preliminary_height(self, climate, base):
        '''height used for classification, before biome shaping'''
        o = self.options
        h = continent_height(climate.continentalness, o.base_height) + base * o.amplitude * 0.5
        return numpy.floor(numpy.clip(h, MIN_Y, MAX_Y)).astype(numpy.int32)

    def classify(self, wx, wz):
        climate = self.climate.sample(wx, wz)
        base = self.base_noise(wx, wz)
        prelim = self.preliminary_height(climate, base)
        biome = biomes.classify(climate.temperature, climate.humidity, climate.continentalness,
            climate.erosion, prelim, self.options.sea_level)
        return climate, base, biome

    def window(self, x0, z0, width, depth):
        """ Climate, biome and height for the columns [x0, x0+width) x [z0, z0+depth).

        """
        r = BLEND_RADIUS
        wx, wz = world_grid(x0 - r, z0 - r, width + 2 * r, depth + 2 * r)
        climate, base, biome = self.classify(wx, wz)

        params = (biomes.TERRAIN_SCALE, biomes.HEIGHT_OFFSET, biomes.RIDGE_WEIGHT,
            biomes.OCEAN_WEIGHT, biomes.FLAT_WEIGHT)
        blended = [self._blend(table[biome], r, width, depth) for table in params]

        inner = (slice(r, r + width), slice(r, r + depth))
        climate = Climate(*[field[inner] for field in climate])
        height = self._shape(wx[inner], wz[inner], climate, base[inner], *blended)
        return ColumnFields(x0, z0, climate, biome[inner].copy(), height)

    def _blend(self, values, r, width, depth):
        total = numpy.zeros((width, depth), dtype=numpy.float64)
        weight = 0.0
        for dx, dz, w in BLEND_OFFSETS:
            total += values[r + dx:r + dx + width, r + dz:r + dz + depth] * w
            weight += w
        return total / weight

    def _shape(self, wx, wz, climate, base, scale, offset, ridge_w, ocean_w, flat_w):
        o = self.options
        detail = self.detail.octave_noise(wx * o.scale * 2.0, 0.0, wz * o.scale * 2.0,
            DETAIL_OCTAVES, 0.5, 2.0) * DETAIL_WEIGHT
        # higher erosion flattens terrain
        combined = (base + detail) * lerp(1.0, EROSION_FLATTEN, climate.erosion)

        land = (continent_height(climate.continentalness, o.base_height) + offset
            + combined * o.amplitude * scale)
        ridge = numpy.abs(self.terrain.octave_noise(wx * RIDGE_SCALE, 37.5, wz * RIDGE_SCALE, 4, 0.5, 2.0))
        land = land + ridge * RIDGE_HEIGHT * (1.0 - 0.5 * climate.erosion) * ridge_w

        ocean_floor = o.sea_level - OCEAN_FLOOR_DEPTH + combined * OCEAN_FLOOR_VARIANCE
        h = lerp(land, ocean_floor, ocean_w)
        h = lerp(h, o.sea_level + combined * 2.0, flat_w * FLAT_PULL)
        return numpy.floor(numpy.clip(h, MIN_Y, MAX_Y)).astype(numpy.int32)

    def column_height(self, x, z):
        return int(self.window(wrap_world(x), wrap_world(z), 1, 1).height[0, 0])

    def biome_at(self, x, z):
        wx, wz = world_grid(wrap_world(x), wrap_world(z), 1, 1)
        _, _, biome = self.classify(wx, wz)
        return int(biome[0, 0])

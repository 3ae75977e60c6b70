'''
climate.py -- per-column climate fields that drive biome choice and terrain shape
'''
import collections

import numpy

import noise
from config import (CLIMATE_SCALE, CONTINENT_SCALE, EROSION_SCALE, CONTINENT_RIDGE_SCALE,
    WARP_SCALE, WARP_STRENGTH, CONTINENT_BIAS, CLIMATE_CONTRAST, CONTINENT_CONTRAST)

Climate = collections.namedtuple('Climate', ['temperature', 'humidity', 'continentalness', 'erosion'])


class ClimateSampler(object):
    """Large scale climate noise for a world seed.

    Temperature, humidity and continentalness are sampled at a domain-warped
    position so region borders do not line up with the world axes. Erosion is
    sampled unwarped; it only modulates terrain roughness.
    """

    def __init__(self, seed):
        self.temperature = noise.create_noise(seed, 'temperature')
        self.humidity = noise.create_noise(seed, 'humidity')
        self.continent = noise.create_noise(seed, 'continent')
        self.erosion = noise.create_noise(seed, 'erosion')
        self.warp = noise.create_noise(seed, 'warp')

    def warp_offsets(self, wx, wz):
        sx = wx * WARP_SCALE
        sz = wz * WARP_SCALE
        dx = self.warp.octave_noise(sx, 11.5, sz, 2, 0.5, 2.0) * WARP_STRENGTH
        dz = self.warp.octave_noise(sx, 47.5, sz, 2, 0.5, 2.0) * WARP_STRENGTH
        return dx, dz

    def sample(self, wx, wz):
        wx = numpy.asarray(wx, dtype=numpy.float64)
        wz = numpy.asarray(wz, dtype=numpy.float64)
        dx, dz = self.warp_offsets(wx, wz)
        qx = wx + dx
        qz = wz + dz

        temp = self.temperature.octave_noise(qx * CLIMATE_SCALE, 0.0, qz * CLIMATE_SCALE * 0.5, 3, 0.5, 2.0)
        temperature = numpy.clip((temp * CLIMATE_CONTRAST + 1.0) * 0.5, 0.0, 1.0)

        humid = self.humidity.octave_noise(qx * CLIMATE_SCALE * 1.5, 0.0, qz * CLIMATE_SCALE, 3, 0.5, 2.0)
        humidity = numpy.clip((humid * CLIMATE_CONTRAST + 1.0) * 0.5, 0.0, 1.0)

        cont = self.continent.octave_noise(qx * CONTINENT_SCALE, 100.0, qz * CONTINENT_SCALE, 4, 0.6, 2.0)
        # ridge term strings highlands into chains
        ridge = numpy.abs(self.continent.octave_noise(
            wx * CONTINENT_RIDGE_SCALE, 200.0, wz * CONTINENT_RIDGE_SCALE, 2, 0.5, 2.0))
        continentalness = numpy.clip(cont * CONTINENT_CONTRAST + ridge * 0.4 + CONTINENT_BIAS, -1.0, 2.0)

        ero = self.erosion.octave_noise(wx * EROSION_SCALE, 0.0, wz * EROSION_SCALE, 2, 0.5, 2.0)
        erosion = numpy.clip((ero * CLIMATE_CONTRAST + 1.0) * 0.5, 0.0, 1.0)

        return Climate(temperature, humidity, continentalness, erosion)

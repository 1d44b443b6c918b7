from collections import namedtuple
import logging
import math
import sys

from .engine import ExpressionEngine, Success
from .util import RPNError


logger = logging.getLogger(__name__)

Statistics = namedtuple('Statistics', 'min_x max_x min_y max_y')


def isplottable(y):
    '''
    Return True for zero and normal floats; rejects inf, nan and subnormals.
    '''
    return y == 0 or math.isfinite(y) and abs(y) >= sys.float_info.min


class SampleGenerator:
    '''
    Points (x, y) of an engine's program, one per step across a domain.

    The domain is in radians but walked in whole degrees, step being the
    degree span divided by the number of samples wanted (at least 1). Each
    iteration starts over from the beginning of the domain.

    :param engine: ExpressionEngine holding the program. Its stack must not
        change while iterating.
    :param min_x: Start of the domain, in radians.
    :param max_x: End of the domain, in radians, excluded.
    :param samples: Number of samples wanted, usually the pixel width of
        whatever draws them.
    :param variable: Variable bound to x before each evaluation.
    '''

    DEFAULT_VARIABLE = 'M'

    def __init__(self, engine, min_x, max_x, samples, variable=None):
        if samples <= 0:
            raise RPNError('samples must be positive, not {}'
                           .format(samples))
        self.engine = engine
        self.min_x = min_x
        self.max_x = max_x
        self.samples = samples
        self.variable = variable or type(self).DEFAULT_VARIABLE

    @classmethod
    def from_program(cls, program, *args, **kwargs):
        '''
        Sample program on an engine of its own.
        '''
        engine = ExpressionEngine()
        engine.program = program
        return cls(engine, *args, **kwargs)

    def degrees(self):
        '''
        Return the whole degrees that will be sampled.
        '''
        start = math.degrees(self.min_x)
        stop = math.degrees(self.max_x)
        step = max(int((stop - start) / self.samples), 1)
        return range(int(start), int(stop), step)

    def __iter__(self):
        values = self.engine.variable_values
        for degree in self.degrees():
            x = math.radians(degree)
            values[self.variable] = x
            result = self.engine.evaluate()
            if isinstance(result, Success) and isplottable(result.value):
                yield x, result.value

    def statistics(self):
        '''
        Return bounds of the sampled points, or None if there are none.

        These are the bounds of what was plotted, not of the domain asked
        for: x stops short of max_x, and y only covers accepted points.
        '''
        points = list(self)
        logger.debug('Sampled %d point(s) of %d step(s)',
                     len(points), len(self.degrees()))
        if not points:
            return None
        xs, ys = zip(*points)
        return Statistics(min(xs), max(xs), min(ys), max(ys))

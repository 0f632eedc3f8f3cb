"""fpoly is a Python package for formal power series and polynomial arithmetic.

Polynomials (truncated formal power series) are supported over any commutative
ring whose elements support Python's arithmetic operators, including the ring
types for integers modulo m and prime fields GF(p) provided by this package.
Multiplication is delegated to a pluggable convolution strategy, such as the
number-theoretic transform (NTT) for NTT-friendly primes, also available as a
NumPy-based vectorized implementation.

Next to the basic ring operations, which are available via Python's operator
overloading, fast division with remainder, formal inverse, derivative,
integral, logarithm, and exponential are provided, all using Newton iteration
where applicable. Moreover, powers of X modulo a fixed polynomial can be
computed for exponents given bit by bit, as used for evaluating terms of
linear recurrences.
"""

__version__ = '0.3.1'
__license__ = 'MIT License'

import os
import sys
import argparse
import logging


def get_arg_parser():
    """Return parser for command line arguments used to configure fpoly."""
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)

    group = parser.add_argument_group('fpoly configuration')
    group.add_argument('--log-level', type=str, metavar='ll',
                       help='logging level ll=debug/info(default)/warning/error')
    group.add_argument('--no-log', action='store_true',
                       help='disable logging messages')
    group.add_argument('--no-numpy', action='store_true',
                       help='disable use of numpy package for convolutions')

    parser.set_defaults(log_level='info')
    return parser


if os.getenv('READTHEDOCS') != 'True':
    options = get_arg_parser().parse_known_args()[0]

    # Set logging level as early as possible.
    if options.no_log:
        logging.basicConfig(level=logging.WARNING)
    else:
        ch = options.log_level[0].upper()
        ch = {'N': '0', 'D': '1', 'I': '2', 'W': '3', 'E': '4', 'C': '5'}.get(ch, ch)
        ch = ch if '0' <= ch <= '5' else '0'  # default to '0'
        level = int(ch)
        level = (logging.NOTSET, logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR,
                 logging.CRITICAL)[level]
        if sys.flags.dev_mode:
            # Switch to debug mode, just like asyncio does in development mode.
            level = logging.DEBUG
        logging.basicConfig(format='{asctime} {message}', style='{', level=level, stream=sys.stdout)
        logging.debug(f'Set logging level to {level}: {logging.getLevelName(level)}')
        del ch, level

    # Ensure numpy-based convolutions are not selected by default, if demanded.
    env_no_numpy = os.getenv('FPOLY_NONUMPY') == '1'  # check if variable FPOLY_NONUMPY is set
    if options.no_numpy or env_no_numpy:
        logging.info('Use of package numpy inside fpoly disabled.')
        if not env_no_numpy:
            os.environ['FPOLY_NONUMPY'] = '1'  # NB: FPOLY_NONUMPY also set for subprocesses

    del options, env_no_numpy

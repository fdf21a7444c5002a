import logging
import math
import os
import sys
import time
from argparse import ArgumentParser
from pathlib import Path

from mandelbmp import (
    MAX_DIMENSION,
    MAX_ITERATIONS,
    RenderError,
    RenderParameters,
    default_worker_count,
    render_image,
    resolve_region,
    write_bitmap,
)
from mandelbmp.renderer import DEFAULT_THRESHOLD

logger = logging.getLogger("render_bmp")

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_OUTPUT = "mandelbrot.bmp"
MAX_WORKERS = 256


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set to a 24-bit bitmap file.')

    # numeric values are read as text and validated in main() so that a bad
    # value degrades to a warning instead of a usage error
    parser.add_argument('--xleft', dest='x_min', help='left bound of the region in the complex plane',
                        metavar='XLEFT')

    parser.add_argument('--xright', dest='x_max', help='right bound of the region in the complex plane',
                        metavar='XRIGHT')

    parser.add_argument('--ylower', dest='y_min', help='lower bound of the region in the complex plane',
                        metavar='YLOWER')

    parser.add_argument('--yupper', dest='y_max', help='upper bound of the region in the complex plane',
                        metavar='YUPPER')

    parser.add_argument('--width', dest='width', help=f'image width in pixels, below {MAX_DIMENSION}',
                        metavar='WIDTH')

    parser.add_argument('--height', dest='height', help=f'image height in pixels, below {MAX_DIMENSION}',
                        metavar='HEIGHT')

    parser.add_argument('--max-iterations', dest='max_iterations',
                        help='maximum number of times to iterate the Mandelbrot recurrence',
                        metavar='MAX_ITERATIONS')

    parser.add_argument('--threshold', dest='threshold',
                        help='escape count above which a pixel is darkened',
                        metavar='THRESHOLD')

    parser.add_argument('--workers', dest='workers',
                        help='number of worker threads (default: number of CPUs)',
                        metavar='WORKERS')

    parser.add_argument('--output', dest='output', type=str, default=DEFAULT_OUTPUT,
                        help=f'destination bitmap file. Default: "{DEFAULT_OUTPUT}".')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging of the resolved region, worker count and timing.')

    return parser


def _parse_bound(raw, flag):
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid value %r for %s, ignoring it.", raw, flag)
        return None
    if not math.isfinite(value):
        logger.warning("Non-finite value %r for %s, ignoring it.", raw, flag)
        return None
    return value


def _parse_int(raw, flag, default, low, high=None):
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid value %r for %s, defaulting to %d.", raw, flag, default)
        return default
    if value < low or (high is not None and value > high):
        logger.warning("Value %d for %s is out of range, defaulting to %d.", value, flag, default)
        return default
    return value


def resolve_parameters(opt) -> RenderParameters:
    return RenderParameters(
        width=_parse_int(opt.width, '--width', DEFAULT_WIDTH, 1, MAX_DIMENSION - 1),
        height=_parse_int(opt.height, '--height', DEFAULT_HEIGHT, 1, MAX_DIMENSION - 1),
        max_iterations=_parse_int(opt.max_iterations, '--max-iterations', MAX_ITERATIONS, 1),
        threshold=_parse_int(opt.threshold, '--threshold', DEFAULT_THRESHOLD, 0),
        workers=_parse_int(opt.workers, '--workers', default_worker_count(), 1, MAX_WORKERS),
    )


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if opt.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )

    params = resolve_parameters(opt)
    region = resolve_region(
        _parse_bound(opt.x_min, '--xleft'),
        _parse_bound(opt.x_max, '--xright'),
        _parse_bound(opt.y_min, '--ylower'),
        _parse_bound(opt.y_max, '--yupper'),
        params.width,
        params.height,
    )

    output_path = Path(opt.output).expanduser()
    # rendered into a sibling file so a failed run never truncates an existing image
    partial_path = output_path.with_name(output_path.name + '.part')
    try:
        bmp_out = open(partial_path, 'wb')
    except OSError as e:
        logger.error("Error opening %s: %s", output_path, e)
        return 1

    start = time.perf_counter()
    completed = False
    try:
        with bmp_out:
            result = render_image(params, region)
            written = write_bitmap(bmp_out, result.pixels, params.width, params.height)
        os.replace(partial_path, output_path)
        completed = True
    except RenderError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Error writing %s: %s", output_path, e)
        return 1
    finally:
        if not completed:
            partial_path.unlink(missing_ok=True)

    logger.info('Wrote %d bytes to %s in %.3f seconds', written, output_path, time.perf_counter() - start)
    return 0


if __name__ == '__main__':
    sys.exit(main())

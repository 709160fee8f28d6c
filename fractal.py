import os
import sys
import warnings
from argparse import ArgumentParser
from dataclasses import replace

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        kwargs.setdefault("file", sys.stderr)
        print(message, *args, **kwargs)


from textfractal import (
    DEFAULT_MAX_ITERATIONS,
    ESCAPE_FUNCTIONS,
    PRESET_REGIONS,
    DensityMapper,
    FractalRenderer,
    PlaneRegion,
    compute_metadata,
    get_escape_function,
)
from textfractal.density import DEFAULT_BUCKETS, DEFAULT_FLOOR
from textfractal.sampling import STEPPING_MODES
from textfractal.renderer import BACKENDS

BURNING_SHIP_BANNER = "\n== BURNING SHIP ==\n\n"


def _quiet_tensorflow():
    import tensorflow as tf

    log("TensorFlow version: %s" % tf.__version__)
    if _suppress_messages:
        warnings.filterwarnings(
            "ignore",
            message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
            category=UserWarning,
            module="google.protobuf",
        )
        tf.get_logger().setLevel("ERROR")
        for handler in tf.get_logger().handlers:
            handler.setLevel("ERROR")


def build_parser():
    parser = ArgumentParser(description="Render escape-time fractals as ASCII density art.")

    parser.add_argument('fractal', nargs='?', default=None,
                        help='escape-time function to render (default: mandelbrot). Choices: %s.' % ', '.join(sorted(ESCAPE_FUNCTIONS)))

    parser.add_argument('--x-min', type=float,
                        dest='x_min', help='lower x bound, strided once per output row',
                        metavar='X_MIN')
    parser.add_argument('--x-max', type=float,
                        dest='x_max', help='upper x bound (exclusive)',
                        metavar='X_MAX')
    parser.add_argument('--y-min', type=float,
                        dest='y_min', help='lower y bound, strided once per output column',
                        metavar='Y_MIN')
    parser.add_argument('--y-max', type=float,
                        dest='y_max', help='upper y bound (exclusive)',
                        metavar='Y_MAX')

    parser.add_argument('--rows', type=int,
                        dest='rows', help='number of samples along the x range',
                        metavar='ROWS')
    parser.add_argument('--cols', type=int,
                        dest='cols', help='number of samples along the y range',
                        metavar='COLS')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration budget per sample point',
                        metavar='MAX_ITERATIONS', default=DEFAULT_MAX_ITERATIONS)

    parser.add_argument('--stepping', choices=STEPPING_MODES, default='indexed',
                        help='"indexed" samples exactly ROWS x COLS points; "accumulate" keeps adding the step '
                             'while below the upper bound and may produce one extra sample per axis.')
    parser.add_argument('--backend', choices=BACKENDS, default='python',
                        help='"python" evaluates point by point; "tensorflow" evaluates the whole grid at once.')
    parser.add_argument('--workers', type=int, default=1,
                        help='number of threads evaluating rows; python backend only.')

    parser.add_argument('--thresholds', type=str,
                        default=','.join(str(threshold) for threshold, _ in DEFAULT_BUCKETS),
                        help='descending iteration thresholds of the density buckets.')
    parser.add_argument('--glyphs', type=str,
                        default=''.join(glyph for _, glyph in DEFAULT_BUCKETS) + DEFAULT_FLOOR,
                        help='one glyph per threshold followed by the glyph for the lowest bucket.')

    parser.add_argument('--title', type=str, default=None,
                        help='banner line printed before the fractal.')
    parser.add_argument('--demo', action='store_true',
                        help='render the Mandelbrot and Burning Ship presets one after the other. '
                             'Cannot be combined with FRACTAL, --title or region options.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging to stderr.')

    return parser


def resolve_region(opt, parser: ArgumentParser, fractal_name: str) -> PlaneRegion:
    """Apply the region options over the preset and check that it can be sampled."""

    preset = PRESET_REGIONS.get(fractal_name, PRESET_REGIONS["mandelbrot"])
    overrides = {
        field: getattr(opt, field)
        for field in ("x_min", "x_max", "y_min", "y_max", "rows", "cols")
        if getattr(opt, field) is not None
    }
    region = replace(preset, **overrides)
    try:
        compute_metadata(region, opt.stepping)
    except ValueError as exc:
        parser.error(str(exc))
    return region


def _render(renderer: FractalRenderer, region: PlaneRegion, max_iterations: int, out) -> None:
    log("rendering %s over x=[%g, %g) y=[%g, %g) at %dx%d, %d iterations (%s stepping, %s backend)" % (
        renderer.escape_fn.name, region.x_min, region.x_max, region.y_min, region.y_max,
        region.rows, region.cols, max_iterations, renderer.stepping, renderer.backend))
    rows = renderer.write(region, max_iterations, out)
    log("wrote %d rows" % rows)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if opt.max_iterations < 0:
        parser.error("--max-iterations must not be negative.")
    if opt.workers < 1:
        parser.error("--workers must be at least 1.")
    if opt.backend == 'tensorflow' and opt.workers != 1:
        parser.error("--workers only applies to the python backend.")

    try:
        mapper = DensityMapper.from_strings(opt.thresholds, opt.glyphs)
    except ValueError as exc:
        parser.error(str(exc))

    if opt.backend == 'tensorflow':
        _quiet_tensorflow()

    out = sys.stdout

    if opt.demo:
        conflicts = [flag for flag, value in (
            ('FRACTAL', opt.fractal), ('--title', opt.title),
            ('--x-min', opt.x_min), ('--x-max', opt.x_max), ('--y-min', opt.y_min), ('--y-max', opt.y_max),
            ('--rows', opt.rows), ('--cols', opt.cols),
        ) if value is not None]
        if conflicts:
            parser.error("--demo renders fixed presets and cannot be combined with %s." % ', '.join(conflicts))
        for index, name in enumerate(("mandelbrot", "burning-ship")):
            renderer = FractalRenderer(ESCAPE_FUNCTIONS[name], mapper=mapper, stepping=opt.stepping,
                                       backend=opt.backend, workers=opt.workers)
            if index:
                out.write(BURNING_SHIP_BANNER)
            _render(renderer, PRESET_REGIONS[name], opt.max_iterations, out)
        out.flush()
        return 0

    try:
        escape_fn = get_escape_function(opt.fractal or 'mandelbrot')
    except ValueError as exc:
        parser.error(str(exc))

    region = resolve_region(opt, parser, escape_fn.name)
    renderer = FractalRenderer(escape_fn, mapper=mapper, stepping=opt.stepping,
                               backend=opt.backend, workers=opt.workers)

    if opt.title is not None:
        out.write(opt.title + "\n")
    _render(renderer, region, opt.max_iterations, out)
    out.flush()
    return 0


if __name__ == '__main__':
    sys.exit(main())

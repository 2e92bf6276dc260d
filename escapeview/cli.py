"""
Command line interface.

    escapeview run [--state PATH] [--img-dir DIR]
    escapeview render STATE WIDTH HEIGHT DEST [--from-size WxH] [--blur]
"""

import sys
from argparse import ArgumentParser, ArgumentTypeError

from loguru import logger
from tqdm import tqdm

from .config import load_settings
from .geometry import Bounds
from .location import ScaleMethod
from .logging import configure_logging
from .snapshot import render_still, save_png
from .state import StateError, load_context


def parse_size(text):
    """Parse a WIDTHxHEIGHT string into Bounds."""
    try:
        width, height = text.lower().split('x')
        return Bounds(int(width), int(height))
    except ValueError:
        raise ArgumentTypeError(f"expected WIDTHxHEIGHT with positive integers, got {text!r}")


def positive_int(text):
    value = int(text)
    if value <= 0:
        raise ArgumentTypeError(f"must be positive, got {value}")
    return value


def build_parser():
    parser = ArgumentParser(prog='escapeview', description='Explore and render escape-time fractals.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable debug logging')
    parser.add_argument('--log-file', dest='log_file', default=None,
                        help='also write logs to this file', metavar='PATH')

    subparsers = parser.add_subparsers(dest='command', required=True)

    run_parser = subparsers.add_parser('run', help='open the interactive viewer')
    run_parser.add_argument('--state', default=None, metavar='PATH',
                            help='resume a saved render context')
    run_parser.add_argument('--img-dir', dest='img_dir', default=None, metavar='DIR',
                            help='directory for snapshots (default from settings)')
    run_parser.add_argument('--settings', default=None, metavar='PATH',
                            help='settings JSON file')

    render_parser = subparsers.add_parser('render', help='render a saved context to a PNG')
    render_parser.add_argument('state', help='saved render context (JSON)')
    render_parser.add_argument('width', type=positive_int, help='output width in pixels')
    render_parser.add_argument('height', type=positive_int, help='output height in pixels')
    render_parser.add_argument('dest', help='output PNG path')
    render_parser.add_argument('--from-size', dest='from_size', type=parse_size, default=None,
                               metavar='WxH',
                               help='bounds the context was saved at; rescale from these to WIDTHxHEIGHT')
    render_parser.add_argument('--scale-method', dest='scale_method',
                               choices=[m.value for m in ScaleMethod], default=ScaleMethod.MIN.value,
                               help='how to combine the width/height resize ratios (default: min)')
    render_parser.add_argument('--blur', action='store_true',
                               help='apply a gaussian blur before colorizing')
    render_parser.add_argument('--no-progress', dest='progress', action='store_false',
                               help='do not show a progress bar')

    return parser


def cmd_run(args):
    from .app import run

    settings = load_settings(args.settings)
    rctx = load_context(args.state) if args.state else None
    run(settings, rctx=rctx, img_dir=args.img_dir)


def cmd_render(args):
    rctx = load_context(args.state)
    bounds = Bounds(args.width, args.height)
    if args.from_size is not None:
        rctx.loc = rctx.loc.scale(args.from_size, bounds, ScaleMethod(args.scale_method))

    logger.info(f"Rendering {args.state} at {bounds.width}x{bounds.height}")
    if args.progress:
        with tqdm(total=bounds.area, unit='px', unit_scale=True, desc='render') as bar:
            rgb = render_still(rctx, bounds, blur=args.blur, progress=bar)
    else:
        rgb = render_still(rctx, bounds, blur=args.blur)

    save_png(rgb, args.dest)
    logger.info(f"Image saved to: {args.dest}")


COMMANDS = {
    'run': cmd_run,
    'render': cmd_render,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging('DEBUG' if args.verbose else 'INFO', log_path=args.log_file)

    try:
        COMMANDS[args.command](args)
    except StateError as e:
        logger.error(f"Invalid state file {e.source}: {e.reason}")
        return 1
    except OSError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

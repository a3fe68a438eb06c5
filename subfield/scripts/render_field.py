#!/usr/bin/env python3
# =============================================================================
# Render a Preset Subwoofer Array to an Image
# =============================================================================
"""
Command line front end for the field engine.

Usage:
    # Two-panel SPL + phase figure of an end-fire array at 50 Hz
    subfield-render --preset endfire --frequency 50 --output endfire.png

    # Raw phase heatmap (no axes) of a cardioid pair, rings for the first sub
    subfield-render --preset gradient --mode Phase --select 0 --output grad.png

    # Larger grid solved on all cores
    subfield-render --preset broadside --width 800 --height 800 --n-jobs -1
"""

import argparse
import sys

from ..constants import DEFAULT_SETTINGS, MODE_PHASE, MODE_SPL
from ..logging_config import setup_logging
from ..presets import PRESETS, build_preset
from ..render import render_frame
from ..sources import PhysicsParameters
from ..visualization import plot_field, save_rgba, visualize_field
from ..wavefronts import wavefront_rings


def build_parser():
    parser = argparse.ArgumentParser(
        description='Render the interference field of a subwoofer array',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  both   Two-panel matplotlib figure (SPL and phase, with overlays)
  SPL    Single SPL figure with overlays
  Phase  Single phase figure with overlays and wavefront rings
  Add --raw to write the bare RGBA buffer instead of a figure.
"""
    )

    parser.add_argument('--preset', '-p', choices=sorted(PRESETS), default='broadside',
                        help='Array layout (default: broadside)')
    parser.add_argument('--frequency', '-f', type=float, default=DEFAULT_SETTINGS['frequency'],
                        help='Frequency in Hz (default: %(default)s)')
    parser.add_argument('--temperature', '-t', type=float, default=DEFAULT_SETTINGS['temperature'],
                        help='Air temperature in °C (default: %(default)s)')
    parser.add_argument('--venue-width', type=float, default=DEFAULT_SETTINGS['venue_width'],
                        help='Venue width in m (default: %(default)s)')
    parser.add_argument('--venue-depth', type=float, default=DEFAULT_SETTINGS['venue_depth'],
                        help='Venue depth in m (default: %(default)s)')
    parser.add_argument('--dynamic-range', type=float, default=DEFAULT_SETTINGS['dynamic_range'],
                        help='Displayed dB range (default: %(default)s)')
    parser.add_argument('--resolution', type=float, default=DEFAULT_SETTINGS['resolution'],
                        help='Grid cells per meter when --width/--height are not given')
    parser.add_argument('--width', type=int, help='Grid width in cells')
    parser.add_argument('--height', type=int, help='Grid height in cells')
    parser.add_argument('--mode', '-m', choices=['both', MODE_SPL, MODE_PHASE], default='both',
                        help='What to render (default: both)')
    parser.add_argument('--raw', action='store_true',
                        help='Write the encoded RGBA buffer only (SPL or Phase mode)')
    parser.add_argument('--select', '-s', type=int, nargs='*', default=[],
                        help='Indices of sources to highlight / draw rings for')
    parser.add_argument('--n-jobs', '-j', type=int, default=1,
                        help='Parallel workers for the solve (-1 = all cores)')
    parser.add_argument('--output', '-o', type=str, default='subfield.png',
                        help='Output image path (default: subfield.png)')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: WARNING)')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    if args.raw and args.mode == 'both':
        parser.error('--raw needs --mode SPL or --mode Phase')
    for option, value in (('--width', args.width), ('--height', args.height)):
        if value is not None and value <= 0:
            parser.error(f"{option} must be a positive number of cells, got {value}")
    if args.dynamic_range <= 0:
        parser.error(f"--dynamic-range must be > 0 dB, got {args.dynamic_range:g}")

    params = PhysicsParameters(
        frequency=args.frequency,
        temperature=args.temperature,
        venue_width=args.venue_width,
        venue_depth=args.venue_depth,
        resolution=args.resolution,
        dynamic_range=args.dynamic_range,
    )
    width, height = params.grid_shape()
    if args.width is not None:
        width = args.width
    if args.height is not None:
        height = args.height

    sources = build_preset(args.preset, params)
    groups = ()

    bad = [i for i in args.select if not 0 <= i < len(sources)]
    if bad:
        parser.error(f"--select indices {bad} out of range (preset has {len(sources)} sources)")
    selected_ids = [sources[i].id for i in args.select]
    config = {'n_jobs': args.n_jobs}

    print("=" * 80)
    print(f"SUBFIELD: {args.preset.upper()} @ {params.frequency:g} Hz")
    print("=" * 80)
    print(f"  Speed of sound: {params.speed_of_sound:.1f} m/s, λ = {params.wavelength:.2f} m")
    print(f"  Venue: {params.venue_width:g} × {params.venue_depth:g} m, grid {width}×{height}")
    for s in sources:
        flags = ' (inverted)' if s.polarity else ''
        print(f"    {s.name:<18} x={s.x:+.2f} y={s.y:+.2f} gain={s.gain:+.1f} dB "
              f"delay={s.delay:.2f} ms{flags}")
    for s in sources:
        if s.id in selected_ids:
            rings = wavefront_rings(s, params)
            print(f"  {s.name}: {len(rings['peak'])} peak / {len(rings['trough'])} trough rings")

    if args.raw:
        frame = render_frame(sources, groups, params, width, height, args.mode, config=config)
        save_rgba(frame.rgba, args.output)
        print(f"  Max pressure: {frame.field.max_pressure:.4g}")
    elif args.mode == 'both':
        visualize_field(sources, groups, params, width, height, selected_ids=selected_ids,
                        title=f"{args.preset} array", save_path=args.output, config=config)
    else:
        plot_field(sources, groups, params, width, height, mode=args.mode,
                   selected_ids=selected_ids, save_path=args.output, config=config)

    print(f"✓ Saved: {args.output}")
    print("=" * 80)
    return 0


if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  LEDGE LAUNCH: Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Runs a launch headless and prints the flight summary, or opens the
  interactive window.

    1. Single run with the given launch parameters
    2. Closed-form cross-check of the measured peak height
    3. Optional angle sweep (batch of independent runs)
    4. Optional trajectory plot / animated GIF

  Usage:
    python main.py                                # default launch, console only
    python main.py --height 10 --speed 1 --angle 90
    python main.py --sweep --plot                 # save plots to outputs/
    python main.py --animate                      # save a GIF replay
    python main.py --interactive                  # sliders + buttons window
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import os
import sys
import time

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def canvas_size(text):
    """Parse a 'WxH' canvas size in pixels."""
    try:
        width, height = (float(v) for v in text.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WxH, e.g. 1200x750, got '{text}'")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"canvas size must be positive, got '{text}'")
    return width, height


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Projectile-motion demonstrator")
    parser.add_argument("--height", type=float, default=2.0, help="Ledge height (m)")
    parser.add_argument("--speed", type=float, default=5.0, help="Launch speed (m/s)")
    parser.add_argument("--angle", type=float, default=30.0, help="Launch angle (deg)")
    parser.add_argument("--step", type=float, default=None,
                        help="Simulated time per frame (s)")
    parser.add_argument("--critical-height", type=float, default=None,
                        help="Critical fall height (m)")
    parser.add_argument("--canvas", type=canvas_size, default=None, metavar="WxH",
                        help="Canvas size in pixels, e.g. 1200x750")
    parser.add_argument("--sweep", action="store_true",
                        help="Also run launch angles from -30° to 75°")
    parser.add_argument("--plot", action="store_true", help="Save trajectory plots")
    parser.add_argument("--animate", action="store_true", help="Save a GIF replay")
    parser.add_argument("--interactive", action="store_true",
                        help="Open the interactive window")
    parser.add_argument("--out", type=str, default="outputs", help="Output directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    import matplotlib
    if not args.interactive:
        matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    from ledgelaunch.config import SimulationConfig
    from ledgelaunch.simulation import SimulationStatus, simulate, simulate_batch
    from ledgelaunch.trajectory import LaunchParameters, peak_height
    from ledgelaunch.visualization import (
        Canvas, ConsoleResultsSink, create_run_animation, ensure_output_dir,
        plot_angle_sweep, plot_trajectory,
    )

    config_kwargs = {}
    if args.step is not None:
        config_kwargs['step_size'] = args.step
    if args.critical_height is not None:
        config_kwargs['critical_fall_height'] = args.critical_height

    canvas = Canvas()
    if args.canvas:
        canvas = canvas.resized(*args.canvas)
    config = canvas.configure(SimulationConfig(**config_kwargs))

    params = LaunchParameters(launch_height=args.height, speed=args.speed,
                              angle_deg=args.angle)

    if args.interactive:
        from ledgelaunch.app import run_app
        run_app(canvas=canvas, config=config, defaults=params)
        return

    start_time = time.time()

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Single Run
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Single Run")
    print(f"  Ledge height : {params.launch_height:.2f} m")
    print(f"  Launch speed : {params.speed:.2f} m/s")
    print(f"  Launch angle : {params.angle_deg:.1f}°")
    print(f"  Time step    : {config.step_size:.3f} s\n")

    state = simulate(params, config=config, sink=ConsoleResultsSink())
    print(f"\n  Status: {state.status.value} after {len(state.path)} frames")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Peak Height Cross-Check
    # ══════════════════════════════════════════════════════════════════════
    if state.result is not None:
        section("PHASE 2: Peak Height Cross-Check")
        exact = peak_height(params)
        print(f"  Re-sampled : {state.result.peak_height:.4f} m")
        print(f"  Closed form: {exact:.4f} m")
        print(f"  Difference : {exact - state.result.peak_height:+.4f} m")

    out = None
    if args.plot or args.animate or args.sweep:
        out = ensure_output_dir(args.out)

    if args.plot:
        fig = plot_trajectory(state, params,
                              save_path=f'{out}/01_trajectory.png',
                              critical_fall_height=config.critical_fall_height)
        plt.close(fig)
        print(f"\n  ✓ Saved: {out}/01_trajectory.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Angle Sweep
    # ══════════════════════════════════════════════════════════════════════
    if args.sweep:
        section("PHASE 3: Angle Sweep")
        param_sets = [
            LaunchParameters(launch_height=params.launch_height,
                             speed=params.speed, angle_deg=float(a))
            for a in np.arange(-30.0, 76.0, 15.0)
        ]
        states = simulate_batch(param_sets, config=config)
        print(f"  {'Angle':>6} {'Status':>16} {'Range (m)':>10} "
              f"{'Peak (m)':>9} {'ToF (s)':>8} {'Safety':>8}")
        for p, s in zip(param_sets, states):
            if s.status is SimulationStatus.LANDED:
                r = s.result
                verdict = 'ADVERSE' if r.safety.is_adverse else 'OK'
                print(f"  {p.angle_deg:>6.0f} {s.status.value:>16} {r.range:>10.2f} "
                      f"{r.peak_height:>9.2f} {r.time_of_flight:>8.2f} {verdict:>8}")
            else:
                print(f"  {p.angle_deg:>6.0f} {s.status.value:>16} {'--':>10} "
                      f"{'--':>9} {'--':>8} {'--':>8}")
        if args.plot:
            fig = plot_angle_sweep(param_sets, states,
                                   save_path=f'{out}/02_angle_sweep.png')
            plt.close(fig)
            print(f"\n  ✓ Saved: {out}/02_angle_sweep.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Animation
    # ══════════════════════════════════════════════════════════════════════
    if args.animate:
        section("PHASE 4: Run Animation (GIF)")
        create_run_animation(params, save_path=f'{out}/03_run_animation.gif',
                             canvas=canvas, config=config)

    elapsed = time.time() - start_time
    section("COMPLETE")
    if out is not None:
        print(f"  Outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.2f} seconds\n")


if __name__ == "__main__":
    main()

"""
Grove - Procedural Tree Scene Demo

Runs a short headless session:
1. A trunk preview follows the pointer
2. A click grows a fractal tree stroke by stroke
3. A second click while it grows is turned away by the builder lock
4. A later click ages the first tree and grows another
5. Meanwhile the sky cycles toward dusk and the grass darkens with it

Captured frames are written as PNG files next to this script.
"""

import argparse

from grove.rollout import run_default_session, save_frame


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a headless grove session")
    parser.add_argument("--duration", type=float, default=20000.0, help="Simulated ms")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--out", default="frame", help="Output file prefix")
    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("  GROVE: Procedural Tree Scene")
    print("=" * 60)
    print(f"Running {args.duration:.0f} ms of simulated time...")

    scene, trace = run_default_session(duration=args.duration, seed=args.seed)
    trace.print_summary()

    for i, frame in enumerate(trace.frames):
        save_frame(frame, f"{args.out}_{i:02d}.png")

    print(f"\nFinal ambience: {scene.get_ambience():.3f}")
    print(f"Trunk height: {scene.trunk_height:.0f}")


if __name__ == "__main__":
    main()

import argparse
import logging

import pygame

from config import SimConfig
from simulation import Simulation


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Bodies orbiting a heavy center under mutual gravity")
    parser.add_argument("--bodies", type=int, default=1000, help="number of orbiting bodies")
    parser.add_argument("--seed", type=int, default=None, help="seed for initial placement")
    parser.add_argument("--collisions", action="store_true", help="enable elastic collisions")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument("--max-fps", type=int, default=60, help="0 runs uncapped")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def build_config(args):
    return SimConfig(
        width=args.width,
        height=args.height,
        max_fps=args.max_fps,
        orbiting_count=args.bodies,
        seed=args.seed,
        collisions=args.collisions,
    )


def main(argv=None):
    """Main function to run the simulation."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = build_config(args)

    pygame.init()

    # Create a simulation instance
    sim = Simulation(config)

    # Start the main simulation loop
    sim.run()

    pygame.quit()

if __name__ == "__main__":
    main()

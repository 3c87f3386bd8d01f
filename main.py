# main.py

import logging
import sys

import numpy as np
import pygame

import constants
import logger_setup
from renderer import Renderer
from spark_config import load_config
from spark_system import SparkSystem

# Get the application's dedicated logger
logger = logging.getLogger(constants.LOGGER_NAME)

STATS_INTERVAL = 100  # Ticks between statistics log lines


def log_stats(spark_system: SparkSystem, tick: int, last_logged_energy: float):
    """Throttled statistics line. Returns the energy total for the next delta."""
    stats = spark_system.stats()
    delta_e = 0.0 if last_logged_energy is None else stats['total_energy'] - last_logged_energy
    logger.debug(
        f"Tick={tick}, "
        f"Population={stats['population']}/{stats['target']}, "
        f"Connections={stats['connections']}, "
        f"Flows={stats['flows']}, "
        f"Interactions={stats['interactions']}, "
        f"TotalEnergy={stats['total_energy']:.2f}, "
        f"Delta_E={delta_e:+.2f}, "
        f"Transferred={stats['energy_transferred']:.4f}"
    )
    return stats['total_energy']


def run_simulation_loop(spark_system: SparkSystem, renderer: Renderer, screen, clock):
    """
    The main loop: feed the engine a monotonic timestamp, forward resize
    events, draw the snapshot.
    """
    running = True
    tick = 0
    last_logged_energy = None

    spark_system.seed(pygame.time.get_ticks())

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                spark_system.resize(event.w, event.h)

        spark_system.update(float(pygame.time.get_ticks()))

        if tick % STATS_INTERVAL == 0:
            last_logged_energy = log_stats(spark_system, tick, last_logged_energy)

        renderer.draw(screen, spark_system.snapshot())
        pygame.display.flip()
        clock.tick(constants.FPS)
        tick += 1

    return tick


def main(config_path='config.json'):
    """
    Main function to initialize and run the spark field.
    """
    try:
        sim_config, capabilities, config = load_config(config_path)
    except (OSError, ValueError) as e:
        print(f"Could not load configuration from {config_path}: {e}", file=sys.stderr)
        return 1

    logger_setup.setup_logging(config)
    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {sim_config}")

    # None seeds from OS entropy; runs are not meant to be reproducible.
    rng = np.random.default_rng(config.get('master_seed'))
    logger.info(f"Master RNG initialized with seed: {config.get('master_seed')}")

    host = config.get('host', {})
    width = int(host.get('width', constants.WIDTH))
    height = int(host.get('height', constants.HEIGHT))

    # --- Initialization ---
    pygame.init()
    try:
        screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
    except pygame.error as e:
        logger.error(f"No display available, nothing to draw on: {e}")
        pygame.quit()
        return 1
    pygame.display.set_caption(constants.TITLE)
    screen.fill(constants.BACKGROUND)
    clock = pygame.time.Clock()

    spark_system = SparkSystem(
        config=sim_config,
        rng=rng,
        bounds=(width, height),
        capabilities=capabilities,
        pixel_ratio=float(host.get('dpr', 1.0)),
    )
    renderer = Renderer(sim_config.glow_multiplier, sim_config.line_alpha_max)

    ticks = run_simulation_loop(spark_system, renderer, screen, clock)

    logger.info(f"Application shutting down after {ticks} ticks.")
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())

# main.py
"""
Main entry point for the particle emitter.

This script orchestrates the entire application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the particle system, the update pipeline and the display.
4. Runs the fixed-interval animation loop (or a headless tick loop).
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config
import cProfile
import pstats
import io


def run_headless(sim, max_steps: int, log_throttle: int):
    """
    Advances the simulation max_steps times without a display.

    A headless run has no quit event, so it needs a positive max_steps.
    """
    if isinstance(max_steps, bool) or not isinstance(max_steps, int) or max_steps <= 0:
        msg = (
            f"Configuration error: headless runs need a positive max_steps, got {max_steps!r}. "
            f"max_steps 0 (unlimited) is only valid with a window."
        )
        logging.critical(msg)
        raise ValueError(msg)

    for step_num in range(1, max_steps + 1):
        sim.step()
        if step_num % log_throttle == 0:
            logging.info(f"Simulation step {step_num}/{max_steps} | {len(sim.snapshot())} live particle(s)")
    logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")


def run_interactive(sim, vis_params, run_params):
    """Opens the window and runs ticks from the pygame timer until the user quits."""
    import pygame
    from visualization import Visualizer
    from driver import AnimationDriver
    from constants import DEFAULT_TICK_INTERVAL_MS

    max_steps = run_params.get('max_steps', 0)
    visualizer = Visualizer(vis_params)
    driver = AnimationDriver(
        sim,
        visualizer,
        interval_ms=run_params.get('tick_interval_ms', DEFAULT_TICK_INTERVAL_MS),
        log_throttle=run_params.get('log_throttle_steps', 100),
    )

    try:
        visualizer.render(sim.snapshot())
        driver.start()
        running = True
        while running:
            event = pygame.event.wait()
            if driver.handle_event(event):
                if max_steps and driver.step_num >= max_steps:
                    logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                    running = False
                continue
            running = visualizer.handle_event(event, driver)
    finally:
        driver.stop()
        visualizer.close()


def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Particle Emitter Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from particle import ParticleSystem
    from simulation import Simulation

    particles = ParticleSystem(sim_params)
    sim = Simulation(particles, sim_params)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    if profiler:
        profiler.enable()
    if run_params.get('headless', False):
        run_headless(sim, run_params.get('max_steps', 5000), max(run_params.get('log_throttle_steps', 100), 1))
    else:
        run_interactive(sim, vis_params, run_params)
    if profiler:
        profiler.disable()

    logging.info("Simulation loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Emitter Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))

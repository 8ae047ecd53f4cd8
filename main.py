"""
CHIP-8 emulator entry point.

    python main.py rom=games/pong.ch8
    python main.py rom=games/pong.ch8 mode=headless frames=1200 screenshot=pong.png
"""

import sys

import hydra
from omegaconf import DictConfig

from chip8vm import Machine, Chip8Error, ProgramTooLargeError
from chip8vm.logging import get_logger, set_log_level
from chip8vm.rendering import save_screenshot
from chip8vm.runner import run_headless


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    set_log_level(cfg.log_level)
    logger = get_logger("main")

    machine = Machine(seed=cfg.seed)
    try:
        machine.load_rom(cfg.rom)
    except (FileNotFoundError, ProgramTooLargeError) as e:
        logger.error(f"Cannot load ROM: {e}")
        sys.exit(1)

    if cfg.mode == "window":
        from chip8vm.frontend import run_window
        run_window(machine, cfg.rom, scale=cfg.scale, color_scheme=cfg.color_scheme)
    elif cfg.mode == "headless":
        try:
            run_headless(machine, cfg.frames, progress=cfg.progress)
        except Chip8Error:
            sys.exit(2)
        finally:
            if cfg.screenshot:
                save_screenshot(machine.framebuffer, cfg.screenshot, color_scheme=cfg.color_scheme)
                logger.info(f"Screenshot saved: {cfg.screenshot}")
    else:
        logger.error(f"Unknown mode '{cfg.mode}', expected 'window' or 'headless'")
        sys.exit(1)


if __name__ == "__main__":
    main()

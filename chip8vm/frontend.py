"""pygame window frontend: renderer, keyboard input and beeper."""

import os
import time
from typing import Optional

import numpy as np
import pygame

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FRAMES_PER_SECOND
from chip8vm.errors import Chip8Error
from chip8vm.logging import ConsoleLogger, get_logger
from chip8vm.machine import Machine
from chip8vm.rendering import framebuffer_to_rgb, create_color_scheme, save_screenshot
from chip8vm.runner import run_frame

# QWERTY layout mapped onto the 4x4 hex keypad:
#   1 2 3 4      1 2 3 C
#   Q W E R  ->  4 5 6 D
#   A S D F      7 8 9 E
#   Z X C V      A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100
TONE_FREQUENCY = 440


def square_wave(frequency: int = TONE_FREQUENCY, sample_rate: int = SAMPLE_RATE, volume: float = 0.2) -> np.ndarray:
    """One second of a mono int16 square wave."""
    t = np.arange(sample_rate) / sample_rate
    wave = np.where(np.sin(2 * np.pi * frequency * t) >= 0, 1.0, -1.0)
    return (wave * volume * np.iinfo(np.int16).max).astype(np.int16)


class Beeper:
    """Loops a tone while the sound timer is nonzero."""

    def __init__(self, logger: ConsoleLogger):
        self.sound = None
        self.playing = False

        mixer = pygame.mixer.get_init()
        if mixer is None:
            logger.warning("Audio disabled: no audio device")
            return
        frequency, _, channels = mixer
        wave = square_wave(sample_rate=frequency)
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.sndarray.make_sound(wave)

    def update(self, active: bool):
        if self.sound is None or active == self.playing:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = active


def run_window(
    machine: Machine,
    rom_path: str,
    scale: int = 10,
    color_scheme: str = "classic",
    logger: Optional[ConsoleLogger] = None,
):
    """Main emulator loop: one frame of instructions per 60 Hz display refresh."""
    logger = logger or get_logger("frontend")
    on_color, off_color = create_color_scheme(color_scheme)

    pygame.mixer.pre_init(SAMPLE_RATE, -16, 1)
    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption(f"CHIP-8 - {os.path.basename(rom_path)}")
    clock = pygame.time.Clock()
    beeper = Beeper(logger)
    font = pygame.font.Font(None, 24)

    running = True
    paused = False
    logger.info("Controls: ESC=Quit, P=Pause, Backspace=Reset, F12=Screenshot")

    while running:
        clock.tick(FRAMES_PER_SECOND)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                    logger.info("Paused" if paused else "Resumed")
                elif event.key == pygame.K_BACKSPACE:
                    machine.reset()
                    machine.load_rom(rom_path)
                    paused = False
                    logger.info("Reset")
                elif event.key == pygame.K_F12:
                    filename = f"screenshot_{time.strftime('%Y%m%d_%H%M%S')}.png"
                    save_screenshot(machine.framebuffer, filename, color_scheme=color_scheme)
                    logger.info(f"Screenshot saved: {filename}")
                elif event.key in KEY_MAP:
                    machine.set_key(KEY_MAP[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    machine.set_key(KEY_MAP[event.key], False)

        if not paused:
            try:
                run_frame(machine)
            except Chip8Error:
                paused = True
                logger.error("Machine halted, press Backspace to reset")

        beeper.update(machine.sound_active and not paused)

        rgb = framebuffer_to_rgb(machine.framebuffer, scale, on_color, off_color)
        # pygame surfaces are indexed [x, y]
        pygame.surfarray.blit_array(screen, rgb.swapaxes(0, 1))

        if paused:
            text = font.render("PAUSED - P to resume", True, (255, 255, 0))
            screen.blit(text, (10, 10))

        pygame.display.flip()

    pygame.quit()

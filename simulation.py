import logging

import numpy as np
import pygame

from config import SimConfig
from world import World

logger = logging.getLogger(__name__)

BACKGROUND = (38, 38, 38)
TEXT_COLOR = (255, 255, 255)


class Simulation:
    def __init__(self, config=None):
        self.config = config or SimConfig()
        self.width, self.height = self.config.width, self.config.height
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption("3D Shape Orbit Simulation")
        self.clock = pygame.time.Clock()
        pygame.font.init()
        self.font = pygame.font.SysFont("Arial", 32)
        self.paused = False
        self.poisoned = 0

        self.world = World.from_config(self.config)

        center_x, center_y = self.config.center
        self.objects_pos = (center_x - 300, center_y - 350)
        self.fps_pos = (center_x - 300, center_y - 300)

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                    logger.info("Simulation %s", "paused" if self.paused else "resumed")
        return True

    def _check_poisoned(self):
        bad = self.world.non_finite_bodies()
        if len(bad) > self.poisoned:
            logger.warning("%d bodies have non-finite state (first: %d)", len(bad), bad[0])
            self.poisoned = len(bad)

    def _draw_bodies(self, items):
        for points, color in items:
            if len(points) < 3 or not np.isfinite(points).all():
                continue
            # Projection onto the screen just drops z
            pygame.draw.polygon(self.screen, color, points[:, :2].tolist(), 1)

    def _draw_ui(self, frame_time):
        fps = 1.0 / frame_time if frame_time > 0 else 0.0
        self.screen.blit(self.font.render(f"Objects: {len(self.world)}", True, TEXT_COLOR), self.objects_pos)
        self.screen.blit(self.font.render(f"{fps:.2f} FPS", True, TEXT_COLOR), self.fps_pos)

    def run(self):
        logger.info("Starting simulation with %d bodies", len(self.world))
        running = True
        while running:
            dt = self.clock.tick(self.config.max_fps) / 1000.0
            running = self._handle_events()
            self.screen.fill(BACKGROUND)
            if self.paused:
                items = self.world.render_items()
            else:
                items = self.world.step(dt)
                self._check_poisoned()
            self._draw_bodies(items)
            self._draw_ui(dt)
            pygame.display.flip()
        logger.info("Simulation stopped")

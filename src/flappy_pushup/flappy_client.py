#!/usr/bin/env python3
"""
flappy_client.py

pygame front end: reads the control input, drives the GameController once per
frame and renders the engine snapshot plus the ranking overlay.

Without a camera pipeline the mouse height stands in for the shoulder height;
moving the pointer out of the window means no signal.
"""

import logging
from typing import Dict, List

import pygame

from .config import ClientConfig
from .constants import RENDER_FPS
from .control import ShoulderTracker
from .controller import GameController
from .data_models import GameState, Snapshot
from .personal_best import PersonalBestStore
from .physics_engine import GameEngine
from .ranking_client import RankingClient

logger = logging.getLogger(__name__)

SKY = (135, 206, 235)
PIPE = (34, 139, 34)
PIPE_SHADOW = (0, 100, 0)
GROUND = (139, 69, 19)
GRASS = (34, 139, 34)
AVATAR = (255, 215, 0)
AVATAR_OUTLINE = (255, 165, 0)
WHITE = (255, 255, 255)
GREY = (200, 200, 200)
RED = (255, 99, 71)


class FlappyPushupClient:
    def __init__(self, config=ClientConfig):
        pygame.init()
        self.screen = pygame.display.set_mode(
            (config.WINDOW_WIDTH, config.WINDOW_HEIGHT), pygame.RESIZABLE)
        pygame.display.set_caption("Flappy Push-up")

        store = PersonalBestStore(config.PERSONAL_BEST_PATH)
        engine = GameEngine(
            width=config.WINDOW_WIDTH, height=config.WINDOW_HEIGHT, best_store=store)
        ranking = RankingClient(
            config.RANKING_API_URL, timeout=config.RANKING_TIMEOUT_SEC,
            cache_ttl=config.RANKING_CACHE_TTL_SEC)

        self.controller = GameController(engine, ranking=ranking, name_store=store)
        self.tracker = ShoulderTracker()
        self.name_input = ""

        self.clock = pygame.time.Clock()
        self.large_font = pygame.font.Font(None, 48)
        self.font = pygame.font.Font(None, 26)

    def run(self):
        """The main client execution loop."""
        self.controller.refresh_leaderboard()

        while self.controller.is_running:
            delta_ms = self.clock.tick(RENDER_FPS)
            self._handle_events()
            if not self.controller.is_running:
                break

            self._read_input()
            was_prompting = self.controller.awaiting_name
            snapshot = self.controller.tick(self.tracker.signal(), delta_ms)
            if self.controller.awaiting_name and not was_prompting:
                self.name_input = self.controller.default_name()

            self._draw_game(snapshot)

        pygame.quit()

    def _read_input(self):
        if pygame.mouse.get_focused():
            _, mouse_y = pygame.mouse.get_pos()
            self.tracker.observe(mouse_y / max(1, self.screen.get_height()))
        else:
            self.tracker.lose()

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.controller.stop()
            elif event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.controller.engine.resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_key(self, event):
        if not self.controller.awaiting_name:
            if event.key == pygame.K_ESCAPE:
                self.controller.stop()
            elif event.key == pygame.K_c:
                self.tracker.start_calibration()
            elif event.key == pygame.K_v:
                self.tracker.end_calibration()
            return

        if event.key == pygame.K_RETURN:
            if self.controller.submit_name(self.name_input):
                self.name_input = ""
        elif event.key == pygame.K_ESCAPE:
            self.controller.skip_name()
            self.name_input = ""
        elif event.key == pygame.K_BACKSPACE:
            self.name_input = self.name_input[:-1]
        elif event.unicode and event.unicode.isprintable() and len(self.name_input) < 20:
            self.name_input += event.unicode

    # -------- Rendering --------

    def _blit_center(self, surface, y):
        self.screen.blit(surface, (self.screen.get_width() // 2 - surface.get_width() // 2, y))

    def _draw_game(self, snap: Snapshot):
        """Renders the game state using pygame."""
        screen = self.screen
        screen.fill(SKY)
        width, height = int(snap.width), int(snap.height)
        floor = height - snap.ground_height

        # Pipes
        for pipe in snap.obstacles:
            top = pygame.Rect(pipe.x, snap.ceiling_height, snap.pipe_width,
                              pipe.gap_top - snap.ceiling_height)
            bottom = pygame.Rect(pipe.x, pipe.gap_bottom, snap.pipe_width, floor - pipe.gap_bottom)
            for rect in (top, bottom):
                pygame.draw.rect(screen, PIPE, rect)
                pygame.draw.rect(screen, PIPE_SHADOW, rect, 3)

        # Ground
        pygame.draw.rect(screen, GROUND, (0, floor, width, snap.ground_height))
        pygame.draw.rect(screen, GRASS, (0, floor, width, 8))

        # Avatar
        center = (int(snap.avatar.x), int(snap.avatar.y))
        pygame.draw.circle(screen, AVATAR, center, int(snap.avatar.radius))
        pygame.draw.circle(screen, AVATAR_OUTLINE, center, int(snap.avatar.radius), 3)

        # HUD
        score_text = self.large_font.render(f"{snap.score}", True, WHITE)
        self._blit_center(score_text, 20)
        best = self.font.render(f"Best: {snap.personal_best}", True, WHITE)
        screen.blit(best, (10, 10))

        if not self.tracker.has_pose:
            warn = self.font.render("No signal - move into view", True, RED)
            screen.blit(warn, (10, 36))

        if snap.state is GameState.WAITING:
            self._blit_center(self.large_font.render("Do a push-up to start!", True, WHITE), height // 3)
        elif snap.state is GameState.GAME_OVER:
            self._draw_game_over(snap)

        self._draw_leaderboard(snap)
        pygame.display.flip()

    def _draw_game_over(self, snap: Snapshot):
        height = int(snap.height)
        self._blit_center(self.large_font.render("Game Over", True, RED), height // 4)
        self._blit_center(self.font.render(f"Score: {snap.score}", True, WHITE), height // 4 + 50)

        controller = self.controller
        if controller.awaiting_name:
            prompt = self.font.render(
                f"Name: {self.name_input}_   (Enter = submit, Esc = skip)", True, WHITE)
            self._blit_center(prompt, height // 2)
            return

        with controller.lock:
            percentile, rank, submitting = controller.percentile, controller.rank, controller.submitting
        if submitting:
            self._blit_center(self.font.render("Submitting...", True, GREY), height // 2)
        elif percentile is not None:
            line = f"Better than {percentile}% of players"
            if rank is not None:
                line += f" - rank #{rank}"
            self._blit_center(self.font.render(line, True, WHITE), height // 2)
        self._blit_center(self.font.render("Move to play again", True, GREY), height // 2 + 40)

    def _draw_leaderboard(self, snap: Snapshot):
        with self.controller.lock:
            leaderboard: List[Dict] = list(self.controller.leaderboard)

        x = int(snap.width) - 220
        self.screen.blit(self.font.render("Leaderboard", True, WHITE), (x, 20))
        if not leaderboard:
            self.screen.blit(self.font.render("No scores yet", True, GREY), (x, 50))
            return
        for i, entry in enumerate(leaderboard[:10]):
            txt = self.font.render(f"{i + 1}. {entry.get('name')} - {entry.get('score')}", True, WHITE)
            self.screen.blit(txt, (x, 50 + i * 24))


def main():
    logging.basicConfig(
        level=ClientConfig.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    FlappyPushupClient().run()


if __name__ == "__main__":
    main()

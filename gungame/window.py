"""
Arcade window: draws engine snapshots and turns clicks into fire commands
"""

from __future__ import annotations

import arcade

from .engine import GunGameEngine, WorldSnapshot
from .utils import format_time

MAX_TICKS_PER_FRAME = 10


class GunGameWindow(arcade.Window):
    """Arcade window for playing (or watching) GunGame"""

    def __init__(self, engine: GunGameEngine, interactive: bool = True, title: str = "Gun Game"):
        snap = engine.snapshot()
        super().__init__(int(snap.width), int(snap.height), title)
        self.engine = engine
        self.interactive = interactive
        self._accumulator = 0.0
        self._name = ""

        # Colors
        self.background_color = (18, 18, 22)
        self.CIRCLE_C = {
            "red": (220, 60, 60),
            "orange": (240, 150, 50),
            "yellow": (240, 220, 80),
        }
        self.SPECIAL_C = (170, 80, 220)
        self.PLAYER_C = (80, 200, 120)
        self.PROJECTILE_C = (200, 200, 230)
        self.POWERUP_C = {
            "shotgun": (90, 160, 250),
            "points100": (250, 210, 60),
            "bounce": (60, 220, 200),
            "invincibility": (250, 250, 250),
            "nuke": (250, 90, 40),
            "extraLife": (120, 240, 120),
        }
        self.HUD_C = (220, 220, 220)

    # ----------------------------
    # Simulation clock
    # ----------------------------

    def on_update(self, delta_time: float):
        if not self.interactive:
            return
        tick_s = self.engine.tick_ms / 1000.0
        self._accumulator += delta_time
        ticks = 0
        while self._accumulator >= tick_s and ticks < MAX_TICKS_PER_FRAME:
            self.engine.tick()
            self._accumulator -= tick_s
            ticks += 1
        if ticks == MAX_TICKS_PER_FRAME:
            self._accumulator = 0.0

    # ----------------------------
    # Input
    # ----------------------------

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int):
        if not self.interactive or self.engine.run.game_over:
            return
        # arcade's origin is bottom-left, the engine's is top-left
        self.engine.fire_at(x, self.height - y)

    def on_text(self, text: str):
        if not self.engine.run.name_prompt_open:
            return
        for ch in text:
            if ch.isprintable() and len(self._name) < 20:
                self._name += ch

    def on_key_press(self, symbol: int, modifiers: int):
        run = self.engine.run
        if symbol == arcade.key.ESCAPE:
            self.close()
        elif run.name_prompt_open:
            if symbol == arcade.key.BACKSPACE:
                self._name = self._name[:-1]
            elif symbol in (arcade.key.ENTER, arcade.key.RETURN):
                if self.engine.submit_high_score(self._name) is not None:
                    self._name = ""
        elif run.game_over and symbol in (arcade.key.ENTER, arcade.key.RETURN, arcade.key.R):
            self.engine.restart()

    # ----------------------------
    # Drawing
    # ----------------------------

    def on_draw(self):
        self.clear()
        snap = self.engine.snapshot()
        if snap.game_over:
            self._draw_game_over(snap)
        else:
            self._draw_world(snap)
            self._draw_hud(snap)

    def _flip_y(self, y: float) -> float:
        return self.height - y

    def _draw_world(self, snap: WorldSnapshot):
        blink_on = (snap.time_ms // 200) % 2 == 0

        for p in snap.power_ups:
            color = self.POWERUP_C.get(p.kind.value, self.HUD_C)
            arcade.draw_circle_outline(p.x, self._flip_y(p.y), 15, color, 3)

        for c in snap.circles:
            color = self.SPECIAL_C if c.is_special and blink_on else self.CIRCLE_C.get(c.color, self.HUD_C)
            arcade.draw_circle_filled(c.x, self._flip_y(c.y), c.size, color)

        for p in snap.projectiles:
            arcade.draw_circle_filled(p.x, self._flip_y(p.y), p.size, self.PROJECTILE_C)

        if snap.player_visible:
            arcade.draw_circle_filled(
                snap.player_x, self._flip_y(snap.player_y),
                snap.player_radius, self.PLAYER_C
            )

    def _draw_hud(self, snap: WorldSnapshot):
        top = self.height - 22
        arcade.draw_text(
            f"Weapon: {snap.weapon} | Level: {snap.level} | Lives: {snap.lives} | Score: {snap.score}",
            12, top, self.HUD_C, 14,
        )
        arcade.draw_text(
            f"Accuracy: {snap.accuracy}% | Time: {format_time(snap.elapsed_s)} | Shots: {snap.shots_available}",
            12, top - 20, self.HUD_C, 12,
        )
        effects = "  ".join(f"{k.upper()} {s}s" for k, s in snap.active_effects.items())
        if effects:
            arcade.draw_text(effects, 12, top - 40, self.HUD_C, 12)
        if snap.message:
            arcade.draw_text(
                snap.message, self.width / 2, self.height / 2 + 60,
                (250, 230, 120), 20, anchor_x="center",
            )

    def _draw_game_over(self, snap: WorldSnapshot):
        x = self.width / 2
        y = self.height - 60
        lines = [
            ("Good Game!", 28),
            (f"Final Score: {snap.score}", 16),
            (f"Level Reached: {snap.level}", 16),
            (f"Shots Fired: {snap.shots_fired}", 16),
            (f"Shots Hit: {snap.shots_hit}", 16),
            (f"Accuracy: {snap.accuracy}%", 16),
            (f"Time Played: {format_time(snap.elapsed_s)}", 16),
        ]
        if snap.name_prompt_open:
            lines += [("High Score! Type your name and press Enter:", 16), (self._name + "_", 18)]
        else:
            lines += [("Press Enter to play again", 14)]
        for text, size in lines:
            arcade.draw_text(text, x, y, self.HUD_C, size, anchor_x="center")
            y -= size + 14

        if snap.leaderboard:
            y -= 10
            arcade.draw_text("Leaderboard", x, y, self.HUD_C, 16, anchor_x="center")
            for i, entry in enumerate(snap.leaderboard):
                y -= 22
                arcade.draw_text(
                    f"#{i + 1} {entry.name}  {entry.score} pts | {entry.accuracy}% | {format_time(entry.time)}",
                    x, y, self.HUD_C, 12, anchor_x="center",
                )

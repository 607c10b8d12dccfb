# ui.py - toolbar, transient banner, win celebration and modal panels
import random
import pygame
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple
from klondike import common as C

BUTTON_H = 36
BUTTON_PAD_X = 14
TOOLBAR_GAP = 8
TOOLBAR_MARGIN = (12, 12)

# (fill, border, text) per button state
_BUTTON_STYLES = {
    "normal": ((232, 232, 238), (150, 150, 165), (30, 30, 35)),
    "hover": ((212, 218, 232), (110, 120, 150), (20, 20, 25)),
    "disabled": ((190, 192, 198), (165, 165, 170), (120, 120, 130)),
}
PANEL_BG = (240, 240, 245)
PANEL_BORDER = (120, 120, 130)
PANEL_TEXT = (30, 30, 35)

_FONT = None


def _font():
    global _FONT
    if _FONT is None:
        _FONT = pygame.font.SysFont("Segoe UI", 18)
    return _FONT


def _dim(surface: pygame.Surface, alpha: int = 160):
    veil = pygame.Surface((C.SCREEN_W, C.SCREEN_H), pygame.SRCALPHA)
    veil.fill((0, 0, 0, alpha))
    surface.blit(veil, (0, 0))


def _blit_centered(surface, text_surf, center):
    surface.blit(text_surf, text_surf.get_rect(center=center))


class Button:
    """Clickable label. ``label_fn`` and ``enabled_fn`` are polled on every draw."""

    def __init__(
        self,
        label: str,
        on_click: Callable[[], None],
        enabled_fn: Optional[Callable[[], bool]] = None,
        label_fn: Optional[Callable[[], str]] = None,
        height: int = BUTTON_H,
        min_width: int = 0,
    ):
        self.label = label
        self.on_click = on_click
        self.enabled_fn = enabled_fn
        self.label_fn = label_fn
        self._hover = False
        text_w, _ = _font().size(label)
        self.rect = pygame.Rect(0, 0, max(min_width, text_w + 2 * BUTTON_PAD_X), height)

    def current_label(self) -> str:
        return self.label_fn() if self.label_fn else self.label

    def is_enabled(self) -> bool:
        return self.enabled_fn is None or bool(self.enabled_fn())

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self._hover = self.rect.collidepoint(event.pos)
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and self.rect.collidepoint(event.pos):
            if self.is_enabled():
                self.on_click()
                return True
        return False

    def draw(self, surface: pygame.Surface):
        state = "disabled" if not self.is_enabled() else ("hover" if self._hover else "normal")
        fill, border, text = _BUTTON_STYLES[state]
        pygame.draw.rect(surface, fill, self.rect, border_radius=8)
        pygame.draw.rect(surface, border, self.rect, width=1, border_radius=8)
        _blit_centered(surface, _font().render(self.current_label(), True, text), self.rect.center)


class Toolbar:
    """A row of buttons pinned to the top-left or top-right corner."""

    def __init__(
        self,
        buttons: List[Button],
        margin: Tuple[int, int] = TOOLBAR_MARGIN,
        gap: int = TOOLBAR_GAP,
        align: str = "right",
        width_provider: Optional[Callable[[], int]] = None,
    ):
        self.buttons = buttons
        self.margin = margin
        self.gap = gap
        self.align = align
        self.width_provider = width_provider
        self.relayout()

    def relayout(self):
        mx, my = self.margin
        row_w = sum(b.rect.width for b in self.buttons) + self.gap * max(0, len(self.buttons) - 1)
        x = mx
        if self.align == "right" and self.width_provider is not None:
            x = self.width_provider() - mx - row_w
        for b in self.buttons:
            b.rect.topleft = (x, my)
            x = b.rect.right + self.gap

    def button(self, label: str) -> Optional[Button]:
        return next((b for b in self.buttons if b.label == label), None)

    def handle_event(self, event: pygame.event.Event) -> bool:
        return any(b.handle_event(event) for b in self.buttons)

    def draw(self, surface: pygame.Surface):
        for b in self.buttons:
            b.draw(surface)


def make_toolbar(
    actions: Dict[str, Mapping],
    *,
    align: str = "right",
    width_provider: Optional[Callable[[], int]] = None,
) -> Toolbar:
    """Build a toolbar from ``{label: {"on_click", "enabled", "label_fn", "min_width"}}``."""
    buttons = [
        Button(
            label,
            cfg["on_click"],
            enabled_fn=cfg.get("enabled"),
            label_fn=cfg.get("label_fn"),
            min_width=cfg.get("min_width", 0),
        )
        for label, cfg in actions.items()
        if callable(cfg.get("on_click"))
    ]
    return Toolbar(buttons, align=align, width_provider=width_provider)


class MessageBanner:
    """One line of text at the bottom of the table that expires on its own."""

    def __init__(self, duration_ms: int = 3000):
        self.duration_ms = duration_ms
        self.text = ""
        self._expires_at = 0

    def show(self, text: str, now_ms: int):
        self.text = text
        self._expires_at = now_ms + self.duration_ms

    def clear(self):
        self.text = ""

    def update(self, now_ms: int):
        if self.text and now_ms >= self._expires_at:
            self.text = ""

    def draw(self, surface: pygame.Surface):
        if not self.text:
            return
        msg = C.FONT_UI.render(self.text, True, (255, 255, 180))
        bg = msg.get_rect().inflate(32, 16)
        bg.center = (C.SCREEN_W // 2, C.SCREEN_H - 40)
        pygame.draw.rect(surface, (0, 0, 0), bg, border_radius=10)
        _blit_centered(surface, msg, bg.center)


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    size: int
    delay_ms: int


class Celebration:
    """Gold particles raining over the table for a fixed duration."""

    COLOR = (255, 215, 0)

    def __init__(self, count: int = 200, rng: Optional[random.Random] = None):
        self.count = count
        self.rng = rng or random.Random()
        self.particles: List[Particle] = []
        self.active = False
        self._started_at = 0
        self._ends_at = 0
        self._on_done: Optional[Callable[[], None]] = None

    def start(self, now_ms: int, duration_ms: int, on_done: Optional[Callable[[], None]] = None):
        rng = self.rng
        self.particles = [
            Particle(
                x=rng.random() * C.SCREEN_W,
                y=-10.0,
                vx=(rng.random() - 0.5) * 120,
                vy=C.SCREEN_H / (2 + rng.random() * 3),
                size=6 + int(rng.random() * 6),
                delay_ms=int(rng.random() * 2000),
            )
            for _ in range(self.count)
        ]
        self.active = True
        self._started_at = now_ms
        self._ends_at = now_ms + duration_ms
        self._on_done = on_done

    def cancel(self):
        self.active = False
        self.particles = []
        self._on_done = None

    def update(self, now_ms: int):
        if not self.active or now_ms < self._ends_at:
            return
        cb = self._on_done
        self.cancel()
        if cb:
            cb()

    def draw(self, surface: pygame.Surface, now_ms: int):
        if not self.active:
            return
        for p in self.particles:
            t = (now_ms - self._started_at - p.delay_ms) / 1000.0
            if t < 0:
                continue
            x = int(p.x + p.vx * t)
            y = int(p.y + p.vy * t)
            if 0 <= y <= C.SCREEN_H:
                pygame.draw.rect(surface, self.COLOR, (x, y, p.size, p.size))


class _Panel:
    """Centered modal panel; subclasses fill in the lines and buttons."""

    size = (460, 320)
    title = ""

    def __init__(self):
        self.visible = False
        self.lines: List[str] = []
        self.buttons: List[Button] = []

    def close(self):
        self.visible = False

    def rect(self) -> pygame.Rect:
        panel = pygame.Rect((0, 0), self.size)
        panel.center = (C.SCREEN_W // 2, C.SCREEN_H // 2)
        gap = 24
        row_w = sum(b.rect.width for b in self.buttons) + gap * max(0, len(self.buttons) - 1)
        x = panel.centerx - row_w // 2
        for b in self.buttons:
            b.rect.bottomleft = (x, panel.bottom - 20)
            x = b.rect.right + gap
        return panel

    def handle_event(self, event: pygame.event.Event) -> bool:
        """While open, every mouse click and key press is consumed."""
        if not self.visible:
            return False
        self.rect()
        if event.type == pygame.KEYDOWN:
            self.on_key(event.key)
            return True
        if event.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
            for b in self.buttons:
                b.handle_event(event)
            return event.type == pygame.MOUSEBUTTONDOWN
        return False

    def on_key(self, key):
        pass

    def draw(self, surface: pygame.Surface):
        if not self.visible:
            return
        _dim(surface)
        panel = self.rect()
        pygame.draw.rect(surface, PANEL_BG, panel, border_radius=12)
        pygame.draw.rect(surface, PANEL_BORDER, panel, width=1, border_radius=12)
        title = C.FONT_TITLE.render(self.title, True, PANEL_TEXT)
        surface.blit(title, (panel.centerx - title.get_width() // 2, panel.top + 20))
        y = panel.top + 36 + title.get_height()
        for line in self.lines:
            s = C.FONT_UI.render(line, True, PANEL_TEXT)
            surface.blit(s, (panel.centerx - s.get_width() // 2, y))
            y += s.get_height() + 6
        for b in self.buttons:
            b.draw(surface)


class GameOverModal(_Panel):
    """Win panel: final score, moves and time with a Play Again button."""

    title = "You Won!"

    def __init__(self, on_play_again: Callable[[], None]):
        super().__init__()
        self.on_play_again = on_play_again
        self.buttons = [Button("Play Again", self._play_again, min_width=200, height=48)]

    def open(self, score: int, moves: int, elapsed_seconds: int):
        self.lines = [
            f"Score: {score}",
            f"Moves: {moves}",
            f"Time: {C.format_clock(elapsed_seconds)}",
        ]
        self.visible = True

    def _play_again(self):
        self.close()
        self.on_play_again()

    def on_key(self, key):
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._play_again()


class ConfirmQuitModal(_Panel):
    """Yes/No prompt shown when the window is closed."""

    size = (460, 200)
    title = "Quit Game?"

    def __init__(self, on_quit: Callable[[], None]):
        super().__init__()
        self.on_quit = on_quit
        self.lines = ["The current deal will be lost."]
        self.buttons = [
            Button("Yes", self._confirm, min_width=120, height=44),
            Button("No", self.close, min_width=120, height=44),
        ]

    def open(self):
        self.visible = True

    def _confirm(self):
        self.close()
        self.on_quit()

    def on_key(self, key):
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_y):
            self._confirm()
        elif key in (pygame.K_ESCAPE, pygame.K_n):
            self.close()

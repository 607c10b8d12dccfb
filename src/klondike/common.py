# common.py - table geometry, fonts and card artwork for the Klondike scene
import pygame
from typing import Optional, Sequence

from klondike.cards import Card, is_red

SCREEN_W, SCREEN_H = 1280, 800
TOP_BAR_H = 60
TABLE_BG = (12, 92, 48)

# Layout mode -> (card width, card height, fan for face-up, fan for face-down)
_LAYOUT_DIMS = {
    "normal": (100, 140, 30, 14),
    "compact": (120, 168, 30, 12),
    "ultra-compact": (75, 105, 22, 8),
}
CARD_W, CARD_H, FAN_UP, FAN_DOWN = _LAYOUT_DIMS["compact"]
CARD_GAP_X = 18
CARD_GAP_Y = 26
CARD_RADIUS = 8

WHITE = (245, 245, 245)
INK = (25, 25, 30)
SUIT_RED = (196, 30, 40)
BACK_BLUE = (28, 70, 150)
BACK_LINE = (90, 130, 210)
OUTLINE = (230, 240, 230)
VALID = (80, 220, 120)
INVALID = (230, 70, 70)

# Fonts exist only after setup_fonts(), which needs pygame.init() first
FONT_UI = None
FONT_TITLE = None
FONT_CORNER_RANK = None
FONT_CORNER_SUIT = None

_FONT_SPECS = {
    "FONT_UI": (None, 26),
    "FONT_TITLE": (None, 44),
    "FONT_CORNER_RANK": (None, 26),
    # Suit glyphs need a font with the card symbols
    "FONT_CORNER_SUIT": ("Segoe UI Symbol", 24),
}

_faces = {}
_back = None


def setup_fonts():
    default = pygame.font.get_default_font()
    for name, (family, size) in _FONT_SPECS.items():
        try:
            font = pygame.font.SysFont(family or default, size, bold=True)
        except (OSError, pygame.error):
            font = pygame.font.SysFont(default, size, bold=True)
        globals()[name] = font


def invalidate_card_caches():
    global _faces, _back
    _faces = {}
    _back = None


def apply_layout(layout: str):
    """Switch card size and fan spacing; unknown modes fall back to compact."""
    global CARD_W, CARD_H, FAN_UP, FAN_DOWN
    CARD_W, CARD_H, FAN_UP, FAN_DOWN = _LAYOUT_DIMS.get(layout, _LAYOUT_DIMS["compact"])
    invalidate_card_caches()


def format_clock(seconds: int) -> str:
    """MM:SS; minutes keep counting past an hour."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def _pip_heart(surface, cx, cy, s, color):
    lobe = s // 4
    pygame.draw.circle(surface, color, (cx - lobe, cy - lobe // 2), lobe)
    pygame.draw.circle(surface, color, (cx + lobe, cy - lobe // 2), lobe)
    pygame.draw.polygon(surface, color, [(cx - 2 * lobe, cy - lobe // 3), (cx + 2 * lobe, cy - lobe // 3), (cx, cy + s // 2)])


def _pip_diamond(surface, cx, cy, s, color):
    w, h = s * 2 // 5, s // 2
    pygame.draw.polygon(surface, color, [(cx, cy - h), (cx + w, cy), (cx, cy + h), (cx - w, cy)])


def _pip_spade(surface, cx, cy, s, color):
    lobe = s // 4
    pygame.draw.polygon(surface, color, [(cx, cy - s // 2), (cx + 2 * lobe, cy + lobe // 3), (cx - 2 * lobe, cy + lobe // 3)])
    pygame.draw.circle(surface, color, (cx - lobe, cy + lobe // 2), lobe)
    pygame.draw.circle(surface, color, (cx + lobe, cy + lobe // 2), lobe)
    pygame.draw.polygon(surface, color, [(cx, cy + lobe), (cx + lobe, cy + s // 2), (cx - lobe, cy + s // 2)])


def _pip_club(surface, cx, cy, s, color):
    lobe = s // 5
    for dx, dy in ((0, -lobe), (-lobe, lobe // 2), (lobe, lobe // 2)):
        pygame.draw.circle(surface, color, (cx + dx, cy + dy), lobe)
    pygame.draw.polygon(surface, color, [(cx, cy), (cx + lobe, cy + s // 2), (cx - lobe, cy + s // 2)])


_PIPS = {
    "hearts": _pip_heart,
    "diamonds": _pip_diamond,
    "spades": _pip_spade,
    "clubs": _pip_club,
}


def draw_pip(surface, center, suit, color, size):
    _PIPS[suit](surface, center[0], center[1], size, color)


def _blank_card(fill):
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    rect = surf.get_rect()
    pygame.draw.rect(surf, fill, rect, border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, INK, rect, width=2, border_radius=CARD_RADIUS)
    return surf


def get_card_surface(card: Card):
    if not card.face_up:
        return get_back_surface()
    face = _faces.get(card.id)
    if face is not None:
        return face
    face = _blank_card(WHITE)
    color = SUIT_RED if is_red(card.suit) else INK
    corner = pygame.Surface((CARD_W // 3, CARD_H // 3), pygame.SRCALPHA)
    rank = FONT_CORNER_RANK.render(card.value, True, color)
    glyph = FONT_CORNER_SUIT.render(card.symbol, True, color)
    corner.blit(rank, (0, 0))
    corner.blit(glyph, ((rank.get_width() - glyph.get_width()) // 2, rank.get_height() - 4))
    pad = 6
    face.blit(corner, (pad, pad))
    flipped = pygame.transform.rotate(corner, 180)
    face.blit(flipped, (CARD_W - pad - flipped.get_width(), CARD_H - pad - flipped.get_height()))
    draw_pip(face, (CARD_W // 2, CARD_H // 2), card.suit, color, max(20, CARD_W * 2 // 5))
    _faces[card.id] = face
    return face


def get_back_surface():
    global _back
    if _back is None:
        _back = _blank_card(WHITE)
        inner = _back.get_rect().inflate(-12, -12)
        pygame.draw.rect(_back, BACK_BLUE, inner, border_radius=CARD_RADIUS - 2)
        step = 10
        for x in range(inner.left + step, inner.right, step):
            pygame.draw.line(_back, BACK_LINE, (x, inner.top + 2), (x, inner.bottom - 3))
        for y in range(inner.top + step, inner.bottom, step):
            pygame.draw.line(_back, BACK_LINE, (inner.left + 2, y), (inner.right - 3, y))
    return _back


class PileView:
    """Where one pile sits on screen; tableau views fan their cards downward."""

    def __init__(self, x, y, fanned=False):
        self.x, self.y = x, y
        self.fanned = fanned

    def offsets(self, cards: Sequence[Card]):
        ys, y = [], self.y
        for c in cards:
            ys.append(y)
            if self.fanned:
                y += FAN_UP if c.face_up else FAN_DOWN
        return ys

    def base_rect(self):
        return pygame.Rect(self.x, self.y, CARD_W, CARD_H)

    def rect_for_index(self, cards: Sequence[Card], idx):
        if not cards or idx < 0:
            return self.base_rect()
        return pygame.Rect(self.x, self.offsets(cards)[idx], CARD_W, CARD_H)

    def area(self, cards: Sequence[Card]):
        """Bounding box of the whole pile, used as the drop zone."""
        return self.base_rect().union(self.rect_for_index(cards, len(cards) - 1))

    def draw(self, screen, cards: Sequence[Card], highlight=None):
        if not cards:
            pygame.draw.rect(screen, OUTLINE, self.base_rect(), width=2, border_radius=CARD_RADIUS)
        for c, y in zip(cards, self.offsets(cards)):
            screen.blit(get_card_surface(c), (self.x, y))
        if highlight is not None:
            pygame.draw.rect(screen, highlight, self.area(cards), width=4, border_radius=CARD_RADIUS)

    def hit(self, cards: Sequence[Card], pos) -> Optional[int]:
        """Topmost card index under ``pos``; -1 on an empty pile's outline, else None."""
        if not cards:
            return -1 if self.base_rect().collidepoint(pos) else None
        for i, y in reversed(list(enumerate(self.offsets(cards)))):
            if pygame.Rect(self.x, y, CARD_W, CARD_H).collidepoint(pos):
                return i
        return None


class Scene:
    def __init__(self, app):
        self.app = app

    def handle_event(self, e): pass
    def update(self, now_ms): pass
    def draw(self, screen): pass

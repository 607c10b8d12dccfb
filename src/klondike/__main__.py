# __main__.py - windowed Klondike with the bot on the B key
import logging
import os
import pygame
from klondike import common as C
from klondike.config import load_settings
from klondike.scene import KlondikeGameScene
from klondike.ui import ConfirmQuitModal

FPS = 60


def _initial_window_size():
    info = pygame.display.Info()
    # Leave room for taskbars and window decorations
    w = min(C.SCREEN_W, max(640, info.current_w - 120))
    h = min(C.SCREEN_H, max(480, info.current_h - 140))
    return w, h


def _env_flag(name):
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


def main():
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()

    C.SCREEN_W, C.SCREEN_H = _initial_window_size()
    screen = pygame.display.set_mode((C.SCREEN_W, C.SCREEN_H), pygame.RESIZABLE)
    pygame.display.set_caption("Klondike Solitaire")
    C.setup_fonts()

    scene = KlondikeGameScene(app=None, settings=settings)
    if _env_flag("KLONDIKE_START_BOT"):
        scene.driver.start_bot_after_deal()

    state = {"running": True}
    confirm = ConfirmQuitModal(on_quit=lambda: state.update(running=False))
    clock = pygame.time.Clock()

    while state["running"]:
        clock.tick(FPS)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                confirm.open()
            elif e.type == pygame.VIDEORESIZE:
                C.SCREEN_W, C.SCREEN_H = e.size
                screen = pygame.display.set_mode(e.size, pygame.RESIZABLE)
                scene.compute_layout()
            elif confirm.visible:
                confirm.handle_event(e)
            else:
                scene.handle_event(e)
        if not state["running"]:
            break
        # No deal or bot steps while the quit prompt is open
        if not confirm.visible:
            scene.update(pygame.time.get_ticks())
        scene.draw(screen)
        confirm.draw(screen)
        pygame.display.flip()

    scene.driver.stop()
    pygame.quit()


if __name__ == "__main__":
    main()

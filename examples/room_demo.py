"""
Room Fire — roomfire Pygame Demo

One fire starts in the middle of the room and spreads. Click to spray water at
the cursor. Keep the temperature below the maximum or the room is evacuated.

Run:
    python examples/room_demo.py
"""
from __future__ import annotations

import sys

import pygame

from roomfire import (
    EvacuationPhase,
    FireSession,
    FireState,
    RectRoom,
    SessionConfig,
    SpawnerConfig,
)

WIDTH, HEIGHT = 1000, 640
FPS = 60
TPS = 20
PX_PER_UNIT = 50.0
ROOM = RectRoom(0.0, 0.0, WIDTH / PX_PER_UNIT, (HEIGHT - 60) / PX_PER_UNIT)
HUD_TOP = HEIGHT - 60

TITLE = "Room Fire — roomfire"
BG_COLOR = (24, 22, 26)
FLOOR_COLOR = (48, 44, 40)
HUD_COLOR = (220, 215, 200)
PHASE_COLORS = {
    EvacuationPhase.NORMAL: (120, 200, 120),
    EvacuationPhase.WARNING: (230, 200, 60),
    EvacuationPhase.CRITICAL: (240, 130, 40),
    EvacuationPhase.TRIGGERED: (240, 60, 40),
    EvacuationPhase.FINAL_COUNTDOWN: (240, 60, 40),
    EvacuationPhase.OVER: (160, 40, 40),
}


def build_session(seed: int | None = None) -> FireSession:
    config = SessionConfig(
        room=ROOM,
        tps=TPS,
        seed=seed,
        spawner=SpawnerConfig(points=((2.0, 2.0), (18.0, 9.0)), interval=15.0),
    )
    session = FireSession(config)
    session.spawn_fire((ROOM.max_x / 2, ROOM.max_y / 2))
    return session


def _to_screen(pos: tuple[float, float]) -> tuple[int, int]:
    return int(pos[0] * PX_PER_UNIT), int(pos[1] * PX_PER_UNIT)


def _to_room(px: int, py: int) -> tuple[float, float]:
    return px / PX_PER_UNIT, py / PX_PER_UNIT


def _draw_fires(screen: pygame.Surface, session: FireSession) -> None:
    for fire in session.fires():
        x, y = _to_screen(fire.position)
        radius = int(PX_PER_UNIT * 0.4 * (0.5 + fire.intensity * 0.2))
        heat = min(fire.intensity / 3.0, 1.0)
        color = (255, int(80 + 140 * (1.0 - heat)), 30)
        if fire.state is FireState.EXTINGUISHING:
            color = (200, 120, 90)
        pygame.draw.circle(screen, color, (x, y), radius)
        pygame.draw.circle(screen, (255, 240, 180), (x, y), max(2, radius // 3))


def _draw_hud(screen: pygame.Surface, font: pygame.font.Font,
              session: FireSession, paused: bool) -> None:
    pygame.draw.rect(screen, BG_COLOR, (0, HUD_TOP, WIDTH, HEIGHT - HUD_TOP))
    phase = session.evacuation_phase()
    thermal = session.thermal
    frac = (thermal.temperature - thermal.baseline) / (thermal.maximum - thermal.baseline)
    pygame.draw.rect(screen, (70, 70, 70), (10, HUD_TOP + 10, 300, 12))
    pygame.draw.rect(screen, PHASE_COLORS[phase], (10, HUD_TOP + 10, int(300 * frac), 12))

    status = f"Temp {thermal.temperature:5.1f}   Fires {session.active_fire_count()}   {phase.name}"
    remaining = session.evacuation.countdown_remaining
    if remaining is not None:
        status += f"   Evacuate: {remaining / TPS:4.1f}s"
    if session.outcome is not None:
        status += f"   [{session.outcome.value.upper()}]"
    if paused:
        status += "   [PAUSED]"
    screen.blit(font.render(status, True, HUD_COLOR), (330, HUD_TOP + 8))
    screen.blit(font.render("Click=Water  Space=Pause  R=Reset  Esc=Quit",
                            True, HUD_COLOR), (10, HUD_TOP + 32))


def main() -> None:
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    session = build_session()
    paused = False
    tick_acc = 0.0
    tick_interval = 1.0 / TPS
    running = True

    while running:
        dt = pg_clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key == pygame.K_r:
                    session = build_session()
                    tick_acc = 0.0
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if event.pos[1] < HUD_TOP:
                    session.extinguish_at(_to_room(*event.pos), radius=0.8)

        if not paused:
            tick_acc += dt
            while tick_acc >= tick_interval:
                session.step()
                tick_acc -= tick_interval

        screen.fill(FLOOR_COLOR)
        _draw_fires(screen, session)
        _draw_hud(screen, font, session, paused)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()

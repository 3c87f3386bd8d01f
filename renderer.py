# renderer.py

"""
Pygame renderer for SparkSystem snapshots.

The renderer only reads WorldSnapshot values; it never touches the
simulation. Drawing happens on an RGBA layer sized by the device pixel ratio,
with the same downscale/upscale bloom trick used for the glow pass.
"""

import logging
import pygame

import constants

logger = logging.getLogger(constants.LOGGER_NAME)


def _alpha_byte(alpha: float) -> int:
    return max(0, min(255, int(alpha * 255)))


class Renderer:
    """
    Data Contract:
    - Inputs: glow_multiplier and line_alpha_max from the SparkConfig.
    - draw(screen, snapshot): Paints one frame. A None screen is a no-op.
    - Side Effects: Owns its off-screen layers and rebuilds them on resize.
    """
    def __init__(self, glow_multiplier: float, line_alpha_max: float):
        self.glow_multiplier = glow_multiplier
        self.line_alpha_max = line_alpha_max
        self._layer_size = None
        self.trail_surface = None
        self.layer = None
        self.glow_layer = None

    def _ensure_layers(self, screen_size, pixel_ratio):
        layer_size = (max(1, int(screen_size[0] * pixel_ratio)), max(1, int(screen_size[1] * pixel_ratio)))
        if layer_size == self._layer_size:
            return
        self._layer_size = layer_size
        self.trail_surface = pygame.Surface(screen_size, pygame.SRCALPHA)
        self.layer = pygame.Surface(layer_size, pygame.SRCALPHA)
        self.glow_layer = pygame.Surface(layer_size, pygame.SRCALPHA)
        logger.debug(f"Render layers rebuilt at {layer_size[0]}x{layer_size[1]} (dpr {pixel_ratio}).")

    def draw(self, screen, snapshot):
        if screen is None or snapshot is None:
            return

        screen_size = screen.get_size()
        scale = snapshot.pixel_ratio
        self._ensure_layers(screen_size, scale)

        # --- Trails ---
        self.trail_surface.fill(constants.TRAIL_EFFECT_COLOR)
        screen.blit(self.trail_surface, (0, 0))

        self.layer.fill((0, 0, 0, 0))
        self.glow_layer.fill((0, 0, 0, 0))

        # --- Connections ---
        for c in snapshot.connections:
            alpha = _alpha_byte(c.strength * c.fade * self.line_alpha_max)
            if alpha == 0:
                continue
            mid = tuple((c.color1[i] + c.color2[i]) // 2 for i in range(3))
            pygame.draw.line(
                self.layer, (*mid, alpha),
                (int(c.x1 * scale), int(c.y1 * scale)), (int(c.x2 * scale), int(c.y2 * scale)),
                max(1, int(scale))
            )

        # --- Sparks, their glow and transfer rings ---
        for s in snapshot.sparks:
            center = (int(s.x * scale), int(s.y * scale))
            radius = max(1, int(s.radius * scale))
            alpha = _alpha_byte(s.alpha)
            pygame.draw.circle(self.glow_layer, (*s.color, alpha),
                               center, max(1, int(s.radius * self.glow_multiplier * scale)))
            pygame.draw.circle(self.layer, (*s.color, alpha), center, radius)
            if s.ring_alpha > 0.01:
                pygame.draw.circle(self.layer, (*s.color, _alpha_byte(s.ring_alpha * s.alpha)),
                                   center, radius * 3, 1)

        # --- Flow particles ---
        for f in snapshot.flows:
            pygame.draw.circle(self.layer, (*f.color, _alpha_byte(f.alpha)),
                               (int(f.x * scale), int(f.y * scale)), max(1, int(f.size * scale)))

        # --- Bloom: blur the glow layer by scaling down then up ---
        bloom = constants.BLOOM_RADIUS
        small_size = (max(1, screen_size[0] // bloom), max(1, screen_size[1] // bloom))
        blurred = pygame.transform.smoothscale(pygame.transform.smoothscale(self.glow_layer, small_size), screen_size)
        intensity = constants.BLOOM_INTENSITY
        blurred.fill((intensity, intensity, intensity), special_flags=pygame.BLEND_RGB_MULT)
        screen.blit(blurred, (0, 0), special_flags=pygame.BLEND_RGB_ADD)

        if self._layer_size != screen_size:
            screen.blit(pygame.transform.smoothscale(self.layer, screen_size), (0, 0))
        else:
            screen.blit(self.layer, (0, 0))

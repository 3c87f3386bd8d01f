# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework.
These are not expected to change between simulation runs. Tunable simulation
parameters live in config.json and are loaded into a SparkConfig.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Default window dimensions (used when config.json has no 'host' override)
WIDTH = 1920  # Pixels
HEIGHT = 1080  # Pixels

# Framerate
FPS = 60  # Frames per second

# Colors (RGB)
BACKGROUND = (5, 5, 5)

# Window Title
TITLE = "Spark Field"

# Logger name shared by every module
LOGGER_NAME = "spark_field"

# Spawn palette. New sparks pick one of these ember tones at random.
SPARK_PALETTE = [
    (232, 93, 4),     # Ember orange
    (244, 140, 6),    # Amber
    (250, 163, 7),    # Marigold
    (255, 214, 10),   # Gold
    (220, 47, 2),     # Flame
    (255, 244, 214),  # Warm white
]

# Fade-in duration for newly spawned sparks.
FADE_IN_MS = 500.0  # Milliseconds

# Fraction of lifetime over which a spark fades out.
FADE_OUT_FRACTION = 0.25

# Color mixing
GAMMA = 2.2
MIX_DARKENING = 0.15  # Peak darkening at t=0.5 when blending pigments.
MAX_COLOR_STEP = 0.2  # Largest receiver color step per frame.
GIVER_TINT_RATIO = 0.25  # Giver is tinted by this fraction of the receiver's step.
FLOW_COLOR_MIX = 0.3  # Flow particles are this far from the giver toward the receiver.

# Drift oscillator angular speeds (radians per millisecond)
DRIFT_FREQ_X = 0.0007
DRIFT_FREQ_Y = 0.0009

# Flow particle size in pixels at spawn (shrinks toward the receiver)
FLOW_PARTICLE_SIZE = 1.8

# Visual Effects
TRAIL_EFFECT_COLOR = (5, 5, 5, 60)  # RGBA. Alpha controls trail length (lower = longer).

# Bloom effect settings
BLOOM_RADIUS = 12  # Downscale factor for the glow pass. Larger is more diffuse.
BLOOM_INTENSITY = 90  # The brightness of the glow (0-255).

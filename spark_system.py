# spark_system.py

import enum
import logging
from collections import namedtuple

import numpy as np

import constants
from color_mixing import mix_colors, proximity_weight
from connection import ConnectionLedger, pair_key
from flow_particle import FlowParticle
from polarity_network import RandomPolarityNetwork
from spark import Spark
from spark_config import SparkConfig, HostCapabilities
from spatial_grid import SpatialIndex

logger = logging.getLogger(constants.LOGGER_NAME)

# --- Read-only views handed to the renderer each frame ---
SparkView = namedtuple('SparkView', ['id', 'x', 'y', 'radius', 'alpha', 'color', 'ring_alpha'])
ConnectionView = namedtuple('ConnectionView', ['key', 'x1', 'y1', 'x2', 'y2', 'color1', 'color2', 'strength', 'fade'])
FlowView = namedtuple('FlowView', ['giver_id', 'receiver_id', 'x', 'y', 'color', 'alpha', 'size'])
WorldSnapshot = namedtuple('WorldSnapshot', ['sparks', 'connections', 'flows', 'width', 'height', 'pixel_ratio'])


class EngineState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    RUNNING = "running"


def _rgb(color) -> tuple:
    return tuple(int(round(c)) for c in color)


class SparkSystem:
    """
    Owns every spark, connection and flow particle, and advances them once
    per rendered frame.

    Data Contract:
    - Inputs:
        - config (SparkConfig): Immutable simulation parameters.
        - rng (np.random.Generator): Source of all randomness.
        - bounds (tuple): The (width, height) of the viewport in pixels.
        - capabilities (HostCapabilities): What the host reports about itself.
        - pixel_ratio (float): Device pixel ratio, clamped to config.max_dpr.
    - Outputs: snapshot() -> WorldSnapshot for the renderer.
    - Side Effects: Mutates its own sparks, connections and flows only.
    - Invariants:
        - Spark ids come from this instance's counter and are never reused.
        - No connection or flow particle outlives either of its sparks.
        - Per-frame work is bounded by max_frame_dt and max_interactions_per_frame.
    """
    def __init__(self, config: SparkConfig, rng: np.random.Generator, bounds: tuple,
                 capabilities: HostCapabilities = None, pixel_ratio: float = 1.0):
        self.config = config
        self.rng = rng
        self.capabilities = capabilities or HostCapabilities()
        # Wrap and spawn features divide by the bounds.
        self.width, self.height = max(1.0, float(bounds[0])), max(1.0, float(bounds[1]))
        self.pixel_ratio = min(pixel_ratio, config.max_dpr)

        self.polarity_network = RandomPolarityNetwork(rng)
        self.spatial_index = SpatialIndex(config.interaction_radius, self.width, self.height)
        self.connections = ConnectionLedger()
        self.sparks = []
        self.flows = []

        self.state = EngineState.UNINITIALIZED
        self.frame = 0
        self._next_id = 0
        self._last_time = None
        self._spawn_budget = 0.0
        # (spark index, neighbor offset) where a capped interaction walk resumes
        self._cursor = (0, 0)

        # --- Per-frame bookkeeping for logging ---
        self.interactions_last_frame = 0
        self.energy_transferred_last_frame = 0.0
        self.culled_last_frame = 0

        self.population_target = self.compute_population_target()

        logger.info(
            f"SparkSystem created for a {self.width:.0f}x{self.height:.0f} viewport "
            f"(target population {self.population_target}, low power: {self.capabilities.is_low_power_mode})."
        )
        logger.info(
            f"Spatial grid initialized with cell size {config.interaction_radius} "
            f"({self.spatial_index.grid_width}x{self.spatial_index.grid_height} cells)."
        )

    # --- Population ---

    def compute_population_target(self) -> int:
        """
        Scales the base count by viewport area relative to the reference
        resolution, then clamps to [population_min, population_max].
        """
        cfg = self.config
        base = cfg.spark_count_mobile if self.capabilities.is_low_power_mode else cfg.spark_count_desktop
        area_ratio = (self.width * self.height) / (cfg.reference_width * cfg.reference_height)
        target = int(round(base * area_ratio * self.capabilities.population_density_hint))
        return int(np.clip(target, cfg.population_min, cfg.population_max))

    def next_id(self) -> int:
        spark_id = self._next_id
        self._next_id += 1
        return spark_id

    def spawn(self, now: float, position=None, age_offset: float = 0.0) -> Spark:
        """
        Creates one spark. Position defaults to a random point inside the
        padded viewport; age_offset back-dates the birth (used when seeding).
        """
        cfg = self.config
        rng = self.rng

        if position is None:
            pad = cfg.spawn_padding
            if self.width <= 2 * pad or self.height <= 2 * pad:
                pad = 0.0
            position = (rng.uniform(pad, self.width - pad), rng.uniform(pad, self.height - pad))
        x, y = float(position[0]), float(position[1])

        seed = float(rng.random())
        angle = rng.uniform(0.0, 2.0 * np.pi)
        speed = rng.uniform(0.0, cfg.max_speed * 0.3)
        features = RandomPolarityNetwork.spawn_features(x, y, self.width, self.height, seed)
        palette = constants.SPARK_PALETTE

        spark = Spark(
            spark_id=self.next_id(),
            position=np.array([x, y]),
            velocity=np.array([np.cos(angle) * speed, np.sin(angle) * speed]),
            base_radius=rng.uniform(cfg.base_radius_min, cfg.base_radius_max),
            energy=rng.uniform(0.55, 1.0),
            color=palette[rng.integers(len(palette))],
            polarity=self.polarity_network(features),
            seed=seed,
            birth=now - age_offset,
            lifetime=rng.uniform(cfg.lifetime_min, cfg.lifetime_max),
        )
        spark.wrap(self.width, self.height)
        spark.age = age_offset
        spark.fade = spark.compute_fade()
        self.sparks.append(spark)
        return spark

    def seed(self, now: float):
        """Pre-spawns the initial population with staggered ages."""
        count = int(round(self.population_target * self.config.initial_fill))
        for _ in range(count):
            age_offset = self.rng.uniform(0.0, self.config.lifetime_min * 0.5)
            self.spawn(now, age_offset=age_offset)
        self._last_time = now
        self.state = EngineState.SEEDED
        logger.info(f"Seeded {count} sparks.")

    # --- Frame update ---

    def update(self, now: float):
        """
        Runs one frame at timestamp now (milliseconds, monotonic).
        """
        if self.state is EngineState.UNINITIALIZED:
            self.seed(now)

        if self._last_time is None:
            dt = 0.0
        else:
            # Time past the clamp is dropped, never replayed.
            dt = min(max((now - self._last_time) / 1000.0, 0.0), self.config.max_frame_dt)
        self._last_time = now

        self._spawn(now, dt)
        self._advance_sparks(now, dt)
        self.spatial_index.rebuild(self.sparks)
        self._resolve_interactions(dt)
        self._advance_flows(dt)

        self.frame += 1
        self.state = EngineState.RUNNING
        return dt

    def _spawn(self, now: float, dt: float):
        self._spawn_budget += self.config.spawn_rate_per_sec * dt
        while self._spawn_budget >= 1.0:
            self._spawn_budget -= 1.0
            if len(self.sparks) < self.population_target:
                self.spawn(now)

    def _advance_sparks(self, now: float, dt: float):
        survivors = []
        dead_ids = set()
        for spark in self.sparks:
            if spark.advance(now, dt, self.width, self.height, self.config):
                survivors.append(spark)
            else:
                dead_ids.add(spark.id)
        self.sparks = survivors
        self.culled_last_frame = len(dead_ids)

        if dead_ids:
            self.connections.purge(dead_ids)
            self.flows = [flow for flow in self.flows if not flow.references(dead_ids)]
            logger.debug(f"Culled {len(dead_ids)} expired spark(s). Population: {len(self.sparks)}.")

    def _resolve_interactions(self, dt: float):
        """
        Walks every spark's grid neighborhood, resolving each unordered pair
        at most once. Only pairs inside the interaction radius count toward
        max_interactions_per_frame. When the cap cuts a frame short, the walk
        resumes next frame from the spark and neighbor where it stopped, so
        truncated pairs get their turn. Connections not refreshed this frame
        fade out.
        """
        cfg = self.config
        radius = cfg.interaction_radius
        budget = cfg.max_interactions_per_frame
        processed = set()
        active = set()
        interactions = 0
        self.energy_transferred_last_frame = 0.0

        count = len(self.sparks)
        start, offset = self._cursor
        if start >= count:
            start, offset = 0, 0
        next_cursor = (0, 0)

        for step in range(count):
            index = (start + step) % count
            spark = self.sparks[index]
            neighbors = self.spatial_index.neighbors_of(spark)
            skip = offset if step == 0 and offset < len(neighbors) else 0
            stopped_at = None

            for position, other in enumerate(neighbors[skip:] + neighbors[:skip]):
                if interactions >= budget:
                    stopped_at = position
                    break
                key = pair_key(spark, other)
                if key in processed:
                    continue
                processed.add(key)

                distance = spark.distance_to(other)
                if distance <= 0.0 or distance >= radius:
                    continue
                interactions += 1

                connection = self.connections.get_or_create(spark, other)
                connection.approach(proximity_weight(distance, radius), dt, cfg.connection_rate_per_sec)
                active.add(key)
                self.energy_transferred_last_frame += self.exchange(spark, other, connection.strength, dt)

            if stopped_at is not None:
                if stopped_at < len(neighbors) - skip:
                    next_cursor = (index, skip + stopped_at)
                else:
                    # Already covered the wrapped-around head last frame.
                    next_cursor = ((index + 1) % count, 0)
                break

        self._cursor = next_cursor
        self.interactions_last_frame = interactions
        self.connections.fade_inactive(active, dt, cfg.connection_fade_per_sec)

    @staticmethod
    def roles(a: Spark, b: Spark):
        """(giver, receiver) by strictly greater polarity, or None on a tie."""
        if a.polarity > b.polarity:
            return a, b
        if b.polarity > a.polarity:
            return b, a
        return None

    def exchange(self, a: Spark, b: Spark, strength: float, dt: float) -> float:
        """
        Moves energy and color from the higher-polarity spark to the other.
        Returns the amount of energy moved.
        """
        cfg = self.config
        roles = self.roles(a, b)
        if roles is None or strength <= cfg.activation_threshold:
            return 0.0
        giver, receiver = roles

        fraction = min(1.0, max(0.0, strength * cfg.transfer_rate_per_sec * dt))
        amount = fraction * max(0.0, giver.energy - cfg.energy_floor)
        amount = min(amount, max(0.0, 1.0 - receiver.energy))
        giver.energy -= amount
        receiver.energy += amount

        giver.ring_alpha = max(giver.ring_alpha, strength * 0.5)

        step = min(constants.MAX_COLOR_STEP, strength * strength * cfg.color_rate_per_sec * dt)
        receiver_before = receiver.color
        receiver.color = mix_colors(receiver.color, giver.color, step)
        giver.color = mix_colors(giver.color, receiver_before, step * constants.GIVER_TINT_RATIO)

        if (strength > cfg.flow_visibility_threshold
                and len(self.flows) < cfg.max_flow_particles
                and self.rng.random() < strength * cfg.flow_spawn_rate * dt * 60.0):
            flow_color = mix_colors(giver.color, receiver.color, constants.FLOW_COLOR_MIX)
            self.flows.append(FlowParticle(giver, receiver, flow_color))

        return amount

    def _advance_flows(self, dt: float):
        speed = self.config.flow_particle_speed
        self.flows = [flow for flow in self.flows if flow.update(dt, speed)]

    # --- Host events ---

    def resize(self, width: float, height: float, pixel_ratio: float = None):
        """
        Applies a new viewport size between frames. Live sparks keep their
        identities; positions are re-wrapped into the new bounds.
        """
        if width < 1 or height < 1:
            # A minimised window reports 0x0; keep the last usable viewport.
            logger.debug(f"Ignoring degenerate viewport size {width}x{height}.")
            return
        self.width, self.height = float(width), float(height)
        if pixel_ratio is not None:
            self.pixel_ratio = min(pixel_ratio, self.config.max_dpr)
        self.spatial_index.resize(self.width, self.height)
        for spark in self.sparks:
            spark.wrap(self.width, self.height)

        old_target = self.population_target
        self.population_target = self.compute_population_target()
        logger.info(
            f"Viewport resized to {self.width:.0f}x{self.height:.0f} (dpr {self.pixel_ratio}). "
            f"Population target {old_target} -> {self.population_target}."
        )

    # --- Output ---

    def snapshot(self) -> WorldSnapshot:
        radius = self.config.interaction_radius
        sparks = [
            SparkView(s.id, s.x, s.y, s.visual_radius, s.alpha, _rgb(s.color), s.ring_alpha)
            for s in self.sparks
        ]
        connections = []
        for connection in self.connections:
            a, b = connection.a, connection.b
            fade = max(0.0, 1.0 - a.distance_to(b) / radius)
            connections.append(ConnectionView(
                connection.key, a.x, a.y, b.x, b.y, _rgb(a.color), _rgb(b.color), connection.strength, fade
            ))
        flows = []
        for flow in self.flows:
            x, y = flow.position
            flows.append(FlowView(flow.giver.id, flow.receiver.id, x, y, _rgb(flow.color), flow.alpha, flow.size))
        return WorldSnapshot(sparks, connections, flows, self.width, self.height, self.pixel_ratio)

    def get_total_energy(self) -> float:
        return float(sum(spark.energy for spark in self.sparks))

    def stats(self) -> dict:
        return {
            'frame': self.frame,
            'population': len(self.sparks),
            'target': self.population_target,
            'connections': len(self.connections),
            'flows': len(self.flows),
            'interactions': self.interactions_last_frame,
            'total_energy': self.get_total_energy(),
            'energy_transferred': self.energy_transferred_last_frame,
        }

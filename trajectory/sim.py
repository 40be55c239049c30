"""Synthetic throw trajectories for tests."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from contracts import TimedPoint


@dataclass(frozen=True)
class ThrowSimConfig:
    center: Tuple[float, float] = (320.0, 400.0)
    swing_radius_px: float = 60.0
    samples_per_turn: int = 24
    turns: int = 3
    launch_speed_m_s: float = 25.0
    launch_angle_deg: float = 40.0
    fps: float = 60.0
    frame_step: int = 1
    pixels_per_meter: float = 60.0
    rest_points: int = 8
    noise_px: float = 0.0
    seed: int = 7


@dataclass(frozen=True)
class SyntheticThrow:
    pixels: List[Tuple[float, float]]
    release_index: int
    landing_index: int
    config: ThrowSimConfig


def simulate_throw(config: ThrowSimConfig) -> SyntheticThrow:
    """Constant-rate swing, drag-free flight, then the implement at rest.

    Positions are in screen pixels with y growing downward. The flight lands
    at the release height so the range equation holds for it.
    """
    rng = np.random.default_rng(config.seed)
    cx, cy = config.center
    dt = config.frame_step / config.fps
    pixels: List[Tuple[float, float]] = []

    swing_samples = config.samples_per_turn * config.turns
    for i in range(swing_samples + 1):
        theta = 2.0 * math.pi * i / config.samples_per_turn
        pixels.append((cx + config.swing_radius_px * math.cos(theta), cy + config.swing_radius_px * math.sin(theta)))
    release_index = len(pixels) - 1

    speed_px = config.launch_speed_m_s * config.pixels_per_meter * dt
    angle = math.radians(config.launch_angle_deg)
    gravity_px = 9.81 * config.pixels_per_meter * dt * dt
    x, y = pixels[-1]
    ground_y = y
    vx = speed_px * math.cos(angle)
    vy = -speed_px * math.sin(angle)
    while True:
        prev_x, prev_y = x, y
        x += vx
        y += vy
        vy += gravity_px
        if y >= ground_y:
            frac = (ground_y - prev_y) / (y - prev_y)
            pixels.append((prev_x + frac * (x - prev_x), ground_y))
            break
        pixels.append((x, y))
    landing_index = len(pixels) - 1

    pixels.extend([pixels[-1]] * config.rest_points)

    if config.noise_px > 0:
        pixels = [
            (px + float(rng.normal(0.0, config.noise_px)), py + float(rng.normal(0.0, config.noise_px)))
            for px, py in pixels
        ]
    return SyntheticThrow(pixels=pixels, release_index=release_index, landing_index=landing_index, config=config)


@dataclass(frozen=True)
class WindowSimConfig:
    vx: float = 20.0
    vy: float = 15.0
    x0: float = 0.0
    y0: float = 1.8
    dt_s: float = 1.0 / 60.0
    count: int = 8
    noise_m: float = 0.0
    outlier_indices: Tuple[int, ...] = ()
    outlier_offset_m: float = 0.6
    seed: int = 7


def simulate_velocity_window(config: WindowSimConfig) -> List[TimedPoint]:
    """Constant-velocity samples in meters with optional noise and displaced outliers."""
    rng = np.random.default_rng(config.seed)
    points: List[TimedPoint] = []
    for i in range(config.count):
        t = i * config.dt_s
        x = config.x0 + config.vx * t
        y = config.y0 + config.vy * t
        if config.noise_m > 0:
            x += float(rng.normal(0.0, config.noise_m))
            y += float(rng.normal(0.0, config.noise_m))
        if i in config.outlier_indices:
            x += config.outlier_offset_m
            y -= config.outlier_offset_m
        points.append(TimedPoint(x=x, y=y, t=t))
    return points

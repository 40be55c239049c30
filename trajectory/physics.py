"""Projectile simulation with quadratic aerodynamic drag."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from scipy.optimize import minimize_scalar

from contracts import IMPLEMENTS, ImplementSpec, ImplementType, TimedPoint
from log_config.logger import get_logger
from trajectory.contracts import (
    GRAVITY_M_S2,
    SimulationParams,
    SimulationResult,
    TwoPointResult,
)

logger = get_logger(__name__)


def cross_section_area_m2(diameter_mm: float) -> float:
    radius_m = diameter_mm / 2000.0
    return math.pi * radius_m * radius_m


class DragTrajectorySimulator:
    """Semi-implicit Euler integration of 2D flight under gravity and drag.

    Each step updates velocity from the current acceleration, then advances
    position with the updated velocity. The run stops at the ground or at the
    flight time cap, whichever comes first; hitting the cap is reported through
    the clamped flag.
    """

    def __init__(self, params: Optional[SimulationParams] = None) -> None:
        self._params = params or SimulationParams()

    @property
    def params(self) -> SimulationParams:
        return self._params

    def simulate(
        self,
        vx0: float,
        vy0: float,
        release_height_m: float,
        mass_kg: float,
        diameter_mm: float,
    ) -> SimulationResult:
        if mass_kg <= 0:
            raise ValueError(f"mass_kg must be positive, got {mass_kg}")
        if diameter_mm < 0:
            raise ValueError(f"diameter_mm must be non-negative, got {diameter_mm}")

        p = self._params
        h = p.time_step_s
        # Drag acceleration per unit speed squared.
        k = 0.5 * p.air_density_kg_m3 * p.drag_coefficient * cross_section_area_m2(diameter_mm) / mass_kg

        x = 0.0
        y = max(release_height_m, 0.0)
        vx = vx0
        vy = vy0
        t = 0.0
        max_height = y
        steps = 0
        trajectory: List[TimedPoint] = [TimedPoint(x=x, y=y, t=t)]

        while True:
            speed = math.hypot(vx, vy)
            ax = -k * speed * vx
            ay = -p.gravity_m_s2 - k * speed * vy

            prev_x, prev_y, prev_t = x, y, t
            vx += ax * h
            vy += ay * h
            x += vx * h
            y += vy * h
            t += h
            steps += 1

            if y > max_height:
                max_height = y
            if y <= 0.0 or t >= p.max_flight_time_s:
                break
            if steps % p.trace_interval_steps == 0:
                trajectory.append(TimedPoint(x=x, y=y, t=t))

        clamped = y > 0.0
        if clamped:
            logger.warning(
                f"Simulation hit the {p.max_flight_time_s:.1f}s cap at height {y:.2f}m without landing"
            )
            trajectory.append(TimedPoint(x=x, y=y, t=t))
        else:
            # Interpolate the ground crossing inside the last step.
            frac = prev_y / (prev_y - y) if prev_y != y else 1.0
            x = prev_x + frac * (x - prev_x)
            t = prev_t + frac * (t - prev_t)
            landing = TimedPoint(x=x, y=0.0, t=t)
            if trajectory[-1].t == t:
                trajectory[-1] = landing
            else:
                trajectory.append(landing)

        result = SimulationResult(
            distance_m=x,
            flight_time_s=t,
            max_height_m=max_height,
            landing_velocity_m_s=math.hypot(vx, vy),
            trajectory=trajectory,
            clamped=clamped,
        )
        logger.debug(
            f"Simulated flight: v0=({vx0:.2f},{vy0:.2f}) h={release_height_m:.2f} "
            f"-> {result.distance_m:.2f}m in {result.flight_time_s:.2f}s"
        )
        return result

    def simulate_launch(
        self,
        speed: float,
        angle_deg: float,
        release_height_m: float,
        implement: ImplementSpec,
    ) -> SimulationResult:
        angle = math.radians(angle_deg)
        return self.simulate(
            vx0=speed * math.cos(angle),
            vy0=speed * math.sin(angle),
            release_height_m=release_height_m,
            mass_kg=implement.mass_kg,
            diameter_mm=implement.diameter_mm,
        )

    def simulate_two_points(
        self,
        p1: TimedPoint,
        p2: TimedPoint,
        pixels_per_meter: float,
        release_height_m: float,
        mass_kg: float = IMPLEMENTS[ImplementType.MEN].mass_kg,
        diameter_mm: float = IMPLEMENTS[ImplementType.MEN].diameter_mm,
    ) -> TwoPointResult:
        """Launch from the finite difference of two timed pixel positions.

        Screen y grows downward, so the vertical component is inverted. Equal
        timestamps give an all-zero result.
        """
        dt = p2.t - p1.t
        if dt == 0:
            return TwoPointResult(velocity=0.0, angle=0.0, distance=0.0)

        vx = (p2.x - p1.x) / pixels_per_meter / dt
        vy = -(p2.y - p1.y) / pixels_per_meter / dt
        simulation = self.simulate(vx, vy, release_height_m, mass_kg, diameter_mm)
        return TwoPointResult(
            velocity=math.hypot(vx, vy),
            angle=math.degrees(math.atan2(vy, vx)),
            distance=simulation.distance_m,
            simulation=simulation,
        )


def vacuum_range(speed: float, angle_deg: float, gravity: float = GRAVITY_M_S2) -> float:
    """Drag-free range from ground level: v² sin(2θ) / g."""
    return speed * speed * math.sin(2.0 * math.radians(angle_deg)) / gravity


@dataclass(frozen=True)
class OptimalRelease:
    angle_deg: float
    distance_m: float


def find_optimal_release_angle(
    speed: float,
    release_height_m: float,
    implement: ImplementSpec,
    simulator: Optional[DragTrajectorySimulator] = None,
    bounds_deg: tuple = (20.0, 60.0),
) -> OptimalRelease:
    """Release angle that maximizes simulated distance for a given speed."""
    sim = simulator or DragTrajectorySimulator()
    result = minimize_scalar(
        lambda angle: -sim.simulate_launch(speed, angle, release_height_m, implement).distance_m,
        bounds=bounds_deg,
        method="bounded",
        options={"xatol": 0.05},
    )
    angle = float(result.x)
    distance = sim.simulate_launch(speed, angle, release_height_m, implement).distance_m
    logger.debug(f"Optimal release for {speed:.1f} m/s: {angle:.2f} deg -> {distance:.2f}m")
    return OptimalRelease(angle_deg=angle, distance_m=distance)

"""
===============================================================================
GRAVMATH - Headless Frame Runner
===============================================================================
Drives a :class:`Simulator` the way an interactive host would, minus the
rendering.

Each frame:
    1. If the satellite is still safe, run SPEED_FACTOR * warp steps.
       Once the satellite's closest approach to the primary has dropped
       below MIN_SAFE_HEIGHT it is considered burned and stepping stops
       for good.
    2. Read the diagnostics (min distance, min altitude, energy drift) and
       the body positions, and append them as one telemetry record.

Telemetry is exposed as a pandas DataFrame indexed by simulated time and can
be written to CSV.
===============================================================================
"""

import logging
from typing import Any, Dict, List

import pandas as pd

from gravmath.core.constants import SPEED_FACTOR, MIN_SAFE_HEIGHT
from gravmath.core.errors import ParameterOutOfRange
from gravmath.dynamics.orbital_mechanics import cartesian_to_keplerian, orbital_period, vis_viva
from gravmath.simulation.simulator import Simulator

logger = logging.getLogger(__name__)

STATUS_ORBITING = "Orbiting"
STATUS_BURNED = "Burned!"

MIN_WARP = 0.0
MAX_WARP = 25.0


class SimulationRunner:
    """
    Frame loop with time warp, safety status and telemetry recording.

    Parameters
    ----------
    simulator : Simulator
        Fully built simulator (see :func:`build_simulation`).
    warp : float
        Time warp in [0, 25].  Zero pauses the integration.
    min_safe_height : float
        Closest allowed satellite-to-primary distance (m).

    Attributes
    ----------
    frame : int
        Number of frames rendered so far.
    telemetry : list of dict
        Raw per-frame records, converted to a DataFrame on request.
    """

    def __init__(
        self,
        simulator: Simulator,
        warp: float = 20.0,
        min_safe_height: float = MIN_SAFE_HEIGHT,
    ) -> None:
        self.simulator = simulator
        self.min_safe_height = float(min_safe_height)
        self._warp = 0.0
        self.set_warp(warp)

        self.frame = 0
        self.telemetry: List[Dict[str, Any]] = []
        self._was_safe = True

    # =========================================================================
    # WARP & STATUS
    # =========================================================================

    @property
    def warp(self) -> float:
        return self._warp

    def set_warp(self, warp: float) -> None:
        """Change the time warp.  Raises ParameterOutOfRange outside [0, 25]."""
        if not (MIN_WARP <= warp <= MAX_WARP):
            raise ParameterOutOfRange("warp", warp, MIN_WARP, MAX_WARP)
        self._warp = float(warp)

    @property
    def steps_per_frame(self) -> int:
        return int(SPEED_FACTOR * self._warp)

    def is_safe(self) -> bool:
        return self.simulator.get_min_altitude() >= self.min_safe_height

    @property
    def status(self) -> str:
        return STATUS_ORBITING if self.is_safe() else STATUS_BURNED

    # =========================================================================
    # FRAME LOOP
    # =========================================================================

    def render_frame(self) -> Dict[str, Any]:
        """
        Advance one frame and record its telemetry.

        Returns
        -------
        dict
            The telemetry record appended for this frame.
        """
        steps = 0
        if self.is_safe():
            for _ in range(self.steps_per_frame):
                self.simulator.step()
                steps += 1

        if self._was_safe and not self.is_safe():
            logger.warning(
                "Satellite burned: min altitude %.0f m below safe height %.0f m at t=%.1f s",
                self.simulator.get_min_altitude(), self.min_safe_height,
                self.simulator.elapsed_time,
            )
            self._was_safe = False

        self.frame += 1
        return self._log_telemetry(steps)

    def run(self, frames: int) -> pd.DataFrame:
        """
        Render *frames* frames.

        Returns
        -------
        pd.DataFrame
            Complete telemetry record for the run.
        """
        if frames < 0:
            raise ValueError(f"Frame count must be non-negative (got {frames}).")

        logger.info(
            "Run started.  frames=%d  warp=%g  steps/frame=%d",
            frames, self._warp, self.steps_per_frame,
        )
        for _ in range(frames):
            self.render_frame()
            if self.frame % 100 == 0:
                logger.info(
                    "Frame %d  t=%.1f s  status=%s",
                    self.frame, self.simulator.elapsed_time, self.status,
                )

        logger.info(
            "Run complete.  %d frames, %d steps, sim time %.1f s, status %s",
            self.frame, self.simulator.steps_taken,
            self.simulator.elapsed_time, self.status,
        )
        return self.get_telemetry()

    # =========================================================================
    # TELEMETRY
    # =========================================================================

    def _log_telemetry(self, steps: int) -> Dict[str, Any]:
        sim = self.simulator
        sat = sim.secondary_a.position
        comet = sim.secondary_b.position

        record = {
            'time': sim.elapsed_time,
            'frame': self.frame,
            'steps': steps,
            'min_distance': sim.get_min_distance(),
            'min_altitude': sim.get_min_altitude(),
            'energy_drift': sim.get_energy_drift(),
            'status': self.status,
            'sat_x': sat.x,
            'sat_y': sat.y,
            'sat_z': sat.z,
            'comet_x': comet.x,
            'comet_y': comet.y,
            'comet_z': comet.z,
        }
        self.telemetry.append(record)
        return record

    def get_telemetry(self) -> pd.DataFrame:
        """
        Convert the telemetry record list to a pandas DataFrame.

        Returns
        -------
        pd.DataFrame
            Indexed by simulated time.  Columns: frame, steps, min_distance,
            min_altitude, energy_drift, status, sat_x/y/z, comet_x/y/z.
        """
        if not self.telemetry:
            logger.warning("No telemetry recorded.")
            return pd.DataFrame()

        df = pd.DataFrame(self.telemetry)
        df.set_index('time', inplace=True)
        return df

    def save_telemetry(self, filepath: str) -> None:
        """Save the telemetry DataFrame to a CSV file."""
        df = self.get_telemetry()
        df.to_csv(filepath)
        logger.info("Telemetry saved to %s  (%d records)", filepath, len(df))

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def get_summary(self) -> Dict[str, Any]:
        """
        Compile a summary of the run so far.

        Returns
        -------
        dict
            frames, steps, sim_time, status, min_distance, min_altitude,
            energy_drift, and the satellite's osculating elements
            (sat_a, sat_e, sat_i, sat_mean_anomaly) with its periapsis
            speed (sat_periapsis_speed) when they are defined.  sat_period
            is added for a bound orbit.
        """
        sim = self.simulator
        summary: Dict[str, Any] = {
            'frames': self.frame,
            'steps': sim.steps_taken,
            'sim_time': sim.elapsed_time,
            'status': self.status,
            'min_distance': sim.get_min_distance(),
            'min_altitude': sim.get_min_altitude(),
            'energy_drift': sim.get_energy_drift(),
        }

        elements = self._satellite_elements()
        if elements is not None:
            summary['sat_a'] = elements.a
            summary['sat_e'] = elements.e
            summary['sat_i'] = elements.i
            summary['sat_mean_anomaly'] = elements.mean_anomaly
            mu = sim.primary.mu
            summary['sat_periapsis_speed'] = vis_viva(elements.a * (1.0 - elements.e), elements.a, mu)
            if not elements.is_hyperbolic:
                summary['sat_period'] = orbital_period(elements.a, mu)

        logger.info("Run Summary:")
        for key, value in summary.items():
            if isinstance(value, float):
                logger.info("  %-20s: %.6g", key, value)
            else:
                logger.info("  %-20s: %s", key, value)

        return summary

    def _satellite_elements(self):
        sim = self.simulator
        r = sim.secondary_a.position - sim.primary.position
        v = sim.secondary_a.velocity - sim.primary.velocity
        try:
            return cartesian_to_keplerian(r, v, sim.primary.mu)
        except ValueError as exc:
            logger.warning("Satellite elements undefined: %s", exc)
            return None

    def __repr__(self) -> str:
        return (
            f"SimulationRunner(frame={self.frame}, warp={self._warp:g}, "
            f"status={self.status}, records={len(self.telemetry)})"
        )

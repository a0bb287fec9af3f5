"""
===============================================================================
GRAVMATH - Scenario Definition
===============================================================================
Builds the Jupiter / satellite / comet scenario from user-facing parameters.

Parameters are expressed in display units (semi-major axis in km, angles in
degrees, comet mass in metric tons) and checked against the ranges the
parameter editor allows.  :func:`build_simulation` converts them to SI,
solves both orbits, places the bodies and hands them to a new Simulator.

Default scenario
----------------
    comet     : hyperbolic flyby, a = -1 800 000 km, e = 2, M0 = -125 deg,
                mass 5e18 t
    satellite : elliptic orbit, a = 1 200 000 km, e = 0.93, pa = 135 deg,
                M0 = -13.38 deg
    warp      : 20  (20 000 integration steps per frame)
===============================================================================
"""

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from gravmath.core.constants import (
    JUPITER_MASS,
    JUPITER_RADIUS,
    SATELLITE_MASS,
    SATELLITE_RADIUS,
    COMET_RADIUS,
    SIMULATION_DT,
)
from gravmath.core.errors import ConfigurationError, ParameterOutOfRange
from gravmath.dynamics.body import Body
from gravmath.dynamics.keplerian_orbit import KeplerianOrbit
from gravmath.simulation.simulator import Simulator

logger = logging.getLogger(__name__)


# =============================================================================
# PARAMETER RANGES (as offered by the parameter editor)
# =============================================================================
MIN_DEG = 0.0
MAX_DEG = 359.9

ELLIPTIC_E_RANGE = (0.0, 0.99)
HYPERBOLIC_E_RANGE = (1.01, 10.0)
MEAN_ANOMALY_RANGE = (-2.0 * MAX_DEG, 2.0 * MAX_DEG)

COMET_A_RANGE_KM = (-1.0e10, -50000.0)
SATELLITE_A_RANGE_KM = (50000.0, 1.0e10)
COMET_MASS_RANGE_TONS = (1.0e7, 1.0e31)
WARP_RANGE = (0.0, 25.0)


def check_range(name: str, value: float, bounds: Tuple[float, float]) -> float:
    """
    Return *value* if it lies in the closed interval *bounds*.

    Raises
    ------
    ParameterOutOfRange
        Otherwise (NaN included).
    """
    lower, upper = bounds
    if not (lower <= value <= upper):
        raise ParameterOutOfRange(name, value, lower, upper)
    return value


def as_float(key: str, value: Any) -> float:
    """Read a configuration value as a float, or raise ConfigurationError."""
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(key, f"expected a number, got {value!r}") from exc


# =============================================================================
# BODY FACTORY
# =============================================================================

def create_jupiter() -> Body:
    return Body(JUPITER_MASS, JUPITER_RADIUS, name="jupiter")


def create_satellite() -> Body:
    return Body(SATELLITE_MASS, SATELLITE_RADIUS, name="satellite")


def create_comet(mass: float) -> Body:
    """Comet of the given mass (kg)."""
    return Body(mass, COMET_RADIUS, name="comet")


# =============================================================================
# ELEMENT SETS
# =============================================================================

@dataclass(frozen=True)
class ElementSet:
    """
    Orbital elements in display units.

    Attributes
    ----------
    a_km : float
        Semi-major axis (km).  Negative for hyperbolic orbits.
    e : float
        Eccentricity.
    i_deg : float
        Inclination (deg).
    pa_deg : float
        Argument of perigee (deg).
    raan_deg : float
        Longitude of the ascending node (deg).
    ma_deg : float
        Mean anomaly at start (deg).
    """
    a_km: float
    e: float
    i_deg: float = 0.0
    pa_deg: float = 0.0
    raan_deg: float = 0.0
    ma_deg: float = 0.0

    @classmethod
    def from_dict(cls, values: Dict[str, Any], label: str = "elements") -> 'ElementSet':
        """
        Build an element set from a mapping of field names to numbers.

        Raises
        ------
        ConfigurationError
            If *values* is not a mapping, names an unknown element, lacks
            a_km or e, or holds a non-numeric value.
        """
        if not isinstance(values, dict):
            raise ConfigurationError(label, f"expected a mapping, got {values!r}")
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigurationError(label, f"unknown orbital element keys {sorted(unknown)}")
        missing = {'a_km', 'e'} - set(values)
        if missing:
            raise ConfigurationError(label, f"missing orbital element keys {sorted(missing)}")
        return cls(**{k: as_float(f"{label}.{k}", v) for k, v in values.items()})

    def validate(self, a_range_km: Tuple[float, float], label: str) -> None:
        """Check every element against the editor ranges."""
        check_range(f"{label}.a_km", self.a_km, a_range_km)
        e_range = ELLIPTIC_E_RANGE if self.a_km > 0 else HYPERBOLIC_E_RANGE
        check_range(f"{label}.e", self.e, e_range)
        for name in ("i_deg", "pa_deg", "raan_deg"):
            check_range(f"{label}.{name}", getattr(self, name), (MIN_DEG, MAX_DEG))
        check_range(f"{label}.ma_deg", self.ma_deg, MEAN_ANOMALY_RANGE)

    def to_orbit(self, mu: float) -> KeplerianOrbit:
        """Convert to SI and solve the orbit around a primary of parameter *mu*."""
        return KeplerianOrbit.from_degrees(
            self.a_km * 1000.0, self.e,
            self.i_deg, self.pa_deg, self.raan_deg, self.ma_deg,
            mu,
        )


DEFAULT_COMET_ELEMENTS = ElementSet(a_km=-1800000.0, e=2.0, ma_deg=-125.0)
DEFAULT_SATELLITE_ELEMENTS = ElementSet(a_km=1200000.0, e=0.93, pa_deg=135.0, ma_deg=-13.38)


# =============================================================================
# SCENARIO CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class ScenarioConfig:
    """
    Complete description of a run's initial conditions.

    Attributes
    ----------
    comet_mass_tons : float
        Comet mass (metric tons).
    comet : ElementSet
        Comet orbit (hyperbolic).
    satellite : ElementSet
        Satellite orbit (elliptic).
    warp : float
        Time warp; the runner performs 1000 * warp steps per frame.
    dt : float
        Fixed integration step (s).
    """
    comet_mass_tons: float = 5.0e18
    comet: ElementSet = field(default=DEFAULT_COMET_ELEMENTS)
    satellite: ElementSet = field(default=DEFAULT_SATELLITE_ELEMENTS)
    warp: float = 20.0
    dt: float = SIMULATION_DT

    def validate(self) -> None:
        check_range("comet.mass_tons", self.comet_mass_tons, COMET_MASS_RANGE_TONS)
        self.comet.validate(COMET_A_RANGE_KM, "comet")
        self.satellite.validate(SATELLITE_A_RANGE_KM, "satellite")
        check_range("warp", self.warp, WARP_RANGE)
        if not (0.0 < self.dt < math.inf):
            raise ParameterOutOfRange("dt", self.dt, 0.0, math.inf)

    @property
    def comet_mass_kg(self) -> float:
        return self.comet_mass_tons * 1000.0

    @classmethod
    def from_dict(
        cls, scenario: Optional[Dict[str, Any]], simulation: Optional[Dict[str, Any]] = None
    ) -> 'ScenarioConfig':
        """
        Build a scenario from the ``scenario`` (and optional ``simulation``)
        sections of the YAML configuration.  Missing keys keep their
        defaults.
        """
        scenario = scenario or {}
        simulation = simulation or {}
        default = cls()

        comet_cfg = scenario.get('comet', {}) or {}
        sat_cfg = scenario.get('satellite', {}) or {}

        comet_elements = default.comet
        if 'elements' in comet_cfg:
            comet_elements = ElementSet.from_dict(comet_cfg['elements'], "comet.elements")
        sat_elements = default.satellite
        if 'elements' in sat_cfg:
            sat_elements = ElementSet.from_dict(sat_cfg['elements'], "satellite.elements")

        return cls(
            comet_mass_tons=as_float(
                "comet.mass_tons", comet_cfg.get('mass_tons', default.comet_mass_tons)),
            comet=comet_elements,
            satellite=sat_elements,
            warp=as_float("warp", scenario.get('warp', default.warp)),
            dt=as_float("dt", simulation.get('dt', default.dt)),
        )


def build_simulation(scenario: Optional[ScenarioConfig] = None) -> Simulator:
    """
    Create the bodies, place the comet and satellite on their orbits and
    return a Simulator that owns them.

    Raises
    ------
    GravmathError
        If a parameter is out of range or an orbit cannot be built.
    """
    scenario = scenario or ScenarioConfig()
    scenario.validate()

    jupiter = create_jupiter()
    comet = create_comet(scenario.comet_mass_kg)
    sat = create_satellite()

    comet_orbit = scenario.comet.to_orbit(jupiter.mu)
    sat_orbit = scenario.satellite.to_orbit(jupiter.mu)

    comet.place(comet_orbit.position, comet_orbit.velocity)
    sat.place(sat_orbit.position, sat_orbit.velocity)

    logger.info(
        "Scenario built.  comet: a=%.0f km e=%.3f  satellite: a=%.0f km e=%.3f  warp=%g",
        scenario.comet.a_km, scenario.comet.e,
        scenario.satellite.a_km, scenario.satellite.e, scenario.warp,
    )

    return Simulator(jupiter, sat, comet, dt=scenario.dt)

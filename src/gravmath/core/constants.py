"""
===============================================================================
GRAVMATH - Physical and Simulation Constants
===============================================================================
Central repository for the constants used by the orbit converter and the
three-body simulator.  SI units throughout (meters, seconds, kilograms,
radians) unless a name says otherwise.
===============================================================================
"""

import math


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = math.pi
TWO_PI = 2.0 * math.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# FUNDAMENTAL PHYSICAL CONSTANTS
# =============================================================================
GRAVITATIONAL_CONSTANT = 6.67408e-11   # m^3 / (kg * s^2)

# =============================================================================
# JUPITER PARAMETERS (primary of the default scenario)
# =============================================================================
JUPITER_MASS = 1.8986e27               # kg
JUPITER_RADIUS = 69911000.0            # Mean equatorial radius (m)

# =============================================================================
# DEFAULT BODY PARAMETERS
# =============================================================================
SATELLITE_MASS = 1000.0                # kg
SATELLITE_RADIUS = 3.0                 # m
COMET_RADIUS = 100000.0                # m

# =============================================================================
# SIMULATION PARAMETERS
# =============================================================================
SIMULATION_DT = 0.05                   # Fixed integration step (s)
SPEED_FACTOR = 1000                    # Integration steps per frame per unit of warp
MIN_SAFE_HEIGHT = 72000000.0           # Satellite burns up below this distance (m)

# =============================================================================
# KEPLER SOLVER PARAMETERS
# =============================================================================
# Odell & Gooding S12 starter coefficients
KEPLER_STARTER_A = 3.0 * (PI - 1.0) * (PI - 1.0) / (3.0 * PI + 2.0)
KEPLER_STARTER_B = (6.0 * PI - 1.0) * (6.0 * PI - 1.0) / (6.0 * (3.0 * PI + 2.0))

HYPERBOLIC_MAX_ITERATIONS = 50
HYPERBOLIC_TOLERANCE = 1.0e-12

"""
===============================================================================
GRAVMATH - Orbital Mechanics Core
===============================================================================
Keplerian element conversion and a fixed-step three-body simulator for a
primary (fixed gravitational anchor), an orbiting satellite and a comet on a
flyby trajectory.

Subpackages:
    core        -- Constants, error taxonomy, Vector3 value type
    dynamics    -- Bodies, Kepler-equation solvers, element conversions
    simulation  -- Three-body integrator, scenarios, headless frame runner
===============================================================================
"""

__version__ = "1.0.0"

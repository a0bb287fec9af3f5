"""
===============================================================================
GRAVMATH - Dynamics Module
===============================================================================
Models of the physical bodies and of their Keplerian motion.

Submodules:
    body              -- Point mass with gravitational parameter and integration scratch state
    kepler            -- Elliptic (Odell-Gooding) and hyperbolic (Danby) Kepler solvers
    keplerian_orbit   -- Orbital elements -> Cartesian state converter
    orbital_mechanics -- Cartesian -> elements, specific energy, vis-viva, period
===============================================================================
"""

"""
===============================================================================
GRAVMATH - Core Module
===============================================================================
Foundational definitions shared by every other subpackage.

Submodules:
    constants -- Physical, solver and simulation constants (SI units)
    errors    -- Named exceptions raised by orbit and body construction
    vector    -- Immutable Vector3 with an accurate linear-combination constructor
===============================================================================
"""

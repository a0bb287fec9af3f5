"""
===============================================================================
GRAVMATH - Simulation Module
===============================================================================
Time-stepped integration of the three-body scenario and the headless host
that drives it.

Submodules:
    simulator -- Fixed-step integrator with running diagnostics
    scenario  -- Body factory and scenario configuration in display units
    runner    -- Frame loop with time warp, safety status and telemetry
===============================================================================
"""

"""
Orrery: Hierarchical Orbital Trajectory Engine

A Python package that integrates restricted two-body dynamics for a tree of
bodies with a fixed-step RK4 integrator, caching each body's trajectory by
absolute simulation step just ahead of a real-time clock.
"""

# Configuration
from .config import config, temp_config

# Core classes
from .point import TrajectoryPoint
from .integrator import Integrator, Solution
from .dynamics import (Environment, StepEnvironment, ParentSamplePolicy,
                       VelocityFrame, restricted_two_body,
                       resolve_step_environment, circular_speed,
                       orbital_period)
from .trajectory import Trajectory, Trajectory as Traj, ParentView
from .body import Body, relative_mass
from .scenario import Scenario
from .clock import SimulationClock, ClockState
from .scheduler import TrajectoryScheduler, ExtensionRecord

# Errors
from .errors import (OrreryError, MissingCurrentPoint, MissingParentSample,
                     InvalidStateDimension, ParentCoverageError)

# Predefined scenarios
from .defaults import circular_orbit, sun_planet_moon

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from orrery import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    # Classes
    "TrajectoryPoint",
    "Integrator",
    "Solution",
    "Environment",
    "StepEnvironment",
    "ParentSamplePolicy",
    "VelocityFrame",
    "Trajectory",
    "ParentView",
    "Body",
    "Scenario",
    "SimulationClock",
    "ClockState",
    "TrajectoryScheduler",
    "ExtensionRecord",
    # Abbreviations
    "Traj",
    # Functions
    "restricted_two_body",
    "resolve_step_environment",
    "relative_mass",
    "circular_speed",
    "orbital_period",
    "circular_orbit",
    "sun_planet_moon",
    # Errors
    "OrreryError",
    "MissingCurrentPoint",
    "MissingParentSample",
    "InvalidStateDimension",
    "ParentCoverageError",
]

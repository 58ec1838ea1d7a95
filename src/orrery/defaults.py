"""
Default Scenarios and Constants
===============================

Predefined masses and orbit radii in scaled units (G = 1), plus factory
functions for commonly-used scenarios. Factories build a fresh Scenario on
every call, so callers never share trajectory caches.

Examples
--------
>>> from orrery import circular_orbit, sun_planet_moon, TrajectoryScheduler
>>> scenario = circular_orbit()
>>> scheduler = TrajectoryScheduler(scenario)
>>> scheduler.tick(1 / 60)
"""
from .body import relative_mass
from .dynamics import VelocityFrame, circular_speed
from .scenario import Scenario

"""
Predefined masses and radii (scaled units)
"""
SUN_MASS = 333.0            # central mass of the circular orbit scenario
HEAVY_SUN_MASS = 999.0      # central mass of the hierarchical scenario
PLANET_MASS = 1.0
MOON_MASS = 0.01

PLANET_ORBIT_RADIUS = 20.0
MOON_ORBIT_RADIUS = 1.0


def circular_orbit(radius=PLANET_ORBIT_RADIUS, central_mass=SUN_MASS,
                   body_mass=PLANET_MASS, step_size=None):
    """
    Create a single body on a circular orbit about the central mass.

    The body starts at (radius, 0, 0) moving along +y with the circular
    speed sqrt(mu / radius), mu = relative_mass(central_mass, body_mass).

    Parameters
    ----------
    radius : float, optional
        Orbit radius (default: 20)
    central_mass : float, optional
        Mass of the fixed central body (default: 333)
    body_mass : float, optional
        Mass of the orbiting body (default: 1)
    step_size : float, optional
        Simulated time per step (default: config.TIME_PER_STEP)

    Returns
    -------
    Scenario
        Scenario holding one root body named 'planet'
    """
    mu = relative_mass(central_mass, body_mass)
    v = circular_speed(mu, radius)
    scenario = Scenario(central_mass, step_size=step_size, name='circular')
    scenario.spawn(body_mass, [radius, 0.0, 0.0], [0.0, v, 0.0],
                   relative_mass=mu, name='planet')
    return scenario


def sun_planet_moon(step_size=None, parent_policy=None):
    """
    Create a three-level hierarchy: central sun, one planet, one moon.

    The planet orbits the sun at PLANET_ORBIT_RADIUS. The moon orbits the
    planet's precomputed trajectory at MOON_ORBIT_RADIUS with its velocity
    stored relative to the planet, so it follows the planet around the sun.

    Parameters
    ----------
    step_size : float, optional
        Simulated time per step (default: config.TIME_PER_STEP)
    parent_policy : ParentSamplePolicy or str, optional
        Missing parent sample resolution (default: config value)

    Returns
    -------
    Scenario
        Scenario with bodies 'planet' (index 0) and 'moon' (index 1)
    """
    scenario = Scenario(HEAVY_SUN_MASS, step_size=step_size,
                        parent_policy=parent_policy, name='sun_planet_moon')

    mu_planet = relative_mass(HEAVY_SUN_MASS, PLANET_MASS)
    v_planet = circular_speed(mu_planet, PLANET_ORBIT_RADIUS)
    planet = scenario.spawn(
        PLANET_MASS, [PLANET_ORBIT_RADIUS, 0.0, 0.0], [0.0, v_planet, 0.0],
        relative_mass=mu_planet, name='planet'
    )

    mu_moon = relative_mass(PLANET_MASS, MOON_MASS)
    v_moon = circular_speed(mu_moon, MOON_ORBIT_RADIUS)
    scenario.spawn(
        MOON_MASS,
        [PLANET_ORBIT_RADIUS + MOON_ORBIT_RADIUS, 0.0, 0.0],
        [0.0, v_moon, 0.0],
        parent=planet, relative_mass=mu_moon, name='moon',
        velocity_frame=VelocityFrame.PARENT_RELATIVE,
    )
    return scenario

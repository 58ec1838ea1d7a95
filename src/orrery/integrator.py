'''Development code for an orbital trajectory caching package
Fixed-step Runge-Kutta integrator'''

import numpy as np
from typing import Any, Callable, NamedTuple, Optional
from .errors import InvalidStateDimension

# (state, param, environment) -> derivative of the same width as state
DerivativeFunc = Callable[[np.ndarray, float, Any], np.ndarray]
# (environment, param) -> environment shared by the four stages of one step
StepEnvironmentFunc = Callable[[Any, float], Any]


class Solution(NamedTuple):
    """
    Eagerly computed integration batch.

    Attributes
    ----------
    params : np.ndarray
        Parameter (time) values, shape (N+1,)
    states : np.ndarray
        State vectors, shape (N+1, width); row n belongs to params[n]
    """
    params: np.ndarray
    states: np.ndarray

    def pairs(self):
        """Iterate over (param, state) pairs in integration order."""
        return zip(self.params, self.states)

    def __len__(self):
        return len(self.params)


class Integrator:
    """
    Fixed-step explicit 4-stage Runge-Kutta integrator.

    The derivative function is registered once at construction. Its output
    width is checked against the state width by a single trial evaluation,
    so a mismatch fails here rather than partway through a batch.

    Parameters
    ----------
    derivative : callable
        Pure function ``(state, param, environment) -> derivative``
    state_width : int
        Width of the state vector
    step_size : float
        Fixed parameter increment h (must be positive)
    step_environment : callable, optional
        ``(environment, param) -> environment`` evaluated once at the start
        of every step; the result is passed to all four stages of that
        step. Defaults to passing the environment through unchanged.
    check_environment : optional
        Environment used for the registration check (after being passed
        through step_environment)
    check_state : array-like, optional
        State used for the registration check. Defaults to ones, which
        keeps singular models such as inverse-square gravity finite.

    Raises
    ------
    InvalidStateDimension
        If the derivative output width differs from state_width
    ValueError
        If state_width or step_size is not positive
    """
    # ========== CONSTRUCTION ==========
    def __init__(
        self,
        derivative: DerivativeFunc,
        state_width: int,
        step_size: float,
        step_environment: Optional[StepEnvironmentFunc] = None,
        check_environment: Any = None,
        check_state=None,
    ):
        if state_width < 1:
            raise ValueError(f"State width must be positive, got {state_width}")
        if not step_size > 0:
            raise ValueError(f"Step size must be positive, got {step_size}")

        self._derivative = derivative
        self._width = int(state_width)
        self._h = float(step_size)
        self._step_environment = step_environment

        self._check_dimension(check_state, check_environment)

    def _check_dimension(self, check_state, check_environment):
        """Evaluate the derivative once and compare its width to the state."""
        if check_state is None:
            check_state = np.ones(self._width)
        check_state = np.asarray(check_state, dtype=float)
        if check_state.shape != (self._width,):
            raise InvalidStateDimension(self._width, check_state.shape)

        env = self._stage_environment(check_environment, 0.0)
        out = np.asarray(self._derivative(check_state, 0.0, env))
        if out.shape != (self._width,):
            raise InvalidStateDimension(self._width, out.shape)

    # ========== PROPERTY ACCESS ==========
    @property
    def state_width(self) -> int:
        return self._width

    @property
    def step_size(self) -> float:
        return self._h

    # ========== INTEGRATION ==========
    def _stage_environment(self, environment, param):
        if self._step_environment is None:
            return environment
        return self._step_environment(environment, param)

    def step(self, state: np.ndarray, param: float, environment: Any = None) -> np.ndarray:
        """
        Advance one RK4 step from (state, param).

        k1 = D(Sn, tn)
        k2 = D(Sn + h/2 k1, tn + h/2)
        k3 = D(Sn + h/2 k2, tn + h/2)
        k4 = D(Sn + h k3, tn + h)
        Sn+1 = Sn + h/6 (k1 + 2 k2 + 2 k3 + k4)
        """
        D = self._derivative
        h = self._h
        half = 0.5 * h
        env = self._stage_environment(environment, param)

        k1 = D(state, param, env)
        k2 = D(state + half * k1, param + half, env)
        k3 = D(state + half * k2, param + half, env)
        k4 = D(state + h * k3, param + h, env)

        return state + (h / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)

    def integrate(self, initial_state, t0: float, n_steps: int,
                  environment: Any = None) -> Solution:
        """
        Integrate n_steps fixed steps from (initial_state, t0).

        Parameters
        ----------
        initial_state : array-like
            State S0 of width state_width
        t0 : float
            Initial parameter value
        n_steps : int
            Number of steps N (non-negative)
        environment : optional
            Value passed through to the derivative function

        Returns
        -------
        Solution
            N+1 parameter values and states, starting with (t0, S0).
            Parameters accumulate as tn+1 = tn + h.
        """
        if n_steps < 0:
            raise ValueError(f"Number of steps must be non-negative, got {n_steps}")
        state = np.array(initial_state, dtype=float)
        if state.shape != (self._width,):
            raise InvalidStateDimension(self._width, state.shape)

        params = np.empty(n_steps + 1)
        states = np.empty((n_steps + 1, self._width))
        t = float(t0)
        params[0] = t
        states[0] = state

        for n in range(1, n_steps + 1):
            state = self.step(state, t, environment)
            t = t + self._h
            params[n] = t
            states[n] = state

        return Solution(params, states)

    def __repr__(self):
        return f"Integrator(method='RK4', width={self._width}, h={self._h})"

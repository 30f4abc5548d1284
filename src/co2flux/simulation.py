"""co2flux: air-sea CO2 flux diagnostics for ocean carbon models.

Copyright (C), 2020 Ulrich G. Wortmann

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or (at
your option) any later version.

This program is distributed in the hope that it will be useful, but
WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

from __future__ import annotations

import logging
import os
import time
import typing as tp
from time import process_time

import psutil

from .co2flux_base import InputError, co2fluxBase
from .initialize_unit_registry import Q_
from .model import ColumnModel, ModelError
from .utility_functions import map_units

if tp.TYPE_CHECKING:
    from .output import OutputWriter


class IterationInterval:
    """Actuate every interval iterations, including iteration 0."""

    def __init__(self, interval: int = 1) -> None:
        if interval < 1:
            raise InputError(f"interval must be a positive integer, not {interval}")
        self.interval = int(interval)

    def __call__(self, model: ColumnModel) -> bool:
        return model.iteration % self.interval == 0


class TimeInterval:
    """Actuate every interval seconds of model time, starting at the
    first call.

    interval can be a number in seconds or a string/quantity such as
    "20 minutes".
    """

    def __init__(self, interval: float | str | Q_) -> None:
        self.interval = map_units(interval, "s")
        if self.interval <= 0:
            raise InputError(f"interval must be positive, not {interval}")
        self.next_actuation: float | None = None

    def __call__(self, model: ColumnModel) -> bool:
        if self.next_actuation is None:
            self.next_actuation = model.time + self.interval
            return True

        # allow for round off in the accumulated model time
        if model.time >= self.next_actuation - 1e-9 * self.interval:
            while self.next_actuation <= model.time + 1e-9 * self.interval:
                self.next_actuation += self.interval
            return True

        return False


class Callback:
    """A function of the simulation that runs on a schedule."""

    def __init__(self, func: tp.Callable, schedule=None) -> None:
        self.func = func
        self.schedule = IterationInterval(1) if schedule is None else schedule

    def __call__(self, simulation: Simulation) -> None:
        self.func(simulation)


class Simulation(co2fluxBase):
    """Step a model forward in time and run callbacks.

    Example::

        simulation = Simulation(
            model=model,
            dt="10 minutes",  # or seconds
            stop_time="30 days",  # or seconds, optional
            stop_iteration=1000,  # optional
        )
        simulation.add_callback(diagnostic, name="co2_flux")
        simulation.add_callback(progress, IterationInterval(10), name="progress")
        simulation.output_writers["fields"] = OutputWriter(...)
        simulation.run()

    Callbacks run at initialization and after each time step, in the
    order they were added, when their schedule actuates. Output writers
    run after the callbacks.

    At least one of stop_time and stop_iteration is required.
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["simulation", (str)],
            "model": ["None", (ColumnModel)],
            "dt": ["None", (int, float, str, Q_)],
            "stop_time": ["None", (int, float, str, Q_)],
            "stop_iteration": ["None", (int, str)],
            "log_level": [logging.CRITICAL, (int)],
        }
        self.lrk: list = ["model", "dt"]
        self.__initialize_keyword_variables__(kwargs)

        self.dt = map_units(self.dt, "s")
        if self.dt <= 0:
            raise InputError(f"dt must be positive, not {self.dt} s")
        if self.stop_time == "None" and self.stop_iteration == "None":
            raise ModelError("Simulation needs a stop_time or a stop_iteration")
        if self.stop_time != "None":
            self.stop_time = map_units(self.stop_time, "s")

        self.callbacks: dict[str, Callback] = {}
        self.output_writers: dict[str, OutputWriter] = {}
        self.initialized = False
        self.running = False
        self.wall_time = 0.0

        self._setup_logging()
        self.__register_name__()

    def _setup_logging(self):
        """Configure simulation logging."""
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)

        log_filename: str = f"{self.name}.log"
        logging.basicConfig(filename=log_filename, filemode="w", level=self.log_level)

    def add_callback(self, func: tp.Callable, schedule=None, name: str | None = None) -> None:
        """Register func(simulation) to run on schedule (default: every iteration)."""
        if name is None:
            name = f"callback{len(self.callbacks)}"
        if name in self.callbacks:
            raise ModelError(f"{self.full_name} already has a callback named {name}")
        self.callbacks[name] = Callback(func, schedule)

    @property
    def model_time(self) -> float:
        return self.model.time

    def pretty_time(self) -> str:
        """Return the model time in a human readable unit."""
        t = self.model.time
        for unit, seconds in (("days", 86400.0), ("hours", 3600.0), ("minutes", 60.0)):
            if t >= seconds:
                return f"{t / seconds:.3f} {unit}"
        return f"{t:.3f} seconds"

    def stop_criteria_met(self) -> bool:
        if self.stop_iteration != "None" and self.model.iteration >= self.stop_iteration:
            logging.info(f"{self.full_name}: stop iteration {self.stop_iteration} reached")
            return True
        # allow for round off in the accumulated model time
        if self.stop_time != "None" and self.model.time >= self.stop_time - 1e-9 * self.dt:
            logging.info(f"{self.full_name}: stop time {self.stop_time} s reached")
            return True
        return False

    def __run_callbacks__(self) -> None:
        for name, callback in self.callbacks.items():
            if callback.schedule(self.model):
                logging.debug(f"running {name} at iteration {self.model.iteration}")
                callback(self)

        for name, writer in self.output_writers.items():
            if writer.schedule(self.model):
                logging.debug(f"writing {name} at iteration {self.model.iteration}")
                writer.write(self)

    def initialize(self) -> None:
        """Run callbacks and writers for the initial state."""
        logging.info(f"{self.full_name}: initializing at t = {self.model.time} s")
        self.__run_callbacks__()
        self.initialized = True

    def time_step(self) -> None:
        """Advance the model by dt and run the scheduled callbacks."""
        if not self.initialized:
            self.initialize()

        dt = self.dt
        if self.stop_time != "None":
            dt = min(dt, self.stop_time - self.model.time)
        self.model.time_step(dt)
        self.__run_callbacks__()

    def run(self) -> None:
        """Run the simulation until a stop criterion is met.

        Exceptions raised by the model or by callbacks end the run and
        are propagated.
        """
        wall_clock_start = time.time()
        cpu_start = process_time()
        self.running = True

        try:
            while not self.stop_criteria_met():
                self.time_step()
        finally:
            self.running = False
            self.wall_time = time.time() - wall_clock_start

        cpu_duration = process_time() - cpu_start
        print(
            f"\n Execution took {cpu_duration:.2f} CPU seconds, "
            f"wall time = {self.wall_time:.2f} seconds\n"
        )
        process = psutil.Process(os.getpid())
        memory_gb = process.memory_info().rss / 1e9
        print(f"This run used {memory_gb:.2f} GB of memory\n")

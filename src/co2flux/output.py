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
import typing as tp
from pathlib import Path

import numpy as np
import numpy.typing as npt
import pandas as pd

from .co2flux_base import co2fluxBase
from .fields import Field
from .simulation import IterationInterval, TimeInterval

if tp.TYPE_CHECKING:
    from .simulation import Simulation

# declare numpy types
NDArrayFloat = npt.NDArray[np.float64]


class OutputWriter(co2fluxBase):
    """Record snapshots of named fields on a schedule.

    Example::

        writer = OutputWriter(
            name="co2flux",  # used as file name
            outputs=diagnostic.outputs,  # dict of name: Field
            schedule=TimeInterval("20 minutes"),
        )
        simulation.output_writers["co2flux"] = writer
        simulation.run()
        writer.save_data("./data")  # writes ./data/co2flux.csv
        df = read_output("./data/co2flux.csv")

    The saved table has a "time [s]" column and one column per field
    and grid index, e.g., "DIC[0,0,63]" or "co2_flux[0,0]".
    """

    def __init__(self, **kwargs) -> None:
        self.defaults: dict[str, list[any, tuple]] = {
            "name": ["output", (str)],
            "outputs": ["None", (dict)],
            "schedule": ["None", (TimeInterval, IterationInterval)],
            "overwrite_existing": [True, (bool)],
        }
        self.lrk: list = ["outputs", "schedule"]
        self.__initialize_keyword_variables__(kwargs)

        for k, v in self.outputs.items():
            if not isinstance(v, Field):
                raise TypeError(f"output {k} must be a Field, not {type(v)}")

        self.times: list[float] = []
        self.iterations: list[int] = []
        self.data: dict[str, list[NDArrayFloat]] = {k: [] for k in self.outputs}
        self.__register_name__()

    def write(self, simulation: Simulation) -> None:
        """Store a copy of every output field."""
        model = simulation.model
        self.times.append(model.time)
        self.iterations.append(model.iteration)
        for k, field in self.outputs.items():
            self.data[k].append(field.copy())

    def __call__(self, simulation: Simulation) -> None:
        self.write(simulation)

    def time_series(self, name: str) -> NDArrayFloat:
        """Return the recorded values of name with shape (nt, *field.shape)."""
        if name not in self.data:
            raise KeyError(f"{name} is not an output of {self.full_name}")
        if not self.data[name]:
            return np.empty((0, *self.outputs[name].shape))
        return np.stack(self.data[name])

    def to_dataframe(self) -> pd.DataFrame:
        """Return all recorded data as one table."""
        columns: dict[str, tp.Any] = {
            "time [s]": np.asarray(self.times),
            "iteration": np.asarray(self.iterations, dtype=int),
        }
        for name in self.outputs:
            series = self.time_series(name)
            for index in np.ndindex(series.shape[1:]):
                key = f"{name}[{','.join(str(i) for i in index)}]"
                columns[key] = series[(slice(None), *index)]

        return pd.DataFrame(columns)

    def save_data(self, directory: str = "./data") -> Path:
        """Write the recorded data to directory/<name>.csv.

        Raises FileExistsError if the file exists and
        overwrite_existing is False.
        """
        p = Path(directory)
        p.mkdir(parents=True, exist_ok=True)
        fn = p / f"{self.name}.csv"

        if fn.exists() and not self.overwrite_existing:
            raise FileExistsError(f"{fn} exists and overwrite_existing = False")

        df = self.to_dataframe()
        df.to_csv(fn, index=False)
        logging.info(f"{self.full_name}: wrote {len(df)} records to {fn}")

        return fn


def read_output(filename: str | Path) -> pd.DataFrame:
    """Read a file written by OutputWriter.save_data()."""
    return pd.read_csv(filename)

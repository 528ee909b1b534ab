#!/usr/bin/env python3
"""
Create a grain-size distribution grid for the Weingartner & Draine dust mix.

Build the graphite, silicate, neutral PAH and ionized PAH populations of
the Weingartner & Draine (2001) model for the Milky Way (R_V = 3.1) or the
LMC, and write the continuous size distributions together with the
discretised populations (number and mass per H nucleus in each size bin)
to an HDF5 file.

Example Usage:

    ```bash
    python create_size_distribution_grid.py --params params/wd01_lmc.yaml
        --grid-loc /path/to/grids --plot-example
    ```
"""

import argparse
import math
from pathlib import Path
from typing import Dict, Optional

import matplotlib.pyplot as plt
import numpy as np
import yaml
from matplotlib.axes import Axes
from numpy.typing import NDArray
from unyt import dimensionless, kg, m, um

from dust_grids.grains.dust_mix import WeingartnerDraineDustMix
from dust_grids.grains.size_distributions import (
    SIZE_RANGES,
    Environment,
    GrainFamily,
    get_size_distribution,
)
from dust_grids.grid_io import DustGridFile

MIX_PARAMETER_DEFAULTS = {
    "environment": Environment.MILKY_WAY.value,
    "num_graphite_sizes": 15,
    "num_silicate_sizes": 15,
    "num_pah_sizes": 10,
}


def read_mix_parameters(filename: Optional[str]) -> Dict:
    """
    Read the dust mix parameters from a yaml file.

    Missing entries fall back to MIX_PARAMETER_DEFAULTS.

    Args:
        filename (string)
            path to the yaml parameter file, or None for the defaults
    Returns:
        dict of parameters
    """
    parameters = dict(MIX_PARAMETER_DEFAULTS)
    if filename is None:
        return parameters

    with open(filename, "r") as file:
        loaded = yaml.safe_load(file) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"{filename} does not contain a mapping")

    unknown = set(loaded) - set(MIX_PARAMETER_DEFAULTS)
    if unknown:
        raise ValueError(
            f"Unknown dust mix parameters in {filename}: {sorted(unknown)}"
        )

    parameters.update(loaded)

    # Fail early on a misspelt environment
    parameters["environment"] = Environment(parameters["environment"]).value

    return parameters


def sample_size_distributions(
    environment: Environment, a_grid: NDArray
) -> Dict[GrainFamily, NDArray]:
    """
    Evaluate the size distribution of each grain family on a radius grid.

    Values outside the size range of a family are set to zero.

    Args:
        environment (Environment)
            Milky Way or LMC
        a_grid (NDArray)
            radius grid (m)
    Returns:
        dict of dn/da arrays (per H per m) keyed by grain family
    """
    dndas = {}
    for family in GrainFamily:
        amin, amax = SIZE_RANGES[family]
        dnda = get_size_distribution(family, environment)
        n_a = np.zeros_like(a_grid)
        mask = (a_grid >= amin) & (a_grid <= amax)
        n_a[mask] = dnda(a_grid[mask])
        dndas[family] = n_a
    return dndas


def write_size_distribution_grid(
    mix: WeingartnerDraineDustMix, a_grid: NDArray, out_path: str
) -> DustGridFile:
    """
    Write the size distributions and populations of a set up mix.

    Args:
        mix (WeingartnerDraineDustMix)
            dust mix, set up if it has no populations yet
        a_grid (NDArray)
            radius grid (m) for the continuous size distributions
        out_path (string)
            HDF5 file to create
    Returns:
        DustGridFile
    """
    if mix.num_populations == 0:
        mix.setup()

    out_grid = DustGridFile(out_path)

    model = {
        "model_name": "Weingartner & Draine dust mix",
        "grains": "Graphite, Silicate, neutral PAH, ionized PAH",
        "references": (
            "Weingartner & Draine 2001, ApJ, 548, 296; "
            "Li & Draine 2001, ApJ, 554, 778"
        ),
        "environment": mix.environment.value,
        "num_graphite_sizes": mix.num_graphite_sizes,
        "num_silicate_sizes": mix.num_silicate_sizes,
        "num_pah_sizes": mix.num_pah_sizes,
        "dust_to_hydrogen_mass_ratio": mix.dust_to_hydrogen_mass_ratio(),
    }
    print(model)
    out_grid.write_model_metadata(model)

    out_grid.write_attribute("/", "axes", "radius")
    out_grid.write_dataset(
        "axes/radius",
        a_grid * m,
        description="Grain radius of the size distribution grid",
        log_on_read=False,
    )

    dndas = sample_size_distributions(mix.environment, a_grid)
    for family, n_a in dndas.items():
        out_grid.write_dataset(
            key=f"size_distributions/{family.value}",
            data=n_a / m,
            description=f"""Grain size distribution dn/da of the
            {family.value} grains, number per H nucleus per unit radius""",
            log_on_read=False,
        )

    for name in dict.fromkeys(p.composition.name for p in mix.populations):
        pops = mix.populations_for(name)
        edges = np.array([p.amin for p in pops] + [pops[-1].amax])
        out_grid.write_dataset(
            key=f"populations/{name}/bin_edges",
            data=edges * m,
            description="Grain radius edges of the population size bins",
        )
        out_grid.write_dataset(
            key=f"populations/{name}/number_per_H",
            data=np.array([p.number_per_H for p in pops]) * dimensionless,
            description="Number of grains per H nucleus in each size bin",
        )
        out_grid.write_dataset(
            key=f"populations/{name}/mass_per_H",
            data=np.array([p.mass_per_H for p in pops]) * kg,
            description="Dust mass per H nucleus in each size bin",
        )

    return out_grid


def plot_size_distributions(
    a_grid: NDArray,
    dndas: Dict[GrainFamily, NDArray],
    ax: Optional[Axes] = None,
) -> Axes:
    """
    Plot a^4 dn/da against grain radius for each grain family.

    Args:
        a_grid (NDArray)
            radius grid (m)
        dndas (dict)
            dn/da arrays (per H per m) keyed by grain family
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    a_grid_micron = (a_grid * m).to(um).value
    styles = {
        GrainFamily.GRAPHITE: dict(label="Graphite", c="black", ls="dashed"),
        GrainFamily.SILICATE: dict(label="Silicate", c="blue", ls="dashed"),
        GrainFamily.PAH: dict(label="PAH (per charge state)", c="red"),
    }
    for family, n_a in dndas.items():
        ok = n_a > 0
        ax.loglog(
            a_grid_micron[ok],
            (a_grid[ok] ** 4) * n_a[ok],
            **styles[family],
        )

    ax.set_xlabel("a (um)", fontsize=12)
    ax.set_ylabel(r"a$^{4}$ dn/da (m$^{3}$ per H)", fontsize=12)
    ax.grid(which="both", ls="--", alpha=0.4)
    ax.legend(fontsize=11)
    return ax


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="""Build the Weingartner & Draine grain-size
        distributions and discretised grain populations."""
    )
    parser.add_argument(
        "--params",
        type=str,
        default=None,
        help="yaml file with the dust mix parameters",
    )
    parser.add_argument(
        "--environment",
        choices=[env.value for env in Environment],
        default=None,
        help="environment, overrides the parameter file",
    )
    parser.add_argument(
        "--num-graphite-sizes",
        type=int,
        default=None,
        help="number of graphite size bins, overrides the parameter file",
    )
    parser.add_argument(
        "--num-silicate-sizes",
        type=int,
        default=None,
        help="number of silicate size bins, overrides the parameter file",
    )
    parser.add_argument(
        "--num-pah-sizes",
        type=int,
        default=None,
        help="number of PAH size bins, overrides the parameter file",
    )
    parser.add_argument(
        "--n-a",
        type=int,
        default=500,
        help="number of radii used to sample the size distributions",
    )
    parser.add_argument(
        "--grid-loc",
        type=str,
        default=".",
        help="directory to save the size distribution grid",
    )
    parser.add_argument(
        "--grid-name",
        type=str,
        default="dust_size_distribution_wd01",
        help="name of the grid file (without extension)",
    )
    parser.add_argument(
        "--plot-example",
        action="store_true",
        help="plot the size distributions",
    )
    parser.add_argument(
        "--show-plot",
        action="store_true",
        help="show the size distribution plot",
    )

    args = parser.parse_args()

    parameters = read_mix_parameters(args.params)
    for key in parameters:
        override = getattr(args, key, None)
        if override is not None:
            parameters[key] = override

    mix = WeingartnerDraineDustMix(**parameters).setup()
    print(
        f"Set up {mix.num_populations} grain populations for "
        f"environment {mix.environment.value}"
    )

    # Sampling grid spanning all the grain size ranges
    a_lo = min(amin for amin, _ in SIZE_RANGES.values())
    a_hi = max(amax for _, amax in SIZE_RANGES.values())
    a_grid = np.logspace(
        math.log10(a_lo), math.log10(a_hi), args.n_a, endpoint=True
    )

    grid_name = f"{args.grid_name}_{mix.environment.value}"
    Path(args.grid_loc).mkdir(parents=True, exist_ok=True)
    out_path = f"{args.grid_loc}/{grid_name}.hdf5"

    write_size_distribution_grid(mix, a_grid, out_path)
    print(f"Saved size distribution grid to: {out_path}")

    if args.plot_example:
        ax = plot_size_distributions(
            a_grid, sample_size_distributions(mix.environment, a_grid)
        )
        ax.set_title(f"Weingartner & Draine ({mix.environment.value})")
        plt.tight_layout()
        png_name = f"{args.grid_loc}/{grid_name}.png"
        plt.savefig(png_name, dpi=200)
        print(f"Saved plot: {png_name}")
        if args.show_plot:
            print("Showing plot")
            plt.show()
        else:
            print("Closing plot")
            plt.close()

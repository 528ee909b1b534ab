"""
A thin h5py wrapper for writing dust grid files.

Datasets are written from unyt arrays; the units are stored as a "Units"
attribute alongside a free text "Description" and a "log_on_read" flag
telling readers whether the values should be logged when loaded.
"""

import h5py
import numpy as np
from unyt import unyt_array


class DustGridFile:
    """
    Writer for a single HDF5 grid file.

    The file is (re)created on construction and opened in append mode for
    every subsequent write.
    """

    def __init__(self, filepath: str, overwrite: bool = True):
        self.filepath = filepath
        mode = "w" if overwrite else "w-"
        with h5py.File(self.filepath, mode):
            pass

    def write_attribute(self, group: str, attr_key: str, data):
        with h5py.File(self.filepath, "a") as hdf:
            grp = hdf.require_group(group)
            grp.attrs[attr_key] = data

    def write_model_metadata(self, model: dict):
        """Write each model entry as a root attribute."""
        with h5py.File(self.filepath, "a") as hdf:
            for key, value in model.items():
                if value is None:
                    continue
                hdf.attrs[key] = value

    def write_dataset(
        self,
        key: str,
        data: unyt_array,
        description: str,
        log_on_read: bool = False,
    ):
        """
        Write a dataset and its metadata.

        Args:
            key (str)
                path of the dataset inside the file
            data (unyt_array)
                values with units
            description (str)
                description stored on the dataset
            log_on_read (bool)
                whether readers should log the values when loading
        """
        if not isinstance(data, unyt_array):
            raise ValueError(
                f"Dataset {key} must be a unyt_array to record its units"
            )

        with h5py.File(self.filepath, "a") as hdf:
            if key in hdf:
                del hdf[key]
            dset = hdf.create_dataset(key, data=np.asarray(data.value))
            dset.attrs["Units"] = str(data.units)
            dset.attrs["Description"] = " ".join(description.split())
            dset.attrs["log_on_read"] = log_on_read

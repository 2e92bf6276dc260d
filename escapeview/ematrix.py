"""
Escape matrices: the evaluated escapes of one render pass.

An EscapeMatrix is a dense (nrows, ncols) grid of escapes. Its native
order is column-major: linear index i addresses row i % nrows of column
i // nrows, so the row index varies fastest. Construction from a flat
buffer, iteration and linear indexing all use that order.

Internally escapes are float64 values with NaN standing in for None.
"""

import math

import numpy as np

from .compute import BLUR_KERNEL, apply_sine_colorer, gaussian_blur_3x3


def _to_escape(value):
    value = float(value)
    return None if math.isnan(value) else value


class EscapeMatrix:
    """
    A read-only grid of escapes.

    Usage:
        m = EscapeMatrix.from_vec(ncols=3, nrows=2, values=[0.5, None, ...])
        m[0, 1]      # escape at row 0, column 1
        m[3]         # escape at linear (column-major) index 3
        list(m)      # all escapes in column-major order
    """

    def __init__(self, data):
        data = np.array(data, dtype=np.float64, copy=True)
        if data.ndim != 2:
            raise ValueError(f"EscapeMatrix data must be 2-D, got shape {data.shape}")
        data.setflags(write=False)
        self._data = data

    @classmethod
    def _wrap(cls, data):
        """Adopt a freshly computed array without copying it."""
        data.setflags(write=False)
        matrix = cls.__new__(cls)
        matrix._data = data
        return matrix

    @classmethod
    def from_vec(cls, ncols, nrows, values):
        """
        Build a matrix from a flat, column-major sequence of escapes.

        Args:
            ncols, nrows: Matrix dimensions
            values: ncols * nrows escapes (None or float), row index fastest

        Raises:
            ValueError if the number of values does not match the dimensions
        """
        flat = np.array([np.nan if v is None else v for v in values], dtype=np.float64)
        if flat.size != ncols * nrows:
            raise ValueError(f"Expected {ncols * nrows} values for {ncols}x{nrows}, got {flat.size}")
        return cls._wrap(flat.reshape((nrows, ncols), order='F'))

    @classmethod
    def from_array(cls, array):
        """Wrap a NaN-coded (nrows, ncols) array."""
        return cls(array)

    @property
    def nrows(self):
        return self._data.shape[0]

    @property
    def ncols(self):
        return self._data.shape[1]

    @property
    def shape(self):
        return self._data.shape

    @property
    def values(self):
        """The underlying NaN-coded array (read-only)."""
        return self._data

    def __len__(self):
        return self._data.size

    def _position(self, index):
        if isinstance(index, tuple):
            row, col = index
            if not (0 <= row < self.nrows and 0 <= col < self.ncols):
                raise IndexError(f"Position {index} out of range for {self.nrows}x{self.ncols}")
            return row, col
        if not 0 <= index < len(self):
            raise IndexError(f"Index {index} out of range for {len(self)} escapes")
        col, row = divmod(index, self.nrows)
        return row, col

    def __getitem__(self, index):
        return _to_escape(self._data[self._position(index)])

    def __iter__(self):
        for value in self._data.ravel(order='F'):
            yield _to_escape(value)

    def __repr__(self):
        return f"EscapeMatrix(nrows={self.nrows}, ncols={self.ncols})"

    def escaped_count(self):
        return int(np.count_nonzero(~np.isnan(self._data)))

    def interior_count(self):
        return int(np.count_nonzero(np.isnan(self._data)))

    def gaussian_blur(self, renormalize=True):
        """
        Create a new matrix with a 3x3 gaussian blur applied.

        Border cells are copied as-is, as are cells that did not escape.
        Neighbours that did not escape contribute nothing. With
        renormalize (the default) the weighted sum is divided by the
        weights of the neighbours present; otherwise by the fixed kernel
        sum, which darkens cells next to the set.
        """
        out = np.empty(self._data.shape, dtype=np.float64)
        gaussian_blur_3x3(self._data, BLUR_KERNEL, renormalize, out)
        return EscapeMatrix._wrap(out)

    def to_img(self, colorer):
        """
        Colorize the matrix.

        Returns:
            (nrows, ncols, 3) uint8 RGB array
        """
        out = np.zeros((self.nrows, self.ncols, 3), dtype=np.uint8)
        apply_sine_colorer(self._data, colorer.params(), out)
        return out

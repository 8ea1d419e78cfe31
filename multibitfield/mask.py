"""Mask arithmetic for bitfield columns.

Every function here takes a :class:`~multibitfield.schema.ColumnSpec`.
Field positions are numbered from the most significant bit of the column;
:func:`shift` is the single place where a logical position is mapped to a
physical bit of the packed integer, so the masks and
:func:`extract`/:func:`inject` always agree.

Functions accepting ``*fields`` use every field of the column when no field
names are given.
"""
from functools import lru_cache
from operator import index

import numpy as np

from .errors import FieldOverflow, UnknownField

# number of (spec, fields) masks cached per mask kind
MASK_CACHE_SIZE = 2048


def shift(spec, field):
    """The number of bits between the least significant bit of ``field`` and
    the least significant bit of the column.
    """
    return spec.width - 1 - spec.field_range(field).end


def field_mask(spec, field):
    """A mask with 1s at exactly the bits of ``field``.
    """
    return spec.field_range(field).max_value << shift(spec, field)


def _fields_or_all(spec, fields):
    if not fields:
        return spec.field_names()
    return fields


@lru_cache(MASK_CACHE_SIZE)
def only_mask(spec, *fields):
    """Returns an "only mask" for a list of fields.

    Parameters
    ----------
    spec : ColumnSpec
        The column the fields are in.
    *fields : str
        The names of the fields for the mask.

    Returns
    -------
    mask : int
        An integer with 1s at the bits of the given fields and 0s
        everywhere else.
    """
    mask = 0
    for field in _fields_or_all(spec, fields):
        mask |= field_mask(spec, field)
    return mask


@lru_cache(MASK_CACHE_SIZE)
def reset_mask(spec, *fields):
    """Returns a "reset mask" for a list of fields.

    ``packed & reset_mask(spec, *fields)`` sets the fields to 0 and leaves
    the rest of the column alone.

    Parameters
    ----------
    spec : ColumnSpec
        The column the fields are in.
    *fields : str
        The names of the fields for the mask.

    Returns
    -------
    mask : int
        The complement of :func:`only_mask` within the column's width.
    """
    return spec.full_mask ^ only_mask(spec, *fields)


@lru_cache(MASK_CACHE_SIZE)
def increment_mask(spec, *fields):
    """Returns an "increment mask" for a list of fields.

    ``packed + increment_mask(spec, *fields)`` adds 1 to each of the fields.

    Parameters
    ----------
    spec : ColumnSpec
        The column the fields are in.
    *fields : str
        The names of the fields for the mask. A field listed twice is
        stepped twice.

    Returns
    -------
    mask : int
        The sum of the value of the lowest bit of each field.

    Notes
    -----
    Nothing stops a field from overflowing into the field to its left.
    Size fields for the largest count they need to hold.
    """
    return sum(
        1 << shift(spec, field) for field in _fields_or_all(spec, fields)
    )


def extract(packed, spec, field):
    """Read the value of one field out of a packed integer.

    Parameters
    ----------
    packed : int or None
        The packed column value.
    spec : ColumnSpec
        The column layout.
    field : str
        The field to read.

    Returns
    -------
    value : int or None
        The unsigned value of the field, or None if ``packed`` is None.
    """
    range_ = spec.field_range(field)
    if packed is None:
        return None
    return (packed >> shift(spec, field)) & range_.max_value


def inject(packed, spec, field, value):
    """Write the value of one field into a packed integer.

    Parameters
    ----------
    packed : int or None
        The packed column value. None is treated as 0.
    spec : ColumnSpec
        The column layout.
    field : str
        The field to write.
    value : int
        The new value of the field.

    Returns
    -------
    packed : int
        The new packed value. Bits above the column's width are dropped.

    Raises
    ------
    FieldOverflow
        Raised when ``value`` is negative or needs more bits than the field
        has.
    """
    range_ = spec.field_range(field)
    value = index(value)
    if value < 0 or value > range_.max_value:
        raise FieldOverflow(field, value, range_.width)

    if packed is None:
        packed = 0
    return (packed & reset_mask(spec, field)) | (value << shift(spec, field))


def unpack(packed, spec):
    """Unpack a packed integer into a dictionary from field name to value.
    """
    return {field: extract(packed, spec, field) for field in spec}


def pack(spec, **values):
    """Pack a column value from explicit field values.

    Parameters
    ----------
    spec : ColumnSpec
        The column layout.
    **values
        The names of the fields and their values. Any fields not explicitly
        passed will be 0.

    Returns
    -------
    packed : int
        The packed column value.
    """
    packed = 0
    for field, value in values.items():
        packed = inject(packed, spec, field, value)
    return packed


def extract_array(values, spec, field):
    """Read one field out of many packed values at once.

    Parameters
    ----------
    values : array-like of int
        The packed column values.
    spec : ColumnSpec
        The column layout.
    field : str
        The field to read.

    Returns
    -------
    field_values : np.ndarray[uint64]
        The value of ``field`` for each element of ``values``.
    """
    if spec.width > 64:
        raise ValueError(
            f'column {spec.name!r} is {spec.width} bits wide; only columns'
            ' up to 64 bits can be unpacked into arrays',
        )
    if field not in spec:
        raise UnknownField(field, spec.name)

    values = np.asarray(values, dtype=np.uint64)
    return (
        (values >> np.uint64(shift(spec, field))) &
        np.uint64(spec.field_range(field).max_value)
    )

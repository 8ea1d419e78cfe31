import logging
from types import MappingProxyType

from .bit_range import BitRange
from .errors import AmbiguousField, UnknownColumn, UnknownField
from . import mask


class ColumnSpec:
    """The layout of one bitfield column.

    Parameters
    ----------
    name : str
        The name of the integer column that stores the packed fields.
    fields : mapping[str, range-like]
        The field names and the bit ranges assigned to them. See
        :meth:`BitRange.coerce` for the accepted range types.

    Notes
    -----
    The width of the column is ``max(end) + 1`` across all of the fields,
    so every field lies in ``[0, width)``. For the usual contiguous layout
    starting at bit 0 this is also the sum of the field widths.

    Bit position 0 is the most significant bit of the column. A field
    covering ``start..end`` is stored ``width - 1 - end`` bits up from the
    least significant bit of the packed integer.

    Column specs are immutable and compare by identity.
    """
    __slots__ = '_name', '_fields', '_width'

    def __init__(self, name, fields):
        if not fields:
            raise ValueError(f'bitfield column {name!r} declares no fields')
        self._name = name
        self._fields = MappingProxyType({
            field: BitRange.coerce(range_)
            for field, range_ in dict(fields).items()
        })
        self._width = max(r.end for r in self._fields.values()) + 1

    @property
    def name(self):
        return self._name

    @property
    def fields(self):
        """A read-only mapping from field name to :class:`BitRange`.
        """
        return self._fields

    @property
    def width(self):
        """The number of bits in the column.
        """
        return self._width

    @property
    def full_mask(self):
        return (1 << self._width) - 1

    def field_names(self):
        return tuple(self._fields)

    def field_range(self, field):
        """Look up the bit range of a field.

        Parameters
        ----------
        field : str
            The name of the field.

        Returns
        -------
        bit_range : BitRange
            The bits assigned to ``field``.

        Raises
        ------
        UnknownField
            Raised when ``field`` is not part of this column.
        """
        try:
            return self._fields[field]
        except KeyError:
            raise UnknownField(field, self._name) from None

    def __contains__(self, field):
        return field in self._fields

    def __iter__(self):
        return iter(self._fields)

    def __len__(self):
        return len(self._fields)

    def __repr__(self):
        fields = ', '.join(f'{k}={v}' for k, v in self._fields.items())
        return f'{type(self).__name__}({self._name!r}, {fields})'


class Schema:
    """A registry of bitfield column layouts.

    Each :class:`~multibitfield.record.Record` subclass owns a schema which
    is filled in when the class body is executed and only read afterwards.
    Registration is not thread-safe; do it while the program starts up.

    Parameters
    ----------
    columns : mapping[str, mapping[str, range-like]], optional
        Column layouts to register immediately.
    """
    def __init__(self, columns=None):
        self._columns = {}
        if columns is not None:
            for column, fields in columns.items():
                self.register(column, fields)

    def copy(self):
        """A new schema holding the same column specs.
        """
        new = type(self)()
        new._columns.update(self._columns)
        return new

    def register(self, column, fields):
        """Assign bitfields to a column.

        Parameters
        ----------
        column : str
            The integer column that stores the bitfields.
        fields : mapping[str, range-like]
            The field names and the bits of the column assigned to them.

        Returns
        -------
        spec : ColumnSpec
            The registered layout. A later registration under the same
            column name replaces this one.
        """
        spec = ColumnSpec(column, fields)
        if column in self._columns:
            logging.debug(
                'replacing bitfield layout for column %r: %r -> %r',
                column,
                self._columns[column],
                spec,
            )
        self._columns[column] = spec
        return spec

    def lookup(self, column):
        """Look up the layout of a column.

        Raises
        ------
        UnknownColumn
            Raised when ``column`` was never registered.
        """
        try:
            return self._columns[column]
        except KeyError:
            raise UnknownColumn(column) from None

    def field_range(self, column, field):
        return self.lookup(column).field_range(field)

    def field_names(self, column):
        """The names of all of the fields in ``column`` in declaration order.
        """
        return self.lookup(column).field_names()

    def column_size(self, column):
        """The size of the bitfield in number of bits.
        """
        return self.lookup(column).width

    def bitfields(self):
        """A mapping from each column name to its size in bits.
        """
        return {name: spec.width for name, spec in self._columns.items()}

    def column_for(self, field):
        """Find the column that declares ``field``.

        Raises
        ------
        UnknownField
            Raised when no column declares ``field``.
        AmbiguousField
            Raised when more than one column declares ``field``.
        """
        columns = [
            name for name, spec in self._columns.items() if field in spec
        ]
        if not columns:
            raise UnknownField(field)
        if len(columns) > 1:
            raise AmbiguousField(field, columns)
        return columns[0]

    @property
    def columns(self):
        return tuple(self._columns)

    def __contains__(self, column):
        return column in self._columns

    def __iter__(self):
        return iter(self._columns.values())

    def __len__(self):
        return len(self._columns)

    # mask helpers keyed by column name; see :mod:`multibitfield.mask`

    def only_mask(self, column, *fields):
        return mask.only_mask(self.lookup(column), *fields)

    def reset_mask(self, column, *fields):
        return mask.reset_mask(self.lookup(column), *fields)

    def increment_mask(self, column, *fields):
        return mask.increment_mask(self.lookup(column), *fields)

from operator import index

from . import mask
from .errors import UnknownField
from .schema import Schema


class BitFieldColumn:
    """Declare an integer attribute of a :class:`Record` as a bitfield
    column.

    Parameters
    ----------
    **fields
        The field names and the bits of the column assigned to them.

    Examples
    --------
    .. code-block:: python

       class Person(Record):
           birthday = BitFieldColumn(month=(0, 3), day=(4, 8))

       person = Person(month=2, day=28)
       person.birthday  # 92
       person.get('day')  # 28
    """
    def __init__(self, **fields):
        self.fields = fields
        self._name = None

    def __set_name__(self, owner, name):
        self._name = name

    @property
    def name(self):
        return self._name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return vars(instance).get(self._name)

    def __set__(self, instance, value):
        if value is not None:
            value = index(value)
            if value < 0:
                raise ValueError(
                    f'packed value for {self._name!r} must be non-negative:'
                    f' {value}',
                )
        vars(instance)[self._name] = value


class Record:
    """Base class for objects with bitfield columns.

    Each subclass gets its own :class:`~multibitfield.schema.Schema`, which
    starts as a copy of its parent's and has every :class:`BitFieldColumn`
    in the class body registered in it.

    Parameters
    ----------
    id : int, optional
        The id of the stored record, if it has been stored.
    **values
        Column names mapped to raw packed values, or field names mapped to
        field values. Column values are applied first.
    """
    schema = Schema()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        schema = cls.schema.copy()
        for name, attr in vars(cls).items():
            if isinstance(attr, BitFieldColumn):
                schema.register(name, attr.fields)
        cls.schema = schema

    def __init__(self, *, id=None, **values):
        self.id = id
        schema = self.schema
        for column in schema.columns:
            setattr(self, column, values.pop(column, None))

        for field, value in values.items():
            try:
                self.set(field, value)
            except UnknownField:
                raise TypeError(
                    f'{type(self).__qualname__}() got an unexpected keyword'
                    f' argument {field!r}',
                ) from None

    def __repr__(self):
        values = ', '.join(
            f'{column}={getattr(self, column)!r}'
            for column in self.schema.columns
        )
        return f'{type(self).__qualname__}(id={self.id!r}, {values})'

    def _spec_for(self, field, column):
        schema = self.schema
        if column is None:
            column = schema.column_for(field)
        return schema.lookup(column)

    def get(self, field, *, column=None):
        """Read the value of a field.

        Parameters
        ----------
        field : str
            The name of the field.
        column : str, optional
            The column the field is in. Required when more than one column
            declares ``field``.

        Returns
        -------
        value : int or None
            The value of the field, or None if its column has no value yet.
        """
        spec = self._spec_for(field, column)
        return mask.extract(getattr(self, spec.name), spec, field)

    def set(self, field, value, *, column=None):
        """Write the value of a field.

        Parameters
        ----------
        field : str
            The name of the field.
        value : int
            The new value.
        column : str, optional
            The column the field is in. Required when more than one column
            declares ``field``.

        Raises
        ------
        FieldOverflow
            Raised when ``value`` does not fit in the field. The column is
            left unchanged.
        AmbiguousField
            Raised when ``column`` is not given and more than one column
            declares ``field``.
        """
        spec = self._spec_for(field, column)
        setattr(
            self,
            spec.name,
            mask.inject(getattr(self, spec.name), spec, field, value),
        )

    def bitfield_values(self, column):
        """Unpack a column into a dictionary from field name to value.
        """
        return mask.unpack(getattr(self, column), self.schema.lookup(column))

    def reset_bitfields(self, column, *fields):
        """Sets one or more bitfields to 0 within a column.

        Parameters
        ----------
        column : str
            The name of the column these fields are in.
        *fields : str
            The names of the fields to reset. Defaults to all of them.

        Returns
        -------
        packed : int
            The new value of the column.
        """
        reset = self.reset_mask_for(column, *fields)
        packed = (getattr(self, column) or 0) & reset
        setattr(self, column, packed)
        return packed

    reset_bitfield = reset_bitfields

    def increment_bitfields(self, column, *fields):
        """Increases one or more bitfields by 1.

        Parameters
        ----------
        column : str
            The name of the column these fields are in.
        *fields : str
            The names of the fields to increment. Defaults to all of them.

        Returns
        -------
        packed : int
            The new value of the column.

        Notes
        -----
        A field already at its maximum value carries into the field to its
        left.
        """
        increment = self.increment_mask_for(column, *fields)
        packed = (getattr(self, column) or 0) + increment
        setattr(self, column, packed)
        return packed

    increment_bitfield = increment_bitfields

    @classmethod
    def bitfields(cls):
        """A mapping from each bitfield column to its size in bits.
        """
        return cls.schema.bitfields()

    @classmethod
    def bitfield_size(cls, column):
        return cls.schema.column_size(column)

    @classmethod
    def field_names(cls, column):
        return cls.schema.field_names(column)

    @classmethod
    def reset_mask_for(cls, column, *fields):
        return cls.schema.reset_mask(column, *fields)

    @classmethod
    def increment_mask_for(cls, column, *fields):
        return cls.schema.increment_mask(column, *fields)

    @classmethod
    def only_mask_for(cls, column, *fields):
        return cls.schema.only_mask(column, *fields)

class BitFieldError(Exception):
    """Base class for bitfield layout and value errors.
    """


class UnknownColumn(BitFieldError, KeyError):
    """Raised when a column name has not been registered.
    """
    def __init__(self, column):
        self.column = column
        super().__init__(column)

    def __str__(self):
        return f'Unknown column for bitfield: {self.column!r}'


class UnknownField(BitFieldError, KeyError):
    """Raised when a field name is not part of a column's layout.
    """
    def __init__(self, field, column=None):
        self.field = field
        self.column = column
        super().__init__(field)

    def __str__(self):
        if self.column is None:
            return f'Unknown field: {self.field!r}'
        return f'Unknown field: {self.field!r} for column {self.column!r}'


class FieldOverflow(BitFieldError, ValueError):
    """Raised when a value does not fit in the bits assigned to a field.

    Parameters
    ----------
    field : str
        The name of the field being written.
    value : int
        The rejected value.
    width : int
        The number of bits in the field.
    """
    def __init__(self, field, value, width):
        self.field = field
        self.value = value
        self.width = width
        super().__init__(
            f'Attempted value: {value} is too large for field {field!r}'
            f' ({width} bits, max {(1 << width) - 1})'
            if value >= 0 else
            f'Attempted value: {value} is negative; field {field!r} is'
            ' unsigned',
        )


class AmbiguousField(BitFieldError, LookupError):
    """Raised when a field name is declared by more than one column and no
    column was named.
    """
    def __init__(self, field, columns):
        self.field = field
        self.columns = tuple(columns)
        super().__init__(
            f'field {field!r} is declared by columns'
            f' {", ".join(map(repr, self.columns))}; pass column= to choose',
        )

from collections import namedtuple
import logging
import operator
import pathlib
import sqlite3

import numpy as np

from . import mask


def _quote(identifier):
    return '"{}"'.format(identifier.replace('"', '""'))


class UpdateOp(namedtuple('UpdateOp', 'column operator operand')):
    """A masked arithmetic update of a bitfield column.

    Parameters
    ----------
    column : str
        The column to update.
    operator : {'&', '|', '+'}
        The operation to apply to the current value.
    operand : int
        The right hand side of the operation, usually a mask.

    Notes
    -----
    The mask arithmetic lives in :mod:`multibitfield.mask`; this only
    describes the update so that it can be run in the database as one
    statement or applied to a value in memory.
    """
    operators = {
        '&': operator.and_,
        '|': operator.or_,
        '+': operator.add,
    }

    def __new__(cls, column, operator, operand):
        if operator not in cls.operators:
            raise ValueError(
                f'unknown update operator: {operator!r}, expected one of'
                f' {sorted(cls.operators)}',
            )
        return super().__new__(cls, column, operator, int(operand))

    def sql(self):
        """The SQL assignment for this update.

        Returns
        -------
        assignment : str
            The ``SET`` clause body with a placeholder for the operand.
        params : tuple[int]
            The parameters to bind.
        """
        column = _quote(self.column)
        return f'{column} = {column} {self.operator} ?', (self.operand,)

    def apply(self, packed):
        """Apply the update to an in-memory value. None is treated as 0.
        """
        return self.operators[self.operator](packed or 0, self.operand)


class Store:
    """A table of records backed by a sqlite database.

    Parameters
    ----------
    path : path-like
        The path to the database file. ``':memory:'`` opens a private
        in-memory database.
    record_type : type
        The :class:`~multibitfield.record.Record` subclass being stored. Each
        of its bitfield columns becomes an ``INTEGER`` column.
    table : str, optional
        The name of the table. Defaults to :attr:`DEFAULT_TABLE`, and when
        that is None, to the lowercased name of ``record_type``.

    Notes
    -----
    sqlite stores signed 64 bit integers. Columns are limited to
    :attr:`MAX_COLUMN_BITS` so that a carry out of the highest field still
    fits; values past :attr:`MAX_STORED_VALUE` are rejected by
    :meth:`save` and :meth:`load` with a ``ValueError``.
    """
    DEFAULT_TABLE = None
    MAX_COLUMN_BITS = 62
    MAX_STORED_VALUE = (1 << 63) - 1

    def __init__(self, path, record_type, *, table=None):
        if path != ':memory:':
            path = pathlib.Path(path)
        self.path = path
        self.record_type = record_type
        self.table = table = (
            table or self.DEFAULT_TABLE or record_type.__name__.lower()
        )

        schema = record_type.schema
        for spec in schema:
            if spec.width > self.MAX_COLUMN_BITS:
                raise ValueError(
                    f'column {spec.name!r} is {spec.width} bits wide; sqlite'
                    f' can store at most {self.MAX_COLUMN_BITS} bits',
                )
        self._columns = columns = schema.columns

        self._db = db = sqlite3.connect(str(path))
        column_defs = ''.join(
            f',\n    {_quote(column)} INTEGER' for column in columns
        )
        with db:
            db.execute(
                f'CREATE TABLE IF NOT EXISTS {_quote(table)} (\n'
                f'    id INTEGER PRIMARY KEY{column_defs}\n'
                ')',
            )

    def copy(self):
        """Create a copy suitable for use in a new thread.

        Returns
        -------
        Store
            The new copy.
        """
        return type(self)(self.path, self.record_type, table=self.table)

    def close(self):
        """Close the database connection.
        """
        self._db.close()

    def __del__(self):
        try:
            self.close()
        except AttributeError:
            # if an error is raised in the constructor
            pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _spec(self, column):
        return self.record_type.schema.lookup(column)

    def _checked(self, column, value, record_id):
        """Validate a packed value read from the table.

        sqlite turns integers that overflow into REAL values, which can
        happen when a batch increment carries out of a full column.
        """
        if value is not None and not isinstance(value, int):
            raise ValueError(
                f'column {column!r} of record {record_id} holds {value!r},'
                ' which overflowed sqlite INTEGER storage',
            )
        return value

    def save(self, record):
        """Insert or update a record.

        Parameters
        ----------
        record : Record
            The record to save. If it has no id yet, it is assigned one.

        Returns
        -------
        record_id : int
            The id of the saved record.

        Raises
        ------
        ValueError
            Raised when a packed value is too large for sqlite. Nothing is
            written.
        """
        columns = self._columns
        values = []
        for column in columns:
            value = getattr(record, column)
            if value is not None and value > self.MAX_STORED_VALUE:
                raise ValueError(
                    f'value {value} of column {column!r} is too large for'
                    ' sqlite INTEGER storage',
                )
            values.append(value)

        names = ', '.join(['id', *map(_quote, columns)])
        placeholders = ', '.join('?' * (len(columns) + 1))
        with self._db:
            cursor = self._db.execute(
                f'INSERT OR REPLACE INTO {_quote(self.table)} ({names})'
                f' VALUES ({placeholders})',
                (record.id, *values),
            )
        if record.id is None:
            record.id = cursor.lastrowid
        return record.id

    def load(self, record_id):
        """Load a record by id.

        Raises
        ------
        KeyError
            Raised when there is no record with the given id.
        ValueError
            Raised when a stored value overflowed sqlite INTEGER storage.
        """
        columns = self._columns
        select = ', '.join(map(_quote, columns)) or '1'
        row = self._db.execute(
            f'SELECT {select} FROM {_quote(self.table)} WHERE id = ?',
            (record_id,),
        ).fetchone()
        if row is None:
            raise KeyError(record_id)
        return self.record_type(
            id=record_id,
            **{
                column: self._checked(column, value, record_id)
                for column, value in zip(columns, row)
            },
        )

    def delete(self, record):
        with self._db:
            self._db.execute(
                f'DELETE FROM {_quote(self.table)} WHERE id = ?',
                (record.id,),
            )

    @property
    def ids(self):
        """All of the record ids in the table.
        """
        return tuple(
            id_ for id_, in self._db.execute(
                f'SELECT id FROM {_quote(self.table)} ORDER BY id',
            )
        )

    def update_all(self, op, ids=None):
        """Apply an update to every record, or only to the given ids.

        Parameters
        ----------
        op : UpdateOp
            The update to run.
        ids : iterable[int], optional
            Restrict the update to these records.

        Returns
        -------
        count : int
            The number of rows updated.
        """
        self._spec(op.column)
        assignment, params = op.sql()
        query = f'UPDATE {_quote(self.table)} SET {assignment}'
        if ids is not None:
            ids = tuple(ids)
            if not ids:
                return 0
            query += f' WHERE id IN ({", ".join("?" * len(ids))})'
            params += ids

        logging.debug('running bitfield update on %r: %s', self.table, op)
        with self._db:
            return self._db.execute(query, params).rowcount

    def reset_bitfields(self, column, *fields, ids=None):
        """Sets one or more bitfields to 0 in every record.

        Parameters
        ----------
        column : str
            The name of the column these fields are in.
        *fields : str
            The names of the fields to reset. Defaults to all of them.
        ids : iterable[int], optional
            Restrict the update to these records.

        Returns
        -------
        count : int
            The number of rows updated.
        """
        op = UpdateOp(
            column,
            '&',
            mask.reset_mask(self._spec(column), *fields),
        )
        return self.update_all(op, ids=ids)

    reset_bitfield = reset_bitfields

    def increment_bitfields(self, column, *fields, ids=None):
        """Increases one or more bitfields by 1 in every record.

        Rows where the column is NULL are left NULL.

        Parameters
        ----------
        column : str
            The name of the column these fields are in.
        *fields : str
            The names of the fields to increment. Defaults to all of them.
        ids : iterable[int], optional
            Restrict the update to these records.

        Returns
        -------
        count : int
            The number of rows updated.
        """
        op = UpdateOp(
            column,
            '+',
            mask.increment_mask(self._spec(column), *fields),
        )
        return self.update_all(op, ids=ids)

    increment_bitfield = increment_bitfields

    def count_by(self, column, field):
        """Counts records grouped by the value of a bitfield.

        Parameters
        ----------
        column : str
            The name of the column the field is in.
        field : str
            The field to group by.

        Returns
        -------
        counts : dict[int or None, int]
            The number of records with each value of ``field``. Records
            without a value for ``column`` are counted under None.
        """
        spec = self._spec(column)
        only = mask.only_mask(spec, field)
        inc = mask.increment_mask(spec, field)
        rows = self._db.execute(
            f'SELECT ({_quote(column)} & ?) / ?, count(id)'
            f' FROM {_quote(self.table)} GROUP BY 1',
            (only, inc),
        )
        return {value: count for value, count in rows}

    def column_array(self, column):
        """All of the non-null values of a column.

        Returns
        -------
        values : np.ndarray[uint64]
            The packed values, ordered by record id.
        """
        self._spec(column)
        quoted = _quote(column)
        return np.array(
            [
                self._checked(column, value, record_id)
                for record_id, value in self._db.execute(
                    f'SELECT id, {quoted} FROM {_quote(self.table)}'
                    f' WHERE {quoted} IS NOT NULL ORDER BY id',
                )
            ],
            dtype=np.uint64,
        )

    def field_array(self, column, field):
        """The value of one field for every record with a value for
        ``column``.

        Returns
        -------
        values : np.ndarray[uint64]
            The field values, ordered by record id.
        """
        return mask.extract_array(
            self.column_array(column),
            self._spec(column),
            field,
        )

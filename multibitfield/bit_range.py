from collections import namedtuple


class BitRange(namedtuple('BitRange', 'start end')):
    """An inclusive range of bit positions within a bitfield column.

    Parameters
    ----------
    start : int
        The first bit position of the range.
    end : int
        The last bit position of the range, inclusive.

    Notes
    -----
    Bit positions are counted from the most significant bit of the column:
    position 0 is the leftmost character when the packed value is rendered
    as a zero-padded binary string as wide as the column. Use
    :meth:`invert` to move between this and least-significant-first
    numbering.

    Ranges order by their ``end`` first and then by their ``start``.
    """
    def __new__(cls, start, end):
        start = int(start)
        end = int(end)
        if start < 0:
            raise ValueError(f'bit positions must be non-negative: {start}')
        if end < start:
            raise ValueError(f'empty bit range: {start}..{end}')
        return super().__new__(cls, start, end)

    @classmethod
    def coerce(cls, obj):
        """Build a :class:`BitRange` from a range-like object.

        Parameters
        ----------
        obj : BitRange, tuple[int, int] or range
            The range to coerce. Python ``range`` objects are half-open, so
            ``range(0, 4)`` is the same as ``BitRange(0, 3)``.

        Returns
        -------
        bit_range : BitRange
            The coerced range.
        """
        if isinstance(obj, cls):
            return obj
        if isinstance(obj, range):
            if obj.step != 1:
                raise ValueError(f'bit ranges must be contiguous: {obj!r}')
            if not obj:
                raise ValueError(f'empty bit range: {obj!r}')
            return cls(obj.start, obj.stop - 1)
        try:
            start, end = obj
        except (TypeError, ValueError) as e:
            raise TypeError(
                f'cannot interpret {obj!r} as a bit range',
            ) from e
        return cls(start, end)

    @classmethod
    def parse(cls, s):
        """Parse a range written as ``start..end`` or a single position.

        Parameters
        ----------
        s : str
            The text to parse.

        Returns
        -------
        bit_range : BitRange
            The parsed range.
        """
        start, sep, end = s.partition('..')
        try:
            if not sep:
                return cls(int(start), int(start))
            return cls(int(start), int(end))
        except ValueError as e:
            raise ValueError(f'malformed bit range: {s!r}') from e

    @property
    def width(self):
        """The number of bits in the range.
        """
        return self.end - self.start + 1

    @property
    def max_value(self):
        """The largest unsigned value that fits in the range.
        """
        return (1 << self.width) - 1

    def _key(self):
        return self.end, self.start

    def __lt__(self, other):
        return self._key() < other._key()

    def __le__(self, other):
        return self._key() <= other._key()

    def __gt__(self, other):
        return self._key() > other._key()

    def __ge__(self, other):
        return self._key() >= other._key()

    def __add__(self, other):
        """The smallest range covering both ``self`` and ``other``.
        """
        if not isinstance(other, BitRange):
            return NotImplemented
        first, second = sorted((self, other))
        return type(self)(min(first.start, second.start), second.end)

    def __radd__(self, other):
        # lets ``sum(ranges)`` start from 0
        if other == 0:
            return self
        return self.__add__(other)

    def __contains__(self, position):
        return self.start <= position <= self.end

    def positions(self):
        """The bit positions covered by the range, in order.
        """
        return range(self.start, self.end + 1)

    def invert(self, new_start=0):
        """Mirror the range around ``new_start``.

        Parameters
        ----------
        new_start : int, optional
            The position that ``0`` maps to.

        Returns
        -------
        inverted : BitRange
            The range ``(new_start - end, new_start - start)``.

        Examples
        --------
        Converting the most-significant-first range of a field in a 9 bit
        column to least-significant-first positions:

        .. code-block:: python

           >>> BitRange(0, 3).invert(8)
           BitRange(start=5, end=8)
        """
        return type(self)(new_start - self.end, new_start - self.start)

    def to_bits(self):
        """The integer with a 1 at every position ``i`` in the range, using
        ``2 ** i`` as the weight of position ``i``.
        """
        return sum(1 << i for i in self.positions())

    def __str__(self):
        return f'{self.start}..{self.end}'

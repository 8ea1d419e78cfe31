from hypothesis.strategies import composite, integers, lists, sampled_from

from .bit_range import BitRange
from .schema import ColumnSpec


@composite
def bit_ranges(draw, *, max_start=64, max_width=16):
    start = draw(integers(0, max_start))
    return BitRange(start, start + draw(integers(1, max_width)) - 1)


@composite
def column_specs(draw, *, max_fields=6, max_width=12, name='column'):
    """Contiguous column layouts starting at bit 0.
    """
    widths = draw(
        lists(integers(1, max_width), min_size=1, max_size=max_fields),
    )
    fields = {}
    start = 0
    for n, width in enumerate(widths):
        fields[f'field_{n}'] = BitRange(start, start + width - 1)
        start += width
    return ColumnSpec(name, fields)


def packed_values(spec):
    return integers(0, spec.full_mask)


def field_names(spec):
    return sampled_from(spec.field_names())


@composite
def field_values(draw, spec, field):
    return draw(integers(0, spec.field_range(field).max_value))

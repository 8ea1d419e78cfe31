import click

from . import mask
from .bit_range import BitRange
from .errors import BitFieldError
from .schema import ColumnSpec


class FieldType(click.ParamType):
    """A ``name=start..end`` field declaration.
    """
    name = 'field'

    def convert(self, value, param, ctx):
        if isinstance(value, tuple):
            return value

        name, sep, range_ = value.partition('=')
        if not sep or not name:
            self.fail(f'expected NAME=START..END, got {value!r}', param, ctx)
        try:
            return name, BitRange.parse(range_)
        except ValueError as e:
            self.fail(str(e), param, ctx)


field_option = click.option(
    '--field',
    '-f',
    'fields',
    type=FieldType(),
    multiple=True,
    required=True,
    envvar='MULTIBITFIELD_FIELDS',
    help='A field of the column as NAME=START..END, bit 0 being the most'
    ' significant bit. May be repeated.',
)


def _column(fields):
    try:
        return ColumnSpec('column', dict(fields))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--field')


def _binary(value, spec):
    return format(value, f'0{spec.width}b')


@click.group()
def main():
    """Bitfield column utilities.
    """


@main.command()
@field_option
@click.argument('names', nargs=-1)
def masks(fields, names):
    """Show the masks for a set of fields (default: all fields).
    """
    spec = _column(fields)
    try:
        rows = [
            ('only', mask.only_mask(spec, *names)),
            ('reset', mask.reset_mask(spec, *names)),
            ('increment', mask.increment_mask(spec, *names)),
        ]
    except BitFieldError as e:
        raise click.ClickException(str(e))

    click.echo(f'width: {spec.width}')
    digits = len(str(spec.full_mask))
    for label, value in rows:
        label = f'{label}:'
        click.echo(f'{label:<10} {value:>{digits}} {_binary(value, spec)}')


@main.command()
@field_option
@click.argument('values', nargs=-1, type=click.IntRange(0), required=True)
def decode(fields, values):
    """Unpack packed column values into their fields.
    """
    spec = _column(fields)
    for value in values:
        unpacked = ' '.join(
            f'{field}={field_value}'
            for field, field_value in mask.unpack(value, spec).items()
        )
        click.echo(f'{value} ({_binary(value, spec)}): {unpacked}')


@main.command()
@field_option
@click.argument('assignments', nargs=-1, required=True)
def encode(fields, assignments):
    """Pack NAME=VALUE field assignments into a column value.
    """
    spec = _column(fields)
    values = {}
    for assignment in assignments:
        name, sep, value = assignment.partition('=')
        try:
            values[name] = int(value)
        except ValueError:
            sep = ''
        if not sep:
            raise click.BadParameter(
                f'expected NAME=VALUE, got {assignment!r}',
                param_hint='ASSIGNMENTS',
            )

    try:
        packed = mask.pack(spec, **values)
    except BitFieldError as e:
        raise click.ClickException(str(e))
    click.echo(packed)


if __name__ == '__main__':
    main()

from click.testing import CliRunner

from multibitfield.__main__ import main


birthday = ['-f', 'month=0..3', '-f', 'day=4..8']


def invoke(*args, **kwargs):
    return CliRunner().invoke(main, list(args), **kwargs)


def test_masks():
    result = invoke('masks', *birthday, 'month')
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == 'width: 9'
    assert lines[1].split() == ['only:', '480', '111100000']
    assert lines[2].split() == ['reset:', '31', '000011111']
    assert lines[3].split() == ['increment:', '32', '000100000']


def test_masks_all_fields():
    result = invoke('masks', *birthday)
    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[1].split() == [
        'only:',
        '511',
        '111111111',
    ]


def test_masks_unknown_field():
    result = invoke('masks', *birthday, 'year')
    assert result.exit_code == 1
    assert 'year' in result.output


def test_decode():
    result = invoke('decode', *birthday, '92', '358')
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        '92 (001011100): month=2 day=28',
        '358 (101100110): month=11 day=6',
    ]


def test_decode_fields_from_environment():
    result = invoke(
        'decode',
        '92',
        env={'MULTIBITFIELD_FIELDS': 'month=0..3 day=4..8'},
    )
    assert result.exit_code == 0, result.output
    assert 'month=2 day=28' in result.output


def test_encode():
    result = invoke('encode', *birthday, 'month=2', 'day=28')
    assert result.exit_code == 0, result.output
    assert result.output == '92\n'


def test_encode_overflow():
    result = invoke('encode', *birthday, 'month=16')
    assert result.exit_code == 1
    assert 'too large' in result.output


def test_encode_bad_assignment():
    result = invoke('encode', *birthday, 'month')
    assert result.exit_code == 2


def test_bad_field_option():
    result = invoke('decode', '-f', 'month', '92')
    assert result.exit_code == 2

    result = invoke('decode', '-f', 'month=3..0', '92')
    assert result.exit_code == 2


def test_decode_negative():
    result = invoke('decode', *birthday, '--', '-1')
    assert result.exit_code == 2

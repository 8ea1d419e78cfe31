import pytest

from multibitfield import (
    AmbiguousField,
    BitFieldColumn,
    FieldOverflow,
    Record,
    UnknownColumn,
    UnknownField,
)


class Person(Record):
    birthday = BitFieldColumn(month=(0, 3), day=(4, 8))


class User(Record):
    counter = BitFieldColumn(
        daily=range(0, 5),
        weekly=range(5, 10),
        monthly=range(10, 15),
    )


def test_class_methods():
    assert Person.bitfields() == {'birthday': 9}
    assert Person.bitfield_size('birthday') == 9
    assert Person.field_names('birthday') == ('month', 'day')
    assert User.bitfields() == {'counter': 15}


def test_mask_class_methods():
    assert Person.reset_mask_for('birthday', 'month') == 31
    assert Person.increment_mask_for('birthday', 'month') == 32
    assert Person.only_mask_for('birthday', 'month') == 480

    with pytest.raises(UnknownColumn):
        Person.reset_mask_for('counter')


def test_nil_value():
    person = Person()
    assert person.birthday is None
    assert person.get('month') is None
    assert person.get('day') is None
    assert person.bitfield_values('birthday') == {'month': None, 'day': None}


def test_field_values():
    person = Person(month=2, day=28)
    assert person.get('month') == 2
    assert person.get('day') == 28
    assert person.birthday == 92


def test_raw_value():
    person = Person(birthday=358)
    assert person.get('month') == 11
    assert person.get('day') == 6


def test_raw_value_then_fields():
    person = Person(day=1, birthday=358)
    assert person.get('month') == 11
    assert person.get('day') == 1


def test_set():
    person = Person()
    person.set('day', 28)
    assert person.birthday == 28
    person.set('month', 2)
    assert person.birthday == 92
    person.set('month', 11)
    assert person.get('month') == 11
    assert person.get('day') == 28


def test_set_overflow_leaves_value():
    person = Person(month=2, day=28)
    with pytest.raises(FieldOverflow):
        person.set('day', 32)
    with pytest.raises(FieldOverflow):
        person.set('month', -1)
    assert person.birthday == 92


def test_unknown_field():
    person = Person(month=2)
    with pytest.raises(UnknownField):
        person.get('year')
    with pytest.raises(UnknownField):
        person.set('year', 2012)
    assert person.birthday == 64


def test_unknown_keyword():
    with pytest.raises(TypeError):
        Person(year=2012)


def test_bad_raw_value():
    person = Person()
    with pytest.raises(ValueError):
        person.birthday = -1
    with pytest.raises(TypeError):
        person.birthday = 'ninety-two'
    assert person.birthday is None


def test_reset_bitfields():
    person = Person(month=12, day=25)
    assert person.reset_bitfields('birthday', 'month') == 25
    assert person.get('month') == 0
    assert person.get('day') == 25

    person = Person(month=12, day=25)
    person.reset_bitfield('birthday')
    assert person.birthday == 0


def test_increment_bitfields():
    person = Person(month=6, day=15)
    person.increment_bitfields('birthday', 'month', 'day')
    assert person.get('month') == 7
    assert person.get('day') == 16

    user = User()
    user.increment_bitfield('counter', 'daily', 'monthly')
    user.increment_bitfield('counter', 'daily')
    assert user.bitfield_values('counter') == {
        'daily': 2,
        'weekly': 0,
        'monthly': 1,
    }


def test_increment_overflow_carries():
    person = Person(month=1, day=31)
    person.increment_bitfields('birthday', 'day')
    assert person.get('month') == 2
    assert person.get('day') == 0


def test_errors_do_not_mutate():
    person = Person(month=12, day=25)
    with pytest.raises(UnknownField):
        person.increment_bitfields('birthday', 'day', 'year')
    with pytest.raises(UnknownColumn):
        person.reset_bitfields('counter')
    assert person.birthday == Person(month=12, day=25).birthday


def test_subclass_schema():
    class Employee(Person):
        badge = BitFieldColumn(floor=(0, 2), desk=(3, 9))

    assert Employee.bitfields() == {'birthday': 9, 'badge': 10}
    assert Person.bitfields() == {'birthday': 9}

    employee = Employee(month=3, floor=2, desk=17)
    assert employee.get('month') == 3
    assert employee.get('desk') == 17
    assert employee.badge == (2 << 7) | 17


def test_descriptor_on_class():
    assert isinstance(Person.birthday, BitFieldColumn)
    assert Person.birthday.name == 'birthday'


class Two(Record):
    a = BitFieldColumn(x=(0, 3))
    b = BitFieldColumn(x=(0, 7), y=(8, 9))


def test_shared_field_name_needs_column():
    two = Two()
    with pytest.raises(AmbiguousField) as e:
        two.set('x', 200)
    assert e.value.columns == ('a', 'b')
    with pytest.raises(AmbiguousField):
        two.get('x')
    assert two.a is None
    assert two.b is None

    # names declared once still dispatch on their own
    two.set('y', 3)
    assert two.get('y') == 3


def test_shared_field_name_with_column():
    two = Two()
    two.set('x', 200, column='b')
    assert two.get('x', column='b') == 200
    assert two.get('x', column='a') is None

    with pytest.raises(FieldOverflow):
        two.set('x', 200, column='a')
    assert two.a is None

    two.set('x', 9, column='a')
    assert two.get('x', column='a') == 9
    assert two.get('x', column='b') == 200

    with pytest.raises(UnknownColumn):
        two.get('x', column='c')
    with pytest.raises(UnknownField):
        two.get('y', column='a')


def test_subclass_shadowing_field_name():
    class Member(Person):
        joined = BitFieldColumn(month=(0, 3), year=(4, 15))

    member = Member()
    with pytest.raises(AmbiguousField):
        member.set('month', 4)

    member.set('month', 4, column='joined')
    member.set('month', 11, column='birthday')
    assert member.bitfield_values('joined') == {'month': 4, 'year': 0}
    assert member.get('month', column='birthday') == 11


def test_set_rejects_non_integers():
    person = Person(month=2, day=28)
    with pytest.raises(TypeError):
        person.set('month', 2.7)
    with pytest.raises(TypeError):
        person.set('month', '3')
    assert person.birthday == 92

    with pytest.raises(TypeError):
        Person(day=1.5)

import pytest

from nrcli.ternary import Ternary

CASES = [
    ("ALLOW", True),
    ("DISALLOW", False),
    ("NOT_ASKED", False),
    ("invalid", False),
]


@pytest.mark.parametrize("value,_", CASES)
def test_string(value, _):
    assert str(Ternary(value)) == value


def test_named_members_string():
    assert Ternary.ALLOW.as_bool() is True
    assert str(Ternary.ALLOW) == "ALLOW"
    assert str(Ternary.DISALLOW) == "DISALLOW"
    assert str(Ternary.UNKNOWN) == "NOT_ASKED"


@pytest.mark.parametrize("ternary", [Ternary.ALLOW, Ternary.DISALLOW, Ternary.UNKNOWN])
def test_valid_values_pass(ternary):
    assert ternary.validate() is None


def test_invalid_value_message():
    with pytest.raises(ValueError) as info:
        Ternary("invalid").validate()
    assert str(info.value) == (
        '"invalid" is not a valid value; Please use one of: {ALLOW DISALLOW NOT_ASKED}'
    )


def test_validation_ignores_case():
    assert Ternary("allow").validate() is None
    assert Ternary("not_asked").validate() is None


@pytest.mark.parametrize("value,expected", CASES)
def test_bool(value, expected):
    assert Ternary(value).as_bool() is expected


def test_named_members_bool():
    assert Ternary.DISALLOW.as_bool() is False
    assert Ternary.UNKNOWN.as_bool() is False


def test_bool_of_unknown_data():
    assert Ternary("asdf").as_bool() is False


def test_bool_ignores_case():
    assert Ternary("Allow").as_bool() is True
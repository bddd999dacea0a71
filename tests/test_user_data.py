from __future__ import annotations

import pytest

from user_data import USER_DATA_FIELDS, UserData


def test_fields_listing_matches_dataclass():
    assert tuple(name for name, _ in USER_DATA_FIELDS) == UserData.field_names()


def test_from_form_binds_matching_fields_only():
    data = UserData.from_form(
        {
            "first_name": "  Ada ",
            "city": "Boston",
            "FirstName": "ignored",
            "favourite_colour": "green",
        }
    )

    assert data.first_name == "Ada"
    assert data.city == "Boston"
    assert data.last_name == ""
    assert data.email == ""


def test_from_form_turns_none_into_empty_text():
    data = UserData.from_form({"phone": None, "postal_code": 2101})

    assert data.phone == ""
    assert data.postal_code == "2101"


def test_from_dict_allows_missing_fields():
    assert UserData.from_dict({"first_name": "Ada"}) == UserData(first_name="Ada")


def test_from_dict_rejects_non_objects():
    with pytest.raises(TypeError):
        UserData.from_dict(["Ada"])


def test_from_dict_rejects_non_string_values():
    with pytest.raises(TypeError):
        UserData.from_dict({"first_name": None})


def test_to_dict_rejects_non_string_values():
    with pytest.raises(TypeError):
        UserData(city=None).to_dict()  # type: ignore[arg-type]

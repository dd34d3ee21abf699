from datetime import date

import pytest
from werkzeug.datastructures import MultiDict

from app.fazbook.modules.users.service import FORM_FIELDS, InvalidUserPayload, UserPayload, parse_date


def test_from_form_maps_field_names():
    form = MultiDict({"firstName": " Ada ", "lastName": "Lovelace", "email": "ada@example.com", "dob": "1815-12-10"})
    payload = UserPayload.from_form(form)
    assert payload == UserPayload(first_name="Ada", last_name="Lovelace", email="ada@example.com", dob=date(1815, 12, 10))


def test_missing_and_blank_fields_become_none():
    payload = UserPayload.from_form(MultiDict({"firstName": "", "email": "   "}))
    assert payload.as_columns() == {"first_name": None, "last_name": None, "email": None, "dob": None}


def test_parse_date_rejects_non_iso():
    with pytest.raises(InvalidUserPayload, match="YYYY-MM-DD"):
        parse_date("12/10/1815")


def test_invalid_payload_is_a_value_error():
    assert issubclass(InvalidUserPayload, ValueError)


def test_form_fields_drive_columns():
    payload = UserPayload.from_form(MultiDict({"lastName": "Lovelace"}))
    assert set(payload.as_columns()) == set(FORM_FIELDS.values())
    assert payload.as_columns()["last_name"] == "Lovelace"

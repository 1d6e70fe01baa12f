"""Tests for property models and list filters."""

import pytest
from pydantic import ValidationError

from propertyhub.models.filters import PropertyFilters, parse_int, parse_number
from propertyhub.models.property import PropertyCreate, PropertyOut, PropertyUpdate

from conftest import sample_payload


class TestPropertyCreate:
  def test_defaults(self):
    prop = PropertyCreate.model_validate(sample_payload(images=[], amenities=[]))
    assert prop.status == "available"
    assert prop.images == []
    assert prop.amenities == []

  def test_half_bathrooms_allowed(self):
    assert PropertyCreate.model_validate(sample_payload(bathrooms=2.5)).bathrooms == 2.5

  def test_blank_list_entries_are_dropped(self):
    prop = PropertyCreate.model_validate(sample_payload(amenities=[" Pool ", "", "  "]))
    assert prop.amenities == ["Pool"]

  def test_non_finite_price_rejected(self):
    with pytest.raises(ValidationError):
      PropertyCreate.model_validate(sample_payload(price=float("inf")))

  def test_description_required(self):
    with pytest.raises(ValidationError):
      PropertyCreate.model_validate(sample_payload(description=" "))


class TestPropertyUpdate:
  def test_only_supplied_fields_are_set(self):
    update = PropertyUpdate.model_validate({"price": 10})
    assert update.model_dump(exclude_unset=True) == {"price": 10}

  def test_explicit_null_rejected(self):
    with pytest.raises(ValidationError):
      PropertyUpdate.model_validate({"status": None})

  def test_enum_checked(self):
    with pytest.raises(ValidationError):
      PropertyUpdate.model_validate({"type": "castle"})


def test_property_out_serializes_id_alias():
  out = PropertyOut.model_validate({**sample_payload(), "_id": "x1", "createdAt": "c", "updatedAt": "u"})
  dumped = out.model_dump(by_alias=True)
  assert dumped["_id"] == "x1"
  assert "id" not in dumped


class TestParsing:
  @pytest.mark.parametrize(
    "raw,expected",
    [("100000", 100000.0), (" 99.5 ", 99.5), ("", None), (None, None), ("abc", None), ("nan", None), ("inf", None)],
  )
  def test_parse_number(self, raw, expected):
    assert parse_number(raw) == expected

  @pytest.mark.parametrize("raw,expected", [("3", 3), ("0", 0), ("2.5", None), ("x", None), ("", None)])
  def test_parse_int(self, raw, expected):
    assert parse_int(raw) == expected


class TestPropertyFilters:
  def test_from_query_drops_invalid_values(self):
    filters = PropertyFilters.from_query(
      {"type": "castle", "status": "sold", "bedrooms": "two", "minPrice": "10", "location": "  "}
    )
    assert filters == PropertyFilters(status="sold", minPrice=10.0)

  def test_empty_filters_match_everything(self):
    filters = PropertyFilters.from_query({})
    assert filters.is_empty
    assert filters.matches({})
    assert filters.matches(sample_payload())

  def test_location_match(self):
    filters = PropertyFilters(location="Lake")
    assert filters.matches({"location": "Lakeside Ave"})
    assert filters.matches({"location": "north lake drive"})
    assert not filters.matches({"location": "Hillcrest"})

  def test_price_bounds(self):
    filters = PropertyFilters(minPrice=100000, maxPrice=200000)
    assert filters.matches({"price": 100000})
    assert filters.matches({"price": 200000})
    assert not filters.matches({"price": 99999})
    assert not filters.matches({"price": 200001})
    assert not filters.matches({})

  def test_missing_status_counts_as_available(self):
    assert PropertyFilters(status="available").matches({"title": "x"})

  def test_to_params(self):
    filters = PropertyFilters(type="condo", minPrice=150000.0, maxPrice=99.5, bedrooms=0)
    assert filters.to_params() == {"type": "condo", "minPrice": "150000", "maxPrice": "99.5", "bedrooms": "0"}

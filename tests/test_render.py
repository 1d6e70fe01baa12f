"""Tests for terminal rendering helpers."""

from propertyhub.client import render
from propertyhub.client.favorites import FavoritesService
from propertyhub.client.forms import PropertyForm
from propertyhub.client.storage import MemoryStorage
from propertyhub.client.views import DetailView, FavoritesView, ListView
from propertyhub.models.filters import PropertyFilters

from conftest import sample_payload


def prop(**fields):
  return {
    **sample_payload(**fields),
    "_id": "p1",
    "status": fields.get("status", "available"),
    "createdAt": "2024-05-01T10:00:00.000Z",
    "updatedAt": "2024-05-02T10:00:00.000Z",
  }


def test_formatters():
  assert render.format_price(1250000) == "$1,250,000"
  assert render.format_price(99.6) == "$100"
  assert render.format_area(1200) == "1,200 sq ft"
  assert render.format_number(1.5) == "1.5"
  assert render.format_number(2.0) == "2"
  assert render.status_label("rented") == "Rented"


def test_card_shows_key_facts():
  card = render.render_card(prop(price=150000), favorite=True)
  assert card.startswith("♥ [Available] 🏠 Sunny Lakeside Cottage  $150,000")
  assert "2 bd | 1.5 ba | 1,100 sq ft" in card
  assert "id: p1" in card


def test_filter_summary():
  assert render.render_filters(PropertyFilters()) == "Filters: none"
  summary = render.render_filters(PropertyFilters(location="Lake", minPrice=100000))
  assert summary == "Filters: location contains 'Lake', price $100,000 - any"


def make_list_view(properties):
  view = ListView(api=None, favorites=FavoritesService(MemoryStorage()))
  view.properties = properties
  return view


def test_list_counts_and_empty_state():
  assert render.render_list(make_list_view([])).startswith("0 properties available")
  assert "No properties found" in render.render_list(make_list_view([]))
  assert render.render_list(make_list_view([prop()])).startswith("1 property available")


def test_list_loading_and_error():
  view = make_list_view([])
  view.loading = True
  assert render.render_list(view) == "Loading properties..."
  view.loading = False
  view.error = "Failed to fetch properties. Please try again."
  assert render.render_list(view) == "! Failed to fetch properties. Please try again. (retry available)"


def test_details_lists_amenities_and_images():
  view = DetailView(api=None, favorites=FavoritesService(MemoryStorage()))
  view.property = prop(type="condo")
  text = render.render_details(view)
  assert "Type: Condo" in text
  assert "  • Dock" in text
  assert "https://img.example.com/cottage.jpg" in text


def test_details_not_found():
  view = DetailView(api=None, favorites=FavoritesService(MemoryStorage()))
  view.error = "Property not found"
  assert render.render_details(view) == "! Property not found (retry available)"


def test_favorites_empty_state():
  view = FavoritesView(api=None, favorites=FavoritesService(MemoryStorage()))
  text = render.render_favorites(view)
  assert "0 properties saved" in text
  assert "No favorites yet" in text


def test_form_remove_entries():
  form = PropertyForm()
  assert form.add_image("a") and form.add_image("b")
  assert not form.add_image("   ")
  form.remove_image(0)
  form.remove_image(7)
  assert form.images == ["b"]
  form.add_amenity("Gym")
  form.remove_amenity(0)
  assert form.amenities == []

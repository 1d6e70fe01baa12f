"""Plain-text rendering of client views for the terminal."""

from typing import Any, Dict, List

from ..models.filters import PropertyFilters
from .views import CreateView, DetailView, FavoritesView, ListView

TYPE_ICONS = {
  "apartment": "🏢",
  "house": "🏠",
  "condo": "🏙️",
  "townhouse": "🏘️",
}

RULE = "-" * 60


def format_price(price: float) -> str:
  return f"${price:,.0f}"


def format_area(area: float) -> str:
  return f"{area:,.0f} sq ft"


def format_number(value: float) -> str:
  return f"{value:g}"


def status_label(status: str) -> str:
  return status[:1].upper() + status[1:]


def pluralize(count: int, singular: str, plural: str) -> str:
  return f"{count} {singular if count == 1 else plural}"


def render_error(error: str) -> str:
  return f"! {error} (retry available)"


def render_card(prop: Dict[str, Any], favorite: bool = False) -> str:
  heart = "♥" if favorite else "♡"
  icon = TYPE_ICONS.get(prop.get("type", ""), "")
  lines = [
    f"{heart} [{status_label(prop['status'])}] {icon} {prop['title']}  {format_price(prop['price'])}",
    f"  {prop['location']}",
    f"  {prop['description']}",
    f"  {prop['bedrooms']} bd | {format_number(prop['bathrooms'])} ba | {format_area(prop['area'])}",
    f"  id: {prop['_id']}",
  ]
  return "\n".join(lines)


def render_filters(filters: PropertyFilters) -> str:
  parts = []
  if filters.location:
    parts.append(f"location contains {filters.location!r}")
  if filters.type:
    parts.append(f"type={filters.type}")
  if filters.status:
    parts.append(f"status={filters.status}")
  if filters.bedrooms is not None:
    parts.append(f"bedrooms={filters.bedrooms}")
  if filters.minPrice is not None or filters.maxPrice is not None:
    low = format_price(filters.minPrice) if filters.minPrice is not None else "any"
    high = format_price(filters.maxPrice) if filters.maxPrice is not None else "any"
    parts.append(f"price {low} - {high}")
  return "Filters: " + (", ".join(parts) if parts else "none")


def render_cards(properties: List[Dict[str, Any]], view) -> List[str]:
  blocks = []
  for prop in properties:
    blocks.append(render_card(prop, view.is_favorite(prop["_id"])))
  return blocks


def render_list(view: ListView) -> str:
  if view.loading:
    return "Loading properties..."
  if view.error:
    return render_error(view.error)
  lines = [f"{pluralize(len(view.properties), 'property', 'properties')} available", render_filters(view.filters), RULE]
  if not view.properties:
    lines.append("No properties found. Try adjusting your filters or clear them.")
  else:
    lines.append(f"\n{RULE}\n".join(render_cards(view.properties, view)))
  return "\n".join(lines)


def render_details(view: DetailView) -> str:
  if view.loading:
    return "Loading property details..."
  if view.error or view.property is None:
    return render_error(view.error or "Property not found")
  prop = view.property
  lines = [
    prop["title"],
    format_price(prop["price"]),
    f"Status: {status_label(prop['status'])}    {'♥ Favorite' if view.favorite else '♡ Not in favorites'}",
    f"Location: {prop['location']}",
    f"Bedrooms: {prop['bedrooms']}    Bathrooms: {format_number(prop['bathrooms'])}",
    f"Area: {format_area(prop['area'])}    Type: {status_label(prop['type'])}",
    RULE,
    "Description",
    prop["description"],
  ]
  if prop.get("amenities"):
    lines.extend([RULE, "Amenities"])
    lines.extend(f"  • {amenity}" for amenity in prop["amenities"])
  if prop.get("images"):
    lines.extend([RULE, "Images"])
    lines.extend(f"  {url}" for url in prop["images"])
  lines.extend([RULE, f"Listed {prop['createdAt']}  Updated {prop['updatedAt']}"])
  return "\n".join(lines)


def render_favorites(view: FavoritesView) -> str:
  if view.loading:
    return "Loading your favorites..."
  if view.error:
    return render_error(view.error)
  lines = ["Your Favorites", f"{pluralize(len(view.properties), 'property', 'properties')} saved", RULE]
  if not view.properties:
    lines.append("No favorites yet. Start exploring properties and mark the ones you like.")
  else:
    lines.append(f"\n{RULE}\n".join(render_cards(view.properties, view)))
  return "\n".join(lines)


def render_created(view: CreateView) -> str:
  if view.error:
    lines = [render_error(view.error)]
    lines.extend(f"  {item['field']}: {item['message']}" for item in view.field_errors)
    return "\n".join(lines)
  if view.success and view.created:
    return f"Property created successfully! ({view.created['_id']})\n{RULE}\n{render_card(view.created)}"
  return ""

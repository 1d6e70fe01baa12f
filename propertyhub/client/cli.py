from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.logging import setup_logging
from ..models.filters import PropertyFilters
from ..models.property import PROPERTY_STATUSES, PROPERTY_TYPES
from . import render
from .api import API_BASE_URL, ApiError, PropertyApi
from .favorites import FavoritesService
from .forms import PropertyForm
from .storage import FileStorage
from .views import CreateView, DetailView, FavoritesView, ListView


def build_parser() -> argparse.ArgumentParser:
  p = argparse.ArgumentParser(prog="propertyhub-client", description="PropertyHub listings client")
  p.add_argument("--api-url", type=str, default=API_BASE_URL)
  p.add_argument("--storage", type=str, default=None, help="Local storage file (default ~/.propertyhub/storage.json)")
  p.add_argument("--log-level", type=str, default="WARNING")
  sub = p.add_subparsers(dest="command", required=True)

  ls = sub.add_parser("list", help="Browse listings")
  ls.add_argument("--type", choices=PROPERTY_TYPES, default=None)
  ls.add_argument("--status", choices=PROPERTY_STATUSES, default=None)
  ls.add_argument("--min-price", type=str, default=None)
  ls.add_argument("--max-price", type=str, default=None)
  ls.add_argument("--bedrooms", type=str, default=None)
  ls.add_argument("--location", type=str, default=None)

  show = sub.add_parser("show", help="Show one listing")
  show.add_argument("id")

  add = sub.add_parser("add", help="Create a listing")
  _add_form_arguments(add, required=True)

  update = sub.add_parser("update", help="Update fields of a listing")
  update.add_argument("id")
  _add_form_arguments(update, required=False)

  delete = sub.add_parser("delete", help="Delete a listing")
  delete.add_argument("id")
  delete.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

  fav = sub.add_parser("favorite", help="Toggle a listing in favorites")
  fav.add_argument("id")

  sub.add_parser("favorites", help="Show favorite listings")

  clear = sub.add_parser("clear-favorites", help="Remove every favorite")
  clear.add_argument("--yes", action="store_true")
  return p


def _add_form_arguments(p: argparse.ArgumentParser, required: bool) -> None:
  p.add_argument("--title", required=required)
  p.add_argument("--description", required=required)
  p.add_argument("--price", type=float, required=required)
  p.add_argument("--location", required=required)
  p.add_argument("--bedrooms", type=int, default=None)
  p.add_argument("--bathrooms", type=float, default=None)
  p.add_argument("--area", type=float, required=required)
  p.add_argument("--type", choices=PROPERTY_TYPES, default=None)
  p.add_argument("--status", choices=PROPERTY_STATUSES, default=None)
  p.add_argument("--image", action="append", default=None, dest="images", help="Image URL, repeatable")
  p.add_argument("--amenity", action="append", default=None, dest="amenities", help="Amenity, repeatable")


FORM_FIELDS = ("title", "description", "price", "location", "bedrooms", "bathrooms", "area", "type", "status")


def form_values(args: argparse.Namespace) -> Dict[str, Any]:
  values = {name: getattr(args, name) for name in FORM_FIELDS if getattr(args, name) is not None}
  for name in ("images", "amenities"):
    if getattr(args, name) is not None:
      values[name] = getattr(args, name)
  return values


def filters_from_args(args: argparse.Namespace) -> PropertyFilters:
  return PropertyFilters.from_query(
    {
      "type": args.type,
      "status": args.status,
      "minPrice": args.min_price,
      "maxPrice": args.max_price,
      "bedrooms": args.bedrooms,
      "location": args.location,
    }
  )


def confirm(question: str) -> bool:
  answer = input(f"{question} [y/N] ")
  return answer.strip().lower() in {"y", "yes"}


async def run_command(args: argparse.Namespace, api: PropertyApi, favorites: FavoritesService) -> int:
  if args.command == "list":
    view = ListView(api, favorites)
    ok = await view.load(filters_from_args(args))
    print(render.render_list(view))
    return 0 if ok else 1

  if args.command == "show":
    detail = DetailView(api, favorites)
    ok = await detail.open(args.id)
    print(render.render_details(detail))
    return 0 if ok else 1

  if args.command == "add":
    form = PropertyForm()
    values = form_values(args)
    for url in values.pop("images", []):
      form.add_image(url)
    for amenity in values.pop("amenities", []):
      form.add_amenity(amenity)
    for name, value in values.items():
      setattr(form, name, value)
    create = CreateView(api, favorites, form)
    ok = await create.submit()
    print(render.render_created(create))
    return 0 if ok else 1

  if args.command == "update":
    values = form_values(args)
    if not values:
      print("Nothing to update.", file=sys.stderr)
      return 2
    try:
      updated = await api.update_property(args.id, values)
    except ApiError as exc:
      print(render.render_error(f"Failed to update property: {exc.message}"))
      return 1
    print(render.render_card(updated, favorites.is_favorite(updated["_id"])))
    return 0

  if args.command == "delete":
    detail = DetailView(api, favorites)
    if not await detail.open(args.id):
      print(render.render_details(detail))
      return 1
    if not args.yes and not confirm("Are you sure you want to delete this property?"):
      return 0
    ok = await detail.delete()
    print("Property deleted." if ok else render.render_error(detail.error or "Delete failed"))
    return 0 if ok else 1

  if args.command == "favorite":
    detail = DetailView(api, favorites)
    if not await detail.open(args.id):
      print(render.render_details(detail))
      return 1
    state = detail.toggle()
    print("Added to favorites." if state else "Removed from favorites.")
    return 0

  if args.command == "favorites":
    fav_view = FavoritesView(api, favorites)
    ok = await fav_view.load()
    print(render.render_favorites(fav_view))
    return 0 if ok else 1

  if args.command == "clear-favorites":
    if not args.yes and not confirm("Are you sure you want to remove all properties from favorites?"):
      return 0
    favorites.clear()
    print("Favorites cleared.")
    return 0

  return 2


def main(argv: Optional[List[str]] = None) -> int:
  args = build_parser().parse_args(argv)
  setup_logging(args.log_level)
  favorites = FavoritesService(FileStorage(Path(args.storage) if args.storage else None))

  async def _run() -> int:
    async with PropertyApi(args.api_url) as api:
      return await run_command(args, api, favorites)

  return asyncio.run(_run())


if __name__ == "__main__":  # pragma: no cover
  raise SystemExit(main())

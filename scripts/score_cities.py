#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from backend.cityscore.config import configure_logging
from backend.cityscore.schemas import CityMetricsRecord, ScoreRequest, ScoringResult, UserPreferences
from backend.cityscore.scoring.display import label, relative_to_average
from backend.cityscore.scoring.engine import score_cities

EXIT_INVALID_ARGS = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rank cities from a JSON metrics file against a set of user preferences."
    )
    parser.add_argument(
        "--cities",
        type=Path,
        required=True,
        help="JSON file holding a list of city metric records (or an object with a 'cities' key).",
    )
    parser.add_argument(
        "--preferences",
        type=Path,
        default=None,
        help="JSON file holding user preferences. Defaults are used when omitted.",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of ranked cities to print (default: 10).",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Optional output JSON file for the full scoring result.",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print output JSON with indentation.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: LOG_LEVEL env var, else INFO).",
    )
    return parser


def validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if not args.cities.is_file():
        parser.error(f"--cities file not found: {args.cities}")
    if args.preferences is not None and not args.preferences.is_file():
        parser.error(f"--preferences file not found: {args.preferences}")
    if args.top <= 0:
        parser.error("--top must be > 0.")
    if args.log_level and not isinstance(logging.getLevelName(args.log_level.upper()), int):
        parser.error(f"--log-level is not a logging level: {args.log_level}")


def _read_json(path: Path) -> object:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def load_request(cities_path: Path, preferences_path: Path | None) -> ScoreRequest:
    """Parse the input files; raises ValueError for unreadable or invalid input."""
    try:
        raw_cities = _read_json(cities_path)
        raw_preferences = _read_json(preferences_path) if preferences_path else {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc}") from exc

    if isinstance(raw_cities, dict):
        raw_cities = raw_cities.get("cities", [])

    try:
        cities = TypeAdapter(list[CityMetricsRecord]).validate_python(raw_cities)
        preferences = UserPreferences.model_validate(raw_preferences)
        return ScoreRequest(cities=cities, preferences=preferences)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


def print_summary(result: ScoringResult, top: int) -> None:
    print(f"Cities scored: {result.included_count} included, {result.excluded_count} excluded")
    print("")
    for rank, city in enumerate(result.rankings[:top], start=1):
        name = f"{city.city_name}, {city.state}" if city.state else city.city_name
        if city.excluded:
            print(f"{rank:>3}. {name}: excluded ({city.exclusion_reason})")
            continue
        print(
            f"{rank:>3}. {name}: {city.total_score:.1f} {city.grade} "
            f"({label(city.total_score)}, {relative_to_average(city.total_score)})"
        )
        print(
            f"     climate {city.climate_score:.0f} | cost {city.cost_score:.0f} | "
            f"demographics {city.demographics_score:.0f} | qol {city.quality_of_life_score:.0f} | "
            f"values {city.values_score:.0f} | entertainment {city.entertainment_score:.0f}"
        )


def write_output(result: ScoringResult, output_path: Path, pretty: bool) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = result.model_dump(mode="json", by_alias=True)
    with output_path.open("w", encoding="utf-8") as f:
        if pretty:
            json.dump(payload, f, indent=2, ensure_ascii=True)
            f.write("\n")
        else:
            json.dump(payload, f, ensure_ascii=True)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    validate_args(parser, args)

    configure_logging(logging.getLevelName(args.log_level.upper()) if args.log_level else None)

    try:
        request = load_request(args.cities, args.preferences)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID_ARGS

    result = score_cities(request.cities, request.preferences)
    if args.out is not None:
        write_output(result, args.out, pretty=args.pretty)
        print(f"Saved: {args.out}")
    print_summary(result, args.top)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

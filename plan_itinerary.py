#!/usr/bin/env python3
"""
Plan jet lag recovery for an itinerary from a JSON request file.

Usage: python3 plan_itinerary.py <request_file.json>

Request:
    {
        "legs": [{"origin_airport_code": "JFK", "origin_tz": "America/New_York",
                  "destination_airport_code": "LHR", "destination_tz": "Europe/London",
                  "departure": "2026-03-10T22:00", "arrival": "2026-03-11T10:00"}, ...],
        "preferences": {"recovery_mode": "aggressive", ...},   (optional)
        "confirmation": "confirmed" | "forced"                 (optional)
    }

Without a confirmation, itineraries that need the user's review are
returned unplanned with can_proceed set. The validation result and one plan
per journey are written as JSON to stdout.
"""

import json
import sys
from dataclasses import fields, is_dataclass
from datetime import date

from jetlag.scheduling.adaptation_planner import MultiLegAdaptationPlanner
from jetlag.scheduling.journey_builder import commit_journey, create_multi_leg_journey
from jetlag.timezone_math import UnknownTimezoneError
from jetlag.types import FlightLeg, UserPreferences


def to_dict(obj: object) -> object:
    """Convert dataclass instances to dicts recursively, datetimes to ISO strings."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_dict(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    elif isinstance(obj, dict):
        return {k: to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, date):
        return obj.isoformat()
    else:
        return obj


def plan_request(data: dict) -> dict:
    """Run validation, journey construction and planning for one request."""
    legs = [FlightLeg.from_dict(leg) for leg in data["legs"]]
    preferences = UserPreferences(**data["preferences"]) if data.get("preferences") else None
    confirmation = data.get("confirmation")

    if confirmation:
        result = commit_journey(legs, confirmation, preferences)
    else:
        result = create_multi_leg_journey(legs, preferences)

    journeys = result.journeys or ([result.journey] if result.journey else [])
    planner = MultiLegAdaptationPlanner()

    return {
        "success": result.success,
        "can_proceed": result.can_proceed,
        "split_reason": result.split_reason,
        "validation": to_dict(result.validation),
        "group_validations": to_dict(result.group_validations),
        "plans": [to_dict(planner.plan(journey)) for journey in journeys],
    }


def main() -> None:
    if len(sys.argv) != 2:
        print(json.dumps({"error": "Usage: plan_itinerary.py <request_file.json>"}))
        sys.exit(1)

    request_file = sys.argv[1]

    try:
        with open(request_file) as f:
            data = json.load(f)

        print(json.dumps(plan_request(data)))

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        sys.exit(1)
    except UnknownTimezoneError as e:
        print(json.dumps({"error": f"Unknown timezone: {e}"}))
        sys.exit(1)
    except KeyError as e:
        print(json.dumps({"error": f"Missing required field: {e}"}))
        sys.exit(1)
    except Exception as e:
        print(json.dumps({"error": f"Itinerary planning failed: {e}"}))
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Seed a running notes service with sample notes.

Adds a handful of notes through the HTTP API, then lists what the
service holds. Requires the service to be running.

Usage:
    python -m scripts.seed_notes [--base-url http://localhost:5000]

Run it from the repository root (or after ``pip install -e .``) so the
``notes_service`` package is importable.
"""

from __future__ import annotations

import argparse
import sys

import requests

from notes_service import client

DEFAULT_BASE_URL = "http://localhost:5000"

# Each entry: (title, tags, body)
NOTES: list[tuple[str, list[str], str]] = [
    ("Shopping", ["errand"], "Buy milk"),
    (
        "Meeting Notes",
        ["work", "meetings"],
        "Agreed to ship the notes API before the end of the sprint.",
    ),
    ("Reading List", ["personal", "books"], "Designing Data-Intensive Applications"),
    ("Ideas", [], "Tag suggestions based on note history."),
]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the notes service.")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    args = parser.parse_args(argv)

    print(f"\n  Seeding {len(NOTES)} notes into {args.base_url}\n")
    failures = 0
    for i, (title, tags, body) in enumerate(NOTES, 1):
        try:
            result = client.add_note(title, body, tags, base_url=args.base_url)
            print(f"  [{i}/{len(NOTES)}] {title} -> {result['data']['noteId']}")
        except requests.RequestException as e:
            failures += 1
            print(f"  [{i}/{len(NOTES)}] {title} -> ERROR: {e}")

    try:
        stored = client.get_notes(base_url=args.base_url)["data"]["notes"]
    except requests.RequestException as e:
        print(f"\n  Could not list notes: {e}\n")
        return 1

    print(f"\n  Service now holds {len(stored)} notes.")
    print(f"  API docs: {args.base_url}/docs\n")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

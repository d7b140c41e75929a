#!/usr/bin/env python3
"""
Print a month from a running calendar server, optionally adding an event first.

Days with events are marked with '*', today is wrapped in brackets.

Usage:
    uv run python src/scripts/show_month.py --month 2024-03
    uv run python src/scripts/show_month.py --add 2024-03-15 "Dentist"
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.calendar_grid import WEEKDAY_LABELS, build_month_grid, decorate_grid, parse_date_key
from core.config import CALENDAR_API_URL
from ui.client import CalendarSession, EventsClient, EventsClientError
from ui.state import CalendarState, navigate_to


def format_month(state: CalendarState) -> str:
    """Render the state's month as a text table followed by its events."""
    grid = build_month_grid(state.year, state.month)
    weeks = decorate_grid(grid, state.year, state.month, state.today, state.events)

    lines = [date(state.year, state.month, 1).strftime("%B %Y").center(7 * 5)]
    lines.append("".join(label.rjust(5) for label in WEEKDAY_LABELS))
    for week in weeks:
        cells = []
        for cell in week:
            if cell["day"] is None:
                cells.append("")
                continue
            text = f"[{cell['day']}]" if cell["is_today"] else str(cell["day"])
            cells.append(text + ("*" if cell["has_events"] else ""))
        lines.append("".join(text.rjust(5) for text in cells))

    for key in sorted(state.events):
        for event in state.events[key]:
            lines.append(f"{key}  {event['title']}")

    return "\n".join(lines)


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM."""
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got '{value}'")
    return parsed.year, parsed.month


def main():
    parser = argparse.ArgumentParser(description="Show a calendar month from the calendar server")
    parser.add_argument(
        "--month",
        type=parse_month,
        help="Month to show (YYYY-MM). Defaults to the current month",
    )
    parser.add_argument(
        "--add",
        nargs=2,
        metavar=("DATE", "TITLE"),
        help="Add an event (YYYY-MM-DD and title) before showing its month",
    )
    parser.add_argument("--url", default=CALENDAR_API_URL, help="Calendar server base URL")

    args = parser.parse_args()

    client = EventsClient(base_url=args.url)
    session = CalendarSession(client)

    try:
        if args.add:
            try:
                day = parse_date_key(args.add[0])
            except ValueError as e:
                parser.error(str(e))
            try:
                event = client.create_event(args.add[0], args.add[1])
            except EventsClientError as e:
                print(f"Error adding event: {e}")
                sys.exit(1)
            print(f"Added event {event['id']} on {event['date']}")
            session.dispatch(navigate_to(day.year, day.month))
            session.load_month()
        elif args.month:
            session.dispatch(navigate_to(*args.month))
            session.load_month()
        else:
            session.load_month()
    finally:
        client.close()

    print(format_month(session.state))
    if session.state.error:
        print(f"\nError: {session.state.error}")
        sys.exit(1)


if __name__ == "__main__":
    main()

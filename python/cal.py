#!/usr/bin/env python3
"""
Name: cal
Description: displays a calendar with Japanese month and weekday labels
Author: Radish-Miyazaki, y.hidaka.kobe@gmail.com
License:
"""

import sys
import os
import argparse
import re
from collections import namedtuple
from datetime import date, timedelta

__version__ = '0.1.0'

MonthName = namedtuple('MonthName', ['en', 'ja'])

# English names are only used to resolve -m prefixes; the Japanese
# labels are what gets printed.
MONTH_NAMES = (
    MonthName('January', '1月'),
    MonthName('February', '2月'),
    MonthName('March', '3月'),
    MonthName('April', '4月'),
    MonthName('May', '5月'),
    MonthName('June', '6月'),
    MonthName('July', '7月'),
    MonthName('August', '8月'),
    MonthName('September', '9月'),
    MonthName('October', '10月'),
    MonthName('November', '11月'),
    MonthName('December', '12月'),
)

WEEKDAY_HEADER = '日 月 火 水 木 金 土  '
MONTH_WIDTH = 22
MONTH_LINES = 8

REVERSE = '\033[7m'
RESET = '\033[0m'


class InvalidYear(ValueError):
    pass


class InvalidMonth(ValueError):
    pass


def debug_print(level, message):
    """Writes a trace line to stderr when `level` is listed in CAL_DEBUG."""
    debug_env = os.environ.get('CAL_DEBUG')
    if debug_env is not None and level in debug_env:
        print(f"{level}>>> {message}", file=sys.stderr)

# --- Highlighting ---

def reverse_video(text: str) -> str:
    """Wraps text in the ANSI inverse-video sequence."""
    return f"{REVERSE}{text}{RESET}"

def no_highlight(text: str) -> str:
    return text

# --- Date Calculation Functions ---

def last_day_in_month(year: int, month: int) -> date:
    """Returns the last day of the month, i.e. the day before the next month's 1st."""
    if month == 12:
        # date(10000, 1, 1) is out of range, so December is never rolled over.
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)

def weekday_from_sunday(day: date) -> int:
    """Day of the week counted from Sunday=1 to Saturday=7."""
    return day.isoweekday() % 7 + 1

# --- Formatting Functions ---

def format_month(year: int, month: int, print_year: bool, today: date,
                 highlight=reverse_video) -> list:
    """
    Renders one month as exactly MONTH_LINES lines.

    With `print_year` the header carries the year (single month view);
    without it the label is centred so three months can sit side by side
    under a common year header. Short months are padded with blank lines
    so every block has the same height.
    """
    label = MONTH_NAMES[month - 1].ja
    first_weekday = weekday_from_sunday(date(year, month, 1))
    last_day = last_day_in_month(year, month)
    last_weekday = weekday_from_sunday(last_day)

    if print_year:
        lines = [f"{label:>8} {year:<13}"]
    else:
        lines = [f"{label:^20}  "]
    lines.append(WEEKDAY_HEADER)

    line = ' ' * (3 * (first_weekday - 1))
    for day in range(1, last_day.day + 1):
        cell = f"{day:>2}"
        if (today.year, today.month, today.day) == (year, month, day):
            cell = highlight(cell)
        line += cell + ' '
        if (first_weekday - 1 + day) % 7 == 0:
            lines.append(line + ' ')
            line = ''

    if last_weekday != 7:
        line += ' ' * (3 * (7 - last_weekday))
        lines.append(line + ' ')

    while len(lines) < MONTH_LINES:
        lines.append(' ' * MONTH_WIDTH)

    return lines

def format_year(year: int, today: date, highlight=reverse_video) -> list:
    """Renders all twelve months, three per row, under a single year header."""
    lines = [f"{year:>32}"]
    for quarter in range(4):
        months = [
            format_month(year, quarter * 3 + m, False, today, highlight)
            for m in (1, 2, 3)
        ]
        for first, second, third in zip(*months):
            lines.append(first + second + third)
        if quarter != 3:
            lines.append('')
    return lines

# --- Argument Handling ---

def parse_year(text: str) -> int:
    """Parses a year between 1 and 9999."""
    if not re.fullmatch(r'[+-]?[0-9]+', text):
        raise InvalidYear(f'invalid year "{text}"')
    year = int(text)
    if not 1 <= year <= 9999:
        raise InvalidYear(f'year "{year}" not in the range 1 through 9999')
    return year

def parse_month(text: str) -> int:
    """
    Parses a month number between 1 and 12, or a case-insensitive prefix
    of an English month name. The prefix has to select exactly one month:
    "ju" matches both June and July and is rejected.
    """
    if not re.fullmatch(r'\+?[0-9]+', text):
        prefix = text.lower()
        matches = [i for i, name in enumerate(MONTH_NAMES, start=1)
                   if name.en.lower().startswith(prefix)]
        if len(matches) != 1:
            raise InvalidMonth(f'invalid month "{prefix}"')
        return matches[0]
    month = int(text)
    if not 1 <= month <= 12:
        raise InvalidMonth(f'month "{month}" not in the range 1 through 12')
    return month

def resolve_request(parsed_args, today: date):
    """
    Works out what to display. Returns (year, month, print_year); month
    is None when the whole year is wanted.
    """
    if parsed_args.show_current_year:
        return today.year, None, False

    year = parse_year(parsed_args.year) if parsed_args.year is not None else None
    if parsed_args.month is not None:
        month = parse_month(parsed_args.month)
        return (year if year is not None else today.year), month, True
    if year is not None:
        return year, None, False
    return today.year, today.month, True

def build_parser():
    parser = argparse.ArgumentParser(
        prog='cal',
        description="Displays a calendar.",
        usage="%(prog)s [-hvyH] [-m month] [year]"
    )
    parser.add_argument('-m', '--month', help='Month name or number (1-12).')
    parser.add_argument('-y', '--year', dest='show_current_year', action='store_true',
                        help='Show the whole current year.')
    parser.add_argument('-H', '--no-highlight', action='store_true',
                        help="Don't highlight today's date.")
    parser.add_argument('-v', '--version', action='version',
                        version=f'%(prog)s {__version__}')
    parser.add_argument('year', nargs='?', metavar='YEAR', help='Year (1-9999).')
    return parser

def run(args, today=None):
    """Parses arguments and prints the requested calendar."""
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.show_current_year:
        if parsed_args.month is not None:
            parser.error("argument -y/--year: not allowed with argument -m/--month")
        if parsed_args.year is not None:
            parser.error("argument -y/--year: not allowed with argument YEAR")

    if today is None:
        today = date.today()

    try:
        year, month, print_year = resolve_request(parsed_args, today)
    except ValueError as e:
        sys.stderr.write(f"{parser.prog}: {e}\n")
        sys.exit(1)

    highlight = reverse_video
    if parsed_args.no_highlight or os.environ.get('NO_COLOR'):
        highlight = no_highlight
    debug_print('a', f"year={year} month={month} print_year={print_year} today={today}")

    if month is None:
        lines = format_year(year, today, highlight)
    else:
        lines = format_month(year, month, print_year, today, highlight)
    debug_print('r', f"rendered {len(lines)} lines")

    for line in lines:
        print(line)
    return 0

def main():
    sys.exit(run(sys.argv[1:]))

if __name__ == "__main__":
    main()

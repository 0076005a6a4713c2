import logging
import re
import sys
from datetime import datetime
from typing import Optional, Sequence

import click

import togglcopy
from togglcopy.dates import resolve_zone, target_day
from togglcopy.errors import ArgumentParseError, CopyError, UsageError
from togglcopy.model import Config
from togglcopy.toggl import DEFAULT_BASE_URL, shift_entries

logger = logging.getLogger('togglcopy')

DEFAULT_OFFSET = 2


def parse_offset(args: Sequence[str]) -> int:
    if len(args) == 0:
        return DEFAULT_OFFSET
    if len(args) > 1:
        raise UsageError(f'Too many arguments: expected at most one day offset, got {len(args)}')
    if not re.fullmatch(r'[+-]?\d+', args[0], re.ASCII):
        raise ArgumentParseError(f'Day offset must be an integer, got {args[0]!r}')
    return int(args[0])


def copy_day(config: Config, offset: int, dry_run: bool = False, now: Optional[datetime] = None) -> int:
    """Copy every entry of the day `offset` days from today to the day after it.

    Returns:
        int: Number of entries created (or that would have been, on a dry run).
    """

    logger.info('Copy all time entries at the day shifted %d days from today to the next day.', offset)
    day = target_day(offset, config.time_zone, now=now)

    with togglcopy.client(config.token, config.base_url) as client:
        entries = client.fetch_day_entries(day)
        logger.info('Found %d time entries at %s', len(entries), day.strftime('%B %d, %Y'))

        shifted = shift_entries(togglcopy.sanitize(entries), config.time_zone)
        if dry_run:
            count = 0
            for entry in shifted:
                logger.info('Would create: %s - %s', entry['start'], entry['stop'])
                count += 1
            return count

        count = client.create_entries(shifted)

    logger.info('Copied all time entries')
    return count


@click.command(context_settings={'ignore_unknown_options': True})
@click.argument('offset', nargs=-1, type=click.UNPROCESSED)
@click.option('--token', '-t', envvar='API_TOKEN', required=True, help='Toggl API token.')
@click.option('--base-url', envvar='API_BASE_URL', default=DEFAULT_BASE_URL, show_default=True)
@click.option('--time-zone', '-z', envvar='TIME_ZONE', default='UTC', show_default=True,
              help='IANA time zone the day boundaries are computed in.')
@click.option('--dry-run', is_flag=True, help='Show what would be created without creating anything.')
@click.option('--verbose', '-v', is_flag=True)
def cmd(offset, token, base_url, time_zone, dry_run, verbose):
    """Copy one day's time entries to the next day.

    OFFSET is the day to copy, in days from today (default: 2). It may be negative:

        togglcopy -1

        This copies yesterday's entries to today.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    try:
        days = parse_offset(offset)
        config = Config(token=token, base_url=base_url, time_zone=resolve_zone(time_zone))
        copy_day(config, days, dry_run=dry_run)
    except CopyError as e:
        logger.critical('Fatal: %s', e)
        sys.exit(1)


if __name__ == '__main__':
    cmd()

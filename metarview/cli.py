#!/usr/bin/env python3

import sys
import argparse
import logging
from typing import List, Optional

from metarview import config
from metarview.briefing import Briefing
from metarview.render import render_csv, render_json, render_text
from metarview.sources.noaa import NoaaSource
from metarview.weather.models import Minima

logger = logging.getLogger(__name__)

RENDERERS = {
    'text': render_text,
    'json': render_json,
    'csv': render_csv,
}


class Command:
    """Command-line interface for metarview."""

    def __init__(self, args, source: Optional[NoaaSource] = None):
        """
        Args:
            args: Parsed command line arguments
            source: NOAA source, created on demand when stations are requested
        """
        self.args = args
        self.source = source

    def collect_reports(self) -> List[str]:
        """Raw lines given on the command line followed by any fetched for --icao."""
        raws = list(self.args.metar or [])
        if not self.args.icao:
            return raws

        if self.source is None:
            self.source = NoaaSource()
        for icao in self.args.icao:
            if self.args.icao_history > 0:
                fetched = self.source.fetch_history(icao, self.args.icao_history)
                if not fetched:
                    print(f"Failed to fetch historical METARs for {icao}", file=sys.stderr)
                raws.extend(fetched)
            else:
                latest = self.source.fetch_latest(icao)
                if latest is None:
                    print(f"Failed to fetch METAR for {icao}", file=sys.stderr)
                else:
                    raws.append(latest)
        return raws

    def run(self) -> int:
        raws = self.collect_reports()
        if not raws:
            print("No METARs provided or fetched.", file=sys.stderr)
            return 1

        briefing = Briefing(
            raw_reports=raws,
            minima=self.args.minima,
            runway_heading=self.args.runway,
            taf_raw=self.args.taf,
        )
        output = RENDERERS[self.args.format](briefing)

        if self.args.output:
            with open(self.args.output, 'w') as f:
                f.write(output)
            logger.info(f'Results saved to {self.args.output}')
        else:
            print(output)
        return 0


def runway_heading(value: str) -> int:
    """argparse type for a runway heading in whole degrees, 0-360."""
    try:
        heading = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid runway heading: {value!r}")
    if not 0 <= heading <= 360:
        raise argparse.ArgumentTypeError(f"runway heading must be between 0 and 360, got {heading}")
    return heading


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Decode METARs, check minima and show trends')
    parser.add_argument('-m', '--metar', help='Raw METAR text (repeatable, oldest first)', action='append')
    parser.add_argument('--icao', help='Fetch the latest METAR for a station (repeatable)', action='append')
    parser.add_argument('--icao-history', help='Fetch the last N METARs per --icao station instead', type=int, default=0)
    parser.add_argument('-t', '--taf', help='Raw TAF text, shown undecoded')
    parser.add_argument('--runway', help='Runway magnetic heading in degrees for wind components', type=runway_heading)
    parser.add_argument('--min-ceiling', help='Minimum ceiling in feet', type=float, default=config.MIN_CEILING_FT)
    parser.add_argument('--min-vis', help='Minimum visibility in statute miles', type=float, default=config.MIN_VISIBILITY_SM)
    parser.add_argument('--max-xwind', help='Maximum crosswind in knots', type=float, default=config.MAX_CROSSWIND_KT)
    parser.add_argument('--format', help='Output format', choices=sorted(RENDERERS), default='text')
    parser.add_argument('-o', '--output', help='Output file path')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.metar and not args.icao:
        parser.print_usage(sys.stderr)
        return 1

    try:
        args.minima = Minima(
            min_ceiling_ft=args.min_ceiling,
            min_visibility_sm=args.min_vis,
            max_crosswind_kt=args.max_xwind,
        )
    except ValueError as e:
        parser.error(str(e))

    cmd = Command(args)
    return cmd.run()


if __name__ == '__main__':
    sys.exit(main())

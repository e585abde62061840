#!/usr/bin/env python3
"""
Unused CSS Module Class Detector
Main entry point for the application.
"""

import argparse
import logging
import sys
from dataclasses import replace

from comparator.report_builder import ReportBuilder
from core.config import DEFAULT_CONFIG, load_config
from core.errors import ConfigError
from core.unused_class_finder import analyze_workspace


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description='Report CSS module classes that their paired component never references')
    ap.add_argument('root', help='Directory to scan for *.module.scss files')
    ap.add_argument('--format', choices=['text', 'json', 'html'], default='text')
    ap.add_argument('--output', help='Write the report to this file instead of stdout')
    ap.add_argument('--config', help='JSON configuration file')
    ap.add_argument('--workers', type=int, help='Analyze file pairs on this many threads')
    ap.add_argument('--namespace', action='append',
                    help='Identifier the style module is imported as (repeatable)')
    ap.add_argument('--no-fail', action='store_true', help='Exit with 0 even when unused classes are found')
    ap.add_argument('--verbose', '-v', action='store_true')
    return ap


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        config = load_config(args.config) if args.config else DEFAULT_CONFIG
    except ConfigError as e:
        print(f'error: {e}', file=sys.stderr)
        return 2
    if args.workers:
        config = replace(config, max_workers=args.workers)
    if args.namespace:
        config = replace(config, namespace_identifiers=tuple(args.namespace))

    report = analyze_workspace(args.root, config=config)
    builder = ReportBuilder()
    builder.collect_metrics(report)
    if args.output:
        builder.write(args.output, args.format)
    else:
        sys.stdout.write(builder.render(args.format))

    if report.unused_count and not args.no_fail:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Script to decompile JDE event rule XML into readable text.

This script:
1. Reads one or more event rule XML files (GBREvent documents)
2. Reads the data structure template (DSTMPL) paired with them
3. Optionally loads a spec catalog for table I/O and business function lines
4. Prints the readable, tab-indented event rules

Usage:
    python scripts/decompile_event_rules.py event.xml --template D4200310.xml
    python scripts/decompile_event_rules.py part1.xml part2.xml --template D4200310.xml \
        --catalog data/specs/catalog.yml --templates-dir data/specs/templates
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jde_er.event_rules.config import configure_logging, get_config
from jde_er.event_rules.er_decoder.decoder import decompile
from jde_er.event_rules.er_decoder.spec_resolver import CachingSpecResolver
from jde_er.event_rules.errors import ErDecompileError
from jde_er.event_rules.repository.spec_repository import SpecRepository

logger = logging.getLogger(__name__)


def build_spec_resolver(catalog: Path | None, templates_dir: Path | None) -> CachingSpecResolver | None:
    """Spec resolver over the file-backed repository, or None when nothing is configured."""
    if catalog is not None and not Path(catalog).exists():
        logger.warning("Spec catalog %s not found; table and business function lines are skipped", catalog)
        catalog = None
    if catalog is None and templates_dir is None:
        return None
    return CachingSpecResolver(SpecRepository.from_files(catalog, templates_dir))


def main():
    parser = argparse.ArgumentParser(description="Decompile JDE event rule XML into readable text")
    parser.add_argument("events", type=Path, nargs="+", help="Event rule XML file(s), decompiled in order")
    parser.add_argument("--template", type=Path, required=True, help="Data structure template XML file")
    parser.add_argument("--template-name", help="Template name (default: read from the template XML)")
    parser.add_argument("--catalog", type=Path, help="YAML spec catalog (tables, data dictionary, BSFNs)")
    parser.add_argument("--templates-dir", type=Path, help="Directory of <template>.xml files")
    parser.add_argument("--env", default=None, help="Configuration environment (prd, acc, dev, local)")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")

    args = parser.parse_args()

    config = get_config(args.env)
    configure_logging(args.log_level)

    for path in [*args.events, args.template]:
        if not path.exists():
            print(f"ERROR: File does not exist: {path}")
            sys.exit(1)

    catalog = args.catalog or config.spec_store.catalog_path
    templates_dir = args.templates_dir or config.spec_store.templates_dir
    spec_resolver = build_spec_resolver(catalog, templates_dir)

    try:
        result = decompile(
            [path.read_bytes() for path in args.events],
            args.template.read_bytes(),
            spec_resolver=spec_resolver,
            template_name=args.template_name,
        )
    except ErDecompileError as e:
        logger.error("Decompile failed: %s", e)
        print(f"ERROR: {e}")
        sys.exit(1)

    logger.info("%s (event %s, template %s)", result.status_message, result.root_event_spec_key, result.template_name)
    if result.readable_text:
        sys.stdout.write(result.readable_text)
    else:
        print(result.status_message)


if __name__ == "__main__":
    main()

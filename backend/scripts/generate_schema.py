#!/usr/bin/env python3
"""Write the JSON Schema bundle of the published record types.

Usage:
    cd backend
    python scripts/generate_schema.py --output schema.json
"""

import argparse
import logging
import sys
from pathlib import Path

import orjson

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.models.schema import schema_bundle  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate JSON Schema bundle")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(__file__).parent.parent / "schema.json",
        help="Output path (default: backend/schema.json)",
    )
    args = parser.parse_args()

    bundle = schema_bundle()
    args.output.write_bytes(orjson.dumps(bundle, option=orjson.OPT_INDENT_2))
    logger.info(f"Generated JSON Schema bundle ({len(bundle['schemas'])} schemas): {args.output}")


if __name__ == "__main__":
    main()

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from owner_lookup.address import AddressNormalizer
from owner_lookup.config import load_normalizer
from owner_lookup.models import AddressRecord

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Owner Lookup: normalize street addresses for the county property search."
    )
    parser.add_argument(
        "addresses", nargs="*", metavar="ADDRESS", help="Raw address, e.g. '123 Main Street, Atlanta, GA 30303'"
    )
    parser.add_argument(
        "--from-file",
        type=str,
        metavar="PATH",
        help="Read addresses from a JSON list (strings or objects with 'address') or a text file, one per line",
    )
    parser.add_argument(
        "--save",
        type=str,
        metavar="PATH",
        help="Write the raw/normalized pairs to this JSON file",
    )
    parser.add_argument(
        "--tables",
        type=str,
        metavar="PATH",
        help="JSON file with extra abbreviations/city tokens (overrides $ADDRESS_TABLES_PATH)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as a JSON array instead of a table",
    )

    args = parser.parse_args(argv)

    if not args.addresses and not args.from_file:
        parser.error("Either an ADDRESS or --from-file is required.")

    return args


def load_addresses_from_file(path: str) -> list[str]:
    """Load raw addresses from a JSON list or a plain text file."""
    with open(path, encoding="utf-8") as f:
        content = f.read()

    try:
        raw = json.loads(content)
    except json.JSONDecodeError:
        raw = None
    # A text line such as "30303" is valid JSON too.
    if not isinstance(raw, (list, dict, str)):
        return [line.strip() for line in content.splitlines() if line.strip()]

    if not isinstance(raw, list):
        raw = [raw]
    addresses = []
    for item in raw:
        if isinstance(item, dict):
            item = item.get("address")
        if isinstance(item, str) and item.strip():
            addresses.append(item)
        else:
            logger.warning("Skipping entry without an address in %s: %r", path, item)
    return addresses


def normalize_all(addresses: list[str], normalizer: AddressNormalizer) -> list[AddressRecord]:
    return [AddressRecord(raw=a, normalized=normalizer.normalize(a)) for a in addresses]


def save_records_to_file(records: list[AddressRecord], path: str) -> None:
    out = [r.model_dump() for r in records]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(out, f, indent=2)
    logger.info("Saved %d addresses to %s", len(out), path)


def print_summary(records: list[AddressRecord]):
    print("\n" + "=" * 80)
    print("NORMALIZED ADDRESSES")
    print("=" * 80)

    if not records:
        print("  No addresses to display.")
        print("=" * 80)
        return

    print(f"  {'Raw':<40} {'Normalized':<36}")
    print("-" * 80)
    for record in records:
        normalized = record.normalized or "(empty)"
        print(f"  {record.raw[:39]:<40} {normalized[:36]:<36}")

    empty = sum(1 for r in records if not r.normalized)
    print("-" * 80)
    print(f"  Addresses: {len(records)}   Empty after normalizing: {empty}")
    print("=" * 80)


def run(args) -> int:
    try:
        normalizer = load_normalizer(args.tables)
        addresses = list(args.addresses)
        if args.from_file:
            logger.info("Loading addresses from %s", args.from_file)
            addresses.extend(load_addresses_from_file(args.from_file))

        records = normalize_all(addresses, normalizer)

        if args.save:
            save_records_to_file(records, args.save)
    except Exception as e:
        logger.error(f"Run failed: {e}", exc_info=True)
        return 1

    if args.json:
        print(json.dumps([r.model_dump() for r in records], indent=2))
    else:
        print_summary(records)
    return 0


def main():
    args = parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()

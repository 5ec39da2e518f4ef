import argparse
import json
import sys
from pathlib import Path

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from partnership_map.records import PartnershipRecord, load_records  # noqa: E402

DEFAULT_INPUT = Path("data/oia_partnerships_geocoded.csv")
DEFAULT_OUTPUT = Path("data/partnerships.json")


def record_to_json(record: PartnershipRecord) -> dict:
    return {
        "institution": record.institution,
        "country": record.country,
        "city": record.city,
        "location": record.place_label,
        "lat": record.location.lat,
        "lng": record.location.lng,
        "partnerships": [
            {
                "type": entry.type,
                "description": entry.description,
                "program": entry.program,
                "inUnit": entry.in_unit,
                "url": entry.url,
            }
            for entry in record.partnerships
        ],
    }


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        description="Group the geocoded partnership CSV (one row per agreement) into dashboard JSON."
    )
    parser.add_argument("input", nargs="?", default=str(DEFAULT_INPUT))
    parser.add_argument("-o", "--output", default=str(DEFAULT_OUTPUT))
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        raise FileNotFoundError(f"{input_path} not found.")
    records = load_records(str(input_path))

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump({"locations": [record_to_json(r) for r in records]}, f, indent=2, ensure_ascii=False)

    entries = sum(len(r.partnerships) for r in records)
    print(f"Wrote {len(records)} institutions ({entries} agreements) to {output_path}")


if __name__ == "__main__":
    main()

import json
import os
from pathlib import Path

import requests
from dotenv import load_dotenv

DEFAULT_URL = (
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
    "master/geojson/ne_50m_admin_0_countries.geojson"
)
OUTPUT_PATH = Path("data/country_boundaries.geojson")
KEEP_PROPERTIES = ("NAME_LONG", "NAME", "ADMIN", "ISO_A3")


def main() -> None:
    load_dotenv()
    url = os.getenv("BOUNDARIES_SOURCE_URL", DEFAULT_URL).strip()
    OUTPUT_PATH.parent.mkdir(parents=True, exist_ok=True)

    resp = requests.get(url, timeout=120)
    resp.raise_for_status()
    data = resp.json()
    features = data.get("features") if isinstance(data, dict) else None
    if not features:
        raise RuntimeError(f"No features found in boundary file at {url}")

    # Drop the long tail of Natural Earth attributes; the map only joins on names.
    slim = []
    for feature in features:
        props = feature.get("properties") or {}
        slim.append(
            {
                "type": "Feature",
                "properties": {key: props.get(key) for key in KEEP_PROPERTIES if key in props},
                "geometry": feature.get("geometry"),
            }
        )

    with OUTPUT_PATH.open("w", encoding="utf-8") as f:
        json.dump({"type": "FeatureCollection", "features": slim}, f)

    print(f"Wrote {len(slim)} country features to {OUTPUT_PATH}")
    print(f"Set BOUNDARIES_URL={OUTPUT_PATH.resolve()} to use the local copy.")


if __name__ == "__main__":
    main()

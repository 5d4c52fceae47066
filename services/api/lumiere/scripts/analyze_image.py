#!/usr/bin/env python3
"""Send a garment photo to the styling API the same way the web app's upload page does.

Usage:
    # With a local image file:
    lumiere-analyze --image path/to/shirt.jpg

    # With a URL (downloads first):
    lumiere-analyze --url "https://example.org/kurta.jpg"
"""
from __future__ import annotations

import argparse
import mimetypes
import sys

import httpx
from dotenv import load_dotenv

DEFAULT_API_BASE = "http://localhost:3000"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze a garment photo with the Lumière stylist API.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", default=None, help="Path to a local JPEG/PNG image file.")
    source.add_argument("--url", default=None, help="URL of an image to download and send.")
    parser.add_argument("--api-base", default=DEFAULT_API_BASE, help="Stylist API base URL.")
    parser.add_argument("--timeout", type=float, default=120.0, help="Request timeout in seconds.")
    return parser.parse_args(argv)


def load_image(path: str | None, url: str | None) -> tuple[bytes, str]:
    if path:
        print(f"Loading image from file: {path}")
        with open(path, "rb") as f:
            data = f.read()
        return data, mimetypes.guess_type(path)[0] or "image/jpeg"

    print(f"Downloading image: {url}")
    resp = httpx.get(url, timeout=15, follow_redirects=True)
    resp.raise_for_status()
    content_type = resp.headers.get("content-type", "image/jpeg").split(";", 1)[0]
    return resp.content, content_type


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)

    image_bytes, content_type = load_image(args.image, args.url)
    print(f"Image size: {len(image_bytes):,} bytes ({content_type})")

    endpoint = f"{args.api_base.rstrip('/')}/api/styling/analyze"
    print(f"POST {endpoint}")

    try:
        resp = httpx.post(
            endpoint,
            headers={"Content-Type": content_type},
            content=image_bytes,
            timeout=args.timeout,
        )
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        print(f"error: API returned {exc.response.status_code}: {exc.response.text}", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(f"error: request failed: {exc}", file=sys.stderr)
        return 1

    data = resp.json()
    analysis = data.get("analysis", {})
    print(f"\nSaved to wardrobe as #{data.get('id')}")
    for key in ("category", "color", "pattern", "style", "hairStyle", "hairColor"):
        if analysis.get(key):
            print(f"{key}: {analysis[key]}")
    if analysis.get("description"):
        print(f"\n{analysis['description']}")

    recs = data.get("recommendations", [])
    if recs:
        print(f"\n{len(recs)} recommendation(s):")
        for idx, r in enumerate(recs, start=1):
            score = f" [{r['matchScore']}]" if r.get("matchScore") is not None else ""
            price = f" — {r['priceRange']}" if r.get("priceRange") else ""
            platform = f" ({r['platform']})" if r.get("platform") else ""
            print(f"  {idx}. {r['name']}{score}{price}{platform}")
            print(f"     {r['purchaseUrl']}")
    else:
        print("\nNo recommendations returned.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

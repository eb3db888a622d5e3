#!/usr/bin/env python3
import argparse
import json
import os
import re
import sys

import asciisvg


def main() -> int:
    repo_dir = os.path.dirname(os.path.abspath(__file__))
    parser = argparse.ArgumentParser(description='Render the sample diagrams in test.json to SVG files.')
    parser.add_argument('--out-dir', default=os.path.join(repo_dir, 'samples'), help='Directory for the rendered SVGs')
    parser.add_argument('--print', dest='show', action='store_true', help='Echo each sample and its SVG')
    args = parser.parse_args()

    input_file = os.path.join(repo_dir, "test.json")
    if not os.path.isfile(input_file):
        print(f"test.json not found at {input_file}", file=sys.stderr)
        return 1

    with open(input_file, "r", encoding="utf-8") as f:
        samples = json.load(f)

    if not samples:
        print("No samples found.", file=sys.stderr)
        return 1

    os.makedirs(args.out_dir, exist_ok=True)

    for i, sample in enumerate(samples, start=1):
        title = sample.get("title") or f"Sample {i}"
        source = sample.get("source") or ""
        safe = re.sub(r"[^A-Za-z0-9._-]+", "_", title).strip("_")
        if not safe:
            safe = f"sample_{i}"

        svg = asciisvg.render_svg(source)
        path = os.path.join(args.out_dir, f"{i:03d}_{safe}.svg")
        with open(path, "w", encoding="utf-8") as f:
            f.write(svg + "\n")

        print(f"[{i:03d}] {title} -> {path}")
        if args.show:
            print("-" * 80)
            print(source)
            print("-" * 80)
            print(svg)
            print("=" * 80)

    print(f"Rendered {len(samples)} samples from {os.path.basename(input_file)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

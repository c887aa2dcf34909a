#!/usr/bin/env python3
"""Estimate the tempo of one or more audio files.

Usage:
    python scripts/estimate_bpm.py song.mp3
    python scripts/estimate_bpm.py a.wav b.flac --json
    python scripts/estimate_bpm.py song.wav --lowpass 3000 -v
"""

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from peaktempo.analysis.engine import AnalysisEngine


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Estimate BPM from amplitude peaks.")
    parser.add_argument("files", nargs="+", help="audio files to analyze")
    parser.add_argument("--json", action="store_true", help="print one JSON object per file")
    parser.add_argument("--lowpass", type=float, default=None, metavar="HZ",
                        help="low-pass cutoff applied before peak detection")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )
    for _name in ("numba", "PySoundFile"):
        logging.getLogger(_name).setLevel(logging.ERROR)

    engine = AnalysisEngine(lowpass_cutoff=args.lowpass)
    failures = 0
    for path in args.files:
        try:
            result = engine.analyze_file(path)
        except Exception as e:
            failures += 1
            if args.json:
                print(json.dumps({"file": path, "error": "load_error", "message": str(e)}))
            else:
                print(f"{path}: load error ({e})")
            continue

        if result.tempo.bpm is None:
            failures += 1
        if args.json:
            print(json.dumps({"file": path, **asdict(result)}))
        elif result.tempo.bpm is None:
            print(f"{path}: BPM unknown ({result.tempo.error})")
        else:
            print(f"{path}: {result.tempo.bpm} BPM "
                  f"({result.tempo.peak_count} peaks at {result.tempo.threshold:.2f})")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())

# tools/build_wordlist.py
"""
Build an uploadable word list (words_<lang>.txt) from a frequency source.

Requires: pip install wordfreq

Pulls the most common words of a language, keeps purely alphabetic tokens
of a sane length, NFC-normalizes them and writes one word per line, most
frequent first. Upload the result through the upload endpoint.
"""
import argparse
import unicodedata
from pathlib import Path

from wordfreq import top_n_list, zipf_frequency

OUT_DIR = Path(__file__).resolve().parents[1]


def is_ok(w: str, min_len: int, max_len: int) -> bool:
    return w.isalpha() and min_len <= len(w) <= max_len


def build(lang: str, count: int, min_len: int = 2, max_len: int = 20, min_zipf: float = 0.0):
    raw = top_n_list(lang, count * 3)  # generous; we'll filter down
    kept = []
    seen = set()
    for w in raw:
        w = unicodedata.normalize("NFC", w)
        if w in seen or not is_ok(w, min_len, max_len):
            continue
        if zipf_frequency(w, lang) < min_zipf:
            continue
        seen.add(w)
        kept.append(w)
        if len(kept) >= count:
            break
    return kept


def main():
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument("--lang", default="de")
    ap.add_argument("--count", type=int, default=2000)
    ap.add_argument("--min-len", type=int, default=2)
    ap.add_argument("--max-len", type=int, default=20)
    ap.add_argument("--min-zipf", type=float, default=0.0)
    ap.add_argument("--out", type=Path, default=None)
    args = ap.parse_args()

    words = build(args.lang, args.count, args.min_len, args.max_len, args.min_zipf)
    out = args.out or OUT_DIR / f"words_{args.lang}.txt"
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text("\n".join(words) + "\n", encoding="utf-8")

    print(f"Wrote {len(words)} words → {out}")


if __name__ == "__main__":
    main()

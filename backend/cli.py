"""Command line client for the analyzer.

Usage examples:

    seo-analyzer https://example.com
    seo-analyzer https://example.com --json
    seo-analyzer --history
    seo-analyzer --clear-history

Every successful analysis is recorded in the local history database
(at most 10 entries, newest first) unless --no-history is given.
"""

import argparse
import json
import sys
from typing import TextIO

from ai_service import build_client
from analyzer import analyze_url
from config import Settings, configure_logging, load_settings
from errors import AnalyzerError
from history import HistoryStore
from models import AnalysisResult, HistoryEntry
from schemas import validate_url


def format_report(url: str, result: AnalysisResult) -> str:
    """Render a plain-text report of `result`."""
    analytics = result["analytics"]
    ai = result["aiSuggestions"]
    score = ai.get("score")

    lines = [
        f"SEO report for {url}",
        "",
        "Structured Analytics",
        f"  Word count:            {analytics['wordCount']}",
        f"  Title:                 {analytics['title'] or '(missing)'} ({analytics['titleLength']} chars)",
        f"  Meta description:      {analytics['metaDescriptionLength']} chars",
        f"  H1 / H2 / H3:          {analytics['h1Count']} / {analytics['h2Count']} / {analytics['h3Count']}",
        f"  Images (missing alt):  {analytics['imageCount']} ({analytics['imagesWithoutAlt']})",
        f"  Internal links:        {analytics['internalLinks']}",
        f"  External links:        {analytics['externalLinks']}",
        "",
        "AI-Powered Suggestions",
        f"  Score: {score if score is not None else '--'}/100",
    ]
    if ai.get("explanation"):
        lines.append(f"  {ai['explanation']}")
    for item in ai.get("suggestions") or []:
        lines.append(f"  - {item}")
    blog_ideas = ai.get("blogIdeas") or []
    if blog_ideas:
        lines.append("")
        lines.append("Blog ideas")
        for item in blog_ideas:
            lines.append(f"  - {item}")
    return "\n".join(lines)


def format_history(entries: list[HistoryEntry]) -> str:
    if not entries:
        return "No analysis history yet."
    lines = []
    for entry in entries:
        score = entry["score"] if entry["score"] is not None else "--"
        lines.append(f"{entry['timestamp']}  {score:>3}  {entry['url']}  [{entry['id']}]")
    return "\n".join(lines)


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="On-page SEO analyzer with AI suggestions")
    parser.add_argument("url", nargs="?", help="URL to analyze")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON result")
    parser.add_argument("--no-history", action="store_true", help="Do not record this analysis")
    parser.add_argument("--history", action="store_true", help="List past analyses and exit")
    parser.add_argument("--clear-history", action="store_true", help="Delete all past analyses and exit")
    return parser.parse_args(argv)


def run(
    args: argparse.Namespace,
    settings: Settings,
    out: TextIO = sys.stdout,
    err: TextIO = sys.stderr,
) -> int:
    store = HistoryStore(settings.history_db_path)
    store.init()

    if args.clear_history:
        store.clear()
        print("History cleared.", file=out)
        return 0
    if args.history:
        print(format_history(store.list()), file=out)
        return 0

    try:
        url = validate_url((args.url or "").strip())
        result = analyze_url(url, build_client(settings), settings)
    except AnalyzerError as exc:
        print(f"Error: {exc.message}", file=err)
        return 1

    if not args.no_history:
        store.add(url, result)

    if args.json:
        json.dump(result, out, indent=2, ensure_ascii=False)
        out.write("\n")
    else:
        print(format_report(url, result), file=out)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = load_settings()
    configure_logging(settings.log_level)
    sys.exit(run(args, settings))


if __name__ == "__main__":
    main()

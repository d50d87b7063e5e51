"""Demo: run the sample personas through the matching pipeline.

Uses the bundled shop catalog (or ``--catalog``) in-process, no server needed.
Usage: python -m scripts.demo_matching [--persona 1] [--catalog path/to/shops.json] [--top 3]
"""
import argparse
import asyncio
import json
import sys
import time

from jiji.config import get_settings
from jiji.services.catalog_service import JsonFileCatalogProvider
from jiji.services.matching_service import MatchingService


PERSONAS = [
    {
        "profile": {
            "name": "田中美咲",
            "diving_experience": "none",
            "license_type": "none",
            "participation_style": "solo",
            "preferred_area": "石垣島",
            "budget_range": "medium",
        },
        "concerns": [
            "初めてのダイビングで不安です",
            "泳ぎが得意じゃないけど大丈夫？",
            "器材が壊れたりしないか心配",
            "一人で参加しても浮かない？",
        ],
    },
    {
        "profile": {
            "name": "佐藤健一",
            "diving_experience": "beginner",
            "license_type": "OWD",
            "participation_style": "solo",
            "preferred_area": "宮古島",
            "budget_range": "low",
        },
        "concerns": [
            "まだ経験が少なくて自信がない",
            "お金をそんなにかけられない",
            "一人参加で知らない人ばかりだと緊張する",
        ],
    },
    {
        "profile": {
            "name": "山田カップル",
            "diving_experience": "beginner",
            "license_type": "OWD",
            "participation_style": "couple",
            "preferred_area": "慶良間",
            "budget_range": "high",
        },
        "concerns": [
            "彼女と一緒に安全に楽しみたい",
            "ウミガメに会えるかな？",
            "写真もたくさん撮りたい",
        ],
    },
]


def print_result(persona: dict, result: dict, elapsed_ms: float) -> None:
    profile = persona["profile"]
    print(f"\n=== {profile['name']} ({profile['preferred_area']}) ===")
    print(f"  concerns: {persona['concerns']}")

    if not result["success"]:
        print(f"  [FAIL] {result['error']}")
        print(f"  {result['fallback_message']}")
        return

    stats = result["matching_stats"]
    print(
        f"  {stats['filtered_shops']}/{stats['total_shops']} shops eligible, "
        f"{stats['emotional_factor_count']} concerns, "
        f"top score {stats['top_score']} ({elapsed_ms:.1f} ms)"
    )
    print(f"  Jiji: {result['main_message']}")
    for rec in result["recommendations"]:
        shop = rec["shop"]
        print(
            f"\n  {rec['ranking']} {shop['shop_name']} "
            f"(total {shop['total_score']} = emotional {shop['emotional_score']}"
            f" + service {shop['service_score']})"
        )
        print(f"    {rec['main_comment']}")
        print(f"    {rec['experience_preview']}")
        print(f"    {rec['summary']}")


async def run(args: argparse.Namespace) -> int:
    catalog_path = args.catalog or get_settings().CATALOG_PATH
    service = MatchingService(catalog_provider=JsonFileCatalogProvider(catalog_path))

    personas = PERSONAS if args.persona is None else [PERSONAS[args.persona - 1]]
    failures = 0

    for persona in personas:
        start = time.perf_counter()
        result = await service.find_optimal_shops(
            persona["profile"],
            persona["concerns"],
            preferred_area=None if args.all_areas else persona["profile"]["preferred_area"],
            max_results=args.top,
        )
        elapsed_ms = (time.perf_counter() - start) * 1000

        if args.json:
            print(json.dumps(result, ensure_ascii=False, indent=2))
        else:
            print_result(persona, result, elapsed_ms)

        if not result["success"]:
            failures += 1

    return 1 if failures else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Jiji emotional matching demo")
    parser.add_argument("--persona", type=int, choices=range(1, len(PERSONAS) + 1),
                        help="Run a single persona (1-based)")
    parser.add_argument("--catalog", help="Path to a shop catalog JSON file")
    parser.add_argument("--top", type=int, default=None, help="Number of recommendations")
    parser.add_argument("--all-areas", action="store_true",
                        help="Ignore each persona's preferred area")
    parser.add_argument("--json", action="store_true", help="Print raw result envelopes")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()

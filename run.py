#!/usr/bin/env python3
"""
Expression Pool CLI Runner
==========================
Builds a pool for one of the demonstration configurations and prints,
verifies or summarizes the generated expressions.

Usage:
    python run.py generate arithmetic              # 0..100 with 2, 3, 5, 7
    python run.py generate emoji --last 30 --seed 1
    python run.py verify palace --quality 0.75     # evaluate every candidate
    python run.py stats js --last 50               # summary table
    python run.py list                             # demos and operators
    python run.py server                           # start the REST API
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from config import (
    API_HOST, API_PORT, DEFAULT_FIRST, DEFAULT_LAST, LOG_LEVEL, MAX_CACHE_NUM, QUALITY, SEED,
)
from demos import get_demo, get_demo_names
from expression_pool import ExpressionPool, PoolConfigError
from expression_pool.operators import OPERATOR_REGISTRY, get_operator_names
from expression_pool.report import pool_stats, summarize_pool

logger = logging.getLogger("expression_pool")


def build_pool(args) -> ExpressionPool:
    demo = get_demo(args.demo)
    logger.info(f"Building '{demo.name}' pool for {args.first}..{args.last}")
    return demo.build_pool(
        args.first, args.last,
        max_cache_num=args.max_cache,
        quality=args.quality,
        rng=args.seed,
    )


def generate_cmd(args):
    """Print one expression per integer."""
    pool = build_pool(args)
    for v in pool:
        if args.all:
            texts = " | ".join(e.text for e in pool.get_all_expressions(v))
            print(f"{v} -> {texts}")
        else:
            print(f"{v} -> {pool.get(v)}")


def verify_cmd(args) -> int:
    """Evaluate every candidate and report the ones that do not match."""
    demo = get_demo(args.demo)
    if not demo.evaluable:
        logger.error(f"Demo '{demo.name}' uses custom renderers and cannot be evaluated")
        return 1
    pool = build_pool(args)
    evaluator = demo.evaluator()

    checked = 0
    failures = []
    for v in pool:
        for expr in pool.get_all_expressions(v):
            checked += 1
            try:
                ok = evaluator.check(expr)
                reason = "" if ok else f"evaluates to {evaluator.evaluate(expr.text)}"
            except (SyntaxError, ValueError) as e:
                ok, reason = False, str(e)
            if not ok:
                failures.append((expr, reason))

    for expr, reason in failures:
        print(f"  FAIL: {expr.value} -> {expr.text}  ({reason})")
    print(f"\n{checked - len(failures)}/{checked} expressions verified")
    return 1 if failures else 0


def stats_cmd(args):
    """Pretty-print the pool summary."""
    pool = build_pool(args)
    df = summarize_pool(pool)
    stats = pool_stats(pool)
    info = pool.build_info

    print(f"\n{'='*80}")
    print(f"Pool '{args.demo}' {pool.gen_range}: {stats['values']} values")
    print(f"{'='*80}")
    print(df.to_string(max_colwidth=60))
    print()
    print(f"Coverage:           {stats['coverage']*100:.1f}%")
    print(f"Mean candidates:    {stats['mean_candidates']:.2f}")
    print(f"Mean min mass:      {stats['mean_min_mass']:.2f}  (max {stats['max_min_mass']})")
    print(f"Mean shortest len:  {stats['mean_shortest_len']:.2f}")
    print(f"Forward rounds:     {info['forward_rounds']}")
    print(f"Backward passes:    {info['backward_passes']}")
    print(f"Build time:         {info['elapsed']:.2f}s")
    print()


def list_cmd():
    """List demos and built-in operators."""
    print(f"\n{'Demo':12} Description")
    print(f"{'-'*12} {'-'*60}")
    for name in get_demo_names():
        print(f"{name:12} {get_demo(name).description}")
    print(f"\n{'Operator':12} {'Level':>5}  Backward (left, right)")
    print(f"{'-'*12} {'-'*5}  {'-'*22}")
    for name in get_operator_names():
        op = OPERATOR_REGISTRY[name]()
        print(f"{name:12} {op.level:>5}  {op.supports_backward}")
    print()


def add_pool_args(p: argparse.ArgumentParser):
    p.add_argument("demo", choices=get_demo_names(), help="Demonstration configuration")
    p.add_argument("--first", type=int, default=DEFAULT_FIRST, help=f"First integer (default: {DEFAULT_FIRST})")
    p.add_argument("--last", type=int, default=DEFAULT_LAST, help=f"Last integer (default: {DEFAULT_LAST})")
    p.add_argument("--max-cache", type=int, default=MAX_CACHE_NUM, help="Candidates kept per integer")
    p.add_argument("--quality", type=float, default=QUALITY, help="Forward/backward switch in [0, 1]")
    p.add_argument("--seed", type=int, default=SEED, help="Random seed for reproducible runs")


def main() -> int:
    parser = argparse.ArgumentParser(description="Expression Pool CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every search round")
    sub = parser.add_subparsers(dest="command", help="Command to run")

    gen_p = sub.add_parser("generate", help="Print an expression for every integer")
    add_pool_args(gen_p)
    gen_p.add_argument("--all", action="store_true", help="Print every kept candidate")

    verify_p = sub.add_parser("verify", help="Evaluate every generated expression")
    add_pool_args(verify_p)

    stats_p = sub.add_parser("stats", help="Summary table of a pool")
    add_pool_args(stats_p)

    sub.add_parser("list", help="List demos and operators")

    srv_p = sub.add_parser("server", help="Start the REST API")
    srv_p.add_argument("--port", type=int, default=API_PORT)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        if args.command == "generate":
            generate_cmd(args)
        elif args.command == "verify":
            return verify_cmd(args)
        elif args.command == "stats":
            stats_cmd(args)
        elif args.command == "server":
            import uvicorn
            uvicorn.run("api.main:app", host=API_HOST, port=args.port)
        else:
            list_cmd()
    except PoolConfigError as e:
        logger.error(f"Invalid pool configuration: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

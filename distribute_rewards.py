#!/usr/bin/env python3
"""
Weekly Reward Distribution Script
Scores this week's challenge participants and sends the winners to the payout service.

Usage: python distribute_rewards.py USER_ID [USER_ID ...] [--dry-run] [--output result.json]
       (without USER_IDs the participants are read from CHALLENGE_PARTICIPANTS)
"""

import argparse
import json
import sys
import traceback

from celery_worker import get_participant_ids
from stepwise.rewards import RewardDistributor, run_weekly_distribution


def create_parser():
    """Create and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='distribute_rewards',
        description='Scores the weekly steps challenge and distributes rewards to the winners.',
    )
    parser.add_argument(
        'user_ids',
        nargs='*',
        help='Sahha profile IDs of the participants (default: CHALLENGE_PARTICIPANTS env var)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print the reward payload instead of sending it to REWARD_API_URL'
    )
    parser.add_argument(
        '--output',
        type=str,
        default=None,
        help='Optional path to write the distribution summary as JSON'
    )
    return parser


def main(argv=None):
    args = create_parser().parse_args(argv)
    user_ids = args.user_ids or get_participant_ids()

    print("🏃 Weekly Reward Distribution")
    print("=" * 60)

    distributor = RewardDistributor(dry_run=args.dry_run)
    summary = run_weekly_distribution(user_ids, distributor=distributor)

    if args.output:
        with open(args.output, "w") as f:
            json.dump(summary, f, indent=2)
        print(f"Summary written to {args.output}")

    print("=" * 60)
    print(f"📊 Status: {summary['status'].upper()}")
    return 0 if summary["status"] in ("success", "skipped") else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n⚠️  Distribution interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ Unexpected error during distribution: {e}")
        print(f"Traceback: {traceback.format_exc()}")
        sys.exit(1)

"""
Reset the review database (SM-2).

DANGEROUS: This deletes all review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_review_db
    python -m scripts.maintenance.reset_review_db --user USER_ID
"""

import argparse

from quranki import sm2
from quranki.stores import SqlDailyLogStore, SqlReviewItemStore


def reset_user(user_id: str) -> None:
    items = SqlReviewItemStore().delete_user(user_id)
    logs = SqlDailyLogStore().delete_user(user_id)
    print(f"✓ Deleted {items} review items and {logs} daily log rows for {user_id}")


def main():
    parser = argparse.ArgumentParser(description="Reset the review database")
    parser.add_argument("--user", help="Only delete this user's data")
    args = parser.parse_args()

    print("=" * 60)
    print("WARNING: Reset Review Database")
    print("=" * 60)
    print()
    if args.user:
        print(f"This will DELETE all review history of user {args.user!r}:")
    else:
        print("This will DELETE all review history:")
    print("  - All review items (interval, repetitions, ease factor)")
    print("  - All daily logs (per-day grading counts)")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        if args.user:
            reset_user(args.user)
        else:
            sm2.reset_db()
            print("✓ Database reset complete!")
            print("\nThe database now has empty tables ready for new reviews.")
    else:
        print("\nCancelled. No changes made.")


if __name__ == "__main__":
    main()

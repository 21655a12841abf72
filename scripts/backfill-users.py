#!/usr/bin/env python3
"""
Backfill the user table from a Cognito user pool.

The registration hook only mirrors users confirmed after it was attached to
the pool. This script:
1. Lists every user in the Cognito user pool
2. Checks whether a record with uuid = sub exists in the user table
3. Writes {uuid, email} for the ones that are missing

Existing records are never overwritten, so roles set through the API survive.

Usage:
    python scripts/backfill-users.py --user-pool-id POOL_ID [--table user] [--dry-run] [--profile PROFILE]
"""

import argparse
import sys
from typing import Optional

import boto3


def cognito_users(cognito, user_pool_id: str):
    """Yield (sub, email) for every user in the pool."""
    paginator = cognito.get_paginator("list_users")
    for page in paginator.paginate(UserPoolId=user_pool_id):
        for user in page.get("Users", []):
            attributes = {attr["Name"]: attr["Value"] for attr in user.get("Attributes", [])}
            yield attributes.get("sub"), attributes.get("email")


def backfill_users(
    user_pool_id: str,
    table_name: str = "user",
    region: str = "us-east-2",
    dry_run: bool = False,
    profile: Optional[str] = None,
) -> None:
    """
    Write missing user records for every Cognito user.

    Args:
        user_pool_id: Cognito user pool id
        table_name: DynamoDB user table name
        region: AWS region of the pool and the table
        dry_run: If True, only show what would be written
        profile: AWS profile name to use
    """
    session = boto3.Session(profile_name=profile) if profile else boto3.Session()
    cognito = session.client("cognito-idp", region_name=region)
    users_table = session.resource("dynamodb", region_name=region).Table(table_name)

    print(f"🔍 Listing users in pool {user_pool_id}...")
    print()

    if dry_run:
        print("🔍 DRY RUN MODE - No changes will be made")
        print()

    seen_count = 0
    created_count = 0
    failed_count = 0

    for sub, email in cognito_users(cognito, user_pool_id):
        seen_count += 1
        if not sub:
            print(f"  ⚠️  Skipping user without sub ({email})")
            failed_count += 1
            continue

        if "Item" in users_table.get_item(Key={"uuid": sub}):
            continue

        if dry_run:
            print(f"  → Would create user {sub} ({email})")
            created_count += 1
            continue

        try:
            users_table.put_item(
                Item={"uuid": sub, "email": email},
                ConditionExpression="attribute_not_exists(#uuid)",
                ExpressionAttributeNames={"#uuid": "uuid"},
            )
            print(f"  ✅ Created user {sub} ({email})")
            created_count += 1
        except Exception as e:
            print(f"  ❌ Failed to create user {sub}: {e}")
            failed_count += 1

    # Summary
    print()
    print("=" * 60)
    print("📊 Summary:")
    print(f"  Cognito users seen: {seen_count}")
    print(f"  ✅ Created: {created_count}")
    print(f"  ❌ Failed or skipped: {failed_count}")

    if dry_run:
        print()
        print("💡 Run without --dry-run to apply changes")


def main():
    parser = argparse.ArgumentParser(
        description="Create missing user table records from a Cognito user pool"
    )
    parser.add_argument("--user-pool-id", required=True, help="Cognito user pool id")
    parser.add_argument("--table", default="user", help="DynamoDB user table name (default: user)")
    parser.add_argument("--region", default="us-east-2", help="AWS region (default: us-east-2)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be created without making changes",
    )
    parser.add_argument(
        "--profile",
        type=str,
        help="AWS profile name to use",
    )

    args = parser.parse_args()

    try:
        backfill_users(
            user_pool_id=args.user_pool_id,
            table_name=args.table,
            region=args.region,
            dry_run=args.dry_run,
            profile=args.profile,
        )
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\n❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

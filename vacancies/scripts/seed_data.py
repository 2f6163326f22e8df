"""
Demo/Development Seed Data Script for Vacancies
Creates demo categories and sample grants tagged with them.

This script is idempotent - it can be run multiple times safely.
Categories are matched by name (ignoring case) and grants by title, so
existing demo data is skipped rather than duplicated.

Usage:
    python -m vacancies.scripts.seed_data [options]

Options:
    --clean         Wipe existing demo data before seeding
    --dry-run       Print what would be seeded without making changes
    --verbose       Enable verbose output
"""
import argparse
import asyncio
import logging
import sys
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vacancies.models import Category, Grant, grant_categories, utcnow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Sample Data
# =============================================================================

DEMO_CATEGORIES = [
    {"name": "Education", "description": "Scholarships, fellowships and study programmes"},
    {"name": "Research", "description": "Funding for academic and applied research projects"},
    {"name": "Arts & Culture", "description": "Grants for artists, festivals and cultural heritage"},
    {"name": "Environment", "description": "Climate, conservation and sustainability initiatives"},
    {"name": "Entrepreneurship", "description": "Startup, innovation and small business support"},
]

SAMPLE_GRANTS = [
    {
        "title": "Graduate Study Fellowship",
        "description": "Full tuition and a monthly stipend for master's students in any discipline.",
        "country": "Germany",
        "deadline_days": 60,
        "requirements": "Bachelor's degree; B2 German or C1 English",
        "funding_amount": "934 EUR/month",
        "categories": ["Education"],
    },
    {
        "title": "Early Career Research Grant",
        "description": "Seed funding for independent researchers within five years of their PhD.",
        "country": "United Kingdom",
        "deadline_days": 45,
        "requirements": "PhD awarded within the last five years",
        "funding_amount": "50 000 GBP",
        "categories": ["Research", "Education"],
    },
    {
        "title": "Community Arts Project Fund",
        "description": "Support for public art projects that involve local communities.",
        "country": "Canada",
        "deadline_days": 30,
        "requirements": "Registered non-profit or artist collective",
        "funding_amount": "Up to 25 000 CAD",
        "categories": ["Arts & Culture"],
    },
    {
        "title": "Coastal Restoration Initiative",
        "description": "Grants for wetland and coastline restoration led by local organisations.",
        "country": "United States",
        "deadline_days": 90,
        "requirements": None,
        "funding_amount": "100 000 USD",
        "categories": ["Environment", "Research"],
    },
    {
        "title": "Green Startup Accelerator",
        "description": "Equity-free funding and mentoring for startups with a climate focus.",
        "country": "Netherlands",
        "deadline_days": 21,
        "requirements": "Company incorporated less than three years ago",
        "funding_amount": "20 000 EUR",
        "categories": ["Entrepreneurship", "Environment"],
    },
    {
        "title": "Heritage Digitisation Programme",
        "description": "Funding to digitise archives and museum collections. Applications closed.",
        "country": "Germany",
        "deadline_days": -10,
        "requirements": None,
        "funding_amount": None,
        "categories": ["Arts & Culture"],
    },
]


# =============================================================================
# Seeding Steps
# =============================================================================


async def _find_category(session: AsyncSession, name: str):
    result = await session.execute(select(Category).where(func.lower(Category.name) == name.lower()))
    return result.scalar_one_or_none()


async def _find_grant(session: AsyncSession, title: str):
    result = await session.execute(select(Grant).where(Grant.title == title))
    return result.scalars().first()


async def clean_demo_data(session: AsyncSession, dry_run: bool = False) -> dict:
    """Remove demo grants first, then demo categories left without grants."""
    counts = {"grants": 0, "categories": 0}

    demo_grants = []
    for grant_data in SAMPLE_GRANTS:
        grant = await _find_grant(session, grant_data["title"])
        if grant:
            demo_grants.append(grant)

    demo_categories = []
    for category_data in DEMO_CATEGORIES:
        category = await _find_category(session, category_data["name"])
        if category:
            demo_categories.append(category)

    if dry_run:
        counts["grants"] = len(demo_grants)
        counts["categories"] = len(demo_categories)
        logger.info(f"[DRY RUN] Would delete: {counts}")
        return counts

    for grant in demo_grants:
        await session.delete(grant)
        counts["grants"] += 1
    await session.flush()

    for category in demo_categories:
        # categories also used by non-demo grants are kept
        result = await session.execute(
            select(func.count()).select_from(grant_categories).where(grant_categories.c.category_id == category.id)
        )
        if result.scalar():
            logger.info(f"  Category {category.name!r} still has grants, keeping it")
            continue
        await session.delete(category)
        counts["categories"] += 1

    await session.commit()
    logger.info(f"Cleaned demo data: {counts}")
    return counts


async def seed_demo_categories(session: AsyncSession, dry_run: bool = False) -> list:
    """Create demo categories."""
    categories = []

    for category_data in DEMO_CATEGORIES:
        existing = await _find_category(session, category_data["name"])
        if existing:
            logger.info(f"  Category {category_data['name']!r} already exists, skipping")
            categories.append(existing)
            continue

        if dry_run:
            logger.info(f"  [DRY RUN] Would create category: {category_data['name']}")
            continue

        category = Category(name=category_data["name"], description=category_data["description"])
        session.add(category)
        categories.append(category)
        logger.debug(f"  Created category: {category.name}")

    if not dry_run:
        await session.commit()

    return categories


async def seed_demo_grants(session: AsyncSession, categories: list, dry_run: bool = False) -> list:
    """Create sample grants and associate them with the demo categories."""
    by_name = {c.name.lower(): c for c in categories}
    grants = []
    now = utcnow()

    for grant_data in SAMPLE_GRANTS:
        existing = await _find_grant(session, grant_data["title"])
        if existing:
            logger.info(f"  Grant {grant_data['title']!r} already exists, skipping")
            grants.append(existing)
            continue

        if dry_run:
            logger.info(f"  [DRY RUN] Would create grant: {grant_data['title'][:50]}")
            continue

        grant = Grant(
            title=grant_data["title"],
            description=grant_data["description"],
            country=grant_data["country"],
            deadline=now + timedelta(days=grant_data["deadline_days"]),
            requirements=grant_data["requirements"],
            funding_amount=grant_data["funding_amount"],
            is_active=True,
            created_at=now,
            categories=[by_name[n.lower()] for n in grant_data["categories"] if n.lower() in by_name],
        )
        session.add(grant)
        grants.append(grant)
        logger.debug(f"  Created grant: {grant.title}")

    if not dry_run:
        await session.commit()

    return grants


# =============================================================================
# Main Execution
# =============================================================================


async def run_seed(clean: bool = False, dry_run: bool = False, verbose: bool = False) -> None:
    """Run the complete seed process."""
    from vacancies.database import get_async_session

    print("\n" + "=" * 60)
    print("Vacancies Demo Data Seeding")
    print("=" * 60)

    if dry_run:
        print("\n[DRY RUN MODE - No changes will be made]\n")

    async with get_async_session() as session:
        if clean:
            print("\n[Step 1/3] Cleaning existing demo data...")
            await clean_demo_data(session, dry_run)
        else:
            print("\n[Step 1/3] Skipping cleanup (use --clean to wipe first)")

        print("\n[Step 2/3] Creating demo categories...")
        categories = await seed_demo_categories(session, dry_run)
        print(f"  Demo categories: {len(categories)}")

        print("\n[Step 3/3] Creating sample grants...")
        grants = await seed_demo_grants(session, categories, dry_run)
        print(f"  Sample grants: {len(grants)}")

    print("\n" + "=" * 60)
    print("SEEDING SUMMARY")
    print("=" * 60)
    print(f"\nCategories: {len(categories)}")
    for category in categories:
        print(f"  - {category.name}")
    print(f"Sample Grants: {len(grants)}")
    print("\n" + "=" * 60)

    if not dry_run:
        print("\nDemo data seeded successfully!")
    print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the Vacancies database with demo/development data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m vacancies.scripts.seed_data              # Seed demo data
  python -m vacancies.scripts.seed_data --clean      # Wipe and re-seed
  python -m vacancies.scripts.seed_data --dry-run    # Preview what would be seeded
        """,
    )
    parser.add_argument(
        "--clean", "-c",
        action="store_true",
        help="Wipe existing demo data before seeding",
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Print what would be seeded without making changes",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        asyncio.run(run_seed(clean=args.clean, dry_run=args.dry_run, verbose=args.verbose))
    except KeyboardInterrupt:
        print("\n\nSeeding interrupted by user.")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Seeding failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Seed script for the event budget database — loads the built-in pricing and package tables."""

import asyncio

from sqlalchemy import select

from app.database import async_session_factory
from app.models.budget import PackageDealRow, ServicePricing
from app.services.budget.package_catalog import builtin_packages
from app.services.budget.pricing_catalog import PricingTable


async def seed():
    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(ServicePricing).limit(1))
        if result.scalar_one_or_none():
            print("Database already seeded. Skipping.")
            return

        # ── Service pricing ──
        table = PricingTable.builtin()
        for (event_type, category, city), price in table.items():
            db.add(ServicePricing(
                event_type=event_type.value,
                service_category=category.value,
                city=city,
                price_min=price.min,
                price_max=price.max,
                price_average=price.average,
                data_source=price.source.value,
                observed_at=price.observed_at,
            ))
        print(f"Created {len(table)} service pricing rows")

        # ── Package deals ──
        deals = builtin_packages()
        for deal in deals:
            db.add(PackageDealRow(
                id=deal.id,
                name=deal.name,
                description=deal.description,
                service_categories=sorted(c.value for c in deal.service_categories),
                event_types=sorted(e.value for e in deal.event_types),
                cities=sorted(deal.cities) if deal.cities else None,
                base_price=deal.base_price,
                discount_percentage=deal.discount_percentage,
                is_active=deal.is_active,
            ))
        print(f"Created {len(deals)} package deals")

        await db.commit()
        print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())

"""Example usage of the TikTok Shop adapter."""

import asyncio
import json
from tiktok_shop_adapter import TikTokShopClient, AdapterConfig


async def main():
    """Example: list shops, then search recent orders and print a page of finance statements."""

    # Load configuration
    with open('config.json') as f:
        config_data = json.load(f)

    config = AdapterConfig(**config_data)

    async with TikTokShopClient(config) as shop:
        # Authorized shops carry the cipher needed by most endpoints
        print("Fetching authorized shops...")
        shops = await shop.seller.get_active_shops()
        print(json.dumps(shops, indent=2))

        cipher = config.shop_cipher or shops["data"]["shops"][0]["cipher"]

        print("\nSearching orders awaiting shipment...")
        orders = await shop.orders.get_order_list(
            cipher,
            page_size=10,
            body={"order_status": "AWAITING_SHIPMENT"},
        )
        for order in orders.get("data", {}).get("orders", []):
            print(f"- {order['id']}: {order.get('status')}")

        print("\nLatest statements...")
        statements = await shop.finances.get_statements(cipher, page_size=5, sort_order="DESC")
        print(json.dumps(statements.get("data"), indent=2))


if __name__ == "__main__":
    asyncio.run(main())

"""Example: fetch a package shipping label and resize it to a 4x6 inch page."""

import asyncio
import json
from pathlib import Path

from tiktok_shop_adapter import TikTokShopClient, AdapterConfig


async def main(package_id: str):
    with open('config.json') as f:
        config = AdapterConfig(**json.load(f))

    async with TikTokShopClient(config) as shop:
        document = await shop.fulfillments.get_package_shipping_document(
            package_id,
            config.shop_cipher,
            document_type="SHIPPING_LABEL",
        )
        url = document["data"]["doc_url"]

        result = await shop.pdf.resize_from_url(
            url,
            target_page_size={"width_mm": 101.6, "height_mm": 152.4},
            dpi=203,
        )

    Path(f"label_{package_id}.pdf").write_bytes(result.content)
    print(json.dumps(result.metadata.model_dump(by_alias=True), indent=2))


if __name__ == "__main__":
    asyncio.run(main("1152921504606846976"))

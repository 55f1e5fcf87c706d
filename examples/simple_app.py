from fastapi import FastAPI

from tiktok_shop_adapter import AdapterConfig, TikTokShopClient, get_tiktok_router

config = AdapterConfig(
    credentials={
        "app_key": "your_app_key",
        "app_secret": "your_app_secret",
        "access_token": "ROW_xxxxx",
    },
    shop_cipher="ROW_shop_cipher",
    proxy=None,
)

app = FastAPI()
shop = TikTokShopClient(config)
app.include_router(get_tiktok_router(shop))

# Run: uvicorn examples.simple_app:app --reload
# Try: curl -X POST localhost:8000/tiktok/seller/get_active_shops -H 'Content-Type: application/json' -d '{}'

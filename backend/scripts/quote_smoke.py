import asyncio
import json
import os
import sys

import httpx

API_URL = os.getenv("QUOTE_API_URL", "http://localhost:4000/v1")
HOTEL_ID = os.getenv("QUOTE_HOTEL_ID", "00000000-0000-0000-0000-0000000000a1")


async def main() -> int:
    payload = {
        "hotelId": HOTEL_ID,
        "checkIn": "2025-10-15",
        "checkOut": "2025-10-18",
        "guests": 2,
    }
    async with httpx.AsyncClient(base_url=API_URL, timeout=10.0) as client:
        for attempt in (1, 2):
            response = await client.post("/availability/quote", json=payload)
            print(f"#{attempt}", response.status_code)
            print(json.dumps(response.json(), ensure_ascii=False, indent=2))
            if response.status_code != 200:
                return 1
        stats = await client.get("/admin/cache/stats")
        print("cache:", stats.json())
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

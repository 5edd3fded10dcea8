"""
Order Rush Simulation Script

Fires a burst of concurrent submissions at a running server, then lists the
orders back and checks that every submission shows up exactly once.
Run from project root: python scripts/simulate.py --orders 30

Version: 1.0.0
"""

import asyncio
import sys
import random
import time
import argparse
from collections import Counter
from datetime import datetime, timezone
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:8080"
TOTAL_ORDERS = 30

# Sample data for random orders
GUESTS = ["Alice", "Bob", "Chen", "Daisy", "Eric", "Fiona", "Grace", "Henry", "Ivy", "Jack"]
MAIN_COURSES = [("Beef", 120), ("Chicken", 100), ("Pork", 110), ("Fish", 130), ("Veggie", 90)]
COMBOS = [(None, 0), ("Soup + Salad", 40), ("Rice Upgrade", 20)]
DRINKS = [(None, 0), ("Tea", 30), ("Coffee", 40), ("Juice", 35)]
DESSERTS = [(None, 0), ("Pudding", 25), ("Cake", 45)]


def generate_order_payload(order_num: int) -> dict[str, Any]:
    """Generate a random payload for /submit with a unique guest name."""
    main_course, main_price = random.choice(MAIN_COURSES)
    combo, combo_price = random.choice(COMBOS)
    drink, drink_price = random.choice(DRINKS)
    dessert, dessert_price = random.choice(DESSERTS)

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "user": f"{random.choice(GUESTS)}-{order_num}",
        "mainCourse": main_course,
        "mainCoursePrice": main_price,
        "combo": combo,
        "comboPrice": combo_price,
        "drink": drink,
        "drinkPrice": drink_price,
        "dessert": dessert,
        "dessertPrice": dessert_price,
        "total": main_price + combo_price + drink_price + dessert_price,
    }


async def send_order(client: httpx.AsyncClient, order_num: int) -> dict[str, Any]:
    """Submit one order and time it."""
    payload = generate_order_payload(order_num)
    start_time = time.time()

    try:
        response = await client.post(f"{API_BASE_URL}/submit", json=payload, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)
        body = response.json()
        return {
            "user": payload["user"],
            "success": response.status_code == 200 and body.get("result") == "success",
            "error": body.get("error"),
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        return {
            "user": payload["user"],
            "success": False,
            "error": str(e),
            "time": round(time.time() - start_time, 3),
        }


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> bool:
    """Submit ``num_orders`` concurrently, then verify the listing."""
    print("=" * 60)
    print(f"🍱 ORDER RUSH: {num_orders} concurrent submissions")
    print(f"🎯 Target: {API_BASE_URL}")
    print("=" * 60)

    async with httpx.AsyncClient() as client:
        health = await client.get(f"{API_BASE_URL}/", timeout=10.0)
        if health.status_code != 200:
            print(f"❌ Health check failed: {health.status_code}")
            return False
        print(f"✅ Health: {health.text}")

        start = time.time()
        results = await asyncio.gather(*(send_order(client, n) for n in range(num_orders)))
        elapsed = round(time.time() - start, 2)

        succeeded = [r for r in results if r["success"]]
        failed = [r for r in results if not r["success"]]
        print(f"\n📊 Submitted in {elapsed}s: {len(succeeded)} ok, {len(failed)} failed")
        if results:
            avg = sum(r["time"] for r in results) / len(results)
            print(f"   Average latency: {avg:.3f}s")
        for r in failed[:5]:
            print(f"   ⚠️ {r['user']}: {r['error']}")

        listing = await client.get(f"{API_BASE_URL}/orders", timeout=30.0)
        if listing.status_code != 200:
            print(f"❌ Listing failed: {listing.text[:200]}")
            return False

        counts = Counter(row["user_name"] for row in listing.json())
        missing = [r["user"] for r in succeeded if counts[r["user"]] == 0]
        duplicated = [r["user"] for r in succeeded if counts[r["user"]] > 1]

    print(f"\n📋 Listed orders: {sum(counts.values())}")
    if missing:
        print(f"⚠️ Missing from listing: {missing}")
    if duplicated:
        print(f"⚠️ Listed more than once: {duplicated}")

    ok = not failed and not missing and not duplicated
    print("\n" + "=" * 60)
    print("✅ SIMULATION PASSED" if ok else "❌ SIMULATION FOUND PROBLEMS")
    print("=" * 60)
    return ok


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Rush Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="Base URL of the server")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")
    sys.exit(0 if asyncio.run(run_simulation(num_orders=args.orders)) else 1)

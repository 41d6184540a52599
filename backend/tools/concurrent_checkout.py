import argparse
import concurrent.futures
import json
import os

import requests

BASE = os.environ.get("BADGESHOP_BASE", "http://127.0.0.1:8000")


def checkout_task(i, payload, token=None):
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    try:
        r = requests.post(f"{BASE}/api/checkout", json=payload, headers=headers, timeout=20)
        return (i, "checkout", r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "checkout", "ERR", str(e))


def barcode_task(i, barcode):
    payload = {"barcode": barcode, "timestamp": f"2026-01-01T08:00:{i:02d}Z", "action": "Entrada"}
    try:
        r = requests.post(f"{BASE}/api/barcode-entries", json=payload, timeout=10)
        return (i, "barcode", r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "barcode", "ERR", str(e))


def run_checkout_concurrent(workers, payload, token=None):
    print(f"Running checkout test: workers={workers}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(checkout_task, i, payload, token) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r)
    refs = [json.loads(r[3]).get("orderReference") for r in results if r[2] == 201]
    # checkout has no idempotency key: every accepted submission is its own order
    print("Distinct order references:", len(set(refs)), "of", len(refs))


def run_barcode_concurrent(workers, barcode):
    print(f"Running barcode test: workers={workers}, barcode={barcode}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(barcode_task, i, barcode) for i in range(workers)]
        results = [f.result() for f in futures]
    ids = [json.loads(r[3]).get("id") for r in results if r[2] == 200]
    print("Recorded ids:", sorted(ids))
    last = requests.get(f"{BASE}/api/barcode-entries/last/{barcode}", timeout=10)
    print("Last entry:", last.status_code, last.text)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrency smoke tool (checkout or barcode).")
    sub = parser.add_subparsers(dest="mode", required=True)

    c = sub.add_parser("checkout")
    c.add_argument("--workers", type=int, default=8)
    c.add_argument("--product", default="1")
    c.add_argument("--qty", type=int, default=1)
    c.add_argument("--token", default=None)

    b = sub.add_parser("barcode")
    b.add_argument("--workers", type=int, default=8)
    b.add_argument("--barcode", default="EMP-0001")

    args = parser.parse_args()

    if args.mode == "checkout":
        payload = {
            "customer": {
                "name": "Smoke Test",
                "email": "smoke@example.com",
                "address": "1 Test Street",
                "city": "Springfield",
                "postalCode": "12345",
                "country": "US",
            },
            "orderInfo": {"shippingMethod": "standard"},
            "items": [{"id": args.product, "productId": args.product, "name": "Standard ID Badge", "price": 12.99, "quantity": args.qty}],
        }
        run_checkout_concurrent(args.workers, payload, args.token)
    elif args.mode == "barcode":
        run_barcode_concurrent(args.workers, args.barcode)

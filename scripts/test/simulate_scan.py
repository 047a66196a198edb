"""Drive a running gate backend: scan or type a registration number, then mark entry/exit."""

import argparse
import requests

BACKEND_URL = "http://127.0.0.1:8080/api/v1"


def post(path, api_key=None, **kwargs):
    headers = {"X-API-Key": api_key} if api_key else {}
    resp = requests.post(f"{BACKEND_URL}{path}", headers=headers, timeout=10, **kwargs)
    print(f"POST {path} → HTTP {resp.status_code}: {resp.json()}")
    return resp


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate gate scans for testing")
    parser.add_argument("reg_no")
    parser.add_argument("--manual", action="store_true", help="type instead of scan")
    parser.add_argument("--action", choices=["entry", "exit", "none"], default="entry")
    parser.add_argument("--api-key", default=None)
    args = parser.parse_args()

    if args.manual:
        post("/scan/manual", args.api_key, json={"text": args.reg_no})
    else:
        post("/scan", args.api_key, json={"payload": args.reg_no})

    if args.action != "none":
        post(f"/attendance/{args.action}", args.api_key)

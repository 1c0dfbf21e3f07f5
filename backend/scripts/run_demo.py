"""
End-to-end tip demo against a running backend in simulation mode.

  1. Fund a fan wallet on the in-memory ledger
  2. Preview the 3% split
  3. Send a plain tip and a tip with memo
  4. Show an InvalidAmount rejection
  5. Print balances and the audit events the backend emitted

Usage:
    SIMULATION_MODE=true PLATFORM_WALLET=<addr> uvicorn main:app   (in backend/)
    python scripts/run_demo.py
"""
import sys

from algosdk import account
import httpx

BASE = "http://localhost:8000"


def section(title):
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)


def main():
    http = httpx.Client(base_url=BASE, timeout=10)

    health = http.get("/health").json()
    if health.get("ledger") != "memory":
        print("Backend is not in simulation mode (SIMULATION_MODE=true). Aborting.")
        sys.exit(1)
    treasury = health["platform_wallet"]

    _, fan = account.generate_account()
    _, creator = account.generate_account()
    headers = {"X-Wallet-Address": fan}

    section("1. Fund fan wallet")
    r = http.post("/simulate/fund-wallet", json={"walletAddress": fan, "amount": 5_000_000})
    print(f"  Fan {fan[:8]}... balance: {r.json()['data']['balance']}")

    section("2. Fee preview for 1 ALGO")
    print(f"  {http.get('/tips/fee-preview', params={'amount': 1_000_000}).json()['data']}")

    section("3. Tips")
    body = {"creator": creator, "platformWallet": treasury, "amount": 1_000_000}
    r = http.post("/tips", json=body, headers=headers)
    print(f"  Plain tip:  {r.status_code} {r.json().get('data')}")

    r = http.post("/tips/memo", json={**body, "amount": 500_000, "memo": "Great stream!"}, headers=headers)
    print(f"  Memo tip:   {r.status_code} {r.json().get('data')}")

    section("4. Zero tip")
    r = http.post("/tips", json={**body, "amount": 0}, headers=headers)
    print(f"  {r.status_code} {r.json()['error']['code']}")

    section("5. Balances and events")
    for label, wallet in [("fan", fan), ("creator", creator), ("treasury", treasury)]:
        balance = http.get(f"/simulate/balance/{wallet}").json()["data"]["balance"]
        print(f"  {label:9s} {balance:>12,}")
    for event in http.get("/simulate/events", params={"limit": 10}).json()["data"]:
        print(f"  {event['event']}: {event}")


if __name__ == "__main__":
    main()

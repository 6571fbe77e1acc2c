import httpx
import asyncio
import sys

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "https://localhost:8443"

async def run_verification() -> bool:
    print(f"🚀  Starting Verification against {BASE_URL}...\n")

    # Local deployments usually run with a self-signed certificate
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=10.0, verify=False) as client:
        # 1. Health Check
        print("1. [Health] Checking /api/health...")
        try:
            resp = await client.get("/api/health")
            if resp.status_code == 200 and resp.json() == {"status": "ok"}:
                print("   ✅  Health Check Passed")
            else:
                print(f"   ❌  Health Check Failed: {resp.text}")
                return False
        except httpx.HTTPError as e:
            print(f"   ❌  Connection Error: {e}")
            return False

        ok = True
        long_url = "https://www.example.com"

        # 2. Create Link
        print("\n2. [API] Creating Short Link...")
        resp = await client.get("/api/create", params={"url": long_url})
        if resp.status_code in (200, 201):
            data = resp.json()
            code = data["code"]
            print(f"   ✅  {data['message']}: {data['encoded']}")
        else:
            print(f"   ❌  Create Failed: {resp.status_code} {resp.text}")
            return False

        # 3. Idempotent create
        print("\n3. [API] Verifying Idempotent Create...")
        resp = await client.get("/api/create", params={"url": long_url})
        if resp.status_code == 200 and resp.json().get("code") == code:
            print("   ✅  Same code returned")
        else:
            print(f"   ❌  Idempotency Failed: {resp.status_code} {resp.text}")
            ok = False

        # 4. Verify Redirect
        print("\n4. [API] Verifying Redirect...")
        resp = await client.get(f"/{code}", follow_redirects=False)
        if resp.status_code == 307 and resp.headers.get("location") == long_url:
            print(f"   ✅  Redirect Location matches: {resp.headers['location']}")
        else:
            print(f"   ❌  Redirect Failed: {resp.status_code} {resp.headers.get('location')}")
            ok = False

        # 5. Miss
        print("\n5. [API] Verifying Unknown Code...")
        resp = await client.get("/doesnotexist")
        if resp.status_code == 404 and resp.json().get("message") == "Code not found":
            print("   ✅  Unknown code reported")
        else:
            print(f"   ❌  Unexpected response: {resp.status_code} {resp.text}")
            ok = False

        # 6. Invalid input
        print("\n6. [API] Verifying URL Validation...")
        resp = await client.get("/api/create", params={"url": "not-a-url"})
        if resp.status_code == 400:
            print(f"   ✅  Rejected: {resp.json()['message']}")
        else:
            print(f"   ❌  Invalid URL accepted: {resp.status_code}")
            ok = False

        # 7. Metrics
        print("\n7. [Observability] Verifying Metrics...")
        resp = await client.get("/api/metrics")
        if resp.status_code == 200 and "seus_http_requests_total" in resp.text:
            print("   ✅  Metrics Endpoint Exposed")
        else:
            print(f"   ❌  Metrics Failed: {resp.status_code}")
            ok = False

    print("\n✨ Verification Complete!")
    return ok

if __name__ == "__main__":
    sys.exit(0 if asyncio.run(run_verification()) else 1)

import json
from fastapi.testclient import TestClient

# Import the FastAPI app instance
from storefront.app import app

def main():
    with TestClient(app) as client:
        r = client.get("/api/health")
        print("/api/health:")
        print(json.dumps(r.json(), indent=2, ensure_ascii=False))

        r2 = client.get("/api/products")
        print("/api/products:")
        print(json.dumps(r2.json(), indent=2, ensure_ascii=False))

        r3 = client.post("/api/cart/quote", json={"items": [{"productId": "tres-leches", "size": "grande", "quantity": 1}]})
        print("/api/cart/quote (tres leches grande):")
        print(json.dumps(r3.json(), indent=2, ensure_ascii=False))

        # Honeypot filled: answered as success, nothing is emailed
        r4 = client.post("/api/order", json={"company": "acme"}, headers={"Origin": "http://localhost:3000"})
        print("/api/order (honeypot):", r4.status_code, r4.json())

if __name__ == "__main__":
    main()

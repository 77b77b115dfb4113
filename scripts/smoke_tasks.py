"""
Post sample requests to a running server and print the responses.

Usage:
    export PYTHONPATH=src
    python scripts/smoke_tasks.py [SERVER_URL] [RECORD_ID ...]
"""
import sys

import httpx
from dotenv import load_dotenv

load_dotenv()

SERVER_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
RECORD_IDS = sys.argv[2:]


def post(path, payload, timeout=120):
    print(f"\nPOST {path} {payload}")
    try:
        resp = httpx.post(f"{SERVER_URL}{path}", json=payload, timeout=timeout)
    except httpx.ConnectError:
        print(f"Could not connect to {SERVER_URL}. Is the server running?")
        sys.exit(1)
    print(f"Status Code: {resp.status_code}")
    print(resp.text)
    return resp


def main():
    # Rejected before any task is created
    post("/process-task-run", {"parameters": {}})
    post("/process-task-run", {"task_type": "categorize_content", "parameters": {"record_ids": []}})

    post("/process-task-run", {
        "task_type": "analyze_articles",
        "parameters": {"table_name": "articles", "filters": {"limit": 10}},
    })

    if RECORD_IDS:
        for task_type in ("generate_summaries", "categorize_content", "sentiment_analysis"):
            post("/process-task-run", {
                "task_type": task_type,
                "parameters": {"record_ids": RECORD_IDS},
                "priority": "low",
            })


if __name__ == "__main__":
    main()

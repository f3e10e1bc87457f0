"""
Example usage of the partial update pipeline with the User domain.
Runs entirely against the in-memory repository; no database required.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

from entities.update_result import NotFound, Rejected, Updated
from policies.users import USER_UPDATE_POLICY
from repositories.user_repository import InMemoryUserRepository, DEMO_USERS
from services.update_orchestrator import UpdateOrchestrator


async def partial_update_examples():
    """Walk through each update outcome."""
    repo = InMemoryUserRepository.with_demo_users()
    orchestrator = UpdateOrchestrator(repo, USER_UPDATE_POLICY)
    user_id = DEMO_USERS[0]["id"]

    print("=== Partial Update Examples ===\n")
    print(f"Allowed fields: {sorted(USER_UPDATE_POLICY.fields())}\n")

    payloads = [
        ("Rename", {"firstName": "Jane"}),
        ("Falsy value is applied", {"birthYear": 0}),
        ("Protected field", {"password": "new"}),
        ("Unknown field blocks the whole update", {"firstName": "Jim", "nickname": "J"}),
        ("Wrong type", {"birthYear": "1990"}),
        ("Empty payload", {}),
    ]

    for title, payload in payloads:
        result = await orchestrator.update(user_id, payload)
        if isinstance(result, Updated):
            print(f"✅ {title}: {result.record.to_public_dict()}")
        elif isinstance(result, Rejected):
            reasons = [f"{r.key} ({r.reason.value})" for r in result.rejections]
            print(f"❌ {title}: rejected {reasons}")

    result = await orchestrator.update("nope", {"password": "new"})
    if isinstance(result, NotFound):
        print(f"🔍 Unknown id: no user with ID '{result.record_id}'")


if __name__ == "__main__":
    asyncio.run(partial_update_examples())

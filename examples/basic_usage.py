"""
Basic usage example for MediGuard

This script runs the whole exchange in one process:
1. A hospital issues a vaccination credential
2. The holder's wallet scans the credential-import code
3. A pharmacy opens an age_18 verification session
4. The wallet scans the session code and submits a proof
5. The pharmacy's poller resolves the session from the audit feed
"""

import asyncio

import httpx

from mediguard.api.app import create_app
from mediguard.api.dependencies import DependencyContainer, set_container
from mediguard.client import MediguardApiClient, SessionStatusPoller
from mediguard.config import create_test_config
from mediguard.domain import ProviderId, RequestId, SystemClock
from mediguard.wallet import ScanLoop, WalletCredentialStore


async def main():
    """Run the example"""

    print("=" * 60)
    print("MediGuard - Basic Usage Example")
    print("=" * 60)

    clock = SystemClock()
    config = create_test_config(scan_cooldown_seconds=0, poll_interval_seconds=0.1, inactivity_timeout_seconds=5)
    set_container(DependencyContainer(config=config, clock=clock))
    transport = httpx.ASGITransport(app=create_app())

    async with MediguardApiClient("http://testserver", transport=transport) as client:
        # 1. Issue a credential
        print("\n1. Issuing credential...")
        issued = (
            await client.issue_credential(
                "identity", {"name": "Asha Rao", "age": "34"}, hospital_id="city_hospital"
            )
        ).unwrap()
        print(f"   ✓ Credential {issued.credential.id}")

        # 2. Wallet scans the offer
        print("\n2. Wallet scanning credential offer...")
        store = WalletCredentialStore.from_config(config, clock)
        proof_requests = []
        loop = ScanLoop.from_config(config, store, proof_requests.append, clock)
        loop.on_decoded(issued.credential_offer_uri)
        print(f"   ✓ {loop.notices[-1].message}")

        # 3. Pharmacy opens a session
        print("\n3. Opening verification session...")
        provider_id = ProviderId(value="apollo-andheri")
        created = (
            await client.create_request_from_catalog(
                provider_id.value, "Apollo Pharmacy Andheri", "age_18", provider_type="pharmacy"
            )
        ).unwrap()
        print(f"   ✓ {created.predicate_human_readable}: {created.qr_code_data}")

        # 4. Wallet scans the session code and answers
        print("\n4. Wallet answering the request...")
        loop.tick()
        loop.on_decoded(created.qr_code_data)
        request_id: RequestId = proof_requests[-1]
        credential = store.list_credentials()[0]
        outcome = (
            await client.submit_proof(
                request_id,
                proof=credential.sig,
                revealed_attributes={"age": credential.attributes["age"]},
                issuer_public_key=issued.issuer_public_key,
            )
        ).unwrap()
        print(f"   ✓ Verified: {outcome.verified}")

        # 5. Pharmacy resolves the session
        print("\n5. Resolving session...")
        poller = SessionStatusPoller.from_config(config, client, provider_id, created.request_id, clock)
        resolution = await poller.run()
        print(f"   ✓ Session {resolution.state} (matched by {resolution.matched_by})")

    print("\n" + "=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())

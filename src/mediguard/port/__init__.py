"""Port layer - Interfaces between domain and adapters

This layer defines the contracts (interfaces) that adapters must implement.
It separates the protocol logic from external concerns.

Input Ports (Use Cases):
- CreateSession: Open a verification session
- RecordAudit: Append the outcome of a proof attempt
- ListAudit: Read a provider's audit feed
- GetSessionStatus: Outcome of one session
- VerifyProof: Check a holder's proof and record the attempt
- IssueCredential: Sign a credential and build its import code

Output Ports (External Dependencies):
- SessionRepository: Session persistence
- AuditTrail: Append-only audit log
- SignatureService: Issuer signing and proof verification
- QrCodeService: QR code generation
"""

from mediguard.port.input import *
from mediguard.port.output import *

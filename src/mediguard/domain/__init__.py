"""Domain layer - Pure protocol logic

- Predicate model and catalog
- Scannable code scheme and scan intents
- Verification sessions and the audit trail
- Session status resolution
- Holder-side credential model
- Configuration and clock
"""

from mediguard.domain.clock import Clock, FixedClock, SystemClock, ensure_utc, parse_timestamp
from mediguard.domain.code_scheme import (
    CREDENTIAL_INTENT,
    VERIFY_INTENT,
    CodeSchemeError,
    ImportCredential,
    MalformedCode,
    MalformedPayload,
    MissingField,
    NotMediguardCode,
    ScanIntent,
    SubmitProof,
    UnrecognizedIntent,
    WrongScheme,
    decode,
    encode_credential_offer,
    encode_verify,
)
from mediguard.domain.credential import (
    Credential,
    InvalidCredential,
    credential_from_payload,
    credential_to_payload,
    derive_credential_id,
)
from mediguard.domain.mediguard_config import MediguardConfig
from mediguard.domain.predicate import (
    Predicate,
    PredicateError,
    UnknownPredicateKind,
    catalog_keys,
    evaluate,
    from_catalog_key,
    to_human_readable,
)
from mediguard.domain.session import (
    AuditRecord,
    VerificationSession,
    create_audit_record,
    create_verification_session,
    derive_session_status,
    newest_first,
    without_request_id,
)
from mediguard.domain.status_resolver import (
    CorrelationAmbiguous,
    MatchKind,
    Resolution,
    ResolverState,
    resolve,
)
from mediguard.domain.value_objects import (
    DEFAULT_CODE_SCHEME,
    PredicateOperator,
    ProviderId,
    RequestId,
    SessionStatus,
    VerificationId,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    "ensure_utc",
    "parse_timestamp",
    # Code scheme
    "CREDENTIAL_INTENT",
    "VERIFY_INTENT",
    "CodeSchemeError",
    "ImportCredential",
    "MalformedCode",
    "MalformedPayload",
    "MissingField",
    "NotMediguardCode",
    "ScanIntent",
    "SubmitProof",
    "UnrecognizedIntent",
    "WrongScheme",
    "decode",
    "encode_credential_offer",
    "encode_verify",
    # Credential
    "Credential",
    "InvalidCredential",
    "credential_from_payload",
    "credential_to_payload",
    "derive_credential_id",
    # Config
    "MediguardConfig",
    # Predicate
    "Predicate",
    "PredicateError",
    "UnknownPredicateKind",
    "catalog_keys",
    "evaluate",
    "from_catalog_key",
    "to_human_readable",
    # Session and audit
    "AuditRecord",
    "VerificationSession",
    "create_audit_record",
    "create_verification_session",
    "derive_session_status",
    "newest_first",
    "without_request_id",
    # Status resolver
    "CorrelationAmbiguous",
    "MatchKind",
    "Resolution",
    "ResolverState",
    "resolve",
    # Value objects
    "DEFAULT_CODE_SCHEME",
    "PredicateOperator",
    "ProviderId",
    "RequestId",
    "SessionStatus",
    "VerificationId",
]

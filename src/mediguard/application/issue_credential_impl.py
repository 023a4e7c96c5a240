"""IssueCredential use case implementation"""

import logging
import uuid

from returns.result import Failure, Result, Success

from mediguard.domain import Credential, MediguardConfig, encode_credential_offer
from mediguard.domain.credential import RESERVED_FIELDS
from mediguard.port.input import (
    IssueCredential,
    IssueCredentialError,
    IssueCredentialRequest,
    IssueCredentialResponse,
)
from mediguard.port.output import SignatureService

log = logging.getLogger(__name__)


class IssueCredentialImpl(IssueCredential):
    def __init__(self, signature_service: SignatureService, config: MediguardConfig):
        self.signature_service = signature_service
        self.config = config

    async def execute(self, request: IssueCredentialRequest) -> Result[IssueCredentialResponse, IssueCredentialError]:
        reserved = sorted(RESERVED_FIELDS.intersection(request.attributes))
        if reserved:
            return Failure(IssueCredentialError(f"Reserved attribute names: {', '.join(reserved)}"))

        sign_result = await self.signature_service.sign_attributes(
            issuer_id=request.issuer_id,
            credential_type=request.credential_type,
            attributes=request.attributes,
        )
        if isinstance(sign_result, Failure):
            return Failure(IssueCredentialError(f"Failed to sign credential: {sign_result.failure()}"))

        signed = sign_result.unwrap()
        credential = Credential(
            id=request.credential_id or f"cred-{uuid.uuid4().hex}",
            type=request.credential_type,
            iss=request.issuer_id,
            sig=signed.signature,
            attributes=dict(request.attributes),
        )

        log.info("Issued %s credential %s by %s", credential.type, credential.id, credential.iss)
        return Success(
            IssueCredentialResponse(
                credential=credential,
                issuer_public_key=signed.issuer_public_key,
                credential_offer_uri=encode_credential_offer(credential, scheme=self.config.code_scheme),
            )
        )

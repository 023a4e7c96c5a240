"""Provider API endpoints"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from returns.result import Failure

from mediguard.api.dependencies import (
    get_config,
    get_create_session_use_case,
    get_get_session_status_use_case,
    get_list_audit_use_case,
    get_qrcode_service,
    get_session_repository,
    get_verify_proof_use_case,
)
from mediguard.api.models import (
    AuditListResponseModel,
    AuditRecordModel,
    CatalogEntryModel,
    CatalogResponseModel,
    CreateCatalogRequestRequestModel,
    CreateRequestRequestModel,
    CreateRequestResponseModel,
    ErrorResponseModel,
    SessionStatusResponseModel,
    VerifyProofRequestModel,
    VerifyProofResponseModel,
)
from mediguard.domain import (
    MediguardConfig,
    Predicate,
    ProviderId,
    RequestId,
    catalog_keys,
    from_catalog_key,
    to_human_readable,
)
from mediguard.port.input import (
    CreateSession,
    CreateSessionRequest,
    GetSessionStatus,
    GetSessionStatusRequest,
    ListAudit,
    ListAuditRequest,
    ProofSessionNotFound,
    StatusSessionNotFound,
    VerifyProof,
    VerifyProofRequest,
)
from mediguard.port.output import QrCodeFormat, QrCodeService, SessionRepository

router = APIRouter(prefix="/api/provider", tags=["Provider"])


def _error(status_code: int, error: str, description: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponseModel(error=error, error_description=description).model_dump(),
    )


async def _open_session(
    provider_id: str,
    provider_name: str,
    provider_type: str,
    predicate: Predicate,
    create_session_uc: CreateSession,
    config: MediguardConfig,
) -> CreateRequestResponseModel:
    uc_request = CreateSessionRequest(
        provider_id=ProviderId(value=provider_id),
        provider_name=provider_name,
        provider_type=provider_type,
        predicate=predicate,
    )

    result = await create_session_uc.execute(uc_request)
    if isinstance(result, Failure):
        raise _error(500, "session_creation_failed", str(result.failure()))

    response = result.unwrap()
    session = response.session
    return CreateRequestResponseModel(
        request_id=session.request_id.value,
        qr_code_data=session.code_payload,
        predicate_human_readable=response.predicate_human_readable,
        predicate=session.predicate,
        created_at=session.created_at,
        qr_code_url=f"{config.public_url}{router.prefix}/request/{session.request_id.value}/qrcode",
    )


@router.post(
    "/request",
    response_model=CreateRequestResponseModel,
    status_code=201,
    summary="Create verification request",
    description="Open a verification session and get the code payload to show the holder",
    responses={
        201: {"model": CreateRequestResponseModel},
        400: {"model": ErrorResponseModel},
        500: {"model": ErrorResponseModel},
    },
)
async def create_request(
    request: CreateRequestRequestModel,
    create_session_uc: CreateSession = Depends(get_create_session_use_case),
    config: MediguardConfig = Depends(get_config),
) -> CreateRequestResponseModel:
    """
    Create a verification session.

    The response carries `qr_code_data`, the verification-intent URI the
    provider renders as a QR code for the holder's wallet to scan.
    """
    try:
        return await _open_session(
            provider_id=request.provider_id,
            provider_name=request.provider_name,
            provider_type=request.provider_type,
            predicate=request.predicate,
            create_session_uc=create_session_uc,
            config=config,
        )
    except HTTPException:
        raise
    except ValueError as e:
        raise _error(400, "invalid_request", f"Invalid request: {e}")
    except Exception as e:
        raise _error(500, "internal_error", f"Internal error: {e}")


@router.post(
    "/request/catalog",
    response_model=CreateRequestResponseModel,
    status_code=201,
    summary="Create verification request from catalog",
    description="Open a verification session for a predefined predicate (e.g. age_18)",
    responses={
        201: {"model": CreateRequestResponseModel},
        400: {"model": ErrorResponseModel},
    },
)
async def create_catalog_request(
    request: CreateCatalogRequestRequestModel,
    create_session_uc: CreateSession = Depends(get_create_session_use_case),
    config: MediguardConfig = Depends(get_config),
) -> CreateRequestResponseModel:
    predicate_result = from_catalog_key(request.predicate_key)
    if isinstance(predicate_result, Failure):
        raise _error(400, "unknown_predicate_kind", predicate_result.failure().message)

    try:
        return await _open_session(
            provider_id=request.provider_id,
            provider_name=request.provider_name,
            provider_type=request.provider_type,
            predicate=predicate_result.unwrap(),
            create_session_uc=create_session_uc,
            config=config,
        )
    except HTTPException:
        raise
    except ValueError as e:
        raise _error(400, "invalid_request", f"Invalid request: {e}")


@router.get(
    "/catalog",
    response_model=CatalogResponseModel,
    summary="List predicate catalog",
)
async def list_catalog() -> CatalogResponseModel:
    entries = []
    for key in catalog_keys():
        predicate = from_catalog_key(key).unwrap()
        entries.append(
            CatalogEntryModel(key=key, predicate=predicate, predicate_human_readable=to_human_readable(predicate))
        )
    return CatalogResponseModel(entries=entries)


@router.get(
    "/request/{request_id}/status",
    response_model=SessionStatusResponseModel,
    summary="Get session status",
    description="PENDING until a proof attempt is recorded for the session",
    responses={
        200: {"model": SessionStatusResponseModel},
        404: {"model": ErrorResponseModel},
    },
)
async def get_request_status(
    request_id: str,
    get_session_status_uc: GetSessionStatus = Depends(get_get_session_status_use_case),
) -> SessionStatusResponseModel:
    try:
        result = await get_session_status_uc.execute(GetSessionStatusRequest(request_id=RequestId(value=request_id)))

        if isinstance(result, Failure):
            error = result.failure()
            if isinstance(error, StatusSessionNotFound):
                raise _error(404, "request_not_found", str(error))
            raise _error(500, "internal_error", str(error))

        response = result.unwrap()
        return SessionStatusResponseModel(
            request_id=response.request_id.value,
            status=response.status,
            attempts=response.attempts,
            verification_id=response.verification_id.value if response.verification_id else None,
            decided_at=response.decided_at,
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise _error(400, "invalid_request", f"Invalid request: {e}")


@router.get(
    "/request/{request_id}/qrcode",
    summary="Get session QR code",
    description="Render the session's code payload as an image",
    responses={
        200: {"content": {"image/png": {}, "image/svg+xml": {}, "image/jpeg": {}}},
        404: {"model": ErrorResponseModel},
    },
)
async def get_request_qrcode(
    request_id: str,
    format: QrCodeFormat = Query(QrCodeFormat.PNG, description="Image format"),
    repository: SessionRepository = Depends(get_session_repository),
    qrcode_service: QrCodeService = Depends(get_qrcode_service),
) -> Response:
    try:
        get_result = await repository.get_by_request_id(RequestId(value=request_id))
        if isinstance(get_result, Failure):
            raise _error(404, "request_not_found", str(get_result.failure()))

        session = get_result.unwrap()
        qr_result = await qrcode_service.generate_session_qr(session.code_payload, format=format)
        if isinstance(qr_result, Failure):
            raise _error(500, "qrcode_generation_failed", str(qr_result.failure()))

        return Response(content=qr_result.unwrap(), media_type=format.media_type)

    except HTTPException:
        raise
    except ValueError as e:
        raise _error(400, "invalid_request", f"Invalid request: {e}")


@router.post(
    "/verify",
    response_model=VerifyProofResponseModel,
    summary="Submit proof",
    description="Holder submits a proof for a session; every attempt is recorded in the audit trail",
    responses={
        200: {"model": VerifyProofResponseModel},
        404: {"model": ErrorResponseModel},
    },
)
async def verify_proof(
    request: VerifyProofRequestModel,
    verify_proof_uc: VerifyProof = Depends(get_verify_proof_use_case),
) -> VerifyProofResponseModel:
    """
    Verify a holder's proof.

    A rejected proof is still a 200 with `verified: false`; the attempt shows
    up in the provider's audit feed either way.
    """
    try:
        uc_request = VerifyProofRequest(
            request_id=RequestId(value=request.request_id),
            proof=request.proof,
            revealed_attributes=request.revealed_attributes,
            issuer_public_key=request.issuer_public_key,
        )
        result = await verify_proof_uc.execute(uc_request)

        if isinstance(result, Failure):
            error = result.failure()
            if isinstance(error, ProofSessionNotFound):
                raise _error(404, "request_not_found", str(error))
            raise _error(500, "verification_failed", str(error))

        response = result.unwrap()
        return VerifyProofResponseModel(
            verified=response.verified,
            timestamp=response.timestamp,
            verification_id=response.verification_id.value,
            reason=response.reason or None,
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise _error(400, "invalid_request", f"Invalid request: {e}")


@router.get(
    "/{provider_id}/audit",
    response_model=AuditListResponseModel,
    summary="List audit records",
    description="Provider's proof attempts, newest first",
    responses={
        200: {"model": AuditListResponseModel},
        400: {"model": ErrorResponseModel},
    },
)
async def list_audit(
    provider_id: str,
    limit: int = Query(50, ge=1, description="Max number of records"),
    list_audit_uc: ListAudit = Depends(get_list_audit_use_case),
) -> AuditListResponseModel:
    try:
        result = await list_audit_uc.execute(ListAuditRequest(provider_id=ProviderId(value=provider_id), limit=limit))

        if isinstance(result, Failure):
            raise _error(500, "internal_error", str(result.failure()))

        response = result.unwrap()
        return AuditListResponseModel(
            provider_id=response.provider_id.value,
            verifications=[
                AuditRecordModel(
                    verification_id=r.verification_id.value,
                    verified=r.verified,
                    predicate_human_readable=r.predicate_human_readable,
                    timestamp=r.timestamp,
                    request_id=r.request_id.value if r.request_id else None,
                )
                for r in response.records
            ],
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise _error(400, "invalid_request", f"Invalid request: {e}")

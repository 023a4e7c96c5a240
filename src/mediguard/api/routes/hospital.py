"""Hospital (issuer) API endpoints"""

from fastapi import APIRouter, Depends, HTTPException
from returns.result import Failure

from mediguard.api.dependencies import (
    get_config,
    get_issue_credential_use_case,
    get_signature_service,
)
from mediguard.api.models import (
    ErrorResponseModel,
    IssueCredentialRequestModel,
    IssueCredentialResponseModel,
    IssuerInitRequestModel,
    IssuerKeyResponseModel,
)
from mediguard.domain import MediguardConfig
from mediguard.port.input import IssueCredential, IssueCredentialRequest
from mediguard.port.output import SignatureService

router = APIRouter(prefix="/api/hospital", tags=["Hospital"])


@router.post(
    "/init",
    response_model=IssuerKeyResponseModel,
    summary="Register issuer",
    description="Create the signing key of a hospital (idempotent)",
    responses={
        200: {"model": IssuerKeyResponseModel},
        500: {"model": ErrorResponseModel},
    },
)
async def init_issuer(
    request: IssuerInitRequestModel,
    signature_service: SignatureService = Depends(get_signature_service),
) -> IssuerKeyResponseModel:
    result = await signature_service.register_issuer(request.hospital_id)

    if isinstance(result, Failure):
        raise HTTPException(
            status_code=500,
            detail=ErrorResponseModel(
                error="issuer_init_failed",
                error_description=str(result.failure()),
            ).model_dump(),
        )

    return IssuerKeyResponseModel(hospital_id=request.hospital_id, public_key=result.unwrap())


@router.get(
    "/{hospital_id}/public-key",
    response_model=IssuerKeyResponseModel,
    summary="Get issuer public key",
    responses={
        200: {"model": IssuerKeyResponseModel},
        404: {"model": ErrorResponseModel},
    },
)
async def get_public_key(
    hospital_id: str,
    signature_service: SignatureService = Depends(get_signature_service),
) -> IssuerKeyResponseModel:
    result = await signature_service.get_public_key(hospital_id)

    if isinstance(result, Failure):
        raise HTTPException(
            status_code=404,
            detail=ErrorResponseModel(
                error="issuer_not_found",
                error_description=str(result.failure()),
            ).model_dump(),
        )

    return IssuerKeyResponseModel(hospital_id=hospital_id, public_key=result.unwrap())


@router.post(
    "/issue",
    response_model=IssueCredentialResponseModel,
    status_code=201,
    summary="Issue credential",
    description="Sign attributes and return the credential-import code payload",
    responses={
        201: {"model": IssueCredentialResponseModel},
        400: {"model": ErrorResponseModel},
    },
)
async def issue_credential(
    request: IssueCredentialRequestModel,
    issue_credential_uc: IssueCredential = Depends(get_issue_credential_use_case),
    config: MediguardConfig = Depends(get_config),
) -> IssueCredentialResponseModel:
    """
    Issue a credential.

    `credential_offer_uri` is the credential-import code; rendered as a QR
    code, a wallet scan stores the credential.
    """
    try:
        uc_request = IssueCredentialRequest(
            issuer_id=request.hospital_id or config.default_issuer_id,
            credential_type=request.credential_type,
            attributes=request.attributes,
            credential_id=request.credential_id,
        )
        result = await issue_credential_uc.execute(uc_request)

        if isinstance(result, Failure):
            raise HTTPException(
                status_code=400,
                detail=ErrorResponseModel(
                    error="issuance_failed",
                    error_description=str(result.failure()),
                ).model_dump(),
            )

        response = result.unwrap()
        credential = response.credential
        return IssueCredentialResponseModel(
            credential_id=credential.id,
            credential_type=credential.type,
            hospital_id=credential.iss,
            signature=credential.sig,
            issuer_public_key=response.issuer_public_key,
            attributes=credential.attributes,
            credential_offer_uri=response.credential_offer_uri,
        )

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorResponseModel(error="invalid_request", error_description=f"Invalid request: {e}").model_dump(),
        )

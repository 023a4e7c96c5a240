"""Signature service implementation using joserfc

Each issuer owns an EC P-256 key. A credential signature is a compact JWS
(ES256) whose claims are {iss, type, attributes, iat}; the holder presents
that JWS as its proof. The issuer public key travels as the JSON text of the
public JWK.
"""

import asyncio
import json
from typing import Any, Dict, Optional, Tuple

from joserfc import jwt
from joserfc.errors import JoseError
from joserfc.jwk import ECKey
from returns.result import Failure, Result, Success

from mediguard.domain import Clock
from mediguard.port.output import (
    ProofCheck,
    SignatureError,
    SignatureService,
    SignedAttributes,
    SigningError,
    UnknownIssuer,
)

SIGNING_ALGORITHM = "ES256"


class JoseSignatureService(SignatureService):
    """
    Implementation of SignatureService using joserfc library.

    Keys live in memory for the lifetime of the service.
    """

    def __init__(self, clock: Clock):
        self.clock = clock
        self._keys: Dict[str, ECKey] = {}
        self._lock = asyncio.Lock()

    async def register_issuer(self, issuer_id: str) -> Result[str, SignatureError]:
        try:
            key = await self._get_or_create_key(issuer_id)
            return Success(self._export_public_key(key))
        except Exception as e:
            return Failure(SignatureError(f"Failed to create issuer key: {e}"))

    async def get_public_key(self, issuer_id: str) -> Result[str, UnknownIssuer]:
        async with self._lock:
            key = self._keys.get(issuer_id)

        if key is None:
            return Failure(UnknownIssuer(issuer_id))

        return Success(self._export_public_key(key))

    async def sign_attributes(
        self, issuer_id: str, credential_type: str, attributes: Dict[str, str]
    ) -> Result[SignedAttributes, SignatureError]:
        """
        Sign attributes as a compact JWS.

        Issuers are registered on first use.
        """
        try:
            key = await self._get_or_create_key(issuer_id)

            header = {"alg": SIGNING_ALGORITHM, "typ": "JWT"}
            if key.kid:
                header["kid"] = key.kid
            claims: Dict[str, Any] = {
                "iss": issuer_id,
                "type": credential_type,
                "attributes": dict(attributes),
                "iat": int(self.clock.now().timestamp()),
            }
            token = jwt.encode(header, claims, key)

            return Success(
                SignedAttributes(
                    signature=token.decode("utf-8") if isinstance(token, bytes) else token,
                    issuer_public_key=self._export_public_key(key),
                )
            )

        except Exception as e:
            return Failure(SigningError(f"Failed to sign credential: {e}"))

    async def verify_proof(
        self, proof: str, revealed_attributes: Dict[str, str], issuer_public_key: str
    ) -> Result[ProofCheck, SignatureError]:
        """
        Verify the JWS and compare each revealed attribute with the signed value.

        The presented key must be the public key of a registered issuer, and
        the proof's iss claim must name that issuer.
        """
        try:
            jwk_dict = json.loads(issuer_public_key)
            presented = ECKey.import_key(jwk_dict).thumbprint()
        except (ValueError, TypeError, KeyError, JoseError) as e:
            return Success(ProofCheck(valid=False, reason=f"Invalid issuer public key: {e}"))

        issuer_id, key = await self._find_issuer(presented)
        if key is None:
            return Success(ProofCheck(valid=False, reason="Unknown issuer key"))

        try:
            token = jwt.decode(proof, key)
        except (ValueError, JoseError) as e:
            return Success(ProofCheck(valid=False, reason=f"Proof signature does not verify: {e}"))

        if token.claims.get("iss") != issuer_id:
            return Success(ProofCheck(valid=False, reason="Proof issuer does not match the issuer key"))

        signed = token.claims.get("attributes")
        if not isinstance(signed, dict):
            return Success(ProofCheck(valid=False, reason="Proof carries no attributes"))

        for name, value in revealed_attributes.items():
            if name not in signed:
                return Success(ProofCheck(valid=False, reason=f"Attribute {name!r} is not signed"))
            if str(signed[name]) != str(value):
                return Success(ProofCheck(valid=False, reason=f"Attribute {name!r} does not match the signed value"))

        return Success(ProofCheck(valid=True))

    async def _get_or_create_key(self, issuer_id: str) -> ECKey:
        async with self._lock:
            key = self._keys.get(issuer_id)
            if key is None:
                key = ECKey.generate_key("P-256", private=True, auto_kid=True)
                self._keys[issuer_id] = key
            return key

    async def _find_issuer(self, thumbprint: str) -> Tuple[Optional[str], Optional[ECKey]]:
        async with self._lock:
            for issuer_id, key in self._keys.items():
                if key.thumbprint() == thumbprint:
                    return issuer_id, key
        return None, None

    def _export_public_key(self, key: ECKey) -> str:
        return json.dumps(key.as_dict(private=False), sort_keys=True, separators=(",", ":"))

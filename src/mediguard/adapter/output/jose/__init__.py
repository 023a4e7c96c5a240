from mediguard.adapter.output.jose.jose_signature_service import JoseSignatureService

__all__ = ["JoseSignatureService"]

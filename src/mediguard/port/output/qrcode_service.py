"""QR code service port - Interface for rendering scannable codes"""

from abc import ABC, abstractmethod
from enum import Enum

from returns.result import Result


class QrCodeFormat(str, Enum):
    """QR code image format"""

    PNG = "png"
    SVG = "svg"
    JPEG = "jpeg"

    @property
    def media_type(self) -> str:
        return {
            QrCodeFormat.PNG: "image/png",
            QrCodeFormat.SVG: "image/svg+xml",
            QrCodeFormat.JPEG: "image/jpeg",
        }[self]


class QrCodeError(Exception):
    """Error during QR code generation"""

    pass


class QrCodeService(ABC):
    """
    Renders code payloads (verification or credential-offer URIs) as images
    the holder's wallet can scan.
    """

    @abstractmethod
    async def generate_qr_code(
        self, data: str, format: QrCodeFormat = QrCodeFormat.PNG, size: int = 300, error_correction: str = "M"
    ) -> Result[bytes, QrCodeError]:
        """
        Generate QR code image from data.

        Args:
            data: Text to encode
            format: Image format (PNG, SVG, JPEG)
            size: QR code size in pixels (raster formats)
            error_correction: Error correction level (L, M, Q, H)

        Returns:
            Success(image bytes) or Failure(QrCodeError)
        """
        pass

    @abstractmethod
    async def generate_session_qr(
        self, code_payload: str, format: QrCodeFormat = QrCodeFormat.PNG
    ) -> Result[bytes, QrCodeError]:
        """
        Generate the QR code shown to the holder for a verification session.

        Args:
            code_payload: Verification-intent URI (mediguard://verify?req=...)
            format: Image format

        Returns:
            Success(QR code image bytes) or Failure(QrCodeError)
        """
        pass

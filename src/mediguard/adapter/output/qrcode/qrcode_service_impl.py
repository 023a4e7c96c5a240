"""QR code service implementation using qrcode library"""

import io
from typing import Final

import qrcode
import qrcode.image.svg
from PIL import Image
from returns.result import Failure, Result, Success

from mediguard.port.output import QrCodeError, QrCodeFormat, QrCodeService

_ERROR_CORRECTION: Final = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class QrCodeServiceImpl(QrCodeService):
    """
    Implementation of QrCodeService using the qrcode library.

    Renders code payloads as PNG, SVG or JPEG.
    """

    async def generate_qr_code(
        self,
        data: str,
        format: QrCodeFormat = QrCodeFormat.PNG,
        size: int = 300,
        error_correction: str = "M",
    ) -> Result[bytes, QrCodeError]:
        if not data:
            return Failure(QrCodeError("Cannot encode empty data"))

        try:
            qr = qrcode.QRCode(
                version=None,  # smallest version that fits
                error_correction=_ERROR_CORRECTION.get(error_correction, qrcode.constants.ERROR_CORRECT_M),
                box_size=10,
                border=4,
            )
            qr.add_data(data)
            qr.make(fit=True)

            buffer = io.BytesIO()

            if format == QrCodeFormat.SVG:
                img = qr.make_image(image_factory=qrcode.image.svg.SvgPathImage)
                img.save(buffer)
                return Success(buffer.getvalue())

            img = qr.make_image(fill_color="black", back_color="white").get_image()
            img = img.convert("RGB").resize((size, size), Image.Resampling.NEAREST)

            if format == QrCodeFormat.PNG:
                img.save(buffer, format="PNG")
            elif format == QrCodeFormat.JPEG:
                img.save(buffer, format="JPEG", quality=95)
            else:
                return Failure(QrCodeError(f"Unsupported format: {format}"))

            return Success(buffer.getvalue())

        except Exception as e:
            return Failure(QrCodeError(f"Failed to generate QR code: {e}"))

    async def generate_session_qr(
        self, code_payload: str, format: QrCodeFormat = QrCodeFormat.PNG
    ) -> Result[bytes, QrCodeError]:
        """
        Session codes use the highest error correction level, so they stay
        readable when the screen is partly obscured or glaring.
        """
        return await self.generate_qr_code(data=code_payload, format=format, size=400, error_correction="H")

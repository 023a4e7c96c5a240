from mediguard.adapter.output.qrcode.qrcode_service_impl import QrCodeServiceImpl

__all__ = ["QrCodeServiceImpl"]

import base64
import io

import qrcode

QR_BOX_SIZE = 10
QR_BORDER = 2


def make_qr_data_url(data: str) -> str:
    """Render ``data`` as a black-on-white PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"

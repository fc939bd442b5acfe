"""
QR code generation service for personal RSVP links
"""

import io
from urllib.parse import quote
import qrcode

from seatplan.core.config import settings

class QRService:
    """Service for generating QR codes"""
    
    @staticmethod
    def get_rsvp_url(public_code: str, guest_name: str = "") -> str:
        """Get the RSVP link the QR code points to"""
        url = f"{settings.BASE_URL}/rsvp/{public_code}"
        if guest_name:
            url = f"{url}?name={quote(guest_name)}"
        return url
    
    @staticmethod
    def generate_rsvp_qr(public_code: str, guest_name: str = "", format: str = 'PNG') -> bytes:
        """Generate QR code for a guest's RSVP link"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(QRService.get_rsvp_url(public_code, guest_name))
        qr.make(fit=True)
        
        # Create QR code image
        img = qr.make_image(fill_color="black", back_color="white")
        
        # Convert to bytes
        buffer = io.BytesIO()
        img.save(buffer, format=format)
        
        return buffer.getvalue()

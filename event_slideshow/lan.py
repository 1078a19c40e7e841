"""Local network helpers for phones joining from the same Wi-Fi."""

from __future__ import annotations

import io
import socket

import qrcode


def get_local_ip() -> str:
    """Best-effort LAN IPv4 address of this host, or ``localhost``."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # No packet is sent; connecting a UDP socket only selects a route.
        sock.connect(("10.255.255.255", 1))
        address = sock.getsockname()[0]
    except OSError:
        return "localhost"
    finally:
        sock.close()
    if address.startswith("127.") or address == "0.0.0.0":
        return "localhost"
    return address


def render_qr(data: str, invert: bool = False) -> str:
    """Render `data` as an ASCII QR code suitable for a terminal."""
    qr = qrcode.QRCode(border=1)
    qr.add_data(data)
    qr.make(fit=True)
    out = io.StringIO()
    qr.print_ascii(out=out, invert=invert)
    return out.getvalue()

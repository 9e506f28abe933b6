"""Network helper for the launcher: finds the LAN address to print at startup,
so other devices in the household can open the planner.
"""
import socket


def get_local_ip(probe_host: str = "8.8.8.8", fallback: str = "127.0.0.1") -> str:
    """Return a non-loopback local IP address if possible, otherwise fallback.

    Connecting a UDP socket only asks the OS which interface would be used to
    reach probe_host; no data is sent.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect((probe_host, 80))
        ip = str(s.getsockname()[0])
    except OSError:
        ip = fallback
    finally:
        s.close()
    return ip

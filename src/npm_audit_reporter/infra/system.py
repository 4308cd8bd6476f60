from __future__ import annotations

import socket


class SystemHost:
    def host_name(self) -> str:
        return socket.gethostname()

from sticktable_exporter.clients.control_socket import ControlSocketClient

__all__ = ["ControlSocketClient"]

from .client import GatewayClient, extract_message_id

__all__ = ["GatewayClient", "extract_message_id"]

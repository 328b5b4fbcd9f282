from .common import ClientRequestError, RequestRejectedError, ServerRequestError

__all__ = ["RequestRejectedError", "ClientRequestError", "ServerRequestError"]
